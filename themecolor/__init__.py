"""
ThemeColor

Average color service: fetches an image by URL and reports its average
color as a hex string.
"""

__version__ = "1.0.0"
