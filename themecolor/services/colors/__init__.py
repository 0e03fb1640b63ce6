"""
ThemeColor Colors Module

Provides the parallel average color engine used by the /api endpoint.
"""
