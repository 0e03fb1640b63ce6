"""
Image source resolution.
"""


def normalize_image_url(raw: str) -> str:
    """Prefix ``http://`` unless the string already names an http(s) scheme."""
    if raw.startswith("http://") or raw.startswith("https://"):
        return raw
    return f"http://{raw}"
