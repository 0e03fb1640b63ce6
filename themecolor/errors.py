"""
ThemeColor Errors
Failure kinds surfaced by the /api endpoint.
"""


class ThemeColorError(Exception):
    """Base class for failures reported to the client."""

    kind = "error"


class InvalidArgumentError(ThemeColorError):
    """The img query parameter is missing or empty."""

    kind = "invalid_argument"


class NotFoundError(ThemeColorError):
    """Upstream host answered 404 for the image."""

    kind = "not_found"


class FetchError(ThemeColorError):
    """Network or protocol failure while reaching the upstream host."""

    kind = "fetch_error"


class DecodeError(ThemeColorError):
    """Bytes were received but do not form a usable image."""

    kind = "decode_error"
