"""
ThemeColor Imaging Utilities
Fetches remote images and decodes them into RGB pixel buffers.
"""
import io
from typing import Optional, Tuple

import httpx
from PIL import Image

from themecolor.config import config
from themecolor.errors import DecodeError, FetchError, NotFoundError

NOT_FOUND_MESSAGE = "Image not found"


class ImageFetcher:
    """Downloads image bytes over HTTP(S)."""

    def __init__(
        self,
        timeout: Optional[float] = None,
        follow_redirects: Optional[bool] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Args:
            timeout: Seconds to wait on the upstream host (None waits forever)
            follow_redirects: Follow 3xx responses (default from config)
            transport: Custom httpx transport, e.g. a MockTransport in tests
        """
        self.timeout = timeout if timeout is not None else config.FETCH_TIMEOUT
        self.follow_redirects = (
            follow_redirects if follow_redirects is not None else config.FOLLOW_REDIRECTS
        )
        self._transport = transport

    async def fetch(self, url: str) -> bytes:
        """
        GET ``url`` and return the response body.

        Args:
            url: Absolute http:// or https:// URL

        Returns:
            Raw response bytes

        Raises:
            NotFoundError: Upstream answered 404
            FetchError: URL could not be parsed or the request failed
        """
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=self.follow_redirects,
                headers={"User-Agent": config.USER_AGENT},
                transport=self._transport
            ) as client:
                response = await client.get(url)
        except httpx.InvalidURL as e:
            raise FetchError(str(e)) from e
        except httpx.HTTPError as e:
            raise FetchError(str(e) or type(e).__name__) from e

        if response.status_code == 404:
            raise NotFoundError(NOT_FOUND_MESSAGE)

        return response.content


def decode_image(data: bytes) -> Image.Image:
    """
    Decode image bytes into an RGB image.

    The format is detected from the bytes themselves. Alpha channels are
    dropped.

    Args:
        data: Raw image file bytes

    Returns:
        Fully loaded PIL image in RGB mode

    Raises:
        DecodeError: Bytes are not a decodable image or the image is empty
    """
    try:
        image = Image.open(io.BytesIO(data))
        image.load()

        # Convert to RGB if necessary
        if image.mode != "RGB":
            image = image.convert("RGB")
    except Exception as e:
        raise DecodeError(str(e)) from e

    width, height = get_image_dimensions(image)
    if width == 0 or height == 0:
        raise DecodeError(f"Decoded image has no pixels ({width}x{height})")

    return image


def get_image_dimensions(image: Image.Image) -> Tuple[int, int]:
    """Return (width, height) of an image."""
    return image.size
