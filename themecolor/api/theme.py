"""
ThemeColor API Routes
Implements the /api average color endpoint.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from themecolor.schemas import ColorResponse
from themecolor.services.imaging import ImageFetcher
from themecolor.services.theme_api import handle_theme_color

router = APIRouter(tags=["Theme Color"])


def get_image_fetcher() -> ImageFetcher:
    """Fetcher dependency, overridden in tests."""
    return ImageFetcher()


def _error_response(message: str) -> JSONResponse:
    # Every failure kind maps to 500 with the same body shape
    body = ColorResponse(err=message, rgb="")
    return JSONResponse(status_code=500, content=body.model_dump())


@router.get("/api",
            response_model=ColorResponse,
            summary="Average Image Color",
            description="Fetch an image by URL and return its average color as #RRGGBB")
async def get_theme_color(
    img: Optional[str] = Query(None, description="Image URL; http:// is assumed when no scheme is given"),
    fetcher: ImageFetcher = Depends(get_image_fetcher)
):
    """
    Return the average color of the image at ``img``.

    - **img**: `https://example.com/cat.png` or bare `example.com/cat.png`

    Errors of any kind are reported with status 500 and a non-null ``err``.
    """
    try:
        rgb = await handle_theme_color(img, fetcher)
    except Exception as e:
        # Already logged by the orchestrator
        return _error_response(str(e) or type(e).__name__)

    return ColorResponse(err=None, rgb=rgb)
