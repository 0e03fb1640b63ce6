"""
Theme Color API Orchestrator

Coordinates the pipeline behind ``GET /api``: input validation, URL
normalization, fetch, decode and color averaging.
"""

import asyncio
import time
from typing import Optional

from themecolor.config import config
from themecolor.errors import InvalidArgumentError, ThemeColorError
from themecolor.services.colors.averaging import average_color
from themecolor.services.imaging import ImageFetcher, decode_image, get_image_dimensions
from themecolor.services.source import normalize_image_url
from themecolor.utils.ids import generate_request_id
from themecolor.utils.logging import get_logger
from themecolor.utils.metrics import get_metrics

logger = get_logger()

INVALID_ARGUMENT_MESSAGE = "Missing or empty 'img' query parameter"


async def handle_theme_color(img: Optional[str], fetcher: ImageFetcher) -> str:
    """
    Compute the average color of the image named by ``img``.

    Args:
        img: Raw value of the ``img`` query parameter (URL or bare host)
        fetcher: Fetcher used to download the image

    Returns:
        Average color as ``#RRGGBB``

    Raises:
        ThemeColorError: For invalid input, fetch or decode failures
    """
    request_id = generate_request_id("color")
    start_time = time.time()
    metrics = get_metrics()

    if config.METRICS_ENABLED:
        metrics.increment_counter("theme_requests_total")

    try:
        if not img:
            raise InvalidArgumentError(INVALID_ARGUMENT_MESSAGE)

        url = normalize_image_url(img)
        logger.info("Starting theme color request", extra={"request_id": request_id, "url": url})

        fetch_start = time.time()
        data = await fetcher.fetch(url)
        fetch_time = time.time() - fetch_start

        decode_start = time.time()
        image = await asyncio.to_thread(decode_image, data)
        decode_time = time.time() - decode_start

        width, height = get_image_dimensions(image)
        logger.debug(f"Decoded {width}x{height} image ({len(data)} bytes)",
                     extra={"request_id": request_id})

        # Averaging is short and bounded, so it runs on the request task
        average_start = time.time()
        rgb = average_color(image, workers=config.WORKERS, target_width=config.TARGET_WIDTH)
        average_time = time.time() - average_start

        total_time = time.time() - start_time
        logger.info("Theme color request completed",
                    extra={
                        "request_id": request_id,
                        "dims": f"{width}x{height}",
                        "rgb": rgb,
                        "ms_fetch": fetch_time * 1000,
                        "ms_decode": decode_time * 1000,
                        "ms_average": average_time * 1000,
                        "ms_total": total_time * 1000,
                        "result": "ok"
                    })

        if config.METRICS_ENABLED:
            metrics.record_timing("fetch", fetch_time * 1000)
            metrics.record_timing("decode", decode_time * 1000)
            metrics.record_timing("average", average_time * 1000)
            metrics.record_timing("theme_total", total_time * 1000)

        return rgb

    except ThemeColorError as e:
        logger.warning(f"Theme color request failed: {e}",
                       extra={
                           "request_id": request_id,
                           "ms_total": (time.time() - start_time) * 1000,
                           "result": "error",
                           "error_type": e.kind
                       })
        if config.METRICS_ENABLED:
            metrics.increment_counter(f"theme_failed_total_{e.kind}")
        raise

    except Exception as e:
        logger.error(f"Unexpected failure in theme color request: {e}",
                     extra={
                         "request_id": request_id,
                         "ms_total": (time.time() - start_time) * 1000,
                         "result": "error",
                         "error_type": type(e).__name__
                     })
        if config.METRICS_ENABLED:
            metrics.increment_counter(f"theme_failed_total_{type(e).__name__.lower()}")
        raise
