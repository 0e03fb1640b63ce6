"""
Average color engine.

Downscales a decoded image to a fixed width, splits the flat pixel index
space into contiguous ranges, sums each range on its own worker thread and
merges the partial sums into a single lock-guarded aggregate. The merged
sums are rounded half-up per channel and rendered as ``#RRGGBB``.
"""

import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from threading import Lock
from typing import List, Optional, Sequence, Tuple

import numpy as np
from PIL import Image

TARGET_WIDTH = 50


@dataclass
class ChannelSums:
    """Running RGB totals and the number of pixels they cover."""
    red: int = 0
    green: int = 0
    blue: int = 0
    count: int = 0

    def add(self, other: "ChannelSums") -> None:
        self.red += other.red
        self.green += other.green
        self.blue += other.blue
        self.count += other.count


class AggregateSum:
    """Shared accumulator that worker partials are merged into."""

    def __init__(self):
        self._lock = Lock()
        self._sums = ChannelSums()

    def merge(self, partial: ChannelSums) -> None:
        with self._lock:
            self._sums.add(partial)

    def snapshot(self) -> ChannelSums:
        with self._lock:
            return ChannelSums(self._sums.red, self._sums.green,
                               self._sums.blue, self._sums.count)


def _round_half_up(numerator: int, denominator: int) -> int:
    return (2 * numerator + denominator) // (2 * denominator)


def downscale(image: Image.Image, target_width: int = TARGET_WIDTH) -> Image.Image:
    """
    Resize an image to ``target_width`` pixels wide, preserving aspect ratio.

    Uses Lanczos resampling in both directions, so narrow images are
    upsampled. An image already ``target_width`` wide keeps its pixels.

    Args:
        image: Decoded RGB image
        target_width: Width of the resized image

    Returns:
        Image exactly ``target_width`` pixels wide
    """
    width, height = image.size
    new_height = max(1, _round_half_up(height * target_width, width))
    return image.resize((target_width, new_height), Image.Resampling.LANCZOS)


def resolve_worker_count(workers: Optional[int] = None) -> int:
    """Worker count to use, one per CPU when not given."""
    if workers is None or workers == 0:
        return os.cpu_count() or 1
    if workers < 0:
        raise ValueError(f"Worker count must be >= 0, got {workers}")
    return workers


def partition_ranges(total: int, workers: int) -> List[Tuple[int, int]]:
    """
    Split ``[0, total)`` into ``workers`` contiguous half-open ranges.

    Each range holds ``total // workers`` indices; the last range also
    absorbs the remainder, so 7 indices over 3 workers gives sizes 2, 2, 3.

    Args:
        total: Number of indices to cover
        workers: Number of ranges (>= 1)

    Returns:
        List of (start, stop) tuples in ascending order
    """
    if workers < 1:
        raise ValueError(f"Need at least one worker, got {workers}")
    if total < 0:
        raise ValueError(f"Index space size must be >= 0, got {total}")

    chunk = total // workers
    ranges = []
    for i in range(workers):
        start = i * chunk
        stop = total if i == workers - 1 else start + chunk
        ranges.append((start, stop))
    return ranges


def sum_pixel_range(pixels: np.ndarray, start: int, stop: int) -> ChannelSums:
    """
    Sum the RGB channels of pixels ``start`` to ``stop`` (exclusive).

    Linear index ``p`` addresses the pixel at ``x = p % width``,
    ``y = p // width``, i.e. the row-major flat view of ``pixels``.

    Args:
        pixels: Array of shape (height, width, channels), channels >= 3
        start: First linear index
        stop: One past the last linear index

    Returns:
        ChannelSums for the range
    """
    height, width, channels = pixels.shape
    flat = pixels.reshape(height * width, channels)
    totals = flat[start:stop, :3].sum(axis=0, dtype=np.uint64)
    return ChannelSums(
        red=int(totals[0]),
        green=int(totals[1]),
        blue=int(totals[2]),
        count=stop - start
    )


def reduce_channel_sums(pixels: np.ndarray, workers: Optional[int] = None) -> ChannelSums:
    """
    Sum every pixel of ``pixels`` using a one-shot pool of worker threads.

    Each worker sums a private range and then merges it into a shared
    AggregateSum under its lock. Returns once every worker has merged.
    """
    height, width = pixels.shape[:2]
    ranges = partition_ranges(height * width, resolve_worker_count(workers))
    aggregate = AggregateSum()

    def work(bounds: Tuple[int, int]) -> None:
        partial = sum_pixel_range(pixels, bounds[0], bounds[1])
        aggregate.merge(partial)

    with ThreadPoolExecutor(max_workers=len(ranges)) as pool:
        futures = [pool.submit(work, bounds) for bounds in ranges]
        for future in futures:
            # re-raise worker failures in the caller
            future.result()

    return aggregate.snapshot()


def channel_average(total: int, count: int) -> int:
    """Average of one channel, rounded half-up and clamped to [0, 255]."""
    if count <= 0:
        raise ValueError("Cannot average zero pixels")
    return min(255, max(0, _round_half_up(total, count)))


def rgb_to_hex(rgb: Sequence[int]) -> str:
    """Convert an (R, G, B) triple to an uppercase hex color string."""
    r, g, b = [int(x) for x in rgb]
    return f"#{r:02X}{g:02X}{b:02X}"


def average_color(image: Image.Image, workers: Optional[int] = None,
                  target_width: int = TARGET_WIDTH) -> str:
    """
    Compute the average color of an image as ``#RRGGBB``.

    Args:
        image: Decoded image with non-zero width and height; any alpha
            channel is ignored
        workers: Number of worker threads (None or 0 for one per CPU)
        target_width: Width the image is downscaled to before summing

    Returns:
        Uppercase hex color string

    Raises:
        ValueError: If the image has a zero dimension
    """
    width, height = image.size
    if width <= 0 or height <= 0:
        raise ValueError(f"Image must have non-zero dimensions, got {width}x{height}")

    if image.mode != "RGB":
        image = image.convert("RGB")

    resized = downscale(image, target_width)
    pixels = np.asarray(resized)
    sums = reduce_channel_sums(pixels, workers)

    return rgb_to_hex((
        channel_average(sums.red, sums.count),
        channel_average(sums.green, sums.count),
        channel_average(sums.blue, sums.count),
    ))
