"""
Unit tests for the average color engine.

Covers:
- range partitioning with remainders
- per-range channel sums and the threaded reduction
- downscaling and half-up rounding
- end-to-end hex output for known images
"""

import numpy as np
import pytest
from PIL import Image

from themecolor.services.colors.averaging import (
    AggregateSum, ChannelSums, average_color, channel_average, downscale,
    partition_ranges, reduce_channel_sums, resolve_worker_count, rgb_to_hex,
    sum_pixel_range
)
from generate_test_images import (
    TWO_BY_TWO_HEX, TWO_BY_TWO_LANCZOS_SUMS, create_checkerboard_image,
    create_two_by_two_image
)


class TestPartitionRanges:
    """Test splitting of the linear pixel index space"""

    def test_remainder_goes_to_last_range(self):
        """7 pixels over 3 workers gives sizes 2, 2, 3"""
        ranges = partition_ranges(7, 3)
        assert ranges == [(0, 2), (2, 4), (4, 7)]
        assert [stop - start for start, stop in ranges] == [2, 2, 3]

    def test_single_worker_covers_everything(self):
        assert partition_ranges(10, 1) == [(0, 10)]

    def test_more_workers_than_pixels(self):
        """Surplus workers get empty ranges, the last one takes all"""
        ranges = partition_ranges(2, 4)
        assert ranges == [(0, 0), (0, 0), (0, 0), (0, 2)]

    @pytest.mark.parametrize("total", [1, 7, 50, 1900, 2501])
    @pytest.mark.parametrize("workers", [1, 2, 3, 8, 13])
    def test_union_covers_each_index_once(self, total, workers):
        ranges = partition_ranges(total, workers)
        assert len(ranges) == workers

        covered = [i for start, stop in ranges for i in range(start, stop)]
        assert covered == list(range(total))

    def test_rejects_zero_workers(self):
        with pytest.raises(ValueError):
            partition_ranges(10, 0)


class TestWorkerCount:
    """Test worker count resolution"""

    def test_default_is_cpu_count(self, monkeypatch):
        monkeypatch.setattr("os.cpu_count", lambda: 6)
        assert resolve_worker_count(None) == 6
        assert resolve_worker_count(0) == 6

    def test_unknown_cpu_count_falls_back_to_one(self, monkeypatch):
        monkeypatch.setattr("os.cpu_count", lambda: None)
        assert resolve_worker_count() == 1

    def test_explicit_count(self):
        assert resolve_worker_count(3) == 3

    def test_negative_count_rejected(self):
        with pytest.raises(ValueError):
            resolve_worker_count(-1)


class TestChannelSums:
    """Test partial sums and the shared aggregate"""

    def test_sum_pixel_range_row_major(self):
        """Linear index p maps to x = p % width, y = p // width"""
        pixels = np.arange(2 * 3 * 3, dtype=np.uint8).reshape(2, 3, 3)

        # indices 2..4 are (x=2, y=0), (x=0, y=1), (x=1, y=1)
        partial = sum_pixel_range(pixels, 2, 5)
        expected = pixels[0, 2].astype(int) + pixels[1, 0] + pixels[1, 1]

        assert partial.count == 3
        assert (partial.red, partial.green, partial.blue) == tuple(int(v) for v in expected)

    def test_sum_pixel_range_ignores_alpha(self):
        pixels = np.full((2, 2, 4), 255, dtype=np.uint8)
        pixels[..., :3] = 10

        partial = sum_pixel_range(pixels, 0, 4)
        assert (partial.red, partial.green, partial.blue, partial.count) == (40, 40, 40, 4)

    def test_sum_does_not_overflow(self):
        pixels = np.full((100, 50, 3), 255, dtype=np.uint8)
        partial = sum_pixel_range(pixels, 0, 5000)
        assert partial.red == 255 * 5000

    def test_aggregate_merge(self):
        aggregate = AggregateSum()
        aggregate.merge(ChannelSums(1, 2, 3, 1))
        aggregate.merge(ChannelSums(10, 20, 30, 2))

        assert aggregate.snapshot() == ChannelSums(11, 22, 33, 3)

    @pytest.mark.parametrize("workers", [1, 3, 7, 64])
    def test_reduction_matches_direct_sum(self, workers):
        rng = np.random.default_rng(42)
        pixels = rng.integers(0, 256, size=(37, 50, 3), dtype=np.uint8)

        sums = reduce_channel_sums(pixels, workers=workers)
        expected = pixels.reshape(-1, 3).sum(axis=0, dtype=np.uint64)

        assert sums.count == 37 * 50
        assert (sums.red, sums.green, sums.blue) == tuple(int(v) for v in expected)

    def test_reduction_propagates_worker_errors(self):
        pixels = np.zeros((2, 2), dtype=np.uint8)  # no channel axis
        with pytest.raises(ValueError):
            reduce_channel_sums(pixels, workers=2)


class TestRounding:
    """Test channel averaging and hex formatting"""

    def test_half_rounds_up(self):
        assert channel_average(255, 2) == 128  # 127.5
        assert channel_average(5, 2) == 3       # 2.5

    def test_rounds_to_nearest(self):
        assert channel_average(301, 4) == 75    # 75.25
        assert channel_average(303, 4) == 76    # 75.75

    def test_zero_count_rejected(self):
        with pytest.raises(ValueError):
            channel_average(0, 0)

    def test_rgb_to_hex_uppercase(self):
        assert rgb_to_hex((12, 34, 56)) == "#0C2238"
        assert rgb_to_hex((255, 171, 0)) == "#FFAB00"
        assert rgb_to_hex((0, 0, 0)) == "#000000"


class TestDownscale:
    """Test fixed-width Lanczos downscale"""

    def test_wide_image_resized_to_fifty(self):
        img = Image.new("RGB", (400, 300), (12, 34, 56))
        resized = downscale(img)
        assert resized.size == (50, 38)  # 37.5 rounds up

    def test_tall_image_keeps_aspect(self):
        img = Image.new("RGB", (100, 1000))
        assert downscale(img).size == (50, 500)

    def test_height_never_zero(self):
        img = Image.new("RGB", (5000, 1))
        assert downscale(img).size == (50, 1)

    def test_narrow_image_upsampled(self):
        img = Image.new("RGB", (10, 4), (12, 34, 56))
        resized = downscale(img)

        assert resized.size == (50, 20)
        assert reduce_channel_sums(np.asarray(resized), workers=3).count == 50 * 20

    def test_two_by_two_upsampled_with_lanczos(self):
        """The 2x2 fixture becomes 50x50 with deterministic Lanczos sums"""
        resized = downscale(create_two_by_two_image())
        sums = reduce_channel_sums(np.asarray(resized), workers=4)

        assert resized.size == (50, 50)
        assert (sums.red, sums.green, sums.blue) == TWO_BY_TWO_LANCZOS_SUMS
        assert sums.count == 2500

    def test_target_width_keeps_pixels(self):
        img = create_checkerboard_image(50, 7)
        resized = downscale(img)

        assert resized.size == (50, 7)
        assert np.array_equal(np.asarray(resized), np.asarray(img))


class TestAverageColor:
    """Test the complete engine on known images"""

    @pytest.mark.parametrize("size", [(1, 1), (2, 2), (50, 50), (640, 480), (123, 457)])
    def test_solid_color(self, size):
        img = Image.new("RGB", size, (12, 34, 56))
        assert average_color(img) == "#0C2238"

    @pytest.mark.parametrize("workers", [1, 2, 3, 16])
    def test_checkerboard(self, workers):
        img = create_checkerboard_image(50, 50)
        assert average_color(img, workers=workers) == "#808080"

    def test_small_checkerboard_upsampled(self):
        img = create_checkerboard_image(10, 10)
        assert average_color(img, workers=2) == "#808080"

    def test_two_by_two_fixture_pixels(self):
        assert average_color(create_two_by_two_image()) == TWO_BY_TWO_HEX

    def test_rgba_alpha_ignored(self):
        img = Image.new("RGBA", (8, 8), (12, 34, 56, 0))
        assert average_color(img) == "#0C2238"

    def test_pixel_count_matches_downscaled_size(self):
        img = Image.new("RGB", (400, 300), (200, 100, 50))
        pixels = np.asarray(downscale(img))

        sums = reduce_channel_sums(pixels, workers=7)
        assert sums.count == 50 * 38

    def test_idempotent(self):
        rng = np.random.default_rng(7)
        img = Image.fromarray(rng.integers(0, 256, size=(90, 160, 3), dtype=np.uint8))

        first = average_color(img, workers=4)
        second = average_color(img, workers=4)
        assert first == second

    def test_result_independent_of_worker_count(self):
        rng = np.random.default_rng(11)
        img = Image.fromarray(rng.integers(0, 256, size=(60, 200, 3), dtype=np.uint8))

        results = {average_color(img, workers=n) for n in (1, 2, 5, 13)}
        assert len(results) == 1

    def test_zero_dimension_rejected(self):
        with pytest.raises(ValueError):
            average_color(Image.new("RGB", (0, 5)))
