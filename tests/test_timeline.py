"""
Tests for time <-> tile mapping.
"""
import numpy as np
import pytest

from spritetab.model.timeline import (
    time_to_index, index_to_time, tile_times, background_position, format_timestamp
)


class TestTimeToIndex:
    # Power-of-two tile counts keep i / n exact, so only the last tile may drift
    @pytest.mark.parametrize("duration,tile_count", [(120.0, 16), (3600.0, 64), (7.25, 32), (1.0, 1)])
    def test_round_trip(self, duration, tile_count):
        for i in range(tile_count - 1):
            t = index_to_time(i, duration, tile_count)
            assert time_to_index(t, duration, tile_count) == i
        last = tile_count - 1
        t = index_to_time(last, duration, tile_count)
        assert abs(time_to_index(t, duration, tile_count) - last) <= 1

    @pytest.mark.parametrize("duration,tile_count", [(120.0, 20), (3600.0, 81), (7.3, 48), (93.7, 27)])
    def test_tile_midpoints(self, duration, tile_count):
        for i in range(tile_count):
            t = index_to_time(i + 0.5, duration, tile_count)
            assert time_to_index(t, duration, tile_count) == i

    def test_always_in_range(self):
        duration, tile_count = 95.5, 36
        for t in np.linspace(0.0, duration, 500, endpoint=False):
            idx = time_to_index(float(t), duration, tile_count)
            assert 0 <= idx <= tile_count - 1

    def test_clamps_outside_scene(self):
        assert time_to_index(-5.0, 100.0, 10) == 0
        assert time_to_index(100.0, 100.0, 10) == 9
        assert time_to_index(500.0, 100.0, 10) == 9

    def test_midpoint(self):
        assert time_to_index(60.0, 120.0, 20) == 10

    def test_zero_duration_raises(self):
        with pytest.raises(ValueError):
            time_to_index(1.0, 0.0, 10)

    def test_no_tiles_raises(self):
        with pytest.raises(ValueError):
            time_to_index(1.0, 10.0, 0)


class TestIndexToTime:
    def test_values(self):
        assert index_to_time(0, 120.0, 20) == 0.0
        assert index_to_time(10, 120.0, 20) == 60.0

    def test_tile_times_match_scalar(self):
        times = tile_times(93.7, 27)

        assert len(times) == 27
        for i, t in enumerate(times):
            assert float(t) == index_to_time(i, 93.7, 27)

    def test_tile_times_empty(self):
        assert len(tile_times(10.0, 0)) == 0


class TestBackgroundPosition:
    def test_corners(self):
        assert background_position(0, 8, 6) == (0.0, 0.0)
        assert background_position(47, 8, 6) == (100.0, 100.0)

    def test_single_column_and_row(self):
        assert background_position(3, 1, 5) == (0.0, 75.0)
        assert background_position(2, 4, 1) == (pytest.approx(200 / 3), 0.0)


class TestFormatTimestamp:
    def test_zero(self):
        assert format_timestamp(0) == "0:00"

    def test_minutes(self):
        assert format_timestamp(65.9) == "1:05"

    def test_hours(self):
        assert format_timestamp(3725) == "1:02:05"
