"""
Unit tests for time-series conditioning module.

Run tests with: pytest tests/test_timeseries.py -v
After installing package with: pip install -e .
"""

import numpy as np
import pandas as pd
import pytest

from dqe.utils.types import as_table
from dqe.timeseries.conditioning import (
    check_stationarity,
    interpolate,
    interpolate_values,
    moving_average,
    smooth,
    validate_time_series,
)


@pytest.fixture
def gap_series() -> pd.DataFrame:
    """Three observations with a gap on an uneven time axis."""
    return as_table([
        {"t": "2024-01-01", "v": 10},
        {"t": "2024-01-02", "v": None},
        {"t": "2024-01-04", "v": 40},
    ])


class TestInterpolateValues:
    """Tests for numeric gap filling."""

    def test_time_weighted(self):
        values, filled = interpolate_values([10.0, np.nan, 40.0], [0.0, 1.0, 3.0])

        np.testing.assert_allclose(values, [10.0, 20.0, 40.0])
        np.testing.assert_array_equal(filled, [False, True, False])

    def test_positions_when_no_times(self):
        values, _ = interpolate_values([0.0, np.nan, np.nan, 6.0])
        np.testing.assert_allclose(values, [0.0, 2.0, 4.0, 6.0])

    def test_midpoint_for_duplicate_times(self):
        values, _ = interpolate_values([10.0, np.nan, 30.0], [0.0, 0.0, 0.0])
        assert values[1] == pytest.approx(20.0)

    def test_midpoint_for_unknown_time(self):
        values, _ = interpolate_values([10.0, np.nan, 30.0], [0.0, 1.0, np.nan])
        assert values[1] == pytest.approx(20.0)

    def test_edges_carry_nearest(self):
        values, filled = interpolate_values([np.nan, 5.0, np.nan])

        np.testing.assert_allclose(values, [5.0, 5.0, 5.0])
        np.testing.assert_array_equal(filled, [True, False, True])

    def test_all_missing_unchanged(self):
        values, filled = interpolate_values([np.nan, np.nan])

        assert np.isnan(values).all()
        assert not filled.any()


class TestInterpolate:
    """Tests for table interpolation."""

    def test_fills_gap(self, gap_series, config):
        result = interpolate(gap_series, "v", "t", config=config)

        assert result["v"].iloc[1] == "20.00"
        assert result["__interpolated"].tolist() == [False, True, False]

    def test_sorts_by_time(self, config):
        table = as_table([
            {"t": "2024-01-04", "v": 40},
            {"t": "2024-01-01", "v": 10},
            {"t": "2024-01-02", "v": None},
        ])
        result = interpolate(table, "v", "t", config=config)

        assert result["t"].tolist() == ["2024-01-01", "2024-01-02", "2024-01-04"]
        assert result["v"].iloc[1] == "20.00"
        assert isinstance(result.index, pd.RangeIndex)

    def test_unparseable_time_goes_last(self, config):
        """Rows without a time sort last and fill by midpoint."""
        table = as_table([
            {"t": "bad", "v": 30},
            {"t": "2024-01-01", "v": 10},
            {"t": "2024-01-02", "v": None},
        ])
        result = interpolate(table, "v", "t", config=config)

        assert result["t"].tolist() == ["2024-01-01", "2024-01-02", "bad"]
        assert result["v"].iloc[1] == "20.00"

    def test_idempotent(self, gap_series, config):
        once = interpolate(gap_series, "v", "t", config=config)
        twice = interpolate(once, "v", "t", config=config)

        pd.testing.assert_frame_equal(once, twice)

    def test_input_not_modified(self, gap_series, config):
        before = gap_series.copy()
        interpolate(gap_series, "v", "t", config=config)

        pd.testing.assert_frame_equal(gap_series, before)

    def test_absent_column(self, gap_series, config):
        result = interpolate(gap_series, "nope", "t", config=config)
        pd.testing.assert_frame_equal(result, gap_series)


class TestMovingAverage:
    """Tests for numeric smoothing."""

    def test_window_three(self):
        values, smoothed = moving_average([1.0, 2.0, 6.0, 4.0, 5.0], 3)

        np.testing.assert_allclose(values, [1.0, 3.0, 4.0, 5.0, 5.0])
        np.testing.assert_array_equal(smoothed, [False, True, True, True, False])

    def test_even_window(self):
        """Window 4 averages five cells around each interior point."""
        values, _ = moving_average([1.0, 2.0, 3.0, 4.0, 5.0, 6.0], 4)
        np.testing.assert_allclose(values, [1.0, 2.0, 3.0, 4.0, 5.0, 6.0])

    def test_ignores_missing(self):
        values, _ = moving_average([1.0, np.nan, 3.0], 3)
        assert values[1] == pytest.approx(2.0)

    def test_small_window_noop(self):
        values, smoothed = moving_average([1.0, 5.0, 2.0], 1)

        np.testing.assert_array_equal(values, [1.0, 5.0, 2.0])
        assert not smoothed.any()


class TestSmooth:
    """Tests for table smoothing."""

    def test_window_three(self, config):
        table = pd.DataFrame({"v": [1, 2, 3, 4, 5]})
        result = smooth(table, "v", 3, config=config)

        assert result["v"].tolist() == [1, "2.00", "3.00", "4.00", 5]
        assert result["__smoothed"].tolist() == [False, True, True, True, False]

    def test_edges_preserved(self, random_values, config):
        table = pd.DataFrame({"v": random_values[:10]})
        result = smooth(table, "v", 5, config=config)

        assert result["v"].tolist()[:2] == table["v"].tolist()[:2]
        assert result["v"].tolist()[-2:] == table["v"].tolist()[-2:]

    def test_disabled_window(self, config):
        table = pd.DataFrame({"v": [1.0, 9.0, 1.0]})
        result = smooth(table, "v", 1, config=config)

        pd.testing.assert_frame_equal(result, table)

    def test_markers_accumulate(self, gap_series, config):
        """Smoothing an interpolated table keeps both markers."""
        result = smooth(interpolate(gap_series, "v", "t", config=config), "v", 3, config=config)

        assert result["__interpolated"].tolist() == [False, True, False]
        assert result["__smoothed"].tolist() == [False, True, False]


class TestStationarity:
    """Tests for the stationarity diagnostic."""

    def test_constant_series(self, config):
        result = check_stationarity([5.0] * 40, config=config)

        assert result.is_stationary
        assert result.mean_variation == 0
        assert result.variance_variation == 0
        assert len(result.means) == 3

    def test_alternating_series(self, config):
        result = check_stationarity([101.0, 99.0] * 20, config=config)
        assert result.is_stationary

    def test_trend(self, config):
        result = check_stationarity(np.arange(1, 41, dtype=float), config=config)

        assert not result.is_stationary
        assert result.mean_variation == pytest.approx(20.0)

    def test_negative_level_not_stationary(self, config):
        """Tolerance scales with the signed mean level."""
        values = [-10 - 0.001 * i for i in range(40)]
        result = check_stationarity(values, config=config)

        assert result.mean_variation == pytest.approx(0.02)
        assert not result.is_stationary

    def test_negative_constant_series(self, config):
        """A flat series is stationary whatever its level."""
        assert check_stationarity([-3.0] * 20, config=config).is_stationary

    def test_too_short(self, config):
        result = check_stationarity([1.0, 2.0, 3.0], config=config)

        assert not result.is_stationary
        assert result.mean_variation == 0
        assert result.details == {"means": [], "variances": []}


class TestValidateTimeSeries:
    """Tests for forecast input validation."""

    def test_valid_series(self, config):
        instants = list(pd.date_range("2024-01-01", periods=12))
        result = validate_time_series(instants, list(range(1, 13)), config=config)

        assert result.is_valid
        assert result.statistics["validRows"] == 12
        assert result.statistics["minValue"] == 1.0

    def test_length_mismatch(self, config):
        result = validate_time_series([pd.Timestamp("2024-01-01")], [1, 2], config=config)

        assert not result
        assert "different lengths" in result.issues[0]

    def test_not_enough_points(self, config):
        instants = list(pd.date_range("2024-01-01", periods=5))
        result = validate_time_series(instants, [1, 2, 3, 4, 5], config=config)

        assert not result.is_valid
        assert any("Not enough valid data points" in issue for issue in result.issues)

    def test_invalid_date(self, config):
        instants = list(pd.date_range("2024-01-01", periods=12))
        instants[3] = pd.NaT
        result = validate_time_series(instants, list(range(12)), config=config)

        assert not result.is_valid
        assert "Invalid date at index 3" in result.issues

    def test_missing_warning(self, config):
        instants = list(pd.date_range("2024-01-01", periods=15))
        values = list(range(11)) + [None] * 4
        result = validate_time_series(instants, values, config=config)

        assert result.is_valid
        assert result.statistics["missingValues"] == 4
        assert len(result.warnings) == 1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
