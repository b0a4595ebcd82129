"""
Unit tests for profiling module.

Run tests with: pytest tests/test_profile.py -v
After installing package with: pip install -e .
"""

import numpy as np
import pandas as pd
import pytest

from dqe.utils.types import CleaningMethod, as_table
from dqe.profile.profiler import (
    ColumnProfiler,
    analyze_column,
    detect_anomalies,
    generate_quality_report,
    positional_quantile,
    quality_summary,
)


class TestPositionalQuantile:
    """Tests for the positional quartile convention."""

    def test_picks_floor_position(self):
        """Value at floor(q * n) of the sorted array."""
        values = np.array([1.0, 2.0, 3.0, 100.0])
        assert positional_quantile(values, 0.25) == 2.0
        assert positional_quantile(values, 0.5) == 3.0
        assert positional_quantile(values, 0.75) == 100.0

    def test_single_value(self):
        """Single value is every quartile."""
        values = np.array([7.0])
        assert positional_quantile(values, 0.25) == 7.0
        assert positional_quantile(values, 0.75) == 7.0


class TestAnalyzeColumn:
    """Tests for column statistics."""

    def test_basic_statistics(self, profile_table, config):
        """Counts, moments and quartiles of a small column."""
        report = analyze_column(profile_table, "a", config=config)
        stats = report.stats

        assert stats.total == 5
        assert stats.valid == 4
        assert stats.missing == 1
        assert stats.missing_percentage == pytest.approx(20.0)
        assert stats.mean == pytest.approx(26.5)
        assert stats.min == 1.0
        assert stats.max == 100.0
        assert stats.median == 3.0
        assert stats.q1 == 2.0
        assert stats.q3 == 100.0
        assert stats.outliers == 0
        assert stats.std == pytest.approx(np.sqrt(1801.25))
        assert report.recommended_action == CleaningMethod.MEAN

    def test_linear_quartiles(self, profile_table, linear_config):
        """Linear quartiles tighten the fences enough to flag 100."""
        report = analyze_column(profile_table, "a", config=linear_config)

        assert report.stats.median == pytest.approx(2.5)
        assert report.stats.q1 == pytest.approx(1.75)
        assert report.stats.q3 == pytest.approx(27.25)
        assert report.stats.outliers == 1
        assert report.stats.outliers_percentage == pytest.approx(20.0)
        assert report.recommended_action == CleaningMethod.MEAN

    def test_decimal_comma_cells(self, config):
        """Comma decimals and numeric strings are valid values."""
        table = as_table([{"a": "1,5"}, {"a": "2.5"}, {"a": 3}, {"a": "abc"}])
        report = analyze_column(table, "a", config=config)

        assert report.stats.valid == 3
        assert report.stats.missing == 1
        assert report.stats.mean == pytest.approx(7 / 3)

    def test_absent_column(self, profile_table, config):
        """Absent column has no report."""
        assert analyze_column(profile_table, "missing", config=config) is None

    def test_no_valid_values(self, config):
        """Column without numbers has no report."""
        table = as_table([{"a": "x"}, {"a": None}])
        assert analyze_column(table, "a", config=config) is None

    def test_invariants_hold(self, config):
        """Counts add up and quartiles are ordered."""
        for seed in range(5):
            rng = np.random.default_rng(seed)
            values = list(rng.normal(0, 5, 50))
            for idx in rng.choice(50, size=7, replace=False):
                values[idx] = None
            table = as_table([{"a": v} for v in values])

            stats = analyze_column(table, "a", config=config).stats

            assert stats.valid + stats.missing == stats.total
            assert 0 <= stats.missing_percentage <= 100
            assert 0 <= stats.outliers_percentage <= 100
            assert stats.min <= stats.q1 <= stats.median <= stats.q3 <= stats.max
            assert stats.lower_bound <= stats.q1
            assert stats.upper_bound >= stats.q3

    def test_to_dict_keys(self, profile_table, config):
        """Serialized report uses display keys."""
        result = analyze_column(profile_table, "a", config=config).to_dict()

        assert result["column"] == "a"
        assert result["recommendedAction"] == "mean"
        assert result["stats"]["missingPercentage"] == pytest.approx(20.0)


class TestRecommendation:
    """Tests for the recommended cleaning action."""

    def _action(self, values, config):
        table = as_table([{"a": v} for v in values])
        return analyze_column(table, "a", config=config).recommended_action

    def test_delete_when_mostly_missing(self, config):
        """More than half missing recommends deleting rows."""
        assert self._action([1, None, None, None], config) == CleaningMethod.DELETE

    def test_median_when_many_outliers(self, config):
        """More than 30% outliers recommends the median."""
        values = [-100, -100, 0, 0, 0, 0, 0, 0, 100, 100]
        assert self._action(values, config) == CleaningMethod.MEDIAN

    def test_mean_when_some_missing(self, config):
        """Any missing value recommends the mean."""
        assert self._action([1, 2, 3, None], config) == CleaningMethod.MEAN

    def test_no_action_for_clean_column(self, config):
        """Clean column has no recommendation."""
        assert self._action([1, 2, 3, 4], config) is None

    def test_delete_takes_precedence(self, config):
        """Missing rule wins over the outlier rule."""
        values = [-100, -100, 0, 0, 0, 0, 0, 0, 100, 100] + [None] * 11
        assert self._action(values, config) == CleaningMethod.DELETE


class TestQualityReport:
    """Tests for multi-column reports."""

    def test_sorted_by_severity(self, config):
        """Most problematic column comes first; ties keep column order."""
        table = pd.DataFrame({
            "clean_1": [1.0, 2.0, 3.0, 4.0],
            "half": [1.0, None, None, 4.0],
            "clean_2": [5.0, 6.0, 7.0, 8.0],
            "quarter": [1.0, 2.0, None, 4.0],
        })
        reports = generate_quality_report(table, config=config)

        assert [r.column for r in reports] == ["half", "quarter", "clean_1", "clean_2"]

    def test_skips_non_numeric_columns(self, config):
        """Columns without numbers are left out."""
        table = pd.DataFrame({"name": ["a", "b"], "x": [1.0, 2.0]})
        reports = generate_quality_report(table, config=config)

        assert [r.column for r in reports] == ["x"]

    def test_quality_summary(self, config):
        """Summary has one row per report."""
        table = pd.DataFrame({"x": [1.0, None, 3.0], "y": [1.0, 2.0, 3.0]})
        summary = quality_summary(generate_quality_report(table, config=config))

        assert list(summary["column"]) == ["x", "y"]
        assert summary.loc[0, "recommendedAction"] == "mean"
        assert pd.isna(summary.loc[1, "recommendedAction"])


class TestDetectAnomalies:
    """Tests for anomaly detection."""

    def test_missing_and_outliers(self, outlier_table, config):
        """Outlying and unparseable rows are flagged in order."""
        assert detect_anomalies(outlier_table, "value", config=config) == [9, 10]

    def test_affine_invariance(self, outlier_table, config):
        """Positive affine transform flags the same rows."""
        transformed = as_table([
            {"value": 2 * v + 10 if isinstance(v, int) else v}
            for v in outlier_table["value"]
        ])
        assert (
            detect_anomalies(transformed, "value", config=config)
            == detect_anomalies(outlier_table, "value", config=config)
        )

    def test_missing_only(self, profile_table, config):
        """Wide fences flag only the missing row."""
        assert detect_anomalies(profile_table, "a", config=config) == [4]

    def test_absent_column(self, profile_table, config):
        """Absent column flags nothing."""
        assert detect_anomalies(profile_table, "nope", config=config) == []

    def test_fences_match_stats(self, outlier_table, config):
        """Fences used for flagging are the reported bounds."""
        profiler = ColumnProfiler(config)
        stats = profiler.analyze(outlier_table, "value").stats
        lower, upper = profiler.fences(np.array([10, 11, 12, 13, 14, 15, 16, 17, 18, 1000.0]))

        assert lower == stats.lower_bound
        assert upper == stats.upper_bound


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
