"""
Edge case tests for DQE.

Covers empty tables, absent columns, columns without valid values
and row coercion.

Run tests with: pytest tests/test_edge_cases.py -v
"""

import numpy as np
import pandas as pd
import pytest

from dqe.utils.types import ColumnKind, as_table
from dqe.classify.classifier import classify_column
from dqe.profile.profiler import analyze_column, detect_anomalies, generate_quality_report
from dqe.clean.cleaner import apply_cleaning, impute_cell
from dqe.timeseries.conditioning import interpolate, smooth
from dqe.validation.correlation import correlate_columns


class TestAsTable:
    """Tests for row coercion."""

    def test_schema_from_first_row(self):
        table = as_table([{"a": 1}, {"a": 2, "b": 3}])
        assert list(table.columns) == ["a"]

    def test_missing_keys_are_null(self):
        table = as_table([{"a": 1, "b": 2}, {"a": 3}])
        assert pd.isna(table["b"].iloc[1])

    def test_empty_inputs(self):
        assert as_table([]).empty
        assert as_table(None).empty

    def test_dataframe_passthrough(self):
        df = pd.DataFrame({"a": [1]})
        assert as_table(df) is df


class TestEmptyTable:
    """Operations on a table without rows."""

    def test_profiling(self):
        table = pd.DataFrame({"a": []})

        assert analyze_column(table, "a") is None
        assert detect_anomalies(table, "a") == []
        assert generate_quality_report(table) == []

    def test_conditioning(self):
        table = pd.DataFrame({"t": [], "v": []})

        assert interpolate(table, "v", "t").empty
        assert smooth(table, "v", 3).empty

    def test_correlation(self):
        assert correlate_columns(pd.DataFrame({"y": [], "x": []}), "y") == {}

    def test_no_columns(self, empty_df):
        assert generate_quality_report(empty_df) == []
        assert classify_column(empty_df, "a").kind is None


class TestAllMissingColumn:
    """Operations on a column without valid values."""

    @pytest.fixture
    def table(self):
        return pd.DataFrame({"a": [np.nan, np.nan, np.nan]})

    def test_no_report(self, table):
        assert analyze_column(table, "a") is None
        assert detect_anomalies(table, "a") == []

    def test_no_imputation(self, table):
        assert impute_cell(table, "a", "mean", 0) is None

    def test_cleaning_replaces_nothing(self, table):
        cleaned, stats = apply_cleaning(table, "a", "mean")

        assert stats.cells_replaced == 0
        assert cleaned["a"].isna().all()

    def test_interpolation_leaves_gaps(self):
        table = as_table([
            {"t": "2024-01-01", "v": None},
            {"t": "2024-01-02", "v": None},
        ])
        result = interpolate(table, "v", "t")

        assert result["v"].isna().all()
        assert not result["__interpolated"].any()

    def test_classified_categorical(self, table):
        assert classify_column(table, "a").kind == ColumnKind.CATEGORICAL


class TestSingleRow:
    """Operations on a single row."""

    def test_profile(self):
        stats = analyze_column(as_table([{"a": 7}]), "a").stats

        assert stats.q1 == stats.median == stats.q3 == 7.0
        assert stats.std == 0.0
        assert stats.outliers == 0

    def test_smoothing_noop(self):
        result = smooth(pd.DataFrame({"v": [1.0]}), "v", 3)

        assert result["v"].tolist() == [1.0]
        assert not result["__smoothed"].any()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
