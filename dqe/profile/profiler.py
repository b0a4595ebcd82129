"""
Column profiling for DQE.

Computes the per-column quality report shown by the dashboard: counts,
missing and outlier percentages, central tendency, dispersion, quartiles,
Tukey fences and the recommended cleaning action. Also flags the rows
that need attention in a column.
"""

from __future__ import annotations

import numpy as np
import pandas as pd

from dqe.classify.classifier import coerce_numeric
from dqe.utils.config import DQEConfig, ProfilingConfig, get_config
from dqe.utils.logging import get_logger
from dqe.utils.types import (
    CleaningMethod,
    ColumnReport,
    ColumnStats,
    ErrorKind,
)

logger = get_logger("profile")


def positional_quantile(sorted_values: np.ndarray, q: float) -> float:
    """Value at position floor(q * n) of an ascending array."""
    n = len(sorted_values)
    return float(sorted_values[min(int(np.floor(q * n)), n - 1)])


class ColumnProfiler:
    """
    Computes column quality statistics and cleaning recommendations.

    Quartiles default to the positional convention used by the dashboard
    (value at floor(p * n) of the ascending sort); ``linear`` uses pandas
    linear interpolation instead.
    """

    def __init__(self, config: DQEConfig | None = None):
        self.config = config or get_config()
        self.profiling_config: ProfilingConfig = self.config.profiling

    def _quartiles(self, sorted_values: np.ndarray) -> tuple[float, float, float]:
        """Return (q1, median, q3)."""
        if self.profiling_config.quantile_method == "linear":
            q1, median, q3 = np.quantile(sorted_values, [0.25, 0.5, 0.75])
            return float(q1), float(median), float(q3)

        return (
            positional_quantile(sorted_values, 0.25),
            positional_quantile(sorted_values, 0.5),
            positional_quantile(sorted_values, 0.75),
        )

    def fences(self, valid: np.ndarray) -> tuple[float, float]:
        """
        Tukey fences over valid values.

        Parameters
        ----------
        valid : np.ndarray
            Finite values of the column, in any order.

        Returns
        -------
        tuple[float, float]
            (lower bound, upper bound). Values strictly outside are outliers.
        """
        sorted_values = np.sort(valid, kind="stable")
        q1, _, q3 = self._quartiles(sorted_values)
        iqr = q3 - q1
        k = self.profiling_config.iqr_multiplier
        return q1 - k * iqr, q3 + k * iqr

    def compute_stats(self, series: pd.Series) -> ColumnStats | None:
        """
        Compute quality statistics for a raw column.

        Parameters
        ----------
        series : pd.Series
            Raw column cells.

        Returns
        -------
        ColumnStats | None
            Statistics, None if no cell parses as a finite number.
        """
        numeric = coerce_numeric(series)
        total = len(numeric)
        valid = numeric.dropna().to_numpy(dtype=float)

        if len(valid) == 0:
            return None

        sorted_values = np.sort(valid, kind="stable")
        q1, median, q3 = self._quartiles(sorted_values)
        iqr = q3 - q1
        k = self.profiling_config.iqr_multiplier
        lower_bound = q1 - k * iqr
        upper_bound = q3 + k * iqr

        missing = total - len(valid)
        outliers = int(((valid < lower_bound) | (valid > upper_bound)).sum())

        return ColumnStats(
            total=total,
            valid=len(valid),
            missing=missing,
            missing_percentage=100 * missing / total,
            outliers=outliers,
            outliers_percentage=100 * outliers / total,
            mean=float(np.mean(valid)),
            median=median,
            std=float(np.std(valid)),
            min=float(sorted_values[0]),
            max=float(sorted_values[-1]),
            q1=q1,
            q3=q3,
            lower_bound=lower_bound,
            upper_bound=upper_bound,
        )

    def recommend(self, stats: ColumnStats) -> CleaningMethod | None:
        """Recommended cleaning action; first matching rule wins."""
        if stats.missing_percentage > self.profiling_config.missing_delete_threshold:
            return CleaningMethod.DELETE
        if stats.outliers_percentage > self.profiling_config.outlier_median_threshold:
            return CleaningMethod.MEDIAN
        if stats.missing_percentage > 0:
            return CleaningMethod.MEAN
        return None

    def analyze(self, table: pd.DataFrame, column: str) -> ColumnReport | None:
        """
        Build the quality report for a column.

        Parameters
        ----------
        table : pd.DataFrame
            Input table.
        column : str
            Column to analyze.

        Returns
        -------
        ColumnReport | None
            Report, None for an absent column, an empty table, or a
            column without valid values.
        """
        if column not in table.columns:
            logger.debug(f"{ErrorKind.COLUMN_MISSING.value}: '{column}'")
            return None
        if table.empty:
            logger.debug(f"{ErrorKind.EMPTY_INPUT.value}: '{column}'")
            return None

        stats = self.compute_stats(table[column])
        if stats is None:
            logger.debug(f"{ErrorKind.EMPTY_INPUT.value}: no valid values in '{column}'")
            return None

        return ColumnReport(
            column=column,
            stats=stats,
            recommended_action=self.recommend(stats),
        )

    def report(self, table: pd.DataFrame, columns: list[str]) -> list[ColumnReport]:
        """
        Quality reports for several columns, most problematic first.

        Sorted descending by missing plus outlier percentage; ties keep
        the order of ``columns``. Columns without valid values are omitted.
        """
        reports = [self.analyze(table, column) for column in columns]
        reports = [r for r in reports if r is not None]
        return sorted(reports, key=lambda r: r.severity, reverse=True)

    def detect_anomalies(self, table: pd.DataFrame, column: str) -> list[int]:
        """
        Rows whose cell is missing or outside the Tukey fences.

        Parameters
        ----------
        table : pd.DataFrame
            Input table.
        column : str
            Column to scan.

        Returns
        -------
        list[int]
            Ascending positional row indices; empty when the column is
            absent or has no valid values.
        """
        if column not in table.columns or table.empty:
            return []

        numeric = coerce_numeric(table[column]).to_numpy(dtype=float)
        valid_mask = ~np.isnan(numeric)
        if not valid_mask.any():
            return []

        lower_bound, upper_bound = self.fences(numeric[valid_mask])

        with np.errstate(invalid="ignore"):
            flagged = ~valid_mask | (numeric < lower_bound) | (numeric > upper_bound)

        return np.flatnonzero(flagged).tolist()


def analyze_column(
    table: pd.DataFrame, column: str, config: DQEConfig | None = None
) -> ColumnReport | None:
    """Convenience function to profile one column."""
    return ColumnProfiler(config).analyze(table, column)


def generate_quality_report(
    table: pd.DataFrame, columns: list[str] | None = None, config: DQEConfig | None = None
) -> list[ColumnReport]:
    """
    Convenience function to profile several columns.

    Parameters
    ----------
    table : pd.DataFrame
        Input table.
    columns : list[str] | None
        Columns to profile. All columns if None.
    config : DQEConfig | None
        Configuration. Uses global if None.

    Returns
    -------
    list[ColumnReport]
        Reports sorted most problematic first.
    """
    if columns is None:
        columns = list(table.columns)
    return ColumnProfiler(config).report(table, columns)


def detect_anomalies(
    table: pd.DataFrame, column: str, config: DQEConfig | None = None
) -> list[int]:
    """Convenience function to flag missing and outlying rows."""
    return ColumnProfiler(config).detect_anomalies(table, column)


def quality_summary(reports: list[ColumnReport]) -> pd.DataFrame:
    """
    One row per report, for display or export.

    Columns without a recommendation hold a missing value (None or NaN,
    depending on the pandas string dtype in use).
    """
    records = []
    for report in reports:
        record = {"column": report.column}
        record.update(report.stats.to_dict())
        record["recommendedAction"] = (
            report.recommended_action.value if report.recommended_action else None
        )
        records.append(record)

    return pd.DataFrame(records)
