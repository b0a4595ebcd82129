"""
Data cleaning module for DQE.

Provides per-cell imputation and the apply/preview operations the
dashboard runs when the user accepts a cleaning recommendation.
"""

from __future__ import annotations

import pandas as pd

from dqe.classify.classifier import parse_number
from dqe.profile.profiler import ColumnProfiler
from dqe.utils.config import DQEConfig, get_config
from dqe.utils.logging import get_logger
from dqe.utils.types import (
    CleaningChange,
    CleaningMethod,
    CleaningPreview,
    CleaningStats,
    ColumnReport,
)

logger = get_logger("clean")


def _resolve_method(method: CleaningMethod | str) -> CleaningMethod | None:
    if isinstance(method, CleaningMethod):
        return method
    return CleaningMethod.from_string(method)


def _valid_rows(rows: list[int], n_rows: int) -> list[int]:
    """Distinct in-range row indices, ascending."""
    return sorted({r for r in rows if 0 <= r < n_rows})


class Imputer:
    """
    Computes replacement values for individual cells.

    Replacement values are strings with a fixed number of decimals so
    they round-trip through the UI table unchanged.
    """

    def __init__(self, config: DQEConfig | None = None):
        self.config = config or get_config()
        self.imputation_config = self.config.imputation
        self.profiler = ColumnProfiler(self.config)

    def _format(self, value: float) -> str:
        return f"{value:.{self.imputation_config.decimals}f}"

    def impute_cell(
        self,
        table: pd.DataFrame,
        column: str,
        method: CleaningMethod | str,
        row: int,
        report: ColumnReport | None = None,
    ) -> str | None:
        """
        Replacement value for one cell.

        Parameters
        ----------
        table : pd.DataFrame
            Input table.
        column : str
            Column of the cell.
        method : CleaningMethod | str
            mean, median, previous or delete.
        row : int
            Positional row index of the cell.
        report : ColumnReport | None
            Precomputed report of the column, computed if None.

        Returns
        -------
        str | None
            Replacement value, None when the column has no valid values
            or the method is unknown.
        """
        resolved = _resolve_method(method)
        if resolved is None:
            logger.warning(f"Unknown cleaning method '{method}'")
            return None

        if report is None:
            report = self.profiler.analyze(table, column)
        if report is None:
            return None

        if resolved is CleaningMethod.MEAN:
            return self._format(report.stats.mean)
        if resolved is CleaningMethod.MEDIAN:
            return self._format(report.stats.median)
        if resolved is CleaningMethod.DELETE:
            return self.imputation_config.deleted_marker

        neighbour = self._nearest_valid(table[column].tolist(), row)
        if neighbour is None:
            return self._format(report.stats.mean)
        return self._format(neighbour)

    def _nearest_valid(self, cells: list, row: int) -> float | None:
        """Nearest earlier valid value, else nearest later one."""
        for idx in range(min(row, len(cells)) - 1, -1, -1):
            value = parse_number(cells[idx])
            if value is not None:
                return value

        for idx in range(max(row + 1, 0), len(cells)):
            value = parse_number(cells[idx])
            if value is not None:
                return value

        return None

    def preview(
        self,
        table: pd.DataFrame,
        column: str,
        method: CleaningMethod | str,
        rows: list[int] | None = None,
        limit: int | None = None,
    ) -> CleaningPreview | None:
        """
        Preview the first changes of a cleaning operation.

        Parameters
        ----------
        table : pd.DataFrame
            Input table.
        column : str
            Column to clean.
        method : CleaningMethod | str
            Cleaning method.
        rows : list[int] | None
            Rows to clean. Anomalous rows if None.
        limit : int | None
            Number of changes to show. Config default if None.

        Returns
        -------
        CleaningPreview | None
            Preview, None if the method is unknown or the column absent.
        """
        resolved = _resolve_method(method)
        if resolved is None or column not in table.columns:
            return None

        if rows is None:
            rows = self.profiler.detect_anomalies(table, column)
        rows = _valid_rows(rows, len(table))
        if limit is None:
            limit = self.imputation_config.preview_limit

        report = self.profiler.analyze(table, column)
        cells = table[column].tolist()
        changes = [
            CleaningChange(
                row=idx,
                old_value=cells[idx],
                new_value=self.impute_cell(table, column, resolved, idx, report=report),
            )
            for idx in rows[:limit]
        ]

        return CleaningPreview(
            column=column,
            method=resolved,
            total_rows=len(rows),
            changes=changes,
        )

    def apply(
        self,
        table: pd.DataFrame,
        column: str,
        method: CleaningMethod | str,
        rows: list[int] | None = None,
    ) -> tuple[pd.DataFrame, CleaningStats | None]:
        """
        Apply a cleaning method to a column.

        Parameters
        ----------
        table : pd.DataFrame
            Input table; left unmodified.
        column : str
            Column to clean.
        method : CleaningMethod | str
            Cleaning method. ``delete`` drops the rows.
        rows : list[int] | None
            Rows to clean. Anomalous rows if None.

        Returns
        -------
        tuple[pd.DataFrame, CleaningStats | None]
            (Cleaned table, statistics). Statistics are None when nothing
            could be applied.
        """
        resolved = _resolve_method(method)
        if resolved is None or column not in table.columns:
            logger.debug(f"Nothing to apply for column '{column}' with method '{method}'")
            return table.copy(), None

        if rows is None:
            rows = self.profiler.detect_anomalies(table, column)
        rows = _valid_rows(rows, len(table))

        if resolved is CleaningMethod.DELETE:
            dropped = set(rows)
            keep = [i for i in range(len(table)) if i not in dropped]
            cleaned = table.iloc[keep].reset_index(drop=True)
            stats = CleaningStats(
                column=column,
                method=resolved,
                original_rows=len(table),
                final_rows=len(cleaned),
                cells_replaced=0,
            )
            logger.info(f"Deleted {stats.rows_removed} rows flagged in '{column}'")
            return cleaned, stats

        cleaned = table.copy()
        cleaned[column] = cleaned[column].astype(object)
        report = self.profiler.analyze(table, column)

        replaced = 0
        for idx in rows:
            new_value = self.impute_cell(table, column, resolved, idx, report=report)
            if new_value is not None:
                cleaned.iat[idx, cleaned.columns.get_loc(column)] = new_value
                replaced += 1

        stats = CleaningStats(
            column=column,
            method=resolved,
            original_rows=len(table),
            final_rows=len(cleaned),
            cells_replaced=replaced,
        )
        logger.info(f"Replaced {replaced} values in '{column}' using {resolved.value}")
        return cleaned, stats


class DataCleaner:
    """
    Applies profiler recommendations across a table.

    Columns are processed in report order, most problematic first, and
    each column is re-profiled against the table produced by the previous
    step.
    """

    def __init__(self, config: DQEConfig | None = None):
        self.config = config or get_config()
        self.imputer = Imputer(self.config)
        self.profiler = self.imputer.profiler

    def apply_recommendations(
        self, table: pd.DataFrame, columns: list[str] | None = None
    ) -> tuple[pd.DataFrame, list[CleaningStats]]:
        """
        Apply each column's recommended action.

        Parameters
        ----------
        table : pd.DataFrame
            Input table.
        columns : list[str] | None
            Columns to consider. All columns if None.

        Returns
        -------
        tuple[pd.DataFrame, list[CleaningStats]]
            (Cleaned table, per-column statistics)
        """
        if columns is None:
            columns = list(table.columns)

        cleaned = table.copy()
        all_stats = []

        for report in self.profiler.report(table, columns):
            current = self.profiler.analyze(cleaned, report.column)
            if current is None or current.recommended_action is None:
                continue

            cleaned, stats = self.imputer.apply(
                cleaned, report.column, current.recommended_action
            )
            if stats is not None:
                all_stats.append(stats)

        logger.info(
            f"Cleaned table: {len(cleaned)} rows "
            f"(removed {len(table) - len(cleaned)}), {len(all_stats)} columns treated"
        )
        return cleaned, all_stats


def impute_cell(
    table: pd.DataFrame,
    column: str,
    method: CleaningMethod | str,
    row: int,
    config: DQEConfig | None = None,
) -> str | None:
    """Convenience function for a single replacement value."""
    return Imputer(config).impute_cell(table, column, method, row)


def preview_cleaning(
    table: pd.DataFrame,
    column: str,
    method: CleaningMethod | str,
    rows: list[int] | None = None,
    limit: int | None = None,
    config: DQEConfig | None = None,
) -> CleaningPreview | None:
    """Convenience function to preview a cleaning operation."""
    return Imputer(config).preview(table, column, method, rows=rows, limit=limit)


def apply_cleaning(
    table: pd.DataFrame,
    column: str,
    method: CleaningMethod | str,
    rows: list[int] | None = None,
    config: DQEConfig | None = None,
) -> tuple[pd.DataFrame, CleaningStats | None]:
    """Convenience function to apply a cleaning operation."""
    return Imputer(config).apply(table, column, method, rows=rows)


def apply_recommendations(
    table: pd.DataFrame,
    columns: list[str] | None = None,
    config: DQEConfig | None = None,
) -> tuple[pd.DataFrame, list[CleaningStats]]:
    """Convenience function to apply every recommended action."""
    return DataCleaner(config).apply_recommendations(table, columns)
