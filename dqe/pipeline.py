"""
DQE conditioning pipeline.

Chains the engine the way the dashboard uses it:
profiling → cleaning → interpolation → smoothing → diagnostics.
Every stage takes a table and returns a new one; the input is never
modified.

Usage:
    from dqe.pipeline import condition_table

    result = condition_table(rows, value_column="sales", time_column="date")
    result.table        # conditioned table
    result.frequency    # Frequency.DAILY, ...
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

import pandas as pd

from dqe.classify.classifier import coerce_numeric
from dqe.clean.cleaner import DataCleaner
from dqe.dates.date_engine import infer_frequency, parse_date_column
from dqe.profile.profiler import ColumnProfiler
from dqe.timeseries.conditioning import check_stationarity, interpolate, smooth
from dqe.utils.config import DQEConfig, get_config
from dqe.utils.logging import get_logger
from dqe.utils.types import (
    CleaningStats,
    ColumnReport,
    Frequency,
    RowLike,
    StationarityResult,
    as_table,
)
from dqe.validation.correlation import correlate_columns


@dataclass
class PipelineResult:
    """Outputs of a pipeline run."""
    table: pd.DataFrame
    reports: list[ColumnReport] = field(default_factory=list)
    cleaning_stats: list[CleaningStats] = field(default_factory=list)
    frequency: Frequency = Frequency.IRREGULAR
    stationarity: StationarityResult | None = None
    correlations: dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "reports": [r.to_dict() for r in self.reports],
            "frequency": self.frequency.value,
            "stationarity": self.stationarity.to_dict() if self.stationarity else None,
            "correlations": self.correlations,
            "rows": len(self.table),
        }


class PipelineStage:
    """Base class for pipeline stages."""

    def __init__(self, name: str, config: DQEConfig):
        self.name = name
        self.config = config
        self.logger = get_logger(f"pipeline.{name}")

    def run(self, table: pd.DataFrame) -> pd.DataFrame:
        """Execute pipeline stage."""
        raise NotImplementedError


class ProfilingStage(PipelineStage):
    """Column quality profiling stage."""

    def __init__(self, config: DQEConfig, columns: list[str] | None = None):
        super().__init__("profiling", config)
        self.columns = columns
        self.profiler = ColumnProfiler(config)
        self.reports: list[ColumnReport] = []

    def run(self, table: pd.DataFrame) -> pd.DataFrame:
        columns = self.columns if self.columns is not None else list(table.columns)
        self.reports = self.profiler.report(table, columns)
        self.logger.info(f"Profiled {len(self.reports)} numeric columns")
        return table


class CleaningStage(PipelineStage):
    """
    Applies the profiler's recommended actions.

    Cleans ``columns`` (every column of the table if None), skipping
    those listed in ``exclude``.
    """

    def __init__(
        self,
        config: DQEConfig,
        columns: list[str] | None = None,
        exclude: list[str] | None = None,
    ):
        super().__init__("cleaning", config)
        self.columns = columns
        self.exclude = set(exclude or [])
        self.cleaner = DataCleaner(config)
        self.stats: list[CleaningStats] = []

    def run(self, table: pd.DataFrame) -> pd.DataFrame:
        columns = self.columns if self.columns is not None else list(table.columns)
        columns = [c for c in columns if c not in self.exclude]
        cleaned, self.stats = self.cleaner.apply_recommendations(table, columns)
        return cleaned


class InterpolationStage(PipelineStage):
    """Time-aware gap filling stage."""

    def __init__(self, config: DQEConfig, value_column: str, time_column: str):
        super().__init__("interpolation", config)
        self.value_column = value_column
        self.time_column = time_column

    def run(self, table: pd.DataFrame) -> pd.DataFrame:
        result = interpolate(table, self.value_column, self.time_column, config=self.config)
        marker = self.config.timeseries.interpolated_marker
        if marker in result.columns:
            self.logger.info(f"Interpolated {int(result[marker].sum())} cells")
        return result


class SmoothingStage(PipelineStage):
    """Moving-average smoothing stage."""

    def __init__(self, config: DQEConfig, value_column: str, window: int | None = None):
        super().__init__("smoothing", config)
        self.value_column = value_column
        self.window = window if window is not None else config.timeseries.smoothing_window

    def run(self, table: pd.DataFrame) -> pd.DataFrame:
        if self.window < 2:
            self.logger.info("Smoothing disabled")
            return table
        return smooth(table, self.value_column, self.window, config=self.config)


class DiagnosticsStage(PipelineStage):
    """Frequency, stationarity and correlation diagnostics."""

    def __init__(self, config: DQEConfig, value_column: str, time_column: str | None):
        super().__init__("diagnostics", config)
        self.value_column = value_column
        self.time_column = time_column
        self.frequency = Frequency.IRREGULAR
        self.stationarity: StationarityResult | None = None
        self.correlations: dict[str, float] = {}

    def run(self, table: pd.DataFrame) -> pd.DataFrame:
        if self.time_column is not None and self.time_column in table.columns:
            instants = parse_date_column(table[self.time_column], config=self.config)
            self.frequency = infer_frequency(instants.dropna().tolist(), config=self.config)

        if self.value_column in table.columns:
            values = coerce_numeric(table[self.value_column]).dropna()
            self.stationarity = check_stationarity(values.to_numpy(), config=self.config)

            features = [
                c for c in table.columns
                if c != self.time_column and not str(c).startswith("__")
            ]
            self.correlations = correlate_columns(table, self.value_column, features)

        self.logger.info(
            f"Frequency={self.frequency.value}, "
            f"stationary={self.stationarity.is_stationary if self.stationarity else None}"
        )
        return table


class ConditioningPipeline:
    """
    End-to-end conditioning of one value column against a time axis.
    """

    def __init__(
        self,
        value_column: str,
        time_column: str | None = None,
        config: DQEConfig | None = None,
        clean: bool = True,
        smoothing_window: int | None = None,
    ):
        """
        Initialize pipeline.

        Parameters
        ----------
        value_column : str
            Column to condition.
        time_column : str | None
            Time axis. Interpolation and frequency inference are skipped
            if None.
        config : DQEConfig | None
            Configuration. Uses global if None.
        clean : bool
            Apply the profiler's recommended actions.
        smoothing_window : int | None
            Smoothing window. Config default if None; below 2 disables.
        """
        self.config = config or get_config()
        self.value_column = value_column
        self.time_column = time_column
        self.clean = clean
        self.logger = get_logger("pipeline")

        self.profiling_stage = ProfilingStage(self.config)
        # Interpolation owns the value column's gaps when a time axis exists
        self.cleaning_stage = CleaningStage(
            self.config,
            exclude=[value_column] if time_column is not None else None,
        )
        self.interpolation_stage = (
            InterpolationStage(self.config, value_column, time_column)
            if time_column is not None else None
        )
        self.smoothing_stage = SmoothingStage(self.config, value_column, smoothing_window)
        self.diagnostics_stage = DiagnosticsStage(self.config, value_column, time_column)

    def run(self, data: pd.DataFrame | Sequence[RowLike]) -> PipelineResult:
        """
        Execute the pipeline.

        Parameters
        ----------
        data : pd.DataFrame | Sequence[RowLike]
            Input table or rows.

        Returns
        -------
        PipelineResult
            Conditioned table and diagnostics.
        """
        table = as_table(data)
        self.logger.info(f"Conditioning '{self.value_column}' over {len(table)} rows")

        table = self.profiling_stage.run(table)
        if self.clean:
            table = self.cleaning_stage.run(table)
        if self.interpolation_stage is not None:
            table = self.interpolation_stage.run(table)
        table = self.smoothing_stage.run(table)
        table = self.diagnostics_stage.run(table)

        return PipelineResult(
            table=table,
            reports=self.profiling_stage.reports,
            cleaning_stats=self.cleaning_stage.stats if self.clean else [],
            frequency=self.diagnostics_stage.frequency,
            stationarity=self.diagnostics_stage.stationarity,
            correlations=self.diagnostics_stage.correlations,
        )


def condition_table(
    data: pd.DataFrame | Sequence[RowLike],
    value_column: str,
    time_column: str | None = None,
    config: DQEConfig | None = None,
    clean: bool = True,
    smoothing_window: int | None = None,
) -> PipelineResult:
    """
    Convenience function to run the conditioning pipeline.

    Parameters
    ----------
    data : pd.DataFrame | Sequence[RowLike]
        Input table or rows.
    value_column : str
        Column to condition.
    time_column : str | None
        Time axis column.
    config : DQEConfig | None
        Configuration.
    clean : bool
        Apply recommended cleaning actions.
    smoothing_window : int | None
        Smoothing window.

    Returns
    -------
    PipelineResult
        Conditioned table and diagnostics.
    """
    pipeline = ConditioningPipeline(
        value_column,
        time_column,
        config=config,
        clean=clean,
        smoothing_window=smoothing_window,
    )
    return pipeline.run(data)
