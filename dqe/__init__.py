"""
DQE: Data Quality Engine

Tabular data-quality profiling and time-series conditioning behind the
data dashboard: column profiling, anomaly detection, imputation, date
handling, interpolation, smoothing, stationarity and correlation.
"""

__version__ = "1.0.0"

from dqe.utils.config import DQEConfig, load_config, get_config, set_config
from dqe.utils.types import (
    CleaningMethod,
    ColumnKind,
    ColumnReport,
    ColumnStats,
    Frequency,
    as_table,
)

from dqe.classify import classify_column, parse_number
from dqe.dates import (
    detect_date_format,
    parse_date,
    infer_frequency,
    generate_future,
)
from dqe.profile import analyze_column, generate_quality_report, detect_anomalies
from dqe.clean import impute_cell, apply_cleaning
from dqe.timeseries import interpolate, smooth, check_stationarity
from dqe.validation import pearson, correlate_columns, k_fold_indices
from dqe.pipeline import ConditioningPipeline, condition_table

__all__ = [
    "__version__",
    "DQEConfig",
    "load_config",
    "get_config",
    "set_config",
    "CleaningMethod",
    "ColumnKind",
    "ColumnReport",
    "ColumnStats",
    "Frequency",
    "as_table",
    "classify_column",
    "parse_number",
    "detect_date_format",
    "parse_date",
    "infer_frequency",
    "generate_future",
    "analyze_column",
    "generate_quality_report",
    "detect_anomalies",
    "impute_cell",
    "apply_cleaning",
    "interpolate",
    "smooth",
    "check_stationarity",
    "pearson",
    "correlate_columns",
    "k_fold_indices",
    "ConditioningPipeline",
    "condition_table",
]
