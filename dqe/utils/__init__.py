"""
Utility modules for DQE.

Provides configuration, types and logging infrastructure.
"""

from dqe.utils.config import (
    DQEConfig,
    load_config,
    get_config,
    set_config,
)
from dqe.utils.types import (
    Table,
    Instant,
    CleaningMethod,
    Frequency,
    ColumnKind,
    ErrorKind,
    DateFormat,
    ColumnStats,
    ColumnReport,
    ColumnClassification,
    StationarityResult,
    CleaningChange,
    CleaningPreview,
    CleaningStats,
    FoldIndices,
    TimeSeriesValidation,
    ModelMetrics,
    as_table,
)
from dqe.utils.logging import setup_logging, get_logger

__all__ = [
    # Config
    "DQEConfig",
    "load_config",
    "get_config",
    "set_config",
    # Types
    "Table",
    "Instant",
    "CleaningMethod",
    "Frequency",
    "ColumnKind",
    "ErrorKind",
    "DateFormat",
    "ColumnStats",
    "ColumnReport",
    "ColumnClassification",
    "StationarityResult",
    "CleaningChange",
    "CleaningPreview",
    "CleaningStats",
    "FoldIndices",
    "TimeSeriesValidation",
    "ModelMetrics",
    "as_table",
    # Logging
    "setup_logging",
    "get_logger",
]
