"""
Type definitions and data structures for DQE.

Provides typed containers, enums, and result objects for
consistent data handling across all modules.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, TypeAlias

import numpy as np
import pandas as pd


# Type aliases for clarity
Table: TypeAlias = pd.DataFrame
ColumnName: TypeAlias = str
Cell: TypeAlias = Any
Instant: TypeAlias = pd.Timestamp
RowLike: TypeAlias = Mapping[str, Any]


class CleaningMethod(Enum):
    """Available cell cleaning strategies."""
    MEAN = "mean"
    MEDIAN = "median"
    PREVIOUS = "previous"
    DELETE = "delete"

    @classmethod
    def from_string(cls, method: str) -> CleaningMethod | None:
        """Parse method name to enum, None if unknown."""
        mapping = {m.value: m for m in cls}
        return mapping.get(str(method).strip().lower())


class Frequency(Enum):
    """Sampling frequency of a time axis."""
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    IRREGULAR = "irregular"

    @property
    def nominal_days(self) -> float | None:
        """Nominal spacing in days used by frequency inference."""
        mapping = {
            Frequency.DAILY: 1.0,
            Frequency.WEEKLY: 7.0,
            Frequency.MONTHLY: 30.0,
            Frequency.YEARLY: 365.0,
        }
        return mapping.get(self)

    def offset(self, steps: int) -> pd.DateOffset | None:
        """Calendar offset for ``steps`` periods of this frequency."""
        if self is Frequency.DAILY:
            return pd.DateOffset(days=steps)
        if self is Frequency.WEEKLY:
            return pd.DateOffset(days=7 * steps)
        if self is Frequency.MONTHLY:
            return pd.DateOffset(months=steps)
        if self is Frequency.YEARLY:
            return pd.DateOffset(years=steps)
        return None


class ColumnKind(Enum):
    """Column interpretation."""
    NUMERIC = "numeric"
    DATE = "date"
    CATEGORICAL = "categorical"


class ErrorKind(Enum):
    """Recoverable failure kinds. Reported, never raised."""
    EMPTY_INPUT = "EmptyInput"
    COLUMN_MISSING = "ColumnMissing"
    UNPARSEABLE_VALUE = "UnparseableValue"
    INSUFFICIENT_DATA = "InsufficientData"
    DEGENERATE_STATISTIC = "DegenerateStatistic"


@dataclass(frozen=True)
class DateFormat:
    """Registered date layout with its matcher and parser."""
    pattern: Any
    format: str
    description: str
    parser: Callable[[str], pd.Timestamp | None]

    def matches(self, value: str) -> bool:
        """Check whether the value has this layout."""
        return self.pattern.match(value) is not None


@dataclass
class ColumnStats:
    """Per-column numeric quality statistics."""
    total: int
    valid: int
    missing: int
    missing_percentage: float
    outliers: int
    outliers_percentage: float
    mean: float
    median: float
    std: float
    min: float
    max: float
    q1: float
    q3: float
    lower_bound: float
    upper_bound: float

    @property
    def iqr(self) -> float:
        return self.q3 - self.q1

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "valid": self.valid,
            "missing": self.missing,
            "missingPercentage": self.missing_percentage,
            "outliers": self.outliers,
            "outliersPercentage": self.outliers_percentage,
            "mean": self.mean,
            "median": self.median,
            "std": self.std,
            "min": self.min,
            "max": self.max,
            "q1": self.q1,
            "q3": self.q3,
        }


@dataclass
class ColumnReport:
    """Quality report for a single column."""
    column: ColumnName
    stats: ColumnStats
    recommended_action: CleaningMethod | None = None

    @property
    def severity(self) -> float:
        """Sort key used by the quality report."""
        return self.stats.missing_percentage + self.stats.outliers_percentage

    def to_dict(self) -> dict[str, Any]:
        result = {"column": self.column, "stats": self.stats.to_dict()}
        if self.recommended_action is not None:
            result["recommendedAction"] = self.recommended_action.value
        return result


@dataclass
class ColumnClassification:
    """Result of classifying a column."""
    column: ColumnName
    kind: ColumnKind | None
    numeric_ratio: float = 0.0
    date_format: DateFormat | None = None
    error: ErrorKind | None = None

    @property
    def is_valid(self) -> bool:
        return self.error is None


@dataclass
class StationarityResult:
    """Rolling-window stationarity diagnostic."""
    is_stationary: bool
    mean_variation: float
    variance_variation: float
    means: list[float] = field(default_factory=list)
    variances: list[float] = field(default_factory=list)

    @property
    def details(self) -> dict[str, list[float]]:
        return {"means": self.means, "variances": self.variances}

    def to_dict(self) -> dict[str, Any]:
        return {
            "isStationary": self.is_stationary,
            "meanVariation": self.mean_variation,
            "varianceVariation": self.variance_variation,
            "details": self.details,
        }


@dataclass
class CleaningChange:
    """Single previewed cell change."""
    row: int
    old_value: Cell
    new_value: str | None


@dataclass
class CleaningPreview:
    """Preview of a cleaning operation before it is applied."""
    column: ColumnName
    method: CleaningMethod
    total_rows: int
    changes: list[CleaningChange] = field(default_factory=list)


@dataclass
class CleaningStats:
    """Statistics from cleaning operations."""
    column: ColumnName
    method: CleaningMethod
    original_rows: int
    final_rows: int
    cells_replaced: int

    @property
    def rows_removed(self) -> int:
        return self.original_rows - self.final_rows

    @property
    def removal_pct(self) -> float:
        if self.original_rows == 0:
            return 0.0
        return 100 * self.rows_removed / self.original_rows


@dataclass
class FoldIndices:
    """Train/test partition of a single fold."""
    fold: int
    train: np.ndarray
    test: np.ndarray


@dataclass
class TimeSeriesValidation:
    """Validation of a series before it is handed to a forecaster."""
    is_valid: bool
    issues: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    statistics: dict[str, Any] = field(default_factory=dict)

    def __bool__(self) -> bool:
        return self.is_valid


@dataclass
class ModelMetrics:
    """Regression accuracy metrics."""
    rmse: float
    mae: float
    mape: float
    r2: float
    adjusted_r2: float
    aic: float
    bic: float

    def to_dict(self) -> dict[str, float]:
        return {
            "rmse": self.rmse,
            "mae": self.mae,
            "mape": self.mape,
            "r2": self.r2,
            "adjustedR2": self.adjusted_r2,
            "aic": self.aic,
            "bic": self.bic,
        }


def as_table(data: pd.DataFrame | Sequence[RowLike] | None) -> pd.DataFrame:
    """
    Coerce input rows to a Table.

    The schema is taken from the keys of the first row; keys that only
    appear in later rows are not part of the table.

    Parameters
    ----------
    data : pd.DataFrame | Sequence[RowLike] | None
        DataFrame or sequence of row mappings.

    Returns
    -------
    pd.DataFrame
        Table with a positional index.
    """
    if data is None:
        return pd.DataFrame()
    if isinstance(data, pd.DataFrame):
        return data

    rows = list(data)
    if not rows:
        return pd.DataFrame()

    columns = list(rows[0].keys())
    records = [{col: row.get(col) for col in columns} for row in rows]
    return pd.DataFrame.from_records(records, columns=columns)
