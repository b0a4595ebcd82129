"""
Value classification for DQE.

Decides per cell and per column whether data is numeric, a parseable
date, or categorical. Numeric parsing accepts both ``.`` and ``,`` as the
decimal separator so that European spreadsheets profile correctly.
"""

from __future__ import annotations

import math
import numbers
import re
from datetime import date, datetime
from decimal import Decimal
from typing import Any

import numpy as np
import pandas as pd

from dqe.dates.date_engine import detect_date_format
from dqe.utils.config import DQEConfig, get_config
from dqe.utils.logging import get_logger
from dqe.utils.types import (
    ColumnClassification,
    ColumnKind,
    ErrorKind,
)

logger = get_logger("classify")

# More than half the cells must parse for a column to be numeric
NUMERIC_RATIO_THRESHOLD = 0.5

# Decimal is not registered as numbers.Real
_NUMBER_TYPES = (numbers.Real, Decimal)

_DECIMAL_RE = re.compile(r"^[+-]?(?:\d+(?:[.,]\d*)?|[.,]\d+)$")


def is_missing(value: Any) -> bool:
    """Check whether a cell is null, NaN/NaT or a blank string."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError, ArithmeticError):
        return False


def parse_number(value: Any) -> float | None:
    """
    Parse a cell as a finite real number.

    Parameters
    ----------
    value : Any
        Cell value.

    Returns
    -------
    float | None
        Parsed number, None if the cell is missing or not numeric.
    """
    if value is None or isinstance(value, (bool, np.bool_)):
        return None

    if isinstance(value, _NUMBER_TYPES):
        try:
            number = float(value)
        except (ValueError, OverflowError):
            return None
        return number if math.isfinite(number) else None

    if isinstance(value, str):
        text = value.strip()
        if not _DECIMAL_RE.match(text):
            return None
        number = float(text.replace(",", "."))
        return number if math.isfinite(number) else None

    return None


def is_numeric(value: Any) -> bool:
    """Check whether a cell parses as a finite number."""
    return parse_number(value) is not None


def coerce_numeric(series: pd.Series) -> pd.Series:
    """
    Coerce a column to floats.

    Parameters
    ----------
    series : pd.Series
        Raw column.

    Returns
    -------
    pd.Series
        Float series with NaN where the cell does not parse.
    """
    if series.empty:
        return pd.Series(dtype=float, index=series.index)
    parsed = [parse_number(v) for v in series.tolist()]
    return pd.Series(
        [np.nan if v is None else v for v in parsed],
        index=series.index,
        dtype=float,
    )


def _is_datetime_like(value: Any) -> bool:
    return isinstance(value, (datetime, date, np.datetime64, pd.Timestamp))


def classify_column(
    table: pd.DataFrame,
    column: str,
    config: DQEConfig | None = None,
) -> ColumnClassification:
    """
    Classify a column as numeric, date, or categorical.

    Parameters
    ----------
    table : pd.DataFrame
        Input table.
    column : str
        Column to classify.
    config : DQEConfig | None
        Configuration. Uses global if None.

    Returns
    -------
    ColumnClassification
        Classification with ``error`` set when the column is absent
        (``kind`` None) or the table is empty (``kind`` categorical).
    """
    config = config or get_config()

    if column not in table.columns:
        logger.debug(f"{ErrorKind.COLUMN_MISSING.value}: column '{column}' not in table")
        return ColumnClassification(column=column, kind=None, error=ErrorKind.COLUMN_MISSING)

    series = table[column]
    if series.empty:
        return ColumnClassification(
            column=column, kind=ColumnKind.CATEGORICAL, error=ErrorKind.EMPTY_INPUT
        )

    numeric_ratio = coerce_numeric(series).notna().sum() / len(series)
    if numeric_ratio > NUMERIC_RATIO_THRESHOLD:
        return ColumnClassification(
            column=column, kind=ColumnKind.NUMERIC, numeric_ratio=float(numeric_ratio)
        )

    values = [v for v in series.tolist() if not is_missing(v)]
    if values and all(_is_datetime_like(v) for v in values):
        return ColumnClassification(
            column=column, kind=ColumnKind.DATE, numeric_ratio=float(numeric_ratio)
        )

    samples = [v for v in values if isinstance(v, str)]
    date_format = detect_date_format(samples, config=config)
    if date_format is not None:
        return ColumnClassification(
            column=column,
            kind=ColumnKind.DATE,
            numeric_ratio=float(numeric_ratio),
            date_format=date_format,
        )

    return ColumnClassification(
        column=column, kind=ColumnKind.CATEGORICAL, numeric_ratio=float(numeric_ratio)
    )


def classify_columns(
    table: pd.DataFrame,
    config: DQEConfig | None = None,
) -> dict[str, ColumnKind]:
    """Classify every column of a table."""
    result = {}
    for column in table.columns:
        classification = classify_column(table, column, config=config)
        if classification.kind is not None:
            result[column] = classification.kind
    return result


def numeric_columns(table: pd.DataFrame, config: DQEConfig | None = None) -> list[str]:
    """Columns classified as numeric, in table order."""
    kinds = classify_columns(table, config=config)
    return [col for col, kind in kinds.items() if kind is ColumnKind.NUMERIC]


def format_cell(value: Any, decimals: int = 2) -> str:
    """
    Render a cell for display.

    Numbers are shown with a fixed number of decimals, booleans as
    Yes/No and missing values as the empty string.
    """
    if isinstance(value, (bool, np.bool_)):
        return "Yes" if value else "No"
    if is_missing(value):
        return ""
    if isinstance(value, _NUMBER_TYPES):
        number = parse_number(value)
        return str(value) if number is None else f"{number:.{decimals}f}"
    return str(value)
