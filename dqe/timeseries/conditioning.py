"""
Time-series conditioning for DQE.

Provides time-weighted gap interpolation, centered moving-average
smoothing, a rolling-window stationarity diagnostic and validation of a
series before it is handed to a forecaster.

The numeric functions (``interpolate_values``, ``moving_average``) work on
float arrays. The table functions format filled cells as fixed-decimal
strings and flag them with boolean marker columns.
"""

from __future__ import annotations

from typing import Any, Sequence

import numpy as np
import pandas as pd

from dqe.classify.classifier import coerce_numeric
from dqe.dates.date_engine import parse_date_column
from dqe.profile.profiler import ColumnProfiler
from dqe.utils.config import DQEConfig, get_config
from dqe.utils.logging import get_logger
from dqe.utils.types import (
    ErrorKind,
    StationarityResult,
    TimeSeriesValidation,
)

logger = get_logger("timeseries")


def _epoch_ms(instants: pd.Series) -> np.ndarray:
    """Milliseconds since the Unix epoch, NaN where the instant is missing."""
    delta = instants - pd.Timestamp(0)
    return (delta.dt.total_seconds() * 1000).to_numpy(dtype=float)


def _mark(table: pd.DataFrame, marker: str, mask: np.ndarray) -> None:
    """OR new flags into a marker column, creating it if needed."""
    if marker in table.columns:
        existing = table[marker].fillna(False).astype(bool).to_numpy()
        table[marker] = existing | mask
    else:
        table[marker] = mask


def _write_values(
    table: pd.DataFrame, column: str, values: np.ndarray, mask: np.ndarray, decimals: int
) -> None:
    """Write formatted values into the flagged rows of a column."""
    if not mask.any():
        return
    table[column] = table[column].astype(object)
    loc = table.columns.get_loc(column)
    for idx in np.flatnonzero(mask):
        table.iat[idx, loc] = f"{values[idx]:.{decimals}f}"


def interpolate_values(
    values: Sequence[float] | np.ndarray,
    times: Sequence[float] | np.ndarray | None = None,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Fill gaps in an ordered series.

    Parameters
    ----------
    values : array-like
        Values in time order; NaN marks a gap.
    times : array-like | None
        Time coordinate of each value (NaN if unknown). Positions are
        used if None.

    Returns
    -------
    tuple[np.ndarray, np.ndarray]
        (Filled values, boolean mask of filled positions)

    Notes
    -----
    - Gaps between two valid values are filled by time-weighted linear
      interpolation, or by the midpoint when a time is unknown or the
      two neighbours share the same time.
    - Leading and trailing gaps carry the nearest valid value.
    - A series without valid values is returned unchanged.
    """
    values = np.asarray(values, dtype=float)
    n = len(values)
    times = np.arange(n, dtype=float) if times is None else np.asarray(times, dtype=float)

    result = values.copy()
    filled = np.zeros(n, dtype=bool)

    valid = np.isfinite(values)
    if n == 0 or not valid.any():
        return result, filled

    positions = pd.Series(np.where(valid, np.arange(n), np.nan))
    prev_idx = positions.ffill().to_numpy()
    next_idx = positions.bfill().to_numpy()

    for i in np.flatnonzero(~valid):
        has_prev = not np.isnan(prev_idx[i])
        has_next = not np.isnan(next_idx[i])

        if has_prev and has_next:
            p, nx = int(prev_idx[i]), int(next_idx[i])
            tp, ti, tn = times[p], times[i], times[nx]
            if np.isfinite([tp, ti, tn]).all() and tn != tp:
                ratio = (ti - tp) / (tn - tp)
                result[i] = values[p] + (values[nx] - values[p]) * ratio
            else:
                result[i] = (values[p] + values[nx]) / 2
        elif has_prev:
            result[i] = values[int(prev_idx[i])]
        else:
            result[i] = values[int(next_idx[i])]

        filled[i] = True

    return result, filled


def moving_average(
    values: Sequence[float] | np.ndarray, window: int
) -> tuple[np.ndarray, np.ndarray]:
    """
    Centered moving average that leaves the edges untouched.

    Parameters
    ----------
    values : array-like
        Values in order; non-finite entries are ignored in each window.
    window : int
        Window size. Half-window is ``window // 2``; sizes below 2 are a
        no-op.

    Returns
    -------
    tuple[np.ndarray, np.ndarray]
        (Smoothed values, boolean mask of smoothed positions)
    """
    values = np.asarray(values, dtype=float)
    n = len(values)
    result = values.copy()
    smoothed = np.zeros(n, dtype=bool)

    if window < 2:
        return result, smoothed

    half = window // 2
    if n <= 2 * half:
        return result, smoothed

    clean = pd.Series(np.where(np.isfinite(values), values, np.nan))
    means = clean.rolling(window=2 * half + 1, center=True, min_periods=1).mean().to_numpy()

    interior = np.zeros(n, dtype=bool)
    interior[half:n - half] = True
    smoothed = interior & ~np.isnan(means)
    result[smoothed] = means[smoothed]

    return result, smoothed


def interpolate(
    table: pd.DataFrame,
    value_column: str,
    time_column: str,
    config: DQEConfig | None = None,
) -> pd.DataFrame:
    """
    Fill missing values of a column by time-aware interpolation.

    Rows are stable-sorted by the parsed time column (rows whose time
    does not parse go last) and the positional index is reset. Filled
    cells hold fixed-decimal strings and are flagged in the
    interpolation marker column.

    Parameters
    ----------
    table : pd.DataFrame
        Input table; left unmodified.
    value_column : str
        Column to fill.
    time_column : str
        Column holding the time axis.
    config : DQEConfig | None
        Configuration. Uses global if None.

    Returns
    -------
    pd.DataFrame
        New table.
    """
    config = config or get_config()
    ts_config = config.timeseries

    if value_column not in table.columns or time_column not in table.columns:
        logger.debug(f"{ErrorKind.COLUMN_MISSING.value}: '{value_column}' or '{time_column}'")
        return table.copy()
    if table.empty:
        return table.copy()

    instants = parse_date_column(table[time_column], config=config)
    times = _epoch_ms(instants)

    order = (
        pd.Series(times)
        .sort_values(kind="stable", na_position="last")
        .index.to_numpy()
    )
    result = table.iloc[order].reset_index(drop=True)
    times = times[order]

    values = coerce_numeric(result[value_column]).to_numpy(dtype=float)
    filled_values, filled = interpolate_values(values, times)

    _write_values(result, value_column, filled_values, filled, ts_config.decimals)
    _mark(result, ts_config.interpolated_marker, filled)

    logger.debug(f"Interpolated {int(filled.sum())} cells in '{value_column}'")
    return result


def smooth(
    table: pd.DataFrame,
    value_column: str,
    window: int | None = None,
    config: DQEConfig | None = None,
) -> pd.DataFrame:
    """
    Centered moving-average smoothing of a column.

    Parameters
    ----------
    table : pd.DataFrame
        Input table; left unmodified.
    value_column : str
        Column to smooth.
    window : int | None
        Window size. Config default if None; sizes below 2 are a no-op.
    config : DQEConfig | None
        Configuration. Uses global if None.

    Returns
    -------
    pd.DataFrame
        New table with smoothed cells flagged in the smoothing marker
        column. Cells within ``window // 2`` of either end are unchanged.
    """
    config = config or get_config()
    ts_config = config.timeseries
    if window is None:
        window = ts_config.smoothing_window

    result = table.copy()
    if value_column not in table.columns or window < 2:
        return result

    values = coerce_numeric(result[value_column]).to_numpy(dtype=float)
    smoothed_values, smoothed = moving_average(values, window)

    _write_values(result, value_column, smoothed_values, smoothed, ts_config.decimals)
    _mark(result, ts_config.smoothed_marker, smoothed)

    return result


def check_stationarity(
    values: Sequence[Any] | np.ndarray | pd.Series,
    config: DQEConfig | None = None,
) -> StationarityResult:
    """
    Rolling-window stationarity diagnostic.

    Splits the series into consecutive windows of ``n // 4`` values and
    compares the spread of window means and window (population) variances
    against 10% of their (signed) averages. A zero spread always passes;
    otherwise a series with a non-positive mean level is non-stationary.

    Parameters
    ----------
    values : array-like
        Numeric series; non-finite entries are dropped.
    config : DQEConfig | None
        Configuration. Uses global if None.

    Returns
    -------
    StationarityResult
        Non-stationary with zero variations when fewer than the minimum
        number of values are available.
    """
    config = config or get_config()
    ts_config = config.timeseries

    arr = coerce_numeric(pd.Series(list(values), dtype=object)).to_numpy(dtype=float)
    arr = arr[np.isfinite(arr)]
    n = len(arr)

    if n < ts_config.stationarity_min_values:
        logger.debug(f"{ErrorKind.INSUFFICIENT_DATA.value}: {n} values for stationarity")
        return StationarityResult(is_stationary=False, mean_variation=0.0, variance_variation=0.0)

    window = n // ts_config.stationarity_windows
    means = []
    variances = []
    for start in range(0, n - window, window):
        segment = arr[start:start + window]
        means.append(float(np.mean(segment)))
        variances.append(float(np.var(segment)))

    mean_variation = max(means) - min(means)
    variance_variation = max(variances) - min(variances)
    tolerance = ts_config.stationarity_tolerance

    def within(variation: float, reference: float) -> bool:
        return variation == 0 or variation < tolerance * reference

    is_stationary = within(mean_variation, float(np.mean(means))) and within(
        variance_variation, float(np.mean(variances))
    )

    return StationarityResult(
        is_stationary=is_stationary,
        mean_variation=mean_variation,
        variance_variation=variance_variation,
        means=means,
        variances=variances,
    )


def validate_time_series(
    instants: Sequence[Any],
    values: Sequence[Any],
    config: DQEConfig | None = None,
) -> TimeSeriesValidation:
    """
    Validate a series before forecasting.

    Parameters
    ----------
    instants : Sequence[Any]
        Time of each observation; None or NaT marks an invalid date.
    values : Sequence[Any]
        Observed values.
    config : DQEConfig | None
        Configuration. Uses global if None.

    Returns
    -------
    TimeSeriesValidation
        Issues block forecasting; warnings do not.
    """
    config = config or get_config()
    val_config = config.validation

    issues: list[str] = []
    warnings: list[str] = []

    if len(instants) != len(values):
        issues.append("Time and value sequences have different lengths")
        return TimeSeriesValidation(
            is_valid=False,
            issues=issues,
            warnings=warnings,
            statistics=_empty_statistics(),
        )

    numeric = coerce_numeric(pd.Series(list(values), dtype=object)).to_numpy(dtype=float)
    total_rows = len(numeric)
    missing_values = 0
    valid_data = []

    for i, (instant, value) in enumerate(zip(instants, numeric)):
        if instant is None or pd.isna(instant):
            issues.append(f"Invalid date at index {i}")
            continue
        if np.isnan(value):
            missing_values += 1
            continue
        valid_data.append(value)

    valid_rows = len(valid_data)
    if valid_rows < val_config.min_points:
        issues.append(
            f"Not enough valid data points (minimum {val_config.min_points} required)"
        )
    if valid_rows < total_rows * (1 - val_config.max_missing_ratio):
        warnings.append(
            f"More than {val_config.max_missing_ratio:.0%} of the data is missing"
        )

    if valid_rows == 0:
        return TimeSeriesValidation(
            is_valid=False,
            issues=issues,
            warnings=warnings,
            statistics=_empty_statistics(total_rows=total_rows, missing_values=missing_values),
        )

    data = np.asarray(valid_data, dtype=float)
    lower_bound, upper_bound = ColumnProfiler(config).fences(data)
    outliers = int(((data < lower_bound) | (data > upper_bound)).sum())
    if outliers > valid_rows * val_config.max_outlier_ratio:
        warnings.append(f"{outliers} outliers detected ({outliers / valid_rows:.1%})")

    statistics = {
        "totalRows": total_rows,
        "validRows": valid_rows,
        "missingValues": missing_values,
        "outliers": outliers,
        "minValue": float(data.min()),
        "maxValue": float(data.max()),
        "mean": float(data.mean()),
        "std": float(data.std()),
        "isStationary": check_stationarity(data, config=config).is_stationary,
    }

    return TimeSeriesValidation(
        is_valid=not issues and valid_rows >= val_config.min_points,
        issues=issues,
        warnings=warnings,
        statistics=statistics,
    )


def _empty_statistics(total_rows: int = 0, missing_values: int = 0) -> dict[str, Any]:
    return {
        "totalRows": total_rows,
        "validRows": 0,
        "missingValues": missing_values,
        "outliers": 0,
        "minValue": 0.0,
        "maxValue": 0.0,
        "mean": 0.0,
        "std": 0.0,
        "isStationary": False,
    }
