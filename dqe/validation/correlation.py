"""
Correlation analysis between feature columns and a forecast target.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
import pandas as pd
from scipy import stats

from dqe.classify.classifier import coerce_numeric
from dqe.utils.logging import get_logger
from dqe.utils.types import ErrorKind

logger = get_logger("validation.correlation")


def pearson(xs: Sequence[float] | np.ndarray, ys: Sequence[float] | np.ndarray) -> float | None:
    """
    Pearson correlation coefficient.

    Parameters
    ----------
    xs, ys : array-like
        Equal-length numeric sequences.

    Returns
    -------
    float | None
        Coefficient in [-1, 1]; None when undefined (different lengths,
        fewer than two points, non-finite input or zero variance).
    """
    x = np.asarray(xs, dtype=float)
    y = np.asarray(ys, dtype=float)

    if x.shape != y.shape or x.ndim != 1 or len(x) < 2:
        return None
    if not (np.isfinite(x).all() and np.isfinite(y).all()):
        return None

    ss_x = np.sum((x - x.mean()) ** 2)
    ss_y = np.sum((y - y.mean()) ** 2)
    if ss_x == 0 or ss_y == 0:
        logger.debug(f"{ErrorKind.DEGENERATE_STATISTIC.value}: zero variance")
        return None

    r, _ = stats.pearsonr(x, y)
    if not np.isfinite(r):
        return None
    return float(np.clip(r, -1.0, 1.0))


def correlate_columns(
    table: pd.DataFrame,
    target: str,
    columns: list[str] | None = None,
) -> dict[str, float]:
    """
    Correlation of each feature column with a target column.

    Parameters
    ----------
    table : pd.DataFrame
        Input table.
    target : str
        Target column.
    columns : list[str] | None
        Feature columns. All other columns if None.

    Returns
    -------
    dict[str, float]
        Feature to coefficient, in column order. The target and columns
        with an undefined coefficient are omitted. Only rows where both
        cells parse are used.
    """
    if target not in table.columns or table.empty:
        return {}

    if columns is None:
        columns = list(table.columns)

    target_values = coerce_numeric(table[target])
    correlations = {}

    for column in columns:
        if column == target or column not in table.columns:
            continue

        feature_values = coerce_numeric(table[column])
        both = target_values.notna() & feature_values.notna()
        r = pearson(feature_values[both].to_numpy(), target_values[both].to_numpy())
        if r is not None:
            correlations[column] = r

    return correlations
