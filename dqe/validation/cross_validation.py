"""
Cross-validation scaffolding for the forecasting layer.

Provides contiguous k-fold index partitions, a fold runner that delegates
scoring to an injected callable, and the regression metrics used to
report forecast accuracy.
"""

from __future__ import annotations

from typing import Callable, Sequence

import numpy as np
import pandas as pd

from dqe.utils.config import DQEConfig, get_config
from dqe.utils.logging import get_logger
from dqe.utils.types import FoldIndices, ModelMetrics

logger = get_logger("validation.cv")

Scorer = Callable[[np.ndarray, np.ndarray], float]


def k_fold_indices(n: int, k: int | None = None, config: DQEConfig | None = None) -> list[FoldIndices]:
    """
    Contiguous k-fold partitions of ``range(n)``.

    Parameters
    ----------
    n : int
        Number of rows.
    k : int | None
        Number of folds. Config default (5) if None.
    config : DQEConfig | None
        Configuration. Uses global if None.

    Returns
    -------
    list[FoldIndices]
        Fold ``i`` tests rows ``[i * size, (i + 1) * size)`` with
        ``size = n // k`` and trains on the rest. When ``n`` is not a
        multiple of ``k`` the trailing rows are never tested; when ``n < k``
        every test set is empty. Empty list when ``k < 1``.
    """
    if k is None:
        k = (config or get_config()).validation.n_folds

    if k < 1:
        return []

    fold_size = n // k
    all_rows = np.arange(n)
    folds = []

    for i in range(k):
        test = np.arange(i * fold_size, (i + 1) * fold_size)
        train = np.concatenate([all_rows[:i * fold_size], all_rows[(i + 1) * fold_size:]])
        folds.append(FoldIndices(fold=i + 1, train=train, test=test))

    return folds


def cross_validate(
    n: int,
    scorer: Scorer,
    k: int | None = None,
    config: DQEConfig | None = None,
) -> pd.DataFrame:
    """
    Run a scorer over k contiguous folds.

    Parameters
    ----------
    n : int
        Number of rows.
    scorer : Callable[[np.ndarray, np.ndarray], float]
        Called with (train indices, test indices); returns the fold score.
    k : int | None
        Number of folds. Config default if None.
    config : DQEConfig | None
        Configuration. Uses global if None.

    Returns
    -------
    pd.DataFrame
        Columns ``fold`` and ``score``, one row per fold.
    """
    records = []
    for fold in k_fold_indices(n, k, config=config):
        score = float(scorer(fold.train, fold.test))
        records.append({"fold": fold.fold, "score": score})
        logger.debug(f"Fold {fold.fold}: score={score:.4f}")

    return pd.DataFrame(records, columns=["fold", "score"])


def regression_metrics(
    actual: Sequence[float] | np.ndarray,
    predicted: Sequence[float] | np.ndarray,
) -> ModelMetrics:
    """
    Forecast accuracy metrics.

    Parameters
    ----------
    actual : array-like
        Observed values.
    predicted : array-like
        Predicted values, same length.

    Returns
    -------
    ModelMetrics
        RMSE, MAE, MAPE (zero actuals skipped), R² (1 when the actuals
        are constant), adjusted R², AIC and BIC.

    Raises
    ------
    ValueError
        If the inputs are empty or differ in length.
    """
    actual = np.asarray(actual, dtype=float)
    predicted = np.asarray(predicted, dtype=float)

    if len(actual) != len(predicted) or len(actual) == 0:
        raise ValueError("actual and predicted must be non-empty and of equal length")

    n = len(actual)
    residuals = actual - predicted
    ss_res = float(np.sum(residuals ** 2))
    ss_tot = float(np.sum((actual - actual.mean()) ** 2))

    nonzero = actual != 0
    mape = float(np.sum(np.abs(residuals[nonzero] / actual[nonzero])) / n * 100)

    r2 = 1.0 if ss_tot == 0 else 1 - ss_res / ss_tot
    adjusted_r2 = 1 - (1 - r2) * (n - 1) / (n - 2) if n > 2 else np.nan

    with np.errstate(divide="ignore"):
        log_likelihood_term = n * np.log(ss_res / n)

    return ModelMetrics(
        rmse=float(np.sqrt(ss_res / n)),
        mae=float(np.mean(np.abs(residuals))),
        mape=mape,
        r2=float(r2),
        adjusted_r2=float(adjusted_r2),
        aic=float(log_likelihood_term + 2 * 2),
        bic=float(log_likelihood_term + 2 * np.log(n)),
    )
