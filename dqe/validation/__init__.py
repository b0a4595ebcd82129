"""
Correlation and cross-validation scaffolding for the forecasting layer.
"""

from dqe.validation.correlation import pearson, correlate_columns
from dqe.validation.cross_validation import (
    k_fold_indices,
    cross_validate,
    regression_metrics,
)

__all__ = [
    "pearson",
    "correlate_columns",
    "k_fold_indices",
    "cross_validate",
    "regression_metrics",
]
