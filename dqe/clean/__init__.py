"""
Data cleaning module for DQE.

Provides imputation and application of cleaning recommendations.
"""

from dqe.clean.cleaner import (
    Imputer,
    DataCleaner,
    impute_cell,
    preview_cleaning,
    apply_cleaning,
    apply_recommendations,
)

__all__ = [
    "Imputer",
    "DataCleaner",
    "impute_cell",
    "preview_cleaning",
    "apply_cleaning",
    "apply_recommendations",
]
