"""
Value classification module for DQE.

Decides whether cells and columns are numeric, dates or categorical.
"""

from dqe.classify.classifier import (
    is_missing,
    parse_number,
    is_numeric,
    coerce_numeric,
    classify_column,
    classify_columns,
    numeric_columns,
    format_cell,
)

__all__ = [
    "is_missing",
    "parse_number",
    "is_numeric",
    "coerce_numeric",
    "classify_column",
    "classify_columns",
    "numeric_columns",
    "format_cell",
]
