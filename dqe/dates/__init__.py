"""
Date engine for DQE.

Provides format detection, parsing, formatting, frequency inference
and future-date generation.
"""

from dqe.dates.date_engine import (
    DATE_FORMATS,
    AUTO_FORMAT,
    get_date_format,
    detect_date_format,
    is_valid_date_format,
    parse_date,
    parse_date_column,
    format_date,
    infer_frequency,
    generate_future,
)

__all__ = [
    "DATE_FORMATS",
    "AUTO_FORMAT",
    "get_date_format",
    "detect_date_format",
    "is_valid_date_format",
    "parse_date",
    "parse_date_column",
    "format_date",
    "infer_frequency",
    "generate_future",
]
