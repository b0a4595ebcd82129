"""
Date handling for time-series conditioning.

Provides the ordered registry of supported date layouts, format detection
over a column sample, parsing and formatting, sampling frequency inference
and future-date generation for forecast horizons.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any, Iterable, Sequence

import numpy as np
import pandas as pd

from dqe.utils.config import DQEConfig, get_config
from dqe.utils.logging import get_logger
from dqe.utils.types import DateFormat, Frequency

logger = get_logger("dates")

# Generic parser name used when no registered layout applies
AUTO_FORMAT = "auto"

SECONDS_PER_DAY = 86400.0


def _to_naive(ts: pd.Timestamp) -> pd.Timestamp:
    """Convert timezone-aware instants to naive UTC."""
    if ts.tzinfo is not None:
        return ts.tz_convert("UTC").tz_localize(None)
    return ts


def _build(year: str | int, month: str | int, day: str | int) -> pd.Timestamp | None:
    """Build a calendar date, None if it does not exist."""
    try:
        return pd.Timestamp(year=int(year), month=int(month), day=int(day))
    except (ValueError, OverflowError):
        return None


def _parse_iso(value: str) -> pd.Timestamp | None:
    try:
        ts = pd.Timestamp(value)
    except (ValueError, OverflowError):
        return None
    if pd.isna(ts):
        return None
    return _to_naive(ts)


def _parse_month_first(sep: str):
    def parser(value: str) -> pd.Timestamp | None:
        parts = value.split(sep)
        if len(parts) != 3:
            return None
        month, day, year = parts
        return _build(year, month, day)
    return parser


def _parse_day_first(sep: str):
    def parser(value: str) -> pd.Timestamp | None:
        parts = value.split(sep)
        if len(parts) != 3:
            return None
        day, month, year = parts
        return _build(year, month, day)
    return parser


def _parse_year_first(sep: str):
    def parser(value: str) -> pd.Timestamp | None:
        parts = value.split(sep)
        if len(parts) != 3:
            return None
        year, month, day = parts
        return _build(year, month, day)
    return parser


def _parse_short_year(value: str, pivot: int | None = None) -> pd.Timestamp | None:
    parts = value.split("/")
    if len(parts) != 3:
        return None
    month, day, year = parts
    if pivot is None:
        pivot = get_config().dates.two_digit_year_pivot
    short = int(year)
    full_year = 2000 + short if short < pivot else 1900 + short
    return _build(full_year, month, day)


DATE_FORMATS: tuple[DateFormat, ...] = (
    DateFormat(
        pattern=re.compile(r"^\d{4}-\d{2}-\d{2}$"),
        format="YYYY-MM-DD",
        description="ISO Date (YYYY-MM-DD)",
        parser=_parse_year_first("-"),
    ),
    DateFormat(
        pattern=re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}"),
        format="ISO",
        description="ISO DateTime",
        parser=_parse_iso,
    ),
    DateFormat(
        pattern=re.compile(r"^\d{2}/\d{2}/\d{4}$"),
        format="MM/DD/YYYY",
        description="US Date (MM/DD/YYYY)",
        parser=_parse_month_first("/"),
    ),
    DateFormat(
        pattern=re.compile(r"^\d{2}-\d{2}-\d{4}$"),
        format="MM-DD-YYYY",
        description="US Date with dashes (MM-DD-YYYY)",
        parser=_parse_month_first("-"),
    ),
    DateFormat(
        pattern=re.compile(r"^\d{4}/\d{2}/\d{2}$"),
        format="YYYY/MM/DD",
        description="International Date (YYYY/MM/DD)",
        parser=_parse_year_first("/"),
    ),
    DateFormat(
        pattern=re.compile(r"^\d{2}/\d{2}/\d{2}$"),
        format="MM/DD/YY",
        description="Short Year (MM/DD/YY)",
        parser=_parse_short_year,
    ),
    DateFormat(
        pattern=re.compile(r"^\d{1,2}/\d{1,2}/\d{4}$"),
        format="M/D/YYYY",
        description="Flexible US Date (M/D/YYYY)",
        parser=_parse_month_first("/"),
    ),
    DateFormat(
        pattern=re.compile(r"^\d{1,2}-\d{1,2}-\d{4}$"),
        format="M-D-YYYY",
        description="Flexible US Date with dashes (M-D-YYYY)",
        parser=_parse_month_first("-"),
    ),
    DateFormat(
        pattern=re.compile(r"^\d{2}\.\d{2}\.\d{4}$"),
        format="DD.MM.YYYY",
        description="European Date (DD.MM.YYYY)",
        parser=_parse_day_first("."),
    ),
    DateFormat(
        pattern=re.compile(r"^\d{2}/\d{2}/\d{4}$"),
        format="DD/MM/YYYY",
        description="European Date with slashes (DD/MM/YYYY)",
        parser=_parse_day_first("/"),
    ),
)


def get_date_format(name: str) -> DateFormat | None:
    """Look up a registered format by name."""
    for fmt in DATE_FORMATS:
        if fmt.format == name:
            return fmt
    return None


def _registry(day_first: bool) -> list[DateFormat]:
    """Registry in detection order, honouring a day-first hint."""
    formats = list(DATE_FORMATS)
    if day_first:
        us = formats.index(get_date_format("MM/DD/YYYY"))
        eu = formats.index(get_date_format("DD/MM/YYYY"))
        formats.insert(us, formats.pop(eu))
    return formats


def _parse_with(fmt: DateFormat, value: str) -> pd.Timestamp | None:
    try:
        return fmt.parser(value)
    except (ValueError, TypeError, OverflowError):
        return None


def detect_date_format(
    samples: Iterable[Any],
    day_first: bool | None = None,
    config: DQEConfig | None = None,
) -> DateFormat | None:
    """
    Detect the date layout of a column sample.

    Picks the earliest registered format whose pattern matches at least
    ``match_threshold`` of the non-empty string samples and whose parser
    yields a valid date on at least ``parse_threshold`` of those matches.

    Parameters
    ----------
    samples : Iterable[Any]
        Column values; non-strings and blank strings are ignored.
    day_first : bool | None
        Try DD/MM/YYYY before MM/DD/YYYY. Uses config if None.
    config : DQEConfig | None
        Configuration. Uses global if None.

    Returns
    -------
    DateFormat | None
        Detected format, None if no format qualifies.
    """
    config = config or get_config()
    date_config = config.dates
    if day_first is None:
        day_first = date_config.day_first

    values = [s for s in samples if isinstance(s, str) and s.strip() != ""]
    if not values:
        return None

    for fmt in _registry(day_first):
        matches = [v for v in values if fmt.matches(v)]
        match_rate = len(matches) / len(values)
        if match_rate < date_config.match_threshold:
            continue

        parsed = sum(1 for v in matches if _parse_with(fmt, v) is not None)
        if parsed / len(matches) >= date_config.parse_threshold:
            logger.debug(f"Detected date format {fmt.format} (match rate {match_rate:.2f})")
            return fmt

    return None


def is_valid_date_format(value: Any, fmt: DateFormat) -> bool:
    """Check that a value has the layout of ``fmt`` and names a real date."""
    if not isinstance(value, str) or not value:
        return False
    if not fmt.matches(value):
        return False
    return _parse_with(fmt, value) is not None


def parse_date(value: Any, fmt: DateFormat | str = AUTO_FORMAT) -> pd.Timestamp | None:
    """
    Parse a cell to an instant.

    Parameters
    ----------
    value : Any
        Cell value. Datetime-like values are returned as instants.
    fmt : DateFormat | str
        Format object or registered name. Unknown names use the
        generic ISO-like parser.

    Returns
    -------
    pd.Timestamp | None
        Parsed instant, None when invalid.
    """
    if isinstance(value, (pd.Timestamp, datetime, date, np.datetime64)):
        ts = pd.Timestamp(value)
        return None if pd.isna(ts) else _to_naive(ts)

    if not isinstance(value, str) or value.strip() == "":
        return None

    if isinstance(fmt, str):
        registered = get_date_format(fmt)
        if registered is None:
            return _parse_generic(value)
        fmt = registered

    return _parse_with(fmt, value)


def _parse_generic(value: str) -> pd.Timestamp | None:
    ts = pd.to_datetime(value.strip(), errors="coerce")
    if pd.isna(ts):
        return None
    return _to_naive(pd.Timestamp(ts))


def parse_date_column(
    series: pd.Series,
    fmt: DateFormat | str | None = None,
    config: DQEConfig | None = None,
) -> pd.Series:
    """
    Parse a whole column to instants.

    Parameters
    ----------
    series : pd.Series
        Raw time column.
    fmt : DateFormat | str | None
        Format to use. Detected from the column's string cells if None.
    config : DQEConfig | None
        Configuration. Uses global if None.

    Returns
    -------
    pd.Series
        datetime64 series with NaT where parsing failed.
    """
    if fmt is None:
        detected = detect_date_format(series.tolist(), config=config)
        fmt = detected if detected is not None else AUTO_FORMAT

    parsed = [parse_date(v, fmt) for v in series.tolist()]
    return pd.Series(
        [pd.NaT if ts is None else ts for ts in parsed],
        index=series.index,
        dtype="datetime64[ns]",
    )


def format_date(instant: pd.Timestamp | datetime, fmt: str) -> str:
    """
    Format an instant with a named layout.

    Unknown layout names fall back to the ISO date.
    """
    ts = pd.Timestamp(instant)
    year = f"{ts.year:04d}"
    month = f"{ts.month:02d}"
    day = f"{ts.day:02d}"

    layouts = {
        "YYYY-MM-DD": f"{year}-{month}-{day}",
        "MM/DD/YYYY": f"{month}/{day}/{year}",
        "DD/MM/YYYY": f"{day}/{month}/{year}",
        "MM-DD-YYYY": f"{month}-{day}-{year}",
        "DD-MM-YYYY": f"{day}-{month}-{year}",
        "YYYY/MM/DD": f"{year}/{month}/{day}",
    }
    return layouts.get(fmt, f"{year}-{month}-{day}")


def day_differences(instants: Sequence[pd.Timestamp]) -> np.ndarray:
    """Sorted consecutive gaps between instants, in days."""
    stamps = sorted(pd.Timestamp(t) for t in instants if t is not None and not pd.isna(t))
    if len(stamps) < 2:
        return np.array([], dtype=float)
    return np.array(
        [(b - a).total_seconds() / SECONDS_PER_DAY for a, b in zip(stamps[:-1], stamps[1:])],
        dtype=float,
    )


def infer_frequency(
    instants: Sequence[pd.Timestamp],
    config: DQEConfig | None = None,
) -> Frequency:
    """
    Infer the sampling frequency of a set of instants.

    Parameters
    ----------
    instants : Sequence[pd.Timestamp]
        Instants in any order; missing entries are ignored.
    config : DQEConfig | None
        Configuration. Uses global if None.

    Returns
    -------
    Frequency
        Daily, weekly, monthly or yearly when the mean gap is within
        tolerance of the nominal spacing and gaps are regular;
        irregular otherwise.
    """
    config = config or get_config()

    gaps = day_differences(instants)
    if len(gaps) == 0:
        return Frequency.IRREGULAR

    mean_gap = float(np.mean(gaps))
    std_gap = float(np.std(gaps))
    tolerance = config.dates.frequency_tolerance * mean_gap

    for frequency in (Frequency.DAILY, Frequency.WEEKLY, Frequency.MONTHLY, Frequency.YEARLY):
        if abs(mean_gap - frequency.nominal_days) <= tolerance and std_gap <= tolerance:
            return frequency

    return Frequency.IRREGULAR


def generate_future(
    last: pd.Timestamp | datetime,
    count: int,
    frequency: Frequency | str,
) -> list[pd.Timestamp]:
    """
    Generate instants following ``last`` at a given frequency.

    Parameters
    ----------
    last : pd.Timestamp | datetime
        Last observed instant (not included in the output).
    count : int
        Number of instants to generate.
    frequency : Frequency | str
        Step frequency. Monthly and yearly steps are calendar additions
        with the day of month clamped to the target month.

    Returns
    -------
    list[pd.Timestamp]
        ``count`` future instants; empty for an irregular frequency.

    Raises
    ------
    ValueError
        If count is negative or the frequency name is unknown.
    """
    if count < 0:
        raise ValueError(f"count must be non-negative, got {count}")

    if not isinstance(frequency, Frequency):
        frequency = Frequency(str(frequency).lower())

    if frequency is Frequency.IRREGULAR:
        logger.warning("Cannot generate future dates for an irregular series")
        return []

    start = pd.Timestamp(last)
    return [start + frequency.offset(i) for i in range(1, count + 1)]
