"""
Time-series conditioning module for DQE.

Provides interpolation, smoothing, stationarity and series validation.
"""

from dqe.timeseries.conditioning import (
    interpolate,
    interpolate_values,
    smooth,
    moving_average,
    check_stationarity,
    validate_time_series,
)

__all__ = [
    "interpolate",
    "interpolate_values",
    "smooth",
    "moving_average",
    "check_stationarity",
    "validate_time_series",
]
