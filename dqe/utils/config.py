"""
Configuration management for the DQE data-quality engine.

Provides centralized configuration loading, validation, and access patterns.
Defaults reproduce the thresholds the dashboard relies on; a YAML file can
override any of them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml


DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "config" / "default.yaml"


@dataclass
class ProfilingConfig:
    """Column profiling thresholds."""
    missing_delete_threshold: float = 50.0
    outlier_median_threshold: float = 30.0
    iqr_multiplier: float = 1.5
    quantile_method: str = "position"


@dataclass
class DateConfig:
    """Date detection and frequency inference parameters."""
    match_threshold: float = 0.8
    parse_threshold: float = 0.9
    two_digit_year_pivot: int = 50
    day_first: bool = False
    frequency_tolerance: float = 0.2


@dataclass
class ImputationConfig:
    """Cell imputation parameters."""
    decimals: int = 2
    deleted_marker: str = "DELETED"
    preview_limit: int = 5


@dataclass
class TimeSeriesConfig:
    """Interpolation, smoothing and stationarity parameters."""
    decimals: int = 2
    smoothing_window: int = 3
    interpolated_marker: str = "__interpolated"
    smoothed_marker: str = "__smoothed"
    stationarity_min_values: int = 10
    stationarity_windows: int = 4
    stationarity_tolerance: float = 0.1


@dataclass
class ValidationConfig:
    """Cross-validation and forecast input validation parameters."""
    n_folds: int = 5
    min_points: int = 10
    max_missing_ratio: float = 0.2
    max_outlier_ratio: float = 0.1


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: str | None = None


@dataclass
class DQEConfig:
    """
    Master configuration container for DQE.

    Aggregates all sub-configurations into a single access point.
    """
    profiling: ProfilingConfig = field(default_factory=ProfilingConfig)
    dates: DateConfig = field(default_factory=DateConfig)
    imputation: ImputationConfig = field(default_factory=ImputationConfig)
    timeseries: TimeSeriesConfig = field(default_factory=TimeSeriesConfig)
    validation: ValidationConfig = field(default_factory=ValidationConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


_SECTIONS: dict[str, type] = {
    "profiling": ProfilingConfig,
    "dates": DateConfig,
    "imputation": ImputationConfig,
    "timeseries": TimeSeriesConfig,
    "validation": ValidationConfig,
    "logging": LoggingConfig,
}


def _parse_section(data: dict[str, Any], config_class: type) -> Any:
    """Build a section dataclass, ignoring unknown keys."""
    known = config_class.__dataclass_fields__.keys()
    return config_class(**{k: v for k, v in data.items() if k in known})


def load_config(config_path: str | Path | None = None) -> DQEConfig:
    """
    Load configuration from YAML file.

    Parameters
    ----------
    config_path : str | Path | None
        Path to configuration file. If None, uses ``config/default.yaml``
        when present and built-in defaults otherwise.

    Returns
    -------
    DQEConfig
        Loaded configuration object.

    Raises
    ------
    FileNotFoundError
        If an explicitly specified config file does not exist.
    """
    if config_path is None:
        if not DEFAULT_CONFIG_PATH.exists():
            return DQEConfig()
        config_path = DEFAULT_CONFIG_PATH

    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path) as f:
        raw_config = yaml.safe_load(f) or {}

    config = DQEConfig()

    for name, config_class in _SECTIONS.items():
        if name in raw_config and isinstance(raw_config[name], dict):
            setattr(config, name, _parse_section(raw_config[name], config_class))

    return config


_global_config: DQEConfig | None = None


def get_config() -> DQEConfig:
    """
    Get global configuration instance.

    Loads default configuration on first access.

    Returns
    -------
    DQEConfig
        Global configuration object.
    """
    global _global_config
    if _global_config is None:
        _global_config = load_config()
    return _global_config


def set_config(config: DQEConfig) -> None:
    """
    Set global configuration instance.

    Parameters
    ----------
    config : DQEConfig
        Configuration to set as global.
    """
    global _global_config
    _global_config = config
