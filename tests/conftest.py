"""
Pytest configuration and shared fixtures for DQE test suite.

This file is automatically loaded by pytest and provides shared fixtures
that can be used across all test modules.
"""

import numpy as np
import pandas as pd
import pytest

from dqe.utils.config import load_config, set_config, DQEConfig
from dqe.utils.types import as_table


@pytest.fixture(autouse=True)
def reset_global_config():
    """Restore the default global configuration after every test."""
    yield
    set_config(load_config())


@pytest.fixture
def config() -> DQEConfig:
    """Load default configuration for tests."""
    return load_config()


@pytest.fixture
def linear_config() -> DQEConfig:
    """Configuration using linear-interpolated quartiles."""
    cfg = load_config()
    cfg.profiling.quantile_method = "linear"
    return cfg


@pytest.fixture
def profile_table() -> pd.DataFrame:
    """Small column with one gap and one large value."""
    return as_table([{"a": 1}, {"a": 2}, {"a": 3}, {"a": 100}, {"a": None}])


@pytest.fixture
def outlier_table() -> pd.DataFrame:
    """Column with one Tukey outlier and one unparseable cell."""
    values = [10, 11, 12, 13, 14, 15, 16, 17, 18, 1000, "x"]
    return as_table([{"value": v} for v in values])


@pytest.fixture
def gap_table() -> pd.DataFrame:
    """Column with a single gap, for imputation."""
    return as_table([{"a": 10}, {"a": None}, {"a": 20}, {"a": 60}])


@pytest.fixture
def series_rows() -> list[dict]:
    """Thirty daily observations with two gaps in the value column."""
    dates = pd.date_range("2024-01-01", periods=30, freq="D")
    rows = []
    for i, day in enumerate(dates):
        rows.append({
            "date": day.strftime("%Y-%m-%d"),
            "sales": None if i in (5, 12) else 100 + i,
            "feature": 2 * i,
        })
    return rows


@pytest.fixture
def random_values() -> np.ndarray:
    """Reproducible noisy values."""
    np.random.seed(42)
    return np.random.normal(50, 10, 200)


@pytest.fixture
def empty_df() -> pd.DataFrame:
    """Create an empty DataFrame for edge case testing."""
    return pd.DataFrame()
