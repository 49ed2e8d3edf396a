# SPDX-License-Identifier: MIT
"""Shared fixtures for the cumstats test suite."""
from __future__ import annotations

import logging
from typing import Iterator

import numpy as np
import pytest


@pytest.fixture
def daily_returns() -> np.ndarray:
    """A year of reproducible daily simple returns."""
    rng = np.random.default_rng(20240101)
    return rng.normal(loc=0.0005, scale=0.01, size=252)


@pytest.fixture
def worked_example() -> tuple[np.ndarray, float]:
    """Three-element series with a 10.0 offset used across the suite."""
    return np.array([1.0, -2.0, 3.0]), 10.0


@pytest.fixture(autouse=True)
def _reset_cumstats_logger() -> Iterator[None]:
    """Undo ``configure_logging`` side effects between tests."""
    yield
    package_logger = logging.getLogger("cumstats")
    package_logger.handlers.clear()
    package_logger.setLevel(logging.NOTSET)
