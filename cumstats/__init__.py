# SPDX-License-Identifier: MIT
"""Vectorized cumulative statistics with initial-value offsets."""

from .indicators.cumulative import (
    BATCH_COLUMNS,
    batch_cumulative_stats,
    cumulative_max_init,
    cumulative_mean_init,
    cumulative_min_init,
    cumulative_product_init,
    cumulative_sum_init,
)
from .indicators.errors import CumulativeStatsError, EmptyInputError, InputShapeError

__version__ = "0.1.0"

__all__ = [
    "BATCH_COLUMNS",
    "CumulativeStatsError",
    "EmptyInputError",
    "InputShapeError",
    "batch_cumulative_stats",
    "cumulative_max_init",
    "cumulative_mean_init",
    "cumulative_min_init",
    "cumulative_product_init",
    "cumulative_sum_init",
]
