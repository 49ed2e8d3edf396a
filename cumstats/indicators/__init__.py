# SPDX-License-Identifier: MIT
"""Cumulative statistic kernels and their feature adapters."""

from .base import BaseBlock, BaseFeature, FeatureBlock, FeatureResult
from .cumulative import (
    BATCH_COLUMNS,
    CUMULATIVE_FUNCTIONS,
    DEFAULT_CHUNK_SIZE,
    batch_cumulative_stats,
    cumulative_max_init,
    cumulative_mean_init,
    cumulative_min_init,
    cumulative_product_init,
    cumulative_sum_init,
    default_initial_value,
    get_cumulative_function,
)
from .errors import CumulativeStatsError, EmptyInputError, ErrorContext, InputShapeError
from .features import (
    BatchCumulativeStatsFeature,
    CumulativeStatFeature,
    build_cumulative_block,
)

__all__ = [
    "BATCH_COLUMNS",
    "CUMULATIVE_FUNCTIONS",
    "DEFAULT_CHUNK_SIZE",
    "BaseBlock",
    "BaseFeature",
    "BatchCumulativeStatsFeature",
    "CumulativeStatFeature",
    "CumulativeStatsError",
    "EmptyInputError",
    "ErrorContext",
    "FeatureBlock",
    "FeatureResult",
    "InputShapeError",
    "batch_cumulative_stats",
    "build_cumulative_block",
    "cumulative_max_init",
    "cumulative_mean_init",
    "cumulative_min_init",
    "cumulative_product_init",
    "cumulative_sum_init",
    "default_initial_value",
    "get_cumulative_function",
]
