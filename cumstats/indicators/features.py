# SPDX-License-Identifier: MIT
"""Feature adapters exposing the cumulative kernels through ``BaseFeature``."""

from __future__ import annotations

from typing import Any

from .base import BaseFeature, FeatureBlock, FeatureInput, FeatureResult
from .cumulative import (
    BATCH_COLUMNS,
    batch_cumulative_stats,
    default_initial_value,
    get_cumulative_function,
)

_COLUMN_BY_STATISTIC = dict(zip(("sum", "prod", "min", "max", "mean"), BATCH_COLUMNS))


class CumulativeStatFeature(BaseFeature):
    """Single cumulative statistic with a fixed initial value.

    Args:
        statistic: One of ``sum``, ``prod``, ``min``, ``max``, ``mean``
        initial_value: Offset (or product seed); ``None`` picks the
            statistic's neutral default
        name: Optional feature name (defaults to the batch column name)
    """

    def __init__(
        self,
        statistic: str,
        initial_value: float | None = None,
        *,
        name: str | None = None,
    ) -> None:
        self._func = get_cumulative_function(statistic)
        super().__init__(name or _COLUMN_BY_STATISTIC[statistic])
        self.statistic = statistic
        self.initial_value = (
            default_initial_value(statistic) if initial_value is None else float(initial_value)
        )

    def transform(self, data: FeatureInput, **kwargs: Any) -> FeatureResult:
        value = self._func(data, self.initial_value)
        return FeatureResult(
            name=self.name,
            value=value,
            metadata={
                "statistic": self.statistic,
                "initial_value": self.initial_value,
                "length": int(value.size),
            },
        )


class BatchCumulativeStatsFeature(BaseFeature):
    """All five cumulative statistics as one DataFrame."""

    statistic = "batch"

    def __init__(
        self,
        initial_value: float = 0.0,
        *,
        chunk_size: int | None = None,
        name: str | None = None,
    ) -> None:
        super().__init__(name or "cumulative_stats")
        self.initial_value = float(initial_value)
        self.chunk_size = chunk_size

    def transform(self, data: FeatureInput, **kwargs: Any) -> FeatureResult:
        frame = batch_cumulative_stats(data, self.initial_value, chunk_size=self.chunk_size)
        metadata: dict[str, Any] = {
            "statistic": self.statistic,
            "initial_value": self.initial_value,
            "length": len(frame),
        }
        if self.chunk_size is not None:
            metadata["chunk_size"] = self.chunk_size
        return FeatureResult(name=self.name, value=frame, metadata=metadata)


def build_cumulative_block(initial_value: float | None = None) -> FeatureBlock:
    """Block running the five single-stat features, keyed by batch column name.

    With ``initial_value=None`` each feature uses its own neutral default, so
    the product starts from 1.0 while the additive statistics start from 0.0.
    """
    features = [
        CumulativeStatFeature(statistic, initial_value)
        for statistic in _COLUMN_BY_STATISTIC
    ]
    return FeatureBlock(features, name="cumulative_stats")


__all__ = [
    "BatchCumulativeStatsFeature",
    "CumulativeStatFeature",
    "build_cumulative_block",
]
