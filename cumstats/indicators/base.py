# SPDX-License-Identifier: MIT
"""Feature/block interfaces for cumulative statistic transformers.

Every feature exposes the same ``transform`` signature and every block runs a
homogeneous list of features over one shared input series, so a new
statistic plugs into an existing block without bespoke glue code.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping, MutableSequence, Sequence
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from ..utils.logging import get_logger
from ..utils.metrics import get_metrics_collector
from .errors import ErrorContext

FeatureInput = Any

_logger = get_logger(__name__)


@dataclass(slots=True)
class FeatureResult:
    """Canonical payload returned by every feature transformer."""

    name: str
    value: Any
    metadata: Mapping[str, Any] = field(default_factory=dict)


class BaseFeature(ABC):
    """Structural contract for every cumulative statistic transformer."""

    #: Label used for metrics; subclasses override it.
    statistic: str = "generic"

    def __init__(self, name: str | None = None) -> None:
        self.name = name or self.__class__.__name__

    def __call__(self, data: FeatureInput, **kwargs: Any) -> FeatureResult:
        return self.transform(data, **kwargs)

    @abstractmethod
    def transform(self, data: FeatureInput, **kwargs: Any) -> FeatureResult:
        """Produce a feature result from a raw input series."""

    def transform_with_metrics(self, data: FeatureInput, **kwargs: Any) -> FeatureResult:
        """Transform with metrics collection and failure logging.

        Failures are counted with status ``error``, logged with an
        :class:`ErrorContext`, and re-raised unchanged.
        """
        metrics = get_metrics_collector()
        try:
            with metrics.measure_transform(self.statistic):
                result = self.transform(data, **kwargs)
        except Exception as exc:
            context = ErrorContext.from_exception(exc, statistic=self.statistic, data=data)
            _logger.error("transform_failed", feature=self.name, **context.to_dict())
            raise

        length = result.metadata.get("length")
        if isinstance(length, int):
            metrics.observe_input_length(self.statistic, length)
        last = _last_value(result.value)
        if last is not None:
            metrics.record_last_value(self.statistic, last)
        return result


def _last_value(value: Any) -> float | None:
    if isinstance(value, np.ndarray) and value.ndim == 1 and value.size:
        return float(value[-1])
    return None


class BaseBlock(ABC):
    """Composable container that orchestrates a homogeneous list of features."""

    def __init__(
        self,
        features: Sequence[BaseFeature] | None = None,
        *,
        name: str | None = None,
    ) -> None:
        self.name = name or self.__class__.__name__
        self._features: MutableSequence[BaseFeature] = list(features or [])

    @property
    def features(self) -> tuple[BaseFeature, ...]:
        return tuple(self._features)

    def register(self, feature: BaseFeature) -> None:
        self._features.append(feature)

    def extend(self, features: Iterable[BaseFeature]) -> None:
        self._features.extend(features)

    def __call__(self, data: FeatureInput, **kwargs: Any) -> Mapping[str, Any]:
        return self.run(data, **kwargs)

    @abstractmethod
    def run(self, data: FeatureInput, **kwargs: Any) -> Mapping[str, Any]:
        """Execute the block over the input and return a feature mapping."""


class FeatureBlock(BaseBlock):
    """Minimal block that executes its child features sequentially."""

    def run(self, data: FeatureInput, **kwargs: Any) -> Mapping[str, Any]:
        outputs: dict[str, Any] = {}
        for feature in self.features:
            result = feature.transform(data, **kwargs)
            outputs[result.name] = result.value
        return outputs


__all__ = [
    "BaseFeature",
    "BaseBlock",
    "FeatureBlock",
    "FeatureInput",
    "FeatureResult",
]
