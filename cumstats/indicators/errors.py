# SPDX-License-Identifier: MIT
"""Error types raised by the cumulative statistics kernels.

Every failure is reported synchronously to the caller. Kernels never return
partial results: an input either produces a full-length output or raises one
of the exceptions below.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional


class CumulativeStatsError(ValueError):
    """Base class for all cumulative statistics failures."""


class EmptyInputError(CumulativeStatsError):
    """Raised when a statistic seeded from the first element sees no data."""

    def __init__(self, statistic: str) -> None:
        self.statistic = statistic
        super().__init__(f"{statistic}: empty input not supported")


class InputShapeError(CumulativeStatsError):
    """Raised when the input series is not one-dimensional."""

    def __init__(self, ndim: int) -> None:
        self.ndim = ndim
        super().__init__(
            f"Input series must be one-dimensional, got ndim={ndim}"
        )


@dataclass
class ErrorContext:
    """Details about a failed transform, for logs and audit trails.

    Attributes:
        error_type: Exception class name
        error_message: Human-readable error message
        statistic: Statistic that failed, when known
        input_summary: Short description of the offending input
        timestamp: When the error was observed
    """

    error_type: str
    error_message: str
    statistic: Optional[str] = None
    input_summary: Optional[str] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_exception(
        cls,
        error: BaseException,
        *,
        statistic: Optional[str] = None,
        data: Any = None,
    ) -> "ErrorContext":
        return cls(
            error_type=type(error).__name__,
            error_message=str(error),
            statistic=statistic,
            input_summary=summarize_input(data),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "error_type": self.error_type,
            "error_message": self.error_message,
            "statistic": self.statistic,
            "input_summary": self.input_summary,
            "timestamp": self.timestamp.isoformat(),
        }


def summarize_input(data: Any) -> Optional[str]:
    """Create a short, log-safe summary of an input series."""
    if data is None:
        return None
    if hasattr(data, "shape") and hasattr(data, "dtype"):
        return f"{type(data).__name__}(shape={tuple(data.shape)}, dtype={data.dtype})"
    if isinstance(data, (list, tuple)):
        return f"{type(data).__name__}(len={len(data)})"
    return type(data).__name__


__all__ = [
    "CumulativeStatsError",
    "EmptyInputError",
    "InputShapeError",
    "ErrorContext",
    "summarize_input",
]
