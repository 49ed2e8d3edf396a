# SPDX-License-Identifier: MIT
"""Cumulative statistics with an initial-value offset.

Five single-pass transforms over a one-dimensional float64 series, each
offset by a scalar, plus a batched variant computing all five together:

======================  =======================================================
``cumulative_sum_init``      ``r[i] = c + sum(x[0..i])``
``cumulative_product_init``  ``r[i] = c * prod(1 + x[0..i])`` (growth factors)
``cumulative_min_init``      ``r[i] = c + min(x[0..i])``
``cumulative_max_init``      ``r[i] = c + max(x[0..i])``
``cumulative_mean_init``     ``r[i] = c + sum(x[0..i]) / (i + 1)``
======================  =======================================================

Accumulation is strictly left to right, so each output element is exactly
what the scalar loop would produce. NaN and infinities are not filtered: a
NaN after the first element is never picked as a new minimum or maximum
(IEEE comparisons with NaN are false), while a NaN in the first element
pins every min/max output to NaN.

The product is a compounding growth product over ``1 + x[i]``, which is what
a series of simple returns compounds to, not a running product of ``x``.
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping

import numpy as np
import pandas as pd

from ..utils.logging import get_logger
from .errors import EmptyInputError, InputShapeError

_logger = get_logger(__name__)

DEFAULT_CHUNK_SIZE = 8192
BATCH_COLUMNS: tuple[str, ...] = ("cum_sum", "cum_prod", "cum_min", "cum_max", "cum_mean")


def _as_float_array(values: Iterable[float]) -> np.ndarray:
    array = np.asarray(values, dtype=float)
    if array.ndim != 1:
        raise InputShapeError(array.ndim)
    return array


def _validate_chunk_size(chunk_size: Any) -> int:
    if isinstance(chunk_size, bool) or not isinstance(chunk_size, (int, np.integer)):
        raise ValueError("chunk_size must be an integer")
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")
    return int(chunk_size)


# ---------------------------------------------------------------------------
# Kernels. Each accepts an optional carry from a preceding block so that a
# blocked traversal reproduces the unblocked result bit for bit.
# ---------------------------------------------------------------------------

def _running_sum(values: np.ndarray, carry: float | None = None) -> np.ndarray:
    if carry is None:
        return np.cumsum(values)
    buffer = values.copy()
    buffer[0] = carry + buffer[0]
    return np.cumsum(buffer, out=buffer)


def _running_growth(values: np.ndarray, carry: float | None = None) -> np.ndarray:
    growth = 1.0 + values
    if carry is not None:
        growth[0] = carry * growth[0]
    return np.cumprod(growth, out=growth)


def _running_extreme(values: np.ndarray, seed: float, reducer: np.ufunc) -> np.ndarray:
    # fmin/fmax skip NaN candidates, matching a strict `<`/`>` update; only a
    # NaN seed survives, and then it survives forever.
    if np.isnan(seed):
        return np.full(values.shape, np.nan)
    extremes = reducer.accumulate(values)
    return reducer(extremes, seed, out=extremes)


def _running_mean(sums: np.ndarray, start: int = 0) -> np.ndarray:
    counts = np.arange(start + 1, start + sums.size + 1, dtype=float)
    return sums / counts


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def cumulative_sum_init(x: Iterable[float], initial_value: float = 0.0) -> np.ndarray:
    """Cumulative sum offset by ``initial_value``.

    Args:
        x: One-dimensional numeric series
        initial_value: Scalar added to every running total

    Returns:
        Array of ``len(x)`` running totals. Empty input gives an empty array.

    Example:
        >>> cumulative_sum_init([1.0, -2.0, 3.0], 10.0)
        array([11.,  9., 12.])
    """
    values = _as_float_array(x)
    with _logger.debug_operation("cumulative_sum_init", length=values.size):
        result = _running_sum(values)
        return np.add(result, float(initial_value), out=result)


def cumulative_product_init(x: Iterable[float], initial_value: float = 1.0) -> np.ndarray:
    """Compounded growth ``initial_value * prod(1 + x[0..i])``.

    Args:
        x: One-dimensional series of per-period returns
        initial_value: Multiplicative seed, e.g. a starting equity level

    Returns:
        Array of ``len(x)`` compounded values. Empty input gives an empty array.

    Example:
        >>> cumulative_product_init([0.5, -0.5], 100.0)
        array([150.,  75.])
    """
    values = _as_float_array(x)
    with _logger.debug_operation("cumulative_product_init", length=values.size):
        result = _running_growth(values)
        return np.multiply(result, float(initial_value), out=result)


def cumulative_min_init(x: Iterable[float], initial_value: float = 0.0) -> np.ndarray:
    """Running minimum offset by ``initial_value``.

    Raises:
        EmptyInputError: If ``x`` is empty
    """
    values = _as_float_array(x)
    if values.size == 0:
        raise EmptyInputError("cumulative_min_init")
    with _logger.debug_operation("cumulative_min_init", length=values.size):
        result = _running_extreme(values, values[0], np.fmin)
        return np.add(result, float(initial_value), out=result)


def cumulative_max_init(x: Iterable[float], initial_value: float = 0.0) -> np.ndarray:
    """Running maximum offset by ``initial_value``.

    Raises:
        EmptyInputError: If ``x`` is empty
    """
    values = _as_float_array(x)
    if values.size == 0:
        raise EmptyInputError("cumulative_max_init")
    with _logger.debug_operation("cumulative_max_init", length=values.size):
        result = _running_extreme(values, values[0], np.fmax)
        return np.add(result, float(initial_value), out=result)


def cumulative_mean_init(x: Iterable[float], initial_value: float = 0.0) -> np.ndarray:
    """Expanding mean offset by ``initial_value``."""
    values = _as_float_array(x)
    with _logger.debug_operation("cumulative_mean_init", length=values.size):
        result = _running_mean(_running_sum(values))
        return np.add(result, float(initial_value), out=result)


def batch_cumulative_stats(
    x: Iterable[float],
    initial_value: float = 0.0,
    *,
    chunk_size: int | None = None,
) -> pd.DataFrame:
    """Compute all five cumulative statistics in one blocked traversal.

    The series is walked once in blocks of ``chunk_size`` elements; every
    statistic is produced for a block while it is still in cache, and the
    running accumulators are carried into the next block. Columns are
    bit-identical to calling the single-stat functions with the same
    ``initial_value``, whatever the block size.

    Note that ``initial_value`` also seeds the ``cum_prod`` column
    multiplicatively, so the default of ``0.0`` yields a zero product column.

    Args:
        x: One-dimensional numeric series. A :class:`pandas.Series` keeps
            its index on the result.
        initial_value: Offset for sum/min/max/mean and seed for the product
        chunk_size: Block length (defaults to :data:`DEFAULT_CHUNK_SIZE`)

    Returns:
        DataFrame with columns ``cum_sum, cum_prod, cum_min, cum_max, cum_mean``

    Raises:
        EmptyInputError: If ``x`` is empty
        ValueError: If ``chunk_size`` is not a positive integer
    """
    block = DEFAULT_CHUNK_SIZE if chunk_size is None else _validate_chunk_size(chunk_size)
    values = _as_float_array(x)
    if values.size == 0:
        raise EmptyInputError("batch_cumulative_stats")

    offset = float(initial_value)
    n = values.size
    table = np.empty((n, len(BATCH_COLUMNS)), dtype=float)
    running_sum: float | None = None
    running_prod: float | None = None
    running_min = running_max = values[0]

    with _logger.debug_operation(
        "batch_cumulative_stats", length=n, chunk_size=block
    ) as op:
        for start in range(0, n, block):
            chunk = values[start : start + block]
            rows = table[start : start + chunk.size]

            sums = _running_sum(chunk, running_sum)
            growth = _running_growth(chunk, running_prod)
            mins = _running_extreme(chunk, running_min, np.fmin)
            maxs = _running_extreme(chunk, running_max, np.fmax)
            means = _running_mean(sums, start)

            running_sum, running_prod = sums[-1], growth[-1]
            running_min, running_max = mins[-1], maxs[-1]

            np.add(sums, offset, out=rows[:, 0])
            np.multiply(growth, offset, out=rows[:, 1])
            np.add(mins, offset, out=rows[:, 2])
            np.add(maxs, offset, out=rows[:, 3])
            np.add(means, offset, out=rows[:, 4])
        op["blocks"] = -(-n // block)

    index = x.index if isinstance(x, pd.Series) else None
    return pd.DataFrame(table, columns=list(BATCH_COLUMNS), index=index)


CUMULATIVE_FUNCTIONS: Mapping[str, Callable[..., np.ndarray]] = MappingProxyType(
    {
        "sum": cumulative_sum_init,
        "prod": cumulative_product_init,
        "min": cumulative_min_init,
        "max": cumulative_max_init,
        "mean": cumulative_mean_init,
    }
)


def get_cumulative_function(statistic: str) -> Callable[..., np.ndarray]:
    """Look up a single-stat function by name (``sum``, ``prod``, ``min``, ``max``, ``mean``)."""
    try:
        return CUMULATIVE_FUNCTIONS[statistic]
    except KeyError:
        known = ", ".join(CUMULATIVE_FUNCTIONS)
        raise ValueError(f"unknown statistic '{statistic}', expected one of: {known}") from None


def default_initial_value(statistic: str) -> float:
    """Neutral ``initial_value`` for a statistic: 1.0 for ``prod``, else 0.0."""
    get_cumulative_function(statistic)
    return 1.0 if statistic == "prod" else 0.0


__all__ = [
    "BATCH_COLUMNS",
    "CUMULATIVE_FUNCTIONS",
    "DEFAULT_CHUNK_SIZE",
    "batch_cumulative_stats",
    "cumulative_max_init",
    "cumulative_mean_init",
    "cumulative_min_init",
    "cumulative_product_init",
    "cumulative_sum_init",
    "default_initial_value",
    "get_cumulative_function",
]
