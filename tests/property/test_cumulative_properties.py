# SPDX-License-Identifier: MIT
"""Property-based checks for the cumulative statistics.

Every vectorized result is compared bit for bit against a plain Python loop,
and the batched traversal against the single-stat functions for arbitrary
block sizes.
"""
from __future__ import annotations

import math

import numpy as np
from hypothesis import given, settings
from hypothesis import strategies as st

from cumstats.indicators.cumulative import (
    batch_cumulative_stats,
    cumulative_max_init,
    cumulative_mean_init,
    cumulative_min_init,
    cumulative_product_init,
    cumulative_sum_init,
)

finite_floats = st.floats(
    min_value=-1e6,
    max_value=1e6,
    allow_nan=False,
    allow_infinity=False,
    width=64,
)
any_floats = st.floats(allow_nan=True, allow_infinity=True, width=64)
offsets = st.floats(min_value=-1e3, max_value=1e3, allow_nan=False, width=64)

SINGLE_STATS = {
    "cum_sum": cumulative_sum_init,
    "cum_prod": cumulative_product_init,
    "cum_min": cumulative_min_init,
    "cum_max": cumulative_max_init,
    "cum_mean": cumulative_mean_init,
}


def _reference_loop(values: list[float], c: float) -> dict[str, list[float]]:
    """Straightforward left-to-right evaluation in Python floats."""
    out: dict[str, list[float]] = {name: [] for name in SINGLE_STATS}
    total = 0.0
    growth = 1.0
    low = high = values[0]
    for i, value in enumerate(values):
        total = total + value
        growth = growth * (1.0 + value)
        if value < low:
            low = value
        if value > high:
            high = value
        out["cum_sum"].append(c + total)
        out["cum_prod"].append(c * growth)
        out["cum_min"].append(c + low)
        out["cum_max"].append(c + high)
        out["cum_mean"].append(c + total / (i + 1))
    return out


@settings(deadline=None)
@given(st.lists(any_floats, min_size=1, max_size=60), offsets)
def test_single_stats_match_scalar_loop(values: list[float], c: float) -> None:
    expected = _reference_loop(values, c)
    for name, func in SINGLE_STATS.items():
        np.testing.assert_array_equal(func(values, c), expected[name], err_msg=name)


@settings(deadline=None)
@given(
    st.lists(any_floats, min_size=1, max_size=80),
    offsets,
    st.integers(min_value=1, max_value=90),
)
def test_batch_is_bit_identical_for_any_chunk_size(
    values: list[float], c: float, chunk_size: int
) -> None:
    frame = batch_cumulative_stats(values, c, chunk_size=chunk_size)
    for name, func in SINGLE_STATS.items():
        np.testing.assert_array_equal(frame[name].to_numpy(), func(values, c), err_msg=name)


@settings(deadline=None)
@given(st.lists(finite_floats, min_size=1, max_size=60), offsets)
def test_offset_shifts_additive_stats(values: list[float], c: float) -> None:
    for func in (cumulative_sum_init, cumulative_min_init, cumulative_max_init, cumulative_mean_init):
        np.testing.assert_array_equal(func(values, c), func(values) + c)


@settings(deadline=None)
@given(st.lists(finite_floats, min_size=1, max_size=60), offsets)
def test_offset_scales_growth_product(values: list[float], c: float) -> None:
    np.testing.assert_array_equal(
        cumulative_product_init(values, c), cumulative_product_init(values) * c
    )


@settings(deadline=None)
@given(st.lists(finite_floats, min_size=1, max_size=60), offsets)
def test_running_extremes_are_monotonic_and_bracket_the_mean(
    values: list[float], c: float
) -> None:
    lows = cumulative_min_init(values, c)
    highs = cumulative_max_init(values, c)
    means = cumulative_mean_init(values, c)

    assert np.all(np.diff(lows) <= 0.0)
    assert np.all(np.diff(highs) >= 0.0)
    assert lows[0] == highs[0] == c + values[0]
    slack = 1e-9 * (1.0 + max(abs(v) for v in values))
    assert np.all(lows - slack <= means)
    assert np.all(means <= highs + slack)


@settings(deadline=None)
@given(st.lists(finite_floats, min_size=1, max_size=60))
def test_last_sum_matches_math_fsum_within_rounding(values: list[float]) -> None:
    total = cumulative_sum_init(values)[-1]
    exact = math.fsum(values)
    assert math.isclose(total, exact, rel_tol=1e-9, abs_tol=1e-6 * len(values))
