# SPDX-License-Identifier: MIT
"""Unit tests for ``batch_cumulative_stats``."""
from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from cumstats.indicators.cumulative import (
    BATCH_COLUMNS,
    DEFAULT_CHUNK_SIZE,
    batch_cumulative_stats,
    cumulative_max_init,
    cumulative_mean_init,
    cumulative_min_init,
    cumulative_product_init,
    cumulative_sum_init,
)
from cumstats.indicators.errors import EmptyInputError

SINGLE_BY_COLUMN = {
    "cum_sum": cumulative_sum_init,
    "cum_prod": cumulative_product_init,
    "cum_min": cumulative_min_init,
    "cum_max": cumulative_max_init,
    "cum_mean": cumulative_mean_init,
}


def _assert_matches_single_stats(frame: pd.DataFrame, x, initial_value: float) -> None:
    for column, func in SINGLE_BY_COLUMN.items():
        np.testing.assert_array_equal(
            frame[column].to_numpy(), func(x, initial_value), err_msg=column
        )


def test_columns_are_named_and_ordered(worked_example: tuple[np.ndarray, float]) -> None:
    x, offset = worked_example
    frame = batch_cumulative_stats(x, offset)
    assert tuple(frame.columns) == BATCH_COLUMNS
    assert tuple(frame.columns) == ("cum_sum", "cum_prod", "cum_min", "cum_max", "cum_mean")
    assert frame.shape == (3, 5)
    assert (frame.dtypes == np.float64).all()


def test_worked_example_rows(worked_example: tuple[np.ndarray, float]) -> None:
    x, offset = worked_example
    frame = batch_cumulative_stats(x, offset)
    assert frame.iloc[0].tolist() == [11.0, 20.0, 11.0, 11.0, 11.0]
    assert frame.iloc[1].tolist() == [9.0, -20.0, 8.0, 11.0, 9.5]
    assert frame["cum_max"].iloc[2] == 13.0


@pytest.mark.parametrize("chunk_size", [1, 2, 7, 64, 251, 252, 1000, None])
def test_bit_identical_to_single_stats_for_any_chunk_size(
    daily_returns: np.ndarray, chunk_size: int | None
) -> None:
    frame = batch_cumulative_stats(daily_returns, 100.0, chunk_size=chunk_size)
    _assert_matches_single_stats(frame, daily_returns, 100.0)


@pytest.mark.parametrize("chunk_size", [1, 3, 5])
def test_non_finite_values_cross_chunk_boundaries(chunk_size: int) -> None:
    x = np.array([0.5, np.nan, -1.0, 2.0, np.inf, -3.0, 0.25, np.nan, 4.0])
    frame = batch_cumulative_stats(x, 1.0, chunk_size=chunk_size)
    _assert_matches_single_stats(frame, x, 1.0)
    assert frame["cum_min"].tolist() == [1.5, 1.5, 0.0, 0.0, 0.0, -2.0, -2.0, -2.0, -2.0]


@pytest.mark.parametrize("chunk_size", [1, 2, 4])
def test_leading_nan_keeps_extremes_nan_in_later_chunks(chunk_size: int) -> None:
    x = np.array([np.nan, 1.0, -2.0, 3.0, 0.5])
    frame = batch_cumulative_stats(x, chunk_size=chunk_size)
    assert frame["cum_min"].isna().all()
    assert frame["cum_max"].isna().all()
    _assert_matches_single_stats(frame, x, 0.0)


def test_default_offset_zeroes_product_column(daily_returns: np.ndarray) -> None:
    frame = batch_cumulative_stats(daily_returns)
    assert (frame["cum_prod"] == 0.0).all()
    np.testing.assert_array_equal(frame["cum_sum"].to_numpy(), np.cumsum(daily_returns))


def test_series_index_is_preserved() -> None:
    index = pd.date_range("2024-01-01", periods=4, freq="D")
    series = pd.Series([0.01, -0.02, 0.03, 0.0], index=index, name="returns")
    frame = batch_cumulative_stats(series, 1.0)
    assert frame.index.equals(index)


def test_plain_sequences_get_range_index() -> None:
    frame = batch_cumulative_stats([1.0, 2.0])
    assert isinstance(frame.index, pd.RangeIndex)


def test_empty_input_raises() -> None:
    with pytest.raises(EmptyInputError, match="empty input not supported"):
        batch_cumulative_stats([])


@pytest.mark.parametrize("chunk_size", [0, -5, 2.5, True, "8"])
def test_invalid_chunk_size(chunk_size) -> None:
    with pytest.raises(ValueError, match="chunk_size"):
        batch_cumulative_stats([1.0, 2.0], chunk_size=chunk_size)


def test_default_chunk_size_smaller_than_series() -> None:
    x = np.linspace(-1.0, 1.0, DEFAULT_CHUNK_SIZE * 2 + 3)
    frame = batch_cumulative_stats(x, 0.5)
    _assert_matches_single_stats(frame, x, 0.5)


def test_input_array_is_left_untouched(daily_returns: np.ndarray) -> None:
    original = daily_returns.copy()
    batch_cumulative_stats(daily_returns, 2.0, chunk_size=10)
    np.testing.assert_array_equal(daily_returns, original)
