"""Tests for surveylens.analysis.metrics (pure math functions)."""

from __future__ import annotations

import pytest

from surveylens.analysis.metrics import (
    mean,
    median,
    pearson,
    population_std_dev,
    round2,
    share_at_least,
    share_at_most,
)

# ---------------------------------------------------------------------------
# round2
# ---------------------------------------------------------------------------


class TestRound2:
    def test_two_decimals(self) -> None:
        assert round2(2.666666) == pytest.approx(2.67)

    def test_half_rounds_up(self) -> None:
        assert round2(0.125) == pytest.approx(0.13)

    def test_negative_half_rounds_toward_positive(self) -> None:
        # Same as Math.round: -12.5 → -12
        assert round2(-0.125) == pytest.approx(-0.12)

    def test_integer_passes_through(self) -> None:
        assert round2(3) == pytest.approx(3.0)


# ---------------------------------------------------------------------------
# mean / median
# ---------------------------------------------------------------------------


class TestMean:
    def test_basic(self) -> None:
        assert mean([1, 2, 5]) == pytest.approx(8 / 3)

    def test_empty_is_zero(self) -> None:
        assert mean([]) == 0.0


class TestMedian:
    def test_odd_count(self) -> None:
        assert median([3, 1, 2]) == 2

    def test_even_count_averages_middle_pair(self) -> None:
        assert median([4, 1, 3, 2]) == pytest.approx(2.5)

    def test_empty_is_zero(self) -> None:
        assert median([]) == 0.0

    def test_does_not_mutate_input(self) -> None:
        values = [3.0, 1.0, 2.0]
        median(values)
        assert values == [3.0, 1.0, 2.0]


# ---------------------------------------------------------------------------
# population_std_dev
# ---------------------------------------------------------------------------


class TestPopulationStdDev:
    def test_textbook_example(self) -> None:
        assert population_std_dev([2, 4, 4, 4, 5, 5, 7, 9]) == pytest.approx(2.0)

    def test_single_value_is_zero(self) -> None:
        assert population_std_dev([5]) == 0.0

    def test_empty_is_zero(self) -> None:
        assert population_std_dev([]) == 0.0

    def test_constant_values(self) -> None:
        assert population_std_dev([3, 3, 3]) == pytest.approx(0.0)


# ---------------------------------------------------------------------------
# share_at_most / share_at_least
# ---------------------------------------------------------------------------


class TestShares:
    def test_low_share(self) -> None:
        assert share_at_most([1, 2, 5], 2) == pytest.approx(2 / 3)

    def test_high_share(self) -> None:
        assert share_at_least([1, 2, 5], 4) == pytest.approx(1 / 3)

    def test_boundaries_are_inclusive(self) -> None:
        assert share_at_most([2, 2], 2) == pytest.approx(1.0)
        assert share_at_least([4, 4], 4) == pytest.approx(1.0)

    def test_empty_is_zero(self) -> None:
        assert share_at_most([], 2) == 0.0
        assert share_at_least([], 4) == 0.0


# ---------------------------------------------------------------------------
# pearson
# ---------------------------------------------------------------------------


class TestPearson:
    def test_perfect_positive(self) -> None:
        assert pearson([1, 2, 3], [2, 4, 6]) == pytest.approx(1.0)

    def test_perfect_negative(self) -> None:
        assert pearson([1, 2, 3], [3, 2, 1]) == pytest.approx(-1.0)

    def test_zero_variance_is_zero(self) -> None:
        assert pearson([3, 3, 3], [1, 2, 3]) == 0.0

    def test_single_pair_is_zero(self) -> None:
        assert pearson([1], [1]) == 0.0

    def test_empty_is_zero(self) -> None:
        assert pearson([], []) == 0.0

    def test_partial_correlation(self) -> None:
        # dx = 3,-1,-2; dy = 2,-2,0 → 8 / sqrt(14 * 8)
        assert pearson([5, 1, 0], [5, 1, 3]) == pytest.approx(8 / (14 * 8) ** 0.5)
