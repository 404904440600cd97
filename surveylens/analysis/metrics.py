"""Low-level statistical functions for question analysis.

These are pure arithmetic with no I/O and no Pydantic models.  Every function
returns 0 for degenerate input (empty, single value, zero variance) rather
than NaN or raising.  Higher-level code (engine, departments) calls these.
"""

from __future__ import annotations

import math
from collections.abc import Sequence


def round2(value: float) -> float:
    """Round half up to 2 decimal places.

    Halves round toward positive infinity (``-0.125 → -0.12``), matching the
    usual spreadsheet display rounding rather than Python's banker's rounding.
    """
    return math.floor(value * 100 + 0.5) / 100


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean.  Returns 0 for an empty sequence."""
    if not values:
        return 0.0
    return sum(values) / len(values)


def median(values: Sequence[float]) -> float:
    """Middle value (odd length) or mean of the two middle values (even length).

    Returns 0 for an empty sequence.
    """
    if not values:
        return 0.0
    ordered = sorted(values)
    mid = len(ordered) // 2
    if len(ordered) % 2:
        return ordered[mid]
    return (ordered[mid - 1] + ordered[mid]) / 2


def population_std_dev(values: Sequence[float]) -> float:
    """Standard deviation dividing by N (not N-1).  Returns 0 when N <= 1."""
    if len(values) <= 1:
        return 0.0
    m = mean(values)
    variance = sum((v - m) ** 2 for v in values) / len(values)
    return math.sqrt(variance)


def share_at_most(values: Sequence[float], threshold: float) -> float:
    """Fraction of values <= *threshold*.  Returns 0 for an empty sequence."""
    if not values:
        return 0.0
    return sum(1 for v in values if v <= threshold) / len(values)


def share_at_least(values: Sequence[float], threshold: float) -> float:
    """Fraction of values >= *threshold*.  Returns 0 for an empty sequence."""
    if not values:
        return 0.0
    return sum(1 for v in values if v >= threshold) / len(values)


def pearson(x: Sequence[float], y: Sequence[float]) -> float:
    """Pearson correlation coefficient of two equal-length sequences.

    Returns 0 with fewer than two pairs or when either side has zero variance.
    """
    n = min(len(x), len(y))
    if n <= 1:
        return 0.0
    mean_x = mean(x[:n])
    mean_y = mean(y[:n])
    numerator = 0.0
    sum_sq_x = 0.0
    sum_sq_y = 0.0
    for i in range(n):
        dx = x[i] - mean_x
        dy = y[i] - mean_y
        numerator += dx * dy
        sum_sq_x += dx * dx
        sum_sq_y += dy * dy
    denom = math.sqrt(sum_sq_x * sum_sq_y)
    return 0.0 if denom == 0 else numerator / denom
