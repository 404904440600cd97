"""Quadrant, priority, and extraction-type classification for one question."""

from __future__ import annotations

from surveylens.analysis.models import ExtractionType, Priority, Quadrant

IMPORTANCE_THRESHOLD = 0.5


def mean_threshold(scale_min: float, scale_max: float) -> float:
    """Midpoint of the answer scale, the mean cut-off between quadrants."""
    return (scale_min + scale_max) / 2


def classify_quadrant(
    mean: float,
    importance: float,
    mean_cutoff: float,
    importance_cutoff: float = IMPORTANCE_THRESHOLD,
) -> Quadrant:
    """Cross importance against mean.

    ======================  =================  ==========
    importance >= cutoff    mean >= cutoff     quadrant
    ======================  =================  ==========
    yes                     no                 improve
    yes                     yes                maintain
    no                      no                 monitor
    no                      yes                excess
    ======================  =================  ==========
    """
    important = importance >= importance_cutoff
    high = mean >= mean_cutoff
    if important:
        return Quadrant.MAINTAIN if high else Quadrant.IMPROVE
    return Quadrant.EXCESS if high else Quadrant.MONITOR


def classify_priority(quadrant: Quadrant, mean: float, issue_threshold: float) -> Priority:
    if quadrant is Quadrant.IMPROVE:
        return Priority.HIGH
    if quadrant is Quadrant.MONITOR and mean <= issue_threshold:
        return Priority.MEDIUM
    return Priority.LOW


def classify_extraction(
    mean: float,
    issue_threshold: float,
    excellent_threshold: float,
) -> ExtractionType:
    """Issue/excellent flag, independent of the quadrant.

    The issue test runs first, so overlapping thresholds resolve to "issue".
    """
    if mean <= issue_threshold:
        return ExtractionType.ISSUE
    if mean >= excellent_threshold:
        return ExtractionType.EXCELLENT
    return ExtractionType.NEUTRAL
