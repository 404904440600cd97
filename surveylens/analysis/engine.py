"""Per-question statistics, importance, and classification.

Importance is the absolute Pearson correlation between a question's scores
and each respondent's overall score (mean of that respondent's answers
across all questions).  When building the question's score vector a missing
answer counts as 0, which biases the coefficient toward respondents who
answered everything.  This is a known approximation; the descriptive
statistics exclude missing answers.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from typing import TYPE_CHECKING

from surveylens.analysis.metrics import (
    mean,
    median,
    pearson,
    population_std_dev,
    round2,
    share_at_least,
    share_at_most,
)
from surveylens.analysis.models import AnalysisResult
from surveylens.analysis.quadrant import (
    IMPORTANCE_THRESHOLD,
    classify_extraction,
    classify_priority,
    classify_quadrant,
    mean_threshold,
)
from surveylens.models import Question, SurveyResponse

if TYPE_CHECKING:
    from surveylens.config import SurveyLensSettings

logger = logging.getLogger(__name__)

# Fixed absolute cut-offs for low/high answer shares (1–5 scale semantics).
LOW_SCORE = 2
HIGH_SCORE = 4


def answer_value(response: SurveyResponse, key: str) -> float | None:
    """Return a usable numeric answer, or None when missing or unusable."""
    value = response.answers.get(key)
    if value is None or isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return value


def answered_values(responses: Sequence[SurveyResponse], key: str) -> list[float]:
    """All non-missing answers to *key*, in respondent order."""
    values: list[float] = []
    for r in responses:
        v = answer_value(r, key)
        if v is not None:
            values.append(v)
    return values


def overall_scores(
    responses: Sequence[SurveyResponse],
    question_keys: Sequence[str],
) -> list[float]:
    """Each respondent's mean across the questions they answered (0 if none)."""
    scores: list[float] = []
    for r in responses:
        answered = [v for v in (answer_value(r, k) for k in question_keys) if v is not None]
        scores.append(mean(answered))
    return scores


def question_importance(
    responses: Sequence[SurveyResponse],
    key: str,
    overall: Sequence[float],
) -> float:
    """|pearson| between this question's scores (missing → 0) and *overall*."""
    scores = []
    for r in responses:
        v = answer_value(r, key)
        scores.append(0.0 if v is None else v)
    return abs(pearson(scores, overall))


def run_analysis(
    responses: Sequence[SurveyResponse],
    questions: Sequence[Question],
    settings: SurveyLensSettings,
) -> list[AnalysisResult]:
    """Compute one ``AnalysisResult`` per question, in question order.

    *settings* needs ``issue_threshold``, ``excellent_threshold``,
    ``scale_min`` and ``scale_max``.  Returns an empty list when there are
    no responses or no questions.
    """
    if not responses or not questions:
        return []

    overall = overall_scores(responses, [q.key for q in questions])
    midpoint = mean_threshold(settings.scale_min, settings.scale_max)
    logger.debug(
        "Analysing %d questions over %d respondents", len(questions), len(responses)
    )

    results: list[AnalysisResult] = []
    for question in questions:
        values = answered_values(responses, question.key)
        m = mean(values)
        importance = question_importance(responses, question.key, overall)
        quadrant = classify_quadrant(m, importance, midpoint, IMPORTANCE_THRESHOLD)

        results.append(
            AnalysisResult(
                question_id=question.id,
                question_key=question.key,
                question_label=question.label,
                category_id=question.category_id,
                mean=round2(m),
                median=median(values),
                std_dev=round2(population_std_dev(values)),
                low_ratio=round2(share_at_most(values, LOW_SCORE)),
                high_ratio=round2(share_at_least(values, HIGH_SCORE)),
                importance=round2(importance),
                priority=classify_priority(quadrant, m, settings.issue_threshold),
                quadrant=quadrant,
                extraction_type=classify_extraction(
                    m, settings.issue_threshold, settings.excellent_threshold
                ),
                answered=len(values),
            )
        )
    return results
