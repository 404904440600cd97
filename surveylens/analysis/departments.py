"""Department means and deviations from the overall mean.

Two sources share the ``DepartmentAnalysis`` output shape:

- raw responses, grouped by their department string (the empty string is a
  group of its own), compared against the already computed per-question
  overall means;
- a pre-aggregated department-score matrix, compared against the detected
  overall column or, without one, the mean of the department scores.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from surveylens.analysis.engine import answered_values
from surveylens.analysis.metrics import mean, round2
from surveylens.analysis.models import (
    AnalysisResult,
    DepartmentAnalysis,
    DepartmentAverage,
    DepartmentScoreSummary,
)
from surveylens.analysis.ordering import sort_departments
from surveylens.models import DepartmentScoreData, DepartmentScoreQuestion, Question, SurveyResponse

if TYPE_CHECKING:
    from surveylens.config import SurveyLensSettings

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Raw responses
# ---------------------------------------------------------------------------


def run_department_analysis(
    responses: Sequence[SurveyResponse],
    questions: Sequence[Question],
    overall_results: Sequence[AnalysisResult],
) -> list[DepartmentAnalysis]:
    """Mean per department × question and its delta to the overall mean.

    *overall_results* must be the output of ``run_analysis`` for the same
    responses; a question without an overall result gets a delta of 0.
    Departments come out in natural order, questions in the given order.
    """
    groups: dict[str, list[SurveyResponse]] = {}
    for r in responses:
        groups.setdefault(r.department, []).append(r)

    overall_by_key = {res.question_key: res.mean for res in overall_results}
    results: list[DepartmentAnalysis] = []
    for dept in sort_departments(groups):
        members = groups[dept]
        for question in questions:
            m = mean(answered_values(members, question.key))
            overall = overall_by_key.get(question.key)
            diff = round2(m - overall) if overall is not None else 0.0
            results.append(
                DepartmentAnalysis(
                    department=dept,
                    question_key=question.key,
                    mean=round2(m),
                    diff_from_overall=diff,
                )
            )
    logger.debug("Department analysis: %d departments", len(groups))
    return results


# ---------------------------------------------------------------------------
# Department-score matrix
# ---------------------------------------------------------------------------


def sub_departments(data: DepartmentScoreData) -> list[str]:
    """Departments other than the overall column, in stored order."""
    return [d for d in data.departments if d != data.overall_department]


def question_baseline(data: DepartmentScoreData, question: DepartmentScoreQuestion) -> float | None:
    """The overall score a department is compared against for one question.

    The overall column's score when one was detected, otherwise the mean of
    the department scores present for the question.  None when neither exists.
    """
    if data.overall_department:
        return question.scores.get(data.overall_department)
    scores = [question.scores[d] for d in sub_departments(data) if d in question.scores]
    return mean(scores) if scores else None


def department_score_analysis(data: DepartmentScoreData) -> list[DepartmentAnalysis]:
    """One ``DepartmentAnalysis`` per department × question with a score."""
    results: list[DepartmentAnalysis] = []
    for dept in sub_departments(data):
        for question in data.questions:
            score = question.scores.get(dept)
            if score is None:
                continue
            baseline = question_baseline(data, question)
            results.append(
                DepartmentAnalysis(
                    department=dept,
                    question_key=_matrix_key(question),
                    mean=round2(score),
                    diff_from_overall=round2(score - baseline) if baseline is not None else 0.0,
                )
            )
    return results


def summarize_department_scores(
    data: DepartmentScoreData,
    settings: SurveyLensSettings,
) -> DepartmentScoreSummary:
    """Department averages, overall average and flagged questions for a matrix.

    A question is an issue when the overall score or any department's score
    is at or below ``issue_threshold``; excellent when the overall score or
    any department's score reaches ``excellent_threshold``.
    """
    subs = sub_departments(data)

    averages: list[DepartmentAverage] = []
    for dept in subs:
        scores = [q.scores[dept] for q in data.questions if dept in q.scores]
        averages.append(DepartmentAverage(department=dept, average=round2(mean(scores))))

    if data.overall_department:
        overall_scores = [
            q.scores[data.overall_department]
            for q in data.questions
            if data.overall_department in q.scores
        ]
        overall_average = round2(mean(overall_scores))
    else:
        overall_average = round2(mean([a.average for a in averages]))

    issue: list[int] = []
    excellent: list[int] = []
    for q in data.questions:
        ref = q.scores.get(data.overall_department) if data.overall_department else None
        sub_scores = [q.scores[d] for d in subs if d in q.scores]
        if (ref is not None and ref <= settings.issue_threshold) or (
            sub_scores and min(sub_scores) <= settings.issue_threshold
        ):
            issue.append(q.number)
        if (ref is not None and ref >= settings.excellent_threshold) or (
            sub_scores and max(sub_scores) >= settings.excellent_threshold
        ):
            excellent.append(q.number)

    return DepartmentScoreSummary(
        sub_departments=subs,
        department_averages=averages,
        overall_average=overall_average,
        issue_questions=issue,
        excellent_questions=excellent,
        lowest_department=min(averages, key=lambda a: a.average) if averages else None,
        highest_department=max(averages, key=lambda a: a.average) if averages else None,
        analyses=department_score_analysis(data),
    )


def _matrix_key(question: DepartmentScoreQuestion) -> str:
    return f"Q{question.number}_{question.label}"
