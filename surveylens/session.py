"""In-memory session state for one survey upload.

A ``SurveySession`` holds everything derived from the current upload:
the canonical table, its validation result, questions, responses,
analysis results and department comparisons, plus user-edited AI comments.
Nothing is persisted.  A new upload replaces the previous state wholesale,
and any change to settings or question categories recomputes the analysis
chain (per-question results first, department deltas second).
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from surveylens.analysis.departments import run_department_analysis, summarize_department_scores
from surveylens.analysis.engine import run_analysis
from surveylens.analysis.models import AnalysisResult, DepartmentAnalysis, DepartmentScoreSummary
from surveylens.categories import CategoryTable, default_category_table
from surveylens.config import SurveyLensSettings, load_settings
from surveylens.logging import report_department_scores, report_survey
from surveylens.models import (
    AIComment,
    CanonicalTable,
    CommentTarget,
    DepartmentScoreData,
    Question,
    Row,
    SurveyResponse,
    ValidationResult,
)
from surveylens.normalize import (
    convert_to_responses,
    default_chain,
    extract_department_scores,
    generate_questions,
    validate_table,
)
from surveylens.readers import read_table

logger = logging.getLogger(__name__)

CommentKey = tuple[CommentTarget, str]


class CommentStore:
    """AI comments keyed by ``(target_type, target_id)``."""

    def __init__(self) -> None:
        self._comments: dict[CommentKey, AIComment] = {}

    def __len__(self) -> int:
        return len(self._comments)

    def get(self, target_type: CommentTarget, target_id: str) -> AIComment | None:
        return self._comments.get((target_type, target_id))

    def all(self) -> list[AIComment]:
        return list(self._comments.values())

    def upsert(self, comment: AIComment) -> AIComment:
        """Insert *comment*, or replace the one for the same target keeping its id."""
        key = (comment.target_type, comment.target_id)
        existing = self._comments.get(key)
        stored = comment if existing is None else comment.model_copy(update={"id": existing.id})
        self._comments[key] = stored
        return stored

    def edit(self, target_type: CommentTarget, target_id: str, text: str) -> AIComment:
        """Record a user edit.  Raises KeyError when no comment exists for the target."""
        current = self._comments[(target_type, target_id)]
        edited = current.model_copy(
            update={
                "edited_text": text,
                "is_edited": True,
                "edited_at": datetime.now(timezone.utc),
            }
        )
        self._comments[(target_type, target_id)] = edited
        return edited

    def reset_edit(self, target_type: CommentTarget, target_id: str) -> AIComment:
        """Discard a user edit, restoring the generated text."""
        current = self._comments[(target_type, target_id)]
        restored = current.model_copy(
            update={
                "edited_text": current.ai_generated_text,
                "is_edited": False,
                "edited_at": None,
            }
        )
        self._comments[(target_type, target_id)] = restored
        return restored

    def clear(self) -> None:
        self._comments.clear()


@dataclass
class SurveySession:
    settings: SurveyLensSettings = field(default_factory=load_settings)
    categories: CategoryTable = field(default_factory=default_category_table)

    table: CanonicalTable | None = None
    validation: ValidationResult | None = None
    questions: list[Question] = field(default_factory=list)
    responses: list[SurveyResponse] = field(default_factory=list)
    analysis_results: list[AnalysisResult] = field(default_factory=list)
    department_analyses: list[DepartmentAnalysis] = field(default_factory=list)
    comments: CommentStore = field(default_factory=CommentStore)

    department_scores: DepartmentScoreData | None = None
    department_comments: CommentStore = field(default_factory=CommentStore)

    # ── Survey path ────────────────────────────────────────────────

    def load_survey(self, path: Path, *, rng: random.Random | None = None) -> ValidationResult:
        """Read, normalise, validate and analyse a per-respondent or frequency file."""
        raw = read_table(path)
        return self.load_survey_rows(raw.headers, raw.rows, rng=rng, source=path.name)

    def load_survey_rows(
        self,
        headers: list[str],
        rows: list[Row],
        *,
        rng: random.Random | None = None,
        source: str = "survey",
    ) -> ValidationResult:
        """Replace the survey state with a newly parsed table.

        The analysis runs even when validation reports errors: non-numeric
        cells are simply absent from the responses.  Callers that want to
        gate on a clean upload check the returned ``is_valid``.  *source*
        names the upload in the run log.
        """
        table = default_chain(rng).run(headers, rows).table

        self.table = table
        self.validation = validate_table(table, self.settings.scale_min, self.settings.scale_max)
        report_survey(source, table, self.validation)
        self.questions = generate_questions(
            table, self.settings.scale_min, self.settings.scale_max, self.categories
        )
        self.responses = convert_to_responses(table)
        self.comments.clear()
        self.recompute()
        return self.validation

    def recompute(self) -> None:
        """Re-run per-question analysis, then department analysis on its output.

        Tables without a department column (every frequency table among them)
        get no department rows.
        """
        self.analysis_results = run_analysis(self.responses, self.questions, self.settings)
        if self.table is not None and self.table.department_column:
            self.department_analyses = run_department_analysis(
                self.responses, self.questions, self.analysis_results
            )
        else:
            self.department_analyses = []
        logger.debug(
            "Recomputed %d results, %d department rows",
            len(self.analysis_results),
            len(self.department_analyses),
        )

    def update_question_category(self, question_id: str, category_id: str) -> Question:
        """Override a question's category.  Raises KeyError for unknown ids."""
        if self.categories.get(category_id) is None:
            msg = f"unknown category: {category_id}"
            raise KeyError(msg)
        for i, question in enumerate(self.questions):
            if question.id == question_id:
                updated = question.model_copy(update={"category_id": category_id})
                self.questions[i] = updated
                self.recompute()
                return updated
        msg = f"unknown question: {question_id}"
        raise KeyError(msg)

    def update_settings(self, **changes: object) -> SurveyLensSettings:
        """Apply setting changes (validated) and recompute."""
        merged = {**self.settings.model_dump(), **changes}
        self.settings = SurveyLensSettings(**merged)  # type: ignore[arg-type]
        self.recompute()
        return self.settings

    # ── Department-matrix path ─────────────────────────────────────

    def load_department_scores(self, path: Path) -> DepartmentScoreData:
        """Read a department-score matrix.  Raises ShapeDetectionError on bad layouts."""
        raw = read_table(path)
        return self.load_department_rows(raw.headers, raw.rows, source=path.name)

    def load_department_rows(
        self,
        headers: list[str],
        rows: list[Row],
        *,
        source: str = "departments",
    ) -> DepartmentScoreData:
        matrix = extract_department_scores(headers, rows, self.categories)
        report_department_scores(source, matrix.data)
        self.department_scores = matrix.data
        self.department_comments.clear()
        return matrix.data

    def department_summary(self) -> DepartmentScoreSummary | None:
        if self.department_scores is None:
            return None
        return summarize_department_scores(self.department_scores, self.settings)

    # ── Lifecycle ──────────────────────────────────────────────────

    def reset(self) -> None:
        """Forget every upload, result and comment; keep settings and categories."""
        self.table = None
        self.validation = None
        self.questions = []
        self.responses = []
        self.analysis_results = []
        self.department_analyses = []
        self.comments.clear()
        self.department_scores = None
        self.department_comments.clear()

