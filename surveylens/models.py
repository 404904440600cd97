"""Pydantic models for survey entities held in a session.

Computed analysis outputs live in ``surveylens.analysis.models`` as plain
dataclasses; the models here are the ingested data the engine reads.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, Field

Cell = str | int | float | None
Row = dict[str, Cell]


def _new_id() -> str:
    return str(uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Question(BaseModel):
    """One survey question (one answer column of the respondent table)."""

    id: str = Field(default_factory=_new_id)
    key: str  # column header, used as the answers-dict key
    label: str
    category_id: str
    scale_min: int
    scale_max: int


class SurveyResponse(BaseModel):
    """One respondent's record.

    Missing answers are absent from ``answers``; there is no sentinel.
    """

    id: str = Field(default_factory=_new_id)
    respondent_id: str
    department: str = ""  # "" = no department information
    answers: dict[str, float] = Field(default_factory=dict)


class DepartmentScoreQuestion(BaseModel):
    """One question row of a pre-aggregated department-score matrix."""

    number: int
    label: str
    category_id: str
    scores: dict[str, float] = Field(default_factory=dict)  # department -> average


class DepartmentScoreData(BaseModel):
    """A department-score matrix: one average per department per question."""

    questions: list[DepartmentScoreQuestion]
    departments: list[str]  # natural order
    overall_department: str = ""  # "" when no grand-total column was found


class CanonicalTable(BaseModel):
    """Per-respondent table in canonical form, ready for validation and conversion."""

    headers: list[str]
    respondent_id_column: str
    department_column: str = ""  # "" = no department dimension
    question_columns: list[str]
    rows: list[Row]
    source_shape: str = "respondent"  # "respondent" or "frequency"


class ValidationIssue(BaseModel):
    row: int | None = None  # spreadsheet row number (header is row 1)
    column: str | None = None
    message: str


class ValidationResult(BaseModel):
    is_valid: bool
    errors: list[ValidationIssue] = Field(default_factory=list)
    warnings: list[ValidationIssue] = Field(default_factory=list)


class CommentTarget(str, Enum):
    """What an AI comment is attached to."""

    ISSUE = "issue"
    EXCELLENT = "excellent"
    PRIORITY_QUADRANT = "priority_quadrant"
    DEPT_QUESTION = "dept_question"
    DEPT_DEPARTMENT = "dept_department"
    DEPT_OVERVIEW = "dept_overview"


class AIComment(BaseModel):
    """A generated commentary text with an optional user edit."""

    id: str = Field(default_factory=_new_id)
    target_type: CommentTarget
    target_id: str
    ai_generated_text: str
    edited_text: str = ""
    is_edited: bool = False
    generated_at: datetime = Field(default_factory=_now)
    edited_at: datetime | None = None
