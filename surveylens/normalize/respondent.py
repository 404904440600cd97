"""Per-respondent tables: column roles, response records and question records."""

from __future__ import annotations

import re

from surveylens.analysis.classify import classify_question
from surveylens.categories import CategoryTable
from surveylens.models import CanonicalTable, Question, Row, SurveyResponse
from surveylens.normalize.shapes import (
    DEPARTMENT_HEADER,
    RESPONDENT_HEADER,
    RespondentTable,
    cell_text,
    to_number,
)

_QUESTION_PREFIX = re.compile(r"^Q\d+[_\s]*", re.IGNORECASE)


def build_respondent_table(headers: list[str], rows: list[Row]) -> RespondentTable:
    """Assign column roles by header name; every other column is a question.

    The respondent-id column is the first identifier-like header that is not
    also department-like (falling back to the first header).  The department
    column is the first department-like header, or "" when there is none.
    """
    respondent_column = next(
        (h for h in headers if RESPONDENT_HEADER.search(h) and not DEPARTMENT_HEADER.search(h)),
        headers[0] if headers else "",
    )
    department_column = next((h for h in headers if DEPARTMENT_HEADER.search(h)), "")
    question_columns = [h for h in headers if h not in (respondent_column, department_column)]
    return RespondentTable(
        table=CanonicalTable(
            headers=list(headers),
            respondent_id_column=respondent_column,
            department_column=department_column,
            question_columns=question_columns,
            rows=list(rows),
            source_shape="respondent",
        )
    )


def convert_to_responses(table: CanonicalTable) -> list[SurveyResponse]:
    """One ``SurveyResponse`` per row; blank and non-numeric answers are left out."""
    responses: list[SurveyResponse] = []
    for row in table.rows:
        answers: dict[str, float] = {}
        for column in table.question_columns:
            value = to_number(row.get(column))
            if value is not None:
                answers[column] = value
        department = cell_text(row.get(table.department_column)) if table.department_column else ""
        responses.append(
            SurveyResponse(
                respondent_id=cell_text(row.get(table.respondent_id_column)),
                department=department,
                answers=answers,
            )
        )
    return responses


def question_label(column: str) -> str:
    """Strip a leading ``Q<n>_`` / ``Q<n> `` prefix from a column header."""
    return _QUESTION_PREFIX.sub("", column) or column


def generate_questions(
    table: CanonicalTable,
    scale_min: int,
    scale_max: int,
    categories: CategoryTable | None = None,
) -> list[Question]:
    """Create one ``Question`` per question column, categorised by its header."""
    return [
        Question(
            key=column,
            label=question_label(column),
            category_id=classify_question(column, categories),
            scale_min=scale_min,
            scale_max=scale_max,
        )
        for column in table.question_columns
    ]
