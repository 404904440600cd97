"""Department-score matrices: one pre-aggregated average per department × question.

Only used when the caller explicitly asks for the department path; this
shape is never auto-detected alongside the per-respondent shapes.
"""

from __future__ import annotations

import logging
import re

from surveylens.analysis.classify import classify_question
from surveylens.analysis.metrics import round2
from surveylens.analysis.ordering import sort_departments
from surveylens.categories import CategoryTable
from surveylens.models import DepartmentScoreData, DepartmentScoreQuestion, Row
from surveylens.normalize.shapes import (
    NUMBER_HEADER,
    DepartmentMatrix,
    ShapeDetectionError,
    is_text,
    to_number,
)

logger = logging.getLogger(__name__)

# Headers that are never department columns: row markers, Likert labels,
# counts and averages.
NON_DEPARTMENT_HEADER = re.compile(
    r"^(番号|No\.?|#|質問|設問|そう思う|少しそう思う|どちらでもない|あまりそう思わない"
    r"|そう思わない|無回答|総数|点|平均|加重平均値|average|avg|mean|count|total|回答|回答数|ID)$",
    re.IGNORECASE,
)

# Grand-total columns used as the comparison baseline.
OVERALL_HEADER = re.compile(r"部門計|全体|合計|総計|total|overall|all departments", re.IGNORECASE)

MIN_COVERAGE = 0.3
SCORE_BOUNDS = (1.0, 5.5)
LABEL_ROW_SCAN = 5


def skip_label_rows(headers: list[str], rows: list[Row]) -> list[Row]:
    """Drop rows that carry text where the numeric columns hold scores.

    Numeric columns are those with a number (or a decimal string) in one of
    the first few rows.  A row is a label row when at least half of those
    columns contain non-numeric text.
    """
    if not rows:
        return rows
    sample = rows[:LABEL_ROW_SCAN]

    def _numeric(value: object) -> bool:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return True
        return isinstance(value, str) and "." in value and to_number(value) is not None

    numeric_headers = [h for h in headers if any(_numeric(r.get(h)) for r in sample)]
    if not numeric_headers:
        return rows

    kept: list[Row] = []
    for row in rows:
        texts = sum(1 for h in numeric_headers if is_text(row.get(h), 1))
        if texts < len(numeric_headers) / 2:
            kept.append(row)
    return kept


def _is_department_column(header: str, rows: list[Row]) -> bool:
    if NON_DEPARTMENT_HEADER.match(header.strip()) and not OVERALL_HEADER.search(header):
        return False
    values = [v for v in (to_number(r.get(header)) for r in rows) if v is not None and v > 0]
    if not values or len(values) < len(rows) * MIN_COVERAGE:
        return False
    low, high = SCORE_BOUNDS
    return all(low <= v <= high for v in values)


def extract_department_scores(
    headers: list[str],
    rows: list[Row],
    categories: CategoryTable | None = None,
) -> DepartmentMatrix:
    """Extract a ``DepartmentScoreData`` matrix from parsed rows.

    Raises ``ShapeDetectionError`` when the rows are empty, when no question
    label column or no department score column can be found, or when no
    question row remains after dropping spacer rows.
    """
    if not rows:
        raise ShapeDetectionError("empty", "The file contains no data rows.")

    rows = skip_label_rows(headers, rows)
    if not rows:
        raise ShapeDetectionError("empty", "The file contains only label rows.")

    text_column = next((h for h in headers if any(is_text(r.get(h), 5) for r in rows)), None)
    if text_column is None:
        raise ShapeDetectionError(
            "no_label_column", "No question text column found (need text longer than 5 characters)."
        )

    number_column = next(
        (h for h in headers if h != text_column and NUMBER_HEADER.search(h)), None
    )

    dept_columns = [
        h
        for h in headers
        if h not in (text_column, number_column) and _is_department_column(h, rows)
    ]
    if not dept_columns:
        raise ShapeDetectionError(
            "no_score_columns",
            "No department score columns found (numeric columns with scores between 1 and 5).",
        )

    overall = next((h for h in dept_columns if OVERALL_HEADER.search(h)), "")

    questions: list[DepartmentScoreQuestion] = []
    for row in rows:
        label = str(row.get(text_column) or "").strip()
        if len(label) <= 2:
            continue
        number = len(questions) + 1
        if number_column is not None:
            raw = to_number(row.get(number_column))
            if raw:
                number = int(raw)
        scores: dict[str, float] = {}
        for dept in dept_columns:
            value = to_number(row.get(dept))
            if value is not None and value > 0:
                scores[dept] = round2(value)
        questions.append(
            DepartmentScoreQuestion(
                number=number,
                label=label,
                category_id=classify_question(label, categories),
                scores=scores,
            )
        )

    if not questions:
        raise ShapeDetectionError("no_questions", "No question rows found.")

    logger.info(
        "Department matrix: %d questions, %d departments (overall column: %s)",
        len(questions),
        len(dept_columns),
        overall or "none",
    )
    return DepartmentMatrix(
        data=DepartmentScoreData(
            questions=questions,
            departments=sort_departments(dept_columns),
            overall_department=overall,
        )
    )
