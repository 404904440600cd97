"""Frequency-distribution tables → pseudo-respondent rows.

Layout handled (first row under the header is a label row)::

    事前アンケート | __EMPTY | 5        | 4            | ... | 1          | __EMPTY_1 | 点
    番号           | 質問    | そう思う | 少しそう思う | ... | そう思わない | 総数      | 加重平均値
    1              | 質問文  | 6        | 16           | ... | 2          | 65        | 3.1

Each question row's counts are expanded into a list of scores, padded with
"no answer" up to the largest question total, and shuffled.  The resulting
rows are not real respondents, but every per-question count is preserved,
so per-question statistics match the table exactly.
"""

from __future__ import annotations

import logging
import random
import re
from dataclasses import dataclass

from surveylens.models import CanonicalTable, Row
from surveylens.normalize.shapes import (
    NUMBER_HEADER,
    RESPONDENT_ID_COLUMN,
    FrequencyQuestion,
    FrequencyTable,
    cell_text,
    is_text,
    to_count,
    to_number,
)

logger = logging.getLogger(__name__)

MIN_ROWS = 3
MIN_SCORE_COLUMNS = 3
SCORE_RANGE = (1, 10)

AVERAGE_HEADER = re.compile(r"点|平均|average|avg|mean", re.IGNORECASE)


@dataclass
class FrequencyLayout:
    """Column roles found in a frequency table."""

    score_columns: dict[int, str]  # score -> header, in header order
    text_column: str
    number_column: str | None
    average_column: str | None


def score_columns(headers: list[str]) -> dict[int, str]:
    """Headers whose text is an integer within ``SCORE_RANGE``."""
    found: dict[int, str] = {}
    low, high = SCORE_RANGE
    for h in headers:
        value = to_number(h)
        if value is None or not value.is_integer():
            continue
        score = int(value)
        if low <= score <= high and score not in found:
            found[score] = h
    return found


def detect_layout(headers: list[str], rows: list[Row]) -> FrequencyLayout | None:
    """Return the column roles when *rows* look like a frequency table."""
    if len(rows) < MIN_ROWS:
        return None
    scores = score_columns(headers)
    if len(scores) < MIN_SCORE_COLUMNS:
        return None

    label_row = rows[0]
    labelled = [h for h in scores.values() if is_text(label_row.get(h), 1)]
    if len(labelled) < len(scores) / 2:
        return None

    data_rows = rows[1:]
    score_headers = set(scores.values())
    text_column = next(
        (
            h
            for h in headers
            if h not in score_headers and any(is_text(r.get(h), 5) for r in data_rows)
        ),
        None,
    )
    if text_column is None:
        return None

    taken = score_headers | {text_column}
    number_column = next(
        (h for h in headers if h not in taken and NUMBER_HEADER.search(h)), None
    )
    if number_column is None:
        number_column = next(
            (
                h
                for h in headers
                if h not in taken and NUMBER_HEADER.search(cell_text(label_row.get(h)))
            ),
            None,
        )

    average_column = next(
        (h for h in headers if h not in score_headers and AVERAGE_HEADER.search(h)), None
    )
    if average_column is None:
        average_column = next(
            (
                h
                for h in headers
                if h not in taken
                and h != number_column
                and AVERAGE_HEADER.search(cell_text(label_row.get(h)))
            ),
            None,
        )
    return FrequencyLayout(
        score_columns=scores,
        text_column=text_column,
        number_column=number_column,
        average_column=average_column,
    )


def parse_questions(layout: FrequencyLayout, data_rows: list[Row]) -> list[FrequencyQuestion]:
    """Read counts per question row; rows without a label or any count are skipped."""
    questions: list[FrequencyQuestion] = []
    for row in data_rows:
        text = cell_text(row.get(layout.text_column))
        if len(text) < 2:
            continue

        counts: dict[int, int] = {}
        for score, header in layout.score_columns.items():
            value = to_count(row.get(header)) or 0.0
            counts[score] = max(0, int(round(value)))
        total = sum(counts.values())
        if total == 0:
            continue

        number = len(questions) + 1
        if layout.number_column is not None:
            raw = to_number(row.get(layout.number_column))
            if raw:
                number = int(raw)

        average = None
        if layout.average_column is not None:
            average = to_number(row.get(layout.average_column)) or None

        questions.append(
            FrequencyQuestion(
                number=number,
                text=text,
                counts=counts,
                total=total,
                weighted_average=average,
            )
        )
    return questions


def expand_scores(
    question: FrequencyQuestion,
    size: int,
    rng: random.Random,
) -> list[int | None]:
    """Scores repeated by their counts, padded with None to *size*, shuffled."""
    scores: list[int | None] = []
    for score, count in question.counts.items():
        scores.extend([score] * count)
    scores.extend([None] * (size - len(scores)))
    rng.shuffle(scores)
    return scores


def build_frequency_table(
    headers: list[str],
    rows: list[Row],
    rng: random.Random | None = None,
) -> FrequencyTable | None:
    """Rebuild pseudo-respondent rows, or None when *rows* are not a frequency table.

    *rng* drives the shuffle; pass a seeded ``random.Random`` for
    reproducible rows.  Defaults to the system random source.
    """
    layout = detect_layout(headers, rows)
    if layout is None:
        return None
    questions = parse_questions(layout, rows[1:])
    if not questions:
        return None

    if rng is None:
        rng = random.SystemRandom()
    size = max(q.total for q in questions)
    columns = [expand_scores(q, size, rng) for q in questions]
    keys = [q.key for q in questions]

    pseudo_rows: list[Row] = []
    for i in range(size):
        row: Row = {RESPONDENT_ID_COLUMN: f"{i + 1:03d}"}
        for key, column in zip(keys, columns):
            score = column[i]
            if score is not None:
                row[key] = score
        pseudo_rows.append(row)

    logger.info(
        "Frequency table: %d questions, %d pseudo-respondents", len(questions), size
    )
    table = CanonicalTable(
        headers=[RESPONDENT_ID_COLUMN, *keys],
        respondent_id_column=RESPONDENT_ID_COLUMN,
        department_column="",
        question_columns=keys,
        rows=pseudo_rows,
        source_shape="frequency",
    )
    return FrequencyTable(table=table, questions=questions)
