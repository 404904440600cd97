"""Ordered shape detectors for uploaded survey tables.

Each detector pairs a pure predicate with a transformer.  ``normalize``
walks the chain in priority order and the first detector that applies
produces the result; the respondent-table detector always applies, so the
default chain is total.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence
from dataclasses import dataclass, field

from surveylens.categories import CategoryTable
from surveylens.models import Row
from surveylens.normalize.department_matrix import extract_department_scores
from surveylens.normalize.frequency import build_frequency_table, detect_layout, parse_questions
from surveylens.normalize.respondent import build_respondent_table
from surveylens.normalize.shapes import NormalizedTable

logger = logging.getLogger(__name__)


class FrequencyTableDetector:
    name = "frequency"

    def __init__(self, rng: random.Random | None = None) -> None:
        self.rng = rng

    def applies(self, headers: list[str], rows: list[Row]) -> bool:
        layout = detect_layout(headers, rows)
        return layout is not None and bool(parse_questions(layout, rows[1:]))

    def transform(self, headers: list[str], rows: list[Row]) -> NormalizedTable:
        result = build_frequency_table(headers, rows, self.rng)
        if result is None:
            msg = "rows are not a frequency-distribution table"
            raise ValueError(msg)
        return result


class RespondentTableDetector:
    name = "respondent"

    def applies(self, headers: list[str], rows: list[Row]) -> bool:
        return True

    def transform(self, headers: list[str], rows: list[Row]) -> NormalizedTable:
        return build_respondent_table(headers, rows)


@dataclass
class DetectorChain:
    detectors: Sequence[FrequencyTableDetector | RespondentTableDetector] = field(
        default_factory=list
    )

    def run(self, headers: list[str], rows: list[Row]) -> NormalizedTable:
        for detector in self.detectors:
            if detector.applies(headers, rows):
                logger.info("Detected %s table layout", detector.name)
                return detector.transform(headers, rows)
        msg = "no detector accepted the table"
        raise ValueError(msg)


def default_chain(rng: random.Random | None = None) -> DetectorChain:
    return DetectorChain(detectors=[FrequencyTableDetector(rng), RespondentTableDetector()])


def normalize(
    headers: list[str],
    rows: list[Row],
    *,
    department_matrix: bool = False,
    rng: random.Random | None = None,
    categories: CategoryTable | None = None,
) -> NormalizedTable:
    """Reshape parsed rows into one of the normalised variants.

    With ``department_matrix=True`` the rows are read as a department-score
    matrix (and ``ShapeDetectionError`` may be raised); otherwise the default
    chain yields a ``FrequencyTable`` or a ``RespondentTable`` and never
    raises for shape.
    """
    if department_matrix:
        return extract_department_scores(headers, rows, categories)
    return default_chain(rng).run(headers, rows)
