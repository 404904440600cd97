"""Normalised table variants and the cell helpers shared by the detectors."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field

from surveylens.models import CanonicalTable, Cell, DepartmentScoreData

# Header names that mark a question-number column.
NUMBER_HEADER = re.compile(r"番号|^\s*no\.?\s*$|^\s*#\s*$|number", re.IGNORECASE)

# Respondent-id and department header names (per-respondent tables).
RESPONDENT_HEADER = re.compile(r"回答者|respondent|(?:^|[^a-z])id(?:$|[^a-z])", re.IGNORECASE)
DEPARTMENT_HEADER = re.compile(r"部署|department|dept|組織", re.IGNORECASE)

# Column name given to the synthetic respondent ids of reconstructed tables.
RESPONDENT_ID_COLUMN = "回答者ID"


class ShapeDetectionError(ValueError):
    """A department-score matrix could not be extracted.

    ``reason`` names the failed precondition: ``"empty"``,
    ``"no_label_column"``, ``"no_score_columns"`` or ``"no_questions"``.
    """

    def __init__(self, reason: str, message: str) -> None:
        super().__init__(message)
        self.reason = reason


# ---------------------------------------------------------------------------
# Cell helpers
# ---------------------------------------------------------------------------


def to_number(cell: Cell) -> float | None:
    """Parse a cell as a finite number; blank and non-numeric cells give None.

    Strings holding a comma or an underscore are not numbers, so a
    comma-decimal answer such as ``"4,5"`` is rejected rather than read as 45.
    """
    if cell is None or isinstance(cell, bool):
        return None
    if isinstance(cell, (int, float)):
        value = float(cell)
    else:
        text = str(cell).strip()
        if not text or "," in text or "_" in text:
            return None
        try:
            value = float(text)
        except ValueError:
            return None
    return value if math.isfinite(value) else None


def to_count(cell: Cell) -> float | None:
    """Like :func:`to_number`, but accepts thousands separators (``"1,234"``)."""
    if isinstance(cell, str):
        cell = cell.replace(",", "")
    return to_number(cell)


def is_text(cell: Cell, longer_than: int) -> bool:
    """True for a non-numeric string cell longer than *longer_than* characters."""
    if not isinstance(cell, str):
        return False
    text = cell.strip()
    return len(text) > longer_than and to_number(text) is None


def cell_text(cell: Cell) -> str:
    if cell is None:
        return ""
    if isinstance(cell, float) and cell.is_integer():
        return str(int(cell))
    return str(cell).strip()


# ---------------------------------------------------------------------------
# Tagged variants
# ---------------------------------------------------------------------------


@dataclass
class FrequencyQuestion:
    """One question row of a frequency-distribution table."""

    number: int
    text: str
    counts: dict[int, int]  # score -> respondents choosing it
    total: int
    weighted_average: float | None = None

    @property
    def key(self) -> str:
        return f"Q{self.number}_{self.text}"


@dataclass
class RespondentTable:
    """A plain per-respondent table."""

    table: CanonicalTable
    kind: str = field(default="respondent", init=False)


@dataclass
class FrequencyTable:
    """Pseudo-respondent table rebuilt from per-score counts."""

    table: CanonicalTable
    questions: list[FrequencyQuestion] = field(default_factory=list)
    kind: str = field(default="frequency", init=False)


@dataclass
class DepartmentMatrix:
    """Pre-aggregated department × question averages."""

    data: DepartmentScoreData
    kind: str = field(default="department_matrix", init=False)


NormalizedTable = RespondentTable | FrequencyTable | DepartmentMatrix
