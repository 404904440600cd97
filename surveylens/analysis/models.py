"""Data structures for analysis computation.

These are plain dataclasses (not Pydantic): they are ephemeral, recomputed
whenever the source data or settings change, and never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Quadrant(str, Enum):
    """Importance × mean bucket used to prioritise remediation."""

    IMPROVE = "improve"  # important, below midpoint
    MAINTAIN = "maintain"  # important, at or above midpoint
    MONITOR = "monitor"  # not important, below midpoint
    EXCESS = "excess"  # not important, at or above midpoint


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ExtractionType(str, Enum):
    ISSUE = "issue"
    EXCELLENT = "excellent"
    NEUTRAL = "neutral"


@dataclass
class AnalysisResult:
    """Statistics and classification for one question."""

    question_id: str
    question_key: str
    question_label: str
    category_id: str
    mean: float
    median: float
    std_dev: float  # population standard deviation
    low_ratio: float  # share of answers <= 2
    high_ratio: float  # share of answers >= 4
    importance: float  # |pearson(question scores, overall scores)|
    priority: Priority
    quadrant: Quadrant
    extraction_type: ExtractionType
    answered: int = 0  # non-missing answers behind the statistics


@dataclass
class DepartmentAnalysis:
    """One department's mean for one question, relative to the overall mean."""

    department: str
    question_key: str
    mean: float
    diff_from_overall: float


@dataclass
class DistributionBucket:
    value: int
    count: int = 0


@dataclass
class DepartmentAverage:
    department: str
    average: float


@dataclass
class DepartmentScoreSummary:
    """Overview of a department-score matrix, ready for the report layer."""

    sub_departments: list[str]  # departments without the overall column
    department_averages: list[DepartmentAverage]
    overall_average: float
    issue_questions: list[int] = field(default_factory=list)  # question numbers
    excellent_questions: list[int] = field(default_factory=list)
    lowest_department: DepartmentAverage | None = None
    highest_department: DepartmentAverage | None = None
    analyses: list[DepartmentAnalysis] = field(default_factory=list)
