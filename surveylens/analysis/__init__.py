"""Question statistics, classification and department comparison."""

from surveylens.analysis.classify import classify_question
from surveylens.analysis.departments import (
    department_score_analysis,
    run_department_analysis,
    summarize_department_scores,
)
from surveylens.analysis.distribution import build_distribution
from surveylens.analysis.engine import run_analysis
from surveylens.analysis.models import (
    AnalysisResult,
    DepartmentAnalysis,
    DepartmentScoreSummary,
    DistributionBucket,
    ExtractionType,
    Priority,
    Quadrant,
)
from surveylens.analysis.ordering import sort_departments

__all__ = [
    "AnalysisResult",
    "DepartmentAnalysis",
    "DepartmentScoreSummary",
    "DistributionBucket",
    "ExtractionType",
    "Priority",
    "Quadrant",
    "build_distribution",
    "classify_question",
    "department_score_analysis",
    "run_analysis",
    "run_department_analysis",
    "sort_departments",
    "summarize_department_scores",
]
