"""Shape detection and reshaping of uploaded survey tables."""

from surveylens.normalize.chain import DetectorChain, default_chain, normalize
from surveylens.normalize.department_matrix import extract_department_scores
from surveylens.normalize.frequency import build_frequency_table
from surveylens.normalize.respondent import (
    build_respondent_table,
    convert_to_responses,
    generate_questions,
)
from surveylens.normalize.shapes import (
    DepartmentMatrix,
    FrequencyQuestion,
    FrequencyTable,
    NormalizedTable,
    RespondentTable,
    ShapeDetectionError,
)
from surveylens.normalize.validation import validate_table

__all__ = [
    "DepartmentMatrix",
    "DetectorChain",
    "FrequencyQuestion",
    "FrequencyTable",
    "NormalizedTable",
    "RespondentTable",
    "ShapeDetectionError",
    "build_frequency_table",
    "build_respondent_table",
    "convert_to_responses",
    "default_chain",
    "extract_department_scores",
    "generate_questions",
    "normalize",
    "validate_table",
]
