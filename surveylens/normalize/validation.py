"""Row-level checks on a canonical per-respondent table.

Nothing here raises: problems are collected as errors (non-numeric answers,
no data, no question columns) or warnings (missing or out-of-range answers),
each with spreadsheet coordinates.  Callers decide whether to gate on
``is_valid``.
"""

from __future__ import annotations

import logging

from surveylens.models import CanonicalTable, ValidationIssue, ValidationResult
from surveylens.normalize.shapes import cell_text, to_number

logger = logging.getLogger(__name__)


def _format_number(value: float) -> str:
    return str(int(value)) if value.is_integer() else str(value)


def validate_table(table: CanonicalTable, scale_min: float, scale_max: float) -> ValidationResult:
    errors: list[ValidationIssue] = []
    warnings: list[ValidationIssue] = []

    if not table.rows:
        errors.append(ValidationIssue(message="The table has no data rows."))
        return ValidationResult(is_valid=False, errors=errors, warnings=warnings)
    if not table.question_columns:
        errors.append(ValidationIssue(message="No question columns found."))
        return ValidationResult(is_valid=False, errors=errors, warnings=warnings)

    for idx, row in enumerate(table.rows):
        row_number = idx + 2  # header is spreadsheet row 1
        for column in table.question_columns:
            raw = row.get(column)
            text = cell_text(raw)
            if not text:
                warnings.append(ValidationIssue(row=row_number, column=column, message="missing value"))
                continue
            value = to_number(raw)
            if value is None:
                errors.append(
                    ValidationIssue(row=row_number, column=column, message=f'not a number: "{text}"')
                )
            elif value < scale_min or value > scale_max:
                warnings.append(
                    ValidationIssue(
                        row=row_number,
                        column=column,
                        message=(
                            f"out of range: {_format_number(value)} "
                            f"(expected {_format_number(float(scale_min))}-{_format_number(float(scale_max))})"
                        ),
                    )
                )

    logger.info("Validation: %d errors, %d warnings", len(errors), len(warnings))
    return ValidationResult(is_valid=not errors, errors=errors, warnings=warnings)
