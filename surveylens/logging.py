"""Terminal logging and the per-survey run log.

The terminal shows warnings only (everything with ``-v``).  Commands that
read a survey file also keep a run log beside that file, at
``<dir>/.surveylens/surveylens.log``, where ``<dir>`` is ``log_dir`` from
the settings or else the file's own directory.  The run log level comes from
``SurveyLensSettings.log_level`` (``SURVEYLENS_LOG_LEVEL``).

Upload reports (detected shape, column roles, every validation issue) go to
the ``surveylens.report`` logger.  They reach the run log and never the
terminal.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from surveylens.config import SurveyLensSettings
from surveylens.models import CanonicalTable, DepartmentScoreData, ValidationResult

REPORT_LOGGER = "surveylens.report"

LOG_SUBDIR = ".surveylens"
LOG_FILENAME = "surveylens.log"

# Run logs rotate at 1 MB, keeping three old files
_MAX_BYTES = 1024 * 1024
_BACKUPS = 3

_QUIET_LOGGERS = ("openpyxl",)

report = logging.getLogger(REPORT_LOGGER)


class _NoReports(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        return not record.name.startswith(REPORT_LOGGER)


def run_log_path(settings: SurveyLensSettings, source: Path | None = None) -> Path | None:
    """Where the run log for *source* is written, or None when there is nowhere to put it."""
    base = settings.log_dir
    if base is None and source is not None:
        base = source.resolve().parent
    if base is None:
        return None
    return base / LOG_SUBDIR / LOG_FILENAME


def setup_logging(
    settings: SurveyLensSettings,
    *,
    source: Path | None = None,
    verbose: bool = False,
) -> Path | None:
    """Install the terminal handler and, when a location is known, the run log.

    Replaces handlers from an earlier call.  Returns the run log path.
    """
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    root.setLevel(logging.DEBUG)

    terminal = logging.StreamHandler()
    terminal.setLevel(logging.DEBUG if verbose else logging.WARNING)
    terminal.addFilter(_NoReports())
    terminal.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    root.addHandler(terminal)

    path = run_log_path(settings, source)
    if path is not None:
        path.parent.mkdir(parents=True, exist_ok=True)
        run_log = RotatingFileHandler(path, maxBytes=_MAX_BYTES, backupCount=_BACKUPS, encoding="utf-8")
        run_log.setLevel(settings.log_level)
        run_log.setFormatter(
            logging.Formatter(
                "%(asctime)s %(levelname)-7s %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        root.addHandler(run_log)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return path


def report_survey(source: str, table: CanonicalTable, validation: ValidationResult) -> None:
    """Record how a survey upload was read and what validation found."""
    report.info(
        "%s: %s table, %d rows, %d question columns",
        source,
        table.source_shape,
        len(table.rows),
        len(table.question_columns),
    )
    report.info(
        "%s: respondent column %r, department column %r",
        source,
        table.respondent_id_column,
        table.department_column or None,
    )
    for kind, issues in (("error", validation.errors), ("warning", validation.warnings)):
        for issue in issues:
            where = f"row {issue.row}, {issue.column}: " if issue.row is not None else ""
            report.info("%s: %s %s%s", source, kind, where, issue.message)
    report.info(
        "%s: %d errors, %d warnings",
        source,
        len(validation.errors),
        len(validation.warnings),
    )


def report_department_scores(source: str, data: DepartmentScoreData) -> None:
    """Record the layout found in a department-score matrix."""
    report.info(
        "%s: department matrix, %d questions, departments %s, overall column %r",
        source,
        len(data.questions),
        ", ".join(data.departments),
        data.overall_department or None,
    )
