"""Command-line interface for surveylens."""

from __future__ import annotations

import dataclasses
import json
import sys
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape

from surveylens import __version__
from surveylens.analysis.departments import summarize_department_scores
from surveylens.analysis.distribution import build_distribution
from surveylens.analysis.models import AnalysisResult, ExtractionType, Priority
from surveylens.config import SurveyLensSettings, load_settings
from surveylens.logging import setup_logging
from surveylens.normalize import ShapeDetectionError
from surveylens.readers import TableParseError
from surveylens.session import SurveySession

# Known commands, used by _maybe_inject_analyze() to detect bare file arguments
_COMMANDS = {"analyze", "analyse", "departments", "distribution", "validate", "sample", "help"}


def _maybe_inject_analyze() -> None:
    """If the first argument is a file (not a command), inject 'analyze'.

    This allows `surveylens survey.csv` as shorthand for `surveylens analyze survey.csv`.
    """
    if len(sys.argv) < 2:
        return  # No arguments: let Typer show help

    first_arg = sys.argv[1]
    if first_arg in _COMMANDS or first_arg.startswith("-"):
        return
    if Path(first_arg).is_file():
        sys.argv.insert(1, "analyze")


app = typer.Typer(
    name="surveylens",
    help="Survey table ingestion, statistics and department comparison.",
    no_args_is_help=True,
)
console = Console(width=min(100, Console().width))

_PRIORITY_STYLE = {
    Priority.HIGH: "red",
    Priority.MEDIUM: "yellow",
    Priority.LOW: "dim",
}


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"surveylens {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version", "-V",
            help="Show version and exit.",
            callback=_version_callback,
            is_eager=True,
        ),
    ] = False,
) -> None:
    """Survey table ingestion, statistics and department comparison."""


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


def _settings(
    issue_threshold: float | None,
    excellent_threshold: float | None,
    scale_min: int | None,
    scale_max: int | None,
    log_dir: Path | None,
) -> SurveyLensSettings:
    try:
        return load_settings(
            issue_threshold=issue_threshold,
            excellent_threshold=excellent_threshold,
            scale_min=scale_min,
            scale_max=scale_max,
            log_dir=log_dir,
        )
    except ValueError as exc:
        console.print(f"[red]Invalid settings:[/red] {escape(str(exc))}")
        raise typer.Exit(1) from exc


def _load_survey(session: SurveySession, file: Path) -> None:
    try:
        session.load_survey(file)
    except TableParseError as exc:
        console.print(f"[red]Could not read file:[/red] {escape(str(exc))}")
        raise typer.Exit(1) from exc


def _signed(value: float) -> str:
    return f"+{value:.2f}" if value >= 0 else f"{value:.2f}"


def _to_json(value: object) -> object:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    return value


def _print_results(results: list[AnalysisResult]) -> None:
    console.print(
        "  [bold]"
        f"{'Question'.ljust(28)}{'Mean':>6}{'Med':>6}{'SD':>6}{'Low':>6}{'High':>6}{'Imp':>6}"
        "  Quadrant  Priority"
        "[/bold]"
    )
    for r in results:
        label = r.question_label if len(r.question_label) <= 26 else r.question_label[:25] + "…"
        style = _PRIORITY_STYLE[r.priority]
        flag = ""
        if r.extraction_type is ExtractionType.ISSUE:
            flag = "  [red]issue[/red]"
        elif r.extraction_type is ExtractionType.EXCELLENT:
            flag = "  [green]excellent[/green]"
        console.print(
            f"  {escape(label).ljust(28)}{r.mean:>6.2f}{r.median:>6.2f}{r.std_dev:>6.2f}"
            f"{r.low_ratio:>6.2f}{r.high_ratio:>6.2f}{r.importance:>6.2f}"
            f"  {r.quadrant.value.ljust(9)} [{style}]{r.priority.value}[/{style}]{flag}"
        )


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command()
def analyze(
    file: Annotated[
        Path,
        typer.Argument(help="CSV or .xlsx survey file (per-respondent or frequency table).", exists=True, dir_okay=False),
    ],
    issue_threshold: Annotated[
        float | None,
        typer.Option("--issue-threshold", help="Mean at or below which a question is an issue. [default: 3.0]"),
    ] = None,
    excellent_threshold: Annotated[
        float | None,
        typer.Option("--excellent-threshold", help="Mean at or above which a question is excellent. [default: 4.0]"),
    ] = None,
    scale_min: Annotated[int | None, typer.Option("--scale-min", help="Lowest answer value. [default: 1]")] = None,
    scale_max: Annotated[int | None, typer.Option("--scale-max", help="Highest answer value. [default: 5]")] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print results as JSON.")] = False,
    log_dir: Annotated[Path | None, typer.Option("--log-dir", help="Directory for the run log. [default: the survey file's directory]")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable verbose logging.")] = False,
) -> None:
    """Per-question statistics, quadrants and department deltas."""
    settings = _settings(issue_threshold, excellent_threshold, scale_min, scale_max, log_dir)
    setup_logging(settings, source=file, verbose=verbose)
    session = SurveySession(settings=settings)
    _load_survey(session, file)

    if as_json:
        payload = {
            "validation": session.validation.model_dump() if session.validation else None,
            "results": [_to_json(r) for r in session.analysis_results],
            "departments": [_to_json(d) for d in session.department_analyses],
        }
        typer.echo(json.dumps(payload, ensure_ascii=False, indent=2, default=str))
        return

    table = session.table
    shape = table.source_shape if table else "respondent"
    console.print(f"\n  [bold]{escape(file.name)}[/bold]")
    console.print(
        f"  [dim]{len(session.responses)} respondents, {len(session.questions)} questions"
        f" ({shape} table)[/dim]"
    )
    if session.validation and not session.validation.is_valid:
        console.print(
            f"  [yellow]{len(session.validation.errors)} validation errors; run "
            f"[bold]surveylens validate {escape(str(file))}[/bold] for details[/yellow]"
        )
    console.print()
    _print_results(session.analysis_results)

    if table and table.department_column and session.department_analyses:
        console.print("\n  [bold]Departments[/bold] [dim](difference from overall mean)[/dim]")
        labels = {q.key: q.label for q in session.questions}
        current = None
        for d in session.department_analyses:
            if d.department != current:
                current = d.department
                console.print(f"  {escape(current or '(no department)')}")
            colour = "green" if d.diff_from_overall > 0 else "red" if d.diff_from_overall < 0 else "dim"
            console.print(
                f"    {escape(labels.get(d.question_key, d.question_key)).ljust(28)}"
                f"{d.mean:>6.2f}  [{colour}]{_signed(d.diff_from_overall)}[/{colour}]"
            )
    console.print()


analyse = app.command(name="analyse", hidden=True)(analyze)


@app.command()
def departments(
    file: Annotated[
        Path,
        typer.Argument(help="CSV or .xlsx department-score matrix.", exists=True, dir_okay=False),
    ],
    issue_threshold: Annotated[float | None, typer.Option("--issue-threshold")] = None,
    excellent_threshold: Annotated[float | None, typer.Option("--excellent-threshold")] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print the summary as JSON.")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable verbose logging.")] = False,
) -> None:
    """Compare pre-aggregated department scores against the overall column."""
    settings = _settings(issue_threshold, excellent_threshold, None, None, None)
    setup_logging(settings, source=file, verbose=verbose)
    session = SurveySession(settings=settings)
    try:
        data = session.load_department_scores(file)
    except (TableParseError, ShapeDetectionError) as exc:
        console.print(f"[red]Could not read department scores:[/red] {escape(str(exc))}")
        raise typer.Exit(1) from exc

    summary = summarize_department_scores(data, settings)
    if as_json:
        payload = {"data": data.model_dump(), "summary": _to_json(summary)}
        typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))
        return

    console.print(f"\n  [bold]{escape(file.name)}[/bold]")
    baseline = data.overall_department or "mean of departments"
    console.print(
        f"  [dim]{len(data.questions)} questions, {len(summary.sub_departments)} departments,"
        f" baseline: {escape(baseline)}[/dim]"
    )
    console.print(f"  Overall average: [bold]{summary.overall_average:.2f}[/bold]\n")
    for avg in summary.department_averages:
        diff = avg.average - summary.overall_average
        colour = "green" if diff > 0 else "red" if diff < 0 else "dim"
        console.print(
            f"  {escape(avg.department).ljust(24)}{avg.average:>6.2f}  [{colour}]{_signed(diff)}[/{colour}]"
        )
    if summary.issue_questions:
        console.print(f"\n  [red]Issue questions:[/red] {', '.join(f'Q{n}' for n in summary.issue_questions)}")
    if summary.excellent_questions:
        console.print(
            f"  [green]Excellent questions:[/green] {', '.join(f'Q{n}' for n in summary.excellent_questions)}"
        )
    console.print()


@app.command()
def distribution(
    file: Annotated[Path, typer.Argument(help="CSV or .xlsx survey file.", exists=True, dir_okay=False)],
    question: Annotated[str, typer.Argument(help="Question column header (or its label).")],
    scale_min: Annotated[int | None, typer.Option("--scale-min")] = None,
    scale_max: Annotated[int | None, typer.Option("--scale-max")] = None,
) -> None:
    """Histogram of answers for one question."""
    settings = _settings(None, None, scale_min, scale_max, None)
    setup_logging(settings, source=file)
    session = SurveySession(settings=settings)
    _load_survey(session, file)

    match = next(
        (q for q in session.questions if question in (q.key, q.label)),
        None,
    )
    if match is None:
        console.print(f"[red]No question named[/red] {escape(question)}")
        raise typer.Exit(1)

    buckets = build_distribution(session.responses, match.key, settings.scale_min, settings.scale_max)
    peak = max((b.count for b in buckets), default=0) or 1
    console.print(f"\n  [bold]{escape(match.label)}[/bold]\n")
    for b in buckets:
        bar = "█" * round(40 * b.count / peak)
        console.print(f"  {b.value:>3}  {bar} {b.count}")
    console.print()


@app.command()
def validate(
    file: Annotated[Path, typer.Argument(help="CSV or .xlsx survey file.", exists=True, dir_okay=False)],
    scale_min: Annotated[int | None, typer.Option("--scale-min")] = None,
    scale_max: Annotated[int | None, typer.Option("--scale-max")] = None,
    show_warnings: Annotated[bool, typer.Option("--warnings", "-w", help="List warnings too.")] = False,
) -> None:
    """Check answers for missing, non-numeric and out-of-range values."""
    settings = _settings(None, None, scale_min, scale_max, None)
    setup_logging(settings, source=file)
    session = SurveySession(settings=settings)
    _load_survey(session, file)
    result = session.validation
    assert result is not None

    for issue in result.errors:
        where = f"row {issue.row}, {issue.column}: " if issue.row is not None else ""
        console.print(f"  [red]✗[/red] {escape(where + issue.message)}")
    if show_warnings:
        for issue in result.warnings:
            where = f"row {issue.row}, {issue.column}: " if issue.row is not None else ""
            console.print(f"  [yellow]⚠[/yellow] {escape(where + issue.message)}")
    console.print(f"  {len(result.errors)} errors, {len(result.warnings)} warnings")
    if not result.is_valid:
        raise typer.Exit(1)


@app.command()
def sample(
    output: Annotated[Path, typer.Argument(help="Where to write the sample CSV.")],
    rows: Annotated[int, typer.Option("--rows", "-n", help="Number of respondents.")] = 50,
    seed: Annotated[int | None, typer.Option("--seed", help="Random seed for reproducible output.")] = None,
) -> None:
    """Write a sample per-respondent survey CSV."""
    import random

    from surveylens.sample import generate_sample_csv

    output.write_text(generate_sample_csv(rows, random.Random(seed)), encoding="utf-8")
    console.print(f"Wrote {rows} sample responses to [bold]{escape(str(output))}[/bold]")


def run() -> None:
    """Console-script entry point."""
    _maybe_inject_analyze()
    app()
