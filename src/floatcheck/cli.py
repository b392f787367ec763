"""Command-line interface for floatcheck."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from . import context
from .analysis import AnalysisConfig, AnalysisResult, AnalysisService, TraceMode
from .config import FloatcheckConfig, ReportFormat
from .exceptions import CircularDependencyError, FloatcheckError
from .loader import discover_config, load_schedule
from .logger import setup_logger
from .models import Schedule
from .report import render

app = typer.Typer(
    name="floatcheck",
    help="Schedule conformance checker - float, violations and critical paths on fixed dates",
    add_completion=False,
)


@app.callback()
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbosity level: 0=silent (default), 1=show changes, 2=show all checks, 3=debug",
            min=0,
            max=3,
        ),
    ] = 0,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to config file (default: floatcheck_config.yaml)",
        ),
    ] = None,
) -> None:
    """Global options for floatcheck commands."""
    setup_logger(verbose)
    context.set_config_path(config)


def _load(file: Path) -> tuple[Schedule, FloatcheckConfig]:
    try:
        schedule = load_schedule(file)
        config = discover_config(file)
    except (FloatcheckError, FileNotFoundError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None
    return schedule, config


def _analysis_config(
    config: FloatcheckConfig, tolerance: float | None, threshold: float | None
) -> AnalysisConfig:
    """Apply CLI overrides on top of the file configuration."""
    overrides: dict[str, float] = {}
    if tolerance is not None:
        overrides["float_tolerance"] = tolerance
    if threshold is not None:
        overrides["float_threshold"] = threshold
    return config.analysis.model_copy(update=overrides)


def _emit(  # noqa: PLR0913 - report output needs the full set of options
    result: AnalysisResult,
    schedule: Schedule,
    config: FloatcheckConfig,
    fmt: ReportFormat | None,
    max_tasks: int | None,
    output: Path | None,
) -> None:
    report = render(
        result,
        fmt or config.report.format,
        tasks=schedule.tasks,
        max_tasks=config.report.max_tasks if max_tasks is None else max_tasks,
    )
    if output:
        output.write_text(report + "\n", encoding="utf-8")
        typer.echo(f"Report written to {output}")
    else:
        typer.echo(report)


@app.command()
def analyze(  # noqa: PLR0913 - CLI command needs multiple options
    file: Annotated[Path, typer.Argument(help="Path to the schedule YAML file")] = Path(
        "schedule.yaml"
    ),
    *,
    tolerance: Annotated[
        float | None,
        typer.Option("--tolerance", help="Float tolerance (epsilon) in days", min=0.0),
    ] = None,
    threshold: Annotated[
        float | None,
        typer.Option("--threshold", help="Near-critical float threshold in days", min=0.0),
    ] = None,
    format: Annotated[  # noqa: A002 - 'format' is appropriate name for CLI option
        ReportFormat | None,
        typer.Option("--format", "-f", help="Output format"),
    ] = None,
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Output file path")] = None,
    max_tasks: Annotated[
        int | None,
        typer.Option("--max-tasks", help="Maximum task rows in the report (0 = all)", min=0),
    ] = None,
) -> None:
    """Compute float and criticality for every task in a schedule."""
    schedule, config = _load(file)
    service = AnalysisService(schedule, _analysis_config(config, tolerance, threshold))

    try:
        result = service.analyze()
    except CircularDependencyError as e:
        typer.echo("Error: Cannot calculate critical path: circular dependencies", err=True)
        if e.report is not None:
            for description in e.report.cycle_descriptions:
                typer.echo(f"  {description}", err=True)
        raise typer.Exit(1) from None

    _emit(result, schedule, config, format, max_tasks, output)


@app.command()
def trace(  # noqa: PLR0913 - CLI command needs multiple options
    file: Annotated[Path, typer.Argument(help="Path to the schedule YAML file")],
    task_id: Annotated[str, typer.Argument(help="Task to trace from")],
    *,
    mode: Annotated[
        TraceMode | None,
        typer.Option("--mode", "-m", help="Trace ancestors (backward) or descendants (forward)"),
    ] = None,
    tolerance: Annotated[
        float | None,
        typer.Option("--tolerance", help="Float tolerance (epsilon) in days", min=0.0),
    ] = None,
    threshold: Annotated[
        float | None,
        typer.Option("--threshold", help="Near-critical float threshold in days", min=0.0),
    ] = None,
    format: Annotated[  # noqa: A002 - 'format' is appropriate name for CLI option
        ReportFormat | None,
        typer.Option("--format", "-f", help="Output format"),
    ] = None,
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Output file path")] = None,
    max_tasks: Annotated[
        int | None,
        typer.Option("--max-tasks", help="Maximum task rows in the report (0 = all)", min=0),
    ] = None,
) -> None:
    """Compute criticality restricted to the ancestors or descendants of a task."""
    schedule, config = _load(file)
    service = AnalysisService(schedule, _analysis_config(config, tolerance, threshold))

    try:
        result = service.trace(task_id, mode)
    except FloatcheckError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None

    _emit(result, schedule, config, format, max_tasks, output)


@app.command()
def cycles(
    file: Annotated[Path, typer.Argument(help="Path to the schedule YAML file")] = Path(
        "schedule.yaml"
    ),
) -> None:
    """Report circular dependencies in a schedule."""
    schedule, config = _load(file)
    report = AnalysisService(schedule, config.analysis).detect_cycles()

    if not report.has_cycles:
        typer.echo("No circular dependencies found")
        return

    typer.echo(f"Found circular dependencies involving {len(report.cyclic_task_ids)} task(s):")
    for description in report.cycle_descriptions:
        typer.echo(f"  {description}")
    raise typer.Exit(1)


def main() -> int:
    """Main entry point."""
    # Typer handles sys.exit() internally
    app()
    return 0


if __name__ == "__main__":
    main()
