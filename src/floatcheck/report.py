"""Report rendering for analysis results."""

from __future__ import annotations

import json
import math
from dataclasses import replace
from typing import Any

import yaml

from .analysis.core import AnalysisResult, RelationshipResult, TaskResult
from .config import ReportFormat
from .models import Task


def _number(value: float) -> float | None:
    """Render a float for plain data; infinities have no numeric meaning downstream."""
    if not math.isfinite(value):
        return None
    return value


def limit_tasks(
    results: list[TaskResult], tasks: list[Task], max_tasks: int
) -> list[TaskResult]:
    """Pick at most max_tasks results for display.

    Priority order: first and last task, critical tasks, near-critical tasks,
    milestones, then evenly sampled remaining tasks. The selection keeps the
    input order.

    Args:
        results: Task results in input order
        tasks: Schedule tasks (used to identify milestones)
        max_tasks: Maximum number of rows; 0 disables limiting

    Returns:
        Selected task results in input order
    """
    if max_tasks <= 0 or len(results) <= max_tasks:
        return list(results)

    milestone_ids = {task.internal_id for task in tasks if task.task_type.is_milestone}
    selected: set[int] = set()

    def take(indices: Any) -> None:
        for index in indices:
            if len(selected) >= max_tasks:
                return
            selected.add(index)

    take([0, len(results) - 1])
    take(i for i, r in enumerate(results) if r.is_critical)
    take(i for i, r in enumerate(results) if r.is_near_critical)
    take(i for i, r in enumerate(results) if r.task_id in milestone_ids)

    remaining = [i for i in range(len(results)) if i not in selected]
    slots = max_tasks - len(selected)
    if slots > 0 and remaining:
        step = len(remaining) / slots
        take(remaining[int(k * step)] for k in range(slots))

    return [results[i] for i in sorted(selected)]


def _task_to_dict(result: TaskResult) -> dict[str, Any]:
    return {
        "task_id": result.task_id,
        "early_start": _number(result.early_start),
        "early_finish": _number(result.early_finish),
        "late_start": _number(result.late_start),
        "late_finish": _number(result.late_finish),
        "earliest_required_start": _number(result.earliest_required_start),
        "latest_required_finish": _number(result.latest_required_finish),
        "total_float": _number(result.total_float),
        "violates_constraints": result.violates_constraints,
        "is_critical": result.is_critical,
        "is_critical_by_float": result.is_critical_by_float,
        "is_critical_by_relationship": result.is_critical_by_relationship,
        "is_near_critical": result.is_near_critical,
    }


def _relationship_to_dict(result: RelationshipResult) -> dict[str, Any]:
    return {
        "predecessor_id": result.predecessor_id,
        "successor_id": result.successor_id,
        "is_critical": result.is_critical,
        "is_driving": result.is_driving,
    }


def result_to_dict(result: AnalysisResult) -> dict[str, Any]:
    """Convert an analysis result to plain data (infinite floats become None)."""
    return {
        "metadata": dict(result.metadata),
        "float_tolerance": result.float_tolerance,
        "float_threshold": result.float_threshold,
        "project_finish": result.project_finish,
        "selected_task_id": result.selected_task_id,
        "scope": sorted(result.scope) if result.scope is not None else None,
        "cycles": {
            "has_cycles": result.cycles.has_cycles,
            "cyclic_task_ids": sorted(result.cycles.cyclic_task_ids),
            "descriptions": list(result.cycles.cycle_descriptions),
        },
        "tasks": [_task_to_dict(t) for t in result.tasks],
        "relationships": [_relationship_to_dict(r) for r in result.relationships],
        "warnings": list(result.warnings),
    }


def _fmt(value: float) -> str:
    if not math.isfinite(value):
        return "-"
    return f"{value:g}"


def _flags(result: TaskResult, selected_task_id: str | None) -> str:
    flags = ""
    if result.task_id == selected_task_id:
        flags += "*"
    if result.is_critical:
        flags += "C"
    if result.is_near_critical:
        flags += "N"
    if result.violates_constraints:
        flags += "V"
    return flags


def format_text(result: AnalysisResult, total_tasks: int | None = None) -> str:
    """Format an analysis result as an aligned text table.

    Flags: C = critical, N = near-critical, V = violates constraints,
    * = selected task.
    """
    lines: list[str] = []
    if result.metadata.get("schedule"):
        lines.append(f"Schedule: {result.metadata['schedule']}")
    if result.selected_task_id is not None:
        scope_size = len(result.scope) if result.scope is not None else 0
        lines.append(f"Trace: {result.selected_task_id} ({scope_size} task(s) in scope)")
    lines.append(f"Project finish: {result.project_finish:g} days")
    lines.append(
        f"Critical: {len(result.critical_task_ids)}  "
        f"Near-critical: {len(result.near_critical_task_ids)}  "
        f"Violating: {len(result.violating_task_ids)}"
    )
    lines.append("")

    headers = ["ID", "ES", "EF", "LS", "LF", "Float", "Flags"]
    rows = [
        [
            t.task_id,
            _fmt(t.early_start),
            _fmt(t.early_finish),
            _fmt(t.late_start),
            _fmt(t.late_finish),
            _fmt(t.total_float),
            _flags(t, result.selected_task_id),
        ]
        for t in result.tasks
    ]
    widths = [max(len(row[i]) for row in [headers, *rows]) for i in range(len(headers))]
    lines.append("  ".join(h.ljust(w) for h, w in zip(headers, widths, strict=True)).rstrip())
    lines.append("  ".join("-" * w for w in widths))
    for row in rows:
        lines.append("  ".join(c.ljust(w) for c, w in zip(row, widths, strict=True)).rstrip())

    if total_tasks is not None and total_tasks > len(result.tasks):
        lines.append(f"(showing {len(result.tasks)} of {total_tasks} tasks)")

    if result.cycles.has_cycles:
        lines.append("")
        lines.append("Cycles:")
        lines.extend(f"  {description}" for description in result.cycles.cycle_descriptions)

    if result.warnings:
        lines.append("")
        lines.append("Warnings:")
        lines.extend(f"  {warning}" for warning in result.warnings)

    return "\n".join(lines)


def render(
    result: AnalysisResult,
    fmt: ReportFormat = ReportFormat.TEXT,
    *,
    tasks: list[Task] | None = None,
    max_tasks: int = 0,
) -> str:
    """Render an analysis result in the requested format.

    Args:
        result: Analysis result
        fmt: Output format
        tasks: Schedule tasks, used to keep milestones when limiting
        max_tasks: Maximum number of task rows; 0 disables limiting

    Returns:
        Rendered report
    """
    total = len(result.tasks)
    shown = replace(result, tasks=limit_tasks(result.tasks, tasks or [], max_tasks))

    if fmt == ReportFormat.JSON:
        return json.dumps(result_to_dict(shown), indent=2)
    if fmt == ReportFormat.YAML:
        return yaml.safe_dump(result_to_dict(shown), sort_keys=False)
    return format_text(shown, total_tasks=total)
