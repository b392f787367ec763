"""High-level analysis service."""

import math
from collections.abc import Iterable
from typing import Any

from floatcheck.exceptions import CircularDependencyError, MissingReferenceError
from floatcheck.logger import get_logger
from floatcheck.models import Relationship, Schedule, Task

from .classifier import FloatClassifier
from .config import AnalysisConfig, TraceMode
from .core import AnalysisResult, CycleReport, RelationshipResult, TaskResult
from .cycles import detect_cycles
from .indexer import build_graph
from .propagation import propagate
from .scoping import trace_closure

logger = get_logger()


class AnalysisService:
    """Runs schedule-conformance analysis on one schedule snapshot.

    This service coordinates:
    - Graph indexing (lookup, adjacency, relationship deduplication)
    - The cycle gate for full-project runs
    - Forward/backward required-time propagation
    - Float and criticality classification, optionally scoped to a trace

    The snapshot is never mutated; every call builds its own scratch state, so
    repeated calls on the same snapshot return equal results.
    """

    def __init__(self, schedule: Schedule, config: AnalysisConfig | None = None):
        """Initialize analysis service.

        Args:
            schedule: Schedule snapshot to analyze
            config: Optional thresholds (defaults to AnalysisConfig())
        """
        self.schedule = schedule
        self.config = config or AnalysisConfig()
        self.graph = build_graph(schedule.tasks, schedule.relationships)
        self.classifier = FloatClassifier(
            float_tolerance=self.config.float_tolerance,
            float_threshold=self.config.float_threshold,
        )

    def detect_cycles(self) -> CycleReport:
        """Run the cycle detector over the indexed graph."""
        return detect_cycles(self.graph)

    def analyze(self) -> AnalysisResult:
        """Analyze the whole project.

        Returns:
            AnalysisResult with per-task and per-relationship results

        Raises:
            CircularDependencyError: If the graph has cycles. The error carries
                the CycleReport and no per-task floats are produced.
        """
        if not self.graph.tasks:
            logger.changes("No tasks to analyze")
            return self._build_result([], [], CycleReport())

        report = self.detect_cycles()
        if report.has_cycles:
            logger.changes(
                "Cannot calculate critical path: circular dependencies detected "
                f"({len(report.cyclic_task_ids)} task(s))"
            )
            for description in report.cycle_descriptions:
                logger.changes(f"  {description}")
            raise CircularDependencyError(
                "Circular dependencies in schedule: " + "; ".join(report.cycle_descriptions),
                report=report,
            )

        propagation = propagate(self.graph, strict=True)
        task_results, relationship_results = self.classifier.classify(self.graph, propagation)
        return self._build_result(task_results, relationship_results, report)

    def trace(self, task_id: str, mode: TraceMode | None = None) -> AnalysisResult:
        """Analyze criticality restricted to a selected task's ancestors or descendants.

        No up-front cycle gate is applied; tasks on or behind a cycle end up
        undetermined instead.

        Args:
            task_id: Selected task
            mode: Trace direction (defaults to the configured trace mode)

        Raises:
            MissingReferenceError: If the task is not in the schedule
        """
        if task_id not in self.graph.tasks:
            raise MissingReferenceError(f"Unknown task: {task_id}")

        effective_mode = mode or self.config.trace_mode
        subset = trace_closure(self.graph, task_id, effective_mode)
        logger.changes(
            f"Tracing {effective_mode.value} from '{task_id}': {len(subset)} task(s) in scope"
        )
        return self.analyze_subset(subset, seed_task_id=task_id)

    def analyze_subset(
        self, subset: set[str], *, seed_task_id: str | None = None
    ) -> AnalysisResult:
        """Analyze with criticality restricted to a subset of tasks.

        Tasks outside the subset are excluded: not critical, not near-critical,
        infinite float. The seed task, if given, is always marked critical.
        """
        report = self.detect_cycles()
        propagation = propagate(self.graph, strict=False, time_ordered=True)
        task_results, relationship_results = self.classifier.classify(
            self.graph, propagation, subset=subset, seed_task_id=seed_task_id
        )

        result = self._build_result(task_results, relationship_results, report)
        result.scope = set(subset)
        result.selected_task_id = seed_task_id
        if propagation.unresolved & subset:
            result.warnings.append(
                f"{len(propagation.unresolved & subset)} task(s) in scope sit on or behind "
                "a circular dependency; their float is undetermined"
            )
        return result

    def _build_result(
        self,
        task_results: list[TaskResult],
        relationship_results: list[RelationshipResult],
        report: CycleReport,
    ) -> AnalysisResult:
        finishes = [t.finish for t in self.graph.tasks.values() if math.isfinite(t.finish)]
        project_finish = max(0.0, *finishes) if finishes else 0.0

        warnings: list[str] = []
        for result in task_results:
            if result.violates_constraints:
                message = (
                    f"Task '{result.task_id}' violates its constraints by "
                    f"{-result.total_float:g} days"
                )
                logger.changes(message)
                warnings.append(message)

        metadata: dict[str, Any] = {}
        if self.schedule.metadata.name:
            metadata["schedule"] = self.schedule.metadata.name

        return AnalysisResult(
            tasks=task_results,
            relationships=relationship_results,
            cycles=report,
            float_tolerance=self.config.float_tolerance,
            float_threshold=self.config.float_threshold,
            project_finish=project_finish,
            warnings=warnings,
            metadata=metadata,
        )


def run_analysis(
    schedule: Schedule,
    config: AnalysisConfig | None = None,
    *,
    selected_task_id: str | None = None,
    trace_mode: TraceMode | None = None,
) -> AnalysisResult:
    """Run a full-project analysis, or a trace when a task is selected."""
    service = AnalysisService(schedule, config)
    if selected_task_id is None:
        return service.analyze()
    return service.trace(selected_task_id, trace_mode)


def analyze_schedule(  # noqa: PLR0913 - mirrors the in-process input contract
    tasks: Iterable[Task],
    relationships: Iterable[Relationship] = (),
    float_tolerance: float = 0.001,
    float_threshold: float = 0.0,
    *,
    selected_task_id: str | None = None,
    trace_mode: TraceMode | None = None,
) -> AnalysisResult:
    """Analyze a flat task and relationship list.

    Args:
        tasks: Tasks with actual start/finish day offsets
        relationships: Explicit relationships (merged with task predecessor IDs)
        float_tolerance: Near-zero band (epsilon)
        float_threshold: Near-critical band (tau)
        selected_task_id: Optional task to trace
        trace_mode: Trace direction when a task is selected

    Returns:
        AnalysisResult for the run
    """
    schedule = Schedule(tasks=list(tasks), relationships=list(relationships))
    config = AnalysisConfig(float_tolerance=float_tolerance, float_threshold=float_threshold)
    return run_analysis(
        schedule, config, selected_task_id=selected_task_id, trace_mode=trace_mode
    )
