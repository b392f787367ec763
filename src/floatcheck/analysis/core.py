"""Core dataclasses for the analysis engine."""

import math
from dataclasses import dataclass, field
from typing import Any


def _default_str_list() -> list[str]:
    return []


def _default_str_set() -> set[str]:
    return set()


def _default_float_dict() -> dict[str, float]:
    return {}


@dataclass
class CycleReport:
    """Result of cycle detection over the successor graph."""

    has_cycles: bool = False
    cyclic_task_ids: set[str] = field(default_factory=_default_str_set)
    cycle_descriptions: list[str] = field(default_factory=_default_str_list)


@dataclass
class PropagationResult:
    """Required-time bounds from the forward and backward passes.

    Tasks listed in ``unresolved`` never entered the topological order (they
    sit on or behind a cycle) and have no finite bounds.
    """

    topological_order: list[str]
    earliest_required_start: dict[str, float] = field(default_factory=_default_float_dict)
    latest_required_finish: dict[str, float] = field(default_factory=_default_float_dict)
    unresolved: set[str] = field(default_factory=_default_str_set)


@dataclass
class TaskResult:
    """Computed float and criticality for one task."""

    task_id: str
    early_start: float  # Actual start
    early_finish: float  # Actual finish
    late_start: float
    late_finish: float
    earliest_required_start: float
    latest_required_finish: float
    total_float: float
    violates_constraints: bool = False
    is_critical: bool = False
    is_critical_by_float: bool = False
    is_critical_by_relationship: bool = False
    is_near_critical: bool = False

    @property
    def is_determined(self) -> bool:
        """False when the task has no finite float (undetermined or out of scope)."""
        return math.isfinite(self.total_float)


@dataclass
class RelationshipResult:
    """Computed criticality for one relationship."""

    predecessor_id: str
    successor_id: str
    is_critical: bool = False
    is_driving: bool = False


def _default_task_results() -> list[TaskResult]:
    return []


def _default_relationship_results() -> list[RelationshipResult]:
    return []


@dataclass
class AnalysisResult:
    """Complete result of one analysis run."""

    tasks: list[TaskResult] = field(default_factory=_default_task_results)
    relationships: list[RelationshipResult] = field(default_factory=_default_relationship_results)
    cycles: CycleReport = field(default_factory=CycleReport)
    float_tolerance: float = 0.0
    float_threshold: float = 0.0
    project_finish: float = 0.0
    selected_task_id: str | None = None
    scope: set[str] | None = None  # None means the whole project
    warnings: list[str] = field(default_factory=_default_str_list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def task_result(self, task_id: str) -> TaskResult | None:
        """Get the result for a task by ID."""
        for result in self.tasks:
            if result.task_id == task_id:
                return result
        return None

    def relationship_result(
        self, predecessor_id: str, successor_id: str
    ) -> RelationshipResult | None:
        """Get the result for a relationship by its endpoints."""
        for result in self.relationships:
            if result.predecessor_id == predecessor_id and result.successor_id == successor_id:
                return result
        return None

    @property
    def critical_task_ids(self) -> list[str]:
        return [t.task_id for t in self.tasks if t.is_critical]

    @property
    def near_critical_task_ids(self) -> list[str]:
        return [t.task_id for t in self.tasks if t.is_near_critical]

    @property
    def violating_task_ids(self) -> list[str]:
        return [t.task_id for t in self.tasks if t.violates_constraints]
