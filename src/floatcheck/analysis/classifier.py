"""Float, violation and criticality classification."""

import math

from floatcheck.logger import get_logger
from floatcheck.models import Relationship, RelationshipType, Task, finite_or_none

from .core import PropagationResult, RelationshipResult, TaskResult
from .indexer import ScheduleGraph

logger = get_logger()

INFINITE_FLOAT = math.inf


def undetermined_result(task: Task) -> TaskResult:
    """Result for a task without finite float: never critical, near-critical or violating."""
    return TaskResult(
        task_id=task.internal_id,
        early_start=task.start,
        early_finish=task.finish,
        late_start=INFINITE_FLOAT,
        late_finish=INFINITE_FLOAT,
        earliest_required_start=task.start,
        latest_required_finish=task.finish,
        total_float=INFINITE_FLOAT,
    )


def driving_gap(relationship: Relationship, pred: Task, succ: Task) -> float:
    """Absolute gap between the predecessor's constrained date and the successor's."""
    lag = relationship.effective_lag
    rel_type = relationship.type
    if rel_type == RelationshipType.SS:
        return abs((pred.start + lag) - succ.start)
    if rel_type == RelationshipType.FF:
        return abs((pred.finish + lag) - succ.finish)
    if rel_type == RelationshipType.SF:
        return abs((pred.start + lag) - succ.finish)
    return abs((pred.finish + lag) - succ.start)


class FloatClassifier:
    """Turns propagated bounds into float and criticality flags.

    Args:
        float_tolerance: Near-zero band (epsilon) for float comparisons
        float_threshold: Upper bound of the near-critical band (tau)
    """

    def __init__(self, float_tolerance: float, float_threshold: float):
        self.float_tolerance = float_tolerance
        self.float_threshold = max(0.0, float_threshold)

    def classify_task(
        self,
        task: Task,
        earliest_required_start: float,
        latest_required_finish: float,
    ) -> TaskResult:
        """Compute float and the float-based flags for one task."""
        start_slack = task.start - earliest_required_start
        finish_slack = latest_required_finish - task.finish
        total_float = min(start_slack, finish_slack)

        if not math.isfinite(total_float):
            return undetermined_result(task)

        late_finish = task.finish + max(0.0, total_float)
        late_start = late_finish - task.duration

        eps = self.float_tolerance
        violates = total_float < -eps
        by_float = abs(total_float) <= eps and not violates
        near_critical = (
            not by_float and not violates and eps < total_float <= self.float_threshold
        )

        return TaskResult(
            task_id=task.internal_id,
            early_start=task.start,
            early_finish=task.finish,
            late_start=late_start,
            late_finish=late_finish,
            earliest_required_start=earliest_required_start,
            latest_required_finish=latest_required_finish,
            total_float=total_float,
            violates_constraints=violates,
            is_critical_by_float=by_float,
            is_near_critical=near_critical,
        )

    def classify_relationship(
        self,
        relationship: Relationship,
        pred: Task,
        succ: Task,
        pred_result: TaskResult,
        succ_result: TaskResult,
    ) -> RelationshipResult:
        """Decide whether a relationship is driving and critical.

        An external free float overrides the driving calculation entirely.
        """
        is_driving = driving_gap(relationship, pred, succ) <= self.float_tolerance
        free_float = finite_or_none(relationship.free_float)
        if free_float is not None:
            is_critical = free_float <= self.float_tolerance
        else:
            is_critical = (
                is_driving and pred_result.is_critical_by_float and succ_result.is_critical_by_float
            )
        return RelationshipResult(
            predecessor_id=relationship.predecessor_id,
            successor_id=relationship.successor_id,
            is_critical=is_critical,
            is_driving=is_driving,
        )

    def classify(
        self,
        graph: ScheduleGraph,
        propagation: PropagationResult,
        *,
        subset: set[str] | None = None,
        seed_task_id: str | None = None,
    ) -> tuple[list[TaskResult], list[RelationshipResult]]:
        """Classify every task and relationship of the graph.

        Args:
            graph: Indexed schedule graph
            propagation: Output of the forward and backward passes
            subset: Restrict criticality to these task IDs; others are excluded
            seed_task_id: Task always forced critical (the selected task)

        Returns:
            Tuple of (task results in graph order, relationship results)
        """
        results: dict[str, TaskResult] = {}
        for task_id, task in graph.tasks.items():
            if subset is not None and task_id not in subset:
                results[task_id] = undetermined_result(task)
                continue
            if task_id in propagation.unresolved:
                results[task_id] = undetermined_result(task)
                continue
            results[task_id] = self.classify_task(
                task,
                propagation.earliest_required_start[task_id],
                propagation.latest_required_finish[task_id],
            )

        relationship_results: list[RelationshipResult] = []
        for relationship in graph.relationships:
            pred_id, succ_id = relationship.key
            out_of_scope = subset is not None and (pred_id not in subset or succ_id not in subset)
            determined = results[pred_id].is_determined and results[succ_id].is_determined
            if out_of_scope or not determined:
                relationship_results.append(
                    RelationshipResult(predecessor_id=pred_id, successor_id=succ_id)
                )
                continue

            rel_result = self.classify_relationship(
                relationship,
                graph.tasks[pred_id],
                graph.tasks[succ_id],
                results[pred_id],
                results[succ_id],
            )
            relationship_results.append(rel_result)
            if rel_result.is_critical:
                results[pred_id].is_critical_by_relationship = True
                results[succ_id].is_critical_by_relationship = True

        for task_id, result in results.items():
            result.is_critical = (
                result.is_critical_by_float and not result.violates_constraints
            ) or result.is_critical_by_relationship
            logger.checks(
                f"  {task_id}: float={result.total_float:g} critical={result.is_critical} "
                f"near_critical={result.is_near_critical} "
                f"violates={result.violates_constraints}"
            )

        if seed_task_id is not None and seed_task_id in results:
            seed = results[seed_task_id]
            seed.is_critical = True
            seed.is_near_critical = False

        return list(results.values()), relationship_results
