"""Forward and backward required-time propagation over fixed actual dates."""

from collections import deque

from floatcheck.exceptions import CircularDependencyError
from floatcheck.logger import get_logger
from floatcheck.models import RelationshipType, Task

from .core import PropagationResult
from .indexer import ScheduleGraph
from .priority_queue import PriorityQueue

logger = get_logger()


def implied_earliest_start(
    rel_type: RelationshipType, pred: Task, succ: Task, lag: float
) -> float:
    """Earliest start the predecessor's actual dates require of the successor."""
    if rel_type == RelationshipType.SS:
        return pred.start + lag
    if rel_type == RelationshipType.FF:
        return pred.finish - succ.duration + lag
    if rel_type == RelationshipType.SF:
        return pred.start - succ.duration + lag
    return pred.finish + lag


def implied_latest_finish(
    rel_type: RelationshipType, pred: Task, succ: Task, lag: float
) -> float:
    """Latest finish the successor's actual dates allow the predecessor."""
    if rel_type == RelationshipType.SS:
        return succ.start - lag + pred.duration
    if rel_type == RelationshipType.FF:
        return succ.finish - lag
    if rel_type == RelationshipType.SF:
        return succ.finish - lag - succ.duration + pred.duration
    return succ.start - lag


def topological_order(graph: ScheduleGraph, *, time_ordered: bool = False) -> list[str]:
    """Compute a topological ordering with Kahn's algorithm.

    Tasks whose in-degree never reaches zero (cycle members and everything
    downstream of them) are left out, so a result shorter than the task count
    means the graph is cyclic.

    Args:
        graph: Indexed schedule graph
        time_ordered: Release ready tasks in actual-start order instead of FIFO

    Returns:
        List of task IDs in topological order
    """
    in_degree = {task_id: graph.in_degree(task_id) for task_id in graph.tasks}
    ready: PriorityQueue[str] | deque[str] = PriorityQueue() if time_ordered else deque()

    def enqueue(task_id: str) -> None:
        if isinstance(ready, PriorityQueue):
            ready.push(task_id, graph.tasks[task_id].start)
        else:
            ready.append(task_id)

    def dequeue() -> str:
        if isinstance(ready, PriorityQueue):
            return ready.pop()
        return ready.popleft()

    for task_id, degree in in_degree.items():
        if degree == 0:
            enqueue(task_id)

    result: list[str] = []
    while ready:
        task_id = dequeue()
        result.append(task_id)

        for succ_id in graph.successors.get(task_id, []):
            in_degree[succ_id] -= 1
            if in_degree[succ_id] == 0:
                enqueue(succ_id)

    return result


class RequiredTimePropagator:
    """Computes earliest-required-start and latest-required-finish per task.

    Unlike a classical CPM pass the actual dates are never moved: both passes
    read the neighbours' actual dates and only tighten the required bounds.
    """

    def __init__(self, *, strict: bool = True, time_ordered: bool = False):
        """Initialize the propagator.

        Args:
            strict: Raise on cycles instead of leaving cyclic tasks unresolved
            time_ordered: Use a start-ordered priority queue for the topological sort
        """
        self.strict = strict
        self.time_ordered = time_ordered

    def process(self, graph: ScheduleGraph) -> PropagationResult:
        """Run both passes over the graph.

        Raises:
            CircularDependencyError: In strict mode, if the graph has a cycle
        """
        topo_order = topological_order(graph, time_ordered=self.time_ordered)
        unresolved = set(graph.tasks) - set(topo_order)

        if unresolved:
            if self.strict:
                raise CircularDependencyError(
                    "Circular dependency detected in task graph: "
                    f"{len(unresolved)} task(s) could not be ordered"
                )
            logger.debug(f"{len(unresolved)} task(s) left unresolved by topological sort")

        earliest = self._forward_pass(graph, topo_order)
        latest = self._backward_pass(graph, topo_order)

        return PropagationResult(
            topological_order=topo_order,
            earliest_required_start=earliest,
            latest_required_finish=latest,
            unresolved=unresolved,
        )

    def _forward_pass(self, graph: ScheduleGraph, topo_order: list[str]) -> dict[str, float]:
        earliest = {task_id: task.start for task_id, task in graph.tasks.items()}

        for task_id in topo_order:
            pred = graph.tasks[task_id]
            for succ_id in graph.successors.get(task_id, []):
                relationship = graph.relationship_for(task_id, succ_id)
                if relationship is None:
                    continue
                succ = graph.tasks[succ_id]
                required = implied_earliest_start(
                    relationship.type, pred, succ, relationship.effective_lag
                )
                # Binding constraint wins; later edges can't loosen it
                if required > earliest[succ_id]:
                    logger.debug(
                        f"  {succ_id}: earliest required start {earliest[succ_id]:g} -> "
                        f"{required:g} via {task_id} ({relationship.type.value})"
                    )
                    earliest[succ_id] = required

        return earliest

    def _backward_pass(self, graph: ScheduleGraph, topo_order: list[str]) -> dict[str, float]:
        latest = {task_id: task.finish for task_id, task in graph.tasks.items()}

        for task_id in reversed(topo_order):
            successors = graph.successors.get(task_id, [])
            if not successors:
                continue

            pred = graph.tasks[task_id]
            min_finish = float("inf")
            for succ_id in successors:
                relationship = graph.relationship_for(task_id, succ_id)
                if relationship is None:
                    continue
                required = implied_latest_finish(
                    relationship.type, pred, graph.tasks[succ_id], relationship.effective_lag
                )
                min_finish = min(min_finish, required)

            if min_finish != float("inf"):
                # Never required later than the task's own recorded finish
                latest[task_id] = min(pred.finish, min_finish)

        return latest


def propagate(
    graph: ScheduleGraph, *, strict: bool = True, time_ordered: bool = False
) -> PropagationResult:
    """Run the forward and backward passes over a graph."""
    return RequiredTimePropagator(strict=strict, time_ordered=time_ordered).process(graph)
