"""Reachability closures used to scope analysis to a selected task."""

from collections import deque

from .config import TraceMode
from .indexer import ScheduleGraph


def _closure(adjacency: dict[str, list[str]], seed_id: str) -> set[str]:
    closure: set[str] = {seed_id}
    queue: deque[str] = deque([seed_id])

    while queue:
        current = queue.popleft()
        for neighbour in adjacency.get(current, []):
            if neighbour not in closure:
                closure.add(neighbour)
                queue.append(neighbour)

    return closure


def ancestor_closure(graph: ScheduleGraph, task_id: str) -> set[str]:
    """Find the task and every task that can reach it through predecessor edges."""
    return _closure(graph.predecessors, task_id)


def descendant_closure(graph: ScheduleGraph, task_id: str) -> set[str]:
    """Find the task and every task reachable from it through successor edges."""
    return _closure(graph.successors, task_id)


def trace_closure(graph: ScheduleGraph, task_id: str, mode: TraceMode) -> set[str]:
    """Closure for a trace direction."""
    if mode == TraceMode.FORWARD:
        return descendant_closure(graph, task_id)
    return ancestor_closure(graph, task_id)
