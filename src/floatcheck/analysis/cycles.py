"""Cycle detection over the successor graph."""

from collections.abc import Iterator

from floatcheck.logger import get_logger

from .core import CycleReport
from .indexer import ScheduleGraph

logger = get_logger()


def _describe(graph: ScheduleGraph, task_id: str) -> str:
    task = graph.tasks.get(task_id)
    if task and task.name:
        return f"{task.name} ({task_id})"
    return task_id


def detect_cycles(graph: ScheduleGraph) -> CycleReport:
    """Find cycles with a depth-first search from every unvisited task.

    A successor already on the recursion stack closes a cycle. The path from
    that successor back to itself is recorded and every task on it is marked
    cyclic. The search is iterative so long chains don't hit the recursion limit.

    Args:
        graph: Indexed schedule graph

    Returns:
        CycleReport with the cyclic task IDs and one description per cycle found
    """
    visited: set[str] = set()
    cyclic: set[str] = set()
    descriptions: list[str] = []

    for root in graph.tasks:
        if root in visited:
            continue

        path: list[str] = [root]
        on_stack: set[str] = {root}
        stack: list[Iterator[str]] = [iter(graph.successors.get(root, []))]
        visited.add(root)

        while stack:
            succ_id = next(stack[-1], None)
            if succ_id is None:
                stack.pop()
                on_stack.discard(path.pop())
                continue

            if succ_id in on_stack:
                cycle_path = path[path.index(succ_id) :] + [succ_id]
                cyclic.update(cycle_path)
                description = " → ".join(_describe(graph, tid) for tid in cycle_path)
                descriptions.append(f"Cycle found: {description}")
                logger.debug(f"Back-edge {path[-1]} -> {succ_id} closes a cycle")
            elif succ_id not in visited:
                visited.add(succ_id)
                path.append(succ_id)
                on_stack.add(succ_id)
                stack.append(iter(graph.successors.get(succ_id, [])))

    return CycleReport(
        has_cycles=bool(cyclic),
        cyclic_task_ids=cyclic,
        cycle_descriptions=descriptions,
    )
