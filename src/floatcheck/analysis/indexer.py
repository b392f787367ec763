"""Dependency graph construction from task and relationship lists."""

from collections.abc import Iterable
from dataclasses import dataclass, field

from floatcheck.logger import get_logger
from floatcheck.models import Relationship, Task

logger = get_logger()


def _default_adjacency() -> dict[str, list[str]]:
    return {}


def _default_pairs() -> dict[tuple[str, str], Relationship]:
    return {}


@dataclass
class ScheduleGraph:
    """Index-based adjacency over a schedule snapshot.

    Tasks are keyed by ID and edges are stored as ID lists, so nothing here
    holds references between task objects.
    """

    tasks: dict[str, Task]
    relationships: list[Relationship] = field(default_factory=list)
    successors: dict[str, list[str]] = field(default_factory=_default_adjacency)
    predecessors: dict[str, list[str]] = field(default_factory=_default_adjacency)
    _by_pair: dict[tuple[str, str], Relationship] = field(default_factory=_default_pairs)

    def __len__(self) -> int:
        return len(self.tasks)

    @property
    def task_ids(self) -> list[str]:
        """Task IDs in input order."""
        return list(self.tasks)

    def relationship_for(self, predecessor_id: str, successor_id: str) -> Relationship | None:
        """Get the surviving relationship for an ordered pair."""
        return self._by_pair.get((predecessor_id, successor_id))

    def in_degree(self, task_id: str) -> int:
        return len(self.predecessors.get(task_id, []))

    def _add(self, relationship: Relationship) -> bool:
        pred_id, succ_id = relationship.key
        if pred_id == succ_id:
            logger.debug(f"Skipping self-loop on task '{pred_id}'")
            return False
        if pred_id not in self.tasks or succ_id not in self.tasks:
            logger.debug(f"Skipping relationship {pred_id} -> {succ_id}: unknown task")
            return False
        if relationship.key in self._by_pair:
            logger.debug(f"Skipping duplicate relationship {pred_id} -> {succ_id}")
            return False

        self._by_pair[relationship.key] = relationship
        self.relationships.append(relationship)
        self.successors[pred_id].append(succ_id)
        self.predecessors[succ_id].append(pred_id)
        return True


def build_graph(
    tasks: Iterable[Task],
    relationships: Iterable[Relationship] | None = None,
) -> ScheduleGraph:
    """Build the task lookup, adjacency lists and relationship index.

    Explicit relationships are indexed first; predecessor IDs embedded on tasks
    that no relationship covers are then synthesized from the task's own
    type/lag maps. Self-loops and references to unknown tasks are dropped, and
    only the first relationship for an ordered pair survives.

    Args:
        tasks: Tasks of the snapshot (IDs are expected to be unique)
        relationships: Optional explicit relationship list

    Returns:
        ScheduleGraph for the snapshot (empty for empty input)
    """
    task_list = list(tasks)
    task_map: dict[str, Task] = {}
    for task in task_list:
        if task.internal_id in task_map:
            logger.debug(f"Ignoring duplicate task ID '{task.internal_id}'")
            continue
        task_map[task.internal_id] = task

    graph = ScheduleGraph(tasks=task_map)
    for task_id in task_map:
        graph.successors[task_id] = []
        graph.predecessors[task_id] = []

    for relationship in relationships or []:
        graph._add(relationship)  # noqa: SLF001 - builder owns the graph

    for task in task_map.values():
        for pred_id in task.predecessor_ids:
            if graph.relationship_for(pred_id, task.internal_id) is not None:
                continue
            graph._add(  # noqa: SLF001 - builder owns the graph
                Relationship(
                    predecessor_id=pred_id,
                    successor_id=task.internal_id,
                    type=task.relationship_type_for(pred_id),
                    lag=task.lag_for(pred_id),
                )
            )

    logger.debug(
        f"Indexed {len(graph.tasks)} tasks and {len(graph.relationships)} relationships"
    )
    return graph
