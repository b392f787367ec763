"""Tests for ancestor and descendant closures."""

from floatcheck.analysis.config import TraceMode
from floatcheck.analysis.indexer import ScheduleGraph, build_graph
from floatcheck.analysis.scoping import ancestor_closure, descendant_closure, trace_closure
from tests.conftest import task


def _diamond() -> ScheduleGraph:
    return build_graph(
        [
            task("A", 0, 1),
            task("B", 1, 2, "A"),
            task("C", 1, 3, "A"),
            task("D", 3, 4, "B", "C"),
            task("E", 0, 1),
        ]
    )


class TestClosures:
    """Test reachability closures."""

    def test_ancestors_of_chain_end(self) -> None:
        """Ancestor closure includes the task itself."""
        graph = build_graph([task("A", 0, 1), task("B", 1, 2, "A"), task("C", 2, 3, "B")])

        assert ancestor_closure(graph, "C") == {"A", "B", "C"}

    def test_descendants(self) -> None:
        """Descendant closure follows successor edges."""
        assert descendant_closure(_diamond(), "B") == {"B", "D"}
        assert descendant_closure(_diamond(), "A") == {"A", "B", "C", "D"}

    def test_diamond_ancestors(self) -> None:
        """Shared ancestors are visited once."""
        assert ancestor_closure(_diamond(), "D") == {"A", "B", "C", "D"}

    def test_unrelated_task(self) -> None:
        """An isolated task's closures contain only itself."""
        assert ancestor_closure(_diamond(), "E") == {"E"}
        assert descendant_closure(_diamond(), "E") == {"E"}

    def test_terminates_on_cycle(self) -> None:
        """Closures terminate on cyclic graphs."""
        graph = build_graph([task("A", 0, 1, "C"), task("B", 1, 2, "A"), task("C", 2, 3, "B")])

        assert ancestor_closure(graph, "A") == {"A", "B", "C"}
        assert descendant_closure(graph, "B") == {"A", "B", "C"}

    def test_trace_closure_direction(self) -> None:
        """Backward traces ancestors, forward traces descendants."""
        graph = _diamond()

        assert trace_closure(graph, "B", TraceMode.BACKWARD) == {"A", "B"}
        assert trace_closure(graph, "B", TraceMode.FORWARD) == {"B", "D"}
