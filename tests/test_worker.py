"""Tests for background analysis."""

import pytest

from floatcheck.analysis import AnalysisConfig, AnalysisResult, AnalysisWorker, ResultSlot
from floatcheck.exceptions import CircularDependencyError
from floatcheck.models import Schedule
from tests.conftest import task


def _chain() -> Schedule:
    return Schedule(tasks=[task("A", 0, 1), task("B", 1, 2, "A")])


class TestResultSlot:
    """Test latest-result publishing."""

    def test_publish_newer(self) -> None:
        """Newer generations replace older ones."""
        slot = ResultSlot()
        first = AnalysisResult(project_finish=1.0)
        second = AnalysisResult(project_finish=2.0)

        assert slot.publish(0, first)
        assert slot.publish(1, second)
        assert slot.result is second
        assert slot.generation == 1

    def test_stale_result_discarded(self) -> None:
        """A result older than the one held is dropped."""
        slot = ResultSlot()
        fresh = AnalysisResult(project_finish=2.0)
        stale = AnalysisResult(project_finish=1.0)

        slot.publish(5, fresh)

        assert not slot.publish(3, stale)
        assert not slot.publish(5, stale)
        assert slot.result is fresh

    def test_empty_slot(self) -> None:
        """A fresh slot holds nothing."""
        assert ResultSlot().result is None


class TestAnalysisWorker:
    """Test running analyses off the caller's thread."""

    def test_submit_returns_result(self) -> None:
        """A submitted run resolves to its analysis result."""
        with AnalysisWorker() as worker:
            result = worker.submit(_chain()).result(timeout=10)

        assert result.critical_task_ids == ["A", "B"]
        assert worker.latest_result == result

    def test_latest_result_is_last_submitted(self) -> None:
        """After several runs the slot holds the last submission's result."""
        with AnalysisWorker() as worker:
            worker.submit(_chain())
            worker.submit(Schedule(tasks=[task("A", 0, 1), task("B", 1, 9, "A")]))

        assert worker.latest_result is not None
        assert worker.latest_result.project_finish == 9.0
        assert worker.slot.generation == 1

    def test_trace_submission(self) -> None:
        """Trace runs go through the same worker."""
        with AnalysisWorker() as worker:
            result = worker.submit(_chain(), selected_task_id="A").result(timeout=10)

        assert result.selected_task_id == "A"

    def test_per_request_config(self) -> None:
        """A request can override the worker's thresholds."""
        with AnalysisWorker(AnalysisConfig(float_threshold=1.0)) as worker:
            default = worker.submit(_chain()).result(timeout=10)
            override = worker.submit(
                _chain(), config=AnalysisConfig(float_threshold=3.0)
            ).result(timeout=10)

        assert default.float_threshold == 1.0
        assert override.float_threshold == 3.0

    def test_failed_run_keeps_previous_result(self) -> None:
        """A failing run raises through its future and leaves the slot alone."""
        cyclic = Schedule(tasks=[task("A", 0, 1, "B"), task("B", 1, 2, "A")])

        with AnalysisWorker() as worker:
            good = worker.submit(_chain())
            bad = worker.submit(cyclic)
            good.result(timeout=10)
            with pytest.raises(CircularDependencyError):
                bad.result(timeout=10)

        assert worker.latest_result is not None
        assert worker.latest_result.critical_task_ids == ["A", "B"]
