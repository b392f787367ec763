"""Background analysis with latest-result publishing."""

import threading
from concurrent.futures import Future, ThreadPoolExecutor

from floatcheck.logger import get_logger
from floatcheck.models import Schedule

from .config import AnalysisConfig, TraceMode
from .core import AnalysisResult
from .service import run_analysis

logger = get_logger()


class ResultSlot:
    """Holds the most recent analysis result.

    Each result is tagged with the generation of the request that produced it.
    A result is only accepted if its generation is newer than the one already
    held, so a slow stale run can never overwrite a fresher one.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._generation = -1
        self._result: AnalysisResult | None = None

    def publish(self, generation: int, result: AnalysisResult) -> bool:
        """Store a result if it is newer than the current one.

        Returns:
            True if the result was stored
        """
        with self._lock:
            if generation <= self._generation:
                logger.debug(
                    f"Discarding stale analysis result (generation {generation} "
                    f"<= {self._generation})"
                )
                return False
            self._generation = generation
            self._result = result
            return True

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    @property
    def result(self) -> AnalysisResult | None:
        with self._lock:
            return self._result


class AnalysisWorker:
    """Runs analyses off the caller's thread.

    Requests are executed one at a time in submission order. Each request
    works on its own snapshot; the caller keeps ownership of the schedule and
    must not mutate it while a run is in flight. Completed results are
    published to ``slot``; failed runs are logged and leave the slot unchanged.

    Example:
        with AnalysisWorker() as worker:
            future = worker.submit(schedule)
            result = future.result()
    """

    def __init__(self, config: AnalysisConfig | None = None):
        self.config = config or AnalysisConfig()
        self.slot = ResultSlot()
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="floatcheck")
        self._lock = threading.Lock()
        self._next_generation = 0

    def submit(
        self,
        schedule: Schedule,
        *,
        selected_task_id: str | None = None,
        trace_mode: TraceMode | None = None,
        config: AnalysisConfig | None = None,
    ) -> "Future[AnalysisResult]":
        """Queue an analysis of a schedule snapshot.

        Args:
            schedule: Snapshot to analyze
            selected_task_id: Optional task to trace
            trace_mode: Trace direction when a task is selected
            config: Per-request thresholds (defaults to the worker's config)

        Returns:
            Future resolving to the AnalysisResult, or raising the analysis error
        """
        with self._lock:
            generation = self._next_generation
            self._next_generation += 1

        future = self._executor.submit(
            run_analysis,
            schedule,
            config or self.config,
            selected_task_id=selected_task_id,
            trace_mode=trace_mode,
        )
        future.add_done_callback(lambda done: self._on_done(generation, done))
        return future

    def _on_done(self, generation: int, future: "Future[AnalysisResult]") -> None:
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            logger.warning(f"Analysis run {generation} failed: {error}")
            return
        self.slot.publish(generation, future.result())

    @property
    def latest_result(self) -> AnalysisResult | None:
        """Most recent published result."""
        return self.slot.result

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting work and optionally wait for queued runs."""
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "AnalysisWorker":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown(wait=True)
