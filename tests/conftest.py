"""Pytest configuration and fixtures for floatcheck tests."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from floatcheck import context
from floatcheck.logger import reset_logger
from floatcheck.models import Relationship, RelationshipType, Task, TaskType


@pytest.fixture(autouse=True)
def clean_global_state() -> Iterator[None]:
    """Reset the logger and config context between tests for isolation."""
    reset_logger()
    context.set_config_path(None)
    yield
    reset_logger()
    context.set_config_path(None)


def task(
    task_id: str,
    start: float,
    finish: float,
    *preds: str,
    name: str = "",
    milestone: bool = False,
) -> Task:
    """Create a Task with FS predecessors.

    Example:
        task("B", 1, 2, "A")
    """
    return Task(
        internal_id=task_id,
        start=float(start),
        finish=float(finish),
        name=name,
        task_type=TaskType.MILESTONE if milestone else TaskType.TASK,
        predecessor_ids=list(preds),
    )


def rel(
    pred: str,
    succ: str,
    rel_type: str = "FS",
    lag: float | None = None,
    free_float: float | None = None,
) -> Relationship:
    """Create a Relationship from short arguments.

    Example:
        rel("A", "B", "SS", lag=2)
    """
    return Relationship(
        predecessor_id=pred,
        successor_id=succ,
        type=RelationshipType(rel_type),
        lag=lag,
        free_float=free_float,
    )
