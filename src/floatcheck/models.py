"""Data models for floatcheck."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any

# "<id>", "<id> SS", "<id> SS+2", "<id> FF-1.5d", "<id> +3"
_PREDECESSOR_RE = re.compile(
    r"^(?P<id>\S+)(?:\s+(?P<type>[A-Za-z]{2})?\s*(?P<lag>[+-]\s*\d+(?:\.\d+)?)?\s*d?)?$"
)


class RelationshipType(str, Enum):
    """Precedence relationship types."""

    FS = "FS"  # Finish-to-Start
    SS = "SS"  # Start-to-Start
    FF = "FF"  # Finish-to-Finish
    SF = "SF"  # Start-to-Finish

    @classmethod
    def parse(cls, value: Any) -> RelationshipType:
        """Normalize a raw relationship type, falling back to FS."""
        if isinstance(value, RelationshipType):
            return value
        if value is None:
            return cls.FS
        raw = str(value).strip().upper()
        try:
            return cls(raw)
        except ValueError:
            return cls.FS


class TaskType(str, Enum):
    """Task types; milestones always have zero duration."""

    TASK = "TT_Task"
    MILESTONE = "TT_Mile"
    FINISH_MILESTONE = "TT_FinMile"

    @property
    def is_milestone(self) -> bool:
        return self in (TaskType.MILESTONE, TaskType.FINISH_MILESTONE)

    @classmethod
    def parse(cls, value: Any) -> TaskType:
        """Normalize a raw task type, falling back to an ordinary task."""
        if isinstance(value, TaskType):
            return value
        if value is None:
            return cls.TASK
        try:
            return cls(str(value).strip())
        except ValueError:
            return cls.TASK


def finite_or_none(value: Any) -> float | None:
    """Coerce a value to a finite float, or None when absent or not a finite number."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


@dataclass(frozen=True)
class Predecessor:
    """A reference to a predecessor task with relationship type and lag."""

    task_id: str
    type: RelationshipType = RelationshipType.FS
    lag: float | None = None
    free_float: float | None = None

    @classmethod
    def parse(cls, pred_str: str) -> Predecessor:
        """Parse a predecessor string into a Predecessor object.

        Supported formats:
        - "A" - Finish-to-Start, no lag
        - "A SS" - Start-to-Start, no lag
        - "A SS+2" - Start-to-Start with 2 days lag
        - "A FF-1.5d" - Finish-to-Finish with 1.5 days lead
        - "A +3" - Finish-to-Start with 3 days lag
        """
        pred_str = pred_str.strip()
        match = _PREDECESSOR_RE.match(pred_str)
        if not match:
            return cls(task_id=pred_str)

        lag_raw = match.group("lag")
        lag = float(lag_raw.replace(" ", "")) if lag_raw else None
        return cls(
            task_id=match.group("id"),
            type=RelationshipType.parse(match.group("type")),
            lag=lag,
        )


def _default_str_list() -> list[str]:
    return []


def _default_type_map() -> dict[str, RelationshipType]:
    return {}


def _default_lag_map() -> dict[str, float | None]:
    return {}


@dataclass(frozen=True)
class Task:
    """A scheduled task with fixed actual dates.

    ``start`` and ``finish`` are day offsets from a common epoch. Computed
    analysis values never live here; see ``floatcheck.analysis.core``.
    """

    internal_id: str
    start: float
    finish: float
    name: str = ""
    task_type: TaskType = TaskType.TASK
    predecessor_ids: list[str] = field(default_factory=_default_str_list)
    relationship_types: dict[str, RelationshipType] = field(default_factory=_default_type_map)
    relationship_lags: dict[str, float | None] = field(default_factory=_default_lag_map)

    @property
    def duration(self) -> float:
        """Work-day span of the task; zero for milestones."""
        if self.task_type.is_milestone:
            return 0.0
        return max(0.0, self.finish - self.start)

    def relationship_type_for(self, predecessor_id: str) -> RelationshipType:
        return RelationshipType.parse(self.relationship_types.get(predecessor_id))

    def lag_for(self, predecessor_id: str) -> float | None:
        return finite_or_none(self.relationship_lags.get(predecessor_id))


@dataclass(frozen=True)
class Relationship:
    """A precedence relationship between two tasks."""

    predecessor_id: str
    successor_id: str
    type: RelationshipType = RelationshipType.FS
    free_float: float | None = None  # Externally supplied override
    lag: float | None = None

    @property
    def key(self) -> tuple[str, str]:
        return (self.predecessor_id, self.successor_id)

    @property
    def effective_lag(self) -> float:
        """Lag with the default-substitution rule applied (absent means 0)."""
        lag = finite_or_none(self.lag)
        return 0.0 if lag is None else lag


@dataclass
class ScheduleMetadata:
    """Metadata for the schedule."""

    name: str | None = None
    epoch: date | None = None  # Date that day offset 0 corresponds to


def _default_task_list() -> list[Task]:
    return []


def _default_relationship_list() -> list[Relationship]:
    return []


@dataclass
class Schedule:
    """A complete schedule snapshot: tasks plus relationships."""

    metadata: ScheduleMetadata = field(default_factory=ScheduleMetadata)
    tasks: list[Task] = field(default_factory=_default_task_list)
    relationships: list[Relationship] = field(default_factory=_default_relationship_list)

    def get_all_ids(self) -> set[str]:
        """Get all task IDs in the schedule."""
        return {task.internal_id for task in self.tasks}
