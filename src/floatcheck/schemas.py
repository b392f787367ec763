"""Pydantic schemas for schedule YAML data validation."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator


def _coerce_date_value(v: Any) -> Any:
    """Normalize a start/finish value to a date or a numeric day offset."""
    if v is None:
        return None
    if isinstance(v, bool):
        raise ValueError("expected a date or a number of days, got a boolean")
    if isinstance(v, datetime):
        return v.date()
    if isinstance(v, date):
        return v
    if isinstance(v, (int, float)):
        return float(v)
    if isinstance(v, str):
        text = v.strip()
        try:
            return float(text)
        except ValueError:
            pass
        try:
            return date.fromisoformat(text)
        except ValueError as e:
            raise ValueError(f"invalid date '{v}' (expected YYYY-MM-DD)") from e
    raise ValueError(f"expected a date or a number of days, got {type(v).__name__}")


class PredecessorSchema(BaseModel):
    """Schema for the mapping form of a task predecessor."""

    task: str
    type: str | None = None
    lag: float | None = None
    free_float: float | None = None

    @field_validator("task", mode="before")
    @classmethod
    def coerce_task_to_string(cls, v: Any) -> str:
        """Allow numeric task IDs."""
        return str(v)


class TaskSchema(BaseModel):
    """Schema for one task entry."""

    name: str = ""
    type: str | None = None
    start: date | float | None = None
    finish: date | float | None = None
    predecessors: list[str | PredecessorSchema] = Field(default_factory=list)

    @field_validator("start", "finish", mode="before")
    @classmethod
    def coerce_dates(cls, v: Any) -> Any:
        return _coerce_date_value(v)

    @field_validator("predecessors", mode="before")
    @classmethod
    def ensure_list(cls, v: Any) -> list[Any]:
        """Ensure value is a list; scalar entries become strings."""
        if v is None:
            return []
        items: list[Any] = v if isinstance(v, list) else [v]  # type: ignore[assignment]
        return [item if isinstance(item, dict) else str(item) for item in items]


class RelationshipSchema(BaseModel):
    """Schema for an explicit relationship entry."""

    predecessor: str
    successor: str
    type: str | None = None
    lag: float | None = None
    free_float: float | None = None

    @field_validator("predecessor", "successor", mode="before")
    @classmethod
    def coerce_ids_to_string(cls, v: Any) -> str:
        return str(v)


class ScheduleMetadataSchema(BaseModel):
    """Schema for schedule metadata."""

    name: str | None = None
    epoch: date | None = None

    @field_validator("epoch", mode="before")
    @classmethod
    def coerce_epoch(cls, v: Any) -> Any:
        if isinstance(v, datetime):
            return v.date()
        return v


class ScheduleSchema(BaseModel):
    """Schema for the entire schedule YAML data."""

    metadata: ScheduleMetadataSchema = Field(default_factory=ScheduleMetadataSchema)
    tasks: dict[str, TaskSchema] = Field(default_factory=dict)
    relationships: list[RelationshipSchema] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def stringify_task_ids(cls, data: Any) -> Any:
        """YAML turns bare numeric keys into ints; task IDs are always strings."""
        if isinstance(data, dict) and data.get("tasks") is None and "tasks" in data:
            data = {**data, "tasks": {}}  # type: ignore[dict-item]
        if isinstance(data, dict) and isinstance(data.get("tasks"), dict):
            data = dict(data)  # type: ignore[arg-type]
            data["tasks"] = {str(k): ({} if v is None else v) for k, v in data["tasks"].items()}
        return data
