"""YAML parser for floatcheck schedules."""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ParseError, ValidationError
from .logger import get_logger
from .models import (
    Predecessor,
    Relationship,
    RelationshipType,
    Schedule,
    ScheduleMetadata,
    Task,
    TaskType,
    finite_or_none,
)
from .schemas import PredecessorSchema, ScheduleSchema, TaskSchema

logger = get_logger()


def _resolve_epoch(schema: ScheduleSchema) -> date | None:
    """Pick the date that day offset 0 maps to.

    Returns:
        The metadata epoch, else the earliest task date. None only for a
        schedule written entirely in numeric offsets without an epoch.

    Raises:
        ParseError: If calendar dates and numeric offsets are mixed
    """
    values = [
        value
        for task in schema.tasks.values()
        for value in (task.start, task.finish)
        if value is not None
    ]
    dates = [v for v in values if isinstance(v, date)]
    if dates and len(dates) != len(values):
        raise ParseError(
            "Cannot mix calendar dates and numeric day offsets in task start/finish values"
        )
    if not dates:
        return schema.metadata.epoch
    return schema.metadata.epoch or min(dates)


def _to_offset(value: date | float, epoch: date | None) -> float:
    if not isinstance(value, date):
        return float(value)
    if epoch is None:
        raise ParseError(f"Calendar date {value.isoformat()} given without an epoch")
    return float((value - epoch).days)


class ScheduleParser:
    """Parser for schedule YAML files.

    This parser only handles YAML parsing and model creation.
    For loading with reference checks, use load_schedule() from floatcheck.loader.
    """

    def parse_file(self, file_path: Path | str) -> Schedule:
        """Parse a YAML file into a Schedule."""
        path = Path(file_path)
        if not path.exists():
            raise ParseError(f"File not found: {file_path}")

        try:
            with path.open(encoding="utf-8") as f:
                data: Any = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ParseError(f"Failed to parse YAML: {e}") from e

        if not isinstance(data, dict):
            raise ParseError("YAML must contain a dictionary at the root level")

        return self._parse_data(data)  # type: ignore[arg-type]

    def _parse_data(self, data: dict[str, Any]) -> Schedule:
        """Parse the loaded YAML data into a Schedule."""
        try:
            schema = ScheduleSchema(**data)
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid YAML structure: {e}") from e

        epoch = _resolve_epoch(schema)
        metadata = ScheduleMetadata(name=schema.metadata.name, epoch=epoch)

        tasks: list[Task] = []
        relationships: list[Relationship] = []

        for task_id, task_data in schema.tasks.items():
            task, overrides = self._parse_task(task_id, task_data, epoch)
            tasks.append(task)
            relationships.extend(overrides)

        for rel_data in schema.relationships:
            if rel_data.predecessor == rel_data.successor:
                logger.debug(f"Ignoring self-referencing relationship on '{rel_data.predecessor}'")
                continue
            relationships.append(
                Relationship(
                    predecessor_id=rel_data.predecessor,
                    successor_id=rel_data.successor,
                    type=RelationshipType.parse(rel_data.type),
                    free_float=finite_or_none(rel_data.free_float),
                    lag=finite_or_none(rel_data.lag),
                )
            )

        return Schedule(metadata=metadata, tasks=tasks, relationships=relationships)

    def _parse_task(
        self, task_id: str, task_data: TaskSchema, epoch: date | None
    ) -> tuple[Task, list[Relationship]]:
        """Build a Task plus relationships for predecessors carrying a free float."""
        if task_data.start is None or task_data.finish is None:
            missing = "start" if task_data.start is None else "finish"
            raise ValidationError(f"Task '{task_id}' is missing its {missing} date")

        start = _to_offset(task_data.start, epoch)
        finish = _to_offset(task_data.finish, epoch)
        if finish < start:
            raise ValidationError(
                f"Task '{task_id}' finishes before it starts ({finish:g} < {start:g})"
            )

        predecessor_ids: list[str] = []
        relationship_types: dict[str, RelationshipType] = {}
        relationship_lags: dict[str, float | None] = {}
        overrides: list[Relationship] = []

        for raw in task_data.predecessors:
            pred = self._parse_predecessor(raw)
            if pred.task_id == task_id:
                logger.debug(f"Ignoring self-referencing predecessor on '{task_id}'")
                continue
            if pred.task_id in relationship_types:
                logger.debug(f"Ignoring duplicate predecessor '{pred.task_id}' on '{task_id}'")
                continue

            predecessor_ids.append(pred.task_id)
            relationship_types[pred.task_id] = pred.type
            relationship_lags[pred.task_id] = pred.lag
            if pred.free_float is not None:
                overrides.append(
                    Relationship(
                        predecessor_id=pred.task_id,
                        successor_id=task_id,
                        type=pred.type,
                        free_float=pred.free_float,
                        lag=pred.lag,
                    )
                )

        task = Task(
            internal_id=task_id,
            start=start,
            finish=finish,
            name=task_data.name,
            task_type=TaskType.parse(task_data.type),
            predecessor_ids=predecessor_ids,
            relationship_types=relationship_types,
            relationship_lags=relationship_lags,
        )
        return task, overrides

    def _parse_predecessor(self, raw: str | PredecessorSchema) -> Predecessor:
        if isinstance(raw, str):
            return Predecessor.parse(raw)
        return Predecessor(
            task_id=raw.task,
            type=RelationshipType.parse(raw.type),
            lag=finite_or_none(raw.lag),
            free_float=finite_or_none(raw.free_float),
        )
