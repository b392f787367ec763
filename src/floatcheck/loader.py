"""Schedule and configuration loading."""

from __future__ import annotations

from pathlib import Path

from . import context
from .config import CONFIG_FILENAME, FloatcheckConfig, load_config
from .logger import get_logger
from .models import Schedule
from .parser import ScheduleParser

logger = get_logger()


def discover_config(
    schedule_path: Path | str | None = None,
    config_path: Path | None = None,
) -> FloatcheckConfig:
    """Discover configuration from various locations.

    Search order:
    1. Explicit config_path argument
    2. Global context (set via CLI --config)
    3. schedule directory / floatcheck_config.yaml
    4. Current directory / floatcheck_config.yaml

    Returns:
        The first config found, or defaults when there is none
    """
    candidates: list[Path] = []
    if config_path:
        candidates.append(config_path)
    ctx_config = context.get_config_path()
    if ctx_config:
        candidates.append(ctx_config)
    if schedule_path is not None:
        candidates.append(Path(schedule_path).parent / CONFIG_FILENAME)
    candidates.append(Path(CONFIG_FILENAME))

    for candidate in candidates:
        if candidate.exists():
            logger.debug(f"Using config file {candidate}")
            return load_config(candidate)

    return FloatcheckConfig()


def load_schedule(path: Path | str) -> Schedule:
    """Load a schedule file.

    This is the main entry point for loading schedules. It handles:
    1. YAML parsing and schema validation
    2. Date to day-offset conversion
    3. Reporting references to unknown tasks (they are ignored by the analysis)

    Args:
        path: Path to the schedule YAML file

    Returns:
        Parsed Schedule
    """
    schedule = ScheduleParser().parse_file(Path(path))
    _report_unknown_references(schedule)
    return schedule


def _report_unknown_references(schedule: Schedule) -> None:
    all_ids = schedule.get_all_ids()
    for task in schedule.tasks:
        for pred_id in task.predecessor_ids:
            if pred_id not in all_ids:
                logger.warning(
                    f"Task '{task.internal_id}' references unknown predecessor '{pred_id}'; ignored"
                )
    for rel in schedule.relationships:
        for ref in rel.key:
            if ref not in all_ids:
                logger.warning(
                    f"Relationship {rel.predecessor_id} -> {rel.successor_id} references "
                    f"unknown task '{ref}'; ignored"
                )
