"""Configuration file loading for floatcheck.

A single configuration file (floatcheck_config.yaml) holds the analysis
thresholds and report defaults:

    analysis:
      float_tolerance: 0.001
      float_threshold: 2
      trace_mode: backward
    report:
      format: text
      max_tasks: 500
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from .analysis.config import AnalysisConfig

CONFIG_FILENAME = "floatcheck_config.yaml"
DEFAULT_MAX_TASKS = 500


class ReportFormat(str, Enum):
    """Output formats for analysis reports."""

    TEXT = "text"
    JSON = "json"
    YAML = "yaml"


class ReportConfig(BaseModel):
    """Configuration for report output."""

    format: ReportFormat = ReportFormat.TEXT
    # Maximum number of task rows in a report (0 disables limiting)
    max_tasks: int = Field(default=DEFAULT_MAX_TASKS, ge=0)


class FloatcheckConfig(BaseModel):
    """Root configuration."""

    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)


def load_config(config_path: Path | str) -> FloatcheckConfig:
    """Load configuration from a YAML file.

    Args:
        config_path: Path to floatcheck_config.yaml

    Returns:
        FloatcheckConfig with analysis and report settings

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config is empty or invalid
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with config_path.open(encoding="utf-8") as f:
        data: Any = yaml.safe_load(f)

    if not data:
        raise ValueError("Empty configuration file")
    if not isinstance(data, dict):
        raise ValueError("Config must contain a dictionary at the root level")

    try:
        return FloatcheckConfig.model_validate(data)
    except PydanticValidationError as e:
        raise ValueError(f"Invalid configuration in {config_path}: {e}") from e
