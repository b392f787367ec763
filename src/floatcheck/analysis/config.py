"""Configuration classes for the analysis engine."""

from enum import Enum

from pydantic import BaseModel, Field


class TraceMode(str, Enum):
    """Direction of a task-scoped trace."""

    BACKWARD = "backward"  # Ancestors: everything that can affect the task
    FORWARD = "forward"  # Descendants: everything the task can affect


class AnalysisConfig(BaseModel):
    """Thresholds and defaults for float classification."""

    # Near-zero band (epsilon) for float comparisons
    float_tolerance: float = Field(default=0.001, ge=0.0)
    # Near-critical band (tau): floats in (epsilon, tau] are near-critical
    float_threshold: float = Field(default=0.0, ge=0.0)
    # Default trace direction when a task is selected
    trace_mode: TraceMode = TraceMode.BACKWARD
