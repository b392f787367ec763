"""Custom exceptions for floatcheck."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .analysis.core import CycleReport


class FloatcheckError(Exception):
    """Base exception for all floatcheck errors."""

    pass


class ValidationError(FloatcheckError):
    """Raised when validation fails."""

    pass


class CircularDependencyError(ValidationError):
    """Raised when a circular dependency is detected.

    When raised by the cycle gate, ``report`` holds the full cycle report so
    callers can show every cyclic path.
    """

    def __init__(self, message: str, report: CycleReport | None = None):
        super().__init__(message)
        self.report = report


class MissingReferenceError(ValidationError):
    """Raised when a referenced ID does not exist."""

    pass


class ParseError(FloatcheckError):
    """Raised when YAML parsing fails."""

    pass
