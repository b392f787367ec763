"""Verbosity-driven logging for floatcheck."""

from __future__ import annotations

import logging
import sys
from typing import Any, TextIO, cast

CHANGES_LEVEL = 25  # violations and cycle-gate outcomes
CHECKS_LEVEL = 15  # one line per classified task

logging.addLevelName(CHANGES_LEVEL, "CHANGES")
logging.addLevelName(CHECKS_LEVEL, "CHECKS")

_LEVEL_BY_VERBOSITY = {
    0: logging.ERROR,
    1: CHANGES_LEVEL,
    2: CHECKS_LEVEL,
    3: logging.DEBUG,
}


class FloatcheckLogger(logging.Logger):
    """Logger with one method per analysis verbosity.

    ``changes`` covers what a user running ``-v`` wants to see (constraint
    violations, the cycle gate); ``checks`` adds the per-task float and
    criticality lines. Propagation internals go through plain ``debug``.
    """

    def changes(self, msg: str, *args: Any, **kwargs: Any) -> None:
        if self.isEnabledFor(CHANGES_LEVEL):
            self._log(CHANGES_LEVEL, msg, args, **kwargs)

    def checks(self, msg: str, *args: Any, **kwargs: Any) -> None:
        if self.isEnabledFor(CHECKS_LEVEL):
            self._log(CHECKS_LEVEL, msg, args, **kwargs)


def get_logger() -> FloatcheckLogger:
    """Return the shared ``floatcheck`` logger."""
    logging.setLoggerClass(FloatcheckLogger)
    return cast(FloatcheckLogger, logging.getLogger("floatcheck"))


def setup_logger(verbosity: int, stream: TextIO | None = None) -> None:
    """Point the floatcheck logger at a stream with the given verbosity.

    Safe to call repeatedly; earlier handlers are replaced.

    Args:
        verbosity: 0 errors only, 1 changes, 2 checks, 3 debug
        stream: Destination (defaults to sys.stderr)
    """
    logger = get_logger()
    logger.handlers.clear()
    logger.setLevel(_LEVEL_BY_VERBOSITY.get(verbosity, logging.ERROR))

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.propagate = False


def reset_logger() -> None:
    """Drop all handlers and return to errors-only."""
    logger = get_logger()
    logger.handlers.clear()
    logger.setLevel(logging.ERROR)
