"""structlog setup for dirscope.

Library modules call :func:`get_logger`; applications (and the CLI) call
:func:`configure_logging` once. Only the ``dirscope`` logger hierarchy is
configured, so host applications keep control of the root logger.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, cast

import structlog
from structlog.dev import ConsoleRenderer
from structlog.stdlib import BoundLogger
from structlog.types import EventDict, Processor

from dirscope import __version__

PACKAGE_LOGGER = "dirscope"


class _StderrHandler(logging.StreamHandler):
    """StreamHandler that writes to whatever sys.stderr currently is."""

    def __init__(self) -> None:
        super().__init__(sys.stderr)

    @property
    def stream(self) -> Any:
        return sys.stderr

    @stream.setter
    def stream(self, value: Any) -> None:
        pass


def _coerce_level(level: str | int) -> int:
    """Translate a string/int level into the numeric logging level."""
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if isinstance(resolved, str):
            raise ValueError(f"Invalid log level: {level}")
        return int(resolved)
    return int(level)


def _add_version(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict.setdefault("dirscope_version", __version__)
    return event_dict


def configure_logging(level: str | int = "WARNING", json_output: bool = False) -> logging.Logger:
    """Route dirscope's structlog events to stderr at the given level.

    Args:
        level: Level name or number for the ``dirscope`` logger.
        json_output: Render JSON lines instead of console key=value output.

    Returns:
        The configured ``dirscope`` stdlib logger.
    """
    numeric_level = _coerce_level(level)
    renderer = structlog.processors.JSONRenderer() if json_output else ConsoleRenderer(colors=False)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared_processors,
            _add_version,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = _StderrHandler()
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared_processors,
    ))

    logger = logging.getLogger(PACKAGE_LOGGER)
    for old in list(logger.handlers):
        logger.removeHandler(old)
    logger.addHandler(handler)
    logger.setLevel(numeric_level)
    logger.propagate = False
    return logger


def get_logger(name: str) -> BoundLogger:
    """Return a structlog logger for a dirscope module."""
    if not name.startswith(PACKAGE_LOGGER):
        name = f"{PACKAGE_LOGGER}.{name}"
    return cast(BoundLogger, structlog.get_logger(name))
