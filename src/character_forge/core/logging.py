"""Structured logging for Character Forge.

Every module takes its logger from ``get_logger(__name__)``. Output is
rendered for a terminal in debug mode and as one JSON object per line
otherwise; entries logged while a character is being changed carry that
character's id through structlog's context variables.

Example:
    >>> from character_forge.core.logging import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Character leveled up", character_id="abc", new_level=5)
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import Processor


if TYPE_CHECKING:
    from structlog.types import EventDict, WrappedLogger

    from character_forge.core.config import Settings


APP_NAME = "character_forge"
STDLIB_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def add_app_context(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Tag the entry with the application name."""
    event_dict.setdefault("app", APP_NAME)
    return event_dict


def _build_processors(json_format: bool) -> list[Processor]:
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        add_app_context,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if json_format:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(colors=True, exception_formatter=structlog.dev.plain_traceback)
        )
    return processors


def configure_logging(
    *,
    level: str = "INFO",
    json_format: bool = False,
    log_file: str | None = None,
) -> None:
    """Configure structlog and the standard library root logger.

    Args:
        level: Minimum level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_format: Render JSON lines instead of the console format.
        log_file: Also write standard library records to this file.

    Example:
        >>> configure_logging(level="DEBUG", json_format=False)
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    structlog.configure(
        processors=_build_processors(json_format),
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # sqlite3 and other third-party output goes through the standard library
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(format=STDLIB_FORMAT, level=numeric_level, handlers=handlers, force=True)


def configure_from_settings(settings: Settings | None = None, *, log_file: str | None = None) -> None:
    """Configure logging from application settings.

    Debug mode gets the console renderer; anything else logs JSON.
    """
    if settings is None:
        from character_forge.core.config import get_settings

        settings = get_settings()
    configure_logging(level=settings.log_level, json_format=settings.is_production, log_file=log_file)


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind values to every later log entry in the current context.

    Example:
        >>> bind_context(session_id="table-1")
        >>> logger.info("Long rest taken")  # includes session_id
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


@contextmanager
def character_context(character_id: str, **kwargs: Any) -> Iterator[None]:
    """Tag every log entry inside the block with the character being changed.

    Previously bound values for the same keys are restored on exit.

    Example:
        >>> with character_context(hero.id, character_name=hero.name):
        ...     level_up(hero)
    """
    with structlog.contextvars.bound_contextvars(character_id=character_id, **kwargs):
        yield


__all__ = [
    "configure_logging",
    "configure_from_settings",
    "get_logger",
    "bind_context",
    "clear_context",
    "character_context",
]
