"""structlog configuration for portfolio-navigator.

Call setup_logging() (or configure_logging() to read Settings) once at
startup; modules log through structlog.get_logger() with snake_case events.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from portfolio_navigator.config.settings import Settings

COMPONENT = "portfolio_navigator"

_LEVEL_ALIASES = {"warn": "warning"}


def resolve_log_level(log_level: str) -> int:
    """Map a level name (case-insensitive, 'warn' allowed) to a logging level number."""
    name = _LEVEL_ALIASES.get(log_level.lower(), log_level.lower())
    level = logging.getLevelName(name.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {log_level}")
    return level


def _add_component(
    logger: object, method_name: str, event_dict: structlog.types.EventDict
) -> structlog.types.EventDict:
    event_dict.setdefault("component", COMPONENT)
    return event_dict


def setup_logging(*, json_output: bool = True, log_level: str = "INFO") -> None:
    """Configure structlog.

    Args:
        json_output: JSON lines when True, console rendering otherwise.
        log_level: Minimum level; events below it are dropped before rendering.
    """
    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        _add_component,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    processors.append(
        structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(resolve_log_level(log_level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging(settings: Settings | None = None) -> None:
    """setup_logging() driven by Settings.log_json / Settings.log_level."""
    if settings is None:
        from portfolio_navigator.config.settings import get_settings

        settings = get_settings()
    setup_logging(json_output=settings.log_json, log_level=settings.log_level)
