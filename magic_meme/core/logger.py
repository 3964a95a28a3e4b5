"""structlog setup for the meme service and CLI.

Every event carries ``app`` and ``request_id`` (``None`` outside an HTTP
request). ``LOG_FORMAT=json`` renders one JSON object per line;
``LOG_FORMAT=console`` uses structlog's human-readable renderer for local runs.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

import structlog

from magic_meme.core.config import Settings, get_settings


_CONFIGURED = False


def _default_context(app_name: str) -> Callable[[Any, str, dict[str, Any]], dict[str, Any]]:
    def add_default_context(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        del logger, method_name
        event_dict.setdefault("app", app_name)
        event_dict.setdefault("request_id", None)
        return event_dict

    return add_default_context


def build_processors(settings: Settings) -> list[Any]:
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        _default_context(settings.app_name),
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.format_exc_info,
    ]
    if settings.log_format.strip().lower() == "console":
        processors.append(structlog.dev.ConsoleRenderer())
    else:
        processors.append(structlog.processors.JSONRenderer())
    return processors


def configure_logging() -> None:
    global _CONFIGURED
    if _CONFIGURED:
        return

    settings = get_settings()
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(message)s")

    structlog.configure(
        processors=build_processors(settings),
        logger_factory=structlog.PrintLoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )
    _CONFIGURED = True


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    configure_logging()
    return structlog.get_logger(name)


def bind_request_context(request_id: str) -> None:
    structlog.contextvars.bind_contextvars(request_id=request_id)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()
