from __future__ import annotations

"""
Structured logging setup for zkattest.

This module configures **structlog** + the stdlib ``logging`` package so that:
- Registry and verifier events are emitted as structured key/value records,
  either as JSON or with the console renderer (default).
- Context variables (e.g., a request or batch id) are merged into each event.
- Log level & format come from `zkattest.config.Settings` unless overridden.

Quick start
-----------
    from zkattest.logging import setup_logging, get_logger

    setup_logging()  # call once on process start
    log = get_logger(__name__)
    log.info("attestation_posted", id=1, root="0x...")
"""

import logging
import logging.config
from typing import Any, Dict, Iterable, Optional

import structlog
from structlog.contextvars import merge_contextvars
from structlog.processors import JSONRenderer


def _base_processors() -> Iterable:
    yield structlog.stdlib.add_log_level
    yield structlog.processors.TimeStamper(fmt="iso", utc=True)
    yield merge_contextvars
    yield structlog.processors.StackInfoRenderer()
    yield structlog.processors.format_exc_info
    yield structlog.processors.UnicodeDecoder()


def setup_logging(
    *,
    level: Optional[str | int] = None,
    log_format: Optional[str] = None,
) -> None:
    """
    Configure structlog + stdlib logging. Safe to call more than once.

    Parameters
    ----------
    level: str|int
        Log level (e.g., "INFO"). Defaults to Settings.log_level.
    log_format: str
        "console" or "json". Defaults to Settings.log_format.
    """
    from zkattest.config import get_settings

    settings = get_settings()
    level = level or settings.log_level
    log_format = (log_format or settings.log_format).lower()

    processors = list(_base_processors())
    if log_format == "json":
        renderer = JSONRenderer(sort_keys=True)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False, sort_keys=False)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            *processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=False,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            *processors,
        ],
    )
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root = logging.getLogger("zkattest")
    for h in list(root.handlers):
        root.removeHandler(h)
    root.addHandler(handler)
    root.setLevel(level)
    root.propagate = False


def get_logger(name: Optional[str] = None) -> Any:
    """Return a structlog logger bound to `name`."""
    return structlog.get_logger(name) if name else structlog.get_logger()


def bind_context(**kv: Any) -> None:
    """Bind key/value pairs into the structlog contextvars store."""
    structlog.contextvars.bind_contextvars(**kv)


def clear_context(*keys: str) -> None:
    """Clear specific keys from contextvars, or all of them if none are given."""
    if keys:
        structlog.contextvars.unbind_contextvars(*keys)
    else:
        structlog.contextvars.clear_contextvars()


def event_fields(**kv: Any) -> Dict[str, Any]:
    """Render bytes values as 0x-hex so events stay JSON-friendly."""
    return {k: ("0x" + v.hex() if isinstance(v, (bytes, bytearray)) else v) for k, v in kv.items()}


__all__ = [
    "setup_logging",
    "get_logger",
    "bind_context",
    "clear_context",
    "event_fields",
]
