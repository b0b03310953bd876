"""Structured logging for Redline entry points.

``configure()`` is called once by each entry point (gateway, CLI). It
renders JSON lines by default and colored console output when
``REDLINE_LOG_FORMAT=console``; ``REDLINE_LOG_LEVEL`` sets the threshold.
Standard library loggers are routed through the same renderer, and
contextvars (``request_id``, ``source``) are merged into every event.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import TextIO

import structlog

LEVEL_ENV = "REDLINE_LOG_LEVEL"
FORMAT_ENV = "REDLINE_LOG_FORMAT"

# Service name bound by configure(); re-bound by reset_context().
_configured_service_name: str | None = None


def _add_service_name(
    logger: logging.Logger,
    method_name: str,
    event_dict: dict,
) -> dict:
    """Rename the bound ``_service_name`` context key to ``service``."""
    if "_service_name" in event_dict:
        event_dict["service"] = event_dict.pop("_service_name")
    return event_dict


def _resolve_level(default_level: str) -> int:
    name = os.environ.get(LEVEL_ENV, default_level).upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def _select_renderer() -> structlog.types.Processor:
    if os.environ.get(FORMAT_ENV, "json").lower() == "console":
        return structlog.dev.ConsoleRenderer()
    return structlog.processors.JSONRenderer()


def _route_stdlib(
    stream: TextIO,
    level: int,
    pre_chain: list[structlog.types.Processor],
    renderer: structlog.types.Processor,
) -> None:
    """Replace root handlers with one that renders records like structlog events."""
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=pre_chain,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            renderer,
        ],
    )
    handler = logging.StreamHandler(stream)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)


def configure(
    service_name: str,
    default_level: str = "INFO",
    stream: TextIO | None = None,
    cache_loggers: bool = True,
) -> None:
    """Configure structlog and stdlib logging.

    Safe to call more than once; the last call wins.

    Args:
        service_name: Value of the ``service`` field on every event
        default_level: Threshold used when REDLINE_LOG_LEVEL is unset
        stream: Destination; stdout by default. The CLI passes stderr so
            its stdout carries only results.
        cache_loggers: Freeze each logger on first use. Off for the CLI,
            whose stream only lives as long as one invocation.
    """
    level = _resolve_level(default_level)
    renderer = _select_renderer()

    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        _add_service_name,
    ]

    structlog.configure(
        processors=[
            *pre_chain,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=cache_loggers,
    )
    _route_stdlib(stream or sys.stdout, level, pre_chain, renderer)

    global _configured_service_name
    _configured_service_name = service_name
    structlog.contextvars.bind_contextvars(_service_name=service_name)


def reset_context(**extra: str) -> None:
    """Drop all bound context except the service name, then bind ``extra``.

    Called at the start of every HTTP request and every CLI input file.
    """
    structlog.contextvars.clear_contextvars()
    if _configured_service_name:
        structlog.contextvars.bind_contextvars(_service_name=_configured_service_name)
    if extra:
        structlog.contextvars.bind_contextvars(**extra)
