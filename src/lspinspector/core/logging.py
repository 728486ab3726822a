"""Structured logging for trace output.

Each client session builds its own trace logger from a LoggingConfig, so
several sessions (or a test and the code it exercises) can log to different
destinations without touching global structlog state.
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog

from lspinspector.protocol import LogFormat
from lspinspector.timefmt import encode_iso8601

if TYPE_CHECKING:
    from lspinspector.config.models import LoggingConfig

TRACE_LOGGER_NAME = "lspinspector.trace"

_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def level_number(name: str, default: int = logging.INFO) -> int:
    return _LEVEL_MAP.get(name.upper(), default)


class ISO8601TimeStamper:
    """Processor that stamps ``key`` with a millisecond UTC timestamp.

    Keeps an existing value so trace records retain the instant they were
    created rather than the instant they were rendered.
    """

    __slots__ = ("key",)

    def __init__(self, key: str = "time") -> None:
        self.key = key

    def __call__(
        self,
        _logger: structlog.types.WrappedLogger,
        _method_name: str,
        event_dict: dict[str, Any],
    ) -> dict[str, Any]:
        if event_dict.get(self.key) is None:
            event_dict[self.key] = encode_iso8601(datetime.now(timezone.utc))
        return event_dict


def _create_handler(destination: str) -> logging.Handler:
    """Create handler for stderr, stdout, or file path."""
    if destination == "stderr":
        return logging.StreamHandler(sys.stderr)
    if destination == "stdout":
        return logging.StreamHandler(sys.stdout)
    path = Path(destination)
    path.parent.mkdir(parents=True, exist_ok=True)
    return logging.FileHandler(path, mode="a", encoding="utf-8")


def _renderer(log_format: LogFormat, destination: str) -> structlog.types.Processor:
    if log_format is LogFormat.JSON:
        return structlog.processors.JSONRenderer()
    stream = sys.stdout if destination == "stdout" else sys.stderr
    return structlog.dev.ConsoleRenderer(
        colors=destination in ("stderr", "stdout") and stream.isatty(),
        pad_event_to=0,
        pad_level=False,
        timestamp_key="time",
    )


def build_trace_logger(
    config: LoggingConfig,
    name: str = TRACE_LOGGER_NAME,
) -> structlog.types.FilteringBoundLogger:
    """Build a structlog logger writing to the outputs in ``config``.

    Rebuilding with the same ``name`` replaces (and closes) the handlers of
    the previous logger, which is how a session changes its outputs.
    """
    default_level = level_number(config.level, logging.DEBUG)

    std_logger = logging.getLogger(name)
    for old in list(std_logger.handlers):
        std_logger.removeHandler(old)
        old.close()
    std_logger.setLevel(default_level)
    std_logger.propagate = False

    for output in config.outputs:
        formatter = structlog.stdlib.ProcessorFormatter(
            processor=_renderer(output.log_format, output.destination),
        )
        handler = _create_handler(output.destination)
        handler.setLevel(level_number(output.level or config.level, default_level))
        handler.setFormatter(formatter)
        std_logger.addHandler(handler)

    return structlog.wrap_logger(  # type: ignore[no-any-return]
        std_logger,
        processors=[
            structlog.processors.add_log_level,
            ISO8601TimeStamper(key="time"),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(default_level),
        context_class=dict,
        cache_logger_on_first_use=False,
    )
