"""Core module exports."""

from lspinspector.core.errors import (
    ConfigError,
    ErrorCode,
    InspectorError,
    SerializationError,
    SinkError,
)
from lspinspector.core.logging import (
    ISO8601TimeStamper,
    build_trace_logger,
)

__all__ = [
    # Errors
    "ConfigError",
    "ErrorCode",
    "InspectorError",
    "SerializationError",
    "SinkError",
    # Logging
    "ISO8601TimeStamper",
    "build_trace_logger",
]
