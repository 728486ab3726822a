"""Inspector error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Trace
- 9xxx: Internal
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2004

    # Trace (3xxx)
    TRACE_SERIALIZATION_ERROR = 3001
    TRACE_SINK_ERROR = 3002

    # Internal (9xxx)
    INTERNAL_ERROR = 9001


@dataclass(frozen=True, slots=True)
class InspectorError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'CONFIG_PARSE_ERROR')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(InspectorError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )


class SerializationError(InspectorError):
    """A trace body could not be rendered as indented JSON."""

    @classmethod
    def unencodable(cls, context: str, reason: str) -> "SerializationError":
        return cls(
            code=ErrorCode.TRACE_SERIALIZATION_ERROR,
            message=f"Cannot serialize {context} body: {reason}",
            details={"context": context, "reason": reason},
        )


class SinkError(InspectorError):
    """The logging sink rejected a trace record."""

    @classmethod
    def write_failed(cls, reason: str) -> "SinkError":
        return cls(
            code=ErrorCode.TRACE_SINK_ERROR,
            message=f"Trace sink write failed: {reason}",
            details={"reason": reason},
        )
