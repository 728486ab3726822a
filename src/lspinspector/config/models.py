"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (LSPINSPECTOR__SECTION__KEY)
3. YAML file passed to load_config()
4. Built-in defaults (this file)

Examples:
    LSPINSPECTOR__TRACE_LEVEL=verbose
    LSPINSPECTOR__LOGGING__LEVEL=INFO
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from lspinspector.protocol import LogFormat, TraceLevel

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
TraceLevelName = Literal["off", "messages", "verbose"]


def normalize_trace_level(v: object) -> object:
    """Accept TraceLevel members and any casing of the level names."""
    if isinstance(v, TraceLevel):
        return str(v)
    if isinstance(v, str):
        return v.strip().lower()
    return v


class LogOutputConfig(BaseModel):
    """Single trace output."""

    format: Literal["text", "json"] = "text"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)

    @property
    def log_format(self) -> LogFormat:
        return LogFormat.parse(self.format)


class LoggingConfig(BaseModel):
    """Logging configuration for trace output.

    Env vars:
        LSPINSPECTOR__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="DEBUG",
        description="Minimum severity written by the trace logger.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class InspectorConfig(BaseModel):
    """Root configuration model, created once per client session."""

    trace_level: TraceLevelName = Field(
        default="off",
        description="LSP trace verbosity. 'verbose' also serializes message bodies.",
    )
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("trace_level", mode="before")
    @classmethod
    def validate_trace_level(cls, v: object) -> object:
        return normalize_trace_level(v)

    @property
    def level(self) -> TraceLevel:
        return TraceLevel.parse(self.trace_level)
