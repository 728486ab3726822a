"""Config module exports."""

from lspinspector.config.loader import load_config
from lspinspector.config.models import InspectorConfig, LoggingConfig, LogOutputConfig

__all__ = [
    "load_config",
    "InspectorConfig",
    "LoggingConfig",
    "LogOutputConfig",
]
