"""Configuration loading with pydantic-settings.

Supports loading configuration from multiple sources with precedence:
1. Direct kwargs (highest priority)
2. Environment variables (LSPINSPECTOR__SECTION__KEY)
3. YAML config file
4. Built-in defaults (lowest priority)
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from lspinspector.config.models import (
    InspectorConfig,
    LoggingConfig,
    TraceLevelName,
    normalize_trace_level,
)
from lspinspector.core.errors import ConfigError


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with path.open() as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError.parse_error(str(path), str(e)) from e
    if not isinstance(data, dict):
        raise ConfigError.parse_error(str(path), "top-level value must be a mapping")
    return data


class _YamlSource(PydanticBaseSettingsSource):
    """Settings source that reads from pre-loaded YAML config."""

    def __init__(self, settings_cls: type[BaseSettings], yaml_config: dict[str, Any]) -> None:
        super().__init__(settings_cls)
        self._yaml_config = yaml_config

    def get_field_value(
        self,
        field: Any,  # noqa: ARG002
        field_name: str,
    ) -> tuple[Any, str, bool]:
        val = self._yaml_config.get(field_name)
        return val, field_name, val is not None

    def __call__(self) -> dict[str, Any]:
        return self._yaml_config


def _make_settings_class(yaml_config: dict[str, Any]) -> type[BaseSettings]:
    """Create a Settings class with instance-based YAML source (thread-safe)."""

    class InspectorSettings(BaseSettings):
        """Root config. Env vars: LSPINSPECTOR__TRACE_LEVEL, LSPINSPECTOR__LOGGING__LEVEL."""

        model_config = SettingsConfigDict(
            env_prefix="LSPINSPECTOR__",
            env_nested_delimiter="__",
            case_sensitive=False,
        )

        trace_level: TraceLevelName = "off"
        logging: LoggingConfig = LoggingConfig()

        @field_validator("trace_level", mode="before")
        @classmethod
        def validate_trace_level(cls, v: object) -> object:
            return normalize_trace_level(v)

        @classmethod
        def settings_customise_sources(
            cls,
            settings_cls: type[BaseSettings],
            init_settings: PydanticBaseSettingsSource,
            env_settings: PydanticBaseSettingsSource,
            dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
            file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        ) -> tuple[PydanticBaseSettingsSource, ...]:
            # Precedence (first wins): init kwargs > env vars > yaml file
            return (init_settings, env_settings, _YamlSource(settings_cls, yaml_config))

    return InspectorSettings


def load_config(path: Path | None = None, **kwargs: Any) -> InspectorConfig:
    """Load config: defaults < YAML file < env vars < kwargs.

    Args:
        path: Optional YAML file. Must exist when given.
        **kwargs: Override values (highest precedence).

    Raises:
        ConfigError: On a missing file, invalid YAML syntax or validation errors.
    """
    yaml_config: dict[str, Any] = {}
    if path is not None:
        if not path.exists():
            raise ConfigError.file_not_found(str(path))
        yaml_config = _load_yaml(path)

    settings_cls = _make_settings_class(yaml_config)
    try:
        settings = settings_cls(**kwargs)
        return InspectorConfig.model_validate(settings.model_dump())
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(loc) for loc in err["loc"])
        raise ConfigError.invalid_value(field, err.get("input"), err["msg"]) from e
