# SPDX-License-Identifier: MIT
"""Runtime configuration for cumstats, powered by ``pydantic-settings``.

Values resolve in priority order: explicit keyword arguments, ``CUMSTATS_*``
environment variables (nested with ``__``), a ``.env`` file, then the YAML
file named by ``config_file``.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal

import yaml  # type: ignore[import-untyped]
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.fields import FieldInfo
from pydantic_settings import BaseSettings, SettingsConfigDict, SettingsError
from pydantic_settings.sources import PydanticBaseSettingsSource

from ..indicators.cumulative import DEFAULT_CHUNK_SIZE

DEFAULT_CONFIG_PATH = Path("configs/cumstats.yaml")

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class ConfigError(ValueError):
    """Raised when a configuration value is invalid."""


class BatchConfig(BaseModel):
    """Tuning for :func:`batch_cumulative_stats`."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    chunk_size: int = Field(
        default=DEFAULT_CHUNK_SIZE,
        gt=0,
        description="Elements processed per block of the batched traversal.",
    )


class LoggingConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    level: LogLevel = Field(default="INFO")
    use_json: bool = Field(default=True, description="Emit JSON log lines.")


class MetricsConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    enabled: bool = Field(default=True)


class YamlSettingsSource(PydanticBaseSettingsSource):
    """Lowest-priority settings source that loads values from a YAML file."""

    def __init__(
        self,
        settings_cls: type[BaseSettings],
        init_source: PydanticBaseSettingsSource | None = None,
        env_source: PydanticBaseSettingsSource | None = None,
        dotenv_source: PydanticBaseSettingsSource | None = None,
    ) -> None:
        super().__init__(settings_cls)
        self._init_source = init_source
        self._env_source = env_source
        self._dotenv_source = dotenv_source

    def __call__(self) -> dict[str, Any]:
        config_path = self._resolve_path()
        if config_path is None:
            return {}
        try:
            text = config_path.read_text(encoding="utf8")
        except FileNotFoundError:
            return {}
        try:
            payload = yaml.safe_load(text) or {}
        except yaml.YAMLError as exc:
            raise SettingsError(
                f"failed to parse YAML configuration at {config_path}: {exc}"
            ) from exc
        if not isinstance(payload, Mapping):
            raise SettingsError(f"configuration file {config_path} must define a mapping")
        payload = dict(payload)
        payload.pop("config_file", None)
        return payload

    def get_field_value(self, field: FieldInfo, field_name: str) -> tuple[Any, str, bool]:
        return None, field_name, False

    def _resolve_path(self) -> Path | None:
        for source in (self._init_source, self._env_source, self._dotenv_source):
            if source is None:
                continue
            data = source()
            candidate = data.get("config_file")
            if candidate:
                return Path(candidate).expanduser()

        field = self.settings_cls.model_fields.get("config_file")
        default_value = field.default if field is not None else None
        if default_value:
            return Path(default_value).expanduser()
        return None


class CumStatsSettings(BaseSettings):
    """Application-wide configuration."""

    model_config = SettingsConfigDict(
        env_prefix="CUMSTATS_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf8",
        extra="ignore",
    )

    config_file: Path | None = Field(
        default=DEFAULT_CONFIG_PATH,
        description="YAML configuration file.",
    )
    batch: BatchConfig = Field(default_factory=BatchConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        yaml_source = YamlSettingsSource(
            settings_cls, init_settings, env_settings, dotenv_settings
        )
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            yaml_source,
            file_secret_settings,
        )


def load_settings(path: str | Path | None = None, **overrides: Any) -> CumStatsSettings:
    """Build settings, optionally from an explicit YAML file.

    Args:
        path: YAML file to read; when None the default lookup applies
        **overrides: Field values taking precedence over every other source

    Raises:
        FileNotFoundError: If ``path`` is given but does not exist
        ConfigError: If any value fails validation
    """
    if path is not None:
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(config_path)
        overrides["config_file"] = config_path
    try:
        return CumStatsSettings(**overrides)
    except ValidationError as exc:
        messages = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        )
        raise ConfigError(messages) from exc
    except SettingsError as exc:
        raise ConfigError(str(exc)) from exc


__all__ = [
    "DEFAULT_CONFIG_PATH",
    "BatchConfig",
    "ConfigError",
    "CumStatsSettings",
    "LoggingConfig",
    "MetricsConfig",
    "YamlSettingsSource",
    "load_settings",
]
