"""Configuration helpers for cumstats."""

from .settings import (
    DEFAULT_CONFIG_PATH,
    BatchConfig,
    ConfigError,
    CumStatsSettings,
    LoggingConfig,
    MetricsConfig,
    YamlSettingsSource,
    load_settings,
)

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
