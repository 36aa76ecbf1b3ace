"""Configuration management."""

from .config import (
    Config,
    DataSourceConfig,
    LoggingConfig,
    MatcherConfig,
    load_config,
)

__all__ = [
    "Config",
    "DataSourceConfig",
    "LoggingConfig",
    "MatcherConfig",
    "load_config",
]
