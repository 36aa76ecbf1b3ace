"""Configuration management for CDM matching."""

from dataclasses import dataclass, field
from typing import Dict, Any, Optional
import yaml
from pathlib import Path


@dataclass
class DataSourceConfig:
    """Configuration for the database to inspect."""

    name: str
    type: str  # "postgresql" or "duckdb"
    config: Dict[str, Any] = field(default_factory=dict)


@dataclass
class MatcherConfig:
    """Configuration for catalog loading and matching."""

    data_model: str = "omop"
    models_dir: str = "models"
    require_match: bool = True
    strict_catalog: bool = False  # Raise when any catalog file fails to load


@dataclass
class LoggingConfig:
    """Configuration for log output."""

    level: str = "INFO"
    structured: bool = False
    log_file: Optional[str] = None


@dataclass
class Config:
    """Main configuration class."""

    datasource: Optional[DataSourceConfig] = None
    matcher: MatcherConfig = field(default_factory=MatcherConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(config_path: str) -> Config:
    """Load configuration from YAML file.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Parsed configuration

    Example YAML format:
        data_model: omop
        models_dir: models

        datasource:
          name: clinical
          type: postgresql
          host: localhost
          port: 5432
          database: omop
          user: reviewer
          password: secret
          schema: cdm

        matcher:
          require_match: true
          strict_catalog: false

        logging:
          level: INFO
          structured: false
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}

    datasource = None
    ds_data = data.get("datasource")
    if ds_data:
        ds_data = dict(ds_data)
        ds_type = ds_data.pop("type", None)
        if not ds_type:
            raise ValueError("datasource.type is required")
        ds_name = ds_data.pop("name", ds_type)
        datasource = DataSourceConfig(name=ds_name, type=ds_type, config=ds_data)

    # Top-level shortcuts override the matcher section
    matcher_data = dict(data.get("matcher") or {})
    for key in ("data_model", "models_dir"):
        if key in data:
            matcher_data[key] = data[key]
    matcher = MatcherConfig(**matcher_data)

    logging_data = data.get("logging") or {}
    logging_config = LoggingConfig(**logging_data)

    return Config(datasource=datasource, matcher=matcher, logging=logging_config)
