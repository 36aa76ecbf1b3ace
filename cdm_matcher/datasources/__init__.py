"""Data source connectors used to introspect a live schema."""

from typing import Dict, Type

from .base import DataSource
from .duckdb import DuckDBDataSource
from .postgresql import PostgreSQLDataSource

DATASOURCE_TYPES: Dict[str, Type[DataSource]] = {
    "duckdb": DuckDBDataSource,
    "postgresql": PostgreSQLDataSource,
    "postgres": PostgreSQLDataSource,
}


def create_datasource(ds_config) -> DataSource:
    """Instantiate the connector named by a DataSourceConfig."""
    datasource_cls = DATASOURCE_TYPES.get(ds_config.type.lower())
    if datasource_cls is None:
        raise ValueError(f"Unsupported data source type: {ds_config.type}")
    return datasource_cls(ds_config.name, ds_config.config)


__all__ = [
    "DATASOURCE_TYPES",
    "DataSource",
    "DuckDBDataSource",
    "PostgreSQLDataSource",
    "create_datasource",
]
