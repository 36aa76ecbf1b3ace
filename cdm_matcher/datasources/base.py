"""Base data source interface for schema introspection."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List

from ..matcher.schema import ObservedSchema, ObservedTable

logger = logging.getLogger(__name__)


class DataSource(ABC):
    """Abstract base class for databases the matcher can inspect."""

    default_schema = "public"

    def __init__(self, name: str, config: Dict[str, Any]):
        """Initialize data source.

        Args:
            name: Unique name for this data source
            config: Configuration dictionary
        """
        self.name = name
        self.config = config
        self.schema = config.get("schema", self.default_schema)
        self.connection = None
        self._connected = False

    @abstractmethod
    def connect(self) -> None:
        """Establish connection to the data source."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Close connection to the data source."""
        pass

    @abstractmethod
    def list_tables(self) -> List[str]:
        """List all tables in the configured schema.

        Returns:
            List of table names as reported by the driver
        """
        pass

    @abstractmethod
    def list_columns(self, table: str) -> List[str]:
        """List the columns of a table.

        Args:
            table: Table name

        Returns:
            Column names in ordinal order
        """
        pass

    def list_all_columns(self) -> Dict[str, List[str]]:
        """List columns for every table.

        The default issues one round-trip per table; drivers that can
        introspect in bulk should override it.

        Returns:
            Mapping of table name to column names, in table listing order
        """
        columns = {}
        for table in self.list_tables():
            columns[table] = self.list_columns(table)
        return columns

    def introspect(self) -> ObservedSchema:
        """Snapshot the tables and columns currently visible.

        Returns:
            Observed schema for the matcher
        """
        self.ensure_connected()
        columns = self.list_all_columns()
        tables = []
        for table_name, column_names in columns.items():
            tables.append(ObservedTable(name=table_name, columns=tuple(column_names)))
        logger.info(f"Introspected {len(tables)} tables from {self.name}.{self.schema}")
        return ObservedSchema(tables=tuple(tables))

    def is_connected(self) -> bool:
        """Check if data source is connected.

        Returns:
            True if connected, False otherwise
        """
        return self._connected

    def ensure_connected(self) -> None:
        """Ensure data source is connected.

        Raises:
            ConnectionError: If connection cannot be established
        """
        if not self.is_connected():
            self.connect()
            self._connected = True

    def __enter__(self):
        """Context manager entry."""
        self.ensure_connected()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.disconnect()
        self._connected = False
        return False

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name}, schema={self.schema})"
