"""DuckDB data source implementation."""

from typing import List, Dict, Any
import duckdb
import logging

from .base import DataSource

logger = logging.getLogger(__name__)


class DuckDBDataSource(DataSource):
    """DuckDB introspection."""

    default_schema = "main"

    def __init__(self, name: str, config: Dict[str, Any]):
        """Initialize DuckDB data source.

        Config should include:
            - path: Path to DuckDB database file (or :memory: for in-memory)
            - read_only: Whether to open in read-only mode (default: True,
              False for :memory:)
            - schema: Schema holding the CDM tables (default: main)
        """
        super().__init__(name, config)
        self.db_path = config.get("path", ":memory:")
        self.read_only = config.get("read_only", self.db_path != ":memory:")

    def connect(self) -> None:
        """Establish connection to DuckDB."""
        logger.info(f"Connecting to DuckDB at '{self.db_path}'")
        try:
            self.connection = duckdb.connect(self.db_path, read_only=self.read_only)
        except duckdb.Error as e:
            logger.error(f"Failed to open DuckDB {self.name}: {e}")
            raise ConnectionError(f"DuckDB connection failed: {e}") from e
        self._connected = True
        logger.info(f"Successfully connected to DuckDB: {self.name}")

    def disconnect(self) -> None:
        """Close DuckDB connection."""
        if self.connection:
            self.connection.close()
            logger.info(f"Disconnected from DuckDB: {self.name}")
            self.connection = None
            self._connected = False

    def list_tables(self) -> List[str]:
        """List tables and views in the configured schema."""
        result = self.connection.execute(
            """
            SELECT table_name
            FROM information_schema.tables
            WHERE table_schema = ?
            ORDER BY table_name
            """,
            [self.schema],
        ).fetchall()
        return [row[0] for row in result]

    def list_columns(self, table: str) -> List[str]:
        """List columns of one table."""
        result = self.connection.execute(
            """
            SELECT column_name
            FROM information_schema.columns
            WHERE table_schema = ? AND table_name = ?
            ORDER BY ordinal_position
            """,
            [self.schema, table],
        ).fetchall()
        return [row[0] for row in result]

    def list_all_columns(self) -> Dict[str, List[str]]:
        """List every table's columns with one query."""
        result = self.connection.execute(
            """
            SELECT table_name, column_name
            FROM information_schema.columns
            WHERE table_schema = ?
            ORDER BY table_name, ordinal_position
            """,
            [self.schema],
        ).fetchall()
        columns: Dict[str, List[str]] = {}
        for table_name, column_name in result:
            columns.setdefault(table_name, []).append(column_name)
        return columns
