"""PostgreSQL data source implementation."""

from typing import List, Dict, Any
import psycopg2
from psycopg2 import pool
import logging

from .base import DataSource

logger = logging.getLogger(__name__)

REQUIRED_KEYS = ("host", "database", "user", "password")


class PostgreSQLDataSource(DataSource):
    """PostgreSQL introspection with connection pooling."""

    def __init__(self, name: str, config: Dict[str, Any]):
        """Initialize PostgreSQL data source.

        Config should include:
            - host: Database host
            - port: Database port (default: 5432)
            - database: Database name
            - user: Username
            - password: Password
            - schema: Schema holding the CDM tables (default: public)
            - min_connections: Minimum connections in pool (default: 1)
            - max_connections: Maximum connections in pool (default: 5)
        """
        super().__init__(name, config)
        self._pool = None
        self._min_connections = config.get("min_connections", 1)
        self._max_connections = config.get("max_connections", 5)

    def connect(self) -> None:
        """Establish connection pool to PostgreSQL."""
        missing = [key for key in REQUIRED_KEYS if self.config.get(key) is None]
        if missing:
            raise ValueError(
                f"PostgreSQL datasource '{self.name}' is missing config: {', '.join(missing)}"
            )
        try:
            logger.info(f"Connecting to PostgreSQL database '{self.config['database']}' at {self.config['host']}")
            self._pool = pool.ThreadedConnectionPool(
                self._min_connections,
                self._max_connections,
                host=self.config["host"],
                port=self.config.get("port", 5432),
                database=self.config["database"],
                user=self.config["user"],
                password=self.config["password"],
            )
            conn = self._pool.getconn()
            self._pool.putconn(conn)
            self.connection = conn
            self._connected = True
            logger.info(f"Successfully connected to PostgreSQL: {self.name}")
        except psycopg2.Error as e:
            logger.error(f"Failed to connect to PostgreSQL {self.name}: {e}")
            raise ConnectionError(f"PostgreSQL connection failed: {e}") from e

    def disconnect(self) -> None:
        """Close all connections in the pool."""
        if self._pool:
            self._pool.closeall()
            logger.info(f"Disconnected from PostgreSQL: {self.name}")
            self._pool = None
            self.connection = None
            self._connected = False

    def _get_connection(self):
        """Get a connection from the pool."""
        if not self._pool:
            raise RuntimeError(f"Not connected to {self.name}")
        return self._pool.getconn()

    def _return_connection(self, conn):
        """Return a connection to the pool."""
        if self._pool:
            self._pool.putconn(conn)

    def list_tables(self) -> List[str]:
        """List tables and views in the configured schema."""
        rows = self._fetch(
            """
            SELECT table_name
            FROM information_schema.tables
            WHERE table_schema = %s
            ORDER BY table_name
            """,
            (self.schema,),
        )
        return [row[0] for row in rows]

    def list_columns(self, table: str) -> List[str]:
        """List columns of one table from information_schema."""
        rows = self._fetch(
            """
            SELECT column_name
            FROM information_schema.columns
            WHERE table_schema = %s AND table_name = %s
            ORDER BY ordinal_position
            """,
            (self.schema, table),
        )
        return [row[0] for row in rows]

    def list_all_columns(self) -> Dict[str, List[str]]:
        """List every table's columns in a single round-trip."""
        rows = self._fetch(
            """
            SELECT table_name, column_name
            FROM information_schema.columns
            WHERE table_schema = %s
            ORDER BY table_name, ordinal_position
            """,
            (self.schema,),
        )
        columns: Dict[str, List[str]] = {}
        for table_name, column_name in rows:
            columns.setdefault(table_name, []).append(column_name)
        return columns

    def _fetch(self, sql: str, params) -> List[tuple]:
        conn = self._get_connection()
        try:
            with conn.cursor() as cursor:
                cursor.execute(sql, params)
                return cursor.fetchall()
        except psycopg2.Error as e:
            logger.error(f"Introspection query failed on {self.name}: {e}")
            raise
        finally:
            self._return_connection(conn)
