"""
Base Database Connector

Abstract base class for all database connectors. Provides a consistent
async interface for opening a session, running one statement, and reading
the user-table catalog.

A connector holds exactly one session. Use it as an async context manager
so the session is released on every exit path:

    async with create_connector(connection, dialect="sqlserver") as connector:
        result = await connector.execute("SELECT TOP 5 * FROM dbo.Orders")
"""

import logging
from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, Field

from dbchat.connectors.catalog_templates import get_catalog_query

logger = logging.getLogger(__name__)


# ============================================================================
# Data Models
# ============================================================================


class QueryResult(BaseModel):
    """Raw result of one statement, values exactly as the driver returned them."""

    columns: list[str] = Field(default_factory=list, description="Column names in cursor order")
    rows: list[tuple[Any, ...]] = Field(default_factory=list, description="Raw row values")
    execution_time_ms: float = Field(default=0.0, description="Query execution time in ms")

    @property
    def row_count(self) -> int:
        return len(self.rows)


class ConnectorError(Exception):
    """Base exception for connector errors."""

    pass


class ConnectionError(ConnectorError):
    """A database session could not be opened."""

    pass


class QueryExecutionError(ConnectorError):
    """The statement reached the database but failed."""

    def __init__(self, message: str, sql: str | None = None):
        self.sql = sql
        super().__init__(message)


class SchemaQueryError(ConnectorError):
    """The catalog introspection query failed."""

    pass


# ============================================================================
# Base Connector
# ============================================================================


class BaseConnector(ABC):
    """
    Abstract base class for database connectors.

    The connection string is opaque: it is handed to the driver as-is and
    never logged.

    Attributes:
        dialect: Catalog/prompt dialect key ("sqlserver", "postgresql")
        timeout: Statement timeout in seconds
        connect_timeout: Session open timeout in seconds
    """

    dialect: str = ""

    def __init__(
        self,
        connection_string: str,
        timeout: int = 30,
        connect_timeout: int = 15,
        **kwargs,
    ):
        self._connection_string = connection_string
        self.timeout = timeout
        self.connect_timeout = connect_timeout
        self.kwargs = kwargs

        self._connection = None

    @abstractmethod
    async def connect(self) -> None:
        """
        Open the session. Idempotent.

        Raises:
            ConnectionError: If the session cannot be opened
        """
        pass  # pragma: no cover - abstract method

    @abstractmethod
    async def execute(self, query: str) -> QueryResult:
        """
        Execute a single SQL statement.

        Raises:
            QueryExecutionError: If the statement fails
            ConnectionError: If not connected
        """
        pass  # pragma: no cover - abstract method

    @abstractmethod
    async def close(self) -> None:
        """Close the session. Safe to call multiple times."""
        pass  # pragma: no cover - abstract method

    async def get_catalog_rows(self) -> list[tuple[str, str]]:
        """
        Read (table_name, column_name) pairs for every user table.

        Rows are ordered by table name, then column ordinal.

        Raises:
            SchemaQueryError: If the catalog query fails
        """
        try:
            result = await self.execute(get_catalog_query(self.dialect))
        except QueryExecutionError as e:
            logger.error(f"Schema introspection failed: {e}")
            raise SchemaQueryError(f"Failed to introspect schema: {e}") from e

        pairs = [(str(row[0]), str(row[1])) for row in result.rows]
        logger.info(
            f"Introspected catalog: {len(pairs)} columns",
            extra={"dialect": self.dialect, "column_count": len(pairs)},
        )
        return pairs

    @property
    def is_connected(self) -> bool:
        """Check if connector holds an open session."""
        return self._connection is not None

    def _require_connection(self):
        if self._connection is None:
            raise ConnectionError("Not connected to database. Call connect() first.")
        return self._connection

    async def __aenter__(self):
        """Async context manager entry."""
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
        return False

    def __repr__(self) -> str:
        status = "connected" if self.is_connected else "disconnected"
        return f"<{self.__class__.__name__} {self.dialect} ({status})>"
