"""
SQL Server Connector

Async-compatible Microsoft SQL Server connector using pyodbc.

The underlying driver is synchronous, so session and query operations are
executed in worker threads via asyncio.to_thread. The connection string is
an ODBC connection string; when it names no driver, the configured ODBC
driver is prepended so ADO.NET-style strings
("Server=...;Database=...;User Id=...;Password=...") work unchanged.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any

try:
    import pyodbc
    from pyodbc import Error as PyODBCError
except ImportError:  # pragma: no cover - dependency guard
    pyodbc = None
    PyODBCError = Exception

from dbchat.connectors.base import (
    BaseConnector,
    ConnectionError,
    QueryExecutionError,
    QueryResult,
)

logger = logging.getLogger(__name__)

DEFAULT_ODBC_DRIVER = "ODBC Driver 18 for SQL Server"


class SQLServerConnector(BaseConnector):
    """SQL Server connector holding one pyodbc connection."""

    dialect = "sqlserver"

    def __init__(
        self,
        connection_string: str,
        timeout: int = 30,
        connect_timeout: int = 15,
        odbc_driver: str = DEFAULT_ODBC_DRIVER,
        **kwargs,
    ) -> None:
        if pyodbc is None:
            raise ImportError(
                "pyodbc is not installed. Install it with: pip install pyodbc"
            )
        super().__init__(
            connection_string=connection_string,
            timeout=timeout,
            connect_timeout=connect_timeout,
            **kwargs,
        )
        self.odbc_driver = odbc_driver

    async def connect(self) -> None:
        """Open the pyodbc connection."""
        if self._connection is not None:
            return
        try:
            self._connection = await asyncio.to_thread(self._connect_sync)
            logger.debug("SQL Server session opened")
        except PyODBCError as exc:
            logger.error(f"SQL Server connection failed: {exc}")
            raise ConnectionError(f"Failed to connect to SQL Server: {exc}") from exc
        except Exception as exc:
            logger.error(f"SQL Server connection failed: {exc}")
            raise ConnectionError(f"Connection error: {exc}") from exc

    async def execute(self, query: str) -> QueryResult:
        """Execute one statement and fetch all rows."""
        connection = self._require_connection()

        start_time = time.perf_counter()
        try:
            columns, rows = await asyncio.to_thread(self._execute_sync, connection, query)
        except PyODBCError as exc:
            logger.error(f"SQL Server query failed: {exc}\nQuery: {query[:200]}...")
            raise QueryExecutionError(f"Query execution failed: {exc}", sql=query) from exc
        except Exception as exc:
            logger.error(f"SQL Server query failed: {exc}\nQuery: {query[:200]}...")
            raise QueryExecutionError(f"Query error: {exc}", sql=query) from exc

        execution_time_ms = (time.perf_counter() - start_time) * 1000
        logger.debug(
            f"Query executed in {execution_time_ms:.2f}ms, returned {len(rows)} rows"
        )
        return QueryResult(columns=columns, rows=rows, execution_time_ms=execution_time_ms)

    async def close(self) -> None:
        """Close the pyodbc connection."""
        if self._connection is None:
            return
        connection, self._connection = self._connection, None
        try:
            await asyncio.to_thread(connection.close)
            logger.debug("SQL Server session closed")
        except PyODBCError as exc:
            logger.warning(f"Error closing SQL Server connection: {exc}")

    def _odbc_connection_string(self) -> str:
        if "driver=" in self._connection_string.lower():
            return self._connection_string
        return f"DRIVER={{{self.odbc_driver}}};{self._connection_string}"

    def _connect_sync(self) -> Any:
        connection = pyodbc.connect(
            self._odbc_connection_string(),
            timeout=self.connect_timeout,
            autocommit=True,
        )
        connection.timeout = self.timeout
        return connection

    @staticmethod
    def _execute_sync(connection: Any, query: str) -> tuple[list[str], list[tuple[Any, ...]]]:
        cursor = connection.cursor()
        try:
            cursor.execute(query)
            if cursor.description is None:
                return [], []
            columns = [column[0] for column in cursor.description]
            rows = [tuple(row) for row in cursor.fetchall()]
            return columns, rows
        finally:
            cursor.close()
