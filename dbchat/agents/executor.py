"""
Query Executor & Tabulator

Runs one SQL statement and materializes the result as a table of strings:
row 0 is the header (only when at least one row came back), and every cell
is converted independently. A cell that cannot be turned into text becomes
the sentinel "DataTypeConversionError"; the rest of the row and the result
set are unaffected.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from dbchat.connectors.base import BaseConnector
from dbchat.connectors.factory import create_connector
from dbchat.models.database import AIConnection

logger = logging.getLogger(__name__)

CONVERSION_ERROR_SENTINEL = "DataTypeConversionError"

ResultTable = list[list[str]]


@dataclass(frozen=True)
class CellConversion:
    """Outcome of converting one raw value to text."""

    text: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def or_sentinel(self) -> str:
        if self.ok:
            return self.text
        return CONVERSION_ERROR_SENTINEL


def _to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).decode("utf-8")
    return str(value)


def convert_cell(value: Any) -> CellConversion:
    """
    Convert a raw driver value to its text form.

    None becomes "", binary must be valid UTF-8, everything else goes
    through str(). Failures are returned, never raised.
    """
    try:
        return CellConversion(text=_to_text(value))
    except Exception as e:
        return CellConversion(error=f"{type(e).__name__}: {e}")


def tabulate(columns: Sequence[str], rows: Sequence[Sequence[Any]]) -> ResultTable:
    """
    Build the result table from column names and raw rows.

    The header is emitted when the first row is seen, so an empty result
    produces an empty table.
    """
    table: ResultTable = []
    for row_index, row in enumerate(rows):
        if not table:
            table.append([str(column) for column in columns])

        cells = []
        for column_index, column in enumerate(columns):
            conversion = convert_cell(row[column_index])
            if not conversion.ok:
                logger.debug(
                    f"Cell conversion failed at row {row_index}, column '{column}': "
                    f"{conversion.error}"
                )
            cells.append(conversion.or_sentinel())
        table.append(cells)

    return table


class QueryExecutor:
    """
    Execute SQL against a stored connection.

    Attributes:
        dialect: Target dialect ("sqlserver", "postgresql")
        timeout: Statement timeout in seconds
        connect_timeout: Session open timeout in seconds
    """

    def __init__(
        self,
        dialect: str = "sqlserver",
        timeout: int = 30,
        connect_timeout: int = 15,
        **connector_kwargs,
    ):
        self.dialect = dialect
        self.timeout = timeout
        self.connect_timeout = connect_timeout
        self.connector_kwargs = connector_kwargs

    async def execute_query(self, connection: AIConnection | str, sql_text: str) -> ResultTable:
        """
        Run a generated or user-edited statement and tabulate the rows.

        Args:
            connection: Stored connection or raw connection string
            sql_text: A single SQL statement

        Returns:
            Header row plus data rows, or [] when no rows came back

        Raises:
            ValueError: If sql_text is blank
            ConnectionError: If the session cannot be opened
            QueryExecutionError: If the statement fails
        """
        if not sql_text or not sql_text.strip():
            raise ValueError("SQL text must not be empty")

        async with self._create_connector(connection) as connector:
            result = await connector.execute(sql_text)

        table = tabulate(result.columns, result.rows)
        logger.info(
            f"Query returned {result.row_count} rows",
            extra={
                "row_count": result.row_count,
                "column_count": len(result.columns),
                "execution_time_ms": result.execution_time_ms,
            },
        )
        return table

    def _create_connector(self, connection: AIConnection | str) -> BaseConnector:
        return create_connector(
            connection,
            dialect=self.dialect,
            timeout=self.timeout,
            connect_timeout=self.connect_timeout,
            **self.connector_kwargs,
        )
