"""
Schema Introspector

Reads the user-table catalog of a live database and turns it into a
DatabaseSchema: a structured table/column model plus one prompt line per
table. Nothing is cached; every call opens a fresh session.
"""

import logging

from dbchat.connectors.base import BaseConnector
from dbchat.connectors.factory import create_connector
from dbchat.models.database import AIConnection
from dbchat.models.schema import DatabaseSchema

logger = logging.getLogger(__name__)


class SchemaIntrospector:
    """
    Build DatabaseSchema objects from catalog metadata.

    Attributes:
        dialect: Target dialect ("sqlserver", "postgresql")
        timeout: Statement timeout for the catalog query
        connect_timeout: Session open timeout
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

    async def generate_schema(self, connection: AIConnection | str) -> DatabaseSchema:
        """
        Introspect the database behind a connection.

        Args:
            connection: Stored connection or raw connection string

        Returns:
            DatabaseSchema with one TableSchema and one text line per user table

        Raises:
            ConnectionError: If the session cannot be opened
            SchemaQueryError: If the catalog query fails
        """
        async with self._create_connector(connection) as connector:
            rows = await connector.get_catalog_rows()

        schema = DatabaseSchema.from_catalog_rows(rows)
        for line in schema.schema_raw:
            logger.debug(line)

        logger.info(
            f"Generated schema with {schema.table_count} tables",
            extra={"dialect": self.dialect, "table_count": schema.table_count},
        )
        return schema

    def _create_connector(self, connection: AIConnection | str) -> BaseConnector:
        return create_connector(
            connection,
            dialect=self.dialect,
            timeout=self.timeout,
            connect_timeout=self.connect_timeout,
            **self.connector_kwargs,
        )
