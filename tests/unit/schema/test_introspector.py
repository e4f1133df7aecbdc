"""
Unit tests for SchemaIntrospector.
"""

from unittest.mock import patch

import pytest

from dbchat.connectors.base import ConnectionError, SchemaQueryError
from dbchat.models.database import AIConnection
from dbchat.schema.introspector import SchemaIntrospector


@pytest.fixture
def connection():
    return AIConnection(name="shop", connection_string="Server=db;Database=Shop")


class TestGenerateSchema:
    """Test schema generation from catalog rows."""

    @pytest.mark.asyncio
    async def test_generate_schema(self, connection, mock_connector):
        """Test catalog pairs become one line per table."""
        mock_connector.get_catalog_rows.return_value = [
            ("dbo.Customers", "CustomerId"),
            ("dbo.Customers", "Name"),
            ("dbo.Orders", "OrderId"),
            ("dbo.Orders", "CustomerId"),
            ("dbo.Orders", "Total"),
        ]

        with patch(
            "dbchat.schema.introspector.create_connector", return_value=mock_connector
        ) as factory:
            introspector = SchemaIntrospector(dialect="sqlserver", timeout=10, odbc_driver="FreeTDS")
            schema = await introspector.generate_schema(connection)

        assert schema.schema_raw == [
            "- dbo.Customers (CustomerId, Name)",
            "- dbo.Orders (OrderId, CustomerId, Total)",
        ]
        assert schema.table_count == 2
        factory.assert_called_once_with(
            connection,
            dialect="sqlserver",
            timeout=10,
            connect_timeout=15,
            odbc_driver="FreeTDS",
        )
        mock_connector.__aexit__.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_empty_database(self, connection, mock_connector):
        """Test a database without user tables yields an empty schema."""
        mock_connector.get_catalog_rows.return_value = []

        with patch("dbchat.schema.introspector.create_connector", return_value=mock_connector):
            schema = await SchemaIntrospector().generate_schema(connection)

        assert schema.schema_raw == []
        assert schema.schema_structured == []

    @pytest.mark.asyncio
    async def test_catalog_failure_propagates(self, connection, mock_connector):
        """Test catalog errors reach the caller and the session is released."""
        mock_connector.get_catalog_rows.side_effect = SchemaQueryError("permission denied")

        with patch("dbchat.schema.introspector.create_connector", return_value=mock_connector):
            with pytest.raises(SchemaQueryError):
                await SchemaIntrospector().generate_schema(connection)

        mock_connector.__aexit__.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_connection_failure_propagates(self, connection, mock_connector):
        """Test an unreachable database is reported as ConnectionError."""
        mock_connector.__aenter__.side_effect = ConnectionError("Login failed")

        with patch("dbchat.schema.introspector.create_connector", return_value=mock_connector):
            with pytest.raises(ConnectionError, match="Login failed"):
                await SchemaIntrospector().generate_schema(connection)

        mock_connector.get_catalog_rows.assert_not_called()
