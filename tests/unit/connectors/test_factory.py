"""Unit tests for connector factory helpers."""

from unittest.mock import MagicMock, patch

import pytest

from dbchat.connectors import factory as connector_factory
from dbchat.connectors.postgres import PostgresConnector
from dbchat.connectors.sqlserver import SQLServerConnector
from dbchat.models.database import AIConnection


def test_resolve_dialect_normalizes_aliases():
    assert connector_factory.resolve_dialect("mssql") == "sqlserver"
    assert connector_factory.resolve_dialect("TSQL") == "sqlserver"
    assert connector_factory.resolve_dialect("postgres") == "postgresql"
    assert connector_factory.resolve_dialect(" PostgreSQL ") == "postgresql"


def test_resolve_dialect_rejects_unknown():
    with pytest.raises(ValueError, match="Unsupported dialect"):
        connector_factory.resolve_dialect("sqlite")


def test_create_connector_postgres_from_connection():
    connection = AIConnection(name="shop", connection_string="postgresql://u:p@db/shop")

    connector = connector_factory.create_connector(
        connection, dialect="postgres", timeout=12, connect_timeout=3
    )

    assert isinstance(connector, PostgresConnector)
    assert connector._connection_string == "postgresql://u:p@db/shop"
    assert connector.timeout == 12
    assert connector.connect_timeout == 3


def test_create_connector_sqlserver_from_string():
    with patch("dbchat.connectors.sqlserver.pyodbc", MagicMock()):
        connector = connector_factory.create_connector(
            "Server=db;Database=Shop", dialect="sqlserver", odbc_driver="FreeTDS"
        )

    assert isinstance(connector, SQLServerConnector)
    assert connector.odbc_driver == "FreeTDS"
    assert connector.is_connected is False


def test_create_connector_invalid_dialect_raises():
    with pytest.raises(ValueError):
        connector_factory.create_connector("Server=db", dialect="oracle")
