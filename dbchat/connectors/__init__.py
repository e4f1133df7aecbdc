"""
Database Connectors Module

Single-session async connectors for the supported SQL dialects.

Available Connectors:
    - BaseConnector: Abstract base class
    - SQLServerConnector: Microsoft SQL Server (pyodbc)
    - PostgresConnector: PostgreSQL (asyncpg)

Usage:
    from dbchat.connectors import create_connector

    async with create_connector(connection, dialect="sqlserver") as connector:
        result = await connector.execute("SELECT TOP 10 * FROM dbo.Orders")
        pairs = await connector.get_catalog_rows()
"""

from dbchat.connectors.base import (
    BaseConnector,
    ConnectionError,
    ConnectorError,
    QueryExecutionError,
    QueryResult,
    SchemaQueryError,
)
from dbchat.connectors.catalog_templates import get_catalog_query, supported_dialects
from dbchat.connectors.factory import create_connector, resolve_dialect
from dbchat.connectors.postgres import PostgresConnector
from dbchat.connectors.sqlserver import SQLServerConnector

__all__ = [
    "BaseConnector",
    "SQLServerConnector",
    "PostgresConnector",
    "create_connector",
    "resolve_dialect",
    "get_catalog_query",
    "supported_dialects",
    "QueryResult",
    "ConnectorError",
    "ConnectionError",
    "QueryExecutionError",
    "SchemaQueryError",
]
