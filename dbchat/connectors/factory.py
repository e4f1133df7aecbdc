"""Connector factory for supported dialects."""

from __future__ import annotations

from dbchat.connectors.base import BaseConnector
from dbchat.connectors.postgres import PostgresConnector
from dbchat.connectors.sqlserver import SQLServerConnector
from dbchat.models.database import AIConnection

_CONNECTORS: dict[str, type[BaseConnector]] = {
    "sqlserver": SQLServerConnector,
    "postgresql": PostgresConnector,
}

_DIALECT_ALIASES = {
    "mssql": "sqlserver",
    "sqlserver": "sqlserver",
    "tsql": "sqlserver",
    "postgres": "postgresql",
    "postgresql": "postgresql",
}


def resolve_dialect(dialect: str) -> str:
    """Normalize a dialect name ("mssql", "postgres", ...) to its canonical key."""
    value = (dialect or "").strip().lower()
    if value not in _DIALECT_ALIASES:
        raise ValueError(f"Unsupported dialect: {dialect}")
    return _DIALECT_ALIASES[value]


def create_connector(
    connection: AIConnection | str,
    *,
    dialect: str,
    timeout: int = 30,
    connect_timeout: int = 15,
    **kwargs,
) -> BaseConnector:
    """Create an unopened connector for a stored connection or a raw connection string."""
    connection_string = (
        connection.get_connection_string()
        if isinstance(connection, AIConnection)
        else connection
    )
    connector_cls = _CONNECTORS[resolve_dialect(dialect)]
    return connector_cls(
        connection_string=connection_string,
        timeout=timeout,
        connect_timeout=connect_timeout,
        **kwargs,
    )
