"""User-table catalog queries, one per supported dialect."""

from __future__ import annotations

# Each query returns (table_name, column_name) rows, ordered by table name
# and then by column ordinal. Table names are schema-qualified.
_CATALOG_QUERIES: dict[str, str] = {
    "sqlserver": (
        "SELECT SCHEMA_NAME(o.schema_id) + '.' + o.name AS TableName, c.name AS ColumnName "
        "FROM sys.columns c "
        "JOIN sys.objects o ON o.object_id = c.object_id "
        "WHERE o.type = 'U' "
        "ORDER BY o.name, c.column_id"
    ),
    "postgresql": (
        "SELECT n.nspname || '.' || cl.relname AS table_name, a.attname AS column_name "
        "FROM pg_catalog.pg_attribute a "
        "JOIN pg_catalog.pg_class cl ON cl.oid = a.attrelid "
        "JOIN pg_catalog.pg_namespace n ON n.oid = cl.relnamespace "
        "WHERE cl.relkind IN ('r', 'p') "
        "AND n.nspname NOT IN ('pg_catalog', 'information_schema') "
        "AND n.nspname NOT LIKE 'pg_toast%' "
        "AND a.attnum > 0 "
        "AND NOT a.attisdropped "
        "ORDER BY cl.relname, a.attnum"
    ),
}


def supported_dialects() -> list[str]:
    return sorted(_CATALOG_QUERIES)


def get_catalog_query(dialect: str) -> str:
    """Return the catalog query for a dialect."""
    key = (dialect or "").strip().lower()
    if key not in _CATALOG_QUERIES:
        raise ValueError(
            f"Unsupported dialect: {dialect}. Supported dialects: {supported_dialects()}"
        )
    return _CATALOG_QUERIES[key]
