"""
Schema Models

Structured and textual views of a target database's user tables.
The textual view (schema_raw) is what gets embedded in the SQL prompt.
"""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, Field, model_validator


class TableSchema(BaseModel):
    """Columns of one user table, in catalog order."""

    table_name: str = Field(..., description="Schema-qualified name, e.g. 'dbo.Orders'")
    columns: list[str] = Field(default_factory=list, description="Column names in catalog order")

    model_config = ConfigDict(frozen=True)

    def render(self) -> str:
        """Render as a single prompt line: ``- dbo.Orders (OrderId, Total)``."""
        return f"- {self.table_name} ({', '.join(self.columns)})"


class DatabaseSchema(BaseModel):
    """
    Introspected database schema.

    schema_raw is always a pure rendering of schema_structured, one line per
    table. Build instances with from_tables() so the two views cannot drift.
    """

    schema_structured: list[TableSchema] = Field(default_factory=list)
    schema_raw: list[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_rendering(self) -> "DatabaseSchema":
        """Reject a textual view that does not match the structured one."""
        expected = [table.render() for table in self.schema_structured]
        if self.schema_raw != expected:
            raise ValueError("schema_raw must be the rendering of schema_structured")
        return self

    @classmethod
    def from_tables(cls, tables: Iterable[TableSchema]) -> "DatabaseSchema":
        structured = list(tables)
        return cls(
            schema_structured=structured,
            schema_raw=[table.render() for table in structured],
        )

    @classmethod
    def from_catalog_rows(cls, rows: Iterable[tuple[str, str]]) -> "DatabaseSchema":
        """
        Group (table_name, column_name) pairs into tables.

        Tables keep first-seen order; columns keep the order they were read in.
        """
        grouped: dict[str, list[str]] = {}
        for table_name, column_name in rows:
            grouped.setdefault(table_name, []).append(column_name)

        return cls.from_tables(
            TableSchema(table_name=table_name, columns=columns)
            for table_name, columns in grouped.items()
        )

    @property
    def table_count(self) -> int:
        return len(self.schema_structured)
