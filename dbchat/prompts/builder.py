"""
Prompt Builder

Assembles the system instruction block for SQL generation from the textual
schema and fixed policy rules. Pure and deterministic: the same schema,
dialect and row cap always produce the same string.
"""

from __future__ import annotations

from typing import NamedTuple

from dbchat.connectors.factory import resolve_dialect
from dbchat.llm.models import LLMMessage
from dbchat.models.schema import DatabaseSchema
from dbchat.prompts.loader import PromptLoader

SQL_GENERATOR_PROMPT = "sql_generator.md"
DEFAULT_MAX_ROWS = 100


class DialectProfile(NamedTuple):
    """How a dialect is named in the prompt, and which one it must not be confused with."""

    display_name: str
    forbidden: str


DIALECT_PROFILES: dict[str, DialectProfile] = {
    "sqlserver": DialectProfile("Microsoft SQL Server", "MySQL"),
    "postgresql": DialectProfile("PostgreSQL", "Microsoft SQL Server (T-SQL)"),
}

_loader = PromptLoader()


def get_dialect_profile(dialect: str) -> DialectProfile:
    """Look up a dialect by name or alias ("mssql", "postgres", ...)."""
    return DIALECT_PROFILES[resolve_dialect(dialect)]


def build_system_prompt(
    schema: DatabaseSchema,
    dialect: str = "sqlserver",
    max_rows: int = DEFAULT_MAX_ROWS,
) -> str:
    """
    Build the system message for SQL generation.

    Sections, in order: assistant scope, schema lines (verbatim), column
    header instruction, single-line JSON contract, dialect constraint,
    row cap, and the all-columns instruction.
    """
    if max_rows <= 0:
        raise ValueError("max_rows must be positive")

    profile = get_dialect_profile(dialect)
    return _loader.render(
        SQL_GENERATOR_PROMPT,
        schema_lines=schema.schema_raw,
        dialect_name=profile.display_name,
        forbidden_dialect=profile.forbidden,
        max_rows=max_rows,
    )


def build_messages(
    schema: DatabaseSchema,
    user_prompt: str,
    dialect: str = "sqlserver",
    max_rows: int = DEFAULT_MAX_ROWS,
) -> list[LLMMessage]:
    """Return exactly two messages: the system prompt, then the user's question."""
    return [
        LLMMessage(role="system", content=build_system_prompt(schema, dialect, max_rows)),
        LLMMessage(role="user", content=user_prompt),
    ]
