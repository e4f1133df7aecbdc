"""
DBChat Agents Module

The three model/database-facing steps of the natural-language-to-SQL pipeline.

Available Agents:
    - SQLGenerator: Question + schema -> AIQuery (one chat-completion call)
    - QueryExecutor: SQL -> table of strings with per-cell conversion fallback
    - ChatRelay: Free-form follow-up chat over an existing history

Usage:
    from dbchat.agents import SQLGenerator, QueryExecutor

    generator = SQLGenerator(provider, dialect="sqlserver", max_rows=100)
    ai_query = await generator.generate_query("top 5 orders by total", schema)
    table = await QueryExecutor(dialect="sqlserver").execute_query(connection, ai_query.query)
"""

from dbchat.agents.chat import ChatRelay
from dbchat.agents.executor import (
    CONVERSION_ERROR_SENTINEL,
    CellConversion,
    QueryExecutor,
    convert_cell,
    tabulate,
)
from dbchat.agents.sql import SQLGenerator, clean_response_text, parse_ai_query

__all__ = [
    "ChatRelay",
    "QueryExecutor",
    "SQLGenerator",
    "CellConversion",
    "CONVERSION_ERROR_SENTINEL",
    "convert_cell",
    "tabulate",
    "clean_response_text",
    "parse_ai_query",
]
