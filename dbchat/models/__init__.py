"""
DBChat Models Module

Pydantic models for type-safe data validation throughout the application.

Available Models:
    - AIConnection: Named connection string
    - TableSchema / DatabaseSchema: Introspected schema (structured + text)
    - AIQuery: Parsed model response (summary + SQL)
    - QueryGenerated / ParseFailure: Explicit generation result

Errors:
    - DBChatError: Base exception for pipeline errors
    - GenerationParseError: Model output did not match the JSON contract
    - LLMError: Chat-completion call failed
    - UnsafeQueryError: Statement rejected by the read-only gate
    - ConnectionNotFoundError: Unknown connection name

Usage:
    from dbchat.models import AIConnection, DatabaseSchema, AIQuery
"""

from dbchat.models.database import AIConnection
from dbchat.models.errors import (
    ConnectionNotFoundError,
    DBChatError,
    GenerationParseError,
    LLMError,
    UnsafeQueryError,
)
from dbchat.models.query import AIQuery, GenerationResult, ParseFailure, QueryGenerated
from dbchat.models.schema import DatabaseSchema, TableSchema

__all__ = [
    "AIConnection",
    "TableSchema",
    "DatabaseSchema",
    "AIQuery",
    "GenerationResult",
    "QueryGenerated",
    "ParseFailure",
    "DBChatError",
    "GenerationParseError",
    "LLMError",
    "UnsafeQueryError",
    "ConnectionNotFoundError",
]
