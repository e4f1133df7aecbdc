"""
Pipeline Errors

Exceptions raised by the generation and orchestration layers.
Database errors live with the connectors (dbchat.connectors.base).
"""

from typing import Any


class DBChatError(Exception):
    """
    Base exception for pipeline errors.

    Attributes:
        message: Error description
        recoverable: Whether the caller can reasonably retry or edit and resubmit
        context: Additional context for debugging
    """

    def __init__(
        self,
        message: str,
        recoverable: bool = False,
        context: dict[str, Any] | None = None,
    ):
        self.message = message
        self.recoverable = recoverable
        self.context = context or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/CLI output."""
        return {
            "message": self.message,
            "recoverable": self.recoverable,
            "context": self.context,
            "type": self.__class__.__name__,
        }


class GenerationParseError(DBChatError):
    """Model output could not be read as the {"summary", "query"} contract."""

    def __init__(self, raw_response: str, reason: str = ""):
        self.raw_response = raw_response
        self.reason = reason
        super().__init__(
            "Failed to parse AI response as a SQL query. "
            f"The AI response was: {raw_response}",
            recoverable=True,
            context={"reason": reason} if reason else None,
        )


class LLMError(DBChatError):
    """Error during the chat-completion call."""

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message, recoverable=True, context=context)


class UnsafeQueryError(DBChatError):
    """Statement rejected by the read-only gate."""

    def __init__(self, sql: str, statement_type: str):
        self.sql = sql
        self.statement_type = statement_type
        super().__init__(
            f"Only single SELECT statements may run in read-only mode (got {statement_type})",
            recoverable=True,
            context={"statement_type": statement_type},
        )


class ConnectionNotFoundError(DBChatError):
    """No stored connection has the requested name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"No connection named '{name}'", context={"name": name})
