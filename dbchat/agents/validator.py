"""
Read-Only Gate

Optional check run before execution when PIPELINE_READ_ONLY is enabled:
the text must parse (sqlparse) into exactly one statement whose type is
SELECT. CTEs are resolved by sqlparse to the statement that follows them.
"""

import logging

import sqlparse

from dbchat.models.errors import UnsafeQueryError

logger = logging.getLogger(__name__)


def statement_types(sql: str) -> list[str]:
    """Return the sqlparse type of every non-empty statement in sql."""
    types = []
    for statement in sqlparse.parse(sql):
        if statement.token_first(skip_ws=True, skip_cm=True) is None:
            continue
        types.append(statement.get_type())
    return types


def ensure_read_only(sql: str) -> None:
    """
    Reject anything but a single SELECT statement.

    Raises:
        UnsafeQueryError: With the offending statement type
    """
    types = statement_types(sql)
    if not types:
        raise UnsafeQueryError(sql, "EMPTY")
    if len(types) > 1:
        raise UnsafeQueryError(sql, "MULTIPLE")
    if types[0] != "SELECT":
        logger.warning(f"Read-only gate rejected a {types[0]} statement")
        raise UnsafeQueryError(sql, types[0])
