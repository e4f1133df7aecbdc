"""
Unit tests for the read-only gate.
"""

import pytest

from dbchat.agents.validator import ensure_read_only, statement_types
from dbchat.models.errors import UnsafeQueryError


class TestStatementTypes:
    """Test statement classification."""

    def test_single_select(self):
        assert statement_types("SELECT TOP 5 * FROM dbo.Orders") == ["SELECT"]

    def test_multiple_statements(self):
        assert statement_types("SELECT 1; DELETE FROM dbo.Orders;") == ["SELECT", "DELETE"]

    def test_blank(self):
        assert statement_types("   ") == []


class TestEnsureReadOnly:
    """Test rejection of anything but one SELECT."""

    @pytest.mark.parametrize(
        "sql",
        [
            "SELECT TOP 5 * FROM dbo.Orders ORDER BY Total DESC",
            "select count(*) from public.orders limit 100",
            "WITH t AS (SELECT 1 AS x) SELECT x FROM t",
            "SELECT 1;",
        ],
    )
    def test_accepts_select(self, sql):
        ensure_read_only(sql)

    @pytest.mark.parametrize(
        "sql,statement_type",
        [
            ("DELETE FROM dbo.Orders", "DELETE"),
            ("UPDATE dbo.Orders SET Total = 0", "UPDATE"),
            ("INSERT INTO dbo.Orders (OrderId) VALUES (1)", "INSERT"),
            ("DROP TABLE dbo.Orders", "DROP"),
        ],
    )
    def test_rejects_writes(self, sql, statement_type):
        with pytest.raises(UnsafeQueryError) as exc_info:
            ensure_read_only(sql)

        assert exc_info.value.statement_type == statement_type
        assert exc_info.value.sql == sql

    def test_rejects_multiple_statements(self):
        with pytest.raises(UnsafeQueryError) as exc_info:
            ensure_read_only("SELECT 1; SELECT 2")

        assert exc_info.value.statement_type == "MULTIPLE"

    def test_rejects_empty(self):
        with pytest.raises(UnsafeQueryError) as exc_info:
            ensure_read_only("")

        assert exc_info.value.statement_type == "EMPTY"
