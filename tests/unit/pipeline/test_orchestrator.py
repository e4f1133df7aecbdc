"""
Unit tests for DBChatPipeline.

The database is replaced with a mocked connector and the model with a
mocked provider, so each test exercises the full request flow.
"""

from decimal import Decimal
from unittest.mock import AsyncMock, patch

import pytest

from dbchat.config import Settings
from dbchat.connectors.base import QueryExecutionError, QueryResult
from dbchat.llm.models import LLMMessage
from dbchat.models.database import AIConnection
from dbchat.models.errors import GenerationParseError, UnsafeQueryError
from dbchat.pipeline.orchestrator import DBChatPipeline

TOP_FIVE = "SELECT TOP 5 * FROM dbo.Orders ORDER BY Total DESC"


@pytest.fixture
def connection():
    return AIConnection(name="shop", connection_string="Server=db;Database=Shop")


@pytest.fixture
def pipeline(mock_llm_provider):
    return DBChatPipeline(mock_llm_provider, dialect="sqlserver", max_rows=100)


@pytest.fixture
def patched_connector(mock_connector):
    """Route every session opened by the pipeline to one mock connector."""
    mock_connector.get_catalog_rows.return_value = [
        ("dbo.Orders", "OrderId"),
        ("dbo.Orders", "CustomerId"),
        ("dbo.Orders", "Total"),
    ]
    mock_connector.execute.return_value = QueryResult(
        columns=["OrderId", "CustomerId", "Total"],
        rows=[(7, 3, Decimal("250.00")), (4, 1, Decimal("120.00"))],
    )
    with patch(
        "dbchat.schema.introspector.create_connector", return_value=mock_connector
    ), patch("dbchat.agents.executor.create_connector", return_value=mock_connector):
        yield mock_connector


class TestAsk:
    """Test the end-to-end question flow."""

    @pytest.mark.asyncio
    async def test_ask_runs_every_step(
        self, pipeline, mock_llm_provider, patched_connector, connection
    ):
        """Test introspect, prompt, generate and execute in order."""
        mock_llm_provider.set_response(
            f'{{"summary": "Five largest orders by total.", "query": "{TOP_FIVE}"}}'
        )

        result = await pipeline.ask(connection, "top 5 orders by total")

        system_prompt = mock_llm_provider.last_request.messages[0].content
        assert "- dbo.Orders (OrderId, CustomerId, Total)" in system_prompt
        assert "Always limit the SQL Query to 100 rows." in system_prompt

        assert result.question == "top 5 orders by total"
        assert result.schema_.schema_raw == ["- dbo.Orders (OrderId, CustomerId, Total)"]
        assert result.query.query == TOP_FIVE
        assert result.table == [
            ["OrderId", "CustomerId", "Total"],
            ["7", "3", "250.00"],
            ["4", "1", "120.00"],
        ]
        patched_connector.execute.assert_awaited_once_with(TOP_FIVE)

    @pytest.mark.asyncio
    async def test_ask_without_execution(
        self, pipeline, mock_llm_provider, patched_connector, connection
    ):
        """Test execute=False stops after generation."""
        mock_llm_provider.set_response(f'{{"summary": "s", "query": "{TOP_FIVE}"}}')

        result = await pipeline.ask(connection, "top 5 orders", execute=False)

        assert result.table is None
        patched_connector.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_parse_failure_stops_pipeline(
        self, pipeline, mock_llm_provider, patched_connector, connection
    ):
        """Test a non-JSON answer is surfaced and nothing is executed."""
        mock_llm_provider.set_response("I'm sorry, I can only answer database questions.")

        with pytest.raises(GenerationParseError) as exc_info:
            await pipeline.ask(connection, "tell me a joke")

        assert exc_info.value.raw_response.startswith("I'm sorry")
        patched_connector.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_execution_error_propagates(
        self, pipeline, mock_llm_provider, patched_connector, connection
    ):
        """Test database errors from generated SQL reach the caller."""
        mock_llm_provider.set_response('{"summary": "s", "query": "SELECT * FROM dbo.Nope"}')
        patched_connector.execute.side_effect = QueryExecutionError(
            "Invalid object name 'dbo.Nope'", sql="SELECT * FROM dbo.Nope"
        )

        with pytest.raises(QueryExecutionError):
            await pipeline.ask(connection, "everything from nope")


class TestRunSql:
    """Test running edited SQL."""

    @pytest.mark.asyncio
    async def test_run_sql(self, pipeline, patched_connector, connection):
        table = await pipeline.run_sql(connection, "SELECT OrderId, CustomerId, Total FROM dbo.Orders")

        assert table[0] == ["OrderId", "CustomerId", "Total"]
        assert len(table) == 3

    @pytest.mark.asyncio
    async def test_writes_allowed_by_default(self, pipeline, patched_connector, connection):
        """Test the read-only gate is off unless enabled."""
        patched_connector.execute.return_value = QueryResult(columns=[], rows=[])

        assert await pipeline.run_sql(connection, "DELETE FROM dbo.Orders") == []

    @pytest.mark.asyncio
    async def test_read_only_rejects_writes(self, mock_llm_provider, patched_connector, connection):
        """Test read-only mode blocks non-SELECT statements before execution."""
        pipeline = DBChatPipeline(mock_llm_provider, read_only=True)

        with pytest.raises(UnsafeQueryError):
            await pipeline.run_sql(connection, "DELETE FROM dbo.Orders")

        patched_connector.execute.assert_not_called()


class TestChat:
    """Test the chat relay entry point."""

    @pytest.mark.asyncio
    async def test_chat(self, pipeline, mock_llm_provider):
        mock_llm_provider.set_response("Use ORDER BY Total DESC.")

        reply = await pipeline.chat([LLMMessage(role="user", content="How do I sort?")])

        assert reply.role == "assistant"
        assert reply.content == "Use ORDER BY Total DESC."

    @pytest.mark.asyncio
    async def test_close(self, pipeline, mock_llm_provider):
        await pipeline.close()

        mock_llm_provider.close.assert_awaited_once()


class TestFromSettings:
    """Test construction from settings."""

    def test_sqlserver_settings(self, monkeypatch, mock_llm_provider):
        monkeypatch.setenv("PIPELINE_MAX_ROWS", "25")
        monkeypatch.setenv("PIPELINE_READ_ONLY", "true")
        monkeypatch.setenv("DATABASE_ODBC_DRIVER", "FreeTDS")

        pipeline = DBChatPipeline.from_settings(Settings(), provider=mock_llm_provider)

        assert pipeline.dialect == "sqlserver"
        assert pipeline.read_only is True
        assert pipeline.generator.max_rows == 25
        assert pipeline.executor.connector_kwargs == {"odbc_driver": "FreeTDS"}

    def test_postgresql_settings(self, monkeypatch, mock_llm_provider):
        monkeypatch.setenv("DATABASE_DIALECT", "postgresql")
        monkeypatch.setenv("DATABASE_QUERY_TIMEOUT", "12")

        pipeline = DBChatPipeline.from_settings(Settings(), provider=mock_llm_provider)

        assert pipeline.dialect == "postgresql"
        assert pipeline.introspector.timeout == 12
        assert pipeline.executor.connector_kwargs == {}

    def test_builds_provider_from_settings(self):
        with patch(
            "dbchat.pipeline.orchestrator.LLMProviderFactory.create_provider",
            return_value=AsyncMock(provider_name="mock"),
        ) as create_provider:
            settings = Settings()
            DBChatPipeline.from_settings(settings)

        create_provider.assert_called_once_with(settings.llm)
