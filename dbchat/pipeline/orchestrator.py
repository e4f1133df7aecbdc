"""
DBChat Pipeline Orchestrator

Wires the pipeline steps for one request, strictly in order:

    introspect schema -> build prompt -> generate AIQuery -> execute SQL

Each step that touches the database opens and releases its own session.
Nothing is shared between requests except the chat-completion provider.
"""

import logging
from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict, Field

from dbchat.agents.chat import ChatRelay
from dbchat.agents.executor import QueryExecutor
from dbchat.agents.sql import SQLGenerator
from dbchat.agents.validator import ensure_read_only
from dbchat.config import Settings, get_settings
from dbchat.connectors.factory import resolve_dialect
from dbchat.llm.base import BaseLLMProvider
from dbchat.llm.factory import LLMProviderFactory
from dbchat.llm.models import LLMMessage
from dbchat.models.database import AIConnection
from dbchat.models.query import AIQuery
from dbchat.models.schema import DatabaseSchema
from dbchat.prompts.builder import DEFAULT_MAX_ROWS
from dbchat.schema.introspector import SchemaIntrospector

logger = logging.getLogger(__name__)


class PipelineResult(BaseModel):
    """Everything produced for one question."""

    question: str
    schema_: DatabaseSchema = Field(..., alias="schema")
    query: AIQuery
    table: list[list[str]] | None = Field(
        None, description="Result table; None when execution was skipped"
    )

    model_config = ConfigDict(populate_by_name=True)


class DBChatPipeline:
    """
    Natural-language-to-SQL pipeline.

    Usage:
        pipeline = DBChatPipeline.from_settings()
        result = await pipeline.ask(connection, "show me the 5 most expensive orders")
        print(result.query.summary)
        for row in result.table:
            print(row)
    """

    def __init__(
        self,
        provider: BaseLLMProvider,
        dialect: str = "sqlserver",
        max_rows: int = DEFAULT_MAX_ROWS,
        read_only: bool = False,
        query_timeout: int = 30,
        connect_timeout: int = 15,
        **connector_kwargs,
    ):
        self.provider = provider
        self.dialect = resolve_dialect(dialect)
        self.read_only = read_only

        self.introspector = SchemaIntrospector(
            dialect=self.dialect,
            timeout=query_timeout,
            connect_timeout=connect_timeout,
            **connector_kwargs,
        )
        self.generator = SQLGenerator(provider, dialect=self.dialect, max_rows=max_rows)
        self.executor = QueryExecutor(
            dialect=self.dialect,
            timeout=query_timeout,
            connect_timeout=connect_timeout,
            **connector_kwargs,
        )
        self.chat_relay = ChatRelay(provider)

        logger.info(
            "DBChatPipeline initialized",
            extra={"dialect": self.dialect, "max_rows": max_rows, "read_only": read_only},
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        provider: BaseLLMProvider | None = None,
    ) -> "DBChatPipeline":
        """Create a pipeline from application settings."""
        settings = settings or get_settings()
        provider = provider or LLMProviderFactory.create_provider(settings.llm)

        connector_kwargs = {}
        if resolve_dialect(settings.database.dialect) == "sqlserver":
            connector_kwargs["odbc_driver"] = settings.database.odbc_driver

        return cls(
            provider,
            dialect=settings.database.dialect,
            max_rows=settings.pipeline.max_rows,
            read_only=settings.pipeline.read_only,
            query_timeout=settings.database.query_timeout,
            connect_timeout=settings.database.connect_timeout,
            **connector_kwargs,
        )

    async def get_schema(self, connection: AIConnection) -> DatabaseSchema:
        return await self.introspector.generate_schema(connection)

    async def ask(
        self,
        connection: AIConnection,
        question: str,
        execute: bool = True,
    ) -> PipelineResult:
        """
        Answer a question end to end.

        Raises:
            ConnectionError / SchemaQueryError: From introspection
            GenerationParseError: If the model broke the JSON contract
            LLMError: If the model call failed
            UnsafeQueryError: If read-only mode rejected the generated SQL
            QueryExecutionError: If the generated SQL failed
        """
        schema = await self.introspector.generate_schema(connection)
        query = await self.generator.generate_query(question, schema)

        table = None
        if execute:
            table = await self.run_sql(connection, query.query)

        return PipelineResult(question=question, schema=schema, query=query, table=table)

    async def run_sql(self, connection: AIConnection, sql: str) -> list[list[str]]:
        """Execute generated or user-edited SQL."""
        if self.read_only:
            ensure_read_only(sql)
        return await self.executor.execute_query(connection, sql)

    async def chat(self, history: Sequence[LLMMessage]) -> LLMMessage:
        """Free-form follow-up over an existing conversation."""
        return await self.chat_relay.relay(history)

    async def close(self) -> None:
        await self.provider.close()
