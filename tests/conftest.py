"""
Shared fixtures for the DBChat test suite.

Unit tests never touch a real database or model endpoint: connectors and
providers are AsyncMocks. Tests marked ``integration`` need a live
database and only run with --run-integration.
"""

import logging
from unittest.mock import AsyncMock

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="Also run tests that need a live database (see tests/integration)",
    )


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "integration: needs a live database; enabled with --run-integration"
    )


def pytest_collection_modifyitems(config, items):
    if config.getoption("--run-integration"):
        return
    skip = pytest.mark.skip(reason="needs --run-integration")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip)


# ============================================================================
# Logging and settings
# ============================================================================


@pytest.fixture(autouse=True)
def capture_debug_logs(caplog):
    caplog.set_level(logging.DEBUG)
    yield


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """
    Give every test a valid OpenAI key and a fresh settings cache.

    The project .env is ignored so a developer's local configuration
    cannot leak into assertions.
    """
    from dbchat.config import clear_settings_cache

    clear_settings_cache()
    monkeypatch.setenv("DBCHAT_ENV_SOURCE", "environment")
    for name in ("LLM_PROVIDER", "DATABASE_DIALECT", "PIPELINE_MAX_ROWS", "PIPELINE_READ_ONLY"):
        monkeypatch.delenv(name, raising=False)

    key = "sk-test-dbchat-0000000000000000"
    monkeypatch.setenv("LLM_OPENAI_API_KEY", key)
    yield key

    clear_settings_cache()


# ============================================================================
# Doubles
# ============================================================================


@pytest.fixture
def mock_llm_provider():
    """
    Provider double whose generate() returns a canned completion.

    Usage:
        mock_llm_provider.set_response('{"summary": "s", "query": "SELECT 1"}')
        await generator.try_generate("question", schema)
        mock_llm_provider.last_request.messages
    """
    from dbchat.llm.models import LLMResponse, LLMUsage

    class ProviderDouble:
        provider_name = "mock"
        model = "mock-model"

        def __init__(self):
            self.generate = AsyncMock()
            self.close = AsyncMock()

        def set_response(self, content: str) -> None:
            self.generate.return_value = LLMResponse(
                content=content,
                model=self.model,
                provider=self.provider_name,
                usage=LLMUsage(prompt_tokens=120, completion_tokens=30, total_tokens=150),
            )

        @property
        def last_request(self):
            return self.generate.call_args.args[0]

    return ProviderDouble()


@pytest.fixture
def mock_connector():
    """Connector double usable in ``async with``; it yields itself."""
    connector = AsyncMock()
    connector.__aenter__.return_value = connector
    connector.__aexit__.return_value = False
    return connector


# ============================================================================
# Sample data
# ============================================================================


@pytest.fixture
def orders_schema():
    """One table: dbo.Orders (OrderId, CustomerId, Total)."""
    from dbchat.models.schema import DatabaseSchema

    return DatabaseSchema.from_catalog_rows(
        [
            ("dbo.Orders", "OrderId"),
            ("dbo.Orders", "CustomerId"),
            ("dbo.Orders", "Total"),
        ]
    )
