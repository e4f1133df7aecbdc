"""
DBChat Configuration

Every setting comes from the environment (or a .env file), grouped by
prefix:

    LLM_*          chat-completion backend
    DATABASE_*     target dialect and timeouts
    PIPELINE_*     prompt policy and the read-only gate
    CONNECTIONS_*  where named connection strings are stored
    LOG_*          logging

Usage:
    from dbchat.config import get_settings

    settings = get_settings()
    settings.llm.model_name        # "gpt-4o"
    settings.pipeline.max_rows     # 100
"""

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from rich.logging import RichHandler

PROJECT_ROOT = Path(__file__).resolve().parents[1]


class LLMSettings(BaseSettings):
    """Which chat-completion backend generates SQL, and how it is called."""

    provider: Literal["openai", "azure", "local"] = Field(
        default="openai",
        description="openai (api.openai.com), azure (Azure OpenAI) or local (OpenAI-compatible server)",
    )

    openai_api_key: str | None = Field(None, min_length=20, description="api.openai.com key")
    openai_model: str = Field(default="gpt-4o", description="Model used for SQL generation and chat")

    azure_endpoint: str | None = Field(None, description="https://<resource>.openai.azure.com")
    azure_api_key: str | None = Field(None, description="Azure OpenAI resource key")
    azure_api_version: str = Field(default="2024-06-01", description="Azure OpenAI REST API version")
    azure_deployment: str = Field(default="gpt-4o", description="Deployment that serves the requests")

    local_base_url: str = Field(
        default="http://localhost:11434",
        description="Root URL of a server exposing /v1/chat/completions",
    )
    local_model: str = Field(default="llama3.1:8b", description="Model name understood by the local server")

    temperature: float = Field(default=0.0, ge=0.0, le=2.0, description="0.0 keeps generated SQL stable")
    max_tokens: int = Field(default=2000, gt=0, le=16000, description="Completion length cap")
    timeout: int = Field(default=60, gt=0, description="Seconds before a call is abandoned")

    model_config = SettingsConfigDict(env_prefix="LLM_", env_file=".env", extra="ignore")

    @field_validator("openai_api_key")
    @classmethod
    def validate_openai_key(cls, v: str | None) -> str | None:
        if v and not v.startswith("sk-"):
            raise ValueError("OpenAI API key must start with 'sk-'")
        return v

    @model_validator(mode="after")
    def validate_provider_credentials(self) -> "LLMSettings":
        """Fail at startup, not on the first question, when credentials are missing."""
        if self.provider == "openai" and not self.openai_api_key:
            raise ValueError("API key required for openai provider. Set LLM_OPENAI_API_KEY")
        if self.provider == "azure":
            if not self.azure_endpoint:
                raise ValueError("Azure endpoint required. Set LLM_AZURE_ENDPOINT")
            if not self.azure_api_key:
                raise ValueError("API key required for azure provider. Set LLM_AZURE_API_KEY")
        return self

    @property
    def model_name(self) -> str:
        return {
            "openai": self.openai_model,
            "azure": self.azure_deployment,
            "local": self.local_model,
        }[self.provider]


class DatabaseSettings(BaseSettings):
    """Dialect and timeouts for the databases behind stored connections."""

    dialect: Literal["sqlserver", "postgresql"] = Field(
        default="sqlserver",
        description="Selects the catalog query, the driver and the dialect named in the prompt",
    )
    query_timeout: int = Field(default=30, gt=0, description="Statement timeout (seconds)")
    connect_timeout: int = Field(default=15, gt=0, description="Session open timeout (seconds)")
    odbc_driver: str = Field(
        default="ODBC Driver 18 for SQL Server",
        description="Prepended as DRIVER={...} when a SQL Server connection string names none",
    )

    model_config = SettingsConfigDict(env_prefix="DATABASE_", env_file=".env", extra="ignore")


class PipelineSettings(BaseSettings):
    """Prompt policy and what may be executed."""

    max_rows: int = Field(
        default=100,
        gt=0,
        le=100000,
        description="Row limit the model is told to put on every query",
    )
    read_only: bool = Field(
        default=False,
        description="Refuse to execute anything but a single SELECT",
    )

    model_config = SettingsConfigDict(env_prefix="PIPELINE_", env_file=".env", extra="ignore")


class ConnectionStoreSettings(BaseSettings):
    """Where named connection strings are kept."""

    backend: Literal["memory", "file"] = Field(
        default="file",
        description="memory: process lifetime only; file: encrypted JSON file",
    )
    path: Path = Field(
        default=Path.home() / ".dbchat" / "connections.json",
        description="Connection file for the file backend",
    )
    encryption_key: str | None = Field(
        default=None,
        description="Fernet key (dbchat connections keygen) that encrypts stored strings",
    )

    model_config = SettingsConfigDict(env_prefix="CONNECTIONS_", env_file=".env", extra="ignore")


class LoggingSettings(BaseSettings):
    """Log level and destinations."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")
    format: str = Field(default="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    date_format: str = Field(default="%Y-%m-%d %H:%M:%S")
    file: Path | None = Field(default=None, description="Also write logs here when set")
    rich: bool = Field(default=False, description="Pretty console output via rich")

    model_config = SettingsConfigDict(env_prefix="LOG_", env_file=".env", extra="ignore")

    def configure(self) -> None:
        """Install root handlers (replacing any existing ones)."""
        console: logging.Handler = RichHandler(show_path=False) if self.rich else logging.StreamHandler()
        handlers = [console]

        if self.file:
            self.file.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(self.file))

        logging.basicConfig(
            level=getattr(logging, self.level),
            format=self.format,
            datefmt=self.date_format,
            handlers=handlers,
            force=True,
        )


class Settings(BaseSettings):
    """
    All DBChat settings.

    Example:
        >>> settings = Settings()
        >>> settings.database.dialect
        'sqlserver'
        >>> settings.pipeline.max_rows
        100
    """

    environment: Literal["development", "staging", "production"] = Field(default="development")
    app_name: str = Field(default="DBChat")
    debug: bool = Field(default=False)

    llm: LLMSettings = Field(default_factory=LLMSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    pipeline: PipelineSettings = Field(default_factory=PipelineSettings)
    connections: ConnectionStoreSettings = Field(default_factory=ConnectionStoreSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @model_validator(mode="after")
    def configure_logging(self) -> "Settings":
        self.logging.configure()
        return self

    def model_post_init(self, __context) -> None:
        logging.getLogger(__name__).info(
            f"{self.app_name} configured for {self.environment}: "
            f"{self.llm.provider}/{self.llm.model_name} against {self.database.dialect}",
            extra={
                "environment": self.environment,
                "llm_provider": self.llm.provider,
                "dialect": self.database.dialect,
                "max_rows": self.pipeline.max_rows,
                "read_only": self.pipeline.read_only,
            },
        )


def _load_project_dotenv() -> None:
    # DBCHAT_ENV_SOURCE=environment keeps the process environment authoritative.
    source = os.getenv("DBCHAT_ENV_SOURCE", "dotenv").lower()
    dotenv_path = PROJECT_ROOT / ".env"
    if source in {"dotenv", "envfile", "file"} and dotenv_path.exists():
        load_dotenv(dotenv_path, override=True)


@lru_cache
def get_settings() -> Settings:
    """Settings singleton; the project .env is applied on first use."""
    _load_project_dotenv()
    return Settings()


def clear_settings_cache() -> None:
    """Force the next get_settings() to re-read the environment."""
    get_settings.cache_clear()
