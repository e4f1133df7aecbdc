"""
Connection Store

Named connection strings consumed by the pipeline. Two backends:

- InMemoryConnectionStore: process lifetime only (tests, local experiments)
- EncryptedFileConnectionStore: JSON file under ~/.dbchat, each connection
  string encrypted with Fernet

Adding a name that already exists replaces the stored connection string.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

from cryptography.fernet import Fernet, InvalidToken

from dbchat.config import ConnectionStoreSettings
from dbchat.models.database import AIConnection
from dbchat.models.errors import ConnectionNotFoundError

logger = logging.getLogger(__name__)


class ConnectionStore(ABC):
    """list/add/delete over named connections."""

    @abstractmethod
    def list_connections(self) -> list[AIConnection]:
        """Return all stored connections, sorted by name."""

    @abstractmethod
    def add_connection(self, connection: AIConnection) -> None:
        """Store a connection, replacing any with the same name."""

    @abstractmethod
    def delete_connection(self, name: str) -> None:
        """
        Remove a connection.

        Raises:
            ConnectionNotFoundError: If no connection has that name
        """

    def get_connection(self, name: str) -> AIConnection:
        """
        Look up one connection by name.

        Raises:
            ConnectionNotFoundError: If no connection has that name
        """
        for connection in self.list_connections():
            if connection.name == name:
                return connection
        raise ConnectionNotFoundError(name)


class InMemoryConnectionStore(ConnectionStore):
    def __init__(self, connections: list[AIConnection] | None = None) -> None:
        self._connections: dict[str, AIConnection] = {}
        for connection in connections or []:
            self.add_connection(connection)

    def list_connections(self) -> list[AIConnection]:
        return [self._connections[name] for name in sorted(self._connections)]

    def add_connection(self, connection: AIConnection) -> None:
        self._connections[connection.name] = connection

    def delete_connection(self, name: str) -> None:
        if name not in self._connections:
            raise ConnectionNotFoundError(name)
        del self._connections[name]


class EncryptedFileConnectionStore(ConnectionStore):
    """
    Connections persisted as {"connections": {name: encrypted_string}}.

    The directory is created with mode 0o700 and the file written with 0o600.
    """

    def __init__(self, path: Path, encryption_key: str | bytes | None) -> None:
        self.path = Path(path).expanduser()
        self._encryption_key = encryption_key
        self._cipher: Fernet | None = None

    def list_connections(self) -> list[AIConnection]:
        encrypted = self._load()
        return [
            AIConnection(name=name, connection_string=self._decrypt(encrypted[name]))
            for name in sorted(encrypted)
        ]

    def add_connection(self, connection: AIConnection) -> None:
        encrypted = self._load()
        encrypted[connection.name] = self._encrypt(connection.get_connection_string())
        self._save(encrypted)
        logger.info(f"Stored connection '{connection.name}'", extra={"path": str(self.path)})

    def delete_connection(self, name: str) -> None:
        encrypted = self._load()
        if name not in encrypted:
            raise ConnectionNotFoundError(name)
        del encrypted[name]
        self._save(encrypted)
        logger.info(f"Deleted connection '{name}'", extra={"path": str(self.path)})

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        with open(self.path, "r", encoding="utf-8") as handle:
            data = json.load(handle)
        return dict(data.get("connections", {}))

    def _save(self, encrypted: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True, mode=0o700)
        # mkstemp creates the file 0o600; os.replace swaps it in atomically.
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump({"connections": encrypted}, handle, indent=2, sort_keys=True)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _encrypt(self, connection_string: str) -> str:
        cipher = self._ensure_cipher()
        return cipher.encrypt(connection_string.encode("utf-8")).decode("utf-8")

    def _decrypt(self, token: str) -> str:
        cipher = self._ensure_cipher()
        try:
            return cipher.decrypt(token.encode("utf-8")).decode("utf-8")
        except InvalidToken as exc:
            raise ValueError(
                f"Failed to decrypt stored connection in {self.path}. "
                "Was CONNECTIONS_ENCRYPTION_KEY changed?"
            ) from exc

    def _ensure_cipher(self) -> Fernet:
        if self._cipher is not None:
            return self._cipher
        if not self._encryption_key:
            raise ValueError(
                "CONNECTIONS_ENCRYPTION_KEY must be set to store encrypted connection strings."
            )
        key = self._encryption_key
        if isinstance(key, str):
            key = key.encode("utf-8")
        try:
            self._cipher = Fernet(key)
        except (ValueError, TypeError) as exc:
            raise ValueError(
                "Invalid CONNECTIONS_ENCRYPTION_KEY. Use a Fernet-compatible base64 key."
            ) from exc
        return self._cipher


def create_connection_store(settings: ConnectionStoreSettings) -> ConnectionStore:
    """Create the configured connection store."""
    if settings.backend == "memory":
        return InMemoryConnectionStore()
    return EncryptedFileConnectionStore(settings.path, settings.encryption_key)


def generate_encryption_key() -> str:
    """New Fernet key for CONNECTIONS_ENCRYPTION_KEY."""
    return Fernet.generate_key().decode("utf-8")
