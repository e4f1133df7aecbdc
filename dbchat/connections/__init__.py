"""Named connection storage."""

from dbchat.connections.store import (
    ConnectionStore,
    EncryptedFileConnectionStore,
    InMemoryConnectionStore,
    create_connection_store,
    generate_encryption_key,
)

__all__ = [
    "ConnectionStore",
    "InMemoryConnectionStore",
    "EncryptedFileConnectionStore",
    "create_connection_store",
    "generate_encryption_key",
]
