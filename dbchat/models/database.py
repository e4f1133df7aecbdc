"""
Database connection models.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, SecretStr


class AIConnection(BaseModel):
    """Named database connection supplied by the connection store."""

    name: str = Field(..., min_length=1, description="Unique, user-chosen identifier")
    connection_string: SecretStr = Field(
        ..., description="Opaque connection string passed straight to the driver"
    )

    model_config = ConfigDict(frozen=True)

    def get_connection_string(self) -> str:
        """Return the raw connection string for the database driver."""
        return self.connection_string.get_secret_value()
