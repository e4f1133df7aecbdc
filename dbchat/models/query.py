"""
Query Generation Models

AIQuery is the typed form of the model's structured response:
a single-line JSON object with exactly two string keys.

    {"summary": "...", "query": "..."}

Generation returns an explicit result rather than raising on malformed
output, since a bad model response is an expected outcome.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from pydantic import BaseModel, ConfigDict, Field

from dbchat.models.errors import GenerationParseError


class AIQuery(BaseModel):
    """SQL statement plus explanation produced by the model."""

    summary: str = Field(..., description="Explanation of how the query was built")
    query: str = Field(..., description="SQL statement text")

    model_config = ConfigDict(strict=True, extra="forbid", frozen=True)


@dataclass(frozen=True)
class QueryGenerated:
    """Successful generation."""

    query: AIQuery

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> AIQuery:
        return self.query


@dataclass(frozen=True)
class ParseFailure:
    """Model output that does not match the JSON contract."""

    raw_response: str
    reason: str = ""

    @property
    def ok(self) -> bool:
        return False

    def unwrap(self) -> AIQuery:
        raise GenerationParseError(self.raw_response, reason=self.reason)


GenerationResult = Union[QueryGenerated, ParseFailure]
