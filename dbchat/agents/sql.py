"""
SQL Generator

Turns a natural-language question into an AIQuery with one chat-completion
call. The model is held to a single-line JSON contract:

    {"summary": "...", "query": "..."}

Code fences and literal "\\n" tokens are stripped before strict parsing.
Nothing else about the SQL is checked here: validity, read-only-ness and the
row cap are left to the prompt contract.
"""

import logging
import re

from pydantic import ValidationError

from dbchat.llm.base import BaseLLMProvider
from dbchat.llm.models import LLMRequest
from dbchat.models.errors import LLMError
from dbchat.models.query import AIQuery, GenerationResult, ParseFailure, QueryGenerated
from dbchat.models.schema import DatabaseSchema
from dbchat.prompts.builder import DEFAULT_MAX_ROWS, build_messages

logger = logging.getLogger(__name__)

# ```json, ```sql, ``` ...
_CODE_FENCE = re.compile(r"```[A-Za-z0-9_+-]*")
_ESCAPED_NEWLINE = "\\n"


def clean_response_text(raw: str) -> str:
    """Strip code-fence markers and literal escaped-newline tokens."""
    text = _CODE_FENCE.sub("", raw)
    text = text.replace(_ESCAPED_NEWLINE, "")
    return text.strip()


def parse_ai_query(raw: str) -> GenerationResult:
    """
    Parse a raw model response into an AIQuery.

    Returns ParseFailure (carrying the untouched raw text) when the cleaned
    text is not a JSON object with exactly the string keys summary and query.
    """
    try:
        query = AIQuery.model_validate_json(clean_response_text(raw))
    except ValidationError as e:
        reasons = "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or 'response'}: {error['msg']}"
            for error in e.errors()
        )
        return ParseFailure(raw_response=raw, reason=reasons)
    return QueryGenerated(query=query)


class SQLGenerator:
    """
    Natural-language-to-SQL generation against one chat-completion provider.

    Attributes:
        provider: Chat-completion backend
        dialect: Target SQL dialect named in the prompt
        max_rows: Row cap the prompt instructs the model to apply
    """

    def __init__(
        self,
        provider: BaseLLMProvider,
        dialect: str = "sqlserver",
        max_rows: int = DEFAULT_MAX_ROWS,
    ):
        self.provider = provider
        self.dialect = dialect
        self.max_rows = max_rows

    async def try_generate(self, user_prompt: str, schema: DatabaseSchema) -> GenerationResult:
        """
        Generate a query and report parse problems as a value.

        Raises:
            ValueError: If the question is blank
            LLMError: If the chat-completion call itself fails
        """
        if not user_prompt or not user_prompt.strip():
            raise ValueError("Question must not be empty")

        messages = build_messages(schema, user_prompt, self.dialect, self.max_rows)
        request = LLMRequest(messages=messages)

        try:
            response = await self.provider.generate(request)
        except Exception as e:
            logger.error(f"SQL generation call failed: {e}")
            raise LLMError(
                f"Chat completion failed: {e}",
                context={"provider": self.provider.provider_name},
            ) from e

        result = parse_ai_query(response.content)
        if isinstance(result, ParseFailure):
            logger.warning(
                "Model response did not match the JSON contract",
                extra={"reason": result.reason, "model": response.model},
            )
            logger.debug(f"Raw model response: {result.raw_response}")
        else:
            logger.info(
                "Generated SQL query",
                extra={
                    "model": response.model,
                    "tables_in_schema": schema.table_count,
                    "total_tokens": response.usage.total_tokens,
                },
            )
        return result

    async def generate_query(self, user_prompt: str, schema: DatabaseSchema) -> AIQuery:
        """
        Generate a query.

        Raises:
            GenerationParseError: If the response is not the contracted JSON shape
            LLMError: If the chat-completion call itself fails
        """
        result = await self.try_generate(user_prompt, schema)
        return result.unwrap()
