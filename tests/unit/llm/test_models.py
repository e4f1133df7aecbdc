"""
Tests for LLM request/response models.
"""

import pytest
from pydantic import ValidationError

from dbchat.llm.models import LLMMessage, LLMRequest, LLMResponse, LLMUsage


class TestLLMMessage:
    """Test LLMMessage model."""

    def test_all_roles(self):
        """Test all valid roles."""
        for role in ["system", "user", "assistant"]:
            assert LLMMessage(role=role, content="Test").role == role

    def test_invalid_role(self):
        """Test roles outside the chat contract are rejected."""
        with pytest.raises(ValidationError):
            LLMMessage(role="tool", content="Test")

    def test_empty_content_rejected(self):
        """Test empty content is rejected."""
        with pytest.raises(ValidationError):
            LLMMessage(role="user", content="")


class TestLLMRequest:
    """Test LLMRequest model."""

    def test_optional_fields(self):
        """Test overrides default to None so provider defaults apply."""
        request = LLMRequest(messages=[LLMMessage(role="user", content="Test")])

        assert request.temperature is None
        assert request.max_tokens is None
        assert request.model is None
        assert request.options == {}

    def test_empty_messages_rejected(self):
        """Test an empty conversation is rejected."""
        with pytest.raises(ValidationError):
            LLMRequest(messages=[])

    @pytest.mark.parametrize("temperature", [-0.1, 2.1])
    def test_temperature_bounds(self, temperature):
        """Test out-of-range temperatures are rejected."""
        with pytest.raises(ValidationError):
            LLMRequest(
                messages=[LLMMessage(role="user", content="Test")],
                temperature=temperature,
            )

    def test_max_tokens_positive(self):
        """Test max_tokens must be positive."""
        with pytest.raises(ValidationError):
            LLMRequest(messages=[LLMMessage(role="user", content="Test")], max_tokens=0)


class TestLLMResponse:
    """Test LLMResponse model."""

    def test_defaults(self):
        """Test usage and finish reason have defaults."""
        response = LLMResponse(content="Hello!", model="gpt-4o", provider="openai")

        assert response.usage == LLMUsage()
        assert response.finish_reason == "stop"
        assert response.metadata == {}

    def test_invalid_finish_reason(self):
        """Test unknown finish reasons are rejected."""
        with pytest.raises(ValidationError):
            LLMResponse(content="Test", model="test", provider="test", finish_reason="invalid")

    def test_negative_tokens_rejected(self):
        """Test token counts must be non-negative."""
        with pytest.raises(ValidationError):
            LLMUsage(prompt_tokens=-1)

    def test_rejects_error_finish_reason(self):
        """Test failures are raised, never reported as a finish reason."""
        with pytest.raises(ValidationError):
            LLMResponse(content="", model="test", provider="test", finish_reason="error")


class TestWithDefaults:
    """Test filling unset overrides."""

    def test_fills_unset_fields(self):
        request = LLMRequest(messages=[LLMMessage(role="user", content="Test")])

        prepared = request.with_defaults("gpt-4o", 0.0, 2000)

        assert (prepared.model, prepared.temperature, prepared.max_tokens) == ("gpt-4o", 0.0, 2000)
        assert request.model is None

    def test_keeps_explicit_overrides(self):
        request = LLMRequest(
            messages=[LLMMessage(role="user", content="Test")],
            model="gpt-4o-mini",
            temperature=0.0,
            max_tokens=50,
        )

        prepared = request.with_defaults("gpt-4o", 0.7, 2000)

        assert (prepared.model, prepared.temperature, prepared.max_tokens) == ("gpt-4o-mini", 0.0, 50)

    def test_wire_messages(self):
        request = LLMRequest(messages=[LLMMessage(role="system", content="Be brief.")])

        assert request.wire_messages() == [{"role": "system", "content": "Be brief."}]


class TestLLMUsageParse:
    """Test reading usage blocks."""

    def test_none(self):
        assert LLMUsage.parse(None) == LLMUsage()

    def test_mapping(self):
        usage = LLMUsage.parse({"prompt_tokens": 3, "completion_tokens": 2, "total_tokens": 5})

        assert usage.total_tokens == 5

    def test_object_with_missing_fields(self):
        class Usage:
            prompt_tokens = 4
            completion_tokens = None

        usage = LLMUsage.parse(Usage())

        assert (usage.prompt_tokens, usage.completion_tokens, usage.total_tokens) == (4, 0, 0)
