"""Prompt templates and builders."""

from dbchat.prompts.builder import (
    DIALECT_PROFILES,
    DialectProfile,
    build_messages,
    build_system_prompt,
)
from dbchat.prompts.loader import PromptLoader

__all__ = [
    "DIALECT_PROFILES",
    "DialectProfile",
    "PromptLoader",
    "build_messages",
    "build_system_prompt",
]
