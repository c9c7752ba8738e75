"""Prompt building for repochat."""

from .base import PromptBuilder
from .builder import (
    REFUSAL_SENTENCE,
    SYSTEM_PROMPT,
    build_context,
    build_messages,
    count_tokens,
    format_context_item,
)

__all__ = [
    "PromptBuilder",
    "REFUSAL_SENTENCE",
    "SYSTEM_PROMPT",
    "build_context",
    "build_messages",
    "count_tokens",
    "format_context_item",
]
