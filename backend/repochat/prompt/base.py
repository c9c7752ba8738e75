"""PromptBuilder Interface."""

from __future__ import annotations

from typing import Dict, List

from ..core.models import RetrievedPassage
from . import builder


class PromptBuilder:
    """Turns retrieved passages and a question into chat messages."""

    system_prompt: str = builder.SYSTEM_PROMPT
    refusal: str = builder.REFUSAL_SENTENCE

    def __init__(self, max_context_tokens: int = 6000):
        self.max_context_tokens = max_context_tokens

    def build(self, question: str, passages: List[RetrievedPassage]) -> List[Dict[str, str]]:
        """Build the message list.

        Args:
            question: The user's question
            passages: Retrieved passages in ranked order

        Returns:
            OpenAI-style message list (system prompt excluded)
        """
        context = builder.build_context(passages, self.max_context_tokens)
        return builder.build_messages(question, context)
