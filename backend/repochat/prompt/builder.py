"""Context assembly and prompt text for answer generation."""

from __future__ import annotations

from typing import Callable, Dict, List

from ..core.models import RetrievedPassage


# ----------------------------
# Token estimation
# ----------------------------

def _get_token_counter() -> Callable[[str], int]:
    """
    Return a token counting function.
    - Use tiktoken's cl100k_base encoding.
    - Fall back to a character heuristic when the encoding cannot be loaded
      (it is downloaded on first use).
    """
    try:
        import tiktoken

        encoding = tiktoken.get_encoding("cl100k_base")

        def count_tokens(text: str) -> int:
            return len(encoding.encode(text))

        return count_tokens
    except Exception:
        # ~3.5 chars/token, slightly conservative for code
        def count_tokens(text: str) -> int:
            return max(1, int(len(text) / 3.5))

        return count_tokens


_COUNTER: Callable[[str], int] | None = None


def count_tokens(text: str) -> int:
    global _COUNTER
    if _COUNTER is None:
        _COUNTER = _get_token_counter()
    return _COUNTER(text)


# ----------------------------
# Prompt building
# ----------------------------

REFUSAL_SENTENCE = "I could not find the answer to that question in this repository."

SYSTEM_PROMPT = (
    "You are an expert software engineer answering questions about a source code repository.\n"
    "Answer ONLY from the code context supplied in the user message. Every context passage "
    "starts with the path of the file it came from; cite those paths when you use a passage.\n"
    "Do not invent files, functions, or APIs that are not in the context.\n"
    "If the context does not contain enough information to answer, reply with exactly this "
    f"sentence and nothing else:\n{REFUSAL_SENTENCE}"
)


def format_context_item(passage: RetrievedPassage) -> str:
    return f"\n### {passage.source}\n```\n{passage.text.rstrip()}\n```\n"


def build_context(passages: List[RetrievedPassage], max_tokens: int = 6000) -> str:
    """Concatenate passages in ranked order until the token budget is reached.

    The first passage is always included; if it alone exceeds the budget it
    is cut to fit.
    """
    parts: List[str] = []
    used = 0
    for passage in passages:
        item = format_context_item(passage)
        item_tokens = count_tokens(item)
        if used + item_tokens > max_tokens:
            if not parts:
                # ~3.5 chars/token
                parts.append(item[: int(max_tokens * 3.5)])
            break
        parts.append(item)
        used += item_tokens
    return "".join(parts).strip()


def build_messages(question: str, context: str) -> List[Dict[str, str]]:
    user_message = (
        "# Context\n"
        f"{context}\n\n"
        "# Question\n"
        f"{question.strip()}"
    )
    return [{"role": "user", "content": user_message}]
