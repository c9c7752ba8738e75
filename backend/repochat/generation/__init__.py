"""Chat-completion clients."""

from .llm_client import HuggingFaceClient, LLMConfig, create_client

__all__ = [
    "HuggingFaceClient",
    "LLMConfig",
    "create_client",
]
