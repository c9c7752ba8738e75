from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from typing import Dict, Iterator, List

import requests

from ..errors import ConfigurationError, GenerationFailure

logger = logging.getLogger(__name__)


@dataclass
class LLMConfig:
    api_base: str = "https://router.huggingface.co/v1"
    model: str = "deepseek-ai/DeepSeek-Coder-V2-Lite-Instruct"
    max_tokens: int = 1024
    temperature: float = 0.0
    timeout: int = 60


class HuggingFaceClient:

    def __init__(self, config: LLMConfig | None = None):
        self.config = config or LLMConfig()
        self.api_key = os.getenv("HF_TOKEN")
        if not self.api_key:
            raise ConfigurationError("HF_TOKEN environment variable not set")

        self.headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def stream_chat(self, system_prompt: str, messages: List[Dict[str, str]]) -> Iterator[str]:
        """Yield text deltas from a streaming chat completion.

        Nothing is sent until the first ``next()``. Closing the iterator
        closes the HTTP connection.
        """
        payload_messages = []
        if system_prompt and system_prompt.strip():
            payload_messages.append({"role": "system", "content": system_prompt.strip()})
        payload_messages.extend(messages)

        url = f"{self.config.api_base.rstrip('/')}/chat/completions"
        payload = {
            "model": self.config.model,
            "messages": payload_messages,
            "max_tokens": self.config.max_tokens,
            "temperature": self.config.temperature,
            "stream": True,
        }
        try:
            response = requests.post(
                url,
                headers=self.headers,
                json=payload,
                timeout=self.config.timeout,
                stream=True,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            raise GenerationFailure(f"Chat completion request to {self.config.model} failed: {e}") from e

        with response:
            try:
                # text/event-stream without a charset would be decoded as latin-1
                for raw in response.iter_lines():
                    line = raw.decode("utf-8", errors="replace") if isinstance(raw, bytes) else raw
                    if not line or not line.startswith("data:"):
                        continue
                    data = line[len("data:"):].strip()
                    if data == "[DONE]":
                        return
                    yield from _deltas(data)
            except requests.RequestException as e:
                raise GenerationFailure(f"Chat completion stream interrupted: {e}") from e
        logger.debug("Chat completion stream ended without [DONE]")


def _deltas(data: str) -> Iterator[str]:
    try:
        event = json.loads(data)
    except ValueError as e:
        raise GenerationFailure(f"Malformed stream event: {data[:200]}") from e

    if not isinstance(event, dict):
        raise GenerationFailure(f"Malformed stream event: {data[:200]}")
    if event.get("error"):
        raise GenerationFailure(f"Provider error: {event['error']}")

    choices = event.get("choices") or []
    if not isinstance(choices, list):
        raise GenerationFailure(f"Malformed stream event: {data[:200]}")
    for choice in choices:
        delta = (choice.get("delta") or {}) if isinstance(choice, dict) else None
        if not isinstance(delta, dict):
            raise GenerationFailure(f"Malformed stream event: {data[:200]}")
        content = delta.get("content")
        if content and not isinstance(content, str):
            raise GenerationFailure(f"Malformed stream event: {data[:200]}")
        if content:
            yield content


def create_client(config: LLMConfig | None = None) -> HuggingFaceClient:
    return HuggingFaceClient(config)
