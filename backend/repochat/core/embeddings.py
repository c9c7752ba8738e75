"""Embedding models for semantic search."""

from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass
from typing import Dict, List

import requests

from ..errors import ConfigurationError, EmbeddingFailure

logger = logging.getLogger(__name__)

_RETRYABLE_STATUS = {429, 502, 503, 504}


class Embedder:
    """Abstract base class for embedding models."""

    dimension: int

    def embed_one(self, text: str) -> List[float]:
        """Embed a single text into a vector."""
        raise NotImplementedError

    def embed(self, texts: List[str]) -> List[List[float]]:
        """Embed multiple texts into vectors."""
        return [self.embed_one(t) for t in texts]


@dataclass
class EmbeddingConfig:
    api_base: str = "https://router.huggingface.co/hf-inference/models"
    model: str = "BAAI/bge-small-en-v1.5"
    dimension: int = 384
    timeout: int = 30
    max_retries: int = 0
    retry_backoff: float = 2.0


def _as_vector(data) -> List[float]:
    """Flatten a feature-extraction payload into one vector.

    Sentence models return ``[float, ...]``; some return ``[[float, ...]]``
    and token-level models return one row per token, which is mean-pooled.
    """
    if isinstance(data, list) and data and isinstance(data[0], list):
        if data[0] and isinstance(data[0][0], list):
            data = data[0]
        if len(data) == 1:
            data = data[0]
        else:
            width = len(data[0])
            data = [sum(row[i] for row in data) / len(data) for i in range(width)]
    if not isinstance(data, list) or not data:
        raise EmbeddingFailure(f"Unexpected embedding payload: {str(data)[:200]}")
    return [float(x) for x in data]


class HuggingFaceEmbedder(Embedder):
    """Embedder backed by the Hugging Face Inference feature-extraction pipeline."""

    def __init__(self, config: EmbeddingConfig | None = None):
        self.config = config or EmbeddingConfig()
        self.dimension = self.config.dimension
        self.api_key = os.getenv("HF_TOKEN")
        if not self.api_key:
            raise ConfigurationError("HF_TOKEN environment variable not set")

        self.headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        self.url = f"{self.config.api_base.rstrip('/')}/{self.config.model}/pipeline/feature-extraction"

    def _post(self, text: str) -> requests.Response:
        attempt = 0
        while True:
            try:
                response = requests.post(
                    self.url,
                    headers=self.headers,
                    json={"inputs": text},
                    timeout=self.config.timeout,
                )
            except requests.RequestException as e:
                raise EmbeddingFailure(f"Embedding request to {self.config.model} failed: {e}") from e

            if response.status_code in _RETRYABLE_STATUS and attempt < self.config.max_retries:
                attempt += 1
                delay = self.config.retry_backoff * attempt
                logger.warning(
                    f"Embedding provider returned {response.status_code}, "
                    f"retry {attempt}/{self.config.max_retries} in {delay:.1f}s"
                )
                time.sleep(delay)
                continue
            return response

    def embed_one(self, text: str) -> List[float]:
        response = self._post(text)
        if response.status_code >= 400:
            raise EmbeddingFailure(
                f"Embedding provider returned {response.status_code}: {response.text[:200]}"
            )
        try:
            data = response.json()
        except ValueError as e:
            raise EmbeddingFailure("Embedding provider returned invalid JSON") from e

        vector = _as_vector(data)
        if len(vector) != self.dimension:
            raise EmbeddingFailure(
                f"Model {self.config.model} returned {len(vector)} dimensions, expected {self.dimension}"
            )
        return vector


class SentenceTransformersEmbedder(Embedder):
    """Embedder using SentenceTransformers library."""

    def __init__(self, model_name: str) -> None:
        from sentence_transformers import SentenceTransformer  # type: ignore
        self.model_name = model_name
        self.model = SentenceTransformer(model_name)
        self.dimension = int(self.model.get_sentence_embedding_dimension())

    def embed(self, texts: List[str]) -> List[List[float]]:
        """Embed texts using SentenceTransformers model."""
        try:
            arr = self.model.encode(texts, normalize_embeddings=True, show_progress_bar=False)
        except Exception as e:
            raise EmbeddingFailure(f"Local embedding with {self.model_name} failed: {e}") from e
        return [row.tolist() for row in arr]

    def embed_one(self, text: str) -> List[float]:
        return self.embed([text])[0]


def make_embedder(cfg: Dict) -> Embedder:
    """Create embedder from config.

    Raises:
        ConfigurationError: If backend is invalid or dependencies are missing
    """
    emb_cfg = cfg.get("embedding", {})
    backend = str(emb_cfg.get("backend", "huggingface")).strip().lower()

    if backend == "huggingface":
        return HuggingFaceEmbedder(
            EmbeddingConfig(
                api_base=emb_cfg.get("api_base", EmbeddingConfig.api_base),
                model=emb_cfg.get("model", EmbeddingConfig.model),
                dimension=int(emb_cfg.get("dimension", EmbeddingConfig.dimension)),
                timeout=int(emb_cfg.get("timeout", EmbeddingConfig.timeout)),
                max_retries=int(emb_cfg.get("max_retries", 0)),
                retry_backoff=float(emb_cfg.get("retry_backoff", EmbeddingConfig.retry_backoff)),
            )
        )

    if backend == "sentence_transformers":
        model_name = emb_cfg.get("sentence_transformers_model", "sentence-transformers/all-MiniLM-L6-v2")
        try:
            return SentenceTransformersEmbedder(model_name)
        except ImportError as e:
            raise ConfigurationError(
                "sentence-transformers is not installed. "
                "Run: pip install 'repochat[local]'"
            ) from e

    raise ConfigurationError(f"Invalid embedding.backend: {backend!r}")
