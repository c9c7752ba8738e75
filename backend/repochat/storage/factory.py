"""Factory for creating vector store instances (Qdrant only)."""

from __future__ import annotations

from typing import Dict

from qdrant_client import QdrantClient

from ..errors import ConfigurationError
from .base import VectorStore
from .qdrant import QdrantVectorStore


def make_qdrant_client(cfg: Dict) -> QdrantClient:
    qdrant_cfg = cfg.get("vector_store", {}).get("qdrant", {})
    location = qdrant_cfg.get("location")
    url = qdrant_cfg.get("url")

    if location:
        # ":memory:" or a local path
        return QdrantClient(location=location)
    if url:
        return QdrantClient(url=url, api_key=qdrant_cfg.get("api_key"))
    return QdrantClient(
        host=qdrant_cfg.get("host", "localhost"),
        port=int(qdrant_cfg.get("port", 6333)),
        api_key=qdrant_cfg.get("api_key"),
    )


def make_vector_store(cfg: Dict) -> VectorStore:
    backend = str(cfg.get("vector_store", {}).get("backend", "qdrant")).lower()
    if backend != "qdrant":
        raise ConfigurationError(f"Invalid vector_store.backend: {backend!r}")
    return QdrantVectorStore(make_qdrant_client(cfg))
