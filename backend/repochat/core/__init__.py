"""Core functionality for repochat."""

from .models import (
    Chunk,
    EmbeddedDocument,
    RepositoryReference,
    RetrievedPassage,
    SourceFile,
    derive_namespace,
)
from .chunking import chunk_text, Chunker, DefaultChunker
from .embeddings import (
    Embedder,
    EmbeddingConfig,
    HuggingFaceEmbedder,
    SentenceTransformersEmbedder,
    make_embedder,
)

__all__ = [
    "Chunk",
    "EmbeddedDocument",
    "RepositoryReference",
    "RetrievedPassage",
    "SourceFile",
    "derive_namespace",
    "chunk_text",
    "Chunker",
    "DefaultChunker",
    "Embedder",
    "EmbeddingConfig",
    "HuggingFaceEmbedder",
    "SentenceTransformersEmbedder",
    "make_embedder",
]
