"""Character-window chunking for source files.

The unit is the character. A file of length ``L`` split with window ``C`` and
overlap ``O`` produces ``ceil(max(L - O, 1) / (C - O))`` chunks: windows start
every ``C - O`` characters, every window but the last is exactly ``C`` long,
and neighbouring windows share ``O`` characters.
"""

from __future__ import annotations

import logging
from typing import List

from ..errors import ConfigurationError
from .models import Chunk

logger = logging.getLogger(__name__)


def _validate(chunk_size: int, overlap: int) -> None:
    if chunk_size <= 0:
        raise ConfigurationError(f"chunk_size must be positive, got {chunk_size}")
    if overlap < 0:
        raise ConfigurationError(f"overlap must not be negative, got {overlap}")
    if overlap >= chunk_size:
        raise ConfigurationError(
            f"overlap ({overlap}) must be smaller than chunk_size ({chunk_size})"
        )


# -----------------------------------------------------------------------------
# Interfaces
# -----------------------------------------------------------------------------

class Chunker:
    """Abstract base class for text chunking."""

    def chunk(self, content: str, path: str) -> List[Chunk]:
        raise NotImplementedError


class DefaultChunker(Chunker):
    """Fixed-size character windows with overlap."""

    def __init__(self, chunk_size: int = 1500, overlap: int = 200):
        _validate(chunk_size, overlap)
        self.chunk_size = chunk_size
        self.overlap = overlap

    def chunk(self, content: str, path: str) -> List[Chunk]:
        if not content:
            return []

        step = self.chunk_size - self.overlap
        chunks: List[Chunk] = []
        start = 0
        while True:
            chunks.append(
                Chunk(path=path, content=content[start:start + self.chunk_size], ordinal=len(chunks))
            )
            if start + self.chunk_size >= len(content):
                break
            start += step

        logger.debug(f"File {path}: {len(content)} chars, {len(chunks)} chunks")
        return chunks


def chunk_text(content: str, path: str, chunk_size: int, overlap: int) -> List[Chunk]:
    """Split ``content`` into overlapping character windows (functional wrapper)."""
    chunker = DefaultChunker(chunk_size=chunk_size, overlap=overlap)
    return chunker.chunk(content, path)
