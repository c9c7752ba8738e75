"""Semantic search functionality."""

from __future__ import annotations

from typing import List, Optional

from ..core import Embedder, RetrievedPassage
from ..errors import InvalidInput, NamespaceNotFound
from ..storage import VectorStore
from .base import Searcher


class DefaultSearcher(Searcher):

    def __init__(self, embedder: Embedder, store: VectorStore, min_score: Optional[float] = None):
        self.embedder = embedder
        self.store = store
        self.min_score = min_score

    def search(self, namespace: str, query: str, top_k: int) -> List[RetrievedPassage]:
        if not namespace or not namespace.strip():
            raise InvalidInput("namespace is required")
        if not query or not query.strip():
            raise InvalidInput("question is required")
        if not self.store.namespace_exists(namespace):
            raise NamespaceNotFound(namespace)

        qv = self.embedder.embed_one(query)
        hits = self.store.nearest_neighbors(namespace, qv, top_k)
        if self.min_score is not None:
            hits = [h for h in hits if h.score >= self.min_score]
        return hits


def format_hit(hit: RetrievedPassage, max_chars: int = 1200) -> str:
    snippet = hit.text
    if len(snippet) > max_chars:
        snippet = snippet[:max_chars] + "\n…(truncated)…\n"
    header = f"{hit.score:0.4f}  {hit.source}"
    return header + "\n" + snippet.rstrip() + "\n"
