"""Searcher Interface."""

from __future__ import annotations

from typing import List

from ..core.models import RetrievedPassage


class Searcher:
    """Abstract base class for semantic search."""

    def search(self, namespace: str, query: str, top_k: int) -> List[RetrievedPassage]:
        """Search for code chunks semantically similar to query.

        Args:
            namespace: Namespace of an indexed repository
            query: Search query text
            top_k: Number of results to return

        Returns:
            Passages sorted by relevance
        """
        raise NotImplementedError
