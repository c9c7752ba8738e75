"""Indexer Interface."""

from __future__ import annotations

from ..core.models import RepositoryReference


class Indexer:
    """Abstract base class for repository indexing."""

    def index(self, ref: RepositoryReference) -> int:
        """Index ``ref`` into its namespace and return the number of stored documents."""
        raise NotImplementedError
