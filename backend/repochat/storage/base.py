"""Abstract vector storage interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Sequence

from ..core.models import EmbeddedDocument, RetrievedPassage


class VectorStore(ABC):
    """Abstract base class for vector storage backends.

    One namespace per repository. Every method is a single remote call and
    implementations do not retry.
    """

    @abstractmethod
    def create_namespace(self, namespace: str, dimension: int, metric: str = "cosine") -> None:
        """Create the namespace if it does not exist yet."""
        pass

    @abstractmethod
    def namespace_exists(self, namespace: str) -> bool:
        pass

    @abstractmethod
    def list_namespaces(self) -> List[str]:
        pass

    @abstractmethod
    def insert(self, namespace: str, documents: Sequence[EmbeddedDocument]) -> None:
        """Insert a batch of documents."""
        pass

    @abstractmethod
    def nearest_neighbors(
        self,
        namespace: str,
        vector: List[float],
        limit: int,
    ) -> List[RetrievedPassage]:
        """Return up to ``limit`` passages ranked by similarity."""
        pass

    @abstractmethod
    def count(self, namespace: str) -> int:
        pass
