"""Qdrant vector database backend."""

from __future__ import annotations

import logging
import uuid
from typing import Dict, List, Optional, Sequence

from qdrant_client import QdrantClient
from qdrant_client.models import Distance, PointStruct, VectorParams

from ..core.models import EmbeddedDocument, RetrievedPassage
from ..errors import StoreFailure
from .base import VectorStore

logger = logging.getLogger(__name__)

METRICS: Dict[str, Distance] = {
    "cosine": Distance.COSINE,
    "dot": Distance.DOT,
    "euclid": Distance.EUCLID,
    "manhattan": Distance.MANHATTAN,
}


def point_id(namespace: str, source: str, ordinal: int) -> str:
    """Stable id, so re-inserting the same chunk overwrites instead of duplicating."""
    return str(uuid.uuid5(uuid.NAMESPACE_URL, f"{namespace}:{source}:{ordinal}"))


class QdrantVectorStore(VectorStore):
    """One Qdrant collection per namespace."""

    def __init__(self, client: QdrantClient):
        self.client = client

    def _get_collection_vector_dim(self, namespace: str) -> Optional[int]:
        info = self.client.get_collection(collection_name=namespace)
        return getattr(info.config.params.vectors, "size", None)

    def create_namespace(self, namespace: str, dimension: int, metric: str = "cosine") -> None:
        distance = METRICS.get(metric.lower())
        if distance is None:
            raise StoreFailure(f"Unsupported similarity metric {metric!r}; expected one of {sorted(METRICS)}")

        try:
            if self.client.collection_exists(collection_name=namespace):
                existing_dim = self._get_collection_vector_dim(namespace)
                if existing_dim is not None and existing_dim != dimension:
                    raise StoreFailure(
                        f"Collection '{namespace}' exists with dimension {existing_dim}, "
                        f"but the embedder produces dimension {dimension}. Delete the collection and re-index."
                    )
                logger.info(f"Collection '{namespace}' already exists")
                return

            self.client.create_collection(
                collection_name=namespace,
                vectors_config=VectorParams(size=dimension, distance=distance),
            )
            logger.info(f"Created collection '{namespace}' (dim={dimension}, metric={metric})")
        except StoreFailure:
            raise
        except Exception as e:
            raise StoreFailure(f"Failed to create collection '{namespace}': {e}") from e

    def namespace_exists(self, namespace: str) -> bool:
        try:
            return bool(self.client.collection_exists(collection_name=namespace))
        except Exception as e:
            raise StoreFailure(f"Failed to look up collection '{namespace}': {e}") from e

    def list_namespaces(self) -> List[str]:
        """List all collections in Qdrant."""
        try:
            collections = self.client.get_collections().collections
        except Exception as e:
            raise StoreFailure(f"Failed to list collections: {e}") from e
        return sorted(c.name for c in collections)

    def insert(self, namespace: str, documents: Sequence[EmbeddedDocument]) -> None:
        if not documents:
            logger.warning("No documents to insert")
            return

        points = [
            PointStruct(
                id=point_id(namespace, doc.source, doc.ordinal),
                vector=list(doc.vector),
                payload={
                    "text": doc.text,
                    "source": doc.source,
                    "ordinal": doc.ordinal,
                },
            )
            for doc in documents
        ]
        try:
            self.client.upsert(collection_name=namespace, points=points, wait=True)
        except Exception as e:
            raise StoreFailure(
                f"Failed to insert {len(points)} documents into '{namespace}': {e}"
            ) from e
        logger.debug(f"Inserted {len(points)} documents into '{namespace}'")

    def nearest_neighbors(self, namespace: str, vector: List[float], limit: int) -> List[RetrievedPassage]:
        """Search using Qdrant's vector search."""
        try:
            results = self.client.query_points(
                collection_name=namespace,
                query=list(vector),
                limit=limit,
                with_payload=True,
                with_vectors=False,
            )
        except Exception as e:
            logger.error(f"Error searching in collection '{namespace}': {e}")
            raise StoreFailure(f"Failed to query collection '{namespace}': {e}") from e

        hits = []
        for point in results.points:
            payload = point.payload or {}
            hits.append(
                RetrievedPassage(
                    source=payload.get("source", ""),
                    text=payload.get("text", ""),
                    score=float(point.score),
                )
            )
        return hits

    def count(self, namespace: str) -> int:
        try:
            return self.client.count(collection_name=namespace, exact=True).count
        except Exception as e:
            raise StoreFailure(f"Failed to count collection '{namespace}': {e}") from e
