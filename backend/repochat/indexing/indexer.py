"""Repository ingestion: clone, chunk, embed in batches, store."""

from __future__ import annotations

import dataclasses
import logging
from concurrent.futures import Executor, ThreadPoolExecutor, wait
from typing import Dict, List, Optional

from ..core import Chunk, DefaultChunker, EmbeddedDocument, Embedder, RepositoryReference, SourceFile
from ..errors import EmbeddingFailure, RepoChatError
from ..storage import VectorStore
from ..utils import sanitise_url
from .base import Indexer
from .materializer import RepositoryMaterializer
from .progress import JobTracker

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class Submission:
    """Synchronous answer to an ingestion request.

    ``status`` is ``"exists"`` when the namespace is already there and
    ``"accepted"`` when a job is (or already was) scheduled. ``new_job`` tells
    the caller whether it has to launch :meth:`RepositoryIndexer.run`.
    """

    reference: RepositoryReference
    status: str
    new_job: bool = False

    @property
    def namespace(self) -> str:
        return self.reference.namespace


class RepositoryIndexer(Indexer):

    def __init__(
        self,
        embedder: Embedder,
        store: VectorStore,
        cfg: Dict,
        tracker: Optional[JobTracker] = None,
        materializer: Optional[RepositoryMaterializer] = None,
    ):
        self.embedder = embedder
        self.store = store
        self.cfg = cfg
        self.tracker = tracker or JobTracker()
        self.materializer = materializer or RepositoryMaterializer(cfg)
        self.chunker = DefaultChunker(
            chunk_size=int(cfg.get("chunk_size", 1500)),
            overlap=int(cfg.get("chunk_overlap", 200)),
        )
        self.batch_size = int(cfg.get("ingest", {}).get("batch_size", 20))
        self.metric = cfg.get("vector_store", {}).get("metric", "cosine")

    def submit(self, repo_url: Optional[str]) -> Submission:
        """Validate ``repo_url`` and decide whether a job is needed.

        Raises:
            InvalidInput: malformed URL
            StoreFailure: the namespace lookup failed
        """
        ref = RepositoryReference.parse(repo_url)
        namespace = ref.namespace

        if self.tracker.is_active(namespace):
            logger.info(f"Indexing for '{namespace}' is already in progress")
            return Submission(ref, "accepted", new_job=False)

        if self.store.namespace_exists(namespace):
            logger.info(f"Namespace '{namespace}' already exists, nothing to do")
            return Submission(ref, "exists")

        new_job = self.tracker.start(namespace, ref.url)
        return Submission(ref, "accepted", new_job=new_job)

    def _chunk_files(self, files: List[SourceFile]) -> List[Chunk]:
        chunks: List[Chunk] = []
        for f in files:
            chunks.extend(self.chunker.chunk(f.content, f.path))
        return chunks

    def _embed_batch(self, pool: Executor, batch: List[Chunk]) -> List[EmbeddedDocument]:
        """Embed every chunk of ``batch`` concurrently. Any failure fails the whole batch."""
        futures = [pool.submit(self.embedder.embed_one, c.content) for c in batch]
        wait(futures)

        failures = [(c, f.exception()) for c, f in zip(batch, futures) if f.exception() is not None]
        if failures:
            chunk, exc = failures[0]
            raise EmbeddingFailure(
                f"{len(failures)}/{len(batch)} embeddings failed in batch "
                f"(first: {chunk.path}#{chunk.ordinal}: {exc})"
            ) from exc

        return [
            EmbeddedDocument(text=c.content, source=c.path, vector=f.result(), ordinal=c.ordinal)
            for c, f in zip(batch, futures)
        ]

    def index(self, ref: RepositoryReference) -> int:
        namespace = ref.namespace
        self.store.create_namespace(namespace, self.embedder.dimension, self.metric)

        self.tracker.update(namespace, status="cloning")
        with self.materializer.materialize(ref) as files:
            chunks = self._chunk_files(files)
        self.tracker.update(namespace, total_files=len(files), total_chunks=len(chunks))

        if not chunks:
            logger.info(f"No indexable files found in {sanitise_url(ref.url)}. Aborting.")
            return 0

        batches = [chunks[i:i + self.batch_size] for i in range(0, len(chunks), self.batch_size)]
        logger.info(
            f"Embedding {len(chunks)} chunks from {len(files)} files "
            f"in {len(batches)} batches into '{namespace}'"
        )
        self.tracker.update(namespace, status="embedding")

        stored = 0
        with ThreadPoolExecutor(max_workers=self.batch_size, thread_name_prefix="embed") as pool:
            for batch_num, batch in enumerate(batches, start=1):
                documents = self._embed_batch(pool, batch)
                self.store.insert(namespace, documents)
                stored += len(documents)
                self.tracker.update(namespace, embedded_chunks=stored)
                logger.debug(f"Stored batch {batch_num}/{len(batches)} for '{namespace}'")

        logger.info(f"Successfully indexed {stored} chunks from {sanitise_url(ref.url)}")
        return stored

    def run(self, ref: RepositoryReference) -> None:
        """Background entry point. Failures are logged and recorded, never raised."""
        namespace = ref.namespace
        if not self.tracker.is_active(namespace):
            self.tracker.start(namespace, ref.url)

        logger.info(f"[BACKGROUND] Starting processing for {sanitise_url(ref.url)}")
        try:
            stored = self.index(ref)
        except RepoChatError as e:
            logger.error(f"[BACKGROUND] Error processing {sanitise_url(ref.url)}: {e}")
            self.tracker.fail(namespace, str(e))
        except Exception as e:
            logger.exception(f"[BACKGROUND] Unexpected error processing {sanitise_url(ref.url)}")
            self.tracker.fail(namespace, f"{type(e).__name__}: {e}")
        else:
            self.tracker.finish(namespace, "indexed" if stored else "empty")


def build_index(
    ref: RepositoryReference,
    embedder: Embedder,
    store: VectorStore,
    cfg: Dict,
    materializer: Optional[RepositoryMaterializer] = None,
) -> int:
    """Index ``ref`` synchronously (Wrapper)."""
    indexer = RepositoryIndexer(embedder, store, cfg, materializer=materializer)
    return indexer.index(ref)
