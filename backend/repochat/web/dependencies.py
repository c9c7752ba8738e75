"""Long-lived clients shared by the routes.

Built once at start-up and handed to route handlers through ``Depends``.
"""

from __future__ import annotations

import dataclasses
from typing import Dict, Optional

from fastapi import Depends, Request

from ..core import Embedder, make_embedder
from ..generation import LLMConfig, create_client
from ..indexing import JobTracker, RepositoryIndexer, RepositoryMaterializer
from ..search import AnswerPipeline
from ..storage import VectorStore, make_vector_store


@dataclasses.dataclass
class Services:
    config: Dict
    store: VectorStore
    tracker: JobTracker
    indexer: RepositoryIndexer
    pipeline: AnswerPipeline


def build_services(
    cfg: Dict,
    embedder: Optional[Embedder] = None,
    store: Optional[VectorStore] = None,
    llm=None,
    materializer: Optional[RepositoryMaterializer] = None,
) -> Services:
    """Construct every client once. Anything passed in is used instead of the configured backend."""
    embedder = embedder or make_embedder(cfg)
    store = store or make_vector_store(cfg)
    if llm is None:
        gen_cfg = cfg.get("generation", {})
        llm = create_client(
            LLMConfig(
                api_base=gen_cfg.get("api_base", LLMConfig.api_base),
                model=gen_cfg.get("model", LLMConfig.model),
                max_tokens=int(gen_cfg.get("max_tokens", LLMConfig.max_tokens)),
                temperature=float(gen_cfg.get("temperature", LLMConfig.temperature)),
                timeout=int(gen_cfg.get("timeout", LLMConfig.timeout)),
            )
        )

    tracker = JobTracker()
    indexer = RepositoryIndexer(embedder, store, cfg, tracker=tracker, materializer=materializer)
    pipeline = AnswerPipeline(embedder, store, llm, cfg)
    return Services(config=cfg, store=store, tracker=tracker, indexer=indexer, pipeline=pipeline)


def get_services(request: Request) -> Services:
    return request.app.state.services


def get_store(services: Services = Depends(get_services)) -> VectorStore:
    return services.store


def get_tracker(services: Services = Depends(get_services)) -> JobTracker:
    return services.tracker


def get_indexer(services: Services = Depends(get_services)) -> RepositoryIndexer:
    return services.indexer


def get_pipeline(services: Services = Depends(get_services)) -> AnswerPipeline:
    return services.pipeline
