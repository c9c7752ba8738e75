"""Question answering over an indexed repository."""

from __future__ import annotations

import logging
from typing import Dict, Iterator, List

from ..core import Embedder, RetrievedPassage
from ..prompt import PromptBuilder, REFUSAL_SENTENCE
from ..storage import VectorStore
from .searcher import DefaultSearcher, format_hit

logger = logging.getLogger(__name__)


class Answer:
    """Retrieved sources plus a lazy, single-use stream of answer fragments.

    ``sources`` is complete before the first fragment is requested.
    """

    def __init__(self, namespace: str, sources: List[RetrievedPassage], fragments: Iterator[str]):
        self.namespace = namespace
        self.sources = sources
        self.fragments = fragments

    def __iter__(self) -> Iterator[str]:
        return self.fragments

    def close(self) -> None:
        """Stop generation and release the provider connection."""
        close = getattr(self.fragments, "close", None)
        if close is not None:
            close()


class AnswerPipeline:
    """Embed the question, retrieve neighbours, and stream a grounded answer.

    ``llm`` is anything with ``stream_chat(system_prompt, messages)``
    returning an iterator of text deltas.
    """

    def __init__(self, embedder: Embedder, store: VectorStore, llm, cfg: Dict):
        search_cfg = cfg.get("search", {})
        self.llm = llm
        self.top_k = int(search_cfg.get("top_k", 10))
        self.searcher = DefaultSearcher(embedder, store, min_score=search_cfg.get("min_score"))
        self.prompt_builder = PromptBuilder(int(search_cfg.get("max_context_tokens", 6000)))

    def retrieve(self, namespace: str, question: str) -> List[RetrievedPassage]:
        """
        Raises:
            InvalidInput: empty question
            NamespaceNotFound: before any embedding or generation call
        """
        hits = self.searcher.search(namespace, question, self.top_k)
        logger.info(f"Retrieved {len(hits)} passages from '{namespace}'")
        for hit in hits:
            logger.debug(format_hit(hit, max_chars=200))
        return hits

    def _generate(self, question: str, passages: List[RetrievedPassage]) -> Iterator[str]:
        if not passages:
            yield REFUSAL_SENTENCE
            return
        messages = self.prompt_builder.build(question, passages)
        yield from self.llm.stream_chat(self.prompt_builder.system_prompt, messages)

    def answer(self, namespace: str, question: str) -> Answer:
        passages = self.retrieve(namespace, question)
        return Answer(namespace, passages, self._generate(question, passages))
