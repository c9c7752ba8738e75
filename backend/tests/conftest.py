"""Shared pytest fixtures."""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

import pytest
from qdrant_client import QdrantClient

from repochat.config import load_config
from repochat.core import Embedder
from repochat.errors import EmbeddingFailure
from repochat.storage import QdrantVectorStore


# ------------------------------------------------------------------
# Fakes
# ------------------------------------------------------------------

KEYWORDS = ("needle", "alpha", "bravo", "charlie", "delta")


class FakeEmbedder(Embedder):
    """Keyword-count vectors. The leading 1.0 keeps every vector non-zero."""

    dimension = len(KEYWORDS) + 1

    def __init__(self, fail_on: Optional[str] = None):
        self.fail_on = fail_on
        self.calls: List[str] = []
        self._lock = threading.Lock()

    def embed_one(self, text: str) -> List[float]:
        with self._lock:
            self.calls.append(text)
        if self.fail_on and self.fail_on in text:
            raise EmbeddingFailure(f"provider rejected input containing {self.fail_on!r}")
        lowered = text.lower()
        return [1.0] + [float(lowered.count(k)) for k in KEYWORDS]


class FakeLLM:
    """Records every call and streams ``fragments`` (or raises ``error`` after them)."""

    def __init__(self, fragments=("The answer ", "is here."), error: Optional[Exception] = None):
        self.fragments = list(fragments)
        self.error = error
        self.calls: List[Dict] = []
        self.closed = False

    def stream_chat(self, system_prompt, messages):
        self.calls.append({"system_prompt": system_prompt, "messages": messages})
        try:
            for fragment in self.fragments:
                yield fragment
            if self.error is not None:
                raise self.error
        finally:
            self.closed = True


def write_tree(root: Path, files: Dict[str, Union[str, bytes]]) -> None:
    for rel, content in files.items():
        p = root / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            p.write_bytes(content)
        else:
            p.write_text(content, encoding="utf-8")


def parse_sse(body: str) -> List[tuple]:
    """Split an SSE body into ``(event, data)`` pairs."""
    events = []
    name, data = None, []
    for line in body.splitlines():
        if not line:
            if name is not None or data:
                events.append((name or "message", "\n".join(data)))
            name, data = None, []
            continue
        if line.startswith(":"):
            continue
        field, _, value = line.partition(":")
        if value.startswith(" "):
            value = value[1:]
        if field == "event":
            name = value
        elif field == "data":
            data.append(value)
    if name is not None or data:
        events.append((name or "message", "\n".join(data)))
    return events


# ------------------------------------------------------------------
# Fixtures
# ------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_sse_app_status():
    """sse-starlette keeps a module-level exit event bound to the first event loop."""
    from sse_starlette import sse

    status = getattr(sse, "AppStatus", None)
    if status is not None and hasattr(status, "should_exit_event"):
        status.should_exit_event = None
    yield


@pytest.fixture
def cfg(tmp_path):
    """Validated config with a per-test workdir."""
    return load_config({"workdir": str(tmp_path / "work")})


@pytest.fixture
def memory_store():
    """Qdrant running in-process, discarded after the test."""
    client = QdrantClient(location=":memory:")
    yield QdrantVectorStore(client)
    client.close()


@pytest.fixture
def fake_embedder():
    return FakeEmbedder()


@pytest.fixture
def make_clone() -> Callable:
    """Build a clone callable that writes ``files`` instead of running git.

    The returned callable records every destination in ``.destinations``.
    """

    def factory(files: Dict[str, Union[str, bytes]]):
        destinations: List[Path] = []

        def clone(url: str, destination: Path, depth: int = 1) -> None:
            destinations.append(destination)
            write_tree(destination, files)

        clone.destinations = destinations
        return clone

    return factory


@pytest.fixture
def sse_events():
    return parse_sse


@pytest.fixture
def fake_embedder_cls():
    return FakeEmbedder


@pytest.fixture
def fake_llm_cls():
    return FakeLLM


@pytest.fixture
def tree_writer():
    return write_tree
