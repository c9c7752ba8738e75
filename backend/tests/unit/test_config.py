"""Tests for configuration loading."""

from __future__ import annotations

import pytest

from repochat.config import DEFAULT_CONFIG, load_config, validate_config
from repochat.errors import ConfigurationError


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for var in (
        "QDRANT_HOST",
        "QDRANT_PORT",
        "QDRANT_URL",
        "QDRANT_API_KEY",
        "QDRANT_LOCATION",
        "REPOCHAT_WORKDIR",
        "REPOCHAT_LOG_LEVEL",
        "REPOCHAT_EMBEDDING_MODEL",
        "REPOCHAT_GENERATION_MODEL",
    ):
        monkeypatch.delenv(var, raising=False)


def test_defaults():
    config = load_config()
    assert config["chunk_size"] == 1500
    assert config["chunk_overlap"] == 200
    assert config["ingest"]["batch_size"] == 20
    assert config["embedding"]["model"] == "BAAI/bge-small-en-v1.5"
    assert config["embedding"]["dimension"] == 384
    assert config["vector_store"]["qdrant"]["port"] == 6333
    assert ".git" in config["ignore_dirs"]
    assert "node_modules" in config["ignore_dirs"]


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("QDRANT_HOST", "qdrant.internal")
    monkeypatch.setenv("QDRANT_PORT", "6400")
    monkeypatch.setenv("REPOCHAT_LOG_LEVEL", "debug")
    monkeypatch.setenv("REPOCHAT_EMBEDDING_MODEL", "intfloat/e5-small-v2")
    config = load_config()
    assert config["vector_store"]["qdrant"]["host"] == "qdrant.internal"
    assert config["vector_store"]["qdrant"]["port"] == 6400
    assert config["log_level"] == "DEBUG"
    assert config["embedding"]["model"] == "intfloat/e5-small-v2"


def test_overrides_are_deep_merged():
    config = load_config({"embedding": {"dimension": 768}, "search": {"top_k": 3}})
    assert config["embedding"]["dimension"] == 768
    assert config["embedding"]["model"] == "BAAI/bge-small-en-v1.5"
    assert config["search"]["top_k"] == 3
    assert config["search"]["max_context_tokens"] == 6000


def test_overrides_win_over_env(monkeypatch):
    monkeypatch.setenv("QDRANT_HOST", "from-env")
    config = load_config({"vector_store": {"qdrant": {"host": "from-override"}}})
    assert config["vector_store"]["qdrant"]["host"] == "from-override"


def test_defaults_not_mutated():
    config = load_config({"ingest": {"batch_size": 4}})
    config["ignore_dirs"].append("vendor")
    assert DEFAULT_CONFIG["ingest"]["batch_size"] == 20
    assert "vendor" not in load_config()["ignore_dirs"]


@pytest.mark.parametrize(
    "overrides",
    [
        {"chunk_size": 0},
        {"chunk_size": "1500"},
        {"chunk_overlap": -1},
        {"chunk_size": 100, "chunk_overlap": 100},
        {"ingest": {"batch_size": 0}},
        {"search": {"top_k": 0}},
    ],
)
def test_invalid_values_rejected(overrides):
    with pytest.raises(ConfigurationError):
        load_config(overrides)


def test_validate_config_accepts_defaults():
    validate_config(load_config())
