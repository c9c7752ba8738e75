"""Configuration management for repochat."""

from __future__ import annotations

import copy
import os
import tempfile
from pathlib import Path
from typing import Dict, List, Optional

from ..errors import ConfigurationError


DEFAULT_IGNORE_DIRS: List[str] = [
    ".git",
    "node_modules",
    "dist",
    "build",
    ".venv",
    "venv",
    "__pycache__",
    "target",
    ".next",
    ".idea",
    ".vscode",
]

DEFAULT_IGNORE_FILES: List[str] = [
    ".DS_Store",
    "Thumbs.db",
    "desktop.ini",
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yaml",
    "poetry.lock",
    "Pipfile.lock",
    "Cargo.lock",
    "composer.lock",
    "Gemfile.lock",
    "go.sum",
]

DEFAULT_ALLOWED_EXTENSIONS: List[str] = [
    ".py", ".js", ".jsx", ".ts", ".tsx",
    ".go", ".java", ".kt", ".cs",
    ".rb", ".php", ".rs",
    ".c", ".h", ".cpp", ".hpp",
    ".swift",
    ".css", ".html", ".md", ".rst",
    ".txt", ".yaml", ".yml", ".json", ".toml",
    ".sh", ".sql",
]

DEFAULT_CONFIG: Dict = {
    "workdir": str(Path(tempfile.gettempdir()) / "repochat"),
    "clone_depth": 1,
    "max_file_size_kb": 512,
    "ignore_dirs": DEFAULT_IGNORE_DIRS,
    "ignore_files": DEFAULT_IGNORE_FILES,
    "allowed_extensions": DEFAULT_ALLOWED_EXTENSIONS,
    # Character windows
    "chunk_size": 1500,
    "chunk_overlap": 200,
    "ingest": {"batch_size": 20},
    "embedding": {
        "backend": "huggingface",
        "model": "BAAI/bge-small-en-v1.5",
        "dimension": 384,
        "api_base": "https://router.huggingface.co/hf-inference/models",
        "timeout": 30,
        "max_retries": 0,
        "retry_backoff": 2.0,
        "sentence_transformers_model": "sentence-transformers/all-MiniLM-L6-v2",
    },
    "generation": {
        "api_base": "https://router.huggingface.co/v1",
        "model": "deepseek-ai/DeepSeek-Coder-V2-Lite-Instruct",
        "max_tokens": 1024,
        "temperature": 0.0,
        "timeout": 60,
    },
    "search": {
        "top_k": 10,
        "min_score": None,
        "max_context_tokens": 6000,
    },
    "vector_store": {
        "backend": "qdrant",
        "metric": "cosine",
        "qdrant": {
            "host": "localhost",
            "port": 6333,
            "url": None,
            "api_key": None,
            "location": None,
        },
    },
    "log_level": "INFO",
}


def _deep_merge(base: Dict, overrides: Dict) -> Dict:
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
    return base


def _apply_env(config: Dict) -> None:
    qdrant = config["vector_store"]["qdrant"]
    qdrant["host"] = os.getenv("QDRANT_HOST", qdrant["host"])
    qdrant["port"] = int(os.getenv("QDRANT_PORT", str(qdrant["port"])))
    qdrant["url"] = os.getenv("QDRANT_URL", qdrant["url"])
    qdrant["api_key"] = os.getenv("QDRANT_API_KEY", qdrant["api_key"])
    qdrant["location"] = os.getenv("QDRANT_LOCATION", qdrant["location"])

    config["workdir"] = os.getenv("REPOCHAT_WORKDIR", config["workdir"])
    config["log_level"] = os.getenv("REPOCHAT_LOG_LEVEL", config["log_level"]).upper()
    config["embedding"]["model"] = os.getenv("REPOCHAT_EMBEDDING_MODEL", config["embedding"]["model"])
    config["generation"]["model"] = os.getenv("REPOCHAT_GENERATION_MODEL", config["generation"]["model"])


def validate_config(config: Dict) -> None:
    """Reject chunking and batching values the pipeline cannot run with."""
    chunk_size = config.get("chunk_size")
    overlap = config.get("chunk_overlap")
    if not isinstance(chunk_size, int) or chunk_size <= 0:
        raise ConfigurationError(f"chunk_size must be a positive integer, got {chunk_size!r}")
    if not isinstance(overlap, int) or overlap < 0:
        raise ConfigurationError(f"chunk_overlap must be a non-negative integer, got {overlap!r}")
    if overlap >= chunk_size:
        raise ConfigurationError(
            f"chunk_overlap ({overlap}) must be smaller than chunk_size ({chunk_size})"
        )

    batch_size = config.get("ingest", {}).get("batch_size")
    if not isinstance(batch_size, int) or batch_size <= 0:
        raise ConfigurationError(f"ingest.batch_size must be a positive integer, got {batch_size!r}")

    top_k = config.get("search", {}).get("top_k")
    if not isinstance(top_k, int) or top_k <= 0:
        raise ConfigurationError(f"search.top_k must be a positive integer, got {top_k!r}")


def load_config(overrides: Optional[Dict] = None) -> Dict:
    """Load configuration.

    Defaults, then environment variables, then explicit ``overrides``
    (deep-merged). The result is validated before it is returned.
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    _apply_env(config)
    if overrides:
        _deep_merge(config, copy.deepcopy(overrides))
    validate_config(config)
    return config
