"""File utility functions."""

from __future__ import annotations

import re
from pathlib import Path

_CRED_RE = re.compile(r"(https?://)([^@/]+@)", re.IGNORECASE)


def ensure_dir(p: Path) -> None:
    """Create directory if it doesn't exist."""
    p.mkdir(parents=True, exist_ok=True)


def is_binary_file(path: Path) -> bool:
    """Check if file is binary by looking for null bytes."""
    try:
        with path.open("rb") as f:
            sample = f.read(2048)
        return b"\x00" in sample
    except OSError:
        return True


def sanitise_url(text: str) -> str:
    """Remove embedded credentials from URLs for safe logging / error messages."""
    return _CRED_RE.sub(r"\1***@", text)
