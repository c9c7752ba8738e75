"""Utility functions for repochat."""

from .file_utils import (
    ensure_dir,
    is_binary_file,
    sanitise_url,
)

__all__ = [
    "ensure_dir",
    "is_binary_file",
    "sanitise_url",
]
