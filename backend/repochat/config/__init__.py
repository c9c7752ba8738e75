"""Configuration management for repochat."""

from .manager import (
    DEFAULT_ALLOWED_EXTENSIONS,
    DEFAULT_CONFIG,
    DEFAULT_IGNORE_DIRS,
    DEFAULT_IGNORE_FILES,
    load_config,
    validate_config,
)

__all__ = [
    "DEFAULT_ALLOWED_EXTENSIONS",
    "DEFAULT_CONFIG",
    "DEFAULT_IGNORE_DIRS",
    "DEFAULT_IGNORE_FILES",
    "load_config",
    "validate_config",
]
