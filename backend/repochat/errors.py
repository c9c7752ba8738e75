"""Error kinds raised across ingestion and question answering."""

from __future__ import annotations


class RepoChatError(Exception):
    """Base class for all repochat errors."""


class ConfigurationError(RepoChatError, ValueError):
    """Invalid configuration value or missing secret."""


class InvalidInput(RepoChatError, ValueError):
    """Malformed repository reference or question. Rejected before any work starts."""


class CloneFailure(RepoChatError):
    """Remote repository is unreachable, missing, or not a git repository."""


class UnreadableFile(RepoChatError):
    """A file in the checkout could not be decoded as text."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Unreadable file {path}: {reason}")
        self.path = path


class EmbeddingFailure(RepoChatError):
    """The embedding provider returned an error or a malformed vector."""


class StoreFailure(RepoChatError):
    """A vector store call (create, insert, query) failed."""


class NamespaceNotFound(RepoChatError, LookupError):
    """Query against a namespace that was never created."""

    def __init__(self, namespace: str):
        super().__init__(f"Namespace '{namespace}' not found. Index the repository first.")
        self.namespace = namespace


class GenerationFailure(RepoChatError):
    """The chat-completion provider failed before or during streaming."""
