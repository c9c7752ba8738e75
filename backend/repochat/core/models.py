"""Data models for repochat."""

from __future__ import annotations

import dataclasses
import hashlib
import re
from typing import List, Optional
from urllib.parse import urlparse

from ..errors import InvalidInput

_ALLOWED_SCHEMES = {"http", "https", "ssh", "git", "file"}
# user@host:owner/repo.git
_SCP_LIKE = re.compile(r"^(?P<user>[\w.-]+)@(?P<host>[\w.-]+):(?P<path>[^/].*)$")
_MAX_NAMESPACE_LEN = 200
_DIGEST_LEN = 12
_PLAIN_PATH = re.compile(r"^[a-z0-9-]+(/[a-z0-9-]+)*$")


def _url_path(url: str) -> str:
    match = _SCP_LIKE.match(url)
    if match:
        return match.group("path")
    return urlparse(url).path


def _normalize_path(path: str) -> str:
    path = path.strip().strip("/")
    if path.endswith(".git"):
        path = path[: -len(".git")]
    return path.strip("/").lower()


def derive_namespace(url: str) -> str:
    """Map a repository URL to its storage namespace.

    Only the URL path participates, so ``https://github.com/Foo/Bar.git`` and
    ``git@github.com:foo/bar`` share the namespace ``foo_bar``.

    A path made of ``[a-z0-9-]`` segments maps to its segments joined by a
    single ``_``, which reverses unambiguously. Any other path (one holding
    ``_``, ``.`` or other characters) and any overlong id gets ``__`` plus a
    SHA-256 prefix of the full path appended. Plain ids never contain
    ``__``, so the two forms cannot meet.
    """
    path = _normalize_path(_url_path(url))
    namespace = re.sub(r"[^a-z0-9_-]", "_", path)
    if namespace and not namespace[0].isalpha() and namespace[0] != "_":
        namespace = "_" + namespace
    if not _PLAIN_PATH.match(path) or len(namespace) > _MAX_NAMESPACE_LEN:
        digest = hashlib.sha256(path.encode("utf-8")).hexdigest()[:_DIGEST_LEN]
        namespace = namespace[: _MAX_NAMESPACE_LEN - _DIGEST_LEN - 2] + "__" + digest
    return namespace


@dataclasses.dataclass(frozen=True)
class RepositoryReference:
    """A clonable repository URL."""

    url: str

    @classmethod
    def parse(cls, raw: Optional[str]) -> "RepositoryReference":
        if raw is None or not str(raw).strip():
            raise InvalidInput("repo_url is required")
        url = str(raw).strip()
        if any(ch.isspace() for ch in url):
            raise InvalidInput(f"Repository URL must not contain whitespace: {url!r}")

        if not _SCP_LIKE.match(url):
            parsed = urlparse(url)
            if parsed.scheme.lower() not in _ALLOWED_SCHEMES:
                raise InvalidInput(
                    f"Unsupported repository URL {url!r}; expected one of "
                    f"{', '.join(sorted(_ALLOWED_SCHEMES))} or user@host:path"
                )
            if parsed.scheme.lower() != "file" and not parsed.netloc:
                raise InvalidInput(f"Repository URL has no host: {url!r}")

        if not _normalize_path(_url_path(url)):
            raise InvalidInput(f"Repository URL has no path: {url!r}")
        return cls(url=url)

    @property
    def name(self) -> str:
        path = _normalize_path(_url_path(self.url))
        return re.sub(r"[^a-z0-9_.-]", "_", path.rsplit("/", 1)[-1])

    @property
    def namespace(self) -> str:
        return derive_namespace(self.url)


@dataclasses.dataclass
class SourceFile:
    """A readable text file from a checkout. ``path`` is relative to the checkout root."""

    path: str
    content: str


@dataclasses.dataclass(frozen=True)
class Chunk:
    path: str
    content: str
    ordinal: int


@dataclasses.dataclass
class EmbeddedDocument:
    """The unit persisted in a namespace, one per chunk."""

    text: str
    source: str
    vector: List[float]
    ordinal: int = 0


@dataclasses.dataclass(frozen=True)
class RetrievedPassage:
    source: str
    text: str
    score: float = 0.0
