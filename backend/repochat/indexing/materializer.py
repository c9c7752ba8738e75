"""Clone a remote repository into a transient checkout and read its text files."""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
import time
import urllib.parse
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Dict, Iterable, Iterator, List

from ..config import DEFAULT_ALLOWED_EXTENSIONS, DEFAULT_IGNORE_DIRS, DEFAULT_IGNORE_FILES
from ..core.models import RepositoryReference, SourceFile
from ..errors import CloneFailure, UnreadableFile
from ..utils import ensure_dir, is_binary_file, sanitise_url

logger = logging.getLogger(__name__)

CloneFn = Callable[[str, Path, int], None]


def _inject_token(url: str) -> str:
    """Add GIT_TOKEN to an HTTP(S) URL for private repositories.

    The returned URL is only handed to git and never logged.
    """
    token = os.environ.get("GIT_TOKEN", "")
    if not token or not url.startswith(("https://", "http://")):
        return url
    parsed = urllib.parse.urlparse(url)
    return parsed._replace(netloc=f"{token}@{parsed.netloc}").geturl()


def clone_repository(url: str, destination: Path, depth: int = 1) -> None:
    """Clone ``url`` into the existing empty directory ``destination``.

    Raises:
        CloneFailure: remote unreachable, not found, or not a repository
    """
    try:
        import git  # GitPython
    except ImportError as e:
        raise CloneFailure(f"git is not available to clone {sanitise_url(url)}: {e}") from e

    kwargs = {"depth": depth} if depth else {}
    try:
        git.Repo.clone_from(_inject_token(url), str(destination), **kwargs)
    except git.exc.GitError as e:
        raise CloneFailure(
            f"git clone failed for {sanitise_url(url)}: {sanitise_url(str(e))}"
        ) from None


def iter_files(root: Path, cfg: Dict) -> Iterable[Path]:
    ignore_dirs = set(cfg.get("ignore_dirs", DEFAULT_IGNORE_DIRS))
    ignore_files = set(cfg.get("ignore_files", DEFAULT_IGNORE_FILES))
    allowed = {ext.lower() for ext in cfg.get("allowed_extensions", DEFAULT_ALLOWED_EXTENSIONS)}
    max_kb = int(cfg.get("max_file_size_kb", 512))

    for dirpath, dirs, files in os.walk(root):
        dirs[:] = sorted(d for d in dirs if d not in ignore_dirs)
        for fname in sorted(files):
            if fname in ignore_files:
                continue
            p = Path(dirpath, fname)
            if p.suffix.lower() not in allowed:
                continue
            # A link can point anywhere on the host
            if p.is_symlink():
                logger.info(f"Skipping symlink: {p.relative_to(root).as_posix()}")
                continue
            try:
                if not p.is_file() or (p.stat().st_size / 1024.0) > max_kb:
                    continue
            except OSError:
                continue
            if is_binary_file(p):
                logger.info(f"Skipping binary file: {p.relative_to(root).as_posix()}")
                continue
            yield p


def read_source_file(path: Path, root: Path) -> SourceFile:
    rel = path.relative_to(root).as_posix()
    try:
        content = path.read_text(encoding="utf-8")
    except (UnicodeDecodeError, OSError) as e:
        raise UnreadableFile(rel, str(e)) from e
    return SourceFile(path=rel, content=content)


def remove_checkout(path: Path) -> None:
    """Delete a checkout. A directory that is already gone is fine; other errors are logged."""
    try:
        shutil.rmtree(path)
        logger.info(f"Removed checkout {path}")
    except FileNotFoundError:
        logger.debug(f"Checkout {path} already removed")
    except OSError as e:
        logger.warning(f"Failed to remove checkout {path}: {e}")


class RepositoryMaterializer:
    """Owns the transient checkout of a repository for the length of a ``with`` block."""

    def __init__(self, cfg: Dict, clone: CloneFn = clone_repository):
        self.cfg = cfg
        self.clone = clone
        self.workdir = Path(cfg.get("workdir") or Path(tempfile.gettempdir()) / "repochat")
        self.depth = int(cfg.get("clone_depth", 1))

    def checkout_path(self, ref: RepositoryReference) -> Path:
        """Allocate a fresh, empty directory named after the repository and a ns timestamp."""
        ensure_dir(self.workdir)
        prefix = f"{ref.name or 'repo'}-{time.time_ns()}-"
        return Path(tempfile.mkdtemp(prefix=prefix, dir=self.workdir))

    def read_files(self, root: Path) -> List[SourceFile]:
        files: List[SourceFile] = []
        for p in iter_files(root, self.cfg):
            try:
                files.append(read_source_file(p, root))
            except UnreadableFile as e:
                logger.info(f"Skipping unreadable file: {e.path}")
        return files

    @contextmanager
    def materialize(self, ref: RepositoryReference) -> Iterator[List[SourceFile]]:
        """Clone ``ref`` and yield its readable files; the checkout is always removed on exit."""
        checkout = self.checkout_path(ref)
        try:
            logger.info(f"Cloning {sanitise_url(ref.url)} into {checkout}")
            self.clone(ref.url, checkout, self.depth)
            files = self.read_files(checkout)
            logger.info(f"Read {len(files)} files from {sanitise_url(ref.url)}")
            yield files
        finally:
            remove_checkout(checkout)
