"""Indexing functionality for repochat."""

from .indexer import RepositoryIndexer, Submission, build_index
from .materializer import RepositoryMaterializer, clone_repository, iter_files
from .progress import JobProgress, JobTracker

__all__ = [
    "RepositoryIndexer",
    "Submission",
    "build_index",
    "RepositoryMaterializer",
    "clone_repository",
    "iter_files",
    "JobProgress",
    "JobTracker",
]
