"""In-process tracking of ingestion jobs.

Progress is informational. Whether a repository is indexed is decided by the
existence of its namespace in the vector store, not by anything recorded here.
"""

from __future__ import annotations

import dataclasses
import threading
from datetime import datetime, timezone
from typing import Dict, Optional

ACTIVE_STATUSES = {"queued", "cloning", "embedding"}
TERMINAL_STATUSES = {"indexed", "empty", "failed"}


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclasses.dataclass
class JobProgress:
    namespace: str
    repo_url: str
    status: str = "queued"
    total_files: int = 0
    total_chunks: int = 0
    embedded_chunks: int = 0
    error: Optional[str] = None
    started_at: datetime = dataclasses.field(default_factory=_now)
    finished_at: Optional[datetime] = None

    @property
    def done(self) -> bool:
        return self.status in TERMINAL_STATUSES


class JobTracker:
    """Thread-safe registry of the latest job per namespace."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._jobs: Dict[str, JobProgress] = {}

    def start(self, namespace: str, repo_url: str) -> bool:
        """Register a queued job. Returns False when one is already running for ``namespace``."""
        with self._lock:
            current = self._jobs.get(namespace)
            if current is not None and current.status in ACTIVE_STATUSES:
                return False
            self._jobs[namespace] = JobProgress(namespace=namespace, repo_url=repo_url)
            return True

    def update(self, namespace: str, **fields) -> None:
        with self._lock:
            job = self._jobs.get(namespace)
            if job is None:
                return
            for key, value in fields.items():
                setattr(job, key, value)

    def finish(self, namespace: str, status: str = "indexed") -> None:
        self.update(namespace, status=status, finished_at=_now())

    def fail(self, namespace: str, error: str) -> None:
        self.update(namespace, status="failed", error=error, finished_at=_now())

    def get(self, namespace: str) -> Optional[JobProgress]:
        with self._lock:
            job = self._jobs.get(namespace)
            return dataclasses.replace(job) if job is not None else None

    def is_active(self, namespace: str) -> bool:
        job = self.get(namespace)
        return job is not None and job.status in ACTIVE_STATUSES
