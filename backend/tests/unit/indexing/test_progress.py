"""Tests for the in-process job tracker."""

from __future__ import annotations

from repochat.indexing import JobTracker


def test_start_registers_queued_job():
    tracker = JobTracker()
    assert tracker.start("acme_widgets", "https://github.com/acme/widgets")
    job = tracker.get("acme_widgets")
    assert job.status == "queued"
    assert job.repo_url == "https://github.com/acme/widgets"
    assert not job.done
    assert tracker.is_active("acme_widgets")


def test_second_start_refused_while_active():
    tracker = JobTracker()
    assert tracker.start("ns", "u")
    tracker.update("ns", status="embedding")
    assert not tracker.start("ns", "u")


def test_restart_allowed_after_terminal_status():
    tracker = JobTracker()
    tracker.start("ns", "u")
    tracker.fail("ns", "clone failed")
    assert tracker.start("ns", "u")
    assert tracker.get("ns").error is None


def test_finish_and_fail_set_terminal_fields():
    tracker = JobTracker()
    tracker.start("a", "u")
    tracker.start("b", "u")
    tracker.finish("a")
    tracker.fail("b", "EmbeddingFailure")

    a, b = tracker.get("a"), tracker.get("b")
    assert a.status == "indexed" and a.done and a.finished_at is not None
    assert b.status == "failed" and b.error == "EmbeddingFailure"
    assert not tracker.is_active("a")


def test_get_returns_copy():
    tracker = JobTracker()
    tracker.start("ns", "u")
    snapshot = tracker.get("ns")
    snapshot.status = "indexed"
    assert tracker.get("ns").status == "queued"


def test_unknown_namespace():
    tracker = JobTracker()
    assert tracker.get("nope") is None
    assert not tracker.is_active("nope")
    tracker.update("nope", status="embedding")
    assert tracker.get("nope") is None
