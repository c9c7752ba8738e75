"""Tests for repository references and namespace derivation."""

from __future__ import annotations

import re

import pytest

from repochat.core import RepositoryReference, derive_namespace
from repochat.errors import InvalidInput


_VALID_NAMESPACE = re.compile(r"^[a-z_][a-z0-9_-]*$")


# ------------------------------------------------------------------
# derive_namespace
# ------------------------------------------------------------------


def test_namespace_from_https_url():
    assert derive_namespace("https://github.com/Foo/Bar.git") == "foo_bar"


def test_namespace_ignores_host_and_scheme():
    urls = [
        "https://github.com/foo/bar",
        "https://github.com/foo/bar/",
        "https://gitlab.example.com/foo/bar.git",
        "git@github.com:foo/bar.git",
        "ssh://git@github.com/Foo/Bar",
    ]
    assert {derive_namespace(u) for u in urls} == {"foo_bar"}


def test_namespace_is_deterministic():
    url = "https://github.com/psf/requests"
    assert derive_namespace(url) == derive_namespace(url)


def test_different_paths_give_different_namespaces():
    assert derive_namespace("https://github.com/foo/bar") != derive_namespace("https://github.com/foo/baz")


def test_plain_path_keeps_dashes():
    assert derive_namespace("https://github.com/my-org/my-repo") == "my-org_my-repo"


def test_lossy_path_gets_digest_suffix():
    ns = derive_namespace("https://github.com/vercel/next.js")
    assert re.fullmatch(r"vercel_next_js__[0-9a-f]{12}", ns)


@pytest.mark.parametrize(
    "url_a,url_b",
    [
        ("https://github.com/foo/bar_baz", "https://github.com/foo_bar/baz"),
        ("https://github.com/foo/bar.baz", "https://github.com/foo/bar_baz"),
        ("https://github.com/foo/bar_baz", "https://github.com/foo/bar/baz"),
        ("https://github.com/a_/b", "https://github.com/a/_b"),
    ],
)
def test_separator_and_underscore_do_not_collide(url_a, url_b):
    assert derive_namespace(url_a) != derive_namespace(url_b)


def test_crafted_path_cannot_reach_digest_form():
    lossy = derive_namespace("https://github.com/foo/bar_baz")
    digest = lossy.rsplit("__", 1)[1]
    crafted = derive_namespace(f"https://github.com/foo/bar/baz/{digest}")
    assert "__" not in crafted
    assert crafted != lossy


def test_namespace_prefixed_when_starting_with_digit():
    ns = derive_namespace("https://github.com/123org/repo")
    assert ns == "_123org_repo"
    assert _VALID_NAMESPACE.match(ns)


def test_long_namespace_truncated_with_digest():
    segment = "x" * 150
    url_a = f"https://github.com/{segment}/{segment}a"
    url_b = f"https://github.com/{segment}/{segment}b"
    ns_a = derive_namespace(url_a)
    ns_b = derive_namespace(url_b)
    assert len(ns_a) <= 200
    assert ns_a != ns_b
    assert ns_a == derive_namespace(url_a)
    assert _VALID_NAMESPACE.match(ns_a)


# ------------------------------------------------------------------
# RepositoryReference.parse
# ------------------------------------------------------------------


@pytest.mark.parametrize(
    "url",
    [
        "https://github.com/foo/bar",
        "http://git.example.com/team/project.git",
        "git@github.com:foo/bar.git",
        "ssh://git@github.com/foo/bar",
        "file:///tmp/repos/sample",
    ],
)
def test_parse_accepts_clonable_urls(url):
    assert RepositoryReference.parse(url).url == url


def test_parse_strips_surrounding_whitespace():
    ref = RepositoryReference.parse("  https://github.com/foo/bar  ")
    assert ref.url == "https://github.com/foo/bar"


@pytest.mark.parametrize(
    "url",
    [
        None,
        "",
        "   ",
        "github.com/foo/bar",
        "ftp://example.com/foo/bar",
        "https://github.com",
        "https://github.com/",
        "https:///foo/bar",
        "https://github.com/foo bar",
    ],
)
def test_parse_rejects_malformed_urls(url):
    with pytest.raises(InvalidInput):
        RepositoryReference.parse(url)


def test_reference_name_is_last_path_segment():
    ref = RepositoryReference.parse("https://github.com/foo/Bar.git")
    assert ref.name == "bar"
    assert ref.namespace == "foo_bar"
