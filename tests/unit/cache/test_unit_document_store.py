# tests/unit/cache/test_unit_document_store.py — v1
"""Tests for cache/document_store.py — full functional tests on a temp directory."""

from __future__ import annotations

import os
from datetime import datetime, timezone

import pytest

from rfccli.cache import layout
from rfccli.cache.document_store import DocumentCacheStore
from rfccli.cache.models import CacheMetadata
from rfccli.core.errors import CacheIOError
from rfccli.core.models import Draft, Format, Rfc


@pytest.fixture
def store(cache_store):
    return cache_store


@pytest.fixture
def sample_metadata():
    return CacheMetadata(
        title="QUIC: A UDP-Based Multiplexed and Secure Transport",
        cached_at=datetime(2026, 2, 16, 12, 30, tzinfo=timezone.utc),
    )


class TestContent:
    def test_put_and_get(self, store):
        store.put(Rfc(9000), Format.TEXT, "QUIC text")
        assert store.get(Rfc(9000), Format.TEXT) == "QUIC text"

    def test_get_missing(self, store):
        assert store.get(Rfc(1), Format.TEXT) is None

    def test_formats_are_independent(self, store):
        store.put(Rfc(9000), Format.HTML, "<p>html</p>")
        assert store.get(Rfc(9000), Format.TEXT) is None
        assert store.get(Rfc(9000), Format.HTML) == "<p>html</p>"

    def test_put_overwrites(self, store):
        store.put(Rfc(1), Format.TEXT, "old")
        store.put(Rfc(1), Format.TEXT, "new")
        assert store.get(Rfc(1), Format.TEXT) == "new"

    def test_unicode_round_trip(self, store):
        store.put(Draft("draft-x"), Format.TEXT, "Ströme → ✓")
        assert store.get(Draft("draft-x"), Format.TEXT) == "Ströme → ✓"

    def test_file_layout(self, store):
        store.put(Rfc(9000), Format.TEXT, "t")
        store.put(Draft("draft-ietf-quic-transport"), Format.HTML, "h")
        docs = store.cache_dir / "documents"
        assert (docs / "rfc9000.txt").read_text(encoding="utf-8") == "t"
        assert (docs / "draft-ietf-quic-transport.html").is_file()

    def test_no_temp_files_left(self, store):
        store.put(Rfc(1), Format.TEXT, "x")
        names = [p.name for p in (store.cache_dir / "documents").iterdir()]
        assert names == ["rfc1.txt"]

    def test_undecodable_file_is_miss(self, store):
        path = layout.document_path(store.cache_dir, Rfc(1), Format.TEXT)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"\xff\xfe\xfa")
        assert store.get(Rfc(1), Format.TEXT) is None

    def test_write_failure_raises(self, store):
        docs = store.cache_dir / "documents"
        docs.mkdir(parents=True, exist_ok=True)
        # A directory in place of the target file makes os.replace fail.
        (docs / "rfc1.txt").mkdir()
        with pytest.raises(CacheIOError):
            store.put(Rfc(1), Format.TEXT, "x")
        assert sorted(p.name for p in docs.iterdir()) == ["rfc1.txt"]

    def test_cache_dir_created(self, tmp_path):
        root = tmp_path / "a" / "b"
        store = DocumentCacheStore(root)
        assert root.is_dir()
        assert store.cache_dir == root


class TestMetadata:
    def test_put_and_get(self, store, sample_metadata):
        store.put_metadata(Rfc(9000), sample_metadata)
        assert store.get_metadata(Rfc(9000)) == sample_metadata

    def test_missing(self, store):
        assert store.get_metadata(Rfc(9000)) is None

    def test_malformed_json_is_none(self, store):
        path = layout.metadata_path(store.cache_dir, Rfc(1))
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("{not json", encoding="utf-8")
        assert store.get_metadata(Rfc(1)) is None

    def test_wrong_shape_is_none(self, store):
        path = layout.metadata_path(store.cache_dir, Rfc(1))
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text('{"cached_at": "2026-01-01T00:00:00Z"}', encoding="utf-8")
        assert store.get_metadata(Rfc(1)) is None

    def test_metadata_alone_lists(self, store, sample_metadata):
        store.put_metadata(Rfc(9000), sample_metadata)
        assert store.list() == {Rfc(9000)}
        (entry,) = store.list_with_metadata()
        assert entry.metadata == sample_metadata


class TestRemove:
    def test_remove_both_formats(self, store, sample_metadata):
        store.put(Rfc(1), Format.TEXT, "t")
        store.put(Rfc(1), Format.HTML, "h")
        store.put_metadata(Rfc(1), sample_metadata)

        assert store.remove(Rfc(1)) is True
        assert store.get(Rfc(1), Format.TEXT) is None
        assert store.get(Rfc(1), Format.HTML) is None
        assert store.get_metadata(Rfc(1)) is None

    def test_remove_html_only(self, store):
        store.put(Rfc(1), Format.HTML, "h")
        assert store.remove(Rfc(1)) is True

    def test_remove_twice(self, store):
        store.put(Rfc(1), Format.TEXT, "t")
        assert store.remove(Rfc(1)) is True
        assert store.remove(Rfc(1)) is False

    def test_remove_missing(self, store):
        assert store.remove(Draft("draft-none")) is False

    def test_metadata_only_returns_false_but_deletes(self, store, sample_metadata):
        store.put_metadata(Rfc(1), sample_metadata)
        assert store.remove(Rfc(1)) is False
        assert store.get_metadata(Rfc(1)) is None


class TestList:
    def test_empty(self, store):
        assert store.list() == set()

    def test_deduplicates_formats(self, store):
        store.put(Rfc(9000), Format.TEXT, "t")
        store.put(Rfc(9000), Format.HTML, "h")
        store.put(Draft("draft-ietf-quic-transport"), Format.TEXT, "d")
        assert store.list() == {Rfc(9000), Draft("draft-ietf-quic-transport")}

    def test_skips_unrecognised_files(self, store):
        store.put(Rfc(1), Format.TEXT, "t")
        docs = store.cache_dir / "documents"
        (docs / "notes.txt").write_text("x", encoding="utf-8")
        (docs / ".rfc3.txt.tmp-1").write_text("x", encoding="utf-8")
        (docs / "subdir.txt").mkdir()
        assert store.list() == {Rfc(1)}

    def test_list_with_metadata_sorted(self, store, sample_metadata):
        store.put(Rfc(9000), Format.TEXT, "t")
        store.put(Rfc(1000), Format.TEXT, "t")
        store.put(Draft("draft-a"), Format.TEXT, "t")
        store.put_metadata(Rfc(9000), sample_metadata)

        entries = store.list_with_metadata()
        assert [e.identifier.canonical_name for e in entries] == ["draft-a", "rfc1000", "rfc9000"]
        assert entries[2].metadata == sample_metadata
        assert entries[0].metadata is None


class TestPathSafety:
    def test_separators_stay_inside_documents_dir(self, store):
        sneaky = Draft("draft/../../outside")
        store.put(sneaky, Format.TEXT, "x")

        docs = store.cache_dir / "documents"
        assert [p.name for p in docs.iterdir()] == ["draft_.._.._outside.txt"]
        assert store.get(sneaky, Format.TEXT) == "x"
        assert not (store.cache_dir / "outside.txt").exists()

    def test_remove_does_not_touch_outside_files(self, store):
        victim = store.cache_dir / "victim.txt"
        victim.write_text("keep", encoding="utf-8")

        assert store.remove(Draft("draft/../../victim")) is False
        assert victim.read_text(encoding="utf-8") == "keep"


class TestMaintenance:
    def test_clear(self, store, sample_metadata):
        store.put(Rfc(1), Format.TEXT, "t")
        store.put_metadata(Rfc(1), sample_metadata)
        store.clear()
        assert store.list() == set()
        assert store.cache_dir.is_dir()
        assert store.total_size() == 0

    def test_usable_after_clear(self, store):
        store.clear()
        store.put(Rfc(2), Format.TEXT, "again")
        assert store.get(Rfc(2), Format.TEXT) == "again"

    def test_total_size(self, store):
        assert store.total_size() == 0
        store.put(Rfc(1), Format.TEXT, "12345")
        store.put(Rfc(2), Format.HTML, "123")
        assert store.total_size() == 8

    def test_default_uses_platform_dir(self, tmp_path, monkeypatch):
        monkeypatch.setattr(layout, "default_cache_dir", lambda: tmp_path / "platform")
        store = DocumentCacheStore.default()
        assert store.cache_dir == tmp_path / "platform"


@pytest.mark.skipif(os.name != "posix" or os.geteuid() == 0, reason="needs POSIX permissions as non-root")
def test_unwritable_cache_raises(tmp_path):
    root = tmp_path / "ro"
    store = DocumentCacheStore(root)
    docs = root / "documents"
    docs.mkdir()
    docs.chmod(0o500)
    try:
        with pytest.raises(CacheIOError):
            store.put(Rfc(1), Format.TEXT, "x")
    finally:
        docs.chmod(0o700)
