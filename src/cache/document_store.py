# src/cache/document_store.py — v2
"""File-based document cache.

Stores document content as individual files under <root>/documents/, one
per identifier and format, plus a JSON metadata sidecar per identifier.
Read misses of any kind are reported as None; write and delete failures
raise CacheIOError.
"""

from __future__ import annotations

import contextlib
import logging
import os
import shutil
from pathlib import Path

from pydantic import ValidationError

from rfccli.cache import layout
from rfccli.cache.models import CachedDocument, CacheMetadata
from rfccli.core.errors import CacheIOError
from rfccli.core.models import Draft, Format, Rfc, parse_identifier

logger = logging.getLogger(__name__)


class DocumentCacheStore:
    """Local cache of fetched RFCs and drafts."""

    def __init__(self, cache_root: Path | str) -> None:
        self._root = Path(cache_root).expanduser()
        try:
            self._root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise CacheIOError("Failed to create cache directory", self._root) from e

    @classmethod
    def default(cls) -> DocumentCacheStore:
        """Open the cache in the platform cache directory."""
        return cls(layout.default_cache_dir())

    @property
    def cache_dir(self) -> Path:
        return self._root

    # --- Content ---

    def get(self, identifier: Rfc | Draft, fmt: Format) -> str | None:
        """Return cached content, or None if absent or unreadable."""
        path = layout.document_path(self._root, identifier, fmt)
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            if not isinstance(e, FileNotFoundError):
                logger.warning("Failed to read cached %s: %s", path.name, e)
            return None

    def put(self, identifier: Rfc | Draft, fmt: Format, content: str) -> None:
        """Store content, replacing any previous copy in the same format."""
        path = layout.document_path(self._root, identifier, fmt)
        self._write_atomic(path, content)
        logger.debug("Cached %s as %s", identifier, path.name)

    # --- Metadata ---

    def get_metadata(self, identifier: Rfc | Draft) -> CacheMetadata | None:
        """Return cached metadata, or None if absent, unreadable or malformed."""
        path = layout.metadata_path(self._root, identifier)
        try:
            raw = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            return None
        try:
            return CacheMetadata.model_validate_json(raw)
        except ValidationError as e:
            logger.warning("Ignoring malformed metadata %s: %s", path.name, e)
            return None

    def put_metadata(self, identifier: Rfc | Draft, metadata: CacheMetadata) -> None:
        """Store metadata for a document, replacing any previous record."""
        path = layout.metadata_path(self._root, identifier)
        self._write_atomic(path, metadata.model_dump_json(indent=2))

    # --- Maintenance ---

    def remove(self, identifier: Rfc | Draft) -> bool:
        """Remove cached content and metadata for a document.

        Returns True if an HTML or text copy was removed. Metadata is
        deleted too but does not count towards the return value.
        """
        removed = False
        for fmt in Format:
            if self._unlink(layout.document_path(self._root, identifier, fmt)):
                removed = True
        self._unlink(layout.metadata_path(self._root, identifier))
        if removed:
            logger.debug("Removed %s from cache", identifier)
        return removed

    def list(self) -> set[Rfc | Draft]:
        """Identifiers with any cached file: content in either format, or metadata."""
        docs_dir = layout.documents_dir(self._root)
        if not docs_dir.is_dir():
            return set()

        identifiers: set[Rfc | Draft] = set()
        for path in docs_dir.iterdir():
            if path.name.startswith(".") or not path.is_file():
                continue
            identifier = parse_identifier(path.stem)
            if identifier is None:
                logger.debug("Skipping unrecognised cache file %s", path.name)
                continue
            identifiers.add(identifier)
        return identifiers

    def list_with_metadata(self) -> list[CachedDocument]:
        """Cached documents joined with their metadata, sorted by name."""
        return [
            CachedDocument(identifier=identifier, metadata=self.get_metadata(identifier))
            for identifier in sorted(self.list(), key=lambda i: i.canonical_name)
        ]

    def clear(self) -> None:
        """Delete every cached file and recreate an empty cache root."""
        try:
            if self._root.exists():
                shutil.rmtree(self._root)
            self._root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise CacheIOError("Failed to clear cache", self._root) from e
        logger.debug("Cleared cache at %s", self._root)

    def total_size(self) -> int:
        """Total size in bytes of all files in the documents directory."""
        docs_dir = layout.documents_dir(self._root)
        if not docs_dir.is_dir():
            return 0
        total = 0
        for path in docs_dir.iterdir():
            try:
                if path.is_file():
                    total += path.stat().st_size
            except OSError:
                continue
        return total

    # --- Internals ---

    @staticmethod
    def _write_atomic(path: Path, content: str) -> None:
        tmp = path.with_name(f".{path.name}.tmp-{os.getpid()}")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(content, encoding="utf-8")
            os.replace(tmp, path)
        except OSError as e:
            with contextlib.suppress(OSError):
                tmp.unlink(missing_ok=True)
            raise CacheIOError("Failed to write cache file", path) from e

    @staticmethod
    def _unlink(path: Path) -> bool:
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise CacheIOError("Failed to remove cache file", path) from e
        return True
