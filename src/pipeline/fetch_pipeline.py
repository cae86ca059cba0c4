# src/pipeline/fetch_pipeline.py — v1
"""Fetch → normalize → cache pipeline for a single document.

Usage:
    pipeline = FetchPipeline(cache=store, fetcher=fetcher, index=client)
    text = await pipeline.resolve_for_view(Rfc(9000))

Content is always cached as plain text. Title metadata is fetched and
cached as a separate, best-effort step: its failure never fails the fetch.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable

from rfccli.api.fetcher import DocumentIndex, DocumentSource
from rfccli.cache.document_store import DocumentCacheStore
from rfccli.cache.models import CacheMetadata
from rfccli.core.errors import CacheIOError, NetworkError, RemoteError
from rfccli.core.models import Draft, Format, Rfc
from rfccli.extraction.html_extractor import DEFAULT_WRAP_WIDTH, html_to_text
from rfccli.logging.context import set_document_context

logger = logging.getLogger(__name__)

TextExtractor = Callable[[str, int], str]


class FetchPipeline:
    """Resolves documents from the cache or the network and keeps the cache current."""

    def __init__(
        self,
        cache: DocumentCacheStore,
        fetcher: DocumentSource,
        index: DocumentIndex,
        text_extractor: TextExtractor = html_to_text,
        wrap_width: int = DEFAULT_WRAP_WIDTH,
    ) -> None:
        self._cache = cache
        self._fetcher = fetcher
        self._index = index
        self._text_extractor = text_extractor
        self._wrap_width = wrap_width

    async def resolve_for_view(
        self, identifier: Rfc | Draft, force_fresh: bool = False
    ) -> str:
        """Return document text, from the cache unless `force_fresh` is set."""
        if not force_fresh:
            cached = self._cache.get(identifier, Format.TEXT)
            if cached is not None:
                logger.info("Using cached copy of %s", identifier)
                return cached
        return await self.fetch_and_cache(identifier)

    async def fetch_and_cache(self, identifier: Rfc | Draft) -> str:
        """Fetch a document, store it as text, then try to cache its title.

        Raises:
            NetworkError / RemoteError: If the document itself cannot be fetched.
            CacheIOError: If the text cannot be written to the cache.
        """
        set_document_context(identifier.canonical_name)
        try:
            logger.info("Fetching %s...", identifier)
            content, fmt = await self._fetcher.fetch(identifier)

            text = self._to_text(content, fmt)
            self._cache.put(identifier, Format.TEXT, text)

            try:
                await self.cache_metadata(identifier)
            except (NetworkError, RemoteError, CacheIOError) as e:
                logger.warning("Failed to fetch metadata for %s: %s", identifier, e)

            return text
        finally:
            set_document_context(None)

    async def cache_metadata(self, identifier: Rfc | Draft) -> CacheMetadata:
        """Look up the document title in the index and cache it.

        Raises:
            NetworkError / RemoteError: If the index lookup fails.
            CacheIOError: If the metadata cannot be written.
        """
        document = await self._index.get_document(identifier.canonical_name)
        metadata = CacheMetadata(title=document.title, cached_at=datetime.now(timezone.utc))
        self._cache.put_metadata(identifier, metadata)
        return metadata

    def _to_text(self, content: str, fmt: Format) -> str:
        if fmt is Format.TEXT:
            return content

        logger.info("Plain text not available, converting from HTML...")
        try:
            return self._text_extractor(content, self._wrap_width)
        except Exception as e:
            logger.warning("HTML to text conversion failed (%s), using raw HTML", e)
            return content
