# src/api/fetcher.py — v1
"""Raw document retrieval from the RFC Editor and the IETF draft archive.

Sources are tried in preferred-format order (plain text first, then HTML);
the first successful response wins.
"""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Protocol

import httpx

from rfccli.api.http import build_http_client
from rfccli.config.settings import Settings
from rfccli.core.errors import NetworkError, RemoteError
from rfccli.core.models import Document, Draft, Format, Rfc

logger = logging.getLogger(__name__)


class DocumentSource(Protocol):
    """Anything that can retrieve raw document content."""

    async def fetch(self, identifier: Rfc | Draft) -> tuple[str, Format]:
        """Return (content, format) for a document."""
        ...


class DocumentIndex(Protocol):
    """Anything that can look up a document record by canonical name."""

    async def get_document(self, name: str) -> Document:
        ...


class DocumentFetcher:
    """Fetches RFC and draft content over HTTP."""

    def __init__(
        self,
        settings: Settings | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings or Settings()
        self._owns_client = http_client is None
        self._client = http_client or build_http_client(self._settings)

    async def __aenter__(self) -> DocumentFetcher:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def candidate_urls(self, identifier: Rfc | Draft) -> list[tuple[str, Format]]:
        """Source URLs for a document in the order they are tried."""
        s = self._settings
        if isinstance(identifier, Rfc):
            base = f"{s.rfc_editor_base_url}/rfc/{identifier.canonical_name}"
            return [(f"{base}.txt", Format.TEXT), (f"{base}.html", Format.HTML)]
        return [
            (f"{s.draft_archive_base_url}/{identifier.name}.txt", Format.TEXT),
            (f"{s.datatracker_base_url}/doc/html/{identifier.name}", Format.HTML),
        ]

    async def fetch(self, identifier: Rfc | Draft) -> tuple[str, Format]:
        """Return the content of a document and the format it came in.

        Raises:
            NetworkError: If every source failed at the transport level.
            RemoteError: If no source returned the document.
        """
        failures: list[str] = []
        last_transport_error: tuple[str, httpx.RequestError] | None = None
        last_status: int | None = None

        for url, fmt in self.candidate_urls(identifier):
            try:
                response = await self._client.get(url)
            except httpx.RequestError as e:
                logger.debug("Fetching %s failed: %s", url, e)
                failures.append(f"{url} ({type(e).__name__})")
                last_transport_error = (url, e)
                continue

            if response.is_success:
                logger.debug("Fetched %s as %s from %s", identifier, fmt.value, url)
                return response.text, fmt

            logger.debug("Fetching %s returned HTTP %d", url, response.status_code)
            failures.append(f"{url} (HTTP {response.status_code})")
            last_status = response.status_code

        if last_status is None and last_transport_error is not None:
            url, error = last_transport_error
            raise NetworkError(url, error)
        raise RemoteError(
            f"Could not fetch {identifier}; tried: {', '.join(failures)}",
            status_code=last_status,
        )
