# src/api/datatracker.py — v1
"""Client for the IETF Datatracker document index.

Searches by title and looks up single documents. Only RFCs and
Internet-Drafts are returned; the index also serves slides, minutes,
reviews and other document types that are filtered out here.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from types import TracebackType

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from rfccli.api.http import build_http_client
from rfccli.config.settings import Settings
from rfccli.core.errors import NetworkError, RemoteError
from rfccli.core.models import (
    Document,
    Draft,
    Rfc,
    SearchFilter,
    SearchResult,
    parse_identifier,
)

logger = logging.getLogger(__name__)

DOCUMENT_API_PATH = "/api/v1/doc/document/"

_TIMESTAMP_RE = re.compile(
    r"(\d{4}-\d{2}-\d{2})[Tt ](\d{2}:\d{2}:\d{2})(\.\d+)?([Zz]|[+-]\d{2}:\d{2})?"
)


# === Wire models ===


class _SearchMeta(BaseModel):
    model_config = ConfigDict(extra="ignore")

    next: str | None = None
    total_count: int | None = None


class _ApiDocument(BaseModel):
    """Document record as returned by the Datatracker API."""

    model_config = ConfigDict(extra="ignore")

    name: str
    title: str
    abstract: str | None = None
    pages: int | None = None
    time: str | None = None
    std_level: str | None = None
    stream: str | None = None
    group: str | None = None
    authors: list[str] = Field(default_factory=list)

    @field_validator("authors", mode="before")
    @classmethod
    def _none_as_empty(cls, v: object) -> object:
        return [] if v is None else v


class _SearchResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    meta: _SearchMeta
    objects: list[_ApiDocument]


# === Client ===


class DataTrackerClient:
    """Async client for the Datatracker document API."""

    def __init__(
        self,
        settings: Settings | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings or Settings()
        self._owns_client = http_client is None
        self._client = http_client or build_http_client(self._settings)
        self._base_url = self._settings.datatracker_base_url

    async def __aenter__(self) -> DataTrackerClient:
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

    async def search(
        self,
        query: str,
        filter: SearchFilter = SearchFilter.BOTH,
        limit: int | None = None,
    ) -> SearchResult:
        """Search documents whose title contains `query`.

        Requests `limit * overfetch_factor` records because most of what the
        index returns for a title match is not an RFC or draft, then keeps
        the first `limit` RFCs/drafts in server order.

        Raises:
            ValueError: If limit is less than 1.
            NetworkError: If the request could not be sent.
            RemoteError: On a non-success status or malformed body.
        """
        if limit is None:
            limit = self._settings.search_default_limit
        if limit < 1:
            raise ValueError(f"limit must be >= 1, got {limit}")

        api_limit = limit * self._settings.search_overfetch_factor
        params: dict[str, str | int] = {
            "title__icontains": query,
            "limit": api_limit,
            "format": "json",
        }
        if filter.api_param is not None:
            params["type"] = filter.api_param

        url = f"{self._base_url}{DOCUMENT_API_PATH}"
        response = await self._get(url, params=params, what="Search request")

        try:
            payload = _SearchResponse.model_validate_json(response.content)
        except ValidationError as e:
            raise RemoteError(
                f"Failed to parse search response from {response.request.url}: {e}",
                url=str(response.request.url),
                status_code=response.status_code,
            ) from e

        documents = [
            self._convert_api_document(record)
            for record in payload.objects
            if is_rfc_or_draft(record.name)
        ][:limit]

        logger.debug(
            "Search %r returned %d/%d records (filter=%s)",
            query, len(documents), len(payload.objects), filter.value,
        )

        return SearchResult(
            documents=documents,
            has_more=payload.meta.next is not None or len(documents) == limit,
            total_count=payload.meta.total_count,
            query=query,
            filter=filter,
        )

    async def get_document(self, name: str) -> Document:
        """Fetch a single document record by canonical name (e.g. "rfc9000").

        Raises:
            NetworkError: If the request could not be sent.
            RemoteError: If the document is unknown or the body is malformed.
        """
        url = f"{self._base_url}{DOCUMENT_API_PATH}{name}/"
        response = await self._get(url, params={"format": "json"}, what="Document lookup")
        try:
            record = _ApiDocument.model_validate_json(response.content)
        except ValidationError as e:
            raise RemoteError(
                f"Failed to parse document response for {name}: {e}",
                url=url,
                status_code=response.status_code,
            ) from e
        return self._convert_api_document(record)

    async def _get(
        self, url: str, params: dict[str, str | int], what: str
    ) -> httpx.Response:
        try:
            response = await self._client.get(url, params=params)
        except httpx.RequestError as e:
            raise NetworkError(url, e) from e

        if not response.is_success:
            raise RemoteError(
                f"{what} to {response.request.url} failed: HTTP {response.status_code}",
                url=str(response.request.url),
                status_code=response.status_code,
            )
        return response

    @staticmethod
    def _convert_api_document(record: _ApiDocument) -> Document:
        group = record.group if record.group and not record.group.startswith("/") else None
        return Document(
            name=record.name,
            title=record.title,
            doc_type=parse_doc_type(record.name),
            abstract_text=record.abstract,
            pages=record.pages,
            published=parse_timestamp(record.time),
            status=record.std_level,
            authors=record.authors,
            stream=record.stream,
            working_group=group,
        )


def is_rfc_or_draft(name: str) -> bool:
    """Whether an index record name is an RFC or an Internet-Draft."""
    return name.startswith("rfc") or name.startswith("draft-")


def parse_doc_type(name: str) -> Rfc | Draft:
    """Identifier for an index record name: rfc<digits> is an RFC, anything else a draft."""
    if name.startswith("rfc"):
        identifier = parse_identifier(name)
        if isinstance(identifier, Rfc):
            return identifier
    return Draft(name)


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an RFC 3339 timestamp into UTC. Malformed values give None.

    Only full "date T time" forms are accepted. Timestamps without an
    offset are taken as UTC.
    """
    if not value:
        return None
    match = _TIMESTAMP_RE.fullmatch(value.strip())
    if match is None:
        logger.debug("Ignoring malformed timestamp %r", value)
        return None

    date, clock, fraction, offset = match.groups()
    if fraction:
        fraction = fraction[:7].ljust(7, "0")
    if offset in ("Z", "z"):
        offset = "+00:00"
    try:
        parsed = datetime.fromisoformat(f"{date}T{clock}{fraction or ''}{offset or ''}")
    except ValueError:
        logger.debug("Ignoring malformed timestamp %r", value)
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)
