# tests/conftest.py — v2
"""Shared test fixtures for all unit and integration tests.

Provides a temporary cache store, sample index records and helpers to build
httpx clients on top of httpx.MockTransport. No test touches the network.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

from rfccli.cache.document_store import DocumentCacheStore
from rfccli.config.settings import Settings
from rfccli.core.models import Document, Draft, Rfc

Handler = Callable[[httpx.Request], httpx.Response]


# === FIXTURES: Settings / cache ===


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings isolated from the environment and the user's cache."""
    return Settings(_env_file=None, cache_dir=tmp_path / "rfc-cache")


@pytest.fixture
def cache_store(tmp_path: Path) -> DocumentCacheStore:
    """Empty cache store rooted in a temp directory."""
    return DocumentCacheStore(tmp_path / "cache")


# === FIXTURES: Sample data ===


@pytest.fixture
def quic_document() -> Document:
    return Document(
        name="rfc9000",
        title="QUIC: A UDP-Based Multiplexed and Secure Transport",
        doc_type=Rfc(9000),
        pages=151,
        authors=["J. Iyengar", "M. Thomson"],
    )


@pytest.fixture
def quic_draft() -> Draft:
    return Draft("draft-ietf-quic-transport-34")


def api_record(name: str, title: str | None = None, **extra: Any) -> dict[str, Any]:
    """Index record as served by /api/v1/doc/document/."""
    record: dict[str, Any] = {
        "name": name,
        "title": title or f"Title of {name}",
        "abstract": None,
        "pages": None,
        "time": None,
        "std_level": None,
        "stream": None,
        "authors": [],
    }
    record.update(extra)
    return record


def search_payload(
    records: list[dict[str, Any]], next_url: str | None = None, total_count: int | None = None
) -> dict[str, Any]:
    meta: dict[str, Any] = {"next": next_url}
    if total_count is not None:
        meta["total_count"] = total_count
    return {"meta": meta, "objects": records}


# === FIXTURES: HTTP mocking ===


def json_response(payload: Any, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, content=json.dumps(payload).encode("utf-8"))


def mock_http_client(handler: Handler) -> httpx.AsyncClient:
    """Async client whose requests are answered by `handler`."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class RecordingHandler:
    """MockTransport handler that serves canned responses by URL path and records requests."""

    def __init__(self, routes: dict[str, httpx.Response | Exception] | None = None) -> None:
        self.routes = dict(routes or {})
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        answer = self.routes.get(request.url.path)
        if answer is None:
            return httpx.Response(404, text="not found")
        if isinstance(answer, Exception):
            raise answer
        return answer

    @property
    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]
