# src/api/http.py — v1
"""Outbound HTTP client construction shared by the index and document fetchers."""

from __future__ import annotations

import httpx

from rfccli.config.settings import Settings
from rfccli.version import __version__

USER_AGENT = f"rfccli/{__version__}"


def build_http_client(
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create the async HTTP client used for all remote calls.

    Args:
        settings: Application settings (timeout). Defaults to Settings().
        transport: Optional transport override, e.g. httpx.MockTransport in tests.
    """
    settings = settings or Settings()
    return httpx.AsyncClient(
        timeout=settings.http_timeout_s,
        headers={"User-Agent": USER_AGENT},
        follow_redirects=True,
        transport=transport,
    )
