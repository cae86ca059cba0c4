# src/cache/models.py — v2
"""Cache domain models: CacheMetadata sidecar and CachedDocument listing row."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field

from rfccli.core.models import DocumentIdentifier


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CacheMetadata(BaseModel):
    """Metadata stored next to a cached document (<name>.meta)."""

    title: str
    cached_at: datetime = Field(default_factory=_utc_now)


class CachedDocument(BaseModel):
    """A cached document with its metadata, if that was cached too."""

    identifier: DocumentIdentifier
    metadata: CacheMetadata | None = None
