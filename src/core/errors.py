# src/core/errors.py — v1
"""Exception hierarchy shared by the cache, API and pipeline modules.

Cache read misses are never errors: stores return None for absent entries.
Everything below is raised for failures the caller must see.
"""

from __future__ import annotations


class RfcCliError(Exception):
    """Base class for all rfccli failures."""


class NetworkError(RfcCliError):
    """A request could not be sent or timed out before a response arrived."""

    def __init__(self, url: str, cause: Exception):
        self.url = url
        self.cause = cause
        super().__init__(f"Request to {url} failed: {cause}")


class RemoteError(RfcCliError):
    """The remote answered with a non-success status or an unusable body."""

    def __init__(self, message: str, url: str | None = None, status_code: int | None = None):
        self.url = url
        self.status_code = status_code
        super().__init__(message)


class CacheIOError(RfcCliError):
    """Filesystem failure while writing or deleting cache files."""

    def __init__(self, message: str, path: object | None = None):
        self.path = path
        super().__init__(message if path is None else f"{message}: {path}")


class DocumentParseError(RfcCliError, ValueError):
    """Input cannot be turned into a document identifier (blank input)."""
