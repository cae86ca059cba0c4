# src/cache/layout.py — v2
"""Cache directory structure definition.

    <root>/documents/<canonical_name>.html
    <root>/documents/<canonical_name>.txt
    <root>/documents/<canonical_name>.meta
"""

from __future__ import annotations

from pathlib import Path

import platformdirs

from rfccli.core.models import Draft, Format, Rfc

APP_NAME = "rfc"
DOCUMENTS_DIR = "documents"
METADATA_SUFFIX = ".meta"


def default_cache_dir() -> Path:
    """Platform cache directory for rfccli (e.g. ~/.cache/rfc on Linux)."""
    location = platformdirs.user_cache_dir(APP_NAME)
    if location:
        return Path(location)
    return Path.home() / ".cache" / APP_NAME


def documents_dir(root: Path) -> Path:
    """Return the documents/ directory under a cache root."""
    return root / DOCUMENTS_DIR


def file_stem(identifier: Rfc | Draft) -> str:
    """File name stem for an identifier, with path separators replaced."""
    return identifier.canonical_name.replace("/", "_").replace("\\", "_")


def document_path(root: Path, identifier: Rfc | Draft, fmt: Format) -> Path:
    """Return the content file path for an identifier in a given format."""
    return documents_dir(root) / f"{file_stem(identifier)}.{fmt.extension}"


def metadata_path(root: Path, identifier: Rfc | Draft) -> Path:
    """Return the metadata sidecar path for an identifier."""
    return documents_dir(root) / f"{file_stem(identifier)}{METADATA_SUFFIX}"
