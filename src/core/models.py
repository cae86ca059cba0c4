# src/core/models.py — v1
"""Shared Pydantic domain models used across modules.

Document identity (Rfc / Draft), content formats, index documents and
search results. No module redefines these types.
"""

from __future__ import annotations

import re
from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from rfccli.core.errors import DocumentParseError

DATATRACKER_BASE_URL = "https://datatracker.ietf.org"

# RFC numbers are unsigned 32-bit; anything larger does not parse.
RFC_NUMBER_MAX = 2**32 - 1

_DIGITS_RE = re.compile(r"[0-9]+")


# === DOCUMENT IDENTITY ===


class Rfc(BaseModel):
    """A published Request for Comments, identified by its number."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["rfc"] = "rfc"
    number: int = Field(ge=0, le=RFC_NUMBER_MAX)

    def __init__(self, number: int | None = None, /, **data: Any) -> None:
        if number is not None:
            data["number"] = number
        super().__init__(**data)

    @property
    def canonical_name(self) -> str:
        return f"rfc{self.number}"

    @property
    def display_name(self) -> str:
        return f"RFC {self.number}"

    def datatracker_url(self, base_url: str = DATATRACKER_BASE_URL) -> str:
        return f"{base_url.rstrip('/')}/doc/rfc{self.number}/"

    def __str__(self) -> str:
        return self.display_name


class Draft(BaseModel):
    """An Internet-Draft, identified by its full slug (e.g. draft-ietf-quic-transport-34)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["draft"] = "draft"
    name: str

    def __init__(self, name: str | None = None, /, **data: Any) -> None:
        if name is not None:
            data["name"] = name
        super().__init__(**data)

    @field_validator("name", mode="before")
    @classmethod
    def _normalize_name(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip().lower()
            if not value:
                raise ValueError("draft name must not be empty")
        return value

    @property
    def canonical_name(self) -> str:
        return self.name

    @property
    def display_name(self) -> str:
        return self.name

    def datatracker_url(self, base_url: str = DATATRACKER_BASE_URL) -> str:
        return f"{base_url.rstrip('/')}/doc/{self.name}/"

    def __str__(self) -> str:
        return self.display_name


DocumentIdentifier = Annotated[Union[Rfc, Draft], Field(discriminator="kind")]


def _parse_rfc_number(text: str) -> int | None:
    if not _DIGITS_RE.fullmatch(text):
        return None
    number = int(text)
    if number > RFC_NUMBER_MAX:
        return None
    return number


def parse_identifier(text: str) -> Rfc | Draft | None:
    """Parse free-form input into a document identifier.

    Handles "rfc9000", "RFC 9000", "9000" and draft names. Returns None when
    nothing matches; the caller decides the fallback (see resolve_identifier).
    """
    cleaned = text.strip().lower()

    if cleaned.startswith("rfc"):
        number = _parse_rfc_number(cleaned[3:].strip())
        if number is not None:
            return Rfc(number)

    number = _parse_rfc_number(cleaned)
    if number is not None:
        return Rfc(number)

    if cleaned.startswith("draft-") or "draft" in cleaned:
        return Draft(cleaned)

    return None


def resolve_identifier(text: str) -> Rfc | Draft:
    """Parse input, treating anything unrecognised as a bare draft name.

    "quic-transport" becomes Draft("draft-quic-transport").

    Raises:
        DocumentParseError: If the input is blank.
    """
    identifier = parse_identifier(text)
    if identifier is not None:
        return identifier

    cleaned = text.strip()
    if not cleaned:
        raise DocumentParseError("Document identifier must not be empty")
    if cleaned.lower().startswith("draft-"):
        return Draft(cleaned)
    return Draft(f"draft-{cleaned}")


# === CONTENT FORMATS ===


class Format(str, Enum):
    """Document content format as stored in the cache."""

    HTML = "html"
    TEXT = "text"

    @property
    def extension(self) -> str:
        return "html" if self is Format.HTML else "txt"


# === INDEX DOCUMENTS ===


class Document(BaseModel):
    """An IETF document (RFC or Internet-Draft) enriched with index metadata."""

    name: str
    title: str
    doc_type: DocumentIdentifier
    abstract_text: str | None = None
    pages: int | None = None
    published: datetime | None = None
    status: str | None = None
    authors: list[str] = Field(default_factory=list)
    stream: str | None = None
    working_group: str | None = None

    def short_title(self, max_len: int) -> str:
        """Title truncated to max_len characters, ending in "..." when cut."""
        return truncate_title(self.title, max_len)


def truncate_title(title: str, max_width: int | None) -> str:
    """Truncate to max_width characters with a trailing "...".

    None means no limit. Widths of 3 or less collapse to "...".
    """
    if max_width is None or len(title) <= max_width:
        return title
    return title[: max(max_width - 3, 0)] + "..."


# === SEARCH ===


class SearchFilter(str, Enum):
    """Which document types a search should return."""

    RFCS_ONLY = "rfcs"
    DRAFTS_ONLY = "drafts"
    BOTH = "both"

    @property
    def api_param(self) -> str | None:
        """Value for the index `type` parameter, None for no restriction."""
        if self is SearchFilter.RFCS_ONLY:
            return "rfc"
        if self is SearchFilter.DRAFTS_ONLY:
            return "draft"
        return None


class SearchResult(BaseModel):
    """One page of filtered search results."""

    documents: list[Document] = Field(default_factory=list)
    has_more: bool = False
    total_count: int | None = None
    query: str = ""
    filter: SearchFilter = SearchFilter.BOTH

    @classmethod
    def empty(cls, query: str, filter: SearchFilter) -> SearchResult:
        return cls(query=query, filter=filter)

    def is_empty(self) -> bool:
        return not self.documents

    def __len__(self) -> int:
        return len(self.documents)
