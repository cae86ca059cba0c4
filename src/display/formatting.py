# src/display/formatting.py — v1
"""Terminal formatting for search results, cache listings and sizes."""

from __future__ import annotations

from rfccli.cache.models import CachedDocument
from rfccli.core.models import SearchResult, truncate_title

LINE_WIDTH = 80


def _title_width(name_width: int) -> int:
    return max(LINE_WIDTH - name_width - 4, 3)


def format_size(size: int) -> str:
    """Human-readable byte size: B below 1 KB, then KB and MB with one decimal."""
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


def format_search_results(result: SearchResult) -> list[str]:
    """Lines for a search result page, names aligned in one column."""
    if result.is_empty():
        return [f"No results found for '{result.query}'"]

    shown = len(result.documents)
    if result.total_count is not None:
        if result.has_more:
            header = f"Showing {shown} of {result.total_count} results (use -l to show more):"
        else:
            header = f"Found {result.total_count} results:"
    elif result.has_more:
        header = f"Showing {shown} results (more available, use -l to show more):"
    else:
        header = f"Found {shown} results:"

    name_width = max(len(doc.doc_type.canonical_name) for doc in result.documents)
    title_width = _title_width(name_width)

    lines = ["", header, ""]
    for doc in result.documents:
        name = doc.doc_type.canonical_name
        lines.append(f"{name:<{name_width}}  {truncate_title(doc.title, title_width)}")
    lines.extend(["", "Use 'rfc <document>' to read a document"])
    return lines


def format_cache_listing(cached: list[CachedDocument], wide: bool = False) -> list[str]:
    """Lines for --list-cache; titles are truncated unless `wide`."""
    if not cached:
        return ["Cache is empty"]

    name_width = max(len(entry.identifier.canonical_name) for entry in cached)
    title_width = None if wide else _title_width(name_width)

    lines = [f"Cached documents ({len(cached)}):", ""]
    missing = 0
    for entry in cached:
        name = entry.identifier.canonical_name
        if entry.metadata is not None:
            lines.append(f"{name:<{name_width}}  {truncate_title(entry.metadata.title, title_width)}")
        else:
            lines.append(f"{name:<{name_width}}  (title unavailable)")
            missing += 1

    if missing:
        plural = "" if missing == 1 else "s"
        lines.extend([
            "",
            f"({missing} document{plural} without title - re-cache with -r to fetch metadata)",
        ])
    return lines
