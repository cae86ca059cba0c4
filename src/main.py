# src/main.py — v2
"""CLI entry point: view, fetch, search and cache maintenance.

Usage:
    rfc <document> [-o PROGRAM] [-r]
    rfc <document> -f
    rfc -s <query> [-d | -a] [-l N]
    rfc --list-cache [-w] | --clear-cache | --cache-info | --uncache <document>
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from rfccli.config.settings import Settings, load_settings
from rfccli.logging.context import set_command_context
from rfccli.logging.logger import setup_logging
from rfccli.version import __version__

if TYPE_CHECKING:
    from rfccli.cache.document_store import DocumentCacheStore
    from rfccli.pipeline.fetch_pipeline import FetchPipeline

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    command = _select_command(args)
    if command is None:
        parser.print_help()
        return 1

    try:
        settings = load_settings()
    except Exception as exc:
        print(f"error: invalid configuration: {exc}", file=sys.stderr)
        return 1

    _setup_logging(args.verbose, settings)
    set_command_context(command)

    try:
        return asyncio.run(_COMMANDS[command](args, settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("%s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="rfc",
        description="Search, retrieve, and display IETF RFCs and drafts",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "document", nargs="?", default=None,
        help="RFC number or draft name to view",
    )
    parser.add_argument(
        "-s", "--search", metavar="QUERY", default=None,
        help="Search for documents by title",
    )
    parser.add_argument(
        "-o", "--open-with", metavar="PROGRAM", default=None,
        help="Program to open document with (default: $EDITOR, then $PAGER)",
    )
    parser.add_argument(
        "-f", "--fetch-only", action="store_true",
        help="Fetch the document, but do not open it (implies -r)",
    )
    parser.add_argument(
        "-r", "--refresh", action="store_true",
        help="Fetch from the network and refresh the cache before opening",
    )

    scope = parser.add_mutually_exclusive_group()
    scope.add_argument(
        "-d", "--drafts", action="store_true",
        help="Only show drafts (with -s)",
    )
    scope.add_argument(
        "-a", "--all", action="store_true",
        help="Show both RFCs and drafts (with -s)",
    )
    parser.add_argument(
        "-l", "--limit", type=_positive_int, default=None,
        help="Limit search results (with -s, default: 25)",
    )

    parser.add_argument(
        "--list-cache", action="store_true", help="List cached documents",
    )
    parser.add_argument(
        "--clear-cache", action="store_true", help="Clear all cached documents",
    )
    parser.add_argument(
        "--cache-info", action="store_true", help="Show cache info",
    )
    parser.add_argument(
        "--uncache", metavar="DOC", default=None,
        help="Remove a document from cache",
    )
    parser.add_argument(
        "-w", "--wide", action="store_true",
        help="Show full titles without truncation (with --list-cache)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )
    return parser


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1, got {value}")
    return number


def _select_command(args: argparse.Namespace) -> str | None:
    """Pick the command to run; cache operations win over search and view."""
    if args.list_cache:
        return "list-cache"
    if args.clear_cache:
        return "clear-cache"
    if args.cache_info:
        return "cache-info"
    if args.uncache is not None:
        return "uncache"
    if args.search is not None:
        return "search"
    if args.document is not None:
        return "fetch" if args.fetch_only else "view"
    return None


# --- Cache commands ---


def _open_cache(settings: Settings) -> DocumentCacheStore:
    from rfccli.cache.document_store import DocumentCacheStore

    return DocumentCacheStore(settings.resolved_cache_dir)


async def _cmd_list_cache(args: argparse.Namespace, settings: Settings) -> int:
    from rfccli.display.formatting import format_cache_listing

    cache = _open_cache(settings)
    for line in format_cache_listing(cache.list_with_metadata(), wide=args.wide):
        print(line)
    return 0


async def _cmd_clear_cache(args: argparse.Namespace, settings: Settings) -> int:
    cache = _open_cache(settings)
    cache.clear()
    print("Cache cleared")
    return 0


async def _cmd_cache_info(args: argparse.Namespace, settings: Settings) -> int:
    from rfccli.display.formatting import format_size

    cache = _open_cache(settings)
    print(f"Cache directory: {cache.cache_dir}")
    print(f"Cached documents: {len(cache.list())}")
    print(f"Total size: {format_size(cache.total_size())}")
    return 0


async def _cmd_uncache(args: argparse.Namespace, settings: Settings) -> int:
    from rfccli.core.models import resolve_identifier

    identifier = resolve_identifier(args.uncache)
    cache = _open_cache(settings)
    if cache.remove(identifier):
        print(f"Removed {identifier} from cache")
    else:
        print(f"{identifier} was not in cache")
    return 0


# --- Network commands ---


async def _cmd_search(args: argparse.Namespace, settings: Settings) -> int:
    from rfccli.api.datatracker import DataTrackerClient
    from rfccli.core.models import SearchFilter
    from rfccli.display.formatting import format_search_results

    if args.drafts:
        search_filter = SearchFilter.DRAFTS_ONLY
    elif args.all:
        search_filter = SearchFilter.BOTH
    else:
        search_filter = SearchFilter.RFCS_ONLY

    logger.info("Searching for '%s'...", args.search)
    async with DataTrackerClient(settings) as client:
        result = await client.search(args.search, search_filter, args.limit)

    for line in format_search_results(result):
        print(line)
    return 0


async def _cmd_fetch(args: argparse.Namespace, settings: Settings) -> int:
    from rfccli.core.models import resolve_identifier

    identifier = resolve_identifier(args.document)
    async with _open_pipeline(settings) as pipeline:
        await pipeline.fetch_and_cache(identifier)
    logger.info("Cached %s. Use 'rfc %s' to view.", identifier, identifier.canonical_name)
    return 0


async def _cmd_view(args: argparse.Namespace, settings: Settings) -> int:
    from rfccli.core.models import resolve_identifier
    from rfccli.display.viewer import open_in_viewer

    identifier = resolve_identifier(args.document)
    async with _open_pipeline(settings) as pipeline:
        text = await pipeline.resolve_for_view(identifier, force_fresh=args.refresh)

    if not open_in_viewer(text, args.open_with):
        sys.stdout.write(text)
    return 0


@asynccontextmanager
async def _open_pipeline(settings: Settings) -> AsyncIterator[FetchPipeline]:
    """Wire one HTTP client into a FetchPipeline for the duration of a command."""
    from rfccli.api.datatracker import DataTrackerClient
    from rfccli.api.fetcher import DocumentFetcher
    from rfccli.api.http import build_http_client
    from rfccli.pipeline.fetch_pipeline import FetchPipeline

    async with build_http_client(settings) as http:
        yield FetchPipeline(
            cache=_open_cache(settings),
            fetcher=DocumentFetcher(settings, http_client=http),
            index=DataTrackerClient(settings, http_client=http),
            wrap_width=settings.wrap_width,
        )


_COMMANDS = {
    "list-cache": _cmd_list_cache,
    "clear-cache": _cmd_clear_cache,
    "cache-info": _cmd_cache_info,
    "uncache": _cmd_uncache,
    "search": _cmd_search,
    "fetch": _cmd_fetch,
    "view": _cmd_view,
}


def _setup_logging(verbose: bool, settings: Settings) -> None:
    """Configure logging for CLI usage."""
    level = "DEBUG" if verbose else settings.log_level
    setup_logging(level=level, log_format=settings.log_format)


if __name__ == "__main__":
    sys.exit(main())
