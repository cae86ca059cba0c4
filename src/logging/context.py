# src/logging/context.py — v2
"""Contextual logging support: attach the running command and document to log records."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Set once per CLI invocation, and per document while it is being fetched.
_command: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "command", default=None
)
_document: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "document", default=None
)


@dataclass
class LogContext:
    """Snapshot of current logging context."""

    command: str | None = None
    document: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(command=_command.get(), document=_document.get())


def set_command_context(command: str) -> None:
    _command.set(command)


def set_document_context(document: str | None) -> None:
    """Set the document currently being processed (canonical name)."""
    _document.set(document)


def clear_context() -> None:
    """Reset all context variables."""
    _command.set(None)
    _document.set(None)
