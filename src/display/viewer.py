# src/display/viewer.py — v1
"""Open document text in the user's pager or editor.

Without an explicit program, $EDITOR is used, then $PAGER; if neither is
set nothing is opened. Pagers get the text on stdin, editors get the path
of a temporary file.
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
import tempfile
from collections.abc import Mapping
from pathlib import Path

from rfccli.core.errors import RfcCliError

logger = logging.getLogger(__name__)


class ViewerError(RfcCliError):
    """The viewer could not be started or exited with an error."""


def resolve_viewer(
    open_with: str | None = None, environ: Mapping[str, str] | None = None
) -> str | None:
    """Program to open documents with: explicit choice, then $EDITOR, then $PAGER."""
    if open_with:
        return open_with
    env = os.environ if environ is None else environ
    return env.get("EDITOR") or env.get("PAGER") or None


def is_pager(viewer: str) -> bool:
    """Whether a program reads the document from stdin rather than a file."""
    return (
        viewer in ("less", "more", "most")
        or "less" in viewer
        or "more" in viewer
        or viewer.endswith("pager")
    )


def open_in_viewer(text: str, open_with: str | None = None) -> bool:
    """Show text in a viewer. Returns False when no viewer is configured.

    Raises:
        ViewerError: If the program cannot be started or an editor fails.
    """
    viewer = resolve_viewer(open_with)
    if viewer is None:
        return False

    argv = shlex.split(viewer)
    if not argv:
        return False

    if is_pager(viewer):
        try:
            subprocess.run(argv, input=text, text=True, check=False)
        except OSError as e:
            raise ViewerError(f"Failed to start pager: {viewer}: {e}") from e
        return True

    with tempfile.NamedTemporaryFile(
        "w", suffix=".txt", encoding="utf-8", delete=False
    ) as handle:
        handle.write(text)
        temp_path = Path(handle.name)

    try:
        try:
            completed = subprocess.run([*argv, str(temp_path)], check=False)
        except OSError as e:
            raise ViewerError(f"Failed to start editor: {viewer}: {e}") from e
        if completed.returncode != 0:
            raise ViewerError(f"Editor exited with non-zero status {completed.returncode}")
    finally:
        temp_path.unlink(missing_ok=True)
    return True
