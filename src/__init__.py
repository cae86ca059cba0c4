# src/__init__.py — v1
"""rfccli: search, fetch and cache IETF RFCs and Internet-Drafts."""

from rfccli.version import __version__

__all__ = ["__version__"]
