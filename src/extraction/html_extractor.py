# src/extraction/html_extractor.py — v1
"""HTML to plain text rendering using BeautifulSoup.

Block elements become paragraphs wrapped to a fixed width, <pre> blocks are
kept verbatim (RFC HTML renderings carry most of their text in <pre>),
scripts and styles are dropped.
"""

from __future__ import annotations

import logging
import textwrap

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PreformattedString, Tag

logger = logging.getLogger(__name__)

DEFAULT_WRAP_WIDTH = 80

_DROP_TAGS = ["script", "style", "noscript", "template", "svg"]
_BLOCK_TAGS = {
    "address", "article", "aside", "blockquote", "body", "caption", "dd", "div",
    "dl", "dt", "figcaption", "figure", "footer", "form", "h1", "h2", "h3", "h4",
    "h5", "h6", "header", "hr", "html", "li", "main", "nav", "ol", "p", "section",
    "table", "tbody", "td", "tfoot", "th", "thead", "title", "tr", "ul",
}


class _TextRenderer:
    """Walks a parsed tree and collects rendered text blocks."""

    def __init__(self, width: int) -> None:
        self._width = width
        self._inline: list[str] = []
        self.blocks: list[str] = []

    def render(self, node: Tag) -> str:
        self._walk(node)
        self._flush()
        return "\n\n".join(self.blocks)

    def _walk(self, node: Tag) -> None:
        for child in node.children:
            if isinstance(child, PreformattedString):
                # comments, doctypes, CDATA
                continue
            if isinstance(child, NavigableString):
                self._inline.append(str(child))
                continue
            if not isinstance(child, Tag):
                continue

            if child.name == "pre":
                self._flush()
                pre_text = child.get_text().rstrip()
                if pre_text.strip():
                    self.blocks.append(pre_text.strip("\n"))
            elif child.name == "br":
                self._flush()
            elif child.name == "li":
                self._flush()
                self._inline.append("* ")
                self._walk(child)
                self._flush()
            elif child.name in _BLOCK_TAGS:
                self._flush()
                self._walk(child)
                self._flush()
            else:
                self._walk(child)

    def _flush(self) -> None:
        text = " ".join("".join(self._inline).split())
        self._inline.clear()
        if not text or text == "*":
            return
        self.blocks.append(
            textwrap.fill(
                text,
                width=self._width,
                break_long_words=False,
                break_on_hyphens=False,
            )
        )


def render_html(html: str, width: int = DEFAULT_WRAP_WIDTH) -> str:
    """Render HTML as plain text. Raises on parser failure."""
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(_DROP_TAGS):
        tag.decompose()
    root = soup.body or soup
    text = _TextRenderer(width).render(root)
    return f"{text}\n" if text else ""


def html_to_text(html: str, width: int = DEFAULT_WRAP_WIDTH) -> str:
    """Convert HTML to plain text wrapped at `width` columns.

    Never raises: if rendering fails the raw HTML is returned unchanged.
    """
    try:
        return render_html(html, width)
    except Exception as e:
        logger.warning("HTML to text conversion failed (%s), displaying raw HTML", e)
        return html
