"""
HTML fragment to Markdown-like text conversion.

Converts a located fragment into flat text that keeps paragraph breaks,
line breaks, emphasis and links. The output feeds both people reading
the workout and the model that structures it, so the rules are small
and predictable rather than CommonMark-complete.
"""

import re
from typing import Iterable

from bs4 import NavigableString, PageElement, Tag
from bs4.element import PreformattedString

from wod_scraper.extraction.html_tree import parse_html
from wod_scraper.utils.logging import get_logger

logger = get_logger(__name__)

EXCESS_NEWLINES_PATTERN = re.compile(r"\n{3,}")

DEFAULT_MAX_DEPTH = 256


class MarkdownConverter:
    """
    Recursive converter from parsed HTML nodes to text.

    Conversion rules:
    - text: copied as-is (trimming happens once, at the end)
    - <p>: children, then a blank line
    - <br>: newline
    - <strong>/<b>: **children**
    - <em>/<i>: *children*
    - <a>: [children](href)
    - anything else: children only
    - comments and other non-text strings: dropped

    Nesting deeper than `max_depth` is dropped instead of recursing.

    Example:
        >>> converter = MarkdownConverter()
        >>> converter.convert_html("<p>Hello <strong>world</strong><br>Next line</p>")
        'Hello **world**\\nNext line'
    """

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        self.max_depth = max_depth
        self._truncated = 0

    def convert_html(self, html: str | None) -> str:
        """
        Convert an HTML snippet.

        Args:
            html: Fragment markup; None or empty gives ""

        Returns:
            Normalized text
        """
        if not html:
            return ""

        document = parse_html(html)
        if document is None:
            return ""

        # depth counts from the fragment, not the implied html/body
        root = document.body or document
        return self.convert(root.contents)

    def convert(self, nodes: Iterable[PageElement]) -> str:
        """
        Convert an ordered run of nodes.

        Args:
            nodes: Sibling nodes in document order

        Returns:
            Normalized text with runs of blank lines collapsed and
            outer whitespace trimmed
        """
        self._truncated = 0
        text = "".join(self._convert_node(node, 0) for node in nodes)

        if self._truncated:
            logger.warning(
                f"Dropped {self._truncated} subtree(s) nested deeper than "
                f"{self.max_depth} levels"
            )

        return normalize_whitespace(text)

    def _convert_node(self, node: PageElement, depth: int) -> str:
        if isinstance(node, NavigableString):
            if isinstance(node, PreformattedString):
                return ""
            return str(node)

        if not isinstance(node, Tag):
            return ""

        if depth >= self.max_depth:
            self._truncated += 1
            return ""

        tag = node.name
        if tag == "br":
            return "\n"

        # one stack frame per nesting level
        parts = []
        for child in node.contents:
            parts.append(self._convert_node(child, depth + 1))
        inner = "".join(parts)

        if tag == "p":
            return inner + "\n\n"
        if tag in ("strong", "b"):
            return f"**{inner}**"
        if tag in ("em", "i"):
            return f"*{inner}*"
        if tag == "a":
            href = node.get("href") or ""
            return f"[{inner}]({href})"

        return inner


def normalize_whitespace(text: str) -> str:
    """Collapse 3+ newlines to a blank line and trim."""
    return EXCESS_NEWLINES_PATTERN.sub("\n\n", text).strip()


def html_to_markdown(html: str | None, max_depth: int = DEFAULT_MAX_DEPTH) -> str:
    """Convert an HTML snippet to normalized text."""
    return MarkdownConverter(max_depth=max_depth).convert_html(html)


def nodes_to_markdown(
    nodes: Iterable[PageElement],
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> str:
    """Convert already-parsed nodes to normalized text."""
    return MarkdownConverter(max_depth=max_depth).convert(nodes)
