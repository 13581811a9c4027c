"""
HTML pre-cleaning, parsing and tree-walk helpers.

Pre-cleaning is a text substitution pass that removes <script>, <style>
and comment spans before parsing. Everything else in the document is
left byte-for-byte intact. Tree queries are plain predicate walks over
the parsed tree so strategies do not depend on a selector engine.
"""

import re
from typing import Callable, Iterator

from bs4 import BeautifulSoup, NavigableString, PageElement, Tag
from bs4.element import PreformattedString
from bs4.builder import ParserRejectedMarkup

from wod_scraper.utils.logging import get_logger

logger = get_logger(__name__)

SCRIPT_PATTERN = re.compile(
    r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)
STYLE_PATTERN = re.compile(
    r"<style\b[^<]*(?:(?!</style>)<[^<]*)*</style>", re.IGNORECASE)
COMMENT_PATTERN = re.compile(r"<!--[\s\S]*?-->")

HEADING_TAGS = frozenset({"h1", "h2", "h3"})

# id/class names used by the site (and its comment widgets) for the
# discussion area that follows the workout
COMMENT_SECTION_NAMES = frozenset({
    "comments",
    "comments-area",
    "fyre",
    "comments-section",
    "post-comments",
})

ElementPredicate = Callable[[Tag], bool]


def preclean_html(html: str) -> str:
    """
    Remove script, style and comment spans from raw HTML.

    Args:
        html: Raw HTML document

    Returns:
        HTML with those spans removed and nothing else changed
    """
    cleaned = SCRIPT_PATTERN.sub("", html)
    cleaned = STYLE_PATTERN.sub("", cleaned)
    cleaned = COMMENT_PATTERN.sub("", cleaned)

    if html and not cleaned and html.strip() and not COMMENT_PATTERN.fullmatch(html):
        logger.warning(
            "Pre-cleaning removed all HTML content; the original was not "
            "only comments or whitespace"
        )

    return cleaned


def parse_html(html: str) -> BeautifulSoup | None:
    """
    Parse HTML leniently with the HTML5 tree-construction rules.

    Unclosed <p> and <li> elements are closed where a browser would
    close them, and the result is always wrapped in html, head and body.

    Returns:
        Parsed document, or None if the parser rejects the markup outright
    """
    try:
        return BeautifulSoup(html, "html5lib")
    except ParserRejectedMarkup as e:
        logger.warning(f"HTML parser rejected document: {e}")
        return None


def iter_elements(root: Tag) -> Iterator[Tag]:
    """Yield every element below `root` in document order."""
    for node in root.descendants:
        if isinstance(node, Tag):
            yield node


def find_first(root: Tag, predicate: ElementPredicate) -> Tag | None:
    """First element below `root` matching `predicate`, or None."""
    for element in iter_elements(root):
        if predicate(element):
            return element
    return None


def find_all(root: Tag, predicate: ElementPredicate) -> list[Tag]:
    """All elements below `root` matching `predicate`, in document order."""
    return [element for element in iter_elements(root) if predicate(element)]


def class_attribute(element: Tag) -> str:
    """
    The element's class attribute as written in the source.

    BeautifulSoup splits class into a token list; joining restores the
    attribute value minus surrounding whitespace.
    """
    value = element.get("class")
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return " ".join(value)


def class_starts_with(prefix: str) -> ElementPredicate:
    """Predicate: the class attribute value starts with `prefix`."""
    def predicate(element: Tag) -> bool:
        return class_attribute(element).startswith(prefix)
    return predicate


def tag_named(*names: str) -> ElementPredicate:
    """Predicate: the element's tag is one of `names`."""
    wanted = frozenset(name.lower() for name in names)

    def predicate(element: Tag) -> bool:
        return element.name in wanted
    return predicate


def is_heading(element: Tag) -> bool:
    """h1 to h3."""
    return element.name in HEADING_TAGS


def is_comment_section(element: Tag) -> bool:
    """Whether the element is the discussion area below the post."""
    if element.name in COMMENT_SECTION_NAMES:
        return True

    element_id = element.get("id")
    if isinstance(element_id, str) and element_id in COMMENT_SECTION_NAMES:
        return True

    classes = class_attribute(element).split()
    return any(name in COMMENT_SECTION_NAMES for name in classes)


def is_section_boundary(element: Tag) -> bool:
    """Where a heading-anchored run of content ends."""
    return is_heading(element) or element.name == "hr" or is_comment_section(element)


def following_siblings_until(
    start: Tag,
    stop: ElementPredicate,
) -> list[PageElement]:
    """
    Collect the siblings after `start` up to, not including, the first
    element matching `stop`.

    Walks the parent's child list from the index just after `start`.
    Bare text nodes are kept alongside elements, so loose text between
    blocks stays in the run; other strings (doctype, CDATA) are skipped.

    Args:
        start: Anchor element
        stop: Predicate ending the run

    Returns:
        Sibling nodes in document order (empty if `start` has no parent)
    """
    parent = start.parent
    if parent is None:
        return []

    siblings = parent.contents
    # identity, not equality: bs4 compares tags structurally
    index = next(i for i, child in enumerate(siblings) if child is start)

    run: list[PageElement] = []
    for node in siblings[index + 1:]:
        if isinstance(node, Tag):
            if stop(node):
                break
            run.append(node)
        elif isinstance(node, NavigableString) and not isinstance(node, PreformattedString):
            run.append(node)

    return run
