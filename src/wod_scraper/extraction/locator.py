"""
Content location strategies for the WOD page.

The site's markup is unstable: container classes carry a build hash
after a stable semantic prefix, and older posts use a plain heading
followed by paragraphs. Each strategy is an independent signal; the
locator tries them in priority order and keeps the first whose text
clears the minimum length.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from bs4 import BeautifulSoup, PageElement, Tag

from wod_scraper.extraction.html_tree import (
    class_starts_with,
    find_first,
    following_siblings_until,
    is_heading,
    is_section_boundary,
    tag_named,
)
from wod_scraper.extraction.markdown import MarkdownConverter
from wod_scraper.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_CLASS_PREFIX = "_workout-of-the-day-content"
DEFAULT_HEADING_TEXT = "workout of the day"
DEFAULT_MIN_CONTENT_LENGTH = 20


class ExtractionStrategy(ABC):
    """
    A named rule locating the WOD fragment in a parsed document.

    Strategies only read the document; they never modify it.
    """

    name: str = "strategy"

    @abstractmethod
    def locate(self, soup: BeautifulSoup) -> list[PageElement] | None:
        """
        Find the candidate fragment.

        Args:
            soup: Parsed, pre-cleaned document

        Returns:
            Fragment nodes in document order, or None if the strategy's
            anchor is not on the page
        """


class PrefixedClassStrategy(ExtractionStrategy):
    """
    Article inside the first element whose class starts with a prefix.

    Matches the class attribute value by prefix, like the CSS selector
    `[class^="..."]`, so the build hash that follows the prefix does not
    matter.
    """

    name = "prefixed-class"

    def __init__(self, class_prefix: str = DEFAULT_CLASS_PREFIX) -> None:
        self.class_prefix = class_prefix

    def locate(self, soup: BeautifulSoup) -> list[PageElement] | None:
        container = find_first(soup, class_starts_with(self.class_prefix))
        if container is None:
            logger.info(
                f"No element with class prefix '{self.class_prefix}' found")
            return None

        article = find_first(container, tag_named("article"))
        if article is None:
            logger.warning(
                f"Element with class prefix '{self.class_prefix}' found, "
                "but no <article> inside it"
            )
            return None

        if not article.contents:
            logger.warning("Found <article> in WOD container, but it is empty")
            return None

        logger.info(
            f"Found <article> in WOD container ({len(article.contents)} child nodes)")
        return list(article.contents)


class HeadingSiblingStrategy(ExtractionStrategy):
    """
    Content following a "Workout of the Day" heading.

    Collects the heading's following siblings until the next h1-h3, an
    <hr>, or the comments section.
    """

    name = "heading-siblings"

    def __init__(self, heading_text: str = DEFAULT_HEADING_TEXT) -> None:
        self.heading_text = heading_text.strip().lower()

    def _is_wod_heading(self, element: Tag) -> bool:
        return (
            is_heading(element)
            and element.get_text().strip().lower() == self.heading_text
        )

    def locate(self, soup: BeautifulSoup) -> list[PageElement] | None:
        heading = find_first(soup, self._is_wod_heading)
        if heading is None:
            logger.info(f"Heading '{self.heading_text}' not found")
            return None

        # the run keeps bare text nodes too, not only elements
        run = following_siblings_until(heading, is_section_boundary)
        if not run:
            logger.warning(
                f"Heading '{self.heading_text}' found, but nothing follows it")
            return None

        logger.info(f"Found {len(run)} node(s) after the WOD heading")
        return run


@dataclass(frozen=True)
class LocatedContent:
    """Normalized text and the strategy that produced it."""

    strategy: str
    text: str


class ContentLocator:
    """
    Tries extraction strategies in order; first acceptable result wins.

    A result is acceptable when its normalized text is longer than
    `min_content_length`. This rejects anchors that match structurally
    but wrap nothing, like empty wrapper divs.

    Example:
        >>> locator = ContentLocator.default()
        >>> located = locator.locate(soup)
        >>> if located:
        ...     print(located.strategy, located.text)
    """

    def __init__(
        self,
        strategies: list[ExtractionStrategy],
        converter: MarkdownConverter | None = None,
        min_content_length: int = DEFAULT_MIN_CONTENT_LENGTH,
    ) -> None:
        self.strategies = strategies
        self.converter = converter or MarkdownConverter()
        self.min_content_length = min_content_length

    @classmethod
    def default(
        cls,
        class_prefix: str = DEFAULT_CLASS_PREFIX,
        heading_text: str = DEFAULT_HEADING_TEXT,
        min_content_length: int = DEFAULT_MIN_CONTENT_LENGTH,
        max_depth: int = 256,
    ) -> "ContentLocator":
        """Primary class-prefix strategy, then the heading fallback."""
        return cls(
            strategies=[
                PrefixedClassStrategy(class_prefix),
                HeadingSiblingStrategy(heading_text),
            ],
            converter=MarkdownConverter(max_depth=max_depth),
            min_content_length=min_content_length,
        )

    def locate(self, soup: BeautifulSoup) -> LocatedContent | None:
        """
        Run the strategies against a parsed document.

        Args:
            soup: Parsed, pre-cleaned document

        Returns:
            The first accepted content, or None if every strategy missed
        """
        for strategy in self.strategies:
            logger.info(f"Trying strategy '{strategy.name}'")
            nodes = strategy.locate(soup)
            if nodes is None:
                continue

            text = self.converter.convert(nodes)
            if len(text) > self.min_content_length:
                logger.info(
                    f"Strategy '{strategy.name}' extracted {len(text)} characters")
                return LocatedContent(strategy=strategy.name, text=text)

            logger.warning(
                f"Strategy '{strategy.name}' matched, but content was minimal "
                f"(length {len(text)})"
            )

        return None
