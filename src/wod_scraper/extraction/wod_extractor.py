"""
WOD extraction entry point.

Pre-cleans raw HTML, parses it, locates the workout with the ordered
strategies, normalizes it to text and classifies rest days. A page
without a workout is a normal outcome and is reported through the
return value, never raised.
"""

import re
from dataclasses import dataclass

from wod_scraper.config.settings import ExtractionSettings
from wod_scraper.extraction.html_tree import parse_html, preclean_html
from wod_scraper.extraction.locator import ContentLocator
from wod_scraper.utils.logging import get_logger

logger = get_logger(__name__)

# exactly one whitespace character between the words; "rest  day" does
# not match
REST_DAY_PATTERN = re.compile(r"rest\sday", re.IGNORECASE)


@dataclass(frozen=True)
class WodDetails:
    """
    Result of one extraction.

    `wod_text` is None when no strategy found content. `is_rest_day`
    can only be True when there is text to classify.
    """

    wod_text: str | None
    is_rest_day: bool = False

    def __post_init__(self) -> None:
        if self.wod_text is None and self.is_rest_day:
            raise ValueError("is_rest_day requires wod_text")

    @property
    def found(self) -> bool:
        """Whether any workout text was extracted."""
        return self.wod_text is not None

    def to_dict(self) -> dict:
        """Serialize with the field names downstream consumers expect."""
        return {
            "wodText": self.wod_text,
            "isRestDay": self.is_rest_day,
        }


def is_rest_day(text: str | None) -> bool:
    """Whether the text declares a rest day."""
    if text is None:
        return False
    return REST_DAY_PATTERN.search(text) is not None


class WodExtractor:
    """
    Extracts WodDetails from a WOD page.

    Example:
        >>> extractor = WodExtractor()
        >>> details = extractor.extract(html)
        >>> if details.is_rest_day:
        ...     print("Rest day")
        >>> elif details.wod_text:
        ...     print(details.wod_text)
    """

    def __init__(self, locator: ContentLocator | None = None) -> None:
        self.locator = locator or ContentLocator.default()

    @classmethod
    def from_settings(cls, settings: ExtractionSettings) -> "WodExtractor":
        """Create an extractor from extraction settings."""
        return cls(
            locator=ContentLocator.default(
                class_prefix=settings.class_prefix,
                heading_text=settings.heading_text,
                min_content_length=settings.min_content_length,
                max_depth=settings.max_depth,
            )
        )

    def extract(self, html_content: str | bytes) -> WodDetails:
        """
        Extract the workout from a full HTML document.

        Args:
            html_content: Page HTML; bytes are decoded as UTF-8

        Returns:
            WodDetails; wod_text is None if nothing usable was found
        """
        if isinstance(html_content, bytes):
            html_content = html_content.decode("utf-8", errors="replace")

        logger.info(f"Original HTML content length: {len(html_content)}")
        cleaned = preclean_html(html_content)
        logger.info(
            f"HTML content length after removing script/style/comments: {len(cleaned)}")

        soup = parse_html(cleaned)
        if soup is None:
            logger.warning("Could not parse HTML; no WOD extracted")
            return WodDetails(wod_text=None, is_rest_day=False)

        located = self.locator.locate(soup)
        wod_text = located.text if located else None
        rest_day = is_rest_day(wod_text)

        if rest_day:
            logger.info(f"Detected rest day. Text snippet: {wod_text[:100]}")
        elif wod_text:
            logger.info(
                f"Extracted WOD text with '{located.strategy}'. "
                f"Length: {len(wod_text)}. Rest day: false."
            )
        else:
            logger.warning("Could not extract WOD text after trying all strategies")

        return WodDetails(wod_text=wod_text, is_rest_day=rest_day)


def extract_wod_details(
    html_content: str | bytes,
    settings: ExtractionSettings | None = None,
) -> WodDetails:
    """
    Extract WodDetails from a WOD page.

    Args:
        html_content: Full HTML document
        settings: Extraction settings; defaults if None

    Returns:
        WodDetails for the page
    """
    extractor = WodExtractor.from_settings(settings or ExtractionSettings())
    return extractor.extract(html_content)
