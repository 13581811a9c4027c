"""
Extraction module for the WOD scraper.

Provides the HTML-to-workout pipeline:
- Pre-cleaning and lenient parsing
- Ordered content location strategies
- HTML to Markdown-like text conversion
- Rest day classification
"""

from wod_scraper.extraction.html_tree import (
    preclean_html,
    parse_html,
    find_first,
    find_all,
    following_siblings_until,
)
from wod_scraper.extraction.markdown import (
    MarkdownConverter,
    html_to_markdown,
    nodes_to_markdown,
)
from wod_scraper.extraction.locator import (
    ContentLocator,
    ExtractionStrategy,
    PrefixedClassStrategy,
    HeadingSiblingStrategy,
    LocatedContent,
)
from wod_scraper.extraction.wod_extractor import (
    WodDetails,
    WodExtractor,
    extract_wod_details,
    is_rest_day,
)

__all__ = [
    # Tree helpers
    "preclean_html",
    "parse_html",
    "find_first",
    "find_all",
    "following_siblings_until",
    # Conversion
    "MarkdownConverter",
    "html_to_markdown",
    "nodes_to_markdown",
    # Location
    "ContentLocator",
    "ExtractionStrategy",
    "PrefixedClassStrategy",
    "HeadingSiblingStrategy",
    "LocatedContent",
    # Extraction
    "WodDetails",
    "WodExtractor",
    "extract_wod_details",
    "is_rest_day",
]
