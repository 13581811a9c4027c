"""
Scraper module for the WOD scraper.

Derives WOD page URLs and fetches them over HTTP.
"""

from wod_scraper.scraper.fetcher import (
    WodPageFetcher,
    generate_wod_url,
)

__all__ = [
    "WodPageFetcher",
    "generate_wod_url",
]
