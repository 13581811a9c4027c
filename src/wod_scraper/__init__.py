"""
WOD Scraper - Extracts the daily CrossFit.com workout.

This package fetches the Workout of the Day page, extracts and
normalizes the workout text, classifies rest days, structures the
workout with a language model and files it onto a programming track.
"""

__version__ = "0.1.0"

from wod_scraper.config import Settings, load_config
from wod_scraper.utils.logging import setup_logging, get_logger
from wod_scraper.core.exceptions import WodScraperError
from wod_scraper.extraction import WodDetails, WodExtractor, extract_wod_details

__author__ = "WOD Scraper Team"

__all__ = [
    "Settings",
    "load_config",
    "setup_logging",
    "get_logger",
    "WodScraperError",
    "WodDetails",
    "WodExtractor",
    "extract_wod_details",
]
