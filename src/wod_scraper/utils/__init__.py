"""
Utilities module for the WOD scraper.

Provides logging setup and date helpers.
"""

from wod_scraper.utils.logging import (
    setup_logging,
    get_logger,
    get_logger_with_context,
    reset_logging,
)
from wod_scraper.utils.dates import (
    current_date,
    current_date_string,
    parse_date,
    start_of_day,
    start_of_day_timestamp,
    to_unix_timestamp,
    now_timestamp,
)

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    "get_logger_with_context",
    "reset_logging",
    # Dates
    "current_date",
    "current_date_string",
    "parse_date",
    "start_of_day",
    "start_of_day_timestamp",
    "to_unix_timestamp",
    "now_timestamp",
]
