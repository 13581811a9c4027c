"""
Core module for the WOD scraper.

Contains the exception hierarchy used throughout the application.
"""

from wod_scraper.core.exceptions import (
    WodScraperError,
    RetryableError,
    ConfigurationError,
    FetchError,
    ExtractionError,
    LLMError,
    WorkoutGenerationError,
    APIAuthenticationError,
    StorageError,
    DatabaseError,
    RecordNotFoundError,
    DuplicateRecordError,
    is_retryable,
    get_retry_delay,
)

__all__ = [
    # Base
    "WodScraperError",
    "RetryableError",
    "ConfigurationError",
    # Fetch
    "FetchError",
    # Extraction
    "ExtractionError",
    # LLM
    "LLMError",
    "WorkoutGenerationError",
    "APIAuthenticationError",
    # Storage
    "StorageError",
    "DatabaseError",
    "RecordNotFoundError",
    "DuplicateRecordError",
    # Retry
    "is_retryable",
    "get_retry_delay",
]
