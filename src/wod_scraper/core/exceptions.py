"""
Exceptions raised by the WOD scraper.

Every error carries a human-readable `message` and a `details` dict
that is appended when the error is printed, so log lines and CLI
output show the URL, query or record involved.

    WodScraperError
    ├── ConfigurationError
    ├── RetryableError
    │   └── FetchError
    ├── ExtractionError
    ├── LLMError
    │   ├── WorkoutGenerationError
    │   └── APIAuthenticationError
    └── StorageError
        ├── DatabaseError
        ├── RecordNotFoundError
        └── DuplicateRecordError

A page without a workout is not an error: the extractor reports it
with `WodDetails.wod_text` set to None.
"""

from typing import Any


def _preview(text: str, limit: int) -> str:
    return text[:limit] + "..." if len(text) > limit else text


def _merge_details(details: dict[str, Any] | None, **values: Any) -> dict[str, Any]:
    """Copy of `details` with every non-empty keyword added."""
    merged = dict(details or {})
    merged.update({key: value for key, value in values.items() if value})
    return merged


class WodScraperError(Exception):
    """
    Base exception for all WOD scraper errors.

    Attributes:
        message: What went wrong
        details: Context such as the URL, query or record ID
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if not self.details:
            return self.message
        context = ", ".join(f"{key}={value!r}" for key, value in self.details.items())
        return f"{self.message} ({context})"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, details={self.details!r})"


class RetryableError(WodScraperError):
    """An error another attempt may get past, optionally after `retry_after` seconds."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        retry_after: float | None = None,
    ) -> None:
        super().__init__(message, details)
        self.retry_after = retry_after


class ConfigurationError(WodScraperError):
    """The YAML file or environment overrides produced invalid settings."""


class FetchError(RetryableError):
    """
    The WOD page could not be downloaded.

    `status_code` is None when the request never got a response
    (DNS, connect or read failures). Those, 429 and 5xx responses are
    retryable; other statuses such as 404 for an unpublished day are not.
    """

    def __init__(
        self,
        message: str,
        url: str | None = None,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
        retry_after: float | None = None,
    ) -> None:
        super().__init__(
            message,
            _merge_details(details, url=url, status_code=status_code),
            retry_after,
        )
        self.url = url
        self.status_code = status_code

    @property
    def retryable(self) -> bool:
        """Whether another attempt might succeed."""
        if self.status_code is None:
            return True
        return self.status_code == 429 or self.status_code >= 500


class ExtractionError(WodScraperError):
    """
    An HTML source could not be read.

    Raised by callers loading pages from disk; markup problems inside a
    page never raise.
    """

    def __init__(
        self,
        message: str,
        source: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, _merge_details(details, source=source))
        self.source = source


class LLMError(WodScraperError):
    """Base error for language model calls."""


class WorkoutGenerationError(LLMError):
    """
    The model did not produce a usable workout.

    Covers failed API calls, empty responses, non-JSON output and JSON
    that does not validate. The raw output, if any, is kept in
    `response_text` and previewed in `details`.
    """

    def __init__(
        self,
        message: str,
        response_text: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        preview = _preview(response_text, 100) if response_text else None
        super().__init__(message, _merge_details(details, response=preview))
        self.response_text = response_text


class APIAuthenticationError(LLMError):
    """The model API key is missing or rejected; retrying will not help."""


class StorageError(WodScraperError):
    """Base error for persisting workouts, tracks and schedules."""


class DatabaseError(StorageError):
    """A SQLite statement failed, including constraint violations."""

    def __init__(
        self,
        message: str,
        query: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        preview = _preview(query, 200) if query else None
        super().__init__(message, _merge_details(details, query=preview))
        self.query = query


class _RecordError(StorageError):
    def __init__(
        self,
        message: str,
        record_type: str,
        record_id: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = dict(details or {})
        details.update(record_type=record_type, record_id=record_id)
        super().__init__(message, details)
        self.record_type = record_type
        self.record_id = record_id


class RecordNotFoundError(_RecordError):
    """A referenced workout, track or track workout does not exist."""


class DuplicateRecordError(_RecordError):
    """A record with the requested ID already exists."""


def is_retryable(error: Exception) -> bool:
    """Whether retrying the operation that raised `error` makes sense."""
    if isinstance(error, FetchError):
        return error.retryable
    return isinstance(error, RetryableError)


def get_retry_delay(error: Exception, default: float = 5.0) -> float:
    """Seconds to wait before retrying: the error's Retry-After, else `default`."""
    if isinstance(error, RetryableError) and error.retry_after is not None:
        return error.retry_after
    return default
