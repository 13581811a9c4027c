"""
WOD page fetching.

Derives the page URL for a calendar date and downloads it with httpx.
Only transport failures, 429 and 5xx responses are retried.
"""

import time
from datetime import date

import httpx

from wod_scraper.config.settings import ScraperSettings
from wod_scraper.core.exceptions import FetchError, get_retry_delay, is_retryable
from wod_scraper.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_BASE_URL = "https://www.crossfit.com"


def generate_wod_url(day: date, base_url: str = DEFAULT_BASE_URL) -> str:
    """
    URL of the WOD page for a date.

    The site uses two-digit year, month and day: 2025-01-06 -> /250106.

    Args:
        day: Calendar date of the workout
        base_url: Site root without trailing slash

    Returns:
        Page URL
    """
    url = f"{base_url.rstrip('/')}/{day:%y%m%d}"
    logger.debug(f"Generated WOD URL for {day.isoformat()}: {url}")
    return url


class WodPageFetcher:
    """
    Downloads WOD pages.

    Example:
        >>> with WodPageFetcher.from_settings(settings.scraper) as fetcher:
        ...     html = fetcher.fetch_for_date(date(2025, 1, 6))
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float = 30.0,
        user_agent: str | None = None,
        max_retries: int = 3,
        retry_delay_seconds: float = 5.0,
        client: httpx.Client | None = None,
    ) -> None:
        """
        Initialize fetcher.

        Args:
            base_url: Site root
            timeout_seconds: Request timeout
            user_agent: User agent header
            max_retries: Extra attempts after a retryable failure
            retry_delay_seconds: Wait between attempts
            client: Preconfigured client (tests pass one with a mock transport)
        """
        self.base_url = base_url.rstrip("/")
        self.max_retries = max_retries
        self.retry_delay_seconds = retry_delay_seconds

        headers = {"User-Agent": user_agent} if user_agent else {}
        self._owns_client = client is None
        self._client = client or httpx.Client(
            timeout=timeout_seconds,
            headers=headers,
            follow_redirects=True,
        )

    @classmethod
    def from_settings(cls, settings: ScraperSettings) -> "WodPageFetcher":
        """Create a fetcher from scraper settings."""
        return cls(
            base_url=settings.base_url,
            timeout_seconds=settings.timeout_seconds,
            user_agent=settings.user_agent,
            max_retries=settings.max_retries,
            retry_delay_seconds=settings.retry_delay_seconds,
        )

    def url_for(self, day: date) -> str:
        """URL of the WOD page for a date."""
        return generate_wod_url(day, self.base_url)

    def fetch(self, url: str) -> str:
        """
        Fetch a page, retrying retryable failures.

        Args:
            url: Page URL

        Returns:
            Response body as text

        Raises:
            FetchError: On a non-retryable failure or when retries run out
        """
        attempt = 0
        while True:
            try:
                return self._fetch_once(url)
            except FetchError as e:
                if not is_retryable(e) or attempt >= self.max_retries:
                    raise
                attempt += 1
                delay = get_retry_delay(e, self.retry_delay_seconds)
                logger.warning(
                    f"Fetch of {url} failed ({e}); retry {attempt}/{self.max_retries} "
                    f"in {delay:.1f}s"
                )
                time.sleep(delay)

    def fetch_for_date(self, day: date) -> str:
        """Fetch the WOD page for a date."""
        return self.fetch(self.url_for(day))

    def _fetch_once(self, url: str) -> str:
        logger.info(f"Fetching WOD page: {url}")
        try:
            response = self._client.get(url)
        except httpx.HTTPError as e:
            logger.error(f"Error fetching WOD page: {url}. Error: {e}")
            raise FetchError(f"Request failed: {e}", url=url) from e

        if not response.is_success:
            logger.error(
                f"Failed to fetch WOD page: {url}. Status: {response.status_code}")
            raise FetchError(
                f"HTTP error {response.status_code}",
                url=url,
                status_code=response.status_code,
                retry_after=_parse_retry_after(response),
            )

        html = response.text
        logger.info(
            f"Fetched WOD page: {url}. Status: {response.status_code}. "
            f"Content length: {len(html)}"
        )
        return html

    def close(self) -> None:
        """Close the underlying client if this fetcher created it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "WodPageFetcher":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def _parse_retry_after(response: httpx.Response) -> float | None:
    value = response.headers.get("Retry-After")
    if value is None:
        return None
    try:
        return max(0.0, float(value))
    except ValueError:
        return None
