"""
Tests for scraper module.

Tests WOD URL generation and page fetching with retries.
"""

from datetime import date

import httpx
import pytest

from wod_scraper.config import ScraperSettings
from wod_scraper.core.exceptions import FetchError
from wod_scraper.scraper import WodPageFetcher, generate_wod_url


class TestGenerateWodUrl:
    """Tests for URL derivation."""

    def test_two_digit_components(self):
        """Year, month and day should be two digits each."""
        assert generate_wod_url(date(2025, 1, 6)) == "https://www.crossfit.com/250106"

    def test_end_of_year(self):
        """December dates should format without separators."""
        assert generate_wod_url(date(2024, 12, 31)) == "https://www.crossfit.com/241231"

    def test_custom_base_url_trailing_slash(self):
        """A trailing slash on the base URL should not double up."""
        url = generate_wod_url(date(2025, 3, 9), "http://localhost:8000/")

        assert url == "http://localhost:8000/250309"


class TestWodPageFetcher:
    """Tests for fetching with retries."""

    def test_fetch_success(self, make_fetcher):
        """A 200 response body should be returned."""
        fetcher = make_fetcher(lambda request: httpx.Response(200, text="<html>ok</html>"))

        assert fetcher.fetch("https://www.crossfit.com/250106") == "<html>ok</html>"

    def test_fetch_for_date_requests_dated_path(self, make_fetcher):
        """fetch_for_date should request the yymmdd path."""
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url.path)
            return httpx.Response(200, text="page")

        fetcher = make_fetcher(handler)
        fetcher.fetch_for_date(date(2025, 1, 6))

        assert seen == ["/250106"]

    def test_not_found_not_retried(self, make_fetcher):
        """A 404 should fail immediately."""
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(404)

        fetcher = make_fetcher(handler, max_retries=3)

        with pytest.raises(FetchError) as exc_info:
            fetcher.fetch("https://www.crossfit.com/250106")

        assert exc_info.value.status_code == 404
        assert not exc_info.value.retryable
        assert len(calls) == 1

    def test_server_error_retried_then_succeeds(self, make_fetcher):
        """A 503 followed by a 200 should succeed on retry."""
        responses = [httpx.Response(503), httpx.Response(200, text="recovered")]

        fetcher = make_fetcher(lambda request: responses.pop(0), max_retries=2)

        assert fetcher.fetch("https://www.crossfit.com/250106") == "recovered"
        assert responses == []

    def test_retries_exhausted(self, make_fetcher):
        """Persistent 5xx should raise after max_retries extra attempts."""
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(500)

        fetcher = make_fetcher(handler, max_retries=2)

        with pytest.raises(FetchError) as exc_info:
            fetcher.fetch("https://www.crossfit.com/250106")

        assert exc_info.value.status_code == 500
        assert len(calls) == 3

    def test_rate_limited_with_retry_after(self, make_fetcher):
        """429 should be retried, honoring Retry-After."""
        responses = [
            httpx.Response(429, headers={"Retry-After": "0"}),
            httpx.Response(200, text="ok"),
        ]

        fetcher = make_fetcher(lambda request: responses.pop(0), max_retries=1)

        assert fetcher.fetch("https://www.crossfit.com/250106") == "ok"

    def test_transport_error_wrapped(self, make_fetcher):
        """Connection failures should become retryable FetchErrors."""
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        fetcher = make_fetcher(handler, max_retries=0)

        with pytest.raises(FetchError) as exc_info:
            fetcher.fetch("https://www.crossfit.com/250106")

        assert exc_info.value.status_code is None
        assert exc_info.value.retryable
        assert exc_info.value.url == "https://www.crossfit.com/250106"

    def test_url_for_uses_base_url(self, make_fetcher):
        """url_for should use the fetcher's base URL."""
        fetcher = make_fetcher(
            lambda request: httpx.Response(200), base_url="http://mirror.test/")

        assert fetcher.url_for(date(2025, 1, 6)) == "http://mirror.test/250106"

    def test_from_settings(self):
        """Settings should configure the fetcher."""
        settings = ScraperSettings(
            base_url="https://example.com/", max_retries=5, retry_delay_seconds=1.5)

        with WodPageFetcher.from_settings(settings) as fetcher:
            assert fetcher.base_url == "https://example.com"
            assert fetcher.max_retries == 5
            assert fetcher.retry_delay_seconds == 1.5
