"""
Shared pytest fixtures for WOD scraper tests.

Provides reusable fixtures for:
- Configuration and settings
- Database and programming service instances
- Sample WOD pages
- Fake HTTP transports and model clients
"""

import tempfile
from pathlib import Path
from types import SimpleNamespace
from typing import Callable, Generator

import httpx
import pytest

from wod_scraper.config import Settings, reset_settings
from wod_scraper.scraper import WodPageFetcher
from wod_scraper.storage import Database, ProgrammingService
from wod_scraper.utils.logging import reset_logging, setup_logging


@pytest.fixture(autouse=True)
def reset_global_state():
    """
    Reset logging and cached settings around each test.

    Logging is configured up front so handlers bind to pytest's
    captured stderr rather than a CLI runner's stream.
    """
    reset_logging()
    reset_settings()
    setup_logging(level="DEBUG")
    yield
    reset_logging()
    reset_settings()


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory that's cleaned up after the test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def test_settings(temp_dir: Path) -> Settings:
    """
    Provide test settings with temporary database path.

    Retries are immediate and the API LLM is disabled.
    """
    return Settings(
        scraper={"max_retries": 1, "retry_delay_seconds": 0.0},
        storage={"database_path": str(temp_dir / "test.db")},
        api_llm={"enabled": False},
    )


@pytest.fixture
def database(test_settings: Settings) -> Generator[Database, None, None]:
    """Provide an initialized test database, closed after the test."""
    db = Database.from_settings(test_settings.storage)
    yield db
    db.close()


@pytest.fixture
def service(database: Database) -> ProgrammingService:
    """Provide a programming service on the test database."""
    return ProgrammingService(database)


@pytest.fixture
def wod_page_html() -> str:
    """A WOD page using the build-hashed container class."""
    return """<!DOCTYPE html>
<html lang="en">
<head>
    <title>Workout of the Day | CrossFit</title>
    <style>._workout-of-the-day-content_3f9a1 { color: red; }</style>
    <script>window.__DATA__ = {"wod": "<p>not this</p>"};</script>
</head>
<body>
    <header><h1>CrossFit</h1></header>
    <!-- <p>Commented out workout</p> -->
    <div class="_workout-of-the-day-content_3f9a1"><article><p><strong>AMRAP 20:</strong></p><p>10 Burpees<br>15 Air Squats</p><p>Post rounds to <a href="/comments">comments</a>.</p></article></div>
    <div id="comments"><p>Great workout!</p></div>
</body>
</html>"""


@pytest.fixture
def heading_page_html() -> str:
    """An older-style WOD page anchored by a heading."""
    return """<!DOCTYPE html>
<html>
<body>
    <main><h2>Workout of the Day</h2><p>For time:</p><p>21-15-9<br>Thrusters<br>Pull-ups</p><hr><p>Sponsored content</p></main>
</body>
</html>"""


@pytest.fixture
def rest_day_html() -> str:
    """A rest day page."""
    return (
        '<html><body><div class="_workout-of-the-day-content_a1">'
        "<article><p>Rest Day</p><p>Take the day to recover and mobilize.</p></article>"
        "</div></body></html>"
    )


@pytest.fixture
def empty_page_html() -> str:
    """A page with no WOD on it."""
    return "<html><body><h1>Page not found</h1><p>Try again later.</p></body></html>"


@pytest.fixture
def make_fetcher() -> Callable[..., WodPageFetcher]:
    """
    Build a fetcher whose requests are answered by a handler function.

    The handler receives an httpx.Request and returns an httpx.Response.
    """
    def factory(handler, **kwargs) -> WodPageFetcher:
        client = httpx.Client(transport=httpx.MockTransport(handler))
        kwargs.setdefault("retry_delay_seconds", 0.0)
        return WodPageFetcher(client=client, **kwargs)

    return factory


class FakeMessages:
    """Stands in for `client.messages` of an Anthropic client."""

    def __init__(self, responses: list) -> None:
        self.responses = list(responses)
        self.calls: list[dict] = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        if response is None:
            return SimpleNamespace(content=[])
        return SimpleNamespace(content=[SimpleNamespace(text=response)])


class FakeAnthropicClient:
    """
    Minimal Anthropic client returning canned responses in order.

    A response may be a string (message text), None (empty content) or
    an exception to raise.
    """

    def __init__(self, *responses) -> None:
        self.messages = FakeMessages(list(responses))


@pytest.fixture
def fake_client_factory() -> Callable[..., FakeAnthropicClient]:
    """Provide a factory for fake model clients."""
    return FakeAnthropicClient
