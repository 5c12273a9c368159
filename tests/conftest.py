from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from cascadefetch.config.settings import get_settings
from cascadefetch.models.hooks import ScrapeHooks


class RecordingHooks(ScrapeHooks):
    """Collects every hook call as (event, context) pairs."""

    def __init__(self):
        self.events: list[tuple[str, object]] = []

    def on_retry_attempt(self, context):
        self.events.append(("retry_attempt", context))

    def on_retry_exhausted(self, context):
        self.events.append(("retry_exhausted", context))

    def on_strategy_failed(self, context):
        self.events.append(("strategy_failed", context))

    def on_all_strategies_failed(self, context):
        self.events.append(("all_strategies_failed", context))

    def of(self, event: str) -> list:
        return [ctx for name, ctx in self.events if name == event]


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def stealth():
    """Stands in for playwright-stealth so mocked contexts never see real init scripts."""
    with patch("cascadefetch.scraping.fetcher.browser_fetcher.Stealth") as MockStealth:
        instance = MagicMock()
        instance.apply_stealth_async = AsyncMock()
        MockStealth.return_value = instance
        yield instance


@pytest.fixture
def no_sleep():
    with patch("cascadefetch.utils.retry.sleep_ms", new_callable=AsyncMock) as mock_sleep:
        yield mock_sleep


@pytest.fixture
def hooks() -> RecordingHooks:
    return RecordingHooks()


@pytest.fixture
def sample_html() -> str:
    return "<html><head><title>Test</title></head><body><h1>Hello</h1></body></html>"


@pytest.fixture
def html_transport(sample_html):
    """Mock transport answering every request with sample_html and echoing request headers."""
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, text=sample_html, headers={"Content-Type": "text/html"})

    transport = httpx.MockTransport(handler)
    transport.seen = seen  # type: ignore[attr-defined]
    return transport
