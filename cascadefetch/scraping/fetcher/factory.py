from typing import Protocol

from cascadefetch.models.result import ScrapeResult
from cascadefetch.models.scraping import Mechanism, RequestOptions, ScrapeConfig
from cascadefetch.scraping.fetcher.browser_fetcher import BrowserFetcher
from cascadefetch.scraping.fetcher.browser_pool import BrowserPool, get_default_pool
from cascadefetch.scraping.fetcher.custom_fetcher import CustomFetcher
from cascadefetch.scraping.fetcher.http_fetcher import HttpFetcher


class Fetcher(Protocol):
    async def execute(
        self, url: str, config: ScrapeConfig, options: RequestOptions
    ) -> ScrapeResult: ...


def create_fetcher(
    mechanism: Mechanism,
    browser_pool: BrowserPool | None = None,
) -> HttpFetcher | BrowserFetcher | CustomFetcher:
    """Create a fetcher instance for the given mechanism."""
    match mechanism:
        case Mechanism.FETCH:
            return HttpFetcher()
        case Mechanism.BROWSER:
            return BrowserFetcher(browser_pool or get_default_pool())
        case Mechanism.CUSTOM:
            return CustomFetcher()
    raise ValueError(f"Unknown mechanism: {mechanism}")
