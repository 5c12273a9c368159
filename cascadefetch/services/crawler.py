import structlog

from cascadefetch.models.crawl import (
    CrawlDelays,
    CrawlErrorContext,
    CrawlStats,
    CrawlSuccessContext,
    CrawlSummary,
    OnError,
    OnSuccess,
)
from cascadefetch.models.result import BrowserResult
from cascadefetch.models.scraping import ScrapeConfig
from cascadefetch.services.scraper import ScraperService
from cascadefetch.utils.sleep import random_sleep

log = structlog.get_logger()


class CrawlerService:
    """Scrapes a growing queue of URLs one at a time through the cascade."""

    def __init__(self, scraper: ScraperService | None = None):
        self.scraper = scraper or ScraperService()
        self.log = log.bind(service="CrawlerService")

    async def scrape_many(
        self,
        urls: list[str],
        config: ScrapeConfig,
        on_success: OnSuccess | None = None,
        on_error: OnError | None = None,
        delays: CrawlDelays | None = None,
    ) -> CrawlSummary:
        """Scrape ``urls`` plus whatever the callbacks discover via ``add_urls``.

        URLs are processed in insertion order and never twice. Browser
        results are cleaned up after ``on_success`` returns or raises; a
        raising ``on_success`` counts the URL as failed.
        """
        # dict keeps insertion order, used as an ordered set
        queue: dict[str, None] = dict.fromkeys(urls)
        processed: set[str] = set()
        initial = len(urls)
        discovered = succeeded = failed = 0
        index = 0

        def add_urls(new_urls: str | list[str]) -> None:
            nonlocal discovered
            for new_url in [new_urls] if isinstance(new_urls, str) else new_urls:
                if new_url in processed or new_url in queue:
                    continue
                queue[new_url] = None
                discovered += 1

        def stats() -> CrawlStats:
            return CrawlStats(
                initial=initial,
                discovered=discovered,
                processed=succeeded + failed,
                remaining=len(queue),
                succeeded=succeeded,
                failed=failed,
            )

        self.log.info("crawl_started", initial=initial)

        while queue:
            url = next(iter(queue))

            try:
                result = await self.scraper.scrape(url, config)
                try:
                    if on_success:
                        await on_success(
                            CrawlSuccessContext(
                                result=result, url=url, index=index, add_urls=add_urls, stats=stats()
                            )
                        )
                finally:
                    if isinstance(result, BrowserResult):
                        await result.cleanup()
                succeeded += 1
            except Exception as e:
                self.log.warning("crawl_url_failed", url=url, index=index, error=str(e))
                if on_error:
                    await on_error(
                        CrawlErrorContext(
                            error=e, url=url, index=index, add_urls=add_urls, stats=stats()
                        )
                    )
                failed += 1

            processed.add(url)
            del queue[url]
            index += 1

            if delays and queue:
                await random_sleep(delays.min, delays.max)

        self.log.info("crawl_finished", succeeded=succeeded, failed=failed, discovered=discovered)
        return CrawlSummary(total=succeeded + failed, succeeded=succeeded, failed=failed)
