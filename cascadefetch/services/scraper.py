import structlog

from cascadefetch.config.constants import MESSAGES
from cascadefetch.models.hooks import AllStrategiesFailedContext, StrategyFailedContext
from cascadefetch.models.result import ScrapeResult
from cascadefetch.models.scraping import Mechanism, ScrapeConfig
from cascadefetch.scraping.fetcher.browser_pool import BrowserPool
from cascadefetch.scraping.fetcher.factory import Fetcher, create_fetcher
from cascadefetch.services.strategy import execute_strategy
from cascadefetch.utils.errors import ConfigurationError, ScrapeError

log = structlog.get_logger()


class ScraperService:
    """Tries each configured strategy in order until one yields an accepted result."""

    def __init__(
        self,
        browser_pool: BrowserPool | None = None,
        fetchers: dict[Mechanism, Fetcher] | None = None,
    ):
        self.browser_pool = browser_pool
        self.fetchers: dict[Mechanism, Fetcher] = dict(fetchers or {})
        self.log = log.bind(service="ScraperService")

    def get_fetcher(self, mechanism: Mechanism) -> Fetcher:
        fetcher = self.fetchers.get(mechanism)
        if fetcher is None:
            fetcher = create_fetcher(mechanism, self.browser_pool)
            self.fetchers[mechanism] = fetcher
        return fetcher

    async def scrape(self, url: str, config: ScrapeConfig) -> ScrapeResult:
        """Return the result of the first strategy that succeeds.

        Only the last strategy's error is raised; earlier failures are
        reported through ``config.hooks.on_strategy_failed``.
        """
        strategies = config.strategies
        if not strategies:
            raise ConfigurationError(MESSAGES["no_strategies_provided"], url=url)

        total = len(strategies)
        hooks = config.hooks

        for index, strategy in enumerate(strategies):
            try:
                result = await execute_strategy(
                    url, config, strategy, self.get_fetcher(strategy.mechanism)
                )
            except Exception as e:
                self.log.info(
                    "strategy_failed",
                    url=url,
                    mechanism=strategy.mechanism.value,
                    index=index,
                    total=total,
                    error=str(e),
                )
                hooks.on_strategy_failed(
                    StrategyFailedContext(
                        error=e,
                        strategy=strategy,
                        strategy_index=index,
                        total_strategies=total,
                    )
                )
                if index == total - 1:
                    self.log.warning("all_strategies_failed", url=url, total=total)
                    hooks.on_all_strategies_failed(
                        AllStrategiesFailedContext(
                            last_error=e,
                            strategies=list(strategies),
                            total_attempts=total,
                        )
                    )
                    raise
                continue

            self.log.info("scrape_succeeded", url=url, mechanism=strategy.mechanism.value, index=index)
            return result

        raise ScrapeError(MESSAGES["all_strategies_failed"], url=url)


async def scrape(
    url: str,
    config: ScrapeConfig,
    browser_pool: BrowserPool | None = None,
) -> ScrapeResult:
    """One-off cascade scrape. Browser strategies use the default pool unless one is given."""
    return await ScraperService(browser_pool=browser_pool).scrape(url, config)
