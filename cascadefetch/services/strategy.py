import structlog

from cascadefetch.models.result import ScrapeResult
from cascadefetch.models.scraping import RequestOptions, ScrapeConfig, Strategy
from cascadefetch.scraping.fetcher.factory import Fetcher
from cascadefetch.utils.pool import pick_random
from cascadefetch.utils.retry import with_retry

log = structlog.get_logger()


def compose_request_options(config: ScrapeConfig, strategy: Strategy) -> RequestOptions:
    """Draw proxy, user agent and viewport for one strategy run."""
    options = config.options
    return RequestOptions(
        proxy=pick_random(options.proxies) if strategy.use_proxy else None,
        user_agent=pick_random(options.user_agents),
        viewport=pick_random(options.viewports),
        headers=options.headers,
        timeout=options.timeout,
    )


async def execute_strategy(
    url: str,
    config: ScrapeConfig,
    strategy: Strategy,
    fetcher: Fetcher,
) -> ScrapeResult:
    """Run one strategy with retries. Every retry reuses the same request options."""
    request_options = compose_request_options(config, strategy)
    log.debug(
        "strategy_started",
        url=url,
        mechanism=strategy.mechanism.value,
        proxied=request_options.proxy is not None,
    )

    return await with_retry(
        lambda: fetcher.execute(url, config, request_options),
        config.options.retries,
        config.hooks,
    )
