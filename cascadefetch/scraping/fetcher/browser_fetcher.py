import structlog
from playwright.async_api import BrowserContext, Page, Route
from playwright_stealth import Stealth

from cascadefetch.config.constants import MESSAGES
from cascadefetch.config.settings import get_settings
from cascadefetch.models.result import BrowserResult
from cascadefetch.models.scraping import (
    BrowserConfig,
    Mechanism,
    RequestOptions,
    ResourceType,
    ScrapeConfig,
)
from cascadefetch.scraping.fetcher.browser_pool import BrowserPool
from cascadefetch.scraping.validator.response_validator import check_status, validate_response
from cascadefetch.utils.errors import NoResponseError

log = structlog.get_logger()


class BrowserFetcher:
    """Headless browser mechanism using Playwright.

    Every attempt gets a fresh context with stealth evasions applied. On
    success the context stays open and is closed by ``BrowserResult.cleanup``;
    on any failure it is closed here.
    """

    def __init__(self, pool: BrowserPool, stealth: Stealth | None = None):
        self.pool = pool
        self.stealth = stealth or Stealth()

    async def execute(
        self, url: str, config: ScrapeConfig, options: RequestOptions
    ) -> BrowserResult:
        settings = get_settings()
        browser_config = config.browser
        engine = browser_config.engine or settings.default_browser_engine
        wait_until = browser_config.wait_until or settings.default_wait_until

        browser = await self.pool.get(engine)
        context = await browser.new_context(**self._context_options(options))

        try:
            await self.stealth.apply_stealth_async(context)
            page = await self._create_page(context, browser_config, options)
            response = await page.goto(
                url,
                wait_until=wait_until.value if wait_until else None,
                timeout=options.timeout,
            )

            if response is None:
                raise NoResponseError(MESSAGES["no_response_received"], url=url)

            log.debug("browser_response", url=url, engine=str(engine), status_code=response.status)

            validate_response(config, Mechanism.BROWSER, response, url)
            check_status(response.status, url)
        except Exception:
            await context.close()
            raise

        async def cleanup() -> None:
            await context.close()

        return BrowserResult(page=page, response=response, cleanup=cleanup)

    def _context_options(self, options: RequestOptions) -> dict:
        context_options: dict = {}
        if options.proxy:
            context_options["proxy"] = {"server": options.proxy}
        if options.user_agent:
            context_options["user_agent"] = options.user_agent
        if options.viewport:
            context_options["viewport"] = options.viewport.model_dump()
        return context_options

    async def _create_page(
        self, context: BrowserContext, browser_config: BrowserConfig, options: RequestOptions
    ) -> Page:
        page = await context.new_page()

        if options.headers:
            await page.set_extra_http_headers(options.headers)

        if browser_config.resources:
            await self._allow_only(page, browser_config.resources)

        return page

    async def _allow_only(self, page: Page, resources: list[ResourceType]) -> None:
        allowed = {str(resource) for resource in resources}

        async def handle(route: Route) -> None:
            if route.request.resource_type in allowed:
                await route.continue_()
            else:
                await route.abort()

        await page.route("**/*", handle)
