import asyncio
from functools import lru_cache
from typing import Any

import structlog
from playwright.async_api import Browser, Playwright, async_playwright

from cascadefetch.config.constants import BROWSER_LAUNCH_ARGS
from cascadefetch.models.scraping import BrowserEngine

log = structlog.get_logger()


class BrowserPool:
    """One launched browser per engine, shared across scrapes until ``close()``.

    Playwright handles belong to the event loop that started them. When the
    pool is used from a new loop (a second ``asyncio.run``), the old handles
    are dropped and a fresh Playwright is started on first use.
    """

    def __init__(self, launch_args: list[str] | None = None, headless: bool = True):
        self.launch_args = launch_args if launch_args is not None else BROWSER_LAUNCH_ARGS
        self.headless = headless
        self._browsers: dict[BrowserEngine, Browser] = {}
        self._playwright: Playwright | None = None
        self._lock: asyncio.Lock | None = None
        self._loop: asyncio.AbstractEventLoop | None = None

    async def __aenter__(self) -> "BrowserPool":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    def _bind_loop(self) -> asyncio.Lock:
        loop = asyncio.get_running_loop()
        if self._loop is not loop:
            if self._loop is not None:
                log.info("browser_pool_rebound", stale_browsers=len(self._browsers))
            self._loop = loop
            self._browsers = {}
            self._playwright = None
            self._lock = asyncio.Lock()
        return self._lock

    async def get(self, engine: BrowserEngine) -> Browser:
        async with self._bind_loop():
            browser = self._browsers.get(engine)
            if browser is not None and browser.is_connected():
                return browser

            if self._playwright is None:
                self._playwright = await self._start_playwright()

            browser_type = getattr(self._playwright, BrowserEngine(engine).value)
            browser = await browser_type.launch(headless=self.headless, args=self.launch_args)
            self._browsers[engine] = browser
            log.info("browser_launched", engine=str(engine))
            return browser

    async def close(self) -> None:
        async with self._bind_loop():
            browsers, self._browsers = self._browsers, {}
            playwright, self._playwright = self._playwright, None
            try:
                await self._close_browsers(browsers)
            finally:
                if playwright is not None:
                    await playwright.stop()

    async def _close_browsers(self, browsers: dict[BrowserEngine, Browser]) -> None:
        # Every browser gets a close attempt; the first failure is re-raised
        first_error: Exception | None = None
        for engine, browser in browsers.items():
            try:
                await browser.close()
                log.info("browser_closed", engine=str(engine))
            except Exception as e:
                log.warning("browser_close_failed", engine=str(engine), error=str(e))
                if first_error is None:
                    first_error = e
        if first_error is not None:
            raise first_error

    async def _start_playwright(self) -> Any:
        return await async_playwright().start()

    def __len__(self) -> int:
        return len(self._browsers)


@lru_cache
def get_default_pool() -> BrowserPool:
    return BrowserPool()


async def close_all_browsers() -> None:
    """Close every browser held by the default pool."""
    await get_default_pool().close()
