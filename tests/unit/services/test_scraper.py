from unittest.mock import AsyncMock, MagicMock

import pytest

from cascadefetch.models.result import CustomResult
from cascadefetch.models.scraping import CustomConfig, Mechanism, ScrapeConfig, Strategy
from cascadefetch.scraping.fetcher.custom_fetcher import CustomFetcher
from cascadefetch.scraping.fetcher.http_fetcher import HttpFetcher
from cascadefetch.services.scraper import ScraperService
from cascadefetch.utils.errors import ConfigurationError


def make_fetcher(*outcomes):
    fetcher = MagicMock()
    fetcher.execute = AsyncMock(side_effect=list(outcomes))
    return fetcher


class TestScraperService:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("strategies", [None, []])
    async def test_no_strategies(self, strategies):
        fetcher = make_fetcher()
        service = ScraperService(fetchers={Mechanism.FETCH: fetcher})

        with pytest.raises(ConfigurationError):
            await service.scrape("https://example.com", ScrapeConfig(strategies=strategies))

        fetcher.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_first_success_wins(self, hooks):
        fetch = make_fetcher(RuntimeError("blocked"))
        browser = make_fetcher(CustomResult(response="from second"))
        custom = make_fetcher(CustomResult(response="never"))
        service = ScraperService(
            fetchers={Mechanism.FETCH: fetch, Mechanism.BROWSER: browser, Mechanism.CUSTOM: custom}
        )
        config = ScrapeConfig(
            strategies=[{"mechanism": "fetch"}, {"mechanism": "browser"}, {"mechanism": "custom"}],
            hooks=hooks,
        )

        result = await service.scrape("https://example.com", config)

        assert result.response == "from second"
        custom.execute.assert_not_awaited()
        failed = hooks.of("strategy_failed")
        assert len(failed) == 1
        assert failed[0].strategy == Strategy(mechanism="fetch")
        assert failed[0].strategy_index == 0
        assert failed[0].total_strategies == 3
        assert hooks.of("all_strategies_failed") == []

    @pytest.mark.asyncio
    async def test_all_fail_raises_last_error(self, hooks):
        first_error = RuntimeError("first")
        last_error = RuntimeError("last")
        service = ScraperService(
            fetchers={
                Mechanism.FETCH: make_fetcher(first_error, last_error),
            }
        )
        config = ScrapeConfig(
            strategies=[{"mechanism": "fetch"}, {"mechanism": "fetch", "use_proxy": True}],
            hooks=hooks,
        )

        with pytest.raises(RuntimeError) as exc_info:
            await service.scrape("https://example.com", config)

        assert exc_info.value is last_error
        assert [ctx.error for ctx in hooks.of("strategy_failed")] == [first_error, last_error]
        final = hooks.of("all_strategies_failed")
        assert len(final) == 1
        assert final[0].last_error is last_error
        assert final[0].strategies == config.strategies
        assert final[0].total_attempts == 2

    @pytest.mark.asyncio
    async def test_missing_custom_fn_falls_through(self):
        fetch = make_fetcher(CustomResult(response="fetched"))
        service = ScraperService(fetchers={Mechanism.FETCH: fetch})
        config = ScrapeConfig(strategies=[{"mechanism": "custom"}, {"mechanism": "fetch"}])

        result = await service.scrape("https://example.com", config)

        assert result.response == "fetched"

    @pytest.mark.asyncio
    async def test_strategies_not_mutated(self):
        service = ScraperService(fetchers={Mechanism.CUSTOM: make_fetcher(RuntimeError("x"))})
        strategies = [Strategy(mechanism="custom")]
        config = ScrapeConfig(strategies=strategies)

        with pytest.raises(RuntimeError):
            await service.scrape("https://example.com", config)

        assert config.strategies == [Strategy(mechanism="custom")]

    def test_fetchers_created_lazily(self):
        service = ScraperService()

        fetcher = service.get_fetcher(Mechanism.FETCH)

        assert isinstance(fetcher, HttpFetcher)
        assert service.get_fetcher(Mechanism.FETCH) is fetcher
        assert isinstance(service.get_fetcher(Mechanism.CUSTOM), CustomFetcher)

    @pytest.mark.asyncio
    async def test_custom_falsy_result_end_to_end(self):
        config = ScrapeConfig(
            strategies=[{"mechanism": "custom"}],
            custom=CustomConfig(fn=AsyncMock(return_value=0)),
        )

        result = await ScraperService().scrape("https://example.com", config)

        assert result.mechanism == Mechanism.CUSTOM
        assert result.response == 0
