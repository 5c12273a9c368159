from cascadefetch.config.constants import MESSAGES
from cascadefetch.models.result import CustomResult
from cascadefetch.models.scraping import Mechanism, RequestOptions, ScrapeConfig
from cascadefetch.scraping.validator.response_validator import validate_response
from cascadefetch.utils.errors import ConfigurationError, NoResponseError


class CustomFetcher:
    """Delegates to the caller's own fetch function."""

    async def execute(
        self, url: str, config: ScrapeConfig, options: RequestOptions
    ) -> CustomResult:
        if config.custom is None:
            raise ConfigurationError(MESSAGES["custom_fetch_not_provided"], url=url)

        response = await config.custom.fn(url, options)

        # False, 0 and "" are legitimate payloads
        if response is None:
            raise NoResponseError(MESSAGES["custom_fetch_no_response"], url=url)

        validate_response(config, Mechanism.CUSTOM, response, url)

        return CustomResult(response=response)
