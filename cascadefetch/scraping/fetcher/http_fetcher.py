import httpx
import structlog

from cascadefetch.config.constants import MESSAGES
from cascadefetch.models.result import FetchResult
from cascadefetch.models.scraping import Mechanism, RequestOptions, ScrapeConfig
from cascadefetch.scraping.validator.response_validator import check_status, validate_response
from cascadefetch.utils.errors import NoResponseError

log = structlog.get_logger()


class HttpFetcher:
    """Plain HTTP mechanism using httpx."""

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None):
        self.transport = transport

    async def execute(
        self, url: str, config: ScrapeConfig, options: RequestOptions
    ) -> FetchResult:
        headers = httpx.Headers(options.headers or {})
        if options.user_agent:
            headers["User-Agent"] = options.user_agent

        timeout = options.timeout / 1000 if options.timeout else None

        async with httpx.AsyncClient(
            follow_redirects=True,
            timeout=timeout,
            headers=headers,
            proxy=options.proxy,
            transport=self.transport,
        ) as client:
            response = await client.get(url)

        if response is None:
            raise NoResponseError(MESSAGES["no_response_received"], url=url)

        log.debug("fetch_response", url=url, status_code=response.status_code)

        validate_response(config, Mechanism.FETCH, response, url)
        check_status(response.status_code, url)

        return FetchResult(response=response, html=response.text)
