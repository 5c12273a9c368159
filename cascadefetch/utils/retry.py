from collections.abc import Callable, Coroutine
from typing import Any, TypeVar

import structlog

from cascadefetch.config.settings import get_settings
from cascadefetch.models.hooks import (
    RetryAttemptContext,
    RetryExhaustedContext,
    ScrapeHooks,
)
from cascadefetch.models.scraping import RetryConfig, RetryType
from cascadefetch.utils.errors import ConfigurationError, HttpError
from cascadefetch.utils.sleep import sleep_ms

log = structlog.get_logger()

T = TypeVar("T")


def calculate_delay(attempt: int, base_delay: float, retry_type: RetryType | str) -> float:
    """Delay before the next attempt, in the unit of ``base_delay``.

    Unknown retry types back off exponentially.
    """
    match retry_type:
        case RetryType.LINEAR:
            return base_delay * (attempt + 1)
        case RetryType.CONSTANT:
            return base_delay
        case _:
            return base_delay * 2**attempt


async def with_retry(
    fn: Callable[[], Coroutine[Any, Any, T]],
    retry_config: RetryConfig | None = None,
    hooks: ScrapeHooks | None = None,
) -> T:
    """Run ``fn`` and retry it with backoff according to ``retry_config``.

    Without a config, or with ``count == 0``, ``fn`` runs exactly once. A
    ``ConfigurationError``, or an ``HttpError`` whose status is not
    retriable, is re-raised immediately. After the last attempt fails the
    last error is re-raised.
    """
    if not retry_config or not retry_config.count:
        return await fn()

    settings = get_settings()
    hooks = hooks or ScrapeHooks()
    delay = retry_config.delay if retry_config.delay is not None else settings.default_retry_delay_ms
    retry_type = retry_config.type or settings.default_retry_type
    retriable_status_codes = (
        retry_config.status_codes
        if retry_config.status_codes is not None
        else settings.default_retry_status_codes
    )
    max_attempts = retry_config.count + 1
    last_error: Exception | None = None

    for attempt in range(max_attempts):
        try:
            return await fn()
        except Exception as e:
            last_error = e

            if isinstance(e, ConfigurationError):
                raise

            if isinstance(e, HttpError) and e.status_code not in retriable_status_codes:
                log.info("retry_aborted", status_code=e.status_code, attempt=attempt + 1)
                raise

            if attempt == retry_config.count:
                break

            retry_delay = calculate_delay(attempt, delay, retry_type)
            log.warning(
                "retry_attempt",
                attempt=attempt + 1,
                max_attempts=max_attempts,
                delay_ms=retry_delay,
                error=str(e),
            )
            hooks.on_retry_attempt(
                RetryAttemptContext(
                    error=e,
                    attempt=attempt + 1,
                    max_attempts=max_attempts,
                    next_retry_delay=retry_delay,
                    retry_config=retry_config,
                )
            )
            await sleep_ms(retry_delay)

    log.warning("retry_exhausted", total_attempts=max_attempts, error=str(last_error))
    hooks.on_retry_exhausted(
        RetryExhaustedContext(
            error=last_error,  # type: ignore[arg-type]
            total_attempts=max_attempts,
            retry_config=retry_config,
        )
    )
    raise last_error  # type: ignore[misc]
