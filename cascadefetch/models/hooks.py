"""Observer hooks fired by the retry wrapper and the strategy cascade.

Hooks are fire-and-forget: return values are ignored. Subclass
``ScrapeHooks`` and override only the events you care about; the base class
is a no-op sink and is what ``ScrapeConfig`` uses by default.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from cascadefetch.models.scraping import RetryConfig, Strategy


@dataclass(frozen=True)
class RetryAttemptContext:
    error: BaseException
    attempt: int
    max_attempts: int
    next_retry_delay: float
    retry_config: "RetryConfig"


@dataclass(frozen=True)
class RetryExhaustedContext:
    error: BaseException
    total_attempts: int
    retry_config: "RetryConfig"


@dataclass(frozen=True)
class StrategyFailedContext:
    error: BaseException
    strategy: "Strategy"
    strategy_index: int
    total_strategies: int


@dataclass(frozen=True)
class AllStrategiesFailedContext:
    last_error: BaseException
    strategies: list["Strategy"]
    total_attempts: int


class ScrapeHooks:
    """No-op event sink."""

    def on_retry_attempt(self, context: RetryAttemptContext) -> None:
        pass

    def on_retry_exhausted(self, context: RetryExhaustedContext) -> None:
        pass

    def on_strategy_failed(self, context: StrategyFailedContext) -> None:
        pass

    def on_all_strategies_failed(self, context: AllStrategiesFailedContext) -> None:
        pass


class LoggingHooks(ScrapeHooks):
    """Reports every event through structlog."""

    def __init__(self, logger: Any = None):
        self.log = logger or structlog.get_logger().bind(hooks="LoggingHooks")

    def on_retry_attempt(self, context: RetryAttemptContext) -> None:
        self.log.warning(
            "retry_attempt",
            attempt=context.attempt,
            max_attempts=context.max_attempts,
            delay_ms=context.next_retry_delay,
            error=str(context.error),
        )

    def on_retry_exhausted(self, context: RetryExhaustedContext) -> None:
        self.log.warning(
            "retry_exhausted",
            total_attempts=context.total_attempts,
            error=str(context.error),
        )

    def on_strategy_failed(self, context: StrategyFailedContext) -> None:
        self.log.warning(
            "strategy_failed",
            mechanism=context.strategy.mechanism.value,
            use_proxy=context.strategy.use_proxy,
            index=context.strategy_index,
            total=context.total_strategies,
            error=str(context.error),
        )

    def on_all_strategies_failed(self, context: AllStrategiesFailedContext) -> None:
        self.log.error(
            "all_strategies_failed",
            strategies=[s.mechanism.value for s in context.strategies],
            total_attempts=context.total_attempts,
            error=str(context.last_error),
        )
