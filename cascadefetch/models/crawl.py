from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, model_validator

AddUrls = Callable[[str | list[str]], None]


class CrawlStats(BaseModel):
    initial: int
    discovered: int
    processed: int
    remaining: int
    succeeded: int
    failed: int


class CrawlSummary(BaseModel):
    total: int
    succeeded: int
    failed: int


class CrawlDelays(BaseModel):
    """Pause between URLs, in milliseconds."""

    min: int
    max: int

    @model_validator(mode="after")
    def check_range(self) -> "CrawlDelays":
        if self.min < 0 or self.max < self.min:
            raise ValueError("delays must satisfy 0 <= min <= max")
        return self


@dataclass(frozen=True)
class CrawlSuccessContext:
    result: Any
    url: str
    index: int
    add_urls: AddUrls
    stats: CrawlStats


@dataclass(frozen=True)
class CrawlErrorContext:
    error: BaseException
    url: str
    index: int
    add_urls: AddUrls
    stats: CrawlStats


OnSuccess = Callable[[CrawlSuccessContext], Awaitable[None]]
OnError = Callable[[CrawlErrorContext], Awaitable[None]]
