from collections.abc import Awaitable, Callable
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from cascadefetch.models.hooks import ScrapeHooks


class Mechanism(StrEnum):
    FETCH = "fetch"
    BROWSER = "browser"
    CUSTOM = "custom"


class RetryType(StrEnum):
    EXPONENTIAL = "exponential"
    LINEAR = "linear"
    CONSTANT = "constant"


class BrowserEngine(StrEnum):
    CHROMIUM = "chromium"
    FIREFOX = "firefox"
    WEBKIT = "webkit"


class WaitUntil(StrEnum):
    LOAD = "load"
    DOMCONTENTLOADED = "domcontentloaded"
    NETWORKIDLE = "networkidle"
    COMMIT = "commit"


class ResourceType(StrEnum):
    DOCUMENT = "document"
    STYLESHEET = "stylesheet"
    IMAGE = "image"
    MEDIA = "media"
    FONT = "font"
    SCRIPT = "script"
    TEXTTRACK = "texttrack"
    XHR = "xhr"
    FETCH = "fetch"
    EVENTSOURCE = "eventsource"
    WEBSOCKET = "websocket"
    MANIFEST = "manifest"
    OTHER = "other"


class Strategy(BaseModel):
    model_config = ConfigDict(frozen=True)

    mechanism: Mechanism
    use_proxy: bool = False


class RetryConfig(BaseModel):
    count: int = Field(default=0, ge=0)
    # Milliseconds; unset fields fall back to Settings
    delay: float | None = None
    type: RetryType | str | None = None
    status_codes: list[int] | None = None


class Viewport(BaseModel):
    width: int
    height: int


class ValidationContext(BaseModel):
    """What a response validator gets to inspect."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    mechanism: Mechanism
    response: Any


ValidateResponse = Callable[[ValidationContext], bool]


class RequestOptions(BaseModel):
    """Options materialized once per strategy run and shared by its retries."""

    proxy: str | None = None
    user_agent: str | None = None
    viewport: Viewport | None = None
    headers: dict[str, str] | None = None
    timeout: int | None = None


CustomFetchFn = Callable[[str, RequestOptions], Awaitable[Any]]


class ScrapeOptions(BaseModel):
    timeout: int | None = None  # ms
    retries: RetryConfig | None = None
    proxies: list[str] | None = None
    user_agents: list[str] | None = None
    viewports: list[Viewport] | None = None
    headers: dict[str, str] | None = None
    validate_response: ValidateResponse | None = None


class BrowserConfig(BaseModel):
    engine: BrowserEngine | None = None
    resources: list[ResourceType] | None = None
    wait_until: WaitUntil | None = None


class CustomConfig(BaseModel):
    fn: CustomFetchFn


class ScrapeConfig(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    strategies: list[Strategy] | None = None
    options: ScrapeOptions = Field(default_factory=ScrapeOptions)
    browser: BrowserConfig = Field(default_factory=BrowserConfig)
    custom: CustomConfig | None = None
    hooks: ScrapeHooks = Field(default_factory=ScrapeHooks)
