from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from cascadefetch.config.constants import (
    DEFAULT_BROWSER_ENGINE,
    DEFAULT_RETRY_DELAY_MS,
    DEFAULT_RETRY_STATUS_CODES,
)
from cascadefetch.models.scraping import BrowserEngine, RetryType, WaitUntil


class Settings(BaseSettings):
    log_level: str = "info"
    log_format: str = "console"

    # Fallbacks for fields left unset in a RetryConfig
    default_retry_delay_ms: float = DEFAULT_RETRY_DELAY_MS
    default_retry_type: RetryType = RetryType.EXPONENTIAL
    default_retry_status_codes: list[int] = Field(
        default_factory=lambda: list(DEFAULT_RETRY_STATUS_CODES)
    )

    default_browser_engine: BrowserEngine = Field(
        default=DEFAULT_BROWSER_ENGINE, validate_default=True
    )
    default_wait_until: WaitUntil | None = None

    model_config = {
        "env_prefix": "CASCADEFETCH_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @field_validator("log_format")
    @classmethod
    def check_log_format(cls, value: str) -> str:
        value = value.lower()
        if value not in ("console", "json"):
            raise ValueError(f"log_format must be 'console' or 'json', got {value!r}")
        return value


@lru_cache
def get_settings() -> Settings:
    return Settings()
