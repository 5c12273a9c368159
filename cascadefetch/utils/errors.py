class ScrapeError(Exception):
    """Base exception for scraping errors."""

    def __init__(self, message: str, url: str = ""):
        self.url = url
        super().__init__(message)


class ConfigurationError(ScrapeError):
    """Raised when the scrape config cannot work at all (no strategies, no custom fn)."""


class NoResponseError(ScrapeError):
    """Raised when a mechanism produced no response."""


class ResponseValidationError(ScrapeError):
    """Raised when the configured validator rejects a response."""

    def __init__(self, message: str, mechanism: str = "", **kwargs: str):
        self.mechanism = mechanism
        super().__init__(message, **kwargs)


class HttpError(ScrapeError):
    """Raised when a response carries a non-2xx status."""

    def __init__(self, message: str, status_code: int = 0, **kwargs: str):
        self.status_code = status_code
        super().__init__(message, **kwargs)
