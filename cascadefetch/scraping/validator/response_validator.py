from typing import Any

from cascadefetch.config.constants import MESSAGES, SUCCESS_STATUS_RANGE
from cascadefetch.models.scraping import Mechanism, ScrapeConfig, ValidationContext
from cascadefetch.utils.errors import HttpError, ResponseValidationError


def validate_response(config: ScrapeConfig, mechanism: Mechanism, response: Any, url: str) -> None:
    """Run the configured validator, raising if it rejects the response."""
    validator = config.options.validate_response
    if validator is None:
        return

    if not validator(ValidationContext(mechanism=mechanism, response=response)):
        raise ResponseValidationError(
            MESSAGES["response_validation_failed"], mechanism=mechanism.value, url=url
        )


def check_status(status_code: int, url: str) -> None:
    if status_code not in SUCCESS_STATUS_RANGE:
        raise HttpError(f"HTTP error {status_code}", status_code=status_code, url=url)
