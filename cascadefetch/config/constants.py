DEFAULT_RETRY_DELAY_MS = 1000
DEFAULT_RETRY_STATUS_CODES: list[int] = [408, 425, 429, 500, 502, 503, 504]

DEFAULT_BROWSER_ENGINE = "chromium"

BROWSER_LAUNCH_ARGS: list[str] = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-blink-features=AutomationControlled",
    "--disable-infobars",
    "--window-size=1920,1080",
]

# Half-open range of statuses accepted as success
SUCCESS_STATUS_RANGE = range(200, 300)

MESSAGES: dict[str, str] = {
    "no_strategies_provided": "No scraping strategies provided",
    "all_strategies_failed": "All scraping strategies failed",
    "no_response_received": "No response received",
    "response_validation_failed": "Response validation failed",
    "custom_fetch_not_provided": "Custom fetch function not provided",
    "custom_fetch_no_response": "Custom fetch function returned no response",
}
