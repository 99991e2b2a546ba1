"""Logging of outgoing provider requests when FAIR_MEET_LOG_REQUESTS is enabled."""

import logging
import os
from typing import Any
from urllib.parse import urlencode

logger = logging.getLogger(__name__)

REDACTED = "***REDACTED***"

# Header and query parameter names that carry credentials
SENSITIVE_KEYS = frozenset({"authorization", "cookie", "x-api-key", "key", "app_key", "app_id"})


def should_log_requests() -> bool:
    """Check if request logging is enabled via the FAIR_MEET_LOG_REQUESTS variable."""
    return os.getenv("FAIR_MEET_LOG_REQUESTS", "").lower() == "true"


def redact(values: dict[str, Any]) -> dict[str, Any]:
    """Replace credential values with a placeholder."""
    return {k: REDACTED if k.lower() in SENSITIVE_KEYS else v for k, v in values.items()}


def build_logged_url(url: str, params: dict[str, Any] | None) -> str:
    """URL with sorted, redacted query parameters appended."""
    if not params:
        return url
    query = urlencode(sorted(redact(params).items()), safe="*,")
    return f"{url}&{query}" if "?" in url else f"{url}?{query}"


def log_api_request(
    method: str,
    url: str,
    params: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
) -> None:
    """Log an outgoing request if FAIR_MEET_LOG_REQUESTS is enabled.

    Args:
        method: HTTP method.
        url: Request URL without query string.
        params: Query parameters; credentials are redacted.
        headers: Request headers; credentials are redacted.
    """
    if not should_log_requests():
        return

    message = f"API Request: {method} {build_logged_url(url, params)}"
    if headers:
        message += f" headers={redact(headers)}"
    logger.info(message)
