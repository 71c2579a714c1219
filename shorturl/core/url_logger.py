"""URL access logging using Loguru's built-in async features."""

import os
from datetime import datetime, timezone
from typing import Optional

from loguru import logger

from shorturl.core.config import settings

# Redirect route status codes and what they mean for an access
ACCESS_OUTCOMES = {
    302: "redirect",
    200: "not_found",
    400: "invalid_id",
}

# Bound logger for URL access events, created on first use
url_access_logger = None


def _is_url_access(record) -> bool:
    return record["extra"].get("event_type") == "url_access"


def setup_url_logging():
    """Configure the URL access logger with async processing."""
    global url_access_logger

    url_access_logger = logger.bind(event_type="url_access")

    if not settings.LOG_FILE_ENABLED:
        return url_access_logger

    os.makedirs(settings.LOG_DIR, exist_ok=True)

    logger.add(
        os.path.join(settings.LOG_DIR, "url_access.log"),
        format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | IP:{extra[ip]} | Id:{extra[short_id]} | Status:{extra[status_code]} | {message}",
        rotation="10 MB",
        retention="7 days",
        enqueue=True,  # Loguru's internal queue keeps the request path non-blocking
        level="INFO",
        backtrace=False,
        diagnose=False,
        filter=_is_url_access,
    )

    logger.add(
        os.path.join(settings.LOG_DIR, "url_access.json"),
        serialize=True,
        enqueue=True,
        level="INFO",
        filter=_is_url_access,
    )

    return url_access_logger


def access_outcome(status_code: Optional[int]) -> str:
    return ACCESS_OUTCOMES.get(status_code, "error")


def log_url_access(
    short_id: str,
    ip_address: str,
    user_agent: str = "",
    status_code: Optional[int] = None,
):
    """
    Log a redirect attempt using Loguru's non-blocking logging.

    Args:
        short_id: The short identifier as requested (not yet parsed)
        ip_address: The client's IP address
        user_agent: Optional user agent string
        status_code: Status the redirect route answered with
    """
    if url_access_logger is None:
        setup_url_logging()

    url_access_logger.bind(
        ip=ip_address,
        short_id=short_id,
        user_agent=user_agent,
        status_code=status_code,
        outcome=access_outcome(status_code),
        timestamp=datetime.now(timezone.utc).isoformat(),
    ).info(f"URL accessed: {short_id} ({access_outcome(status_code)})")
