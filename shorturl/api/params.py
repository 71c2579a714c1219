"""Request parameter parsing for the short URL endpoints.

This module reads the submitted URL from the request body and parses the
short identifier path parameter.
"""

import logging
import re
from typing import Optional

from fastapi import Request
from starlette.exceptions import HTTPException

from shorturl.services.exceptions import InvalidShortIdError

logger = logging.getLogger(__name__)

# Largest value of the BIGINT short_id column
MAX_SHORT_ID = 2 ** 63 - 1

_DIGITS = re.compile(r"[0-9]+")


async def submitted_url(request: Request) -> Optional[str]:
    """
    Read the ``url`` field from a JSON, form-encoded or multipart body.

    Returns:
        The submitted value, or None when it is missing or not a string
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            payload = await request.json()
        except ValueError:
            logger.debug("Create request carried an unreadable JSON body")
            return None
        value = payload.get("url") if isinstance(payload, dict) else None
    else:
        try:
            form = await request.form()
        except HTTPException as e:
            logger.debug(f"Create request carried an unreadable form body: {e.detail}")
            return None
        value = form.get("url")

    return value if isinstance(value, str) else None


def parse_short_id(raw: str) -> int:
    """
    Parse a short identifier path parameter.

    Args:
        raw: The path segment as received

    Returns:
        The identifier as an integer

    Raises:
        InvalidShortIdError: If the value is not a decimal integer in the column range
    """
    if not _DIGITS.fullmatch(raw):
        raise InvalidShortIdError(f"Short id must be a decimal integer, got {raw!r}")

    value = int(raw)
    if value > MAX_SHORT_ID:
        raise InvalidShortIdError(f"Short id {raw} is out of range")
    return value
