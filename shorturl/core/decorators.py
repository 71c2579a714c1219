"""Decorators for the short URL service.

This module contains reusable decorators for route handlers.
"""

import functools

from fastapi import Request, status

from shorturl.core.url_logger import log_url_access
from shorturl.middleware.logging import client_ip


def log_url_access_decorator():
    """Log every redirect attempt together with the status the route answered.

    The wrapped route must take ``request`` and ``short_id``; the signature is
    preserved so FastAPI still sees the route's own dependencies.

    Returns:
        callable: Decorator function
    """
    def decorator(func):
        @functools.wraps(func)
        async def wrapper(request: Request, short_id: str, *args, **kwargs):
            status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
            try:
                response = await func(request=request, short_id=short_id, *args, **kwargs)
                status_code = response.status_code
                return response
            finally:
                log_url_access(
                    short_id=short_id,
                    ip_address=client_ip(request),
                    user_agent=request.headers.get("user-agent", ""),
                    status_code=status_code,
                )
        return wrapper
    return decorator
