"""API dependencies for FastAPI.

This module provides dependency injection functions for FastAPI endpoints
to access repositories, services and the configured URL validator.
"""

from functools import lru_cache

from fastapi import Depends

from shorturl.repositories.url_repository import URLRepository
from shorturl.services.shortener import ShortenedURLService
from shorturl.services.validation import URLValidator


async def get_url_repository():
    """Get an instance of the URL repository."""
    return URLRepository()


async def get_shortener_service(
    url_repo: URLRepository = Depends(get_url_repository),
) -> ShortenedURLService:
    """Get an instance of the URL shortening service."""
    return ShortenedURLService(url_repository=url_repo)


@lru_cache
def get_url_validator() -> URLValidator:
    """Get the validation chain configured in settings, built once per process."""
    return URLValidator.from_settings()
