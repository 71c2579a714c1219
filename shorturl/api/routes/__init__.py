"""Routes package initialization.

This module exports the route collection for the application.
"""

from fastapi import APIRouter

from shorturl.api.routes import shortener, redirect, health, pages
from shorturl.core.config import settings

# Create root router
api_router = APIRouter()

# Short URL creation and redirection live under the API prefix
api_router.include_router(
    shortener.router,
    prefix=settings.API_PREFIX
)

api_router.include_router(
    redirect.router,
    prefix=settings.API_PREFIX
)

# Include health check routes with API prefix
api_router.include_router(
    health.router,
    prefix=settings.API_PREFIX
)

api_router.include_router(pages.router)

__all__ = ["api_router"]
