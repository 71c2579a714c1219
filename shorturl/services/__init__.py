"""Service layer for the short URL service.

This package contains the business logic of the application: URL validation
and the get-or-create / resolve operations over the repositories.
"""

from shorturl.services.shortener import ShortenedURLService
from shorturl.services.validation import URLValidator

__all__ = ["ShortenedURLService", "URLValidator"]
