"""URL shortening service for the short URL service.

This module contains the ShortenedURLService class which implements the
get-or-create and resolve operations on top of the URL repository.
"""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from shorturl.db.session import db_transaction
from shorturl.models.url import UrlRecord
from shorturl.repositories.base import DuplicateEntityError, RepositoryError
from shorturl.repositories.url_repository import URLRepository
from shorturl.services.exceptions import URLCreationError, URLLookupError

logger = logging.getLogger(__name__)


class ShortenedURLService:
    """
    Service for URL shortening business logic.

    Creation is idempotent per original URL and allocates dense sequential
    identifiers; resolution is a plain lookup. URLs are expected to have
    passed a URLValidator already.
    """

    def __init__(self, url_repository: URLRepository):
        """
        Initialize the URL shortening service.

        Args:
            url_repository: Repository for URL data access
        """
        self.url_repository = url_repository

    @db_transaction(db_param_name="db")
    async def get_or_create(self, db: AsyncSession, original_url: str) -> UrlRecord:
        """
        Return the record for ``original_url``, creating it on first sight.

        Args:
            db: Database session
            original_url: A validated URL

        Returns:
            UrlRecord: The existing record, or the newly stored one

        Raises:
            URLCreationError: If the store fails during lookup, allocation or insert
        """
        try:
            existing = await self.url_repository.get_by_original_url(db, original_url)
            if existing is not None:
                logger.debug(f"Reusing short id {existing.short_id} for {original_url}")
                return existing

            short_id = await self.url_repository.next_short_id(db)
            record = await self.url_repository.create_record(
                db, {"original_url": original_url, "short_id": short_id}
            )
            logger.info(f"Created short id {record.short_id} for {original_url}")
            return record
        except DuplicateEntityError as e:
            if e.field_name != "original_url":
                logger.error(f"Conflict while storing {original_url}: {e}")
                raise URLCreationError(f"Failed to store URL: {e}") from e
            # A concurrent request stored the same URL first; its transaction won.
            try:
                existing = await self.url_repository.get_by_original_url(db, original_url)
            except RepositoryError as lookup_error:
                raise URLCreationError(f"Failed to store URL: {lookup_error}") from lookup_error
            if existing is None:
                raise URLCreationError(f"Failed to store URL: {e}") from e
            logger.info(f"Lost insert race for {original_url}, reusing short id {existing.short_id}")
            return existing
        except RepositoryError as e:
            logger.error(f"Error creating short URL: {e}")
            raise URLCreationError(f"Failed to store URL: {e}") from e

    async def resolve(self, db: AsyncSession, short_id: int) -> Optional[str]:
        """
        Map a short identifier back to its original URL.

        Args:
            db: Database session
            short_id: An already-parsed identifier

        Returns:
            The original URL, or None if the identifier was never assigned

        Raises:
            URLLookupError: If the store fails during the lookup
        """
        try:
            record = await self.url_repository.get_by_short_id(db, short_id)
        except RepositoryError as e:
            logger.error(f"Error resolving short id {short_id}: {e}")
            raise URLLookupError(f"Failed to resolve short id {short_id}") from e

        if record is None:
            return None
        return record.original_url
