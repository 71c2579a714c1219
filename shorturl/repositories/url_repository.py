"""URL Repository for the short URL service.

This module provides the URLRepository class for database operations related to
UrlRecord models, including atomic allocation of new short identifiers.
"""

import logging
from typing import Any, Dict, Optional, Union

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from shorturl.models.url import SHORT_ID_SEQUENCE, IdCounter, UrlRecord, UrlRecordCreate
from shorturl.repositories.base import BaseRepository, RepositoryError, DuplicateEntityError

logger = logging.getLogger(__name__)


class URLRepository(BaseRepository[UrlRecord, UrlRecordCreate]):
    """
    Repository for UrlRecord database operations.

    Records are only ever looked up and inserted; identifiers come from a
    counter row in ``id_counters`` that is advanced inside the caller's
    transaction.
    """

    def __init__(self):
        """Initialize the repository with the UrlRecord model type."""
        super().__init__(UrlRecord)

    async def get_by_original_url(self, db: AsyncSession, original_url: str) -> Optional[UrlRecord]:
        """
        Find a record by exact original URL match.

        Raises:
            RepositoryError: On database errors
        """
        return await self.get_one_by(db, original_url=original_url)

    async def get_by_short_id(self, db: AsyncSession, short_id: int) -> Optional[UrlRecord]:
        """
        Find a record by its short identifier.

        Raises:
            RepositoryError: On database errors
        """
        return await self.get_one_by(db, short_id=short_id)

    async def _advance_counter(self, db: AsyncSession) -> bool:
        """Bump the counter row in place; False when the row does not exist yet."""
        stmt = (
            update(IdCounter)
            .where(IdCounter.name == SHORT_ID_SEQUENCE)
            .values(value=IdCounter.value + 1)
            .execution_options(synchronize_session=False)
        )
        result = await db.execute(stmt)
        return result.rowcount > 0

    async def next_short_id(self, db: AsyncSession) -> int:
        """
        Allocate the next short identifier.

        The counter row is advanced with a single ``UPDATE ... SET value = value + 1``,
        which holds the row lock until the surrounding transaction ends, so
        concurrent writers are serialised by the database. The first call on a
        store without a counter row seeds it from the current record count
        inside a savepoint; if another writer seeds it first, the allocation
        falls back to advancing that row.

        Args:
            db: Database session (the allocation is only durable once committed)

        Returns:
            The allocated identifier

        Raises:
            RepositoryError: On database errors
        """
        try:
            if not await self._advance_counter(db):
                start = await self.count(db) + 1
                try:
                    async with db.begin_nested():
                        db.add(IdCounter(name=SHORT_ID_SEQUENCE, value=start))
                    return start
                except IntegrityError:
                    logger.info("Short id counter was seeded concurrently, advancing it instead")
                    if not await self._advance_counter(db):
                        raise RepositoryError("Short id counter missing after concurrent seed")

            value = await db.scalar(
                select(IdCounter.value).where(IdCounter.name == SHORT_ID_SEQUENCE)
            )
            return int(value)
        except SQLAlchemyError as e:
            raise RepositoryError(f"Error allocating short id: {e}") from e

    async def create_record(
        self,
        db: AsyncSession,
        data: Union[UrlRecordCreate, Dict[str, Any]]
    ) -> UrlRecord:
        """
        Insert a new URL record.

        Args:
            db: Database session
            data: Record data (either as a UrlRecordCreate model or dictionary)

        Returns:
            The created UrlRecord

        Raises:
            DuplicateEntityError: If the original URL or short id is already stored
            RepositoryError: On other database errors
        """
        if isinstance(data, UrlRecordCreate):
            data = data.model_dump()

        try:
            return await self.create(db, data)
        except RepositoryError as e:
            cause = e.__cause__
            if not isinstance(cause, IntegrityError):
                raise
            # Driver message only; str(cause) also carries the INSERT statement
            message = str(cause.orig).lower()
            if "original_url" in message:
                raise DuplicateEntityError(self.model_type, "original_url", data["original_url"]) from cause
            if "short_id" in message:
                raise DuplicateEntityError(self.model_type, "short_id", data["short_id"]) from cause
            raise
