"""Tests for the URL shortening service."""

import pytest
from sqlalchemy import insert
from unittest.mock import patch

from shorturl.models.url import SHORT_ID_SEQUENCE, IdCounter
from shorturl.repositories.base import RepositoryError
from shorturl.services.exceptions import URLCreationError, URLLookupError
from tests.utils import count_records, create_test_record, random_url


@pytest.mark.service
class TestGetOrCreate:

    @pytest.mark.asyncio
    async def test_first_url_gets_id_one(self, test_db, shortener_service):
        record = await shortener_service.get_or_create(test_db, "https://www.freecodecamp.org")

        assert record.original_url == "https://www.freecodecamp.org"
        assert record.short_id == 1
        assert await count_records(test_db) == 1

    @pytest.mark.asyncio
    async def test_ids_follow_record_count(self, test_db, shortener_service):
        for expected in range(1, 6):
            prior = await count_records(test_db)
            record = await shortener_service.get_or_create(test_db, random_url())

            assert record.short_id == prior + 1 == expected

    @pytest.mark.asyncio
    async def test_idempotent(self, test_db, shortener_service):
        url = random_url()

        first = await shortener_service.get_or_create(test_db, url)
        second = await shortener_service.get_or_create(test_db, url)

        assert first.short_id == second.short_id
        assert first.id == second.id
        assert await count_records(test_db) == 1

    @pytest.mark.asyncio
    async def test_reuse_does_not_consume_an_id(self, test_db, shortener_service):
        url = random_url()
        await shortener_service.get_or_create(test_db, url)
        await shortener_service.get_or_create(test_db, url)

        record = await shortener_service.get_or_create(test_db, random_url())

        assert record.short_id == 2

    @pytest.mark.asyncio
    async def test_commits(self, test_db, shortener_service):
        url = random_url()
        await shortener_service.get_or_create(test_db, url)

        await test_db.rollback()

        assert await count_records(test_db) == 1

    @pytest.mark.asyncio
    async def test_lost_insert_race_returns_stored_record(self, test_db, shortener_service, url_repository):
        """When another writer stores the URL between lookup and insert, its record wins."""
        url = random_url()
        stored = await create_test_record(test_db, short_id=1, original_url=url)
        stored_id = stored.short_id
        await test_db.commit()

        real_lookup = url_repository.get_by_original_url
        calls = []

        async def stale_then_real(db, original_url):
            calls.append(original_url)
            if len(calls) == 1:
                return None
            return await real_lookup(db, original_url)

        with patch.object(url_repository, "get_by_original_url", side_effect=stale_then_real):
            record = await shortener_service.get_or_create(test_db, url)

        assert record.short_id == stored_id
        assert len(calls) == 2
        assert await count_records(test_db) == 1

    @pytest.mark.asyncio
    async def test_concurrent_counter_seed_still_creates(self, test_db, shortener_service, url_repository):
        """A first creation racing another seeder of the id counter still stores the URL."""
        real_count = url_repository.count

        async def count_then_seed(db):
            total = await real_count(db)
            await db.execute(insert(IdCounter).values(name=SHORT_ID_SEQUENCE, value=total + 1))
            return total

        with patch.object(url_repository, "count", side_effect=count_then_seed):
            record = await shortener_service.get_or_create(test_db, "https://example.com/a")

        assert record.short_id == 2
        assert await shortener_service.resolve(test_db, 2) == "https://example.com/a"

    @pytest.mark.asyncio
    async def test_store_failure(self, test_db, shortener_service, url_repository):
        with patch.object(url_repository, "get_by_original_url", side_effect=RepositoryError("down")):
            with pytest.raises(URLCreationError):
                await shortener_service.get_or_create(test_db, random_url())

        assert await count_records(test_db) == 0

    @pytest.mark.asyncio
    async def test_failed_insert_releases_allocated_id(self, test_db, shortener_service, url_repository):
        with patch.object(url_repository, "create_record", side_effect=RepositoryError("insert failed")):
            with pytest.raises(URLCreationError):
                await shortener_service.get_or_create(test_db, random_url())

        record = await shortener_service.get_or_create(test_db, random_url())
        assert record.short_id == 1


@pytest.mark.service
class TestResolve:

    @pytest.mark.asyncio
    async def test_resolve_known_id(self, test_db, shortener_service):
        url = random_url()
        record = await shortener_service.get_or_create(test_db, url)

        assert await shortener_service.resolve(test_db, record.short_id) == url

    @pytest.mark.asyncio
    async def test_resolve_unknown_id(self, test_db, shortener_service):
        assert await shortener_service.resolve(test_db, 1) is None
        assert await shortener_service.resolve(test_db, 0) is None

    @pytest.mark.asyncio
    async def test_resolve_store_failure(self, test_db, shortener_service, url_repository):
        with patch.object(url_repository, "get_by_short_id", side_effect=RepositoryError("down")):
            with pytest.raises(URLLookupError):
                await shortener_service.resolve(test_db, 1)
