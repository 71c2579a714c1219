"""Tests for the URL access log written on every redirect attempt."""

import pytest
from loguru import logger
from unittest.mock import patch

from shorturl.core.url_logger import access_outcome, log_url_access
from shorturl.repositories.base import RepositoryError
from shorturl.repositories.url_repository import URLRepository


@pytest.fixture
def access_records():
    """Collect the ``extra`` of every url_access record while the test runs."""
    records = []
    sink_id = logger.add(
        lambda message: records.append(message.record["extra"]),
        filter=lambda record: record["extra"].get("event_type") == "url_access",
        level="INFO",
    )
    yield records
    logger.remove(sink_id)


@pytest.mark.api
class TestRedirectAccessLog:

    @pytest.mark.asyncio
    async def test_successful_redirect(self, client, access_records):
        await client.post("/api/shorturl", data={"url": "https://www.freecodecamp.org"})

        response = await client.get("/api/shorturl/1", headers={"User-Agent": "access-test"})

        assert response.status_code == 302
        assert len(access_records) == 1
        record = access_records[0]
        assert record["short_id"] == "1"
        assert record["ip"] == "127.0.0.1"
        assert record["user_agent"] == "access-test"
        assert record["status_code"] == 302
        assert record["outcome"] == "redirect"

    @pytest.mark.asyncio
    async def test_unknown_id(self, client, access_records):
        await client.get("/api/shorturl/42")

        assert [(r["short_id"], r["outcome"]) for r in access_records] == [("42", "not_found")]

    @pytest.mark.asyncio
    async def test_invalid_id(self, client, access_records):
        await client.get("/api/shorturl/abc")

        assert [(r["short_id"], r["status_code"], r["outcome"]) for r in access_records] == [
            ("abc", 400, "invalid_id")
        ]

    @pytest.mark.asyncio
    async def test_forwarded_client_address(self, client, access_records):
        await client.get("/api/shorturl/7", headers={"X-Forwarded-For": "203.0.113.7, 10.0.0.1"})

        assert access_records[0]["ip"] == "203.0.113.7"

    @pytest.mark.asyncio
    async def test_store_failure(self, client, access_records):
        with patch.object(URLRepository, "get_by_short_id", side_effect=RepositoryError("down")):
            await client.get("/api/shorturl/1")

        assert access_records[0]["status_code"] == 500
        assert access_records[0]["outcome"] == "error"

    @pytest.mark.asyncio
    async def test_creation_is_not_logged(self, client, access_records):
        await client.post("/api/shorturl", data={"url": "https://example.com"})

        assert access_records == []


def test_log_url_access_without_status(access_records):
    log_url_access(short_id="{5}", ip_address="198.51.100.2")

    assert access_records[0]["short_id"] == "{5}"
    assert access_records[0]["outcome"] == "error"


@pytest.mark.parametrize("status_code, outcome", [
    (302, "redirect"),
    (200, "not_found"),
    (400, "invalid_id"),
    (500, "error"),
    (None, "error"),
])
def test_access_outcome(status_code, outcome):
    assert access_outcome(status_code) == outcome
