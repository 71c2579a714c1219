"""Test utilities for short URL service tests."""

import random
import string
from typing import Optional

from sqlalchemy import func, select

from shorturl.models.url import UrlRecord


def random_string(length: int = 10) -> str:
    """Generate a random alphanumeric string."""
    return ''.join(random.choice(string.ascii_letters + string.digits) for _ in range(length))


def random_url() -> str:
    """Generate a random URL for testing."""
    domain = f"{random_string(8).lower()}.com"
    path = random_string(12)
    return f"https://{domain}/{path}"


async def create_test_record(
    db,
    short_id: int,
    original_url: Optional[str] = None,
) -> UrlRecord:
    """Persist a UrlRecord directly, bypassing id allocation."""
    record = UrlRecord(original_url=original_url or random_url(), short_id=short_id)
    db.add(record)
    await db.flush()
    await db.refresh(record)
    return record


async def count_records(db) -> int:
    result = await db.execute(select(func.count()).select_from(UrlRecord))
    return result.scalar_one()
