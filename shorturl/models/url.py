"""Short URL data models.

This module defines the UrlRecord model mapping original URLs to numeric
short identifiers, and the IdCounter model used to hand those identifiers
out atomically.
"""
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import BigInteger
from sqlmodel import Field, SQLModel

# Name of the counter row that allocates UrlRecord.short_id values
SHORT_ID_SEQUENCE = "url_records.short_id"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class UrlRecordBase(SQLModel):
    """Base model for short URL data."""

    original_url: str = Field(
        description="The full URL as submitted",
        unique=True,
    )
    short_id: int = Field(
        description="Sequential numeric identifier handed to clients",
        unique=True,
        sa_type=BigInteger,
    )


class UrlRecord(UrlRecordBase, table=True):
    """
    Mapping between an original URL and its short identifier.

    Records are created once per distinct URL and never updated or deleted,
    so ``short_id`` values stay dense: the n-th stored URL has id n.
    """

    __tablename__ = "url_records"

    id: Optional[int] = Field(default=None, primary_key=True)
    created_at: datetime = Field(
        default_factory=utc_now,
        description="Timestamp when this record was created"
    )


class UrlRecordCreate(UrlRecordBase):
    """Schema for creating a new URL record."""
    pass


class IdCounter(SQLModel, table=True):
    """Named counter advanced with a single atomic UPDATE."""

    __tablename__ = "id_counters"

    name: str = Field(primary_key=True)
    value: int = Field(default=0, sa_type=BigInteger)
