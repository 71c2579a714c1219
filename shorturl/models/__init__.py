"""
Data models for the short URL service.

This module imports and exports all SQLModel models used in the application.
"""

from shorturl.models.url import (
    SHORT_ID_SEQUENCE,
    IdCounter,
    UrlRecord,
    UrlRecordBase,
    UrlRecordCreate,
)

__all__ = [
    "SHORT_ID_SEQUENCE",
    "IdCounter",
    "UrlRecord",
    "UrlRecordBase",
    "UrlRecordCreate",
]
