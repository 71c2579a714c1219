"""Database module for the short URL service."""
from shorturl.db.base import engine, get_engine, init_models, DatabaseHealthCheck
from shorturl.db.session import get_db, db_transaction

__all__ = [
    "engine",
    "get_engine",
    "init_models",
    "DatabaseHealthCheck",
    "get_db",
    "db_transaction",
]
