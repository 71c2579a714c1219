"""Test fixtures for the short URL service."""

import os

# Settings are read at import time, so the test environment goes first
os.environ["ENVIRONMENT"] = "testing"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["URL_VALIDATORS"] = "pattern"
os.environ["LOG_FILE_ENABLED"] = "false"
os.environ["DEBUG"] = "false"

import socket
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from shorturl.api.dependencies import get_url_validator
from shorturl.db.session import get_db
from shorturl.main import app as main_app
from shorturl.repositories.url_repository import URLRepository
from shorturl.services.shortener import ShortenedURLService
# Import models to ensure they're registered with SQLModel metadata
from shorturl.models.url import IdCounter, UrlRecord  # noqa: F401


# Test database URL - using SQLite in-memory
TEST_SQLALCHEMY_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def test_engine():
    """Create a fresh in-memory database for each test."""
    engine = create_async_engine(
        TEST_SQLALCHEMY_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def test_db(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session bound to the test engine."""
    session_factory = async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with session_factory() as session:
        yield session


@pytest.fixture
def url_repository() -> URLRepository:
    return URLRepository()


@pytest.fixture
def shortener_service(url_repository) -> ShortenedURLService:
    return ShortenedURLService(url_repository=url_repository)


@pytest.fixture
def override_get_db(test_db):
    """Override the get_db dependency for testing."""
    async def _override_get_db():
        yield test_db

    return _override_get_db


@pytest.fixture
def test_app(override_get_db) -> FastAPI:
    """FastAPI app with the database dependency pointed at the test session."""
    app = main_app
    app.dependency_overrides[get_db] = override_get_db
    yield app
    app.dependency_overrides.clear()
    get_url_validator.cache_clear()


@pytest_asyncio.fixture
async def client(test_app) -> AsyncGenerator[AsyncClient, None]:
    """Return an HTTP client that calls the app in-process."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as test_client:
        yield test_client


@pytest.fixture
def fake_resolver():
    """Resolver that knows a fixed set of host names and records lookups."""
    class FakeResolver:
        def __init__(self):
            self.known = {"www.freecodecamp.org", "example.com", "www.example.com"}
            self.lookups = []

        async def __call__(self, host):
            self.lookups.append(host)
            if host not in self.known:
                raise socket.gaierror(socket.EAI_NONAME, "Name or service not known")
            return [("AF_INET", "SOCK_STREAM", 6, "", ("93.184.216.34", 0))]

    return FakeResolver()
