"""
Global test fixtures for mirrordb.

This module provides shared fixtures for all tests including:
- Mock MongoDB (mongomock-motor)
- Settings that never touch a real server
- A seeded "library" store and an opened mirror over it
"""

import pytest
import pytest_asyncio

from mirrordb import Mirror, Settings


# =============================================================================
# Settings Fixtures
# =============================================================================

@pytest.fixture
def test_settings() -> Settings:
    """Settings pointing at an address no test connects to."""
    return Settings(mongo_uri="mongodb://test:27017", log_level="DEBUG")


# =============================================================================
# MongoDB Fixtures (mongomock-motor)
# =============================================================================

@pytest_asyncio.fixture
async def mock_async_mongo_client():
    """
    Create an async mock MongoDB client using mongomock-motor.
    """
    try:
        from mongomock_motor import AsyncMongoMockClient
        client = AsyncMongoMockClient()
        yield client
        client.close()
    except ImportError:
        pytest.skip("mongomock-motor not installed")


# =============================================================================
# Record Fixtures
# =============================================================================

@pytest.fixture
def authors() -> list[dict]:
    return [
        {"id": 1, "name": "Ursula K. Le Guin", "country": "US"},
        {"id": 2, "name": "Stanislaw Lem", "country": "PL"},
        {"id": 3, "name": "Iain M. Banks", "country": "GB"},
    ]


@pytest.fixture
def books() -> list[dict]:
    return [
        {"isbn": "978-0441478125", "title": "The Left Hand of Darkness", "author_id": 1, "year": 1969},
        {"isbn": "978-0156027601", "title": "Solaris", "author_id": 2, "year": 1961},
        {"isbn": "978-0553283686", "title": "The Dispossessed", "author_id": 1, "year": 1974},
        {"isbn": "978-0316005401", "title": "Consider Phlebas", "author_id": 3, "year": 1987},
    ]


# =============================================================================
# Mirror Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def seeded_store(mock_async_mongo_client, authors, books):
    """
    Provide a "library" database holding authors and books, stored the way
    the mirror writes them (key value as ``_id``).
    """
    db = mock_async_mongo_client["library"]
    await db.authors.insert_many([{"_id": a["id"], **a} for a in authors])
    await db.books.insert_many([{"_id": b["isbn"], **b} for b in books])
    yield db


@pytest.fixture
def make_library_mirror(mock_async_mongo_client, test_settings):
    """
    Factory for unopened mirrors over the "library" store with its usual
    declarations. Extra keyword arguments go to Mirror.
    """
    def _make(**kwargs) -> Mirror:
        mirror = Mirror(
            "library",
            client=mock_async_mongo_client,
            settings=test_settings,
            **kwargs,
        )
        mirror.declare_collection("authors", key_field="id")
        mirror.declare_collection("books", key_field="isbn", unique={"title"})
        mirror.declare_collection("loans", key_field="id", auto_increment=True)
        return mirror
    return _make


@pytest_asyncio.fixture
async def library_mirror(seeded_store, make_library_mirror):
    """An opened mirror over the seeded library store."""
    mirror = make_library_mirror()
    await mirror.open()
    yield mirror
    await mirror.close()
