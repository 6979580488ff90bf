"""
MongoDB connection management.

A mirror owns the client it creates; these helpers never cache one globally.
"""
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from mirrordb.config import get_settings


def create_mongo_client(mongo_uri: Optional[str] = None) -> AsyncIOMotorClient:
    """Create a MongoDB client for the given URI (defaults to settings)."""
    if mongo_uri is None:
        mongo_uri = get_settings().mongo_uri
    return AsyncIOMotorClient(mongo_uri)


def close_client(client: Optional[AsyncIOMotorClient]) -> None:
    """Close a MongoDB client if there is one."""
    if client is not None:
        client.close()


def get_database(client: AsyncIOMotorClient, db_name: str) -> AsyncIOMotorDatabase:
    """Get a specific MongoDB database by name."""
    return client[db_name]
