"""
Schema migration for mirrored stores.

Ensures every declared collection exists in the store before the initial
load, and records the declared schemas in the ``_metadata`` collection.
"""
import logging
from datetime import datetime, timezone
from typing import Mapping

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING

from mirrordb.schemas.collection import CollectionConfig

logger = logging.getLogger("mirrordb.database")

METADATA_COLLECTION = "_metadata"
METADATA_DOCUMENT_ID = "mirror_metadata"


def is_mirrored(name: str) -> bool:
    """Whether a store collection is loaded into memory."""
    return name != METADATA_COLLECTION and not name.startswith("system.")


async def list_mirrored_collections(db: AsyncIOMotorDatabase) -> list[str]:
    """List the store's collections that the mirror loads, sorted by name."""
    names = await db.list_collection_names()
    return sorted(name for name in names if is_mirrored(name))


async def ensure_collections(
    db: AsyncIOMotorDatabase,
    schemas: Mapping[str, CollectionConfig],
    schema_version: int = 1,
) -> list[str]:
    """
    Create declared collections missing from the store.

    Unique indexes are created for each collection's ``unique`` fields on
    every run; creating an existing index is a no-op in MongoDB.

    Args:
        db: Store database
        schemas: Declared collection configs by name
        schema_version: Version recorded in the metadata document

    Returns:
        Names of the collections created by this run
    """
    existing = set(await db.list_collection_names())
    created = []

    for name, config in schemas.items():
        if name not in existing:
            await db.create_collection(name)
            created.append(name)
            logger.info(f"Created collection '{name}' in '{db.name}'")

        for field in sorted(config.unique):
            await db[name].create_index([(field, ASCENDING)], unique=True)

    await db[METADATA_COLLECTION].update_one(
        {"_id": METADATA_DOCUMENT_ID},
        {
            "$set": {
                "collections": {
                    name: {
                        "key_field": config.key_field,
                        "auto_increment": config.auto_increment,
                        "unique": sorted(config.unique),
                    }
                    for name, config in schemas.items()
                },
                "schema_version": schema_version,
                "updated_at": datetime.now(timezone.utc),
            },
            "$setOnInsert": {
                "created_at": datetime.now(timezone.utc),
            },
        },
        upsert=True,
    )

    return created


async def load_key_counters(db: AsyncIOMotorDatabase) -> dict[str, int]:
    """Auto-increment high-water marks saved by earlier sessions, by collection."""
    meta = await db[METADATA_COLLECTION].find_one({"_id": METADATA_DOCUMENT_ID})
    return dict((meta or {}).get("key_counters", {}))
