"""
Database module - MongoDB connections and schema migration.
"""
from mirrordb.database.connections import (
    create_mongo_client,
    close_client,
    get_database,
)
from mirrordb.database.registry import (
    METADATA_COLLECTION,
    ensure_collections,
    list_mirrored_collections,
    load_key_counters,
)

__all__ = [
    "create_mongo_client",
    "close_client",
    "get_database",
    "METADATA_COLLECTION",
    "ensure_collections",
    "list_mirrored_collections",
    "load_key_counters",
]
