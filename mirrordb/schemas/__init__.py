"""
Schemas describing declared collections.
"""
from mirrordb.schemas.collection import CollectionConfig

__all__ = ["CollectionConfig"]
