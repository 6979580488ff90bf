"""
mirrordb - synchronous queries over an in-memory mirror of MongoDB collections.

Collections are loaded once when the mirror opens; mutations are applied in
memory and persisted in the background.
"""
from mirrordb.config import Settings, get_settings
from mirrordb.core.exceptions import (
    CapabilityError,
    MirrorError,
    MirrorNotReadyError,
    MissingKeyError,
    PersistenceError,
    RecordNotFoundError,
    SchemaLockedError,
    SyncTimeoutError,
    UnknownCollectionError,
)
from mirrordb.core.log import configure_logging
from mirrordb.mirror import Mirror
from mirrordb.models.results import FieldChange, MatchResult
from mirrordb.schemas.collection import CollectionConfig
from mirrordb.views import CollectionView, QueryableView, ResultView

__version__ = "0.1.0"
__all__ = [
    "Mirror",
    "CollectionConfig",
    "CollectionView",
    "QueryableView",
    "ResultView",
    "FieldChange",
    "MatchResult",
    "Settings",
    "get_settings",
    "configure_logging",
    "MirrorError",
    "SchemaLockedError",
    "MirrorNotReadyError",
    "UnknownCollectionError",
    "RecordNotFoundError",
    "MissingKeyError",
    "CapabilityError",
    "SyncTimeoutError",
    "PersistenceError",
]
