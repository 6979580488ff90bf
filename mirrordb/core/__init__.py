"""
Core utilities: exceptions and logging setup.
"""
from mirrordb.core.exceptions import (
    CapabilityError,
    MirrorError,
    MirrorNotReadyError,
    PersistenceError,
    RecordNotFoundError,
    SchemaLockedError,
    SyncTimeoutError,
    UnknownCollectionError,
)
from mirrordb.core.log import configure_logging

__all__ = [
    "CapabilityError",
    "MirrorError",
    "MirrorNotReadyError",
    "PersistenceError",
    "RecordNotFoundError",
    "SchemaLockedError",
    "SyncTimeoutError",
    "UnknownCollectionError",
    "configure_logging",
]
