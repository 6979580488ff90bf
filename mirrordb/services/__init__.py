"""
Services behind the mirror: background persistence, sync and queries.
"""
from mirrordb.services.persistence_service import PersistenceService
from mirrordb.services.sync_service import SyncCoordinator
from mirrordb.services import query_service

__all__ = ["PersistenceService", "SyncCoordinator", "query_service"]
