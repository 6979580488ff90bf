"""
In-memory mirror of a MongoDB database.

Every collection of the store is loaded into memory once, when the mirror
opens. Reads and queries then run against memory; mutations update memory
and are written to the store in the background.

Usage:
    mirror = Mirror("library")
    mirror.declare_collection("books", key_field="isbn")
    await mirror.open(on_ready=lambda m: print("ready"))
    books = mirror.collection("books")
    books.insert({"isbn": "0-13-110362-8", "title": "The C Programming Language"})
    await mirror.close()
"""
import asyncio
import inspect
import logging
from typing import Any, AsyncIterator, Callable, Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from mirrordb.config import Settings, get_settings
from mirrordb.core.exceptions import (
    MirrorError,
    MirrorNotReadyError,
    SchemaLockedError,
    SyncTimeoutError,
    UnknownCollectionError,
)
from mirrordb.database.connections import close_client, create_mongo_client, get_database
from mirrordb.database.registry import (
    ensure_collections,
    list_mirrored_collections,
    load_key_counters,
)
from mirrordb.models.keys import KeyGenerator
from mirrordb.models.results import Record
from mirrordb.schemas.collection import CollectionConfig
from mirrordb.services.persistence_service import ErrorHook, PersistenceService
from mirrordb.services.sync_service import SyncCoordinator
from mirrordb.views.collection import CollectionView

logger = logging.getLogger("mirrordb")

ReadyCallback = Callable[["Mirror"], Any]

DEFAULT_CONFIG = CollectionConfig()


class Mirror:
    """
    Collection registry and owner of the store connection.

    Holds the declared schemas, the connection, and the in-memory records of
    every collection. Views obtained from ``collection`` borrow all three.
    """

    def __init__(
        self,
        store_name: str,
        client: Optional[AsyncIOMotorClient] = None,
        settings: Optional[Settings] = None,
        on_error: Optional[ErrorHook] = None,
    ):
        """
        Args:
            store_name: MongoDB database mirrored by this instance
            client: Client to borrow; when omitted the mirror creates its
                own from ``settings.mongo_uri`` and closes it on ``close``
            settings: Overrides the cached environment settings
            on_error: Receives a PersistenceError for every failed
                background write; defaults to logging it
        """
        self.store_name = store_name
        self.settings = settings or get_settings()
        self.on_error = on_error

        self._borrowed_client = client
        self._client: Optional[AsyncIOMotorClient] = None
        self._db: Optional[AsyncIOMotorDatabase] = None
        self._writer: Optional[PersistenceService] = None

        self._schemas: dict[str, CollectionConfig] = {}
        self._data: dict[str, list[Record]] = {}
        self._key_generators: dict[str, KeyGenerator] = {}
        self._ready = False

    def __repr__(self) -> str:
        state = "ready" if self._ready else ("open" if self.is_open else "closed")
        return f"Mirror({self.store_name!r}, {state}, collections={self.collection_names})"

    # ==================== State ====================

    @property
    def is_open(self) -> bool:
        return self._db is not None

    @property
    def is_ready(self) -> bool:
        """True once the initial load has finished, until ``close``."""
        return self._ready

    @property
    def schemas(self) -> dict[str, CollectionConfig]:
        return dict(self._schemas)

    @property
    def collection_names(self) -> list[str]:
        """Names of the collections currently held in memory."""
        return list(self._data)

    @property
    def pending_writes(self) -> int:
        return self._writer.pending if self._writer is not None else 0

    # ==================== Schema ====================

    def declare_collection(
        self,
        name: str,
        config: Optional[CollectionConfig | dict[str, Any]] = None,
        **options: Any,
    ) -> CollectionConfig:
        """
        Declare a collection to create in the store if it is missing.

        Args:
            name: Collection name
            config: A CollectionConfig or a mapping of its fields
            **options: Config fields given as keywords (``key_field``,
                ``auto_increment``, ``unique`` or their original aliases)

        Raises:
            SchemaLockedError: If the mirror is already open
        """
        if self.is_open:
            raise SchemaLockedError(
                f"Cannot declare '{name}' after '{self.store_name}' was opened"
            )
        if isinstance(config, CollectionConfig):
            config = config.model_dump()
        config = CollectionConfig.model_validate({**(config or {}), **options})

        self._schemas[name] = config
        return config

    # ==================== Lifecycle ====================

    async def open(self, on_ready: Optional[ReadyCallback] = None) -> "Mirror":
        """
        Connect, create missing collections and load everything into memory.

        ``on_ready`` is called with the mirror exactly once, after the last
        collection finished loading. It may be a coroutine function.

        Raises:
            MirrorError: If the mirror is already open
            SyncTimeoutError: If ``settings.sync_timeout_seconds`` elapses
                before the load finishes
        """
        if self.is_open:
            raise MirrorError(f"'{self.store_name}' is already open")

        self._client = self._borrowed_client or create_mongo_client(self.settings.mongo_uri)
        self._db = get_database(self._client, self.store_name)
        self._writer = PersistenceService(self._db, on_error=self.on_error)
        self._data = {}
        self._key_generators = {}
        self._ready = False
        logger.info(f"Opening mirror of '{self.store_name}'")

        try:
            created = await ensure_collections(
                self._db, self._schemas, schema_version=self.settings.schema_version
            )
            if created:
                logger.info(f"Schema setup created {len(created)} collection(s): {created}")

            saved_counters = await load_key_counters(self._db)
            names = await list_mirrored_collections(self._db)
            coordinator = SyncCoordinator(self._open_cursor)

            async def _synced(loaded: dict[str, list[Record]]) -> None:
                self._seed_key_generators(loaded, saved_counters)
                self._ready = True
                logger.info(
                    f"Mirror of '{self.store_name}' ready: "
                    f"{sum(len(r) for r in loaded.values())} records in {len(loaded)} collection(s)"
                )
                if on_ready is not None:
                    result = on_ready(self)
                    if inspect.isawaitable(result):
                        await result

            sync = coordinator.run(names, self._data, _synced)
            timeout = self.settings.sync_timeout_seconds
            if timeout is None:
                await sync
            else:
                try:
                    await asyncio.wait_for(sync, timeout)
                except asyncio.TimeoutError as e:
                    raise SyncTimeoutError(
                        f"Loading '{self.store_name}' took longer than {timeout}s "
                        f"({coordinator.completed}/{coordinator.total} collections loaded)"
                    ) from e
        except BaseException:
            self._release()
            raise

        return self

    async def close(self) -> None:
        """Wait for background writes, then release the connection."""
        if not self.is_open:
            return
        await self.flush()
        self._release()
        logger.info(f"Closed mirror of '{self.store_name}'")

    async def drop(self) -> None:
        """
        Irreversibly delete the whole store.

        Raises:
            MirrorError: If the mirror is open
        """
        if self.is_open:
            raise MirrorError(f"Close '{self.store_name}' before dropping it")

        client = self._borrowed_client or create_mongo_client(self.settings.mongo_uri)
        try:
            await client.drop_database(self.store_name)
        finally:
            if client is not self._borrowed_client:
                close_client(client)
        self._data = {}
        self._key_generators = {}
        logger.info(f"Dropped store '{self.store_name}'")

    async def flush(self) -> None:
        """Wait until every background write issued so far has finished."""
        if self._writer is not None:
            await self._writer.flush()

    def _release(self) -> None:
        if self._client is not None and self._client is not self._borrowed_client:
            close_client(self._client)
        self._client = None
        self._db = None
        self._writer = None
        self._ready = False

    # ==================== Views ====================

    def collection(self, name: str) -> CollectionView:
        """
        View over one collection's in-memory records.

        Raises:
            MirrorNotReadyError: Before the initial load finished, or after close
            UnknownCollectionError: If the store has no such collection
        """
        if not self._ready:
            raise MirrorNotReadyError(f"Mirror of '{self.store_name}' is not ready")
        if name not in self._data:
            raise UnknownCollectionError(f"No collection '{name}' in '{self.store_name}'")
        return CollectionView(
            self,
            name,
            self._data[name],
            self._schemas.get(name, DEFAULT_CONFIG),
            self._writer,
            self._key_generators.get(name),
        )

    with_ = collection

    async def _open_cursor(self, name: str) -> AsyncIterator[Record]:
        config = self._schemas.get(name, DEFAULT_CONFIG)
        async for doc in self._db[name].find({}):
            yield config.from_document(doc)

    def _seed_key_generators(
        self,
        loaded: dict[str, list[Record]],
        saved_counters: dict[str, int],
    ) -> None:
        for name, records in loaded.items():
            config = self._schemas.get(name, DEFAULT_CONFIG)
            if config.auto_increment:
                self._key_generators[name] = KeyGenerator.seeded(
                    (config.key_of(r) for r in records),
                    saved=saved_counters.get(name, 0),
                )
