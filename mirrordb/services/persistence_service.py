"""
Fire-and-forget persistence of in-memory mutations.

Every write is scheduled as a task on the running event loop and never
awaited by the caller. Writes to the same collection run one after another
in the order they were issued; writes to different collections run
concurrently. Failures are reported to an error hook instead of being
raised.
"""
import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from mirrordb.core.exceptions import PersistenceError
from mirrordb.database.registry import METADATA_COLLECTION, METADATA_DOCUMENT_ID

logger = logging.getLogger("mirrordb.persistence")

ErrorHook = Callable[[PersistenceError], Any]


def log_persistence_error(error: PersistenceError) -> None:
    """Default error hook."""
    logger.error(f"Background write lost: {error}")


class PersistenceService:
    """Schedules point writes against one store database."""

    def __init__(self, db: AsyncIOMotorDatabase, on_error: Optional[ErrorHook] = None):
        self.db = db
        self.on_error = on_error or log_persistence_error
        self._pending: set[asyncio.Task] = set()
        # last write scheduled per collection; the next one waits for it
        self._tails: dict[str, asyncio.Task] = {}

    @property
    def pending(self) -> int:
        """Number of writes not yet finished."""
        return len(self._pending)

    # ==================== Point Mutations ====================

    def add(self, collection: str, doc: dict[str, Any]) -> asyncio.Task:
        return self._schedule("add", collection, lambda: self.db[collection].insert_one(doc))

    def put(self, collection: str, key: Any, doc: dict[str, Any]) -> asyncio.Task:
        return self._schedule(
            "put",
            collection,
            lambda: self.db[collection].replace_one({"_id": key}, doc, upsert=True),
        )

    def delete(self, collection: str, key: Any) -> asyncio.Task:
        return self._schedule("delete", collection, lambda: self.db[collection].delete_one({"_id": key}))

    def clear(self, collection: str) -> asyncio.Task:
        return self._schedule("clear", collection, lambda: self.db[collection].delete_many({}))

    def save_key_counter(self, collection: str, value: int) -> asyncio.Task:
        """Record a collection's auto-increment high-water mark; never lowers it."""
        return self._schedule(
            "save_key_counter",
            METADATA_COLLECTION,
            lambda: self.db[METADATA_COLLECTION].update_one(
                {"_id": METADATA_DOCUMENT_ID},
                {"$max": {f"key_counters.{collection}": value}},
                upsert=True,
            ),
        )

    async def flush(self) -> None:
        """Wait until every scheduled write has finished."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    # ==================== Internals ====================

    def _schedule(
        self,
        operation: str,
        collection: str,
        write: Callable[[], Awaitable],
    ) -> asyncio.Task:
        """
        Queue ``write`` behind the collection's previous write.

        ``write`` is only called once the previous write has finished,
        whether it succeeded or not, so the driver never sees two writes to
        one collection at the same time.
        """
        previous = self._tails.get(collection)

        async def _run() -> Any:
            if previous is not None:
                await asyncio.wait([previous])
            return await write()

        task = asyncio.ensure_future(_run())
        self._pending.add(task)
        self._tails[collection] = task
        logger.debug(f"Scheduled {operation} on '{collection}'")

        def _done(t: asyncio.Task) -> None:
            self._pending.discard(t)
            if self._tails.get(collection) is t:
                del self._tails[collection]
            if t.cancelled():
                return
            exc = t.exception()
            if exc is not None:
                self.on_error(PersistenceError(operation, collection, exc))

        task.add_done_callback(_done)
        return task
