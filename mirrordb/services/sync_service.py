"""
Initial load of every mirrored collection.

One task per collection drains that collection's cursor into memory. A
counter of finished collections forms the completion barrier: the callback
runs once, when the last load finishes, whatever order they finish in.
"""
import asyncio
import inspect
import logging
from typing import Any, AsyncIterable, Callable, Optional

logger = logging.getLogger("mirrordb.sync")

CursorFactory = Callable[[str], AsyncIterable[dict[str, Any]]]
CompletionCallback = Callable[[dict[str, list[dict[str, Any]]]], Any]


class SyncCoordinator:
    """Loads collections concurrently and signals completion once."""

    def __init__(self, open_cursor: CursorFactory):
        """
        Args:
            open_cursor: Returns an async iterable over one collection's
                records in the store's natural order
        """
        self.open_cursor = open_cursor
        self.completed = 0
        self.total = 0
        self._fired = False

    @property
    def done(self) -> bool:
        return self._fired

    async def run(
        self,
        names: list[str],
        target: dict[str, list[dict[str, Any]]],
        on_complete: Optional[CompletionCallback] = None,
    ) -> dict[str, list[dict[str, Any]]]:
        """
        Load every named collection into ``target``.

        Each ``target[name]`` is replaced by a fresh list before its cursor
        is drained. ``on_complete`` receives ``target`` once all loads are
        finished; with no collections it runs immediately.

        Returns:
            ``target``
        """
        self.completed = 0
        self.total = len(names)
        self._fired = False

        if not names:
            await self._complete(target, on_complete)
            return target

        # The counter is only touched from the event loop, so increments
        # never interleave.
        await asyncio.gather(
            *(self._load(name, target, on_complete) for name in names)
        )
        return target

    async def _load(
        self,
        name: str,
        target: dict[str, list[dict[str, Any]]],
        on_complete: Optional[CompletionCallback],
    ) -> None:
        records: list[dict[str, Any]] = []
        target[name] = records

        async for record in self.open_cursor(name):
            records.append(record)

        self.completed += 1
        logger.debug(
            f"Loaded '{name}' ({len(records)} records, "
            f"{self.completed}/{self.total} collections)"
        )
        if self.completed == self.total:
            await self._complete(target, on_complete)

    async def _complete(
        self,
        target: dict[str, list[dict[str, Any]]],
        on_complete: Optional[CompletionCallback],
    ) -> None:
        if self._fired:
            return
        self._fired = True
        if on_complete is not None:
            result = on_complete(target)
            if inspect.isawaitable(result):
                await result
