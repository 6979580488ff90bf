"""
Tests for the sync coordinator.

These tests cover:
- Completion firing exactly once after every collection is drained
- Out-of-order completion and empty collections
- The zero-collection case
- Cursor failures
"""

import asyncio

import pytest

from mirrordb.services.sync_service import SyncCoordinator


def make_cursor_factory(data: dict, delays: dict | None = None):
    """Cursor factory yielding ``data[name]`` with per-collection delays."""
    delays = delays or {}

    async def _cursor(name: str):
        for record in data[name]:
            await asyncio.sleep(delays.get(name, 0))
            yield record

    return _cursor


class TestSyncBarrier:
    """Tests for the completion barrier."""

    @pytest.mark.asyncio
    async def test_fires_once_after_all_loaded(self):
        data = {"a": [{"id": 1}, {"id": 2}], "b": [{"id": 3}]}
        calls = []
        target = {}

        def on_complete(loaded):
            calls.append({name: len(records) for name, records in loaded.items()})

        coordinator = SyncCoordinator(make_cursor_factory(data))
        await coordinator.run(["a", "b"], target, on_complete)

        assert calls == [{"a": 2, "b": 1}]
        assert target == data
        assert coordinator.done

    @pytest.mark.asyncio
    async def test_fires_after_slowest_collection_in_any_order(self):
        data = {
            "slow": [{"n": i} for i in range(3)],
            "fast": [{"n": i} for i in range(5)],
            "empty": [],
        }
        delays = {"slow": 0.02, "fast": 0.001}
        finished_at_callback = []
        target = {}

        def on_complete(loaded):
            finished_at_callback.append({name: len(r) for name, r in loaded.items()})

        coordinator = SyncCoordinator(make_cursor_factory(data, delays))
        await coordinator.run(["slow", "fast", "empty"], target, on_complete)

        assert finished_at_callback == [{"slow": 3, "fast": 5, "empty": 0}]
        assert coordinator.completed == 3

    @pytest.mark.asyncio
    async def test_preserves_cursor_order(self):
        data = {"a": [{"id": 3}, {"id": 1}, {"id": 2}]}
        target = {}

        await SyncCoordinator(make_cursor_factory(data)).run(["a"], target)

        assert [r["id"] for r in target["a"]] == [3, 1, 2]

    @pytest.mark.asyncio
    async def test_zero_collections_fires_immediately(self):
        calls = []

        coordinator = SyncCoordinator(make_cursor_factory({}))
        await coordinator.run([], {}, lambda loaded: calls.append(loaded))

        assert calls == [{}]
        assert coordinator.done

    @pytest.mark.asyncio
    async def test_async_completion_callback_is_awaited(self):
        calls = []

        async def on_complete(loaded):
            await asyncio.sleep(0)
            calls.append(sorted(loaded))

        await SyncCoordinator(make_cursor_factory({"a": []})).run(["a"], {}, on_complete)

        assert calls == [["a"]]

    @pytest.mark.asyncio
    async def test_replaces_existing_records(self):
        target = {"a": [{"stale": True}]}

        await SyncCoordinator(make_cursor_factory({"a": [{"id": 1}]})).run(["a"], target)

        assert target["a"] == [{"id": 1}]

    @pytest.mark.asyncio
    async def test_failing_cursor_propagates_and_does_not_fire(self):
        calls = []

        async def _cursor(name):
            if name == "broken":
                raise RuntimeError("cursor died")
            yield {"id": 1}

        coordinator = SyncCoordinator(_cursor)
        with pytest.raises(RuntimeError, match="cursor died"):
            await coordinator.run(["ok", "broken"], {}, lambda loaded: calls.append(loaded))

        assert calls == []
        assert not coordinator.done
