"""Tests for warble.state — in-memory conversation state storage."""

import pytest

from warble.state import MemoryStateStorage


class TestMemoryStateStorage:
    @pytest.mark.asyncio
    async def test_new_sender_gets_empty_state(self) -> None:
        storage = MemoryStateStorage()
        assert await storage.get_or_create("1") == {}

    @pytest.mark.asyncio
    async def test_save_and_load(self) -> None:
        storage = MemoryStateStorage()
        await storage.save("1", {"step": 2})
        assert await storage.get_or_create("1") == {"step": 2}
        assert len(storage) == 1

    @pytest.mark.asyncio
    async def test_loaded_state_is_a_copy(self) -> None:
        storage = MemoryStateStorage()
        await storage.save("1", {"items": [1]})

        state = await storage.get_or_create("1")
        state["items"].append(2)

        assert await storage.get_or_create("1") == {"items": [1]}
