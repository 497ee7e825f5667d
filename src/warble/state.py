"""Conversation state storage.

The router treats state as opaque. The ``Processor`` loads it before
dispatch and saves what handlers set through ``Responder.set_state()``.
Any object with these two coroutine methods works as storage.
"""

import copy
from typing import Any, Protocol


class StateStorage(Protocol):
    """Protocol for conversation state storage."""

    async def get_or_create(self, sender_id: str) -> dict[str, Any]: ...

    async def save(self, sender_id: str, state: dict[str, Any]) -> None: ...


class MemoryStateStorage:
    """In-process storage. State is lost on restart; use for tests and demos."""

    __slots__ = ("_states",)

    def __init__(self) -> None:
        self._states: dict[str, dict[str, Any]] = {}

    async def get_or_create(self, sender_id: str) -> dict[str, Any]:
        # Handlers get a copy, the stored state changes only on save()
        return copy.deepcopy(self._states.get(sender_id, {}))

    async def save(self, sender_id: str, state: dict[str, Any]) -> None:
        self._states[sender_id] = copy.deepcopy(state)

    def __len__(self) -> int:
        return len(self._states)
