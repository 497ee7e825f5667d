"""Test helper for warble bots.

Runs events through the same ``Processor`` used in production, with the
network replaced by an in-memory outbox.

Usage::

    tester = Tester(router)
    await tester.postback("/start")
    assert tester.texts() == ["Hi! What's your name?"]

    await tester.text("Ada")
    assert "Ada" in tester.texts()[-1]
"""

from typing import Any

from warble.config import BotConfig
from warble.messaging.request import Request
from warble.processor import Processor
from warble.routing.protocol import Dispatchable
from warble.state import MemoryStateStorage


class _CapturingOutbox:
    __slots__ = ("_captured",)

    def __init__(self, captured: list[dict[str, Any]]) -> None:
        self._captured = captured

    def send(self, payload: dict[str, Any]) -> None:
        self._captured.append(payload)

    async def flush(self) -> None:
        return None


class Tester:
    __test__ = False  # Tell pytest this is not a test class
    """Drives a route tree as a single conversation partner."""

    __slots__ = ("processor", "sender_id", "sent", "storage")

    def __init__(
        self,
        reducer: Dispatchable | Any,
        sender_id: str = "tester",
        *,
        config: BotConfig | None = None,
    ) -> None:
        self.sender_id = sender_id
        self.sent: list[dict[str, Any]] = []
        self.storage = MemoryStateStorage()
        self.processor = Processor(
            reducer,
            config,
            state_storage=self.storage,
            sender_factory=lambda incoming, page_id=None: _CapturingOutbox(self.sent),
        )

    async def text(self, text: str) -> None:
        await self.processor.process(Request.create_text(self.sender_id, text))

    async def postback(self, action: str, data: dict[str, Any] | None = None) -> None:
        await self.processor.process(Request.create_postback(self.sender_id, action, data))

    async def quick_reply(self, action: str, data: dict[str, Any] | None = None) -> None:
        await self.processor.process(Request.create_quick_reply(self.sender_id, action, data))

    async def state(self) -> dict[str, Any]:
        return await self.storage.get_or_create(self.sender_id)

    def messages(self) -> list[dict[str, Any]]:
        """Outbound message payloads, pauses left out."""
        return [payload["message"] for payload in self.sent if "message" in payload]

    def texts(self) -> list[str]:
        return [message["text"] for message in self.messages() if "text" in message]

    def clear(self) -> None:
        self.sent.clear()
