"""Processor — runs one inbound event through a route tree.

Wires together everything around the router: conversation state is
loaded before dispatch and saved after it, the outbound queue is
flushed, and follow-up actions handed to ``deliver`` are processed as
new postbacks from the same sender.

Usage::

    router = Router()
    router.use("/start", start)

    processor = Processor(router, BotConfig(page_token="EAAB..."))

    for entry in webhook_body["entry"]:
        for event in entry["messaging"]:
            await processor.process(event, page_id=entry["id"])
"""

import asyncio
import logging
from collections.abc import Callable
from typing import Any, Protocol

from warble.config import BotConfig
from warble.errors import ConfigurationError, DispatchError
from warble.messaging.request import Request
from warble.messaging.responder import Responder
from warble.routing.next import Next
from warble.routing.outcome import Continue, ExitTo
from warble.routing.protocol import Dispatchable, FunctionReducer
from warble.state import MemoryStateStorage, StateStorage
from warble.transport.sender import sender_factory as graph_sender_factory

logger = logging.getLogger("warble.processor")

# State keys that only steer the very next event
_EXPECTATIONS = ("_expected", "_expectedKeywords")


class Outbox(Protocol):
    """What the processor needs from an outbound queue."""

    def send(self, payload: dict[str, Any]) -> None: ...

    async def flush(self) -> None: ...


class FollowUps:
    """Host end of ``deliver``: collects follow-up actions for one event.

    Calling it queues a postback. ``wait()`` returns a resolver for
    actions that are only known after some async work; the processor
    waits up to ``BotConfig.follow_up_timeout`` for the resolvers before
    moving on.
    """

    __slots__ = ("_deferred", "ready")

    def __init__(self) -> None:
        self.ready: list[tuple[str, dict[str, Any]]] = []
        self._deferred: list[asyncio.Future[tuple[str, dict[str, Any]]]] = []

    def __call__(self, action: str, data: dict[str, Any] | None = None) -> None:
        self.ready.append((action, data if data is not None else {}))

    def wait(self) -> Callable[..., None]:
        future: asyncio.Future[tuple[str, dict[str, Any]]] = (
            asyncio.get_running_loop().create_future()
        )
        self._deferred.append(future)

        def resolve(action: str, data: dict[str, Any] | None = None) -> None:
            if not future.done():
                future.set_result((action, data if data is not None else {}))

        return resolve

    async def collect(self, timeout: float | None = None) -> list[tuple[str, dict[str, Any]]]:
        """Immediate follow-ups first, then deferred ones in creation order.

        Resolvers still unresolved after *timeout* seconds are dropped.
        """
        actions = list(self.ready)
        if not self._deferred:
            return actions

        _, pending = await asyncio.wait(self._deferred, timeout=timeout)
        if pending:
            logger.warning(
                "Dropping %d unresolved follow-up(s) after %ss", len(pending), timeout
            )
            for future in pending:
                future.cancel()

        actions.extend(future.result() for future in self._deferred if future not in pending)
        return actions


class Processor:
    """Processes inbound messaging events with a route tree."""

    __slots__ = ("_config", "_make_outbox", "_reducer", "_storage")

    def __init__(
        self,
        reducer: Dispatchable | Callable[..., Any],
        config: BotConfig | None = None,
        *,
        state_storage: StateStorage | None = None,
        sender_factory: Callable[..., Outbox] | None = None,
    ) -> None:
        if isinstance(reducer, Dispatchable):
            self._reducer = reducer
        elif callable(reducer):
            self._reducer = FunctionReducer(reducer)
        else:
            msg = f"Processor needs a Router or a handler, got {reducer!r}."
            raise ConfigurationError(msg)

        self._config = config if config is not None else BotConfig()
        self._storage: StateStorage = (
            state_storage if state_storage is not None else MemoryStateStorage()
        )
        self._make_outbox = (
            sender_factory if sender_factory is not None else graph_sender_factory(self._config)
        )

    @property
    def config(self) -> BotConfig:
        return self._config

    async def process(self, event: dict[str, Any], page_id: str | None = None) -> None:
        """Dispatch *event* and every follow-up postback it triggers.

        Events without a sender (delivery receipts, echoes of other apps)
        are ignored. Handler exceptions propagate; nothing is saved or sent
        for the failing event.
        """
        await self._process(event, page_id, depth=0)

    async def _process(self, event: dict[str, Any], page_id: str | None, depth: int) -> None:
        sender_id = (event.get("sender") or {}).get("id")
        if sender_id is None:
            logger.debug("Ignoring event without sender: %r", sorted(event))
            return

        if depth > self._config.max_postback_depth:
            msg = (
                f"Follow-up postbacks for {sender_id!r} exceeded "
                f"max_postback_depth={self._config.max_postback_depth}."
            )
            raise DispatchError(msg)

        state = await self._storage.get_or_create(sender_id)
        req = Request(event, state)
        outbox = self._make_outbox(event, page_id)
        res = Responder(sender_id, outbox.send)
        follow_ups = FollowUps()

        logger.debug("Dispatching %r for %s", req.action(), sender_id)
        unhandled = Next()
        await self._reducer.reduce(req, res, follow_ups, unhandled)
        if isinstance(unhandled.outcome, Continue):
            logger.info("No route handled %r for %s", req.action(), sender_id)
        elif isinstance(unhandled.outcome, ExitTo):
            logger.info("Unconsumed exit %r for %s", unhandled.outcome.action, sender_id)

        new_state = {**state, **{key: None for key in _EXPECTATIONS}, **res.new_state}
        await self._storage.save(sender_id, new_state)
        await outbox.flush()

        for action, data in await follow_ups.collect(self._config.follow_up_timeout):
            await self._process(Request.create_postback(sender_id, action, data), page_id, depth + 1)
