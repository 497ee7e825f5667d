"""Graph API sender.

Each inbound event gets its own ``SendQueue``. Handlers only append to
it; ``flush()`` posts the payloads one at a time, in order, so replies
never overtake each other. ``{"wait": ms}`` entries pause the queue.

Uses raw HTTP via httpx, no platform SDK.
"""

import asyncio
import contextlib
import logging
from collections import deque
from collections.abc import Callable
from typing import Any

import httpx

from warble._internal.invoke import invoke
from warble.config import BotConfig
from warble.errors import DisconnectedError, SenderError

logger = logging.getLogger("warble.sender")

# on_sender_error(error, incoming) -> True when the error was handled
SenderErrorHook = Callable[[SenderError, dict[str, Any]], Any]

# on_response(previous_response, next_payload) -> payload to send, or None to stop
ResponseHook = Callable[[httpx.Response | None, dict[str, Any]], Any]

# Platform error code for "this person isn't available right now"
_DISCONNECTED_CODE = 200


def sender_error(response: httpx.Response) -> SenderError:
    """Translate an error response into a ``SenderError``.

    A 403 carrying platform error code 200 means the user blocked the
    page or deleted the conversation: ``DisconnectedError``.
    """
    try:
        body = response.json()
    except ValueError:
        body = None
    error = body.get("error") if isinstance(body, dict) else None
    if not isinstance(error, dict):
        error = {}

    message = error.get("message") or f"Send API responded {response.status_code}"
    code = error.get("code")
    if response.status_code == 403 and code == _DISCONNECTED_CODE:
        return DisconnectedError(message)
    return SenderError(message, status=response.status_code, code=code)


class SendQueue:
    """Ordered outbound queue for one inbound event.

    Usage::

        queue = SendQueue(config, incoming)
        res = Responder(sender_id, queue.send)
        ...
        await queue.flush()
    """

    __slots__ = (
        "_client",
        "_config",
        "_incoming",
        "_on_error",
        "_on_response",
        "_queue",
        "sent",
    )

    def __init__(
        self,
        config: BotConfig,
        incoming: dict[str, Any],
        *,
        client: httpx.AsyncClient | None = None,
        on_sender_error: SenderErrorHook | None = None,
        on_response: ResponseHook | None = None,
    ) -> None:
        self._config = config
        self._incoming = incoming
        self._client = client
        self._on_error = on_sender_error
        self._on_response = on_response
        self._queue: deque[dict[str, Any]] = deque()
        self.sent: list[dict[str, Any]] = []

    def send(self, payload: dict[str, Any]) -> None:
        """Append *payload*; nothing goes out until ``flush()``."""
        self._queue.append(payload)

    def __len__(self) -> int:
        return len(self._queue)

    async def flush(self) -> None:
        """Post queued payloads in order.

        Before each entry goes out, ``on_response`` (when given) sees the
        previous Graph API response and may replace the entry, or return
        ``None`` to drop it and everything after it.

        The first failure drops the rest of the queue. It is passed to
        ``on_sender_error`` and logged unless the hook returns ``True``.
        """
        if not self._queue:
            return

        client_context = (
            contextlib.nullcontext(self._client)
            if self._client is not None
            else httpx.AsyncClient(timeout=self._config.request_timeout)
        )
        try:
            async with client_context as client:
                response: httpx.Response | None = None
                while self._queue:
                    payload = self._queue.popleft()
                    if self._on_response is not None:
                        payload = await invoke(self._on_response, response, payload)
                        if payload is None:
                            logger.debug("Response hook stopped the queue")
                            self._queue.clear()
                            break
                    if "wait" in payload:
                        await asyncio.sleep(payload["wait"] / 1000)
                        continue
                    response = await self._post(client, payload)
                    self.sent.append(payload)
        except (SenderError, httpx.HTTPError) as exc:
            self._queue.clear()
            error = exc if isinstance(exc, SenderError) else SenderError(str(exc))
            await self._report(error)
            return

        logger.debug("Sent %d payload(s) for %r", len(self.sent), self._incoming.get("sender"))

    async def _post(self, client: httpx.AsyncClient, payload: dict[str, Any]) -> httpx.Response:
        response = await client.post(
            self._config.graph_api_url,
            params={"access_token": self._config.page_token},
            json=payload,
        )
        if response.is_error:
            raise sender_error(response)
        return response

    async def _report(self, error: SenderError) -> None:
        handled = None
        if self._on_error is not None:
            handled = await invoke(self._on_error, error, self._incoming)
        if handled is not True:
            logger.error(
                "Sending failed after %d payload(s) for %r: %s",
                len(self.sent),
                self._incoming.get("sender"),
                error,
            )


def sender_factory(
    config: BotConfig,
    *,
    on_sender_error: SenderErrorHook | None = None,
    client: httpx.AsyncClient | None = None,
    on_response: ResponseHook | None = None,
) -> Callable[..., SendQueue]:
    """Return ``factory(incoming, page_id=None, on_response=None) -> SendQueue``.

    Pass *client* to reuse one ``httpx.AsyncClient`` (or a mock transport
    in tests); otherwise each flush opens its own. *on_response* given to
    the factory call overrides the one given here.
    """

    def factory(
        incoming: dict[str, Any],
        page_id: str | None = None,
        on_response: ResponseHook | None = on_response,
    ) -> SendQueue:
        return SendQueue(
            config,
            incoming,
            client=client,
            on_sender_error=on_sender_error,
            on_response=on_response,
        )

    return factory
