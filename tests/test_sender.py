"""Tests for warble.transport.sender — ordered Graph API delivery."""

import json
import logging

import httpx
import pytest

from warble.config import BotConfig
from warble.errors import DisconnectedError, SenderError
from warble.transport.sender import SendQueue, sender_error, sender_factory

INCOMING = {"sender": {"id": "42"}, "message": {"text": "hi"}}


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def _text(text: str) -> dict:
    return {"recipient": {"id": "42"}, "message": {"text": text}}


class TestFlush:
    @pytest.mark.asyncio
    async def test_posts_in_order_with_token(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"message_id": "m"})

        config = BotConfig(page_token="t0k3n")
        async with _client(handler) as client:
            queue = SendQueue(config, INCOMING, client=client)
            queue.send(_text("one"))
            queue.send(_text("two"))
            await queue.flush()

        assert [json.loads(r.content)["message"]["text"] for r in seen] == ["one", "two"]
        assert seen[0].url.params["access_token"] == "t0k3n"
        assert str(seen[0].url).startswith(config.graph_api_url)
        assert queue.sent == [_text("one"), _text("two")]
        assert len(queue) == 0

    @pytest.mark.asyncio
    async def test_wait_entries_are_not_posted(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={})

        async with _client(handler) as client:
            queue = SendQueue(BotConfig(), INCOMING, client=client)
            queue.send(_text("one"))
            queue.send({"wait": 1})
            queue.send(_text("two"))
            await queue.flush()

        assert len(seen) == 2
        assert queue.sent == [_text("one"), _text("two")]

    @pytest.mark.asyncio
    async def test_empty_queue_makes_no_requests(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("no request expected")

        async with _client(handler) as client:
            await SendQueue(BotConfig(), INCOMING, client=client).flush()


class TestErrors:
    @pytest.mark.asyncio
    async def test_error_stops_queue_and_calls_hook(self) -> None:
        errors: list[tuple] = []

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json={"error": {"message": "Invalid", "code": 100}})

        def on_error(error, incoming):
            errors.append((error, incoming))
            return True

        async with _client(handler) as client:
            queue = SendQueue(BotConfig(), INCOMING, client=client, on_sender_error=on_error)
            queue.send(_text("one"))
            queue.send(_text("two"))
            await queue.flush()

        assert queue.sent == []
        assert len(queue) == 0
        error, incoming = errors[0]
        assert isinstance(error, SenderError)
        assert error.status == 400
        assert error.code == 100
        assert incoming is INCOMING

    @pytest.mark.asyncio
    async def test_disconnected_user(self) -> None:
        errors: list = []

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                403, json={"error": {"message": "This person isn't available", "code": 200}}
            )

        async with _client(handler) as client:
            factory = sender_factory(
                BotConfig(), client=client, on_sender_error=lambda e, i: errors.append(e)
            )
            queue = factory(INCOMING, "page")
            queue.send(_text("one"))
            await queue.flush()

        assert isinstance(errors[0], DisconnectedError)
        assert str(errors[0]) == "This person isn't available"

    @pytest.mark.asyncio
    async def test_unhandled_error_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, text="oops")

        with caplog.at_level(logging.ERROR, logger="warble.sender"):
            async with _client(handler) as client:
                queue = SendQueue(BotConfig(), INCOMING, client=client)
                queue.send(_text("one"))
                await queue.flush()

        assert "Sending failed" in caplog.text

    @pytest.mark.asyncio
    async def test_non_object_error_body_reaches_hook(self) -> None:
        errors: list = []

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, json=["boom"])

        async with _client(handler) as client:
            queue = SendQueue(
                BotConfig(), INCOMING, client=client, on_sender_error=lambda e, i: errors.append(e)
            )
            queue.send(_text("one"))
            await queue.flush()

        assert type(errors[0]) is SenderError
        assert errors[0].status == 500
        assert errors[0].code is None

    @pytest.mark.asyncio
    async def test_network_error_becomes_sender_error(self) -> None:
        errors: list = []

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused")

        async with _client(handler) as client:
            queue = SendQueue(
                BotConfig(), INCOMING, client=client, on_sender_error=lambda e, i: errors.append(e)
            )
            queue.send(_text("one"))
            await queue.flush()

        assert isinstance(errors[0], SenderError)
        assert "refused" in str(errors[0])


class TestResponseHook:
    @pytest.mark.asyncio
    async def test_sees_previous_response_and_rewrites_payload(self) -> None:
        seen: list[tuple] = []
        posted: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            text = json.loads(request.content)["message"]["text"]
            posted.append(text)
            return httpx.Response(200, json={"message_id": f"m-{text}"})

        def on_response(response, payload):
            seen.append((response.json()["message_id"] if response is not None else None, payload))
            if payload["message"]["text"] == "two":
                return _text("TWO")
            return payload

        async with _client(handler) as client:
            queue = SendQueue(BotConfig(), INCOMING, client=client, on_response=on_response)
            queue.send(_text("one"))
            queue.send(_text("two"))
            await queue.flush()

        assert posted == ["one", "TWO"]
        assert seen == [(None, _text("one")), ("m-one", _text("two"))]
        assert queue.sent == [_text("one"), _text("TWO")]

    @pytest.mark.asyncio
    async def test_returning_none_stops_the_queue(self) -> None:
        posted: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            posted.append(request)
            return httpx.Response(200, json={})

        async def on_response(response, payload):
            return None if response is not None else payload

        async with _client(handler) as client:
            factory = sender_factory(BotConfig(), client=client)
            queue = factory(INCOMING, "page", on_response=on_response)
            queue.send(_text("one"))
            queue.send(_text("two"))
            queue.send(_text("three"))
            await queue.flush()

        assert len(posted) == 1
        assert queue.sent == [_text("one")]
        assert len(queue) == 0


class TestSenderError:
    def test_403_without_code_200_is_plain(self) -> None:
        response = httpx.Response(403, json={"error": {"message": "Forbidden", "code": 10}})
        error = sender_error(response)
        assert type(error) is SenderError
        assert error.status == 403

    def test_non_json_body(self) -> None:
        error = sender_error(httpx.Response(502, text="Bad gateway"))
        assert error.status == 502
        assert "502" in str(error)

    def test_json_string_body(self) -> None:
        error = sender_error(httpx.Response(500, json="boom"))
        assert type(error) is SenderError
        assert error.status == 500
