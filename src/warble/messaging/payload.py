"""Postback and quick-reply payload decoding.

Payloads arrive in three shapes:

- a mapping ``{"action": "/start", "data": {...}}``
- the same mapping JSON-encoded into a string
- a bare action string (``"/start"``)
"""

import json
import re
from typing import Any

from warble.messaging.tokenizer import tokenize

_JSON_OBJECT = re.compile(r"^\{.*\}$", re.DOTALL)


def decode_payload(container: dict[str, Any] | None) -> dict[str, Any] | str | None:
    """Return the payload of a postback or quick reply as a mapping or string."""
    if not container:
        return None
    payload = container.get("payload")
    if isinstance(payload, str) and _JSON_OBJECT.match(payload):
        # Not every brace-wrapped string is JSON; fall back to the raw action
        try:
            return json.loads(payload)
        except json.JSONDecodeError:
            return payload
    return payload


def payload_action(container: dict[str, Any] | None) -> str | None:
    """The action carried by a postback or quick reply, if any."""
    payload = decode_payload(container)
    if isinstance(payload, dict):
        return payload.get("action") or None
    return payload or None


def payload_data(container: dict[str, Any] | None) -> dict[str, Any]:
    """The data carried by a postback or quick reply, ``{}`` when absent."""
    payload = decode_payload(container)
    if isinstance(payload, dict):
        data = payload.get("data")
        return data if isinstance(data, dict) else payload
    return {}


def quick_reply_action(expected_keywords: list[dict[str, Any]], text: str) -> str | None:
    """Match tokenized *text* against expected keywords.

    Each keyword is ``{"action": ..., "title": ..., "match": ...}``. It
    matches when the tokenized title equals the text, or when the optional
    ``match`` regex is found in it. The first match wins.
    """
    if not text:
        return None
    for keyword in expected_keywords:
        title = keyword.get("title")
        if title and tokenize(title) == text:
            return keyword.get("action")
        pattern = keyword.get("match")
        if pattern and re.search(pattern, text):
            return keyword.get("action")
    return None
