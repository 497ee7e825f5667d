"""Inbound event facade.

Wraps one Messenger messaging entry together with the conversation state
of its sender. The entry itself is read-only; ``state`` is the stored
conversation state, which the router never touches.
"""

import json
from dataclasses import dataclass, field
from typing import Any

from warble.messaging.payload import payload_action, payload_data, quick_reply_action
from warble.messaging.tokenizer import tokenize
from warble.routing.paths import resolve_action


@dataclass(frozen=True, slots=True)
class Request:
    """One inbound event: a text message, quick reply, attachment, or postback.

    Usage::

        req = Request(entry, state)
        if req.is_postback():
            data = req.action(get_data=True)
    """

    data: dict[str, Any]
    state: dict[str, Any] = field(default_factory=dict)

    # -- Raw parts --

    @property
    def message(self) -> dict[str, Any] | None:
        return self.data.get("message") or None

    @property
    def attachments(self) -> list[dict[str, Any]]:
        message = self.message
        if message is None:
            return []
        return message.get("attachments") or []

    @property
    def sender_id(self) -> str | None:
        sender = self.data.get("sender")
        return sender.get("id") if sender else None

    @property
    def _postback(self) -> dict[str, Any] | None:
        return self.data.get("postback") or None

    @property
    def _quick_reply(self) -> dict[str, Any] | None:
        message = self.message
        if message is None:
            return None
        return message.get("quick_reply") or None

    # -- Kind checks --

    def is_message(self) -> bool:
        """True for text messages, quick replies, and attachments."""
        return self.message is not None

    def is_postback(self) -> bool:
        return self._postback is not None

    def is_quick_reply(self) -> bool:
        return self._quick_reply is not None

    def is_attachment(self) -> bool:
        return len(self.attachments) > 0

    def _attachment_type_is(self, kind: str, index: int) -> bool:
        attachment = self.attachment(index)
        return attachment is not None and attachment.get("type") == kind

    def is_image(self, index: int = 0) -> bool:
        return self._attachment_type_is("image", index)

    def is_file(self, index: int = 0) -> bool:
        return self._attachment_type_is("file", index)

    def attachment(self, index: int = 0) -> dict[str, Any] | None:
        if len(self.attachments) <= index:
            return None
        return self.attachments[index]

    def attachment_url(self, index: int = 0) -> str | None:
        attachment = self.attachment(index)
        if attachment is None:
            return None
        payload = attachment.get("payload") or {}
        return payload.get("url")

    # -- Text and actions --

    def text(self, tokenized: bool = False) -> str:
        """Message text, or ``""``.

        With ``tokenized=True`` the text is lowercased and dash-separated
        (``"Can you help?"`` -> ``"can-you-help"``).
        """
        message = self.message
        if message is None:
            return ""
        text = message.get("text") or ""
        return tokenize(text) if tokenized else text

    def quick_reply(self, get_data: bool = False) -> dict[str, Any] | str | None:
        if self._quick_reply is None:
            return None
        if get_data:
            return payload_data(self._quick_reply)
        return payload_action(self._quick_reply)

    def postback(self, get_data: bool = False) -> dict[str, Any] | str | None:
        if self._postback is None:
            return None
        if get_data:
            return payload_data(self._postback)
        return payload_action(self._postback)

    def action(self, get_data: bool = False) -> dict[str, Any] | str | None:
        """The action this event triggers.

        Checked in order: postback, quick reply, expected keywords stored in
        state, then the expected action stored in state. With
        ``get_data=True`` returns the payload data (``{}`` when absent)
        instead, and state is not consulted.
        """
        if get_data:
            if self._postback is not None:
                return payload_data(self._postback)
            if self._quick_reply is not None:
                return payload_data(self._quick_reply)
            return {}

        action = payload_action(self._postback) or payload_action(self._quick_reply)

        keywords = self.state.get("_expectedKeywords")
        if not action and keywords:
            action = quick_reply_action(keywords, self.text(True))

        if not action:
            action = self.state.get("_expected")

        return action or None

    def resolved_action(self, scope: str = "/") -> str | None:
        """The action relative to *scope*, or ``None`` if it isn't addressed there."""
        action = self.action()
        return resolve_action(action if isinstance(action, str) else None, scope)

    # -- Builders for raw events --

    @staticmethod
    def create_postback(
        sender_id: str, action: str, data: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        return {
            "sender": {"id": sender_id},
            "postback": {"payload": {"action": action, "data": data or {}}},
        }

    @staticmethod
    def create_text(sender_id: str, text: str) -> dict[str, Any]:
        return {"sender": {"id": sender_id}, "message": {"text": text}}

    @staticmethod
    def create_quick_reply(
        sender_id: str, action: str, data: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        return {
            "sender": {"id": sender_id},
            "message": {
                "text": action,
                "quick_reply": {"payload": json.dumps({"action": action, "data": data or {}})},
            },
        }

    @staticmethod
    def create_attachment(sender_id: str, url: str, kind: str = "file") -> dict[str, Any]:
        return {
            "sender": {"id": sender_id},
            "message": {"attachments": [{"type": kind, "payload": {"url": url}}]},
        }
