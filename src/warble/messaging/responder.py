"""Response sink handed to every reducer.

Collects outbound payloads and state updates for one inbound event.
The router keeps ``path`` pointing at the scope of the reducer being
run, so relative expected actions land in the right sub-tree.
"""

from collections.abc import Callable
from typing import Any

from warble.routing.paths import make_absolute


class Responder:
    """Outbound side of one dispatch.

    Usage::

        def ask_name(req, res, deliver, next):
            res.text("What's your name?")
            res.expected("name")     # next text goes to <scope>/name
    """

    __slots__ = ("_send", "new_state", "path", "sender_id")

    def __init__(self, sender_id: str | None, send: Callable[[dict[str, Any]], Any]) -> None:
        self.sender_id = sender_id
        self._send = send
        self.path = "/"
        self.new_state: dict[str, Any] = {}

    def set_path(self, path: str) -> None:
        self.path = path

    def send(self, message: dict[str, Any]) -> "Responder":
        """Queue a raw Messenger message payload for the sender."""
        self._send({"recipient": {"id": self.sender_id}, "message": message})
        return self

    def text(self, text: str) -> "Responder":
        return self.send({"text": text})

    def wait(self, ms: int = 600) -> "Responder":
        """Pause the outbound queue for *ms* milliseconds."""
        self._send({"wait": ms})
        return self

    def set_state(self, state: dict[str, Any]) -> "Responder":
        """Merge *state* into the conversation state saved after dispatch."""
        self.new_state.update(state)
        return self

    def expected(self, action: str | None) -> "Responder":
        """Route the sender's next message to *action* (relative to this scope)."""
        if action is None:
            return self.set_state({"_expected": None})
        return self.set_state({"_expected": make_absolute(action, self.path)})

    def expected_keywords(self, keywords: list[dict[str, Any]]) -> "Responder":
        """Expect one of *keywords* next; see ``quick_reply_action``."""
        resolved = [
            {**keyword, "action": make_absolute(keyword["action"], self.path)}
            for keyword in keywords
        ]
        return self.set_state({"_expectedKeywords": resolved})

    def __repr__(self) -> str:
        return f"<Responder sender={self.sender_id!r} path={self.path!r}>"
