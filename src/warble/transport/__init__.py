"""Outbound delivery to the messaging platform."""

from warble.transport.sender import SendQueue, sender_factory

__all__ = [
    "SendQueue",
    "sender_factory",
]
