"""Inbound event facade and response sink."""

from warble.messaging.request import Request
from warble.messaging.responder import Responder
from warble.messaging.tokenizer import tokenize

__all__ = [
    "Request",
    "Responder",
    "tokenize",
]
