"""Routing — ordered route tree with nested routers and exit actions.

Routes are registered during setup and evaluated in registration order
for every inbound event.
"""

from warble.routing.deliver import ScopedDeliver
from warble.routing.next import Next
from warble.routing.outcome import CONTINUE, STOP, ExitTo
from warble.routing.protocol import Dispatchable
from warble.routing.router import Router

__all__ = [
    "CONTINUE",
    "STOP",
    "Dispatchable",
    "ExitTo",
    "Next",
    "Router",
    "ScopedDeliver",
]
