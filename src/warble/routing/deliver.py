"""Scope-relative delivery callbacks.

Handlers inside a nested router address follow-up actions relative to
the router's scope. ``ScopedDeliver`` turns those into absolute actions
before they leave the sub-tree::

    deliver = ScopedDeliver(host_deliver, "/shop")
    deliver("cart", {"item": 1})   # host_deliver("/shop/cart", {"item": 1})

    resolve = deliver.wait()       # host_deliver.wait() is called now
    ...
    resolve("paid")                # resolver("/shop/paid", {})
"""

from typing import Any

from warble.routing.paths import make_absolute


class ScopedDeliver:
    """Wraps a delivery callback so relative actions resolve under *scope*."""

    __slots__ = ("_parent", "scope")

    def __init__(self, parent: Any, scope: str) -> None:
        self._parent = parent
        self.scope = scope

    def __call__(self, action: str, data: dict[str, Any] | None = None) -> Any:
        return self._parent(make_absolute(action, self.scope), data if data is not None else {})

    def wait(self) -> "ScopedDeliver":
        """Obtain a deferred resolver from the parent and keep the scoping."""
        return ScopedDeliver(self._parent.wait(), self.scope)

    def __repr__(self) -> str:
        return f"<ScopedDeliver scope={self.scope!r}>"


class NullDeliver:
    """Delivery callback that drops everything. Default for ``reduce()``."""

    __slots__ = ()

    def __call__(self, action: str, data: dict[str, Any] | None = None) -> None:
        return None

    def wait(self) -> "NullDeliver":
        return self
