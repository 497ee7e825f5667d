"""The ``Dispatchable`` capability.

Anything a route can hand an event to implements ``reduce``. ``Router``
is one, so routers nest inside routers; plain handler functions are
adapted by ``FunctionReducer``.

A custom sub-tree only needs to subclass ``Dispatchable``::

    class Maintenance(Dispatchable):
        async def reduce(self, req, res, deliver, next, path="/", *, observe=None):
            res.text("We'll be right back.")
"""

from abc import ABC, abstractmethod
from typing import Any, ClassVar

from warble._internal.invoke import invoke
from warble._internal.types import ActionObserver, Handler


class Dispatchable(ABC):
    """A node of the route tree that can reduce an event."""

    # Sub-trees match a path prefix and keep routing the remainder.
    is_subtree: ClassVar[bool] = True

    @abstractmethod
    async def reduce(
        self,
        req: Any,
        res: Any,
        deliver: Any,
        next: Any,
        path: str = "/",
        *,
        observe: ActionObserver | None = None,
    ) -> Any: ...


class FunctionReducer(Dispatchable):
    """Adapts a plain ``handler(req, res, deliver, next)`` callable."""

    is_subtree: ClassVar[bool] = False

    __slots__ = ("handler",)

    def __init__(self, handler: Handler) -> None:
        self.handler = handler

    async def reduce(
        self,
        req: Any,
        res: Any,
        deliver: Any,
        next: Any,
        path: str = "/",
        *,
        observe: ActionObserver | None = None,
    ) -> Any:
        return await invoke(self.handler, req, res, deliver, next)

    def __repr__(self) -> str:
        name = getattr(self.handler, "__qualname__", repr(self.handler))
        return f"<FunctionReducer {name}>"
