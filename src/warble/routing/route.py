"""Route, Reducer, and ExitEntry records."""

import re
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from warble._internal.types import ExitListener
from warble.errors import ConfigurationError
from warble.routing.paths import WILDCARD
from warble.routing.protocol import Dispatchable


@dataclass(frozen=True, slots=True)
class Reducer:
    """One handler within a route.

    Plain handlers must match the whole action; sub-trees match a prefix
    and route the remainder themselves.
    """

    target: Dispatchable
    pattern: re.Pattern[str]

    @property
    def is_subtree(self) -> bool:
        return self.target.is_subtree


@dataclass(frozen=True, slots=True)
class ExitEntry:
    """An exit listener registered with ``RouteChain.next()``.

    ``action`` may be ``"*"`` to catch every exit action.
    """

    action: str
    listener: ExitListener

    def accepts(self, action: str) -> bool:
        return self.action == "*" or self.action == action


@dataclass(frozen=True, slots=True)
class Route:
    """A registration unit.

    Created by ``Router.use()``. ``exits`` only ever grows, during setup.
    """

    path: str
    reducers: tuple[Reducer, ...]
    matcher: Callable[[Any], Any] | None = None
    exits: list[ExitEntry] = field(default_factory=list)

    @property
    def is_wildcard(self) -> bool:
        return self.path == WILDCARD


class RouteChain:
    """Returned by ``Router.use()`` to attach exit listeners fluently::

        router.use("/checkout", checkout_router) \\
            .next("paid", on_paid) \\
            .next("*", on_any_exit)
    """

    __slots__ = ("route",)

    def __init__(self, route: Route) -> None:
        self.route = route

    def next(self, action: str, listener: ExitListener) -> "RouteChain":
        """Register *listener* for the exit action *action* (or ``"*"``)."""
        if not isinstance(action, str) or not action:
            msg = f"Exit action must be a non-empty string, got {action!r}."
            raise ConfigurationError(msg)
        if not callable(listener):
            msg = f"Exit listener for {action!r} on {self.route.path!r} is not callable: {listener!r}"
            raise ConfigurationError(msg)
        self.route.exits.append(ExitEntry(action=action, listener=listener))
        return self
