"""Cascading router.

Routes are registered during setup, in order, and evaluated in that same
order for every event. A route holds one or more reducers; a reducer is
either a plain handler function or another ``Dispatchable`` (typically a
nested ``Router``) that keeps routing the rest of the action path.

Routing never runs two reducers at once. Each reducer (and the matcher
deciding whether it runs) is awaited before the next one starts.
"""

import logging
import re
from typing import Any

from warble._internal.invoke import invoke
from warble._internal.types import ActionObserver, Continuation, Handler, Matcher
from warble.errors import ConfigurationError
from warble.routing.deliver import NullDeliver, ScopedDeliver
from warble.routing.next import Next
from warble.routing.outcome import Continue, ExitTo, Outcome, Stop
from warble.routing.paths import compile_path, compose_path, normalize_path
from warble.routing.protocol import Dispatchable, FunctionReducer
from warble.routing.route import Reducer, Route, RouteChain

logger = logging.getLogger("warble.router")


def make_matcher(match: object) -> Matcher:
    """Compile a ``match=`` argument into a predicate over the request.

    Strings and compiled patterns are searched in the tokenized message
    text. Callables are used as-is and may be async.
    """
    if isinstance(match, str | re.Pattern):
        pattern = re.compile(match) if isinstance(match, str) else match

        def text_matches(req: Any) -> bool:
            return pattern.search(req.text(True)) is not None

        return text_matches

    if callable(match):
        return match

    msg = f"Route matcher must be a string, a compiled pattern, or a callable, got {match!r}."
    raise ConfigurationError(msg)


class Router(Dispatchable):
    """Cascading router.

    Usage::

        router = Router()

        # runs for every event that reaches this point
        router.use(log_event)

        # action route
        router.use("/start", start)

        # text route: the pattern is searched in the tokenized text
        router.use("/help", say_help, match=r"help")

        # several reducers, then exit listeners
        router.use("/order", pick_item, confirm) \\
            .next("cancel", on_cancel)

        # nested router, addressed as /shop/...
        router.use("/shop", shop_router)
    """

    __slots__ = ("_observers", "_routes")

    def __init__(self) -> None:
        self._routes: list[Route] = []
        self._observers: list[ActionObserver] = []

    # -- Registration --

    def use(self, *args: Any, match: object = None) -> RouteChain:
        """Append a route.

        The first positional argument is the action path when it is a
        string, otherwise the route is a wildcard (``/*``). The remaining
        positional arguments are reducers: handler functions or
        ``Dispatchable`` sub-trees. A matcher is passed explicitly with
        ``match=`` and needs at least one reducer.

        Raises ``ConfigurationError`` for anything that is neither.
        """
        handlers = list(args)
        raw_path = handlers.pop(0) if handlers and isinstance(handlers[0], str) else "*"
        path = normalize_path(raw_path)

        matcher: Matcher | None = None
        if match is not None:
            if not handlers:
                msg = f"Route {path!r} has a matcher but no reducers to run when it matches."
                raise ConfigurationError(msg)
            matcher = make_matcher(match)

        route = Route(
            path=path,
            reducers=tuple(self._make_reducer(path, handler) for handler in handlers),
            matcher=matcher,
        )
        self._routes.append(route)
        return RouteChain(route)

    def _make_reducer(self, path: str, handler: Handler | Dispatchable) -> Reducer:
        if isinstance(handler, str | re.Pattern):
            msg = (
                f"Got {handler!r} among the reducers of route {path!r}. "
                "Pass text matchers with match=, e.g. router.use('/help', handler, match=r'help')."
            )
            raise ConfigurationError(msg)
        if handler is self:
            msg = "A router cannot be mounted inside itself."
            raise ConfigurationError(msg)

        if isinstance(handler, Dispatchable):
            target = handler
        elif callable(handler):
            target = FunctionReducer(handler)
        else:
            msg = f"Reducer for route {path!r} is not callable: {handler!r}"
            raise ConfigurationError(msg)

        return Reducer(target=target, pattern=compile_path(path, end=not target.is_subtree))

    def on_action(self, observer: ActionObserver) -> ActionObserver:
        """Register an observer for every action handled in this sub-tree.

        Called as ``observer(sender_id, path, text, req)`` with the fully
        composed absolute path. Usable as a decorator.
        """
        self._observers.append(observer)
        return observer

    @property
    def routes(self) -> list[Route]:
        """Registered routes, in evaluation order."""
        return list(self._routes)

    # -- Dispatch --

    async def reduce(
        self,
        req: Any,
        res: Any,
        deliver: Any = None,
        next: Continuation | None = None,
        path: str = "/",
        *,
        observe: ActionObserver | None = None,
    ) -> None:
        """Route one event through this tree.

        *next* is the continuation: it is called with ``(action, data)``
        when a reducer chain exits to an action nobody here consumed, and
        with no arguments when nothing in this tree handled the event.
        Exceptions raised by reducers propagate unchanged.
        """
        action = req.resolved_action(path)
        scoped = ScopedDeliver(deliver if deliver is not None else NullDeliver(), path)
        notify = self._notifier(observe)

        for route in self._routes:
            reducers = await self._matching_reducers(route, action, req)

            for reducer in reducers:
                res.set_path(path)
                record = Next()
                returned = await reducer.target.reduce(
                    req,
                    res,
                    scoped,
                    record,
                    compose_path(path, route.path),
                    observe=notify,
                )

                if not reducer.is_subtree:
                    await notify(
                        req.sender_id,
                        compose_path(path, route.path, keep_wildcard=True),
                        req.text(),
                        req,
                    )

                outcome = record.resolve(returned)
                if isinstance(outcome, ExitTo):
                    outcome = await self._resolve_exit(route, outcome, req, res, scoped, path)

                if isinstance(outcome, Stop):
                    logger.debug("Event for %s handled by route %r", req.sender_id, route.path)
                    return

                if isinstance(outcome, ExitTo):
                    logger.debug(
                        "Route %r exits to %r for %s", route.path, outcome.action, req.sender_id
                    )
                    if next is not None:
                        await invoke(next, outcome.action, outcome.data)
                    return

        if next is not None:
            await invoke(next)

    async def _matching_reducers(
        self,
        route: Route,
        action: str | None,
        req: Any,
    ) -> tuple[Reducer, ...]:
        """Select the reducers of *route* that apply to this event."""
        # The matcher runs once per route, not once per reducer
        if route.matcher is not None and (action is None or route.is_wildcard):
            return route.reducers if await invoke(route.matcher, req) else ()

        if action is not None and not route.is_wildcard:
            return tuple(r for r in route.reducers if r.pattern.match(action))

        return tuple(r for r in route.reducers if r.pattern.match("/"))

    async def _resolve_exit(
        self,
        route: Route,
        exit_to: ExitTo,
        req: Any,
        res: Any,
        deliver: ScopedDeliver,
        path: str,
    ) -> Outcome:
        """Offer an exit action to the route's exit listeners, in order.

        A listener that stops or exits elsewhere settles the outcome. When
        every matching listener continues (or none matches) the original
        exit is handed back unconsumed.
        """
        for entry in route.exits:
            if not entry.accepts(exit_to.action):
                continue
            res.set_path(path)
            record = Next()
            returned = await invoke(entry.listener, exit_to.data, req, res, deliver, record)
            outcome = record.resolve(returned)
            if not isinstance(outcome, Continue):
                return outcome
        return exit_to

    def _notifier(self, upstream: ActionObserver | None) -> ActionObserver:
        observers = self._observers

        async def notify(sender_id: Any, path: str, text: str, req: Any) -> None:
            for observer in observers:
                await invoke(observer, sender_id, path, text, req)
            if upstream is not None:
                await invoke(upstream, sender_id, path, text, req)

        return notify

    def __repr__(self) -> str:
        return f"<Router routes={len(self._routes)}>"
