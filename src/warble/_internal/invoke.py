"""Invoke helpers — call sync or async handlers uniformly.

Everything a bot author plugs into warble may be ``def`` or
``async def``: route reducers, ``match=`` predicates, exit listeners
registered with ``.next()``, the continuation handed to
``Router.reduce``, ``on_action`` observers, and the sender's
``on_sender_error`` / ``on_response`` hooks. The router, processor and
send queue all call them through ``invoke`` so none of them branches on
sync vs async.

Usage::

    from warble._internal.invoke import invoke

    outcome = await invoke(reducer, req, res, deliver, next)
"""

import inspect
from typing import Any


async def invoke(handler: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *handler*; if it hands back an awaitable, await it.

    The returned value is passed through untouched, so a reducer's
    ``STOP``/``CONTINUE``/``ExitTo`` reaches the router either way::

        def greet(req, res, deliver, next):
            res.text("Hello!")

        async def greet(req, res, deliver, next):
            profile = await load_profile(req.sender_id)
            res.text(f"Hello {profile.name}!")
            return CONTINUE
    """
    result = handler(*args, **kwargs)
    return await result if inspect.isawaitable(result) else result
