"""Shared type aliases used across warble modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Plain reducer: handler(req, res, deliver, next), sync or async
Handler: TypeAlias = Callable[..., Any]

# Exit listener: listener(data, req, res, deliver, next), sync or async
ExitListener: TypeAlias = Callable[..., Any]

# Route matcher predicate: matcher(req) -> bool, sync or async
Matcher: TypeAlias = Callable[[Any], Any]

# Continuation: continuation() or continuation(action, data)
Continuation: TypeAlias = Callable[..., Any]

# Action observer: observer(sender_id, path, text, req)
ActionObserver: TypeAlias = Callable[[Any, str, str, Any], Any]
