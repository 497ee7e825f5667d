"""Dispatch outcomes.

Every reducer and exit listener ends in exactly one of three states:

- ``STOP``: the event is handled, dispatch ends here.
- ``CONTINUE``: nothing terminal happened, try the next reducer.
- ``ExitTo(action, data)``: hand control to the route's exit listeners
  and, failing those, to the enclosing continuation.

Handlers may return an outcome directly or record one through ``next``.
"""

from dataclasses import dataclass, field
from typing import Any, Final, TypeAlias


@dataclass(frozen=True, slots=True)
class Stop:
    """The event was handled terminally."""


@dataclass(frozen=True, slots=True)
class Continue:
    """Fall through to the next reducer or route."""


@dataclass(frozen=True, slots=True)
class ExitTo:
    """Delegate to the exit action *action* with *data*."""

    action: str
    data: dict[str, Any] = field(default_factory=dict)


STOP: Final = Stop()
CONTINUE: Final = Continue()

Outcome: TypeAlias = Stop | Continue | ExitTo


def is_outcome(value: object) -> bool:
    """True if *value* is one of the dispatch outcome types."""
    return isinstance(value, (Stop, Continue, ExitTo))
