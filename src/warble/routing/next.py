"""The ``next`` callable handed to reducers and exit listeners.

Calling it records an outcome instead of doing any work itself::

    next()                      # CONTINUE
    next("done", {"ok": True})  # ExitTo("done", {"ok": True})

A handler that never calls it (and returns no outcome) stopped the
dispatch. ``Next`` also serves as the continuation of a nested router,
so whatever the child hands outward lands in the parent's record.
"""

from typing import Any

from warble.routing.outcome import CONTINUE, STOP, ExitTo, Outcome, is_outcome


class Next:
    """Records the outcome signalled by one handler invocation."""

    __slots__ = ("_outcome",)

    def __init__(self) -> None:
        self._outcome: Outcome | None = None

    def __call__(self, action: str | None = None, data: dict[str, Any] | None = None) -> None:
        if action is None:
            self._outcome = CONTINUE
        else:
            self._outcome = ExitTo(action, data if data is not None else {})

    @property
    def called(self) -> bool:
        return self._outcome is not None

    @property
    def outcome(self) -> Outcome:
        """The recorded outcome, ``STOP`` when ``next`` was never called."""
        return self._outcome if self._outcome is not None else STOP

    def resolve(self, returned: Any) -> Outcome:
        """Prefer an outcome the handler returned over one it recorded."""
        if is_outcome(returned):
            return returned
        return self.outcome

    def __repr__(self) -> str:
        return f"<Next {self._outcome!r}>"
