"""Warble exception hierarchy.

Shared across Router, Processor, and the sender so every module
raises and catches the same types.
"""


class WarbleError(Exception):
    """Base for all warble-specific errors."""


class ConfigurationError(WarbleError):
    """Raised when a route tree or bot configuration is invalid.

    Registration errors surface immediately from ``Router.use()``,
    never later during dispatch.
    """


class DispatchError(WarbleError):
    """Raised by the host wiring when an event cannot be dispatched."""


class SenderError(WarbleError):
    """Raised when the messaging platform rejects an outbound payload."""

    def __init__(self, message: str, *, status: int | None = None, code: int | None = None) -> None:
        super().__init__(message)
        self.status = status
        self.code = code


class DisconnectedError(SenderError):
    """The recipient blocked or left the page (403, platform error 200)."""

    def __init__(self, message: str) -> None:
        super().__init__(message, status=403, code=200)
