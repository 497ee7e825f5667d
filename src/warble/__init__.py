"""Warble — a cascading router for Messenger chatbots.

Routes conversational events (text, quick replies, postbacks) through a
tree of handlers and nested routers, addressed by action paths.

Basic usage::

    from warble import BotConfig, Processor, Router

    router = Router()

    def start(req, res, deliver, next):
        res.text("Hello!")
        res.expected("name")

    def name(req, res, deliver, next):
        res.text(f"Nice to meet you, {req.text()}!")

    router.use("/start", start)
    router.use("/name", name)

    processor = Processor(router, BotConfig(page_token="EAAB..."))
    await processor.process(event)
"""

__version__ = "0.1.0"
__all__ = [
    "CONTINUE",
    "STOP",
    "BotConfig",
    "ConfigurationError",
    "DisconnectedError",
    "DispatchError",
    "Dispatchable",
    "ExitTo",
    "MemoryStateStorage",
    "Next",
    "Processor",
    "Request",
    "Responder",
    "Router",
    "SenderError",
    "WarbleError",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import warble`` fast (httpx is only loaded with the sender)
    while providing a clean top-level API.
    """
    if name in ("Router", "Dispatchable", "Next", "ExitTo", "STOP", "CONTINUE"):
        from warble import routing as _routing

        return getattr(_routing, name)

    if name in ("Request", "Responder"):
        from warble import messaging as _messaging

        return getattr(_messaging, name)

    if name == "Processor":
        from warble.processor import Processor

        return Processor

    if name == "BotConfig":
        from warble.config import BotConfig

        return BotConfig

    if name == "MemoryStateStorage":
        from warble.state import MemoryStateStorage

        return MemoryStateStorage

    if name in (
        "WarbleError",
        "ConfigurationError",
        "DispatchError",
        "SenderError",
        "DisconnectedError",
    ):
        from warble import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
