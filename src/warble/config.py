"""Bot configuration.

BotConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

import os
from dataclasses import dataclass, fields

from warble.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class BotConfig:
    """Bot configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = BotConfig(page_token="EAAB...", max_postback_depth=5)
    """

    # Messaging platform
    page_token: str = ""
    graph_api_url: str = "https://graph.facebook.com/v2.8/me/messages"
    request_timeout: float = 10.0

    # Dispatch
    max_postback_depth: int = 10  # Follow-up postbacks chained from one event
    follow_up_timeout: float = 30.0  # Seconds to wait for deliver.wait() resolvers

    @classmethod
    def from_env(cls, prefix: str = "WARBLE_") -> "BotConfig":
        """Build a config from ``{prefix}{FIELD}`` environment variables.

        ``WARBLE_PAGE_TOKEN=... WARBLE_REQUEST_TIMEOUT=5`` -> BotConfig(...)
        """
        overrides: dict[str, object] = {}
        for f in fields(cls):
            raw = os.environ.get(f"{prefix}{f.name.upper()}")
            if raw is None:
                continue
            converter = f.type if f.type in (int, float) else str
            try:
                overrides[f.name] = converter(raw)
            except ValueError:
                msg = f"Invalid value for {prefix}{f.name.upper()}: {raw!r}"
                raise ConfigurationError(msg) from None
        return cls(**overrides)
