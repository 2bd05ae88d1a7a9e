"""Binance client configuration.

This module centralizes endpoint URLs, wire header names and the reconnect
budget used by the REST dispatcher and the stream subscriber, plus the
per-client ``ClientConfig`` value shared by both.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .runtime.rest.http_client import HTTPClient

# REST base URL (spot)
BASE_URL = "https://api.binance.com"

# Single stream: wss://<host>/ws/<stream-name>
STREAM_URL = "wss://stream.binance.com:9443/ws"

# Automatic reconnects allowed over the lifetime of one subscription
RECONNECT_LIMIT = 10

# Handler tasks allowed to run at once per session
MAX_HANDLER_CONCURRENCY = 64

DEFAULT_TIMEOUT = 30.0
DEFAULT_USER_AGENT = "laakhay-binance/0.1.0"

API_KEY_HEADER = "X-MBX-APIKEY"
USER_AGENT_HEADER = "UserAgent"
CONTENT_TYPE = "application/json"

TIMESTAMP_PARAM = "timestamp"
SIGNATURE_PARAM = "signature"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class ClientConfig:
    """Immutable client settings shared by every request and stream.

    Attributes:
        base_url: REST base URL; endpoint paths are appended verbatim
        api_key: Value sent in the X-MBX-APIKEY header
        secret_key: HMAC-SHA256 key for signed requests
        user_agent: Value sent in the UserAgent header
        http: HTTP transport handle; created lazily by the client when None
        auto_reconnect: Reconnect streams after read failures
        stream_url: WebSocket base, topics are appended as ``/<topic>``
        reconnect_limit: Reconnect budget per subscription
        max_handler_concurrency: Handler tasks in flight per session (None = unbounded)
        timeout: HTTP request timeout in seconds
    """

    base_url: str = BASE_URL
    api_key: str = ""
    secret_key: str = ""
    user_agent: str = DEFAULT_USER_AGENT
    http: HTTPClient | None = None
    auto_reconnect: bool = True
    stream_url: str = STREAM_URL
    reconnect_limit: int = RECONNECT_LIMIT
    max_handler_concurrency: int | None = MAX_HANDLER_CONCURRENCY
    timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        if self.reconnect_limit < 0:
            raise ValueError("reconnect_limit must be >= 0")
        if self.max_handler_concurrency is not None and self.max_handler_concurrency < 1:
            raise ValueError("max_handler_concurrency must be >= 1 or None")
        if self.timeout <= 0:
            raise ValueError("timeout must be > 0")

    def with_http(self, http: HTTPClient) -> ClientConfig:
        """Return a copy bound to the given HTTP transport."""
        return replace(self, http=http)

    @classmethod
    def from_env(cls, prefix: str = "BINANCE_", **overrides) -> ClientConfig:
        """Build a config from environment variables.

        Reads ``<prefix>BASE_URL``, ``API_KEY``, ``SECRET_KEY``, ``USER_AGENT``,
        ``STREAM_URL`` and ``AUTO_RECONNECT``. Keyword overrides win.
        """
        values: dict = {}
        env_map = {
            "base_url": "BASE_URL",
            "api_key": "API_KEY",
            "secret_key": "SECRET_KEY",
            "user_agent": "USER_AGENT",
            "stream_url": "STREAM_URL",
        }
        for field_name, suffix in env_map.items():
            raw = os.getenv(f"{prefix}{suffix}")
            if raw is not None:
                values[field_name] = raw

        auto = os.getenv(f"{prefix}AUTO_RECONNECT")
        if auto is not None:
            values["auto_reconnect"] = auto.strip().lower() in _TRUTHY

        values.update(overrides)
        return cls(**values)

    def __repr__(self) -> str:
        # Keep credentials out of logs and tracebacks
        return (
            f"ClientConfig(base_url={self.base_url!r}, api_key={'***' if self.api_key else ''!r}, "
            f"user_agent={self.user_agent!r}, auto_reconnect={self.auto_reconnect}, "
            f"stream_url={self.stream_url!r}, reconnect_limit={self.reconnect_limit})"
        )
