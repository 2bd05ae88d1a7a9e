"""WebSocket transport: dial a stream URL and hand back a duplex connection."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Protocol

import websockets

from ...core.exceptions import StreamConnectError

logger = logging.getLogger(__name__)


class DuplexConnection(Protocol):
    """What a stream session needs from a live connection."""

    async def recv(self) -> str | bytes:
        """Block until the next message; raise on transport failure."""
        ...

    async def close(self) -> None:
        """Close the connection."""
        ...


class StreamTransport(Protocol):
    """Dialer used by the stream subscriber."""

    async def connect(self, url: str) -> DuplexConnection:
        """Open a connection or raise StreamConnectError."""
        ...


@dataclass
class TransportConfig:
    ping_interval: int = 30
    ping_timeout: int = 10
    open_timeout: float = 10.0
    max_size: int | None = None  # bytes; None = websockets default
    max_queue: int | None = 1024  # number of messages queued; None = unlimited
    close_timeout: int = 10


class WebSocketTransport:
    """Dial WebSocket URLs with keepalive and sizing from TransportConfig."""

    def __init__(self, config: TransportConfig | None = None) -> None:
        self._conf = config or TransportConfig()

    def _connect_kwargs(self) -> dict[str, Any]:
        kwargs: dict[str, Any] = {
            "ping_interval": self._conf.ping_interval,
            "ping_timeout": self._conf.ping_timeout,
            "open_timeout": self._conf.open_timeout,
            "close_timeout": self._conf.close_timeout,
        }
        # Only include size/queue if not None to keep library defaults
        if self._conf.max_size is not None:
            kwargs["max_size"] = self._conf.max_size
        if self._conf.max_queue is not None:
            kwargs["max_queue"] = self._conf.max_queue
        return kwargs

    async def connect(self, url: str) -> DuplexConnection:
        """Complete the handshake with url.

        Raises:
            StreamConnectError: Handshake, DNS, TLS or timeout failure
        """
        try:
            conn = await websockets.connect(url, **self._connect_kwargs())
        except asyncio.CancelledError:
            raise
        except (OSError, asyncio.TimeoutError, websockets.exceptions.WebSocketException) as e:
            raise StreamConnectError(f"dial {url}: {e}", url=url) from e
        logger.debug(f"Connected to {url}")
        return conn
