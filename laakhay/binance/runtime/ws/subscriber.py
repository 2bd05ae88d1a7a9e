"""Stream subscriber: open sessions for named topics."""

from __future__ import annotations

import asyncio
import logging

from ...config import ClientConfig
from ...core.exceptions import ValidationError
from .session import StreamHandler, StreamSession
from .transport import StreamTransport, WebSocketTransport

logger = logging.getLogger(__name__)


class StreamSubscriber:
    """Open one auto-reconnecting session per topic.

    Sessions are tracked so ``close()`` can stop every subscription the
    subscriber started.
    """

    def __init__(self, config: ClientConfig, transport: StreamTransport | None = None) -> None:
        self._config = config
        self._transport = transport or WebSocketTransport()
        self._sessions: set[StreamSession] = set()

    @property
    def sessions(self) -> list[StreamSession]:
        """Sessions that have not closed yet."""
        return [s for s in self._sessions if not s.is_closed]

    def url_for(self, topic: str) -> str:
        """Resolve ``<stream_url>/<topic>``."""
        return f"{self._config.stream_url.rstrip('/')}/{topic}"

    async def subscribe(self, topic: str, handler: StreamHandler) -> StreamSession:
        """Open a session for topic and start delivering frames to handler.

        Args:
            topic: Stream name, e.g. ``btcusdt@depth``
            handler: Sync or async callable receiving each raw frame

        Returns:
            The started StreamSession

        Raises:
            ValidationError: Empty topic
            StreamConnectError: Initial handshake failed
        """
        if not topic or not topic.strip():
            raise ValidationError("Stream topic must not be empty")

        session = StreamSession(
            topic,
            self.url_for(topic),
            self._transport,
            handler,
            auto_reconnect=self._config.auto_reconnect,
            reconnect_limit=self._config.reconnect_limit,
            max_concurrency=self._config.max_handler_concurrency,
        )
        await session.start()
        self._sessions = {s for s in self._sessions if not s.is_closed}
        self._sessions.add(session)
        return session

    async def close(self) -> None:
        """Stop every session opened through this subscriber."""
        sessions, self._sessions = list(self._sessions), set()
        if sessions:
            await asyncio.gather(*(s.stop() for s in sessions), return_exceptions=True)
