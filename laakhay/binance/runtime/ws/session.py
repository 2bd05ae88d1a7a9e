"""Stream session: one auto-reconnecting subscription to one topic.

Architecture:
    A session owns a single background reader task. The reader pulls frames
    from the current connection and hands each one to the caller's handler on
    its own task, so a slow handler never delays the next read. Handler tasks
    are bounded by a semaphore; when every permit is taken the reader waits
    for one instead of spawning more.

State machine:
    CONNECTING -> OPEN            initial handshake succeeded
    CONNECTING -> CLOSED          initial handshake failed (StreamConnectError)
    OPEN -> OPEN                  frame read and dispatched
    OPEN -> RECONNECTING          read failed, auto-reconnect on, budget left
    RECONNECTING -> OPEN          new handshake completed
    OPEN/RECONNECTING -> CLOSED   auto-reconnect off, budget spent, or stop()

Delivery is at-most-once: frames in flight during a reconnect are lost and
there is no resume. The reconnect counter only ever grows, so once the budget
is spent no further attempt is made no matter how long the stream was stable
in between.
"""

from __future__ import annotations

import asyncio
import contextlib
import inspect
import logging
from collections.abc import Awaitable, Callable

from ...config import MAX_HANDLER_CONCURRENCY, RECONNECT_LIMIT
from ...core.enums import CloseReason, SessionState
from ...core.exceptions import StreamConnectError
from .transport import DuplexConnection, StreamTransport

logger = logging.getLogger(__name__)

StreamHandler = Callable[[str | bytes], Awaitable[None] | None]


class StreamSession:
    """Auto-reconnecting reader bound to one stream URL."""

    def __init__(
        self,
        topic: str,
        url: str,
        transport: StreamTransport,
        handler: StreamHandler,
        *,
        auto_reconnect: bool = True,
        reconnect_limit: int = RECONNECT_LIMIT,
        max_concurrency: int | None = MAX_HANDLER_CONCURRENCY,
    ) -> None:
        self._topic = topic
        self._url = url
        self._transport = transport
        self._handler = handler
        self._auto_reconnect = auto_reconnect
        self._reconnect_limit = reconnect_limit

        self._conn: DuplexConnection | None = None
        self._state = SessionState.CONNECTING
        self._close_reason: CloseReason | None = None
        self._reconnects = 0
        self._messages = 0

        self._reader: asyncio.Task[None] | None = None
        self._handlers: set[asyncio.Task[None]] = set()
        self._permits = asyncio.Semaphore(max_concurrency) if max_concurrency else None
        self._closed = asyncio.Event()

    @property
    def topic(self) -> str:
        return self._topic

    @property
    def url(self) -> str:
        return self._url

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def reconnects(self) -> int:
        """Reconnects performed so far (monotonic)."""
        return self._reconnects

    @property
    def messages_received(self) -> int:
        return self._messages

    @property
    def close_reason(self) -> CloseReason | None:
        return self._close_reason

    @property
    def is_closed(self) -> bool:
        return self._state == SessionState.CLOSED

    async def start(self) -> StreamSession:
        """Perform the initial handshake and start the reader task.

        Raises:
            StreamConnectError: Initial handshake failed; the session is CLOSED
            RuntimeError: Session was already started
        """
        if self._reader is not None or self.is_closed:
            raise RuntimeError(f"Stream session {self._topic!r} already started")

        try:
            self._conn = await self._connect()
        except StreamConnectError:
            self._finish(CloseReason.CONNECT_FAILED)
            raise

        self._state = SessionState.OPEN
        logger.info(f"Stream {self._topic} open")
        self._reader = asyncio.create_task(self._read_loop(), name=f"stream:{self._topic}")
        return self

    async def stop(self) -> None:
        """Tear the subscription down: stop reading, close, cancel handlers.

        Idempotent; safe to call after the session closed on its own.
        """
        if self._reader is not None and not self._reader.done():
            self._reader.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._reader
        else:
            await self._close_connection()
            self._finish(CloseReason.STOPPED)

        # stop() may be awaited from inside a handler task
        current = asyncio.current_task()
        pending = [task for task in self._handlers if task is not current]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    async def wait_closed(self) -> CloseReason | None:
        """Wait until the session reaches CLOSED and return why."""
        await self._closed.wait()
        return self._close_reason

    async def _connect(self) -> DuplexConnection:
        try:
            return await self._transport.connect(self._url)
        except (StreamConnectError, asyncio.CancelledError):
            raise
        except Exception as e:  # noqa: BLE001
            raise StreamConnectError(f"dial {self._url}: {e}", url=self._url) from e

    async def _read_loop(self) -> None:
        reason = CloseReason.STOPPED
        try:
            while True:
                try:
                    message = await self._conn.recv()
                except asyncio.CancelledError:
                    raise
                except Exception as e:  # noqa: BLE001
                    logger.warning(f"Stream {self._topic} read error: {e}")
                    give_up = await self._reconnect()
                    if give_up is not None:
                        reason = give_up
                        return
                    continue
                self._messages += 1
                await self._dispatch(message)
        finally:
            await self._close_connection()
            self._finish(reason)

    async def _reconnect(self) -> CloseReason | None:
        """Replace the connection after a read failure.

        Returns None once a new connection is open, otherwise the reason the
        session has to close. A failed handshake spends its attempt.
        """
        while True:
            if not self._auto_reconnect:
                return CloseReason.RECONNECT_DISABLED
            if self._reconnects >= self._reconnect_limit:
                logger.warning(
                    f"Stream {self._topic} reconnect budget exhausted ({self._reconnect_limit})"
                )
                return CloseReason.EXHAUSTED

            self._state = SessionState.RECONNECTING
            await self._close_connection()
            self._reconnects += 1
            logger.warning(
                f"Reconnecting stream {self._topic} ({self._reconnects}/{self._reconnect_limit})"
            )
            try:
                self._conn = await self._connect()
            except StreamConnectError as e:
                logger.warning(f"Stream {self._topic} reconnect failed: {e}")
                continue

            self._state = SessionState.OPEN
            return None

    async def _dispatch(self, message: str | bytes) -> None:
        if self._permits is not None:
            await self._permits.acquire()
        task = asyncio.create_task(self._invoke(message))
        self._handlers.add(task)
        task.add_done_callback(self._on_handler_done)

    def _on_handler_done(self, task: asyncio.Task[None]) -> None:
        self._handlers.discard(task)
        if self._permits is not None:
            self._permits.release()

    async def _invoke(self, message: str | bytes) -> None:
        try:
            result = self._handler(message)
            if inspect.isawaitable(result):
                await result
        except asyncio.CancelledError:
            raise
        except Exception:  # noqa: BLE001
            logger.exception(f"Stream {self._topic} handler failed")

    async def _close_connection(self) -> None:
        conn, self._conn = self._conn, None
        if conn is None:
            return
        try:
            await conn.close()
        except Exception as e:  # noqa: BLE001
            logger.warning(f"Stream {self._topic} close error: {e}")

    def _finish(self, reason: CloseReason) -> None:
        if self._closed.is_set():
            return
        self._state = SessionState.CLOSED
        self._close_reason = reason
        self._closed.set()
        logger.info(f"Stream {self._topic} closed ({reason.value})")

    async def __aenter__(self) -> StreamSession:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.stop()
