"""Shared fakes for unit tests."""

from __future__ import annotations

import asyncio
from collections.abc import Callable

import pytest


class FakeConnection:
    """Duplex connection that replays a script of frames and errors.

    Strings/bytes are returned from recv(); exception instances are raised.
    Once the script is spent, recv() blocks until close().
    """

    def __init__(self, script: list | None = None) -> None:
        self._script = list(script or [])
        self._closed = asyncio.Event()
        self.close_calls = 0

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    async def recv(self):
        if self._script:
            item = self._script.pop(0)
            if isinstance(item, BaseException):
                raise item
            return item
        await self._closed.wait()
        raise ConnectionError("connection closed")

    async def close(self) -> None:
        self.close_calls += 1
        self._closed.set()


class FakeTransport:
    """Dialer handing out scripted connections in order.

    Items may be FakeConnection instances or exceptions to raise from
    connect(). When the list runs out, ``default()`` builds the next one.
    """

    def __init__(
        self,
        connections: list | None = None,
        default: Callable[[], FakeConnection] | None = None,
    ) -> None:
        self._queue = list(connections or [])
        self._default = default or FakeConnection
        self.urls: list[str] = []
        self.opened: list[FakeConnection] = []

    @property
    def connect_calls(self) -> int:
        return len(self.urls)

    async def connect(self, url: str) -> FakeConnection:
        self.urls.append(url)
        item = self._queue.pop(0) if self._queue else self._default()
        if isinstance(item, BaseException):
            raise item
        self.opened.append(item)
        return item


@pytest.fixture
def fake_connection() -> type[FakeConnection]:
    return FakeConnection


@pytest.fixture
def fake_transport() -> type[FakeTransport]:
    return FakeTransport
