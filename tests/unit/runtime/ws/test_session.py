"""Unit tests for StreamSession.

Tests focus on the reconnect budget, terminal states and handler dispatch.
"""

from __future__ import annotations

import asyncio

import pytest

from laakhay.binance.core import CloseReason, SessionState, StreamConnectError
from laakhay.binance.runtime.ws.session import StreamSession

URL = "wss://stream.example.com/ws/btcusdt@depth"


def make_session(transport, handler, **kwargs) -> StreamSession:
    return StreamSession("btcusdt@depth", URL, transport, handler, **kwargs)


class Collector:
    """Handler that records frames and signals once enough arrived."""

    def __init__(self, expected: int = 1) -> None:
        self.frames: list = []
        self.expected = expected
        self.done = asyncio.Event()

    def __call__(self, frame) -> None:
        self.frames.append(frame)
        if len(self.frames) >= self.expected:
            self.done.set()


class TestStreamSessionStart:
    """Test the initial handshake."""

    @pytest.mark.asyncio
    async def test_start_opens_session(self, fake_transport):
        """Test successful handshake moves CONNECTING -> OPEN."""
        transport = fake_transport()
        session = make_session(transport, Collector())
        assert session.state == SessionState.CONNECTING

        await session.start()

        assert session.state == SessionState.OPEN
        assert transport.urls == [URL]
        await session.stop()

    @pytest.mark.asyncio
    async def test_start_failure_raises_and_closes(self, fake_transport):
        """Test a failed initial handshake is surfaced, not fatal."""
        transport = fake_transport([StreamConnectError("refused", url=URL)])
        session = make_session(transport, Collector())

        with pytest.raises(StreamConnectError, match="refused"):
            await session.start()

        assert session.state == SessionState.CLOSED
        assert session.close_reason == CloseReason.CONNECT_FAILED
        assert await session.wait_closed() == CloseReason.CONNECT_FAILED

    @pytest.mark.asyncio
    async def test_start_wraps_foreign_transport_errors(self, fake_transport):
        """Test arbitrary dial errors are converted to StreamConnectError."""
        transport = fake_transport([OSError("dns failure")])
        session = make_session(transport, Collector())

        with pytest.raises(StreamConnectError, match="dns failure"):
            await session.start()

    @pytest.mark.asyncio
    async def test_start_twice_raises(self, fake_transport):
        """Test a session cannot be started twice."""
        session = make_session(fake_transport(), Collector())
        await session.start()

        with pytest.raises(RuntimeError, match="already started"):
            await session.start()
        await session.stop()


class TestStreamSessionDelivery:
    """Test frame delivery to the handler."""

    @pytest.mark.asyncio
    async def test_frames_delivered_in_order(self, fake_transport, fake_connection):
        """Test frames from one connection reach the handler in read order."""
        conn = fake_connection(['{"n":1}', '{"n":2}', '{"n":3}'])
        collector = Collector(expected=3)
        session = make_session(fake_transport([conn]), collector, max_concurrency=1)

        await session.start()
        await asyncio.wait_for(collector.done.wait(), timeout=1.0)

        assert collector.frames == ['{"n":1}', '{"n":2}', '{"n":3}']
        assert session.messages_received == 3
        await session.stop()

    @pytest.mark.asyncio
    async def test_async_handler_supported(self, fake_transport, fake_connection):
        """Test coroutine handlers are awaited."""
        received = asyncio.Event()

        async def handler(frame):
            await asyncio.sleep(0)
            received.set()

        session = make_session(fake_transport([fake_connection(["x"])]), handler)
        await session.start()
        await asyncio.wait_for(received.wait(), timeout=1.0)
        await session.stop()

    @pytest.mark.asyncio
    async def test_slow_handler_does_not_block_reads(self, fake_transport, fake_connection):
        """Test the reader keeps going while an earlier handler is still running."""
        release = asyncio.Event()
        second_seen = asyncio.Event()

        async def handler(frame):
            if frame == "first":
                await release.wait()
            else:
                second_seen.set()

        conn = fake_connection(["first", "second"])
        session = make_session(fake_transport([conn]), handler, max_concurrency=4)
        await session.start()

        await asyncio.wait_for(second_seen.wait(), timeout=1.0)
        release.set()
        await session.stop()

    @pytest.mark.asyncio
    async def test_concurrency_bound_limits_in_flight_handlers(
        self, fake_transport, fake_connection
    ):
        """Test no more than max_concurrency handlers run at once."""
        in_flight = 0
        peak = 0
        finished = 0
        all_done = asyncio.Event()

        async def handler(frame):
            nonlocal in_flight, peak, finished
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.01)
            in_flight -= 1
            finished += 1
            if finished == 6:
                all_done.set()

        conn = fake_connection([str(i) for i in range(6)])
        session = make_session(fake_transport([conn]), handler, max_concurrency=2)
        await session.start()
        await asyncio.wait_for(all_done.wait(), timeout=2.0)

        assert peak == 2
        await session.stop()

    @pytest.mark.asyncio
    async def test_handler_exception_does_not_stop_session(self, fake_transport, fake_connection):
        """Test a failing handler is logged and later frames still arrive."""
        seen = []
        done = asyncio.Event()

        def handler(frame):
            if frame == "bad":
                raise RuntimeError("boom")
            seen.append(frame)
            done.set()

        conn = fake_connection(["bad", "good"])
        session = make_session(fake_transport([conn]), handler, max_concurrency=1)
        await session.start()
        await asyncio.wait_for(done.wait(), timeout=1.0)

        assert seen == ["good"]
        assert session.state == SessionState.OPEN
        await session.stop()


class TestStreamSessionReconnect:
    """Test reconnect behavior and the reconnect budget."""

    @pytest.mark.asyncio
    async def test_three_failures_then_resume(self, fake_transport, fake_connection):
        """Test three failed reads cause exactly three reconnects, then delivery resumes."""
        transport = fake_transport(
            [
                fake_connection([ConnectionError("reset")]),
                fake_connection([ConnectionError("reset")]),
                fake_connection([ConnectionError("reset")]),
                fake_connection(["a", "b"]),
            ]
        )
        collector = Collector(expected=2)
        session = make_session(transport, collector, auto_reconnect=True, reconnect_limit=10)

        await session.start()
        await asyncio.wait_for(collector.done.wait(), timeout=1.0)

        assert session.reconnects == 3
        assert transport.connect_calls == 4
        assert sorted(collector.frames) == ["a", "b"]
        assert session.state == SessionState.OPEN
        # Every replaced connection was closed
        assert all(conn.close_calls == 1 for conn in transport.opened[:3])
        await session.stop()

    @pytest.mark.asyncio
    async def test_reconnect_disabled_closes_on_first_failure(
        self, fake_transport, fake_connection
    ):
        """Test with auto-reconnect off a single read failure is terminal."""
        transport = fake_transport([fake_connection([ConnectionError("reset"), "late"])])
        collector = Collector()
        session = make_session(transport, collector, auto_reconnect=False)

        await session.start()
        reason = await asyncio.wait_for(session.wait_closed(), timeout=1.0)

        assert reason == CloseReason.RECONNECT_DISABLED
        assert session.state == SessionState.CLOSED
        assert session.reconnects == 0
        assert transport.connect_calls == 1
        assert collector.frames == []

    @pytest.mark.asyncio
    async def test_budget_exhausted_after_limit(self, fake_transport, fake_connection):
        """Test after 10 reconnects the 11th is never attempted."""
        transport = fake_transport(default=lambda: fake_connection([ConnectionError("reset")]))
        session = make_session(transport, Collector(), reconnect_limit=10)

        await session.start()
        reason = await asyncio.wait_for(session.wait_closed(), timeout=2.0)

        assert reason == CloseReason.EXHAUSTED
        assert session.state == SessionState.CLOSED
        assert session.reconnects == 10
        # initial dial + 10 reconnects
        assert transport.connect_calls == 11
        assert all(conn.closed for conn in transport.opened)

    @pytest.mark.asyncio
    async def test_counter_not_reset_by_successful_reconnect(
        self, fake_transport, fake_connection
    ):
        """Test the budget is spent across stable stretches, never refilled."""
        connections = []
        for _ in range(3):
            connections.append(fake_connection(["ok", ConnectionError("reset")]))
        transport = fake_transport(connections)
        collector = Collector()
        session = make_session(transport, collector, reconnect_limit=2)

        await session.start()
        reason = await asyncio.wait_for(session.wait_closed(), timeout=1.0)

        assert reason == CloseReason.EXHAUSTED
        assert session.reconnects == 2
        assert transport.connect_calls == 3

    @pytest.mark.asyncio
    async def test_failed_reconnect_handshake_spends_attempt(
        self, fake_transport, fake_connection
    ):
        """Test a reconnect whose handshake fails counts against the budget."""
        transport = fake_transport(
            [
                fake_connection([ConnectionError("reset")]),
                StreamConnectError("refused"),
                fake_connection(["back"]),
            ]
        )
        collector = Collector()
        session = make_session(transport, collector, reconnect_limit=5)

        await session.start()
        await asyncio.wait_for(collector.done.wait(), timeout=1.0)

        assert session.reconnects == 2
        assert collector.frames == ["back"]
        await session.stop()

    @pytest.mark.asyncio
    async def test_zero_limit_closes_immediately(self, fake_transport, fake_connection):
        """Test reconnect_limit=0 means no reconnect at all."""
        transport = fake_transport([fake_connection([ConnectionError("reset")])])
        session = make_session(transport, Collector(), reconnect_limit=0)

        await session.start()
        assert await asyncio.wait_for(session.wait_closed(), timeout=1.0) == CloseReason.EXHAUSTED
        assert transport.connect_calls == 1


class TestStreamSessionStop:
    """Test explicit teardown."""

    @pytest.mark.asyncio
    async def test_stop_closes_connection(self, fake_transport, fake_connection):
        """Test stop() cancels the reader and closes the live connection."""
        conn = fake_connection()
        session = make_session(fake_transport([conn]), Collector())
        await session.start()

        await session.stop()

        assert session.state == SessionState.CLOSED
        assert session.close_reason == CloseReason.STOPPED
        assert conn.close_calls == 1

    @pytest.mark.asyncio
    async def test_stop_idempotent(self, fake_transport):
        """Test stop() can be called repeatedly."""
        session = make_session(fake_transport(), Collector())
        await session.start()

        await session.stop()
        await session.stop()

        assert session.close_reason == CloseReason.STOPPED

    @pytest.mark.asyncio
    async def test_stop_after_exhaustion_keeps_reason(self, fake_transport, fake_connection):
        """Test stop() after a terminal close does not overwrite the reason."""
        transport = fake_transport([fake_connection([ConnectionError("reset")])])
        session = make_session(transport, Collector(), auto_reconnect=False)
        await session.start()
        await asyncio.wait_for(session.wait_closed(), timeout=1.0)

        await session.stop()

        assert session.close_reason == CloseReason.RECONNECT_DISABLED

    @pytest.mark.asyncio
    async def test_stop_cancels_in_flight_handlers(self, fake_transport, fake_connection):
        """Test handlers still running at stop() are cancelled."""
        started = asyncio.Event()
        cancelled = asyncio.Event()

        async def handler(frame):
            started.set()
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                cancelled.set()
                raise

        session = make_session(fake_transport([fake_connection(["x"])]), handler)
        await session.start()
        await asyncio.wait_for(started.wait(), timeout=1.0)

        await session.stop()

        assert cancelled.is_set()

    @pytest.mark.asyncio
    async def test_context_manager_stops(self, fake_transport):
        """Test leaving ``async with`` stops the session."""
        session = make_session(fake_transport(), Collector())
        await session.start()

        async with session:
            assert session.state == SessionState.OPEN

        assert session.state == SessionState.CLOSED

    @pytest.mark.asyncio
    async def test_stop_from_inside_handler(self, fake_transport, fake_connection):
        """Test a handler can stop its own session and keep running afterwards."""
        holder: dict[str, StreamSession] = {}
        after_stop = asyncio.Event()

        async def handler(frame):
            await holder["session"].stop()
            after_stop.set()

        session = make_session(fake_transport([fake_connection(["x"])]), handler)
        holder["session"] = session
        await session.start()

        await asyncio.wait_for(after_stop.wait(), timeout=1.0)

        assert session.state == SessionState.CLOSED
        assert session.close_reason == CloseReason.STOPPED
        assert await asyncio.wait_for(session.wait_closed(), timeout=1.0) == CloseReason.STOPPED
