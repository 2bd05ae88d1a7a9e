"""Binance API client facade.

Bundles one ``ClientConfig`` with a request dispatcher and a stream
subscriber so both share the same keys, base URLs and HTTP session.

Usage:
    async with BinanceClient(api_key="...", secret_key="...") as client:
        server_time = await client.request("GET", "/api/v3/time")
        account = await client.signed_request("GET", "/api/v3/account")

        session = await client.kline("BTCUSDT", "1m", on_kline)
        await session.wait_closed()
"""

from __future__ import annotations

from typing import Any, TypeVar

from .config import ClientConfig
from .core.enums import Timeframe
from .models import DepthUpdate, KlineUpdate
from .runtime.rest.dispatcher import RequestDispatcher, RequestHook
from .runtime.rest.http_client import HTTPClient
from .runtime.ws.session import StreamHandler, StreamSession
from .runtime.ws.subscriber import StreamSubscriber
from .runtime.ws.transport import StreamTransport
from .streams import DepthAdapter, ErrorHandler, KlineAdapter, TypedHandler, depth_topic, kline_topic

T = TypeVar("T")


class BinanceClient:
    """REST and stream access through one shared configuration."""

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        transport: StreamTransport | None = None,
        hooks: list[RequestHook] | None = None,
        **settings: Any,
    ) -> None:
        """Create a client.

        Args:
            config: Full configuration; keyword settings build one when omitted
            transport: WebSocket dialer (defaults to WebSocketTransport)
            hooks: Request hooks replacing the default debug logger
            **settings: ClientConfig fields (api_key, secret_key, ...)
        """
        if config is not None and settings:
            raise TypeError("Pass either config or keyword settings, not both")
        config = config or ClientConfig(**settings)
        # The client closes only the HTTP session it created itself
        self._owns_http = config.http is None
        if self._owns_http:
            config = config.with_http(HTTPClient(timeout=config.timeout))

        self._config = config
        self._dispatcher = RequestDispatcher(config, hooks=hooks)
        self._subscriber = StreamSubscriber(config, transport)

    @classmethod
    def from_env(cls, **overrides: Any) -> BinanceClient:
        """Client configured from ``BINANCE_*`` environment variables."""
        return cls(ClientConfig.from_env(**overrides))

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def dispatcher(self) -> RequestDispatcher:
        return self._dispatcher

    @property
    def subscriber(self) -> StreamSubscriber:
        return self._subscriber

    def add_request_hook(self, hook: RequestHook) -> None:
        self._dispatcher.add_request_hook(hook)

    async def request(
        self, method: str, endpoint: str, params: Any = None, out: type[T] | None = None
    ) -> T | Any:
        """Unsigned request; see RequestDispatcher.request."""
        return await self._dispatcher.request(method, endpoint, params, out)

    async def signed_request(
        self, method: str, endpoint: str, params: Any = None, out: type[T] | None = None
    ) -> T | Any:
        """Signed request; see RequestDispatcher.signed_request."""
        return await self._dispatcher.signed_request(method, endpoint, params, out)

    async def stream(self, topic: str, handler: StreamHandler) -> StreamSession:
        """Subscribe to a raw topic; the handler receives undecoded frames."""
        return await self._subscriber.subscribe(topic, handler)

    async def depth(
        self,
        symbol: str,
        handler: TypedHandler[DepthUpdate],
        on_error: ErrorHandler | None = None,
    ) -> StreamSession:
        """Subscribe to ``<symbol>@depth`` diff updates."""
        adapter = DepthAdapter()
        return await self._subscriber.subscribe(depth_topic(symbol), adapter.wrap(handler, on_error))

    async def kline(
        self,
        symbol: str,
        interval: Timeframe | str,
        handler: TypedHandler[KlineUpdate],
        on_error: ErrorHandler | None = None,
    ) -> StreamSession:
        """Subscribe to ``<symbol>@kline_<interval>`` candle updates."""
        adapter = KlineAdapter()
        return await self._subscriber.subscribe(
            kline_topic(symbol, interval), adapter.wrap(handler, on_error)
        )

    async def close(self) -> None:
        """Stop every stream and close the HTTP session if the client created it."""
        await self._subscriber.close()
        if self._owns_http:
            await self._dispatcher.http.close()

    async def __aenter__(self) -> BinanceClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
