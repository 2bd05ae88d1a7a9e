"""Derived stream kinds: topic naming plus typed frame decoding."""

from __future__ import annotations

from typing import Protocol

from ..core.enums import Timeframe
from ..models import DepthUpdate, KlineUpdate
from ..runtime.ws.session import StreamSession
from .base import ErrorHandler, MessageAdapter, TypedHandler, normalize_symbol
from .depth import Adapter as DepthAdapter
from .depth import depth_topic
from .kline import Adapter as KlineAdapter
from .kline import kline_topic


class StreamClient(Protocol):
    """Typed stream subscriptions offered by a client."""

    async def depth(
        self,
        symbol: str,
        handler: TypedHandler[DepthUpdate],
        on_error: ErrorHandler | None = None,
    ) -> StreamSession: ...

    async def kline(
        self,
        symbol: str,
        interval: Timeframe | str,
        handler: TypedHandler[KlineUpdate],
        on_error: ErrorHandler | None = None,
    ) -> StreamSession: ...


__all__ = [
    "StreamClient",
    "MessageAdapter",
    "TypedHandler",
    "ErrorHandler",
    "DepthAdapter",
    "KlineAdapter",
    "depth_topic",
    "kline_topic",
    "normalize_symbol",
]
