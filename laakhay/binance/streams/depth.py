"""Depth (diff order book) stream."""

from __future__ import annotations

from ..models.depth import DepthUpdate
from .base import MessageAdapter, normalize_symbol


def depth_topic(symbol: str) -> str:
    """``BTCUSDT`` -> ``btcusdt@depth``."""
    return f"{normalize_symbol(symbol)}@depth"


class Adapter(MessageAdapter[DepthUpdate]):
    """Adapter for Binance ``depthUpdate`` frames."""

    def __init__(self) -> None:
        super().__init__(DepthUpdate)
