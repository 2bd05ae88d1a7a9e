"""Kline (candlestick) stream."""

from __future__ import annotations

from ..core.enums import Timeframe
from ..core.exceptions import ValidationError
from ..models.kline import KlineUpdate
from .base import MessageAdapter, normalize_symbol


def kline_topic(symbol: str, interval: Timeframe | str) -> str:
    """``BTCUSDT``, ``1m`` -> ``btcusdt@kline_1m``."""
    try:
        timeframe = Timeframe.from_str(interval)
    except ValueError as e:
        raise ValidationError(str(e)) from None
    return f"{normalize_symbol(symbol)}@kline_{timeframe.value}"


class Adapter(MessageAdapter[KlineUpdate]):
    """Adapter for Binance ``kline`` frames."""

    def __init__(self) -> None:
        super().__init__(KlineUpdate)
