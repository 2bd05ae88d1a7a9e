"""Kline (candlestick) stream event."""

from datetime import UTC, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class Kline(BaseModel):
    """Candle payload nested under ``k`` in a kline event."""

    open_time: int = Field(..., alias="t")
    close_time: int = Field(..., alias="T")
    symbol: str = Field(..., alias="s")
    interval: str = Field(..., alias="i")
    first_trade_id: int = Field(-1, alias="f")
    last_trade_id: int = Field(-1, alias="L")
    open: Decimal = Field(..., alias="o")
    close: Decimal = Field(..., alias="c")
    high: Decimal = Field(..., alias="h")
    low: Decimal = Field(..., alias="l")
    volume: Decimal = Field(..., alias="v", ge=0)
    trades: int = Field(0, alias="n")
    is_closed: bool = Field(False, alias="x")
    quote_volume: Decimal = Field(Decimal("0"), alias="q")
    taker_buy_base_volume: Decimal = Field(Decimal("0"), alias="V")
    taker_buy_quote_volume: Decimal = Field(Decimal("0"), alias="Q")

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @property
    def timestamp(self) -> datetime:
        """Open time as an aware datetime."""
        return datetime.fromtimestamp(self.open_time / 1000, tz=UTC)


class KlineUpdate(BaseModel):
    """One ``<symbol>@kline_<interval>`` event."""

    event_type: str = Field("kline", alias="e")
    event_time: int = Field(..., alias="E")
    symbol: str = Field(..., alias="s", min_length=1)
    kline: Kline = Field(..., alias="k")

    model_config = ConfigDict(frozen=True, populate_by_name=True)
