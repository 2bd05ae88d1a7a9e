"""Depth (diff order book) stream event."""

from datetime import UTC, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

PriceLevel = tuple[Decimal, Decimal]


class DepthUpdate(BaseModel):
    """One ``<symbol>@depth`` event.

    Bids and asks are (price, quantity) pairs; a zero quantity removes the
    level. Updates must be applied in ``first_update_id``/``final_update_id``
    order by whoever maintains a local book.
    """

    event_type: str = Field("depthUpdate", alias="e")
    event_time: int = Field(..., alias="E")
    symbol: str = Field(..., alias="s", min_length=1)
    first_update_id: int = Field(..., alias="U")
    final_update_id: int = Field(..., alias="u")
    bids: list[PriceLevel] = Field(default_factory=list, alias="b")
    asks: list[PriceLevel] = Field(default_factory=list, alias="a")

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @property
    def timestamp(self) -> datetime:
        return datetime.fromtimestamp(self.event_time / 1000, tz=UTC)

    @property
    def best_bid(self) -> PriceLevel | None:
        """Highest bid level in this update."""
        return max(self.bids, key=lambda level: level[0]) if self.bids else None

    @property
    def best_ask(self) -> PriceLevel | None:
        """Lowest ask level in this update."""
        return min(self.asks, key=lambda level: level[0]) if self.asks else None
