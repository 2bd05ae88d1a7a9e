"""Pydantic v2 models for exchange payloads.

All models are frozen; field aliases match the exchange's single-letter wire
keys so frames validate directly with ``model_validate_json``.
"""

from .depth import DepthUpdate, PriceLevel
from .error import ErrorPayload
from .kline import Kline, KlineUpdate

__all__ = [
    "ErrorPayload",
    "DepthUpdate",
    "PriceLevel",
    "Kline",
    "KlineUpdate",
]
