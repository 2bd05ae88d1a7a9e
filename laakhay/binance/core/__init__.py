"""Core types: enums and the exception hierarchy."""

from .enums import CloseReason, HTTPMethod, SessionState, Timeframe
from .exceptions import (
    BinanceError,
    DecodeError,
    ExchangeError,
    StreamConnectError,
    TransportError,
    ValidationError,
)

__all__ = [
    "Timeframe",
    "HTTPMethod",
    "SessionState",
    "CloseReason",
    "BinanceError",
    "TransportError",
    "StreamConnectError",
    "ExchangeError",
    "DecodeError",
    "ValidationError",
]
