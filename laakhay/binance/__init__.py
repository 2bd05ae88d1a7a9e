"""Laakhay Binance - async REST and stream client for the Binance API."""

from .client import BinanceClient
from .config import RECONNECT_LIMIT, ClientConfig
from .core import (
    BinanceError,
    CloseReason,
    DecodeError,
    ExchangeError,
    HTTPMethod,
    SessionState,
    StreamConnectError,
    Timeframe,
    TransportError,
    ValidationError,
)
from .models import DepthUpdate, ErrorPayload, Kline, KlineUpdate
from .runtime import (
    HTTPClient,
    HTTPResponse,
    RequestDispatcher,
    StreamSession,
    StreamSubscriber,
    TransportConfig,
    WebSocketTransport,
)
from .streams import StreamClient, depth_topic, kline_topic

__version__ = "0.1.0"

__all__ = [
    # Client
    "BinanceClient",
    "ClientConfig",
    "RECONNECT_LIMIT",
    # Runtime
    "HTTPClient",
    "HTTPResponse",
    "RequestDispatcher",
    "StreamSession",
    "StreamSubscriber",
    "TransportConfig",
    "WebSocketTransport",
    # Streams
    "StreamClient",
    "depth_topic",
    "kline_topic",
    # Enums
    "Timeframe",
    "HTTPMethod",
    "SessionState",
    "CloseReason",
    # Models
    "ErrorPayload",
    "DepthUpdate",
    "Kline",
    "KlineUpdate",
    # Exceptions
    "BinanceError",
    "TransportError",
    "StreamConnectError",
    "ExchangeError",
    "DecodeError",
    "ValidationError",
]
