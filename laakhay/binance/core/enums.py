"""Core enumerations shared by the REST and streaming layers."""

from enum import Enum


class Timeframe(str, Enum):
    """Kline intervals accepted by the Binance stream API."""

    # Seconds/Minutes
    S1 = "1s"
    M1 = "1m"
    M3 = "3m"
    M5 = "5m"
    M15 = "15m"
    M30 = "30m"

    # Hours
    H1 = "1h"
    H2 = "2h"
    H4 = "4h"
    H6 = "6h"
    H8 = "8h"
    H12 = "12h"

    # Days/Weeks/Months
    D1 = "1d"
    D3 = "3d"
    W1 = "1w"
    MO1 = "1M"

    @classmethod
    def from_str(cls, value: "str | Timeframe") -> "Timeframe":
        """Coerce an interval string (``"1m"``) or member into a Timeframe."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Unsupported interval: {value!r}") from None


class HTTPMethod(str, Enum):
    """HTTP verbs the dispatcher will send."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"


class SessionState(str, Enum):
    """Lifecycle states of a stream session."""

    CONNECTING = "connecting"
    OPEN = "open"
    RECONNECTING = "reconnecting"
    CLOSED = "closed"


class CloseReason(str, Enum):
    """Why a stream session reached CLOSED."""

    CONNECT_FAILED = "connect_failed"
    RECONNECT_DISABLED = "reconnect_disabled"
    EXHAUSTED = "exhausted"
    STOPPED = "stopped"
