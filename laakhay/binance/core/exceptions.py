"""Custom exception hierarchy."""

from __future__ import annotations


class BinanceError(Exception):
    """Base exception for all library errors."""

    pass


class TransportError(BinanceError):
    """Network-level failure talking to the exchange (refused, timeout, dial)."""

    pass


class StreamConnectError(TransportError):
    """WebSocket handshake to a stream endpoint failed."""

    def __init__(self, message: str, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class ExchangeError(BinanceError):
    """Error payload returned by the exchange on a non-200 response.

    The message is the server-provided ``msg``; ``code`` is the numeric
    Binance error code when one was present.
    """

    def __init__(
        self,
        message: str,
        code: int | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code


class DecodeError(BinanceError):
    """Response body or stream frame could not be decoded into the expected shape."""

    def __init__(self, message: str, body: str | bytes | None = None) -> None:
        super().__init__(message)
        self.body = body


class ValidationError(BinanceError):
    """Caller input rejected before any I/O."""

    pass
