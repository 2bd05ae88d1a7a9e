"""Runtime WebSocket helpers."""

from .session import StreamHandler, StreamSession
from .subscriber import StreamSubscriber
from .transport import DuplexConnection, StreamTransport, TransportConfig, WebSocketTransport

__all__ = [
    "DuplexConnection",
    "StreamTransport",
    "TransportConfig",
    "WebSocketTransport",
    "StreamHandler",
    "StreamSession",
    "StreamSubscriber",
]
