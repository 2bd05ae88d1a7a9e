"""Runtime layer: REST dispatch and stream subscriptions."""

from .rest import HTTPClient, HTTPResponse, RequestDispatcher
from .ws import StreamSession, StreamSubscriber, TransportConfig, WebSocketTransport

__all__ = [
    "HTTPClient",
    "HTTPResponse",
    "RequestDispatcher",
    "StreamSession",
    "StreamSubscriber",
    "TransportConfig",
    "WebSocketTransport",
]
