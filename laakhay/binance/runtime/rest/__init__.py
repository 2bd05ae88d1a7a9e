"""REST runtime: HTTP transport, signing and request dispatch."""

from .dispatcher import RequestDispatcher, RequestHook, log_request
from .http_client import HTTPClient, HTTPResponse
from .signing import encode_query, flatten_params, sign, signed_query

__all__ = [
    "HTTPClient",
    "HTTPResponse",
    "RequestDispatcher",
    "RequestHook",
    "log_request",
    "encode_query",
    "flatten_params",
    "sign",
    "signed_query",
]
