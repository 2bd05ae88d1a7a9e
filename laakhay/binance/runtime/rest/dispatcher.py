"""Unary request dispatch: build, optionally sign, send and decode.

Every call resolves ``<base_url><endpoint>?<query>``, runs the registered
request hooks with the method and full URL, sends it with the fixed Binance
headers and decodes the response. A 200 decodes into the caller's output
type; any other status decodes the ``{code, msg}`` error payload and raises
``ExchangeError`` carrying the server message.
"""

from __future__ import annotations

import asyncio
import inspect
import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import aiohttp
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ...config import API_KEY_HEADER, CONTENT_TYPE, USER_AGENT_HEADER, ClientConfig
from ...core.enums import HTTPMethod
from ...core.exceptions import DecodeError, ExchangeError, TransportError, ValidationError
from ...models.error import ErrorPayload
from .http_client import HTTPClient, HTTPResponse
from .signing import encode_query, flatten_params, signed_query

logger = logging.getLogger(__name__)

T = TypeVar("T")

RequestHook = Callable[[str, str], Awaitable[None] | None]

_ERROR_ADAPTER = TypeAdapter(ErrorPayload)


def log_request(method: str, url: str) -> None:
    """Default request hook: one debug line per outgoing request."""
    logger.debug(f"{method} {url}", extra={"method": method, "url": url})


class RequestDispatcher:
    """Send plain and signed requests against the configured base URL."""

    def __init__(
        self,
        config: ClientConfig,
        http: HTTPClient | None = None,
        hooks: list[RequestHook] | None = None,
    ) -> None:
        self._config = config
        self._http = http or config.http or HTTPClient(timeout=config.timeout)
        self._hooks: list[RequestHook] = list(hooks) if hooks is not None else [log_request]

    @property
    def http(self) -> HTTPClient:
        return self._http

    def add_request_hook(self, hook: RequestHook) -> None:
        """Register a callable invoked with ``(method, url)`` before every send."""
        self._hooks.append(hook)

    async def request(
        self,
        method: str,
        endpoint: str,
        params: Any = None,
        out: type[T] | None = None,
    ) -> T | Any:
        """Public (unsigned) request.

        Params are flattened into the query string for every method.

        Args:
            method: HTTP verb
            endpoint: Path appended verbatim to the base URL
            params: Mapping, pydantic model or dataclass of query parameters
            out: Optional type to validate the response body into

        Returns:
            The decoded body (validated into ``out`` when given)

        Raises:
            ValidationError: Unknown HTTP method or unsupported params
            TransportError: Network failure
            ExchangeError: Non-200 response
            DecodeError: Body could not be decoded
        """
        verb = self._check_method(method)
        query = encode_query(flatten_params(params))
        return await self._send(verb, self._build_url(endpoint, query), out)

    async def signed_request(
        self,
        method: str,
        endpoint: str,
        params: Any = None,
        out: type[T] | None = None,
    ) -> T | Any:
        """Authenticated request: adds ``timestamp`` and a trailing ``signature``.

        The signature covers exactly the encoded query that precedes it, and
        the URL is sent without re-encoding.
        """
        verb = self._check_method(method)
        query = signed_query(params, self._config.secret_key)
        return await self._send(verb, self._build_url(endpoint, query), out)

    def _check_method(self, method: str) -> str:
        try:
            return HTTPMethod(method.upper()).value
        except (ValueError, AttributeError):
            raise ValidationError(f"Unsupported HTTP method: {method!r}") from None

    def _build_url(self, endpoint: str, query: str) -> str:
        url = f"{self._config.base_url}{endpoint}"
        return f"{url}?{query}" if query else url

    def _headers(self) -> dict[str, str]:
        return {
            "content-type": CONTENT_TYPE,
            API_KEY_HEADER: self._config.api_key,
            USER_AGENT_HEADER: self._config.user_agent,
        }

    async def _run_hooks(self, method: str, url: str) -> None:
        for hook in self._hooks:
            try:
                result = hook(method, url)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:  # noqa: BLE001
                logger.warning(f"Request hook {hook!r} failed: {e}")

    async def _send(self, method: str, url: str, out: type[T] | None) -> T | Any:
        await self._run_hooks(method, url)
        try:
            response = await self._http.request(method, url, headers=self._headers())
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            raise TransportError(f"{method} {url} failed: {e}") from e

        if response.status != 200:
            raise self._decode_error(response)
        return self._decode_body(response, out)

    def _decode_error(self, response: HTTPResponse) -> ExchangeError:
        try:
            payload = _ERROR_ADAPTER.validate_json(response.body)
        except PydanticValidationError as e:
            raise DecodeError(
                f"HTTP {response.status}: undecodable error body", body=response.body
            ) from e
        return ExchangeError(payload.msg, code=payload.code, status_code=response.status)

    def _decode_body(self, response: HTTPResponse, out: type[T] | None) -> T | Any:
        if not response.body.strip():
            if out is None:
                return None
            raise DecodeError("Empty response body", body=response.body)
        try:
            if out is None:
                return json.loads(response.body)
            return TypeAdapter(out).validate_json(response.body)
        except (json.JSONDecodeError, UnicodeDecodeError, PydanticValidationError) as e:
            raise DecodeError(f"Could not decode response: {e}", body=response.body) from e
