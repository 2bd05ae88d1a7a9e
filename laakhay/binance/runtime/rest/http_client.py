"""HTTP client helper."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import aiohttp
from yarl import URL


@dataclass(frozen=True)
class HTTPResponse:
    """Status, raw body and headers of one HTTP exchange."""

    status: int
    body: bytes
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


class HTTPClient:
    """Async HTTP client wrapper.

    Unlike a plain ``session.get(...).json()`` helper this does not raise on
    non-2xx statuses: the dispatcher needs the body of error responses to
    decode the exchange's ``{code, msg}`` payload.
    """

    def __init__(self, timeout: float = 30.0) -> None:
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: Optional[aiohttp.ClientSession] = None

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self._session

    async def request(
        self,
        method: str,
        url: str,
        headers: Optional[dict[str, str]] = None,
    ) -> HTTPResponse:
        """Send a request to an already-encoded URL.

        The query string is passed through untouched (``encoded=True``) so a
        signed query reaches the server byte for byte.
        """
        target = URL(url, encoded=True)
        async with self.session.request(method, target, headers=headers) as response:
            body = await response.read()
            return HTTPResponse(
                status=response.status,
                body=body,
                headers=dict(response.headers),
            )

    async def close(self) -> None:
        """Close session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> "HTTPClient":
        """Context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        await self.close()
