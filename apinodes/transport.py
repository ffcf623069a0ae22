"""
HTTP Transport — Sends one ``ApiRequest`` and reports the outcome.

The transport never interprets vendor error bodies. An HTTP error status
comes back as a ``TransportFailure`` value carrying the status code, the raw
body text and (when it parses) the JSON body; the client decides whether that
shape is recognizable. Network and protocol errors (``httpx.TransportError``)
are raised as-is.

``TransportFailure`` is also an exception so the client can re-raise the very
object it received when no message can be extracted.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

import httpx
import structlog

logger = structlog.get_logger(__name__)

HTTP_METHODS = frozenset({"GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"})


@dataclass(frozen=True)
class ApiRequest:
    """A fully built outbound call. ``body=None`` means no body on the wire."""

    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    query: dict[str, Any] = field(default_factory=dict)
    body: dict[str, Any] | None = None


@dataclass(frozen=True)
class TransportResponse:
    """Successful round-trip; ``data`` is the parsed JSON (or None when empty)."""

    status_code: int
    data: Any = None


class TransportFailure(Exception):
    """The upstream answered with an error status."""

    def __init__(
        self,
        status_code: int,
        raw_body: str = "",
        structured_body: Any = None,
    ):
        self.status_code = status_code
        self.raw_body = raw_body
        self.structured_body = structured_body
        super().__init__(f"HTTP {status_code}: {raw_body[:200]}" if raw_body else f"HTTP {status_code}")


TransportResult = TransportResponse | TransportFailure


@runtime_checkable
class Transport(Protocol):
    async def send(self, request: ApiRequest) -> TransportResult: ...


# ── httpx implementation ─────────────────────────────────────────────


def _parse_json(resp: httpx.Response) -> Any:
    if not resp.content:
        return None
    try:
        return resp.json()
    except ValueError:
        return None


class HttpxTransport:
    """
    Production transport backed by a shared ``httpx.AsyncClient``.

    Features:
    - HTTP/2 and connection pooling
    - Split connect/read/pool timeouts
    - Structured logging for every round-trip
    """

    def __init__(
        self,
        timeout: float = 30.0,
        user_agent: str = "apinodes",
        client: httpx.AsyncClient | None = None,
    ):
        self._client = client or httpx.AsyncClient(
            http2=True,
            headers={"User-Agent": user_agent},
            timeout=httpx.Timeout(timeout, connect=10.0, pool=5.0),
            limits=httpx.Limits(
                max_connections=20,
                max_keepalive_connections=10,
                keepalive_expiry=30.0,
            ),
        )

    async def send(self, request: ApiRequest) -> TransportResult:
        method = request.method.upper()
        if method not in HTTP_METHODS:
            raise ValueError(f"Unsupported HTTP method: {request.method}")

        kwargs: dict[str, Any] = {"headers": request.headers}
        if request.query:
            kwargs["params"] = request.query
        if request.body is not None:
            kwargs["json"] = request.body

        start = time.monotonic()
        resp = await self._client.request(method, request.url, **kwargs)
        latency_ms = (time.monotonic() - start) * 1000

        logger.debug(
            "http_round_trip",
            method=method,
            url=request.url,
            status=resp.status_code,
            latency_ms=round(latency_ms),
            http_version=resp.http_version,
        )

        if resp.status_code >= 400:
            return TransportFailure(
                status_code=resp.status_code,
                raw_body=resp.text,
                structured_body=_parse_json(resp),
            )
        if resp.status_code == 204 or not resp.content:
            return TransportResponse(status_code=resp.status_code)
        # A malformed success body raises here and propagates untouched
        return TransportResponse(status_code=resp.status_code, data=resp.json())

    async def aclose(self) -> None:
        """Close the underlying HTTP/2 connection pool."""
        await self._client.aclose()
