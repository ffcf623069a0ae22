"""
ApiClient — The one HTTP client every node shares.

A node describes its vendor with an ``ApiProfile`` (base URL, credential type,
auth style, default headers, error-body shape) and gets back a client that:

  - Resolves the credential fresh on every call and fails fast without one
  - Merges headers (defaults < auth < caller) and injects auth material
  - Omits the body entirely when the caller's body mapping is empty
  - Normalizes recognizable API error bodies into ``ApiError``
  - Drains offset/limit and page-token paginated collections

No retries happen here: a failed attempt surfaces immediately.

Usage:
    client = ApiClient(DEEPL_PROFILE, credentials=provider)
    data = await client.send("GET", "/languages", query={"type": "target"})
    campaigns = await lemlist_client.drain_all("GET", "/campaigns")
"""

from __future__ import annotations

import inspect
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

import structlog

from apinodes.auth import AuthStyle
from apinodes.config import NodeSettings, get_settings
from apinodes.credentials import Credential, CredentialProvider
from apinodes.errors import ApiError, MissingCredentialError, PaginationLimitError
from apinodes.transport import (
    ApiRequest,
    HttpxTransport,
    Transport,
    TransportFailure,
    TransportResult,
)

logger = structlog.get_logger(__name__)

ErrorExtractor = Callable[[TransportFailure], "str | None"]


# ── Error body shapes ────────────────────────────────────────────────


def message_field_error(failure: TransportFailure) -> str | None:
    """``{"message": "..."}`` bodies (DeepL)."""
    body = failure.structured_body
    if isinstance(body, Mapping) and body.get("message"):
        return str(body["message"])
    return None


def raw_body_error(failure: TransportFailure) -> str | None:
    """Any non-empty body text is the message (Lemlist answers in plain text)."""
    text = (failure.raw_body or "").strip()
    return text or None


def google_error(failure: TransportFailure) -> str | None:
    """``{"error": {"message": "..."}}`` bodies, as returned by Google APIs."""
    body = failure.structured_body
    if not isinstance(body, Mapping):
        return None
    error = body.get("error")
    if isinstance(error, Mapping) and error.get("message"):
        return str(error["message"])
    return message_field_error(failure)


# ── Profile ──────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ApiProfile:
    """
    Everything vendor-specific the client needs.

    Attributes:
        name: Machine name used in logs and errors (e.g. "deepl").
        display_name: Human name used in error messages (e.g. "DeepL").
        base_url: Prefix for relative paths; ignored when ``uri`` is given.
        credential_type: Name passed to the credential provider.
        auth: How the resolved credential is attached to the request.
        default_headers: Sent on every request unless the caller overrides.
        extract_error: Pulls a message out of an error response, or None.
    """

    name: str
    display_name: str
    base_url: str
    credential_type: str
    auth: AuthStyle
    default_headers: Mapping[str, str] = field(
        default_factory=lambda: {"Content-Type": "application/json"}
    )
    extract_error: ErrorExtractor = message_field_error

    def url_for(self, path: str = "", uri: str | None = None) -> str:
        if uri:
            return uri
        return f"{self.base_url.rstrip('/')}{path}"


def _merge_headers(base: dict[str, str], overrides: Mapping[str, str]) -> dict[str, str]:
    """Overlay headers case-insensitively; the override's spelling wins."""
    merged = dict(base)
    for name, value in overrides.items():
        for existing in [k for k in merged if k.lower() == name.lower()]:
            del merged[existing]
        merged[name] = value
    return merged


def _page_items(data: Any, collection_field: str | None) -> list:
    if data is None:
        return []
    if collection_field is not None:
        if not isinstance(data, Mapping):
            raise TypeError(
                f"Expected an object with '{collection_field}', got {type(data).__name__}"
            )
        return list(data.get(collection_field) or [])
    if not isinstance(data, list):
        raise TypeError(f"Expected a list page, got {type(data).__name__}")
    return data


# ── Client ───────────────────────────────────────────────────────────


class ApiClient:
    """
    Generic async API client parameterized by an ``ApiProfile``.

    The credential provider and transport are injected. When no transport is
    given, the client builds an ``HttpxTransport`` and closes it in
    ``aclose()``.
    """

    def __init__(
        self,
        profile: ApiProfile,
        credentials: CredentialProvider,
        transport: Transport | None = None,
        settings: NodeSettings | None = None,
    ):
        self.profile = profile
        self._credentials = credentials
        self._settings = settings or get_settings()
        self._owns_transport = transport is None
        self._transport: Transport = transport or HttpxTransport(
            timeout=self._settings.request_timeout,
            user_agent=self._settings.user_agent,
        )

    @property
    def page_size(self) -> int:
        """Default page size for list requests."""
        return self._settings.page_size

    # ── Single request ───────────────────────────────────────────────

    async def _resolve_credential(self) -> Credential:
        credential_type = self.profile.credential_type
        result = self._credentials.get_credentials(credential_type)
        if inspect.isawaitable(result):
            result = await result
        if not result:
            logger.error(
                "api_credential_missing",
                integration=self.profile.name,
                credential_type=credential_type,
            )
            raise MissingCredentialError(credential_type, integration=self.profile.name)
        return result

    def build_request(
        self,
        credential: Credential,
        method: str,
        path: str = "",
        body: Mapping[str, Any] | None = None,
        query: Mapping[str, Any] | None = None,
        *,
        uri: str | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> ApiRequest:
        """Assemble the wire request. Pure apart from reading the profile and settings."""
        request_headers = _merge_headers(
            {"User-Agent": self._settings.user_agent}, self.profile.default_headers
        )
        request_query = dict(query or {})
        self.profile.auth.apply(
            credential, self.profile.credential_type, request_headers, request_query
        )
        if headers:
            request_headers = _merge_headers(request_headers, headers)

        return ApiRequest(
            method=method.upper(),
            url=self.profile.url_for(path, uri),
            headers=request_headers,
            query=request_query,
            body=dict(body) if body else None,
        )

    async def send(
        self,
        method: str,
        path: str = "",
        body: Mapping[str, Any] | None = None,
        query: Mapping[str, Any] | None = None,
        *,
        uri: str | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        """
        Send one authenticated request and return the parsed payload.

        Raises:
            MissingCredentialError: The provider had no credential; nothing was sent.
            ApiError: The API answered with an error and a readable message.
            TransportFailure: The API answered with an error we cannot read.
        """
        credential = await self._resolve_credential()
        request = self.build_request(
            credential, method, path, body, query, uri=uri, headers=headers
        )

        start = time.monotonic()
        try:
            result: TransportResult = await self._transport.send(request)
        except TransportFailure as failure:
            result = failure
        latency_ms = (time.monotonic() - start) * 1000

        if isinstance(result, TransportFailure):
            self._raise_failure(result, request, latency_ms)

        logger.debug(
            "api_request",
            integration=self.profile.name,
            method=request.method,
            path=path or request.url,
            status=result.status_code,
            latency_ms=round(latency_ms),
        )
        return result.data

    def _raise_failure(
        self, failure: TransportFailure, request: ApiRequest, latency_ms: float
    ) -> None:
        message = self.profile.extract_error(failure)
        logger.warning(
            "api_request_failed",
            integration=self.profile.name,
            method=request.method,
            url=request.url,
            status=failure.status_code,
            recognized=message is not None,
            latency_ms=round(latency_ms),
        )
        if message is None:
            raise failure
        raise ApiError(
            failure.status_code,
            message,
            display_name=self.profile.display_name,
            integration=self.profile.name,
        ) from failure

    # ── Pagination ───────────────────────────────────────────────────

    def _check_page_cap(self, pages: int, path: str) -> None:
        max_pages = self._settings.max_pages
        if max_pages is not None and pages >= max_pages:
            raise PaginationLimitError(
                f"Pagination of {path} exceeded {max_pages} pages",
                max_pages=max_pages,
                integration=self.profile.name,
            )

    async def drain_all(
        self,
        method: str,
        path: str,
        body: Mapping[str, Any] | None = None,
        query: Mapping[str, Any] | None = None,
        *,
        collection_field: str | None = None,
        page_size: int | None = None,
    ) -> list:
        """
        Fetch every page of an offset/limit collection.

        Requests ``limit``/``offset`` pages until one comes back empty and
        returns all items in fetch order. Any error aborts the drain and
        nothing collected so far is returned.
        """
        limit = page_size or self.page_size
        page_query = {**(query or {}), "limit": limit, "offset": 0}
        items: list = []
        pages = 0

        while True:
            self._check_page_cap(pages, path)
            data = await self.send(method, path, body, page_query)
            pages += 1
            page = _page_items(data, collection_field)
            items.extend(page)
            logger.debug(
                "api_pagination_page",
                integration=self.profile.name,
                path=path,
                offset=page_query["offset"],
                count=len(page),
            )
            if not page:
                break
            page_query = {**page_query, "offset": page_query["offset"] + limit}

        logger.info(
            "api_pagination_complete",
            integration=self.profile.name,
            path=path,
            pages=pages,
            count=len(items),
        )
        return items

    async def drain_all_by_token(
        self,
        method: str,
        path: str,
        body: Mapping[str, Any] | None = None,
        query: Mapping[str, Any] | None = None,
        *,
        collection_field: str,
        token_field: str = "nextPageToken",
        request_token_field: str = "pageToken",
    ) -> list:
        """Fetch every page of a collection that hands out a continuation token."""
        page_body = dict(body or {})
        items: list = []
        pages = 0

        while True:
            self._check_page_cap(pages, path)
            data = await self.send(method, path, page_body, query)
            pages += 1
            items.extend(_page_items(data, collection_field))

            token = data.get(token_field) if isinstance(data, Mapping) else None
            if not token:
                break
            page_body = {**page_body, request_token_field: token}

        logger.info(
            "api_pagination_complete",
            integration=self.profile.name,
            path=path,
            pages=pages,
            count=len(items),
        )
        return items

    # ── Lifecycle ────────────────────────────────────────────────────

    async def aclose(self) -> None:
        """Close the transport if this client created it."""
        if self._owns_transport and isinstance(self._transport, HttpxTransport):
            await self._transport.aclose()

    async def __aenter__(self) -> ApiClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    def __repr__(self) -> str:
        return f"<ApiClient integration={self.profile.name!r}>"
