"""
Auth injection styles — how a resolved credential lands on a request.

Each vendor picks one style in its ``ApiProfile``:

  - ``QueryKeyAuth``: API key as a query parameter (DeepL ``auth_key``)
  - ``BasicKeyAuth``: ``Authorization: Basic base64(":" + key)`` (Lemlist)
  - ``BearerTokenAuth``: ``Authorization: Bearer <token>`` (Google OAuth2)
"""

from __future__ import annotations

import base64
from dataclasses import dataclass
from typing import Any, Mapping

from apinodes.errors import MissingCredentialError


def _require_field(credential: Mapping[str, Any], field: str, credential_type: str) -> str:
    value = credential.get(field)
    if not value:
        raise MissingCredentialError(credential_type, detail=f"field '{field}' is empty")
    return str(value)


@dataclass(frozen=True)
class QueryKeyAuth:
    """Puts ``credential[field]`` into the query string as ``param``."""

    param: str
    field: str = "apiKey"

    def apply(
        self,
        credential: Mapping[str, Any],
        credential_type: str,
        headers: dict[str, str],
        query: dict[str, Any],
    ) -> None:
        query[self.param] = _require_field(credential, self.field, credential_type)


@dataclass(frozen=True)
class BasicKeyAuth:
    """Basic auth with an empty username and the API key as password."""

    field: str = "apiKey"

    def apply(
        self,
        credential: Mapping[str, Any],
        credential_type: str,
        headers: dict[str, str],
        query: dict[str, Any],
    ) -> None:
        key = _require_field(credential, self.field, credential_type)
        encoded = base64.b64encode(f":{key}".encode()).decode("ascii")
        headers["Authorization"] = f"Basic {encoded}"


@dataclass(frozen=True)
class BearerTokenAuth:
    """OAuth2-style bearer token taken from ``credential[field]``."""

    field: str = "accessToken"
    token_type: str = "Bearer"

    def apply(
        self,
        credential: Mapping[str, Any],
        credential_type: str,
        headers: dict[str, str],
        query: dict[str, Any],
    ) -> None:
        token = _require_field(credential, self.field, credential_type)
        headers["Authorization"] = f"{self.token_type} {token}"


AuthStyle = QueryKeyAuth | BasicKeyAuth | BearerTokenAuth
