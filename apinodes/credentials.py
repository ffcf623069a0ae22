"""
Credential Providers — Where nodes get their secrets from.

The API client never stores credentials. On every request it asks an injected
provider for the fields of a named credential type (e.g. ``"deepLApi"``) and
uses them for that single call only.

This module provides:
  - ``CredentialProvider``: the protocol the client consumes
  - ``StaticCredentialProvider``: an in-memory mapping (hosts, tests)
  - ``EnvCredentialProvider``: reads fields from environment variables

Usage::

    from apinodes.credentials import EnvCredentialProvider

    provider = EnvCredentialProvider({"deepLApi": {"apiKey": "DEEPL_API_KEY"}})
    provider.get_credentials("deepLApi")   # {"apiKey": "..."} or None
"""

from __future__ import annotations

import os
from collections.abc import Awaitable, Mapping
from typing import Any, Protocol, runtime_checkable

import structlog

logger = structlog.get_logger(__name__)

Credential = Mapping[str, Any]


@runtime_checkable
class CredentialProvider(Protocol):
    """
    Resolves credential fields by credential type name.

    Implementations may be synchronous or return an awaitable. ``None``
    (or an empty mapping) means the credential is not available.
    """

    def get_credentials(
        self, credential_type: str
    ) -> Credential | None | Awaitable[Credential | None]: ...


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  StaticCredentialProvider
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


class StaticCredentialProvider:
    """In-memory credentials keyed by credential type."""

    def __init__(self, credentials: Mapping[str, Credential] | None = None) -> None:
        self._credentials: dict[str, dict[str, Any]] = {
            name: dict(fields) for name, fields in (credentials or {}).items()
        }

    def get_credentials(self, credential_type: str) -> Credential | None:
        fields = self._credentials.get(credential_type)
        # Copy so callers cannot mutate the stored secret
        return dict(fields) if fields else None

    def set(self, credential_type: str, fields: Credential) -> None:
        """Store (or replace) the fields for a credential type."""
        self._credentials[credential_type] = dict(fields)
        logger.debug("credential_stored", credential_type=credential_type)

    def remove(self, credential_type: str) -> None:
        self._credentials.pop(credential_type, None)

    def __repr__(self) -> str:
        return f"<StaticCredentialProvider types={sorted(self._credentials)}>"


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  EnvCredentialProvider
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


class EnvCredentialProvider:
    """
    Reads credential fields from environment variables.

    Args:
        env_map: ``{credential_type: {field_name: ENV_VAR_NAME}}``.

    The environment is read on every call, so rotated secrets are picked up
    without restarting. A credential is only returned when every mapped
    variable is set and non-empty.
    """

    def __init__(self, env_map: Mapping[str, Mapping[str, str]]) -> None:
        self._env_map = {name: dict(fields) for name, fields in env_map.items()}

    def get_credentials(self, credential_type: str) -> Credential | None:
        fields = self._env_map.get(credential_type)
        if not fields:
            return None

        resolved: dict[str, str] = {}
        for field_name, env_var in fields.items():
            value = os.environ.get(env_var, "")
            if not value:
                logger.debug(
                    "credential_env_missing",
                    credential_type=credential_type,
                    env_var=env_var,
                )
                return None
            resolved[field_name] = value
        return resolved

    def __repr__(self) -> str:
        return f"<EnvCredentialProvider types={sorted(self._env_map)}>"
