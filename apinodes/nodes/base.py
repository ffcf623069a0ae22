"""
BaseNode — Abstract base class for all integration nodes.

Every vendor adapter extends this class. A node owns one ``ApiClient`` built
from its ``ApiProfile`` plus an injected credential provider and transport,
and exposes typed operations that return JSON-shaped data.

Usage:
    class MyNode(BaseNode):
        name = "my_service"
        icon = "🔌"
        description = "Connects to My Service API"
        profile = MY_PROFILE

        async def get_things(self) -> list[dict]:
            return await self.client.drain_all("GET", "/things")
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import structlog
from pydantic import BaseModel, Field

from apinodes.client import ApiClient, ApiProfile
from apinodes.config import NodeSettings
from apinodes.credentials import CredentialProvider
from apinodes.transport import Transport

logger = structlog.get_logger(__name__)


class NodeInfo(BaseModel):
    """Summary info for listing nodes in the host."""

    name: str
    icon: str
    description: str
    credential_type: str
    healthy: bool = True
    operations: list[str] = Field(default_factory=list)


def to_items(data: Any) -> list[dict[str, Any]]:
    """
    Reshape a payload into the host's item array: ``[{"json": {...}}, ...]``.

    Lists become one item per element, a single mapping becomes one item,
    ``None`` becomes no items. Scalars are wrapped as ``{"value": x}``.
    """
    if data is None:
        return []
    rows = data if isinstance(data, list) else [data]
    return [{"json": row if isinstance(row, dict) else {"value": row}} for row in rows]


class BaseNode(ABC):
    """
    Abstract base class for all integration nodes.

    Subclasses MUST define:
      - name, icon, description
      - profile: the vendor's ``ApiProfile``

    Subclasses MAY override:
      - operations: names listed in ``get_info()`` and dispatchable via ``NodeRegistry.run``
      - health_check(): verify the credential and API are usable
    """

    operations: tuple[str, ...] = ()

    def __init__(
        self,
        credentials: CredentialProvider,
        transport: Transport | None = None,
        settings: NodeSettings | None = None,
    ):
        self._credentials = credentials
        self._transport = transport
        self._settings = settings
        self._client: ApiClient | None = None

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique node identifier (e.g. 'deepl', 'lemlist')."""
        ...

    @property
    @abstractmethod
    def icon(self) -> str:
        ...

    @property
    @abstractmethod
    def description(self) -> str:
        ...

    @property
    @abstractmethod
    def profile(self) -> ApiProfile:
        """Vendor profile used to build the client."""
        ...

    @property
    def client(self) -> ApiClient:
        """The node's API client. Lazy-initializes on first access."""
        if self._client is None:
            self._client = ApiClient(
                self.profile,
                credentials=self._credentials,
                transport=self._transport,
                settings=self._settings,
            )
        return self._client

    # ── Lifecycle Hooks ──────────────────────────────────────────────

    async def teardown(self) -> None:
        """Close the client's connection pool if it owns one."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def health_check(self) -> bool:
        """Check if the node is healthy and ready to use."""
        return True

    # ── Info ──────────────────────────────────────────────────────────

    def get_info(self) -> NodeInfo:
        """Return summary info for this node."""
        return NodeInfo(
            name=self.name,
            icon=self.icon,
            description=self.description,
            credential_type=self.profile.credential_type,
            operations=list(self.operations),
        )

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
