"""
NodeRegistry — Name and credential-type lookup plus operation dispatch.

A registry is built by the host for the scope it needs (one workflow run,
one test) with the credential provider and transport passed explicitly.
There is no process-global instance.

Usage:
    from apinodes.nodes import NodeRegistry

    async with NodeRegistry.with_builtin_nodes(provider) as registry:
        translations = await registry.run("deepl", "translate", config)
        nodes = registry.for_credential_type("lemlistApi")
"""

from __future__ import annotations

from typing import Any

import structlog

from apinodes.config import NodeSettings
from apinodes.credentials import CredentialProvider
from apinodes.errors import NodeNotFoundError, OperationNotFoundError
from apinodes.nodes.base import BaseNode, NodeInfo
from apinodes.transport import Transport

logger = structlog.get_logger(__name__)


class NodeRegistry:
    """Nodes exposed to a host, keyed by name."""

    def __init__(self, nodes: list[BaseNode] | None = None):
        self._nodes: dict[str, BaseNode] = {}
        for node in nodes or []:
            self.register(node)

    @classmethod
    def with_builtin_nodes(
        cls,
        credentials: CredentialProvider,
        transport: Transport | None = None,
        settings: NodeSettings | None = None,
    ) -> NodeRegistry:
        """A registry holding DeepL, Lemlist and Google Analytics nodes."""
        from apinodes.nodes.deepl import DeepLNode
        from apinodes.nodes.google_analytics import GoogleAnalyticsNode
        from apinodes.nodes.lemlist import LemlistNode

        return cls(
            [
                node_cls(credentials, transport=transport, settings=settings)
                for node_cls in (DeepLNode, LemlistNode, GoogleAnalyticsNode)
            ]
        )

    def register(self, node: BaseNode) -> None:
        if node.name in self._nodes:
            raise ValueError(f"Node '{node.name}' is already registered")
        self._nodes[node.name] = node
        logger.debug(
            "node_registered",
            name=node.name,
            credential_type=node.profile.credential_type,
        )

    def get(self, name: str) -> BaseNode:
        """Get a node by name. Raises NodeNotFoundError (a KeyError) if missing."""
        try:
            return self._nodes[name]
        except KeyError:
            raise NodeNotFoundError(name, available=list(self._nodes)) from None

    def for_credential_type(self, credential_type: str) -> list[BaseNode]:
        """Nodes that authenticate with ``credential_type``."""
        return [
            node
            for node in self._nodes.values()
            if node.profile.credential_type == credential_type
        ]

    def list_all(self) -> list[NodeInfo]:
        return [node.get_info() for node in self._nodes.values()]

    async def run(self, name: str, operation: str, *args: Any, **kwargs: Any) -> Any:
        """
        Invoke one declared operation of a node.

        Only names listed in the node's ``operations`` are dispatched, so
        lifecycle methods and private helpers are never reachable by name.
        """
        node = self.get(name)
        if operation not in node.operations:
            raise OperationNotFoundError(name, operation, available=list(node.operations))
        logger.info("node_operation", node=name, operation=operation)
        return await getattr(node, operation)(*args, **kwargs)

    async def aclose(self) -> None:
        """Close every node's client. Injected transports stay open."""
        for node in self._nodes.values():
            await node.teardown()

    async def __aenter__(self) -> NodeRegistry:
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    def __contains__(self, name: str) -> bool:
        return name in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)
