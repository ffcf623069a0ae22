"""
Structured Error Taxonomy — Typed exceptions for the apinodes adapters.

Design principles:
  - Every error carries `retryable` + `error_code` for automated decisions
  - Hierarchy mirrors the layers: Node → Client → Pagination
  - HTTP-safe: each class maps to a recommended status code
  - Structured logging friendly: all errors serialize cleanly to JSON

Transport failures without a recognizable API error body are NOT wrapped;
they propagate exactly as the transport produced them.
"""

from __future__ import annotations

__all__ = [
    # Base
    "ApiNodesError",
    # Connector layer
    "ConnectorError",
    "MissingCredentialError",
    "ApiError",
    "PaginationLimitError",
    # Registry
    "NodeNotFoundError",
    "OperationNotFoundError",
]


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  Base
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


class ApiNodesError(Exception):
    """Root exception for the apinodes package.

    Attributes:
        retryable: If True, the caller may consider retrying the operation.
        error_code: Machine-readable code for dashboards and alerting.
        http_status: Suggested HTTP status code for API responses.
    """

    retryable: bool = False
    error_code: str = "APINODES_ERROR"
    http_status: int = 500

    def __init__(self, message: str, *, detail: str | None = None):
        self.detail = detail
        super().__init__(message)

    def to_dict(self) -> dict:
        """Serialize for structured logging and API responses."""
        return {
            "error_code": self.error_code,
            "message": str(self),
            "detail": self.detail,
            "retryable": self.retryable,
            "http_status": self.http_status,
        }


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  Connector Layer — Errors from external service integrations
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


class ConnectorError(ApiNodesError):
    """Base for all integration errors."""

    error_code = "CONNECTOR_ERROR"

    def __init__(self, message: str, *, integration: str | None = None, **kwargs):
        self.integration = integration
        super().__init__(message, **kwargs)

    def to_dict(self) -> dict:
        d = super().to_dict()
        d["integration"] = self.integration
        return d


class MissingCredentialError(ConnectorError):
    """The credential provider returned nothing for the requested type.

    Raised before any network I/O; never worth retrying.
    """

    retryable = False
    error_code = "MISSING_CREDENTIAL"
    http_status = 401

    def __init__(self, credential_type: str, **kwargs):
        self.credential_type = credential_type
        super().__init__(f"No credentials got returned for '{credential_type}'", **kwargs)

    def to_dict(self) -> dict:
        d = super().to_dict()
        d["credential_type"] = self.credential_type
        return d


class ApiError(ConnectorError):
    """Upstream API answered with an error status and a readable message."""

    retryable = False
    error_code = "API_ERROR"
    http_status = 502

    def __init__(
        self,
        status_code: int,
        message: str,
        *,
        display_name: str = "API",
        **kwargs,
    ):
        self.status_code = status_code
        self.message = message
        super().__init__(f"{display_name} error response [{status_code}]: {message}", **kwargs)

    def to_dict(self) -> dict:
        d = super().to_dict()
        d["status_code"] = self.status_code
        d["api_message"] = self.message
        return d


class PaginationLimitError(ConnectorError):
    """A drain fetched more pages than the configured safety cap allows."""

    retryable = False
    error_code = "PAGINATION_LIMIT"
    http_status = 502

    def __init__(self, message: str, *, max_pages: int = 0, **kwargs):
        self.max_pages = max_pages
        super().__init__(message, **kwargs)

    def to_dict(self) -> dict:
        d = super().to_dict()
        d["max_pages"] = self.max_pages
        return d


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  Registry
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


class NodeNotFoundError(ApiNodesError, KeyError):
    """Lookup of an unregistered node name."""

    error_code = "NODE_NOT_FOUND"
    http_status = 404

    def __init__(self, name: str, *, available: list[str] | None = None, **kwargs):
        self.name = name
        self.available = available or []
        super().__init__(f"Node '{name}' not found. Available: {self.available}", **kwargs)

    def __str__(self) -> str:
        return self.args[0]


class OperationNotFoundError(ApiNodesError, KeyError):
    """Dispatch to an operation the node does not declare."""

    error_code = "OPERATION_NOT_FOUND"
    http_status = 404

    def __init__(self, node: str, operation: str, *, available: list[str] | None = None, **kwargs):
        self.node = node
        self.operation = operation
        self.available = available or []
        super().__init__(
            f"Node '{node}' has no operation '{operation}'. Available: {self.available}",
            **kwargs,
        )

    def __str__(self) -> str:
        return self.args[0]
