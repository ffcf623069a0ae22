"""
apinodes — Integration adapters for a workflow-automation host.

Provides the shared API client (auth injection, error normalization,
pagination) and the vendor nodes built on top of it.
"""

from apinodes.client import ApiClient, ApiProfile
from apinodes.credentials import (
    CredentialProvider,
    EnvCredentialProvider,
    StaticCredentialProvider,
)
from apinodes.errors import ApiError, MissingCredentialError, PaginationLimitError
from apinodes.transport import ApiRequest, HttpxTransport, TransportFailure, TransportResponse
from apinodes.nodes import NodeRegistry

__version__ = "0.1.0"

__all__ = [
    "ApiClient",
    "ApiProfile",
    "CredentialProvider",
    "EnvCredentialProvider",
    "StaticCredentialProvider",
    "ApiError",
    "MissingCredentialError",
    "PaginationLimitError",
    "ApiRequest",
    "HttpxTransport",
    "TransportFailure",
    "TransportResponse",
    "NodeRegistry",
]
