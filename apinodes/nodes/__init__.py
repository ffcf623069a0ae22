"""
Nodes — Integration adapters for third-party REST APIs.

Each node wraps one vendor (DeepL, Lemlist, Google Analytics) on top of the
shared ``ApiClient``. The NodeRegistry manages the available nodes.

Usage:
    from apinodes.nodes import NodeRegistry

    registry = NodeRegistry.with_builtin_nodes(provider)
    campaigns = await registry.run("lemlist", "get_campaigns", return_all=True)
"""

from apinodes.nodes.base import BaseNode, NodeInfo, to_items
from apinodes.nodes.registry import NodeRegistry
from apinodes.nodes.deepl import DeepLNode, TranslateConfig
from apinodes.nodes.lemlist import ActivityFilter, LeadConfig, LemlistNode
from apinodes.nodes.google_analytics import (
    DateRange,
    Dimension,
    GoogleAnalyticsNode,
    Metric,
    ReportConfig,
    UserActivityConfig,
)

__all__ = [
    "BaseNode",
    "NodeInfo",
    "to_items",
    "NodeRegistry",
    "DeepLNode",
    "TranslateConfig",
    "LemlistNode",
    "ActivityFilter",
    "LeadConfig",
    "GoogleAnalyticsNode",
    "ReportConfig",
    "DateRange",
    "Metric",
    "Dimension",
    "UserActivityConfig",
]
