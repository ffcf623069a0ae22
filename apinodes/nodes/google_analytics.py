"""
GoogleAnalyticsNode — Reporting API v4 reports and user activity.

Auth is an OAuth2 bearer token (``accessToken`` field of the
``googleAnalyticsOAuth2`` credential); refreshing it is the credential
provider's job. Google error bodies look like ``{"error": {"message": ...}}``.

User activity search paginates with ``pageToken``/``nextPageToken``.

Usage:
    node = GoogleAnalyticsNode(credentials=provider)
    rows = await node.get_report(
        ReportConfig(view_id="123", metrics=[Metric(expression="ga:users")]),
        simple=True,
    )
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Literal

import structlog
from pydantic import BaseModel, Field

from apinodes.auth import BearerTokenAuth
from apinodes.client import ApiProfile, google_error
from apinodes.nodes.base import BaseNode

logger = structlog.get_logger(__name__)

GOOGLE_ANALYTICS_REPORTING_URL = "https://analyticsreporting.googleapis.com"
GOOGLE_ANALYTICS_METADATA_URL = "https://www.googleapis.com/analytics/v3/metadata/ga/columns"

GOOGLE_ANALYTICS_PROFILE = ApiProfile(
    name="google_analytics",
    display_name="Google Analytics",
    base_url=GOOGLE_ANALYTICS_REPORTING_URL,
    credential_type="googleAnalyticsOAuth2",
    auth=BearerTokenAuth(field="accessToken"),
    extract_error=google_error,
)


# ── Report models ────────────────────────────────────────────────────


class DateRange(BaseModel):
    start_date: datetime | date
    end_date: datetime | date


class Metric(BaseModel):
    expression: str
    alias: str | None = None
    formatting_type: Literal["INTEGER", "FLOAT", "CURRENCY", "PERCENT", "TIME"] | None = None


class Dimension(BaseModel):
    name: str
    histogram_buckets: list[str] | None = None


class ReportConfig(BaseModel):
    """One report request. Optional switches are only sent when set."""

    view_id: str
    date_range: DateRange | None = None
    metrics: list[Metric] = Field(default_factory=list)
    dimensions: list[Dimension] = Field(default_factory=list)
    include_empty_rows: bool | None = None
    hide_totals: bool | None = None
    hide_value_ranges: bool | None = None
    use_resource_quotas: bool | None = None


ActivityType = Literal["PAGEVIEW", "SCREENVIEW", "GOAL", "ECOMMERCE", "EVENT"]


class UserActivityConfig(BaseModel):
    view_id: str
    user_id: str
    activity_types: list[ActivityType] | None = None


def format_report_date(value: date | datetime) -> str:
    """``YYYY-MM-DD`` in UTC; naive datetimes are taken as UTC."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date().isoformat()
    return value.isoformat()


def _metric_to_body(metric: Metric) -> dict[str, Any]:
    body: dict[str, Any] = {"expression": metric.expression}
    if metric.alias is not None:
        body["alias"] = metric.alias
    if metric.formatting_type is not None:
        body["formattingType"] = metric.formatting_type
    return body


def _dimension_to_body(dimension: Dimension) -> dict[str, Any]:
    body: dict[str, Any] = {"name": dimension.name}
    if dimension.histogram_buckets is not None:
        body["histogramBuckets"] = dimension.histogram_buckets
    return body


def report_config_to_body(config: ReportConfig) -> dict[str, Any]:
    """Build one entry of ``reportRequests``."""
    body: dict[str, Any] = {"viewId": config.view_id}
    if config.date_range is not None:
        body["dateRanges"] = [
            {
                "startDate": format_report_date(config.date_range.start_date),
                "endDate": format_report_date(config.date_range.end_date),
            }
        ]
    if config.metrics:
        body["metrics"] = [_metric_to_body(m) for m in config.metrics]
    if config.dimensions:
        body["dimensions"] = [_dimension_to_body(d) for d in config.dimensions]
    if config.include_empty_rows:
        body["includeEmptyRows"] = True
    if config.hide_totals:
        body["hideTotals"] = True
    if config.hide_value_ranges:
        body["hideValueRanges"] = True
    return body


def user_activity_config_to_body(config: UserActivityConfig) -> dict[str, Any]:
    body: dict[str, Any] = {"viewId": config.view_id, "user": {"userId": config.user_id}}
    if config.activity_types:
        body["activityTypes"] = list(config.activity_types)
    return body


def simplify_report(report: dict[str, Any]) -> list[dict[str, Any]]:
    """
    Flatten a report into one dict per row.

    Each row maps dimension names to values and ``total`` to the first
    metric's values joined with commas. ``total`` is only set on reports
    with at least one dimension; dimensionless rows come back empty.
    """
    dimensions = report.get("columnHeader", {}).get("dimensions", [])
    rows = report.get("data", {}).get("rows", [])
    simplified = []
    for row in rows:
        item: dict[str, Any] = dict(zip(dimensions, row.get("dimensions", [])))
        metrics = row.get("metrics", [])
        if dimensions and metrics:
            item["total"] = ",".join(str(v) for v in metrics[0].get("values", []))
        simplified.append(item)
    return simplified


# ── Node ─────────────────────────────────────────────────────────────


class GoogleAnalyticsNode(BaseNode):
    """Google Analytics integration node."""

    operations = ("get_report", "search_user_activity", "get_dimensions")

    @property
    def name(self) -> str:
        return "google_analytics"

    @property
    def icon(self) -> str:
        return "📈"

    @property
    def description(self) -> str:
        return "Query Google Analytics reports and user activity"

    @property
    def profile(self) -> ApiProfile:
        return GOOGLE_ANALYTICS_PROFILE

    async def get_report(self, config: ReportConfig, *, simple: bool = False) -> list[dict]:
        """Run ``reports:batchGet`` for one report request."""
        query = {}
        if config.use_resource_quotas:
            query["useResourceQuotas"] = True
        data = await self.client.send(
            "POST",
            "/v4/reports:batchGet",
            body={"reportRequests": [report_config_to_body(config)]},
            query=query,
        )
        reports = (data or {}).get("reports", [])
        logger.info("google_analytics_report_fetched", view_id=config.view_id, reports=len(reports))
        if simple:
            return simplify_report(reports[0]) if reports else []
        return reports

    async def search_user_activity(
        self,
        config: UserActivityConfig,
        *,
        return_all: bool = False,
        limit: int = 100,
    ) -> list[dict]:
        """Sessions of one user; ``return_all`` follows ``nextPageToken``."""
        path = "/v4/userActivity:search"
        body = user_activity_config_to_body(config)
        if return_all:
            return await self.client.drain_all_by_token(
                "POST", path, body, collection_field="sessions"
            )
        data = await self.client.send("POST", path, body={**body, "pageSize": limit})
        return (data or {}).get("sessions", [])

    async def get_dimensions(self) -> list[dict]:
        """Non-deprecated columns as ``{"name", "value", "description"}`` options."""
        data = await self.client.send("GET", uri=GOOGLE_ANALYTICS_METADATA_URL)
        options = []
        for column in (data or {}).get("items", []):
            attributes = column.get("attributes", {})
            if attributes.get("status") == "DEPRECATED":
                continue
            options.append(
                {
                    "name": attributes.get("uiName"),
                    "value": column.get("id"),
                    "description": attributes.get("description"),
                }
            )
        return options
