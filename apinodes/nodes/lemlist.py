"""
LemlistNode — Cold-outreach campaigns, leads and activities via the Lemlist API.

Auth is HTTP Basic with an empty username and the API key as password.
Lemlist returns plain-text error bodies, which are surfaced verbatim.
List endpoints paginate with ``limit``/``offset`` and end on an empty page.

Usage:
    node = LemlistNode(credentials=provider)
    campaigns = await node.get_campaigns(return_all=True)
    lead = await node.create_lead("cam_123", "jane@acme.com", LeadConfig(first_name="Jane"))
"""

from __future__ import annotations

from typing import Any, Literal
from urllib.parse import quote

import structlog
from pydantic import BaseModel

from apinodes.auth import BasicKeyAuth
from apinodes.client import ApiProfile, raw_body_error
from apinodes.nodes.base import BaseNode

logger = structlog.get_logger(__name__)

LEMLIST_API_URL = "https://api.lemlist.com/api"

LEMLIST_PROFILE = ApiProfile(
    name="lemlist",
    display_name="Lemlist",
    base_url=LEMLIST_API_URL,
    credential_type="lemlistApi",
    auth=BasicKeyAuth(field="apiKey"),
    extract_error=raw_body_error,
)

ActivityType = Literal[
    "emailsSent",
    "emailsOpened",
    "emailsClicked",
    "emailsReplied",
    "emailsBounced",
    "emailsSendFailed",
    "emailsFailed",
    "emailsUnsubscribed",
    "emailsInterested",
    "emailsNotInterested",
    "opportunitiesDone",
    "aircallCreated",
    "aircallEnded",
    "aircallDone",
    "aircallInterested",
    "aircallNotInterested",
    "apiDone",
    "apiInterested",
    "apiNotInterested",
    "apiFailed",
    "linkedinVisitDone",
    "linkedinVisitFailed",
    "linkedinInviteDone",
    "linkedinInviteFailed",
    "linkedinInviteAccepted",
    "linkedinReplied",
    "linkedinSent",
    "linkedinInterested",
    "linkedinNotInterested",
]


class ActivityFilter(BaseModel):
    type: ActivityType | None = None
    campaign_id: str | None = None


class LeadConfig(BaseModel):
    """Optional lead fields. Only fields that are set end up in the body."""

    company_name: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    icebreaker: str | None = None
    phone: str | None = None
    picture: str | None = None
    linkedin_url: str | None = None
    deduplicate: bool | None = None


def activity_filter_to_query(activity_filter: ActivityFilter) -> dict[str, Any]:
    query: dict[str, Any] = {}
    if activity_filter.type is not None:
        query["type"] = activity_filter.type
    if activity_filter.campaign_id is not None:
        query["campaignId"] = activity_filter.campaign_id
    return query


def lead_config_to_body(config: LeadConfig) -> dict[str, Any]:
    body: dict[str, Any] = {}
    if config.company_name is not None:
        body["companyName"] = config.company_name
    if config.first_name is not None:
        body["firstName"] = config.first_name
    if config.last_name is not None:
        body["lastName"] = config.last_name
    if config.icebreaker is not None:
        body["icebreaker"] = config.icebreaker
    if config.phone is not None:
        body["phone"] = config.phone
    if config.picture is not None:
        body["picture"] = config.picture
    if config.linkedin_url is not None:
        body["linkedinUrl"] = config.linkedin_url
    return body


def _email_path(email: str) -> str:
    return quote(email, safe="@")


class LemlistNode(BaseNode):
    """Lemlist integration node for campaigns, leads and outreach activity."""

    operations = (
        "get_campaigns",
        "get_activities",
        "create_lead",
        "get_lead",
        "delete_lead",
        "unsubscribe_lead",
        "get_team",
        "add_unsubscribe",
        "delete_unsubscribe",
        "get_unsubscribes",
    )

    @property
    def name(self) -> str:
        return "lemlist"

    @property
    def icon(self) -> str:
        return "✉️"

    @property
    def description(self) -> str:
        return "Manage Lemlist campaigns, leads and activities"

    @property
    def profile(self) -> ApiProfile:
        return LEMLIST_PROFILE

    async def _list(
        self, path: str, query: dict[str, Any], return_all: bool, limit: int | None
    ) -> list[dict]:
        if return_all:
            return await self.client.drain_all("GET", path, query=query)
        page_query = {**query, "limit": limit or self.client.page_size}
        return await self.client.send("GET", path, query=page_query) or []

    # ── Activities ─────────────────────────────────────────────────

    async def get_activities(
        self,
        activity_filter: ActivityFilter | None = None,
        *,
        return_all: bool = False,
        limit: int | None = None,
    ) -> list[dict]:
        """List activities, optionally filtered by type and campaign."""
        query = activity_filter_to_query(activity_filter or ActivityFilter())
        activities = await self._list("/activities", query, return_all, limit)
        logger.info("lemlist_activities_fetched", count=len(activities), **query)
        return activities

    # ── Campaigns ──────────────────────────────────────────────────

    async def get_campaigns(self, *, return_all: bool = False, limit: int | None = None) -> list[dict]:
        campaigns = await self._list("/campaigns", {}, return_all, limit)
        logger.info("lemlist_campaigns_fetched", count=len(campaigns))
        return campaigns

    # ── Leads ──────────────────────────────────────────────────────

    async def create_lead(
        self, campaign_id: str, email: str, config: LeadConfig | None = None
    ) -> dict:
        """Add a lead to a campaign."""
        config = config or LeadConfig()
        query = {}
        if config.deduplicate is not None:
            query["deduplicate"] = "true" if config.deduplicate else "false"
        logger.info("lemlist_creating_lead", campaign_id=campaign_id)
        return await self.client.send(
            "POST",
            f"/campaigns/{campaign_id}/leads/{_email_path(email)}",
            body=lead_config_to_body(config),
            query=query,
        )

    async def get_lead(self, email: str) -> dict:
        return await self.client.send("GET", f"/leads/{_email_path(email)}")

    async def delete_lead(self, campaign_id: str, email: str) -> dict:
        """Remove a lead from a campaign for good."""
        logger.info("lemlist_deleting_lead", campaign_id=campaign_id)
        return await self.client.send(
            "DELETE",
            f"/campaigns/{campaign_id}/leads/{_email_path(email)}",
            query={"action": "remove"},
        )

    async def unsubscribe_lead(self, campaign_id: str, email: str) -> dict:
        """Stop a campaign for one lead; the lead record is kept."""
        logger.info("lemlist_unsubscribing_lead", campaign_id=campaign_id)
        return await self.client.send(
            "DELETE", f"/campaigns/{campaign_id}/leads/{_email_path(email)}"
        )

    # ── Team ───────────────────────────────────────────────────────

    async def get_team(self) -> dict:
        return await self.client.send("GET", "/team")

    # ── Unsubscribes ───────────────────────────────────────────────

    async def add_unsubscribe(self, email: str) -> dict:
        return await self.client.send("POST", f"/unsubscribes/{_email_path(email)}")

    async def delete_unsubscribe(self, email: str) -> dict:
        return await self.client.send("DELETE", f"/unsubscribes/{_email_path(email)}")

    async def get_unsubscribes(self, *, return_all: bool = False, limit: int | None = None) -> list[dict]:
        return await self._list("/unsubscribes", {}, return_all, limit)

    async def health_check(self) -> bool:
        try:
            await self.client.send("GET", "/team")
            return True
        except Exception:
            return False
