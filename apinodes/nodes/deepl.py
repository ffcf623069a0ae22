"""
DeepLNode — Text translation through the DeepL API v2.

The API key travels as the ``auth_key`` query parameter. Error responses carry
a JSON ``{"message": ...}`` body.

Usage:
    node = DeepLNode(credentials=provider)
    translations = await node.translate(TranslateConfig(text="Hallo", target_lang="EN"))
"""

from __future__ import annotations

from typing import Any, Literal

import structlog
from pydantic import BaseModel, Field

from apinodes.auth import QueryKeyAuth
from apinodes.client import ApiProfile, message_field_error
from apinodes.nodes.base import BaseNode

logger = structlog.get_logger(__name__)

DEEPL_API_URL = "https://api.deepl.com/v2"

DEEPL_PROFILE = ApiProfile(
    name="deepl",
    display_name="DeepL",
    base_url=DEEPL_API_URL,
    credential_type="deepLApi",
    auth=QueryKeyAuth(param="auth_key", field="apiKey"),
    extract_error=message_field_error,
)


class TranslateConfig(BaseModel):
    """Parameters of one translate call. Unset options are not sent."""

    text: str = Field(min_length=1)
    target_lang: str
    source_lang: str | None = None
    split_sentences: Literal["0", "1", "nonewlines"] | None = None
    preserve_formatting: bool | None = None
    formality: Literal["default", "more", "less", "prefer_more", "prefer_less"] | None = None
    glossary_id: str | None = None


def translate_config_to_query(config: TranslateConfig) -> dict[str, Any]:
    query: dict[str, Any] = {"text": config.text, "target_lang": config.target_lang}
    if config.source_lang is not None:
        query["source_lang"] = config.source_lang
    if config.split_sentences is not None:
        query["split_sentences"] = config.split_sentences
    if config.preserve_formatting is not None:
        query["preserve_formatting"] = "1" if config.preserve_formatting else "0"
    if config.formality is not None:
        query["formality"] = config.formality
    if config.glossary_id is not None:
        query["glossary_id"] = config.glossary_id
    return query


class DeepLNode(BaseNode):
    """DeepL integration node: translate text, list languages."""

    operations = ("translate", "get_languages")

    @property
    def name(self) -> str:
        return "deepl"

    @property
    def icon(self) -> str:
        return "🌐"

    @property
    def description(self) -> str:
        return "Translate text with DeepL"

    @property
    def profile(self) -> ApiProfile:
        return DEEPL_PROFILE

    async def translate(self, config: TranslateConfig) -> list[dict]:
        """Translate ``config.text``; returns DeepL's ``translations`` array."""
        logger.info(
            "deepl_translating",
            target_lang=config.target_lang,
            source_lang=config.source_lang,
            chars=len(config.text),
        )
        data = await self.client.send("GET", "/translate", query=translate_config_to_query(config))
        return data.get("translations", []) if data else []

    async def get_languages(self, kind: Literal["source", "target"] = "target") -> list[dict]:
        """Supported languages as ``[{"language": "DE", "name": "German"}, ...]``."""
        return await self.client.send("GET", "/languages", query={"type": kind}) or []

    async def health_check(self) -> bool:
        try:
            await self.client.send("GET", "/usage")
            return True
        except Exception:
            return False
