"""
Adapter Configuration — Process-wide settings shared by every node.

The settings cover:
  - Logging (level, JSON output)
  - Pagination defaults (page size, optional safety cap)
  - HTTP transport defaults (timeout, user agent)
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class NodeSettings(BaseSettings):
    """Settings read from `APINODES_*` environment variables or `.env`."""

    model_config = SettingsConfigDict(
        env_prefix="APINODES_",
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Runtime ──────────────────────────────────────────────────────
    environment: Literal["development", "staging", "production"] = "development"
    log_level: str = "INFO"
    json_logs: bool = False

    # ── Pagination ───────────────────────────────────────────────────
    page_size: int = Field(default=100, gt=0)
    # None = drain until the API returns an empty page, however long that takes
    max_pages: int | None = Field(default=None, gt=0)

    # ── HTTP ─────────────────────────────────────────────────────────
    request_timeout: float = Field(default=30.0, gt=0)
    user_agent: str = "apinodes"


@lru_cache
def get_settings() -> NodeSettings:
    """Singleton accessor — parsed once, cached forever."""
    return NodeSettings()
