from __future__ import annotations

import json
from functools import lru_cache
from typing import Annotated, List
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

UTC_NAMES = ("UTC", "Z", "ETC/UTC")

# Env values for these are parsed by _split_list, not JSON-decoded by pydantic-settings.
StrList = Annotated[List[str], NoDecode]


class AppSettings(BaseSettings):
    """
    Service settings read from the environment (or .env).

    Database connection settings live separately in src.db.config.Settings.
    """

    APP_NAME: str = "BizOps Console API"
    APP_DESCRIPTION: str = (
        "Backend API for a small-business operations console. Serves inventory, invoices, "
        "purchase orders, suppliers and the derived business-intelligence dashboard."
    )
    APP_VERSION: str = "0.1.0"
    LOG_LEVEL: str = Field(default="INFO", description="Root log level name")

    CORS_ORIGINS: StrList = Field(
        default_factory=lambda: ["*"],
        description="Allowed origins, as a JSON array or comma-separated list.",
    )
    CORS_ALLOW_CREDENTIALS: bool = True
    CORS_ALLOW_METHODS: StrList = Field(default_factory=lambda: ["*"])
    CORS_ALLOW_HEADERS: StrList = Field(default_factory=lambda: ["*"])

    RUN_MIGRATIONS_ON_STARTUP: bool = Field(
        default=True, description="Run `alembic upgrade head` when the app starts."
    )

    # Dashboard analytics
    REPORT_TIMEZONE: str = Field(
        default="UTC", description="IANA timezone whose calendar days bucket daily revenue."
    )
    RESTOCK_HORIZON_DAYS: int = Field(
        default=30, ge=1, description="Items projected to run out sooner than this need restock."
    )
    STOCKOUT_SENTINEL_DAYS: int = Field(
        default=999, ge=1, description="days_until_stockout reported for items with no sales."
    )
    RESTOCK_SPAN_PAID_ONLY: bool = Field(
        default=False,
        description=(
            "Measure the sales-velocity day span over paid invoices only. "
            "By default it spans every invoice regardless of status."
        ),
    )
    TOP_SUPPLIERS_LIMIT: int = Field(default=5, ge=1)

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @field_validator("CORS_ORIGINS", "CORS_ALLOW_METHODS", "CORS_ALLOW_HEADERS", mode="before")
    @classmethod
    def _split_list(cls, v):
        """Accept a JSON array, a comma-separated string or a list; empty means '*'."""
        if isinstance(v, str):
            text = v.strip()
            if text.startswith("["):
                v = json.loads(text)
            else:
                v = [part.strip() for part in text.split(",")]
        if not v:
            return ["*"]
        return [str(part) for part in v if str(part).strip()] or ["*"]

    @field_validator("REPORT_TIMEZONE")
    @classmethod
    def _check_report_timezone(cls, v: str) -> str:
        if v.upper() in UTC_NAMES:
            return v
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone: {v!r}") from exc
        return v


# PUBLIC_INTERFACE
@lru_cache
def get_app_settings() -> AppSettings:
    """Return the process-wide AppSettings (read once from the environment)."""
    return AppSettings()
