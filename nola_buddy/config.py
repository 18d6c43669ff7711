"""Configuration helpers for the NOLA Buddy API."""
from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = "America/Chicago"
DEFAULT_NOTION_VERSION = "2022-06-28"


class ConfigError(RuntimeError):
    """Raised when configuration is present but unusable."""


@dataclass(slots=True)
class Settings:
    """Runtime configuration for the API and CLI."""

    notion_secret: Optional[str]
    spreadsheet_id: Optional[str] = None
    google_client_email: Optional[str] = None
    google_private_key: Optional[str] = None
    api_key: Optional[str] = None
    timezone: str = DEFAULT_TIMEZONE
    environment: str = "local"
    notion_version: str = DEFAULT_NOTION_VERSION
    action_base_database_id: Optional[str] = None
    schema_path: Optional[Path] = None

    @property
    def zone(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    @property
    def notion_configured(self) -> bool:
        return bool(self.notion_secret)

    @property
    def sheets_configured(self) -> bool:
        return all(
            [self.spreadsheet_id, self.google_client_email, self.google_private_key]
        )


def load_settings(*, use_dotenv: bool = True) -> Settings:
    """Load settings from environment variables (and a local .env file).

    Missing remote credentials only produce warnings so the service can still
    answer stub-backed requests; an unknown timezone is fatal.

    Raises:
        ConfigError: if the configured timezone is not a valid IANA zone.
    """

    if use_dotenv:
        load_dotenv()

    notion_secret = _clean(os.getenv("NOTION_SECRET"))
    if not notion_secret:
        logger.warning(
            "NOTION_SECRET not set. Export it or add it to .env for local dev."
        )

    spreadsheet_id = _clean(os.getenv("SPREADSHEET_ID"))
    client_email = _clean(os.getenv("GOOGLE_CLIENT_EMAIL"))
    private_key = os.getenv("GOOGLE_PRIVATE_KEY") or ""
    private_key = private_key.replace("\\n", "\n").strip() or None
    if not (spreadsheet_id and client_email and private_key):
        logger.warning(
            "Google Sheets env vars missing. Set GOOGLE_CLIENT_EMAIL, "
            "GOOGLE_PRIVATE_KEY, SPREADSHEET_ID."
        )

    timezone_name = (
        _clean(os.getenv("NOLA_TIMEZONE")) or _clean(os.getenv("TZ")) or DEFAULT_TIMEZONE
    )
    try:
        ZoneInfo(timezone_name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigError(f"Unknown timezone '{timezone_name}'.") from exc

    schema_path = _clean(os.getenv("NOLA_SCHEMA_PATH"))

    return Settings(
        notion_secret=notion_secret,
        spreadsheet_id=spreadsheet_id,
        google_client_email=client_email,
        google_private_key=private_key,
        api_key=_clean(os.getenv("NOLA_API_KEY")),
        timezone=timezone_name,
        environment=os.getenv("NOLA_ENV", "local"),
        notion_version=_clean(os.getenv("NOTION_VERSION")) or DEFAULT_NOTION_VERSION,
        action_base_database_id=_clean(os.getenv("NOTION_ACTION_BASE_DB_ID")),
        schema_path=Path(schema_path) if schema_path else None,
    )


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None
