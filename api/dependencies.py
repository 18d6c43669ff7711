"""Shared dependencies and helper functions for API routers.

Clients are built once by the app factory and stored on ``app.state``;
routers pull them through the ``get_*`` dependencies below so tests can
swap them with ``app.dependency_overrides``.
"""
from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime, timezone
import logging
from functools import lru_cache
from typing import Iterator, Optional

from fastapi import Depends, HTTPException, Request

from nola_buddy.api.auth import require_api_key  # noqa: F401 - re-export
from nola_buddy.config import Settings, load_settings
from nola_buddy.items import Item
from nola_buddy.notes import NotesService
from nola_buddy.notion_client import NotionAPIError, NotionClient
from nola_buddy.schema import SchemaError
from nola_buddy.sheets_client import SheetsAPIError, SheetsClient
from nola_buddy.timewindow import FormatError, isoformat_utc

logger = logging.getLogger(__name__)


# =============================================================================
# Cached Functions
# =============================================================================

@lru_cache
def get_settings() -> Settings:
    """Get application settings (cached)."""
    return load_settings()


# =============================================================================
# Client Dependencies
# =============================================================================

def get_notion_client(request: Request) -> Optional[NotionClient]:
    """Return the app's Notion client, or None when none was configured."""
    return getattr(request.app.state, "notion_client", None)


def get_sheets_client(request: Request) -> SheetsClient:
    client = getattr(request.app.state, "sheets_client", None)
    if client is None:
        raise HTTPException(status_code=503, detail="Google Sheets client unavailable.")
    return client


def get_notes_service(
    request: Request, settings: Settings = Depends(get_settings)
) -> NotesService:
    return NotesService(get_sheets_client(request), settings.zone)


def get_now() -> datetime:
    """Reference instant for reports; overridden in tests."""
    return datetime.now(timezone.utc)


# =============================================================================
# Serialization Helpers
# =============================================================================

def serialize_item(item: Item) -> dict:
    """Serialize an Action Base item to API response format."""
    primary = item.primary_instant
    return {
        "id": item.id,
        "name": item.name,
        "status": item.status,
        "type": item.category,
        "priority": item.priority,
        "alignment": item.alignment,
        "doDate": item.do_window.to_dict() if item.do_window else None,
        "dueDate": item.due_window.to_dict() if item.due_window else None,
        "primary": item.primary_which if primary is not None else None,
        "primaryAt": isoformat_utc(primary) if primary is not None else None,
        "relatedIds": list(item.related_ids),
        "url": item.url,
    }


# =============================================================================
# Error Translation
# =============================================================================

@contextmanager
def translate_errors(action: str) -> Iterator[None]:
    """Map domain exceptions raised inside the block to HTTP errors."""
    try:
        yield
    except HTTPException:
        raise
    except FormatError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except (NotionAPIError, SheetsAPIError) as exc:
        logger.error(f"{action} failed: {exc}")
        raise HTTPException(status_code=502, detail=f"{action} failed: {exc}") from exc
    except SchemaError as exc:
        raise HTTPException(status_code=500, detail=f"Schema error: {exc}") from exc


def require_notion_client(request: Request) -> NotionClient:
    client = get_notion_client(request)
    if client is None:
        raise HTTPException(status_code=503, detail="Notion client unavailable.")
    return client
