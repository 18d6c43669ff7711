"""Databases Router - locate Notion databases by name."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import require_notion_client, translate_errors
from api.models import DatabaseSearchRequest
from nola_buddy.notion_client import NotionClient, title_of

router = APIRouter()


@router.post("/search")
def search_database(
    request: DatabaseSearchRequest,
    client: NotionClient = Depends(require_notion_client),
) -> dict:
    """Exact title match first, then the first title containing ``name``."""
    with translate_errors("Database search"):
        database = client.find_database_by_name(request.name)
    if not database:
        raise HTTPException(status_code=404, detail=f"Database '{request.name}' not found.")
    return {
        "ok": True,
        "id": database.get("id"),
        "title": title_of(database),
        "url": database.get("url"),
    }
