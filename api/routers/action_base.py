"""Action Base Router - create, update, query, find and archive Notion items."""
from __future__ import annotations

from datetime import datetime
import logging

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import (
    get_now,
    get_settings,
    require_notion_client,
    serialize_item,
    translate_errors,
)
from api.models import (
    ActionBaseArchiveRequest,
    ActionBaseCreateRequest,
    ActionBaseFindRequest,
    ActionBaseQueryRequest,
    ActionBaseUpdateRequest,
    ActionFieldsModel,
)
from nola_buddy.analysis import sort_items
from nola_buddy.config import Settings
from nola_buddy.notion_client import NotionClient
from nola_buddy.timewindow import range_window, today_window

logger = logging.getLogger(__name__)

router = APIRouter()


def _validate_choices(request: ActionFieldsModel, client: NotionClient) -> None:
    schema = client.schema.action_base
    if request.status and schema.status_values and request.status not in schema.status_values:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid status '{request.status}'. Valid: {schema.status_values}",
        )
    if (
        request.priority_level
        and schema.priority_values
        and request.priority_level not in schema.priority_values
    ):
        raise HTTPException(
            status_code=400,
            detail=(
                f"Invalid priorityLevel '{request.priority_level}'. "
                f"Valid: {schema.priority_values}"
            ),
        )


def _page_summary(page: dict) -> dict:
    return {"id": page.get("id"), "url": page.get("url")}


@router.post("/create")
def create_action(
    request: ActionBaseCreateRequest,
    client: NotionClient = Depends(require_notion_client),
) -> dict:
    """Create an Action Base page; the icon follows type, alignment and priority."""
    _validate_choices(request, client)
    with translate_errors("Create action"):
        page = client.create_action(request.to_fields())
    logger.info(f"Created Action Base page {page.get('id')} '{request.name}'")
    return {"ok": True, **_page_summary(page)}


@router.post("/update")
def update_action(
    request: ActionBaseUpdateRequest,
    client: NotionClient = Depends(require_notion_client),
) -> dict:
    _validate_choices(request, client)
    with translate_errors("Update action"):
        page = client.update_action(request.page_id, request.to_fields())
    return {"ok": True, **_page_summary(page)}


@router.post("/query")
def query_actions(
    request: ActionBaseQueryRequest,
    client: NotionClient = Depends(require_notion_client),
    settings: Settings = Depends(get_settings),
    now: datetime = Depends(get_now),
) -> dict:
    """Items whose Do or Due date falls inside the requested civil range."""
    with translate_errors("Query actions"):
        if request.from_date or request.to_date:
            start = request.from_date or request.to_date
            end = request.to_date or request.from_date
            window = range_window(start, end, settings.zone)
        else:
            window, _ = today_window(now, settings.zone)
        items = client.fetch_items_in_window(window)
    return {
        "window": window.to_dict(),
        "count": len(items),
        "items": [serialize_item(item) for item in sort_items(items)],
    }


@router.post("/find")
def find_action(
    request: ActionBaseFindRequest,
    client: NotionClient = Depends(require_notion_client),
) -> dict:
    with translate_errors("Find action"):
        item = client.find_item_by_title(request.title)
    if item is None:
        raise HTTPException(status_code=404, detail=f"No action titled '{request.title}'.")
    return {"ok": True, "item": serialize_item(item)}


@router.post("/archive")
def archive_action(
    request: ActionBaseArchiveRequest,
    client: NotionClient = Depends(require_notion_client),
) -> dict:
    with translate_errors("Archive action"):
        page = client.archive_page(request.page_id)
    return {"ok": True, "archived": bool(page.get("archived", True)), "id": request.page_id}
