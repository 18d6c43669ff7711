"""Analysis Router - daily focus, weekly and period reports, productivity."""
from __future__ import annotations

from datetime import datetime
import logging
from typing import List, Optional, Tuple

from fastapi import APIRouter, Depends, HTTPException, Query

from api.dependencies import (
    get_notion_client,
    get_now,
    get_settings,
    serialize_item,
    translate_errors,
)
from api.models import Source
from nola_buddy.analysis import (
    build_daily_focus,
    build_period_report,
    build_productivity_report,
    sort_items,
)
from nola_buddy.config import Settings
from nola_buddy.dataset import fetch_items
from nola_buddy.items import Item
from nola_buddy.notion_client import NotionClient
from nola_buddy.timewindow import TimeWindow, next_7_days_window, range_window, today_window

logger = logging.getLogger(__name__)

router = APIRouter()


def _load_items(
    client: Optional[NotionClient],
    window: Optional[TimeWindow],
    source: str,
    now: datetime,
) -> Tuple[List[Item], bool, Optional[str]]:
    try:
        return fetch_items(client, window=window, source=source, now=now)
    except RuntimeError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc


def _envelope(settings: Settings, live: bool, warning: Optional[str]) -> dict:
    return {
        "timezone": settings.timezone,
        "liveItems": live,
        "environment": settings.environment,
        "warning": warning,
    }


@router.get("/today")
def daily_focus(
    source: Source = Query("auto"),
    client: Optional[NotionClient] = Depends(get_notion_client),
    settings: Settings = Depends(get_settings),
    now: datetime = Depends(get_now),
) -> dict:
    """Coaching lines, idle gaps and tallies for the current civil day."""
    zone = settings.zone
    window, (year, month, day) = today_window(now, zone)
    items, live, warning = _load_items(client, window, source, now)
    report = build_daily_focus(items, now, zone)
    return {
        "date": f"{year:04d}-{month:02d}-{day:02d}",
        "window": window.to_dict(),
        **report.to_dict(),
        **_envelope(settings, live, warning),
    }


@router.get("/week")
def weekly_report(
    source: Source = Query("auto"),
    client: Optional[NotionClient] = Depends(get_notion_client),
    settings: Settings = Depends(get_settings),
    now: datetime = Depends(get_now),
) -> dict:
    window = next_7_days_window(now, settings.zone)
    items, live, warning = _load_items(client, window, source, now)
    report = build_period_report(items, now, settings.zone)
    return {
        "window": window.to_dict(),
        "count": len(items),
        **report.to_dict(),
        **_envelope(settings, live, warning),
    }


@router.get("/period")
def period_report(
    from_date: str = Query(..., alias="fromDate"),
    to_date: str = Query(..., alias="toDate"),
    source: Source = Query("auto"),
    client: Optional[NotionClient] = Depends(get_notion_client),
    settings: Settings = Depends(get_settings),
    now: datetime = Depends(get_now),
) -> dict:
    """Same buckets as the weekly report over an explicit civil date range."""
    with translate_errors("Period report"):
        window = range_window(from_date, to_date, settings.zone)
    items, live, warning = _load_items(client, window, source, now)
    report = build_period_report(items, now, settings.zone)
    return {
        "window": window.to_dict(),
        "count": len(items),
        **report.to_dict(),
        **_envelope(settings, live, warning),
    }


@router.get("/productivity")
def productivity_report(
    source: Source = Query("auto"),
    include_items: bool = Query(False, alias="includeItems"),
    client: Optional[NotionClient] = Depends(get_notion_client),
    settings: Settings = Depends(get_settings),
    now: datetime = Depends(get_now),
) -> dict:
    items, live, warning = _load_items(client, None, source, now)
    report = build_productivity_report(items, now, settings.zone)
    body = {**report.to_dict(), **_envelope(settings, live, warning)}
    if include_items:
        body["items"] = [serialize_item(item) for item in sort_items(items)]
    return body
