"""Shared dataset helpers: live Action Base items or the stub fallback."""
from __future__ import annotations

from datetime import datetime
import logging
from typing import List, Optional, Tuple

from .items import Item, fetch_stubbed_items
from .notion_client import DatabaseNotFoundError, NotionAPIError, NotionClient
from .schema import SchemaError
from .timewindow import TimeWindow

logger = logging.getLogger(__name__)

SOURCES = ("auto", "live", "stub")


def fetch_items(
    client: Optional[NotionClient],
    *,
    window: Optional[TimeWindow],
    source: str,
    now: Optional[datetime] = None,
) -> Tuple[List[Item], bool, Optional[str]]:
    """Fetch items scheduled in ``window`` (all items when None).

    Returns ``(items, live, warning)``. ``source="live"`` turns remote
    failures into ``RuntimeError``; ``"auto"`` falls back to stub items with
    a warning. A missing database is an empty live result either way.
    """

    if source not in SOURCES:
        raise ValueError(f"source must be one of {', '.join(SOURCES)}")

    warning: Optional[str] = None
    if source == "stub":
        return fetch_stubbed_items(now=now), False, warning

    if client is None:
        if source == "live":
            raise RuntimeError("Notion client is not configured")
        warning = _merge_warning(warning, "Notion not configured, showing stubbed items.")
        return fetch_stubbed_items(now=now), False, warning

    try:
        if window is None:
            items = client.fetch_all_items()
        else:
            items = client.fetch_items_in_window(window)
    except DatabaseNotFoundError as exc:
        logger.warning(f"{exc}")
        return [], True, _merge_warning(warning, str(exc))
    except (SchemaError, NotionAPIError) as exc:
        if source == "live":
            raise RuntimeError(f"Live fetch failed: {exc}") from exc
        logger.warning(f"Falling back to stub items: {exc}")
        warning = _merge_warning(
            warning, f"Live data unavailable, showing stubbed items: {exc}"
        )
        return fetch_stubbed_items(now=now), False, warning

    return items, True, warning


def _merge_warning(existing: Optional[str], new_warning: Optional[str]) -> Optional[str]:
    if not new_warning:
        return existing
    if existing:
        return f"{existing}\n{new_warning}"
    return new_warning
