"""Notion REST wrapper for the Action Base database."""
from __future__ import annotations

from dataclasses import dataclass
import json
import logging
from typing import Any, Dict, List, Optional
from urllib import error as urlerror
from urllib import parse as urlparse
from urllib import request as urlrequest

from .config import Settings
from .items import Item
from .schema import WorkspaceSchema, load_workspace_schema
from .timewindow import TimeWindow, isoformat_utc, parse_flexible_local_datetime

logger = logging.getLogger(__name__)

PAGE_SIZE = 100


class NotionAPIError(RuntimeError):
    """Raised when Notion returns an error response."""

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


class DatabaseNotFoundError(LookupError):
    """Raised when no database matches the configured name."""


@dataclass(slots=True)
class LocalDate:
    """Date text (MM/DD/YYYY or YYYY-MM-DD) plus optional 24h HH:MM."""

    date: str
    time: Optional[str] = None


@dataclass(slots=True)
class ActionFields:
    """Writable Action Base fields; None means leave untouched."""

    name: Optional[str] = None
    status: Optional[str] = None
    category: Optional[str] = None
    priority_level: Optional[str] = None
    alignment: Optional[str] = None
    do_date: Optional[LocalDate] = None
    due_date: Optional[LocalDate] = None
    project_page_id: Optional[str] = None


def title_of(db_or_page: Dict[str, Any]) -> str:
    """Plain-text title of a database or of a page's ``Name`` property."""

    title = "".join(t.get("plain_text", "") for t in db_or_page.get("title") or []).strip()
    if title:
        return title
    name_prop = (db_or_page.get("properties") or {}).get("Name") or {}
    return "".join(t.get("plain_text", "") for t in name_prop.get("title") or []).strip()


def build_action_base_properties(
    fields: ActionFields, schema: WorkspaceSchema, time_zone: str
) -> Dict[str, Any]:
    """Build a Notion property payload, setting only the provided fields.

    Raises:
        FormatError: if a do/due date is malformed.
    """

    labels = schema.action_base
    props: Dict[str, Any] = {}
    if fields.name:
        props[labels.label("name")] = {"title": [{"text": {"content": fields.name}}]}
    if fields.status:
        props[labels.label("status")] = {"status": {"name": fields.status}}
    if fields.category:
        props[labels.label("category")] = {"select": {"name": fields.category}}
    if fields.priority_level:
        props[labels.label("priority")] = {"select": {"name": fields.priority_level}}
    if fields.alignment:
        props[labels.label("alignment")] = {"select": {"name": fields.alignment}}
    if fields.do_date and fields.do_date.date:
        props[labels.label("do_date")] = {
            "date": {
                "start": parse_flexible_local_datetime(fields.do_date.date, fields.do_date.time),
                "time_zone": time_zone,
            }
        }
    if fields.due_date and fields.due_date.date:
        props[labels.label("due_date")] = {
            "date": {
                "start": parse_flexible_local_datetime(fields.due_date.date, fields.due_date.time),
                "time_zone": time_zone,
            }
        }
    if fields.project_page_id:
        props[labels.label("project")] = {"relation": [{"id": fields.project_page_id}]}
    return props


def icon_for_action_base(
    *, category: Optional[str], alignment: Optional[str], priority_level: Optional[str]
) -> Dict[str, str]:
    if priority_level == "HIGH":
        emoji = "🔥"
    elif category == "Call":
        emoji = "📞"
    elif category == "Event":
        emoji = "📅"
    elif category == "Errand":
        emoji = "🧾"
    elif alignment == "KRAZY MONKEE":
        emoji = "🐒"
    elif alignment == "DEV ED":
        emoji = "🧠"
    elif alignment == "HANUMAN LIFE":
        emoji = "🙏"
    else:
        emoji = "✅"
    return {"type": "emoji", "emoji": emoji}


class NotionClient:
    """Small Notion REST wrapper for Action Base reads and writes."""

    base_url = "https://api.notion.com/v1"

    def __init__(
        self,
        settings: Settings,
        *,
        schema: Optional[WorkspaceSchema] = None,
        timeout_seconds: int = 15,
    ) -> None:
        self.settings = settings
        self.schema = schema or load_workspace_schema(settings.schema_path)
        self.timeout_seconds = timeout_seconds

    # ------------------------------------------------------------------
    # Databases
    # ------------------------------------------------------------------
    def search_databases(self, query: str) -> List[Dict[str, Any]]:
        payload = self._request(
            "POST",
            "/search",
            body={
                "query": query,
                "filter": {"property": "object", "value": "database"},
                "page_size": 50,
            },
        )
        return payload.get("results") or []

    def find_database_by_name(self, name: str) -> Optional[Dict[str, Any]]:
        """Exact (case-insensitive) title match first, then substring match."""

        results = self.search_databases(name)
        lower = name.lower()
        exact = next((d for d in results if title_of(d).lower() == lower), None)
        if exact:
            return exact
        return next((d for d in results if lower in title_of(d).lower()), None)

    def action_base_database_id(self) -> str:
        if self.settings.action_base_database_id:
            return self.settings.action_base_database_id
        name = self.schema.action_base.database_name
        database = self.find_database_by_name(name)
        if not database:
            raise DatabaseNotFoundError(f"Database '{name}' not found in Notion workspace.")
        return str(database["id"])

    def query_database(
        self,
        database_id: str,
        *,
        query_filter: Optional[Dict[str, Any]] = None,
        sorts: Optional[List[Dict[str, Any]]] = None,
        page_size: int = PAGE_SIZE,
    ) -> List[Dict[str, Any]]:
        """Return every page matching ``query_filter``, following pagination."""

        pages: List[Dict[str, Any]] = []
        cursor: Optional[str] = None
        while True:
            body: Dict[str, Any] = {"page_size": page_size}
            if query_filter:
                body["filter"] = query_filter
            if sorts:
                body["sorts"] = sorts
            if cursor:
                body["start_cursor"] = cursor
            payload = self._request("POST", f"/databases/{database_id}/query", body=body)
            pages.extend(payload.get("results") or [])
            cursor = payload.get("next_cursor")
            if not payload.get("has_more") or not cursor:
                break
        return pages

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------
    def window_filter(self, window: TimeWindow) -> Dict[str, Any]:
        """Inclusive Do Date OR Due Date match on ``window``."""

        labels = self.schema.action_base
        start = isoformat_utc(window.start)
        end = isoformat_utc(window.end)
        return {
            "or": [
                {
                    "and": [
                        {"property": labels.label(key), "date": {"on_or_after": start}},
                        {"property": labels.label(key), "date": {"on_or_before": end}},
                    ]
                }
                for key in ("do_date", "due_date")
            ]
        }

    def fetch_items_in_window(self, window: TimeWindow) -> List[Item]:
        database_id = self.action_base_database_id()
        pages = self.query_database(
            database_id,
            query_filter=self.window_filter(window),
            sorts=[
                {"property": self.schema.action_base.label("do_date"), "direction": "ascending"}
            ],
        )
        logger.info(
            f"Fetched {len(pages)} Action Base pages for {isoformat_utc(window.start)}"
            f" .. {isoformat_utc(window.end)}"
        )
        return self._pages_to_items(pages)

    def fetch_all_items(self) -> List[Item]:
        pages = self.query_database(self.action_base_database_id())
        logger.info(f"Fetched {len(pages)} Action Base pages (unfiltered)")
        return self._pages_to_items(pages)

    def find_item_by_title(self, title: str) -> Optional[Item]:
        pages = self.query_database(
            self.action_base_database_id(),
            query_filter={
                "property": self.schema.action_base.label("name"),
                "title": {"equals": title},
            },
            page_size=25,
        )
        items = self._pages_to_items(pages[:1])
        return items[0] if items else None

    def get_item(self, page_id: str) -> Item:
        page = self._request("GET", f"/pages/{page_id}")
        return Item.from_page(page, self.schema.action_base, self.settings.zone)

    def create_action(self, fields: ActionFields) -> Dict[str, Any]:
        if not fields.name:
            raise ValueError("name is required")
        body = {
            "parent": {"database_id": self.action_base_database_id()},
            "icon": icon_for_action_base(
                category=fields.category,
                alignment=fields.alignment,
                priority_level=fields.priority_level,
            ),
            "properties": build_action_base_properties(
                fields, self.schema, self.settings.timezone
            ),
        }
        try:
            return self._request("POST", "/pages", body=body)
        except NotionAPIError as exc:
            raise NotionAPIError(f"Failed to create page: {exc}", exc.status) from exc

    def update_action(self, page_id: str, fields: ActionFields) -> Dict[str, Any]:
        properties = build_action_base_properties(fields, self.schema, self.settings.timezone)
        if not properties:
            raise ValueError("No updates provided")
        body: Dict[str, Any] = {"properties": properties}
        if fields.category or fields.alignment or fields.priority_level:
            body["icon"] = icon_for_action_base(
                category=fields.category,
                alignment=fields.alignment,
                priority_level=fields.priority_level,
            )
        try:
            return self._request("PATCH", f"/pages/{page_id}", body=body)
        except NotionAPIError as exc:
            raise NotionAPIError(f"Failed to update page {page_id}: {exc}", exc.status) from exc

    def archive_page(self, page_id: str) -> Dict[str, Any]:
        try:
            return self._request("PATCH", f"/pages/{page_id}", body={"archived": True})
        except NotionAPIError as exc:
            raise NotionAPIError(f"Failed to archive page {page_id}: {exc}", exc.status) from exc

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _pages_to_items(self, pages: List[Dict[str, Any]]) -> List[Item]:
        return [
            Item.from_page(page, self.schema.action_base, self.settings.zone)
            for page in pages
        ]

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        body: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        if not self.settings.notion_secret:
            raise NotionAPIError("NOTION_SECRET is not configured.")

        url = f"{self.base_url}{path}"
        if params:
            url = f"{url}?{urlparse.urlencode(params)}"

        data: Optional[bytes] = None
        headers = {
            "Authorization": f"Bearer {self.settings.notion_secret}",
            "Notion-Version": self.settings.notion_version,
            "Accept": "application/json",
        }
        if body is not None:
            data = json.dumps(body).encode("utf-8")
            headers["Content-Type"] = "application/json"

        req = urlrequest.Request(url, data=data, method=method, headers=headers)

        try:
            with urlrequest.urlopen(req, timeout=self.timeout_seconds) as resp:
                return json.loads(resp.read().decode("utf-8"))
        except urlerror.HTTPError as exc:  # pragma: no cover - network path
            detail = exc.read().decode("utf-8", errors="ignore")
            raise NotionAPIError(
                f"Notion {method} {path} -> {exc.code}: {detail}", status=exc.code
            ) from exc
        except urlerror.URLError as exc:  # pragma: no cover - network path
            raise NotionAPIError(f"Network error calling Notion: {exc}") from exc
