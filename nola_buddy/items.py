"""Action Base items and the typed property reader.

Notion returns each page as a sparse bag of typed properties keyed by their
human-readable label. ``parse_property`` resolves every raw property once,
at ingestion, into one of the variant types below; the rest of the package
only ever sees ``Item`` fields or ``read_property`` results.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Literal, Mapping, Optional, Tuple, Union
from zoneinfo import ZoneInfo

from .schema import ActionBaseSchema
from .timewindow import FormatError, isoformat_utc, parse_remote_instant

UNTITLED = "Untitled"

Which = Literal["do", "due"]


@dataclass(frozen=True, slots=True)
class DateProperty:
    start: datetime
    end: Optional[datetime] = None
    time_zone: Optional[str] = None
    has_time: bool = True

    def to_dict(self) -> dict:
        return {
            "start": isoformat_utc(self.start),
            "end": isoformat_utc(self.end) if self.end else None,
            "timeZone": self.time_zone,
        }


@dataclass(frozen=True, slots=True)
class ChoiceProperty:
    kind: str  # "select" or "status"
    name: Optional[str] = None


@dataclass(frozen=True, slots=True)
class RelationProperty:
    ids: Tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class TitleProperty:
    text: str = ""


@dataclass(frozen=True, slots=True)
class EmptyProperty:
    kind: str = "unknown"


Property = Union[DateProperty, ChoiceProperty, RelationProperty, TitleProperty, EmptyProperty]


def parse_property(raw: Mapping[str, Any], zone: ZoneInfo) -> Property:
    """Resolve one raw Notion property into its variant type."""

    kind = raw.get("type")
    if kind == "date":
        value = raw.get("date") or {}
        if not value.get("start"):
            return EmptyProperty("date")
        time_zone = value.get("time_zone")
        try:
            start, has_time = parse_remote_instant(value["start"], zone, time_zone=time_zone)
            end = None
            if value.get("end"):
                end, _ = parse_remote_instant(value["end"], zone, time_zone=time_zone)
        except FormatError:
            return EmptyProperty("date")
        return DateProperty(start=start, end=end, time_zone=time_zone, has_time=has_time)
    if kind in ("select", "status"):
        value = raw.get(kind) or {}
        return ChoiceProperty(kind=kind, name=value.get("name") or None)
    if kind == "relation":
        ids = tuple(str(ref["id"]) for ref in raw.get("relation") or [] if ref.get("id"))
        return RelationProperty(ids=ids)
    if kind == "title":
        text = "".join(part.get("plain_text", "") for part in raw.get("title") or [])
        return TitleProperty(text=text)
    return EmptyProperty(str(kind))


@dataclass(frozen=True, slots=True)
class Item:
    """Read-only view of one Action Base page."""

    id: str
    name: str = UNTITLED
    status: Optional[str] = None
    category: Optional[str] = None
    priority: Optional[str] = None
    alignment: Optional[str] = None
    do_window: Optional[DateProperty] = None
    due_window: Optional[DateProperty] = None
    related_ids: Tuple[str, ...] = ()
    url: Optional[str] = None
    properties: Mapping[str, Property] = field(default_factory=dict, compare=False, repr=False)

    @property
    def primary_instant(self) -> Optional[datetime]:
        if self.do_window is not None:
            return self.do_window.start
        if self.due_window is not None:
            return self.due_window.start
        return None

    @property
    def primary_which(self) -> Which:
        """Which date backs the primary instant; untimed items read as "do"."""
        if self.do_window is None and self.due_window is not None:
            return "due"
        return "do"

    def instant_for(self, which: Which) -> Optional[datetime]:
        window = self.do_window if which == "do" else self.due_window
        return window.start if window is not None else None

    def window_for(self, which: Which) -> Optional[DateProperty]:
        return self.do_window if which == "do" else self.due_window

    @classmethod
    def from_page(
        cls, page: Mapping[str, Any], schema: ActionBaseSchema, zone: ZoneInfo
    ) -> "Item":
        properties: Dict[str, Property] = {
            label: parse_property(raw, zone)
            for label, raw in (page.get("properties") or {}).items()
        }
        shell = cls(id=str(page.get("id", "")), properties=properties)

        def _read(field_name: str) -> Any:
            return read_property(shell, schema.label(field_name))

        do_window = _read("do_date")
        due_window = _read("due_date")
        return cls(
            id=shell.id,
            name=_read("name") or UNTITLED,
            status=_read("status"),
            category=_read("category"),
            priority=_read("priority"),
            alignment=_read("alignment"),
            do_window=do_window if isinstance(do_window, DateProperty) else None,
            due_window=due_window if isinstance(due_window, DateProperty) else None,
            related_ids=tuple(_read("project") or ()),
            url=page.get("url"),
            properties=properties,
        )


def read_property(item: Item, key: str) -> Union[DateProperty, str, List[str], None]:
    """Return the typed value of ``key`` or None. Never raises."""

    prop = item.properties.get(key)
    if isinstance(prop, DateProperty):
        return prop
    if isinstance(prop, ChoiceProperty):
        return prop.name
    if isinstance(prop, RelationProperty):
        return list(prop.ids)
    if isinstance(prop, TitleProperty):
        return prop.text
    return None


def fetch_stubbed_items(
    *, now: Optional[datetime] = None, limit: Optional[int] = None
) -> List[Item]:
    """Return a deterministic list of placeholder items anchored at ``now``."""

    now = (now or datetime.now(timezone.utc)).replace(second=0, microsecond=0)

    def _at(delta: timedelta) -> DateProperty:
        return DateProperty(start=now + delta, time_zone="America/Chicago")

    sample: List[Item] = [
        Item(
            id="stub-1001",
            name="Call Jordan about school pickup",
            status="Not started",
            category="Call",
            priority="HIGH",
            alignment="HANUMAN LIFE",
            do_window=_at(timedelta(hours=-2)),
        ),
        Item(
            id="stub-1002",
            name="Draft client proposal",
            status="In progress",
            category="Errand",
            priority="MID",
            alignment="KRAZY MONKEE",
            do_window=_at(timedelta(hours=1)),
            due_window=_at(timedelta(days=2)),
        ),
        Item(
            id="stub-1003",
            name="Gym session",
            status="Not started",
            category="Event",
            priority="LOW",
            alignment="HANUMAN LIFE",
            do_window=_at(timedelta(hours=3)),
        ),
        Item(
            id="stub-1004",
            name="Finish React lesson",
            status="Not started",
            alignment="DEV ED",
            due_window=_at(timedelta(days=1)),
        ),
        Item(
            id="stub-1005",
            name="Pick up mail at the copy center",
            status="Done",
            category="Errand",
        ),
    ]

    if limit is None:
        return sample[:]
    return sample[:limit]
