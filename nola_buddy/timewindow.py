"""Civil-time windows and date/time parsing for a fixed local zone.

Every window is expressed as aware UTC datetimes. Windows built from "now"
take the zone's UTC offset once, at the reference instant, and apply it to
both bounds; a window that straddles a DST transition can be off by the
transition amount at its far end.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
import re
from typing import Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


class FormatError(ValueError):
    """Raised when date or time text does not match an accepted shape."""


_US_DATE_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
_ISO_DATE_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_CLOCK_RE = re.compile(r"^(\d{1,2}):(\d{2})$")
LOCAL_ISO_FORMAT = "%Y-%m-%dT%H:%M:%S"
END_OF_DAY = time(23, 59, 59)


@dataclass(frozen=True, slots=True)
class TimeWindow:
    """Closed interval of absolute instants."""

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(
                f"Window start {self.start.isoformat()} is after end {self.end.isoformat()}"
            )

    def contains(self, instant: datetime) -> bool:
        return self.start <= ensure_utc(instant) <= self.end

    def to_dict(self) -> dict:
        return {"start": isoformat_utc(self.start), "end": isoformat_utc(self.end)}


def ensure_utc(dt: datetime) -> datetime:
    """Ensure datetime is UTC timezone-aware.

    If naive, assumes UTC. If aware, converts to UTC.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def isoformat_utc(dt: datetime) -> str:
    return ensure_utc(dt).isoformat().replace("+00:00", "Z")


def _civil_to_utc(civil: datetime, offset: timedelta) -> datetime:
    return (civil - offset).replace(tzinfo=timezone.utc)


def _reference_offset(reference: datetime, zone: ZoneInfo) -> Tuple[datetime, timedelta]:
    local = ensure_utc(reference).astimezone(zone)
    return local, local.utcoffset() or timedelta(0)


def today_window(
    reference: datetime, zone: ZoneInfo
) -> Tuple[TimeWindow, Tuple[int, int, int]]:
    """Return the civil day containing ``reference`` plus its (year, month, day)."""

    local, offset = _reference_offset(reference, zone)
    day = local.date()
    window = TimeWindow(
        start=_civil_to_utc(datetime.combine(day, time(0, 0, 0)), offset),
        end=_civil_to_utc(datetime.combine(day, END_OF_DAY), offset),
    )
    return window, (day.year, day.month, day.day)


def next_7_days_window(reference: datetime, zone: ZoneInfo) -> TimeWindow:
    """Return ``reference`` through civil 23:59:59 seven days later."""

    local, offset = _reference_offset(reference, zone)
    end_day = local.date() + timedelta(days=7)
    return TimeWindow(
        start=ensure_utc(reference),
        end=_civil_to_utc(datetime.combine(end_day, END_OF_DAY), offset),
    )


def range_window(from_text: str, to_text: str, zone: ZoneInfo) -> TimeWindow:
    """Window from civil midnight of ``from_text`` to 23:59:59 of ``to_text``."""

    start_day = parse_flexible_date(from_text)
    end_day = parse_flexible_date(to_text)
    start = datetime.combine(start_day, time(0, 0, 0), tzinfo=zone)
    end = datetime.combine(end_day, END_OF_DAY, tzinfo=zone)
    if start > end:
        raise FormatError(f"fromDate {from_text} is after toDate {to_text}")
    return TimeWindow(start=ensure_utc(start), end=ensure_utc(end))


def parse_flexible_date(date_text: str) -> date:
    """Parse ``MM/DD/YYYY`` or ``YYYY-MM-DD`` into a date."""

    text = (date_text or "").strip()
    if match := _US_DATE_RE.match(text):
        month, day, year = (int(part) for part in match.groups())
    elif match := _ISO_DATE_RE.match(text):
        year, month, day = (int(part) for part in match.groups())
    else:
        raise FormatError(
            f"Unrecognized date '{date_text}'. Use MM/DD/YYYY or YYYY-MM-DD."
        )
    try:
        return date(year, month, day)
    except ValueError as exc:
        raise FormatError(f"Invalid calendar date '{date_text}': {exc}") from exc


def _parse_clock(time_text: str) -> time:
    match = _CLOCK_RE.match(time_text.strip())
    if not match:
        raise FormatError(f"Unrecognized time '{time_text}'. Use 24-hour HH:MM.")
    hour, minute = (int(part) for part in match.groups())
    if hour > 23 or minute > 59:
        raise FormatError(f"Time out of range: '{time_text}'")
    return time(hour, minute)


def parse_flexible_local_datetime(date_text: str, time_text: Optional[str] = None) -> str:
    """Return a zone-naive ``YYYY-MM-DDTHH:MM:SS`` string.

    The caller attaches the zone separately (e.g. Notion's ``time_zone`` key).
    """

    day = parse_flexible_date(date_text)
    clock = _parse_clock(time_text) if time_text else time(0, 0)
    return datetime.combine(day, clock).strftime(LOCAL_ISO_FORMAT)


def to_instant(local_text: str, zone: ZoneInfo) -> datetime:
    """Localize a ``YYYY-MM-DDTHH:MM:SS`` string in ``zone`` and return UTC."""

    try:
        naive = datetime.strptime(local_text, LOCAL_ISO_FORMAT)
    except ValueError as exc:
        raise FormatError(f"Expected {LOCAL_ISO_FORMAT}, got '{local_text}'") from exc
    return ensure_utc(naive.replace(tzinfo=zone))


def _resolve_zone(name: Optional[str], fallback: ZoneInfo) -> ZoneInfo:
    if not name:
        return fallback
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return fallback


def parse_remote_instant(
    text: str, zone: ZoneInfo, *, time_zone: Optional[str] = None
) -> Tuple[datetime, bool]:
    """Normalize a remote date string to ``(utc_instant, has_time)``.

    Date-only values mean civil midnight in ``time_zone`` (or ``zone``).
    Naive date-times are localized the same way; offset-bearing ones are
    converted directly.
    """

    local_zone = _resolve_zone(time_zone, zone)
    if _ISO_DATE_RE.match(text):
        day = parse_flexible_date(text)
        return ensure_utc(datetime.combine(day, time(0, 0), tzinfo=local_zone)), False
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as exc:
        raise FormatError(f"Unable to parse remote date value: {text}") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=local_zone)
    return ensure_utc(parsed), True


def format_time_of_day(instant: datetime, zone: ZoneInfo) -> str:
    return ensure_utc(instant).astimezone(zone).strftime("%I:%M %p")


def format_date_time(instant: datetime, zone: ZoneInfo) -> str:
    return ensure_utc(instant).astimezone(zone).strftime("%a %b %d, %I:%M %p")


def format_date(instant: datetime, zone: ZoneInfo) -> str:
    return ensure_utc(instant).astimezone(zone).strftime("%a %b %d")


def format_timestamp(instant: datetime, zone: ZoneInfo) -> str:
    """Notes-sheet timestamp: ``YYYY-MM-DD HH:MM`` in the local zone."""
    return ensure_utc(instant).astimezone(zone).strftime("%Y-%m-%d %H:%M")


def format_time_range(start: datetime, end: datetime, zone: ZoneInfo) -> str:
    return f"{format_time_of_day(start, zone)} - {format_time_of_day(end, zone)}"
