"""Daily focus: ordering, overdue/scheduled split, idle gaps and tallies."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List, Sequence, Tuple
from zoneinfo import ZoneInfo

from ..items import Item
from ..timewindow import ensure_utc, format_time_range, isoformat_utc
from .coaching import CoachLine, build_coach_line

PRIORITY_RANKS = {
    "HIGH": 1,
    "MID": 2,
    "LOW": 3,
}

STATUS_RANKS = {
    "Not started": 1,
    "In progress": 2,
    "Done": 3,
}

UNSET_RANK = 4
KNOWN_STATUSES = tuple(STATUS_RANKS)

# Design constants; there is no configuration surface for these.
GAP_THRESHOLD = timedelta(minutes=60)
MAX_GAP_SUGGESTIONS = 2

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(slots=True)
class GapRecord:
    start: datetime
    end: datetime
    window: str
    suggestions: List[str] = field(default_factory=list)

    @property
    def minutes(self) -> int:
        return int((self.end - self.start).total_seconds() // 60)

    def to_dict(self) -> dict:
        return {
            "window": self.window,
            "start": isoformat_utc(self.start),
            "end": isoformat_utc(self.end),
            "minutes": self.minutes,
            "suggestions": list(self.suggestions),
        }


@dataclass(slots=True)
class FocusTally:
    total: int = 0
    high: int = 0
    with_due: int = 0
    with_do: int = 0
    status_mix: Dict[str, int] = field(
        default_factory=lambda: {status: 0 for status in KNOWN_STATUSES}
    )

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "high": self.high,
            "withDue": self.with_due,
            "withDo": self.with_do,
            "statusMix": dict(self.status_mix),
        }


@dataclass(slots=True)
class DailyFocusReport:
    overdue: List[CoachLine] = field(default_factory=list)
    scheduled: List[CoachLine] = field(default_factory=list)
    gaps: List[GapRecord] = field(default_factory=list)
    tally: FocusTally = field(default_factory=FocusTally)

    def to_dict(self) -> dict:
        return {
            "overdue": [line.to_dict() for line in self.overdue],
            "scheduled": [line.to_dict() for line in self.scheduled],
            "gaps": [gap.to_dict() for gap in self.gaps],
            "tally": self.tally.to_dict(),
        }


def focus_sort_key(item: Item) -> Tuple[int, bool, datetime, int]:
    """(priority rank, untimed flag, instant, status rank); untimed sorts last."""

    instant = item.primary_instant
    return (
        PRIORITY_RANKS.get(item.priority or "", UNSET_RANK),
        instant is None,
        instant if instant is not None else _EPOCH,
        STATUS_RANKS.get(item.status or "", UNSET_RANK),
    )


def sort_items(items: Iterable[Item]) -> List[Item]:
    """Return a stably sorted copy of ``items``."""
    return sorted(items, key=focus_sort_key)


def build_daily_focus(
    items: Iterable[Item], reference: datetime, zone: ZoneInfo
) -> DailyFocusReport:
    """Build the daily focus report for items scheduled in a day window."""

    reference = ensure_utc(reference)
    ordered = sort_items(items)
    report = DailyFocusReport()
    timed: List[Item] = []

    for item in ordered:
        instant = item.primary_instant
        if instant is None:
            report.scheduled.append(build_coach_line(item, "do", reference, zone))
            continue

        line = build_coach_line(item, item.primary_which, reference, zone)
        if instant < reference:
            report.overdue.append(line)
        else:
            report.scheduled.append(line)
            timed.append(item)

    report.gaps = detect_gaps(timed, ordered, zone)
    report.tally = tally_items(ordered)
    return report


def detect_gaps(
    timed: Sequence[Item],
    pool: Sequence[Item],
    zone: ZoneInfo,
    *,
    threshold: timedelta = GAP_THRESHOLD,
) -> List[GapRecord]:
    """Return idle stretches of at least ``threshold`` between timed items.

    Suggestions come from ``pool`` in its own order and are not limited to
    items that would fit inside the gap.
    """

    ordered = sorted(
        (item for item in timed if item.primary_instant is not None),
        key=lambda item: item.primary_instant,
    )
    suggestions = [item.name for item in pool if item.priority != "HIGH"][
        :MAX_GAP_SUGGESTIONS
    ]

    gaps: List[GapRecord] = []
    for previous, current in zip(ordered, ordered[1:]):
        start = previous.primary_instant
        end = current.primary_instant
        if end - start >= threshold:
            gaps.append(
                GapRecord(
                    start=start,
                    end=end,
                    window=format_time_range(start, end, zone),
                    suggestions=list(suggestions),
                )
            )
    return gaps


def tally_items(items: Iterable[Item]) -> FocusTally:
    tally = FocusTally()
    for item in items:
        tally.total += 1
        if item.priority == "HIGH":
            tally.high += 1
        if item.due_window is not None:
            tally.with_due += 1
        if item.do_window is not None:
            tally.with_do += 1
        if item.status in tally.status_mix:
            tally.status_mix[item.status] += 1
    return tally
