"""Period (weekly) report and the all-time productivity summary."""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional
from zoneinfo import ZoneInfo

from ..items import Item
from ..timewindow import ensure_utc, format_date_time
from .coaching import SEPARATOR, WHICH_LABELS
from .daily_focus import KNOWN_STATUSES

RISK_HORIZON = timedelta(hours=48)
UNASSIGNED = "Unassigned"
UNCATEGORIZED = "Uncategorized"
UNSET_STATUS = "Unset"


def format_item_line(item: Item, zone: ZoneInfo) -> str:
    """Shared one-line rendering used by every period report section."""

    when: Optional[str] = None
    instant = item.primary_instant
    if instant is not None:
        when = f"{WHICH_LABELS[item.primary_which]}: {format_date_time(instant, zone)}"
    parts = [
        item.name,
        when,
        item.category,
        item.alignment,
        item.priority,
        item.status,
    ]
    return SEPARATOR.join(part for part in parts if part)


@dataclass(slots=True)
class PeriodReport:
    high_priority: List[str] = field(default_factory=list)
    strategic_wins: List[str] = field(default_factory=list)
    risk_watch: List[str] = field(default_factory=list)
    alignment_check: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "highPriority": list(self.high_priority),
            "strategicWins": list(self.strategic_wins),
            "riskWatch": list(self.risk_watch),
            "alignmentCheck": dict(self.alignment_check),
        }


def is_at_risk(item: Item, now: datetime) -> bool:
    """Unstarted and scheduled before ``now`` + 48h; untimed items never are."""

    if item.status != "Not started":
        return False
    instant = item.primary_instant
    if instant is None:
        return False
    return instant < ensure_utc(now) + RISK_HORIZON


def group_by_alignment(items: Iterable[Item]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for item in items:
        key = item.alignment or UNASSIGNED
        counts[key] = counts.get(key, 0) + 1
    return counts


def build_period_report(items: Iterable[Item], now: datetime, zone: ZoneInfo) -> PeriodReport:
    """Bucket items into priority tiers, risk watch and alignment counts.

    Input order is preserved inside every list.
    """

    items = list(items)
    report = PeriodReport()
    for item in items:
        line = format_item_line(item, zone)
        if item.priority == "HIGH":
            report.high_priority.append(line)
        else:
            report.strategic_wins.append(line)
        if is_at_risk(item, now):
            report.risk_watch.append(line)
    report.alignment_check = group_by_alignment(items)
    return report


@dataclass(slots=True)
class ProductivityReport:
    total: int = 0
    completed: int = 0
    overdue_open: int = 0
    status_mix: Dict[str, int] = field(default_factory=dict)
    by_category: Dict[str, int] = field(default_factory=dict)
    by_alignment: Dict[str, int] = field(default_factory=dict)
    by_week: Dict[str, int] = field(default_factory=dict)

    @property
    def completion_rate(self) -> float:
        if not self.total:
            return 0.0
        return round(self.completed / self.total, 3)

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "completed": self.completed,
            "completionRate": self.completion_rate,
            "overdueOpen": self.overdue_open,
            "statusMix": dict(self.status_mix),
            "byCategory": dict(self.by_category),
            "byAlignment": dict(self.by_alignment),
            "byWeek": dict(self.by_week),
        }


def build_productivity_report(
    items: Iterable[Item], now: datetime, zone: ZoneInfo
) -> ProductivityReport:
    """Summarize an unbounded item listing for trend reporting."""

    now = ensure_utc(now)
    items = list(items)
    report = ProductivityReport(total=len(items))
    report.status_mix = {status: 0 for status in KNOWN_STATUSES}
    weeks: Counter = Counter()

    for item in items:
        status = item.status or UNSET_STATUS
        report.status_mix[status] = report.status_mix.get(status, 0) + 1
        if item.status == "Done":
            report.completed += 1

        category = item.category or UNCATEGORIZED
        report.by_category[category] = report.by_category.get(category, 0) + 1

        instant = item.primary_instant
        if instant is None:
            continue
        if instant < now and item.status != "Done":
            report.overdue_open += 1
        iso_year, iso_week, _ = instant.astimezone(zone).isocalendar()
        weeks[f"{iso_year}-W{iso_week:02d}"] += 1

    report.by_alignment = group_by_alignment(items)
    report.by_week = dict(sorted(weeks.items()))
    return report
