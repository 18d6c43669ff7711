"""Per-item coaching lines for the daily focus report."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional
from zoneinfo import ZoneInfo

from ..items import Item, Which
from ..timewindow import ensure_utc, format_time_of_day

SEPARATOR = " — "
NO_TIME = "no time"

RATIONALE_HIGH = "High-impact lever: moving this forward unlocks the rest of your plan."
RATIONALE_EVENT = "Time-bound: it happens at a fixed time, so the day bends around it."
RATIONALE_CALL = "Maintains momentum: a quick touchpoint keeps people and projects moving."
RATIONALE_DEFAULT = "Keeps your cadence steady: small consistent progress compounds."

NEXT_ACTION_CALL = "Confirm the agenda and have the number ready before you dial."
NEXT_ACTION_EVENT = "Skim your notes and pack anything you need to bring."
NEXT_ACTION_DEFAULT = "Define the first 10-minute step and start it."

FIX_NOW_ACTION = "Block 25 minutes right now and knock out the first step."

WHICH_LABELS = {"do": "Do", "due": "Due"}


@dataclass(slots=True)
class CoachLine:
    id: str
    display_line: str
    rationale: str
    next_action: str
    fix_now_action: str
    suggest_reminder: bool

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "displayLine": self.display_line,
            "rationale": self.rationale,
            "nextAction": self.next_action,
            "fixNowAction": self.fix_now_action,
            "suggestReminder": self.suggest_reminder,
        }


def pick_rationale(item: Item) -> str:
    if item.priority == "HIGH":
        return RATIONALE_HIGH
    if item.category == "Event":
        return RATIONALE_EVENT
    if item.category == "Call":
        return RATIONALE_CALL
    return RATIONALE_DEFAULT


def pick_next_action(item: Item) -> str:
    if item.category == "Call":
        return NEXT_ACTION_CALL
    if item.category == "Event":
        return NEXT_ACTION_EVENT
    return NEXT_ACTION_DEFAULT


def _time_label(item: Item, which: Which, zone: ZoneInfo) -> str:
    window = item.window_for(which)
    if window is None:
        return NO_TIME
    if not window.has_time:
        return "all day"
    return format_time_of_day(window.start, zone)


def format_coach_display(item: Item, which: Which, zone: ZoneInfo) -> str:
    """Single-line summary: name, Do/Due time, category, alignment, status."""

    parts: List[Optional[str]] = [
        item.name,
        f"{WHICH_LABELS[which]}: {_time_label(item, which, zone)}",
        item.category,
        item.alignment,
        item.status,
    ]
    return SEPARATOR.join(part for part in parts if part)


def build_coach_line(item: Item, which: Which, now: datetime, zone: ZoneInfo) -> CoachLine:
    instant = item.instant_for(which)
    return CoachLine(
        id=item.id,
        display_line=format_coach_display(item, which, zone),
        rationale=pick_rationale(item),
        next_action=pick_next_action(item),
        fix_now_action=FIX_NOW_ACTION,
        suggest_reminder=instant is not None and instant > ensure_utc(now),
    )
