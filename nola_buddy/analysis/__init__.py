"""Schedule analysis and coaching reports."""

from .coaching import CoachLine, build_coach_line
from .daily_focus import DailyFocusReport, build_daily_focus, sort_items
from .period import (
    PeriodReport,
    ProductivityReport,
    build_period_report,
    build_productivity_report,
    format_item_line,
)

__all__ = [
    "CoachLine",
    "DailyFocusReport",
    "PeriodReport",
    "ProductivityReport",
    "build_coach_line",
    "build_daily_focus",
    "build_period_report",
    "build_productivity_report",
    "format_item_line",
    "sort_items",
]
