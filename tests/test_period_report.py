from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from nola_buddy.analysis.period import (
    RISK_HORIZON,
    build_period_report,
    build_productivity_report,
    format_item_line,
    group_by_alignment,
    is_at_risk,
)
from nola_buddy.items import DateProperty, Item

CHICAGO = ZoneInfo("America/Chicago")
NOW = datetime(2024, 6, 15, 18, 0, tzinfo=timezone.utc)


def _item(item_id, *, do=None, due=None, **fields) -> Item:
    return Item(
        id=item_id,
        name=fields.pop("name", f"Task {item_id}"),
        do_window=DateProperty(start=do) if do else None,
        due_window=DateProperty(start=due) if due else None,
        **fields,
    )


def test_alignment_check_counts_in_first_seen_order():
    items = [
        _item("1", alignment="A"),
        _item("2"),
        _item("3", alignment="A"),
        _item("4", alignment="B"),
    ]

    counts = group_by_alignment(items)

    assert list(counts.items()) == [("A", 2), ("Unassigned", 1), ("B", 1)]


class TestRiskWatch:
    def test_untimed_not_started_is_excluded(self):
        assert not is_at_risk(_item("x", status="Not started"), NOW)

    def test_not_started_inside_horizon(self):
        assert is_at_risk(_item("x", status="Not started", due=NOW + timedelta(hours=47)), NOW)
        assert is_at_risk(_item("x", status="Not started", do=NOW - timedelta(days=2)), NOW)

    def test_outside_horizon_or_started(self):
        assert not is_at_risk(_item("x", status="Not started", do=NOW + RISK_HORIZON), NOW)
        assert not is_at_risk(_item("x", status="In progress", do=NOW + timedelta(hours=1)), NOW)
        assert not is_at_risk(_item("x", do=NOW + timedelta(hours=1)), NOW)


def test_period_report_buckets_preserve_input_order():
    items = [
        _item("low", priority="LOW", status="Not started", do=NOW + timedelta(hours=5)),
        _item("high", priority="HIGH", status="Not started", do=NOW + timedelta(days=4)),
        _item("mid", priority="MID", status="Done", do=NOW + timedelta(hours=1)),
        _item("none", status="Not started"),
        _item("high2", priority="HIGH", status="Not started", due=NOW + timedelta(hours=2)),
    ]

    report = build_period_report(items, NOW, CHICAGO)

    assert [line.split(" — ")[0] for line in report.high_priority] == ["Task high", "Task high2"]
    assert [line.split(" — ")[0] for line in report.strategic_wins] == [
        "Task low",
        "Task mid",
        "Task none",
    ]
    assert [line.split(" — ")[0] for line in report.risk_watch] == ["Task low", "Task high2"]
    assert report.alignment_check == {"Unassigned": 5}


def test_period_report_handles_empty_input():
    assert build_period_report([], NOW, CHICAGO).to_dict() == {
        "highPriority": [],
        "strategicWins": [],
        "riskWatch": [],
        "alignmentCheck": {},
    }


def test_format_item_line_order_and_omissions():
    item = _item(
        "x",
        name="Edit promo video",
        category="Errand",
        alignment="KRAZY MONKEE",
        priority="MID",
        status="Not started",
        due=datetime(2024, 6, 15, 14, 0, tzinfo=timezone.utc),
    )

    assert format_item_line(item, CHICAGO) == (
        "Edit promo video — Due: Sat Jun 15, 09:00 AM — Errand — KRAZY MONKEE — MID — Not started"
    )
    assert format_item_line(_item("y", name="Bare"), CHICAGO) == "Bare"


def test_productivity_report():
    items = [
        _item("1", status="Done", category="Call", alignment="A", do=NOW - timedelta(days=1)),
        _item("2", status="Not started", category="Call", do=NOW - timedelta(hours=1)),
        _item("3", status="In progress", due=NOW + timedelta(days=10)),
        _item("4"),
    ]

    report = build_productivity_report(items, NOW, CHICAGO)

    assert report.total == 4
    assert report.completed == 1
    assert report.completion_rate == 0.25
    assert report.overdue_open == 1
    assert report.status_mix == {"Not started": 1, "In progress": 1, "Done": 1, "Unset": 1}
    assert report.by_category == {"Call": 2, "Uncategorized": 2}
    assert report.by_alignment == {"A": 1, "Unassigned": 3}
    assert report.by_week == {"2024-W24": 2, "2024-W26": 1}
    assert report.to_dict()["completionRate"] == 0.25


def test_productivity_report_empty():
    report = build_productivity_report([], NOW, CHICAGO)
    assert report.total == 0
    assert report.completion_rate == 0.0
