from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from nola_buddy.analysis.daily_focus import (
    GAP_THRESHOLD,
    build_daily_focus,
    detect_gaps,
    focus_sort_key,
    sort_items,
)
from nola_buddy.items import DateProperty, Item

CHICAGO = ZoneInfo("America/Chicago")


def _local(hour: int, minute: int = 0) -> datetime:
    return datetime(2024, 6, 15, hour, minute, tzinfo=CHICAGO).astimezone(timezone.utc)


def _item(item_id, *, priority=None, status=None, do=None, due=None, name=None) -> Item:
    return Item(
        id=item_id,
        name=name or f"Task {item_id}",
        priority=priority,
        status=status,
        do_window=DateProperty(start=do) if do else None,
        due_window=DateProperty(start=due) if due else None,
    )


def _mixed_items():
    return [
        _item("a", priority="LOW", status="Done", do=_local(8)),
        _item("b", priority="HIGH", status="In progress", do=_local(15)),
        _item("c", status="Not started"),
        _item("d", priority="HIGH", status="Not started", due=_local(7)),
        _item("e", priority="MID", do=_local(10)),
        _item("f", priority="HIGH"),
        _item("g", priority="MID", status="Not started", do=_local(10)),
    ]


class TestSorting:
    def test_three_key_order(self):
        ordered = sort_items(_mixed_items())

        assert [item.id for item in ordered] == ["d", "b", "f", "g", "e", "a", "c"]
        keys = [focus_sort_key(item) for item in ordered]
        assert keys == sorted(keys)

    def test_stable_for_equal_keys(self):
        first = _item("first", priority="MID", do=_local(9))
        second = _item("second", priority="MID", do=_local(9))

        assert [i.id for i in sort_items([first, second])] == ["first", "second"]
        assert [i.id for i in sort_items([second, first])] == ["second", "first"]

    def test_untimed_sorts_after_timed_within_priority(self):
        ordered = sort_items([_item("untimed", priority="LOW"), _item("timed", priority="LOW", do=_local(23))])
        assert [i.id for i in ordered] == ["timed", "untimed"]


class TestBuildDailyFocus:
    def test_every_item_lands_in_exactly_one_bucket(self):
        items = _mixed_items()

        report = build_daily_focus(items, _local(9), CHICAGO)

        ids = [line.id for line in report.overdue] + [line.id for line in report.scheduled]
        assert len(report.overdue) + len(report.scheduled) == len(items)
        assert sorted(ids) == sorted(item.id for item in items)

    def test_partition_relative_to_reference(self):
        report = build_daily_focus(_mixed_items(), _local(9), CHICAGO)

        assert [line.id for line in report.overdue] == ["d", "a"]
        assert [line.id for line in report.scheduled] == ["b", "f", "g", "e", "c"]

    def test_equal_instant_is_scheduled(self):
        report = build_daily_focus([_item("now", do=_local(9))], _local(9), CHICAGO)
        assert [line.id for line in report.scheduled] == ["now"]
        assert report.overdue == []

    def test_untimed_items_use_do_label(self):
        report = build_daily_focus([_item("c", name="Stretch")], _local(9), CHICAGO)
        assert report.scheduled[0].display_line == "Stretch — Do: no time"

    def test_due_only_item_uses_due_label(self):
        report = build_daily_focus([_item("d", name="Rent", due=_local(17))], _local(9), CHICAGO)
        assert report.scheduled[0].display_line == "Rent — Due: 05:00 PM"

    def test_empty_input_gives_empty_report(self):
        report = build_daily_focus([], _local(9), CHICAGO)

        assert report.to_dict() == {
            "overdue": [],
            "scheduled": [],
            "gaps": [],
            "tally": {
                "total": 0,
                "high": 0,
                "withDue": 0,
                "withDo": 0,
                "statusMix": {"Not started": 0, "In progress": 0, "Done": 0},
            },
        }

    def test_tally(self):
        report = build_daily_focus(_mixed_items(), _local(9), CHICAGO)

        assert report.tally.total == 7
        assert report.tally.high == 3
        assert report.tally.with_due == 1
        assert report.tally.with_do == 4
        assert report.tally.status_mix == {"Not started": 3, "In progress": 1, "Done": 1}


class TestGaps:
    def test_only_long_gap_is_reported(self):
        items = [
            _item("nine", priority="MID", do=_local(9)),
            _item("half", priority="MID", do=_local(9, 30)),
            _item("eleven", priority="MID", do=_local(11)),
        ]

        report = build_daily_focus(items, _local(8), CHICAGO)

        assert len(report.gaps) == 1
        gap = report.gaps[0]
        assert gap.start == _local(9, 30)
        assert gap.end == _local(11)
        assert gap.minutes == 90
        assert gap.window == "09:30 AM - 11:00 AM"

    def test_exact_threshold_counts_as_gap(self):
        items = [_item("a", do=_local(13)), _item("b", do=_local(14))]
        assert len(detect_gaps(items, items, CHICAGO)) == 1
        assert GAP_THRESHOLD == timedelta(minutes=60)

    def test_overdue_items_do_not_open_gaps(self):
        items = [_item("past", do=_local(6)), _item("soon", do=_local(12))]

        report = build_daily_focus(items, _local(9), CHICAGO)

        assert report.gaps == []

    def test_suggestions_skip_high_and_cap_at_two(self):
        items = [
            _item("h1", priority="HIGH", do=_local(10), name="Pitch"),
            _item("m1", priority="MID", do=_local(12), name="Edit video"),
            _item("l1", priority="LOW", name="Sort mail"),
            _item("u1", name="Water plants"),
        ]

        report = build_daily_focus(items, _local(9), CHICAGO)

        assert len(report.gaps) == 1
        assert report.gaps[0].suggestions == ["Edit video", "Sort mail"]
        assert report.gaps[0].to_dict()["minutes"] == 120
