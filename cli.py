#!/usr/bin/env python3
"""NOLA Buddy CLI."""
from __future__ import annotations

import argparse
from datetime import datetime, timezone
import logging
import sys

from nola_buddy.analysis import build_daily_focus, build_period_report
from nola_buddy.config import ConfigError, Settings, load_settings
from nola_buddy.dataset import fetch_items
from nola_buddy.notion_client import NotionClient
from nola_buddy.schema import SchemaError, load_workspace_schema
from nola_buddy.timewindow import next_7_days_window, today_window


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nola-buddy",
        description="Daily and weekly coaching over the Notion Action Base.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")

    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("today", "Show today's focus: overdue, scheduled, gaps and tally."),
        ("week", "Show the next seven days grouped by priority and risk."),
    ):
        report_parser = subparsers.add_parser(name, help=help_text)
        report_parser.add_argument(
            "--source",
            choices=("auto", "live", "stub"),
            default="auto",
            help="Data source preference: live Notion, stub, or auto fallback.",
        )

    subparsers.add_parser(
        "check-config",
        help="Report which credentials and settings are loaded.",
    )
    subparsers.add_parser(
        "schema",
        help="Show the workspace schema labels used for Notion and Sheets.",
    )
    return parser


def _build_client(settings: Settings) -> NotionClient | None:
    try:
        return NotionClient(settings)
    except SchemaError as exc:
        print(f"Unable to load schema: {exc}", file=sys.stderr)
        return None


def _cmd_today(source: str) -> int:
    settings = load_settings()
    now = datetime.now(timezone.utc)
    window, (year, month, day) = today_window(now, settings.zone)
    try:
        items, live, warning = fetch_items(
            _build_client(settings), window=window, source=source, now=now
        )
    except RuntimeError as exc:
        print(exc, file=sys.stderr)
        return 1
    if warning:
        print(warning)

    report = build_daily_focus(items, now, settings.zone)
    print(f"Focus for {year:04d}-{month:02d}-{day:02d} ({settings.timezone})")
    for heading, lines in (("Overdue", report.overdue), ("Scheduled", report.scheduled)):
        print(f"\n{heading}:")
        if not lines:
            print("  (none)")
        for line in lines:
            print(f"  - {line.display_line}")
            print(f"      {line.rationale} Next: {line.next_action}")
    if report.gaps:
        print("\nOpen gaps:")
        for gap in report.gaps:
            ideas = ", ".join(gap.suggestions) or "rest"
            print(f"  - {gap.window} ({gap.minutes} min): {ideas}")
    tally = report.tally
    print(
        f"\nTotal {tally.total} | HIGH {tally.high} | with Do {tally.with_do}"
        f" | with Due {tally.with_due} | Source: {'live' if live else 'stub'}"
    )
    return 0


def _cmd_week(source: str) -> int:
    settings = load_settings()
    now = datetime.now(timezone.utc)
    window = next_7_days_window(now, settings.zone)
    try:
        items, live, warning = fetch_items(
            _build_client(settings), window=window, source=source, now=now
        )
    except RuntimeError as exc:
        print(exc, file=sys.stderr)
        return 1
    if warning:
        print(warning)

    report = build_period_report(items, now, settings.zone)
    for heading, lines in (
        ("High priority", report.high_priority),
        ("Strategic wins", report.strategic_wins),
        ("Risk watch", report.risk_watch),
    ):
        print(f"{heading}:")
        for line in lines or ["(none)"]:
            print(f"  - {line}")
        print()
    print("Alignment check:")
    for alignment, count in report.alignment_check.items():
        print(f"  {alignment}: {count}")
    print(f"\nSource: {'live' if live else 'stub'}")
    return 0


def _cmd_check_config() -> int:
    try:
        settings = load_settings()
    except ConfigError as exc:
        print(f"Config check failed: {exc}", file=sys.stderr)
        return 1
    print(
        f"environment={settings.environment}",
        f"timezone={settings.timezone}",
        f"notion={'yes' if settings.notion_configured else 'no'}",
        f"sheets={'yes' if settings.sheets_configured else 'no'}",
        f"apiKey={'yes' if settings.api_key else 'no'}",
    )
    return 0 if settings.notion_configured else 1


def _cmd_schema() -> int:
    settings = load_settings()
    try:
        schema = load_workspace_schema(settings.schema_path)
    except SchemaError as exc:
        print(f"Unable to load schema: {exc}", file=sys.stderr)
        return 1
    action_base = schema.action_base
    print(f"Action Base database: {action_base.database_name}")
    if settings.action_base_database_id:
        print(f"  (pinned id {settings.action_base_database_id})")
    for field_name, label in action_base.properties.items():
        print(f"  {field_name:<10} -> {label}")
    print("Statuses:", ", ".join(action_base.status_values))
    print("Priorities:", ", ".join(action_base.priority_values))
    print(f"\nNotes sheet: {schema.notes.sheet_title}")
    print("Headers:", ", ".join(schema.notes.headers))
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "today":
        return _cmd_today(source=args.source)
    if args.command == "week":
        return _cmd_week(source=args.source)
    if args.command == "check-config":
        return _cmd_check_config()
    if args.command == "schema":
        return _cmd_schema()
    parser.error(f"Unknown command {args.command}")
    return 2


if __name__ == "__main__":
    sys.exit(main())
