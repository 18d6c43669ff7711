"""Notes operations on top of the Sheets rows: defaults, filters, edits."""
from __future__ import annotations

from datetime import datetime, timezone
import logging
from typing import Iterable, List, Optional, Tuple
from zoneinfo import ZoneInfo

from ..sheets_client import FIRST_DATA_ROW, NoteRow, SheetsClient
from ..timewindow import format_timestamp, parse_flexible_date
from .analysis import NotesAnalysis, NotesSuggestion, analyze_rows, suggest_from_analysis
from .tagging import classify_tag, generate_title

logger = logging.getLogger(__name__)

DEFAULT_LIST_LIMIT = 50
CLEARABLE_FIELDS = frozenset({"TITLE", "TAG", "NOTES"})


class NoteNotFoundError(LookupError):
    """Raised when no note lives at the requested row."""


class NotesService:
    """Secretary notes kept as rows of one spreadsheet tab."""

    def __init__(self, client: SheetsClient, zone: ZoneInfo) -> None:
        self.client = client
        self.zone = zone

    def create(
        self,
        notes: str,
        *,
        title: Optional[str] = None,
        tag: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> NoteRow:
        if not notes or not notes.strip():
            raise ValueError("notes is required")
        final_title = (title or "").strip() or generate_title(notes)
        final_tag = (tag or "").strip() or classify_tag(final_title, notes)
        stamp = format_timestamp(now or datetime.now(timezone.utc), self.zone)
        row_index = self.client.append_row([final_title, stamp, final_tag, notes])
        logger.info(f"Saved note '{final_title}' at row {row_index} tagged {final_tag}")
        return NoteRow(
            row_index=row_index,
            title=final_title,
            date_time=stamp,
            tag=final_tag,
            notes=notes,
        )

    def list_notes(
        self,
        *,
        tag: Optional[str] = None,
        from_date: Optional[str] = None,
        to_date: Optional[str] = None,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> Tuple[int, List[NoteRow]]:
        """Return (match count, the last ``limit`` matching rows).

        Raises:
            FormatError: if ``from_date`` or ``to_date`` is malformed.
        """

        rows = self.client.list_rows().rows
        return filter_rows(rows, tag=tag, from_date=from_date, to_date=to_date, limit=limit)

    def read(self, row_index: int) -> NoteRow:
        for row in self.client.list_rows().rows:
            if row.row_index == row_index:
                return row
        raise NoteNotFoundError(f"Row {row_index} not found")

    def update(
        self,
        row_index: int,
        *,
        title: Optional[str] = None,
        tag: Optional[str] = None,
        notes: Optional[str] = None,
        delete_fields: Iterable[str] = (),
    ) -> NoteRow:
        """Rewrite a note in place; its Date & Time never changes.

        Cleared or empty titles and tags are regenerated from the notes.
        """

        if row_index < FIRST_DATA_ROW:
            raise ValueError(f"rowIndex must be >= {FIRST_DATA_ROW}")
        current = self.read(row_index)
        to_clear = {name.upper() for name in delete_fields}
        unknown = to_clear - CLEARABLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown deleteFields: {', '.join(sorted(unknown))}")

        new_title = "" if "TITLE" in to_clear else (current.title if title is None else title)
        new_tag = "" if "TAG" in to_clear else (current.tag if tag is None else tag)
        new_notes = "" if "NOTES" in to_clear else (current.notes if notes is None else notes)

        final_title = new_title or generate_title(new_notes)
        final_tag = new_tag or classify_tag(final_title, new_notes)
        self.client.update_row(
            row_index, [final_title, current.date_time, final_tag, new_notes]
        )
        return NoteRow(
            row_index=row_index,
            title=final_title,
            date_time=current.date_time,
            tag=final_tag,
            notes=new_notes,
        )

    def delete(self, row_index: int) -> int:
        self.client.delete_row(row_index)
        logger.info(f"Deleted note row {row_index}")
        return row_index

    def analyze(self, *, now: Optional[datetime] = None) -> NotesAnalysis:
        return analyze_rows(self.client.list_rows().rows, self.zone, now=now)

    def suggest(self, *, now: Optional[datetime] = None) -> Tuple[NotesAnalysis, NotesSuggestion]:
        analysis = self.analyze(now=now)
        return analysis, suggest_from_analysis(analysis)


def filter_rows(
    rows: List[NoteRow],
    *,
    tag: Optional[str] = None,
    from_date: Optional[str] = None,
    to_date: Optional[str] = None,
    limit: int = DEFAULT_LIST_LIMIT,
) -> Tuple[int, List[NoteRow]]:
    """Filter by tag (case-insensitive) and inclusive civil date bounds."""

    filtered = rows
    if tag:
        wanted = tag.lower()
        filtered = [row for row in filtered if row.tag.lower() == wanted]
    if from_date:
        floor = f"{parse_flexible_date(from_date).isoformat()} 00:00"
        filtered = [row for row in filtered if row.date_time >= floor]
    if to_date:
        ceiling = f"{parse_flexible_date(to_date).isoformat()} 23:59"
        filtered = [row for row in filtered if row.date_time <= ceiling]
    if limit <= 0:
        return len(filtered), []
    return len(filtered), filtered[-limit:]
