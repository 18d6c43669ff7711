from typing import List, Optional

import pytest

from nola_buddy.sheets_client import FIRST_DATA_ROW, NoteRow, NotesSheet


class FakeSheetsClient:
    """In-memory stand-in for SheetsClient's row operations."""

    def __init__(self, rows: Optional[List[List[str]]] = None) -> None:
        self.rows = [list(row) for row in rows or []]
        self.appended: List[List[str]] = []

    def list_rows(self) -> NotesSheet:
        return NotesSheet(
            sheet_title="Maal Secretary Notes",
            sheet_id=77,
            rows=[
                NoteRow(index + FIRST_DATA_ROW, *row)
                for index, row in enumerate(self.rows)
            ],
        )

    def append_row(self, values: List[str]) -> int:
        self.rows.append(list(values))
        self.appended.append(list(values))
        return len(self.rows) + FIRST_DATA_ROW - 1

    def update_row(self, row_index: int, values: List[str]) -> None:
        if row_index < FIRST_DATA_ROW:
            raise ValueError("rowIndex must be >= 2")
        self.rows[row_index - FIRST_DATA_ROW] = list(values)

    def delete_row(self, row_index: int) -> None:
        if row_index < FIRST_DATA_ROW:
            raise ValueError("rowIndex must be >= 2")
        del self.rows[row_index - FIRST_DATA_ROW]


@pytest.fixture
def fake_sheets():
    return FakeSheetsClient(
        [
            ["Call: dentist", "2024-06-14 09:00", "Hanuman Life", "Call dentist about Jace"],
            ["Proposal draft", "2024-06-10 15:30", "Krazy Monkee", "Send proposal and invoice to client"],
            ["React lesson", "2024-06-01 20:00", "Dev & Design Education", "Finish react tutorial"],
        ]
    )
