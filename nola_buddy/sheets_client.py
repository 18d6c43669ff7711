"""Google Sheets REST wrapper for the secretary notes sheet."""
from __future__ import annotations

from dataclasses import dataclass, field
import json
import logging
import re
from typing import Any, Dict, List, Optional, Tuple
from urllib import error as urlerror
from urllib import parse as urlparse
from urllib import request as urlrequest

from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request as GoogleAuthRequest
from google.oauth2 import service_account

from .config import Settings
from .schema import WorkspaceSchema, load_workspace_schema

logger = logging.getLogger(__name__)

SHEETS_SCOPE = "https://www.googleapis.com/auth/spreadsheets"
TOKEN_URI = "https://oauth2.googleapis.com/token"
FIRST_DATA_ROW = 2

_UPDATED_ROW_RE = re.compile(r"![A-Z]+(\d+)")


class SheetsAPIError(RuntimeError):
    """Raised when the Sheets API (or its credential exchange) fails."""


@dataclass(slots=True)
class NoteRow:
    row_index: int
    title: str = ""
    date_time: str = ""
    tag: str = ""
    notes: str = ""

    def to_dict(self) -> dict:
        return {
            "rowIndex": self.row_index,
            "title": self.title,
            "dateTime": self.date_time,
            "tag": self.tag,
            "notes": self.notes,
        }


@dataclass(slots=True)
class NotesSheet:
    sheet_title: str
    sheet_id: int
    rows: List[NoteRow] = field(default_factory=list)


def a1_range(sheet_title: str, cells: str) -> str:
    escaped = sheet_title.replace("'", "''")
    return f"'{escaped}'!{cells}"


class SheetsClient:
    """Row-level access to the notes sheet; no tagging or title logic here."""

    base_url = "https://sheets.googleapis.com/v4/spreadsheets"

    def __init__(
        self,
        settings: Settings,
        *,
        schema: Optional[WorkspaceSchema] = None,
        timeout_seconds: int = 15,
    ) -> None:
        self.settings = settings
        self.schema = schema or load_workspace_schema(settings.schema_path)
        self.timeout_seconds = timeout_seconds
        self._credentials: Optional[service_account.Credentials] = None

    # ------------------------------------------------------------------
    # Sheet layout
    # ------------------------------------------------------------------
    def primary_sheet(self) -> Tuple[str, int]:
        """Return (title, sheetId): the configured notes sheet, else the first."""

        meta = self._request(
            "GET",
            "",
            params={"fields": "sheets.properties(sheetId,title)"},
        )
        sheets = [s.get("properties") or {} for s in meta.get("sheets") or []]
        wanted = self.schema.notes.sheet_title
        match = next((p for p in sheets if p.get("title") == wanted), None)
        chosen = match or (sheets[0] if sheets else {})
        return str(chosen.get("title") or "Sheet1"), int(chosen.get("sheetId") or 0)

    def ensure_headers(self) -> Tuple[str, int]:
        """Write the header row when it differs from the schema headers."""

        title, sheet_id = self.primary_sheet()
        headers = self.schema.notes.headers
        header_range = a1_range(title, "A1:D1")
        payload = self._request("GET", f"/values/{urlparse.quote(header_range, safe='')}")
        current = (payload.get("values") or [[]])[0]
        if list(current[: len(headers)]) != headers:
            logger.info(f"Writing note headers to sheet '{title}'")
            self._request(
                "PUT",
                f"/values/{urlparse.quote(header_range, safe='')}",
                params={"valueInputOption": "RAW"},
                body={"values": [headers]},
            )
        return title, sheet_id

    # ------------------------------------------------------------------
    # Rows
    # ------------------------------------------------------------------
    def list_rows(self) -> NotesSheet:
        title, sheet_id = self.ensure_headers()
        data_range = a1_range(title, f"A{FIRST_DATA_ROW}:D")
        payload = self._request("GET", f"/values/{urlparse.quote(data_range, safe='')}")
        rows = [
            _row_from_values(index + FIRST_DATA_ROW, values)
            for index, values in enumerate(payload.get("values") or [])
        ]
        return NotesSheet(sheet_title=title, sheet_id=sheet_id, rows=rows)

    def append_row(self, values: List[str]) -> int:
        """Append one row and return its 1-based row index."""

        title, _ = self.ensure_headers()
        append_range = a1_range(title, "A:D")
        payload = self._request(
            "POST",
            f"/values/{urlparse.quote(append_range, safe='')}:append",
            params={"valueInputOption": "RAW", "insertDataOption": "INSERT_ROWS"},
            body={"values": [values]},
        )
        updated = (payload.get("updates") or {}).get("updatedRange") or ""
        if match := _UPDATED_ROW_RE.search(updated):
            return int(match.group(1))
        rows = self.list_rows().rows
        return rows[-1].row_index if rows else FIRST_DATA_ROW

    def update_row(self, row_index: int, values: List[str]) -> None:
        _check_row_index(row_index)
        title, _ = self.ensure_headers()
        row_range = a1_range(title, f"A{row_index}:D{row_index}")
        self._request(
            "PUT",
            f"/values/{urlparse.quote(row_range, safe='')}",
            params={"valueInputOption": "RAW"},
            body={"values": [values]},
        )

    def delete_row(self, row_index: int) -> None:
        """Remove the whole row from the notes sheet."""

        _check_row_index(row_index)
        _, sheet_id = self.primary_sheet()
        self._request(
            "POST",
            ":batchUpdate",
            body={
                "requests": [
                    {
                        "deleteDimension": {
                            "range": {
                                "sheetId": sheet_id,
                                "dimension": "ROWS",
                                "startIndex": row_index - 1,
                                "endIndex": row_index,
                            }
                        }
                    }
                ]
            },
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _access_token(self) -> str:
        if self._credentials is None:
            if not self.settings.sheets_configured:
                raise SheetsAPIError(
                    "Google Sheets env vars missing. Set GOOGLE_CLIENT_EMAIL, "
                    "GOOGLE_PRIVATE_KEY, SPREADSHEET_ID."
                )
            try:
                self._credentials = service_account.Credentials.from_service_account_info(
                    {
                        "client_email": self.settings.google_client_email,
                        "private_key": self.settings.google_private_key,
                        "token_uri": TOKEN_URI,
                    },
                    scopes=[SHEETS_SCOPE],
                )
            except ValueError as exc:
                raise SheetsAPIError(f"Invalid Google service account key: {exc}") from exc

        if not self._credentials.valid:
            try:
                self._credentials.refresh(GoogleAuthRequest())
            except GoogleAuthError as exc:  # pragma: no cover - network/auth path
                raise SheetsAPIError(f"Google token exchange failed: {exc}") from exc
        return str(self._credentials.token)

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        body: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        url = f"{self.base_url}/{self.settings.spreadsheet_id}{path}"
        if params:
            url = f"{url}?{urlparse.urlencode(params)}"

        data: Optional[bytes] = None
        headers = {
            "Authorization": f"Bearer {self._access_token()}",
            "Accept": "application/json",
        }
        if body is not None:
            data = json.dumps(body).encode("utf-8")
            headers["Content-Type"] = "application/json"

        req = urlrequest.Request(url, data=data, method=method, headers=headers)

        try:
            with urlrequest.urlopen(req, timeout=self.timeout_seconds) as resp:
                raw = resp.read().decode("utf-8")
                return json.loads(raw) if raw else {}
        except urlerror.HTTPError as exc:  # pragma: no cover - network path
            detail = exc.read().decode("utf-8", errors="ignore")
            raise SheetsAPIError(
                f"Sheets API {method} {path or '/'} failed with status {exc.code}: {detail}"
            ) from exc
        except urlerror.URLError as exc:  # pragma: no cover - network path
            raise SheetsAPIError(f"Network error calling Sheets: {exc}") from exc


def _check_row_index(row_index: int) -> None:
    if row_index < FIRST_DATA_ROW:
        raise ValueError(f"rowIndex must be >= {FIRST_DATA_ROW}")


def _row_from_values(row_index: int, values: List[Any]) -> NoteRow:
    cells = [str(v) if v is not None else "" for v in values] + [""] * 4
    return NoteRow(
        row_index=row_index,
        title=cells[0],
        date_time=cells[1],
        tag=cells[2],
        notes=cells[3],
    )
