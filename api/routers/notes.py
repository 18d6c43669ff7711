"""Notes Router - secretary notes kept in Google Sheets.

Handles:
- Note capture with generated title and keyword tag
- Listing with tag and date filters
- Read, update (Date & Time preserved) and delete by row index
- Analysis and focus suggestions over every note
"""
from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_notes_service, get_now, translate_errors
from api.models import NoteCreateRequest, NoteListRequest, NoteRowRequest, NoteUpdateRequest
from nola_buddy.notes import NotesService

router = APIRouter()

TRIGGER_MESSAGE = "Ready to Take some notes"


def _require_row_index(request: NoteRowRequest) -> int:
    if not request.row_index:
        raise HTTPException(status_code=400, detail="rowIndex is required")
    return request.row_index


@router.post("/trigger")
def trigger_notes() -> dict:
    """Prompt line for clients starting a note-taking flow."""
    return {"ok": True, "message": TRIGGER_MESSAGE}


@router.post("/create")
def create_note(
    request: NoteCreateRequest,
    service: NotesService = Depends(get_notes_service),
    now: datetime = Depends(get_now),
) -> dict:
    if not request.notes or not request.notes.strip():
        raise HTTPException(status_code=400, detail="notes is required")
    with translate_errors("Create note"):
        row = service.create(request.notes, title=request.title, tag=request.tag, now=now)
    return {
        "ok": True,
        "rowIndex": row.row_index,
        "title": row.title,
        "tag": row.tag,
        "dateTime": row.date_time,
        "message": "Note saved.",
    }


@router.post("/list")
def list_notes(
    request: NoteListRequest,
    service: NotesService = Depends(get_notes_service),
) -> dict:
    with translate_errors("List notes"):
        count, rows = service.list_notes(
            tag=request.tag,
            from_date=request.from_date,
            to_date=request.to_date,
            limit=request.limit,
        )
    return {"ok": True, "count": count, "rows": [row.to_dict() for row in rows]}


@router.post("/read")
def read_note(
    request: NoteRowRequest,
    service: NotesService = Depends(get_notes_service),
) -> dict:
    row_index = _require_row_index(request)
    with translate_errors("Read note"):
        row = service.read(row_index)
    return {"ok": True, "note": row.to_dict()}


@router.post("/update")
def update_note(
    request: NoteUpdateRequest,
    service: NotesService = Depends(get_notes_service),
) -> dict:
    row_index = _require_row_index(request)
    with translate_errors("Update note"):
        row = service.update(
            row_index,
            title=request.title,
            tag=request.tag,
            notes=request.notes,
            delete_fields=request.delete_fields,
        )
    return {
        "ok": True,
        "rowIndex": row.row_index,
        "title": row.title,
        "tag": row.tag,
        "dateTime": row.date_time,
        "message": "Note updated.",
    }


@router.post("/delete")
def delete_note(
    request: NoteRowRequest,
    service: NotesService = Depends(get_notes_service),
) -> dict:
    row_index = _require_row_index(request)
    with translate_errors("Delete note"):
        service.delete(row_index)
    return {"ok": True, "rowIndex": row_index, "deleted": True}


@router.post("/analyze")
def analyze_notes(
    service: NotesService = Depends(get_notes_service),
    now: datetime = Depends(get_now),
) -> dict:
    with translate_errors("Analyze notes"):
        analysis = service.analyze(now=now)
    return {"ok": True, "analysis": analysis.to_dict()}


@router.post("/suggest")
def suggest_notes(
    service: NotesService = Depends(get_notes_service),
    now: datetime = Depends(get_now),
) -> dict:
    with translate_errors("Suggest from notes"):
        analysis, suggestion = service.suggest(now=now)
    return {
        "ok": True,
        "analysisSummary": analysis.totals(),
        "suggestion": suggestion.to_dict(),
    }
