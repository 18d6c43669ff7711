"""Secretary notes kept in a Google Sheet."""

from .analysis import NotesAnalysis, NotesSuggestion, analyze_rows, suggest_from_analysis, tokenize
from .service import NoteNotFoundError, NotesService, filter_rows
from .tagging import classify_tag, generate_title

__all__ = [
    "NoteNotFoundError",
    "NotesAnalysis",
    "NotesService",
    "NotesSuggestion",
    "analyze_rows",
    "classify_tag",
    "filter_rows",
    "generate_title",
    "suggest_from_analysis",
    "tokenize",
]
