from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from nola_buddy.notes.analysis import (
    UNTAGGED_RECOMMENDATION,
    NotesAnalysis,
    analyze_rows,
    suggest_from_analysis,
    tokenize,
)
from nola_buddy.sheets_client import NoteRow

CHICAGO = ZoneInfo("America/Chicago")
NOW = datetime(2024, 6, 15, 18, 0, tzinfo=timezone.utc)


def _row(index, date_time, tag, notes, title="Note"):
    return NoteRow(row_index=index, title=title, date_time=date_time, tag=tag, notes=notes)


def test_tokenize_drops_stopwords_short_tokens_and_punctuation():
    assert tokenize("The client's proposal, v2!") == ["client", "proposal"]
    assert tokenize(None) == []
    assert tokenize("ya heard me, beaucoup café") == ["café"]


class TestAnalyzeRows:
    def test_totals_tags_days_and_terms(self):
        rows = [
            _row(2, "2024-06-14 09:00", "Krazy Monkee", "proposal invoice proposal"),
            _row(3, "2024-06-01 10:00", "Krazy Monkee", "invoice"),
            _row(4, "", "", "orphan note"),
            _row(5, "garbage", "Custom", "proposal"),
        ]

        analysis = analyze_rows(rows, CHICAGO, now=NOW)

        assert analysis.count == 4
        assert analysis.recent_7d == 1
        assert analysis.by_tag == {
            "Hanuman Life": 0,
            "Krazy Monkee": 2,
            "Dev & Design Education": 0,
            "": 1,
            "Custom": 1,
        }
        assert analysis.by_day == [("2024-06-14", 1), ("2024-06-01", 1), ("garbage", 1)]
        assert analysis.top_terms[:3] == [("note", 5), ("proposal", 3), ("invoice", 2)]

    def test_recent_cutoff_uses_local_civil_time(self):
        # 13:00 CDT on June 8 is exactly seven days before NOW.
        rows = [
            _row(2, "2024-06-08 13:00", "", "edge"),
            _row(3, "2024-06-08 12:59", "", "just outside"),
        ]

        analysis = analyze_rows(rows, CHICAGO, now=NOW)

        assert analysis.recent_7d == 1

    def test_to_dict_shape(self):
        payload = analyze_rows([_row(2, "2024-06-14 09:00", "", "hello world")], CHICAGO, now=NOW).to_dict()

        assert payload["totals"] == {"count": 1, "recent7d": 1}
        assert payload["byDay"] == [{"date": "2024-06-14", "count": 1}]
        assert {"term": "hello", "count": 1} in payload["topTerms"]


class TestSuggestFromAnalysis:
    def test_work_heavy_notes(self):
        analysis = NotesAnalysis(
            count=3,
            by_tag={"Hanuman Life": 1, "Krazy Monkee": 2, "Dev & Design Education": 0, "": 0},
            top_terms=[("proposal", 3), ("invoice", 2)],
        )

        suggestion = suggest_from_analysis(analysis)

        assert suggestion.headline == (
            "Focus is leaning toward **Krazy Monkee** — prioritize client work & marketing."
        )
        assert len(suggestion.recommendations) == 3
        assert suggestion.recommendations[-1] == "Consider actions around: proposal, invoice."

    def test_education_focus(self):
        analysis = NotesAnalysis(by_tag={"Dev & Design Education": 4, "Krazy Monkee": 1})
        suggestion = suggest_from_analysis(analysis)
        assert "skills growth & study blocks" in suggestion.headline
        assert len(suggestion.recommendations) == 2

    def test_untagged_majority(self):
        analysis = NotesAnalysis(by_tag={"Hanuman Life": 0, "": 5})

        suggestion = suggest_from_analysis(analysis)

        assert "**Unassigned**" in suggestion.headline
        assert suggestion.recommendations == [UNTAGGED_RECOMMENDATION]

    def test_empty_analysis_picks_first_tag(self):
        suggestion = suggest_from_analysis(analyze_rows([], CHICAGO, now=NOW))
        assert "**Hanuman Life**" in suggestion.headline
        assert "personal logistics & well-being" in suggestion.headline
        assert not any(rec.startswith("Consider actions") for rec in suggestion.recommendations)
