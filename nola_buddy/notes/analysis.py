"""Note statistics and focus suggestions."""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
import re
from typing import Dict, Iterable, List, Optional, Tuple
from zoneinfo import ZoneInfo

from ..sheets_client import NoteRow
from ..timewindow import ensure_utc
from .tagging import EDUCATION_TAG, KNOWN_TAGS, LIFE_TAG, WORK_TAG

STOPWORDS = frozenset(
    "a an and are as at be but by for from has have i in is it of on or that the "
    "to was were will with you your ya heard me ya mama and them beaucoup".split()
)
TOP_TERMS = 15
SUGGESTION_KEYWORDS = 5
RECENT_WINDOW = timedelta(days=7)
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M"

_NON_WORD_RE = re.compile(r"[^\w\s]|_")

FOCUS_TEXT = {
    WORK_TAG: "client work & marketing",
    EDUCATION_TAG: "skills growth & study blocks",
}
DEFAULT_FOCUS = "personal logistics & well-being"

RECOMMENDATIONS = {
    WORK_TAG: [
        "Turn top mentions into tasks (“proposal”, “edit”, “invoice”) with Do/Due times.",
        "Schedule a 60–90 min deep block for a Strategic Win inside your biggest gap.",
    ],
    EDUCATION_TAG: [
        "Create a repeating “study sprint” block (45–60 min) and log outcomes.",
        "Convert repeated topics into a mini-curriculum checklist.",
    ],
    LIFE_TAG: [
        "Batch errands and calls into a single afternoon block this week.",
        "Reflect: add one small habit (5–10 min) tied to meditation, prayer, or fitness.",
    ],
}
UNTAGGED_RECOMMENDATION = (
    "Tag your notes for better insights (Hanuman Life, Krazy Monkee, Dev & Design Education)."
)


def tokenize(text: Optional[str]) -> List[str]:
    cleaned = _NON_WORD_RE.sub(" ", (text or "").lower())
    return [word for word in cleaned.split() if word not in STOPWORDS and len(word) > 2]


@dataclass(slots=True)
class NotesAnalysis:
    count: int = 0
    recent_7d: int = 0
    by_tag: Dict[str, int] = field(default_factory=dict)
    by_day: List[Tuple[str, int]] = field(default_factory=list)
    top_terms: List[Tuple[str, int]] = field(default_factory=list)

    def totals(self) -> dict:
        return {"count": self.count, "recent7d": self.recent_7d}

    def to_dict(self) -> dict:
        return {
            "totals": self.totals(),
            "byTag": dict(self.by_tag),
            "byDay": [{"date": day, "count": count} for day, count in self.by_day],
            "topTerms": [{"term": term, "count": count} for term, count in self.top_terms],
        }


@dataclass(slots=True)
class NotesSuggestion:
    headline: str
    recommendations: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"headline": self.headline, "recommendations": list(self.recommendations)}


def _parse_timestamp(text: str, zone: ZoneInfo) -> Optional[datetime]:
    try:
        naive = datetime.strptime(text.strip(), TIMESTAMP_FORMAT)
    except ValueError:
        return None
    return ensure_utc(naive.replace(tzinfo=zone))


def analyze_rows(
    rows: Iterable[NoteRow], zone: ZoneInfo, *, now: Optional[datetime] = None
) -> NotesAnalysis:
    """Count notes by tag and day, recent activity, and frequent terms.

    Timestamps are read as civil time in ``zone``; unparsable ones are only
    skipped for the recent count.
    """

    now = ensure_utc(now or datetime.now(timezone.utc))
    cutoff = now - RECENT_WINDOW
    analysis = NotesAnalysis(by_tag={tag: 0 for tag in KNOWN_TAGS})
    analysis.by_tag[""] = 0
    days: Dict[str, int] = {}
    vocab: Counter = Counter()

    for row in rows:
        analysis.count += 1
        analysis.by_tag[row.tag] = analysis.by_tag.get(row.tag, 0) + 1
        day = row.date_time.split(" ")[0] if row.date_time else ""
        if day:
            days[day] = days.get(day, 0) + 1
        vocab.update(tokenize(f"{row.title} {row.notes}"))

        stamp = _parse_timestamp(row.date_time, zone) if row.date_time else None
        if stamp is not None and stamp >= cutoff:
            analysis.recent_7d += 1

    analysis.by_day = list(days.items())
    analysis.top_terms = vocab.most_common(TOP_TERMS)
    return analysis


def dominant_tag(analysis: NotesAnalysis) -> str:
    """Most frequent tag; ties go to the earliest key."""

    if not analysis.by_tag:
        return ""
    return max(analysis.by_tag.items(), key=lambda entry: entry[1])[0]


def suggest_from_analysis(analysis: NotesAnalysis) -> NotesSuggestion:
    tag = dominant_tag(analysis)
    focus = FOCUS_TEXT.get(tag, DEFAULT_FOCUS)
    suggestion = NotesSuggestion(
        headline=f"Focus is leaning toward **{tag or 'Unassigned'}** — prioritize {focus}."
    )
    suggestion.recommendations.extend(RECOMMENDATIONS.get(tag, [UNTAGGED_RECOMMENDATION]))

    keywords = [term for term, _ in analysis.top_terms[:SUGGESTION_KEYWORDS]]
    if keywords:
        suggestion.recommendations.append(f"Consider actions around: {', '.join(keywords)}.")
    return suggestion
