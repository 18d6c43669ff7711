"""Keyword-bag tagging and title generation for secretary notes."""
from __future__ import annotations

import re
from typing import Iterable, Optional, Pattern

EDUCATION_TAG = "Dev & Design Education"
WORK_TAG = "Krazy Monkee"
LIFE_TAG = "Hanuman Life"
DEFAULT_TAG = WORK_TAG
KNOWN_TAGS = (LIFE_TAG, WORK_TAG, EDUCATION_TAG)

DEFAULT_TITLE = "General Note"
MAX_TITLE_LENGTH = 60
TITLE_WORDS = 6

EDU_WORDS = (
    "codecademy", "freecodecamp", "javascript", "node", "react", "express",
    "firebase", "gsap", "html", "css", "data structures", "algorithms", "study",
    "course", "tutorial", "lesson", "practice", "design refresher", "photoshop",
    "illustrator", "indesign", "after effects", "premiere", "premier pro",
    "adobe", "bootcamp",
)

WORK_WORDS = (
    "client", "invoice", "proposal", "deliverable", "website", "web design",
    "web dev", "branding", "logo", "video", "edit", "render", "notion buddy",
    "crazy monkey", "krazy monkee", "marketing", "ad", "campaign", "portfolio",
    "mockup",
)

LIFE_WORDS = (
    "mom", "dad", "son", "daughter", "kids", "jordan", "jace", "jamal jr",
    "family", "school", "homework", "pickup", "dropoff", "work schedule",
    "gentilly mail and copy center", "luz", "joe", "van", "dave", "rob",
    "exercise", "workout", "gym", "meditate", "meditation", "pray", "prayer",
    "court", "appointment", "doctor", "volunteer", "service", "church", "temple",
)

_TITLE_PREFIX_RE = re.compile(r"(meeting|call|client|task|idea)[:\- ]+(.*)", re.IGNORECASE)


def _bag_pattern(words: Iterable[str]) -> Pattern[str]:
    body = "|".join(re.escape(word) for word in words)
    return re.compile(rf"(?<!\w)(?:{body})(?!\w)")


_BAGS = (
    (EDUCATION_TAG, _bag_pattern(EDU_WORDS)),
    (WORK_TAG, _bag_pattern(WORK_WORDS)),
    (LIFE_TAG, _bag_pattern(LIFE_WORDS)),
)


def classify_tag(title: Optional[str], notes: Optional[str]) -> str:
    """Pick a tag from keyword bags; education beats work beats life."""

    text = f"{title or ''} {notes or ''}".lower()
    for tag, pattern in _BAGS:
        if pattern.search(text):
            return tag
    return DEFAULT_TAG


def generate_title(notes: Optional[str]) -> str:
    """Derive a short title from the first line of ``notes``."""

    text = (notes or "").strip()
    if not text:
        return DEFAULT_TITLE
    first_line = text.split("\n")[0]
    match = _TITLE_PREFIX_RE.search(first_line)
    if match and match.group(2):
        keyword = match.group(1).capitalize()
        return f"{keyword}: {match.group(2)}"[:MAX_TITLE_LENGTH]
    short = " ".join(first_line.split()[:TITLE_WORDS])
    return short[:MAX_TITLE_LENGTH] or DEFAULT_TITLE
