"""
Parse BoardGameGeek honor slugs such as ``2019-as-dor-jeu-de-lannee-winner``.
Extracts:
- Year (leading 4 digits, within the plausible corpus range)
- Human readable title (hyphens → spaces, title case, fixed phrase fixes)
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Optional

from bgg_honors.config import MAX_YEAR, MIN_YEAR

# Applied after title casing, matched case-insensitively on word boundaries.
# Elided articles stay lower case, even at the start of a title.
# Longer phrases first so "as dor" wins over "dor".
PHRASE_FIXES = (
    ("jeu de l annee", "Jeu de l'année"),
    ("as dor", "As d'or"),
    ("tric trac", "Tric Trac"),
    ("lannee", "l'année"),
    ("dargent", "d'argent"),
    ("dor", "d'or"),
    ("arets spel", "Årets Spel"),
    ("arets spill", "Årets Spill"),
    ("arets spil", "Årets Spil"),
)

LOWERCASE_WORDS = frozenset({
    "a", "an", "and", "at", "de", "der", "des", "die", "du", "et", "for",
    "in", "la", "le", "les", "of", "on", "or", "the", "to", "und", "von", "with",
})

_PHRASE_PATTERNS = tuple(
    (re.compile(rf"\b{re.escape(search)}\b", re.IGNORECASE), replacement)
    for search, replacement in PHRASE_FIXES
)


@dataclass(frozen=True)
class ParsedSlug:
    year: Optional[int]
    title_part: str


def parse_year(slug: Any, *, min_year: int = MIN_YEAR, max_year: int = MAX_YEAR) -> Optional[int]:
    if not isinstance(slug, str) or len(slug) < 4:
        return None
    head = slug[:4]
    if not (head.isascii() and head.isdigit()):
        return None
    year = int(head)
    if year < min_year or year > max_year:
        return None
    return year


def _title_case(words: list) -> str:
    cased = []
    for idx, word in enumerate(words):
        lower = word.lower()
        if idx > 0 and lower in LOWERCASE_WORDS:
            cased.append(lower)
        else:
            cased.append(lower[:1].upper() + lower[1:])
    return " ".join(cased)


def extract_title(text: Any) -> str:
    """Turn the non-year part of a slug into a display title. Never raises."""
    if not isinstance(text, str):
        return ""
    words = [w for w in re.split(r"[-_\s]+", text) if w]
    if not words:
        return ""
    title = _title_case(words)
    for pattern, replacement in _PHRASE_PATTERNS:
        title = pattern.sub(replacement, title)
    return title


def parse_slug(slug: Any, *, min_year: int = MIN_YEAR, max_year: int = MAX_YEAR) -> ParsedSlug:
    """
    Split an honor slug into year and title.

    Malformed input yields ``year=None`` and a best-effort title built from
    the whole string.
    """
    if not isinstance(slug, str):
        return ParsedSlug(year=None, title_part="")

    year = parse_year(slug, min_year=min_year, max_year=max_year)
    if year is None:
        return ParsedSlug(year=None, title_part=extract_title(slug))

    remainder = slug[4:]
    if remainder[:1] in ("-", " ", "_"):
        remainder = remainder[1:]
    return ParsedSlug(year=year, title_part=extract_title(remainder))
