"""
Award classification for scraped honors.

Every usable entry gets exactly one category:
- position, slug and title are checked in that order; the first text carrying
  a result marker decides
- markers: winner → Winner; nominee / finalist / runner-up → Nominee;
  recommended (or a translated equivalent) → Special
- scrape truncation is expected, so a text ending in "-winn" or "-nomin"
  still counts as a winner / nominee marker
- award families flagged `infer_from_game_count` fall back to the number of
  listed games when a truncated title lost its marker
- anything else is Special
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from bgg_honors.config import AwardRule, rule_for
from bgg_honors.models.honor import HonorCategory, RawHonorEntry

LEADING_YEAR = re.compile(r"^\d{4}\s+")

WINNER_MARKER = re.compile(r"winner")
NOMINEE_MARKERS = (
    (re.compile(r"nominee"), "Nominee"),
    (re.compile(r"finalist"), "Finalist"),
    (re.compile(r"runner[- ]?up"), "Runner-up"),
)
RECOMMENDED_MARKER = re.compile(
    r"recommended|empfehlung|empfohlen|recommand[eé]|aanbevolen|recomendad[oa]|anbefalt"
)

# Truncated tails left by the scraper's fixed-width titles/slugs
WINNER_STEM = re.compile(r"(?:^|[\s\-_])(?:winn|winne)$")
NOMINEE_STEM = re.compile(r"(?:^|[\s\-_])(?:nom|nomi|nomin|nomine|nomina)$")

TRUNCATED_CATEGORY = re.compile(
    r"artwork|prese|print.?(?:&|and).?play|expansion|solo board game|strategy board game"
    r"|thematic board game|wargame|game of the year|heavy|light|medium"
)
TRUNCATED_SUFFIX = re.compile(r"(?:[\s\-_](?:no|wi))$")

RESULT_WORDS = re.compile(
    r"\s*\b(?:winners?|nominees?|finalists?|runner[- ]?ups?|recommended|empfehlung"
    r"|winn|winne|nom|nomi|nomin|nomine|nomina)$",
    re.IGNORECASE,
)
SEASON_PREFIX = re.compile(r"^\d{4}(?:\s*/?\s*(?:spring|summer|fall|autumn|winter))?\s*", re.IGNORECASE)
AWARD_WORD = re.compile(r"\bawards?\b", re.IGNORECASE)


@dataclass(frozen=True)
class Classification:
    award_type: str
    category: HonorCategory
    result: Optional[str] = None
    subcategory: Optional[str] = None


def derive_award_type(award_set: Optional[str]) -> Optional[str]:
    """'2024 Spiel des Jahres' → 'Spiel des Jahres'; None when absent."""
    if not award_set:
        return None
    award_type = LEADING_YEAR.sub("", award_set.strip()).strip()
    return award_type or None


def classify_text(text: Optional[str]) -> Optional[Tuple[HonorCategory, str]]:
    """Return (category, raw result label) for the first matching marker, else None."""
    if not text:
        return None
    lowered = text.lower().strip()

    if WINNER_MARKER.search(lowered) or WINNER_STEM.search(lowered):
        return HonorCategory.WINNER, "Winner"
    for pattern, label in NOMINEE_MARKERS:
        if pattern.search(lowered):
            return HonorCategory.NOMINEE, label
    if NOMINEE_STEM.search(lowered):
        return HonorCategory.NOMINEE, "Nominee"
    if RECOMMENDED_MARKER.search(lowered):
        return HonorCategory.SPECIAL, "Recommended"
    return None


def _infer_from_game_count(entry: RawHonorEntry) -> Optional[Tuple[HonorCategory, str]]:
    corpus = " ".join(t for t in (entry.slug, entry.title, entry.position) if t).lower()
    if not (TRUNCATED_CATEGORY.search(corpus) or TRUNCATED_SUFFIX.search(corpus)):
        return None
    game_count = sum(1 for game in entry.boardgames if game.bgg_id is not None)
    if game_count == 1:
        return HonorCategory.WINNER, "Winner"
    if game_count > 1:
        return HonorCategory.NOMINEE, "Nominee"
    return None


def derive_subcategory(position: Optional[str], award_type: Optional[str]) -> Optional[str]:
    """
    Reduce a position label to its category phrase.

    "Golden Geek Best Strategy Game Winner" with award type "Golden Geek"
    → "Best Strategy Game". Returns None for the award's overall category.
    """
    if not position:
        return None
    text = re.sub(r"\s+", " ", position).strip()
    if award_type and text.lower() == award_type.lower():
        return None

    text = SEASON_PREFIX.sub("", text)
    if award_type and text.lower().startswith(award_type.lower()):
        text = text[len(award_type):].strip()

    text = RESULT_WORDS.sub("", text).strip()
    text = AWARD_WORD.sub("", text)
    text = re.sub(r"\s{2,}", " ", text).strip(" -:")

    if len(text) < 3:
        return None
    return text


def classify_entry(
    entry: RawHonorEntry,
    rules: Optional[Mapping[str, AwardRule]] = None,
) -> Optional[Classification]:
    """
    Classify one raw honor. Returns None only when the award family is unknown
    (missing awardSet); unmatched text always falls back to Special.
    """
    award_type = derive_award_type(entry.award_set)
    if award_type is None:
        return None

    match = None
    for text in (entry.position, entry.slug, entry.title):
        match = classify_text(text)
        if match:
            break

    if match is None and rule_for(award_type, rules).infer_from_game_count:
        match = _infer_from_game_count(entry)

    category, result = match if match else (HonorCategory.SPECIAL, None)
    return Classification(
        award_type=award_type,
        category=category,
        result=result,
        subcategory=derive_subcategory(entry.position, award_type),
    )
