"""
Detect placeholder games: rows whose "name" is really an award description
that a scrape stored as if it were a game title.
"""
from __future__ import annotations

import re
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

STOPWORDS = frozenset({"the", "best", "board", "game", "games", "of", "year", "award", "awards", "premio"})
AWARD_TOKENS = ("best", "award", "awards", "nominee", "winner", "recommended", "honor")

RESULT_SUFFIX = re.compile(r" (?:nominee|winner|recommended|empfehlung)$")
TRUNCATED_SUFFIX = re.compile(r" (?:nomi|nomin|winn|winne|nom|recommen|empfehl)$")


def is_likely_award_placeholder(name: Optional[str]) -> bool:
    if not name:
        return False
    lower = name.lower().strip()
    if RESULT_SUFFIX.search(lower) or TRUNCATED_SUFFIX.search(lower):
        return True
    hits = sum(1 for token in AWARD_TOKENS if token in lower)
    return hits >= 2 and len(lower) > 25


def derive_award_prefixes(award_types: Iterable[str]) -> List[str]:
    """First one- and two-word prefixes of each award family, minus generic words."""
    prefixes = set()
    for award_type in award_types:
        parts = (award_type or "").split()
        if not parts:
            continue
        first = parts[0].lower()
        if len(first) > 2 and first not in STOPWORDS:
            prefixes.add(first)
        if len(parts) > 1:
            second = parts[1].lower()
            if first not in STOPWORDS or second not in STOPWORDS:
                pair = f"{first} {second}"
                if len(pair.replace(" ", "")) > 4:
                    prefixes.add(pair)
    return sorted(prefixes)


def find_placeholder_games(
    games: Iterable[Tuple[int, Optional[str]]],
    award_types: Sequence[str],
) -> List[Dict[str, object]]:
    """
    Return placeholder candidates as {bgg_id, name, prefix}, sorted by prefix then name.
    Only names starting with a known award prefix are considered.
    """
    prefixes = derive_award_prefixes(award_types)
    candidates: Dict[int, Dict[str, object]] = {}
    for bgg_id, name in games:
        lower = (name or "").lower()
        prefix = next((p for p in prefixes if lower.startswith(p)), None)
        if prefix is None or not is_likely_award_placeholder(name):
            continue
        candidates[bgg_id] = {"bgg_id": bgg_id, "name": name, "prefix": prefix}
    return sorted(candidates.values(), key=lambda c: (c["prefix"], c["name"]))
