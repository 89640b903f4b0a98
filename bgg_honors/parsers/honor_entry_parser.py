"""
Convert scraped honor JSON (the scrape layer's export) into RawHonorEntry objects.
"""
from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from bgg_honors.models.honor import BoardgameRef, RawHonorEntry
from bgg_honors.parsers.slug_parser import parse_year

logger = logging.getLogger(__name__)

AWARD_SET_YEAR = re.compile(r"^(\d{4})\b")
GAME_ID_KEYS = ("bggId", "bgg_id", "externalGameId", "id")


def _to_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


def _clean(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def infer_year(raw: Dict[str, Any]) -> Optional[int]:
    """Explicit year, else the awardSet's leading year, else the slug's."""
    year = raw.get("year")
    if isinstance(year, int) and not isinstance(year, bool):
        return year
    if isinstance(year, str) and year.strip().isdigit():
        return int(year.strip())

    award_set = raw.get("awardSet") or raw.get("award_set")
    if isinstance(award_set, str):
        match = AWARD_SET_YEAR.match(award_set.strip())
        if match:
            return int(match.group(1))

    return parse_year(raw.get("slug"))


def parse_boardgames(items: Any) -> List[BoardgameRef]:
    games: List[BoardgameRef] = []
    if not isinstance(items, list):
        return games
    for item in items:
        if not isinstance(item, dict):
            continue
        bgg_id = None
        for key in GAME_ID_KEYS:
            bgg_id = _to_int(item.get(key))
            if bgg_id is not None:
                break
        games.append(BoardgameRef(bgg_id=bgg_id, name=_clean(item.get("name"))))
    return games


def parse_raw_entry(raw: Dict[str, Any]) -> RawHonorEntry:
    honor_id = raw.get("id")
    return RawHonorEntry(
        id=str(honor_id) if honor_id is not None else None,
        slug=_clean(raw.get("slug")),
        title=_clean(raw.get("title")),
        award_set=_clean(raw.get("awardSet") or raw.get("award_set")),
        position=_clean(raw.get("position")),
        year=infer_year(raw),
        url=_clean(raw.get("url")),
        boardgames=parse_boardgames(raw.get("boardgames")),
    )


def parse_raw_entries(items: Iterable[Any]) -> List[RawHonorEntry]:
    entries: List[RawHonorEntry] = []
    for item in items:
        if not isinstance(item, dict):
            logger.debug("Skipping non-object honor entry: %r", item)
            continue
        entries.append(parse_raw_entry(item))
    return entries


def load_raw_corpus(path: Path | str) -> List[RawHonorEntry]:
    """Load a materialized honors export (top-level JSON array)."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError(f"Expected a JSON array of honors in {path}")
    entries = parse_raw_entries(data)
    logger.info("Loaded %d honor entries from %s", len(entries), path)
    return entries
