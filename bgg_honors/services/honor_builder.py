"""
Build normalized HonorRecords from classified raw entries, one per listed game.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List, Mapping, Optional, Tuple

from bgg_honors.config import BGG_BASE_URL, HONOR_SOURCE, AwardRule
from bgg_honors.models.honor import HonorRecord, RawHonorEntry
from bgg_honors.parsers.slug_parser import parse_slug
from bgg_honors.services.award_classifier import Classification, classify_entry

logger = logging.getLogger(__name__)


def honor_name(year: int, award_type: str, subcategory: Optional[str] = None) -> str:
    parts = [str(year), award_type]
    if subcategory:
        parts.append(subcategory)
    return " ".join(parts)


def absolute_url(url: Optional[str]) -> Optional[str]:
    if not url:
        return None
    if url.startswith("http"):
        return url
    return BGG_BASE_URL + (url if url.startswith("/") else "/" + url)


class HonorBuilder:
    """
    Turns RawHonorEntry objects into (bgg_id, HonorRecord) pairs.

    One builder per pipeline run: `created_at` is fixed at construction so
    every record of the run carries the same stamp.
    """

    def __init__(
        self,
        created_at: Optional[str] = None,
        rules: Optional[Mapping[str, AwardRule]] = None,
    ):
        self.created_at = created_at or datetime.now(timezone.utc).isoformat()
        self.rules = rules

    def build(self, entry: RawHonorEntry) -> List[Tuple[int, HonorRecord]]:
        if not entry.is_usable:
            return []
        classification = classify_entry(entry, self.rules)
        if classification is None:
            return []

        pairs: List[Tuple[int, HonorRecord]] = []
        for game in entry.boardgames:
            if game.bgg_id is None:
                logger.debug("Honor %s lists a game without id (%s)", entry.id, game.name)
                continue
            pairs.append((game.bgg_id, self._make_record(entry, classification, game.name)))
        return pairs

    def _make_record(
        self,
        entry: RawHonorEntry,
        classification: Classification,
        game_name: Optional[str],
    ) -> HonorRecord:
        # A fresh record per game; nothing is shared between games of one honor.
        description = entry.title or parse_slug(entry.slug).title_part or None
        return HonorRecord(
            year=entry.year,
            award_type=classification.award_type,
            category=classification.category,
            honor_id=entry.id,
            name=honor_name(entry.year, classification.award_type, classification.subcategory),
            subcategory=classification.subcategory,
            result=classification.result,
            source=HONOR_SOURCE,
            validated=False,
            description=description,
            slug=entry.slug,
            url=absolute_url(entry.url),
            award_set=entry.award_set,
            position=entry.position,
            game_name=game_name,
            created_at=self.created_at,
        )
