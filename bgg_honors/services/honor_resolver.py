"""
Deduplication and conflict resolution for one game's merged honor collection.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Hashable, List, Set, Tuple

from bgg_honors.models.honor import HonorCategory, HonorRecord


@dataclass
class Resolution:
    honors: List[HonorRecord]
    dropped_specials: List[HonorRecord] = field(default_factory=list)
    dropped_duplicates: List[HonorRecord] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.dropped_specials or self.dropped_duplicates)


def _id_key(record: HonorRecord) -> Hashable:
    return (record.award_type, record.year, record.honor_id)


def _name_key(record: HonorRecord) -> Hashable:
    return (record.award_type, record.year, record.category, record.name)


def _is_duplicate(record: HonorRecord, seen_ids: Set[Hashable], seen_names: Dict[Hashable, bool]) -> bool:
    if record.honor_id is not None and _id_key(record) in seen_ids:
        return True
    name_key = _name_key(record)
    if name_key not in seen_names:
        return False
    # An id only disambiguates when both sides carry one.
    return record.honor_id is None or seen_names[name_key]


def resolve_honors(honors: List[HonorRecord]) -> Resolution:
    """
    Apply precedence and duplicate rules, preserving order of the survivors.

    - a Winner in an (award_type, year) group drops that group's Specials
    - records describing the same honor (same honor_id, or same category and
      name when either side has no id) collapse to the first occurrence
    """
    won: Set[Tuple[str, int]] = {
        (h.award_type, h.year) for h in honors if h.category == HonorCategory.WINNER
    }

    kept: List[HonorRecord] = []
    dropped_specials: List[HonorRecord] = []
    dropped_duplicates: List[HonorRecord] = []
    seen_ids: Set[Hashable] = set()
    # name key -> True when some kept record with that name has no id
    seen_names: Dict[Hashable, bool] = {}

    for record in honors:
        if record.category == HonorCategory.SPECIAL and (record.award_type, record.year) in won:
            dropped_specials.append(record)
            continue
        if _is_duplicate(record, seen_ids, seen_names):
            dropped_duplicates.append(record)
            continue
        if record.honor_id is not None:
            seen_ids.add(_id_key(record))
        name_key = _name_key(record)
        seen_names[name_key] = seen_names.get(name_key, False) or record.honor_id is None
        kept.append(record)

    return Resolution(
        honors=kept,
        dropped_specials=dropped_specials,
        dropped_duplicates=dropped_duplicates,
    )
