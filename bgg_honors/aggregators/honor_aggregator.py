"""
Per-game aggregation of freshly built honors and merge into stored collections.
"""
from __future__ import annotations

from dataclasses import replace
from typing import Dict, Iterable, List, Tuple

from bgg_honors.models.honor import HonorKey, HonorRecord


def group_by_game(pairs: Iterable[Tuple[int, HonorRecord]]) -> Dict[int, List[HonorRecord]]:
    """Group (bgg_id, record) pairs by game, keeping first-seen game and record order."""
    grouped: Dict[int, List[HonorRecord]] = {}
    for bgg_id, record in pairs:
        grouped.setdefault(bgg_id, []).append(record)
    return grouped


def _carry_over(existing: HonorRecord, incoming: HonorRecord) -> HonorRecord:
    # Stored audit fields survive a rebuild.
    return replace(
        incoming,
        created_at=existing.created_at or incoming.created_at,
        validated=existing.validated or incoming.validated,
        original_category=existing.original_category or incoming.original_category,
    )


def merge_honors(existing: List[HonorRecord], incoming: List[HonorRecord]) -> List[HonorRecord]:
    """
    Merge incoming records into a stored collection by (award_type, year, honor_id).

    A matching incoming record replaces the stored one in place; anything else
    is appended. Existing order is never re-sorted. Stored records that share a
    key are left for the resolver to collapse.
    """
    merged: List[HonorRecord] = list(existing)
    positions: Dict[HonorKey, int] = {}
    for idx, record in enumerate(merged):
        if record.honor_id is not None:
            positions.setdefault(record.key, idx)

    for record in incoming:
        if record.honor_id is None:
            merged.append(record)
            continue
        idx = positions.get(record.key)
        if idx is None:
            positions[record.key] = len(merged)
            merged.append(record)
        else:
            merged[idx] = _carry_over(merged[idx], record)
    return merged
