"""
Re-infer categories of stored honors.

Older collections were written by scrapes that lost the result word to
truncation, so their category can be wrong even when the record itself still
carries a usable marker. A corrected record keeps its previous category in
``original_category``.
"""
from __future__ import annotations

from dataclasses import replace
from typing import List, Tuple

from bgg_honors.models.honor import HonorRecord
from bgg_honors.services.award_classifier import classify_text


def reclassify_honor(record: HonorRecord) -> HonorRecord:
    """Return the record with a corrected category, or the record itself when nothing matched or it already agrees."""
    match = None
    for text in (record.result, record.position, record.slug, record.description, record.name):
        match = classify_text(text)
        if match:
            break
    if match is None or match[0] == record.category:
        return record

    category, label = match
    return replace(
        record,
        category=category,
        result=label,
        original_category=record.original_category or record.category.value,
    )


def reclassify_honors(honors: List[HonorRecord]) -> Tuple[List[HonorRecord], int]:
    """Reclassify a whole collection; returns the new list and how many records changed."""
    updated = [reclassify_honor(h) for h in honors]
    changed = sum(1 for before, after in zip(honors, updated) if before is not after)
    return updated, changed
