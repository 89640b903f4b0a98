"""
Honor domain types: raw scrape entries and normalized honor records.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from bgg_honors.config import HONOR_SOURCE


class HonorCategory(str, Enum):
    WINNER = "Winner"
    NOMINEE = "Nominee"
    SPECIAL = "Special"

    @classmethod
    def coerce(cls, value: Any) -> "HonorCategory":
        """Map stored category text (any case, legacy 'Recommended') onto the enum."""
        if isinstance(value, cls):
            return value
        text = str(value or "").strip().lower()
        for member in cls:
            if member.value.lower() == text:
                return member
        return cls.SPECIAL


@dataclass(frozen=True)
class BoardgameRef:
    bgg_id: Optional[int]
    name: Optional[str] = None


@dataclass
class RawHonorEntry:
    """One honor page as handed over by the scrape layer."""
    id: Optional[str]
    slug: Optional[str] = None
    title: Optional[str] = None
    award_set: Optional[str] = None
    position: Optional[str] = None
    year: Optional[int] = None
    url: Optional[str] = None
    boardgames: List[BoardgameRef] = field(default_factory=list)

    @property
    def is_usable(self) -> bool:
        return self.year is not None and bool((self.award_set or "").strip())


HonorKey = Tuple[Optional[str], Optional[int], Optional[str]]


@dataclass
class HonorRecord:
    year: int
    award_type: str
    category: HonorCategory
    honor_id: Optional[str] = None
    name: Optional[str] = None
    subcategory: Optional[str] = None
    result: Optional[str] = None
    source: str = HONOR_SOURCE
    validated: bool = False
    description: Optional[str] = None
    slug: Optional[str] = None
    url: Optional[str] = None
    award_set: Optional[str] = None
    position: Optional[str] = None
    game_name: Optional[str] = None
    created_at: Optional[str] = None
    original_category: Optional[str] = None

    @property
    def key(self) -> HonorKey:
        """Merge key shared by the aggregator and the hard-duplicate rule."""
        return (self.award_type, self.year, self.honor_id)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["category"] = self.category.value
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "HonorRecord":
        """Build a record from a stored honor dict, tolerating legacy shapes."""
        year = data.get("year")
        try:
            year = int(year) if year is not None else None
        except (TypeError, ValueError):
            year = None

        honor_id = data.get("honor_id", data.get("id"))
        return cls(
            year=year,
            award_type=data.get("award_type") or "",
            category=HonorCategory.coerce(data.get("category")),
            honor_id=str(honor_id) if honor_id is not None else None,
            name=data.get("name"),
            subcategory=data.get("subcategory"),
            result=data.get("result", data.get("result_raw")),
            source=data.get("source") or HONOR_SOURCE,
            validated=bool(data.get("validated", False)),
            description=data.get("description", data.get("title")),
            slug=data.get("slug"),
            url=data.get("url"),
            award_set=data.get("award_set"),
            position=data.get("position"),
            game_name=data.get("game_name"),
            created_at=data.get("created_at"),
            original_category=data.get("original_category", data.get("_originalCategory")),
        )
