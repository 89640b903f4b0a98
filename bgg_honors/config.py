"""
Runtime configuration for the honors pipeline.

Settings come from the environment (optionally a `.env` file). Award family
rules (winner uniqueness, nominee/recommended caps per era) are data, not
pipeline logic: defaults live here and can be overridden with a JSON file.
"""
from __future__ import annotations

import json
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("SUPABASE_DB_URL") or os.getenv("DATABASE_URL", "sqlite:///./data/bgg_honors.db")
DISABLE_SQLITE_WAL = os.getenv("DISABLE_SQLITE_WAL", "0") == "1"

MAX_WORKERS = int(os.getenv("HONORS_MAX_WORKERS", 4))
STORE_MAX_RETRIES = int(os.getenv("HONORS_STORE_MAX_RETRIES", 3))
STORE_BACKOFF = float(os.getenv("HONORS_STORE_BACKOFF", 1.5))

MIN_YEAR = int(os.getenv("HONORS_MIN_YEAR", 1970))
MAX_YEAR = int(os.getenv("HONORS_MAX_YEAR", 2030))

RULES_FILE = os.getenv("HONORS_RULES_FILE")

BGG_BASE_URL = "https://boardgamegeek.com"
HONOR_SOURCE = "scrape"


@dataclass(frozen=True)
class NomineeCap:
    """Nominee cap applying from `from_year` (inclusive) until the next era."""
    from_year: int
    cap: int


@dataclass(frozen=True)
class AwardRule:
    single_winner: bool = True
    nominee_caps: Tuple[NomineeCap, ...] = ()
    recommended_cap: Optional[int] = None
    infer_from_game_count: bool = False

    def nominee_cap_for(self, year: int) -> Optional[int]:
        cap: Optional[int] = None
        for era in sorted(self.nominee_caps, key=lambda item: item.from_year):
            if year >= era.from_year:
                cap = era.cap
        if cap is None and self.nominee_caps:
            # Years before the first configured era allow no nominees.
            return 0
        return cap


DEFAULT_RULE = AwardRule()

DEFAULT_AWARD_RULES: Dict[str, AwardRule] = {
    "Spiel des Jahres": AwardRule(
        nominee_caps=(NomineeCap(from_year=1999, cap=3),),
        recommended_cap=5,
    ),
    "Kennerspiel des Jahres": AwardRule(nominee_caps=(NomineeCap(from_year=2011, cap=3),)),
    "Kinderspiel des Jahres": AwardRule(nominee_caps=(NomineeCap(from_year=2001, cap=3),)),
    "Golden Geek": AwardRule(infer_from_game_count=True),
    # Co-equal winners every year
    "Mensa Select": AwardRule(single_winner=False),
    "Meeples Choice Award": AwardRule(single_winner=False),
}

RULE_KEYS = ("single_winner", "nominee_caps", "recommended_cap", "infer_from_game_count")


def _rule_from_dict(award_type: str, data: Mapping[str, Any], base: AwardRule) -> AwardRule:
    unknown = [key for key in data if key not in RULE_KEYS]
    if unknown:
        raise ValueError(f"Unknown rule keys for '{award_type}': {unknown}")

    overrides: Dict[str, Any] = {}
    if "single_winner" in data:
        overrides["single_winner"] = bool(data["single_winner"])
    if "infer_from_game_count" in data:
        overrides["infer_from_game_count"] = bool(data["infer_from_game_count"])
    if "recommended_cap" in data:
        value = data["recommended_cap"]
        overrides["recommended_cap"] = None if value is None else int(value)
    if "nominee_caps" in data:
        caps: List[NomineeCap] = []
        for era in data["nominee_caps"] or []:
            caps.append(NomineeCap(from_year=int(era["from_year"]), cap=int(era["cap"])))
        overrides["nominee_caps"] = tuple(caps)
    return replace(base, **overrides)


def load_award_rules(path: Optional[Path | str] = None) -> Dict[str, AwardRule]:
    """
    Return the award rule table, merged with JSON overrides when a file is given.

    File shape:
        {"Spiel des Jahres": {"recommended_cap": 6,
                              "nominee_caps": [{"from_year": 1999, "cap": 3}]}}
    """
    rules = dict(DEFAULT_AWARD_RULES)
    source = path or RULES_FILE
    if not source:
        return rules

    data = json.loads(Path(source).read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"Rules file must contain a JSON object: {source}")
    for award_type, rule_data in data.items():
        if not isinstance(rule_data, dict):
            raise ValueError(f"Rule for '{award_type}' must be an object")
        base = rules.get(award_type, DEFAULT_RULE)
        rules[award_type] = _rule_from_dict(award_type, rule_data, base)
    return rules


def rule_for(award_type: Optional[str], rules: Optional[Mapping[str, AwardRule]] = None) -> AwardRule:
    """Look up a rule by exact award family, then by family prefix (e.g. Golden Geek *)."""
    table = DEFAULT_AWARD_RULES if rules is None else rules
    if not award_type:
        return DEFAULT_RULE
    if award_type in table:
        return table[award_type]
    lowered = award_type.lower()
    for name, rule in table.items():
        if lowered.startswith(name.lower()):
            return rule
    return DEFAULT_RULE
