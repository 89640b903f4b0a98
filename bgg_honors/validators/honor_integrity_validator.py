"""
Corpus-wide integrity checks for honors.

Read-only. Needs the whole post-resolution corpus: winner uniqueness is a
cross-game property. Violations are reported for manual review; a duplicate
winner can be a real tie as easily as a scrape duplicate.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from bgg_honors.config import AwardRule, rule_for
from bgg_honors.models.honor import HonorCategory, HonorRecord

RULE_WINNER_COUNT = "winner-count"
RULE_NOMINEE_CAP = "nominee-cap"
RULE_RECOMMENDED_CAP = "recommended-cap"


@dataclass(frozen=True)
class Violation:
    year: int
    award_type: str
    rule: str
    detail: Any

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class GroupCounts:
    winners: List[int] = field(default_factory=list)
    nominees: List[int] = field(default_factory=list)
    specials: List[int] = field(default_factory=list)


@dataclass
class VerificationReport:
    games_scanned: int
    groups: Dict[Tuple[str, int], GroupCounts]
    violations: List[Violation]

    @property
    def ok(self) -> bool:
        return not self.violations

    def as_dict(self) -> Dict[str, Any]:
        return {
            "games_scanned": self.games_scanned,
            "groups": len(self.groups),
            "violations": [v.as_dict() for v in self.violations],
        }


def _collect(
    games: Iterable[Tuple[int, Sequence[HonorRecord]]],
    award_types: Optional[Sequence[str]],
) -> Tuple[int, Dict[Tuple[str, int], GroupCounts]]:
    groups: Dict[Tuple[str, int], GroupCounts] = {}
    scanned = 0
    wanted = {a.lower() for a in award_types} if award_types else None
    for bgg_id, honors in games:
        scanned += 1
        for honor in honors:
            if not honor.award_type or not isinstance(honor.year, int):
                continue
            if wanted is not None and honor.award_type.lower() not in wanted:
                continue
            counts = groups.setdefault((honor.award_type, honor.year), GroupCounts())
            if honor.category == HonorCategory.WINNER:
                counts.winners.append(bgg_id)
            elif honor.category == HonorCategory.NOMINEE:
                counts.nominees.append(bgg_id)
            else:
                counts.specials.append(bgg_id)
    return scanned, groups


def check_group(award_type: str, year: int, counts: GroupCounts, rule: AwardRule) -> List[Violation]:
    violations: List[Violation] = []

    if rule.single_winner and len(counts.winners) != 1:
        violations.append(Violation(year, award_type, RULE_WINNER_COUNT, len(counts.winners)))

    nominee_cap = rule.nominee_cap_for(year)
    if nominee_cap is not None and len(counts.nominees) > nominee_cap:
        violations.append(
            Violation(year, award_type, RULE_NOMINEE_CAP, f"{len(counts.nominees)} > {nominee_cap}")
        )

    if rule.recommended_cap is not None and len(counts.specials) > rule.recommended_cap:
        violations.append(
            Violation(
                year,
                award_type,
                RULE_RECOMMENDED_CAP,
                f"{len(counts.specials)} > {rule.recommended_cap}",
            )
        )
    return violations


def verify_corpus(
    games: Iterable[Tuple[int, Sequence[HonorRecord]]],
    rules: Optional[Mapping[str, AwardRule]] = None,
    *,
    award_types: Optional[Sequence[str]] = None,
) -> VerificationReport:
    """
    Verify (bgg_id, honors) pairs for every observed (award_type, year).

    Returns violations sorted by award type, then year.
    """
    scanned, groups = _collect(games, award_types)
    violations: List[Violation] = []
    for (award_type, year) in sorted(groups):
        rule = rule_for(award_type, rules)
        violations.extend(check_group(award_type, year, groups[(award_type, year)], rule))
    return VerificationReport(games_scanned=scanned, groups=groups, violations=violations)


__all__ = [
    "RULE_NOMINEE_CAP",
    "RULE_RECOMMENDED_CAP",
    "RULE_WINNER_COUNT",
    "VerificationReport",
    "Violation",
    "check_group",
    "verify_corpus",
]
