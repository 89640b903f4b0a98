"""
Read-only integrity check over every stored honors collection.

Exits 1 when violations are found so it can gate a deploy or a cron job.
"""
from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Sequence

from bgg_honors.config import load_award_rules
from bgg_honors.repositories.game_repository import GameHonorsRepository
from bgg_honors.validators.honor_integrity_validator import VerificationReport, verify_corpus

logger = logging.getLogger(__name__)


def run_verification(repository, rules, award_types=None) -> VerificationReport:
    games = repository.fetch_games_with_honors()
    return verify_corpus(((g.bgg_id, g.honors) for g in games), rules, award_types=award_types)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Verify honor invariants across all games")
    parser.add_argument("--award-type", action="append", help="Limit to an award family (repeatable)")
    parser.add_argument("--rules", type=Path, default=None, help="JSON award rule overrides")
    parser.add_argument("--report", type=Path, default=None, help="Write violations as JSON")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    report = run_verification(GameHonorsRepository(), load_award_rules(args.rules), args.award_type)

    print(f"📋 Games scanned: {report.games_scanned}, award groups: {len(report.groups)}")
    if report.ok:
        print("✅ No violations")
    for v in report.violations:
        print(f"⚠️  {v.award_type} {v.year}: {v.rule} ({v.detail})")

    if args.report:
        args.report.parent.mkdir(parents=True, exist_ok=True)
        args.report.write_text(json.dumps(report.as_dict(), ensure_ascii=False, indent=2), encoding="utf-8")

    return 0 if report.ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
