"""
Normalize a scraped honors export and merge it into per-game collections.

Usage:
    python -m bgg_honors.cli.sync_honors --input data/honors.json
    python -m bgg_honors.cli.sync_honors --input data/honors.json --dry-run --report out/sync.json
    python -m bgg_honors.cli.sync_honors --input data/honors.json --create-missing
"""
from __future__ import annotations

import argparse
import asyncio
import json
import logging
from pathlib import Path
from typing import Sequence

from bgg_honors.config import MAX_WORKERS, load_award_rules
from bgg_honors.db.engine import init_db
from bgg_honors.parsers.honor_entry_parser import load_raw_corpus
from bgg_honors.repositories.game_repository import GameHonorsRepository
from bgg_honors.services.honor_pipeline import HonorPipeline, PipelineSummary

logger = logging.getLogger(__name__)


def print_summary(summary: PipelineSummary, *, dry_run: bool, title: str = "Honor sync") -> None:
    mode = "DRY-RUN" if dry_run else "APPLY"
    print(f"\n{'=' * 60}")
    print(f"🏁 {title} finished ({mode})")
    print(f"   entries: {summary.entries_total} (skipped {summary.entries_skipped})")
    print(f"   records built: {summary.records_built}")
    print(
        f"   games: {summary.games_processed} processed, {summary.games_updated} updated, "
        f"{summary.games_created} created, "
        f"{summary.games_unchanged} unchanged, {summary.games_missing} missing, "
        f"{summary.games_failed} failed"
    )
    print(f"   dropped: {summary.dropped_specials} specials, {summary.dropped_duplicates} duplicates")
    if summary.honors_reclassified:
        print(f"   reclassified: {summary.honors_reclassified} honors")
    for failure in summary.failures:
        print(f"   ❌ {failure.bgg_id} [{failure.stage}] {failure.message}")
    if summary.report is not None:
        if summary.report.ok:
            print("   ✅ Integrity check passed")
        for v in summary.report.violations:
            print(f"   ⚠️  {v.award_type} {v.year}: {v.rule} ({v.detail})")
    print(f"{'=' * 60}\n")


async def sync_honors(args: argparse.Namespace) -> PipelineSummary:
    entries = load_raw_corpus(args.input)
    rules = load_award_rules(args.rules)
    if args.init_db:
        init_db()
    pipeline = HonorPipeline(
        GameHonorsRepository(),
        rules=rules,
        max_workers=args.workers,
        create_missing=args.create_missing,
        hard_replace=args.replace,
    )
    return await pipeline.run(
        entries,
        apply=not args.dry_run,
        verify=not args.no_verify,
        award_types=args.award_type,
    )


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Normalize scraped honors and merge them per game")
    parser.add_argument("--input", required=True, type=Path, help="Honors export (JSON array)")
    parser.add_argument("--dry-run", action="store_true", help="Compute changes without writing")
    parser.add_argument("--no-verify", action="store_true", help="Skip the integrity check")
    parser.add_argument(
        "--create-missing",
        action="store_true",
        help="Insert games that are not in the store yet",
    )
    parser.add_argument(
        "--replace",
        action="store_true",
        help="Rebuild each collection from the input instead of merging",
    )
    parser.add_argument("--workers", type=int, default=MAX_WORKERS)
    parser.add_argument(
        "--award-type",
        action="append",
        help="Only sync this award family (repeatable)",
    )
    parser.add_argument("--rules", type=Path, default=None, help="JSON award rule overrides")
    parser.add_argument("--report", type=Path, default=None, help="Write the summary as JSON")
    parser.add_argument("--init-db", action="store_true", help="Create tables before syncing")
    parser.add_argument("--verbose", action="store_true")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    summary = asyncio.run(sync_honors(args))
    print_summary(summary, dry_run=args.dry_run)

    if args.report:
        args.report.parent.mkdir(parents=True, exist_ok=True)
        args.report.write_text(json.dumps(summary.as_dict(), ensure_ascii=False, indent=2), encoding="utf-8")
        logger.info("Report written to %s", args.report)

    return 1 if summary.failures else 0


if __name__ == "__main__":
    raise SystemExit(main())
