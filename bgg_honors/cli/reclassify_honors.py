"""
Re-infer the category of every stored honor and rewrite collections that change.

Usage:
    python -m bgg_honors.cli.reclassify_honors --dry-run
    python -m bgg_honors.cli.reclassify_honors --report out/reclassify.json
"""
from __future__ import annotations

import argparse
import asyncio
import json
import logging
from pathlib import Path
from typing import Sequence

from bgg_honors.cli.sync_honors import print_summary
from bgg_honors.config import MAX_WORKERS, load_award_rules
from bgg_honors.repositories.game_repository import GameHonorsRepository
from bgg_honors.services.honor_pipeline import HonorPipeline

logger = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Reclassify stored honors from their own labels")
    parser.add_argument("--dry-run", action="store_true", help="Compute changes without writing")
    parser.add_argument("--no-verify", action="store_true", help="Skip the integrity check")
    parser.add_argument("--workers", type=int, default=MAX_WORKERS)
    parser.add_argument("--rules", type=Path, default=None, help="JSON award rule overrides")
    parser.add_argument("--report", type=Path, default=None, help="Write the summary as JSON")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    pipeline = HonorPipeline(
        GameHonorsRepository(),
        rules=load_award_rules(args.rules),
        max_workers=args.workers,
    )
    summary = asyncio.run(pipeline.reclassify_stored(apply=not args.dry_run, verify=not args.no_verify))
    print_summary(summary, dry_run=args.dry_run, title="Honor reclassification")

    if args.report:
        args.report.parent.mkdir(parents=True, exist_ok=True)
        args.report.write_text(json.dumps(summary.as_dict(), ensure_ascii=False, indent=2), encoding="utf-8")
        logger.info("Report written to %s", args.report)

    return 1 if summary.failures else 0


if __name__ == "__main__":
    raise SystemExit(main())
