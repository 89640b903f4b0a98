"""CLI to find (and optionally delete) games whose name is an award description."""
from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path
from typing import Dict, List, Sequence, Tuple

from bgg_honors.parsers.honor_entry_parser import load_raw_corpus
from bgg_honors.repositories.game_repository import GameHonorsRepository, StoreError
from bgg_honors.services.award_classifier import derive_award_type
from bgg_honors.services.honor_pipeline import GameFailure
from bgg_honors.utils.retry import call_with_retry
from bgg_honors.validators.placeholder_detector import find_placeholder_games

logger = logging.getLogger(__name__)


def award_types_from_corpus(path: Path) -> List[str]:
    types = {derive_award_type(entry.award_set) for entry in load_raw_corpus(path)}
    return sorted(t for t in types if t)


async def _delete(repository, bgg_id: int, **retry) -> None:
    if not await call_with_retry(repository.delete_game, bgg_id, **retry):
        raise StoreError(f"game {bgg_id} not found")


async def cleanup(
    repository,
    award_types: Sequence[str],
    *,
    apply: bool,
    **retry,
) -> Tuple[List[Dict[str, object]], List[GameFailure]]:
    """
    Return the placeholder candidates and, when applying, the deletes that failed.

    Each delete is retried on transient errors; a failing game does not stop
    the others.
    """
    candidates = find_placeholder_games(repository.fetch_game_names(), award_types)
    failures: List[GameFailure] = []
    if not apply:
        return candidates, failures

    for candidate in candidates:
        bgg_id = candidate["bgg_id"]
        try:
            await _delete(repository, bgg_id, **retry)
            logger.info("Deleted placeholder game %s (%s)", bgg_id, candidate["name"])
        except StoreError as exc:
            failures.append(GameFailure(bgg_id, "delete", str(exc)))
            logger.error("Delete of game %s failed: %s", bgg_id, exc)
    return candidates, failures


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Remove placeholder games created from award pages")
    parser.add_argument("--input", required=True, type=Path, help="Honors export used to derive award names")
    parser.add_argument("--apply", action="store_true", help="Delete the candidates (default: list only)")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    award_types = award_types_from_corpus(args.input)
    candidates, failures = asyncio.run(cleanup(GameHonorsRepository(), award_types, apply=args.apply))

    print(f"📋 Placeholder candidates: {len(candidates)}")
    for c in candidates:
        print(f"   [{c['prefix']}] {c['bgg_id']} {c['name']}")
    for failure in failures:
        print(f"   ❌ {failure.bgg_id} [{failure.stage}] {failure.message}")
    if candidates and not args.apply:
        print("ℹ️  Dry run. Re-run with --apply to delete.")
    return 1 if failures else 0


if __name__ == "__main__":
    raise SystemExit(main())
