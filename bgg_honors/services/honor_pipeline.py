"""
End-to-end honor sync: build, aggregate, merge, resolve, write, verify.

Per-game work runs concurrently (bounded by a semaphore) with blocking store
calls pushed to threads. Verification runs once every game has finished.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from bgg_honors.config import MAX_WORKERS, STORE_BACKOFF, STORE_MAX_RETRIES, AwardRule
from bgg_honors.aggregators.honor_aggregator import group_by_game, merge_honors
from bgg_honors.models.honor import HonorRecord, RawHonorEntry
from bgg_honors.repositories.game_repository import GameHonors, GameHonorsRepository, StoreError
from bgg_honors.services.honor_builder import HonorBuilder
from bgg_honors.services.honor_reclassifier import reclassify_honors
from bgg_honors.services.honor_resolver import Resolution, resolve_honors
from bgg_honors.utils.retry import call_with_retry
from bgg_honors.validators.honor_integrity_validator import VerificationReport, verify_corpus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameFailure:
    bgg_id: Optional[int]
    stage: str
    message: str


@dataclass
class PipelineSummary:
    entries_total: int = 0
    entries_skipped: int = 0
    records_built: int = 0
    games_processed: int = 0
    games_updated: int = 0
    games_created: int = 0
    games_unchanged: int = 0
    games_missing: int = 0
    games_failed: int = 0
    dropped_specials: int = 0
    dropped_duplicates: int = 0
    honors_reclassified: int = 0
    failures: List[GameFailure] = field(default_factory=list)
    report: Optional[VerificationReport] = None

    def as_dict(self) -> Dict[str, Any]:
        return {
            "entries_total": self.entries_total,
            "entries_skipped": self.entries_skipped,
            "records_built": self.records_built,
            "games_processed": self.games_processed,
            "games_updated": self.games_updated,
            "games_created": self.games_created,
            "games_unchanged": self.games_unchanged,
            "games_missing": self.games_missing,
            "games_failed": self.games_failed,
            "dropped_specials": self.dropped_specials,
            "dropped_duplicates": self.dropped_duplicates,
            "honors_reclassified": self.honors_reclassified,
            "failures": [asdict(f) for f in self.failures],
            "report": self.report.as_dict() if self.report else None,
        }


class HonorPipeline:
    """
    Sync scraped honors into per-game collections.

    `create_missing` inserts games the store does not know yet, named after
    the first record's `game_name`. `hard_replace` rebuilds each touched
    collection from the incoming records only instead of merging.
    """

    def __init__(
        self,
        store: GameHonorsRepository,
        *,
        rules: Optional[Mapping[str, AwardRule]] = None,
        max_workers: int = MAX_WORKERS,
        retry_attempts: int = STORE_MAX_RETRIES,
        retry_backoff: float = STORE_BACKOFF,
        created_at: Optional[str] = None,
        create_missing: bool = False,
        hard_replace: bool = False,
    ):
        self.store = store
        self.rules = rules
        self.max_workers = max(1, max_workers)
        self.retry_attempts = retry_attempts
        self.retry_backoff = retry_backoff
        self.create_missing = create_missing
        self.hard_replace = hard_replace
        self.builder = HonorBuilder(created_at=created_at, rules=rules)

    async def _store_call(self, func, *args):
        return await call_with_retry(func, *args, attempts=self.retry_attempts, backoff=self.retry_backoff)

    async def _replace(self, bgg_id: int, honors: List[HonorRecord]) -> None:
        if not await self._store_call(self.store.replace_honors, bgg_id, honors):
            raise StoreError(f"game {bgg_id} not found")

    def build_records(
        self,
        entries: Iterable[RawHonorEntry],
        summary: PipelineSummary,
        award_types: Optional[Sequence[str]] = None,
    ) -> Dict[int, List[HonorRecord]]:
        wanted = {a.lower() for a in award_types} if award_types else None
        pairs = []
        for entry in entries:
            summary.entries_total += 1
            built = self.builder.build(entry)
            if not built:
                summary.entries_skipped += 1
                logger.debug("Skipped honor entry %s (%s)", entry.id, entry.slug)
                continue
            for bgg_id, record in built:
                if wanted is not None and record.award_type.lower() not in wanted:
                    continue
                pairs.append((bgg_id, record))
        summary.records_built = len(pairs)
        return group_by_game(pairs)

    @staticmethod
    def _count_drops(resolution: Resolution, summary: PipelineSummary) -> None:
        summary.dropped_specials += len(resolution.dropped_specials)
        summary.dropped_duplicates += len(resolution.dropped_duplicates)

    async def _create_game(
        self,
        bgg_id: int,
        incoming: List[HonorRecord],
        *,
        apply: bool,
        summary: PipelineSummary,
        planned: Dict[int, List[HonorRecord]],
    ) -> None:
        resolution = resolve_honors(incoming)
        self._count_drops(resolution, summary)
        planned[bgg_id] = resolution.honors
        if apply:
            name = next((h.game_name for h in incoming if h.game_name), None) or f"BGG {bgg_id}"
            await self._store_call(self.store.save_game, bgg_id, name, resolution.honors)
        summary.games_created += 1
        logger.info("Game %s created with %d honors", bgg_id, len(resolution.honors))

    async def _process_game(
        self,
        bgg_id: int,
        incoming: List[HonorRecord],
        *,
        apply: bool,
        summary: PipelineSummary,
        planned: Dict[int, List[HonorRecord]],
    ) -> None:
        stage = "fetch"
        try:
            game = await self._store_call(self.store.fetch_game_by_id, bgg_id)
            if game is None:
                if self.create_missing:
                    stage = "create"
                    await self._create_game(bgg_id, incoming, apply=apply, summary=summary, planned=planned)
                    return
                summary.games_missing += 1
                logger.warning("Game %s not in store; %d honors not applied", bgg_id, len(incoming))
                return

            stage = "resolve"
            base = [] if self.hard_replace else game.honors
            resolution = resolve_honors(merge_honors(base, incoming))
            self._count_drops(resolution, summary)
            planned[bgg_id] = resolution.honors

            if resolution.honors == game.honors:
                summary.games_unchanged += 1
                return

            if apply:
                stage = "replace"
                await self._replace(bgg_id, resolution.honors)
            summary.games_updated += 1
            logger.info("Game %s: %d -> %d honors", bgg_id, len(game.honors), len(resolution.honors))
        except Exception as exc:
            summary.games_failed += 1
            summary.failures.append(GameFailure(bgg_id, stage, str(exc)))
            logger.error("Game %s failed at %s: %s", bgg_id, stage, exc)
        finally:
            summary.games_processed += 1

    async def _reclassify_game(
        self,
        game: GameHonors,
        *,
        apply: bool,
        summary: PipelineSummary,
        planned: Dict[int, List[HonorRecord]],
    ) -> None:
        stage = "reclassify"
        try:
            honors, changed = reclassify_honors(game.honors)
            resolution = resolve_honors(honors)
            self._count_drops(resolution, summary)
            planned[game.bgg_id] = resolution.honors

            if resolution.honors == game.honors:
                summary.games_unchanged += 1
                return

            summary.honors_reclassified += changed
            if apply:
                stage = "replace"
                await self._replace(game.bgg_id, resolution.honors)
            summary.games_updated += 1
            logger.info("Game %s: %d honor(s) reclassified", game.bgg_id, changed)
        except Exception as exc:
            summary.games_failed += 1
            summary.failures.append(GameFailure(game.bgg_id, stage, str(exc)))
            logger.error("Game %s failed at %s: %s", game.bgg_id, stage, exc)
        finally:
            summary.games_processed += 1

    async def _verify(
        self,
        planned: Dict[int, List[HonorRecord]],
        *,
        apply: bool,
        award_types: Optional[Sequence[str]],
        summary: PipelineSummary,
    ) -> Optional[VerificationReport]:
        try:
            games = await self._store_call(self.store.fetch_games_with_honors)
        except Exception as exc:
            summary.failures.append(GameFailure(None, "verify", str(exc)))
            logger.error("Verification skipped, corpus fetch failed: %s", exc)
            return None

        corpus: Dict[int, List[HonorRecord]] = {g.bgg_id: g.honors for g in games}
        if not apply:
            # dry-run: verify what the store would hold after this run
            corpus.update(planned)
        return verify_corpus(corpus.items(), self.rules, award_types=award_types)

    async def _finish(
        self,
        summary: PipelineSummary,
        planned: Dict[int, List[HonorRecord]],
        *,
        apply: bool,
        verify: bool,
        award_types: Optional[Sequence[str]],
    ) -> PipelineSummary:
        if verify:
            summary.report = await self._verify(
                planned, apply=apply, award_types=award_types, summary=summary
            )
            if summary.report and not summary.report.ok:
                logger.warning("Integrity check found %d violation(s)", len(summary.report.violations))
        return summary

    async def run(
        self,
        entries: Iterable[RawHonorEntry],
        *,
        apply: bool = True,
        verify: bool = True,
        award_types: Optional[Sequence[str]] = None,
    ) -> PipelineSummary:
        summary = PipelineSummary()
        per_game = self.build_records(entries, summary, award_types)
        logger.info(
            "Built %d honor records for %d games from %d entries",
            summary.records_built, len(per_game), summary.entries_total,
        )

        planned: Dict[int, List[HonorRecord]] = {}
        semaphore = asyncio.Semaphore(self.max_workers)

        async def runner(bgg_id: int, incoming: List[HonorRecord]):
            async with semaphore:
                await self._process_game(bgg_id, incoming, apply=apply, summary=summary, planned=planned)

        await asyncio.gather(*(runner(bgg_id, recs) for bgg_id, recs in per_game.items()))
        return await self._finish(summary, planned, apply=apply, verify=verify, award_types=award_types)

    async def reclassify_stored(
        self,
        *,
        apply: bool = True,
        verify: bool = True,
        award_types: Optional[Sequence[str]] = None,
    ) -> PipelineSummary:
        """Re-infer categories across every stored collection, then resolve and verify as in `run`."""
        summary = PipelineSummary()
        try:
            games = await self._store_call(self.store.fetch_games_with_honors)
        except Exception as exc:
            summary.failures.append(GameFailure(None, "fetch", str(exc)))
            logger.error("Reclassification aborted, corpus fetch failed: %s", exc)
            return summary

        planned: Dict[int, List[HonorRecord]] = {}
        semaphore = asyncio.Semaphore(self.max_workers)

        async def runner(game: GameHonors):
            async with semaphore:
                await self._reclassify_game(game, apply=apply, summary=summary, planned=planned)

        await asyncio.gather(*(runner(game) for game in games))
        return await self._finish(summary, planned, apply=apply, verify=verify, award_types=award_types)
