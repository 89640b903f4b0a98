"""
Store adapter for games and their honors collections.

Each call opens its own session from the factory, so one repository instance
can be shared by worker threads.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import InterfaceError, OperationalError, SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session

from bgg_honors.models.game import Game
from bgg_honors.models.honor import HonorRecord

logger = logging.getLogger(__name__)

TRANSIENT_ERRORS = (OperationalError, InterfaceError, PoolTimeoutError)


class StoreError(Exception):
    """A store read/write failed and retrying will not help."""


class TransientStoreError(StoreError):
    """A store read/write failed for a reason worth retrying (connection, timeout)."""


@dataclass
class GameHonors:
    bgg_id: int
    name: str
    honors: List[HonorRecord] = field(default_factory=list)


def _to_game_honors(game: Game) -> GameHonors:
    honors = [HonorRecord.from_dict(h) for h in (game.honors or []) if isinstance(h, dict)]
    return GameHonors(bgg_id=game.bgg_id, name=game.name, honors=honors)


def _wrap(exc: SQLAlchemyError, action: str) -> StoreError:
    if isinstance(exc, TRANSIENT_ERRORS):
        return TransientStoreError(f"{action}: {exc}")
    return StoreError(f"{action}: {exc}")


class GameHonorsRepository:
    def __init__(self, session_factory: Optional[Callable[[], Session]] = None):
        if session_factory is None:
            from bgg_honors.db.engine import get_session_factory
            session_factory = get_session_factory()
        self.session_factory = session_factory

    def fetch_games_with_honors(self) -> List[GameHonors]:
        """All games whose honors collection is non-empty, by bgg_id."""
        stmt = select(Game).where(Game.honors.is_not(None)).order_by(Game.bgg_id)
        try:
            with self.session_factory() as session:
                return [_to_game_honors(g) for g in session.execute(stmt).scalars() if g.honors]
        except SQLAlchemyError as exc:
            raise _wrap(exc, "fetch games with honors") from exc

    def fetch_game_by_id(self, bgg_id: int) -> Optional[GameHonors]:
        stmt = select(Game).where(Game.bgg_id == bgg_id)
        try:
            with self.session_factory() as session:
                game = session.execute(stmt).scalar_one_or_none()
                return _to_game_honors(game) if game else None
        except SQLAlchemyError as exc:
            raise _wrap(exc, f"fetch game {bgg_id}") from exc

    def fetch_game_names(self) -> List[tuple]:
        """(bgg_id, name) for every game; used by placeholder scans."""
        stmt = select(Game.bgg_id, Game.name).order_by(Game.bgg_id)
        try:
            with self.session_factory() as session:
                return [(row.bgg_id, row.name) for row in session.execute(stmt)]
        except SQLAlchemyError as exc:
            raise _wrap(exc, "fetch game names") from exc

    def replace_honors(self, bgg_id: int, honors: List[HonorRecord]) -> bool:
        """Overwrite the whole honors collection. Returns False when the game is unknown."""
        payload = [h.to_dict() for h in honors]
        stmt = (
            update(Game)
            .where(Game.bgg_id == bgg_id)
            .values(honors=payload, updated_at=func.now())
        )
        try:
            with self.session_factory() as session:
                result = session.execute(stmt)
                session.commit()
        except SQLAlchemyError as exc:
            raise _wrap(exc, f"replace honors for {bgg_id}") from exc
        return result.rowcount > 0

    def delete_game(self, bgg_id: int) -> bool:
        stmt = delete(Game).where(Game.bgg_id == bgg_id)
        try:
            with self.session_factory() as session:
                result = session.execute(stmt)
                session.commit()
        except SQLAlchemyError as exc:
            raise _wrap(exc, f"delete game {bgg_id}") from exc
        logger.info("Deleted game %s (rows=%s)", bgg_id, result.rowcount)
        return result.rowcount > 0

    def save_game(self, bgg_id: int, name: str, honors: Optional[List[HonorRecord]] = None) -> GameHonors:
        """Get-or-create a game row; used by seeding and tests."""
        try:
            with self.session_factory() as session:
                game = session.execute(select(Game).where(Game.bgg_id == bgg_id)).scalar_one_or_none()
                if game is None:
                    game = Game(bgg_id=bgg_id, name=name, honors=[h.to_dict() for h in honors or []])
                    session.add(game)
                    session.commit()
                return _to_game_honors(game)
        except SQLAlchemyError as exc:
            raise _wrap(exc, f"save game {bgg_id}") from exc
