"""
Game row holding the per-game honors collection.
"""
from __future__ import annotations

from typing import Any, Dict, List

from sqlalchemy import JSON, BigInteger, Index, Integer, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin

# JSONB on Postgres/Supabase, plain JSON text elsewhere
HonorsJSON = JSON().with_variant(JSONB(), "postgresql")


class Game(Base, TimestampMixin):
    """
    A BoardGameGeek game keyed by its external id.
    `honors` is an ordered list of honor dicts, always replaced wholesale.
    """
    __tablename__ = "games"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    bgg_id: Mapped[int] = mapped_column(BigInteger, nullable=False, unique=True, comment="BoardGameGeek id")
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    honors: Mapped[List[Dict[str, Any]]] = mapped_column(HonorsJSON, nullable=False, default=list)

    __table_args__ = (
        Index("idx_games_name", "name"),
    )

    def __repr__(self) -> str:
        return f"<Game(bgg_id={self.bgg_id}, name='{self.name}', honors={len(self.honors or [])})>"
