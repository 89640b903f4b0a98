"""
Pytest configuration shared across test modules.
Ensures the repository root is importable so `import bgg_honors` works consistently.
"""
from __future__ import annotations

import sys
import threading
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from bgg_honors.models.honor import HonorRecord  # noqa: E402
from bgg_honors.repositories.game_repository import GameHonors  # noqa: E402


class InMemoryGameStore:
    """
    Store double with the repository's operations.

    Honors are kept as dicts, so every read goes through the same
    to_dict/from_dict round trip as the JSON column. `fail` maps
    (operation, bgg_id) to a list of exceptions raised on successive calls.
    """

    def __init__(self):
        self.games = {}
        self.fail = {}
        self.calls = []
        self._lock = threading.Lock()

    def add_game(self, bgg_id, name, honors=None):
        self.games[bgg_id] = {"name": name, "honors": [h.to_dict() for h in honors or []]}

    def honors_of(self, bgg_id):
        return [HonorRecord.from_dict(h) for h in self.games[bgg_id]["honors"]]

    def _maybe_fail(self, operation, bgg_id):
        with self._lock:
            self.calls.append((operation, bgg_id))
            pending = self.fail.get((operation, bgg_id))
            if pending:
                raise pending.pop(0)

    def fetch_games_with_honors(self):
        self._maybe_fail("fetch_all", None)
        with self._lock:
            return [
                GameHonors(bgg_id, row["name"], [HonorRecord.from_dict(h) for h in row["honors"]])
                for bgg_id, row in sorted(self.games.items())
                if row["honors"]
            ]

    def fetch_game_by_id(self, bgg_id):
        self._maybe_fail("fetch", bgg_id)
        with self._lock:
            row = self.games.get(bgg_id)
            if row is None:
                return None
            return GameHonors(bgg_id, row["name"], [HonorRecord.from_dict(h) for h in row["honors"]])

    def fetch_game_names(self):
        with self._lock:
            return [(bgg_id, row["name"]) for bgg_id, row in sorted(self.games.items())]

    def replace_honors(self, bgg_id, honors):
        self._maybe_fail("replace", bgg_id)
        with self._lock:
            if bgg_id not in self.games:
                return False
            self.games[bgg_id]["honors"] = [h.to_dict() for h in honors]
            return True

    def delete_game(self, bgg_id):
        self._maybe_fail("delete", bgg_id)
        with self._lock:
            return self.games.pop(bgg_id, None) is not None

    def save_game(self, bgg_id, name, honors=None):
        self._maybe_fail("save", bgg_id)
        with self._lock:
            row = self.games.setdefault(bgg_id, {"name": name, "honors": [h.to_dict() for h in honors or []]})
            return GameHonors(bgg_id, row["name"], [HonorRecord.from_dict(h) for h in row["honors"]])


@pytest.fixture
def store():
    return InMemoryGameStore()
