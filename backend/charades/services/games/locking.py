import threading
from contextlib import contextmanager
from typing import Dict, List

from charades import db
from charades.models import Game
from .errors import GameNotFound


_registry_lock = threading.Lock()
# game_id -> [lock, number of requests holding or waiting on it]
_game_locks: Dict[int, List] = {}


@contextmanager
def _hold(game_id: int):
    with _registry_lock:
        entry = _game_locks.setdefault(game_id, [threading.Lock(), 0])
        entry[1] += 1
    try:
        with entry[0]:
            yield
    finally:
        with _registry_lock:
            entry[1] -= 1
            if entry[1] == 0:
                _game_locks.pop(game_id, None)


@contextmanager
def locked_game(game_id):
    """Run one state transition on a game atomically.

    Holds the in-process lock for ``game_id`` and the database row lock
    (``SELECT ... FOR UPDATE``; a no-op on SQLite, which serializes writers
    anyway). Commits when the block exits cleanly, rolls back otherwise.
    """
    try:
        game_id = int(game_id)
    except (TypeError, ValueError):
        raise GameNotFound()
    with _hold(game_id):
        game = db.session.query(Game).filter_by(id=game_id).populate_existing().with_for_update().first()
        if game is None:
            raise GameNotFound()
        try:
            yield game
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
