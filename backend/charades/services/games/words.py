"""Word catalog and per-game word pools.

The catalog (``Word``) is shared by every game. When a game starts a batch
is sampled from it without replacement and copied into ``GameWord`` rows
owned by that game, so draws and guesses never touch another game's rows.
"""
import random
from typing import Iterable, List, Optional

from charades import db
from charades.models import Game, GameWord, Word
from .errors import CatalogEmpty, InvalidArgument, WordNotFound


DEFAULT_WORDS = (
    'elephant', 'dancing', 'swimming', 'airplane', 'basketball',
    'cooking', 'guitar', 'painting', 'sleeping', 'running',
    'jumping', 'fishing', 'singing', 'reading', 'driving',
    'robot', 'dinosaur', 'superhero', 'ninja', 'pirate',
    'monkey', 'penguin', 'giraffe', 'lion', 'snake',
    'pizza', 'hamburger', 'icecream', 'birthday', 'camping',
    'skateboarding', 'skiing', 'boxing', 'karate', 'juggling',
    'firefighter', 'doctor', 'teacher', 'chef', 'photographer',
    'rainbow', 'volcano', 'tornado', 'spaceship', 'helicopter',
)


def normalize_word(raw) -> str:
    if not isinstance(raw, str):
        raise InvalidArgument('Words must be strings')
    word = raw.strip().lower()
    if not word or len(word) > 64:
        raise InvalidArgument(f'Invalid word: {raw!r}')
    return word


# ---- Catalog ----

def list_words() -> List[str]:
    return [w.word for w in Word.query.order_by(Word.word).all()]


def add_words(raw_words: Iterable[str]) -> List[str]:
    """Insert words into the catalog, skipping ones already present. Returns the new ones."""
    wanted = []
    for raw in raw_words:
        word = normalize_word(raw)
        if word not in wanted:
            wanted.append(word)
    if not wanted:
        return []
    existing = {w.word for w in Word.query.filter(Word.word.in_(wanted)).all()}
    added = [w for w in wanted if w not in existing]
    for word in added:
        db.session.add(Word(word=word))
    db.session.commit()
    return added


def delete_word(raw: str) -> None:
    """Remove a word from the catalog. Pools already materialized keep their copy."""
    word = Word.query.filter_by(word=normalize_word(raw)).first()
    if word is None:
        raise WordNotFound()
    db.session.delete(word)
    db.session.commit()


# ---- Per-game pool ----

def materialize(game: Game, batch_size: int, rng=random) -> int:
    """Attach up to ``batch_size`` distinct catalog words to ``game`` as unguessed."""
    catalog = [w.word for w in Word.query.all()]
    if not catalog:
        raise CatalogEmpty()
    picked = rng.sample(catalog, min(batch_size, len(catalog)))
    for word in picked:
        db.session.add(GameWord(game_id=game.id, word=word))
    return len(picked)


def _unguessed(game: Game) -> List[str]:
    rows = GameWord.query.filter_by(game_id=game.id, guessed=False).order_by(GameWord.id).all()
    return [r.word for r in rows]


def words_remaining(game: Game) -> int:
    return GameWord.query.filter_by(game_id=game.id, guessed=False).count()


def draw_next(game: Game, rng=random) -> Optional[str]:
    """A uniformly random unguessed word, or None when the pool is exhausted."""
    return draw_excluding(game, None, rng)


def draw_excluding(game: Game, current_word: Optional[str], rng=random) -> Optional[str]:
    """Like draw_next but never returns ``current_word``; None means no alternative."""
    candidates = [w for w in _unguessed(game) if w != current_word]
    if not candidates:
        return None
    return rng.choice(candidates)


def mark_guessed(game: Game, word: str, team: int) -> bool:
    entry = GameWord.query.filter_by(game_id=game.id, word=word, guessed=False).first()
    if entry is None:
        return False
    entry.guessed = True
    entry.guessed_by_team = team
    return True


def reset_words(game: Game) -> int:
    """Mark every entry of the game's pool unguessed again."""
    return GameWord.query.filter_by(game_id=game.id, guessed=True).update(
        {'guessed': False, 'guessed_by_team': None}, synchronize_session='fetch'
    )
