"""Turn engine: the per-game state machine for a playing game.

    IDLE ──start_turn──▶ ACTING ──mark_correct──▶ ACTING (next word drawn)
                           │                  └─▶ AWAITING_NEXT (manual draw / pool empty)
                           └──skip_word──▶ ACTING
    AWAITING_NEXT ──next_word / skip_word──▶ ACTING
    any ──end_turn──▶ IDLE (team switches, acting team's rotation advances)

Every operation runs inside ``locked_game`` and returns a plain dict that
the API layer serializes as-is. Expected endings (empty pool, game over,
no alternative word) are result flags; misuse raises a ``GameError``.
"""
import random
import time

from flask import current_app

from charades.models import Game, PLAYING, TurnState
from . import rotation, scoring, words
from .errors import (
    GameNotPlaying,
    InvalidArgument,
    NoActiveTurn,
    NoActiveWord,
    NotInGame,
    NotYourTurn,
    TurnExpired,
    TurnInProgress,
)
from .locking import locked_game


def _require_playing(game: Game) -> None:
    if game.status != PLAYING:
        raise GameNotPlaying()


def _require_actor(game: Game, requester_id: int) -> None:
    actor = rotation.current_actor(game)
    if actor.user_id != requester_id:
        raise NotYourTurn()


def turn_deadline(game: Game):
    if game.turn_started_at is None:
        return None
    return game.turn_started_at + game.turn_duration


def _check_deadline(game: Game, now: float) -> None:
    cfg = current_app.config
    if not cfg.get('ENFORCE_TURN_DEADLINE'):
        return
    deadline = turn_deadline(game)
    grace = int(cfg.get('TURN_DEADLINE_GRACE_SEC', 0))
    if deadline is not None and now > deadline + grace:
        raise TurnExpired()


def _assign(game: Game, word: str) -> None:
    game.current_word = word
    game.turn_state = TurnState.ACTING.value


def _draw_or_recycle(game: Game, rng):
    """Draw a word; on an empty pool either start a new round or return None."""
    word = words.draw_next(game, rng)
    if word is None and current_app.config.get('RECYCLE_WORDS'):
        reset = words.reset_words(game)
        if reset:
            game.current_round = (game.current_round or 1) + 1
            current_app.logger.info(f"[words-reset] game={game.id} round={game.current_round} words={reset}")
            word = words.draw_next(game, rng)
    return word


def start_turn(game_id, requester_id, rng=random, clock=time.time):
    with locked_game(game_id) as game:
        _require_playing(game)
        if game.phase != TurnState.IDLE:
            raise TurnInProgress()
        _require_actor(game, requester_id)

        word = _draw_or_recycle(game, rng)
        if word is None:
            scoring.finish(game)
            current_app.logger.info(f"[finish] game={game.id} reason=words_exhausted winner={game.winner}")
            return {'finished': True, 'winner': game.winner}

        _assign(game, word)
        game.turn_started_at = clock()
        current_app.logger.info(
            f"[turn-start] game={game.id} team={game.current_team} actor={requester_id} round={game.current_round}"
        )
        return {
            'word': word,
            'turn_duration': game.turn_duration,
            'turn_started_at': game.turn_started_at,
        }


def mark_correct(game_id, requester_id, rng=random, clock=time.time):
    with locked_game(game_id) as game:
        _require_playing(game)
        _require_actor(game, requester_id)
        if not game.current_word:
            raise NoActiveWord()
        _check_deadline(game, clock())

        team = game.current_team
        guessed = game.current_word
        words.mark_guessed(game, guessed, team)
        new_score, winner = scoring.add_point(game, team)
        current_app.logger.info(f"[correct] game={game.id} team={team} word={guessed} score={new_score}")
        if winner is not None:
            return {'word': None, 'new_score': new_score, 'game_over': True, 'winner': winner}

        if not current_app.config.get('AUTO_DRAW_NEXT_WORD', True):
            game.current_word = None
            game.turn_state = TurnState.AWAITING_NEXT.value
            result = {'word': None, 'new_score': new_score}
            if words.words_remaining(game) == 0:
                result['no_more_words'] = True
            return result

        next_word = words.draw_next(game, rng)
        if next_word is None:
            game.current_word = None
            game.turn_state = TurnState.AWAITING_NEXT.value
            return {'word': None, 'new_score': new_score, 'no_more_words': True}
        _assign(game, next_word)
        return {'word': next_word, 'new_score': new_score}


def next_word(game_id, requester_id, rng=random):
    with locked_game(game_id) as game:
        _require_playing(game)
        _require_actor(game, requester_id)
        if game.phase == TurnState.IDLE:
            raise NoActiveTurn()
        if game.phase == TurnState.ACTING:
            return {'word': game.current_word}
        word = words.draw_next(game, rng)
        if word is None:
            return {'word': None, 'finished': True}
        _assign(game, word)
        return {'word': word}


def skip_word(game_id, requester_id, rng=random):
    with locked_game(game_id) as game:
        _require_playing(game)
        _require_actor(game, requester_id)
        if game.phase == TurnState.IDLE:
            raise NoActiveTurn()
        current = game.current_word
        word = words.draw_excluding(game, current, rng)
        if word is None:
            return {'word': current, 'no_alternative': True}
        _assign(game, word)
        current_app.logger.info(f"[skip] game={game.id} team={game.current_team} skipped={current}")
        return {'word': word}


def end_turn(game_id, requester_id, revoke_points=0):
    if revoke_points is None:
        revoke_points = 0
    if isinstance(revoke_points, bool) or not isinstance(revoke_points, int) or revoke_points < 0:
        raise InvalidArgument('revoke_points must be a non-negative integer')

    with locked_game(game_id) as game:
        _require_playing(game)
        if game.member(requester_id) is None and game.owner_id != requester_id:
            raise NotInGame()

        team = game.current_team
        revoked = scoring.revoke(game, team, revoke_points)
        rotation.advance(game, team)
        game.current_team = 2 if team == 1 else 1
        game.current_word = None
        game.turn_started_at = None
        game.turn_state = TurnState.IDLE.value
        current_app.logger.info(
            f"[turn-end] game={game.id} ended_team={team} next_team={game.current_team} revoked={revoked}"
        )
        return {'current_team': game.current_team, 'next_team': game.current_team, 'revoked': revoked}
