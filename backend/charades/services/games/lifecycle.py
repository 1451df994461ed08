import random
import time
from typing import Optional

from flask import current_app
from sqlalchemy import func

from charades import db
from charades.models import Game, GamePlayer, GameWord, TEAMS, WAITING, PLAYING, FINISHED, TurnState
from . import rotation, scoring, words
from .errors import (
    AlreadyJoined,
    GameFinished,
    GameNotFound,
    GameNotWaiting,
    InvalidArgument,
    NoPlayersOnTeam,
    NotCreator,
)
from .locking import locked_game
from .turns import turn_deadline


def _positive_int(value, name, default):
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidArgument(f'{name} must be a positive integer')
    return value


def _text(value, name, default):
    if value is None:
        return default
    if not isinstance(value, str):
        raise InvalidArgument(f'{name} must be a string')
    return value.strip() or default


def _check_team(team) -> int:
    if isinstance(team, bool) or team not in TEAMS:
        raise InvalidArgument('team must be 1 or 2')
    return team


def find_game(id_or_code) -> Game:
    """Look a game up by numeric id or by join code.

    Join codes always contain a letter, so an all-digit key is an id.
    """
    key = str(id_or_code or '').strip()
    if not key:
        raise GameNotFound()
    if key.isdigit():
        game = db.session.get(Game, int(key))
    else:
        game = Game.query.filter_by(join_code=key.upper()).first()
    if game is None:
        raise GameNotFound()
    return game


def create_game(owner_id, name=None, team1_name=None, team2_name=None, turn_duration=None, winning_score=None):
    cfg = current_app.config
    game = Game(
        name=_text(name, 'name', 'New Game'),
        owner_id=owner_id,
        team1_name=_text(team1_name, 'team1_name', 'Team 1'),
        team2_name=_text(team2_name, 'team2_name', 'Team 2'),
        turn_duration=_positive_int(turn_duration, 'turn_duration', int(cfg.get('DEFAULT_TURN_DURATION_SEC', 30))),
        winning_score=_positive_int(winning_score, 'winning_score', int(cfg.get('DEFAULT_WINNING_SCORE', 30))),
        join_code_length=int(cfg.get('JOIN_CODE_LENGTH', 6)),
    )
    # The creator starts on team 1
    game.players.append(GamePlayer(user_id=owner_id, team=1, turn_order=1))
    db.session.add(game)
    db.session.commit()
    current_app.logger.info(f"[create] game={game.id} code={game.join_code} owner={owner_id}")
    return {'id': game.id, 'join_code': game.join_code}


def join_team(id_or_code, user_id, team):
    team = _check_team(team)
    game_id = find_game(id_or_code).id
    with locked_game(game_id) as game:
        if game.status == FINISHED:
            raise GameFinished()
        if game.member(user_id) is not None:
            raise AlreadyJoined()
        turn_order = len(game.team_players(team)) + 1
        game.players.append(GamePlayer(user_id=user_id, team=team, turn_order=turn_order))
        current_app.logger.info(f"[join] game={game.id} user={user_id} team={team} order={turn_order}")
        return {'success': True, 'game_id': game.id, 'team': team, 'turn_order': turn_order}


def start_game(game_id, requester_id, rng=random):
    with locked_game(game_id) as game:
        if game.owner_id != requester_id:
            raise NotCreator()
        if game.status != WAITING:
            raise GameNotWaiting()
        for team in TEAMS:
            if not game.team_players(team):
                raise NoPlayersOnTeam(f'{game.team_name(team)} has no players')

        batch = words.materialize(game, int(current_app.config.get('WORD_BATCH_SIZE', 100)), rng)
        game.status = PLAYING
        game.turn_state = TurnState.IDLE.value
        game.current_team = 1
        game.actor_index_team1 = 0
        game.actor_index_team2 = 0
        game.current_round = 1
        game.current_word = None
        game.turn_started_at = None
        current_app.logger.info(f"[start] game={game.id} words={batch}")
        return {'success': True, 'words': batch}


def end_game(game_id, requester_id):
    with locked_game(game_id) as game:
        if game.owner_id != requester_id:
            raise NotCreator()
        if game.status != FINISHED:
            scoring.finish(game)
            current_app.logger.info(f"[finish] game={game.id} reason=ended_by_creator winner={game.winner}")
        return {'success': True, 'winner': game.winner}


def delete_game(game_id, requester_id):
    with locked_game(game_id) as game:
        if game.owner_id != requester_id:
            raise NotCreator()
        gid = game.id
        db.session.delete(game)
        current_app.logger.info(f"[delete] game={gid}")
    return {'success': True}


def visible_word(game: Game, viewer_id: Optional[int]) -> Optional[str]:
    """The word in play if ``viewer_id`` is the current actor, else None."""
    if game.status != PLAYING or viewer_id is None:
        return None
    if viewer_id != rotation.current_actor_id(game):
        return None
    return game.current_word


def list_games(user_id):
    games = (
        Game.query.join(GamePlayer)
        .filter(GamePlayer.user_id == user_id)
        .order_by(Game.created_at.desc(), Game.id.desc())
        .all()
    )
    listed = []
    for g in games:
        payload = g.to_dict()
        payload['current_word'] = visible_word(g, user_id)
        listed.append(payload)
    return listed


def get_game(id_or_code, viewer_id: Optional[int] = None, clock=time.time):
    """Read-only projection for polling clients. Takes no lock.

    ``current_word`` is only revealed to the current actor.
    """
    game = find_game(id_or_code)
    actor_id = rotation.current_actor_id(game)
    payload = game.to_dict()
    payload['current_word'] = visible_word(game, viewer_id)
    payload['team1_players'] = [p.to_dict() for p in game.team_players(1)]
    payload['team2_players'] = [p.to_dict() for p in game.team_players(2)]
    payload['current_actor_id'] = actor_id if game.status == PLAYING else None
    payload['turn_deadline'] = turn_deadline(game)
    payload['seconds_left'] = (
        max(0, int(payload['turn_deadline'] - clock())) if payload['turn_deadline'] is not None else None
    )
    payload['is_creator'] = viewer_id is not None and viewer_id == game.owner_id
    member = game.member(viewer_id) if viewer_id is not None else None
    payload['viewer_team'] = member.team if member else None
    counts = dict(
        db.session.query(GameWord.guessed, func.count(GameWord.id))
        .filter(GameWord.game_id == game.id)
        .group_by(GameWord.guessed)
        .all()
    )
    payload['words_remaining'] = counts.get(False, 0)
    payload['words_guessed'] = counts.get(True, 0)
    return payload
