from typing import Optional, Sequence

from charades.models import Game, GamePlayer
from .errors import NoPlayersOnTeam


def actor_for(players: Sequence[GamePlayer], counter: int) -> GamePlayer:
    """Round-robin pick: ``players[counter mod len(players)]``.

    ``players`` must already be sorted by turn order.
    """
    if not players:
        raise NoPlayersOnTeam()
    return players[counter % len(players)]


def current_actor(game: Game) -> GamePlayer:
    team = game.current_team
    return actor_for(game.team_players(team), game.actor_index(team))


def current_actor_id(game: Game) -> Optional[int]:
    """Like current_actor, but None when the acting team is empty."""
    players = game.team_players(game.current_team)
    if not players:
        return None
    return actor_for(players, game.actor_index(game.current_team)).user_id


def advance(game: Game, team: int) -> int:
    """Move ``team`` on to its next actor. Called once per finished turn of that team."""
    new_index = game.actor_index(team) + 1
    game.set_actor_index(team, new_index)
    return new_index
