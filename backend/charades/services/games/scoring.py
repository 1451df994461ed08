from typing import Optional, Tuple

from flask import current_app

from charades.models import Game, FINISHED, TurnState


def add_point(game: Game, team: int) -> Tuple[int, Optional[int]]:
    """Give ``team`` one point.

    Returns ``(new_score, winner)``. ``winner`` is set only when the new
    score reaches the game's winning score, in which case the game is
    finished and any word in flight is cleared.
    """
    new_score = game.score_of(team) + 1
    game.set_score(team, new_score)
    if new_score >= game.winning_score:
        finish(game, winner=team)
        current_app.logger.info(f"[game-over] game={game.id} winner={team} score={new_score}")
        return new_score, team
    return new_score, None


def revoke(game: Game, team: int, amount: int) -> int:
    """Take up to ``amount`` points away from ``team``; scores never go below zero.

    Returns the number of points actually removed.
    """
    if amount <= 0:
        return 0
    current = game.score_of(team)
    removed = min(current, amount)
    game.set_score(team, current - removed)
    current_app.logger.info(f"[revoke] game={game.id} team={team} requested={amount} removed={removed}")
    return removed


def leader(game: Game) -> Optional[int]:
    """Team with the higher score, None on a tie."""
    if game.team1_score > game.team2_score:
        return 1
    if game.team2_score > game.team1_score:
        return 2
    return None


def finish(game: Game, winner: Optional[int] = None) -> None:
    game.status = FINISHED
    game.winner = winner if winner is not None else leader(game)
    game.current_word = None
    game.turn_started_at = None
    game.turn_state = TurnState.IDLE.value
