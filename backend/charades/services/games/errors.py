"""Recoverable game errors.

Each carries the HTTP status the API layer answers with and a stable
``code`` clients can switch on. None of these are fatal: the request is
rejected and the game row is left as it was.
"""


class GameError(Exception):
    status_code = 400
    code = 'game_error'
    message = 'Request could not be completed'

    def __init__(self, message=None):
        super().__init__(message or self.message)


class InvalidArgument(GameError):
    code = 'invalid_argument'
    message = 'Invalid argument'


class NotFound(GameError):
    status_code = 404
    code = 'not_found'
    message = 'Not found'


class GameNotFound(NotFound):
    code = 'game_not_found'
    message = 'Game not found'


class WordNotFound(NotFound):
    code = 'word_not_found'
    message = 'Word not found'


class Forbidden(GameError):
    status_code = 403
    code = 'forbidden'
    message = 'Forbidden'


class NotCreator(Forbidden):
    code = 'not_creator'
    message = 'Only the creator can do that'


class NotYourTurn(Forbidden):
    code = 'not_your_turn'
    message = 'Not your turn to act'


class NotInGame(Forbidden):
    code = 'not_in_game'
    message = 'You are not in this game'


class NotAdmin(Forbidden):
    code = 'not_admin'
    message = 'Admin only'


class InvalidState(GameError):
    status_code = 409
    code = 'invalid_state'
    message = 'Not allowed in the current game state'


class GameNotWaiting(InvalidState):
    code = 'game_not_waiting'
    message = 'Game has already started'


class GameNotPlaying(InvalidState):
    code = 'game_not_playing'
    message = 'Game is not in progress'


class GameFinished(InvalidState):
    code = 'game_finished'
    message = 'Game is finished'


class TurnInProgress(InvalidState):
    code = 'turn_in_progress'
    message = 'A turn is already in progress'


class NoActiveTurn(InvalidState):
    code = 'no_active_turn'
    message = 'No turn in progress'


class NoActiveWord(InvalidState):
    code = 'no_active_word'
    message = 'No word is being acted'


class NoPlayersOnTeam(InvalidState):
    code = 'no_players_on_team'
    message = 'Team has no players'


class AlreadyJoined(InvalidState):
    code = 'already_joined'
    message = 'Already in game'


class TurnExpired(InvalidState):
    code = 'turn_expired'
    message = 'Turn time is up'


class Exhausted(GameError):
    status_code = 409
    code = 'exhausted'
    message = 'No words left'


class CatalogEmpty(Exhausted):
    code = 'catalog_empty'
    message = 'The word catalog is empty'
