"""Typed outcomes raised by the game engine.

Every error carries a stable ``code`` so callers can react precisely, and the
HTTP status the API layer answers with.
"""


class GameError(Exception):
    code = 'game_error'
    http_status = 400

    def __init__(self, message=None):
        super().__init__(message or self.__class__.__doc__)
        self.message = message or self.__class__.__doc__

    def to_dict(self):
        return {'error': self.message, 'code': self.code}


class NotFound(GameError):
    """Not found"""
    code = 'not_found'
    http_status = 404


class InvalidState(GameError):
    """Game is not in a state that allows this operation"""
    code = 'invalid_state'
    http_status = 409


class SelfJoin(GameError):
    """Cannot join your own game"""
    code = 'self_join'
    http_status = 409


class NotYourTurn(GameError):
    """Not your turn"""
    code = 'not_your_turn'
    http_status = 403


class IllegalMove(GameError):
    """Invalid move"""
    code = 'illegal_move'
    http_status = 409


class OutOfBounds(IllegalMove):
    """Invalid move: cell is out of bounds"""


class CellOccupied(IllegalMove):
    """Cell is already occupied"""


class NameConflict(GameError):
    """Player with this name already exists"""
    code = 'name_conflict'
    http_status = 409


class StoreUnavailable(GameError):
    """Storage is temporarily unavailable, try again"""
    code = 'unavailable'
    http_status = 503
