"""
Errors raised across the layers.

Everything derives from GameError, so the service (and whatever sits on top of it) can catch a single type.
"""


class GameError(Exception):
    """Base class for everything that goes wrong while playing a game."""


class InvalidCoordinateError(GameError, ValueError):
    """A square outside of the board (or a string that cannot be read as a square)."""


class IllegalMoveError(GameError):
    """The requested move is not in the set of legal moves of the player to move."""


class PromotionChoiceRequiredError(GameError):
    """A pawn reaches the last rank, but the caller did not say what it should become."""


class GameStateError(GameError):
    """The game is not in a state that allows the request (ex. it is already over)."""


class InvariantViolationError(GameError):
    """
    Programmer error inside the engine.

    Raised when the null move gets executed, when a king is missing or when a Builder gets reused.
    Never caught by the engine itself.
    """


class InvalidFENError(GameError):
    """String cannot be interpreted as (the supported part of) a FEN string."""


class InvalidRequestError(GameError):
    """Request model failed validation at the boundary."""


class RepositoryError(GameError):
    """Requested game does not exist in the repository."""
