"""
Exceptions raised by the outer layers (and the hardened engine entry points).

NOTE: the pure engine queries never raise. Off-board squares, own pieces on the target square etc. simply give False / an empty list.
"""


class GameError(Exception):
    """Base class for everything this package raises on purpose."""


class InvalidMoveRequestError(GameError):
    """A move was requested that the rules do not allow (or there is no piece to move)."""


class InvalidFENError(GameError):
    """String cannot be read as (the placement part of) a FEN."""


class BoardDecodeError(GameError):
    """Stored board state could not be turned back into a Board."""


class GameStateError(GameError):
    """Action not allowed in the current phase/status of the game."""


class NotYourTurnError(GameError):
    """Player tried to act while it is the opponent's turn."""


class InvalidRequestError(GameError):
    """Request data did not pass validation."""


class RepositoryError(GameError):
    """Record could not be found / stored."""


class OracleError(GameError):
    """The external move-search process failed or answered something unreadable."""
