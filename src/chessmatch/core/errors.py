"""Exception hierarchy.

Everything derived from :class:`ChessError` is recoverable: front-ends show
the message and re-prompt the same turn.  :class:`BoardError` subclasses that
are not chess errors signal misuse of the grid itself.
"""

from __future__ import annotations


class BoardError(Exception):
    """Grid bookkeeping failure."""


class OutOfBoundsError(BoardError, IndexError):
    """Coordinate outside the board."""


class OccupiedCellError(BoardError):
    """Attempt to place a piece on a cell that already holds one."""


class ChessError(BoardError):
    """Base class for caller-recoverable rule violations."""


class InvalidCoordinateError(ChessError, ValueError):
    """Algebraic text outside a1..h8 or malformed."""


class EmptySourceError(ChessError):
    """No piece on the chosen source square."""


class WrongOwnerError(ChessError):
    """Source piece belongs to the side not on move."""


class NoLegalMovesError(ChessError):
    """Source piece has no destination at all."""


class IllegalTargetError(ChessError):
    """Target is not reachable by the source piece."""


class SelfCheckError(ChessError):
    """The move would leave the mover's own king attacked."""


class NothingToPromoteError(ChessError):
    """Promotion requested while no promotion is pending."""


class GameOverError(ChessError):
    """Move submitted after checkmate."""


class SnapshotError(ChessError, ValueError):
    """A persisted match snapshot could not be decoded."""
