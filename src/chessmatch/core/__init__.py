"""Core domain layer — pure chess rules with zero external dependencies.

Quick start::

    from chessmatch.core import Match

    match = Match()
    match.perform_chess_move("e2", "e4")
    print(match.current_player, match.check, match.checkmate)
"""

from chessmatch.core.board import Board
from chessmatch.core.enums import PROMOTION_TYPES, Color, PieceType
from chessmatch.core.errors import (
    BoardError,
    ChessError,
    EmptySourceError,
    GameOverError,
    IllegalTargetError,
    InvalidCoordinateError,
    NoLegalMovesError,
    NothingToPromoteError,
    OccupiedCellError,
    OutOfBoundsError,
    SelfCheckError,
    SnapshotError,
    WrongOwnerError,
)
from chessmatch.core.match import Match
from chessmatch.core.move_generator import MoveGenerator, MoveGrid
from chessmatch.core.piece import Piece
from chessmatch.core.position import Position
from chessmatch.core.rules import MoveResult, Rules
from chessmatch.core.serialization import (
    dumps,
    loads,
    position_from_dict,
    position_to_dict,
)
from chessmatch.core.types import (
    AlgebraicPosition,
    Coordinate,
    coordinate_name,
    parse_position,
)

__all__ = [
    # Enums
    "Color",
    "PieceType",
    "PROMOTION_TYPES",
    # Types / helpers
    "AlgebraicPosition",
    "Coordinate",
    "coordinate_name",
    "parse_position",
    # Domain objects
    "Board",
    "Match",
    "MoveGenerator",
    "MoveGrid",
    "MoveResult",
    "Piece",
    "Position",
    "Rules",
    # Snapshots
    "dumps",
    "loads",
    "position_from_dict",
    "position_to_dict",
    # Errors
    "BoardError",
    "ChessError",
    "EmptySourceError",
    "GameOverError",
    "IllegalTargetError",
    "InvalidCoordinateError",
    "NoLegalMovesError",
    "NothingToPromoteError",
    "OccupiedCellError",
    "OutOfBoundsError",
    "SelfCheckError",
    "SnapshotError",
    "WrongOwnerError",
]
