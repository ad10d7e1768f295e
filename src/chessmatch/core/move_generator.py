"""Pseudo-legal move generation + attack detection."""

from __future__ import annotations

from typing import TypeAlias

from chessmatch.core.board import Board
from chessmatch.core.enums import Color, PieceType
from chessmatch.core.piece import Piece
from chessmatch.core.types import Coordinate

MoveGrid: TypeAlias = list[list[bool]]

KNIGHT_OFFSETS: tuple[tuple[int, int], ...] = (
    (-2, -1),
    (-2, 1),
    (-1, -2),
    (-1, 2),
    (1, -2),
    (1, 2),
    (2, -1),
    (2, 1),
)

KING_OFFSETS: tuple[tuple[int, int], ...] = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)

BISHOP_DIRS: tuple[tuple[int, int], ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))
ROOK_DIRS: tuple[tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
QUEEN_DIRS: tuple[tuple[int, int], ...] = BISHOP_DIRS + ROOK_DIRS

_SLIDING_DIRS: dict[PieceType, tuple[tuple[int, int], ...]] = {
    PieceType.BISHOP: BISHOP_DIRS,
    PieceType.ROOK: ROOK_DIRS,
    PieceType.QUEEN: QUEEN_DIRS,
}

# Rows are counted from the top: white pawns walk toward row 0.
_PAWN_DIRECTION: dict[Color, int] = {Color.WHITE: -1, Color.BLACK: 1}

# Short castle: rook 3 columns right, king lands 2 right.
# Long castle: rook 4 columns left, king lands 2 left.
SHORT_CASTLE_ROOK_OFFSET = 3
LONG_CASTLE_ROOK_OFFSET = -4


def empty_grid(rows: int, columns: int) -> MoveGrid:
    return [[False] * columns for _ in range(rows)]


def grid_has_any(grid: MoveGrid) -> bool:
    return any(any(row) for row in grid)


def grid_coordinates(grid: MoveGrid) -> list[Coordinate]:
    """Marked cells in row-major order."""
    return [
        Coordinate(r, c)
        for r, row in enumerate(grid)
        for c, marked in enumerate(row)
        if marked
    ]


def en_passant_row(color: Color, rows: int) -> int:
    """Row a pawn of *color* must stand on to capture en passant."""
    return 3 if color == Color.WHITE else rows - 4


def promotion_row(color: Color, rows: int) -> int:
    """Far row a pawn of *color* promotes on."""
    return 0 if color == Color.WHITE else rows - 1


class MoveGenerator:
    """Computes pseudo-legal destinations for pieces on a :class:`Board`.

    Pseudo-legal means the movement pattern is respected but the mover's own
    king may be left attacked; :class:`~chessmatch.core.rules.Rules` filters
    those out by simulation.

    Args:
        board: Board to read.  Never mutated.
        en_passant_vulnerable: Id of the pawn that just made a double step,
            if any.
        check_color: Side currently flagged as in check; its king may not
            castle.
        verify_castling_transit: Also refuse castling through or into an
            attacked square.
    """

    __slots__ = ("_board", "_en_passant", "_check_color", "_verify_transit")

    def __init__(
        self,
        board: Board,
        *,
        en_passant_vulnerable: int | None = None,
        check_color: Color | None = None,
        verify_castling_transit: bool = False,
    ) -> None:
        self._board = board
        self._en_passant = en_passant_vulnerable
        self._check_color = check_color
        self._verify_transit = verify_castling_transit

    # -- Public API ---------------------------------------------------------

    def possible_moves(self, piece: Piece, *, castling: bool = True) -> MoveGrid:
        """Boolean grid of the board's size marking *piece*'s destinations."""
        if piece.position is None:
            raise ValueError(f"Piece {piece.id} is not on the board")
        board = self._board
        grid = empty_grid(board.rows, board.columns)
        kind = piece.kind

        if kind == PieceType.PAWN:
            self._gen_pawn(piece, grid)
        elif kind == PieceType.KNIGHT:
            self._gen_steps(piece, KNIGHT_OFFSETS, grid)
        elif kind == PieceType.KING:
            self._gen_steps(piece, KING_OFFSETS, grid)
            if castling:
                self._gen_castling(piece, grid)
        else:
            self._gen_sliding(piece, _SLIDING_DIRS[kind], grid)
        return grid

    def possible_move(self, piece: Piece, target: Coordinate) -> bool:
        if not self._board.position_exists(target):
            return False
        return self.possible_moves(piece)[target.row][target.column]

    def is_there_any_possible_move(self, piece: Piece) -> bool:
        return grid_has_any(self.possible_moves(piece))

    def is_there_opponent_piece(self, c: Coordinate, color: Color) -> bool:
        occupant = self._board.piece(c)
        return occupant is not None and occupant.color != color

    # -- Attack detection ---------------------------------------------------

    def is_in_check(self, color: Color) -> bool:
        """Is *color*'s king attacked by any opposing piece?"""
        king = self.king(color)
        assert king.position is not None
        return self.is_square_attacked(king.position, color.opposite)

    def is_square_attacked(self, c: Coordinate, by_color: Color) -> bool:
        """Is *c* reachable by a capture of any on-board piece of *by_color*?"""
        for attacker in self._board.pieces(by_color):
            if self._attacks(attacker)[c.row][c.column]:
                return True
        return False

    def king(self, color: Color) -> Piece:
        for piece in self._board.pieces(color):
            if piece.kind == PieceType.KING:
                return piece
        raise RuntimeError(f"There is no {color.name} king on the board")

    def _attacks(self, piece: Piece) -> MoveGrid:
        if piece.kind != PieceType.PAWN:
            return self.possible_moves(piece, castling=False)
        # Pawns capture diagonally whether or not the square is occupied.
        board = self._board
        grid = empty_grid(board.rows, board.columns)
        assert piece.position is not None
        direction = _PAWN_DIRECTION[piece.color]
        for side in (-1, 1):
            target = piece.position.offset(direction, side)
            if board.position_exists(target):
                grid[target.row][target.column] = True
        return grid

    # -- Piece-specific generators (private) -------------------------------

    def _can_land(self, target: Coordinate, color: Color) -> bool:
        board = self._board
        if not board.position_exists(target):
            return False
        occupant = board.piece(target)
        return occupant is None or occupant.color != color

    def _gen_steps(
        self,
        piece: Piece,
        offsets: tuple[tuple[int, int], ...],
        grid: MoveGrid,
    ) -> None:
        assert piece.position is not None
        for dr, dc in offsets:
            target = piece.position.offset(dr, dc)
            if self._can_land(target, piece.color):
                grid[target.row][target.column] = True

    def _gen_sliding(
        self,
        piece: Piece,
        directions: tuple[tuple[int, int], ...],
        grid: MoveGrid,
    ) -> None:
        board = self._board
        assert piece.position is not None
        for dr, dc in directions:
            target = piece.position.offset(dr, dc)
            while board.position_exists(target) and not board.there_is_a_piece(target):
                grid[target.row][target.column] = True
                target = target.offset(dr, dc)
            if board.position_exists(target) and self.is_there_opponent_piece(
                target, piece.color
            ):
                grid[target.row][target.column] = True

    def _gen_pawn(self, piece: Piece, grid: MoveGrid) -> None:
        board = self._board
        origin = piece.position
        assert origin is not None
        direction = _PAWN_DIRECTION[piece.color]

        one_step = origin.offset(direction, 0)
        if board.position_exists(one_step) and not board.there_is_a_piece(one_step):
            grid[one_step.row][one_step.column] = True
            two_step = origin.offset(2 * direction, 0)
            if (
                piece.move_count == 0
                and board.position_exists(two_step)
                and not board.there_is_a_piece(two_step)
            ):
                grid[two_step.row][two_step.column] = True

        for side in (-1, 1):
            diagonal = origin.offset(direction, side)
            if board.position_exists(diagonal) and self.is_there_opponent_piece(
                diagonal, piece.color
            ):
                grid[diagonal.row][diagonal.column] = True

        if self._en_passant is None or origin.row != en_passant_row(
            piece.color, board.rows
        ):
            return
        for side in (-1, 1):
            beside = origin.offset(0, side)
            if not board.position_exists(beside):
                continue
            victim = board.piece(beside)
            if (
                victim is not None
                and victim.color != piece.color
                and victim.id == self._en_passant
            ):
                landing = beside.offset(direction, 0)
                grid[landing.row][landing.column] = True

    def _gen_castling(self, king: Piece, grid: MoveGrid) -> None:
        if king.move_count != 0 or self._check_color == king.color:
            return
        origin = king.position
        assert origin is not None

        if self._castling_rook_ready(king, origin.offset(0, SHORT_CASTLE_ROOK_OFFSET)):
            between = [origin.offset(0, 1), origin.offset(0, 2)]
            if self._path_clear(king, between, between):
                grid[origin.row][origin.column + 2] = True

        if self._castling_rook_ready(king, origin.offset(0, LONG_CASTLE_ROOK_OFFSET)):
            between = [origin.offset(0, -1), origin.offset(0, -2), origin.offset(0, -3)]
            if self._path_clear(king, between, between[:2]):
                grid[origin.row][origin.column - 2] = True

    def _castling_rook_ready(self, king: Piece, c: Coordinate) -> bool:
        if not self._board.position_exists(c):
            return False
        rook = self._board.piece(c)
        return (
            rook is not None
            and rook.kind == PieceType.ROOK
            and rook.color == king.color
            and rook.move_count == 0
        )

    def _path_clear(
        self,
        king: Piece,
        empty: list[Coordinate],
        walked: list[Coordinate],
    ) -> bool:
        board = self._board
        if any(board.there_is_a_piece(c) for c in empty):
            return False
        if not self._verify_transit:
            return True
        opponent = king.color.opposite
        return not any(self.is_square_attacked(c, opponent) for c in walked)
