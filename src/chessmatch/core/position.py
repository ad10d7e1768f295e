"""Position — complete match state (board + turn metadata)."""

from __future__ import annotations

from dataclasses import dataclass, field

from chessmatch.core.board import Board
from chessmatch.core.enums import Color, PieceType
from chessmatch.core.piece import Piece
from chessmatch.core.types import BOARD_SIZE, AlgebraicPosition, Coordinate

_BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)


@dataclass(slots=True)
class Position:
    """Full match state.

    ``check`` describes the side to move (or, once ``checkmate`` is set, the
    mated side).  ``captured`` lists captured piece ids in capture order; the
    pieces stay resolvable through ``board.get``.  ``en_passant_vulnerable``
    and ``promoted`` are piece ids.
    """

    board: Board
    current_player: Color = Color.WHITE
    turn: int = 1
    check: bool = False
    checkmate: bool = False
    en_passant_vulnerable: int | None = None
    promoted: int | None = None
    captured: list[int] = field(default_factory=list)

    # ── Factory ──────────────────────────────────────────────────────────

    @classmethod
    def initial(cls) -> Position:
        """Standard starting position: 16 pieces per side, WHITE to move."""
        board = Board(BOARD_SIZE, BOARD_SIZE)
        next_id = 0
        for color, back_row, pawn_row in (
            (Color.WHITE, BOARD_SIZE - 1, BOARD_SIZE - 2),
            (Color.BLACK, 0, 1),
        ):
            for column, kind in enumerate(_BACK_RANK):
                board.place_piece(Piece(next_id, color, kind), Coordinate(back_row, column))
                next_id += 1
            for column in range(BOARD_SIZE):
                board.place_piece(
                    Piece(next_id, color, PieceType.PAWN), Coordinate(pawn_row, column)
                )
                next_id += 1
        return cls(board)

    @classmethod
    def empty(cls) -> Position:
        """Empty 8x8 board, WHITE to move.  Used to set up custom positions."""
        return cls(Board(BOARD_SIZE, BOARD_SIZE))

    def put(self, kind: PieceType, color: Color, square: str, move_count: int = 0) -> Piece:
        """Place a new piece on *square* (algebraic) and return it."""
        piece = Piece(self.board.next_id(), color, kind, move_count)
        self.board.place_piece(piece, AlgebraicPosition.parse(square).to_coordinate())
        return piece

    # ── Queries ──────────────────────────────────────────────────────────

    def pieces_grid(self) -> list[list[Piece | None]]:
        """Row-major snapshot of every cell (row 0 = rank 8)."""
        board = self.board
        return [
            [board.piece(Coordinate(r, c)) for c in range(board.columns)]
            for r in range(board.rows)
        ]

    def captured_pieces(self) -> list[Piece]:
        return [self.board.get(piece_id) for piece_id in self.captured]

    @property
    def winner(self) -> Color | None:
        """Side that delivered checkmate, or ``None`` while the game runs."""
        return self.current_player if self.checkmate else None

    # ── Utilities ────────────────────────────────────────────────────────

    def copy(self) -> Position:
        """Deep copy: later mutation of either side never affects the other."""
        return Position(
            board=self.board.copy(),
            current_player=self.current_player,
            turn=self.turn,
            check=self.check,
            checkmate=self.checkmate,
            en_passant_vulnerable=self.en_passant_vulnerable,
            promoted=self.promoted,
            captured=self.captured.copy(),
        )
