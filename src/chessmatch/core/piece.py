"""Piece record: one tagged variant for all six kinds."""

from __future__ import annotations

from dataclasses import dataclass

from chessmatch.core.enums import Color, PieceType
from chessmatch.core.types import Coordinate

_UNICODE: dict[tuple[Color, PieceType], str] = {
    (Color.WHITE, PieceType.PAWN): "♙",
    (Color.WHITE, PieceType.KNIGHT): "♘",
    (Color.WHITE, PieceType.BISHOP): "♗",
    (Color.WHITE, PieceType.ROOK): "♖",
    (Color.WHITE, PieceType.QUEEN): "♕",
    (Color.WHITE, PieceType.KING): "♔",
    (Color.BLACK, PieceType.PAWN): "♟",
    (Color.BLACK, PieceType.KNIGHT): "♞",
    (Color.BLACK, PieceType.BISHOP): "♝",
    (Color.BLACK, PieceType.ROOK): "♜",
    (Color.BLACK, PieceType.QUEEN): "♛",
    (Color.BLACK, PieceType.KING): "♚",
}


def piece_symbol(color: Color, kind: PieceType) -> str:
    return _UNICODE[(color, kind)]


@dataclass(slots=True)
class Piece:
    """A piece in a match.

    ``id`` is stable for the piece's lifetime and is what the board grid
    stores.  ``position`` mirrors the board cell and is ``None`` while the
    piece is off the board (captured, or not yet placed).
    """

    id: int
    color: Color
    kind: PieceType
    move_count: int = 0
    position: Coordinate | None = None

    def increase_move_count(self) -> None:
        self.move_count += 1

    def copy(self) -> Piece:
        return Piece(self.id, self.color, self.kind, self.move_count, self.position)

    # ── Display ──────────────────────────────────────────────────────────

    def __str__(self) -> str:
        """Kind letter, upper-case for white and lower-case for black."""
        letter = self.kind.letter
        return letter if self.color == Color.WHITE else letter.lower()

    @property
    def symbol(self) -> str:
        """Unicode chess symbol, e.g. ♞."""
        return piece_symbol(self.color, self.kind)

    @property
    def name(self) -> str:
        """Kind name for messages, e.g. ``'Knight'``."""
        return self.kind.name.capitalize()
