"""Board - piece placement on a rectangular grid."""

from __future__ import annotations

from collections.abc import Iterator

from chessmatch.core.enums import Color
from chessmatch.core.errors import OccupiedCellError, OutOfBoundsError
from chessmatch.core.piece import Piece
from chessmatch.core.types import BOARD_SIZE, Coordinate


class Board:
    """Mutable grid of piece ids backed by an arena of :class:`Piece` records.

    The grid only stores ids; the arena maps each id to its piece.  Removing
    a piece from a cell keeps it in the arena so captured pieces stay
    resolvable through :meth:`get`.  The board knows nothing about chess.
    """

    __slots__ = ("_rows", "_columns", "_cells", "_arena")

    def __init__(self, rows: int = BOARD_SIZE, columns: int = BOARD_SIZE) -> None:
        if rows <= 0 or columns <= 0:
            raise ValueError("A board needs at least one row and one column")
        self._rows = rows
        self._columns = columns
        self._cells: list[list[int | None]] = [[None] * columns for _ in range(rows)]
        self._arena: dict[int, Piece] = {}

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def columns(self) -> int:
        return self._columns

    # -- Element access -----------------------------------------------------

    def position_exists(self, c: Coordinate) -> bool:
        return 0 <= c.row < self._rows and 0 <= c.column < self._columns

    def piece(self, c: Coordinate) -> Piece | None:
        """Occupant of *c*, or ``None``."""
        self._validate(c)
        piece_id = self._cells[c.row][c.column]
        return None if piece_id is None else self._arena[piece_id]

    def there_is_a_piece(self, c: Coordinate) -> bool:
        return self.piece(c) is not None

    def get(self, piece_id: int) -> Piece:
        """Piece registered under *piece_id*, on the board or not."""
        try:
            return self._arena[piece_id]
        except KeyError:
            raise KeyError(f"Unknown piece id: {piece_id}") from None

    # -- Mutation -----------------------------------------------------------

    def place_piece(self, piece: Piece, c: Coordinate) -> None:
        self._validate(c)
        if self._cells[c.row][c.column] is not None:
            raise OccupiedCellError(f"There is already a piece on {c}")
        self._arena[piece.id] = piece
        self._cells[c.row][c.column] = piece.id
        piece.position = c

    def remove_piece(self, c: Coordinate) -> Piece | None:
        """Clear *c* and return its former occupant (``None`` if empty)."""
        self._validate(c)
        piece_id = self._cells[c.row][c.column]
        if piece_id is None:
            return None
        self._cells[c.row][c.column] = None
        piece = self._arena[piece_id]
        piece.position = None
        return piece

    def register(self, piece: Piece) -> None:
        """Add an off-board piece to the arena (used when restoring captures)."""
        if piece.position is not None:
            raise ValueError(f"Piece {piece.id} claims position {piece.position}")
        if piece.id in self._arena:
            raise ValueError(f"Duplicate piece id: {piece.id}")
        self._arena[piece.id] = piece

    def discard(self, piece: Piece) -> None:
        """Forget an off-board piece entirely."""
        if piece.position is not None:
            raise ValueError(f"Piece {piece.id} is still on the board at {piece.position}")
        self._arena.pop(piece.id, None)

    def next_id(self) -> int:
        """Smallest id greater than every registered id."""
        return max(self._arena, default=-1) + 1

    # -- Query helpers ------------------------------------------------------

    def pieces(self, color: Color | None = None) -> list[Piece]:
        """On-board pieces in row-major order, optionally filtered by *color*."""
        return [p for p in self._iter_on_board() if color is None or p.color == color]

    def registered(self) -> list[Piece]:
        """Every piece in the arena, ordered by id."""
        return [self._arena[k] for k in sorted(self._arena)]

    def _iter_on_board(self) -> Iterator[Piece]:
        for row in self._cells:
            for piece_id in row:
                if piece_id is not None:
                    yield self._arena[piece_id]

    def _validate(self, c: Coordinate) -> None:
        if not self.position_exists(c):
            raise OutOfBoundsError(f"Position {c} is not on the board")

    # -- Copying ------------------------------------------------------------

    def copy(self) -> Board:
        """Independent copy: grid and every piece record are duplicated."""
        b = Board.__new__(Board)
        b._rows = self._rows
        b._columns = self._columns
        b._cells = [row.copy() for row in self._cells]
        b._arena = {k: p.copy() for k, p in self._arena.items()}
        return b

    # -- Dunder helpers -----------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._cells == other._cells and self._arena == other._arena

    def __repr__(self) -> str:
        rows: list[str] = []
        for r, row in enumerate(self._cells):
            cells = [
                "." if piece_id is None else str(self._arena[piece_id])
                for piece_id in row
            ]
            rows.append(f"{self._rows - r} {' '.join(cells)}")
        rows.append("  " + " ".join(chr(ord("a") + c) for c in range(self._columns)))
        return "\n".join(rows)
