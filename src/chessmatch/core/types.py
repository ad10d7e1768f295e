"""Grid coordinates and algebraic positions.

Internal layout (row-major, white at the bottom):
    row 0 = rank 8, row 7 = rank 1
    column 0 = file a, column 7 = file h
"""

from __future__ import annotations

from dataclasses import dataclass

from chessmatch.core.errors import InvalidCoordinateError

BOARD_SIZE = 8

MIN_COLUMN = "a"
MAX_COLUMN = "h"
MIN_ROW = 1
MAX_ROW = 8


@dataclass(frozen=True, slots=True)
class Coordinate:
    """Zero-based (row, column) cell of a board grid."""

    row: int
    column: int

    def offset(self, row_delta: int, column_delta: int) -> Coordinate:
        return Coordinate(self.row + row_delta, self.column + column_delta)

    def __str__(self) -> str:
        return f"{self.row}, {self.column}"


@dataclass(frozen=True, slots=True)
class AlgebraicPosition:
    """Human-facing chess square, e.g. ``AlgebraicPosition('e', 4)``."""

    column: str
    row: int

    def __post_init__(self) -> None:
        if (
            not isinstance(self.column, str)
            or len(self.column) != 1
            or not MIN_COLUMN <= self.column <= MAX_COLUMN
            or not isinstance(self.row, int)
            or not MIN_ROW <= self.row <= MAX_ROW
        ):
            raise InvalidCoordinateError(
                f"Invalid position {self.column!r}{self.row!r}: "
                f"valid values are {MIN_COLUMN}{MIN_ROW} to {MAX_COLUMN}{MAX_ROW}"
            )

    # ── Conversion ───────────────────────────────────────────────────────

    def to_coordinate(self) -> Coordinate:
        return Coordinate(MAX_ROW - self.row, ord(self.column) - ord(MIN_COLUMN))

    @classmethod
    def from_coordinate(cls, coordinate: Coordinate) -> AlgebraicPosition:
        """Inverse of :meth:`to_coordinate`; raises for cells off the 8x8 grid."""
        column_index = coordinate.column
        if not 0 <= column_index < BOARD_SIZE:
            raise InvalidCoordinateError(f"Column out of range: {coordinate}")
        return cls(chr(ord(MIN_COLUMN) + column_index), MAX_ROW - coordinate.row)

    @classmethod
    def parse(cls, text: str) -> AlgebraicPosition:
        """Parse ``'e2'`` style text; surrounding whitespace and case are ignored."""
        name = "".join(text.split()).lower()
        digits = name[1:]
        if len(name) < 2 or not (digits.isascii() and digits.isdigit()):
            raise InvalidCoordinateError(
                f"Invalid position {text!r}: valid values are a1 to h8"
            )
        return cls(name[0], int(digits))

    def __str__(self) -> str:
        return f"{self.column}{self.row}"


def parse_position(text: str) -> AlgebraicPosition:
    """Shorthand for :meth:`AlgebraicPosition.parse`."""
    return AlgebraicPosition.parse(text)


def coordinate_name(coordinate: Coordinate) -> str:
    """Algebraic name of an internal coordinate, e.g. ``Coordinate(6, 4)`` → ``'e2'``."""
    return str(AlgebraicPosition.from_coordinate(coordinate))


def all_positions() -> list[AlgebraicPosition]:
    """Every square a1..h8, file-major."""
    return [
        AlgebraicPosition(chr(ord(MIN_COLUMN) + c), r)
        for c in range(BOARD_SIZE)
        for r in range(MIN_ROW, MAX_ROW + 1)
    ]
