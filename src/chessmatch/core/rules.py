"""Chess rules: move application, self-check rejection, checkmate search.

Every operation works on a *copy* of the given :class:`Position`; the input
is never mutated.  A rejected move therefore needs no rollback: the copy is
simply dropped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from chessmatch.core.enums import Color, PieceType
from chessmatch.core.errors import NothingToPromoteError, SelfCheckError
from chessmatch.core.move_generator import (
    LONG_CASTLE_ROOK_OFFSET,
    SHORT_CASTLE_ROOK_OFFSET,
    MoveGenerator,
    MoveGrid,
    grid_coordinates,
    promotion_row,
)
from chessmatch.core.piece import Piece
from chessmatch.core.position import Position
from chessmatch.core.types import Coordinate

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MoveResult:
    """Outcome of one committed half-move.

    ``piece`` is the piece that moved; after a promotion it is the pawn
    record, and the replacement sits on ``target`` in ``position``.
    """

    position: Position
    mover: Color
    piece: Piece
    source: Coordinate
    target: Coordinate
    captured: Piece | None = None
    capture_square: Coordinate | None = None
    castling_rook: tuple[Coordinate, Coordinate] | None = None
    en_passant: bool = False
    promotion: PieceType | None = None

    @property
    def check(self) -> bool:
        return self.position.check

    @property
    def checkmate(self) -> bool:
        return self.position.checkmate

    @property
    def promotion_pending(self) -> bool:
        return self.position.promoted is not None


@dataclass(slots=True)
class _Applied:
    """What :meth:`Rules._apply` changed on the working copy."""

    piece: Piece
    captured: Piece | None
    capture_square: Coordinate | None
    castling_rook: tuple[Coordinate, Coordinate] | None
    en_passant: bool


class Rules:
    """Rule-checker operating on :class:`Position` snapshots.

    Args:
        verify_castling_transit: Refuse castling when the king would pass
            over or land on an attacked square.  Off by default.
    """

    __slots__ = ("_verify_transit",)

    def __init__(self, *, verify_castling_transit: bool = False) -> None:
        self._verify_transit = verify_castling_transit

    @property
    def verify_castling_transit(self) -> bool:
        return self._verify_transit

    def generator(self, position: Position, check_color: Color | None = None) -> MoveGenerator:
        """Generator for *position*; *check_color* defaults to the side to move if flagged."""
        if check_color is None and position.check and not position.checkmate:
            check_color = position.current_player
        return MoveGenerator(
            position.board,
            en_passant_vulnerable=position.en_passant_vulnerable,
            check_color=check_color,
            verify_castling_transit=self._verify_transit,
        )

    # ── Check / checkmate ────────────────────────────────────────────────

    def is_in_check(self, position: Position, color: Color) -> bool:
        return self.generator(position).is_in_check(color)

    def leaves_king_safe(self, position: Position, source: Coordinate, target: Coordinate) -> bool:
        """Would moving the piece on *source* to *target* keep its own king safe?"""
        trial = position.copy()
        applied = self._apply(trial, source, target)
        return not self.generator(trial).is_in_check(applied.piece.color)

    def legal_moves(self, position: Position, piece: Piece) -> MoveGrid:
        """Pseudo-legal grid with self-exposing destinations removed."""
        assert piece.position is not None
        grid = self.generator(position).possible_moves(piece)
        for target in grid_coordinates(grid):
            if not self.leaves_king_safe(position, piece.position, target):
                grid[target.row][target.column] = False
        return grid

    def has_legal_move(self, position: Position, color: Color) -> bool:
        """Exhaustive search: does any piece of *color* have a king-safe move?"""
        check_color = color if self.is_in_check(position, color) else None
        gen = self.generator(position, check_color)
        for piece in position.board.pieces(color):
            assert piece.position is not None
            for target in grid_coordinates(gen.possible_moves(piece)):
                if self.leaves_king_safe(position, piece.position, target):
                    return True
        return False

    def is_checkmate(self, position: Position, color: Color) -> bool:
        return self.is_in_check(position, color) and not self.has_legal_move(position, color)

    # ── Step function ────────────────────────────────────────────────────

    def step(
        self,
        position: Position,
        source: Coordinate,
        target: Coordinate,
        promotion: PieceType | None = None,
        *,
        default_promotion: PieceType = PieceType.QUEEN,
    ) -> MoveResult:
        """Apply an already-validated pseudo-legal move and return the outcome.

        Raises:
            SelfCheckError: The move exposes the mover's king.  *position*
                is left untouched.
        """
        new = position.copy()
        new.promoted = None
        applied = self._apply(new, source, target)
        piece = moved = applied.piece
        mover = piece.color

        if self.generator(new).is_in_check(mover):
            _LOGGER.debug("Rejected %s -> %s: exposes the %s king", source, target, mover.name)
            raise SelfCheckError("You can't put yourself in check")

        promoted_kind: PieceType | None = None
        if piece.kind == PieceType.PAWN and target.row == promotion_row(mover, new.board.rows):
            new.promoted = piece.id
            choice = default_promotion if promotion is None else promotion
            if choice.is_promotion_target:
                piece = self._replace(new, piece, choice)
                promoted_kind = choice
                # An implicit choice stays open for replace_promoted_piece().
                new.promoted = piece.id if promotion is None else None

        if piece.kind == PieceType.PAWN and abs(target.row - source.row) == 2:
            new.en_passant_vulnerable = piece.id
        else:
            new.en_passant_vulnerable = None

        self._conclude(new, mover)
        return MoveResult(
            position=new,
            mover=mover,
            piece=moved,
            source=source,
            target=target,
            captured=applied.captured,
            capture_square=applied.capture_square,
            castling_rook=applied.castling_rook,
            en_passant=applied.en_passant,
            promotion=promoted_kind,
        )

    def resolve_promotion(self, position: Position, kind: PieceType) -> tuple[Position, Piece]:
        """Swap the pending promotion piece for *kind*.

        Any *kind* other than queen, rook, bishop or knight leaves the
        position unchanged.  Otherwise check, checkmate and the turn are
        recomputed as if the move had been made with this choice.
        """
        if position.promoted is None:
            raise NothingToPromoteError("There is no piece to be promoted")
        current = position.board.get(position.promoted)
        if not kind.is_promotion_target:
            return position, current

        new = position.copy()
        pending = new.board.get(new.promoted)
        mover = pending.color
        if not new.checkmate:
            # Undo the turn hand-over made by the promoting move.
            new.turn -= 1
            new.current_player = mover
        new.checkmate = False
        replacement = self._replace(new, pending, kind)
        new.promoted = None
        self._conclude(new, mover)
        return new, replacement

    # ── Internals ────────────────────────────────────────────────────────

    def _conclude(self, new: Position, mover: Color) -> None:
        opponent = mover.opposite
        new.check = self.is_in_check(new, opponent)
        new.checkmate = new.check and not self.has_legal_move(new, opponent)
        if new.checkmate:
            _LOGGER.debug("Checkmate: %s wins on turn %d", mover.name, new.turn)
            return
        new.turn += 1
        new.current_player = opponent

    @staticmethod
    def _apply(position: Position, source: Coordinate, target: Coordinate) -> _Applied:
        board = position.board
        piece = board.remove_piece(source)
        if piece is None:
            raise ValueError(f"No piece on {source}")
        captured = board.remove_piece(target)
        capture_square = target if captured is not None else None
        board.place_piece(piece, target)
        piece.increase_move_count()

        castling_rook: tuple[Coordinate, Coordinate] | None = None
        if piece.kind == PieceType.KING and abs(target.column - source.column) == 2:
            if target.column > source.column:
                rook_from = source.offset(0, SHORT_CASTLE_ROOK_OFFSET)
                rook_to = source.offset(0, 1)
            else:
                rook_from = source.offset(0, LONG_CASTLE_ROOK_OFFSET)
                rook_to = source.offset(0, -1)
            rook = board.remove_piece(rook_from)
            if rook is None:
                raise ValueError(f"No rook on {rook_from} to castle with")
            board.place_piece(rook, rook_to)
            rook.increase_move_count()
            castling_rook = (rook_from, rook_to)

        en_passant = False
        if (
            piece.kind == PieceType.PAWN
            and source.column != target.column
            and captured is None
        ):
            beside = Coordinate(source.row, target.column)
            captured = board.remove_piece(beside)
            if captured is not None:
                capture_square = beside
                en_passant = True

        if captured is not None:
            position.captured.append(captured.id)
        return _Applied(piece, captured, capture_square, castling_rook, en_passant)

    @staticmethod
    def _replace(position: Position, pawn: Piece, kind: PieceType) -> Piece:
        board = position.board
        square = pawn.position
        assert square is not None
        replacement = Piece(board.next_id(), pawn.color, kind, pawn.move_count)
        board.remove_piece(square)
        board.discard(pawn)
        board.place_piece(replacement, square)
        return replacement
