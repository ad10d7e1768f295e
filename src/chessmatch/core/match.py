"""Match — turn orchestration over an immutable-by-copy :class:`Position`."""

from __future__ import annotations

import logging

from chessmatch.core.enums import Color, PieceType
from chessmatch.core.errors import (
    EmptySourceError,
    GameOverError,
    IllegalTargetError,
    NoLegalMovesError,
    WrongOwnerError,
)
from chessmatch.core.move_generator import MoveGrid, grid_has_any
from chessmatch.core.piece import Piece
from chessmatch.core.position import Position
from chessmatch.core.rules import MoveResult, Rules
from chessmatch.core.types import AlgebraicPosition, Coordinate

_LOGGER = logging.getLogger(__name__)


def _as_position(value: AlgebraicPosition | str) -> AlgebraicPosition:
    if isinstance(value, AlgebraicPosition):
        return value
    return AlgebraicPosition.parse(value)


def _as_kind(value: PieceType | str) -> PieceType:
    """Promotion choice; unknown letters map to PAWN, which promotes to nothing."""
    if isinstance(value, PieceType):
        return value
    try:
        return PieceType.from_letter(value)
    except ValueError:
        return PieceType.PAWN


class Match:
    """A single game between WHITE and BLACK.

    Each successful :meth:`perform_chess_move` replaces the held position
    with the one computed by :meth:`Rules.step`; a rejected move leaves it
    untouched.  Once :attr:`checkmate` is set the match is over.

    Thread-safety: none.  One caller drives the whole turn sequence.
    """

    __slots__ = ("_position", "_rules", "_default_promotion", "_last_result")

    def __init__(
        self,
        *,
        verify_castling_transit: bool = False,
        default_promotion: PieceType = PieceType.QUEEN,
    ) -> None:
        self._position = Position.initial()
        self._rules = Rules(verify_castling_transit=verify_castling_transit)
        self._default_promotion = default_promotion
        self._last_result: MoveResult | None = None

    @classmethod
    def from_position(
        cls,
        position: Position,
        *,
        verify_castling_transit: bool = False,
        default_promotion: PieceType = PieceType.QUEEN,
    ) -> Match:
        """Resume a match from a snapshot (the snapshot is copied)."""
        match = cls(
            verify_castling_transit=verify_castling_transit,
            default_promotion=default_promotion,
        )
        match._position = position.copy()
        return match

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def position(self) -> Position:
        """Independent copy of the current state."""
        return self._position.copy()

    @property
    def rules(self) -> Rules:
        return self._rules

    @property
    def current_player(self) -> Color:
        return self._position.current_player

    @property
    def turn(self) -> int:
        return self._position.turn

    @property
    def check(self) -> bool:
        return self._position.check

    @property
    def checkmate(self) -> bool:
        return self._position.checkmate

    @property
    def winner(self) -> Color | None:
        return self._position.winner

    @property
    def promoted(self) -> Piece | None:
        """Piece awaiting a promotion choice, if any."""
        promoted = self._position.promoted
        return None if promoted is None else self._position.board.get(promoted)

    @property
    def en_passant_vulnerable(self) -> Piece | None:
        vulnerable = self._position.en_passant_vulnerable
        return None if vulnerable is None else self._position.board.get(vulnerable)

    @property
    def captured_pieces(self) -> list[Piece]:
        return self._position.captured_pieces()

    @property
    def last_captured(self) -> Piece | None:
        """Piece captured by the most recent move, if it captured."""
        return None if self._last_result is None else self._last_result.captured

    def pieces(self) -> list[list[Piece | None]]:
        """8x8 snapshot of the board, row 0 = rank 8."""
        return self._position.pieces_grid()

    def pieces_on_board(self, color: Color | None = None) -> list[Piece]:
        return self._position.board.pieces(color)

    def piece_at(self, square: AlgebraicPosition | str) -> Piece | None:
        return self._position.board.piece(_as_position(square).to_coordinate())

    # ── Moves ────────────────────────────────────────────────────────────

    def possible_moves(self, source: AlgebraicPosition | str) -> MoveGrid:
        """Pseudo-legal destination grid of the piece on *source*."""
        coordinate = _as_position(source).to_coordinate()
        self._validate_source(coordinate)
        return self._rules.generator(self._position).possible_moves(
            self._position.board.piece(coordinate)  # type: ignore[arg-type]
        )

    def legal_moves(self, source: AlgebraicPosition | str) -> MoveGrid:
        """Destination grid of the piece on *source* minus self-exposing moves."""
        coordinate = _as_position(source).to_coordinate()
        self._validate_source(coordinate)
        piece = self._position.board.piece(coordinate)
        assert piece is not None
        return self._rules.legal_moves(self._position, piece)

    def perform_chess_move(
        self,
        source: AlgebraicPosition | str,
        target: AlgebraicPosition | str,
        promotion: PieceType | str | None = None,
    ) -> MoveResult:
        """Validate and play a move for the side to move.

        *promotion* picks the piece a pawn reaching the far rank turns into.
        When omitted the pawn becomes a queen and the choice stays open for
        :meth:`replace_promoted_piece` until the next move.

        Raises:
            ChessError: any validation failure; the match is unchanged.
        """
        if self._position.checkmate:
            raise GameOverError("The match is over")
        src = _as_position(source).to_coordinate()
        dst = _as_position(target).to_coordinate()
        kind = None if promotion is None else _as_kind(promotion)
        self._validate_source(src)
        self._validate_target(src, dst)

        result = self._rules.step(
            self._position,
            src,
            dst,
            kind,
            default_promotion=self._default_promotion,
        )
        self._position = result.position
        self._last_result = result
        return result

    def replace_promoted_piece(self, kind: PieceType | str) -> Piece:
        """Change the pending promotion to *kind* (``Q``, ``R``, ``B`` or ``N``).

        Returns the piece now standing on the promotion square.  An
        unsupported kind leaves the board as it is.

        Raises:
            NothingToPromoteError: no promotion is pending.
        """
        self._position, piece = self._rules.resolve_promotion(
            self._position, _as_kind(kind)
        )
        return piece

    # ── Validation ───────────────────────────────────────────────────────

    def _validate_source(self, c: Coordinate) -> None:
        piece = self._position.board.piece(c)
        if piece is None:
            raise EmptySourceError("There is no piece on source position")
        if piece.color != self._position.current_player:
            raise WrongOwnerError("The chosen piece is not yours")
        if not self._rules.generator(self._position).is_there_any_possible_move(piece):
            raise NoLegalMovesError("There are no possible moves for the chosen piece")

    def _validate_target(self, source: Coordinate, target: Coordinate) -> None:
        piece = self._position.board.piece(source)
        assert piece is not None
        if not self._rules.generator(self._position).possible_move(piece, target):
            _LOGGER.debug("Rejected %s: %s cannot reach %s", piece, source, target)
            raise IllegalTargetError("The chosen piece can't move to target position")

    def __repr__(self) -> str:
        return (
            f"Match(turn={self.turn}, current_player={self.current_player.name}, "
            f"check={self.check}, checkmate={self.checkmate})"
        )
