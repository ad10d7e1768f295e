"""MatchController — drives a :class:`Match` and notifies listeners.

Coordinates: Match, Settings, snapshot storage.
Emits events via simple callbacks so the front-ends / logger / tests can
subscribe.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

from chessmatch.config import Settings
from chessmatch.core.enums import PieceType
from chessmatch.core.match import Match
from chessmatch.core.move_generator import MoveGrid
from chessmatch.core.piece import Piece
from chessmatch.core.rules import MoveResult
from chessmatch.core.types import AlgebraicPosition, Coordinate
from chessmatch.game.events import (
    CaptureEvent,
    CheckEvent,
    MatchEvents,
    MoveEvent,
    PromotionEvent,
    WinEvent,
)
from chessmatch.game.storage import load_match, save_match

_LOGGER = logging.getLogger(__name__)


def new_match_id() -> str:
    return datetime.now().strftime("%Y%m%d_%H%M%S_%f")


def _square(c: Coordinate) -> AlgebraicPosition:
    return AlgebraicPosition.from_coordinate(c)


class MatchController:
    """Owns the current match and turns each committed move into events.

    Thread-safety: none; call from a single thread (the UI thread).
    """

    __slots__ = ("_match", "_match_id", "_settings", "events")

    def __init__(
        self,
        settings: Settings | None = None,
        match: Match | None = None,
        match_id: str | None = None,
    ) -> None:
        self._settings = settings if settings is not None else Settings()
        self._match = match if match is not None else self._fresh_match()
        self._match_id = match_id or new_match_id()
        self.events = MatchEvents()

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def match(self) -> Match:
        return self._match

    @property
    def match_id(self) -> str:
        return self._match_id

    @property
    def settings(self) -> Settings:
        return self._settings

    # ── Lifecycle ────────────────────────────────────────────────────────

    def new_match(self) -> Match:
        """Start over; listeners stay subscribed."""
        self._match = self._fresh_match()
        self._match_id = new_match_id()
        _LOGGER.info("New match %s", self._match_id)
        return self._match

    def save(self, file_path: Path) -> None:
        save_match(self._match, file_path)

    def load(self, file_path: Path) -> Match:
        """Replace the current match with the one stored in *file_path*."""
        self._match = load_match(
            file_path,
            verify_castling_transit=self._settings.verify_castling_transit,
            default_promotion=self._settings.default_promotion,
        )
        return self._match

    # ── Moves ────────────────────────────────────────────────────────────

    def possible_moves(self, source: AlgebraicPosition | str) -> MoveGrid:
        return self._match.possible_moves(source)

    def legal_moves(self, source: AlgebraicPosition | str) -> MoveGrid:
        return self._match.legal_moves(source)

    def perform_move(
        self,
        source: AlgebraicPosition | str,
        target: AlgebraicPosition | str,
        promotion: PieceType | str | None = None,
    ) -> MoveResult:
        """Play a move and notify listeners.  Errors propagate unchanged."""
        result = self._match.perform_chess_move(source, target, promotion)
        mover = result.mover
        _LOGGER.info(
            "%s %s %s -> %s",
            mover.name,
            str(result.piece),
            _square(result.source),
            _square(result.target),
        )

        self._emit_move(
            MoveEvent(
                mover,
                str(result.piece),
                _square(result.source),
                _square(result.target),
            )
        )
        if result.captured is not None and result.capture_square is not None:
            self._emit_capture(
                CaptureEvent(
                    mover,
                    str(result.captured),
                    result.captured.color,
                    _square(result.capture_square),
                )
            )
        if result.promotion is not None:
            self._emit_promotion(
                PromotionEvent(mover, result.promotion, _square(result.target))
            )
        self._emit_status()
        return result

    def replace_promoted_piece(self, kind: PieceType | str) -> Piece:
        """Change a pending promotion and notify listeners if it took effect."""
        before = self._match.promoted
        piece = self._match.replace_promoted_piece(kind)
        if piece is before or piece.position is None:
            return piece
        self._emit_promotion(
            PromotionEvent(piece.color, piece.kind, _square(piece.position))
        )
        self._emit_status()
        return piece

    # ── Internal helpers ─────────────────────────────────────────────────

    def _fresh_match(self) -> Match:
        return Match(
            verify_castling_transit=self._settings.verify_castling_transit,
            default_promotion=self._settings.default_promotion,
        )

    def _emit_status(self) -> None:
        match = self._match
        if match.checkmate:
            winner = match.winner
            assert winner is not None
            _LOGGER.info("Checkmate, %s wins", winner.name)
            for cb in self.events.on_win:
                cb(WinEvent(winner))
        elif match.check:
            for cb in self.events.on_check:
                cb(CheckEvent(match.current_player))

    def _emit_move(self, event: MoveEvent) -> None:
        for cb in self.events.on_move:
            cb(event)

    def _emit_capture(self, event: CaptureEvent) -> None:
        for cb in self.events.on_capture:
            cb(event)

    def _emit_promotion(self, event: PromotionEvent) -> None:
        for cb in self.events.on_promotion:
            cb(event)
