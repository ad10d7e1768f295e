"""Plain event records emitted while a match is played."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from chessmatch.core.enums import Color, PieceType
from chessmatch.core.types import AlgebraicPosition


@dataclass(frozen=True, slots=True)
class MoveEvent:
    player: Color
    piece: str
    source: AlgebraicPosition
    target: AlgebraicPosition


@dataclass(frozen=True, slots=True)
class CaptureEvent:
    player: Color
    piece: str
    piece_color: Color
    position: AlgebraicPosition


@dataclass(frozen=True, slots=True)
class PromotionEvent:
    player: Color
    kind: PieceType
    position: AlgebraicPosition


@dataclass(frozen=True, slots=True)
class CheckEvent:
    player: Color  # side now in check


@dataclass(frozen=True, slots=True)
class WinEvent:
    player: Color


MoveCallback = Callable[[MoveEvent], None]
CaptureCallback = Callable[[CaptureEvent], None]
PromotionCallback = Callable[[PromotionEvent], None]
CheckCallback = Callable[[CheckEvent], None]
WinCallback = Callable[[WinEvent], None]


@dataclass
class MatchEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_move: list[MoveCallback] = field(default_factory=list)
    on_capture: list[CaptureCallback] = field(default_factory=list)
    on_promotion: list[PromotionCallback] = field(default_factory=list)
    on_check: list[CheckCallback] = field(default_factory=list)
    on_win: list[WinCallback] = field(default_factory=list)
