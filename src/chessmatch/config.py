"""User-configurable settings shared by the front-ends."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from chessmatch.core.enums import PieceType


@dataclass
class Settings:
    """All user-configurable settings."""

    # Match log: one file per match in this directory; no log when None
    log_directory: Path | None = None

    # Rules
    verify_castling_transit: bool = False
    default_promotion: PieceType = PieceType.QUEEN

    # Terminal rendering
    use_unicode: bool = False
    use_color: bool = True
