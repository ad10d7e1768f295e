"""Save and load matches as snapshot files."""

from __future__ import annotations

import logging
from pathlib import Path

from chessmatch.core.enums import PieceType
from chessmatch.core.match import Match
from chessmatch.core.serialization import dumps, loads

_LOGGER = logging.getLogger(__name__)


def save_match(match: Match, file_path: Path) -> None:
    """Write *match*'s full state to *file_path* (overwritten)."""
    file_path.write_bytes(dumps(match.position))
    _LOGGER.info("Match saved to %s", file_path)


def load_match(
    file_path: Path,
    *,
    verify_castling_transit: bool = False,
    default_promotion: PieceType = PieceType.QUEEN,
) -> Match:
    """Read a match written by :func:`save_match`.

    Raises:
        OSError: the file cannot be read.
        SnapshotError: the file is not a valid snapshot.
    """
    position = loads(file_path.read_bytes())
    match = Match.from_position(
        position,
        verify_castling_transit=verify_castling_transit,
        default_promotion=default_promotion,
    )
    _LOGGER.info("Match loaded from %s", file_path)
    return match
