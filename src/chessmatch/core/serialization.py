"""Position snapshots: plain JSON-compatible dicts and UTF-8 bytes.

The document lists every piece the board knows about (on the board and
captured) together with the turn metadata, so loading it into a fresh match
reproduces the same subsequent move behavior.
"""

from __future__ import annotations

import json
from typing import Any

from chessmatch.core.board import Board
from chessmatch.core.enums import Color, PieceType
from chessmatch.core.errors import OccupiedCellError, OutOfBoundsError, SnapshotError
from chessmatch.core.piece import Piece
from chessmatch.core.position import Position
from chessmatch.core.types import BOARD_SIZE, Coordinate

FORMAT_VERSION = 1


def _piece_to_dict(piece: Piece) -> dict[str, Any]:
    position = piece.position
    return {
        "id": piece.id,
        "color": piece.color.name,
        "kind": piece.kind.name,
        "move_count": piece.move_count,
        "position": None if position is None else [position.row, position.column],
    }


def position_to_dict(position: Position) -> dict[str, Any]:
    board = position.board
    return {
        "format": FORMAT_VERSION,
        "rows": board.rows,
        "columns": board.columns,
        "pieces": [_piece_to_dict(p) for p in board.registered()],
        "captured": list(position.captured),
        "current_player": position.current_player.name,
        "turn": position.turn,
        "check": position.check,
        "checkmate": position.checkmate,
        "en_passant_vulnerable": position.en_passant_vulnerable,
        "promoted": position.promoted,
    }


def position_from_dict(data: dict[str, Any]) -> Position:
    """Rebuild a :class:`Position`; raises :class:`SnapshotError` on bad input."""
    if not isinstance(data, dict):
        raise SnapshotError("Snapshot must be a JSON object")
    version = data.get("format")
    if version != FORMAT_VERSION:
        raise SnapshotError(f"Unsupported snapshot format: {version!r}")

    try:
        rows, columns = data["rows"], data["columns"]
        if rows != BOARD_SIZE or columns != BOARD_SIZE:
            raise SnapshotError(f"Unsupported board size: {rows!r}x{columns!r}")
        board = Board(rows, columns)
        seen: set[int] = set()
        for entry in data["pieces"]:
            piece = Piece(
                int(entry["id"]),
                Color[entry["color"]],
                PieceType[entry["kind"]],
                int(entry["move_count"]),
            )
            if piece.id in seen:
                raise SnapshotError(f"Duplicate piece id: {piece.id}")
            seen.add(piece.id)
            cell = entry["position"]
            if cell is None:
                board.register(piece)
            else:
                board.place_piece(piece, Coordinate(int(cell[0]), int(cell[1])))

        position = Position(
            board=board,
            current_player=Color[data["current_player"]],
            turn=int(data["turn"]),
            check=_flag(data, "check"),
            checkmate=_flag(data, "checkmate"),
            en_passant_vulnerable=data["en_passant_vulnerable"],
            promoted=data["promoted"],
            captured=[int(i) for i in data["captured"]],
        )
    except SnapshotError:
        raise
    except (OccupiedCellError, OutOfBoundsError) as exc:
        raise SnapshotError(f"Inconsistent snapshot: {exc}") from exc
    except (KeyError, TypeError, IndexError, ValueError) as exc:
        raise SnapshotError(f"Malformed snapshot: {exc}") from exc

    _check_consistency(position)
    return position


def _flag(data: dict[str, Any], key: str) -> bool:
    value = data[key]
    if not isinstance(value, bool):
        raise SnapshotError(f"{key} must be true or false, got {value!r}")
    return value


def _check_consistency(position: Position) -> None:
    board = position.board
    off_board = {p.id for p in board.registered() if p.position is None}
    if off_board != set(position.captured) or len(position.captured) != len(off_board):
        raise SnapshotError("Captured pieces do not match the off-board pieces")
    on_board = {p.id for p in board.pieces()}
    for label, piece_id in (
        ("en_passant_vulnerable", position.en_passant_vulnerable),
        ("promoted", position.promoted),
    ):
        if piece_id is not None and piece_id not in on_board:
            raise SnapshotError(f"{label} refers to a piece that is not on the board")
    for color in Color:
        kings = [p for p in board.pieces(color) if p.kind == PieceType.KING]
        if len(kings) != 1:
            raise SnapshotError(f"Expected exactly one {color.name} king, found {len(kings)}")


def dumps(position: Position) -> bytes:
    """Canonical UTF-8 JSON encoding of *position*."""
    return json.dumps(position_to_dict(position), sort_keys=True, separators=(",", ":")).encode(
        "utf-8"
    )


def loads(payload: bytes | str) -> Position:
    try:
        data = json.loads(payload)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise SnapshotError(f"Snapshot is not valid JSON: {exc}") from exc
    return position_from_dict(data)
