"""Tests for position snapshots."""

import json
from collections.abc import Callable
from typing import Any

import pytest

from chessmatch.core.enums import Color, PieceType
from chessmatch.core.errors import SnapshotError
from chessmatch.core.match import Match
from chessmatch.core.position import Position
from chessmatch.core.serialization import (
    FORMAT_VERSION,
    dumps,
    loads,
    position_from_dict,
    position_to_dict,
)

Play = Callable[..., None]


def _doc(**changes: Any) -> dict[str, Any]:
    doc = position_to_dict(Position.initial())
    doc.update(changes)
    return doc


class TestRoundTrip:
    def test_initial_position(self) -> None:
        pos = Position.initial()
        restored = position_from_dict(position_to_dict(pos))
        assert restored.board == pos.board
        assert restored.current_player == Color.WHITE
        assert restored.turn == 1

    def test_document_shape(self) -> None:
        doc = position_to_dict(Position.initial())
        assert doc["format"] == FORMAT_VERSION
        assert doc["rows"] == 8
        assert len(doc["pieces"]) == 32
        assert doc["pieces"][4] == {
            "id": 4,
            "color": "WHITE",
            "kind": "KING",
            "move_count": 0,
            "position": [7, 4],
        }
        json.dumps(doc)

    def test_mid_game_state_survives(self, match: Match, play: Play) -> None:
        play(match, "e2e4", "d7d5", "e4d5", "c7c5")
        restored = Match.from_position(loads(dumps(match.position)))

        assert restored.turn == match.turn
        assert restored.current_player == Color.WHITE
        assert [p.id for p in restored.captured_pieces] == [p.id for p in match.captured_pieces]
        assert restored.en_passant_vulnerable is not None
        assert restored.en_passant_vulnerable.id == match.en_passant_vulnerable.id  # type: ignore[union-attr]
        assert restored.legal_moves("d5") == match.legal_moves("d5")

        # En passant is still available after the reload.
        result = restored.perform_chess_move("d5", "c6")
        assert result.en_passant

    def test_pending_promotion_survives(self) -> None:
        pos = Position.empty()
        pos.put(PieceType.KING, Color.WHITE, "e1")
        pos.put(PieceType.KING, Color.BLACK, "h5")
        pos.put(PieceType.PAWN, Color.WHITE, "b7", move_count=5)
        match = Match.from_position(pos)
        match.perform_chess_move("b7", "b8")

        restored = Match.from_position(loads(dumps(match.position)))
        assert restored.promoted is not None
        assert restored.replace_promoted_piece("R").kind == PieceType.ROOK

    def test_canonical_bytes(self, match: Match, play: Play) -> None:
        play(match, "g1f3", "b8c6")
        payload = dumps(match.position)
        assert dumps(loads(payload)) == payload
        assert loads(payload.decode("utf-8")).turn == 3


class TestErrors:
    def test_not_json(self) -> None:
        with pytest.raises(SnapshotError):
            loads(b"not json")

    def test_not_an_object(self) -> None:
        with pytest.raises(SnapshotError):
            loads(b"[1, 2, 3]")

    def test_unknown_version(self) -> None:
        with pytest.raises(SnapshotError, match="format"):
            position_from_dict(_doc(format=99))

    def test_missing_key(self) -> None:
        doc = _doc()
        del doc["turn"]
        with pytest.raises(SnapshotError, match="Malformed"):
            position_from_dict(doc)

    def test_unknown_color(self) -> None:
        with pytest.raises(SnapshotError):
            position_from_dict(_doc(current_player="GREEN"))

    def test_duplicate_id(self) -> None:
        doc = _doc()
        doc["pieces"][1]["id"] = doc["pieces"][0]["id"]
        with pytest.raises(SnapshotError, match="Duplicate"):
            position_from_dict(doc)

    def test_two_pieces_on_one_cell(self) -> None:
        doc = _doc()
        doc["pieces"][1]["position"] = doc["pieces"][0]["position"]
        with pytest.raises(SnapshotError, match="Inconsistent"):
            position_from_dict(doc)

    def test_cell_off_the_board(self) -> None:
        doc = _doc()
        doc["pieces"][0]["position"] = [9, 9]
        with pytest.raises(SnapshotError):
            position_from_dict(doc)

    def test_missing_king(self) -> None:
        doc = _doc()
        doc["pieces"] = [p for p in doc["pieces"] if p["id"] != 20]
        with pytest.raises(SnapshotError, match="king"):
            position_from_dict(doc)

    def test_captured_must_match_off_board_pieces(self) -> None:
        with pytest.raises(SnapshotError, match="Captured"):
            position_from_dict(_doc(captured=[0]))

    def test_en_passant_must_be_on_board(self) -> None:
        with pytest.raises(SnapshotError, match="en_passant"):
            position_from_dict(_doc(en_passant_vulnerable=77))

    @pytest.mark.parametrize(("rows", "columns"), [(4, 4), (8, 10), ("8", 8)])
    def test_board_must_be_8x8(self, rows: Any, columns: Any) -> None:
        with pytest.raises(SnapshotError, match="board size"):
            position_from_dict(_doc(rows=rows, columns=columns))

    def test_small_board_with_both_kings_rejected(self) -> None:
        pos = Position.empty()
        pos.put(PieceType.KING, Color.WHITE, "a1")
        pos.put(PieceType.KING, Color.BLACK, "h8")
        doc = position_to_dict(pos)
        doc.update(rows=4, columns=4)
        doc["pieces"] = [
            {**entry, "position": [3, 0] if entry["color"] == "WHITE" else [0, 3]}
            for entry in doc["pieces"]
        ]
        with pytest.raises(SnapshotError):
            position_from_dict(doc)

    @pytest.mark.parametrize("key", ["check", "checkmate"])
    @pytest.mark.parametrize("value", ["false", 0, None])
    def test_flags_must_be_booleans(self, key: str, value: Any) -> None:
        with pytest.raises(SnapshotError, match=key):
            position_from_dict(_doc(**{key: value}))
