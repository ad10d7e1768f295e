"""Tests for Position — match state and factories."""

from chessmatch.core.enums import Color, PieceType
from chessmatch.core.position import Position
from chessmatch.core.types import parse_position


class TestFactories:
    def test_initial(self) -> None:
        pos = Position.initial()
        assert pos.current_player == Color.WHITE
        assert pos.turn == 1
        assert not pos.check
        assert not pos.checkmate
        assert pos.en_passant_vulnerable is None
        assert pos.promoted is None
        assert pos.captured == []
        assert [p.id for p in pos.board.registered()] == list(range(32))

    def test_initial_ids_by_rank(self) -> None:
        board = Position.initial().board
        assert {board.get(i).color for i in range(16)} == {Color.WHITE}
        assert {board.get(i).color for i in range(16, 32)} == {Color.BLACK}
        assert {board.get(i).kind for i in range(8, 16)} == {PieceType.PAWN}
        assert board.get(3).kind == PieceType.QUEEN

    def test_empty_and_put(self) -> None:
        pos = Position.empty()
        assert pos.board.pieces() == []
        rook = pos.put(PieceType.ROOK, Color.BLACK, "h8", move_count=2)
        assert rook.id == 0
        assert rook.move_count == 2
        assert pos.board.piece(parse_position("h8").to_coordinate()) is rook
        assert pos.put(PieceType.KING, Color.BLACK, "e8").id == 1


class TestQueries:
    def test_pieces_grid(self) -> None:
        grid = Position.initial().pieces_grid()
        assert len(grid) == 8
        assert grid[7][4] is not None and grid[7][4].kind == PieceType.KING
        assert grid[4][4] is None

    def test_winner_only_on_checkmate(self) -> None:
        pos = Position.initial()
        assert pos.winner is None
        pos.check = True
        assert pos.winner is None
        pos.checkmate = True
        assert pos.winner == Color.WHITE


class TestCopy:
    def test_copy_is_deep(self) -> None:
        pos = Position.initial()
        clone = pos.copy()
        clone.turn = 5
        clone.captured.append(12)
        clone.board.get(0).increase_move_count()
        assert pos.turn == 1
        assert pos.captured == []
        assert pos.board.get(0).move_count == 0
