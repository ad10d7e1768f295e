"""Tests for MoveGenerator — pseudo-legal destinations and attacks."""

import pytest

from chessmatch.core.enums import Color, PieceType
from chessmatch.core.move_generator import MoveGenerator, MoveGrid, grid_coordinates
from chessmatch.core.position import Position
from chessmatch.core.types import Coordinate, coordinate_name, parse_position


def _c(name: str) -> Coordinate:
    return parse_position(name).to_coordinate()


def _names(grid: MoveGrid) -> set[str]:
    return {coordinate_name(c) for c in grid_coordinates(grid)}


def _with_kings() -> Position:
    pos = Position.empty()
    pos.put(PieceType.KING, Color.WHITE, "e1")
    pos.put(PieceType.KING, Color.BLACK, "e8")
    return pos


class TestStartingPosition:
    def test_knight(self) -> None:
        pos = Position.initial()
        gen = MoveGenerator(pos.board)
        knight = pos.board.piece(_c("g1"))
        assert knight is not None
        assert _names(gen.possible_moves(knight)) == {"f3", "h3"}

    def test_pawn_single_and_double_step(self) -> None:
        pos = Position.initial()
        pawn = pos.board.piece(_c("e2"))
        assert pawn is not None
        assert _names(MoveGenerator(pos.board).possible_moves(pawn)) == {"e3", "e4"}

    def test_blocked_rook_has_no_moves(self) -> None:
        pos = Position.initial()
        rook = pos.board.piece(_c("a1"))
        assert rook is not None
        assert not MoveGenerator(pos.board).is_there_any_possible_move(rook)

    def test_grid_matches_board_size(self) -> None:
        pos = Position.initial()
        pawn = pos.board.piece(_c("a7"))
        assert pawn is not None
        grid = MoveGenerator(pos.board).possible_moves(pawn)
        assert len(grid) == 8
        assert all(len(row) == 8 for row in grid)


class TestPieces:
    def test_knight_in_corner(self) -> None:
        pos = _with_kings()
        knight = pos.put(PieceType.KNIGHT, Color.WHITE, "a1")
        assert _names(MoveGenerator(pos.board).possible_moves(knight)) == {"b3", "c2"}

    def test_rook_stops_at_own_piece_and_captures_enemy(self) -> None:
        pos = _with_kings()
        rook = pos.put(PieceType.ROOK, Color.WHITE, "a1")
        pos.put(PieceType.PAWN, Color.WHITE, "a3")
        pos.put(PieceType.KNIGHT, Color.BLACK, "c1")
        assert _names(MoveGenerator(pos.board).possible_moves(rook)) == {"a2", "b1", "c1"}

    def test_bishop_diagonals(self) -> None:
        pos = _with_kings()
        bishop = pos.put(PieceType.BISHOP, Color.BLACK, "h8")
        pos.put(PieceType.PAWN, Color.WHITE, "e5")
        assert _names(MoveGenerator(pos.board).possible_moves(bishop)) == {"g7", "f6", "e5"}

    def test_queen_combines_rook_and_bishop(self) -> None:
        pos = _with_kings()
        queen = pos.put(PieceType.QUEEN, Color.WHITE, "d4")
        assert len(grid_coordinates(MoveGenerator(pos.board).possible_moves(queen))) == 27

    def test_king_steps(self) -> None:
        pos = Position.empty()
        king = pos.put(PieceType.KING, Color.WHITE, "d4", move_count=1)
        pos.put(PieceType.KING, Color.BLACK, "h8")
        assert len(grid_coordinates(MoveGenerator(pos.board).possible_moves(king))) == 8

    def test_off_board_piece_rejected(self) -> None:
        pos = _with_kings()
        pawn = pos.put(PieceType.PAWN, Color.WHITE, "a2")
        pos.board.remove_piece(_c("a2"))
        with pytest.raises(ValueError):
            MoveGenerator(pos.board).possible_moves(pawn)


class TestPawns:
    def test_blocked_pawn(self) -> None:
        pos = _with_kings()
        pawn = pos.put(PieceType.PAWN, Color.WHITE, "d2")
        pos.put(PieceType.KNIGHT, Color.BLACK, "d3")
        assert _names(MoveGenerator(pos.board).possible_moves(pawn)) == set()

    def test_no_double_step_after_moving(self) -> None:
        pos = _with_kings()
        pawn = pos.put(PieceType.PAWN, Color.BLACK, "c6", move_count=1)
        assert _names(MoveGenerator(pos.board).possible_moves(pawn)) == {"c5"}

    def test_diagonal_capture_only_on_enemy(self) -> None:
        pos = _with_kings()
        pawn = pos.put(PieceType.PAWN, Color.WHITE, "d4", move_count=1)
        pos.put(PieceType.PAWN, Color.BLACK, "c5")
        pos.put(PieceType.PAWN, Color.WHITE, "e5")
        assert _names(MoveGenerator(pos.board).possible_moves(pawn)) == {"d5", "c5"}

    def test_en_passant_needs_marker(self) -> None:
        pos = _with_kings()
        pawn = pos.put(PieceType.PAWN, Color.WHITE, "e5", move_count=2)
        victim = pos.put(PieceType.PAWN, Color.BLACK, "d5", move_count=1)

        plain = MoveGenerator(pos.board)
        assert _names(plain.possible_moves(pawn)) == {"e6"}

        marked = MoveGenerator(pos.board, en_passant_vulnerable=victim.id)
        assert _names(marked.possible_moves(pawn)) == {"e6", "d6"}

    def test_en_passant_only_from_fifth_rank(self) -> None:
        pos = _with_kings()
        pawn = pos.put(PieceType.PAWN, Color.WHITE, "e4", move_count=1)
        victim = pos.put(PieceType.PAWN, Color.BLACK, "d4", move_count=2)
        gen = MoveGenerator(pos.board, en_passant_vulnerable=victim.id)
        assert _names(gen.possible_moves(pawn)) == {"e5"}

    def test_black_en_passant(self) -> None:
        pos = _with_kings()
        pawn = pos.put(PieceType.PAWN, Color.BLACK, "b4", move_count=2)
        victim = pos.put(PieceType.PAWN, Color.WHITE, "a4", move_count=1)
        gen = MoveGenerator(pos.board, en_passant_vulnerable=victim.id)
        assert "a3" in _names(gen.possible_moves(pawn))


class TestCastling:
    def _castling_position(self) -> Position:
        pos = _with_kings()
        pos.put(PieceType.ROOK, Color.WHITE, "a1")
        pos.put(PieceType.ROOK, Color.WHITE, "h1")
        return pos

    def test_both_sides_available(self) -> None:
        pos = self._castling_position()
        king = pos.board.piece(_c("e1"))
        assert king is not None
        assert {"g1", "c1"} <= _names(MoveGenerator(pos.board).possible_moves(king))

    def test_not_after_king_moved(self) -> None:
        pos = self._castling_position()
        king = pos.board.piece(_c("e1"))
        assert king is not None
        king.increase_move_count()
        names = _names(MoveGenerator(pos.board).possible_moves(king))
        assert "g1" not in names
        assert "c1" not in names

    def test_not_after_rook_moved(self) -> None:
        pos = self._castling_position()
        rook = pos.board.piece(_c("h1"))
        assert rook is not None
        rook.increase_move_count()
        king = pos.board.piece(_c("e1"))
        assert king is not None
        names = _names(MoveGenerator(pos.board).possible_moves(king))
        assert "g1" not in names
        assert "c1" in names

    def test_not_while_in_check(self) -> None:
        pos = self._castling_position()
        king = pos.board.piece(_c("e1"))
        assert king is not None
        gen = MoveGenerator(pos.board, check_color=Color.WHITE)
        assert "g1" not in _names(gen.possible_moves(king))

    def test_path_must_be_empty(self) -> None:
        pos = self._castling_position()
        pos.put(PieceType.KNIGHT, Color.WHITE, "b1")
        king = pos.board.piece(_c("e1"))
        assert king is not None
        names = _names(MoveGenerator(pos.board).possible_moves(king))
        assert "c1" not in names
        assert "g1" in names

    def test_transit_not_verified_by_default(self) -> None:
        pos = self._castling_position()
        pos.put(PieceType.ROOK, Color.BLACK, "f8")
        king = pos.board.piece(_c("e1"))
        assert king is not None
        assert "g1" in _names(MoveGenerator(pos.board).possible_moves(king))

        strict = MoveGenerator(pos.board, verify_castling_transit=True)
        names = _names(strict.possible_moves(king))
        assert "g1" not in names
        assert "c1" in names


class TestAttacks:
    def test_pawn_attacks_empty_diagonal(self) -> None:
        pos = _with_kings()
        pos.put(PieceType.PAWN, Color.WHITE, "d3", move_count=1)
        gen = MoveGenerator(pos.board)
        assert gen.is_square_attacked(_c("e4"), Color.WHITE)
        assert gen.is_square_attacked(_c("c4"), Color.WHITE)
        assert not gen.is_square_attacked(_c("d4"), Color.WHITE)

    def test_is_in_check(self) -> None:
        pos = _with_kings()
        pos.put(PieceType.ROOK, Color.BLACK, "e5")
        gen = MoveGenerator(pos.board)
        assert gen.is_in_check(Color.WHITE)
        assert not gen.is_in_check(Color.BLACK)

    def test_blocked_attack(self) -> None:
        pos = _with_kings()
        pos.put(PieceType.ROOK, Color.BLACK, "e5")
        pos.put(PieceType.BISHOP, Color.WHITE, "e3")
        assert not MoveGenerator(pos.board).is_in_check(Color.WHITE)

    def test_missing_king(self) -> None:
        pos = Position.empty()
        pos.put(PieceType.KING, Color.WHITE, "e1")
        with pytest.raises(RuntimeError):
            MoveGenerator(pos.board).king(Color.BLACK)

    def test_opponent_piece(self) -> None:
        pos = Position.initial()
        gen = MoveGenerator(pos.board)
        assert gen.is_there_opponent_piece(_c("e7"), Color.WHITE)
        assert not gen.is_there_opponent_piece(_c("e2"), Color.WHITE)
        assert not gen.is_there_opponent_piece(_c("e4"), Color.WHITE)
