"""Tests for GameState."""

import pytest

from castlekeep.core.board import Board
from castlekeep.core.enums import Color, GameResult, GameStatus, PieceType
from castlekeep.core.move import Move
from castlekeep.core.position import Position
from castlekeep.core.types import D5, E2, E4, parse_square
from castlekeep.game.state import GameState

PROMOTION_ROWS = [
    ".......k",
    "....P...",
    "........",
    "........",
    "........",
    "........",
    "........",
    "....K...",
]


def play(gs: GameState, *moves: str) -> None:
    """Play coordinate moves like ``"e2e4"``; each must be accepted."""
    for uci in moves:
        fr, to = parse_square(uci[:2]), parse_square(uci[2:])
        ok = gs.make_move(fr // 8, fr % 8, to // 8, to % 8)
        assert ok, f"{uci} rejected"


def snapshot(gs: GameState) -> tuple:
    """Every field a make/undo pair must restore."""
    captured = {
        color: [(p.piece_type, p.color) for p in pieces]
        for color, pieces in gs.captured.items()
    }
    return (
        gs.position.copy(),
        gs.side_to_move,
        gs.en_passant,
        gs.is_check,
        gs.status,
        gs.result,
        captured,
        gs.ply_count,
        gs.last_move,
    )


def _castling_state() -> GameState:
    board = Board.from_diagram(
        [
            "r...k..r",
            "pppppppp",
            "........",
            "........",
            "........",
            "........",
            "PPPPPPPP",
            "R...K..R",
        ]
    )
    return GameState(Position(board))


def _en_passant_state() -> GameState:
    gs = GameState()
    play(gs, "e2e4", "a7a6", "e4e5", "d7d5")
    return gs


def _in_check_state() -> GameState:
    gs = GameState()
    play(gs, "e2e4", "f7f6", "d1h5")
    return gs


def _promotion_state() -> GameState:
    return GameState(Position(Board.from_diagram(PROMOTION_ROWS)))


ROUND_TRIP_SETUPS = {
    "castling": _castling_state,
    "en_passant": _en_passant_state,
    "in_check": _in_check_state,
    "promotion": _promotion_state,
}


class TestGameStateSetup:
    def test_default_is_start_position(self) -> None:
        gs = GameState()
        assert gs.side_to_move == Color.WHITE
        assert gs.status == GameStatus.ONGOING
        assert gs.result == GameResult.IN_PROGRESS
        assert not gs.is_check
        assert gs.ply_count == 0
        assert gs.winner is None
        assert not gs.is_draw
        assert gs.captured == {Color.WHITE: [], Color.BLACK: []}

    def test_reset(self) -> None:
        gs = GameState()
        play(gs, "e2e4", "d7d5", "e4d5")
        gs.reset()
        assert gs.ply_count == 0
        assert gs.side_to_move == Color.WHITE
        assert gs.position == Position()
        assert gs.captured[Color.WHITE] == []

    def test_custom_position_status(self) -> None:
        board = Board.from_diagram(
            [
                ".......k",
                "........",
                ".....KQ.",
                "........",
                "........",
                "........",
                "........",
                "........",
            ]
        )
        gs = GameState(Position(board, Color.BLACK))
        assert gs.status == GameStatus.STALEMATE
        assert gs.result == GameResult.DRAW
        assert gs.winner is None
        assert gs.is_game_over
        assert gs.is_draw


class TestGameStateQueries:
    def test_get_piece(self) -> None:
        gs = GameState()
        piece = gs.get_piece(7, 4)
        assert piece is not None
        assert piece.piece_type == PieceType.KING
        assert piece.color == Color.WHITE

    def test_get_piece_out_of_range(self) -> None:
        gs = GameState()
        assert gs.get_piece(8, 0) is None
        assert gs.get_piece(0, -1) is None

    def test_valid_moves_for_e2(self) -> None:
        gs = GameState()
        moves = gs.get_valid_moves(6, 4)
        assert {(m.to_row, m.to_col) for m in moves} == {(5, 4), (4, 4)}

    def test_valid_moves_out_of_range(self) -> None:
        assert GameState().get_valid_moves(9, 9) == []

    def test_valid_moves_for_side_not_to_move(self) -> None:
        assert GameState().get_valid_moves(1, 4) == []

    def test_all_valid_moves(self) -> None:
        gs = GameState()
        candidates = gs.get_all_valid_moves(Color.WHITE)
        assert len(candidates) == 20
        assert all(c.piece.color == Color.WHITE for c in candidates)
        assert gs.get_all_valid_moves(Color.BLACK) == []


class TestGameStateMoves:
    def test_make_move_records(self) -> None:
        gs = GameState()
        play(gs, "e2e4")
        assert gs.side_to_move == Color.BLACK
        assert gs.ply_count == 1
        assert gs.last_move == (E2, E4)
        assert gs.notation() == ["e4"]
        assert gs.en_passant == parse_square("e3")

    def test_history_snapshot_is_pre_move(self) -> None:
        gs = GameState()
        play(gs, "e2e4")
        record = gs.move_history[-1]
        assert not record.piece.has_moved
        assert record.piece is not gs.position.board[E4]

    def test_illegal_move_rejected(self) -> None:
        gs = GameState()
        assert not gs.make_move(6, 4, 3, 4)
        assert gs.ply_count == 0
        assert gs.position == Position()

    def test_empty_origin_rejected(self) -> None:
        gs = GameState()
        assert not gs.make_move(4, 4, 3, 4)

    def test_off_board_rejected(self) -> None:
        gs = GameState()
        assert not gs.make_move(6, 4, -1, 4)
        assert not gs.make_move(8, 0, 7, 0)

    def test_wrong_color_rejected(self) -> None:
        gs = GameState()
        assert not gs.make_move(1, 4, 3, 4)
        assert gs.side_to_move == Color.WHITE

    def test_capture_recorded(self) -> None:
        gs = GameState()
        play(gs, "e2e4", "d7d5", "e4d5")
        taken = gs.captured[Color.WHITE]
        assert len(taken) == 1
        assert taken[0].piece_type == PieceType.PAWN
        assert taken[0].color == Color.BLACK
        assert gs.notation() == ["e4", "d5", "exd5"]

    def test_movetext(self) -> None:
        gs = GameState()
        play(gs, "e2e4", "e7e5", "g1f3")
        assert gs.movetext() == ["1. e4 e5", "2. Nf3"]


class TestUndo:
    def test_undo_restores(self) -> None:
        gs = GameState()
        play(gs, "e2e4")
        assert gs.undo_move()
        assert gs.position == Position()
        assert gs.ply_count == 0
        assert gs.last_move is None

    def test_undo_empty_history(self) -> None:
        assert not GameState().undo_move()

    def test_undo_capture_restores_lists(self) -> None:
        gs = GameState()
        play(gs, "e2e4", "d7d5")
        before = gs.position.copy()
        play(gs, "e4d5")
        assert gs.undo_move()
        assert gs.position == before
        assert gs.captured[Color.WHITE] == []
        assert gs.get_piece(3, 3).color == Color.BLACK

    def test_undo_from_checkmate(self) -> None:
        gs = GameState()
        play(gs, "f2f3", "e7e5", "g2g4", "d8h4")
        assert gs.is_game_over
        assert gs.undo_move()
        assert not gs.is_game_over
        assert gs.result == GameResult.IN_PROGRESS
        assert not gs.is_check

    @pytest.mark.parametrize(
        ("setup", "flag"),
        [
            ("castling", "castling"),
            ("en_passant", "en_passant"),
            ("in_check", None),
            ("promotion", "promotion"),
        ],
    )
    def test_round_trip_every_legal_move(self, setup: str, flag: str | None) -> None:
        gs = ROUND_TRIP_SETUPS[setup]()
        moves = gs.legal_moves()
        assert moves
        if flag is not None:
            assert any(getattr(m, flag) for m in moves)

        before = snapshot(gs)
        for move in moves:
            promotion = PieceType.QUEEN if move.promotion else None
            assert gs.apply_move(move, promotion), f"{move} rejected"
            assert gs.undo_move()
            assert snapshot(gs) == before, f"{move} not restored"

    def test_undo_into_check(self) -> None:
        gs = GameState()
        play(gs, "e2e4", "f7f6", "d1h5")
        assert gs.is_check
        play(gs, "g7g6")
        assert not gs.is_check
        assert gs.undo_move()
        assert gs.is_check
        assert gs.side_to_move == Color.BLACK
        assert gs.status == GameStatus.ONGOING


class TestScenarios:
    def test_fools_mate(self) -> None:
        gs = GameState()
        play(gs, "f2f3", "e7e5", "g2g4", "d8h4")
        assert gs.is_game_over
        assert gs.status == GameStatus.CHECKMATE
        assert gs.result == GameResult.BLACK_WINS
        assert gs.winner == Color.BLACK
        assert gs.is_check
        assert gs.get_all_valid_moves(Color.WHITE) == []

    def test_en_passant_window(self) -> None:
        gs = GameState()
        play(gs, "e2e4", "a7a6", "e4e5", "d7d5")
        moves = gs.get_valid_moves(3, 4)
        assert (2, 3) in {(m.to_row, m.to_col) for m in moves}

        play(gs, "e5d6")
        assert gs.get_piece(3, 3) is None
        assert gs.captured[Color.WHITE][0].piece_type == PieceType.PAWN
        assert gs.notation()[-1] == "exd6"

    def test_en_passant_expires(self) -> None:
        gs = GameState()
        play(gs, "e2e4", "a7a6", "e4e5", "d7d5", "g1f3", "a6a5")
        assert not gs.make_move(3, 4, 2, 3)

    def test_castling_blocked_by_attacked_square(self) -> None:
        board = Board.from_diagram(
            [
                "....k...",
                "........",
                "........",
                "........",
                "........",
                ".....r..",
                "PPPPP.PP",
                "R...K..R",
            ]
        )
        gs = GameState(Position(board))
        assert not gs.make_move(7, 4, 7, 6)
        assert gs.make_move(7, 4, 7, 2)
        assert gs.get_piece(7, 3).piece_type == PieceType.ROOK
        assert gs.notation() == ["O-O-O"]

    def test_check_flag(self) -> None:
        gs = GameState()
        play(gs, "e2e4", "f7f6", "d1h5")
        assert gs.is_check
        assert not gs.is_game_over


class TestPromotion:
    @pytest.mark.parametrize(
        "piece_type",
        [PieceType.QUEEN, PieceType.ROOK, PieceType.BISHOP, PieceType.KNIGHT],
    )
    def test_promotion_choice(self, piece_type: PieceType) -> None:
        gs = GameState(Position(Board.from_diagram(PROMOTION_ROWS)))
        assert gs.make_move(1, 4, 0, 4, piece_type)
        placed = gs.get_piece(0, 4)
        assert placed.piece_type == piece_type
        assert gs.move_history[-1].promotion == piece_type

    def test_promotion_round_trip(self) -> None:
        gs = GameState(Position(Board.from_diagram(PROMOTION_ROWS)))
        before = gs.position.copy()
        assert gs.make_move(1, 4, 0, 4, PieceType.QUEEN)
        assert gs.undo_move()
        assert gs.position == before
        assert gs.get_piece(1, 4).piece_type == PieceType.PAWN

    def test_invalid_promotion_rejected(self) -> None:
        gs = GameState(Position(Board.from_diagram(PROMOTION_ROWS)))
        assert not gs.make_move(1, 4, 0, 4, PieceType.KING)
        assert gs.ply_count == 0

    def test_promotion_ignored_for_normal_move(self) -> None:
        gs = GameState()
        assert gs.make_move(6, 4, 4, 4, PieceType.QUEEN)
        assert gs.get_piece(4, 4).piece_type == PieceType.PAWN
        assert gs.move_history[-1].promotion is None

    def test_promotion_without_choice_keeps_pawn(self) -> None:
        gs = GameState(Position(Board.from_diagram(PROMOTION_ROWS)))
        assert gs.make_move(1, 4, 0, 4)
        assert gs.get_piece(0, 4).piece_type == PieceType.PAWN


class TestApplyMove:
    def test_accepts_generated_move(self) -> None:
        gs = GameState()
        move = gs.legal_moves()[0]
        assert gs.apply_move(move)
        assert gs.ply_count == 1

    def test_rejects_stale_move(self) -> None:
        gs = GameState()
        move = next(m for m in gs.legal_moves() if str(m) == "e2e4")
        assert gs.apply_move(move)
        assert not gs.apply_move(move)
        assert gs.ply_count == 1

    def test_rejects_forged_flags(self) -> None:
        gs = GameState()
        play(gs, "e2e4", "d7d5")
        forged = Move(E4, D5)  # capture without the capture flag
        assert not gs.apply_move(forged)
        assert gs.ply_count == 2

    def test_rejects_off_board_squares(self) -> None:
        gs = GameState()
        assert not gs.apply_move(Move(-1, 64))
