"""Tests for GameState — history replay, move acceptance and end detection."""

import pytest

from caissa.core.enums import CastlingRights, Color, GameEndState, PieceType
from caissa.core.errors import MoveError
from caissa.core.game_state import FIFTY_MOVE_LIMIT, GameState
from caissa.core.move import Move
from caissa.core.notation import game_from_fen
from caissa.core.piece import Piece
from caissa.core.types import (
    C1, D1, D3, D5, D6, E1, E2, E3, E4, E5, E6, E7, E8, F1, F3, G1, G3, H1, H3,
)


class TestReplay:
    def test_replay_is_deterministic(self, game: GameState, play) -> None:
        play(game, "e4", "e5", "Nf3", "Nc6", "Bb5", "a6")
        before = game.board.copy()
        game.invalidate_cache()
        assert game.board == before

    def test_board_at(self, game: GameState, play) -> None:
        play(game, "e4", "e5")
        assert game.board_at(0) == game.starting_board
        assert game.board_at(1)[E4] == Piece(Color.WHITE, PieceType.PAWN)
        assert game.board_at(1)[E7] == Piece(Color.BLACK, PieceType.PAWN)
        assert game.board_at(2) == game.board

    @pytest.mark.parametrize("index", [-1, 3])
    def test_board_at_out_of_range(self, game: GameState, play, index: int) -> None:
        play(game, "e4", "e5")
        with pytest.raises(IndexError):
            game.board_at(index)

    def test_board_at_returns_a_copy(self, game: GameState, play) -> None:
        play(game, "e4")
        game.board_at(1)[E4] = None
        assert game.board[E4] is not None

    def test_starting_board_is_copied(self) -> None:
        start = game_from_fen("4k3/8/8/8/8/8/8/4K3 w - - 0 1").starting_board
        game = GameState(start)
        start[E1] = None
        assert game.board[E1] is not None

    def test_current_board_is_a_copy(self, game: GameState) -> None:
        fen = game.get_fen()
        board = game.board
        board.apply_move(Move.piece(PieceType.PAWN, E2, E4))
        board[E1] = None
        assert game.board == game.board_at(game.move_count())
        assert game.move_count() == 0
        assert game.get_fen() == fen


class TestPerformMove:
    def test_turn_flips_on_success(self, game: GameState) -> None:
        assert game.perform_move(Move.piece(PieceType.PAWN, E2, E4)) is None
        assert game.whose_turn() == Color.BLACK
        assert game.move_count() == 1

    def test_rejection_changes_nothing(self, game: GameState) -> None:
        fen = game.get_fen()
        assert game.perform_move(Move.piece(PieceType.KNIGHT, G1, G3)) == (
            MoveError.PIECE_DOES_NOT_MOVE_LIKE_THAT
        )
        assert game.whose_turn() == Color.WHITE
        assert game.move_count() == 0
        assert game.get_fen() == fen

    def test_wrong_side(self, game: GameState) -> None:
        assert game.perform_move(Move.piece(PieceType.PAWN, E7, E5)) == (
            MoveError.TILE_FROM_IS_ENEMY_PIECE
        )

    def test_recorded_move_is_normalized(self, game: GameState) -> None:
        game.perform_move(Move.piece(PieceType.QUEEN, G1, F3))
        assert game.last_move() == Move.piece(PieceType.KNIGHT, G1, F3)

    def test_self_check_refused(self) -> None:
        game = game_from_fen("4r2k/8/8/8/8/8/4B3/4K3 w - - 0 1")
        assert game.perform_move(Move.piece(PieceType.BISHOP, E2, D3)) == MoveError.IN_CHECK
        assert game.move_count() == 0

    def test_king_walking_into_attack(self) -> None:
        game = game_from_fen("4k3/8/8/8/8/8/3r4/4K3 w - - 0 1")
        assert game.perform_move(Move.piece(PieceType.KING, E1, D1)) == MoveError.IN_CHECK

    @pytest.mark.parametrize(
        ("move", "error"),
        [
            (Move.piece(PieceType.ROOK, H1, -1), MoveError.PIECE_DOES_NOT_MOVE_LIKE_THAT),
            (Move.piece(PieceType.ROOK, H1, 64), MoveError.PIECE_DOES_NOT_MOVE_LIKE_THAT),
            (Move.piece(PieceType.ROOK, 64, H1), MoveError.TILE_FROM_IS_EMPTY),
            (Move.piece(PieceType.ROOK, -8, H1), MoveError.TILE_FROM_IS_EMPTY),
        ],
    )
    def test_off_board_squares_refused(self, move: Move, error: MoveError) -> None:
        game = game_from_fen("4k3/8/8/8/8/8/8/4K2R w K - 0 1")
        fen = game.get_fen()
        assert game.perform_move(move) == error
        assert game.get_fen() == fen


class TestEnPassantWindow:
    def test_window_opens_after_double_push(self, game: GameState, play) -> None:
        play(game, "e4")
        assert game.en_passant == E3

    def test_capture_inside_window(self, game: GameState, play) -> None:
        play(game, "e4", "a6", "e5", "d5")
        assert game.en_passant == D6
        assert game.perform_move(Move.piece(PieceType.PAWN, E5, D6)) is None
        assert game.last_move().en_passant
        assert game.board[D5] is None

    def test_window_lasts_one_ply(self, game: GameState, play) -> None:
        play(game, "e4", "a6", "e5", "d5", "h3", "h6")
        assert game.en_passant is None
        assert game.perform_move(Move.piece(PieceType.PAWN, E5, D6)) == (
            MoveError.PIECE_DOES_NOT_MOVE_LIKE_THAT
        )

    def test_en_passant_at(self, game: GameState, play) -> None:
        play(game, "e4", "e5", "Nf3")
        assert game.en_passant_at(0) is None
        assert game.en_passant_at(1) == E3
        assert game.en_passant_at(2) == E6
        assert game.en_passant_at(3) is None
        with pytest.raises(IndexError):
            game.en_passant_at(4)


class TestPromotion:
    _FEN = "8/4P3/8/8/8/8/k7/4K3 w - - 0 1"

    def test_piece_must_be_named(self) -> None:
        game = game_from_fen(self._FEN)
        assert game.perform_move(Move.piece(PieceType.PAWN, E7, E8)) == (
            MoveError.PROMOTION_PIECE_NOT_SPECIFIED
        )

    def test_promotes(self) -> None:
        game = game_from_fen(self._FEN)
        assert game.perform_move(Move.promote(E7, E8, PieceType.KNIGHT)) is None
        assert game.board[E8] == Piece(Color.WHITE, PieceType.KNIGHT)
        assert game.board[E7] is None


class TestCastling:
    _FEN = "r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1"

    def test_short_castle(self) -> None:
        game = game_from_fen(self._FEN)
        assert game.perform_move(Move.castle_kingside()) is None
        assert game.board[G1] == Piece(Color.WHITE, PieceType.KING)
        assert game.board[F1] == Piece(Color.WHITE, PieceType.ROOK)
        assert game.board.castling == CastlingRights.BLACK_BOTH

    def test_through_check(self) -> None:
        game = game_from_fen("r3k2r/8/8/8/8/8/5r2/R3K2R w KQkq - 0 1")
        assert game.perform_move(Move.castle_kingside()) == MoveError.CASTLING_THROUGH_CHECK
        assert game.perform_move(Move.castle_queenside()) is None

    def test_rights_lost_after_king_moves(self) -> None:
        game = game_from_fen(self._FEN)
        for move in (
            Move.piece(PieceType.KING, E1, E2),
            Move.piece(PieceType.KING, E8, E7),
            Move.piece(PieceType.KING, E2, E1),
            Move.piece(PieceType.KING, E7, E8),
        ):
            assert game.perform_move(move) is None
        assert game.perform_move(Move.castle_kingside()) == MoveError.CASTLING_NO_RIGHTS


class TestEndStates:
    def test_running(self, game: GameState) -> None:
        assert game.get_end_state() == GameEndState.RUNNING

    def test_back_rank_mate(self, play) -> None:
        game = game_from_fen("6k1/5ppp/8/8/8/8/8/R5K1 w - - 0 1")
        play(game, "Ra8")
        assert game.get_end_state() == GameEndState.CHECKMATE
        assert game.get_move_in_chess_notation(0).endswith("#")

    def test_stalemate(self, play) -> None:
        game = game_from_fen("7k/8/5Q2/6K1/8/8/8/8 w - - 0 1")
        play(game, "Qf7")
        assert game.get_end_state() == GameEndState.DRAW

    def test_fifty_move_draw(self, play) -> None:
        game = game_from_fen("4k3/8/8/8/8/8/8/R3K3 w - - 0 1")
        shuffle = ("Ra2", "Kd8", "Ra1", "Ke8")
        for _ in range(FIFTY_MOVE_LIMIT // len(shuffle)):
            play(game, *shuffle)
        assert game.halfmove_clock == 48
        assert game.get_end_state() == GameEndState.RUNNING
        play(game, "Ra2", "Kd8")
        assert game.halfmove_clock == FIFTY_MOVE_LIMIT
        assert game.get_end_state() == GameEndState.DRAW

    def test_clock_resets_on_pawn_move(self, game: GameState, play) -> None:
        play(game, "Nf3", "Nf6")
        assert game.halfmove_clock == 2
        play(game, "e4")
        assert game.halfmove_clock == 0

    def test_custom_limit(self) -> None:
        game = GameState(halfmove_clock=50, fifty_move_limit=100)
        assert game.get_end_state() == GameEndState.RUNNING
        game.fifty_move_limit = 50
        assert game.get_end_state() == GameEndState.DRAW


class TestQueries:
    def test_legal_destinations(self, game: GameState) -> None:
        assert sorted(game.legal_destinations(G1)) == [F3, H3]

    def test_not_on_move(self, game: GameState) -> None:
        assert game.legal_destinations(E7) == []

    def test_empty_square(self, game: GameState) -> None:
        assert game.legal_destinations(E4) == []

    def test_castle_destinations_included(self) -> None:
        game = game_from_fen("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1")
        destinations = game.legal_destinations(E1)
        assert G1 in destinations and C1 in destinations

    def test_history(self, game: GameState, play) -> None:
        assert game.last_move() is None
        play(game, "e4", "e5")
        assert game.move_count() == 2
        assert game.get_move(0) == Move.piece(PieceType.PAWN, E2, E4)
        assert game.last_move() == Move.piece(PieceType.PAWN, E7, E5)
        assert game.moves == (game.get_move(0), game.get_move(1))
        assert game.whose_turn() == Color.WHITE

    def test_fullmove_number(self, game: GameState, play) -> None:
        play(game, "e4")
        assert game.fullmove_number == 1
        play(game, "e5")
        assert game.fullmove_number == 2

    def test_repr_shows_fen(self, game: GameState) -> None:
        assert "KQkq" in repr(game)
