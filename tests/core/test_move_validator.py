"""Tests for per-piece move geometry and move counts.

Reference values: https://www.chessprogramming.org/Perft_Results
"""

import pytest

from caissa.core.board import Board
from caissa.core.enums import PieceType
from caissa.core.move import Move
from caissa.core.move_validator import candidate_targets, is_piece_move_legal
from caissa.core.notation import STARTING_FEN, game_from_fen
from caissa.core.piece import Piece
from caissa.core.rules import Rules
from caissa.core.types import (
    A1, C3, D3, D4, D5, D6, E2, E3, E4, E5, E6, F3, G1, H8,
    Square,
    parse_square,
    rank_of,
)

_PROMOTIONS = (PieceType.QUEEN, PieceType.ROOK, PieceType.BISHOP, PieceType.KNIGHT)


def _legal(
    board: Board,
    piece: str,
    from_sq: Square,
    to_sq: Square,
    ep: Square | None = None,
) -> tuple[bool, bool]:
    return is_piece_move_legal(Piece.from_char(piece), from_sq, to_sq, ep, board)


def _board(placement: dict[str, str]) -> Board:
    board = Board()
    for name, char in placement.items():
        board[parse_square(name)] = Piece.from_char(char)
    return board


def _legal_moves(board: Board, ep: Square | None) -> list[Move]:
    """Every legal move for the side to move, promotions expanded."""
    moves: list[Move] = []
    for piece, from_sq in board.pieces_of(board.side_to_move):
        for to_sq in board.find_legal_destinations(from_sq, ep) or []:
            if piece.piece_type == PieceType.PAWN and rank_of(to_sq) == piece.color.promotion_rank:
                moves.extend(Move.promote(from_sq, to_sq, pt) for pt in _PROMOTIONS)
            else:
                moves.append(Rules.move_from_squares(board, from_sq, to_sq))
        for to_sq in Rules.castle_destinations(board, from_sq):
            moves.append(Rules.move_from_squares(board, from_sq, to_sq))
    return moves


def perft(board: Board, ep: Square | None, depth: int) -> int:
    """Count leaf nodes at *depth* by playing every validated move on a copy."""
    if depth == 0:
        return 1
    nodes = 0
    for move in _legal_moves(board, ep):
        played = Rules.validate_move(board, move, ep)
        assert isinstance(played, Move), f"{move} refused: {played!r}"
        child = board.copy()
        child.apply_move(played)
        nodes += perft(child, Rules.en_passant_after(board, played), depth - 1)
    return nodes


def _perft_fen(fen: str, depth: int) -> int:
    game = game_from_fen(fen)
    return perft(game.board, game.en_passant, depth)


# ── Pawn ─────────────────────────────────────────────────────────────────────


class TestPawn:
    def test_single_push(self) -> None:
        assert _legal(Board.initial(), "P", E2, E3) == (True, False)

    def test_double_push_from_start(self) -> None:
        assert _legal(Board.initial(), "P", E2, E4) == (True, False)

    def test_double_push_only_from_start(self) -> None:
        board = _board({"e3": "P"})
        assert _legal(board, "P", E3, parse_square("e5")) == (False, False)

    def test_double_push_blocked_midway(self) -> None:
        board = Board.initial()
        board[E3] = Piece.from_char("n")
        assert _legal(board, "P", E2, E4) == (False, False)

    def test_push_onto_piece(self) -> None:
        board = _board({"e4": "P", "e5": "p"})
        assert _legal(board, "P", E4, E5) == (False, False)

    def test_backwards(self) -> None:
        board = _board({"e4": "P"})
        assert _legal(board, "P", E4, E3) == (False, False)

    def test_black_moves_down(self) -> None:
        board = _board({"e5": "p"})
        assert _legal(board, "p", E5, parse_square("e4")) == (True, False)
        assert _legal(board, "p", E5, E6) == (False, False)

    def test_diagonal_capture(self) -> None:
        board = _board({"e4": "P", "d5": "p"})
        assert _legal(board, "P", E4, D5) == (True, False)

    def test_diagonal_onto_empty(self) -> None:
        board = _board({"e4": "P"})
        assert _legal(board, "P", E4, D5) == (False, False)

    def test_diagonal_onto_friend(self) -> None:
        board = _board({"e4": "P", "d5": "N"})
        assert _legal(board, "P", E4, D5) == (False, False)

    def test_en_passant_flag(self) -> None:
        board = _board({"e5": "P", "d5": "p"})
        assert _legal(board, "P", E5, D6, ep=D6) == (True, True)

    def test_en_passant_target_on_wrong_rank_is_inert(self) -> None:
        board = _board({"e2": "P"})
        assert _legal(board, "P", E2, D3, ep=D3) == (False, False)


# ── Pieces ───────────────────────────────────────────────────────────────────


class TestPieces:
    def test_knight_jumps_over_pieces(self) -> None:
        assert _legal(Board.initial(), "N", G1, F3) == (True, False)

    def test_knight_friendly_destination(self) -> None:
        assert _legal(Board.initial(), "N", G1, E2) == (False, False)

    def test_knight_bad_shape(self) -> None:
        board = _board({"d4": "N"})
        assert _legal(board, "N", D4, D6) == (False, False)

    def test_bishop_diagonal(self) -> None:
        board = _board({"c3": "B"})
        assert _legal(board, "B", C3, A1) == (True, False)
        assert _legal(board, "B", C3, H8) == (True, False)

    def test_bishop_straight(self) -> None:
        board = _board({"c3": "B"})
        assert _legal(board, "B", C3, parse_square("c7")) == (False, False)

    def test_rook_straight_only(self) -> None:
        board = _board({"d4": "R"})
        assert _legal(board, "R", D4, parse_square("d8")) == (True, False)
        assert _legal(board, "R", D4, parse_square("h4")) == (True, False)
        assert _legal(board, "R", D4, E5) == (False, False)

    def test_queen_any_line(self) -> None:
        board = _board({"d4": "Q"})
        assert _legal(board, "Q", D4, E5) == (True, False)
        assert _legal(board, "Q", D4, D6) == (True, False)
        assert _legal(board, "Q", D4, E6) == (False, False)

    def test_slider_blocked(self) -> None:
        board = _board({"d4": "Q", "d5": "p"})
        assert _legal(board, "Q", D4, D5) == (True, False)
        assert _legal(board, "Q", D4, D6) == (False, False)

    def test_king_one_step(self) -> None:
        board = _board({"d4": "K"})
        assert _legal(board, "K", D4, E5) == (True, False)
        assert _legal(board, "K", D4, D6) == (False, False)

    def test_null_move_is_illegal(self) -> None:
        board = _board({"d4": "Q"})
        assert _legal(board, "Q", D4, D4) == (False, False)


class TestCandidateTargets:
    def test_knight_in_corner(self) -> None:
        targets = candidate_targets(Piece.from_char("N"), A1)
        assert set(targets) == {parse_square("b3"), parse_square("c2")}

    def test_pawn_on_start_rank(self) -> None:
        targets = candidate_targets(Piece.from_char("P"), E2)
        assert set(targets) == {E3, E4, D3, F3}

    def test_black_pawn_on_edge(self) -> None:
        targets = candidate_targets(Piece.from_char("p"), parse_square("a7"))
        assert set(targets) == {parse_square("a6"), parse_square("a5"), parse_square("b6")}

    def test_queen_in_centre(self) -> None:
        assert len(candidate_targets(Piece.from_char("Q"), D4)) == 27


# ── Move counts ──────────────────────────────────────────────────────────────

KIWIPETE = "r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1"
POS3 = "8/2p5/3p4/KP5r/1R3p1k/8/4P1P1/8 w - - 0 1"


class TestPerftStarting:
    def test_depth_1(self) -> None:
        assert _perft_fen(STARTING_FEN, 1) == 20

    def test_depth_2(self) -> None:
        assert _perft_fen(STARTING_FEN, 2) == 400


class TestPerftKiwipete:
    def test_depth_1(self) -> None:
        assert _perft_fen(KIWIPETE, 1) == 48

    @pytest.mark.slow
    def test_depth_2(self) -> None:
        assert _perft_fen(KIWIPETE, 2) == 2_039


class TestPerftPos3:
    def test_depth_1(self) -> None:
        assert _perft_fen(POS3, 1) == 14

    def test_depth_2(self) -> None:
        assert _perft_fen(POS3, 2) == 191
