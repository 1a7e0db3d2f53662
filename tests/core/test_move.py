"""Tests for Move, Piece and the move wire codec."""

import pytest

from caissa.core.enums import Color, MoveKind, PieceType
from caissa.core.move import Move, decode_move, encode_move
from caissa.core.piece import Piece, piece_type_from_letter
from caissa.core.types import D6, E2, E4, E5, E7, E8, F3, G1


class TestPiece:
    def test_fen_chars(self) -> None:
        assert str(Piece(Color.WHITE, PieceType.KNIGHT)) == "N"
        assert str(Piece(Color.BLACK, PieceType.QUEEN)) == "q"

    def test_from_char(self) -> None:
        assert Piece.from_char("k") == Piece(Color.BLACK, PieceType.KING)

    def test_from_char_rejects_unknown(self) -> None:
        with pytest.raises(ValueError):
            Piece.from_char("x")

    def test_name(self) -> None:
        assert Piece(Color.WHITE, PieceType.BISHOP).name == "White Bishop"

    def test_letters_either_case(self) -> None:
        assert piece_type_from_letter("n") == PieceType.KNIGHT
        assert piece_type_from_letter("R") == PieceType.ROOK
        assert piece_type_from_letter("e") is None


class TestMove:
    def test_piece_constructor(self) -> None:
        move = Move.piece(PieceType.KNIGHT, G1, F3)
        assert move.kind == MoveKind.PIECE
        assert (move.from_sq, move.to_sq, move.piece_type) == (G1, F3, PieceType.KNIGHT)
        assert not move.en_passant

    def test_promote_constructor(self) -> None:
        move = Move.promote(E7, E8, PieceType.QUEEN)
        assert move.kind == MoveKind.PROMOTION
        assert move.promotion == PieceType.QUEEN

    def test_castles(self) -> None:
        assert Move.castle_kingside().is_castle
        assert Move.castle_queenside().kind == MoveKind.CASTLE_QUEENSIDE
        assert not Move.piece(PieceType.PAWN, E2, E4).is_castle

    @pytest.mark.parametrize(
        "fields",
        [
            {"kind": MoveKind.PIECE},
            {"kind": MoveKind.PIECE, "from_sq": E2},
            {"kind": MoveKind.PROMOTION, "from_sq": E7, "to_sq": E8},
        ],
    )
    def test_incomplete_move_rejected(self, fields: dict) -> None:
        with pytest.raises(ValueError):
            Move(**fields)

    def test_with_en_passant(self) -> None:
        move = Move.piece(PieceType.PAWN, E5, D6).with_en_passant(True)
        assert move.en_passant

    def test_value_equality(self) -> None:
        assert Move.piece(PieceType.PAWN, E2, E4) == Move.piece(PieceType.PAWN, E2, E4)
        assert hash(Move.castle_kingside()) == hash(Move.castle_kingside())

    @pytest.mark.parametrize(
        ("move", "text"),
        [
            (Move.piece(PieceType.KNIGHT, G1, F3), "Knight g1 → f3"),
            (Move.promote(E7, E8, PieceType.QUEEN), "Pawn e7 → e8 = Queen"),
            (Move.piece(PieceType.PAWN, E5, D6, en_passant=True), "Pawn e5 → d6, en passant"),
            (Move.castle_kingside(), "Short castle"),
            (Move.castle_queenside(), "Long castle"),
        ],
    )
    def test_str(self, move: Move, text: str) -> None:
        assert str(move) == text


class TestWireCodec:
    @pytest.mark.parametrize(
        ("move", "text"),
        [
            (Move.piece(PieceType.PAWN, E2, E4), "e2e4"),
            (Move.piece(PieceType.KNIGHT, G1, F3), "Ng1f3"),
            (Move.piece(PieceType.PAWN, E5, D6, en_passant=True), "e5d6ep"),
            (Move.promote(E7, E8, PieceType.KNIGHT), "e7e8n"),
            (Move.castle_kingside(), "O-O"),
            (Move.castle_queenside(), "O-O-O"),
        ],
    )
    def test_encode(self, move: Move, text: str) -> None:
        assert encode_move(move) == text
        assert decode_move(text) == move

    @pytest.mark.parametrize("text", ["", "e2", "e2e9", "Xe2e4", "Ne7e8q", "e2e4x", "0-0"])
    def test_decode_rejects_malformed(self, text: str) -> None:
        with pytest.raises(ValueError):
            decode_move(text)
