"""Display notation for played moves."""

from __future__ import annotations

from caissa.core.board import Board
from caissa.core.enums import MoveKind, PieceType
from caissa.core.move import Move
from caissa.core.piece import PIECE_LETTERS
from caissa.core.rules import Rules
from caissa.core.types import FILE_NAMES, Square, file_of, rank_of, square_name


def move_to_san(board: Board, move: Move, ep_square: Square | None) -> str:
    """Convert a legal *move* to notation given the *board* before the move.

    En-passant captures carry an ``e.p.`` marker (``exd6 e.p.``).
    """
    if move.kind == MoveKind.CASTLE_KINGSIDE:
        san = "O-O"
    elif move.kind == MoveKind.CASTLE_QUEENSIDE:
        san = "O-O-O"
    else:
        assert move.from_sq is not None and move.to_sq is not None
        piece = board[move.from_sq]
        assert piece is not None
        san = ""
        is_capture = Rules.is_capture(board, move)

        if piece.piece_type == PieceType.PAWN:
            if is_capture:
                san += FILE_NAMES[file_of(move.from_sq)]
        else:
            san += PIECE_LETTERS[piece.piece_type]

            # Disambiguation
            ambiguous = [
                sq
                for sq in board.pieces(piece.color, piece.piece_type)
                if sq != move.from_sq
                and move.to_sq in (board.find_legal_destinations(sq, ep_square) or ())
            ]
            if ambiguous:
                same_file = any(file_of(sq) == file_of(move.from_sq) for sq in ambiguous)
                same_rank = any(rank_of(sq) == rank_of(move.from_sq) for sq in ambiguous)
                if not same_file:
                    san += FILE_NAMES[file_of(move.from_sq)]
                elif not same_rank:
                    san += str(rank_of(move.from_sq) + 1)
                else:
                    san += square_name(move.from_sq)

        if is_capture:
            san += "x"

        san += square_name(move.to_sq)

        if move.kind == MoveKind.PROMOTION and move.promotion is not None:
            san += "=" + PIECE_LETTERS[move.promotion]
        if move.en_passant:
            san += " e.p."

    # Check / checkmate suffix
    after = board.copy()
    after.apply_move(move)
    if after.is_in_check(after.side_to_move):
        ep_after = Rules.en_passant_after(board, move)
        san += "+" if Rules.has_legal_move(after, ep_after) else "#"

    return san
