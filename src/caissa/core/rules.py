"""High-level chess rules: move validation, castling, mate and draw detection."""

from __future__ import annotations

from typing import TYPE_CHECKING

from caissa.core.enums import CastlingRights, GameEndState, MoveKind, PieceType
from caissa.core.errors import MoveError
from caissa.core.move import Move
from caissa.core.move_validator import is_piece_move_legal
from caissa.core.piece import Piece
from caissa.core.types import Square, file_of, is_valid_square, make_square, rank_of

if TYPE_CHECKING:
    from caissa.core.board import Board

_KING_FILE = 4

# (kingside) -> (king destination file, files that must be empty, files the king crosses)
_CASTLE_FILES: dict[bool, tuple[int, tuple[int, ...], tuple[int, ...]]] = {
    True: (6, (5, 6), (4, 5, 6)),
    False: (2, (1, 2, 3), (2, 3, 4)),
}

_WRONG_PROMOTIONS: frozenset[PieceType] = frozenset({PieceType.PAWN, PieceType.KING})


class Rules:
    """Static rule-checker that operates on a :class:`Board`."""

    # ── Move validation ──────────────────────────────────────────────────

    @staticmethod
    def validate_move(board: Board, move: Move, ep_square: Square | None) -> Move | MoveError:
        """Check *move* for the side to move on *board*.

        Returns the move as it will be played (piece type taken from the board,
        en-passant flag derived) or the first rule it breaks.
        """
        if move.is_castle:
            error = Rules.castling_error(board, move)
            if error is not None:
                return error
            normalized = move
        else:
            assert move.from_sq is not None and move.to_sq is not None
            piece = board[move.from_sq] if is_valid_square(move.from_sq) else None
            if piece is None:
                return MoveError.TILE_FROM_IS_EMPTY
            if piece.color != board.side_to_move:
                return MoveError.TILE_FROM_IS_ENEMY_PIECE
            if not is_valid_square(move.to_sq):
                return MoveError.PIECE_DOES_NOT_MOVE_LIKE_THAT
            legal, en_passant = is_piece_move_legal(
                piece, move.from_sq, move.to_sq, ep_square, board
            )
            if not legal:
                return MoveError.PIECE_DOES_NOT_MOVE_LIKE_THAT
            reaches_last_rank = (
                piece.piece_type == PieceType.PAWN
                and rank_of(move.to_sq) == piece.color.promotion_rank
            )
            if move.kind == MoveKind.PROMOTION:
                if not reaches_last_rank:
                    return MoveError.PROMOTION_NOT_LEGAL
                if move.promotion is None or move.promotion in _WRONG_PROMOTIONS:
                    return MoveError.PROMOTION_WRONG_PIECE
                normalized = Move.promote(move.from_sq, move.to_sq, move.promotion)
            else:
                if reaches_last_rank:
                    return MoveError.PROMOTION_PIECE_NOT_SPECIFIED
                normalized = Move.piece(piece.piece_type, move.from_sq, move.to_sq, en_passant)

        if Rules.leaves_king_in_check(board, normalized):
            return MoveError.IN_CHECK
        return normalized

    @staticmethod
    def leaves_king_in_check(board: Board, move: Move) -> bool:
        """Whether playing *move* would leave the mover's king attacked."""
        future = board.copy()
        future.apply_move(move)
        return future.is_in_check(board.side_to_move)

    @staticmethod
    def is_capture(board: Board, move: Move) -> bool:
        """Whether *move* takes a piece when played on *board*."""
        if move.is_castle:
            return False
        assert move.to_sq is not None
        return move.en_passant or board[move.to_sq] is not None

    @staticmethod
    def en_passant_after(board: Board, move: Move) -> Square | None:
        """Square skipped by a two-rank pawn advance, if *move* is one."""
        if move.kind != MoveKind.PIECE:
            return None
        assert move.from_sq is not None and move.to_sq is not None
        piece = board[move.from_sq]
        if piece is None or piece.piece_type != PieceType.PAWN:
            return None
        from_rank, to_rank = rank_of(move.from_sq), rank_of(move.to_sq)
        if abs(to_rank - from_rank) != 2:
            return None
        return make_square(file_of(move.to_sq), (from_rank + to_rank) // 2)

    # ── Castling ─────────────────────────────────────────────────────────

    @staticmethod
    def castling_error(board: Board, move: Move) -> MoveError | None:
        """Why the side to move cannot castle as *move* asks, or ``None``."""
        color = board.side_to_move
        kingside = move.kind == MoveKind.CASTLE_KINGSIDE
        rank = color.home_rank
        rook_file = 7 if kingside else 0
        if (
            not board.castling & CastlingRights.for_side(color, kingside)
            or board[make_square(_KING_FILE, rank)] != Piece(color, PieceType.KING)
            or board[make_square(rook_file, rank)] != Piece(color, PieceType.ROOK)
        ):
            return MoveError.CASTLING_NO_RIGHTS

        _, empty_files, king_files = _CASTLE_FILES[kingside]
        if any(not board.is_empty(make_square(f, rank)) for f in empty_files):
            return MoveError.CASTLING_TILES_IN_BETWEEN_NOT_FREE
        enemy = color.opposite
        if any(board.is_square_attacked_by(enemy, make_square(f, rank)) for f in king_files):
            return MoveError.CASTLING_THROUGH_CHECK
        return None

    @staticmethod
    def castle_destinations(board: Board, sq: Square) -> list[Square]:
        """King destinations of the castles available from *sq*.

        Empty unless *sq* holds the side to move's king on its home square.
        """
        color = board.side_to_move
        if sq != make_square(_KING_FILE, color.home_rank):
            return []
        if board[sq] != Piece(color, PieceType.KING):
            return []
        destinations: list[Square] = []
        for kingside in (True, False):
            move = Move.castle_kingside() if kingside else Move.castle_queenside()
            if Rules.castling_error(board, move) is None and not Rules.leaves_king_in_check(
                board, move
            ):
                destinations.append(make_square(_CASTLE_FILES[kingside][0], color.home_rank))
        return destinations

    # ── Game end ─────────────────────────────────────────────────────────

    @staticmethod
    def has_legal_move(board: Board, ep_square: Square | None) -> bool:
        """Whether the side to move has at least one legal move."""
        for _, sq in board.pieces_of(board.side_to_move):
            if board.find_legal_destinations(sq, ep_square):
                return True
            if Rules.castle_destinations(board, sq):
                return True
        return False

    @staticmethod
    def is_checkmate(board: Board, ep_square: Square | None) -> bool:
        return board.is_in_check(board.side_to_move) and not Rules.has_legal_move(
            board, ep_square
        )

    @staticmethod
    def is_stalemate(board: Board, ep_square: Square | None) -> bool:
        return not board.is_in_check(board.side_to_move) and not Rules.has_legal_move(
            board, ep_square
        )

    @staticmethod
    def end_state(
        board: Board,
        ep_square: Square | None,
        halfmove_clock: int,
        fifty_move_limit: int,
    ) -> GameEndState:
        """Classify the position for the side to move."""
        if halfmove_clock >= fifty_move_limit:
            return GameEndState.DRAW
        if Rules.has_legal_move(board, ep_square):
            return GameEndState.RUNNING
        if board.is_in_check(board.side_to_move):
            return GameEndState.CHECKMATE
        return GameEndState.DRAW

    # ── Input helpers ────────────────────────────────────────────────────

    @staticmethod
    def move_from_squares(
        board: Board,
        from_sq: Square,
        to_sq: Square,
        promotion: PieceType | None = None,
    ) -> Move:
        """Build the move a user means by dragging *from_sq* onto *to_sq*.

        A king leaving its home square for the c- or g-file is a castle.  The
        result is unvalidated.
        """
        piece = board[from_sq]
        if piece is None:
            return Move(MoveKind.PIECE, from_sq=from_sq, to_sq=to_sq)
        home = make_square(_KING_FILE, piece.color.home_rank)
        if piece.piece_type == PieceType.KING and from_sq == home:
            if to_sq == make_square(6, piece.color.home_rank):
                return Move.castle_kingside()
            if to_sq == make_square(2, piece.color.home_rank):
                return Move.castle_queenside()
        if piece.piece_type == PieceType.PAWN and promotion is not None:
            return Move.promote(from_sq, to_sq, promotion)
        return Move.piece(piece.piece_type, from_sq, to_sq)