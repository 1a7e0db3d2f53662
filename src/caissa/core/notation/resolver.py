"""Candidate readings → a concrete :class:`Move` for the current board.

Resolution only finds *which* piece the text means; the result still has to
pass :meth:`GameState.perform_move`.
"""

from __future__ import annotations

import logging

from caissa.core.board import Board
from caissa.core.enums import PieceType
from caissa.core.errors import MoveParseError
from caissa.core.move import Move
from caissa.core.move_validator import is_piece_move_legal
from caissa.core.notation.models import ParsedMove
from caissa.core.notation.parser import parse_move_text
from caissa.core.piece import Piece
from caissa.core.types import Coord, Square, coord_of, file_of, make_square, rank_of, square_at

_LOGGER = logging.getLogger(__name__)


def parse_move(text: str, board: Board, ep_square: Square | None) -> Move | MoveParseError:
    """Parse *text* and resolve it for the side to move on *board*.

    Readings are tried in order; the first that resolves wins.  When none
    does, the error of the last one is returned.
    """
    candidates = parse_move_text(text)
    if not candidates:
        _LOGGER.debug("Cannot parse move text %r", text)
        return MoveParseError.CANT_PARSE
    error = MoveParseError.CANT_PARSE
    for parsed in candidates:
        result = resolve_candidate(parsed, board, ep_square)
        if isinstance(result, Move):
            return result
        error = result
    _LOGGER.debug("Move text %r did not resolve: %s", text, error.name)
    return error


def resolve_candidate(
    parsed: ParsedMove,
    board: Board,
    ep_square: Square | None,
) -> Move | MoveParseError:
    if parsed.castle is not None:
        return Move(parsed.castle)
    if parsed.is_pawn_capture:
        return _resolve_pawn_capture(parsed, board, ep_square)
    destination = _destination(parsed)
    if destination is None:
        return MoveParseError.NO_DESTINATION
    if parsed.piece_type == PieceType.PAWN:
        return _resolve_pawn_push(parsed, destination, board)
    return _resolve_piece_move(parsed, destination, board, ep_square)


def _destination(parsed: ParsedMove) -> Square | None:
    if parsed.to_file is None or parsed.to_rank is None:
        return None
    return make_square(parsed.to_file, parsed.to_rank)


def _pawn_move(from_sq: Square, to_sq: Square, parsed: ParsedMove, en_passant: bool = False) -> Move:
    if parsed.promotion is not None:
        return Move.promote(from_sq, to_sq, parsed.promotion)
    return Move.piece(PieceType.PAWN, from_sq, to_sq, en_passant)


def _resolve_pawn_push(parsed: ParsedMove, destination: Square, board: Board) -> Move | MoveParseError:
    color = board.side_to_move
    own_pawn = Piece(color, PieceType.PAWN)
    target = coord_of(destination)
    for steps in (1, 2):
        sq = square_at(target - Coord(0, steps * color.pawn_direction))
        if sq is None:
            break
        occupant = board[sq]
        if occupant is None:
            continue
        if occupant != own_pawn:
            break
        return _pawn_move(sq, destination, parsed)
    return MoveParseError.NO_PIECE


def _resolve_pawn_capture(
    parsed: ParsedMove,
    board: Board,
    ep_square: Square | None,
) -> Move | MoveParseError:
    assert parsed.from_file is not None and parsed.to_file is not None
    if abs(parsed.to_file - parsed.from_file) != 1:
        return MoveParseError.NO_PIECE
    color = board.side_to_move
    pawn = Piece(color, PieceType.PAWN)
    matches: list[tuple[Square, Square, bool]] = []
    for from_sq in board.pieces_in_file(color, PieceType.PAWN, parsed.from_file):
        to_sq = square_at(Coord(parsed.to_file, rank_of(from_sq) + color.pawn_direction))
        if to_sq is None:
            continue
        if parsed.to_rank is not None and rank_of(to_sq) != parsed.to_rank:
            continue
        legal, en_passant = is_piece_move_legal(pawn, from_sq, to_sq, ep_square, board)
        if legal:
            matches.append((from_sq, to_sq, en_passant))
    if not matches:
        return MoveParseError.NO_PIECE
    if len(matches) > 1:
        return MoveParseError.AMBIGUOUS
    from_sq, to_sq, en_passant = matches[0]
    return _pawn_move(from_sq, to_sq, parsed, en_passant)


def _resolve_piece_move(
    parsed: ParsedMove,
    destination: Square,
    board: Board,
    ep_square: Square | None,
) -> Move | MoveParseError:
    if parsed.promotion is not None:
        return MoveParseError.NO_PIECE
    color = board.side_to_move
    piece = Piece(color, parsed.piece_type)
    origins = [
        sq
        for sq in board.pieces(color, parsed.piece_type)
        if (parsed.from_file is None or file_of(sq) == parsed.from_file)
        and (parsed.from_rank is None or rank_of(sq) == parsed.from_rank)
        and is_piece_move_legal(piece, sq, destination, ep_square, board)[0]
    ]
    if not origins:
        return MoveParseError.NO_PIECE
    if len(origins) > 1:
        return MoveParseError.AMBIGUOUS
    return Move.piece(parsed.piece_type, origins[0], destination)
