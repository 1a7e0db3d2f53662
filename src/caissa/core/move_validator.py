"""Per-piece move geometry, path checks and attack detection.

Everything here is pseudo-legal: whether the mover's own king ends up in check
is decided by the callers, which simulate the move on a board copy.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from caissa.core.enums import Color, PieceType
from caissa.core.piece import Piece
from caissa.core.types import Coord, Square, coord_of, displacement, rank_of, square_at

if TYPE_CHECKING:
    from caissa.core.board import Board


KNIGHT_OFFSETS: tuple[Coord, ...] = (
    Coord(-2, -1),
    Coord(-2, 1),
    Coord(-1, -2),
    Coord(-1, 2),
    Coord(1, -2),
    Coord(1, 2),
    Coord(2, -1),
    Coord(2, 1),
)

KING_OFFSETS: tuple[Coord, ...] = (
    Coord(-1, -1),
    Coord(-1, 0),
    Coord(-1, 1),
    Coord(0, -1),
    Coord(0, 1),
    Coord(1, -1),
    Coord(1, 0),
    Coord(1, 1),
)

BISHOP_DIRS: tuple[Coord, ...] = (Coord(-1, -1), Coord(-1, 1), Coord(1, -1), Coord(1, 1))
ROOK_DIRS: tuple[Coord, ...] = (Coord(-1, 0), Coord(1, 0), Coord(0, -1), Coord(0, 1))
QUEEN_DIRS: tuple[Coord, ...] = BISHOP_DIRS + ROOK_DIRS

# Rank a capturing pawn lands on when taking en passant.
_EN_PASSANT_TARGET_RANK: dict[Color, int] = {Color.WHITE: 5, Color.BLACK: 2}


# -- Precomputed lookup tables ---------------------------------------------


def _build_targets(offsets: tuple[Coord, ...]) -> tuple[tuple[Square, ...], ...]:
    targets: list[tuple[Square, ...]] = []
    for sq in range(64):
        origin = coord_of(sq)
        moves = [square_at(origin + off) for off in offsets]
        targets.append(tuple(to for to in moves if to is not None))
    return tuple(targets)


def _build_rays(directions: tuple[Coord, ...]) -> tuple[tuple[Square, ...], ...]:
    rays: list[tuple[Square, ...]] = []
    for sq in range(64):
        origin = coord_of(sq)
        squares: list[Square] = []
        for step in directions:
            for distance in range(1, 8):
                to = square_at(origin + step * distance)
                if to is None:
                    break
                squares.append(to)
        rays.append(tuple(squares))
    return tuple(rays)


_KNIGHT_TARGETS = _build_targets(KNIGHT_OFFSETS)
_KING_TARGETS = _build_targets(KING_OFFSETS)
_BISHOP_RAYS = _build_rays(BISHOP_DIRS)
_ROOK_RAYS = _build_rays(ROOK_DIRS)
_QUEEN_RAYS = _build_rays(QUEEN_DIRS)

_TARGETS_BY_TYPE: dict[PieceType, tuple[tuple[Square, ...], ...]] = {
    PieceType.KNIGHT: _KNIGHT_TARGETS,
    PieceType.BISHOP: _BISHOP_RAYS,
    PieceType.ROOK: _ROOK_RAYS,
    PieceType.QUEEN: _QUEEN_RAYS,
    PieceType.KING: _KING_TARGETS,
}


def candidate_targets(piece: Piece, from_sq: Square) -> tuple[Square, ...]:
    """Every square *piece* could reach from *from_sq* on an empty board.

    Pawns contribute both pushes and both forward diagonals.  Castling is not
    included.
    """
    if piece.piece_type != PieceType.PAWN:
        return _TARGETS_BY_TYPE[piece.piece_type][from_sq]
    direction = piece.color.pawn_direction
    origin = coord_of(from_sq)
    offsets = [Coord(0, direction), Coord(-1, direction), Coord(1, direction)]
    if rank_of(from_sq) == piece.color.pawn_rank:
        offsets.append(Coord(0, 2 * direction))
    moves = (square_at(origin + off) for off in offsets)
    return tuple(to for to in moves if to is not None)


# -- Legality ---------------------------------------------------------------


def is_piece_move_legal(
    piece: Piece,
    from_sq: Square,
    to_sq: Square,
    ep_square: Square | None,
    board: Board,
) -> tuple[bool, bool]:
    """Whether *piece* may move ``from_sq → to_sq`` ignoring self-check.

    Returns ``(legal, is_en_passant)``.  The second flag is only ever true for
    a pawn capturing onto *ep_square*.
    """
    delta = displacement(from_sq, to_sq)
    ptype = piece.piece_type

    if ptype == PieceType.PAWN:
        return _is_pawn_move_legal(piece, from_sq, to_sq, delta, ep_square, board)

    if ptype == PieceType.KNIGHT:
        shape = {abs(delta.x), abs(delta.y)} == {1, 2}
        return shape and not board.is_friendly_at(piece, to_sq), False

    magnitude = delta.magnitude()
    if not magnitude:
        return False, False

    if ptype == PieceType.KING:
        legal = magnitude == 1
    elif ptype == PieceType.ROOK:
        legal = delta.x == 0 or delta.y == 0
    elif ptype == PieceType.BISHOP:
        legal = abs(delta.x) == abs(delta.y)
    else:
        legal = True
    return legal and board.is_path_clear(piece, from_sq, to_sq), False


def _is_pawn_move_legal(
    piece: Piece,
    from_sq: Square,
    to_sq: Square,
    delta: Coord,
    ep_square: Square | None,
    board: Board,
) -> tuple[bool, bool]:
    direction = piece.color.pawn_direction

    if delta.x == 0 and delta.y == direction:
        return board[to_sq] is None, False

    if delta.x == 0 and delta.y == 2 * direction:
        if rank_of(from_sq) != piece.color.pawn_rank:
            return False, False
        middle = square_at(coord_of(from_sq) + Coord(0, direction))
        return board[middle] is None and board[to_sq] is None, False

    if abs(delta.x) == 1 and delta.y == direction:
        target = board[to_sq]
        if target is not None:
            return target.color != piece.color, False
        if (
            ep_square is not None
            and to_sq == ep_square
            and rank_of(to_sq) == _EN_PASSANT_TARGET_RANK[piece.color]
        ):
            return True, True

    return False, False


def attacks_square(piece: Piece, from_sq: Square, target: Square, board: Board) -> bool:
    """Whether *piece* standing on *from_sq* attacks *target*.

    Pawns attack both forward diagonals whatever stands there and never attack
    by advancing.
    """
    if piece.piece_type == PieceType.PAWN:
        delta = displacement(from_sq, target)
        return abs(delta.x) == 1 and delta.y == piece.color.pawn_direction
    legal, _ = is_piece_move_legal(piece, from_sq, target, None, board)
    return legal
