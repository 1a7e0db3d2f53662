"""Board - piece placement, side to move and castling rights."""

from __future__ import annotations

from caissa.core.enums import CastlingRights, Color, MoveKind, PieceType
from caissa.core.move import Move
from caissa.core.move_validator import (
    attacks_square,
    candidate_targets,
    is_piece_move_legal,
)
from caissa.core.piece import Piece
from caissa.core.types import (
    A1,
    A8,
    H1,
    H8,
    Coord,
    Square,
    coord_of,
    displacement,
    file_of,
    make_square,
    square_at,
)

# Rook home corner -> castling right lost when anything leaves or lands there.
_ROOK_CORNERS: dict[Square, CastlingRights] = {
    A1: CastlingRights.WHITE_QUEENSIDE,
    H1: CastlingRights.WHITE_KINGSIDE,
    A8: CastlingRights.BLACK_QUEENSIDE,
    H8: CastlingRights.BLACK_KINGSIDE,
}

_BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)


class Board:
    """Mutable 64-square board.

    Besides placement, a board knows whose turn it is and which castling rights
    remain, so a copy is enough to simulate any move.  Outside of setup (FEN
    loading, tests) the only mutation is :meth:`apply_move`.
    """

    __slots__ = ("side_to_move", "castling", "_squares")

    def __init__(
        self,
        side_to_move: Color = Color.WHITE,
        castling: CastlingRights = CastlingRights.NONE,
    ) -> None:
        self.side_to_move = side_to_move
        self.castling = castling
        self._squares: dict[Square, Piece] = {}

    # -- Element access -----------------------------------------------------

    def __getitem__(self, sq: Square) -> Piece | None:
        return self._squares.get(sq)

    def __setitem__(self, sq: Square, piece: Piece | None) -> None:
        if piece is None:
            self._squares.pop(sq, None)
        else:
            self._squares[sq] = piece

    def piece_at(self, sq: Square) -> Piece | None:
        return self._squares.get(sq)

    def is_empty(self, sq: Square) -> bool:
        return sq not in self._squares

    # -- Query helpers ------------------------------------------------------

    def pieces_of(self, color: Color) -> list[tuple[Piece, Square]]:
        """Every piece of *color* with its square, in square order."""
        return [
            (piece, sq)
            for sq, piece in sorted(self._squares.items())
            if piece.color == color
        ]

    def pieces(self, color: Color, piece_type: PieceType) -> list[Square]:
        """Squares occupied by *color*'s *piece_type*."""
        wanted = Piece(color, piece_type)
        return sorted(sq for sq, piece in self._squares.items() if piece == wanted)

    def pieces_in_file(self, color: Color, piece_type: PieceType, file: int) -> list[Square]:
        """Squares of *color*'s *piece_type* standing on *file* (0–7)."""
        return [sq for sq in self.pieces(color, piece_type) if file_of(sq) == file]

    def king_square(self, color: Color) -> Square:
        """Return the king square for *color*."""
        kings = self.pieces(color, PieceType.KING)
        if not kings:
            raise ValueError(f"No {color.name} king on board")
        return kings[0]

    def is_friendly_at(self, piece: Piece, sq: Square) -> bool:
        """Whether *sq* holds a piece of the same color as *piece*."""
        occupant = self._squares.get(sq)
        return occupant is not None and occupant.color == piece.color

    def is_path_clear(self, piece: Piece, from_sq: Square, to_sq: Square) -> bool:
        """Straight-line walk from *from_sq* to *to_sq*.

        Every intermediate square must be empty and the destination must not
        hold a friend of *piece*.  Vectors that are not horizontal, vertical or
        diagonal are never clear.
        """
        delta = displacement(from_sq, to_sq)
        step = delta.unit()
        if step is None:
            return False
        origin = coord_of(from_sq)
        for distance in range(1, delta.magnitude()):
            if not self.is_empty(square_at(origin + step * distance)):
                return False
        return not self.is_friendly_at(piece, to_sq)

    # -- Attacks ------------------------------------------------------------

    def is_square_attacked_by(self, color: Color, sq: Square) -> bool:
        """Whether any piece of *color* attacks *sq*."""
        return any(
            attacks_square(piece, from_sq, sq, self)
            for piece, from_sq in self.pieces_of(color)
        )

    def is_in_check(self, color: Color) -> bool:
        """Whether *color*'s king is attacked by the opponent."""
        return self.is_square_attacked_by(color.opposite, self.king_square(color))

    # -- Move generation ----------------------------------------------------

    def find_legal_destinations(
        self,
        from_sq: Square,
        ep_square: Square | None,
    ) -> list[Square] | None:
        """Squares the piece on *from_sq* can legally reach, castling excluded.

        Returns ``None`` when *from_sq* is empty.  A destination is kept only if
        playing it leaves the mover's own king out of check.
        """
        piece = self._squares.get(from_sq)
        if piece is None:
            return None
        destinations: list[Square] = []
        for to_sq in candidate_targets(piece, from_sq):
            legal, en_passant = is_piece_move_legal(piece, from_sq, to_sq, ep_square, self)
            if not legal:
                continue
            future = self.copy()
            future.apply_move(Move.piece(piece.piece_type, from_sq, to_sq, en_passant))
            if not future.is_in_check(piece.color):
                destinations.append(to_sq)
        return destinations

    # -- Mutation / copying -------------------------------------------------

    def apply_move(self, move: Move) -> bool:
        """Play an already validated *move* and flip the side to move.

        Returns whether a piece was captured.
        """
        side = self.side_to_move
        if move.is_castle:
            self._castle(side, kingside=move.kind == MoveKind.CASTLE_KINGSIDE)
            self.side_to_move = side.opposite
            return False

        assert move.from_sq is not None and move.to_sq is not None
        piece = self._squares.pop(move.from_sq, None)
        if piece is None:
            raise ValueError(f"No piece on square {move.from_sq}")
        captured = self._squares.pop(move.to_sq, None) is not None

        if move.kind == MoveKind.PROMOTION:
            assert move.promotion is not None
            self._squares[move.to_sq] = Piece(piece.color, move.promotion)
        else:
            self._squares[move.to_sq] = piece
            if move.en_passant:
                behind = square_at(coord_of(move.to_sq) - Coord(0, piece.color.pawn_direction))
                assert behind is not None
                captured = self._squares.pop(behind, None) is not None or captured

        if piece.piece_type == PieceType.KING:
            self.castling &= ~CastlingRights.both(piece.color)
        for sq in (move.from_sq, move.to_sq):
            if sq in _ROOK_CORNERS:
                self.castling &= ~_ROOK_CORNERS[sq]

        self.side_to_move = side.opposite
        return captured

    def _castle(self, color: Color, *, kingside: bool) -> None:
        rank = color.home_rank
        king_to, rook_from, rook_to = (6, 7, 5) if kingside else (2, 0, 3)
        self[make_square(4, rank)] = None
        self[make_square(rook_from, rank)] = None
        self[make_square(king_to, rank)] = Piece(color, PieceType.KING)
        self[make_square(rook_to, rank)] = Piece(color, PieceType.ROOK)
        self.castling &= ~CastlingRights.both(color)

    def copy(self) -> Board:
        b = Board(self.side_to_move, self.castling)
        b._squares = self._squares.copy()
        return b

    # -- Factory ------------------------------------------------------------

    @classmethod
    def initial(cls) -> Board:
        """Standard starting position, white to move with all castling rights."""
        b = cls(Color.WHITE, CastlingRights.ALL)
        for f in range(8):
            b[make_square(f, 1)] = Piece(Color.WHITE, PieceType.PAWN)
            b[make_square(f, 6)] = Piece(Color.BLACK, PieceType.PAWN)
        for f, pt in enumerate(_BACK_RANK):
            b[make_square(f, 0)] = Piece(Color.WHITE, pt)
            b[make_square(f, 7)] = Piece(Color.BLACK, pt)
        return b

    # -- Dunder helpers -----------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return (
            self._squares == other._squares
            and self.side_to_move == other.side_to_move
            and self.castling == other.castling
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        rows: list[str] = []
        for rank in range(7, -1, -1):
            row = []
            for file in range(8):
                p = self[make_square(file, rank)]
                row.append(str(p) if p else ".")
            rows.append(f"{rank + 1} {' '.join(row)}")
        rows.append("  a b c d e f g h")
        return "\n".join(rows)

