"""Core enumerations and flags for chess domain."""

from __future__ import annotations

from enum import IntEnum, IntFlag, auto


class Color(IntEnum):
    """Side color."""

    WHITE = 0
    BLACK = 1

    @property
    def opposite(self) -> Color:
        return Color(1 - self.value)

    @property
    def pawn_direction(self) -> int:
        """Rank delta of a single pawn advance."""
        return 1 if self == Color.WHITE else -1

    @property
    def home_rank(self) -> int:
        """Rank index of the back rank the king starts on."""
        return 0 if self == Color.WHITE else 7

    @property
    def pawn_rank(self) -> int:
        """Rank index pawns start on."""
        return 1 if self == Color.WHITE else 6

    @property
    def promotion_rank(self) -> int:
        """Farthest rank, where pawns promote."""
        return 7 if self == Color.WHITE else 0

    def __str__(self) -> str:
        return self.name.capitalize()


class PieceType(IntEnum):
    """Chess piece types ordered by conventional value."""

    PAWN = 1
    KNIGHT = 2
    BISHOP = 3
    ROOK = 4
    QUEEN = 5
    KING = 6

    def __str__(self) -> str:
        return self.name.capitalize()


class MoveKind(IntEnum):
    """Discriminator of the :class:`~caissa.core.move.Move` variants."""

    PIECE = 0
    PROMOTION = 1
    CASTLE_KINGSIDE = 2
    CASTLE_QUEENSIDE = 3


class CastlingRights(IntFlag):
    """Bitmask for castling availability."""

    NONE = 0
    WHITE_KINGSIDE = auto()
    WHITE_QUEENSIDE = auto()
    BLACK_KINGSIDE = auto()
    BLACK_QUEENSIDE = auto()

    WHITE_BOTH = WHITE_KINGSIDE | WHITE_QUEENSIDE
    BLACK_BOTH = BLACK_KINGSIDE | BLACK_QUEENSIDE
    ALL = WHITE_BOTH | BLACK_BOTH

    @classmethod
    def for_side(cls, color: Color, kingside: bool) -> CastlingRights:
        """The single right for *color* castling on the given wing."""
        if color == Color.WHITE:
            return cls.WHITE_KINGSIDE if kingside else cls.WHITE_QUEENSIDE
        return cls.BLACK_KINGSIDE if kingside else cls.BLACK_QUEENSIDE

    @classmethod
    def both(cls, color: Color) -> CastlingRights:
        return cls.WHITE_BOTH if color == Color.WHITE else cls.BLACK_BOTH


class GameEndState(IntEnum):
    """Whether the game goes on, and how it ended if not."""

    RUNNING = 0
    CHECKMATE = 1
    DRAW = 2
