"""Square type alias, board coordinates and vector helpers.

Board layout (Little-Endian Rank-File mapping):
    a1=0, b1=1, ..., h1=7
    a2=8, b2=9, ..., h2=15
    ...
    a8=56, b8=57, ..., h8=63

A :class:`Coord` is the same square seen as an (x=file, y=rank) vector with the
origin at a1.  Differences of two coords are displacement vectors; their
:meth:`Coord.magnitude` drives both move geometry and path walking.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias

Square: TypeAlias = int  # 0–63

FILE_NAMES = "abcdefgh"
RANK_NAMES = "12345678"


def file_of(sq: Square) -> int:
    """File index 0–7 (a–h)."""
    return sq & 7


def rank_of(sq: Square) -> int:
    """Rank index 0–7 (1–8)."""
    return sq >> 3


def make_square(file: int, rank: int) -> Square:
    """Create square from file (0–7) and rank (0–7)."""
    return rank * 8 + file


def square_name(sq: Square) -> str:
    """Human-readable name, e.g. 0 → 'a1', 63 → 'h8'."""
    return FILE_NAMES[file_of(sq)] + RANK_NAMES[rank_of(sq)]


def parse_square(name: str) -> Square:
    """Parse square name, e.g. 'e4' → 28."""
    if len(name) != 2 or name[0] not in FILE_NAMES or name[1] not in RANK_NAMES:
        raise ValueError(f"Invalid square name: {name!r}")
    return make_square(FILE_NAMES.index(name[0]), RANK_NAMES.index(name[1]))


def is_valid_square(sq: int) -> bool:
    """Check whether integer is a valid square index."""
    return 0 <= sq < 64


# ── Coordinates ─────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class Coord:
    """Integer 2D vector: a board coordinate or a displacement between two."""

    x: int
    y: int

    def __add__(self, other: Coord) -> Coord:
        return Coord(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Coord) -> Coord:
        return Coord(self.x - other.x, self.y - other.y)

    def __mul__(self, factor: int) -> Coord:
        return Coord(self.x * factor, self.y * factor)

    __rmul__ = __mul__

    @property
    def on_board(self) -> bool:
        return 0 <= self.x < 8 and 0 <= self.y < 8

    def magnitude(self) -> int | None:
        """Length along a straight line, or ``None`` for a non-line vector.

        Defined only for horizontal, vertical and diagonal vectors, where it is
        the larger absolute component.
        """
        ax, ay = abs(self.x), abs(self.y)
        if self.x == 0 or self.y == 0 or ax == ay:
            return max(ax, ay)
        return None

    def unit(self) -> Coord | None:
        """Single step along this line (``None`` for the zero/non-line vector)."""
        magn = self.magnitude()
        if not magn:
            return None
        return Coord(self.x // magn, self.y // magn)


def coord_of(sq: Square) -> Coord:
    """Coordinate of a square."""
    return Coord(file_of(sq), rank_of(sq))


def square_at(coord: Coord) -> Square | None:
    """Square at *coord*, or ``None`` when the coordinate is off the board."""
    if not coord.on_board:
        return None
    return make_square(coord.x, coord.y)


def displacement(from_sq: Square, to_sq: Square) -> Coord:
    """Vector pointing from *from_sq* to *to_sq*."""
    return coord_of(to_sq) - coord_of(from_sq)


# ── Named square constants ──────────────────────────────────────────────────

A1, B1, C1, D1, E1, F1, G1, H1 = range(0, 8)
A2, B2, C2, D2, E2, F2, G2, H2 = range(8, 16)
A3, B3, C3, D3, E3, F3, G3, H3 = range(16, 24)
A4, B4, C4, D4, E4, F4, G4, H4 = range(24, 32)
A5, B5, C5, D5, E5, F5, G5, H5 = range(32, 40)
A6, B6, C6, D6, E6, F6, G6, H6 = range(40, 48)
A7, B7, C7, D7, E7, F7, G7, H7 = range(48, 56)
A8, B8, C8, D8, E8, F8, G8, H8 = range(56, 64)
