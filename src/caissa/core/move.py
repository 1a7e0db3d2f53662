"""Move value object and its compact wire form."""

from __future__ import annotations

import re
from dataclasses import dataclass, replace

from caissa.core.enums import MoveKind, PieceType
from caissa.core.piece import LETTER_PIECES, PIECE_LETTERS
from caissa.core.types import Square, parse_square, square_name


@dataclass(frozen=True, slots=True)
class Move:
    """Immutable value object representing a single chess move.

    ``kind`` selects the variant; the remaining fields are populated per kind:

    * ``PIECE`` – ``piece_type``, ``from_sq``, ``to_sq``, ``en_passant``
    * ``PROMOTION`` – ``from_sq``, ``to_sq``, ``promotion``
    * ``CASTLE_KINGSIDE`` / ``CASTLE_QUEENSIDE`` – nothing

    ``en_passant`` is derived by the validator; callers may leave it unset.
    """

    kind: MoveKind
    from_sq: Square | None = None
    to_sq: Square | None = None
    piece_type: PieceType | None = None
    promotion: PieceType | None = None
    en_passant: bool = False

    def __post_init__(self) -> None:
        if self.is_castle:
            return
        if self.from_sq is None or self.to_sq is None:
            raise ValueError(f"{self.kind.name} move needs both squares")
        if self.kind == MoveKind.PROMOTION and self.promotion is None:
            raise ValueError("Promotion move needs a promotion piece")

    # ── Constructors ─────────────────────────────────────────────────────

    @classmethod
    def piece(
        cls,
        piece_type: PieceType,
        from_sq: Square,
        to_sq: Square,
        en_passant: bool = False,
    ) -> Move:
        return cls(
            MoveKind.PIECE,
            from_sq=from_sq,
            to_sq=to_sq,
            piece_type=piece_type,
            en_passant=en_passant,
        )

    @classmethod
    def promote(cls, from_sq: Square, to_sq: Square, promotion: PieceType) -> Move:
        return cls(
            MoveKind.PROMOTION,
            from_sq=from_sq,
            to_sq=to_sq,
            piece_type=PieceType.PAWN,
            promotion=promotion,
        )

    @classmethod
    def castle_kingside(cls) -> Move:
        return cls(MoveKind.CASTLE_KINGSIDE)

    @classmethod
    def castle_queenside(cls) -> Move:
        return cls(MoveKind.CASTLE_QUEENSIDE)

    def with_en_passant(self, en_passant: bool) -> Move:
        """Copy of a piece move with the en-passant flag replaced."""
        return replace(self, en_passant=en_passant)

    # ── Queries ──────────────────────────────────────────────────────────

    @property
    def is_castle(self) -> bool:
        return self.kind in (MoveKind.CASTLE_KINGSIDE, MoveKind.CASTLE_QUEENSIDE)

    # ── Display ──────────────────────────────────────────────────────────

    def __str__(self) -> str:
        if self.kind == MoveKind.CASTLE_KINGSIDE:
            return "Short castle"
        if self.kind == MoveKind.CASTLE_QUEENSIDE:
            return "Long castle"
        assert self.from_sq is not None and self.to_sq is not None
        text = f"{square_name(self.from_sq)} → {square_name(self.to_sq)}"
        if self.kind == MoveKind.PROMOTION:
            return f"Pawn {text} = {self.promotion}"
        if self.en_passant:
            return f"{self.piece_type} {text}, en passant"
        return f"{self.piece_type} {text}"


# ── Wire codec ──────────────────────────────────────────────────────────────

_CASTLE_WIRE: dict[MoveKind, str] = {
    MoveKind.CASTLE_KINGSIDE: "O-O",
    MoveKind.CASTLE_QUEENSIDE: "O-O-O",
}
_WIRE_CASTLE: dict[str, MoveKind] = {v: k for k, v in _CASTLE_WIRE.items()}
_WIRE_PROMOTION: dict[str, PieceType] = {
    "n": PieceType.KNIGHT,
    "b": PieceType.BISHOP,
    "r": PieceType.ROOK,
    "q": PieceType.QUEEN,
    "k": PieceType.KING,
    "p": PieceType.PAWN,
}
_PROMOTION_WIRE: dict[PieceType, str] = {v: k for k, v in _WIRE_PROMOTION.items()}
_WIRE_RE = re.compile(r"^([NBRQK])?([a-h][1-8])([a-h][1-8])(ep|[nbrqkp])?$")


def encode_move(move: Move) -> str:
    """Compact text form of *move* for shipping across a transport.

    ``e2e4``, ``e5d6ep``, ``e7e8q``, ``Ng1f3``, ``O-O``, ``O-O-O``.
    """
    if move.is_castle:
        return _CASTLE_WIRE[move.kind]
    assert move.from_sq is not None and move.to_sq is not None
    squares = square_name(move.from_sq) + square_name(move.to_sq)
    if move.kind == MoveKind.PROMOTION:
        assert move.promotion is not None
        return squares + _PROMOTION_WIRE[move.promotion]
    prefix = "" if move.piece_type is None else PIECE_LETTERS.get(move.piece_type, "")
    return prefix + squares + ("ep" if move.en_passant else "")


def decode_move(text: str) -> Move:
    """Inverse of :func:`encode_move`.

    Decoding is structural only: the result must still be validated by
    :meth:`GameState.perform_move` before it is played.
    """
    if text in _WIRE_CASTLE:
        return Move(_WIRE_CASTLE[text])
    match = _WIRE_RE.match(text)
    if match is None:
        raise ValueError(f"Invalid encoded move: {text!r}")
    letter, from_name, to_name, suffix = match.groups()
    from_sq = parse_square(from_name)
    to_sq = parse_square(to_name)
    if suffix is not None and suffix != "ep":
        if letter is not None:
            raise ValueError(f"Only pawns promote: {text!r}")
        return Move.promote(from_sq, to_sq, _WIRE_PROMOTION[suffix])
    piece_type = LETTER_PIECES[letter] if letter else PieceType.PAWN
    return Move.piece(piece_type, from_sq, to_sq, en_passant=suffix == "ep")
