"""Shared notation-layer data models."""

from __future__ import annotations

from dataclasses import dataclass

from caissa.core.enums import MoveKind, PieceType


@dataclass(frozen=True, slots=True)
class ParsedMove:
    """One way of reading typed move text, before it is matched to a board.

    ``castle`` is set (to a castling :class:`MoveKind`) for ``O-O`` / ``O-O-O``
    and every other field is then irrelevant.  Files and ranks are 0–7 indexes.
    The flags record what the text claims; they are advisory only.
    """

    castle: MoveKind | None = None
    piece_type: PieceType = PieceType.PAWN
    from_file: int | None = None
    from_rank: int | None = None
    to_file: int | None = None
    to_rank: int | None = None
    promotion: PieceType | None = None
    captures: bool = False
    check: bool = False
    checkmate: bool = False
    en_passant: bool = False

    @property
    def is_castle(self) -> bool:
        return self.castle is not None

    @property
    def is_pawn_push(self) -> bool:
        """Pawn move without an origin file, e.g. ``e4``."""
        return self.castle is None and self.piece_type == PieceType.PAWN and self.from_file is None

    @property
    def is_pawn_capture(self) -> bool:
        """Pawn move naming its origin file, e.g. ``exd5`` or ``ed``."""
        return (
            self.castle is None
            and self.piece_type == PieceType.PAWN
            and self.from_file is not None
        )
