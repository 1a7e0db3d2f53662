"""Typed move text → candidate readings.

Notation is ambiguous on its own: ``bc4`` is a b-pawn capturing on c4 *or* a
bishop going to c4.  The parser therefore returns every reading that fits, in
the order they should be tried against the board (see
:mod:`caissa.core.notation.resolver`).

Accepted shapes, whitespace ignored and trailing ``!``/``?`` annotations
dropped:

* castles: ``O-O``, ``O-O-O`` (also ``0-0`` or lowercase), optional ``+``/``#``
* pawn captures: ``exd5``, ``ed``, ``edQ#``, ``exd6 e.p.``
* everything else: ``e4``, ``e8=Q``, ``Nf3``, ``Nbd2``, ``R1e2``, ``Qh4xe1+``
"""

from __future__ import annotations

from dataclasses import replace

from caissa.core.enums import MoveKind, PieceType
from caissa.core.notation.models import ParsedMove
from caissa.core.piece import piece_type_from_letter
from caissa.core.types import FILE_NAMES, RANK_NAMES

_PIECE_CHARS = "NBRQKnbrqk"
_EN_PASSANT_MARK = "e.p."
_CASTLES: tuple[tuple[str, MoveKind], ...] = (
    ("O-O-O", MoveKind.CASTLE_QUEENSIDE),
    ("O-O", MoveKind.CASTLE_KINGSIDE),
)


def _is_file(ch: str) -> bool:
    return ch != "" and ch in FILE_NAMES


def _is_rank(ch: str) -> bool:
    return ch != "" and ch in RANK_NAMES


def _is_piece(ch: str) -> bool:
    return ch != "" and ch in _PIECE_CHARS


def _tile_ahead(text: str, start: int) -> bool:
    """Whether a file letter directly followed by a rank digit occurs at or after *start*."""
    return any(
        _is_file(text[i]) and _is_rank(text[i + 1]) for i in range(start, len(text) - 1)
    )


class _Cursor:
    """Read position over the compacted move text."""

    __slots__ = ("text", "pos")

    def __init__(self, text: str, pos: int = 0) -> None:
        self.text = text
        self.pos = pos

    def peek(self, offset: int = 0) -> str:
        index = self.pos + offset
        return self.text[index] if index < len(self.text) else ""

    def take(self, count: int = 1) -> str:
        chunk = self.text[self.pos : self.pos + count]
        self.pos += count
        return chunk

    def take_if(self, token: str) -> bool:
        if self.text.startswith(token, self.pos):
            self.pos += len(token)
            return True
        return False

    @property
    def at_end(self) -> bool:
        return self.pos >= len(self.text)


def parse_move_text(text: str) -> list[ParsedMove]:
    """Every reading of *text*, most likely first.  Empty when nothing fits."""
    compact = "".join(text.split()).rstrip("!?")
    if not compact:
        return []

    castle = _parse_castle(compact)
    if castle is not None:
        return [castle]

    candidates: list[ParsedMove] = []
    pawn_capture = _parse_pawn_capture(compact)
    if pawn_capture is not None:
        candidates.append(pawn_capture)
        # Only "b" is both a file and a piece letter.
        if not _is_piece(compact[0]):
            return candidates

    general = _parse_general(compact)
    if general is not None:
        candidates.append(general)
    return candidates


# -- Shapes -----------------------------------------------------------------


def _parse_castle(text: str) -> ParsedMove | None:
    normalized = text.upper().replace("0", "O")
    for token, kind in _CASTLES:
        if not normalized.startswith(token):
            continue
        rest = text[len(token) :]
        if rest not in ("", "+", "#"):
            return None
        return ParsedMove(castle=kind, check=rest == "+", checkmate=rest == "#")
    return None


def _parse_pawn_capture(text: str) -> ParsedMove | None:
    cur = _Cursor(text)
    if not _is_file(cur.peek()):
        return None
    from_file = FILE_NAMES.index(cur.take())
    captures = cur.take_if("x")
    if not _is_file(cur.peek()):
        return None
    to_file = FILE_NAMES.index(cur.take())
    to_rank = RANK_NAMES.index(cur.take()) if _is_rank(cur.peek()) else None
    if _tile_ahead(text, cur.pos):
        return None
    return _finish(
        cur,
        ParsedMove(
            from_file=from_file,
            to_file=to_file,
            to_rank=to_rank,
            captures=captures,
        ),
    )


def _parse_general(text: str) -> ParsedMove | None:
    cur = _Cursor(text)
    piece_type, from_file, from_rank = _parse_piece(cur)
    captures = cur.take_if("x")
    if not (_is_file(cur.peek()) and _is_rank(cur.peek(1))):
        return None
    to_file = FILE_NAMES.index(cur.take())
    to_rank = RANK_NAMES.index(cur.take())
    return _finish(
        cur,
        ParsedMove(
            piece_type=piece_type,
            from_file=from_file,
            from_rank=from_rank,
            to_file=to_file,
            to_rank=to_rank,
            captures=captures,
        ),
    )


def _parse_piece(cur: _Cursor) -> tuple[PieceType, int | None, int | None]:
    """Piece letter plus optional origin file/rank; pawn when there is no letter.

    A square right after the letter is only an origin when another square
    follows it (``Ng1f3``); otherwise it is the destination (``Nf3``).  A
    letter followed by a lone rank with no square later is not a piece at all
    (``b4`` is a pawn push).
    """
    letter = cur.peek()
    piece_type = piece_type_from_letter(letter) if _is_piece(letter) else None
    if piece_type is None:
        return PieceType.PAWN, None, None

    first, second = cur.peek(1), cur.peek(2)
    if _is_rank(first):
        if not _tile_ahead(cur.text, cur.pos + 2):
            return PieceType.PAWN, None, None
        cur.take(2)
        return piece_type, None, RANK_NAMES.index(first)
    if _is_file(first):
        if _is_rank(second):
            if _tile_ahead(cur.text, cur.pos + 3):
                cur.take(3)
                return piece_type, FILE_NAMES.index(first), RANK_NAMES.index(second)
            cur.take()
            return piece_type, None, None
        cur.take(2)
        return piece_type, FILE_NAMES.index(first), None
    cur.take()
    return piece_type, None, None


def _finish(cur: _Cursor, parsed: ParsedMove) -> ParsedMove | None:
    """Read promotion, en-passant and check suffixes; reject leftover text."""
    promotion: PieceType | None = None
    explicit = cur.take_if("=")
    if _is_piece(cur.peek()):
        promotion = piece_type_from_letter(cur.take())
    elif explicit:
        return None
    en_passant = cur.take_if(_EN_PASSANT_MARK)
    check = cur.take_if("+")
    checkmate = not check and cur.take_if("#")
    if not cur.at_end:
        return None
    return replace(
        parsed,
        promotion=promotion,
        check=check,
        checkmate=checkmate,
        en_passant=en_passant,
    )
