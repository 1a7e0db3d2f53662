"""FEN parsing and serialization."""

from __future__ import annotations

import logging

from caissa.core.board import Board
from caissa.core.enums import CastlingRights, Color
from caissa.core.game_state import GameState
from caissa.core.piece import Piece
from caissa.core.types import Square, make_square, parse_square, rank_of, square_name

_LOGGER = logging.getLogger(__name__)

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

# Canonical order of the castling field.
_CASTLING_CHARS: tuple[tuple[str, CastlingRights], ...] = (
    ("K", CastlingRights.WHITE_KINGSIDE),
    ("Q", CastlingRights.WHITE_QUEENSIDE),
    ("k", CastlingRights.BLACK_KINGSIDE),
    ("q", CastlingRights.BLACK_QUEENSIDE),
)


def parse_fen(fen: str) -> GameState | None:
    """Parse *fen* into a fresh :class:`GameState`, or ``None`` if malformed."""
    try:
        return game_from_fen(fen)
    except ValueError as exc:
        _LOGGER.debug("FEN rejected: %s", exc)
        return None


def game_from_fen(fen: str) -> GameState:
    """Parse a six-field FEN string; raises ``ValueError`` on any defect."""
    parts = fen.split()
    if len(parts) != 6:
        raise ValueError(f"Invalid FEN (need 6 fields): {fen!r}")

    placement, side_part, castling_part, ep_part, halfmove_part, fullmove_part = parts

    # 1. Piece placement
    ranks = placement.split("/")
    if len(ranks) != 8:
        raise ValueError(f"Invalid FEN board (must contain 8 ranks): {fen!r}")
    board = Board()
    for rank_idx, rank_text in enumerate(ranks):
        rank = 7 - rank_idx
        file = 0
        for ch in rank_text:
            if ch.isdigit():
                step = int(ch)
                if not (1 <= step <= 8):
                    raise ValueError(f"Invalid FEN digit {ch!r}: {fen!r}")
                file += step
            else:
                if file >= 8:
                    raise ValueError(f"Invalid FEN rank width: {fen!r}")
                board[make_square(file, rank)] = Piece.from_char(ch)
                file += 1
            if file > 8:
                raise ValueError(f"Invalid FEN rank width: {fen!r}")
        if file != 8:
            raise ValueError(f"Invalid FEN rank width: {fen!r}")

    # 2. Side to move
    if side_part == "w":
        side = Color.WHITE
    elif side_part == "b":
        side = Color.BLACK
    else:
        raise ValueError(f"Invalid FEN side-to-move field: {side_part!r}")
    board.side_to_move = side

    # 3. Castling
    board.castling = _parse_castling(castling_part)

    # 4. En passant
    ep: Square | None = None
    if ep_part != "-":
        ep = parse_square(ep_part)
        if rank_of(ep) not in (2, 5):
            raise ValueError(f"Invalid FEN en-passant square: {ep_part!r}")

    # 5–6. Clocks
    if not halfmove_part.isdigit():
        raise ValueError(f"Invalid FEN halfmove clock: {halfmove_part!r}")
    if not fullmove_part.isdigit() or int(fullmove_part) < 1:
        raise ValueError(f"Invalid FEN fullmove number: {fullmove_part!r}")

    return GameState(
        board,
        en_passant=ep,
        halfmove_clock=int(halfmove_part),
        fullmove_number=int(fullmove_part),
    )


def _parse_castling(text: str) -> CastlingRights:
    castling = CastlingRights.NONE
    if text == "-":
        return castling
    position = 0
    for ch in text:
        for offset, (letter, right) in enumerate(_CASTLING_CHARS[position:]):
            if ch == letter:
                castling |= right
                position += offset + 1
                break
        else:
            raise ValueError(f"Invalid FEN castling field: {text!r}")
    return castling


def board_to_fen_placement(board: Board) -> str:
    """First FEN field: piece placement, rank 8 first."""
    rows: list[str] = []
    for rank in range(7, -1, -1):
        empty = 0
        row = ""
        for file in range(8):
            piece = board[make_square(file, rank)]
            if piece is None:
                empty += 1
            else:
                if empty:
                    row += str(empty)
                    empty = 0
                row += str(piece)
        if empty:
            row += str(empty)
        rows.append(row)
    return "/".join(rows)


def game_to_fen(game: GameState) -> str:
    """Serialise the current position of *game* to FEN."""
    board = game.board
    side_str = "w" if board.side_to_move == Color.WHITE else "b"
    castling_str = "".join(
        letter for letter, right in _CASTLING_CHARS if board.castling & right
    )
    ep_str = square_name(game.en_passant) if game.en_passant is not None else "-"
    return (
        f"{board_to_fen_placement(board)} {side_str} {castling_str or '-'} "
        f"{ep_str} {game.halfmove_clock} {game.fullmove_number}"
    )
