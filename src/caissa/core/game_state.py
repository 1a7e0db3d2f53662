"""GameState — starting board plus append-only move history."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from caissa.core.board import Board
from caissa.core.enums import Color, GameEndState, MoveKind, PieceType
from caissa.core.errors import MoveError, MoveParseError
from caissa.core.move import Move
from caissa.core.rules import Rules
from caissa.core.types import Square

_LOGGER = logging.getLogger(__name__)

FIFTY_MOVE_LIMIT = 50  # half-moves without capture or pawn move


@dataclass(slots=True)
class _BoardCache:
    """Memoised replay of the history; rebuilt lazily after invalidation."""

    board: Board | None = None

    def invalidate(self) -> None:
        self.board = None


class GameState:
    """A game: the board it started from and every move played since.

    The current :class:`Board` is never stored as truth; it is the replay of
    :attr:`moves` over the starting board, cached until the next accepted move.
    Only :meth:`perform_move` extends the history.
    """

    __slots__ = (
        "_starting_board",
        "_start_en_passant",
        "_start_fullmove",
        "_moves",
        "_cache",
        "en_passant",
        "halfmove_clock",
        "fifty_move_limit",
    )

    def __init__(
        self,
        board: Board | None = None,
        *,
        en_passant: Square | None = None,
        halfmove_clock: int = 0,
        fullmove_number: int = 1,
        fifty_move_limit: int = FIFTY_MOVE_LIMIT,
    ) -> None:
        self._starting_board = board.copy() if board is not None else Board.initial()
        self._start_en_passant = en_passant
        self._start_fullmove = fullmove_number
        self._moves: list[Move] = []
        self._cache = _BoardCache()
        self.en_passant = en_passant
        self.halfmove_clock = halfmove_clock
        self.fifty_move_limit = fifty_move_limit

    @classmethod
    def from_fen(cls, fen: str) -> GameState | None:
        """Game starting from *fen*, or ``None`` if it does not parse."""
        from caissa.core.notation.fen import parse_fen

        return parse_fen(fen)

    # ── Board access ─────────────────────────────────────────────────────

    @property
    def starting_board(self) -> Board:
        return self._starting_board.copy()

    @property
    def board(self) -> Board:
        """Copy of the current board.  Changing it never touches the game."""
        return self._current_board().copy()

    def _current_board(self) -> Board:
        if self._cache.board is None:
            _LOGGER.debug("Replaying %d moves to rebuild the board", len(self._moves))
            self._cache.board = self._replay(len(self._moves))
        return self._cache.board

    def board_at(self, index: int) -> Board:
        """Fresh board after the first *index* moves (``0`` is the start)."""
        if not 0 <= index <= len(self._moves):
            raise IndexError(f"Move index out of range: {index}")
        return self._replay(index)

    def en_passant_at(self, index: int) -> Square | None:
        """En-passant target in effect before move *index* is played."""
        if not 0 <= index <= len(self._moves):
            raise IndexError(f"Move index out of range: {index}")
        if index == 0:
            return self._start_en_passant
        return Rules.en_passant_after(self._replay(index - 1), self._moves[index - 1])

    def _replay(self, count: int) -> Board:
        board = self._starting_board.copy()
        for move in self._moves[:count]:
            board.apply_move(move)
        return board

    def invalidate_cache(self) -> None:
        self._cache.invalidate()

    # ── History queries ──────────────────────────────────────────────────

    @property
    def moves(self) -> tuple[Move, ...]:
        return tuple(self._moves)

    def whose_turn(self) -> Color:
        return self._current_board().side_to_move

    def move_count(self) -> int:
        return len(self._moves)

    def last_move(self) -> Move | None:
        return self._moves[-1] if self._moves else None

    def get_move(self, index: int) -> Move:
        return self._moves[index]

    @property
    def fullmove_number(self) -> int:
        """FEN full-move number: starts at the given value, +1 after each Black move."""
        offset = 1 if self._starting_board.side_to_move == Color.BLACK else 0
        return self._start_fullmove + (len(self._moves) + offset) // 2

    # ── Core move operations ─────────────────────────────────────────────

    def perform_move(self, move: Move) -> MoveError | None:
        """Validate *move* for the side to move and append it on success.

        Returns ``None`` when the move was played, otherwise the reason it was
        refused.  A refused move changes nothing.
        """
        board = self._current_board()
        result = Rules.validate_move(board, move, self.en_passant)
        if isinstance(result, MoveError):
            _LOGGER.debug("Rejected %s: %s", move, result.name)
            return result

        captured = Rules.is_capture(board, result)
        pawn_move = result.kind == MoveKind.PROMOTION or (
            result.kind == MoveKind.PIECE and result.piece_type == PieceType.PAWN
        )
        self.halfmove_clock = 0 if captured or pawn_move else self.halfmove_clock + 1
        self.en_passant = Rules.en_passant_after(board, result)
        self._moves.append(result)
        self._cache.invalidate()
        return None

    def legal_destinations(self, sq: Square) -> list[Square]:
        """Where the piece on *sq* may go now, castling included.

        Empty for an empty square or a piece of the side not to move.
        """
        board = self._current_board()
        piece = board[sq]
        if piece is None or piece.color != board.side_to_move:
            return []
        destinations = board.find_legal_destinations(sq, self.en_passant) or []
        return destinations + Rules.castle_destinations(board, sq)

    def get_end_state(self) -> GameEndState:
        return Rules.end_state(
            self._current_board(),
            self.en_passant,
            self.halfmove_clock,
            self.fifty_move_limit,
        )

    # ── Notation ─────────────────────────────────────────────────────────

    def parse_move(self, text: str) -> Move | MoveParseError:
        """Resolve typed notation against the current position."""
        from caissa.core.notation.resolver import parse_move

        return parse_move(text, self._current_board(), self.en_passant)

    def get_move_in_chess_notation(self, index: int) -> str:
        """Display notation of the move at *index*, e.g. ``Nbd2`` or ``exd6 e.p.``."""
        from caissa.core.notation.san import move_to_san

        move = self._moves[index]
        if index < 0:
            index += len(self._moves)
        return move_to_san(self.board_at(index), move, self.en_passant_at(index))

    def get_fen(self) -> str:
        from caissa.core.notation.fen import game_to_fen

        return game_to_fen(self)

    def __repr__(self) -> str:
        return f"GameState({self.get_fen()!r})"
