"""GameController — the central orchestrator of a chess game.

Coordinates: GameState, the notation resolver, the wire codec.
Emits events via simple callbacks so the UI / network / tests can subscribe.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from caissa.core.enums import GameEndState, PieceType
from caissa.core.errors import MoveError, MoveParseError
from caissa.core.game_state import GameState
from caissa.core.move import Move, decode_move
from caissa.core.rules import Rules
from caissa.core.types import Square
from caissa.game.interfaces import IGameController

_LOGGER = logging.getLogger(__name__)

# ── Event definitions ────────────────────────────────────────────────────────

MoveCallback = Callable[[Move, str, GameState], None]  # move, notation, state
GameOverCallback = Callable[[GameEndState], None]
RejectedCallback = Callable[[Move | str, MoveError | MoveParseError], None]


@dataclass
class GameEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_move: list[MoveCallback] = field(default_factory=list)
    on_game_over: list[GameOverCallback] = field(default_factory=list)
    on_rejected: list[RejectedCallback] = field(default_factory=list)


# ── Controller ───────────────────────────────────────────────────────────────


class GameController(IGameController):
    """Single entry point for every move source: typed text, board drags,
    and moves arriving from a remote peer.

    All of them go through :meth:`GameState.perform_move`.  Once the game has
    ended nothing more is accepted.  Methods are meant to be called from a
    single thread.
    """

    __slots__ = ("_state", "_end_state", "events")

    def __init__(self) -> None:
        self._state = GameState()
        self._end_state = GameEndState.RUNNING
        self.events = GameEvents()

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def end_state(self) -> GameEndState:
        return self._end_state

    @property
    def is_game_over(self) -> bool:
        return self._end_state != GameEndState.RUNNING

    # ── IGameController impl ─────────────────────────────────────────────

    def new_game(self, fen: str | None = None) -> bool:
        if fen is None:
            state = GameState()
        else:
            parsed = GameState.from_fen(fen)
            if parsed is None:
                _LOGGER.info("New game refused: malformed FEN %r", fen)
                return False
            state = parsed
        self._state = state
        self._end_state = state.get_end_state()
        _LOGGER.info("New game started: %s", state.get_fen())
        if self.is_game_over:
            self._emit_game_over()
        return True

    def submit_move(self, move: Move) -> MoveError | None:
        if self.is_game_over:
            _LOGGER.debug("Ignoring %s: game is over", move)
            return MoveError.GAME_IS_OVER

        error = self._state.perform_move(move)
        if error is not None:
            self._emit_rejected(move, error)
            return error

        index = self._state.move_count() - 1
        notation = self._state.get_move_in_chess_notation(index)
        self._emit_move(self._state.get_move(index), notation)

        self._end_state = self._state.get_end_state()
        if self.is_game_over:
            self._emit_game_over()
        return None

    def submit_text(self, text: str) -> Move | MoveParseError | MoveError:
        """Parse, resolve and play typed notation.

        Returns the move as played, or why it was not.
        """
        if self.is_game_over:
            return MoveError.GAME_IS_OVER
        resolved = self._state.parse_move(text)
        if isinstance(resolved, MoveParseError):
            self._emit_rejected(text, resolved)
            return resolved
        error = self.submit_move(resolved)
        if error is not None:
            return error
        played = self._state.last_move()
        assert played is not None
        return played

    def submit_squares(
        self,
        from_sq: Square,
        to_sq: Square,
        promotion: PieceType | None = None,
    ) -> MoveError | None:
        """Play a board drag from *from_sq* to *to_sq*."""
        move = Rules.move_from_squares(self._state.board, from_sq, to_sq, promotion)
        return self.submit_move(move)

    def submit_remote(self, encoded: str) -> MoveError | None:
        """Play a move received in wire form (see :func:`encode_move`).

        Malformed text raises ``ValueError``; a well-formed but illegal move
        is refused like any other.
        """
        try:
            move = decode_move(encoded)
        except ValueError:
            _LOGGER.warning("Malformed remote move %r", encoded)
            raise
        error = self.submit_move(move)
        if error is not None:
            _LOGGER.warning("Remote move %s rejected: %s", encoded, error.name)
        return error

    # ── Internal helpers ─────────────────────────────────────────────────

    def _emit_move(self, move: Move, notation: str) -> None:
        for cb in self.events.on_move:
            cb(move, notation, self._state)

    def _emit_game_over(self) -> None:
        _LOGGER.info("Game over: %s", self._end_state.name)
        for cb in self.events.on_game_over:
            cb(self._end_state)

    def _emit_rejected(self, move: Move | str, error: MoveError | MoveParseError) -> None:
        for cb in self.events.on_rejected:
            cb(move, error)
