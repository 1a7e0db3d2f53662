"""Abstract interfaces for the game layer.

Rendering, input and network layers depend on this ABC rather than on the
concrete :class:`~caissa.game.controller.GameController`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from caissa.core.enums import GameEndState, PieceType
    from caissa.core.errors import MoveError, MoveParseError
    from caissa.core.game_state import GameState
    from caissa.core.move import Move
    from caissa.core.types import Square


class IGameController(ABC):
    """Interface for the game orchestrator."""

    @property
    @abstractmethod
    def state(self) -> GameState: ...

    @property
    @abstractmethod
    def end_state(self) -> GameEndState: ...

    @abstractmethod
    def new_game(self, fen: str | None = None) -> bool:
        """Set up a new game; False (previous game kept) if *fen* is malformed."""

    @abstractmethod
    def submit_move(self, move: Move) -> MoveError | None:
        """Submit a move. Returns None if legal and applied."""

    @abstractmethod
    def submit_text(self, text: str) -> Move | MoveParseError | MoveError:
        """Submit typed notation."""

    @abstractmethod
    def submit_squares(
        self,
        from_sq: Square,
        to_sq: Square,
        promotion: PieceType | None = None,
    ) -> MoveError | None:
        """Submit a from/to gesture with an optional promotion piece."""

    @abstractmethod
    def submit_remote(self, encoded: str) -> MoveError | None:
        """Submit a move received from a remote peer in wire form."""
