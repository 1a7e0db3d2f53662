"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from caissa.core.game_state import GameState
from caissa.core.move import Move


@pytest.fixture
def game() -> GameState:
    """A fresh game from the standard starting position."""
    return GameState()


@pytest.fixture
def play() -> Callable[..., GameState]:
    """Play typed moves on a game, failing the test on the first refusal."""

    def _play(state: GameState, *texts: str) -> GameState:
        for text in texts:
            move = state.parse_move(text)
            assert isinstance(move, Move), f"{text!r} did not resolve: {move!r}"
            error = state.perform_move(move)
            assert error is None, f"{text!r} refused: {error!r}"
        return state

    return _play
