"""Notation package: FEN, typed move text and display notation."""

from caissa.core.notation.fen import (
    STARTING_FEN,
    game_from_fen,
    game_to_fen,
    parse_fen,
)
from caissa.core.notation.models import ParsedMove
from caissa.core.notation.parser import parse_move_text
from caissa.core.notation.resolver import parse_move, resolve_candidate
from caissa.core.notation.san import move_to_san

__all__ = [
    "STARTING_FEN",
    "ParsedMove",
    "game_from_fen",
    "game_to_fen",
    "parse_fen",
    "parse_move_text",
    "parse_move",
    "resolve_candidate",
    "move_to_san",
]
