"""Core domain layer — pure chess logic with zero external dependencies.

Quick start::

    from caissa.core import GameState, STARTING_FEN, parse_fen

    game = parse_fen(STARTING_FEN)
    game.perform_move(game.parse_move("e4"))
    print(game.get_fen())
"""

from caissa.core.board import Board
from caissa.core.enums import CastlingRights, Color, GameEndState, MoveKind, PieceType
from caissa.core.errors import MoveError, MoveParseError
from caissa.core.game_state import FIFTY_MOVE_LIMIT, GameState
from caissa.core.move import Move, decode_move, encode_move
from caissa.core.move_validator import is_piece_move_legal
from caissa.core.notation import (
    STARTING_FEN,
    game_from_fen,
    game_to_fen,
    move_to_san,
    parse_fen,
    parse_move,
)
from caissa.core.piece import Piece
from caissa.core.rules import Rules
from caissa.core.types import (
    Coord,
    Square,
    file_of,
    make_square,
    parse_square,
    rank_of,
    square_name,
)

__all__ = [
    # Enums / flags
    "CastlingRights",
    "Color",
    "GameEndState",
    "MoveKind",
    "PieceType",
    # Outcomes
    "MoveError",
    "MoveParseError",
    # Types / helpers
    "Coord",
    "Square",
    "file_of",
    "make_square",
    "parse_square",
    "rank_of",
    "square_name",
    # Domain objects
    "Board",
    "FIFTY_MOVE_LIMIT",
    "GameState",
    "Move",
    "Piece",
    "Rules",
    "is_piece_move_legal",
    # Wire codec
    "decode_move",
    "encode_move",
    # Notation
    "STARTING_FEN",
    "game_from_fen",
    "game_to_fen",
    "move_to_san",
    "parse_fen",
    "parse_move",
]
