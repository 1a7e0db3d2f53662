"""User-facing rule outcomes.

These are returned as values, never raised: every member carries the message
shown to the player as its value.
"""

from __future__ import annotations

from enum import StrEnum


class MoveError(StrEnum):
    """Why :meth:`GameState.perform_move` refused a move."""

    TILE_FROM_IS_EMPTY = "There is nothing at that square."
    TILE_FROM_IS_ENEMY_PIECE = "You can only move your own pieces."
    PIECE_DOES_NOT_MOVE_LIKE_THAT = "That piece does not move that way."
    PROMOTION_PIECE_NOT_SPECIFIED = "You must specify the promotion piece, e.g. e8=Q."
    PROMOTION_NOT_LEGAL = "The pawn has to reach the last rank to promote."
    PROMOTION_WRONG_PIECE = "A pawn cannot promote to a pawn or a king."
    CASTLING_NO_RIGHTS = "Can't castle: no castling rights left on that side."
    CASTLING_TILES_IN_BETWEEN_NOT_FREE = "Can't castle: the squares in between are not free."
    CASTLING_THROUGH_CHECK = "Can't castle while in or through check."
    IN_CHECK = "That move would leave your king in check."
    GAME_IS_OVER = "The game is over."


class MoveParseError(StrEnum):
    """Why typed notation could not be turned into a single move."""

    AMBIGUOUS = (
        "Move is ambiguous: more than one piece of that type can move there. "
        "Specify the file and/or rank of the piece."
    )
    NO_PIECE = "No piece of that type can make that move."
    NO_DESTINATION = "The destination square is incomplete."
    CANT_PARSE = "Move could not be parsed."
