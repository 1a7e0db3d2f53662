"""Game management layer — the controller every move source talks to.

Quick start::

    from caissa.game import GameController

    ctrl = GameController()
    ctrl.events.on_move.append(lambda move, notation, state: print(notation))
    ctrl.new_game()
    ctrl.submit_text("e4")
"""

from caissa.game.controller import GameController, GameEvents
from caissa.game.interfaces import IGameController

__all__ = [
    # Interfaces
    "IGameController",
    # Concrete
    "GameController",
    "GameEvents",
]
