"""Game management layer — state, controller, players, state machine.

Quick start::

    from castlekeep.game import GameController, HumanPlayer

    ctrl = GameController()
    ctrl.new_game(
        white=HumanPlayer(Color.WHITE, "Alice"),
        black=HumanPlayer(Color.BLACK, "Bob"),
    )
"""

from castlekeep.game.controller import GameController, GameEvents
from castlekeep.game.interfaces import GamePhase, IGameController, IPlayer
from castlekeep.game.player import AIPlayer, HumanPlayer
from castlekeep.game.state import CandidateMove, GameState

__all__ = [
    # Interfaces
    "GamePhase",
    "IGameController",
    "IPlayer",
    # Concrete
    "AIPlayer",
    "CandidateMove",
    "GameController",
    "GameEvents",
    "GameState",
    "HumanPlayer",
]
