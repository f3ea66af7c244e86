"""Abstract interfaces for the game layer.

The controller depends on these ABCs, not on concrete player classes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import IntEnum, auto
from typing import TYPE_CHECKING

from castlekeep.core.enums import Color

if TYPE_CHECKING:
    from castlekeep.core.enums import PieceType
    from castlekeep.core.move import Move
    from castlekeep.game.state import GameState


# ── Game phase FSM states ────────────────────────────────────────────────────


class GamePhase(IntEnum):
    """Finite-state-machine states for a chess game."""

    NOT_STARTED = auto()
    AWAITING_MOVE = auto()
    THINKING = auto()  # AI is computing
    GAME_OVER = auto()


# ── Abstract interfaces ─────────────────────────────────────────────────────


class IPlayer(ABC):
    """Interface for a game participant (human or AI)."""

    @property
    @abstractmethod
    def color(self) -> Color: ...

    @property
    @abstractmethod
    def name(self) -> str: ...

    @property
    @abstractmethod
    def is_human(self) -> bool: ...

    @abstractmethod
    def request_move(self, state: GameState) -> None:
        """Begin the move-selection process.

        For humans this is a no-op (they interact via UI).
        For AI this kicks off the search.
        """


class IGameController(ABC):
    """Interface for the game orchestrator."""

    @abstractmethod
    def new_game(self, white: IPlayer, black: IPlayer) -> None:
        """Set up a new game."""

    @abstractmethod
    def submit_move(self, move: Move, promotion: PieceType | None = None) -> bool:
        """Submit a move. Returns True if legal and applied."""

    @abstractmethod
    def undo_move(self) -> bool:
        """Undo the last move (or move pair against an AI)."""
