"""Concrete player implementations."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from castlekeep.core.enums import Color
from castlekeep.game.interfaces import IPlayer

if TYPE_CHECKING:
    from castlekeep.game.state import GameState


class HumanPlayer(IPlayer):
    """A human participant; moves arrive through ``submit_move``."""

    __slots__ = ("_color", "_name")

    def __init__(self, color: Color, name: str = "") -> None:
        self._color = color
        self._name = name or f"Player ({color})"

    @property
    def color(self) -> Color:
        return self._color

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_human(self) -> bool:
        return True

    def request_move(self, state: GameState) -> None:
        pass


class AIPlayer(IPlayer):
    """An AI participant that delegates computation to a callback.

    ``AIPlayer`` only stores the callable invoked on ``request_move``. It
    may run a ``SearchAgent`` inline and submit the result, or post the
    state to an ``EngineWorker`` living in a ``QThread``.

    Args:
        color: Side the AI plays.
        name: Display name.
        on_request_move: ``(GameState) -> None``, called when the game
            controller asks the AI to start thinking.
    """

    __slots__ = ("_color", "_name", "_on_request_move")

    def __init__(
        self,
        color: Color,
        name: str = "Computer",
        on_request_move: Callable[[GameState], None] | None = None,
    ) -> None:
        self._color = color
        self._name = name
        self._on_request_move = on_request_move

    @property
    def color(self) -> Color:
        return self._color

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_human(self) -> bool:
        return False

    def request_move(self, state: GameState) -> None:
        if self._on_request_move is not None:
            self._on_request_move(state)
