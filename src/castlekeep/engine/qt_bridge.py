"""Qt bridge to run the search agent in a worker thread."""

from __future__ import annotations

import logging

from PyQt6.QtCore import QObject, pyqtSignal, pyqtSlot

from castlekeep.engine.minimax import SearchAgent
from castlekeep.engine.search import DEFAULT_DIFFICULTY, Difficulty
from castlekeep.game.state import GameState

_LOGGER = logging.getLogger(__name__)


class EngineWorker(QObject):
    """Thread-affine worker that computes agent moves on demand.

    Move it to a ``QThread`` and connect :meth:`request_move` through a
    queued connection. The state passed in is only read, never modified.
    """

    best_move_ready = pyqtSignal(int, object, object, int)
    search_no_move = pyqtSignal(int)
    search_error = pyqtSignal(int, str)

    __slots__ = ("_agent",)

    def __init__(
        self,
        difficulty: Difficulty | str = DEFAULT_DIFFICULTY,
        *,
        agent: SearchAgent | None = None,
    ) -> None:
        super().__init__()
        self._agent = agent or SearchAgent(difficulty)

    @property
    def agent(self) -> SearchAgent:
        return self._agent

    @pyqtSlot(object, int)
    def request_move(self, state_obj: object, request_id: int) -> None:
        """Search for the best move in *state_obj* and emit the result."""
        if not isinstance(state_obj, GameState):
            self.search_error.emit(request_id, "Engine received invalid game state")
            return

        try:
            result = self._agent.search(state_obj)
        except Exception as exc:
            _LOGGER.exception("Search failed for request %d", request_id)
            self.search_error.emit(request_id, str(exc))
            return

        if result.best_move is None:
            self.search_no_move.emit(request_id)
            return

        self.best_move_ready.emit(
            request_id,
            result.best_move,
            result.promotion,
            result.score,
        )

    @pyqtSlot(str)
    def set_difficulty(self, name: str) -> None:
        """Change the strength level (takes effect on the next search)."""
        self._agent.set_difficulty(name)
