"""GameController — the central orchestrator of a chess game.

Coordinates: Players, GameState.
Emits events via simple callbacks so the UI / tests can subscribe.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from castlekeep.core.enums import Color, GameResult, PieceType
from castlekeep.core.move import Move
from castlekeep.core.notation import move_to_algebraic
from castlekeep.game.interfaces import GamePhase, IGameController, IPlayer
from castlekeep.game.state import GameState

_LOGGER = logging.getLogger(__name__)

# ── Event definitions ────────────────────────────────────────────────────────

MoveCallback = Callable[[Move, str, "GameState"], None]  # move, notation, state
GameOverCallback = Callable[[GameResult], None]
PhaseCallback = Callable[[GamePhase], None]


@dataclass
class GameEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_move: list[MoveCallback] = field(default_factory=list)
    on_game_over: list[GameOverCallback] = field(default_factory=list)
    on_phase_changed: list[PhaseCallback] = field(default_factory=list)


# ── Controller ───────────────────────────────────────────────────────────────


class GameController(IGameController):
    """Orchestrates a full chess game: validates moves, switches turns,
    notifies listeners.

    Methods are meant to be called from a single thread. An AI player whose
    callback answers synchronously may call :meth:`submit_move` from inside
    ``request_move``; prompting the next player is then deferred until the
    outer call unwinds, so an engine-vs-engine game does not recurse.
    """

    __slots__ = (
        "_state",
        "_players",
        "_phase",
        "_prompting",
        "_prompt_pending",
        "events",
    )

    def __init__(self) -> None:
        self._state = GameState()
        self._players: dict[Color, IPlayer] = {}
        self._phase = GamePhase.NOT_STARTED
        self._prompting = False
        self._prompt_pending = False
        self.events = GameEvents()

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def phase(self) -> GamePhase:
        return self._phase

    @property
    def current_player(self) -> IPlayer | None:
        color = self._state.side_to_move
        return self._players.get(color)

    def player(self, color: Color) -> IPlayer | None:
        return self._players.get(color)

    @property
    def vs_ai(self) -> bool:
        """True when at least one side is not human."""
        return any(not p.is_human for p in self._players.values())

    # ── IGameController impl ─────────────────────────────────────────────

    def new_game(self, white: IPlayer, black: IPlayer) -> None:
        if white.color != Color.WHITE or black.color != Color.BLACK:
            raise ValueError("Players must be given as (white, black)")
        self._players = {Color.WHITE: white, Color.BLACK: black}
        self._state = GameState()
        _LOGGER.info("New game: %s vs %s", white.name, black.name)

        self._prompt_current_player()

    def submit_move(self, move: Move, promotion: PieceType | None = None) -> bool:
        if self._phase not in (GamePhase.AWAITING_MOVE, GamePhase.THINKING):
            return False

        mover = self.current_player
        if (
            promotion is None
            and move.promotion
            and mover is not None
            and not mover.is_human
        ):
            promotion = PieceType.QUEEN

        if not self._state.apply_move(move, promotion):
            return False

        record = self._state.move_history[-1]
        self._emit_move(move, move_to_algebraic(record))

        if self._state.is_game_over:
            self._emit_game_over(self._state.result)
            return True

        self._prompt_current_player()
        return True

    def undo_move(self) -> bool:
        if self._phase == GamePhase.THINKING or not self._state.move_history:
            return False

        plies = 2 if self.vs_ai and len(self._state.move_history) >= 2 else 1
        for _ in range(plies):
            self._state.undo_move()
        _LOGGER.debug("Undid %d ply(ies)", plies)

        self._prompt_current_player()
        return True

    # ── Internal helpers ─────────────────────────────────────────────────

    def _prompt_current_player(self) -> None:
        """Ask the current player to move."""
        if self._prompting:
            self._prompt_pending = True
            return

        self._prompting = True
        try:
            while True:
                self._prompt_pending = False
                cp = self.current_player
                if cp is None or self._state.is_game_over:
                    return
                if cp.is_human:
                    self._set_phase(GamePhase.AWAITING_MOVE)
                else:
                    self._set_phase(GamePhase.THINKING)
                    cp.request_move(self._state)
                if not self._prompt_pending:
                    return
        finally:
            self._prompting = False

    def _set_phase(self, phase: GamePhase) -> None:
        self._phase = phase
        for cb in self.events.on_phase_changed:
            cb(phase)

    def _emit_move(self, move: Move, notation: str) -> None:
        for cb in self.events.on_move:
            cb(move, notation, self._state)

    def _emit_game_over(self, result: GameResult) -> None:
        self._set_phase(GamePhase.GAME_OVER)
        for cb in self.events.on_game_over:
            cb(result)
