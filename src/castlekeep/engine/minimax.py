"""Depth-limited minimax search with alpha-beta pruning."""

from __future__ import annotations

import logging
import random

from castlekeep.core.enums import Color, PieceType
from castlekeep.core.move import Move
from castlekeep.core.move_generator import MoveGenerator
from castlekeep.core.position import Position
from castlekeep.engine.evaluation import PIECE_VALUES, evaluate
from castlekeep.engine.search import (
    DEFAULT_DIFFICULTY,
    DIFFICULTY_PROFILES,
    Difficulty,
    DifficultyProfile,
    IEngine,
    SearchResult,
)
from castlekeep.game.state import GameState

_LOGGER = logging.getLogger(__name__)

_INF_SCORE = 1_000_000
MATE_SCORE = 100_000
_CAPTURE_BONUS = 10


class SearchAgent(IEngine):
    """Chooses a move for the side to move in a :class:`GameState`.

    The agent never touches the state it is given: every search runs on a
    private copy of the position and each speculative move is rolled back
    before the next one is tried.
    """

    __slots__ = ("_difficulty", "_profile", "_rng", "_nodes", "_max_depth")

    def __init__(
        self,
        difficulty: Difficulty | str = DEFAULT_DIFFICULTY,
        *,
        profile: DifficultyProfile | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._rng = rng or random.Random()
        self._nodes = 0
        self._max_depth = 0
        self._difficulty = DEFAULT_DIFFICULTY
        self._profile = DIFFICULTY_PROFILES[DEFAULT_DIFFICULTY]
        self.set_difficulty(difficulty)
        if profile is not None:
            self._profile = profile

    # ── Configuration ────────────────────────────────────────────────────

    @property
    def difficulty(self) -> Difficulty:
        return self._difficulty

    @property
    def profile(self) -> DifficultyProfile:
        return self._profile

    def set_difficulty(self, level: Difficulty | str) -> None:
        """Select a strength level by enum or by name.

        Names are case-insensitive. An unknown name selects medium.
        """
        if isinstance(level, Difficulty):
            difficulty = level
        elif isinstance(level, str):
            try:
                difficulty = Difficulty(level.strip().lower())
            except ValueError:
                _LOGGER.warning(
                    "Unknown difficulty %r, falling back to %s",
                    level,
                    DEFAULT_DIFFICULTY.value,
                )
                difficulty = DEFAULT_DIFFICULTY
        else:
            raise ValueError(f"Invalid difficulty: {level!r}")

        self._difficulty = difficulty
        self._profile = DIFFICULTY_PROFILES[difficulty]

    # ── Search ───────────────────────────────────────────────────────────

    def get_best_move(self, state: GameState) -> Move | None:
        """Best move for the side to move, or ``None`` if it has none."""
        return self.search(state).best_move

    def search(self, state: GameState) -> SearchResult:
        self._nodes = 0
        profile = self._profile
        self._max_depth = profile.max_depth

        position = state.position.copy()
        color = position.side_to_move
        moves = MoveGenerator(position).generate_legal_moves()
        if not moves:
            return SearchResult(None, None, 0, 0, 0)

        if (
            profile.random_move_probability > 0
            and self._rng.random() < profile.random_move_probability
        ):
            move = self._rng.choice(moves)
            _LOGGER.debug("Random move %s", move)
            return SearchResult(move, _promotion_for(move), 0, 0, 0, randomized=True)

        best_move: Move | None = None
        best_score = -_INF_SCORE
        alpha = -_INF_SCORE
        beta = _INF_SCORE

        for move in self._order_moves(position, moves):
            position.make_move(move, _promotion_for(move))
            try:
                score = self._minimax(
                    position, profile.max_depth - 1, alpha, beta, False, color
                )
            finally:
                position.unmake_move()

            if score > best_score:
                best_score = score
                best_move = move
            if score > alpha:
                alpha = score

        assert best_move is not None
        _LOGGER.debug(
            "Best move %s score=%d depth=%d nodes=%d",
            best_move,
            best_score,
            profile.max_depth,
            self._nodes,
        )
        return SearchResult(
            best_move,
            _promotion_for(best_move),
            best_score,
            self._nodes,
            profile.max_depth,
        )

    def _minimax(
        self,
        position: Position,
        depth: int,
        alpha: int,
        beta: int,
        maximizing: bool,
        root_color: Color,
    ) -> int:
        self._nodes += 1
        if depth <= 0:
            return evaluate(position, root_color)

        gen = MoveGenerator(position)
        moves = gen.generate_legal_moves()
        if not moves:
            if gen.is_in_check(position.side_to_move):
                ply = self._max_depth - depth
                return -MATE_SCORE + ply if maximizing else MATE_SCORE - ply
            return 0

        if maximizing:
            best = -_INF_SCORE
            for move in self._order_moves(position, moves):
                position.make_move(move, _promotion_for(move))
                try:
                    score = self._minimax(
                        position, depth - 1, alpha, beta, False, root_color
                    )
                finally:
                    position.unmake_move()
                best = max(best, score)
                alpha = max(alpha, score)
                if beta <= alpha:
                    break
            return best

        best = _INF_SCORE
        for move in self._order_moves(position, moves):
            position.make_move(move, _promotion_for(move))
            try:
                score = self._minimax(position, depth - 1, alpha, beta, True, root_color)
            finally:
                position.unmake_move()
            best = min(best, score)
            beta = min(beta, score)
            if beta <= alpha:
                break
        return best

    # ── Move ordering ────────────────────────────────────────────────────

    def _order_moves(self, position: Position, moves: list[Move]) -> list[Move]:
        board = position.board

        def score(move: Move) -> float:
            value = 0.0
            if move.capture:
                value += _CAPTURE_BONUS
                victim = board[move.to_sq]
                if victim is not None:
                    value += PIECE_VALUES[victim.piece_type] / 100
            value -= abs(move.to_row - 3.5) + abs(move.to_col - 3.5)
            return value

        return sorted(moves, key=score, reverse=True)

    @property
    def nodes(self) -> int:
        """Nodes visited by the most recent search."""
        return self._nodes


def _promotion_for(move: Move) -> PieceType | None:
    return PieceType.QUEEN if move.promotion else None
