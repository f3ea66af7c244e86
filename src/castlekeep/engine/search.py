"""Shared engine search models: difficulty profiles, results and protocol."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from castlekeep.core.enums import PieceType
    from castlekeep.core.move import Move
    from castlekeep.game.state import GameState


class Difficulty(Enum):
    """Named strength levels offered to players."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


@dataclass(slots=True, frozen=True)
class DifficultyProfile:
    """Search constraints for one strength level."""

    max_depth: int = 3
    random_move_probability: float = 0.1

    def __post_init__(self) -> None:
        if self.max_depth < 1:
            raise ValueError("Search depth must be >= 1")
        if not 0.0 <= self.random_move_probability <= 1.0:
            raise ValueError("Random move probability must be within [0, 1]")


DIFFICULTY_PROFILES: dict[Difficulty, DifficultyProfile] = {
    Difficulty.EASY: DifficultyProfile(max_depth=2, random_move_probability=0.3),
    Difficulty.MEDIUM: DifficultyProfile(max_depth=3, random_move_probability=0.1),
    Difficulty.HARD: DifficultyProfile(max_depth=4, random_move_probability=0.0),
}

DEFAULT_DIFFICULTY = Difficulty.MEDIUM


@dataclass(slots=True, frozen=True)
class SearchResult:
    """Result produced by the engine search.

    ``score`` is relative to the searching side. ``randomized`` is set when
    the move was picked at random instead of searched; ``score`` is then 0.
    """

    best_move: Move | None
    promotion: PieceType | None
    score: int
    nodes: int
    depth: int
    randomized: bool = False


class IEngine(Protocol):
    """Protocol for move-choosing engines used by the game layer."""

    def search(self, state: GameState) -> SearchResult: ...

    def get_best_move(self, state: GameState) -> Move | None: ...
