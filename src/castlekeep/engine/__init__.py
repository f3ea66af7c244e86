"""Search agent package: evaluation, minimax search and Qt worker bridge."""

from castlekeep.engine.evaluation import evaluate
from castlekeep.engine.minimax import SearchAgent
from castlekeep.engine.qt_bridge import EngineWorker
from castlekeep.engine.search import (
    DIFFICULTY_PROFILES,
    Difficulty,
    DifficultyProfile,
    IEngine,
    SearchResult,
)

__all__ = [
    "DIFFICULTY_PROFILES",
    "Difficulty",
    "DifficultyProfile",
    "EngineWorker",
    "IEngine",
    "SearchAgent",
    "SearchResult",
    "evaluate",
]
