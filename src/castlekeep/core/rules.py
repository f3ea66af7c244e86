"""High-level chess rules: check, checkmate and stalemate detection."""

from __future__ import annotations

from typing import TYPE_CHECKING

from castlekeep.core.enums import Color, GameResult, GameStatus
from castlekeep.core.move_generator import MoveGenerator

if TYPE_CHECKING:
    from castlekeep.core.position import Position


class Rules:
    """Static rule-checker that operates on a :class:`Position`."""

    @staticmethod
    def is_in_check(position: Position) -> bool:
        gen = MoveGenerator(position)
        return gen.is_in_check(position.side_to_move)

    @staticmethod
    def is_checkmate(position: Position) -> bool:
        return Rules.status(position) == GameStatus.CHECKMATE

    @staticmethod
    def is_stalemate(position: Position) -> bool:
        return Rules.status(position) == GameStatus.STALEMATE

    @staticmethod
    def status(position: Position) -> GameStatus:
        """Terminal status of the side to move, by exhaustive enumeration."""
        gen = MoveGenerator(position)
        if gen.has_legal_moves():
            return GameStatus.ONGOING
        if gen.is_in_check(position.side_to_move):
            return GameStatus.CHECKMATE
        return GameStatus.STALEMATE

    @staticmethod
    def game_result(
        position: Position, status: GameStatus | None = None
    ) -> GameResult:
        """Determine the current game result.

        Pass an already computed *status* to skip re-enumerating moves.
        """
        if status is None:
            status = Rules.status(position)
        if status == GameStatus.CHECKMATE:
            return (
                GameResult.BLACK_WINS
                if position.side_to_move == Color.WHITE
                else GameResult.WHITE_WINS
            )
        if status == GameStatus.STALEMATE:
            return GameResult.DRAW
        return GameResult.IN_PROGRESS
