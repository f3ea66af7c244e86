"""Core domain layer — pure chess logic with zero external dependencies.

Quick start::

    from castlekeep.core import Position, MoveGenerator

    pos = Position()
    gen = MoveGenerator(pos)
    for move in gen.generate_legal_moves():
        print(move)
"""

from castlekeep.core.board import Board
from castlekeep.core.enums import CastlingSide, Color, GameResult, GameStatus, PieceType
from castlekeep.core.move import Move, MoveRecord
from castlekeep.core.move_generator import MoveGenerator
from castlekeep.core.notation import move_to_algebraic, movetext
from castlekeep.core.piece import Piece, create_piece
from castlekeep.core.position import PROMOTION_TYPES, Position
from castlekeep.core.rules import Rules
from castlekeep.core.types import (
    Square,
    col_of,
    is_on_board,
    make_square,
    parse_square,
    row_of,
    square_name,
)

__all__ = [
    # Enums
    "CastlingSide",
    "Color",
    "GameResult",
    "GameStatus",
    "PieceType",
    # Types / helpers
    "Square",
    "col_of",
    "is_on_board",
    "make_square",
    "parse_square",
    "row_of",
    "square_name",
    # Domain objects
    "Board",
    "Move",
    "MoveGenerator",
    "MoveRecord",
    "PROMOTION_TYPES",
    "Piece",
    "Position",
    "Rules",
    "create_piece",
    # Notation
    "move_to_algebraic",
    "movetext",
]
