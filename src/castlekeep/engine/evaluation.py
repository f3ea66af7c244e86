"""Static position evaluation for the search agent.

Scores are in centipawns relative to one side: material plus a
piece-square bonus, a small reward for occupying the four centre squares,
and a flat term for giving or being in check.
"""

from __future__ import annotations

from castlekeep.core.enums import Color, PieceType
from castlekeep.core.move_generator import MoveGenerator
from castlekeep.core.position import Position
from castlekeep.core.types import Square, col_of, make_square, row_of

PIECE_VALUES: dict[PieceType, int] = {
    PieceType.PAWN: 100,
    PieceType.KNIGHT: 320,
    PieceType.BISHOP: 330,
    PieceType.ROOK: 500,
    PieceType.QUEEN: 900,
    PieceType.KING: 10_000,
}

CENTER_BONUS = 10
CHECK_BONUS = 50

CENTER_SQUARES: tuple[Square, ...] = (
    make_square(3, 3),
    make_square(3, 4),
    make_square(4, 3),
    make_square(4, 4),
)

# Tables are laid out from white's side, row 0 = rank 8.
# Black reads them with the rows reversed.
_PAWN_TABLE = (
    (0, 0, 0, 0, 0, 0, 0, 0),
    (50, 50, 50, 50, 50, 50, 50, 50),
    (10, 10, 20, 30, 30, 20, 10, 10),
    (5, 5, 10, 25, 25, 10, 5, 5),
    (0, 0, 0, 20, 20, 0, 0, 0),
    (5, -5, -10, 0, 0, -10, -5, 5),
    (5, 10, 10, -20, -20, 10, 10, 5),
    (0, 0, 0, 0, 0, 0, 0, 0),
)

_KNIGHT_TABLE = (
    (-50, -40, -30, -30, -30, -30, -40, -50),
    (-40, -20, 0, 0, 0, 0, -20, -40),
    (-30, 0, 10, 15, 15, 10, 0, -30),
    (-30, 5, 15, 20, 20, 15, 5, -30),
    (-30, 0, 15, 20, 20, 15, 0, -30),
    (-30, 5, 10, 15, 15, 10, 5, -30),
    (-40, -20, 0, 5, 5, 0, -20, -40),
    (-50, -40, -30, -30, -30, -30, -40, -50),
)

_BISHOP_TABLE = (
    (-20, -10, -10, -10, -10, -10, -10, -20),
    (-10, 0, 0, 0, 0, 0, 0, -10),
    (-10, 0, 5, 10, 10, 5, 0, -10),
    (-10, 5, 5, 10, 10, 5, 5, -10),
    (-10, 0, 10, 10, 10, 10, 0, -10),
    (-10, 10, 10, 10, 10, 10, 10, -10),
    (-10, 5, 0, 0, 0, 0, 5, -10),
    (-20, -10, -10, -10, -10, -10, -10, -20),
)

_ROOK_TABLE = (
    (0, 0, 0, 0, 0, 0, 0, 0),
    (5, 10, 10, 10, 10, 10, 10, 5),
    (-5, 0, 0, 0, 0, 0, 0, -5),
    (-5, 0, 0, 0, 0, 0, 0, -5),
    (-5, 0, 0, 0, 0, 0, 0, -5),
    (-5, 0, 0, 0, 0, 0, 0, -5),
    (-5, 0, 0, 0, 0, 0, 0, -5),
    (0, 0, 0, 5, 5, 0, 0, 0),
)

_QUEEN_TABLE = (
    (-20, -10, -10, -5, -5, -10, -10, -20),
    (-10, 0, 0, 0, 0, 0, 0, -10),
    (-10, 0, 5, 5, 5, 5, 0, -10),
    (-5, 0, 5, 5, 5, 5, 0, -5),
    (0, 0, 5, 5, 5, 5, 0, -5),
    (-10, 5, 5, 5, 5, 5, 0, -10),
    (-10, 0, 5, 0, 0, 0, 0, -10),
    (-20, -10, -10, -5, -5, -10, -10, -20),
)

_KING_TABLE = (
    (-30, -40, -40, -50, -50, -40, -40, -30),
    (-30, -40, -40, -50, -50, -40, -40, -30),
    (-30, -40, -40, -50, -50, -40, -40, -30),
    (-30, -40, -40, -50, -50, -40, -40, -30),
    (-20, -30, -30, -40, -40, -30, -30, -20),
    (-10, -20, -20, -20, -20, -20, -20, -10),
    (20, 20, 0, 0, 0, 0, 20, 20),
    (20, 30, 10, 0, 0, 10, 30, 20),
)

_PIECE_SQUARE_TABLES: dict[PieceType, tuple[tuple[int, ...], ...]] = {
    PieceType.PAWN: _PAWN_TABLE,
    PieceType.KNIGHT: _KNIGHT_TABLE,
    PieceType.BISHOP: _BISHOP_TABLE,
    PieceType.ROOK: _ROOK_TABLE,
    PieceType.QUEEN: _QUEEN_TABLE,
    PieceType.KING: _KING_TABLE,
}


def piece_square_bonus(piece_type: PieceType, color: Color, sq: Square) -> int:
    """Positional bonus for a *color* piece of *piece_type* standing on *sq*."""
    row = row_of(sq)
    if color == Color.BLACK:
        row = 7 - row
    return _PIECE_SQUARE_TABLES[piece_type][row][col_of(sq)]


def evaluate(position: Position, color: Color) -> int:
    """Score *position* from *color*'s point of view."""
    board = position.board
    score = 0

    for side, sign in ((color, 1), (color.opposite, -1)):
        for sq in board.pieces(side):
            piece = board[sq]
            assert piece is not None
            value = PIECE_VALUES[piece.piece_type]
            value += piece_square_bonus(piece.piece_type, side, sq)
            score += sign * value

    for sq in CENTER_SQUARES:
        piece = board[sq]
        if piece is None:
            continue
        score += CENTER_BONUS if piece.color == color else -CENTER_BONUS

    gen = MoveGenerator(position)
    if gen.is_in_check(color.opposite):
        score += CHECK_BONUS
    if gen.is_in_check(color):
        score -= CHECK_BONUS
    return score
