"""Algebraic notation for recorded moves.

These are formatting views over already-applied history: nothing here
re-checks legality or touches a position.
"""

from __future__ import annotations

from collections.abc import Iterable

from castlekeep.core.enums import CastlingSide, PieceType
from castlekeep.core.move import MoveRecord
from castlekeep.core.types import col_of, square_name

_PIECE_LETTERS: dict[PieceType, str] = {
    PieceType.KNIGHT: "N",
    PieceType.BISHOP: "B",
    PieceType.ROOK: "R",
    PieceType.QUEEN: "Q",
    PieceType.KING: "K",
}

_FILES = "abcdefgh"


def move_to_algebraic(record: MoveRecord) -> str:
    """Convert a history *record* to algebraic notation, e.g. ``exd6``."""
    if record.castling == CastlingSide.KINGSIDE:
        return "O-O"
    if record.castling == CastlingSide.QUEENSIDE:
        return "O-O-O"

    piece_type = record.piece.piece_type
    text = _PIECE_LETTERS.get(piece_type, "")

    if record.captured is not None:
        if piece_type == PieceType.PAWN:
            text += _FILES[col_of(record.from_sq)]
        text += "x"

    text += square_name(record.to_sq)

    if record.promotion is not None:
        text += "=" + _PIECE_LETTERS[record.promotion]
    return text


def movetext(records: Iterable[MoveRecord]) -> list[str]:
    """Numbered move-list lines: ``["1. e4 e5", "2. Nf3"]``."""
    sans = [move_to_algebraic(r) for r in records]
    lines: list[str] = []
    for idx in range(0, len(sans), 2):
        lines.append(f"{idx // 2 + 1}. {' '.join(sans[idx : idx + 2])}")
    return lines
