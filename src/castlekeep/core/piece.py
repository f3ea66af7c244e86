"""Piece object and factory."""

from __future__ import annotations

from dataclasses import dataclass

from castlekeep.core.enums import Color, PieceType

# Diagram character ↔ PieceType (uppercase = white, lowercase = black)
_CHAR_MAP: dict[str, PieceType] = {
    "p": PieceType.PAWN,
    "n": PieceType.KNIGHT,
    "b": PieceType.BISHOP,
    "r": PieceType.ROOK,
    "q": PieceType.QUEEN,
    "k": PieceType.KING,
}
_LETTERS: dict[PieceType, str] = {v: k for k, v in _CHAR_MAP.items()}


@dataclass(slots=True)
class Piece:
    """A chess piece.

    ``piece_type`` and ``color`` never change after construction; only
    ``has_moved`` flips, the first time the piece leaves its square.
    """

    piece_type: PieceType
    color: Color
    has_moved: bool = False

    # ── Serialisation ────────────────────────────────────────────────────

    def __str__(self) -> str:
        """Diagram character (uppercase = white, lowercase = black)."""
        letter = _LETTERS[self.piece_type]
        return letter.upper() if self.color == Color.WHITE else letter

    @classmethod
    def from_char(cls, char: str) -> Piece:
        """Create piece from a diagram character, e.g. 'N' → white knight."""
        try:
            piece_type = _CHAR_MAP[char.lower()]
        except KeyError:
            raise ValueError(f"Invalid piece character: {char!r}") from None
        color = Color.WHITE if char.isupper() else Color.BLACK
        return cls(piece_type, color)

    def copy(self) -> Piece:
        return Piece(self.piece_type, self.color, self.has_moved)


def create_piece(piece_type: PieceType, color: Color) -> Piece:
    """Fresh, never-moved piece."""
    return Piece(piece_type, color)
