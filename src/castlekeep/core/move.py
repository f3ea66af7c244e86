"""Move value objects: the engine's move descriptor and the history entry."""

from __future__ import annotations

from dataclasses import dataclass

from castlekeep.core.enums import CastlingSide, PieceType
from castlekeep.core.piece import Piece
from castlekeep.core.types import Square, col_of, row_of, square_name


@dataclass(frozen=True, slots=True)
class Move:
    """Immutable description of a single pseudo-legal or legal move.

    Only the move generator creates these. ``promotion`` marks a pawn move
    onto the far rank; the promoted piece type is chosen when the move is
    executed, not here.
    """

    from_sq: Square
    to_sq: Square
    capture: bool = False
    promotion: bool = False
    en_passant: bool = False
    castling: CastlingSide | None = None
    double_step: bool = False

    # ── Coordinates ──────────────────────────────────────────────────────

    @property
    def from_row(self) -> int:
        return row_of(self.from_sq)

    @property
    def from_col(self) -> int:
        return col_of(self.from_sq)

    @property
    def to_row(self) -> int:
        return row_of(self.to_sq)

    @property
    def to_col(self) -> int:
        return col_of(self.to_sq)

    # ── Display ──────────────────────────────────────────────────────────

    def __str__(self) -> str:
        return f"{square_name(self.from_sq)}{square_name(self.to_sq)}"


@dataclass(frozen=True, slots=True)
class MoveRecord:
    """A single entry in the move history.

    ``piece`` and ``captured`` are snapshots taken before the move was
    applied; ``promotion`` is the piece type actually chosen, if any.
    """

    move: Move
    piece: Piece
    captured: Piece | None = None
    promotion: PieceType | None = None
    prior_en_passant: Square | None = None

    @property
    def from_sq(self) -> Square:
        return self.move.from_sq

    @property
    def to_sq(self) -> Square:
        return self.move.to_sq

    @property
    def castling(self) -> CastlingSide | None:
        return self.move.castling

    @property
    def en_passant(self) -> bool:
        return self.move.en_passant
