"""Position — board + side to move + en passant, with checkpoint/rollback."""

from __future__ import annotations

from dataclasses import dataclass

from castlekeep.core.board import Board
from castlekeep.core.enums import CastlingSide, Color, PieceType
from castlekeep.core.move import Move
from castlekeep.core.piece import Piece, create_piece
from castlekeep.core.types import Square, col_of, make_square, row_of

PROMOTION_TYPES: tuple[PieceType, ...] = (
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
)

# castling side -> (rook origin column, rook destination column)
_ROOK_COLUMNS: dict[CastlingSide, tuple[int, int]] = {
    CastlingSide.KINGSIDE: (7, 5),
    CastlingSide.QUEENSIDE: (0, 3),
}


@dataclass(slots=True)
class _UndoEntry:
    """Exactly the fields one move touches, saved so it can be rolled back."""

    move: Move
    piece: Piece
    piece_had_moved: bool
    captured: Piece | None
    capture_sq: Square
    rook: Piece | None
    rook_had_moved: bool
    en_passant: Square | None


class Position:
    """Board, side to move and en-passant target.

    :meth:`make_move` / :meth:`unmake_move` form a checkpoint/rollback pair
    backed by an internal undo log, so speculative moves cost a handful of
    field writes instead of a board copy.
    """

    __slots__ = ("board", "side_to_move", "en_passant", "_history")

    def __init__(
        self,
        board: Board | None = None,
        side_to_move: Color = Color.WHITE,
        en_passant: Square | None = None,
    ) -> None:
        self.board = board if board is not None else Board.initial()
        self.side_to_move = side_to_move
        self.en_passant = en_passant
        self._history: list[_UndoEntry] = []

    # ── Core move operations ─────────────────────────────────────────────

    def make_move(self, move: Move, promotion: PieceType | None = None) -> Piece | None:
        """Apply *move* and return the captured piece, if any.

        *promotion* is the piece type a promoting pawn becomes; without it
        the pawn stays a pawn. The move is not validated here.
        """
        board = self.board
        piece = board[move.from_sq]
        if piece is None:
            raise ValueError(f"No piece on {move.from_sq}")
        if promotion is not None and promotion not in PROMOTION_TYPES:
            raise ValueError(f"Cannot promote to {promotion!r}")

        # En passant: the captured pawn sits behind the target square
        capture_sq = move.to_sq
        if move.en_passant:
            capture_sq = make_square(row_of(move.from_sq), col_of(move.to_sq))
        captured = board[capture_sq]

        entry = _UndoEntry(
            move=move,
            piece=piece,
            piece_had_moved=piece.has_moved,
            captured=captured,
            capture_sq=capture_sq,
            rook=None,
            rook_had_moved=False,
            en_passant=self.en_passant,
        )

        if captured is not None:
            board[capture_sq] = None

        # Slide the rook for castling
        if move.castling is not None:
            rook_from_col, rook_to_col = _ROOK_COLUMNS[move.castling]
            r = row_of(move.from_sq)
            rook_from = make_square(r, rook_from_col)
            rook = board[rook_from]
            if rook is None:
                raise ValueError(f"No rook on {rook_from} for castling")
            entry.rook = rook
            entry.rook_had_moved = rook.has_moved
            board[rook_from] = None
            board[make_square(r, rook_to_col)] = rook
            rook.has_moved = True

        # Lift piece from origin and place it (handle promotion)
        board[move.from_sq] = None
        piece.has_moved = True
        placed = piece
        if move.promotion and promotion is not None:
            placed = create_piece(promotion, piece.color)
            placed.has_moved = True
        board[move.to_sq] = placed

        # En passant target for the opponent
        if move.double_step:
            self.en_passant = make_square(
                (row_of(move.from_sq) + row_of(move.to_sq)) // 2,
                col_of(move.from_sq),
            )
        else:
            self.en_passant = None

        self._history.append(entry)
        self.side_to_move = self.side_to_move.opposite
        return captured

    def unmake_move(self) -> Move:
        """Roll back the last :meth:`make_move` and return its move."""
        if not self._history:
            raise ValueError("No move to unmake")
        entry = self._history.pop()
        move = entry.move
        board = self.board

        self.side_to_move = self.side_to_move.opposite

        # Put the original piece back (reverts any promotion)
        board[move.to_sq] = None
        entry.piece.has_moved = entry.piece_had_moved
        board[move.from_sq] = entry.piece

        if entry.captured is not None:
            board[entry.capture_sq] = entry.captured

        # Undo rook slide for castling
        if entry.rook is not None and move.castling is not None:
            rook_from_col, rook_to_col = _ROOK_COLUMNS[move.castling]
            r = row_of(move.from_sq)
            board[make_square(r, rook_to_col)] = None
            board[make_square(r, rook_from_col)] = entry.rook
            entry.rook.has_moved = entry.rook_had_moved

        self.en_passant = entry.en_passant
        return move

    # ── Utilities ────────────────────────────────────────────────────────

    @property
    def ply(self) -> int:
        """Number of moves currently on the undo log."""
        return len(self._history)

    def copy(self) -> Position:
        """Deep copy without history."""
        return Position(
            board=self.board.copy(),
            side_to_move=self.side_to_move,
            en_passant=self.en_passant,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Position):
            return NotImplemented
        return (
            self.board == other.board
            and self.side_to_move == other.side_to_move
            and self.en_passant == other.en_passant
        )
