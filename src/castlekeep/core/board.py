"""Board - piece placement on an 8x8 board."""

from __future__ import annotations

from collections.abc import Sequence

from castlekeep.core.enums import Color, PieceType
from castlekeep.core.piece import Piece, create_piece
from castlekeep.core.types import Square, is_on_board, make_square

_PIECE_TYPE_COUNT = 6
_COLOR_COUNT = 2

_BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)

# Squares a never-moved piece may stand on, per (color, type).
_HOME_SQUARES: dict[tuple[Color, PieceType], frozenset[Square]] = {
    (Color.WHITE, PieceType.KING): frozenset({make_square(7, 4)}),
    (Color.BLACK, PieceType.KING): frozenset({make_square(0, 4)}),
    (Color.WHITE, PieceType.ROOK): frozenset({make_square(7, 0), make_square(7, 7)}),
    (Color.BLACK, PieceType.ROOK): frozenset({make_square(0, 0), make_square(0, 7)}),
    (Color.WHITE, PieceType.PAWN): frozenset(make_square(6, c) for c in range(8)),
    (Color.BLACK, PieceType.PAWN): frozenset(make_square(1, c) for c in range(8)),
}


class Board:
    """Mutable 64-square board with incremental piece indexes."""

    __slots__ = ("_squares", "_piece_bitboards", "_color_bitboards", "_king_squares")

    def __init__(self) -> None:
        self._squares: list[Piece | None] = [None] * 64
        # [color][piece_type-1] -> bitboard of occupied squares.
        self._piece_bitboards: list[list[int]] = [
            [0] * _PIECE_TYPE_COUNT for _ in range(_COLOR_COUNT)
        ]
        # [color] -> bitboard of all occupied squares for that color.
        self._color_bitboards: list[int] = [0] * _COLOR_COUNT
        # [color] -> king square cache (None if king missing).
        self._king_squares: list[Square | None] = [None] * _COLOR_COUNT

    @staticmethod
    def _piece_type_index(piece_type: PieceType) -> int:
        return int(piece_type) - 1

    @staticmethod
    def _squares_from_bitboard(bitboard: int) -> list[Square]:
        squares: list[Square] = []
        while bitboard:
            lsb = bitboard & -bitboard
            squares.append(lsb.bit_length() - 1)
            bitboard ^= lsb
        return squares

    # -- Element access -----------------------------------------------------

    def __getitem__(self, sq: Square) -> Piece | None:
        return self._squares[sq]

    def __setitem__(self, sq: Square, piece: Piece | None) -> None:
        old_piece = self._squares[sq]
        if old_piece is piece:
            return

        mask = 1 << sq

        if old_piece is not None:
            old_color_idx = int(old_piece.color)
            old_piece_idx = self._piece_type_index(old_piece.piece_type)
            self._piece_bitboards[old_color_idx][old_piece_idx] &= ~mask
            self._color_bitboards[old_color_idx] &= ~mask
            if (
                old_piece.piece_type == PieceType.KING
                and self._king_squares[old_color_idx] == sq
            ):
                self._king_squares[old_color_idx] = None

        self._squares[sq] = piece

        if piece is None:
            return

        color_idx = int(piece.color)
        piece_idx = self._piece_type_index(piece.piece_type)
        self._piece_bitboards[color_idx][piece_idx] |= mask
        self._color_bitboards[color_idx] |= mask
        if piece.piece_type == PieceType.KING:
            self._king_squares[color_idx] = sq

    def get(self, row: int, col: int) -> Piece | None:
        """Piece at (*row*, *col*); ``None`` when empty or off the board."""
        if not is_on_board(row, col):
            return None
        return self._squares[make_square(row, col)]

    def is_empty(self, sq: Square) -> bool:
        return self._squares[sq] is None

    # -- Query helpers ------------------------------------------------------

    def pieces_bitboard(self, color: Color, piece_type: PieceType) -> int:
        """Bitboard of squares occupied by *color*'s *piece_type*."""
        return self._piece_bitboards[int(color)][self._piece_type_index(piece_type)]

    def pieces(self, color: Color) -> list[Square]:
        """All squares occupied by *color*, in board order."""
        return self._squares_from_bitboard(self._color_bitboards[int(color)])

    def king_square(self, color: Color) -> Square | None:
        """The king square for *color*, or ``None`` if it is absent."""
        return self._king_squares[int(color)]

    # -- Mutation / copying -------------------------------------------------

    def copy(self) -> Board:
        """Deep copy: the new board owns fresh :class:`Piece` instances."""
        b = Board()
        b._squares = [p.copy() if p is not None else None for p in self._squares]
        b._piece_bitboards = [row.copy() for row in self._piece_bitboards]
        b._color_bitboards = self._color_bitboards.copy()
        b._king_squares = self._king_squares.copy()
        return b

    # -- Factories ----------------------------------------------------------

    @classmethod
    def initial(cls) -> Board:
        """Standard starting position (black on rows 0–1, white on rows 6–7)."""
        b = cls()
        for col, pt in enumerate(_BACK_RANK):
            b[make_square(0, col)] = create_piece(pt, Color.BLACK)
            b[make_square(1, col)] = create_piece(PieceType.PAWN, Color.BLACK)
            b[make_square(6, col)] = create_piece(PieceType.PAWN, Color.WHITE)
            b[make_square(7, col)] = create_piece(pt, Color.WHITE)
        return b

    @classmethod
    def from_diagram(cls, rows: Sequence[str]) -> Board:
        """Build a board from eight rows of piece letters, rank 8 first.

        ``"r...k..r"`` style: uppercase is white, lowercase black, ``.``
        (or a space) is an empty square. Kings, rooks and pawns standing
        away from their home squares are marked as having moved.
        """
        if len(rows) != 8:
            raise ValueError(f"Diagram must have 8 rows, got {len(rows)}")
        b = cls()
        for row, text in enumerate(rows):
            if len(text) != 8:
                raise ValueError(f"Diagram row {row} must have 8 cells: {text!r}")
            for col, ch in enumerate(text):
                if ch in ". ":
                    continue
                piece = Piece.from_char(ch)
                sq = make_square(row, col)
                home = _HOME_SQUARES.get((piece.color, piece.piece_type))
                if home is not None and sq not in home:
                    piece.has_moved = True
                b[sq] = piece
        return b

    # -- Dunder helpers -----------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._squares == other._squares

    def __repr__(self) -> str:
        rows: list[str] = []
        for row in range(8):
            cells = []
            for col in range(8):
                p = self._squares[make_square(row, col)]
                cells.append(str(p) if p else ".")
            rows.append(f"{8 - row} {' '.join(cells)}")
        rows.append("  a b c d e f g h")
        return "\n".join(rows)
