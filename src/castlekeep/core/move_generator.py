"""Legal and pseudo-legal move generation + attack detection."""

from __future__ import annotations

from typing import TYPE_CHECKING

from castlekeep.core.enums import CastlingSide, Color, PieceType
from castlekeep.core.move import Move
from castlekeep.core.piece import Piece
from castlekeep.core.types import Square, col_of, make_square, row_of

if TYPE_CHECKING:
    from castlekeep.core.position import Position


KNIGHT_OFFSETS: tuple[tuple[int, int], ...] = (
    (-2, -1),
    (-2, 1),
    (-1, -2),
    (-1, 2),
    (1, -2),
    (1, 2),
    (2, -1),
    (2, 1),
)

KING_OFFSETS: tuple[tuple[int, int], ...] = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)

ROOK_DIRS: tuple[tuple[int, int], ...] = ((0, 1), (0, -1), (1, 0), (-1, 0))
BISHOP_DIRS: tuple[tuple[int, int], ...] = ((1, 1), (1, -1), (-1, 1), (-1, -1))
QUEEN_DIRS: tuple[tuple[int, int], ...] = ROOK_DIRS + BISHOP_DIRS

# color -> (row step, start row, promotion row)
_PAWN_RULES: tuple[tuple[int, int, int], tuple[int, int, int]] = (
    (-1, 6, 0),  # white moves towards row 0
    (1, 1, 7),  # black moves towards row 7
)
_COLOR_OPPOSITE: tuple[Color, Color] = (Color.BLACK, Color.WHITE)


# -- Precomputed lookup tables ---------------------------------------------


def _build_targets(
    offsets: tuple[tuple[int, int], ...],
) -> tuple[tuple[Square, ...], ...]:
    targets: list[tuple[Square, ...]] = []
    for sq in range(64):
        row = row_of(sq)
        col = col_of(sq)
        moves: list[Square] = []
        for dr, dc in offsets:
            r = row + dr
            c = col + dc
            if 0 <= r < 8 and 0 <= c < 8:
                moves.append(make_square(r, c))
        targets.append(tuple(moves))
    return tuple(targets)


def _build_attack_masks(targets: tuple[tuple[Square, ...], ...]) -> tuple[int, ...]:
    masks: list[int] = [0] * 64
    for sq in range(64):
        mask = 0
        for to_sq in targets[sq]:
            mask |= 1 << to_sq
        masks[sq] = mask
    return tuple(masks)


def _build_pawn_attacker_masks() -> tuple[tuple[int, ...], tuple[int, ...]]:
    """[color][sq] -> squares from which a *color* pawn attacks *sq*."""
    white_masks: list[int] = [0] * 64
    black_masks: list[int] = [0] * 64

    for sq in range(64):
        row = row_of(sq)
        col = col_of(sq)
        for dc in (-1, 1):
            c = col + dc
            if not 0 <= c < 8:
                continue
            # White pawns attack towards row 0, so they sit one row below.
            if row + 1 < 8:
                white_masks[sq] |= 1 << make_square(row + 1, c)
            if row - 1 >= 0:
                black_masks[sq] |= 1 << make_square(row - 1, c)

    return (tuple(white_masks), tuple(black_masks))


def _build_rays(
    directions: tuple[tuple[int, int], ...],
) -> tuple[tuple[tuple[Square, ...], ...], ...]:
    rays_per_square: list[tuple[tuple[Square, ...], ...]] = []
    for sq in range(64):
        square_rays: list[tuple[Square, ...]] = []
        for dr, dc in directions:
            r = row_of(sq) + dr
            c = col_of(sq) + dc
            ray: list[Square] = []
            while 0 <= r < 8 and 0 <= c < 8:
                ray.append(make_square(r, c))
                r += dr
                c += dc
            square_rays.append(tuple(ray))
        rays_per_square.append(tuple(square_rays))
    return tuple(rays_per_square)


_KNIGHT_TARGETS = _build_targets(KNIGHT_OFFSETS)
_KING_TARGETS = _build_targets(KING_OFFSETS)
_KNIGHT_ATTACK_MASKS = _build_attack_masks(_KNIGHT_TARGETS)
_KING_ATTACK_MASKS = _build_attack_masks(_KING_TARGETS)
_PAWN_ATTACKER_MASKS = _build_pawn_attacker_masks()

_BISHOP_RAYS = _build_rays(BISHOP_DIRS)
_ROOK_RAYS = _build_rays(ROOK_DIRS)
_QUEEN_RAYS = _build_rays(QUEEN_DIRS)

_SLIDER_RAYS = {
    PieceType.BISHOP: _BISHOP_RAYS,
    PieceType.ROOK: _ROOK_RAYS,
    PieceType.QUEEN: _QUEEN_RAYS,
}


class MoveGenerator:
    """Generates legal moves for a given :class:`Position`.

    The generator mutates the position via ``make_move`` / ``unmake_move``
    internally but always restores it before returning.
    """

    __slots__ = ("_pos", "_board")

    def __init__(self, position: Position) -> None:
        self._pos = position
        self._board = position.board

    # -- Public API ---------------------------------------------------------

    def generate_legal_moves(self) -> list[Move]:
        """All strictly legal moves for the side to move, in board order."""
        legal: list[Move] = []
        for sq in self._board.pieces(self._pos.side_to_move):
            legal.extend(self.legal_moves_from(sq))
        return legal

    def legal_moves_from(self, sq: Square) -> list[Move]:
        """Legal moves of the piece on *sq*.

        Empty if the square is empty or holds a piece of the side not to move.
        """
        piece = self._board[sq]
        if piece is None or piece.color != self._pos.side_to_move:
            return []
        return [m for m in self.pseudo_legal_moves_from(sq) if self._is_legal(m)]

    def has_legal_moves(self) -> bool:
        """Whether the side to move has at least one legal move."""
        for sq in self._board.pieces(self._pos.side_to_move):
            for move in self.pseudo_legal_moves_from(sq):
                if self._is_legal(move):
                    return True
        return False

    def pseudo_legal_moves_from(self, sq: Square) -> list[Move]:
        """Pseudo-legal moves of the piece on *sq* (empty if none)."""
        piece = self._board[sq]
        if piece is None:
            return []
        moves: list[Move] = []
        pt = piece.piece_type
        if pt == PieceType.PAWN:
            self._gen_pawn(sq, piece.color, moves)
        elif pt == PieceType.KNIGHT:
            self._gen_steps(sq, piece.color, _KNIGHT_TARGETS[sq], moves)
        elif pt == PieceType.KING:
            self._gen_steps(sq, piece.color, _KING_TARGETS[sq], moves)
            self._gen_castling(sq, piece, moves)
        else:
            self._gen_sliding(sq, piece.color, _SLIDER_RAYS[pt][sq], moves)
        return moves

    # -- Attack detection (public) -----------------------------------------

    def is_in_check(self, color: Color) -> bool:
        """Is *color*'s king attacked by the opponent? False if it has none."""
        king_sq = self._board.king_square(color)
        if king_sq is None:
            return False
        return self.is_square_attacked(king_sq, _COLOR_OPPOSITE[int(color)])

    def is_square_attacked(self, sq: Square, by_color: Color) -> bool:
        """Is *sq* attacked by any piece of *by_color*?

        Pawns attack both forward diagonals whether or not anything stands
        there; this is check semantics, not capture legality.
        """
        board = self._board
        by_idx = int(by_color)

        if (
            board.pieces_bitboard(by_color, PieceType.PAWN)
            & _PAWN_ATTACKER_MASKS[by_idx][sq]
        ):
            return True

        if board.pieces_bitboard(by_color, PieceType.KNIGHT) & _KNIGHT_ATTACK_MASKS[sq]:
            return True

        if board.pieces_bitboard(by_color, PieceType.KING) & _KING_ATTACK_MASKS[sq]:
            return True

        if board.pieces_bitboard(by_color, PieceType.BISHOP) or board.pieces_bitboard(
            by_color, PieceType.QUEEN
        ):
            for ray in _BISHOP_RAYS[sq]:
                for to_sq in ray:
                    piece = board[to_sq]
                    if piece is None:
                        continue
                    if piece.color == by_color and piece.piece_type in (
                        PieceType.BISHOP,
                        PieceType.QUEEN,
                    ):
                        return True
                    break

        if board.pieces_bitboard(by_color, PieceType.ROOK) or board.pieces_bitboard(
            by_color, PieceType.QUEEN
        ):
            for ray in _ROOK_RAYS[sq]:
                for to_sq in ray:
                    piece = board[to_sq]
                    if piece is None:
                        continue
                    if piece.color == by_color and piece.piece_type in (
                        PieceType.ROOK,
                        PieceType.QUEEN,
                    ):
                        return True
                    break

        return False

    # -- Legality filter (private) -----------------------------------------

    def _is_legal(self, move: Move) -> bool:
        pos = self._pos
        mover = pos.side_to_move
        pos.make_move(move)
        try:
            return not self.is_in_check(mover)
        finally:
            pos.unmake_move()

    # -- Piece-specific generators (private) -------------------------------

    def _gen_pawn(self, sq: Square, color: Color, moves: list[Move]) -> None:
        board = self._board
        step, start_row, promotion_row = _PAWN_RULES[int(color)]
        row = row_of(sq)
        col = col_of(sq)
        next_row = row + step
        if not 0 <= next_row < 8:
            return

        one_step = make_square(next_row, col)
        if board.is_empty(one_step):
            moves.append(Move(sq, one_step, promotion=next_row == promotion_row))
            if row == start_row:
                two_step = make_square(row + 2 * step, col)
                if board.is_empty(two_step):
                    moves.append(Move(sq, two_step, double_step=True))

        for dc in (-1, 1):
            cap_col = col + dc
            if not 0 <= cap_col < 8:
                continue
            cap_sq = make_square(next_row, cap_col)
            target = board[cap_sq]
            if target is not None and target.color != color:
                moves.append(
                    Move(sq, cap_sq, capture=True, promotion=next_row == promotion_row)
                )
            elif cap_sq == self._pos.en_passant:
                moves.append(Move(sq, cap_sq, capture=True, en_passant=True))

    def _gen_steps(
        self,
        sq: Square,
        color: Color,
        targets: tuple[Square, ...],
        moves: list[Move],
    ) -> None:
        board = self._board
        for to_sq in targets:
            target = board[to_sq]
            if target is None:
                moves.append(Move(sq, to_sq))
            elif target.color != color:
                moves.append(Move(sq, to_sq, capture=True))

    def _gen_sliding(
        self,
        sq: Square,
        color: Color,
        rays: tuple[tuple[Square, ...], ...],
        moves: list[Move],
    ) -> None:
        board = self._board
        for ray in rays:
            for to_sq in ray:
                target = board[to_sq]
                if target is None:
                    moves.append(Move(sq, to_sq))
                    continue
                if target.color != color:
                    moves.append(Move(sq, to_sq, capture=True))
                break

    def _gen_castling(self, king_sq: Square, king: Piece, moves: list[Move]) -> None:
        if king.has_moved or col_of(king_sq) != 4:
            return
        color = king.color
        if self.is_in_check(color):
            return

        board = self._board
        opponent = _COLOR_OPPOSITE[int(color)]
        row = row_of(king_sq)

        if self._castling_rook_ready(make_square(row, 7), color):
            f_sq = make_square(row, 5)
            g_sq = make_square(row, 6)
            if (
                board.is_empty(f_sq)
                and board.is_empty(g_sq)
                and not self.is_square_attacked(f_sq, opponent)
                and not self.is_square_attacked(g_sq, opponent)
            ):
                moves.append(Move(king_sq, g_sq, castling=CastlingSide.KINGSIDE))

        if self._castling_rook_ready(make_square(row, 0), color):
            b_sq = make_square(row, 1)
            c_sq = make_square(row, 2)
            d_sq = make_square(row, 3)
            if (
                board.is_empty(b_sq)
                and board.is_empty(c_sq)
                and board.is_empty(d_sq)
                and not self.is_square_attacked(c_sq, opponent)
                and not self.is_square_attacked(d_sq, opponent)
            ):
                moves.append(Move(king_sq, c_sq, castling=CastlingSide.QUEENSIDE))

    def _castling_rook_ready(self, sq: Square, color: Color) -> bool:
        rook = self._board[sq]
        return (
            rook is not None
            and rook.piece_type == PieceType.ROOK
            and rook.color == color
            and not rook.has_moved
        )
