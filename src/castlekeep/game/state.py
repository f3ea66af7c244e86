"""Game state — the authoritative board, move history and terminal status."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from castlekeep.core.enums import Color, GameResult, GameStatus, PieceType
from castlekeep.core.move import Move, MoveRecord
from castlekeep.core.move_generator import MoveGenerator
from castlekeep.core.notation import move_to_algebraic, movetext
from castlekeep.core.piece import Piece
from castlekeep.core.position import PROMOTION_TYPES, Position
from castlekeep.core.rules import Rules
from castlekeep.core.types import Square, is_on_board, is_valid_square, make_square

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CandidateMove:
    """A legal move together with the piece that would make it."""

    move: Move
    piece: Piece

    @property
    def from_sq(self) -> Square:
        return self.move.from_sq

    @property
    def to_sq(self) -> Square:
        return self.move.to_sq


def _empty_captured() -> dict[Color, list[Piece]]:
    return {Color.WHITE: [], Color.BLACK: []}


@dataclass
class GameState:
    """Owns one game: position, history, captures, check and terminal status.

    All mutation goes through :meth:`make_move` / :meth:`apply_move` and
    :meth:`undo_move`. Every fallible operation reports failure through its
    return value and leaves the state untouched.

    ``captured[color]`` holds the pieces *color* has taken.
    """

    position: Position = field(default_factory=Position)
    move_history: list[MoveRecord] = field(default_factory=list, init=False)
    captured: dict[Color, list[Piece]] = field(
        default_factory=_empty_captured, init=False
    )
    status: GameStatus = field(default=GameStatus.ONGOING, init=False)
    result: GameResult = field(default=GameResult.IN_PROGRESS, init=False)
    is_check: bool = field(default=False, init=False)

    def __post_init__(self) -> None:
        self._refresh_status()

    # ── Initialisation ───────────────────────────────────────────────────

    def reset(self) -> None:
        """Return to the standard starting position."""
        self.position = Position()
        self.move_history.clear()
        self.captured = _empty_captured()
        self._refresh_status()

    # ── Queries ──────────────────────────────────────────────────────────

    def get_piece(self, row: int, col: int) -> Piece | None:
        """Piece at (*row*, *col*), ``None`` if empty or out of range."""
        return self.position.board.get(row, col)

    def get_valid_moves(self, row: int, col: int) -> list[Move]:
        """Legal moves for the piece at (*row*, *col*).

        Empty if the square is empty, off the board, or holds a piece of the
        side not to move.
        """
        if not is_on_board(row, col):
            return []
        return MoveGenerator(self.position).legal_moves_from(make_square(row, col))

    def get_all_valid_moves(self, color: Color) -> list[CandidateMove]:
        """Every legal move for *color*; empty unless *color* is to move."""
        if color != self.position.side_to_move:
            return []
        board = self.position.board
        candidates: list[CandidateMove] = []
        for move in MoveGenerator(self.position).generate_legal_moves():
            piece = board[move.from_sq]
            assert piece is not None
            candidates.append(CandidateMove(move, piece))
        return candidates

    def legal_moves(self) -> list[Move]:
        """Legal moves in the current position."""
        return MoveGenerator(self.position).generate_legal_moves()

    # ── Move application ─────────────────────────────────────────────────

    def make_move(
        self,
        from_row: int,
        from_col: int,
        to_row: int,
        to_col: int,
        promotion: PieceType | None = None,
    ) -> bool:
        """Move the piece on (from_row, from_col) to (to_row, to_col).

        Returns ``False`` without changing anything if there is no piece on
        the origin or the destination is not among its legal moves.
        """
        if not (is_on_board(from_row, from_col) and is_on_board(to_row, to_col)):
            _LOGGER.debug(
                "Rejected off-board move %s", (from_row, from_col, to_row, to_col)
            )
            return False
        from_sq = make_square(from_row, from_col)
        to_sq = make_square(to_row, to_col)
        if self.position.board[from_sq] is None:
            _LOGGER.debug("Rejected move from empty square %d", from_sq)
            return False

        legal = MoveGenerator(self.position).legal_moves_from(from_sq)
        move = next((m for m in legal if m.to_sq == to_sq), None)
        if move is None:
            _LOGGER.debug("Rejected illegal move %d -> %d", from_sq, to_sq)
            return False
        return self._execute(move, promotion)

    def apply_move(self, move: Move, promotion: PieceType | None = None) -> bool:
        """Apply *move* if it equals a member of the current legal set.

        Used for moves that come from elsewhere (the search agent, a remote
        peer): a stale or forged value is rejected, never applied.
        """
        if not (is_valid_square(move.from_sq) and is_valid_square(move.to_sq)):
            _LOGGER.debug("Rejected malformed move %r", move)
            return False
        if move not in MoveGenerator(self.position).legal_moves_from(move.from_sq):
            _LOGGER.debug("Rejected move %s not in the legal set", move)
            return False
        return self._execute(move, promotion)

    def undo_move(self) -> bool:
        """Undo the last move. Returns ``False`` if there is nothing to undo."""
        if not self.move_history:
            return False

        record = self.move_history.pop()
        self.position.unmake_move()
        if record.captured is not None:
            self.captured[record.piece.color].pop()

        # A position that was just moved from always had a legal move.
        self.status = GameStatus.ONGOING
        self.result = GameResult.IN_PROGRESS
        self.is_check = Rules.is_in_check(self.position)
        return True

    # ── Query helpers ────────────────────────────────────────────────────

    @property
    def side_to_move(self) -> Color:
        return self.position.side_to_move

    @property
    def en_passant(self) -> Square | None:
        return self.position.en_passant

    @property
    def is_game_over(self) -> bool:
        return self.status != GameStatus.ONGOING

    @property
    def winner(self) -> Color | None:
        """Winning color after checkmate.

        ``None`` both while the game is ongoing and after a stalemate; use
        :attr:`is_draw` or :attr:`result` to tell the two apart.
        """
        return self.result.winner

    @property
    def is_draw(self) -> bool:
        return self.result == GameResult.DRAW

    @property
    def last_move(self) -> tuple[Square, Square] | None:
        """(from, to) of the most recent move, for highlighting."""
        if not self.move_history:
            return None
        last = self.move_history[-1]
        return last.from_sq, last.to_sq

    @property
    def ply_count(self) -> int:
        """Number of half-moves played."""
        return len(self.move_history)

    def notation(self) -> list[str]:
        """Algebraic notation of every move played so far."""
        return [move_to_algebraic(record) for record in self.move_history]

    def movetext(self) -> list[str]:
        """Numbered move list, one line per full move."""
        return movetext(self.move_history)

    # ── Internal ─────────────────────────────────────────────────────────

    def _execute(self, move: Move, promotion: PieceType | None) -> bool:
        if not move.promotion:
            promotion = None
        elif promotion is not None and promotion not in PROMOTION_TYPES:
            _LOGGER.debug("Rejected promotion of %s to %s", move, promotion)
            return False

        position = self.position
        mover = position.board[move.from_sq]
        assert mover is not None
        snapshot = mover.copy()
        prior_en_passant = position.en_passant

        captured = position.make_move(move, promotion)
        if captured is not None:
            self.captured[mover.color].append(captured)

        self.move_history.append(
            MoveRecord(
                move=move,
                piece=snapshot,
                captured=captured.copy() if captured is not None else None,
                promotion=promotion,
                prior_en_passant=prior_en_passant,
            )
        )
        self._refresh_status()
        return True

    def _refresh_status(self) -> None:
        position = self.position
        self.is_check = Rules.is_in_check(position)
        self.status = Rules.status(position)
        self.result = Rules.game_result(position, self.status)
        if self.is_game_over:
            _LOGGER.info("Game over: %s (%s)", self.status.name, self.result.name)
