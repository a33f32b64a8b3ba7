"""
Geometry/Base movement rules

Key idea: Use strategy pattern to define the movement rule for each piece type.
A rule answers "may this piece go from here to there on this board?", ignoring whether the move exposes its own king.

Checking that the move does not leave your own king in check is done later (see rules.py)
"""

from dataclasses import dataclass
from typing import Callable

from src.chess.board import Board, piece_at
from src.chess.pieces import Piece
from src.chess.square import Position
from src.core.shared_types import Color, PieceType


@dataclass(frozen=True)
class Move:
    """basic definition of a move to be made"""

    from_square: Position
    to_square: Position
    piece: Piece

    def to_uci(self) -> str:
        """
        Universal Chess Interface notation, ex. "e2e4": the piece on e2 moves to e4.
        No promotion suffix, since promotion is not part of these rules.
        """
        return f"{self.from_square.to_algebraic()}{self.to_square.to_algebraic()}"


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def is_path_clear(board: Board, from_square: Position, to_square: Position) -> bool:
    """
    Walk from `from_square` towards `to_square` one unit step at a time.
    ---

    Every square strictly between the two must be empty. The endpoints themselves are not checked.
    NOTE: Only meaningful for straight or diagonal lines (the only ones the sliding pieces use).
    """
    row_step = _sign(to_square.row - from_square.row)
    col_step = _sign(to_square.col - from_square.col)

    row = from_square.row + row_step
    col = from_square.col + col_step
    while (row, col) != (to_square.row, to_square.col):
        if board[row][col] is not None:
            return False
        row += row_step
        col += col_step
    return True


# --- PAWN ---
def pawn_direction(color: Color) -> int:
    """White moves towards row 0 (up the board), black towards row 7"""
    return -1 if color == Color.WHITE else 1


def pawn_start_row(color: Color) -> int:
    return 6 if color == Color.WHITE else 1


def pawn_move(board: Board, from_square: Position, to_square: Position, piece: Piece) -> bool:
    """
    A pawn:
    - moves a single square forward onto an empty square
    - can move two squares forward from its starting row, if the target square is empty
    - takes diagonally (one column sideways, one row forward), and ONLY takes that way

    NOTE: the square passed over by the two-square push is not looked at. `strict_pawn_move` does.
    """
    direction = pawn_direction(piece.color)
    row_diff = to_square.row - from_square.row
    col_diff = to_square.col - from_square.col
    target = piece_at(board, to_square)

    # pushes
    if col_diff == 0:
        if target is not None:
            return False
        if row_diff == direction:
            return True
        return from_square.row == pawn_start_row(piece.color) and row_diff == 2 * direction

    # captures
    if abs(col_diff) == 1 and row_diff == direction:
        return target is not None and target.color != piece.color

    return False


def strict_pawn_move(board: Board, from_square: Position, to_square: Position, piece: Piece) -> bool:
    """Same as `pawn_move`, but a two-square push also needs the square in between to be empty."""
    if not pawn_move(board, from_square, to_square, piece):
        return False
    if abs(to_square.row - from_square.row) == 2:
        return is_path_clear(board, from_square, to_square)
    return True


# --- KNIGHT ---
def knight_move(board: Board, from_square: Position, to_square: Position, piece: Piece) -> bool:
    """Knights jump: |delta_row| + |delta_col| = 3 with both non-zero. What stands in between does not matter."""
    deltas = (abs(to_square.row - from_square.row), abs(to_square.col - from_square.col))
    return deltas in ((2, 1), (1, 2))


# --- SLIDING PIECES ---
def rook_move(board: Board, from_square: Position, to_square: Position, piece: Piece) -> bool:
    """Rooks move either horizontally or vertically, and cannot jump"""
    same_row = from_square.row == to_square.row
    same_col = from_square.col == to_square.col
    if same_row == same_col:
        # either diagonal-ish or not moving at all
        return False
    return is_path_clear(board, from_square, to_square)


def bishop_move(board: Board, from_square: Position, to_square: Position, piece: Piece) -> bool:
    """Bishops move diagonally: |delta_row| = |delta_col|"""
    row_diff = abs(to_square.row - from_square.row)
    col_diff = abs(to_square.col - from_square.col)
    if row_diff != col_diff or row_diff == 0:
        return False
    return is_path_clear(board, from_square, to_square)


def queen_move(board: Board, from_square: Position, to_square: Position, piece: Piece) -> bool:
    """The Queen combines the rook moves and the bishop moves"""
    return rook_move(board, from_square, to_square, piece) or bishop_move(
        board, from_square, to_square, piece
    )


# --- KING ---
def king_move(board: Board, from_square: Position, to_square: Position, piece: Piece) -> bool:
    """
    The king moves a single square in any direction.
    No castling.
    """
    row_diff = abs(to_square.row - from_square.row)
    col_diff = abs(to_square.col - from_square.col)
    return max(row_diff, col_diff) == 1


# -- STRATEGY PATTERN: MOVEMENT RULES ---
MovementRuleFn = Callable[[Board, Position, Position, Piece], bool]
MOVEMENT_RULES: dict[PieceType, MovementRuleFn] = {
    PieceType.PAWN: pawn_move,
    PieceType.KNIGHT: knight_move,
    PieceType.BISHOP: bishop_move,
    PieceType.ROOK: rook_move,
    PieceType.QUEEN: queen_move,
    PieceType.KING: king_move,
}
STRICT_MOVEMENT_RULES: dict[PieceType, MovementRuleFn] = {
    **MOVEMENT_RULES,
    PieceType.PAWN: strict_pawn_move,
}


def is_legal_move(
    board: Board,
    from_square: Position,
    to_square: Position,
    piece: Piece,
    *,
    strict_double_step: bool = False,
) -> bool:
    """
    Can `piece`, standing on `from_square`, move to `to_square`?
    ----

    1. the target must be on the board
    2. the target must not hold a piece of your own color (also rules out "moving" onto your own square)
    3. the piece-specific movement rule must allow it

    NOTE: It is the caller's job to make sure `piece` is what stands on `from_square`. This is not checked here.
    """
    if not to_square.is_on_board():
        return False

    target = piece_at(board, to_square)
    if target is not None and target.color == piece.color:
        return False

    if from_square == to_square:
        return False

    rules = STRICT_MOVEMENT_RULES if strict_double_step else MOVEMENT_RULES
    return rules[piece.kind](board, from_square, to_square, piece)
