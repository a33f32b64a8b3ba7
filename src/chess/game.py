"""
Applying a move to a board.

`apply_move` is the raw operation: it trusts the caller to have checked legality first.
`make_move` is the entry point for callers that want the checks done for them (it raises on anything illegal).
"""

from dataclasses import dataclass
from typing import Optional

from src.chess.board import Board, clone_board, piece_at
from src.chess.moves import Move, is_legal_move
from src.chess.pieces import NOTATION_LETTER, Piece
from src.chess.rules import (
    has_insufficient_material,
    has_safe_move,
    is_in_check,
    leaves_king_in_check,
)
from src.chess.square import Position
from src.core.exceptions import InvalidMoveRequestError
from src.core.shared_types import Color, GameStatus, PieceType


@dataclass(frozen=True)
class MoveResult:
    """Everything a caller needs after a half-move. The new board is a fresh snapshot owned by the caller."""

    new_board: Board
    captured_piece: Optional[Piece]
    notation: str
    status: GameStatus
    is_check: bool
    is_checkmate: bool
    is_stalemate: bool


def move_notation(piece: Piece, from_square: Position, to_square: Position, is_capture: bool) -> str:
    """
    Minimal algebraic notation
    ----

    * pawn push: only the target square ("e4")
    * pawn capture: file the pawn came from + "x" + target ("exd5")
    * other pieces: piece letter + "x" if capturing + target ("Nf3", "Qxd8")

    NOTE: no disambiguation when two pieces of the same kind can reach the square, and no "+" / "#" suffixes.
    """
    target = to_square.to_algebraic()
    if piece.kind == PieceType.PAWN:
        if is_capture:
            return f"{from_square.to_algebraic()[0]}x{target}"
        return target

    capture_mark = "x" if is_capture else ""
    return f"{NOTATION_LETTER[piece.kind]}{capture_mark}{target}"


def apply_move(
    board: Board,
    from_square: Position,
    to_square: Position,
    *,
    strict_double_step: bool = False,
) -> MoveResult:
    """
    Play the move and report what happened.
    ----

    1. copy the board
    2. move the piece (marked as moved) and clear the square it came from
    3. write the notation
    4. determine the status from the opponent's point of view (it is their turn next)

    NOTE: No legality check. Passing an illegal move (or an empty from-square) is a programming error of the caller.
    """
    new_board = clone_board(board)
    piece = piece_at(new_board, from_square)
    # for the type checker: the caller validated the move, so there is a piece to move
    assert piece is not None
    captured_piece = piece_at(new_board, to_square)

    new_board[to_square.row][to_square.col] = piece.moved()
    new_board[from_square.row][from_square.col] = None

    notation = move_notation(piece, from_square, to_square, captured_piece is not None)

    opponent = piece.color.opponent
    check = is_in_check(new_board, opponent, strict_double_step=strict_double_step)
    can_move = has_safe_move(new_board, opponent, strict_double_step=strict_double_step)
    checkmate = check and not can_move
    stalemate = not check and not can_move

    if checkmate:
        status = GameStatus.CHECKMATE
    elif stalemate or has_insufficient_material(new_board):
        status = GameStatus.DRAW
    elif check:
        status = GameStatus.CHECK
    else:
        status = GameStatus.PLAYING

    return MoveResult(
        new_board=new_board,
        captured_piece=captured_piece,
        notation=notation,
        status=status,
        is_check=check,
        is_checkmate=checkmate,
        is_stalemate=stalemate,
    )


def validate_move(
    board: Board,
    from_square: Position,
    to_square: Position,
    color: Color,
    *,
    strict_double_step: bool = False,
) -> Move:
    """
    Raise InvalidMoveRequestError unless `color` may play the move. Returns the validated Move.
    ----

    1. there must be a piece on the from-square
    2. it must belong to the player asking
    3. the movement rules must allow it
    4. it may not leave your own king in check
    """
    if not (from_square.is_on_board() and to_square.is_on_board()):
        raise InvalidMoveRequestError(
            f"Square off the board: from {from_square} to {to_square}"
        )

    piece = piece_at(board, from_square)
    if piece is None:
        raise InvalidMoveRequestError(
            f"No piece to move on {from_square.to_algebraic()}"
        )
    if piece.color != color:
        raise InvalidMoveRequestError(
            f"Piece on {from_square.to_algebraic()} belongs to {piece.color}, not {color}"
        )

    if not is_legal_move(
        board, from_square, to_square, piece, strict_double_step=strict_double_step
    ):
        raise InvalidMoveRequestError(
            f"Move not allowed: {piece.kind} {from_square.to_algebraic()}{to_square.to_algebraic()}"
        )

    move = Move(from_square, to_square, piece)
    if leaves_king_in_check(board, move, strict_double_step=strict_double_step):
        raise InvalidMoveRequestError(
            f"Move not allowed, leaves the king in check: {move.to_uci()}"
        )
    return move


def make_move(
    board: Board,
    from_square: Position,
    to_square: Position,
    color: Color,
    *,
    strict_double_step: bool = False,
) -> MoveResult:
    """Validated version of `apply_move`: raises InvalidMoveRequestError instead of corrupting the game."""
    validate_move(
        board, from_square, to_square, color, strict_double_step=strict_double_step
    )
    return apply_move(
        board, from_square, to_square, strict_double_step=strict_double_step
    )
