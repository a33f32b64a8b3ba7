"""
Rules that look at the position as a whole: check, the set of playable moves, and the end-of-game conditions.

All functions are pure. Boards passed in are never modified.
"""

from collections import Counter

from src.chess.board import Board, clone_board, iter_pieces, locate_king, pieces_of
from src.chess.moves import Move, is_legal_move
from src.chess.square import BOARD_SIZE, Position
from src.core.shared_types import Color, GameStatus, PieceType

ALL_SQUARES: tuple[Position, ...] = tuple(
    Position(row, col) for row in range(BOARD_SIZE) for col in range(BOARD_SIZE)
)

MINOR_PIECES = (PieceType.BISHOP, PieceType.KNIGHT)


def is_in_check(board: Board, color: Color, *, strict_double_step: bool = False) -> bool:
    """
    Is the king of `color` attacked?
    ----

    Reuses the movement rules: the king is in check if any opponent's piece could legally move onto its square.
    Pawns only move diagonally onto occupied squares, so a pawn straight in front of the king does not give check.

    No king of that color on the board? Then there is nothing to be in check.
    """
    king_square = locate_king(board, color)
    if king_square is None:
        return False

    return any(
        is_legal_move(board, square, king_square, piece, strict_double_step=strict_double_step)
        for square, piece in pieces_of(board, color.opponent)
    )


def _board_after(board: Board, move: Move) -> Board:
    """Scratch copy of the board with the move played. No notation / status (see game.apply_move for that)."""
    scratch = clone_board(board)
    scratch[move.to_square.row][move.to_square.col] = move.piece.moved()
    scratch[move.from_square.row][move.from_square.col] = None
    return scratch


def leaves_king_in_check(board: Board, move: Move, *, strict_double_step: bool = False) -> bool:
    """Return True if, after playing the move, the mover's own king is attacked"""
    return is_in_check(
        _board_after(board, move), move.piece.color, strict_double_step=strict_double_step
    )


def moves_without_self_check(
    board: Board, color: Color, *, strict_double_step: bool = False
) -> list[Move]:
    """
    Every move `color` can actually play.
    ----

    1. for every piece of that color, try every square of the board with the movement rules
    2. keep those moves that do not put (or leave) you in check

    NOTE: 64 x 64 candidates, each followed by a full check test. Fine for a human paced game, too slow for a search tree.
    """
    safe_moves: list[Move] = []
    for from_square, piece in pieces_of(board, color):
        for to_square in ALL_SQUARES:
            if not is_legal_move(
                board, from_square, to_square, piece, strict_double_step=strict_double_step
            ):
                continue
            move = Move(from_square, to_square, piece)
            if not leaves_king_in_check(board, move, strict_double_step=strict_double_step):
                safe_moves.append(move)
    return safe_moves


def legal_destinations(
    board: Board, from_square: Position, *, strict_double_step: bool = False
) -> list[Position]:
    """Squares the piece on `from_square` may move to. Used to highlight candidate squares. Empty square -> empty list."""
    piece = board[from_square.row][from_square.col]
    if piece is None:
        return []
    destinations: list[Position] = []
    for to_square in ALL_SQUARES:
        if not is_legal_move(
            board, from_square, to_square, piece, strict_double_step=strict_double_step
        ):
            continue
        move = Move(from_square, to_square, piece)
        if not leaves_king_in_check(board, move, strict_double_step=strict_double_step):
            destinations.append(to_square)
    return destinations


# --- CHECKS FOR ENDING THE GAME ---
def has_safe_move(board: Board, color: Color, *, strict_double_step: bool = False) -> bool:
    return len(moves_without_self_check(board, color, strict_double_step=strict_double_step)) > 0


def is_checkmate(board: Board, color: Color, *, strict_double_step: bool = False) -> bool:
    return is_in_check(board, color, strict_double_step=strict_double_step) and not has_safe_move(
        board, color, strict_double_step=strict_double_step
    )


def is_stalemate(board: Board, color: Color, *, strict_double_step: bool = False) -> bool:
    return not is_in_check(
        board, color, strict_double_step=strict_double_step
    ) and not has_safe_move(board, color, strict_double_step=strict_double_step)


def has_insufficient_material(board: Board) -> bool:
    """
    Draw when neither side can possibly mate.
    ---

    Only these cases are recognized:
    * king vs king
    * king + a single bishop or knight vs a lone king (either side having the extra piece)

    Anything else (ex. bishop vs bishop on the same color) is NOT treated as a draw.
    """
    material = {
        color: Counter(piece.kind for _, piece in pieces_of(board, color)) for color in Color
    }
    lone_king = Counter({PieceType.KING: 1})

    if all(material[color] == lone_king for color in Color):
        return True

    for color in Color:
        other = material[color.opponent]
        if other != lone_king:
            continue
        for minor in MINOR_PIECES:
            if material[color] == Counter({PieceType.KING: 1, minor: 1}):
                return True
    return False


def evaluate_status(board: Board, color: Color, *, strict_double_step: bool = False) -> GameStatus:
    """
    Status of the game with `color` to move.
    ----

    Checkmate takes priority over check. Stalemate and insufficient material both count as a draw.
    """
    in_check = is_in_check(board, color, strict_double_step=strict_double_step)
    can_move = has_safe_move(board, color, strict_double_step=strict_double_step)

    if in_check and not can_move:
        return GameStatus.CHECKMATE
    if not can_move or has_insufficient_material(board):
        return GameStatus.DRAW
    if in_check:
        return GameStatus.CHECK
    return GameStatus.PLAYING


def count_pieces(board: Board) -> Counter[tuple[Color, PieceType]]:
    """Tally of the material on the board, per color and piece type"""
    return Counter((piece.color, piece.kind) for _, piece in iter_pieces(board))
