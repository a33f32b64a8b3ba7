"""
The board: an 8x8 grid of optional pieces.

Boards are treated as snapshots. Every helper that changes something returns a new grid and leaves its input alone.
"""

from typing import Optional

from src.chess.pieces import Piece
from src.chess.square import BOARD_SIZE, Position
from src.core.shared_types import Color, PieceType

Board = list[list[Optional[Piece]]]

BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)


def empty_board() -> Board:
    return [[None] * BOARD_SIZE for _ in range(BOARD_SIZE)]


def initial_layout() -> Board:
    """
    Standard starting position.
    ----

    * row 0: black pieces (8th rank), row 1: black pawns
    * rows 2 through 5 empty
    * row 6: white pawns, row 7: white pieces (1st rank)

    Each call builds new row lists, so callers are free to modify what they get.
    """
    board = empty_board()
    board[0] = [Piece(kind, Color.BLACK) for kind in BACK_RANK]
    board[1] = [Piece(PieceType.PAWN, Color.BLACK) for _ in range(BOARD_SIZE)]
    board[6] = [Piece(PieceType.PAWN, Color.WHITE) for _ in range(BOARD_SIZE)]
    board[7] = [Piece(kind, Color.WHITE) for kind in BACK_RANK]
    return board


def clone_board(board: Board) -> Board:
    """Copy of the grid. Pieces are frozen values, so copying the rows is enough to remove all aliasing."""
    return [list(row) for row in board]


def piece_at(board: Board, position: Position) -> Optional[Piece]:
    return board[position.row][position.col]


def place_piece(board: Board, piece: Optional[Piece], position: Position) -> Board:
    """New board with the square set to `piece` (None clears it)."""
    new_board = clone_board(board)
    new_board[position.row][position.col] = piece
    return new_board


def iter_pieces(board: Board) -> list[tuple[Position, Piece]]:
    """All occupied squares, scanning from a8 to h1."""
    return [
        (Position(row, col), piece)
        for row, pieces in enumerate(board)
        for col, piece in enumerate(pieces)
        if piece is not None
    ]


def pieces_of(board: Board, color: Color) -> list[tuple[Position, Piece]]:
    return [(pos, piece) for pos, piece in iter_pieces(board) if piece.color == color]


def locate_king(board: Board, color: Color) -> Optional[Position]:
    """First king of that color found. None if there is none (boards with odd material are allowed)."""
    return next(
        (pos for pos, piece in pieces_of(board, color) if piece.kind == PieceType.KING),
        None,
    )
