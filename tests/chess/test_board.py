"""Unit tests for /src/chess/board.py"""

from collections import Counter

from src.chess.board import (
    BACK_RANK,
    clone_board,
    empty_board,
    initial_layout,
    iter_pieces,
    locate_king,
    piece_at,
    pieces_of,
    place_piece,
)
from src.chess.pieces import Piece
from src.chess.square import Position
from src.core.shared_types import Color, PieceType

STANDARD_COUNTS = Counter(
    {
        PieceType.PAWN: 8,
        PieceType.ROOK: 2,
        PieceType.KNIGHT: 2,
        PieceType.BISHOP: 2,
        PieceType.QUEEN: 1,
        PieceType.KING: 1,
    }
)


# -- CREATION LOGIC ---
def test_initial_layout_piece_counts() -> None:
    """16 pieces per color, in the standard amounts"""
    board = initial_layout()
    for color in Color:
        pieces = pieces_of(board, color)
        assert len(pieces) == 16
        assert Counter(piece.kind for _, piece in pieces) == STANDARD_COUNTS


def test_initial_layout_squares() -> None:
    """Make sure board position is correctly initialized: black on rows 0/1, white on rows 6/7"""
    board = initial_layout()

    # top rank: black pieces, 7th rank: black pawns
    assert [piece.kind for piece in board[0]] == list(BACK_RANK)
    assert all(piece.color == Color.BLACK for piece in board[0])
    assert all(piece == Piece(PieceType.PAWN, Color.BLACK) for piece in board[1])

    # 6th, 5th, 4th, 3rd ranks all empty
    for row in range(2, 6):
        assert board[row] == [None] * 8

    # 2nd rank: white pawns, 1st rank: white pieces
    assert all(piece == Piece(PieceType.PAWN, Color.WHITE) for piece in board[6])
    assert [piece.kind for piece in board[7]] == list(BACK_RANK)
    assert all(piece.color == Color.WHITE for piece in board[7])

    # queen on d-file, king on e-file
    assert board[7][3] == Piece(PieceType.QUEEN, Color.WHITE)
    assert board[7][4] == Piece(PieceType.KING, Color.WHITE)


def test_initial_layout_is_fresh_every_call() -> None:
    """Changing one starting board must not leak into the next one (no shared row lists)."""
    first = initial_layout()
    first[6][4] = None
    second = initial_layout()
    assert second[6][4] == Piece(PieceType.PAWN, Color.WHITE)
    assert all(row_a is not row_b for row_a, row_b in zip(first, second))


def test_clone_board_has_no_aliasing() -> None:
    board = initial_layout()
    copy = clone_board(board)
    assert copy == board
    assert all(row_a is not row_b for row_a, row_b in zip(board, copy))

    copy[0][0] = None
    assert board[0][0] == Piece(PieceType.ROOK, Color.BLACK)


def test_place_piece_returns_new_board() -> None:
    board = empty_board()
    e4 = Position.from_algebraic("e4")
    knight = Piece(PieceType.KNIGHT, Color.WHITE)
    new_board = place_piece(board, knight, e4)
    assert piece_at(new_board, e4) == knight
    assert piece_at(board, e4) is None


def test_iter_pieces_on_empty_board() -> None:
    assert iter_pieces(empty_board()) == []


def test_locate_king() -> None:
    board = initial_layout()
    assert locate_king(board, Color.WHITE) == Position(7, 4)
    assert locate_king(board, Color.BLACK) == Position(0, 4)


def test_locate_king_missing() -> None:
    """Boards without kings are allowed. Simply nothing to find."""
    board = place_piece(empty_board(), Piece(PieceType.QUEEN, Color.WHITE), Position(3, 3))
    assert locate_king(board, Color.WHITE) is None
    assert locate_king(board, Color.BLACK) is None
