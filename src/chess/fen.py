"""
FEN export/import of a board.

FEN, or Forsyth-Edwards Notation, is a standard notation for describing a particular board position of a chess game.
It is what external engines (the move-search oracle) expect to receive.

<board position string> <active color> <castling rights> <en passant square> <# half move clock> <number turns played>

ex) The standard starting position has a FEN
rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1

NOTE: castling and en passant are not part of these rules, so exported FENs always carry "-" for both.
The half move clock is not tracked either and is always written as 0.
"""

from typing import Optional

from src.chess.board import Board, empty_board
from src.chess.pieces import FEN_TO_PIECE, Piece
from src.chess.square import BOARD_SIZE
from src.core.exceptions import InvalidFENError
from src.core.shared_types import Color

STARTING_POSITION = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"
EMPTY_POSITION = "/".join(["8"] * BOARD_SIZE)
EMPTY_SQUARE_COUNTS = "12345678"


def is_valid_fen(fen: str) -> bool:
    """
    Check if given string follows FEN notation as these rules write it.

    NOTE: castling rights and en passant square must both be "-".
    """

    # there should be 6 parts to the string
    parts = fen.split(" ")
    if len(parts) != 6:
        return False

    position, color, castling, en_passant, half_move_counter, full_move_counter = parts
    if not is_valid_position(position):
        return False

    if not is_valid_color_code(color):
        return False

    if castling != "-" or en_passant != "-":
        return False

    return _is_counter(half_move_counter) and _is_counter(full_move_counter)


def is_valid_position(position: str) -> bool:
    """Only check the part of the FEN encoding for the board position."""
    rank_fens = position.split("/")
    if len(rank_fens) != BOARD_SIZE:
        return False

    for rank_fen in rank_fens:
        file_count = 0
        for character in rank_fen:
            # make sure every character is valid
            if character in EMPTY_SQUARE_COUNTS:
                file_count += int(character)
            elif character.isascii() and character.lower() in FEN_TO_PIECE:
                file_count += 1
            else:
                # immediately invalidate if the character is anything else
                return False

        # make sure you are creating a correctly sized board
        if file_count != BOARD_SIZE:
            return False
    return True


def is_valid_color_code(color: str) -> bool:
    return color in {"w", "b"}


def _is_counter(counter: str) -> bool:
    return counter.isascii() and counter.isdigit()


def board_from_fen(fen: str) -> Board:
    """
    Construct a board from a FEN string.
    ----

    Only the first part (the position) is read. A full FEN is accepted as well, the remaining fields are ignored.
    ex. rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
    * the first rank listed is the 8th rank (row 0 of the board), starting with the a-file
    * a letter denotes a piece (capital letters for white)
    * a number denotes that many consecutive empty squares
    """
    position = fen.strip().split(" ")[0]
    if not is_valid_position(position):
        raise InvalidFENError(f"Cannot interpret supplied string as FEN: {fen!r}")

    board = empty_board()
    for row, fen_one_rank in enumerate(position.split("/")):
        col = 0
        for character in fen_one_rank:
            if character.isalpha():
                board[row][col] = Piece.from_fen(character)
                col += 1
            else:
                col += int(character)
    return board


def position_to_fen(board: Board) -> str:
    """Ranks are separated by slashes in FEN string."""
    return "/".join(_row_to_fen(row) for row in board)


def _row_to_fen(row: list[Optional[Piece]]) -> str:
    """FEN string of a single rank"""
    fen_characters: list[str] = []
    empty_count = 0
    for piece in row:
        if piece is None:
            empty_count += 1
            continue
        if empty_count > 0:
            fen_characters.append(str(empty_count))
            empty_count = 0
        fen_characters.append(piece.to_fen())

    # if the entire rank is empty, then we still place this number in the string
    if empty_count > 0:
        fen_characters.append(str(empty_count))
    return "".join(fen_characters)


def board_to_fen(board: Board, color_to_move: Color, full_move: int = 1) -> str:
    """Full six-field FEN of the board, ready to be handed to an engine."""
    active_color = "w" if color_to_move == Color.WHITE else "b"
    return f"{position_to_fen(board)} {active_color} - - 0 {full_move}"


def full_move_number(half_moves_played: int) -> int:
    """The number of turns starts at 1 and increments after every move black makes."""
    return half_moves_played // 2 + 1
