"""Unit tests for /src/chess/square.py"""

import pytest

from src.chess.square import (
    BOARD_SIZE,
    FILES,
    Position,
    algebraic_to_square,
    is_algebraic,
    is_on_board,
    square_to_algebraic,
)


@pytest.mark.parametrize(
    "row, col, notation",
    [
        (row, col, f"{FILES[col]}{BOARD_SIZE - row}")
        for row in range(BOARD_SIZE)
        for col in range(BOARD_SIZE)
    ],
)
def test_algebraic_names_of_all_squares(row: int, col: int, notation: str) -> None:
    """Row 0 is the 8th rank, column 0 is the a-file. Both directions of the conversion."""
    assert square_to_algebraic(Position(row, col)) == notation
    assert algebraic_to_square(notation) == Position(row, col)


@pytest.mark.parametrize(
    "position, notation",
    [
        (Position(0, 0), "a8"),
        (Position(7, 4), "e1"),
        (Position(6, 4), "e2"),
        (Position(7, 7), "h1"),
    ],
)
def test_known_squares(position: Position, notation: str) -> None:
    assert square_to_algebraic(position) == notation


def test_on_board() -> None:
    """happy case: every square within the dimensions of the board"""
    for row in range(BOARD_SIZE):
        for col in range(BOARD_SIZE):
            assert is_on_board(row, col)
            assert Position(row, col).is_on_board()


@pytest.mark.parametrize("row, col", [(-1, 0), (0, -1), (8, 0), (0, 8), (8, 8), (-1, -1)])
def test_off_board(row: int, col: int) -> None:
    assert not is_on_board(row, col)
    assert not Position(row, col).is_on_board()


@pytest.mark.parametrize("name", ["a1", "h8", "e4"])
def test_valid_square_names(name: str) -> None:
    assert is_algebraic(name)


@pytest.mark.parametrize("name", ["", "e", "e9", "i1", "E2", "e10", "4e"])
def test_invalid_square_names(name: str) -> None:
    assert not is_algebraic(name)
