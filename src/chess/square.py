"""
A square on the board

(placed in its own module as multiple other modules need to import it)

Coordinates follow the layout of the board grid: row 0 is the 8th rank (black's home row), row 7 is the 1st rank.
Column 0 is the a-file.
"""

from __future__ import annotations

from dataclasses import dataclass

BOARD_SIZE = 8
FILES = "abcdefgh"


def is_on_board(row: int, col: int) -> bool:
    return (0 <= row < BOARD_SIZE) and (0 <= col < BOARD_SIZE)


@dataclass(frozen=True)
class Position:
    row: int
    col: int

    @classmethod
    def from_algebraic(cls, sq: str) -> Position:
        """Algebraic notation: 'a8' gets converted to (0, 0), 'h1' to (7, 7)"""
        col = FILES.index(sq[0])
        row = BOARD_SIZE - int(sq[1])
        return cls(row, col)

    def to_algebraic(self) -> str:
        return f"{FILES[self.col]}{BOARD_SIZE - self.row}"

    def is_on_board(self) -> bool:
        return is_on_board(self.row, self.col)


def square_to_algebraic(position: Position) -> str:
    """(row=0, col=0) -> 'a8', (row=7, col=4) -> 'e1'"""
    return position.to_algebraic()


def algebraic_to_square(sq: str) -> Position:
    return Position.from_algebraic(sq)


def is_algebraic(sq: str) -> bool:
    """Valid square name: a file letter a-h followed by a rank digit 1-8"""
    return len(sq) == 2 and sq[0] in FILES and sq[1] in "12345678"
