"""
Board <-> JSON for the row store.

Stored shape (one list per row, row 0 = 8th rank):
[[{"type": "rook", "color": "black", "hasMoved": false}, null, ...], ...]

The store hands the board back either as the JSON text we wrote, or already parsed into lists/dicts
(depending on the column type and the client). Both are modelled explicitly and decoded by one function.
"""

import json
from dataclasses import dataclass
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from src.chess.board import Board
from src.chess.pieces import Piece
from src.chess.square import BOARD_SIZE
from src.core.exceptions import BoardDecodeError
from src.core.shared_types import Color, PieceType


class PieceRecord(BaseModel):
    """A piece as stored in the row. `hasMoved` may be missing in older rows."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    type: PieceType
    color: Color
    has_moved: bool = Field(default=False, alias="hasMoved")

    @classmethod
    def from_piece(cls, piece: Piece) -> "PieceRecord":
        return cls(type=piece.kind, color=piece.color, has_moved=piece.has_moved)

    def to_piece(self) -> Piece:
        return Piece(self.type, self.color, self.has_moved)


GridRecord = list[list[Optional[PieceRecord]]]
_GRID_ADAPTER: TypeAdapter[GridRecord] = TypeAdapter(GridRecord)


@dataclass(frozen=True)
class EncodedBoard:
    """The board as JSON text"""

    text: str


@dataclass(frozen=True)
class StructuredBoard:
    """The board as already-parsed JSON (lists of dicts / None)"""

    grid: list[list[Any]]


StoredBoard = EncodedBoard | StructuredBoard


def as_stored_board(raw: Any) -> StoredBoard:
    """Tag a raw column value with the variant it represents."""
    if isinstance(raw, (EncodedBoard, StructuredBoard)):
        return raw
    if isinstance(raw, str):
        return EncodedBoard(raw)
    if isinstance(raw, list):
        return StructuredBoard(raw)
    raise BoardDecodeError(f"Unsupported board state of type {type(raw).__name__}")


def decode_board(raw: StoredBoard | str | list[list[Any]]) -> Board:
    """
    Turn a stored board into a Board.
    ----

    Raises BoardDecodeError when the text is not JSON, the grid is not 8x8, or a square holds something that is not a piece.
    """
    match as_stored_board(raw):
        case EncodedBoard(text=text):
            try:
                grid = json.loads(text)
            except json.JSONDecodeError as exc:
                raise BoardDecodeError(f"Board state is not valid JSON: {exc}") from exc
            if not isinstance(grid, list):
                raise BoardDecodeError("Board state JSON must be a list of rows")
            return _grid_to_board(grid)
        case StructuredBoard(grid=grid):
            return _grid_to_board(grid)


def _grid_to_board(grid: list[list[Any]]) -> Board:
    try:
        records = _GRID_ADAPTER.validate_python(grid)
    except ValidationError as exc:
        raise BoardDecodeError(f"Board state has invalid squares: {exc}") from exc

    if len(records) != BOARD_SIZE or any(len(row) != BOARD_SIZE for row in records):
        raise BoardDecodeError(f"Board state must be {BOARD_SIZE}x{BOARD_SIZE}")

    return [
        [record.to_piece() if record is not None else None for record in row]
        for row in records
    ]


def board_to_grid(board: Board) -> list[list[Optional[dict[str, Any]]]]:
    """Structured (JSON compatible) form of the board, using the stored field names."""
    return [
        [
            PieceRecord.from_piece(piece).model_dump(mode="json", by_alias=True)
            if piece is not None
            else None
            for piece in row
        ]
        for row in board
    ]


def encode_board(board: Board) -> str:
    return json.dumps(board_to_grid(board))
