"""Requests and Response models"""

from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from src.chess.square import is_algebraic
from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color, GameStatus, PieceType, SessionStatus
from src.sync.codec import StoredBoard, as_stored_board
from src.sync.session import SessionUpdate

PlayerName = str


def _validate_square_name(value: str) -> str:
    if not is_algebraic(value):
        raise InvalidRequestError(f"Cannot interpret {value!r} as a valid square name.")
    return value


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    player_name: str
    color: Color = Color.WHITE


class JoinGameRequest(BaseModel):
    game_id: UUID
    player_name: str


class GetGameRequest(BaseModel):
    game_id: UUID


class LegalMovesRequest(BaseModel):
    game_id: UUID
    player_name: str
    square: str

    @field_validator("square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        return _validate_square_name(value)


class MoveRequest(BaseModel):
    game_id: UUID
    player_name: str
    from_square: str
    to_square: str
    # number of moves the client has seen. Used as a turn token to reject moves made on an outdated board.
    expected_move_count: Optional[int] = None

    @field_validator("from_square", "to_square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        return _validate_square_name(value)


class SuggestMoveRequest(BaseModel):
    game_id: UUID
    player_name: str


class AbandonGameRequest(BaseModel):
    game_id: UUID
    player_name: str


# --- CHANGE NOTIFICATIONS ---
class SessionRowPayload(BaseModel):
    """
    A game_sessions row as pushed by the store's change notifications.

    NOTE: board_state arrives either as JSON text or already parsed. It is only tagged here, decoding happens in the sync layer.
    """

    board_state: Any
    current_turn: Color
    game_status: SessionStatus
    move_history: Optional[list[str]] = None
    white_player: Optional[PlayerName] = None
    black_player: Optional[PlayerName] = None
    winner: Optional[PlayerName] = None

    @field_validator("board_state")
    @classmethod
    def tag_board_state(cls, value: Any) -> StoredBoard:
        return as_stored_board(value)

    def to_update(self) -> SessionUpdate:
        winner_color: Optional[Color] = None
        if self.winner is not None and self.winner == self.white_player:
            winner_color = Color.WHITE
        elif self.winner is not None and self.winner == self.black_player:
            winner_color = Color.BLACK
        return SessionUpdate(
            board_state=self.board_state,
            current_turn=self.current_turn,
            game_status=self.game_status,
            move_history=tuple(self.move_history or ()),
            winner=winner_color,
        )


# --- RESPONSE MODELS ---
class PieceResponse(BaseModel):
    type: PieceType
    color: Color
    hasMoved: bool = False


class GameResponse(BaseModel):
    game_id: UUID
    white_player: Optional[PlayerName]
    black_player: Optional[PlayerName]
    board: list[list[Optional[PieceResponse]]]
    fen: str
    current_turn: Color
    game_status: SessionStatus
    status: GameStatus
    move_history: list[str]
    winner: Optional[PlayerName] = None
    captured: dict[Color, list[PieceType]] = Field(default_factory=dict)


class LegalMovesResponse(BaseModel):
    game_id: UUID
    player_name: PlayerName
    square: str
    destinations: list[str]


class MoveResponse(BaseModel):
    game: GameResponse
    notation: str
    captured_piece: Optional[PieceResponse] = None
