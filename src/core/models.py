"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Hence, both the API layer (higher) and db layer (lower) will use the model defined here to send to/receive from the Service.
(Decouples the data model specific to the DB layer or API layer from the information needed to send across boundaries)

NOTE: The board is kept as the JSON text the row store holds. Only the Service decodes it into a Board.
"""

from dataclasses import dataclass, field
from typing import Optional

# Type aliases to make GameSessionModel easier to read
PieceColor = str
PlayerName = str


@dataclass
class GameSessionModel:
    """Transport-safe representation of a game session used between API, Service and DB layers."""

    white_player: Optional[PlayerName]
    black_player: Optional[PlayerName]
    board_state: str
    current_turn: PieceColor
    game_status: str
    move_history: list[str] = field(default_factory=list)
    winner: Optional[PlayerName] = None
