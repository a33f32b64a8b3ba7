"""Protocol repository (the row store the game sessions live in)"""

from typing import Protocol
from uuid import UUID

from src.core.models import GameSessionModel


class GameSessionRepository(Protocol):
    """Persistence layer orchestration"""

    def get_game(self, game_id: UUID) -> GameSessionModel | None:
        """Get game by ID, if record exists."""
        ...

    def create_game(self, game: GameSessionModel) -> tuple[GameSessionModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""
        ...

    def update_game(self, game_id: UUID, game: GameSessionModel) -> GameSessionModel | None:
        """Add new info to existing record."""
        ...

    def delete_game(self, game_id: UUID) -> GameSessionModel | None:
        """Remove a game's record."""
        ...

    def list_open_games(self) -> list[tuple[UUID, GameSessionModel]]:
        """Games still waiting for a second player."""
        ...
