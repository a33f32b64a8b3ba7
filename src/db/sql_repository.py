"""Implementation of (GameSession)Repository using SQLAlchemy"""

import logging
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.core.models import GameSessionModel
from src.core.shared_types import SessionStatus
from src.db.schema import DBGameSession

_log = logging.getLogger(__name__)


class SQLGameSessionRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_game(self, game_id: UUID) -> GameSessionModel | None:
        """Get game by ID, if record exists."""
        game_db = self._fetch_game(game_id)
        if game_db:
            return self._to_model(game_db)
        return None

    def create_game(self, game: GameSessionModel) -> tuple[GameSessionModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""

        new_id = uuid4()
        game_db = DBGameSession(id=new_id)
        self._copy_into(game_db, game)
        self.db.add(game_db)
        self.db.commit()
        self.db.refresh(game_db)
        _log.debug("Stored new game session %s", new_id)
        return self._to_model(game_db), new_id

    def update_game(self, game_id: UUID, game: GameSessionModel) -> GameSessionModel | None:
        """Add new info to existing record."""
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        self._copy_into(game_db, game)
        self.db.commit()
        self.db.refresh(game_db)
        return self._to_model(game_db)

    def delete_game(self, game_id: UUID) -> GameSessionModel | None:
        """Remove a game's record."""
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        game_model = self._to_model(game_db)
        self.db.delete(game_db)
        self.db.commit()
        return game_model

    def list_open_games(self) -> list[tuple[UUID, GameSessionModel]]:
        """Games still waiting for a second player, oldest first."""
        query = (
            select(DBGameSession)
            .where(DBGameSession.game_status == SessionStatus.WAITING.value)
            .order_by(DBGameSession.created_at)
        )
        return [(game_db.id, self._to_model(game_db)) for game_db in self.db.scalars(query)]

    def _fetch_game(self, game_id: UUID) -> DBGameSession | None:
        query = select(DBGameSession).where(DBGameSession.id == game_id)
        return self.db.scalar(query)

    def _copy_into(self, game_db: DBGameSession, game: GameSessionModel) -> None:
        game_db.white_player = game.white_player
        game_db.black_player = game.black_player
        game_db.board_state = game.board_state
        game_db.current_turn = game.current_turn
        game_db.game_status = game.game_status
        game_db.winner = game.winner
        # new list, so SQLAlchemy notices the change of the JSON column
        game_db.move_history = list(game.move_history)

    def _to_model(self, game_db: DBGameSession) -> GameSessionModel:
        """Convert SQLAlchemy model to data transfer model."""
        return GameSessionModel(
            white_player=game_db.white_player,
            black_player=game_db.black_player,
            board_state=game_db.board_state,
            current_turn=game_db.current_turn,
            game_status=game_db.game_status,
            move_history=list(game_db.move_history),
            winner=game_db.winner,
        )
