"""Wire up a ChessService from configuration (database, logging, move oracle)."""

from typing import Optional

from sqlalchemy.orm import Session

from src.core.config import Settings
from src.core.log_setup import configure_logging
from src.db.database import session_factory_from_settings
from src.db.sql_repository import SQLGameSessionRepository
from src.services.chess_service import ChessService


def build_chess_service(settings: Optional[Settings] = None) -> tuple[ChessService, Session]:
    """
    Build the service on top of the SQL repository.
    Returns the db session as well: the caller owns it and must close it.
    """
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)
    db = session_factory_from_settings(settings)()
    return ChessService(SQLGameSessionRepository(db), settings), db
