"""Generate database sessions"""

from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.core.config import Settings
from src.db.schema import Base


def build_session_factory(database_url: str, echo: bool = False) -> sessionmaker[Session]:
    """Create the engine for the given URL, make sure all tables exist, and return a session factory"""
    engine = create_engine(database_url, echo=echo)
    # Ensure all tables are created
    Base.metadata.create_all(bind=engine)
    return sessionmaker(bind=engine)


def session_factory_from_settings(settings: Settings) -> sessionmaker[Session]:
    return build_session_factory(settings.database_url)


def get_db(session_factory: sessionmaker[Session]) -> Iterator[Session]:
    db = session_factory()
    try:
        yield db
    finally:
        db.close()
