"""Database tables / schema"""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy import JSON, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from src.core.shared_types import Color, SessionStatus


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBGameSession(Base):
    """
    One multiplayer game.
    NOTE: board_state is an opaque JSON text blob. The database never looks inside it.
    """

    __tablename__ = "game_sessions"
    id: Mapped[UUID] = mapped_column(primary_key=True)
    white_player: Mapped[Optional[str]]
    black_player: Mapped[Optional[str]]
    board_state: Mapped[str] = mapped_column(Text)
    current_turn: Mapped[str] = mapped_column(default=Color.WHITE.value)
    game_status: Mapped[str] = mapped_column(default=SessionStatus.WAITING.value)
    winner: Mapped[Optional[str]]
    move_history: Mapped[list[str]] = mapped_column(JSON, default=list)
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now)
