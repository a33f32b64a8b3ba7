"""
Runtime configuration.

Values come from `CHESS_*` environment variables, falling back on the defaults below.
"""

import os
from typing import Mapping, Optional, Self

from pydantic import BaseModel, Field, field_validator

ENV_PREFIX = "CHESS_"


class Settings(BaseModel):
    database_url: str = "sqlite:///chess.db"
    oracle_command: list[str] = Field(default_factory=lambda: ["stockfish"])
    oracle_depth: int = Field(default=15, ge=1)
    oracle_skill_level: int = 20
    oracle_timeout: float = Field(default=10.0, gt=0)
    # the two-square pawn push only checks the destination unless this is switched on
    strict_pawn_double_step: bool = False
    log_level: str = "INFO"

    @field_validator("oracle_skill_level")
    @classmethod
    def clamp_skill_level(cls, value: int) -> int:
        """UCI engines accept a skill level between 0 and 20"""
        return max(0, min(value, 20))

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        return value.upper()

    @field_validator("oracle_command", mode="before")
    @classmethod
    def split_command(cls, value: object) -> object:
        """Allow the command to be passed as a single string (as it would be in an env variable)"""
        if isinstance(value, str):
            return value.split()
        return value

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> Self:
        """
        Build settings from the environment.
        ----

        ex) CHESS_DATABASE_URL=sqlite:///:memory: sets `database_url`.
        Unknown CHESS_* variables are ignored.
        """
        environ = os.environ if environ is None else environ
        values = {
            name: environ[f"{ENV_PREFIX}{name.upper()}"]
            for name in cls.model_fields
            if f"{ENV_PREFIX}{name.upper()}" in environ
        }
        return cls.model_validate(values)
