"""Unit tests for /src/core/config.py and /src/core/log_setup.py"""

import logging

import pytest
from pydantic import ValidationError

from src.core.config import Settings
from src.core.log_setup import configure_logging


def test_defaults() -> None:
    settings = Settings()
    assert settings.database_url == "sqlite:///chess.db"
    assert settings.oracle_command == ["stockfish"]
    assert settings.oracle_depth == 15
    assert settings.oracle_skill_level == 20
    assert not settings.strict_pawn_double_step
    assert settings.log_level == "INFO"


def test_from_env() -> None:
    environ = {
        "CHESS_DATABASE_URL": "sqlite:///:memory:",
        "CHESS_ORACLE_COMMAND": "/usr/games/stockfish --threads 2",
        "CHESS_ORACLE_DEPTH": "8",
        "CHESS_STRICT_PAWN_DOUBLE_STEP": "true",
        "CHESS_LOG_LEVEL": "debug",
        "CHESS_UNKNOWN": "ignored",
        "DATABASE_URL": "no prefix, not ours",
    }
    settings = Settings.from_env(environ)
    assert settings.database_url == "sqlite:///:memory:"
    assert settings.oracle_command == ["/usr/games/stockfish", "--threads", "2"]
    assert settings.oracle_depth == 8
    assert settings.strict_pawn_double_step
    assert settings.log_level == "DEBUG"


def test_from_env_reads_os_environ(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CHESS_ORACLE_TIMEOUT", "2.5")
    assert Settings.from_env().oracle_timeout == 2.5


@pytest.mark.parametrize("level, expected", [(-5, 0), (0, 0), (12, 12), (20, 20), (99, 20)])
def test_skill_level_is_clamped(level: int, expected: int) -> None:
    assert Settings(oracle_skill_level=level).oracle_skill_level == expected


@pytest.mark.parametrize(
    "environ",
    [
        {"CHESS_ORACLE_DEPTH": "0"},
        {"CHESS_ORACLE_DEPTH": "deep"},
        {"CHESS_ORACLE_TIMEOUT": "-1"},
    ],
)
def test_invalid_values(environ: dict[str, str]) -> None:
    with pytest.raises(ValidationError):
        Settings.from_env(environ)


def test_configure_logging_quiets_sqlalchemy() -> None:
    configure_logging("DEBUG")
    assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
