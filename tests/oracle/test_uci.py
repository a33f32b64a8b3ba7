"""Unit tests for /src/oracle/uci.py"""

from typing import Iterator
from unittest.mock import Mock, patch

import chess
import chess.engine
import pytest

from src.chess.board import initial_layout
from src.chess.fen import board_from_fen
from src.chess.square import Position
from src.core.config import Settings
from src.core.exceptions import OracleError
from src.core.shared_types import Color
from src.oracle.uci import UciOracle, decode_uci_move, suggest_move

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w - - 0 1"


def play_result(uci: str | None) -> chess.engine.PlayResult:
    move = chess.Move.from_uci(uci) if uci is not None else None
    return chess.engine.PlayResult(move, None)


@pytest.fixture
def engine() -> Mock:
    """Stands in for the engine process python-chess would spawn"""
    engine = Mock(spec=chess.engine.SimpleEngine)
    engine.play.return_value = play_result("e2e4")
    return engine


@pytest.fixture
def popen_uci(engine: Mock) -> Iterator[Mock]:
    with patch.object(chess.engine.SimpleEngine, "popen_uci", return_value=engine) as popen:
        yield popen


@pytest.fixture
def oracle(popen_uci: Mock) -> Iterator[UciOracle]:
    oracle = UciOracle(["fake-engine"], depth=5, timeout=2.0)
    oracle.start()
    try:
        yield oracle
    finally:
        oracle.close()


# --- DECODING ---
def test_decode_uci_move() -> None:
    assert decode_uci_move("e2e4") == (Position(6, 4), Position(4, 4))
    assert decode_uci_move("a8h1") == (Position(0, 0), Position(7, 7))


@pytest.mark.parametrize("uci", ["e7e8q", "e2", "e2e9", "z2e4", "(none)", ""])
def test_decode_uci_move_invalid(uci: str) -> None:
    with pytest.raises(OracleError):
        decode_uci_move(uci)


# --- ENGINE PROCESS ---
def test_start_configures_the_engine(popen_uci: Mock, engine: Mock) -> None:
    oracle = UciOracle(["fake-engine", "--flag"], skill_level=7, timeout=2.0)
    oracle.start()

    popen_uci.assert_called_once_with(["fake-engine", "--flag"], timeout=2.0)
    engine.configure.assert_called_once_with({"Skill Level": 7})
    assert oracle.is_running
    oracle.close()


def test_best_move(oracle: UciOracle, engine: Mock) -> None:
    engine.play.return_value = play_result("g1f3")
    assert oracle.best_move(STARTING_FEN) == "g1f3"

    board, limit = engine.play.call_args.args
    assert board.fen() == STARTING_FEN
    assert limit == chess.engine.Limit(depth=5)


def test_close_quits_the_engine(oracle: UciOracle, engine: Mock) -> None:
    oracle.close()
    engine.quit.assert_called_once_with()
    assert not oracle.is_running

    # closing twice is harmless
    oracle.close()
    engine.quit.assert_called_once_with()


def test_context_manager_closes_engine(popen_uci: Mock, engine: Mock) -> None:
    with UciOracle(["stockfish"]) as oracle:
        assert oracle.best_move(STARTING_FEN) == "e2e4"
    engine.quit.assert_called_once_with()
    assert not oracle.is_running


def test_no_move_available(oracle: UciOracle, engine: Mock) -> None:
    engine.play.return_value = play_result(None)
    with pytest.raises(OracleError, match="no move"):
        oracle.best_move("k7/8/1Q6/8/8/8/8/7K b - - 0 1")


@pytest.mark.parametrize(
    "failure",
    [
        TimeoutError(),
        chess.engine.EngineTerminatedError("engine process died unexpectedly"),
        chess.engine.EngineError("unexpected engine response"),
    ],
)
def test_engine_failure_while_thinking(oracle: UciOracle, engine: Mock, failure: Exception) -> None:
    engine.play.side_effect = failure
    with pytest.raises(OracleError):
        oracle.best_move(STARTING_FEN)


def test_unreadable_position(oracle: UciOracle, engine: Mock) -> None:
    with pytest.raises(OracleError):
        oracle.best_move("not a position")
    engine.play.assert_not_called()


@pytest.mark.parametrize(
    "failure",
    [
        FileNotFoundError("no such file"),
        TimeoutError(),
        chess.engine.EngineTerminatedError("engine process died unexpectedly"),
    ],
)
def test_engine_cannot_be_started(failure: Exception) -> None:
    oracle = UciOracle(["does-not-exist"])
    with patch.object(chess.engine.SimpleEngine, "popen_uci", side_effect=failure):
        with pytest.raises(OracleError):
            oracle.start()
    assert not oracle.is_running


def test_skill_level_rejected(popen_uci: Mock, engine: Mock) -> None:
    """An engine without the option is closed again"""
    engine.configure.side_effect = chess.engine.EngineError("No such option: 'Skill Level'")
    oracle = UciOracle(["fake-engine"])
    with pytest.raises(OracleError):
        oracle.start()
    engine.close.assert_called_once_with()
    assert not oracle.is_running


def test_close_when_engine_does_not_quit(oracle: UciOracle, engine: Mock) -> None:
    engine.quit.side_effect = TimeoutError()
    oracle.close()
    engine.close.assert_called_once_with()
    assert not oracle.is_running


def test_best_move_without_start() -> None:
    with pytest.raises(OracleError):
        UciOracle(["stockfish"]).best_move(STARTING_FEN)


def test_close_is_safe_without_start() -> None:
    UciOracle(["stockfish"]).close()


def test_skill_level_is_clamped() -> None:
    assert UciOracle(["stockfish"], skill_level=35).skill_level == 20
    assert UciOracle(["stockfish"], skill_level=-3).skill_level == 0


def test_oracle_from_settings() -> None:
    settings = Settings(oracle_command="stockfish --threads 2", oracle_depth=8, oracle_skill_level=5)
    oracle = UciOracle.from_settings(settings)
    assert oracle.command == ["stockfish", "--threads", "2"]
    assert oracle.depth == 8
    assert oracle.skill_level == 5


# --- SUGGESTING MOVES ---
def test_suggest_move_plays_the_suggestion() -> None:
    oracle = Mock(spec=UciOracle)
    oracle.best_move.return_value = "g1f3"

    result = suggest_move(initial_layout(), Color.WHITE, oracle)

    oracle.best_move.assert_called_once_with(STARTING_FEN)
    assert result.notation == "Nf3"


def test_suggest_move_passes_color_and_move_number() -> None:
    oracle = Mock(spec=UciOracle)
    oracle.best_move.return_value = "e7e5"
    suggest_move(initial_layout(), Color.BLACK, oracle, full_move=3)
    oracle.best_move.assert_called_once_with(
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR b - - 0 3"
    )


def test_suggest_move_with_bad_move_number() -> None:
    """The exported FEN is checked before the oracle sees it"""
    oracle = Mock(spec=UciOracle)
    with pytest.raises(OracleError):
        suggest_move(initial_layout(), Color.WHITE, oracle, full_move=-1)
    oracle.best_move.assert_not_called()


@pytest.mark.parametrize("uci", ["e1g1", "e2e5", "e7e8q"])
def test_suggestion_outside_the_rules(uci: str) -> None:
    """Castling, nonsense and promotion all end up as an OracleError"""
    board = board_from_fen("4k3/4P3/8/8/8/8/4P3/4K2R")
    oracle = Mock(spec=UciOracle)
    oracle.best_move.return_value = uci
    with pytest.raises(OracleError):
        suggest_move(board, Color.WHITE, oracle)
