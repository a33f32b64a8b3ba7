"""
Client for an external move-search engine speaking UCI (ex. stockfish).

The engine process is driven through python-chess (`chess.engine.SimpleEngine`). We hand it the position as a FEN
and get back a move like "e2e4". The four-character square pair is decoded with the same square naming as the board.
"""

import logging
from types import TracebackType
from typing import Optional, Self, Sequence

import chess
import chess.engine

from src.chess.board import Board
from src.chess.fen import board_to_fen, is_valid_fen
from src.chess.game import MoveResult, make_move
from src.chess.square import Position, is_algebraic
from src.core.config import Settings
from src.core.exceptions import InvalidMoveRequestError, OracleError
from src.core.shared_types import Color

_log = logging.getLogger(__name__)

MIN_SKILL_LEVEL = 0
MAX_SKILL_LEVEL = 20

ENGINE_FAILURES = (
    chess.engine.EngineError,
    chess.engine.EngineTerminatedError,
    TimeoutError,
)


def decode_uci_move(uci: str) -> tuple[Position, Position]:
    """
    "e2e4" -> (Position(6, 4), Position(4, 4))

    A promotion suffix ("e7e8q") is not understood by these rules and is rejected.
    """
    if len(uci) != 4 or not (is_algebraic(uci[:2]) and is_algebraic(uci[2:])):
        raise OracleError(f"Cannot interpret {uci!r} as a move")
    return Position.from_algebraic(uci[:2]), Position.from_algebraic(uci[2:])


class UciOracle:
    """
    Drive a UCI engine process. Use as a context manager:

        with UciOracle(["stockfish"]) as oracle:
            oracle.best_move(fen)
    """

    def __init__(
        self,
        command: Sequence[str],
        depth: int = 15,
        skill_level: int = MAX_SKILL_LEVEL,
        timeout: float = 10.0,
    ) -> None:
        self.command = list(command)
        self.depth = depth
        self.skill_level = max(MIN_SKILL_LEVEL, min(skill_level, MAX_SKILL_LEVEL))
        self.timeout = timeout
        self._engine: Optional[chess.engine.SimpleEngine] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> Self:
        return cls(
            command=settings.oracle_command,
            depth=settings.oracle_depth,
            skill_level=settings.oracle_skill_level,
            timeout=settings.oracle_timeout,
        )

    def __enter__(self) -> Self:
        self.start()
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        self.close()

    @property
    def is_running(self) -> bool:
        return self._engine is not None

    def start(self) -> None:
        """Spawn the engine, wait for the UCI handshake and set the skill level"""
        _log.info("Starting move oracle: %s", " ".join(self.command))
        try:
            engine = chess.engine.SimpleEngine.popen_uci(self.command, timeout=self.timeout)
        except OSError as exc:
            raise OracleError(f"Cannot start move oracle {self.command!r}: {exc}") from exc
        except ENGINE_FAILURES as exc:
            raise OracleError(f"Move oracle failed to start: {exc!r}") from exc

        try:
            engine.configure({"Skill Level": self.skill_level})
        except ENGINE_FAILURES as exc:
            engine.close()
            raise OracleError(f"Move oracle rejected skill level {self.skill_level}: {exc!r}") from exc

        self._engine = engine
        _log.debug("Move oracle ready")

    def best_move(self, fen: str) -> str:
        """Ask for the best move in the position. Returns the UCI move string, ex. "e2e4"."""
        if self._engine is None:
            raise OracleError("Move oracle is not running")

        try:
            board = chess.Board(fen)
        except ValueError as exc:
            raise OracleError(f"Move oracle cannot read position {fen!r}: {exc}") from exc

        try:
            result = self._engine.play(board, chess.engine.Limit(depth=self.depth))
        except ENGINE_FAILURES as exc:
            raise OracleError(f"Move oracle failed on {fen!r}: {exc!r}") from exc

        if result.move is None:
            raise OracleError(f"Move oracle found no move for {fen!r}")
        move = result.move.uci()
        _log.info("Move oracle suggests %s", move)
        return move

    def close(self) -> None:
        if self._engine is None:
            return
        engine, self._engine = self._engine, None
        try:
            engine.quit()
        except ENGINE_FAILURES:
            _log.warning("Move oracle did not quit cleanly, closing it")
            engine.close()


def suggest_move(
    board: Board,
    color: Color,
    oracle: UciOracle,
    full_move: int = 1,
    *,
    strict_double_step: bool = False,
) -> MoveResult:
    """
    Let the oracle pick the move for `color` and play it.
    ----

    The suggestion goes through the same validation as a human move. Engines know about castling,
    promotion and en passant, these rules do not: such a suggestion is reported as an OracleError.
    """
    fen = board_to_fen(board, color, full_move)
    if not is_valid_fen(fen):
        raise OracleError(f"Board cannot be exported for the move oracle: {fen!r}")
    from_square, to_square = decode_uci_move(oracle.best_move(fen))
    try:
        return make_move(
            board, from_square, to_square, color, strict_double_step=strict_double_step
        )
    except InvalidMoveRequestError as exc:
        raise OracleError(f"Move oracle suggested a move these rules do not allow: {exc}") from exc
