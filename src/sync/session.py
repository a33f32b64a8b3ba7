"""
Client side reconciliation of a multiplayer game session.

The row store pushes change notifications that may arrive late, twice, or out of order.
One state machine takes care of all of it:

    LOBBY -> WAITING -> ACTIVE -> TERMINAL

* LOBBY: no session yet
* WAITING: session created, waiting for the opponent to join
* ACTIVE: both players present, moves are being played
* TERMINAL: checkmate / draw / abandoned. Nothing is accepted anymore.

The number of moves in the history acts as a version counter: an update that knows fewer moves than we do is stale.
"""

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Optional

from src.chess.board import Board, initial_layout
from src.chess.game import MoveResult, make_move
from src.chess.rules import count_pieces, evaluate_status
from src.chess.square import Position
from src.core.exceptions import BoardDecodeError, GameStateError, NotYourTurnError
from src.core.shared_types import Color, GameStatus, PieceType, SessionStatus
from src.sync.codec import EncodedBoard, StoredBoard, decode_board, encode_board

_log = logging.getLogger(__name__)


class SessionPhase(StrEnum):
    LOBBY = "lobby"
    WAITING = "waiting"
    ACTIVE = "active"
    TERMINAL = "terminal"


TERMINAL_SESSION_STATUSES = (SessionStatus.COMPLETED, SessionStatus.ABANDONED)


@dataclass(frozen=True)
class SessionUpdate:
    """One version of the session row, as sent to / received from the store."""

    board_state: StoredBoard | str | list[list[Any]]
    current_turn: Color
    game_status: SessionStatus
    move_history: tuple[str, ...] = ()
    winner: Optional[Color] = None

    @property
    def move_count(self) -> int:
        return len(self.move_history)


def captured_material(board: Board) -> dict[Color, list[PieceType]]:
    """
    Pieces of each color no longer on the board, compared to the starting layout.
    Derived from the board itself, so it stays right no matter which updates were skipped.
    """
    missing = count_pieces(initial_layout()) - count_pieces(board)
    captured: dict[Color, list[PieceType]] = {color: [] for color in Color}
    for (color, kind), amount in sorted(missing.items()):
        captured[color].extend([kind] * amount)
    return captured


@dataclass
class SessionSync:
    """Local view on one game session. Only ever changed through the methods below."""

    player_color: Optional[Color] = None
    strict_double_step: bool = False
    phase: SessionPhase = SessionPhase.LOBBY
    board: Board = field(default_factory=initial_layout)
    current_turn: Color = Color.WHITE
    move_history: list[str] = field(default_factory=list)
    status: GameStatus = GameStatus.PLAYING
    winner: Optional[Color] = None

    @property
    def last_move_count(self) -> int:
        return len(self.move_history)

    @property
    def is_my_turn(self) -> bool:
        return self.phase == SessionPhase.ACTIVE and self.current_turn == self.player_color

    # -- TRANSITIONS ---
    def create(self, player_color: Color = Color.WHITE) -> SessionUpdate:
        """Open a new session. The creator waits in the lobby for an opponent."""
        self._assert_phase(SessionPhase.LOBBY)
        self.player_color = player_color
        self._reset_game()
        self._change_phase(SessionPhase.WAITING)
        return self.snapshot(SessionStatus.WAITING)

    def join(self, player_color: Color, update: SessionUpdate) -> None:
        """Join someone else's session (we take the color they left open)."""
        self._assert_phase(SessionPhase.LOBBY)
        self._adopt(update)
        self.player_color = player_color
        self._change_phase(
            SessionPhase.TERMINAL if self._is_terminal(update) else SessionPhase.ACTIVE
        )

    def opponent_joined(self) -> None:
        self._assert_phase(SessionPhase.WAITING)
        self._change_phase(SessionPhase.ACTIVE)

    def abandon(self) -> SessionUpdate:
        if self.phase == SessionPhase.LOBBY:
            raise GameStateError("No session to abandon.")
        self._change_phase(SessionPhase.TERMINAL)
        return self.snapshot(SessionStatus.ABANDONED)

    def captured(self) -> dict[Color, list[PieceType]]:
        return captured_material(self.board)

    def receive(self, update: SessionUpdate) -> bool:
        """
        Reconcile a change notification with the local state.
        ----

        Returns True if the update was applied, False if it was dropped.

        * LOBBY / TERMINAL: nothing to reconcile with, dropped
        * fewer moves than known: stale, dropped
        * same number of moves: only accepted if it moves the phase along (opponent joined, game ended)
        * more moves than known: accepted, the row holds the full board so skipped versions do not matter
        """
        if self.phase in (SessionPhase.LOBBY, SessionPhase.TERMINAL):
            _log.debug("Dropping update in phase %s", self.phase)
            return False

        if update.move_count < self.last_move_count:
            _log.info(
                "Dropping stale update: %d moves, already at %d",
                update.move_count,
                self.last_move_count,
            )
            return False

        if update.move_count == self.last_move_count and not self._advances_phase(update):
            _log.debug("Dropping duplicate update at %d moves", update.move_count)
            return False

        try:
            self._adopt(update)
        except BoardDecodeError:
            _log.warning("Dropping update with unreadable board at %d moves", update.move_count)
            return False

        if self._is_terminal(update):
            self._change_phase(SessionPhase.TERMINAL)
        elif self.phase == SessionPhase.WAITING and (
            update.game_status == SessionStatus.ACTIVE or update.move_count > 0
        ):
            self._change_phase(SessionPhase.ACTIVE)
        return True

    def play(self, from_square: Position, to_square: Position) -> tuple[MoveResult, SessionUpdate]:
        """
        Play a move for the local player.
        ----

        Raises GameStateError when no game is running, NotYourTurnError when the opponent is to move,
        and InvalidMoveRequestError (from the engine) when the move is illegal.
        Returns the engine's result and the update to push to the store.
        """
        self._assert_phase(SessionPhase.ACTIVE)
        if self.current_turn != self.player_color:
            raise NotYourTurnError(
                f"It is not your turn. Waiting for {self.current_turn} to make a move first."
            )

        result = make_move(
            self.board,
            from_square,
            to_square,
            self.current_turn,
            strict_double_step=self.strict_double_step,
        )
        mover = self.current_turn
        self.board = result.new_board
        self.move_history.append(result.notation)
        self.current_turn = mover.opponent
        self.status = result.status
        _log.info("%s played %s (%s)", mover, result.notation, result.status)

        session_status = SessionStatus.ACTIVE
        if result.status.is_terminal:
            session_status = SessionStatus.COMPLETED
            self.winner = mover if result.status == GameStatus.CHECKMATE else None
            self._change_phase(SessionPhase.TERMINAL)
        return result, self.snapshot(session_status)

    def snapshot(self, game_status: SessionStatus) -> SessionUpdate:
        return SessionUpdate(
            board_state=EncodedBoard(encode_board(self.board)),
            current_turn=self.current_turn,
            game_status=game_status,
            move_history=tuple(self.move_history),
            winner=self.winner,
        )

    # -- PRIVATE HELPERS ---
    def _reset_game(self) -> None:
        self.board = initial_layout()
        self.current_turn = Color.WHITE
        self.move_history = []
        self.status = GameStatus.PLAYING
        self.winner = None

    def _adopt(self, update: SessionUpdate) -> None:
        """Take over the state of the update. Board is decoded first so a bad update leaves us untouched."""
        board = decode_board(update.board_state)
        self.board = board
        self.current_turn = update.current_turn
        self.move_history = list(update.move_history)
        self.winner = update.winner
        # status is always recomputed from the board, never taken from the row
        self.status = evaluate_status(
            board, update.current_turn, strict_double_step=self.strict_double_step
        )

    def _advances_phase(self, update: SessionUpdate) -> bool:
        if update.game_status in TERMINAL_SESSION_STATUSES:
            return True
        return self.phase == SessionPhase.WAITING and update.game_status == SessionStatus.ACTIVE

    def _is_terminal(self, update: SessionUpdate) -> bool:
        """Call after adopting the update: either the row says so, or the board shows mate / a draw."""
        return update.game_status in TERMINAL_SESSION_STATUSES or self.status.is_terminal

    def _assert_phase(self, expected: SessionPhase) -> None:
        if self.phase != expected:
            raise GameStateError(f"Session is {self.phase}, expected {expected}.")

    def _change_phase(self, new_phase: SessionPhase) -> None:
        _log.debug("Session phase %s -> %s", self.phase, new_phase)
        self.phase = new_phase

