"""Orchestration of communication from API models to the rules engine and persistence layers (and the reverse direction)."""

import logging
from typing import Callable, Optional
from uuid import UUID

from src.api.models import (
    AbandonGameRequest,
    CreateGameRequest,
    GameResponse,
    GetGameRequest,
    JoinGameRequest,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveRequest,
    MoveResponse,
    PieceResponse,
    SuggestMoveRequest,
)
from src.chess.board import Board, initial_layout
from src.chess.fen import board_to_fen, full_move_number
from src.chess.game import MoveResult, make_move
from src.chess.pieces import Piece
from src.chess.rules import evaluate_status, legal_destinations
from src.chess.square import Position
from src.core.config import Settings
from src.core.exceptions import GameStateError, NotYourTurnError, RepositoryError
from src.core.models import GameSessionModel
from src.core.shared_types import Color, SessionStatus
from src.db.repository import GameSessionRepository
from src.oracle.uci import UciOracle, suggest_move
from src.sync.codec import board_to_grid, decode_board, encode_board
from src.sync.session import captured_material

_log = logging.getLogger(__name__)

OracleFactory = Callable[[], UciOracle]


class ChessService:
    """Orchestration of layers for chess game."""

    def __init__(
        self,
        repository: GameSessionRepository,
        settings: Optional[Settings] = None,
        oracle_factory: Optional[OracleFactory] = None,
    ) -> None:
        self.repo = repository
        self.settings = settings or Settings()
        self.oracle_factory = oracle_factory or (
            lambda: UciOracle.from_settings(self.settings)
        )

    @property
    def strict_double_step(self) -> bool:
        return self.settings.strict_pawn_double_step

    # -- API logic ---
    def create_game(self, request: CreateGameRequest) -> GameResponse:
        """First player requested to create a new game. It waits for an opponent."""
        model = GameSessionModel(
            white_player=request.player_name if request.color == Color.WHITE else None,
            black_player=request.player_name if request.color == Color.BLACK else None,
            board_state=encode_board(initial_layout()),
            current_turn=Color.WHITE.value,
            game_status=SessionStatus.WAITING.value,
        )
        stored_game, game_id = self.repo.create_game(model)
        _log.info("Game %s created by %s playing %s", game_id, request.player_name, request.color)
        return self._create_game_response(game_id, stored_game)

    def join_game(self, request: JoinGameRequest) -> GameResponse:
        """Second player requested to join a game. They get whatever color is left."""
        model = self._fetch_game(request.game_id)
        if model.game_status != SessionStatus.WAITING:
            raise GameStateError(
                f"Cannot join this game. Game is not accepting new players. status: {model.game_status}"
            )
        if request.player_name in (model.white_player, model.black_player):
            raise GameStateError(f"{request.player_name} already plays in this game.")

        if model.white_player is None:
            model.white_player = request.player_name
        else:
            model.black_player = request.player_name
        model.game_status = SessionStatus.ACTIVE.value

        self._store(request.game_id, model)
        _log.info("%s joined game %s", request.player_name, request.game_id)
        return self._create_game_response(request.game_id, model)

    def get_game(self, request: GetGameRequest) -> GameResponse:
        """
        Retrieve current game state.
        ----
        Used when a client missed change notifications (manual refresh).
        """
        model = self._fetch_game(request.game_id)
        return self._create_game_response(request.game_id, model)

    def list_open_games(self) -> list[GameResponse]:
        return [
            self._create_game_response(game_id, model)
            for game_id, model in self.repo.list_open_games()
        ]

    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        """Squares the selected piece can go to (for highlighting). Empty when the square holds no piece of yours."""
        model = self._fetch_game(request.game_id)
        color = self._assert_your_turn(model, request.player_name)
        board = decode_board(model.board_state)

        square = Position.from_algebraic(request.square)
        piece = board[square.row][square.col]
        destinations: list[str] = []
        if piece is not None and piece.color == color:
            destinations = [
                to_square.to_algebraic()
                for to_square in legal_destinations(
                    board, square, strict_double_step=self.strict_double_step
                )
            ]
        return LegalMovesResponse(
            game_id=request.game_id,
            player_name=request.player_name,
            square=request.square,
            destinations=destinations,
        )

    def make_move(self, request: MoveRequest) -> MoveResponse:
        """
        Make a move attempt.
        ----

        1. game must be active, and it must be your turn
        2. if the client sent the number of moves it knows about, it must match (otherwise the client is behind)
        3. the engine validates and plays the move
        4. turn passes to the opponent, notation is added to the history, game ends on checkmate / draw
        """
        model = self._fetch_game(request.game_id)
        color = self._assert_your_turn(model, request.player_name)
        if (
            request.expected_move_count is not None
            and request.expected_move_count != len(model.move_history)
        ):
            raise GameStateError(
                f"Board is outdated: {len(model.move_history)} moves played, client knows {request.expected_move_count}."
            )

        board = decode_board(model.board_state)
        result = make_move(
            board,
            Position.from_algebraic(request.from_square),
            Position.from_algebraic(request.to_square),
            color,
            strict_double_step=self.strict_double_step,
        )
        return self._record_move(request.game_id, model, color, result)

    def suggest_move(self, request: SuggestMoveRequest) -> MoveResponse:
        """Let the move oracle play for the player whose turn it is."""
        model = self._fetch_game(request.game_id)
        color = self._assert_your_turn(model, request.player_name)
        board = decode_board(model.board_state)

        with self.oracle_factory() as oracle:
            result = suggest_move(
                board,
                color,
                oracle,
                full_move_number(len(model.move_history)),
                strict_double_step=self.strict_double_step,
            )
        return self._record_move(request.game_id, model, color, result)

    def abandon_game(self, request: AbandonGameRequest) -> GameResponse:
        """A player leaves. The opponent (if any) is declared the winner."""
        model = self._fetch_game(request.game_id)
        color = self._get_player_color(model, request.player_name)
        if model.game_status in (SessionStatus.COMPLETED, SessionStatus.ABANDONED):
            raise GameStateError(f"Game already finished. status: {model.game_status}")

        model.game_status = SessionStatus.ABANDONED.value
        model.winner = self._player_of(model, color.opponent)
        self._store(request.game_id, model)
        _log.info("%s abandoned game %s", request.player_name, request.game_id)
        return self._create_game_response(request.game_id, model)

    def delete_game(self, request: GetGameRequest) -> None:
        """Handle a request to delete a game record."""
        self.repo.delete_game(request.game_id)

    # -- Internal helpers --
    def _record_move(
        self, game_id: UUID, model: GameSessionModel, color: Color, result: MoveResult
    ) -> MoveResponse:
        """Write the engine's result into the row and persist it."""
        model.board_state = encode_board(result.new_board)
        model.current_turn = color.opponent.value
        model.move_history = [*model.move_history, result.notation]
        if result.status.is_terminal:
            model.game_status = SessionStatus.COMPLETED.value
            if result.is_checkmate:
                model.winner = self._player_of(model, color)
        self._store(game_id, model)
        _log.info("Game %s: %s played %s (%s)", game_id, color, result.notation, result.status)

        return MoveResponse(
            game=self._create_game_response(game_id, model, board=result.new_board),
            notation=result.notation,
            captured_piece=self._piece_response(result.captured_piece),
        )

    def _create_game_response(
        self, game_id: UUID, model: GameSessionModel, board: Optional[Board] = None
    ) -> GameResponse:
        """Convert info in GameSessionModel to a GameResponse (for game with given ID.)"""
        board = board if board is not None else decode_board(model.board_state)
        current_turn = Color(model.current_turn)
        return GameResponse(
            game_id=game_id,
            white_player=model.white_player,
            black_player=model.black_player,
            board=board_to_grid(board),
            fen=board_to_fen(board, current_turn, full_move_number(len(model.move_history))),
            current_turn=current_turn,
            game_status=SessionStatus(model.game_status),
            status=evaluate_status(
                board, current_turn, strict_double_step=self.strict_double_step
            ),
            move_history=list(model.move_history),
            winner=model.winner,
            captured=captured_material(board),
        )

    def _piece_response(self, piece: Optional[Piece]) -> Optional[PieceResponse]:
        if piece is None:
            return None
        return PieceResponse(type=piece.kind, color=piece.color, hasMoved=piece.has_moved)

    def _fetch_game(self, game_id: UUID) -> GameSessionModel:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.get_game(game_id)
        if game_model is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return game_model

    def _store(self, game_id: UUID, model: GameSessionModel) -> None:
        if self.repo.update_game(game_id, model) is None:
            raise RepositoryError(f"Game with {game_id=} not found.")

    def _get_player_color(self, model: GameSessionModel, player: str) -> Color:
        if player == model.white_player:
            return Color.WHITE
        if player == model.black_player:
            return Color.BLACK
        raise GameStateError(f"{player} does not play in this game.")

    def _player_of(self, model: GameSessionModel, color: Color) -> Optional[str]:
        return model.white_player if color == Color.WHITE else model.black_player

    def _assert_your_turn(self, model: GameSessionModel, player: str) -> Color:
        """Game must be in progress, and you must wait for your turn before calculating legal moves / making a move."""
        if model.game_status != SessionStatus.ACTIVE:
            raise GameStateError(f"Game is not in progress. status: {model.game_status}")
        color = self._get_player_color(model, player)
        if color != Color(model.current_turn):
            raise NotYourTurnError(
                f"It is not your turn. Waiting for {self._player_of(model, color.opponent)} to make a move first."
            )
        return color
