"""Orchestration of communication from the presentation layer to the engine (and the reverse direction)."""

import logging
import random
from typing import Optional
from uuid import UUID

from src.api.models import (
    CreateGameRequest,
    DeleteGameRequest,
    GameResponse,
    GetGameRequest,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveRequest,
    MoveResponse,
    ResetGameRequest,
)
from src.core.config import GameSettings
from src.core.exceptions import RepositoryError
from src.core.shared_types import Color
from src.db.repository import GameRepository
from src.engine.alliance import Alliance
from src.engine.fen import board_to_fen
from src.engine.game import Game
from src.engine.pieces import PieceType

logger = logging.getLogger(__name__)


class ChessService:
    """Orchestration of layers for chess games."""

    def __init__(self, repository: GameRepository, settings: Optional[GameSettings] = None) -> None:
        self.repo = repository
        self.settings = settings or GameSettings()

    def create_game(self, request: CreateGameRequest) -> GameResponse:
        """Start a new game and store it."""
        seed = request.seed if request.seed is not None else self.settings.seed
        game = Game.new_game(request.variant, self.settings, random.Random(seed))
        game_id = self.repo.create_game(game)
        logger.info("Created game %s", game_id)
        return self._create_game_response(game_id, game)

    def get_game(self, request: GetGameRequest) -> GameResponse:
        """
        Retrieve current game state.
        ----
        Used by the presentation layer to redraw the board, the history panel, etc.
        """
        game = self._fetch_game(request.game_id)
        return self._create_game_response(request.game_id, game)

    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        """Legal moves of the player to move, in UCI notation (sorted, so the order is stable)."""
        game = self._fetch_game(request.game_id)
        return LegalMovesResponse(
            game_id=request.game_id,
            color=game.board.to_move.to_color(),
            legal_moves=sorted(move.to_uci() for move in game.legal_moves()),
        )

    def make_move(self, request: MoveRequest) -> MoveResponse:
        """
        Make a move attempt.
        An illegal move is not an error here: the response says it was not accepted and the game is unchanged.
        """
        game = self._fetch_game(request.game_id)
        promote_to = PieceType.from_shared(request.promote_to) if request.promote_to else None

        accepted = game.try_move(request.from_square, request.to_square, promote_to)
        if accepted:
            self.repo.update_game(request.game_id, game)
        return MoveResponse(
            accepted=accepted, game=self._create_game_response(request.game_id, game)
        )

    def reset_game(self, request: ResetGameRequest) -> GameResponse:
        """Start the game over (optionally with another variant), discarding its move log."""
        game = self._fetch_game(request.game_id)
        game.reset(request.variant)
        self.repo.update_game(request.game_id, game)
        return self._create_game_response(request.game_id, game)

    def delete_game(self, request: DeleteGameRequest) -> None:
        """Handle a request to delete a Game record."""
        if self.repo.delete_game(request.game_id) is None:
            raise RepositoryError(f"Game with game_id={request.game_id} not found.")

    # -- Internal helpers --
    def _create_game_response(self, game_id: UUID, game: Game) -> GameResponse:
        status = game.game_status()
        return GameResponse(
            game_id=game_id,
            variant=game.variant,
            board_fen=board_to_fen(game.board),
            to_move=game.board.to_move.to_color(),
            status=status.status,
            in_check=_color(status.in_check),
            winner=_color(game.winner),
            move_history=[str(move) for move in game.move_log],
        )

    def _fetch_game(self, game_id: UUID) -> Game:
        """Attempt to find the game in the repository and raise error if it fails."""
        game = self.repo.get_game(game_id)
        if game is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return game


def _color(alliance: Optional[Alliance]) -> Optional[Color]:
    return alliance.to_color() if alliance is not None else None
