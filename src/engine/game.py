"""
The Game class is the entrypoint into the engine for the service layer (or any other caller).
It is responsible for orchestrating everything required to play a turn:
validating the proposed move against the legal moves, replacing the board, recording the move and updating the status.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Optional, Self

from src.core.config import GameSettings
from src.core.exceptions import (
    GameStateError,
    IllegalMoveError,
    PromotionChoiceRequiredError,
)
from src.core.shared_types import Status, Variant
from src.engine.alliance import Alliance
from src.engine.board import Board
from src.engine.location import Location
from src.engine.moves import NULL_MOVE, Move, MoveKind
from src.engine.pieces import PieceType
from src.engine.player import Player, PlayerStatus
from src.engine.setup import initial_board

logger = logging.getLogger(__name__)

PLAYER_TO_GAME_STATUS: dict[PlayerStatus, Status] = {
    PlayerStatus.NORMAL: Status.IN_PROGRESS,
    PlayerStatus.CHECK: Status.IN_PROGRESS,
    PlayerStatus.CHECKMATE: Status.CHECKMATE,
    PlayerStatus.STALEMATE: Status.STALEMATE,
}


@dataclass(frozen=True)
class GameStatus:
    """Where the game stands, plus the alliance that is in check (if any)."""

    status: Status
    in_check: Optional[Alliance] = None


@dataclass
class Game:
    board: Board
    variant: Variant
    settings: GameSettings = field(default_factory=GameSettings)
    moves: list[Move] = field(default_factory=list)
    boards: list[Board] = field(default_factory=list)
    status: Status = Status.IN_PROGRESS

    def __post_init__(self) -> None:
        if not self.boards:
            self.boards.append(self.board)
        self._update_game_status()

    @classmethod
    def new_game(
        cls,
        variant: Optional[Variant] = None,
        settings: Optional[GameSettings] = None,
        rng: Optional[random.Random] = None,
    ) -> Self:
        """Start a game from the initial position of the variant (the configured default if none given)."""
        settings = settings or GameSettings()
        variant = Variant(variant or settings.default_variant)
        board = initial_board(variant, rng or random.Random(settings.seed))
        logger.info("New %s game\n%s", variant, board)
        return cls(board=board, variant=variant, settings=settings)

    @classmethod
    def from_board(cls, board: Board, settings: Optional[GameSettings] = None) -> Self:
        """Continue playing from an arbitrary position."""
        return cls(board=board, variant=board.variant, settings=settings or GameSettings())

    def reset(self, variant: Optional[Variant] = None, rng: Optional[random.Random] = None) -> None:
        """Throw away the current game (and its move log) and start over, possibly with another variant."""
        fresh = self.new_game(variant or self.variant, self.settings, rng)
        self.board = fresh.board
        self.variant = fresh.variant
        self.moves = []
        self.boards = [fresh.board]
        self.status = fresh.status

    # --- READ ONLY VIEWS ---
    @property
    def current_player(self) -> Player:
        return Player.to_move(self.board)

    @property
    def move_log(self) -> tuple[Move, ...]:
        return tuple(self.moves)

    @property
    def history(self) -> tuple[Board, ...]:
        """Every board of the game, starting with the initial one."""
        return tuple(self.boards)

    @property
    def winner(self) -> Optional[Alliance]:
        """
        Only defined for checkmate: the player who is to move just got mated, so the opponent must be the winner
        """
        if self.status != Status.CHECKMATE:
            return None
        return self.board.to_move.opponent

    def legal_moves(self) -> frozenset[Move]:
        return self.current_player.legal_moves

    def game_status(self) -> GameStatus:
        player = self.current_player
        return GameStatus(self.status, player.alliance if player.is_in_check else None)

    def requires_promotion(self, source: Location | str, destination: Location | str) -> bool:
        """Lets a caller find out that it needs to ask which piece to promote to, before submitting the move."""
        source, destination = _to_location(source), _to_location(destination)
        return any(
            move.kind is MoveKind.PROMOTION
            for move in self._candidates(source, destination)
        )

    # --- MAKING MOVES ---
    def make_move(
        self,
        source: Location | str,
        destination: Location | str,
        promote_to: Optional[PieceType] = None,
    ) -> Move:
        """
        Attempt to make a move
        -----

        1. make sure the game is (still) in progress
        2. find the legal move matching (source, destination[, promotion])
        3. replace the board with the one the move leads to
        4. update the (history of) moves
        5. update game status (if needed)

        Either all of this happens, or (when an exception is raised) none of it.
        """
        if self.status != Status.IN_PROGRESS:
            raise GameStateError(f"Game is not in progress. status: {self.status}")

        mover = self.board.to_move
        move = self._find_move(_to_location(source), _to_location(destination), promote_to)
        new_board = move.execute()

        self.board = new_board
        self.boards.append(new_board)
        self.moves.append(move)
        logger.debug("%s played %s (%s)", mover, move, move.to_uci())

        self._update_game_status()
        return move

    def try_move(
        self,
        source: Location | str,
        destination: Location | str,
        promote_to: Optional[PieceType] = None,
    ) -> bool:
        """
        Boolean flavour of make_move(): False (and nothing changes) if the move cannot be made.
        A missing promotion choice is not a "no": PromotionChoiceRequiredError still reaches the caller.
        """
        try:
            self.make_move(source, destination, promote_to)
        except (IllegalMoveError, GameStateError) as exc:
            logger.debug("Move %s -> %s rejected: %s", source, destination, exc)
            return False
        return True

    # -- PRIVATE HELPERS ---
    def _candidates(self, source: Location, destination: Location) -> list[Move]:
        """
        Legal moves from source to destination. If there are none, a king move onto its own castling rook
        is read as castling (the way castling gets entered in the random back rank variant).
        When a plain king step and castling land on the same square, the plain step wins.
        """
        legal_moves = self.legal_moves()
        candidates = [
            move
            for move in legal_moves
            if move.source == source and move.destination == destination
        ]
        if not candidates:
            return [
                move
                for move in legal_moves
                if move.is_castling
                and move.source == source
                and move.castled_rook is not None
                and move.castled_rook.location == destination
            ]
        if any(not move.is_castling for move in candidates):
            return [move for move in candidates if not move.is_castling]
        return candidates

    def _find_move(
        self, source: Location, destination: Location, promote_to: Optional[PieceType]
    ) -> Move:
        candidates = self._candidates(source, destination)
        if not candidates:
            raise IllegalMoveError(f"Move not allowed: {source}{destination}")

        promotions = [move for move in candidates if move.kind is MoveKind.PROMOTION]
        if not promotions:
            if promote_to is not None:
                raise IllegalMoveError(
                    f"Move not allowed: {source}{destination} does not promote a pawn."
                )
            return candidates[0]

        choice = promote_to
        if choice is None:
            if not self.settings.auto_promote_to_queen:
                raise PromotionChoiceRequiredError(
                    f"Pawn reaches the last rank with {source}{destination}: choose a piece to promote to."
                )
            choice = PieceType.QUEEN

        move = next((move for move in promotions if move.promotion is choice), NULL_MOVE)
        if move is NULL_MOVE:
            raise IllegalMoveError(f"Cannot promote to {choice.name.lower()}.")
        return move

    def _update_game_status(self) -> None:
        """Checks if the game has ended (the player to move is mated or stalemated) and changes status accordingly."""
        new_status = PLAYER_TO_GAME_STATUS[self.current_player.status]
        if new_status != self.status:
            logger.info("Game status: %s -> %s", self.status, new_status)
        self.status = new_status


def _to_location(square: Location | str) -> Location:
    return square if isinstance(square, Location) else Location.from_algebraic(square)
