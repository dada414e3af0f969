"""Protocol repository, plus the in-memory implementation the service uses (games are never written to disk)."""

from typing import Protocol
from uuid import UUID, uuid4

from src.engine.game import Game


class GameRepository(Protocol):
    """Keeps track of running games"""

    def get_game(self, game_id: UUID) -> Game | None:
        """Get game by ID, if record exists."""
        ...

    def create_game(self, game: Game) -> UUID:
        """Store new game and return the newly created game ID."""
        ...

    def update_game(self, game_id: UUID, game: Game) -> Game | None:
        """Replace the stored game."""
        ...

    def delete_game(self, game_id: UUID) -> Game | None:
        """Remove a game's record."""
        ...


class InMemoryGameRepository:
    """Games stored in a dictionary, for as long as the process lives."""

    def __init__(self) -> None:
        self._games: dict[UUID, Game] = {}

    def get_game(self, game_id: UUID) -> Game | None:
        return self._games.get(game_id)

    def create_game(self, game: Game) -> UUID:
        game_id = uuid4()
        self._games[game_id] = game
        return game_id

    def update_game(self, game_id: UUID, game: Game) -> Game | None:
        if game_id not in self._games:
            return None
        self._games[game_id] = game
        return game

    def delete_game(self, game_id: UUID) -> Game | None:
        return self._games.pop(game_id, None)

    def list_game_ids(self) -> list[UUID]:
        return list(self._games)
