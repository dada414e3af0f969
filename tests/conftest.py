"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures required for testing multiple layers.
"""

import random
from typing import Generator

import pytest

from src.core.config import GameSettings
from src.db.repository import InMemoryGameRepository
from src.engine.board import Board
from src.engine.fen import STARTING_FEN, board_from_fen
from src.engine.game import Game
from src.services.chess_service import ChessService

# Kings and rooks on their classical squares, every castling right still available
CASTLING_FEN = "r3k2r/8/8/8/8/8/8/R3K2R w KQkq -"
KINGS_ONLY_FEN = "4k3/8/8/8/8/8/8/4K3 w - -"


@pytest.fixture
def starting_board() -> Board:
    return board_from_fen(STARTING_FEN)


@pytest.fixture
def castling_board() -> Board:
    """Only the kings and the rooks. Ready to perform any castling move (if allowed)."""
    return board_from_fen(CASTLING_FEN)


@pytest.fixture
def kings_only_board() -> Board:
    """
    Only kings on their canonical starting squares.
    Because making a move involves inferring if a king is under attack, moves cannot be played on a board without them.
    """
    return board_from_fen(KINGS_ONLY_FEN)


@pytest.fixture
def rng() -> random.Random:
    """Seeded, so randomized setups are reproducible between test runs."""
    return random.Random(20240229)


@pytest.fixture
def standard_game() -> Game:
    return Game.new_game()


@pytest.fixture
def repository() -> Generator[InMemoryGameRepository, None, None]:
    repo = InMemoryGameRepository()
    yield repo
    repo._games.clear()


@pytest.fixture
def service(repository: InMemoryGameRepository) -> ChessService:
    return ChessService(repository, GameSettings(seed=7))
