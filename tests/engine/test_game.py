"""Unit tests for src/engine/game.py"""

import random

import pytest

from src.core.config import GameSettings
from src.core.exceptions import (
    GameStateError,
    IllegalMoveError,
    InvalidCoordinateError,
    PromotionChoiceRequiredError,
)
from src.core.shared_types import Status, Variant
from src.engine.alliance import Alliance
from src.engine.fen import STARTING_FEN, board_from_fen, board_to_fen
from src.engine.game import Game, GameStatus
from src.engine.location import Location
from src.engine.moves import MoveKind
from src.engine.pieces import PieceType

FOOLS_MATE = ["f2f3", "e7e5", "g2g4", "d8h4"]


def _play(game: Game, ucis: list[str]) -> None:
    for uci in ucis:
        assert game.try_move(uci[:2], uci[2:4]), uci


# -- CREATION --
def test_new_standard_game(standard_game: Game) -> None:
    assert board_to_fen(standard_game.board) == STARTING_FEN
    assert standard_game.variant is Variant.STANDARD
    assert standard_game.status is Status.IN_PROGRESS
    assert standard_game.move_log == ()
    assert len(standard_game.history) == 1
    assert len(standard_game.legal_moves()) == 20


def test_new_random_backrank_game() -> None:
    game = Game.new_game(Variant.RANDOM_BACKRANK, rng=random.Random(3))
    assert game.variant is Variant.RANDOM_BACKRANK
    assert game.board.variant is Variant.RANDOM_BACKRANK
    assert game.board.to_move is Alliance.LIGHT


def test_default_variant_comes_from_settings() -> None:
    game = Game.new_game(settings=GameSettings(default_variant=Variant.RANDOM_BACKRANK, seed=1))
    assert game.variant is Variant.RANDOM_BACKRANK


def test_seeded_settings_give_reproducible_setup() -> None:
    settings = GameSettings(default_variant=Variant.RANDOM_BACKRANK, seed=99)
    first, second = Game.new_game(settings=settings), Game.new_game(settings=settings)
    assert board_to_fen(first.board) == board_to_fen(second.board)


def test_game_from_finished_position() -> None:
    """The status is computed right away, also for a position that is already over"""
    game = Game.from_board(board_from_fen("7k/5Q2/6K1/8/8/8/8/8 b - -"))
    assert game.status is Status.STALEMATE
    assert game.winner is None


# -- MAKING MOVES --
def test_make_move(standard_game: Game) -> None:
    move = standard_game.make_move("e2", "e4")

    assert move.kind is MoveKind.PAWN_DOUBLE_PUSH
    assert standard_game.board.to_move is Alliance.DARK
    assert standard_game.move_log == (move,)
    assert len(standard_game.history) == 2
    assert standard_game.history[0].piece(Location.from_algebraic("e2")) is not None


def test_make_move_accepts_locations(standard_game: Game) -> None:
    move = standard_game.make_move(Location.from_algebraic("g1"), Location.from_algebraic("f3"))
    assert str(move) == "Nf3"


@pytest.mark.parametrize(
    "source, destination",
    [
        # pawn cannot move three squares
        ("e2", "e5"),
        # no piece there
        ("e4", "e5"),
        # not your piece
        ("e7", "e5"),
        # own piece on the destination
        ("a1", "a2"),
    ],
)
def test_illegal_moves_are_rejected(standard_game: Game, source: str, destination: str) -> None:
    """try_move answers False and the game is left unchanged"""
    assert not standard_game.try_move(source, destination)
    assert board_to_fen(standard_game.board) == STARTING_FEN
    assert standard_game.move_log == ()

    with pytest.raises(IllegalMoveError):
        standard_game.make_move(source, destination)


@pytest.mark.parametrize("square", ["e9", "e²"])
def test_invalid_square_raises(standard_game: Game, square: str) -> None:
    with pytest.raises(InvalidCoordinateError):
        standard_game.try_move(square, "e4")


def test_fools_mate(standard_game: Game) -> None:
    _play(standard_game, FOOLS_MATE)

    assert standard_game.status is Status.CHECKMATE
    assert standard_game.winner is Alliance.DARK
    assert standard_game.game_status() == GameStatus(Status.CHECKMATE, Alliance.LIGHT)
    assert [str(move) for move in standard_game.move_log] == ["f3", "e5", "g4", "Qh4"]


def test_no_moves_after_the_game_ended(standard_game: Game) -> None:
    _play(standard_game, FOOLS_MATE)

    assert not standard_game.try_move("e2", "e4")
    with pytest.raises(GameStateError):
        standard_game.make_move("e2", "e4")
    assert len(standard_game.move_log) == 4


def test_check_is_reported(standard_game: Game) -> None:
    _play(standard_game, ["e2e4", "f7f6", "d1h5"])
    assert standard_game.game_status() == GameStatus(Status.IN_PROGRESS, Alliance.DARK)

    _play(standard_game, ["g7g6"])
    assert standard_game.game_status() == GameStatus(Status.IN_PROGRESS, None)


def test_en_passant_through_the_game(standard_game: Game) -> None:
    _play(standard_game, ["e2e4", "a7a6", "e4e5", "d7d5", "e5d6"])
    board = standard_game.board
    assert board.piece(Location.from_algebraic("d5")) is None
    assert standard_game.move_log[-1].kind is MoveKind.EN_PASSANT


def test_en_passant_must_be_taken_immediately(standard_game: Game) -> None:
    _play(standard_game, ["e2e4", "a7a6", "e4e5", "d7d5", "h2h3", "a6a5"])
    assert not standard_game.try_move("e5", "d6")


# -- CASTLING --
def test_castling_by_king_move() -> None:
    game = Game.from_board(board_from_fen("r3k2r/8/8/8/8/8/8/R3K2R w KQkq -"))
    move = game.make_move("e1", "g1")
    assert move.kind is MoveKind.KING_SIDE_CASTLE
    assert game.board.piece(Location.from_algebraic("f1")).type is PieceType.ROOK


def test_castling_by_moving_onto_own_rook() -> None:
    """Moving the king onto its own castling rook is read as castling towards that rook"""
    game = Game.from_board(board_from_fen("r3k2r/8/8/8/8/8/8/R3K2R w KQkq -"))
    move = game.make_move("e1", "a1")
    assert move.kind is MoveKind.QUEEN_SIDE_CASTLE
    assert game.board.piece(Location.from_algebraic("c1")).type is PieceType.KING
    assert game.board.piece(Location.from_algebraic("d1")).type is PieceType.ROOK


def test_random_backrank_castling_in_place() -> None:
    """King on c1 castling queen side stays on c1, so it can only be entered as a move onto the rook"""
    board = board_from_fen("2k5/8/8/8/8/8/8/1RK3R1 w KQ -", Variant.RANDOM_BACKRANK, (1, 6))
    game = Game.from_board(board)

    move = game.make_move("c1", "b1")
    assert move.kind is MoveKind.QUEEN_SIDE_CASTLE
    assert game.board.piece(Location.from_algebraic("d1")).type is PieceType.ROOK
    assert game.board.piece(Location.from_algebraic("b1")) is None


def test_king_step_wins_over_castling() -> None:
    """King b1 and rook a1: castling queen side lands the king on c1, but so does a plain king step"""
    board = board_from_fen("4k3/8/8/8/8/8/8/RK5R w KQ -", Variant.RANDOM_BACKRANK, (0, 7))
    game = Game.from_board(board)

    move = game.make_move("b1", "c1")
    assert move.kind is MoveKind.REGULAR
    assert game.board.piece(Location.from_algebraic("a1")).type is PieceType.ROOK


def test_castling_shadowed_by_king_step_via_the_rook_square() -> None:
    """The same castling move is still playable as the king moving onto its rook, though its UCI text is b1c1"""
    board = board_from_fen("4k3/8/8/8/8/8/8/RK5R w KQ -", Variant.RANDOM_BACKRANK, (0, 7))
    game = Game.from_board(board)

    move = game.make_move("b1", "a1")
    assert move.kind is MoveKind.QUEEN_SIDE_CASTLE
    assert move.to_uci() == "b1c1"
    assert game.board.piece(Location.from_algebraic("c1")).type is PieceType.KING
    assert game.board.piece(Location.from_algebraic("d1")).type is PieceType.ROOK


# -- PROMOTION --
PROMOTION_FEN = "4k3/P7/8/8/8/8/8/4K3 w - -"


def test_promotion_requires_a_choice() -> None:
    game = Game.from_board(board_from_fen(PROMOTION_FEN))

    assert game.requires_promotion("a7", "a8")
    assert not game.requires_promotion("e1", "e2")
    with pytest.raises(PromotionChoiceRequiredError):
        game.try_move("a7", "a8")
    assert game.move_log == ()


@pytest.mark.parametrize("promote_to", [PieceType.QUEEN, PieceType.ROOK, PieceType.BISHOP, PieceType.KNIGHT])
def test_promotion_choices(promote_to: PieceType) -> None:
    game = Game.from_board(board_from_fen(PROMOTION_FEN))
    assert game.try_move("a7", "a8", promote_to)
    assert game.board.piece(Location.from_algebraic("a8")).type is promote_to


def test_promotion_to_king_is_illegal() -> None:
    game = Game.from_board(board_from_fen(PROMOTION_FEN))
    assert not game.try_move("a7", "a8", PieceType.KING)


def test_promotion_choice_on_a_normal_move_is_illegal(standard_game: Game) -> None:
    assert not standard_game.try_move("e2", "e4", PieceType.QUEEN)


def test_auto_promotion_to_queen() -> None:
    game = Game.from_board(
        board_from_fen(PROMOTION_FEN), settings=GameSettings(auto_promote_to_queen=True)
    )
    assert game.try_move("a7", "a8")
    assert game.board.piece(Location.from_algebraic("a8")).type is PieceType.QUEEN


# -- RESET --
def test_reset(standard_game: Game) -> None:
    _play(standard_game, FOOLS_MATE)
    standard_game.reset()

    assert board_to_fen(standard_game.board) == STARTING_FEN
    assert standard_game.status is Status.IN_PROGRESS
    assert standard_game.move_log == ()
    assert len(standard_game.history) == 1


def test_reset_to_other_variant(standard_game: Game) -> None:
    standard_game.reset(Variant.RANDOM_BACKRANK, random.Random(5))
    assert standard_game.variant is Variant.RANDOM_BACKRANK
    assert standard_game.board.variant is Variant.RANDOM_BACKRANK
