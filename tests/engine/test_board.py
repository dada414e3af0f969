"""Unit tests for src/engine/board.py"""

import pytest

from src.core.exceptions import InvariantViolationError
from src.core.shared_types import Variant
from src.engine.alliance import Alliance
from src.engine.board import CLASSICAL_ROOK_FILES, Board
from src.engine.fen import board_from_fen
from src.engine.location import Location
from src.engine.pieces import Piece, PieceType


def _piece(character: str, square: str, has_moved: bool = False) -> Piece:
    return Piece.from_fen(character, Location.from_algebraic(square), has_moved)


def test_builder_creates_board() -> None:
    king = _piece("K", "e1")
    enemy_king = _piece("k", "e8")
    board = Board.Builder().place(king).place(enemy_king).set_mover(Alliance.DARK).build()

    assert board.piece(Location.from_algebraic("e1")) == king
    assert board.king(Alliance.DARK) == enemy_king
    assert board.to_move is Alliance.DARK
    assert board.en_passant_pawn is None
    assert board.variant is Variant.STANDARD
    assert board.rook_files == CLASSICAL_ROOK_FILES


def test_builder_defaults_to_light_to_move() -> None:
    board = Board.Builder().place_all([_piece("K", "e1"), _piece("k", "e8")]).build()
    assert board.to_move is Alliance.LIGHT


def test_builder_cannot_be_reused() -> None:
    """After build() every operation on the builder raises"""
    builder = Board.Builder().place_all([_piece("K", "e1"), _piece("k", "e8")])
    builder.build()

    with pytest.raises(InvariantViolationError):
        builder.build()
    with pytest.raises(InvariantViolationError):
        builder.place(_piece("Q", "d1"))
    with pytest.raises(InvariantViolationError):
        builder.set_mover(Alliance.DARK)


def test_board_cannot_be_changed() -> None:
    """Boards are immutable: neither the attributes nor the piece mapping can be changed"""
    board = board_from_fen("4k3/8/8/8/8/8/8/4K3 w - -")
    with pytest.raises(AttributeError):
        board.to_move = Alliance.DARK  # type: ignore[misc]
    with pytest.raises(TypeError):
        board.pieces[Location(0, 0)] = _piece("Q", "a1")  # type: ignore[index]


def test_placing_on_occupied_square_replaces_piece() -> None:
    board = Board.Builder().place(_piece("R", "a1")).place(_piece("Q", "a1")).build()
    assert board.piece(Location(0, 0)) == _piece("Q", "a1")
    assert len(board.pieces) == 1


def test_tiles() -> None:
    board = board_from_fen("4k3/8/8/8/8/8/8/4K3 w - -")
    occupied = board.tile(Location.from_algebraic("e1"))
    empty = board.tile(Location.from_algebraic("e2"))

    assert occupied.is_occupied
    assert occupied.piece == board.king(Alliance.LIGHT)
    assert not empty.is_occupied
    assert empty.piece is None
    assert board.is_any_occupied([Location.from_algebraic("a1"), Location.from_algebraic("e8")])
    assert not board.is_any_occupied([Location.from_algebraic("a1"), Location.from_algebraic("e2")])


def test_active_pieces(starting_board: Board) -> None:
    """Sixteen pieces per side, always in the same order starting from a1"""
    light = starting_board.active_pieces(Alliance.LIGHT)
    dark = starting_board.active_pieces(Alliance.DARK)

    assert len(light) == len(dark) == 16
    assert all(piece.alliance is Alliance.LIGHT for piece in light)
    assert [str(piece.location) for piece in light[:3]] == ["a1", "b1", "c1"]
    assert str(dark[0].location) == "a7"
    assert str(dark[-1].location) == "h8"


def test_locate_pieces(starting_board: Board) -> None:
    knights = starting_board.locate_pieces(PieceType.KNIGHT, Alliance.DARK)
    assert [str(location) for location in knights] == ["b8", "g8"]


@pytest.mark.parametrize(
    "fen, alliance",
    [
        ("8/8/8/8/8/8/8/4K3 w - -", Alliance.DARK),
        ("4k3/8/8/8/8/8/8/K3K3 w - -", Alliance.LIGHT),
    ],
)
def test_king_must_be_unique(fen: str, alliance: Alliance) -> None:
    """A board without exactly one king per side is a programmer error"""
    board = board_from_fen(fen)
    with pytest.raises(InvariantViolationError):
        board.king(alliance)


def test_en_passant_pawn_is_the_pawn_standing_there() -> None:
    pawn = _piece("P", "e4", has_moved=True)
    board = (
        Board.Builder()
        .place_all([_piece("K", "e1"), _piece("k", "e8"), pawn])
        .set_en_passant_pawn(pawn)
        .set_mover(Alliance.DARK)
        .build()
    )
    assert board.en_passant_location == pawn.location
    assert board.en_passant_pawn == pawn


@pytest.mark.parametrize(
    "pawn, mover",
    [
        # wrong rank for a double push
        (_piece("P", "e3", has_moved=True), Alliance.DARK),
        # pawn belongs to the side that is to move
        (_piece("P", "e4", has_moved=True), Alliance.LIGHT),
        # not a pawn at all
        (_piece("N", "e4", has_moved=True), Alliance.DARK),
    ],
)
def test_invalid_en_passant_pawn(pawn: Piece, mover: Alliance) -> None:
    builder = Board.Builder().place_all([_piece("K", "e1"), _piece("k", "e8"), pawn])
    with pytest.raises(InvariantViolationError):
        builder.set_en_passant_pawn(pawn).set_mover(mover).build()


def test_en_passant_pawn_must_be_on_the_board() -> None:
    pawn = _piece("p", "d5", has_moved=True)
    builder = Board.Builder().place_all([_piece("K", "e1"), _piece("k", "e8")])
    with pytest.raises(InvariantViolationError):
        builder.set_en_passant_pawn(pawn).build()


def test_rook_files_are_validated() -> None:
    with pytest.raises(InvariantViolationError):
        Board.Builder().set_variant(Variant.RANDOM_BACKRANK, (5, 2))
    with pytest.raises(InvariantViolationError):
        Board.Builder().set_variant(Variant.RANDOM_BACKRANK, (0, 8))


def test_rook_start() -> None:
    board = board_from_fen("1rk3r1/8/8/8/8/8/8/1RK3R1 w - -", Variant.RANDOM_BACKRANK, (1, 6))
    assert str(board.rook_start(Alliance.LIGHT, king_side=True)) == "g1"
    assert str(board.rook_start(Alliance.LIGHT, king_side=False)) == "b1"
    assert str(board.rook_start(Alliance.DARK, king_side=False)) == "b8"


def test_derive_keeps_variant_and_rook_files() -> None:
    board = board_from_fen("1rk3r1/8/8/8/8/8/8/1RK3R1 w - -", Variant.RANDOM_BACKRANK, (1, 6))
    derived = board.derive().place_all(list(board.pieces.values())).build()
    assert derived.variant is Variant.RANDOM_BACKRANK
    assert derived.rook_files == (1, 6)


def test_text_representations(starting_board: Board) -> None:
    assert starting_board.placement_fen() == "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"
    diagram = str(starting_board).splitlines()
    assert diagram[0] == "8 r n b q k b n r"
    assert diagram[4] == "4 . . . . . . . ."
    assert diagram[-1] == "  a b c d e f g h"
