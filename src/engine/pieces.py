"""Defines the types of chess pieces"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from src.core import shared_types
from src.engine.alliance import Alliance
from src.engine.location import Location

Vector = tuple[int, int]


class PieceType(Enum):
    """Values are the (lower case) FEN letters."""

    PAWN = "p"
    KNIGHT = "n"
    BISHOP = "b"
    ROOK = "r"
    QUEEN = "q"
    KING = "k"

    @property
    def is_sliding(self) -> bool:
        return self in (PieceType.BISHOP, PieceType.ROOK, PieceType.QUEEN)

    def to_shared(self) -> shared_types.PieceType:
        return shared_types.PieceType[self.name]

    @classmethod
    def from_shared(cls, piece_type: shared_types.PieceType | str) -> PieceType:
        return cls[shared_types.PieceType(piece_type).name]


FEN_TO_PIECE: dict[str, PieceType] = {piece_type.value: piece_type for piece_type in PieceType}

PIECE_TO_FEN: dict[PieceType, str] = {value: key for key, value in FEN_TO_PIECE.items()}

# Order in which promotion moves get generated.
PROMOTION_OPTIONS: tuple[PieceType, ...] = (
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
)

DIAGONALS: tuple[Vector, ...] = ((1, 1), (-1, 1), (1, -1), (-1, -1))
STRAIGHTS: tuple[Vector, ...] = ((1, 0), (-1, 0), (0, 1), (0, -1))
KNIGHT_JUMPS: tuple[Vector, ...] = (
    (2, 1),
    (2, -1),
    (-2, 1),
    (-2, -1),
    (1, 2),
    (1, -2),
    (-1, 2),
    (-1, -2),
)

# Pawns are missing on purpose: their offsets depend on the alliance (see Piece.directions)
PIECE_DIRECTIONS: dict[PieceType, tuple[Vector, ...]] = {
    PieceType.KNIGHT: KNIGHT_JUMPS,
    PieceType.BISHOP: DIAGONALS,
    PieceType.ROOK: STRAIGHTS,
    PieceType.QUEEN: DIAGONALS + STRAIGHTS,
    PieceType.KING: DIAGONALS + STRAIGHTS,
}


@dataclass(frozen=True)
class Piece:
    """
    A piece standing on a specific square.

    Immutable: moving a piece means creating a new Piece on the destination (with has_moved set).
    """

    type: PieceType
    location: Location
    alliance: Alliance
    has_moved: bool = False

    @classmethod
    def from_fen(cls, character: str, location: Location, has_moved: bool = False) -> Piece:
        # lower case: dark pieces, upper case: light pieces
        alliance = Alliance.LIGHT if character.isupper() else Alliance.DARK
        return cls(FEN_TO_PIECE[character.lower()], location, alliance, has_moved)

    def to_fen(self) -> str:
        letter = PIECE_TO_FEN[self.type]
        return letter.upper() if self.alliance is Alliance.LIGHT else letter

    @property
    def directions(self) -> tuple[Vector, ...]:
        """The offsets this piece moves along. For a pawn: the three squares in front of it."""
        if self.type is PieceType.PAWN:
            return tuple((dx, self.alliance.direction) for dx in (-1, 0, 1))
        return PIECE_DIRECTIONS[self.type]

    def moved_to(self, destination: Location) -> Piece:
        """The value of this piece after it moved to the destination."""
        return replace(self, location=destination, has_moved=True)

    def promoted_to(self, piece_type: PieceType, destination: Location) -> Piece:
        return Piece(piece_type, destination, self.alliance, has_moved=True)

    def is_enemy_of(self, other: Piece) -> bool:
        return self.alliance is not other.alliance

    def __str__(self) -> str:
        # Pawns are traditionally written without a letter
        return "" if self.type is PieceType.PAWN else PIECE_TO_FEN[self.type].upper()
