"""
A location (square) on the board

(placed in its own module as every other module in the engine needs to import it)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional

from src.core.exceptions import InvalidCoordinateError

# Chess board is always 8x8.
BOARD_SIZE = 8
FILE_NAMES = "abcdefgh"
RANK_NAMES = "12345678"


def is_on_board(x: int, y: int) -> bool:
    return 0 <= x < BOARD_SIZE and 0 <= y < BOARD_SIZE


@dataclass(frozen=True)
class Location:
    """
    Zero based coordinates: x is the file (0 = a-file), y the rank (0 = 1st rank).

    An off-board Location cannot exist: construction fails with InvalidCoordinateError.
    """

    x: int
    y: int

    def __post_init__(self) -> None:
        if not is_on_board(self.x, self.y):
            raise InvalidCoordinateError(
                f"({self.x}, {self.y}) is not a square on a {BOARD_SIZE}x{BOARD_SIZE} board."
            )

    @classmethod
    def from_algebraic(cls, square: str) -> Location:
        """Algebraic notation: 'a1' - 'h8' get converted to (0,0) - (7,7)"""
        if len(square) != 2 or square[0] not in FILE_NAMES or square[1] not in RANK_NAMES:
            raise InvalidCoordinateError(f"Cannot read {square!r} as a square.")
        return cls(FILE_NAMES.index(square[0]), int(square[1]) - 1)

    def to_algebraic(self) -> str:
        return f"{FILE_NAMES[self.x]}{self.y + 1}"

    def offset(self, dx: int, dy: int) -> Optional[Location]:
        """The location shifted by (dx, dy), or None if that falls off the board."""
        x, y = self.x + dx, self.y + dy
        if not is_on_board(x, y):
            return None
        return Location(x, y)

    def is_light_square(self) -> bool:
        # a1 is a dark square
        return (self.x + self.y) % 2 == 1

    def __str__(self) -> str:
        return self.to_algebraic()


def all_locations() -> Iterator[Location]:
    """Every square on the board, rank by rank starting at a1."""
    for y in range(BOARD_SIZE):
        for x in range(BOARD_SIZE):
            yield Location(x, y)


def squares_between_on_rank(start: Location, end: Location) -> list[Location]:
    """
    Find the squares strictly in between the two squares specified that are on the same rank.

    Needed for checking if you can still castle (the Board will check which of those are empty etc.)
    """
    if start.y != end.y:
        raise ValueError(
            f"squares_between_on_rank requires both squares to lie on the same rank. \n from: {start}\n to:{end}"
        )
    low, high = sorted((start.x, end.x))
    return [Location(x, start.y) for x in range(low + 1, high)]


def squares_spanned_on_rank(start: Location, end: Location) -> list[Location]:
    """Like `squares_between_on_rank()`, but including both end points."""
    low, high = sorted((start.x, end.x))
    return [Location(low, start.y)] + squares_between_on_rank(start, end) + (
        [Location(high, start.y)] if high != low else []
    )
