"""Helpers for implementing Castling rules. Need to be imported by multiple sources"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from src.engine.board import Board
from src.engine.location import Location, squares_spanned_on_rank
from src.engine.pieces import Piece


class CastlingSide(Enum):
    KING_SIDE = "O-O"
    QUEEN_SIDE = "O-O-O"


# Whatever the starting files (random back rank!), the king and rook always end up on the classical squares.
KING_TARGET_FILES: dict[CastlingSide, int] = {
    CastlingSide.KING_SIDE: 6,
    CastlingSide.QUEEN_SIDE: 2,
}
ROOK_TARGET_FILES: dict[CastlingSide, int] = {
    CastlingSide.KING_SIDE: 5,
    CastlingSide.QUEEN_SIDE: 3,
}


@dataclass(frozen=True)
class CastlingSquares:
    """
    Store the squares where king/rook start from/end up in by castling.
    """

    king_from: Location
    king_to: Location
    rook_from: Location
    rook_to: Location

    @property
    def king_path(self) -> list[Location]:
        """Squares the king stands on or passes through, including start and target. None of them may be attacked."""
        return squares_spanned_on_rank(self.king_from, self.king_to)

    @property
    def squares_to_clear(self) -> set[Location]:
        """
        Everything both pieces travel over must be empty, except for the king and the castling rook themselves.
        (In classical chess this is simply: the squares strictly between king and rook)
        """
        travelled = set(squares_spanned_on_rank(self.king_from, self.king_to)) | set(
            squares_spanned_on_rank(self.rook_from, self.rook_to)
        )
        return travelled - {self.king_from, self.rook_from}


def castling_squares(board: Board, king: Piece, side: CastlingSide) -> Optional[CastlingSquares]:
    """
    The squares involved when the given king castles to the given side, on this board's rook files.
    None if the rook's start square is not on that side of the king.
    """
    king_side = side is CastlingSide.KING_SIDE
    rook_from = board.rook_start(king.alliance, king_side)
    on_correct_side = rook_from.x > king.location.x if king_side else rook_from.x < king.location.x
    if not on_correct_side:
        return None

    rank = king.alliance.back_rank
    return CastlingSquares(
        king_from=king.location,
        king_to=Location(KING_TARGET_FILES[side], rank),
        rook_from=rook_from,
        rook_to=Location(ROOK_TARGET_FILES[side], rank),
    )
