"""
Type definitions used across layers
"""

from enum import StrEnum


class Status(StrEnum):
    IN_PROGRESS = "in progress"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"


class Variant(StrEnum):
    """Initial arrangement of the pieces."""

    STANDARD = "standard"
    RANDOM_BACKRANK = "random backrank"


# NOTE: The engine calls the sides "alliances" (src/engine/alliance.py). Boundary layers just use the color names.
class Color(StrEnum):
    LIGHT = "light"
    DARK = "dark"


class PieceType(StrEnum):
    PAWN = "pawn"
    KNIGHT = "knight"
    BISHOP = "bishop"
    ROOK = "rook"
    QUEEN = "queen"
    KING = "king"
