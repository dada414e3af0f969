"""The two sides of the game, each carrying the constants that differ between them."""

from __future__ import annotations

from enum import Enum

from src.core.shared_types import Color


class Alliance(Enum):
    """
    LIGHT plays up the board (towards higher ranks), DARK plays down.

    Member values: (color name, forward direction, back rank, pawn start rank, promotion rank)
    """

    LIGHT = ("light", 1, 0, 1, 7)
    DARK = ("dark", -1, 7, 6, 0)

    def __init__(
        self,
        label: str,
        direction: int,
        back_rank: int,
        pawn_rank: int,
        promotion_rank: int,
    ) -> None:
        self.label = label
        self.direction = direction
        self.back_rank = back_rank
        self.pawn_rank = pawn_rank
        self.promotion_rank = promotion_rank

    @property
    def opposite_direction(self) -> int:
        return -self.direction

    @property
    def double_push_rank(self) -> int:
        """Rank a pawn of this alliance lands on after advancing two squares."""
        return self.pawn_rank + 2 * self.direction

    @property
    def opponent(self) -> Alliance:
        return Alliance.DARK if self is Alliance.LIGHT else Alliance.LIGHT

    def is_promotion_rank(self, rank: int) -> bool:
        return rank == self.promotion_rank

    def to_color(self) -> Color:
        return Color(self.label)

    @classmethod
    def from_color(cls, color: Color | str) -> Alliance:
        return next(alliance for alliance in cls if alliance.label == Color(color))

    def __str__(self) -> str:
        return self.label
