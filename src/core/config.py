"""Settings a caller can tweak when starting games."""

import os
from typing import Optional, Self

from pydantic import BaseModel, ConfigDict

from src.core.shared_types import Variant

ENV_PREFIX = "CHESS_"
TRUTHY = ("1", "true", "yes", "on")


class GameSettings(BaseModel):
    """
    Defaults for new games.

    * default_variant: used when a game is created without naming a variant.
    * auto_promote_to_queen: if set, a pawn reaching the last rank without an explicit choice becomes a queen.
        Otherwise the engine refuses the move until the caller supplies a choice.
    * seed: seeds the random generator used for the randomized back rank (reproducible setups).
    """

    model_config = ConfigDict(frozen=True)

    default_variant: Variant = Variant.STANDARD
    auto_promote_to_queen: bool = False
    seed: Optional[int] = None

    @classmethod
    def from_env(cls) -> Self:
        """Read CHESS_DEFAULT_VARIANT, CHESS_AUTO_PROMOTE_TO_QUEEN and CHESS_SEED, falling back to the defaults."""
        values: dict[str, object] = {}

        variant = os.environ.get(f"{ENV_PREFIX}DEFAULT_VARIANT")
        if variant:
            values["default_variant"] = Variant(variant.replace("_", " ").lower())

        auto_queen = os.environ.get(f"{ENV_PREFIX}AUTO_PROMOTE_TO_QUEEN")
        if auto_queen is not None:
            values["auto_promote_to_queen"] = auto_queen.strip().lower() in TRUTHY

        seed = os.environ.get(f"{ENV_PREFIX}SEED")
        if seed:
            values["seed"] = int(seed)

        return cls.model_validate(values)
