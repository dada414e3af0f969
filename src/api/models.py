"""Requests and Response models used at the boundary with the presentation layer"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color, PieceType, Status, Variant


def _is_algebraic_notation(value: str) -> bool:
    if len(value) != 2:
        return False

    file_character, rank_character = value[0], value[1]
    return file_character in "abcdefgh" and rank_character in "12345678"


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    variant: Optional[Variant] = None
    seed: Optional[int] = None


class GetGameRequest(BaseModel):
    game_id: UUID


class LegalMovesRequest(BaseModel):
    game_id: UUID


class ResetGameRequest(BaseModel):
    game_id: UUID
    variant: Optional[Variant] = None


class DeleteGameRequest(BaseModel):
    game_id: UUID


class MoveRequest(BaseModel):
    game_id: UUID
    from_square: str
    to_square: str
    promote_to: Optional[PieceType] = None

    @field_validator("from_square", "to_square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        value = value.strip().lower()
        if not _is_algebraic_notation(value):
            raise InvalidRequestError(f"Cannot interpret {value!r} as a valid square name.")
        return value

    @field_validator("promote_to")
    @classmethod
    def validate_promotion(cls, value: Optional[PieceType]) -> Optional[PieceType]:
        if value in (PieceType.PAWN, PieceType.KING):
            raise InvalidRequestError(f"A pawn cannot promote to a {value}.")
        return value


# --- RESPONSE MODELS ---
class GameResponse(BaseModel):
    game_id: UUID
    variant: Variant
    board_fen: str
    to_move: Color
    status: Status
    in_check: Optional[Color]
    winner: Optional[Color]
    move_history: list[str]


class LegalMovesResponse(BaseModel):
    game_id: UUID
    color: Color
    legal_moves: list[str]


class MoveResponse(BaseModel):
    accepted: bool
    game: GameResponse
