"""
Initial positions: the classical back rank, or a randomized one ("Fischer random" / Chess960 rules).
"""

import logging
import random
from typing import Optional

from src.core.shared_types import Variant
from src.engine.alliance import Alliance
from src.engine.board import CLASSICAL_ROOK_FILES, Board
from src.engine.location import BOARD_SIZE, Location
from src.engine.pieces import Piece, PieceType

logger = logging.getLogger(__name__)

BackRank = tuple[PieceType, ...]

STANDARD_BACK_RANK: BackRank = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)


def random_back_rank(rng: random.Random) -> BackRank:
    """
    Shuffle the back rank under two constraints
    ----

    * the bishops stand on squares of opposite color
    * the king stands somewhere in between the two rooks

    1. one bishop on a random even file, one on a random odd file
    2. the queen on a random free file, then the knights on two random free files
    3. the three files that are left get rook, king, rook (in that order)
    """
    rank: list[Optional[PieceType]] = [None] * BOARD_SIZE

    rank[rng.choice(range(0, BOARD_SIZE, 2))] = PieceType.BISHOP
    rank[rng.choice(range(1, BOARD_SIZE, 2))] = PieceType.BISHOP

    free_files = [file for file, piece in enumerate(rank) if piece is None]
    for piece_type in (PieceType.QUEEN, PieceType.KNIGHT, PieceType.KNIGHT):
        file = rng.choice(free_files)
        free_files.remove(file)
        rank[file] = piece_type

    for file, piece_type in zip(free_files, (PieceType.ROOK, PieceType.KING, PieceType.ROOK)):
        rank[file] = piece_type

    return tuple(piece_type for piece_type in rank if piece_type is not None)


def rook_files(back_rank: BackRank) -> tuple[int, int]:
    """(queen side, king side) files of the rooks"""
    files = [file for file, piece_type in enumerate(back_rank) if piece_type is PieceType.ROOK]
    if len(files) != 2:
        return CLASSICAL_ROOK_FILES
    return files[0], files[1]


def board_from_back_rank(back_rank: BackRank, variant: Variant) -> Board:
    """Both sides get the same back rank (mirrored across the board), with a full row of pawns in front of it."""
    builder = Board.Builder().set_variant(variant, rook_files(back_rank))
    for alliance in Alliance:
        for file, piece_type in enumerate(back_rank):
            builder.place(Piece(piece_type, Location(file, alliance.back_rank), alliance))
            builder.place(Piece(PieceType.PAWN, Location(file, alliance.pawn_rank), alliance))
    return builder.set_mover(Alliance.LIGHT).build()


def initial_board(variant: Variant, rng: Optional[random.Random] = None) -> Board:
    """Starting position for the variant. RANDOM_BACKRANK uses the supplied random source (or a fresh one)."""
    if variant == Variant.RANDOM_BACKRANK:
        back_rank = random_back_rank(rng or random.Random())
    else:
        back_rank = STANDARD_BACK_RANK
    logger.debug(
        "Back rank for %s: %s", variant, "".join(piece_type.value for piece_type in back_rank)
    )
    return board_from_back_rank(back_rank, variant)
