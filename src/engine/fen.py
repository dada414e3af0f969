"""
Reading and writing positions in (the first four fields of) Forsyth-Edwards Notation.

Used to set up positions quickly (tests, debugging, logging). Nothing gets written to disk.
"""

from src.core.exceptions import InvalidCoordinateError, InvalidFENError
from src.core.shared_types import Variant
from src.engine.alliance import Alliance
from src.engine.board import CLASSICAL_ROOK_FILES, Board
from src.engine.location import BOARD_SIZE, Location
from src.engine.pieces import FEN_TO_PIECE, Piece, PieceType

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq -"
DIGITS = "12345678"
EMPTY_PLACEMENT = "/".join(["8"] * BOARD_SIZE)

COLOR_CODES: dict[str, Alliance] = {"w": Alliance.LIGHT, "b": Alliance.DARK}
# castling letter -> (alliance, king side?)
CASTLING_CODES: dict[str, tuple[Alliance, bool]] = {
    "K": (Alliance.LIGHT, True),
    "Q": (Alliance.LIGHT, False),
    "k": (Alliance.DARK, True),
    "q": (Alliance.DARK, False),
}


def is_valid_placement(placement: str) -> bool:
    """Only check the part of the FEN encoding for the board position."""
    rank_fens = placement.split("/")
    if len(rank_fens) != BOARD_SIZE:
        return False

    for rank_fen in rank_fens:
        file_count = 0
        for character in rank_fen:
            # make sure every character is valid
            if character in DIGITS:
                file_count += int(character)
            elif character.lower() in FEN_TO_PIECE:
                file_count += 1
            else:
                # immediately invalidate if the character is anything else
                return False

        # make sure you are creating a correctly sized board
        if file_count != BOARD_SIZE:
            return False
    return True


def is_valid_castling_rights(castling: str) -> bool:
    """Either '-' or a subset of KQkq, in that order."""
    if castling == "-":
        return True
    order = "".join(CASTLING_CODES)
    if not castling or any(character not in order for character in castling):
        return False
    # no duplicates, and always written in the order KQkq
    return "".join(character for character in order if character in castling) == castling


def parse_placement(placement: str) -> list[tuple[str, Location]]:
    """FEN letters together with the square they stand on."""
    if not is_valid_placement(placement):
        raise InvalidFENError(f"Cannot interpret {placement!r} as a board position.")

    letters: list[tuple[str, Location]] = []
    for rank_idx, rank_fen in enumerate(placement.split("/")):
        # FEN string is read from top rank (8th) to bottom rank (1st)
        rank = BOARD_SIZE - 1 - rank_idx
        # ... but the first character is the a-file, so reads in normal direction
        file = 0
        for character in rank_fen:
            if character in DIGITS:
                # A number denotes the amount of empty squares after each other
                file += int(character)
                continue
            letters.append((character, Location(file, rank)))
            file += 1
    return letters


def board_from_fen(
    fen: str,
    variant: Variant = Variant.STANDARD,
    rook_files: tuple[int, int] = CLASSICAL_ROOK_FILES,
) -> Board:
    """
    Construct a board from a FEN string: <placement> [<active color> [<castling rights> [<en passant square>]]]
    ----

    Missing fields default to: light to move, no castling rights, no en passant square. Move counters are ignored.

    FEN does not say which pieces have moved, so this is inferred:
    * a pawn on its starting rank has not moved
    * a king / rook has not moved if (and only if) a castling right says so
    * a knight, bishop or queen on its own back rank has not moved
    * any other piece is considered moved.
    """
    fields = fen.split()
    if not 1 <= len(fields) <= 6:
        raise InvalidFENError(f"Cannot interpret supplied string as FEN: {fen!r}")
    placement, color_code, castling, en_passant = (fields + ["w", "-", "-"])[:4]

    if color_code not in COLOR_CODES:
        raise InvalidFENError(f"Invalid active color {color_code!r} in {fen!r}")
    if not is_valid_castling_rights(castling):
        raise InvalidFENError(f"Invalid castling rights {castling!r} in {fen!r}")

    to_move = COLOR_CODES[color_code]
    builder = Board.Builder().set_variant(variant, rook_files).set_mover(to_move)
    unmoved_kings, unmoved_rooks = _unmoved_by_castling_rights(castling, rook_files)

    pieces: dict[Location, Piece] = {}
    for character, location in parse_placement(placement):
        piece = Piece.from_fen(character, location)
        has_moved = not _is_unmoved(piece, unmoved_kings, unmoved_rooks)
        pieces[location] = Piece(piece.type, location, piece.alliance, has_moved)
    builder.place_all(list(pieces.values()))

    if en_passant != "-":
        builder.set_en_passant_pawn(_en_passant_pawn(en_passant, to_move, pieces, fen))
    return builder.build()


def _unmoved_by_castling_rights(
    castling: str, rook_files: tuple[int, int]
) -> tuple[set[Alliance], set[Location]]:
    """Alliances whose king still has a castling right, and the start squares of rooks that still have one."""
    unmoved_kings: set[Alliance] = set()
    unmoved_rooks: set[Location] = set()
    queen_side_file, king_side_file = rook_files
    for letter in castling.replace("-", ""):
        alliance, king_side = CASTLING_CODES[letter]
        unmoved_kings.add(alliance)
        file = king_side_file if king_side else queen_side_file
        unmoved_rooks.add(Location(file, alliance.back_rank))
    return unmoved_kings, unmoved_rooks


def _is_unmoved(piece: Piece, unmoved_kings: set[Alliance], unmoved_rooks: set[Location]) -> bool:
    if piece.type is PieceType.PAWN:
        return piece.location.y == piece.alliance.pawn_rank
    if piece.type is PieceType.KING:
        return piece.alliance in unmoved_kings and piece.location.y == piece.alliance.back_rank
    if piece.type is PieceType.ROOK:
        return piece.location in unmoved_rooks
    return piece.location.y == piece.alliance.back_rank


def _en_passant_pawn(
    square: str, to_move: Alliance, pieces: dict[Location, Piece], fen: str
) -> Piece:
    """FEN records the square behind the pawn that just advanced two squares. We need the pawn itself."""
    try:
        target = Location.from_algebraic(square)
    except InvalidCoordinateError as exc:
        raise InvalidFENError(f"Invalid en passant square {square!r} in {fen!r}") from exc

    pawn_square = target.offset(0, to_move.opponent.direction)
    pawn = pieces.get(pawn_square) if pawn_square else None
    if (
        pawn is None
        or pawn.type is not PieceType.PAWN
        or pawn.alliance is to_move
        or pawn.location.y != pawn.alliance.double_push_rank
    ):
        raise InvalidFENError(f"No pawn can be taken en passant on {square!r} in {fen!r}")
    return pawn


def board_to_fen(board: Board) -> str:
    """reverse operation: write the first four FEN fields for the board"""
    color_code = next(code for code, alliance in COLOR_CODES.items() if alliance is board.to_move)

    castling = "".join(
        letter
        for letter, (alliance, king_side) in CASTLING_CODES.items()
        if _has_castling_right(board, alliance, king_side)
    ) or "-"

    en_passant_pawn = board.en_passant_pawn
    en_passant = "-"
    if en_passant_pawn is not None:
        target = en_passant_pawn.location.offset(0, en_passant_pawn.alliance.opposite_direction)
        en_passant = target.to_algebraic() if target else "-"

    return f"{board.placement_fen()} {color_code} {castling} {en_passant}"


def _has_castling_right(board: Board, alliance: Alliance, king_side: bool) -> bool:
    """Right (not necessarily possibility): king and castling rook are both unmoved."""
    kings = [
        piece
        for piece in board.active_pieces(alliance)
        if piece.type is PieceType.KING and not piece.has_moved
    ]
    rook = board.piece(board.rook_start(alliance, king_side))
    return (
        bool(kings)
        and rook is not None
        and rook.type is PieceType.ROOK
        and rook.alliance is alliance
        and not rook.has_moved
    )
