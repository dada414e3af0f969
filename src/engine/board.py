"""
The Board is an immutable snapshot of a position: which piece stands where, whose turn it is and
which pawn (if any) may be taken en passant.

Boards are only ever created through a Board.Builder. Making a move never changes a Board, it builds the next one.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional

from src.core.exceptions import InvariantViolationError
from src.core.shared_types import Variant
from src.engine.alliance import Alliance
from src.engine.location import BOARD_SIZE, Location
from src.engine.pieces import Piece, PieceType

# (queen side rook file, king side rook file) in classical chess
CLASSICAL_ROOK_FILES: tuple[int, int] = (0, 7)


@dataclass(frozen=True)
class Tile:
    location: Location
    piece: Optional[Piece] = None

    @property
    def is_occupied(self) -> bool:
        return self.piece is not None


@dataclass(frozen=True, eq=False)
class Board:
    pieces: Mapping[Location, Piece]
    to_move: Alliance
    en_passant_location: Optional[Location]
    variant: Variant
    rook_files: tuple[int, int]

    def tile(self, location: Location) -> Tile:
        return Tile(location, self.pieces.get(location))

    def piece(self, location: Location) -> Optional[Piece]:
        return self.pieces.get(location)

    def is_occupied(self, location: Location) -> bool:
        return location in self.pieces

    def is_any_occupied(self, locations: list[Location]) -> bool:
        return any(self.is_occupied(location) for location in locations)

    def active_pieces(self, alliance: Alliance) -> list[Piece]:
        """All pieces of the alliance, in a fixed order (a1, b1, ..., h8)."""
        pieces = [piece for piece in self.pieces.values() if piece.alliance is alliance]
        return sorted(pieces, key=lambda piece: (piece.location.y, piece.location.x))

    def locate_pieces(self, piece_type: PieceType, alliance: Alliance) -> list[Location]:
        return [
            piece.location
            for piece in self.active_pieces(alliance)
            if piece.type is piece_type
        ]

    def king(self, alliance: Alliance) -> Piece:
        """Every legality question needs the king. A board without one is a bug somewhere upstream."""
        kings = self.locate_pieces(PieceType.KING, alliance)
        if len(kings) != 1:
            raise InvariantViolationError(
                f"Expected exactly one {alliance} king on the board, found {len(kings)}.\n{self}"
            )
        king = self.pieces[kings[0]]
        return king

    @property
    def en_passant_pawn(self) -> Optional[Piece]:
        """
        The pawn that just advanced two squares.
        Looked up on this board, so it is always the value that is actually standing there.
        """
        if self.en_passant_location is None:
            return None
        return self.pieces.get(self.en_passant_location)

    def rook_start(self, alliance: Alliance, king_side: bool) -> Location:
        """Square the castling rook started the game on."""
        queen_side_file, king_side_file = self.rook_files
        return Location(king_side_file if king_side else queen_side_file, alliance.back_rank)

    def derive(self) -> Board.Builder:
        """A fresh Builder for a board of the same game (same variant and castling rook files)."""
        return Board.Builder().set_variant(self.variant, self.rook_files)

    # --- TEXT REPRESENTATIONS ---
    def placement_fen(self) -> str:
        """First field of a FEN string. Ranks are separated by slashes, starting at the 8th rank."""
        return "/".join(self._rank_to_fen(rank) for rank in range(BOARD_SIZE - 1, -1, -1))

    def _rank_to_fen(self, rank: int) -> str:
        """FEN string of a single rank"""
        fen_characters: list[str] = []
        empty_count = 0
        for file in range(BOARD_SIZE):
            piece = self.piece(Location(file, rank))
            if piece is None:
                empty_count += 1
                continue
            if empty_count > 0:
                fen_characters.append(str(empty_count))
                empty_count = 0
            fen_characters.append(piece.to_fen())

        # if the entire rank is empty, then we still place this number in the string
        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    def __str__(self) -> str:
        rows = []
        for rank in range(BOARD_SIZE - 1, -1, -1):
            row = " ".join(
                piece.to_fen() if (piece := self.piece(Location(file, rank))) else "."
                for file in range(BOARD_SIZE)
            )
            rows.append(f"{rank + 1} {row}")
        rows.append("  a b c d e f g h")
        return "\n".join(rows)

    class Builder:
        """
        Scoped, single use accumulator for a Board.

        Place the pieces, set who is to move (and the en passant pawn), then call build().
        After build() the Builder refuses any further use.
        """

        def __init__(self) -> None:
            self._pieces: dict[Location, Piece] = {}
            self._to_move = Alliance.LIGHT
            self._en_passant_pawn: Optional[Piece] = None
            self._variant = Variant.STANDARD
            self._rook_files = CLASSICAL_ROOK_FILES
            self._built = False

        def place(self, piece: Piece) -> Board.Builder:
            self._assert_not_built()
            self._pieces[piece.location] = piece
            return self

        def place_all(self, pieces: list[Piece]) -> Board.Builder:
            for piece in pieces:
                self.place(piece)
            return self

        def set_mover(self, alliance: Alliance) -> Board.Builder:
            self._assert_not_built()
            self._to_move = alliance
            return self

        def set_en_passant_pawn(self, pawn: Optional[Piece]) -> Board.Builder:
            self._assert_not_built()
            self._en_passant_pawn = pawn
            return self

        def set_variant(
            self, variant: Variant, rook_files: tuple[int, int] = CLASSICAL_ROOK_FILES
        ) -> Board.Builder:
            self._assert_not_built()
            queen_side_file, king_side_file = rook_files
            if not 0 <= queen_side_file < king_side_file < BOARD_SIZE:
                raise InvariantViolationError(f"Invalid castling rook files: {rook_files}")
            self._variant = variant
            self._rook_files = rook_files
            return self

        def build(self) -> Board:
            self._assert_not_built()
            self._validate_en_passant_pawn()
            self._built = True
            return Board(
                pieces=MappingProxyType(dict(self._pieces)),
                to_move=self._to_move,
                en_passant_location=(
                    self._en_passant_pawn.location if self._en_passant_pawn else None
                ),
                variant=self._variant,
                rook_files=self._rook_files,
            )

        def _assert_not_built(self) -> None:
            if self._built:
                raise InvariantViolationError("Board.Builder cannot be reused after build().")

        def _validate_en_passant_pawn(self) -> None:
            """
            The en passant pawn must be a pawn of the side that just moved, standing where a double push lands it.
            """
            pawn = self._en_passant_pawn
            if pawn is None:
                return
            just_moved = self._to_move.opponent
            if (
                pawn.type is not PieceType.PAWN
                or pawn.alliance is not just_moved
                or pawn.location.y != just_moved.double_push_rank
                or self._pieces.get(pawn.location) != pawn
            ):
                raise InvariantViolationError(
                    f"{pawn!r} cannot be the en passant pawn when {self._to_move} is to move."
                )
