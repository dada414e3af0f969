"""
The moves a player can make.

Key idea: one Move value type with a closed set of kinds. Every kind shares the same execution contract
(rebuild the board without the moved piece, put its new value on the destination, hand the turn over),
the kind only decides about the extras: captured piece, castled rook, promotion and the en passant pawn.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional

from src.core.exceptions import InvariantViolationError
from src.engine.board import Board
from src.engine.location import Location
from src.engine.pieces import PIECE_TO_FEN, Piece, PieceType


class MoveKind(Enum):
    REGULAR = auto()
    CAPTURE = auto()
    PAWN_PUSH = auto()
    PAWN_DOUBLE_PUSH = auto()
    PROMOTION = auto()
    EN_PASSANT = auto()
    KING_SIDE_CASTLE = auto()
    QUEEN_SIDE_CASTLE = auto()
    NULL = auto()


CASTLING_KINDS = (MoveKind.KING_SIDE_CASTLE, MoveKind.QUEEN_SIDE_CASTLE)


@dataclass(frozen=True)
class Move:
    """
    A move only makes sense for the board it was generated from, so it keeps a reference to it.
    That reference does not take part in equality: moves can be collected in sets and compared between boards.
    """

    kind: MoveKind
    board: Optional[Board] = field(compare=False, repr=False)
    moved_piece: Optional[Piece]
    destination: Optional[Location]
    captured_piece: Optional[Piece] = None
    promotion: Optional[PieceType] = None
    castled_rook: Optional[Piece] = None
    rook_destination: Optional[Location] = None

    # --- CONSTRUCTION ---
    @classmethod
    def regular(cls, board: Board, piece: Piece, destination: Location) -> Move:
        return cls(MoveKind.REGULAR, board, piece, destination)

    @classmethod
    def capture(cls, board: Board, piece: Piece, destination: Location, captured: Piece) -> Move:
        return cls(MoveKind.CAPTURE, board, piece, destination, captured_piece=captured)

    @classmethod
    def pawn_push(cls, board: Board, pawn: Piece, destination: Location) -> Move:
        return cls(MoveKind.PAWN_PUSH, board, pawn, destination)

    @classmethod
    def pawn_double_push(cls, board: Board, pawn: Piece, destination: Location) -> Move:
        return cls(MoveKind.PAWN_DOUBLE_PUSH, board, pawn, destination)

    @classmethod
    def promotion_move(
        cls,
        board: Board,
        pawn: Piece,
        destination: Location,
        promote_to: PieceType,
        captured: Optional[Piece] = None,
    ) -> Move:
        return cls(
            MoveKind.PROMOTION,
            board,
            pawn,
            destination,
            captured_piece=captured,
            promotion=promote_to,
        )

    @classmethod
    def en_passant(cls, board: Board, pawn: Piece, destination: Location, captured: Piece) -> Move:
        return cls(MoveKind.EN_PASSANT, board, pawn, destination, captured_piece=captured)

    @classmethod
    def castle(
        cls,
        board: Board,
        king: Piece,
        destination: Location,
        rook: Piece,
        rook_destination: Location,
        king_side: bool,
    ) -> Move:
        kind = MoveKind.KING_SIDE_CASTLE if king_side else MoveKind.QUEEN_SIDE_CASTLE
        return cls(
            kind,
            board,
            king,
            destination,
            castled_rook=rook,
            rook_destination=rook_destination,
        )

    # --- PROPERTIES ---
    @property
    def source(self) -> Location:
        return self._moved().location

    @property
    def is_capture(self) -> bool:
        return self.captured_piece is not None

    @property
    def is_castling(self) -> bool:
        return self.kind in CASTLING_KINDS

    @property
    def landed_piece(self) -> Piece:
        """The value of the moved piece once it stands on its destination."""
        moved, destination = self._moved(), self._destination()
        if self.kind is MoveKind.PROMOTION:
            # for the type checker: promotion moves are always created with a choice
            assert self.promotion is not None
            return moved.promoted_to(self.promotion, destination)
        return moved.moved_to(destination)

    # --- EXECUTION ---
    def execute(self) -> Board:
        """
        Build the board that follows this move
        ----

        1. Copy the mover's pieces, except the moved piece (and the castled rook)
        2. Copy the opponent's pieces, except a captured piece
        3. Place the moved piece on its destination (or the piece it promoted into)
        4. Castling? Place the rook on its new square
        5. Double pawn push? Record the pawn as the new en passant pawn. Any other move clears it.
        6. Hand the turn to the opponent
        """
        if self.kind is MoveKind.NULL:
            raise InvariantViolationError("The null move cannot be executed.")

        board, moved = self._board(), self._moved()
        mover = board.to_move
        if moved.alliance is not mover:
            raise InvariantViolationError(
                f"{moved!r} cannot move when it is {mover}'s turn."
            )

        builder = board.derive()
        left_behind = {moved, self.castled_rook}
        builder.place_all(
            [piece for piece in board.active_pieces(mover) if piece not in left_behind]
        )
        builder.place_all(
            [
                piece
                for piece in board.active_pieces(mover.opponent)
                if piece != self.captured_piece
            ]
        )

        landed = self.landed_piece
        builder.place(landed)

        if self.is_castling:
            # for the type checker: castling moves are always created with a rook
            assert self.castled_rook is not None and self.rook_destination is not None
            builder.place(self.castled_rook.moved_to(self.rook_destination))

        if self.kind is MoveKind.PAWN_DOUBLE_PUSH:
            builder.set_en_passant_pawn(landed)

        builder.set_mover(mover.opponent)
        return builder.build()

    # --- NOTATION ---
    def to_uci(self) -> str:
        """
        Universal Chess Interface:
        <from_square><to_square>[promotion letter], ex. "e2e4", "e7e8q". Castling is written as the king's move.

        With a random back rank the king's target can also be reached by a plain king step (king b1, rook a1:
        both go to c1), or be the king's own square. Game.make_move() reads such a target as the plain step,
        so enter that castling move as the king moving onto its rook instead ("b1a1").
        """
        if self.kind is MoveKind.NULL:
            return "0000"
        promotion = PIECE_TO_FEN[self.promotion] if self.promotion else ""
        return f"{self.source}{self._destination()}{promotion}"

    def __str__(self) -> str:
        if self.kind is MoveKind.NULL:
            return "--"
        if self.kind is MoveKind.KING_SIDE_CASTLE:
            return "O-O"
        if self.kind is MoveKind.QUEEN_SIDE_CASTLE:
            return "O-O-O"

        moved, destination = self._moved(), self._destination()
        if moved.type is PieceType.PAWN:
            text = f"{self.source.to_algebraic()[0]}x{destination}" if self.is_capture else str(destination)
            if self.promotion:
                text += f"={PIECE_TO_FEN[self.promotion].upper()}"
            return text
        return f"{moved}{'x' if self.is_capture else ''}{destination}"

    # --- PRIVATE HELPERS (the null move carries none of these) ---
    def _board(self) -> Board:
        if self.board is None:
            raise InvariantViolationError(f"{self.kind.name} move without a board.")
        return self.board

    def _moved(self) -> Piece:
        if self.moved_piece is None:
            raise InvariantViolationError(f"{self.kind.name} move without a moved piece.")
        return self.moved_piece

    def _destination(self) -> Location:
        if self.destination is None:
            raise InvariantViolationError(f"{self.kind.name} move without a destination.")
        return self.destination


# Sentinel for "no move found". Exists to be compared against, never to be executed.
NULL_MOVE = Move(MoveKind.NULL, board=None, moved_piece=None, destination=None)
