"""
A Player is one side's view of a Board: its pieces, its legal moves and whether it is in (check)mate.

Nothing is stored beyond the Board itself. A new Board means a new Player.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from functools import cached_property

from src.engine.alliance import Alliance
from src.engine.board import Board
from src.engine.location import Location
from src.engine.movement import attacked_locations, is_attacked, pseudo_legal_moves
from src.engine.moves import Move
from src.engine.pieces import Piece


class PlayerStatus(Enum):
    NORMAL = auto()
    CHECK = auto()
    CHECKMATE = auto()
    STALEMATE = auto()


@dataclass(frozen=True)
class Player:
    board: Board
    alliance: Alliance

    @classmethod
    def to_move(cls, board: Board) -> Player:
        return cls(board, board.to_move)

    @property
    def opponent(self) -> Player:
        return Player(self.board, self.alliance.opponent)

    @property
    def active_pieces(self) -> list[Piece]:
        return self.board.active_pieces(self.alliance)

    @property
    def king(self) -> Piece:
        return self.board.king(self.alliance)

    @property
    def is_to_move(self) -> bool:
        return self.board.to_move is self.alliance

    @cached_property
    def legal_moves(self) -> frozenset[Move]:
        """
        List of legal moves for this player
        ----

        1. generate the pseudo-legal moves of all pieces (castling, en passant and promotions included)
        2. remove illegal options --> a move that would put you in check or you are in check and the move does not get you out of it.

        For the player waiting for its turn: the moves it would have if it were to move in this position
        (no en passant, as the pawn that just advanced two squares is its own).
        """
        board = self.board if self.is_to_move else self._as_mover()
        return frozenset(
            move
            for move in pseudo_legal_moves(board, self.alliance)
            if not leaves_king_attacked(move)
        )

    def _as_mover(self) -> Board:
        """The same position, but with this player to move."""
        return self.board.derive().place_all(list(self.board.pieces.values())).set_mover(self.alliance).build()

    @cached_property
    def opponent_attacks(self) -> frozenset[Location]:
        """Every square the opponent attacks on this board."""
        return frozenset(attacked_locations(self.board, self.alliance.opponent))

    @property
    def is_in_check(self) -> bool:
        return is_attacked(self.king.location, self.alliance.opponent, self.board)

    @property
    def is_in_checkmate(self) -> bool:
        return self.is_in_check and not self.legal_moves

    @property
    def is_in_stalemate(self) -> bool:
        return not self.is_in_check and not self.legal_moves

    @property
    def status(self) -> PlayerStatus:
        in_check = self.is_in_check
        has_moves = bool(self.legal_moves)
        if in_check:
            return PlayerStatus.CHECK if has_moves else PlayerStatus.CHECKMATE
        return PlayerStatus.NORMAL if has_moves else PlayerStatus.STALEMATE


def leaves_king_attacked(move: Move) -> bool:
    """Return True if the mover's king can be taken on the board the move leads to"""
    # for the type checker: only real moves get generated
    assert move.board is not None
    mover = move.board.to_move
    after = move.execute()
    return is_attacked(after.king(mover).location, mover.opponent, after)


def legal_moves(board: Board) -> frozenset[Move]:
    """Legal moves of the side to move."""
    return Player.to_move(board).legal_moves
