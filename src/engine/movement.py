"""
Geometry/Base movement and capturing/attacking rules

Key idea: Use strategy pattern to define the pseudo-legal move sets for each piece type.

Legality (not leaving your own king in check) is checked later by the Player.
"""

import logging
from typing import Callable

from src.engine.alliance import Alliance
from src.engine.board import Board
from src.engine.castling import CastlingSide, castling_squares
from src.engine.location import Location
from src.engine.moves import Move
from src.engine.pieces import (
    DIAGONALS,
    KNIGHT_JUMPS,
    PIECE_DIRECTIONS,
    PROMOTION_OPTIONS,
    STRAIGHTS,
    Piece,
    PieceType,
    Vector,
)

logger = logging.getLogger(__name__)


# --- MOVEMENT RULES ---
def raycasting_move(piece: Piece, board: Board) -> list[Move]:
    """
    Raycasting algorithm
    -----

    ---
    The main trick we use to check the 'line of sight of a piece'.
    We define move directions and move along them until we hit another piece or
    the edge of the board.
    An own piece blocks the ray, an opponent's piece blocks it as well but can be captured.
    """
    moves: list[Move] = []
    for dx, dy in piece.directions:
        target = piece.location.offset(dx, dy)
        while target is not None:
            occupant = board.piece(target)
            if occupant is not None:
                # only need to add the first occupied square found if it is the opponent's: then it can be captured.
                if occupant.is_enemy_of(piece):
                    moves.append(Move.capture(board, piece, target, occupant))
                break

            moves.append(Move.regular(board, piece, target))
            target = target.offset(dx, dy)
    return moves


def single_step_move(piece: Piece, board: Board) -> list[Move]:
    """Raycasting is for sliding pieces. This is the equivalent for kings and knights that just move a single step along a direction"""
    moves: list[Move] = []
    for dx, dy in piece.directions:
        target = piece.location.offset(dx, dy)
        if target is None:
            continue

        occupant = board.piece(target)
        if occupant is None:
            moves.append(Move.regular(board, piece, target))
        elif occupant.is_enemy_of(piece):
            moves.append(Move.capture(board, piece, target, occupant))
    return moves


def candidate_pawn_moves(pawn: Piece, board: Board) -> list[Move]:
    """
    A pawn:
    - moves by a single square forward, onto an empty square.
    - It can move by two in their first move (so when on their starting rank), if both squares are empty.
    - takes diagonally, including en passant.
    - reaching the last rank, it promotes: one move per piece it can become.
    """
    moves: list[Move] = []
    for dx, dy in pawn.directions:
        target = pawn.location.offset(dx, dy)
        if target is None:
            continue

        occupant = board.piece(target)
        if dx == 0:
            if occupant is not None:
                continue
            if pawn.alliance.is_promotion_rank(target.y):
                moves.extend(promotion_moves(pawn, board, target))
                continue
            moves.append(Move.pawn_push(board, pawn, target))

            double_push_target = target.offset(0, dy)
            if (
                _is_unmoved_pawn(pawn)
                and double_push_target is not None
                and not board.is_occupied(double_push_target)
            ):
                moves.append(Move.pawn_double_push(board, pawn, double_push_target))

        elif occupant is not None:
            if not occupant.is_enemy_of(pawn):
                continue
            if pawn.alliance.is_promotion_rank(target.y):
                moves.extend(promotion_moves(pawn, board, target, captured=occupant))
                continue
            moves.append(Move.capture(board, pawn, target, occupant))

        elif _can_take_en_passant(pawn, dx, board):
            # for the type checker: _can_take_en_passant() made sure there is one
            en_passant_pawn = board.en_passant_pawn
            assert en_passant_pawn is not None
            moves.append(Move.en_passant(board, pawn, target, en_passant_pawn))
    return moves


def _is_unmoved_pawn(pawn: Piece) -> bool:
    return not pawn.has_moved and pawn.location.y == pawn.alliance.pawn_rank


def _can_take_en_passant(pawn: Piece, dx: int, board: Board) -> bool:
    """
    The board's en passant pawn (if any) must belong to the opponent, stand on the same rank as the moving pawn
    and sit right next to it, on the side of the diagonal we are looking at.
    """
    en_passant_pawn = board.en_passant_pawn
    if en_passant_pawn is None or not en_passant_pawn.is_enemy_of(pawn):
        return False
    return (
        en_passant_pawn.location.y == pawn.location.y
        and en_passant_pawn.location.x - pawn.location.x == dx
    )


def promotion_moves(
    pawn: Piece, board: Board, target: Location, captured: Piece | None = None
) -> list[Move]:
    """Return one move for every piece type the pawn can promote into."""
    return [
        Move.promotion_move(board, pawn, target, piece_type, captured)
        for piece_type in PROMOTION_OPTIONS
    ]


def candidate_king_moves(king: Piece, board: Board) -> list[Move]:
    """
    The king can move by a single square at the time.

    Castling is modelled as a special king move.
    """
    return single_step_move(king, board) + castling_moves(king, board)


def castling_moves(king: Piece, board: Board) -> list[Move]:
    """
    **you are allowed to castle if**

    * Your king has not moved yet.
    * The castling rook is still on its starting square and has not moved either.
    * The squares king and rook travel over are empty (apart from the king and rook).
    * Neither the king's square, nor any square it passes through or lands on, is under attack.
    """
    if king.has_moved or king.location.y != king.alliance.back_rank:
        return []

    opponent = king.alliance.opponent
    # Cannot castle out of a check.
    if is_attacked(king.location, opponent, board):
        return []

    moves: list[Move] = []
    for side in CastlingSide:
        squares = castling_squares(board, king, side)
        if squares is None:
            continue

        rook = board.piece(squares.rook_from)
        if (
            rook is None
            or rook.type is not PieceType.ROOK
            or rook.alliance is not king.alliance
            or rook.has_moved
        ):
            continue

        if board.is_any_occupied(list(squares.squares_to_clear)):
            continue

        if any(is_attacked(square, opponent, board) for square in squares.king_path):
            continue

        moves.append(
            Move.castle(
                board,
                king,
                squares.king_to,
                rook,
                squares.rook_to,
                king_side=side is CastlingSide.KING_SIDE,
            )
        )
    return moves


# -- STRATEGY PATTERN: MOVEMENT RULES ---
CandidateMovesFn = Callable[[Piece, Board], list[Move]]
MOVEMENT_RULES: dict[PieceType, CandidateMovesFn] = {
    PieceType.PAWN: candidate_pawn_moves,
    PieceType.KNIGHT: single_step_move,
    PieceType.BISHOP: raycasting_move,
    PieceType.ROOK: raycasting_move,
    PieceType.QUEEN: raycasting_move,
    PieceType.KING: candidate_king_moves,
}


def candidate_moves(piece: Piece, board: Board) -> list[Move]:
    """Pseudo-legal moves of a single piece."""
    return MOVEMENT_RULES[piece.type](piece, board)


def pseudo_legal_moves(board: Board, alliance: Alliance) -> list[Move]:
    """Before knowing the set of legal moves, we collect the candidate moves of every piece of the alliance."""
    moves: list[Move] = []
    for piece in board.active_pieces(alliance):
        moves.extend(candidate_moves(piece, board))
    logger.debug("%d pseudo-legal moves for %s", len(moves), alliance)
    return moves


# --- CAPTURING RULES / ATTACKING RULES ---
def raycasting_attack(
    location: Location,
    by_alliance: Alliance,
    by_piece_types: tuple[PieceType, ...],
    board: Board,
    directions: tuple[Vector, ...],
) -> bool:
    """
    Raycasting algorithm for attacks.
    ---

    ---
    Similar to raycasting moves.
    However, where `raycasting_move()` determines
    _"What is the line-of-sight of the piece standing on the specified square?"_

    This function determines:
    _"Is the specified square in the line-of-sight of a piece of the specified alliance and that
    is allowed to move along the given direction?"_

    ---
    Returns TRUE if the first piece encountered is a piece of the attacking alliance and one of the specified types.
    """
    for dx, dy in directions:
        target = location.offset(dx, dy)
        while target is not None:
            piece_found = board.piece(target)
            if piece_found is not None:
                if piece_found.alliance is by_alliance and piece_found.type in by_piece_types:
                    return True
                break
            target = target.offset(dx, dy)
    return False


def single_step_attack(
    location: Location,
    by_alliance: Alliance,
    by_piece_type: PieceType,
    board: Board,
    deltas: tuple[Vector, ...],
) -> bool:
    """
    Raycasting is for sliding pieces. This is the equivalent for pawns, kings, and knights that just can move a single step along a direction.
    """
    for dx, dy in deltas:
        target = location.offset(dx, dy)
        if target is None:
            continue
        piece_found = board.piece(target)
        if (
            piece_found is not None
            and piece_found.alliance is by_alliance
            and piece_found.type is by_piece_type
        ):
            return True
    return False


def is_attacked_by_pawn(location: Location, by_alliance: Alliance, board: Board) -> bool:
    """
    Pawns take diagonally
    ----

    NOTE: Pawn moves are not symmetric, so to check IF a light pawn could take on your square -->
    Must look one rank DOWN the board (opposite to the direction the attacking pawns move in).
    """
    dy = by_alliance.opposite_direction
    return single_step_attack(
        location, by_alliance, PieceType.PAWN, board, ((1, dy), (-1, dy))
    )


def is_attacked_by_knight(location: Location, by_alliance: Alliance, board: Board) -> bool:
    return single_step_attack(location, by_alliance, PieceType.KNIGHT, board, KNIGHT_JUMPS)


def is_attacked_along_diagonal(location: Location, by_alliance: Alliance, board: Board) -> bool:
    """Bishops and Queens"""
    return raycasting_attack(
        location, by_alliance, (PieceType.BISHOP, PieceType.QUEEN), board, DIAGONALS
    )


def is_attacked_along_straight(location: Location, by_alliance: Alliance, board: Board) -> bool:
    """Rooks and Queens"""
    return raycasting_attack(
        location, by_alliance, (PieceType.ROOK, PieceType.QUEEN), board, STRAIGHTS
    )


def is_attacked_by_king(location: Location, by_alliance: Alliance, board: Board) -> bool:
    return single_step_attack(
        location, by_alliance, PieceType.KING, board, PIECE_DIRECTIONS[PieceType.KING]
    )


# --- STRATEGY PATTERN: ATTACKING RULES ---
IsAttackedFn = Callable[[Location, Alliance, Board], bool]
ATTACK_RULES: tuple[IsAttackedFn, ...] = (
    is_attacked_by_pawn,
    is_attacked_by_knight,
    is_attacked_along_diagonal,
    is_attacked_along_straight,
    is_attacked_by_king,
)


def is_attacked(location: Location, by_alliance: Alliance, board: Board) -> bool:
    """Could a piece of the given alliance take on this square (if an opponent's piece stood there)?"""
    return any(rule(location, by_alliance, board) for rule in ATTACK_RULES)


def pawn_attacks(pawn: Piece) -> list[Location]:
    """The two diagonal squares in front of a pawn. The only squares a pawn attacks, even though it moves straight."""
    return [
        target
        for dx in (-1, 1)
        if (target := pawn.location.offset(dx, pawn.alliance.direction)) is not None
    ]


def attacked_locations(board: Board, by_alliance: Alliance) -> set[Location]:
    """
    The attack set of an alliance: every square one of its pieces has a pseudo-legal move onto.
    Pawns only count their diagonals. Castling never attacks anything.
    """
    attacked: set[Location] = set()
    for piece in board.active_pieces(by_alliance):
        if piece.type is PieceType.PAWN:
            attacked.update(
                target
                for target in pawn_attacks(piece)
                if not _holds_own_piece(board, target, by_alliance)
            )
            continue
        rule = single_step_move if piece.type is PieceType.KING else candidate_moves
        attacked.update(
            move.destination for move in rule(piece, board) if move.destination is not None
        )
    return attacked


def _holds_own_piece(board: Board, location: Location, alliance: Alliance) -> bool:
    occupant = board.piece(location)
    return occupant is not None and occupant.alliance is alliance
