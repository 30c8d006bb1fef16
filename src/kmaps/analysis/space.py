"""Space: reach into the enemy half, presence there, central foothold."""

from dataclasses import dataclass, field

import chess

from kmaps.analysis.constants import clamp
from kmaps.position import in_enemy_half, iter_pieces, with_turn

__all__ = [
    "SpaceInfo",
    "analyze_space",
    "space_score",
]

REACH_WEIGHT = 0.55
PRESENCE_WEIGHT = 0.30
FOOTHOLD_WEIGHT = 0.15

# Empirical maximum of distinct enemy-half destinations
REACH_CAP = 28

_PRESENCE_WEIGHTS = {
    chess.PAWN: 1.0,
    chess.KNIGHT: 0.8,
    chess.BISHOP: 0.8,
    chess.ROOK: 0.6,
    chess.QUEEN: 0.5,
    chess.KING: 0.2,
}

_FOOTHOLD_FILES = range(2, 6)  # c, d, e, f


@dataclass
class SpaceInfo:
    reach_squares: list[str] = field(default_factory=list)
    reach: float = 0.0
    presence: float = 0.0
    foothold: float = 0.0
    score: float = 0.0


def _reach_squares(board: chess.Board, color: chess.Color) -> set[chess.Square]:
    variant = with_turn(board, color)
    return {
        move.to_square
        for move in variant.legal_moves
        if variant.piece_type_at(move.from_square) != chess.KING
        and in_enemy_half(move.to_square, color)
    }


def _presence(board: chess.Board, color: chess.Color) -> float:
    total = 0.0
    advanced = 0.0
    for sq, piece in iter_pieces(board, color):
        w = _PRESENCE_WEIGHTS.get(piece.piece_type, 0.5)
        total += w
        if in_enemy_half(sq, color):
            advanced += w
    return advanced / total if total > 0 else 0.0


def _foothold(board: chess.Board, color: chess.Color) -> float:
    central = [sq for sq, _ in iter_pieces(board, color) if chess.square_file(sq) in _FOOTHOLD_FILES]
    if not central:
        return 0.0
    return sum(1 for sq in central if in_enemy_half(sq, color)) / len(central)


def analyze_space(board: chess.Board, color: chess.Color) -> SpaceInfo:
    squares = _reach_squares(board, color)
    reach = min(len(squares) / REACH_CAP, 1.0)
    presence = _presence(board, color)
    foothold = _foothold(board, color)
    return SpaceInfo(
        reach_squares=sorted(chess.square_name(sq) for sq in squares),
        reach=reach,
        presence=presence,
        foothold=foothold,
        score=clamp(REACH_WEIGHT * reach + PRESENCE_WEIGHT * presence + FOOTHOLD_WEIGHT * foothold),
    )


def space_score(board: chess.Board, color: chess.Color) -> float:
    return analyze_space(board, color).score
