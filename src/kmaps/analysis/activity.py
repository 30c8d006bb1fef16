"""Piece activity: non-pawn mobility plus centralized minor pieces."""

from dataclasses import dataclass, field

import chess

from kmaps.analysis.constants import CENTER_SQUARES, clamp
from kmaps.position import with_turn

__all__ = [
    "ActivityInfo",
    "analyze_activity",
    "activity_score",
]

# Practical ceiling on non-pawn legal moves in open middlegames
MOBILITY_CAP = 40
CENTRAL_MINOR_BONUS = 0.1


@dataclass
class ActivityInfo:
    non_pawn_moves: int
    central_minors: list[str] = field(default_factory=list)  # square names
    score: float = 0.0


def analyze_activity(board: chess.Board, color: chess.Color) -> ActivityInfo:
    variant = with_turn(board, color)
    non_pawn = sum(
        1 for move in variant.legal_moves
        if variant.piece_type_at(move.from_square) != chess.PAWN
    )

    central = [
        chess.square_name(sq)
        for sq in CENTER_SQUARES
        if (p := board.piece_at(sq)) is not None
        and p.color == color
        and p.piece_type in (chess.KNIGHT, chess.BISHOP)
    ]

    score = min(non_pawn / MOBILITY_CAP, 1.0) + CENTRAL_MINOR_BONUS * len(central)
    return ActivityInfo(non_pawn_moves=non_pawn, central_minors=central, score=clamp(score))


def activity_score(board: chess.Board, color: chess.Color) -> float:
    return analyze_activity(board, color).score
