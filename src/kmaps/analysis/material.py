"""Material balance, normalized to a zero-sum pair of scores."""

from dataclasses import dataclass

import chess

from kmaps.analysis.constants import MAX_SIDE_MATERIAL, clamp, get_piece_value

__all__ = [
    "MaterialBalance",
    "material_total",
    "material_scores",
]

# Full symmetric range of the signed difference: -39 .. +39
_MATERIAL_RANGE = 2 * MAX_SIDE_MATERIAL


@dataclass
class MaterialBalance:
    white_total: int
    black_total: int
    imbalance: int  # white_total - black_total
    white_score: float
    black_score: float


def material_total(board: chess.Board, color: chess.Color) -> int:
    return sum(
        get_piece_value(pt, king=0) * len(board.pieces(pt, color))
        for pt in chess.PIECE_TYPES
    )


def material_scores(board: chess.Board) -> MaterialBalance:
    """Score both sides at once.

    Equal material maps to 0.5 each and the two scores sum to 1. Clamping
    only engages past 39 points for one side, which needs extra pieces
    from promotion or a composed position.
    """
    wt = material_total(board, chess.WHITE)
    bt = material_total(board, chess.BLACK)
    diff = wt - bt
    return MaterialBalance(
        white_total=wt,
        black_total=bt,
        imbalance=diff,
        white_score=clamp((diff + MAX_SIDE_MATERIAL) / _MATERIAL_RANGE),
        black_score=clamp((-diff + MAX_SIDE_MATERIAL) / _MATERIAL_RANGE),
    )
