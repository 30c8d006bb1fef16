"""King safety: pawn shield, placement, king mobility, enemy pressure."""

from dataclasses import dataclass

import chess

from kmaps.analysis.constants import clamp
from kmaps.position import relative_rank

__all__ = [
    "KingSafety",
    "analyze_king_safety",
    "king_safety_score",
]

SHIELD_WEIGHT = 0.45
PLACEMENT_WEIGHT = 0.3
CASTLED_PLACEMENT = 0.35
MOBILITY_WEIGHT = 0.05
PRESSURE_CAP = 0.25
PRESSURE_RADIUS = 3

# Two of the three shield squares
_INTACT_SHIELD = 0.66

_CASTLED_SQUARES = {
    chess.WHITE: (chess.G1, chess.C1),
    chess.BLACK: (chess.G8, chess.C8),
}

_PRESSURE_WEIGHTS = {
    chess.QUEEN: 3.0,
    chess.ROOK: 2.0,
    chess.BISHOP: 1.5,
    chess.KNIGHT: 1.2,
    chess.PAWN: 0.8,
}

# Returned when the side has no king on the board
NEUTRAL_SCORE = 0.5


@dataclass
class KingSafety:
    king_square: str | None
    castled: bool = False
    shield: float = 0.0      # 0..1, friendly pawns directly in front
    placement: float = 0.0   # already weighted
    mobility: float = 0.0    # 0..1, empty neighbouring squares
    pressure: float = 0.0    # penalty, 0..PRESSURE_CAP
    score: float = NEUTRAL_SCORE


def _shield_fraction(board: chess.Board, color: chess.Color, king_file: int, king_rank: int) -> float:
    front_rank = king_rank + (1 if color == chess.WHITE else -1)
    if not 0 <= front_rank <= 7:
        return 0.0
    count = 0
    for df in (-1, 0, 1):
        # Clamped, not skipped: on an edge file the king's own file is counted twice
        f = max(0, min(7, king_file + df))
        piece = board.piece_at(chess.square(f, front_rank))
        if piece and piece.piece_type == chess.PAWN and piece.color == color:
            count += 1
    return count / 3


def _free_neighbours(board: chess.Board, king_sq: chess.Square) -> int:
    return sum(1 for sq in chess.SquareSet(chess.BB_KING_ATTACKS[king_sq]) if board.piece_at(sq) is None)


def _enemy_pressure(board: chess.Board, color: chess.Color, king_file: int, king_rank: int) -> float:
    pressure = 0.0
    for dr in range(-PRESSURE_RADIUS, PRESSURE_RADIUS + 1):
        for df in range(-PRESSURE_RADIUS, PRESSURE_RADIUS + 1):
            if dr == 0 and df == 0:
                continue
            r, f = king_rank + dr, king_file + df
            if not (0 <= r <= 7 and 0 <= f <= 7):
                continue
            piece = board.piece_at(chess.square(f, r))
            if piece and piece.color != color:
                weight = _PRESSURE_WEIGHTS.get(piece.piece_type, 1.0)
                pressure += weight / (abs(dr) + abs(df))
    return min(pressure / 10, PRESSURE_CAP)


def analyze_king_safety(board: chess.Board, color: chess.Color) -> KingSafety:
    king_sq = board.king(color)
    if king_sq is None:
        return KingSafety(king_square=None)

    king_file = chess.square_file(king_sq)
    king_rank = chess.square_rank(king_sq)

    shield = _shield_fraction(board, color, king_file, king_rank)

    castled = king_sq in _CASTLED_SQUARES[color]
    depth = 1 - relative_rank(king_rank, color) / 7
    placement = depth * PLACEMENT_WEIGHT
    if castled and shield >= _INTACT_SHIELD:
        placement = CASTLED_PLACEMENT

    mobility = _free_neighbours(board, king_sq) / 8
    pressure = _enemy_pressure(board, color, king_file, king_rank)

    raw = shield * SHIELD_WEIGHT + placement + mobility * MOBILITY_WEIGHT - pressure
    base = clamp(raw)
    # Convex blend: damps low scores, leaves high ones nearly unchanged
    score = clamp(0.7 * base + 0.3 * base * base)

    return KingSafety(
        king_square=chess.square_name(king_sq),
        castled=castled,
        shield=shield,
        placement=placement,
        mobility=mobility,
        pressure=pressure,
        score=score,
    )


def king_safety_score(board: chess.Board, color: chess.Color) -> float:
    return analyze_king_safety(board, color).score
