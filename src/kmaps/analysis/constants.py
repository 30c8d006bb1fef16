"""Constants and small utility functions shared across metric submodules."""

import chess

__all__ = [
    "CENTER_SQUARES",
    "MAX_SIDE_MATERIAL",
    "METRIC_NAMES",
    "clamp",
    "get_piece_value",
    "_side_label",
]

# d4, e4, d5, e5
CENTER_SQUARES = [chess.D4, chess.E4, chess.D5, chess.E5]

# 8*1 + 2*3 + 2*3 + 2*5 + 9: everything but the king at the start of a game.
MAX_SIDE_MATERIAL = 39

# Output order of the aggregate result. Consumers index into it.
METRIC_NAMES = ("Material", "King Safety", "Activity", "Pawn Structure", "Space")


def clamp(x: float) -> float:
    """Restrict x to [0, 1]."""
    return max(0.0, min(1.0, x))


def get_piece_value(piece_type: chess.PieceType, *, king=None) -> int:
    """Get standard piece value. King value must be explicitly provided.

    king=None (default) causes TypeError if caller forgets to handle king,
    which forces explicit handling at every call site.
    """
    return {
        chess.PAWN: 1, chess.KNIGHT: 3, chess.BISHOP: 3,
        chess.ROOK: 5, chess.QUEEN: 9, chess.KING: king,
    }[piece_type]


def _side_label(color: chess.Color) -> str:
    """Convert chess.Color bool to the result-record key."""
    return "White" if color == chess.WHITE else "Black"
