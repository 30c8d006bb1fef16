"""Board query adapter over python-chess.

The metrics never parse FEN themselves. They receive a chess.Board from
parse_position() and use with_turn() when they need move generation for
the side that is not on move.
"""

import logging

import chess

__all__ = [
    "InvalidPositionError",
    "parse_position",
    "with_turn",
    "relative_rank",
    "in_enemy_half",
    "iter_pieces",
]

logger = logging.getLogger(__name__)

# Positions that decode but leave King Safety (and the notion of a side)
# undefined are rejected even in lenient mode.
_KING_PROBLEMS = (
    chess.STATUS_NO_WHITE_KING
    | chess.STATUS_NO_BLACK_KING
    | chess.STATUS_TOO_MANY_KINGS
)


class InvalidPositionError(ValueError):
    """The FEN could not be decoded into a usable position."""


def parse_position(fen: str, *, strict: bool = False) -> chess.Board:
    try:
        board = chess.Board(fen)
    except ValueError as e:
        logger.debug("Rejected FEN %r: %s", fen, e)
        raise InvalidPositionError(str(e)) from e

    status = board.status()
    problems = status if strict else status & _KING_PROBLEMS
    if problems:
        logger.debug("Rejected FEN %r: status %s", fen, status)
        raise InvalidPositionError(f"invalid position (status {status!r})")
    return board


def with_turn(board: chess.Board, color: chess.Color) -> chess.Board:
    """Return a copy of board with color to move. The input is not touched."""
    variant = board.copy(stack=False)
    if variant.turn != color:
        variant.turn = color
        # An en passant target only exists for the side that was on move
        variant.ep_square = None
    return variant


def relative_rank(rank: int, color: chess.Color) -> int:
    """Zero-based rank seen from color's own back rank (0 = home rank)."""
    return rank if color == chess.WHITE else 7 - rank


def in_enemy_half(square: chess.Square, color: chess.Color) -> bool:
    return relative_rank(chess.square_rank(square), color) >= 4


def iter_pieces(board: chess.Board, color: chess.Color):
    """Yield (square, piece) for every piece of color, a1 to h8."""
    for sq in chess.SquareSet(board.occupied_co[color]):
        yield sq, board.piece_at(sq)
