"""Pure-function K-MAPS metric package.

Every metric takes a chess.Board (plus a colour where the metric is
asymmetric) and returns scores in [0, 1]. No engine, no side effects
beyond the optional pawn structure cache.
"""

import logging
from dataclasses import dataclass

import chess

# Re-export everything so `from kmaps.analysis import X` works
from kmaps.analysis.constants import *  # noqa: F401,F403
from kmaps.analysis.cache import *  # noqa: F401,F403
from kmaps.analysis.material import *  # noqa: F401,F403
from kmaps.analysis.king_safety import *  # noqa: F401,F403
from kmaps.analysis.activity import *  # noqa: F401,F403
from kmaps.analysis.pawns import *  # noqa: F401,F403
from kmaps.analysis.space import *  # noqa: F401,F403

# Explicit imports for orchestration logic
from kmaps.analysis.constants import METRIC_NAMES, _side_label
from kmaps.analysis.cache import PawnStructureCache, get_default_cache
from kmaps.analysis.material import material_scores
from kmaps.analysis.king_safety import king_safety_score
from kmaps.analysis.activity import activity_score
from kmaps.analysis.pawns import pawn_structure_score
from kmaps.analysis.space import space_score
from kmaps.config import Settings, get_settings
from kmaps.position import InvalidPositionError, parse_position

logger = logging.getLogger(__name__)

# Sentinel: "use the process default cache"
DEFAULT_CACHE = object()


@dataclass
class MetricScore:
    metric: str
    white: float
    black: float

    def as_dict(self) -> dict:
        return {
            "metric": self.metric,
            _side_label(chess.WHITE): self.white,
            _side_label(chess.BLACK): self.black,
        }


def _resolve_cache(cache, settings: Settings | None = None) -> PawnStructureCache | None:
    if cache is not DEFAULT_CACHE:
        return cache
    settings = settings or get_settings()
    return get_default_cache() if settings.pawn_cache_enabled else None


def evaluate(board: chess.Board, cache=DEFAULT_CACHE) -> list[MetricScore]:
    """All five metrics for both sides, in METRIC_NAMES order."""
    pawn_cache = _resolve_cache(cache)
    material = material_scores(board)
    scores = [
        (material.white_score, material.black_score),
        (king_safety_score(board, chess.WHITE), king_safety_score(board, chess.BLACK)),
        (activity_score(board, chess.WHITE), activity_score(board, chess.BLACK)),
        (
            pawn_structure_score(board, chess.WHITE, pawn_cache),
            pawn_structure_score(board, chess.BLACK, pawn_cache),
        ),
        (space_score(board, chess.WHITE), space_score(board, chess.BLACK)),
    ]
    return [MetricScore(name, w, b) for name, (w, b) in zip(METRIC_NAMES, scores)]


def compute_kmaps(fen, cache=DEFAULT_CACHE, *, strict: bool | None = None) -> list[dict]:
    """K-MAPS records for a FEN, or [] if it does not decode.

    Each record is {"metric": name, "White": score, "Black": score}.
    Nothing is raised for bad input.
    """
    if not fen or not isinstance(fen, str):
        return []

    settings = get_settings()
    if strict is None:
        strict = settings.strict_validation
    try:
        board = parse_position(fen, strict=strict)
    except InvalidPositionError as e:
        logger.info("Invalid FEN %r: %s", fen, e)
        return []

    return [m.as_dict() for m in evaluate(board, _resolve_cache(cache, settings))]
