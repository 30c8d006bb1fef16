"""K-MAPS: explainable positional scores for chess positions."""

from kmaps.analysis import DEFAULT_CACHE, MetricScore, compute_kmaps, evaluate
from kmaps.analysis.cache import PawnStructureCache
from kmaps.position import InvalidPositionError, parse_position

__all__ = [
    "DEFAULT_CACHE",
    "InvalidPositionError",
    "MetricScore",
    "PawnStructureCache",
    "compute_kmaps",
    "evaluate",
    "parse_position",
]
