"""Pawn structure cache keyed by the pawn layout of both sides."""

import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass
from functools import lru_cache

import chess

from kmaps.config import get_settings

__all__ = [
    "PawnLayout",
    "PawnStructureCache",
    "get_default_cache",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PawnLayout:
    """Both pawn bitboards plus whatever stands directly in front of a pawn.

    The candidate passer rule reads each pawn's stop square, so a piece
    there is part of the key. Pieces anywhere else are not.
    """
    white: int
    black: int
    stops: int = 0

    @classmethod
    def of(cls, board: chess.Board) -> "PawnLayout":
        white = board.pieces_mask(chess.PAWN, chess.WHITE)
        black = board.pieces_mask(chess.PAWN, chess.BLACK)
        stop_squares = ((white << 8) & chess.BB_ALL) | (black >> 8)
        return cls(white=white, black=black, stops=board.occupied & stop_squares)


class PawnStructureCache:
    """Per-layout, per-colour pawn structure scores.

    One lock guards every read and every merge so a store for one colour
    can never drop the other colour's entry. With max_entries set, the
    least recently used layout is evicted first.
    """

    def __init__(self, max_entries: int | None = None):
        if max_entries is not None and max_entries <= 0:
            raise ValueError("max_entries must be positive or None")
        self._max_entries = max_entries
        self._entries: OrderedDict[PawnLayout, dict[chess.Color, float]] = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    @property
    def max_entries(self) -> int | None:
        return self._max_entries

    def get(self, layout: PawnLayout, color: chess.Color) -> float | None:
        with self._lock:
            entry = self._entries.get(layout)
            if entry is None or color not in entry:
                self.misses += 1
                return None
            self._entries.move_to_end(layout)
            self.hits += 1
            return entry[color]

    def store(self, layout: PawnLayout, color: chess.Color, score: float) -> None:
        with self._lock:
            entry = self._entries.setdefault(layout, {})
            entry[color] = score
            self._entries.move_to_end(layout)
            if self._max_entries is not None:
                while len(self._entries) > self._max_entries:
                    evicted, _ = self._entries.popitem(last=False)
                    logger.debug("Evicted pawn layout %s", evicted)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, layout: PawnLayout) -> bool:
        with self._lock:
            return layout in self._entries


@lru_cache(maxsize=1)
def get_default_cache() -> PawnStructureCache:
    """Process-wide cache sized from Settings, built on first use."""
    return PawnStructureCache(max_entries=get_settings().pawn_cache_max_entries)
