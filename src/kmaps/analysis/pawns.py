"""Pawn structure: feature detectors and the weighted structure score.

Every detector works in the evaluated side's own frame of reference:
relative rank 0 is that side's back rank and pawns advance toward 7.
Enemy pawns are mapped into the same frame, so "ahead" always means a
larger relative rank and the detectors are mirror-symmetric by
construction.
"""

import logging
from dataclasses import dataclass, field

import chess

from kmaps.analysis.cache import PawnLayout, PawnStructureCache
from kmaps.analysis.constants import clamp
from kmaps.position import relative_rank

__all__ = [
    "Pawn",
    "FileClassification",
    "PawnFeatures",
    "list_pawns",
    "count_isolated",
    "count_doubled",
    "count_islands",
    "count_passed",
    "count_candidate_passed",
    "count_backward",
    "count_hanging",
    "pawn_chains",
    "count_rams",
    "count_levers",
    "classify_files",
    "detect_majorities",
    "count_over_advanced",
    "count_central_doubled",
    "weak_squares",
    "count_weak_pawns",
    "analyze_pawn_features",
    "pawn_structure_score",
]

logger = logging.getLogger(__name__)

# Relative-rank thresholds (0 = own back rank)
HANGING_MIN_RANK = 3        # 4th rank and beyond
OVER_ADVANCED_MIN_RANK = 5  # 6th rank and beyond

QUEENSIDE_FILES = range(0, 3)  # a-c
KINGSIDE_FILES = range(5, 8)   # f-h
CENTRAL_FILES = (3, 4)         # d, e

FLANK_BONUS = 0.02


@dataclass(frozen=True)
class Pawn:
    file: int  # 0-7
    rank: int  # relative to the owner, 0-7
    square: chess.Square


@dataclass
class FileClassification:
    open: set[int]
    closed: set[int]
    # half_open[color]: files where color has no pawn and the opponent does
    half_open: dict[chess.Color, set[int]]


@dataclass
class PawnFeatures:
    total: int
    isolated: int = 0
    doubled: int = 0
    islands: int = 0
    passed: int = 0
    candidate_passed: int = 0
    backward: int = 0
    hanging: int = 0
    chains: int = 0
    chain_bases: int = 0
    rams: int = 0
    levers: int = 0
    over_advanced: int = 0
    central_doubled: int = 0
    weak_pawns: int = 0
    weak_squares: list[str] = field(default_factory=list)
    queenside_majority: bool = False
    kingside_majority: bool = False
    queenside_minority: bool = False
    kingside_minority: bool = False


@dataclass
class _PawnMap:
    """Own and enemy pawn ranks per file, both in the owner's frame."""
    own: dict[int, list[int]]
    enemy: dict[int, list[int]]

    @classmethod
    def of(cls, board: chess.Board, color: chess.Color) -> "_PawnMap":
        return cls(own=_ranks_by_file(board, color, color), enemy=_ranks_by_file(board, not color, color))

    def own_at(self, f: int, r: int) -> bool:
        return r in self.own.get(f, ())

    def enemy_at(self, f: int, r: int) -> bool:
        return r in self.enemy.get(f, ())

    def support_behind(self, f: int, r: int) -> bool:
        """A pawn on an adjacent file, behind rank r, that could advance to guard it."""
        return any(
            1 <= rr < r
            for af in (f - 1, f + 1)
            for rr in self.own.get(af, ())
        )


def _ranks_by_file(board: chess.Board, owner: chess.Color, frame: chess.Color) -> dict[int, list[int]]:
    files: dict[int, list[int]] = {}
    for sq in board.pieces(chess.PAWN, owner):
        files.setdefault(chess.square_file(sq), []).append(relative_rank(chess.square_rank(sq), frame))
    for ranks in files.values():
        ranks.sort()
    return files


def list_pawns(board: chess.Board, color: chess.Color) -> list[Pawn]:
    """color's pawns ordered from the rearmost forward, then by file."""
    pawns = [
        Pawn(file=chess.square_file(sq), rank=relative_rank(chess.square_rank(sq), color), square=sq)
        for sq in board.pieces(chess.PAWN, color)
    ]
    pawns.sort(key=lambda p: (p.rank, p.file))
    return pawns


# ---------------------------------------------------------------------------
# Detectors
# ---------------------------------------------------------------------------


def count_isolated(board: chess.Board, color: chess.Color) -> int:
    pm = _PawnMap.of(board, color)
    return sum(
        1 for p in list_pawns(board, color)
        if not pm.own.get(p.file - 1) and not pm.own.get(p.file + 1)
    )


def _count_extra(own: dict[int, list[int]], files) -> int:
    return sum(max(0, len(own.get(f, ())) - 1) for f in files)


def count_doubled(board: chess.Board, color: chess.Color) -> int:
    """Pawns beyond the first on each file (a tripled file counts 2)."""
    return _count_extra(_PawnMap.of(board, color).own, range(8))


def count_central_doubled(board: chess.Board, color: chess.Color) -> int:
    return _count_extra(_PawnMap.of(board, color).own, CENTRAL_FILES)


def count_islands(board: chess.Board, color: chess.Color) -> int:
    occupied = sorted(_PawnMap.of(board, color).own)
    if not occupied:
        return 0
    islands = 1
    for i in range(1, len(occupied)):
        if occupied[i] > occupied[i - 1] + 1:
            islands += 1
    return islands


def count_passed(board: chess.Board, color: chess.Color) -> int:
    pm = _PawnMap.of(board, color)
    passed = 0
    for p in list_pawns(board, color):
        blocked = any(
            er > p.rank
            for cf in (p.file - 1, p.file, p.file + 1)
            for er in pm.enemy.get(cf, ())
        )
        # Only the front pawn of a doubled pair can be passed
        if blocked or any(r > p.rank for r in pm.own[p.file]):
            continue
        passed += 1
    return passed


def count_candidate_passed(board: chess.Board, color: chess.Color) -> int:
    """Pawns on files without enemy pawns, free to advance, with a potential supporter."""
    pm = _PawnMap.of(board, color)
    no_enemy_pawn = classify_files(board).half_open[not color]
    count = 0
    for p in list_pawns(board, color):
        if p.file not in no_enemy_pawn:
            continue
        ahead = p.rank + 1
        if ahead > 7:
            continue
        if board.piece_at(chess.square(p.file, relative_rank(ahead, color))) is not None:
            continue
        if pm.support_behind(p.file, p.rank):
            count += 1
    return count


def count_backward(board: chess.Board, color: chess.Color) -> int:
    pm = _PawnMap.of(board, color)
    count = 0
    for p in list_pawns(board, color):
        stop = p.rank + 1
        if stop > 7:
            continue
        if pm.support_behind(p.file, p.rank):
            continue
        # Own pawns beside this one guard the stop square
        if pm.own_at(p.file - 1, p.rank) or pm.own_at(p.file + 1, p.rank):
            continue
        # Enemy pawns two ranks ahead on an adjacent file hit the stop square
        if pm.enemy_at(p.file - 1, stop + 1) or pm.enemy_at(p.file + 1, stop + 1):
            count += 1
    return count


def count_hanging(board: chess.Board, color: chess.Color) -> int:
    """Advanced pawn duos on adjacent files with half-open files on both sides."""
    pm = _PawnMap.of(board, color)
    half_open = classify_files(board).half_open[color]

    def advanced(f: int) -> bool:
        return any(r >= HANGING_MIN_RANK for r in pm.own.get(f, ()))

    count = 0
    for f in range(7):
        if not (advanced(f) and advanced(f + 1)):
            continue
        left_open = f - 1 < 0 or (f - 1) in half_open
        right_open = f + 2 > 7 or (f + 2) in half_open
        if left_open and right_open:
            count += 1
    return count


def pawn_chains(board: chess.Board, color: chess.Color) -> list[list[Pawn]]:
    """Diagonal chains of two or more pawns, base first.

    Each chain grows greedily from its rearmost unvisited pawn: the next
    link is a pawn one rank ahead on an adjacent file, so every member is
    defended by the one before it.
    """
    pawns = list_pawns(board, color)
    visited: set[chess.Square] = set()
    chains = []
    for p in pawns:
        if p.square in visited:
            continue
        chain = [p]
        visited.add(p.square)
        expanded = True
        while expanded:
            expanded = False
            for q in pawns:
                if q.square in visited:
                    continue
                last = chain[-1]
                if abs(q.file - last.file) == 1 and q.rank == last.rank + 1:
                    chain.append(q)
                    visited.add(q.square)
                    expanded = True
        if len(chain) > 1:
            chains.append(chain)
    return chains


def count_rams(board: chess.Board, color: chess.Color) -> int:
    """Own pawns blocked head-on by an enemy pawn."""
    pm = _PawnMap.of(board, color)
    return sum(1 for p in list_pawns(board, color) if pm.enemy_at(p.file, p.rank + 1))


def count_levers(board: chess.Board, color: chess.Color) -> int:
    """Geometric pawn captures available, whoever is on move."""
    pm = _PawnMap.of(board, color)
    return sum(
        1
        for p in list_pawns(board, color)
        for df in (-1, 1)
        if pm.enemy_at(p.file + df, p.rank + 1)
    )


def classify_files(board: chess.Board) -> FileClassification:
    white = {chess.square_file(sq) for sq in board.pieces(chess.PAWN, chess.WHITE)}
    black = {chess.square_file(sq) for sq in board.pieces(chess.PAWN, chess.BLACK)}
    result = FileClassification(open=set(), closed=set(), half_open={chess.WHITE: set(), chess.BLACK: set()})
    for f in range(8):
        has_w, has_b = f in white, f in black
        if not has_w and not has_b:
            result.open.add(f)
        elif has_w and has_b:
            result.closed.add(f)
        elif has_b:
            result.half_open[chess.WHITE].add(f)
        else:
            result.half_open[chess.BLACK].add(f)
    return result


def detect_majorities(board: chess.Board, color: chess.Color) -> tuple[bool, bool]:
    """(queenside, kingside): strictly more pawns than the opponent on that flank."""
    def flank(c: chess.Color, files) -> int:
        return sum(1 for sq in board.pieces(chess.PAWN, c) if chess.square_file(sq) in files)

    return (
        flank(color, QUEENSIDE_FILES) > flank(not color, QUEENSIDE_FILES),
        flank(color, KINGSIDE_FILES) > flank(not color, KINGSIDE_FILES),
    )


def count_over_advanced(board: chess.Board, color: chess.Color) -> int:
    pm = _PawnMap.of(board, color)
    return sum(
        1 for p in list_pawns(board, color)
        if p.rank >= OVER_ADVANCED_MIN_RANK and not pm.support_behind(p.file, p.rank)
    )


def weak_squares(board: chess.Board, color: chess.Color) -> set[chess.Square]:
    """Squares in color's half that no own pawn guards now or after advancing."""
    pm = _PawnMap.of(board, color)
    weak = set()
    for r in range(4):
        for f in range(8):
            if not pm.support_behind(f, r):
                weak.add(chess.square(f, relative_rank(r, color)))
    return weak


def count_weak_pawns(board: chess.Board, color: chess.Color) -> int:
    """Isolated + backward + over-advanced. A pawn can count more than once."""
    return (
        count_isolated(board, color)
        + count_backward(board, color)
        + count_over_advanced(board, color)
    )


# ---------------------------------------------------------------------------
# Aggregate
# ---------------------------------------------------------------------------


def analyze_pawn_features(board: chess.Board, color: chess.Color) -> PawnFeatures:
    chains = pawn_chains(board, color)
    queenside, kingside = detect_majorities(board, color)
    isolated = count_isolated(board, color)
    backward = count_backward(board, color)
    over_advanced = count_over_advanced(board, color)
    return PawnFeatures(
        total=len(board.pieces(chess.PAWN, color)),
        isolated=isolated,
        doubled=count_doubled(board, color),
        islands=count_islands(board, color),
        passed=count_passed(board, color),
        candidate_passed=count_candidate_passed(board, color),
        backward=backward,
        hanging=count_hanging(board, color),
        chains=len(chains),
        chain_bases=len(chains),  # one base per chain
        rams=count_rams(board, color),
        levers=count_levers(board, color),
        over_advanced=over_advanced,
        central_doubled=count_central_doubled(board, color),
        weak_pawns=isolated + backward + over_advanced,
        weak_squares=sorted(chess.square_name(sq) for sq in weak_squares(board, color)),
        queenside_majority=queenside,
        kingside_majority=kingside,
        queenside_minority=not queenside,
        kingside_minority=not kingside,
    )


def _score_features(pf: PawnFeatures) -> float:
    total = pf.total or 1
    flank_bonus = (
        (FLANK_BONUS if pf.queenside_majority else 0)
        + (FLANK_BONUS if pf.kingside_majority else 0)
        - (FLANK_BONUS if pf.queenside_minority else 0)
        - (FLANK_BONUS if pf.kingside_minority else 0)
    )
    score = (
        1
        - 0.40 * (pf.isolated / total)
        - 0.55 * (pf.doubled / total)
        - 0.25 * (pf.backward / total)
        - 0.20 * (pf.over_advanced / total)
        - 0.20 * (pf.central_doubled / total)
        - 0.10 * (max(0, pf.islands - 1) / 4)
        - 0.05 * (pf.chain_bases / total)
        - 0.10 * (pf.weak_pawns / total)
        - 0.10 * (len(pf.weak_squares) / 8)
        - 0.05 * (pf.hanging / 4)
        - 0.10 * (pf.rams / 8)
        + 0.40 * (pf.passed / total)
        + 0.15 * (pf.candidate_passed / total)
        + 0.10 * (pf.chains / 4)
        + 0.05 * (pf.levers / total)
        + flank_bonus
    )
    return clamp(score)


def pawn_structure_score(
    board: chess.Board,
    color: chess.Color,
    cache: PawnStructureCache | None = None,
) -> float:
    """Structure quality for color in [0, 1].

    With a cache, a layout already scored for color returns the stored
    value without running any detector.
    """
    if cache is None:
        return _score_features(analyze_pawn_features(board, color))

    layout = PawnLayout.of(board)
    cached = cache.get(layout, color)
    if cached is not None:
        logger.debug("Pawn structure cache hit for %s", layout)
        return cached

    logger.debug("Pawn structure cache miss for %s", layout)
    score = _score_features(analyze_pawn_features(board, color))
    cache.store(layout, color, score)
    return score
