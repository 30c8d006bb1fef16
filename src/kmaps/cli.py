"""CLI utility for scoring a single position.

Usage:
    kmaps <fen> [--json] [--no-cache] [--strict | --no-strict]
    python -m kmaps.cli <fen> ...

Prints one row per metric, or the raw result list with --json.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from kmaps.analysis import DEFAULT_CACHE, compute_kmaps
from kmaps.config import get_settings


def format_table(results: list[dict]) -> str:
    lines = [
        f"{r['metric']:<15} | White: {r['White']:.3f} | Black: {r['Black']:.3f}"
        for r in results
    ]
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> int:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="K-MAPS position scores")
    parser.add_argument("fen", help="Position FEN (quote the full string)")
    parser.add_argument("--json", action="store_true", help="Print results as JSON")
    parser.add_argument(
        "--no-cache", action="store_true",
        help="Score pawn structure without the process cache",
    )
    parser.add_argument(
        "--strict", action=argparse.BooleanOptionalAction, default=settings.strict_validation,
        help="Reject any position python-chess considers invalid",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=settings.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    results = compute_kmaps(args.fen, None if args.no_cache else DEFAULT_CACHE, strict=args.strict)
    if not results:
        print(f"error: invalid FEN: {args.fen}", file=sys.stderr)
        return 1

    print(json.dumps(results, indent=2) if args.json else format_table(results))
    return 0


if __name__ == "__main__":
    sys.exit(main())
