from __future__ import annotations
import argparse
import dataclasses
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import EngineConfig
from .engine import STRATEGIES, estimate_feasibility, solve_coverage
from .errors import CapacityExceeded, InvalidInput, SearchCancelled, ValidationContradiction
from .pools import load_pool_file
from .solution import Solution

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lotocover",
        description="Find the smallest set of grids guaranteeing a prize rank for every draw from a pool.",
    )
    src = parser.add_mutually_exclusive_group(required=True)
    src.add_argument("--pool", type=int, nargs="+", metavar="N", help="Pool of main numbers (1-49)")
    src.add_argument("--file", type=Path, help="CSV/TXT file holding the pool (and an optional 'bonus' row)")
    parser.add_argument("--bonus", type=int, nargs="+", default=None, metavar="N", help="Bonus pool (1-10)")
    parser.add_argument("--rank", type=int, default=3, help="Guaranteed matches per draw (default 3)")
    parser.add_argument("--with-bonus", action="store_true", help="Count a bonus match towards the rank")
    parser.add_argument("--max-grids", type=int, default=10, help="Largest number of grids allowed (default 10)")
    parser.add_argument("--strategy", choices=STRATEGIES, default="auto")
    parser.add_argument("--feasibility", action="store_true", help="Only estimate the exact search cost")
    parser.add_argument("--seed", type=int, default=None, help="Seed for sampling (overrides LOTOCOVER_SEED)")
    parser.add_argument("--progress", action="store_true", help="Show a progress bar during exact search")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def print_solution(solution: Solution) -> None:
    status = "GUARANTEED" if solution.guaranteed else "NOT guaranteed"
    print(f"{status}: {len(solution.grids)} grid(s) via {solution.strategy}, "
          f"coverage {solution.coverage:.2f}% of {solution.tested_combinations} draws")
    print(f"Lower bound: {solution.lower_bound} grid(s)  Total cost: {solution.total_cost} EUR")
    for t in solution.tickets:
        if t.kind == "multiple":
            print(f"  multiple {len(t.numbers)}: {' '.join(f'{n:02d}' for n in t.numbers)}  ({t.cost} EUR)")
    for i, g in enumerate(solution.grids, 1):
        print(f"{i:3d}. {g}")
    for w in solution.warnings:
        print(f"warning: {w}")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    try:
        config = EngineConfig.from_env()
        if args.seed is not None:
            config = dataclasses.replace(config, seed=args.seed)

        if args.file is not None:
            pool, file_bonus = load_pool_file(args.file)
        else:
            pool, file_bonus = tuple(args.pool), ()
        bonus = tuple(args.bonus) if args.bonus is not None else file_bonus

        if args.feasibility:
            f = estimate_feasibility(
                len(pool), args.max_grids, args.rank, len(bonus), args.with_bonus, config=config
            )
            print(f"Lower bound: {f.lower_bound} grid(s), {f.candidates} candidate grids")
            print(f"Estimated tests: {f.estimated_tests:,} (ceiling {config.test_ceiling:,})")
            print(f"Largest affordable max_grids: {f.suggested_ceiling}")
            print("Feasible" if f.feasible else "Not feasible")
            return 0 if f.feasible else 1

        solution = solve_coverage(
            pool, bonus, args.rank, args.with_bonus, args.max_grids,
            strategy=args.strategy, config=config, progress=args.progress,
        )
    except (InvalidInput, ValueError, FileNotFoundError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    except CapacityExceeded as e:
        print(f"error: {e}", file=sys.stderr)
        return 3
    except ValidationContradiction as e:
        log.error("Internal contradiction: %s", e.reason)
        print(f"internal error: {e}", file=sys.stderr)
        return 4
    except (SearchCancelled, KeyboardInterrupt):
        print("cancelled", file=sys.stderr)
        return 130

    print_solution(solution)
    return 0 if solution.guaranteed else 1


if __name__ == "__main__":
    sys.exit(main())
