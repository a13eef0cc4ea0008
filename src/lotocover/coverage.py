"""
Matching rules between grids and draws.

Every solver, the validator and the partial-coverage reports go through these
functions; nothing else in the package counts matches.
"""
from __future__ import annotations
from typing import Iterable, Iterator, Optional, Sequence

from .rules import CoverageRequirement, Draw, Grid


def match_count(grid: Grid, draw: Draw, requirement: CoverageRequirement) -> int:
    """Main-number matches, plus one when bonus matching is on and the bonus agrees."""
    main = len(grid.numbers & draw.numbers)
    if requirement.include_bonus and grid.bonus is not None and grid.bonus == draw.bonus:
        return main + 1
    return main


def grid_covers(grid: Grid, draw: Draw, requirement: CoverageRequirement) -> bool:
    # "N numbers with or without the bonus": the combined count is never below
    # the main-only count, so checking it covers both readings.
    return match_count(grid, draw, requirement) >= requirement.target_rank


def covers(grids: Iterable[Grid], draw: Draw, requirement: CoverageRequirement) -> bool:
    return any(grid_covers(g, draw, requirement) for g in grids)


def covers_all(grids: Sequence[Grid], draws: Iterable[Draw], requirement: CoverageRequirement) -> bool:
    return all(covers(grids, d, requirement) for d in draws)


def uncovered_draws(
    grids: Sequence[Grid], draws: Iterable[Draw], requirement: CoverageRequirement
) -> Iterator[Draw]:
    for d in draws:
        if not covers(grids, d, requirement):
            yield d


def count_uncovered(
    grids: Sequence[Grid],
    draws: Iterable[Draw],
    requirement: CoverageRequirement,
    stop_above: Optional[int] = None,
) -> int:
    """
    Number of draws no grid covers. With stop_above, counting stops as soon as
    the total exceeds it (the returned value is then stop_above + 1).
    """
    misses = 0
    for d in draws:
        if not covers(grids, d, requirement):
            misses += 1
            if stop_above is not None and misses > stop_above:
                break
    return misses


def count_covered(grids: Sequence[Grid], draws: Sequence[Draw], requirement: CoverageRequirement) -> int:
    return len(draws) - count_uncovered(grids, draws, requirement)
