"""
Lower and upper estimates for the number of grids a guarantee needs.

``lower_bound`` is the floor the solvers and the validator rely on. It divides
the draw universe by the number of draws a single grid can cover, so no family
of fewer grids can reach every draw.

``schonheim_bound`` is the recursive Schönheim number
L(0) = 1, L(i+1) = ceil((n - i) / (5 - i) * L(i)). It bounds the stronger
design where every t-subset of the pool lies inside one grid, which is more
than a draw guarantee needs (for 8 numbers it gives 8 while 2 grids suffice),
so it is reported but never used as a floor.
"""
from __future__ import annotations
import math
from dataclasses import dataclass

from .combinatorics import binomial
from .rules import GRID_SIZE
from .universe import universe_size

IMPOSSIBLE = "IMPOSSIBLE"
OPTIMAL = "OPTIMAL"
PLAUSIBLE = "PLAUSIBLE"
SUSPECT = "SUSPECT"


def _ceil_div(a: int, b: int) -> int:
    return -(-a // b)


def _draws_sharing(pool_size: int, j: int) -> int:
    # draws meeting a fixed grid in exactly j main numbers
    return binomial(GRID_SIZE, j) * binomial(pool_size - GRID_SIZE, GRID_SIZE - j)


def draws_per_grid(pool_size: int, target_rank: int, bonus_count: int = 0, include_bonus: bool = False) -> int:
    """How many draws of the universe one grid covers (the same for every grid)."""
    at_rank = sum(_draws_sharing(pool_size, j) for j in range(target_rank, GRID_SIZE + 1))
    if include_bonus and bonus_count:
        # other bonus values need the full rank; the grid's own bonus adds a point
        return at_rank * bonus_count + _draws_sharing(pool_size, target_rank - 1)
    return at_rank


def lower_bound(pool_size: int, target_rank: int, bonus_count: int = 0, include_bonus: bool = False) -> int:
    bonus = bonus_count if include_bonus else 0
    total = universe_size(pool_size, bonus)
    per_grid = draws_per_grid(pool_size, target_rank, bonus, include_bonus)
    if per_grid == 0:
        return 1
    return max(1, _ceil_div(total, per_grid))


def schonheim_bound(pool_size: int, t: int = 3, k: int = GRID_SIZE) -> int:
    level = 1
    for i in range(t):
        level = _ceil_div((pool_size - i) * level, k - i)
    return level


def upper_bound(pool_size: int, target_rank: int, bonus_count: int = 0, include_bonus: bool = False) -> int:
    """
    Lovász–Stein estimate (|U| / d) * (1 + ln d), capped at C(n,5): playing every
    combination always works.
    """
    bonus = bonus_count if include_bonus else 0
    total = universe_size(pool_size, bonus)
    per_grid = draws_per_grid(pool_size, target_rank, bonus, include_bonus)
    every_combo = binomial(pool_size, GRID_SIZE)
    if per_grid == 0:
        return every_combo
    estimate = math.ceil(total / per_grid * (1 + math.log(per_grid)))
    return max(lower_bound(pool_size, target_rank, bonus_count, include_bonus), min(estimate, every_combo))


@dataclass(frozen=True)
class Bounds:
    pool_size: int
    target_rank: int
    lower: int
    upper: int
    schonheim: int
    universe: int
    per_grid: int

    @property
    def optimal_range(self) -> str:
        return f"{self.lower} - {min(self.upper, self.lower * 2)}"


def theoretical_bounds(
    pool_size: int, target_rank: int = 3, bonus_count: int = 0, include_bonus: bool = False
) -> Bounds:
    bonus = bonus_count if include_bonus else 0
    return Bounds(
        pool_size=pool_size,
        target_rank=target_rank,
        lower=lower_bound(pool_size, target_rank, bonus, include_bonus),
        upper=upper_bound(pool_size, target_rank, bonus, include_bonus),
        schonheim=schonheim_bound(pool_size, target_rank),
        universe=universe_size(pool_size, bonus),
        per_grid=draws_per_grid(pool_size, target_rank, bonus, include_bonus),
    )


def judge_claim(grid_count: int, bounds: Bounds) -> str:
    """Classify a claimed grid count against the floor."""
    if grid_count < bounds.lower:
        return IMPOSSIBLE
    if grid_count == bounds.lower:
        return OPTIMAL
    if grid_count <= bounds.lower * 2:
        return PLAUSIBLE
    return SUSPECT
