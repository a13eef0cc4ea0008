from __future__ import annotations
import random
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .combinatorics import binomial, k_subsets
from .rules import GRID_SIZE, CoverageRequirement, Draw, Grid


def universe_size(pool_size: int, bonus_count: int = 0) -> int:
    """Total number of possible draws from a pool (times the bonus values in play)."""
    return binomial(pool_size, GRID_SIZE) * max(1, bonus_count)


@dataclass(frozen=True)
class Universe:
    pool: Tuple[int, ...]
    bonus_pool: Tuple[int, ...]
    requirement: CoverageRequirement
    draws: Tuple[Draw, ...]
    candidates: Tuple[Grid, ...]

    @property
    def size(self) -> int:
        return len(self.draws)

    @property
    def bonus_count(self) -> int:
        return len(self.bonus_pool)


def _crossed(pool: Sequence[int], bonus_pool: Sequence[int]) -> List[Grid]:
    out: List[Grid] = []
    for main in k_subsets(pool, GRID_SIZE):
        if bonus_pool:
            out.extend(Grid(main, b) for b in bonus_pool)
        else:
            out.append(Grid(main))
    return out


def build_universe(
    pool: Sequence[int],
    bonus_pool: Sequence[int] = (),
    requirement: Optional[CoverageRequirement] = None,
) -> Universe:
    """
    All draws of 5 pool numbers and every candidate grid over the same pool.
    The bonus pool only multiplies the universe when bonus matching is requested.
    """
    req = requirement or CoverageRequirement()
    bonus = tuple(bonus_pool) if req.include_bonus else ()
    grids = tuple(_crossed(pool, bonus))
    # draws and candidates have the same shape; one enumeration serves both
    return Universe(
        pool=tuple(pool),
        bonus_pool=bonus,
        requirement=req,
        draws=grids,
        candidates=grids,
    )


def sample_draws(universe: Universe, size: int, rng: random.Random) -> Tuple[Draw, ...]:
    """Random subset of the draw universe, kept in enumeration order."""
    if size >= universe.size:
        return universe.draws
    picks = sorted(rng.sample(range(universe.size), k=size))
    return tuple(universe.draws[i] for i in picks)
