from __future__ import annotations
from dataclasses import dataclass, field
from decimal import Decimal
from typing import FrozenSet, Iterable, Optional, Tuple

from .errors import InvalidInput

MainCombo = Tuple[int, ...]   # a sorted 5-tuple of main numbers

GRID_SIZE = 5
MIN_RANK = 2
MAX_RANK = 5


@dataclass(frozen=True, order=True)
class Grid:
    """Five main numbers plus an optional bonus ("chance") number."""
    main: MainCombo
    bonus: Optional[int] = None
    numbers: FrozenSet[int] = field(default=frozenset(), init=False, repr=False, compare=False)

    def __post_init__(self):
        main = tuple(sorted(self.main))
        if len(main) != GRID_SIZE or len(set(main)) != GRID_SIZE:
            raise InvalidInput(f"A grid needs exactly {GRID_SIZE} distinct numbers, got {self.main}")
        object.__setattr__(self, "main", main)
        object.__setattr__(self, "numbers", frozenset(main))

    def __str__(self):
        text = " ".join(f"{n:02d}" for n in self.main)
        return text if self.bonus is None else f"{text} | {self.bonus:02d}"


# A possible winning outcome has the same shape as a grid.
Draw = Grid


@dataclass(frozen=True)
class CoverageRequirement:
    target_rank: int = 3
    include_bonus: bool = False


@dataclass(frozen=True)
class LotoRules:
    main_pool: int = 49
    bonus_pool: int = 10
    grid_size: int = GRID_SIZE
    multi_ticket_max: int = 10
    unit_price: Decimal = Decimal("2.20")

    def validate_pool(self, pool: Iterable[int]) -> Tuple[int, ...]:
        """Check a main-number pool and return it as a tuple, order preserved."""
        nums = tuple(pool)
        if not all(isinstance(n, int) and not isinstance(n, bool) for n in nums):
            raise InvalidInput("Pool numbers must be integers")
        if len(set(nums)) != len(nums):
            raise InvalidInput("Duplicate numbers in pool")
        if not self.grid_size <= len(nums) <= self.main_pool:
            raise InvalidInput(f"Pool must hold {self.grid_size}-{self.main_pool} numbers, got {len(nums)}")
        if not all(1 <= n <= self.main_pool for n in nums):
            raise InvalidInput(f"Pool number out of range (1-{self.main_pool})")
        return nums

    def validate_bonus_pool(self, bonus_pool: Iterable[int]) -> Tuple[int, ...]:
        nums = tuple(bonus_pool)
        if not all(isinstance(n, int) and not isinstance(n, bool) for n in nums):
            raise InvalidInput("Bonus numbers must be integers")
        if len(set(nums)) != len(nums):
            raise InvalidInput("Duplicate numbers in bonus pool")
        if not all(1 <= n <= self.bonus_pool for n in nums):
            raise InvalidInput(f"Bonus number out of range (1-{self.bonus_pool})")
        return nums

    def validate_requirement(self, req: CoverageRequirement, bonus_pool: Tuple[int, ...]) -> None:
        if not MIN_RANK <= req.target_rank <= MAX_RANK:
            raise InvalidInput(f"target_rank must be between {MIN_RANK} and {MAX_RANK}, got {req.target_rank}")
        if req.include_bonus and not bonus_pool:
            raise InvalidInput("include_bonus needs a non-empty bonus pool")

    def validate_max_grids(self, max_grids: int) -> None:
        if not isinstance(max_grids, int) or isinstance(max_grids, bool) or max_grids < 1:
            raise InvalidInput(f"max_grids must be a positive integer, got {max_grids!r}")
