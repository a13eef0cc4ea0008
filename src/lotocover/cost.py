from __future__ import annotations
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional, Tuple

from .combinatorics import binomial, k_subsets
from .errors import InvalidInput
from .rules import GRID_SIZE, Grid, LotoRules

DEFAULT_RULES = LotoRules()
UNIT_PRICE = DEFAULT_RULES.unit_price


def ticket_cost(size: int, rules: LotoRules = DEFAULT_RULES) -> Decimal:
    """
    Price of a ticket playing `size` numbers: every 5-number combination is one
    grid at the unit price (multi 6 = 13.20, multi 10 = 554.40).
    """
    if not GRID_SIZE <= size <= rules.multi_ticket_max:
        raise InvalidInput(f"Ticket size must be {GRID_SIZE}-{rules.multi_ticket_max}, got {size}")
    return binomial(size, GRID_SIZE) * rules.unit_price


@dataclass(frozen=True)
class Ticket:
    numbers: Tuple[int, ...]
    bonus: Optional[int] = None

    def __post_init__(self):
        nums = tuple(sorted(self.numbers))
        if len(set(nums)) != len(nums):
            raise InvalidInput(f"Duplicate numbers in ticket {self.numbers}")
        ticket_cost(len(nums))  # size check
        object.__setattr__(self, "numbers", nums)

    @classmethod
    def single(cls, grid: Grid) -> "Ticket":
        return cls(grid.main, grid.bonus)

    @property
    def kind(self) -> str:
        return "single" if len(self.numbers) == GRID_SIZE else "multiple"

    @property
    def cost(self) -> Decimal:
        return ticket_cost(len(self.numbers))

    def grids(self) -> Tuple[Grid, ...]:
        return tuple(Grid(main, self.bonus) for main in k_subsets(self.numbers, GRID_SIZE))


def total_cost(tickets: Iterable[Ticket]) -> Decimal:
    return sum((t.cost for t in tickets), Decimal("0"))
