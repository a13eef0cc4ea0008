from __future__ import annotations
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional, Tuple

from .cost import Ticket, total_cost
from .rules import Grid

EXACT = "exact"
SINGLES = "singles"
MULTI_TICKET = "multi-ticket"
HYBRID = "hybrid"
PARTIAL = "partial"


@dataclass(frozen=True)
class Proposal:
    """A set of tickets a solver claims covers the universe, not yet confirmed."""
    tickets: Tuple[Ticket, ...]
    strategy: str

    @property
    def grids(self) -> Tuple[Grid, ...]:
        out: List[Grid] = []
        for t in self.tickets:
            out.extend(t.grids())
        return tuple(out)

    @property
    def cost(self) -> Decimal:
        return total_cost(self.tickets)

    @classmethod
    def of_grids(cls, grids, strategy: str) -> "Proposal":
        return cls(tuple(Ticket.single(g) for g in grids), strategy)


@dataclass(frozen=True)
class SearchOutcome:
    """What a solver hands back: a claimed cover, or its best partial attempt."""
    proposal: Optional[Proposal] = None
    best_partial: Optional[Proposal] = None
    warnings: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Solution:
    grids: Tuple[Grid, ...]
    tickets: Tuple[Ticket, ...]
    guaranteed: bool
    coverage: float
    tested_combinations: int
    total_cost: Decimal
    strategy: str
    lower_bound: int
    warnings: Tuple[str, ...] = field(default=())

    def to_dict(self) -> dict:
        return {
            "grids": [{"main": list(g.main), "bonus": g.bonus} for g in self.grids],
            "tickets": [
                {"numbers": list(t.numbers), "bonus": t.bonus, "kind": t.kind, "cost": str(t.cost)}
                for t in self.tickets
            ],
            "guaranteed": self.guaranteed,
            "coverage": self.coverage,
            "tested_combinations": self.tested_combinations,
            "total_cost": str(self.total_cost),
            "strategy": self.strategy,
            "lower_bound": self.lower_bound,
            "warnings": list(self.warnings),
        }
