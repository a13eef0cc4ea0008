from __future__ import annotations
from typing import Any, Optional, Sequence

EXACT_SEARCH = "exact search"
HEURISTIC_SEARCH = "heuristic search"


class CoverageError(Exception):
    """Base class for every error raised by the coverage engine."""


class InvalidInput(CoverageError, ValueError):
    """Pool, bonus pool or requirement outside the game contract."""


class CapacityExceeded(CoverageError, RuntimeError):
    """
    A search would do more work than its ceiling allows: coverage tests for the
    exact search, grid/draw checks for the heuristic one. Raised before the work
    starts.
    """

    def __init__(
        self,
        estimate: int,
        ceiling: int,
        suggested_max_grids: int = 0,
        search: str = EXACT_SEARCH,
        suggested_pool_size: int = 0,
    ) -> None:
        self.estimate = estimate
        self.ceiling = ceiling
        self.suggested_max_grids = suggested_max_grids
        self.search = search
        self.suggested_pool_size = suggested_pool_size
        unit = "coverage tests" if search == EXACT_SEARCH else "coverage checks"
        super().__init__(
            f"{search.capitalize()} needs at least {estimate:,} {unit} "
            f"(ceiling {ceiling:,}). {self.suggestion}"
        )

    @property
    def suggestion(self) -> str:
        if self.suggested_max_grids > 0:
            return (
                f"Reduce the pool size, lower max_grids to {self.suggested_max_grids} "
                f"or raise the test ceiling."
            )
        if self.suggested_pool_size > 0:
            return f"Use at most {self.suggested_pool_size} pool numbers or raise the {self.search} ceiling."
        return f"Reduce the pool size or raise the {self.search} ceiling."

    def to_dict(self) -> dict:
        return {
            "error": "capacity exceeded",
            "search": self.search,
            "estimate": self.estimate,
            "ceiling": self.ceiling,
            "suggested_max_grids": self.suggested_max_grids,
            "suggested_pool_size": self.suggested_pool_size,
            "suggestion": self.suggestion,
        }


class ValidationContradiction(CoverageError, AssertionError):
    """A solver claimed a cover that the bound or the full re-check refutes."""

    def __init__(
        self,
        reason: str,
        pool: Sequence[int] = (),
        grids: Sequence[Any] = (),
        uncovered: Optional[Any] = None,
    ) -> None:
        self.reason = reason
        self.pool = tuple(pool)
        self.grids = tuple(grids)
        self.uncovered = uncovered
        super().__init__(reason)


class SearchCancelled(CoverageError):
    """Raised when the caller's cancel signal is set during a search."""
