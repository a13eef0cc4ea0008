from __future__ import annotations
import logging
from typing import Optional, Protocol, Sequence

from tqdm import tqdm

from .bounds import Bounds
from .combinatorics import binomial, k_subsets
from .config import DEFAULT_CONFIG, EngineConfig
from .coverage import count_uncovered
from .errors import CapacityExceeded, SearchCancelled
from .rules import Grid
from .solution import EXACT, Proposal, SearchOutcome
from .universe import Universe

log = logging.getLogger(__name__)


class CancelSignal(Protocol):
    def is_set(self) -> bool: ...


def estimate_tests(candidate_count: int, start: int, cap: int, ceiling: Optional[int] = None) -> int:
    """
    Subsets the search would test for sizes start..cap. With a ceiling the sum
    stops once it is exceeded, so the result is then only a lower estimate.
    """
    total = 0
    for size in range(max(1, start), min(cap, candidate_count) + 1):
        total += binomial(candidate_count, size)
        if ceiling is not None and total > ceiling:
            break
    return total


def suggest_max_grids(candidate_count: int, start: int, ceiling: int) -> int:
    """Largest max_grids whose search stays under the ceiling, 0 if even `start` does not."""
    total = 0
    best = 0
    for size in range(max(1, start), candidate_count + 1):
        total += binomial(candidate_count, size)
        if total > ceiling:
            break
        best = size
    return best


def admit_exact(candidate_count: int, start: int, max_grids: int, config: EngineConfig = DEFAULT_CONFIG) -> int:
    """Raise CapacityExceeded before any search state exists if the search is too big."""
    estimate = estimate_tests(candidate_count, start, max_grids, config.test_ceiling)
    if estimate > config.test_ceiling:
        suggested = suggest_max_grids(candidate_count, start, config.test_ceiling)
        log.warning(
            "Exact search refused: >= %d tests over %d candidates (ceiling %d)",
            estimate, candidate_count, config.test_ceiling,
        )
        raise CapacityExceeded(estimate, config.test_ceiling, suggested)
    return estimate


class ExactSolver:
    """
    Iterative deepening over solution size: every subset of `size` candidates is
    tested in k_subsets order, so the first cover found is always the same one.
    """

    def __init__(
        self,
        universe: Universe,
        bounds: Bounds,
        config: EngineConfig = DEFAULT_CONFIG,
        cancel: Optional[CancelSignal] = None,
        progress: bool = False,
    ):
        self.universe = universe
        self.bounds = bounds
        self.config = config
        self.cancel = cancel
        self.progress = progress

    @property
    def start_size(self) -> int:
        return max(1, self.bounds.lower)

    def estimate(self, max_grids: int) -> int:
        return estimate_tests(len(self.universe.candidates), self.start_size, max_grids, self.config.test_ceiling)

    def admit(self, max_grids: int) -> int:
        return admit_exact(len(self.universe.candidates), self.start_size, max_grids, self.config)

    def _check_cancel(self) -> None:
        if self.cancel is not None and self.cancel.is_set():
            raise SearchCancelled("Exact search cancelled")

    def solve(self, max_grids: int) -> SearchOutcome:
        self.admit(max_grids)
        candidates = self.universe.candidates
        draws = self.universe.draws
        req = self.universe.requirement
        cap = min(max_grids, len(candidates))

        best: Optional[Sequence[Grid]] = None
        best_misses = self.universe.size + 1

        sizes = range(self.start_size, cap + 1)
        for size in tqdm(sizes, desc="exact search", unit="size", disable=not self.progress):
            self._check_cancel()
            log.info("Exact search: trying %d grid(s), %d subsets", size, binomial(len(candidates), size))
            for combo in k_subsets(candidates, size):
                self._check_cancel()
                misses = count_uncovered(combo, draws, req, stop_above=best_misses - 1)
                if misses == 0:
                    log.info("Exact search: cover found with %d grid(s)", size)
                    return SearchOutcome(proposal=Proposal.of_grids(combo, EXACT))
                if misses < best_misses:
                    best, best_misses = combo, misses

        log.info("Exact search: no cover within %d grid(s)", cap)
        partial = Proposal.of_grids(best, EXACT) if best is not None else None
        return SearchOutcome(best_partial=partial)
