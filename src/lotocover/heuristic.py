"""
Fast path for pools too large for exhaustive search.

Candidates are scored and pruned, named strategies are tried cheapest first,
and large universes are screened on a seeded sample of draws. Whatever passes
the screen is re-checked against every draw before it is handed back; the
engine then confirms it once more.
"""
from __future__ import annotations
import logging
import random
from decimal import Decimal
from itertools import islice
from typing import Callable, Dict, FrozenSet, List, NamedTuple, Optional, Sequence, Set

from .bounds import Bounds
from .combinatorics import binomial, k_subsets
from .config import DEFAULT_CONFIG, EngineConfig
from .cost import Ticket, ticket_cost
from .coverage import covers, covers_all, grid_covers, uncovered_draws
from .errors import HEURISTIC_SEARCH, CapacityExceeded
from .rules import GRID_SIZE, CoverageRequirement, Draw, Grid, LotoRules
from .solution import HYBRID, MULTI_TICKET, SINGLES, Proposal, SearchOutcome
from .universe import Universe, sample_draws, universe_size
from .validator import validate

log = logging.getLogger(__name__)


def _grid_score(grid: Grid, index: Dict[int, int], pool_size: int) -> int:
    main = grid.main
    score: float = 0.0

    # spread over decades
    score += len({n // 10 for n in main}) * 10

    # consecutive numbers
    runs = sum(1 for a, b in zip(main, main[1:]) if b == a + 1)
    score -= runs * 15

    # even/odd balance
    evens = sum(1 for n in main if n % 2 == 0)
    score += (GRID_SIZE - abs(evens - (GRID_SIZE - evens))) * 5

    # grids built from the middle of the caller's ranking
    positions = [index[n] for n in main]
    center = (pool_size - 1) / 2
    score += (pool_size - abs(sum(positions) / len(positions) - center)) * 2

    if grid.bonus is not None:
        score += round((5 - abs(grid.bonus - 5.5)) * 3)
    return round(score)


def score_grid(grid: Grid, pool: Sequence[int]) -> int:
    index = {n: i for i, n in enumerate(pool)}
    return _grid_score(grid, index, len(pool))


def prune_candidates(
    candidates: Sequence[Grid], pool: Sequence[int], config: EngineConfig = DEFAULT_CONFIG
) -> List[Grid]:
    """Best-scoring fraction of the candidates; ties keep enumeration order."""
    index = {n: i for i, n in enumerate(pool)}
    scored = sorted(candidates, key=lambda g: -_grid_score(g, index, len(pool)))
    return scored[:_kept(len(scored), config)]


def _kept(draw_count: int, config: EngineConfig) -> int:
    return min(draw_count, max(config.min_keep, int(draw_count * config.keep_fraction)))


def estimate_work(draw_count: int, config: EngineConfig = DEFAULT_CONFIG) -> int:
    """
    Coverage checks needed to enumerate the universe and to screen the pruned
    candidates against the screening draws, the dominant cost of every plan.
    """
    screen = min(draw_count, config.sample_size) if draw_count > config.sample_threshold else draw_count
    return draw_count + _kept(draw_count, config) * screen


def admit_heuristic(
    pool_size: int,
    bonus_count: int = 0,
    config: EngineConfig = DEFAULT_CONFIG,
    rules: LotoRules = LotoRules(),
) -> int:
    """Raise CapacityExceeded before the universe is built if screening it would be too costly."""
    work = estimate_work(universe_size(pool_size, bonus_count), config)
    if work <= config.heuristic_ceiling:
        return work
    largest = 0
    for n in range(rules.grid_size, pool_size):
        if estimate_work(universe_size(n, bonus_count), config) <= config.heuristic_ceiling:
            largest = n
    log.warning(
        "Heuristic search refused: ~%d checks for pool of %d (ceiling %d)",
        work, pool_size, config.heuristic_ceiling,
    )
    raise CapacityExceeded(
        work, config.heuristic_ceiling, search=HEURISTIC_SEARCH, suggested_pool_size=largest
    )


def _covered(grid: Grid, draws: Sequence[Draw], req: CoverageRequirement, among) -> FrozenSet[int]:
    return frozenset(i for i in among if grid_covers(grid, draws[i], req))


def greedy_cover(
    candidates: Sequence[Grid],
    draws: Sequence[Draw],
    req: CoverageRequirement,
    limit: int,
    fallback: Sequence[Grid] = (),
) -> List[Grid]:
    """
    Classic greedy set cover: keep taking the grid that covers the most draws
    still uncovered. When no candidate helps any more, the fallback grids are
    added to the pool once. Stops at `limit` grids, covered or not.
    """
    remaining: Set[int] = set(range(len(draws)))
    pool = list(candidates)
    sets = [_covered(g, draws, req, remaining) for g in pool]
    chosen: List[Grid] = []

    while remaining and len(chosen) < limit:
        best_i, best_gain = -1, 0
        for i, covered in enumerate(sets):
            gain = len(covered & remaining)
            if gain > best_gain:
                best_i, best_gain = i, gain
        if best_gain == 0:
            if not fallback:
                break
            seen = set(pool)
            extra = [g for g in fallback if g not in seen]
            pool.extend(extra)
            sets.extend(_covered(g, draws, req, remaining) for g in extra)
            fallback = ()
            continue
        chosen.append(pool[best_i])
        remaining -= sets[best_i]
    return chosen


class Plan(NamedTuple):
    name: str
    estimated_cost: Decimal
    build: Callable[[int], Optional[Proposal]]


class HeuristicSolver:

    def __init__(
        self,
        universe: Universe,
        bounds: Bounds,
        config: EngineConfig = DEFAULT_CONFIG,
        rules: LotoRules = LotoRules(),
    ):
        self.universe = universe
        self.bounds = bounds
        self.config = config
        self.rules = rules
        self.req = universe.requirement
        self.rng = random.Random(config.seed)
        self.sampled = universe.size > config.sample_threshold
        if self.sampled:
            self.screen: List[Draw] = list(sample_draws(universe, config.sample_size, self.rng))
        else:
            self.screen = list(universe.draws)
        self._pruned: Optional[List[Grid]] = None

    @property
    def pruned(self) -> List[Grid]:
        if self._pruned is None:
            self._pruned = prune_candidates(self.universe.candidates, self.universe.pool, self.config)
            log.info(
                "Pruned candidates: kept %d of %d grids", len(self._pruned), len(self.universe.candidates)
            )
        return self._pruned

    @property
    def _bonus(self) -> Optional[int]:
        return self.universe.bonus_pool[0] if self.universe.bonus_pool else None

    def warnings(self) -> List[str]:
        out: List[str] = []
        excluded = len(self.universe.pool) - self.rules.multi_ticket_max
        if excluded > 0:
            out.append(
                f"pool exceeds multi-ticket limit of {self.rules.multi_ticket_max} numbers, "
                f"{excluded} number(s) excluded from multi-ticket strategies"
            )
        if self.sampled:
            out.append(
                f"candidates screened on a {len(self.screen)}-draw sample; "
                f"results re-checked against all {self.universe.size} draws"
            )
        return out

    # -- strategies ------------------------------------------------------

    def singles(self, max_grids: int) -> Optional[Proposal]:
        chosen = greedy_cover(self.pruned, self.screen, self.req, max_grids, fallback=self.universe.candidates)
        if not chosen:
            return None
        if covers_all(chosen, self.screen, self.req):
            smaller = self._improve(len(chosen))
            if smaller is not None:
                chosen = smaller
        return Proposal.of_grids(chosen, SINGLES)

    def _improve(self, found: int) -> Optional[List[Grid]]:
        """Bounded search for a cover smaller than the greedy one."""
        for size in range(max(1, self.bounds.lower), found):
            for combo in islice(k_subsets(self.pruned, size), self.config.improve_max_tests):
                if covers_all(combo, self.screen, self.req) and validate(combo, self.universe).valid:
                    log.info("Improved greedy cover from %d to %d grids", found, size)
                    return list(combo)
        return None

    def multi_ticket(self, max_grids: int) -> Optional[Proposal]:
        pool = self.universe.pool
        if len(pool) > self.rules.multi_ticket_max or binomial(len(pool), GRID_SIZE) > max_grids:
            return None
        return Proposal((Ticket(pool, self._bonus),), MULTI_TICKET)

    def hybrid(self, max_grids: int) -> Optional[Proposal]:
        pool = self.universe.pool
        size = self.rules.multi_ticket_max
        if len(pool) <= size:
            return None
        multi = Ticket(pool[:size], self._bonus)
        multi_grids = multi.grids()
        budget = max_grids - len(multi_grids)
        if budget < 0:
            return None
        missed = [d for d in self.screen if not covers(multi_grids, d, self.req)]
        extra = greedy_cover(self.pruned, missed, self.req, budget, fallback=self.universe.candidates)
        return Proposal((multi,) + tuple(Ticket.single(g) for g in extra), HYBRID)

    def plans(self) -> List[Plan]:
        n = len(self.universe.pool)
        unit = self.rules.unit_price
        plans = [Plan(SINGLES, self.bounds.lower * unit, self.singles)]
        if n <= self.rules.multi_ticket_max:
            plans.append(Plan(MULTI_TICKET, ticket_cost(n), self.multi_ticket))
        else:
            plans.append(Plan(HYBRID, ticket_cost(self.rules.multi_ticket_max), self.hybrid))
        return sorted(plans, key=lambda p: p.estimated_cost)

    # -- search ----------------------------------------------------------

    def repair(self, proposal: Proposal, max_grids: int) -> Proposal:
        """
        Add singles for the draws the full universe still misses, a screen-sized
        batch at a time, until every draw is covered or max_grids is reached.
        """
        tickets = list(proposal.tickets)
        count = len(proposal.grids)
        missing = list(uncovered_draws(proposal.grids, self.universe.draws, self.req))
        while missing and count < max_grids:
            batch = missing[:self.config.sample_size]
            extra = greedy_cover(
                self.pruned, batch, self.req, max_grids - count, fallback=self.universe.candidates
            )
            if not extra:
                break
            log.info("Heuristic: %d draws still missed, adding %d grid(s)", len(missing), len(extra))
            tickets.extend(Ticket.single(g) for g in extra)
            count += len(extra)
            missing = [d for d in missing if not covers(extra, d, self.req)]
        return Proposal(tuple(tickets), proposal.strategy)

    def solve(self, max_grids: int) -> SearchOutcome:
        best: Optional[Proposal] = None
        best_ratio = -1.0

        for plan in self.plans():
            log.info("Heuristic: trying %s (estimated cost %s)", plan.name, plan.estimated_cost)
            proposal = plan.build(max_grids)
            if proposal is None:
                log.info("Heuristic: %s not applicable", plan.name)
                continue
            grids = proposal.grids
            if len(grids) > max_grids:
                continue

            if not covers_all(grids, self.screen, self.req):
                uncovered = sum(1 for d in self.screen if not covers(grids, d, self.req))
                ratio = 1 - uncovered / len(self.screen)
                if ratio > best_ratio:
                    best, best_ratio = proposal, ratio
                continue

            if self.sampled:
                proposal = self.repair(proposal, max_grids)
            report = validate(proposal.grids, self.universe)
            if report.valid:
                log.info("Heuristic: %s covers every draw with %d grids", plan.name, len(proposal.grids))
                return SearchOutcome(proposal=proposal, warnings=tuple(self.warnings()))

            log.info(
                "Heuristic: %s ran out of grids with %d draws uncovered",
                plan.name, report.total - report.covered,
            )
            ratio = report.coverage / 100
            if ratio > best_ratio:
                best, best_ratio = proposal, ratio

        return SearchOutcome(best_partial=best, warnings=tuple(self.warnings()))

    def best_effort(self, max_grids: int) -> Proposal:
        """Greedy pick of at most max_grids grids, covered or not."""
        chosen = greedy_cover(self.pruned, self.screen, self.req, max_grids, fallback=self.universe.candidates)
        if not chosen:
            chosen = list(self.universe.candidates[:max_grids])
        return Proposal.of_grids(chosen, SINGLES)
