from __future__ import annotations
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, List, Optional

from .bounds import Bounds, lower_bound, theoretical_bounds
from .config import DEFAULT_CONFIG, EngineConfig
from .errors import InvalidInput
from .exact import CancelSignal, ExactSolver, admit_exact, estimate_tests, suggest_max_grids
from .heuristic import HeuristicSolver, admit_heuristic
from .rules import MAX_RANK, MIN_RANK, CoverageRequirement, LotoRules
from .solution import PARTIAL, Proposal, SearchOutcome, Solution
from .universe import Universe, build_universe, universe_size
from .validator import confirm, validate

log = logging.getLogger(__name__)

AUTO = "auto"
EXACT = "exact"
HEURISTIC = "heuristic"
STRATEGIES = (AUTO, EXACT, HEURISTIC)


@dataclass(frozen=True)
class Feasibility:
    feasible: bool
    estimated_tests: int
    suggested_ceiling: int
    lower_bound: int
    candidates: int


def estimate_feasibility(
    pool_size: int,
    max_grids: int,
    target_rank: int = 3,
    bonus_count: int = 0,
    include_bonus: bool = False,
    config: Optional[EngineConfig] = None,
    rules: Optional[LotoRules] = None,
) -> Feasibility:
    """
    Pre-flight an exact search without building anything.

    estimated_tests: subsets the search would test (a partial sum once it passes
    the ceiling). suggested_ceiling: the largest max_grids that fits under the
    ceiling, 0 when none does. feasible: max_grids reaches the floor and the
    search fits.
    """
    config = config or DEFAULT_CONFIG
    rules = rules or LotoRules()
    if not rules.grid_size <= pool_size <= rules.main_pool:
        raise InvalidInput(f"Pool size must be {rules.grid_size}-{rules.main_pool}, got {pool_size}")
    if not MIN_RANK <= target_rank <= MAX_RANK:
        raise InvalidInput(f"target_rank must be between {MIN_RANK} and {MAX_RANK}, got {target_rank}")
    if not 0 <= bonus_count <= rules.bonus_pool:
        raise InvalidInput(f"bonus_count must be 0-{rules.bonus_pool}, got {bonus_count}")
    rules.validate_max_grids(max_grids)

    bonus = bonus_count if include_bonus else 0
    floor = lower_bound(pool_size, target_rank, bonus, include_bonus)
    candidates = universe_size(pool_size, bonus)
    estimated = estimate_tests(candidates, floor, max_grids, config.test_ceiling)
    return Feasibility(
        feasible=max_grids >= floor and estimated <= config.test_ceiling,
        estimated_tests=estimated,
        suggested_ceiling=suggest_max_grids(candidates, floor, config.test_ceiling),
        lower_bound=floor,
        candidates=candidates,
    )


def _unique(messages: Iterable[str]) -> tuple:
    return tuple(dict.fromkeys(messages))


def _confirmed(proposal: Proposal, universe: Universe, bounds: Bounds, warnings: List[str]) -> Solution:
    report = confirm(proposal, universe, bounds)
    return Solution(
        grids=proposal.grids,
        tickets=proposal.tickets,
        guaranteed=True,
        coverage=report.coverage,
        tested_combinations=universe.size,
        total_cost=proposal.cost,
        strategy=proposal.strategy,
        lower_bound=bounds.lower,
        warnings=_unique(warnings),
    )


def _unconfirmed(
    proposal: Optional[Proposal], universe: Universe, bounds: Bounds, warnings: List[str], strategy: Optional[str] = None
) -> Solution:
    if proposal is None:
        return Solution(
            grids=(), tickets=(), guaranteed=False, coverage=0.0,
            tested_combinations=universe.size, total_cost=Decimal("0"),
            strategy=strategy or PARTIAL, lower_bound=bounds.lower, warnings=_unique(warnings),
        )
    report = validate(proposal.grids, universe)
    return Solution(
        grids=proposal.grids,
        tickets=proposal.tickets,
        guaranteed=False,
        coverage=report.coverage,
        tested_combinations=universe.size,
        total_cost=proposal.cost,
        strategy=strategy or proposal.strategy,
        lower_bound=bounds.lower,
        warnings=_unique(warnings),
    )


def _finish(
    outcome: SearchOutcome, universe: Universe, bounds: Bounds, warnings: List[str], max_grids: int
) -> Solution:
    if outcome.proposal is not None:
        return _confirmed(outcome.proposal, universe, bounds, warnings)
    warnings.append(f"no guaranteed cover found within {max_grids} grids")
    return _unconfirmed(outcome.best_partial, universe, bounds, warnings)


def solve_coverage(
    pool: Iterable[int],
    bonus_pool: Iterable[int] = (),
    target_rank: int = 3,
    include_bonus: bool = False,
    max_grids: int = 10,
    *,
    strategy: str = AUTO,
    config: Optional[EngineConfig] = None,
    rules: Optional[LotoRules] = None,
    cancel: Optional[CancelSignal] = None,
    progress: bool = False,
) -> Solution:
    """
    Find grids guaranteeing `target_rank` matches for every draw from `pool`.

    "auto" runs the exact search first for small pools it can afford, otherwise
    the heuristic strategies, falling back to the exact search only when it fits
    under the test ceiling. CapacityExceeded is raised before any draw is
    enumerated, never after a search came up short. Only a full re-check marks
    the result guaranteed.
    """
    config = config or DEFAULT_CONFIG
    rules = rules or LotoRules()
    pool = rules.validate_pool(pool)
    bonus = rules.validate_bonus_pool(bonus_pool or ())
    req = CoverageRequirement(target_rank, include_bonus)
    rules.validate_requirement(req, bonus)
    rules.validate_max_grids(max_grids)
    if strategy not in STRATEGIES:
        raise InvalidInput(f"strategy must be one of {', '.join(STRATEGIES)}, got {strategy!r}")

    warnings: List[str] = []
    if bonus and not include_bonus:
        warnings.append("bonus pool ignored because include_bonus is off")

    bonus_count = len(bonus) if include_bonus else 0
    bounds = theoretical_bounds(len(pool), target_rank, bonus_count, include_bonus)
    # refuse oversized work before any draw is enumerated
    if strategy == EXACT and max_grids >= bounds.lower:
        admit_exact(universe_size(len(pool), bonus_count), max(1, bounds.lower), max_grids, config)
    else:
        admit_heuristic(len(pool), bonus_count, config, rules)

    universe = build_universe(pool, bonus, req)
    log.info(
        "Solving pool of %d for rank %d: %d draws, floor %d grid(s), max_grids %d",
        len(pool), target_rank, universe.size, bounds.lower, max_grids,
    )

    heuristic = HeuristicSolver(universe, bounds, config, rules)
    if max_grids < bounds.lower:
        warnings.append(f"max_grids={max_grids} is below the provable minimum of {bounds.lower} grids")
        return _unconfirmed(heuristic.best_effort(max_grids), universe, bounds, warnings, PARTIAL)

    exact = ExactSolver(universe, bounds, config, cancel=cancel, progress=progress)
    affordable = exact.estimate(max_grids) <= config.test_ceiling
    if strategy == EXACT or (strategy == AUTO and affordable and len(pool) <= config.exact_pool_limit):
        return _finish(exact.solve(max_grids), universe, bounds, warnings, max_grids)

    outcome = heuristic.solve(max_grids)
    warnings.extend(outcome.warnings)
    if outcome.proposal is not None or strategy == HEURISTIC:
        return _finish(outcome, universe, bounds, warnings, max_grids)

    if not affordable:
        warnings.append(
            f"exact search over {max_grids} grids exceeds the ceiling of {config.test_ceiling:,} tests, skipped"
        )
        return _finish(outcome, universe, bounds, warnings, max_grids)

    log.info("Heuristic strategies failed, falling back to exact search")
    fallback = exact.solve(max_grids)
    if fallback.proposal is None and fallback.best_partial is None:
        fallback = SearchOutcome(best_partial=outcome.best_partial)
    return _finish(fallback, universe, bounds, warnings, max_grids)
