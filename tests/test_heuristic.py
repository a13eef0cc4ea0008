from decimal import Decimal

import pytest

from lotocover.bounds import theoretical_bounds
from lotocover.config import DEFAULT_CONFIG, EngineConfig
from lotocover.coverage import covers_all
from lotocover.errors import CapacityExceeded
from lotocover.heuristic import (
    HeuristicSolver, admit_heuristic, estimate_work, greedy_cover, prune_candidates, score_grid,
)
from lotocover.rules import CoverageRequirement, Grid
from lotocover.solution import HYBRID, MULTI_TICKET, SINGLES, Proposal
from lotocover.universe import build_universe
from lotocover.validator import validate

RANK3 = CoverageRequirement(3)


def _solver(n, config=DEFAULT_CONFIG):
    u = build_universe(range(1, n + 1))
    return HeuristicSolver(u, theoretical_bounds(n, 3), config)


def test_score_prefers_spread_over_runs():
    pool = list(range(1, 50))
    spread = score_grid(Grid((4, 15, 26, 37, 48)), pool)
    run = score_grid(Grid((1, 2, 3, 4, 5)), pool)
    assert spread > run


def test_prune_keeps_a_fraction():
    u = build_universe(range(1, 10))
    kept = prune_candidates(u.candidates, u.pool)
    assert len(kept) == 37
    assert len(set(kept)) == 37
    small = build_universe(range(1, 7))
    assert len(prune_candidates(small.candidates, small.pool)) == 6


def test_greedy_cover_finds_disjoint_pair():
    u = build_universe(range(1, 11))
    chosen = greedy_cover(u.candidates, u.draws, RANK3, 10)
    assert chosen == [Grid((1, 2, 3, 4, 5)), Grid((6, 7, 8, 9, 10))]


def test_greedy_cover_respects_limit():
    u = build_universe(range(1, 10))
    chosen = greedy_cover(u.candidates, u.draws, RANK3, 1)
    assert len(chosen) == 1


def test_multi_ticket_when_affordable():
    s = _solver(7)
    p = s.multi_ticket(21)
    assert p.strategy == MULTI_TICKET
    assert p.cost == Decimal("46.20")
    assert len(p.grids) == 21
    assert s.multi_ticket(20) is None


def test_hybrid_multi_alone_covers_eleven():
    s = _solver(11)
    p = s.hybrid(252)
    assert p.strategy == HYBRID
    assert len(p.tickets) == 1
    assert p.cost == Decimal("554.40")
    assert validate(p.grids, s.universe).valid
    assert s.hybrid(251) is None


def test_hybrid_adds_singles_for_excluded_numbers():
    s = _solver(13, EngineConfig(sample_threshold=10_000))
    p = s.hybrid(300)
    assert p.tickets[0].kind == "multiple"
    extras = len(p.tickets) - 1
    assert extras >= 1
    assert p.cost == Decimal("554.40") + Decimal("2.20") * extras
    assert validate(p.grids, s.universe).valid


def test_solve_large_pool_warns_and_validates():
    s = _solver(11)
    outcome = s.solve(30)
    assert outcome.proposal is not None
    assert outcome.proposal.strategy == SINGLES
    assert validate(outcome.proposal.grids, s.universe).valid
    assert any("multi-ticket limit of 10 numbers, 1 number(s) excluded" in w for w in outcome.warnings)


def test_sampling_kicks_in_above_threshold():
    s = _solver(13)
    assert s.sampled
    assert len(s.screen) == DEFAULT_CONFIG.sample_size
    assert any("sample" in w for w in s.warnings())


def test_best_effort_partial():
    s = _solver(9)
    p = s.best_effort(1)
    assert len(p.grids) == 1
    report = validate(p.grids, s.universe)
    assert report.covered == 81
    assert not covers_all(p.grids, s.universe.draws, RANK3)


def test_estimate_work():
    assert estimate_work(6) == 6 + 6 * 6
    assert estimate_work(126) == 126 + 37 * 126
    assert estimate_work(3003) == 3003 + 900 * 1000


def test_admit_heuristic():
    assert admit_heuristic(15) == estimate_work(3003)
    with pytest.raises(CapacityExceeded) as exc:
        admit_heuristic(30)
    assert exc.value.suggested_pool_size == 26
    assert exc.value.to_dict()["search"] == "heuristic search"


def test_repair_covers_what_the_sample_missed():
    s = _solver(15)
    screened = s.singles(40)
    assert covers_all(screened.grids, s.screen, RANK3)
    repaired = s.repair(screened, 40)
    assert repaired.grids[:len(screened.grids)] == screened.grids
    assert validate(repaired.grids, s.universe).valid
    assert repaired.strategy == SINGLES


def test_repair_stops_at_max_grids():
    s = _solver(15)
    start = Proposal.of_grids([Grid((1, 2, 3, 4, 5))], SINGLES)
    repaired = s.repair(start, 3)
    assert len(repaired.grids) == 3
    assert not validate(repaired.grids, s.universe).valid


def test_scores_are_ints_and_plan_costs_are_money():
    s = _solver(11)
    assert all(isinstance(score_grid(g, s.universe.pool), int) for g in s.universe.candidates[:20])
    plans = s.plans()
    assert [p.name for p in plans] == [SINGLES, HYBRID]
    assert all(isinstance(p.estimated_cost, Decimal) for p in plans)
    assert plans[0].estimated_cost == Decimal("6.60")
