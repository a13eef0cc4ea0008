import logging
import threading

import pytest

from lotocover.bounds import theoretical_bounds
from lotocover.config import EngineConfig
from lotocover.errors import CapacityExceeded, SearchCancelled
from lotocover.exact import ExactSolver, admit_exact, estimate_tests, suggest_max_grids
from lotocover.rules import Grid
from lotocover.universe import Universe, build_universe


def _solver(n, **kw):
    return ExactSolver(build_universe(range(1, n + 1)), theoretical_bounds(n, 3), **kw)


def test_estimate_tests():
    assert estimate_tests(56, 2, 3) == 1540 + 27720
    assert estimate_tests(56, 2, 10, ceiling=1_000_000) > 1_000_000
    assert estimate_tests(6, 1, 10) == 2 ** 6 - 1


def test_suggest_max_grids():
    assert suggest_max_grids(56, 2, 1_000_000) == 4
    assert suggest_max_grids(10_000, 2, 1_000) == 0


def test_first_cover_is_deterministic():
    outcome = _solver(8).solve(3)
    assert outcome.proposal.grids == (Grid((1, 2, 3, 4, 5)), Grid((1, 2, 6, 7, 8)))


def test_ten_numbers_two_disjoint_grids():
    outcome = _solver(10).solve(2)
    assert outcome.proposal.grids == (Grid((1, 2, 3, 4, 5)), Grid((6, 7, 8, 9, 10)))


def test_exhausted_search_returns_best_partial():
    outcome = _solver(9, config=EngineConfig()).solve(1)
    assert outcome.proposal is None
    assert outcome.best_partial is None  # floor is 2, nothing tested below it


def test_admission_gate_refuses_before_search():
    with pytest.raises(CapacityExceeded) as exc:
        _solver(8).solve(10)
    assert exc.value.suggested_max_grids == 4
    assert exc.value.ceiling == 1_000_000
    assert "lower max_grids to 4" in str(exc.value)


def test_cancel_signal():
    ev = threading.Event()
    ev.set()
    with pytest.raises(SearchCancelled):
        _solver(8, cancel=ev).solve(3)


def test_exhaustion_log_reports_searched_size(caplog):
    full = build_universe(range(1, 10))
    narrowed = Universe(full.pool, full.bonus_pool, full.requirement, full.draws, full.candidates[:1])
    solver = ExactSolver(narrowed, theoretical_bounds(9, 3))
    with caplog.at_level(logging.INFO, logger="lotocover.exact"):
        outcome = solver.solve(3)
    assert outcome.proposal is None
    assert "no cover within 1 grid(s)" in caplog.text


def test_admit_exact_without_a_universe():
    assert admit_exact(56, 2, 3) == 1540 + 27720
    with pytest.raises(CapacityExceeded) as exc:
        admit_exact(56, 2, 10)
    assert exc.value.search == "exact search"
    assert exc.value.suggested_max_grids == 4
