from lotocover.coverage import (
    count_covered, count_uncovered, covers, covers_all, grid_covers, match_count, uncovered_draws,
)
from lotocover.rules import CoverageRequirement, Grid
from lotocover.universe import build_universe

RANK3 = CoverageRequirement(3)


def test_match_count_main_only():
    assert match_count(Grid((1, 2, 3, 4, 5)), Grid((3, 4, 5, 6, 7)), RANK3) == 3
    assert match_count(Grid((1, 2, 3, 4, 5), 1), Grid((3, 4, 5, 6, 7), 1), RANK3) == 3


def test_match_count_with_bonus():
    req = CoverageRequirement(3, include_bonus=True)
    assert match_count(Grid((1, 2, 3, 4, 5), 1), Grid((4, 5, 6, 7, 8), 1), req) == 3
    assert match_count(Grid((1, 2, 3, 4, 5), 1), Grid((4, 5, 6, 7, 8), 2), req) == 2
    assert grid_covers(Grid((1, 2, 3, 4, 5), 1), Grid((4, 5, 6, 7, 8), 1), req)


def test_disjoint_grids_cover_ten_number_pool():
    # two disjoint grids split every 5-draw from 10 numbers 3+2 or better
    u = build_universe(range(1, 11))
    grids = [Grid((1, 2, 3, 4, 5)), Grid((6, 7, 8, 9, 10))]
    assert covers_all(grids, u.draws, RANK3)
    assert count_covered(grids, u.draws, RANK3) == 252


def test_single_grid_on_nine_numbers():
    u = build_universe(range(1, 10))
    grid = [Grid((1, 2, 3, 4, 5))]
    assert count_uncovered(grid, u.draws, RANK3) == 126 - 81
    assert not covers(grid, Grid((1, 2, 6, 7, 8)), RANK3)
    assert Grid((1, 6, 7, 8, 9)) in list(uncovered_draws(grid, u.draws, RANK3))


def test_count_uncovered_stops_early():
    u = build_universe(range(1, 10))
    assert count_uncovered([Grid((1, 2, 3, 4, 5))], u.draws, RANK3, stop_above=3) == 4
