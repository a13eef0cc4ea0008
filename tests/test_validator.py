import logging

import pytest

from lotocover.bounds import theoretical_bounds
from lotocover.errors import ValidationContradiction
from lotocover.rules import Grid
from lotocover.solution import SINGLES, Proposal
from lotocover.universe import build_universe
from lotocover.validator import MAX_REPORTED_FAILURES, confirm, validate


def test_validate_full_cover():
    u = build_universe(range(1, 11))
    report = validate([Grid((1, 2, 3, 4, 5)), Grid((6, 7, 8, 9, 10))], u)
    assert report.valid
    assert report.coverage == 100.0
    assert report.uncovered == ()


def test_validate_partial_cover():
    u = build_universe(range(1, 10))
    report = validate([Grid((1, 2, 3, 4, 5))], u)
    assert not report.valid
    assert report.covered == 81
    assert report.coverage == pytest.approx(100 * 81 / 126)


def test_failures_are_capped():
    u = build_universe(range(1, 16))
    report = validate([Grid((1, 2, 3, 4, 5))], u)
    assert report.total - report.covered == 3003 - 501
    assert len(report.uncovered) == MAX_REPORTED_FAILURES


def test_claim_below_floor_is_contradiction(caplog):
    u = build_universe(range(1, 9))
    proposal = Proposal.of_grids([Grid((1, 2, 3, 4, 5))], SINGLES)
    with caplog.at_level(logging.ERROR, logger="lotocover.validator"):
        with pytest.raises(ValidationContradiction) as exc:
            confirm(proposal, u, theoretical_bounds(8, 3))
    assert "below the provable minimum of 2" in str(exc.value)
    assert exc.value.pool == tuple(range(1, 9))
    assert any(r.levelno == logging.ERROR for r in caplog.records)


def test_refuted_claim_is_contradiction():
    u = build_universe(range(1, 9))
    proposal = Proposal.of_grids([Grid((1, 2, 3, 4, 5)), Grid((1, 2, 3, 4, 6))], SINGLES)
    with pytest.raises(ValidationContradiction) as exc:
        confirm(proposal, u, theoretical_bounds(8, 3))
    assert exc.value.uncovered is not None
    assert len(exc.value.grids) == 2


def test_confirm_accepts_real_cover():
    u = build_universe(range(1, 9))
    proposal = Proposal.of_grids([Grid((1, 2, 3, 4, 5)), Grid((1, 2, 6, 7, 8))], SINGLES)
    assert confirm(proposal, u, theoretical_bounds(8, 3)).valid
