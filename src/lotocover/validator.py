"""
Independent re-check of solver output against the full, unsampled universe.

A multi-ticket over part of the pool, a pair of "complementary" grids, a
solution screened on a sample: none of these is a guarantee until every draw
has been checked here. ``confirm`` is the only place a result becomes
``guaranteed``.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from .bounds import IMPOSSIBLE, Bounds, judge_claim
from .coverage import covers
from .errors import ValidationContradiction
from .rules import Draw, Grid
from .solution import Proposal
from .universe import Universe

log = logging.getLogger(__name__)

MAX_REPORTED_FAILURES = 100


@dataclass(frozen=True)
class ValidationReport:
    valid: bool
    covered: int
    total: int
    uncovered: Tuple[Draw, ...]

    @property
    def coverage(self) -> float:
        if self.total == 0:
            return 100.0
        return 100.0 * self.covered / self.total


def validate(grids: Sequence[Grid], universe: Universe) -> ValidationReport:
    covered = 0
    failures: List[Draw] = []
    for draw in universe.draws:
        if covers(grids, draw, universe.requirement):
            covered += 1
        elif len(failures) < MAX_REPORTED_FAILURES:
            failures.append(draw)
    return ValidationReport(
        valid=covered == universe.size,
        covered=covered,
        total=universe.size,
        uncovered=tuple(failures),
    )


def confirm(proposal: Proposal, universe: Universe, bounds: Bounds) -> ValidationReport:
    """
    Validate a claimed cover. A claim below the floor or a claim the full check
    refutes is a solver defect and raises ValidationContradiction.
    """
    grids = proposal.grids
    verdict = judge_claim(len(grids), bounds)
    if verdict == IMPOSSIBLE:
        log.error(
            "Solver %s claimed %d grids, below the floor of %d; pool=%s grids=%s",
            proposal.strategy, len(grids), bounds.lower, universe.pool, [str(g) for g in grids],
        )
        raise ValidationContradiction(
            f"{proposal.strategy} claimed a cover with {len(grids)} grids, "
            f"below the provable minimum of {bounds.lower}",
            pool=universe.pool,
            grids=grids,
        )

    report = validate(grids, universe)
    if not report.valid:
        first = report.uncovered[0]
        log.error(
            "Solver %s claimed a cover the full check rejects: %d/%d draws covered, "
            "first uncovered draw %s; pool=%s grids=%s",
            proposal.strategy, report.covered, report.total, first, universe.pool,
            [str(g) for g in grids],
        )
        raise ValidationContradiction(
            f"{proposal.strategy} claimed a cover but draw {first} is not covered",
            pool=universe.pool,
            grids=grids,
            uncovered=first,
        )
    log.info("Validated %s: %d grids cover all %d draws (%s)", proposal.strategy, len(grids), report.total, verdict)
    return report
