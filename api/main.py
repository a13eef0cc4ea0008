from fastapi import FastAPI, Query
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, Field
from pathlib import Path
import sys
import logging
import threading
from typing import Optional

# ----- Ensure local package import (src/lotocover) without editable install -----
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC = PROJECT_ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from lotocover.config import EngineConfig
from lotocover.engine import AUTO, STRATEGIES, estimate_feasibility, solve_coverage
from lotocover.errors import CapacityExceeded, InvalidInput, ValidationContradiction

log = logging.getLogger(__name__)

# ----- Request / response models -----
class SolveRequest(BaseModel):
    pool: list[int]
    bonus_pool: list[int] = Field(default_factory=list)
    target_rank: int = 3
    include_bonus: bool = False
    max_grids: int = 10
    strategy: str = AUTO

class APIGrid(BaseModel):
    main: list[int]
    bonus: Optional[int] = None

class APITicket(BaseModel):
    numbers: list[int]
    bonus: Optional[int] = None
    kind: str
    cost: str

class SolveResponse(BaseModel):
    grids: list[APIGrid]
    tickets: list[APITicket]
    guaranteed: bool
    coverage: float
    tested_combinations: int
    total_cost: str
    strategy: str
    lower_bound: int
    warnings: list[str]

# ----- FastAPI app -----
app = FastAPI(title="Loto Coverage API")

CONFIG = EngineConfig.from_env()

# Concurrency guard: solves run in the threadpool, at most N at once
_solve_slots = threading.BoundedSemaphore(CONFIG.max_concurrent_solves)

@app.get("/", response_class=PlainTextResponse)
def root():
    return "Loto Coverage API: POST /solve with {\"pool\": [1, 2, 3, 4, 5, 6, 7, 8]}"

@app.get("/health")
def health():
    return {"status": "ok", "test_ceiling": CONFIG.test_ceiling, "strategies": list(STRATEGIES)}

@app.post("/solve", response_model=SolveResponse)
def solve(req: SolveRequest):
    if not _solve_slots.acquire(blocking=False):
        return JSONResponse(status_code=503, content={"error": "solver busy, retry later"})
    try:
        solution = solve_coverage(
            req.pool,
            req.bonus_pool,
            req.target_rank,
            req.include_bonus,
            req.max_grids,
            strategy=req.strategy,
            config=CONFIG,
        )
    except InvalidInput as e:
        return JSONResponse(status_code=422, content={"error": str(e)})
    except CapacityExceeded as e:
        return JSONResponse(status_code=413, content=e.to_dict())
    except ValidationContradiction as e:
        log.error("Validation contradiction on pool %s: %s", list(e.pool), e.reason)
        return JSONResponse(status_code=500, content={
            "error": "validation contradiction",
            "reason": e.reason,
            "pool": list(e.pool),
            "grids": [str(g) for g in e.grids],
            "uncovered": str(e.uncovered) if e.uncovered is not None else None,
        })
    finally:
        _solve_slots.release()
    return solution.to_dict()

@app.get("/feasibility")
def feasibility(
    pool_size: int = Query(..., ge=1),
    max_grids: int = Query(10, ge=1),
    target_rank: int = 3,
    bonus_count: int = Query(0, ge=0),
    include_bonus: bool = False,
):
    try:
        f = estimate_feasibility(pool_size, max_grids, target_rank, bonus_count, include_bonus, config=CONFIG)
    except InvalidInput as e:
        return JSONResponse(status_code=422, content={"error": str(e)})
    return {
        "feasible": f.feasible,
        "estimated_tests": f.estimated_tests,
        "suggested_ceiling": f.suggested_ceiling,
        "lower_bound": f.lower_bound,
        "candidates": f.candidates,
        "ceiling": CONFIG.test_ceiling,
    }
