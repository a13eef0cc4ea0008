from __future__ import annotations
import os
from dataclasses import dataclass, fields
from typing import Mapping, Optional

# Upper bound on coverage tests the exact search may run for one request.
TEST_CEILING = 1_000_000

# Pools up to this size try the exact search first.
EXACT_POOL_LIMIT = 8

# Draw universes larger than this are screened on a sample first.
SAMPLE_THRESHOLD = 1000
SAMPLE_SIZE = 1000

KEEP_FRACTION = 0.3
MIN_KEEP = 10
IMPROVE_MAX_TESTS = 10_000
# Grid/draw coverage checks the heuristic may spend screening candidates.
HEURISTIC_CEILING = 20_000_000
SEED = 42
MAX_CONCURRENT_SOLVES = 2

ENV_PREFIX = "LOTOCOVER_"


@dataclass(frozen=True)
class EngineConfig:
    test_ceiling: int = TEST_CEILING
    exact_pool_limit: int = EXACT_POOL_LIMIT
    sample_threshold: int = SAMPLE_THRESHOLD
    sample_size: int = SAMPLE_SIZE
    keep_fraction: float = KEEP_FRACTION
    min_keep: int = MIN_KEEP
    improve_max_tests: int = IMPROVE_MAX_TESTS
    heuristic_ceiling: int = HEURISTIC_CEILING
    seed: int = SEED
    max_concurrent_solves: int = MAX_CONCURRENT_SOLVES

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EngineConfig":
        """
        Build a config from LOTOCOVER_* variables, e.g. LOTOCOVER_TEST_CEILING=500000.
        Unset variables keep their defaults; unparsable values raise ValueError.
        """
        env = os.environ if environ is None else environ
        overrides = {}
        for f in fields(cls):
            raw = env.get(ENV_PREFIX + f.name.upper())
            if raw is None or raw.strip() == "":
                continue
            caster = float if f.type in (float, "float") else int
            try:
                overrides[f.name] = caster(raw)
            except ValueError:
                raise ValueError(f"{ENV_PREFIX}{f.name.upper()} must be a number, got {raw!r}")
        return cls(**overrides)


DEFAULT_CONFIG = EngineConfig()
