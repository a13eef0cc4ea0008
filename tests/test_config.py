import pytest

from lotocover.config import DEFAULT_CONFIG, EngineConfig


def test_defaults():
    assert DEFAULT_CONFIG.test_ceiling == 1_000_000
    assert DEFAULT_CONFIG.exact_pool_limit == 8
    assert DEFAULT_CONFIG.sample_size == 1000


def test_from_env_overrides():
    cfg = EngineConfig.from_env({
        "LOTOCOVER_TEST_CEILING": "5000",
        "LOTOCOVER_KEEP_FRACTION": "0.5",
        "LOTOCOVER_SEED": "",
        "UNRELATED": "x",
    })
    assert cfg.test_ceiling == 5000
    assert cfg.keep_fraction == 0.5
    assert cfg.seed == DEFAULT_CONFIG.seed


def test_from_env_rejects_garbage():
    with pytest.raises(ValueError):
        EngineConfig.from_env({"LOTOCOVER_MAX_CONCURRENT_SOLVES": "many"})


def test_heuristic_ceiling_from_env():
    cfg = EngineConfig.from_env({"LOTOCOVER_HEURISTIC_CEILING": "1000"})
    assert cfg.heuristic_ceiling == 1000
    assert DEFAULT_CONFIG.heuristic_ceiling == 20_000_000
