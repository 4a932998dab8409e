"""
Pytest fixtures and configuration for the CogTrain test suite.
"""

import random
import shutil
import tempfile
from pathlib import Path
from typing import Generator

import pytest

# Ensure cogtrain package and main.py are importable
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    """Keep COGTRAIN_* variables and cached configs out of every test."""
    import os
    from cogtrain.bandits.config import reset_bandit_config
    from cogtrain.rewards.config import reset_reward_config

    for key in list(os.environ):
        if key.startswith("COGTRAIN_"):
            monkeypatch.delenv(key, raising=False)
    reset_bandit_config()
    reset_reward_config()
    yield
    reset_bandit_config()
    reset_reward_config()


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    temp_path = Path(tempfile.mkdtemp(prefix="cogtrain_test_"))
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def memory_store():
    """Fresh in-memory state store."""
    from cogtrain.bandits import InMemoryStore
    return InMemoryStore()


@pytest.fixture
def greedy_config():
    """Config with exploration disabled."""
    from cogtrain.bandits import BanditConfig
    return BanditConfig(epsilon=0.0, min_epsilon=0.0)


@pytest.fixture
def rng():
    """Seeded random source."""
    return random.Random(42)


@pytest.fixture
def make_bandit(memory_store, rng):
    """Factory for bandits sharing one store."""
    from cogtrain.bandits import BanditConfig, ContextualBandit
    from cogtrain.games import get_game_profile

    def _make(game: str = "memory_matching", config=None, store=None, **kwargs):
        return ContextualBandit(
            get_game_profile(game),
            config=config or BanditConfig(),
            store=store if store is not None else memory_store,
            rng=kwargs.pop("rng", rng),
            **kwargs,
        )
    return _make


@pytest.fixture
def success_metrics():
    """A clearly successful level."""
    return {
        "completed": True,
        "accuracy": 0.95,
        "avg_response_time_ms": 100,
        "engagement": 0.9,
        "frustration": 0.0,
    }


@pytest.fixture
def failure_metrics():
    """A clearly failed level."""
    return {"completed": False, "accuracy": 0.2}
