"""
CogTrain: adaptive difficulty for cognitive-training mini-games.

Typical session:

    from cogtrain import BanditRegistry, GameContext

    registry = BanditRegistry()
    bandit = registry.get("memory_matching")

    context = GameContext(current_level=1)
    action = bandit.select(context)
    # ... the game plays the level with action.params ...
    bandit.observe(context, action, {"completed": True, "accuracy": 0.9})
    level = bandit.next_level(context)
"""

__version__ = "1.0.0"

from .bandits import (
    BanditConfig,
    BanditRegistry,
    ContextualBandit,
    GameContext,
    InMemoryStore,
    JsonFileStore,
)
from .games import GAME_PROFILES, get_game_profile, list_games
from .rewards import PerformanceMetrics, RewardSignal, RewardWeights

__all__ = [
    "__version__",
    "BanditConfig",
    "BanditRegistry",
    "ContextualBandit",
    "GameContext",
    "InMemoryStore",
    "JsonFileStore",
    "GAME_PROFILES",
    "get_game_profile",
    "list_games",
    "PerformanceMetrics",
    "RewardSignal",
    "RewardWeights",
]
