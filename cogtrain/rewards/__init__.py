"""
Rewards Module for CogTrain.

Turns a level's performance report into one scalar reward:
- PerformanceMetrics: Tolerant container for what the game UI reports
- RewardSignal: Deterministic, clamped reward computation
- RewardWeights: Per-game component weights

Every game shares the same [-100, 100] scale from RewardConfig.
"""

from .config import RewardConfig, get_reward_config, reset_reward_config
from .reward_weights import RewardWeights, DEFAULT_REWARD_WEIGHTS
from .reward_signal import PerformanceMetrics, RewardSignal

__all__ = [
    "RewardConfig",
    "get_reward_config",
    "reset_reward_config",
    "RewardWeights",
    "DEFAULT_REWARD_WEIGHTS",
    "PerformanceMetrics",
    "RewardSignal",
]
