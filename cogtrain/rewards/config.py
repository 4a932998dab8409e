"""
Reward Configuration for CogTrain.

Module-local configuration for the rewards subsystem.
All settings are configurable via environment variables.
"""

import os
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


@dataclass
class RewardConfig:
    """
    Configuration for the rewards subsystem.

    Attributes:
        version: Schema version for reward signals

        # Hard clamps (one convention for every game)
        min_reward: Lower bound of the reward scale
        max_reward: Upper bound of the reward scale

        # Neutral values for missing metrics
        neutral_accuracy: Accuracy assumed when not reported
        neutral_engagement: Engagement assumed when not reported
        neutral_frustration: Frustration assumed when not reported
        neutral_speed: Speed score assumed when no timing is reported
        neutral_ratio: Value assumed for a missing game-specific ratio
    """

    version: str = "1.0.0"

    min_reward: float = -100.0
    max_reward: float = 100.0

    neutral_accuracy: float = 0.5
    neutral_engagement: float = 0.5
    neutral_frustration: float = 0.0
    neutral_speed: float = 0.5
    neutral_ratio: float = 0.5

    def __post_init__(self):
        """Validate the reward scale."""
        if self.min_reward >= self.max_reward:
            raise ValueError(
                f"min_reward must be below max_reward, got "
                f"[{self.min_reward}, {self.max_reward}]"
            )

    @classmethod
    def from_env(cls) -> "RewardConfig":
        """
        Create configuration from environment variables.

        Environment variables:
            COGTRAIN_REWARD_VERSION: Schema version string
            COGTRAIN_REWARD_NEUTRAL_ACCURACY: float
            COGTRAIN_REWARD_NEUTRAL_ENGAGEMENT: float
            COGTRAIN_REWARD_NEUTRAL_FRUSTRATION: float
            COGTRAIN_REWARD_NEUTRAL_SPEED: float
            COGTRAIN_REWARD_NEUTRAL_RATIO: float
        """
        def get_unit(key: str, default: float) -> float:
            try:
                value = float(os.environ.get(key, default))
            except (ValueError, TypeError):
                return default
            return value if 0.0 <= value <= 1.0 else default

        return cls(
            version=os.environ.get("COGTRAIN_REWARD_VERSION", "1.0.0"),
            neutral_accuracy=get_unit("COGTRAIN_REWARD_NEUTRAL_ACCURACY", 0.5),
            neutral_engagement=get_unit("COGTRAIN_REWARD_NEUTRAL_ENGAGEMENT", 0.5),
            neutral_frustration=get_unit("COGTRAIN_REWARD_NEUTRAL_FRUSTRATION", 0.0),
            neutral_speed=get_unit("COGTRAIN_REWARD_NEUTRAL_SPEED", 0.5),
            neutral_ratio=get_unit("COGTRAIN_REWARD_NEUTRAL_RATIO", 0.5),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "version": self.version,
            "min_reward": self.min_reward,
            "max_reward": self.max_reward,
            "neutral_accuracy": self.neutral_accuracy,
            "neutral_engagement": self.neutral_engagement,
            "neutral_frustration": self.neutral_frustration,
            "neutral_speed": self.neutral_speed,
            "neutral_ratio": self.neutral_ratio,
        }


# Global config instance (lazy-loaded)
_config: Optional[RewardConfig] = None


def get_reward_config(force_reload: bool = False) -> RewardConfig:
    """
    Get the global reward configuration.

    Lazy-loads configuration from environment variables.

    Args:
        force_reload: Force reload from environment

    Returns:
        RewardConfig instance
    """
    global _config

    if _config is None or force_reload:
        _config = RewardConfig.from_env()
        logger.debug(
            f"[REWARDS] Config loaded: version={_config.version}, "
            f"scale=[{_config.min_reward}, {_config.max_reward}]"
        )

    return _config


def reset_reward_config() -> None:
    """Reset global config (mainly for testing)."""
    global _config
    _config = None
