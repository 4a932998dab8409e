"""
Bandit Configuration for CogTrain.

Module-local configuration for the adaptive-difficulty bandits.
All settings are configurable via environment variables.
"""

import math
import os
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


@dataclass
class BanditConfig:
    """
    Configuration for the adaptive-difficulty bandits.

    Attributes:
        schema_version: Schema version for persisted bandit state
        freeze_mode: If True, bandits are read-only (no updates, no saves)

        # Exploration
        epsilon: Starting exploration rate
        min_epsilon: Floor for the decayed exploration rate
        epsilon_decay: Multiplicative decay applied after every update
        ucb_weight: Weight of the UCB bonus in the exploitation score
        unexplored_bonus: UCB bonus used for arms that were never pulled

        # Learning
        learning_rate: SGD step size for the per-arm linear model
        weight_decay: Multiplicative shrinkage applied after each SGD step
        blend_pulls: Pulls after which predictions rely fully on the linear model
        profile_alpha: Smoothing factor for user profile updates

        # Bookkeeping
        history_limit: Maximum number of reward records kept
        fallback_pool_size: Catalogue prefix used when a level has no candidates

        # Persistence
        store_dir: Directory for bandit state files
    """

    schema_version: str = "1.0.0"
    freeze_mode: bool = False

    epsilon: float = 0.3
    min_epsilon: float = 0.05
    epsilon_decay: float = 0.995
    ucb_weight: float = 0.1
    unexplored_bonus: float = 100.0

    learning_rate: float = 0.1
    weight_decay: float = 0.999
    blend_pulls: int = 10
    profile_alpha: float = 0.1

    history_limit: int = 100
    fallback_pool_size: int = 10

    store_dir: str = "kb/bandits/"

    def __post_init__(self):
        """Validate ranges."""
        if not 0.0 <= self.min_epsilon <= 1.0:
            raise ValueError(f"min_epsilon must be in [0, 1], got {self.min_epsilon}")
        if not 0.0 <= self.epsilon <= 1.0:
            raise ValueError(f"epsilon must be in [0, 1], got {self.epsilon}")
        if not 0.0 < self.epsilon_decay <= 1.0:
            raise ValueError(f"epsilon_decay must be in (0, 1], got {self.epsilon_decay}")
        if self.learning_rate <= 0:
            raise ValueError(f"learning_rate must be positive, got {self.learning_rate}")
        if self.blend_pulls < 1:
            raise ValueError(f"blend_pulls must be >= 1, got {self.blend_pulls}")
        if self.history_limit < 1:
            raise ValueError(f"history_limit must be >= 1, got {self.history_limit}")
        if self.fallback_pool_size < 1:
            raise ValueError(
                f"fallback_pool_size must be >= 1, got {self.fallback_pool_size}"
            )

    @classmethod
    def from_env(cls) -> "BanditConfig":
        """
        Create configuration from environment variables.

        Environment variables:
            COGTRAIN_BANDIT_SCHEMA_VERSION: Schema version string
            COGTRAIN_BANDIT_FREEZE_MODE: "true" for read-only mode
            COGTRAIN_BANDIT_EPSILON: float
            COGTRAIN_BANDIT_MIN_EPSILON: float
            COGTRAIN_BANDIT_EPSILON_DECAY: float
            COGTRAIN_BANDIT_UCB_WEIGHT: float
            COGTRAIN_BANDIT_LEARNING_RATE: float
            COGTRAIN_BANDIT_WEIGHT_DECAY: float
            COGTRAIN_BANDIT_BLEND_PULLS: int
            COGTRAIN_BANDIT_PROFILE_ALPHA: float
            COGTRAIN_BANDIT_HISTORY_LIMIT: int
            COGTRAIN_BANDIT_STORE_DIR: path string
        """
        def get_bool(key: str, default: bool) -> bool:
            val = os.environ.get(key, "").lower()
            if val in ("true", "1", "yes"):
                return True
            elif val in ("false", "0", "no"):
                return False
            return default

        def get_float(key: str, default: float) -> float:
            try:
                return float(os.environ.get(key, default))
            except (ValueError, TypeError):
                return default

        def get_int(key: str, default: int) -> int:
            try:
                return int(os.environ.get(key, default))
            except (ValueError, TypeError):
                return default

        def get_unit(key: str, default: float) -> float:
            value = get_float(key, default)
            return value if math.isfinite(value) and 0.0 <= value <= 1.0 else default

        def get_positive(key: str, default: float) -> float:
            value = get_float(key, default)
            return value if math.isfinite(value) and value > 0 else default

        return cls(
            schema_version=os.environ.get("COGTRAIN_BANDIT_SCHEMA_VERSION", "1.0.0"),
            freeze_mode=get_bool("COGTRAIN_BANDIT_FREEZE_MODE", False),
            epsilon=get_unit("COGTRAIN_BANDIT_EPSILON", 0.3),
            min_epsilon=get_unit("COGTRAIN_BANDIT_MIN_EPSILON", 0.05),
            epsilon_decay=get_unit("COGTRAIN_BANDIT_EPSILON_DECAY", 0.995) or 0.995,
            ucb_weight=get_positive("COGTRAIN_BANDIT_UCB_WEIGHT", 0.1),
            learning_rate=get_positive("COGTRAIN_BANDIT_LEARNING_RATE", 0.1),
            weight_decay=get_unit("COGTRAIN_BANDIT_WEIGHT_DECAY", 0.999) or 0.999,
            blend_pulls=max(1, get_int("COGTRAIN_BANDIT_BLEND_PULLS", 10)),
            profile_alpha=get_unit("COGTRAIN_BANDIT_PROFILE_ALPHA", 0.1),
            history_limit=max(1, get_int("COGTRAIN_BANDIT_HISTORY_LIMIT", 100)),
            store_dir=os.environ.get("COGTRAIN_BANDIT_STORE_DIR", "kb/bandits/"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "schema_version": self.schema_version,
            "freeze_mode": self.freeze_mode,
            "epsilon": self.epsilon,
            "min_epsilon": self.min_epsilon,
            "epsilon_decay": self.epsilon_decay,
            "ucb_weight": self.ucb_weight,
            "unexplored_bonus": self.unexplored_bonus,
            "learning_rate": self.learning_rate,
            "weight_decay": self.weight_decay,
            "blend_pulls": self.blend_pulls,
            "profile_alpha": self.profile_alpha,
            "history_limit": self.history_limit,
            "fallback_pool_size": self.fallback_pool_size,
            "store_dir": self.store_dir,
        }


# Global config instance (lazy-loaded)
_config: Optional[BanditConfig] = None


def get_bandit_config(force_reload: bool = False) -> BanditConfig:
    """
    Get the global bandit configuration.

    Lazy-loads configuration from environment variables.

    Args:
        force_reload: Force reload from environment

    Returns:
        BanditConfig instance
    """
    global _config

    if _config is None or force_reload:
        _config = BanditConfig.from_env()
        logger.info(
            f"[BANDITS] Config loaded: schema_version={_config.schema_version}, "
            f"freeze_mode={_config.freeze_mode}, "
            f"epsilon={_config.epsilon}, "
            f"store_dir={_config.store_dir}"
        )

    return _config


def reset_bandit_config() -> None:
    """Reset global config (mainly for testing)."""
    global _config
    _config = None
