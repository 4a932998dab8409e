"""
Bandits Module for CogTrain.

Adaptive difficulty through epsilon-greedy contextual bandits:
- ContextualBandit: Generic engine, one instance per game
- GameProfile: Per-game parameterization (actions, features, weights, prior)
- BanditRegistry: Session-owned collection of per-game bandits
- BanditSchema: Schema versioning for persisted state

All tunables live in BanditConfig.
"""

from .config import BanditConfig, get_bandit_config, reset_bandit_config
from .action_space import (
    Action,
    ActionSpaceSpec,
    Variation,
    actions_for_level,
    difficulty_band,
    find_similar_action,
    MIN_LEVEL,
    MAX_LEVEL,
)
from .contextual_features import (
    GameContext,
    FeatureEncoder,
    TimeOfDay,
    analyze_playstyle,
)
from .user_profile import UserProfile, AdaptationSpeed
from .priors import ColdStartPrior, HeuristicPrior, NeutralPrior, PriorBonus
from .progression import ProgressionPolicy, DifficultyTrend
from .insights import InsightMessages, performance_insight
from .state_store import StateStore, JsonFileStore, InMemoryStore
from .game_profile import GameProfile
from .contextual_bandit import (
    ContextualBandit,
    BanditSchema,
    ArmStatistics,
    BanditState,
    RewardRecord,
)
from .bandit_registry import BanditRegistry

__all__ = [
    # Config
    "BanditConfig",
    "get_bandit_config",
    "reset_bandit_config",
    # Action space
    "Action",
    "ActionSpaceSpec",
    "Variation",
    "actions_for_level",
    "difficulty_band",
    "find_similar_action",
    "MIN_LEVEL",
    "MAX_LEVEL",
    # Context
    "GameContext",
    "FeatureEncoder",
    "TimeOfDay",
    "analyze_playstyle",
    # Profile, prior, progression
    "UserProfile",
    "AdaptationSpeed",
    "ColdStartPrior",
    "HeuristicPrior",
    "NeutralPrior",
    "PriorBonus",
    "ProgressionPolicy",
    "DifficultyTrend",
    "InsightMessages",
    "performance_insight",
    # Persistence
    "StateStore",
    "JsonFileStore",
    "InMemoryStore",
    # Engine
    "GameProfile",
    "ContextualBandit",
    "BanditSchema",
    "ArmStatistics",
    "BanditState",
    "RewardRecord",
    # Registry
    "BanditRegistry",
]
