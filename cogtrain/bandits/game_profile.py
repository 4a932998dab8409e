"""
Game profiles: everything that makes one game's bandit different.

A ContextualBandit is generic; a GameProfile supplies the action space,
feature encoding, reward weights, prior, progression thresholds and
display text for one game.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Tuple

from ..rewards.reward_weights import RewardWeights
from .action_space import Action, ActionSpaceSpec, find_similar_action
from .contextual_features import FeatureEncoder
from .insights import InsightMessages, DEFAULT_INSIGHTS
from .priors import ColdStartPrior, HeuristicPrior
from .progression import ProgressionPolicy
from .user_profile import UserProfile


@dataclass(frozen=True)
class GameProfile:
    """
    Per-game parameterization of the bandit.

    Attributes:
        name: Game identifier (registry key)
        title: Human-readable name
        storage_key: Namespaced key of the persisted state blob
        action_space: Recipe for the action catalogue
        features: Context/action feature encoder
        reward_weights: Reward component weights
        prior: Cold-start scoring strategy
        progression: Level progression thresholds
        default_preferences: Initial preferred params (tracked by the profile)
        preference_scales: Param -> scale used by find_similar_action
        insights: Message table for performance_insight
    """
    name: str
    title: str
    storage_key: str
    action_space: ActionSpaceSpec
    features: FeatureEncoder = field(default_factory=FeatureEncoder)
    reward_weights: RewardWeights = field(default_factory=RewardWeights)
    prior: ColdStartPrior = field(default_factory=HeuristicPrior)
    progression: ProgressionPolicy = field(default_factory=ProgressionPolicy)
    default_preferences: Mapping[str, float] = field(default_factory=dict)
    preference_scales: Mapping[str, float] = field(default_factory=dict)
    insights: InsightMessages = DEFAULT_INSIGHTS

    @property
    def user_types(self) -> Tuple[str, ...]:
        return self.features.user_types

    @property
    def sub_skills(self) -> Tuple[str, ...]:
        return self.features.sub_skills

    def generate_actions(self) -> List[Action]:
        return self.action_space.generate()

    def new_profile(self) -> UserProfile:
        """Fresh user profile seeded with this game's defaults."""
        return UserProfile(
            preferred_params={k: float(v) for k, v in self.default_preferences.items()},
            sub_skill_strengths={s: 0.5 for s in self.sub_skills},
        )

    def similar_action(self, actions: List[Action], preferences: Dict[str, float]):
        """Catalogue action closest to the given preferred params."""
        return find_similar_action(actions, preferences, self.preference_scales)
