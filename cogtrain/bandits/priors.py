"""
Cold-start priors for CogTrain bandits.

A prior scores an action for an arm that has never been pulled. It is
swappable independently of the learned linear model, so tests can use
NeutralPrior and games can tune HeuristicPrior without touching learning.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from .action_space import Action
from .contextual_features import GameContext
from .user_profile import UserProfile

logger = logging.getLogger(__name__)


PRIOR_MIN = 0.0
PRIOR_MAX = 100.0


class ColdStartPrior(ABC):
    """Scores (context, action) pairs for arms without data."""

    @abstractmethod
    def score(self, context: GameContext, action: Action, profile: UserProfile) -> float:
        """Expected reward before any observation."""


class NeutralPrior(ColdStartPrior):
    """Same score for every action."""

    def __init__(self, value: float = 50.0):
        self.value = value

    def score(self, context: GameContext, action: Action, profile: UserProfile) -> float:
        return self.value


@dataclass(frozen=True)
class PriorBonus:
    """
    Fixed bonus when the context matches and the action qualifies.

    Attributes:
        when: Context predicate (e.g. high frustration, a user type)
        applies: Action predicate (e.g. hints enabled)
        bonus: Points added to the prior score
    """
    when: Callable[[GameContext], bool]
    applies: Callable[[Action], bool]
    bonus: float


def frustrated(threshold: float = 0.5) -> Callable[[GameContext], bool]:
    return lambda context: context.frustration_level > threshold


def user_type_is(user_type: str) -> Callable[[GameContext], bool]:
    return lambda context: context.user_type == user_type


def flag(name: str, enabled: bool = True) -> Callable[[Action], bool]:
    return lambda action: bool(action.get(name)) is enabled


def below(name: str, limit: float) -> Callable[[Action], bool]:
    return lambda action: (action.get(name) or 0) < limit


def above(name: str, limit: float) -> Callable[[Action], bool]:
    return lambda action: (action.get(name) or 0) > limit


class HeuristicPrior(ColdStartPrior):
    """
    Hand-tuned profile-matching prior.

    score = baseline
            - |size param - preferred size| * size_penalty
            - |multiplier - preferred difficulty| * difficulty_penalty
            + matching bonuses

    clamped to [0, 100] so a trained arm's learned score can always win.
    """

    def __init__(
        self,
        size_field: Optional[str] = None,
        size_penalty: float = 5.0,
        difficulty_penalty: float = 10.0,
        bonuses: Tuple[PriorBonus, ...] = (),
        baseline: float = 50.0,
    ):
        if size_penalty < 0 or difficulty_penalty < 0:
            raise ValueError("Prior penalties must be non-negative")
        self.size_field = size_field
        self.size_penalty = size_penalty
        self.difficulty_penalty = difficulty_penalty
        self.bonuses = tuple(bonuses)
        self.baseline = baseline

    def score(self, context: GameContext, action: Action, profile: UserProfile) -> float:
        score = self.baseline

        if self.size_field is not None:
            value = action.get(self.size_field)
            preferred = profile.preferred_params.get(self.size_field)
            if isinstance(value, (int, float)) and preferred is not None:
                score -= abs(value - preferred) * self.size_penalty

        score -= (
            abs(action.difficulty_multiplier - profile.preferred_difficulty)
            * self.difficulty_penalty
        )

        for bonus in self.bonuses:
            if bonus.when(context) and bonus.applies(action):
                score += bonus.bonus

        return max(PRIOR_MIN, min(PRIOR_MAX, score))
