"""
User Profile for CogTrain bandits.

A slow-moving summary of the player that survives across sessions and
feeds the cold-start prior.
"""

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Sequence

import numpy as np

from .action_space import Action
from .contextual_features import GameContext, TimeOfDay

logger = logging.getLogger(__name__)


# Reward above which the profile drifts toward the played action
PREFERENCE_REWARD = 60.0
# Reward above which the time of day is remembered as a good one
BEST_TIME_REWARD = 70.0
SUB_SKILL_RATE = 0.15


class AdaptationSpeed(str, Enum):
    """How quickly the player's results move."""
    FAST = "fast"
    MEDIUM = "medium"
    SLOW = "slow"

    @classmethod
    def from_variance(cls, variance: float) -> "AdaptationSpeed":
        if variance < 100:
            return cls.FAST
        if variance < 300:
            return cls.MEDIUM
        return cls.SLOW


def _clamp_unit(value: float) -> float:
    return min(1.0, max(0.0, value))


@dataclass
class UserProfile:
    """
    Per-game player profile.

    Attributes:
        preferred_difficulty: Smoothed multiplier of well-rewarded actions
        preferred_params: Smoothed numeric params of well-rewarded actions
        skill_level: Aggregate skill (0-1)
        sub_skill_strengths: Sub-skill name -> strength (0-1)
        best_time_of_day: Time of day of the last excellent level
        adaptation_speed: Volatility bucket of recent rewards
    """

    preferred_difficulty: float = 1.0
    preferred_params: Dict[str, float] = field(default_factory=dict)
    skill_level: float = 0.5
    sub_skill_strengths: Dict[str, float] = field(default_factory=dict)
    best_time_of_day: TimeOfDay = TimeOfDay.AFTERNOON
    adaptation_speed: AdaptationSpeed = AdaptationSpeed.MEDIUM

    def update(
        self,
        context: GameContext,
        action: Action,
        reward: float,
        completed: bool,
        accuracy: float,
        recent_rewards: Sequence[float] = (),
        sub_skill_accuracy: Optional[Mapping[str, Any]] = None,
        alpha: float = 0.1,
    ) -> None:
        """
        Nudge the profile after one level.

        Args:
            context: Context the level was played in
            action: Action that was played
            reward: Clamped reward for the level
            completed: Whether the level was finished
            accuracy: Level accuracy (0-1, neutral default already applied)
            recent_rewards: Reward history including this level
            sub_skill_accuracy: Sub-skill name -> accuracy for this level
            alpha: Smoothing factor
        """
        if completed and accuracy > 0.8:
            self.skill_level = _clamp_unit(self.skill_level + alpha)
        elif not completed or accuracy < 0.4:
            self.skill_level = _clamp_unit(self.skill_level - alpha * 0.5)

        if reward > PREFERENCE_REWARD:
            self.preferred_difficulty = (
                self.preferred_difficulty * (1 - alpha)
                + action.difficulty_multiplier * alpha
            )
            for name, preferred in list(self.preferred_params.items()):
                value = action.get(name)
                if isinstance(value, bool) or not isinstance(value, (int, float)):
                    continue
                self.preferred_params[name] = preferred * (1 - alpha) + value * alpha

        if reward > BEST_TIME_REWARD:
            self.best_time_of_day = context.time_of_day

        if isinstance(sub_skill_accuracy, Mapping):
            for name, value in sub_skill_accuracy.items():
                try:
                    acc = float(value)
                except (TypeError, ValueError):
                    continue
                if not math.isfinite(acc):
                    continue
                current = self.sub_skill_strengths.get(str(name), 0.5)
                self.sub_skill_strengths[str(name)] = _clamp_unit(
                    current + (_clamp_unit(acc) - 0.5) * SUB_SKILL_RATE
                )

        window = list(recent_rewards)[-10:]
        if len(window) >= 5:
            self.adaptation_speed = AdaptationSpeed.from_variance(float(np.var(window)))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "preferred_difficulty": self.preferred_difficulty,
            "preferred_params": dict(self.preferred_params),
            "skill_level": self.skill_level,
            "sub_skill_strengths": dict(self.sub_skill_strengths),
            "best_time_of_day": self.best_time_of_day.value,
            "adaptation_speed": self.adaptation_speed.value,
        }

    @classmethod
    def from_dict(
        cls,
        data: Mapping[str, Any],
        defaults: Optional["UserProfile"] = None,
    ) -> "UserProfile":
        """Create from dictionary, filling gaps from defaults."""
        defaults = defaults or cls()
        try:
            speed = AdaptationSpeed(data.get("adaptation_speed", defaults.adaptation_speed))
        except ValueError:
            speed = defaults.adaptation_speed

        preferred_params = dict(defaults.preferred_params)
        preferred_params.update({
            str(k): float(v) for k, v in (data.get("preferred_params") or {}).items()
        })
        sub_skills = dict(defaults.sub_skill_strengths)
        sub_skills.update({
            str(k): _clamp_unit(float(v))
            for k, v in (data.get("sub_skill_strengths") or {}).items()
        })

        return cls(
            preferred_difficulty=float(
                data.get("preferred_difficulty", defaults.preferred_difficulty)
            ),
            preferred_params=preferred_params,
            skill_level=_clamp_unit(float(data.get("skill_level", defaults.skill_level))),
            sub_skill_strengths=sub_skills,
            best_time_of_day=TimeOfDay.coerce(
                data.get("best_time_of_day"), defaults.best_time_of_day
            ),
            adaptation_speed=speed,
        )
