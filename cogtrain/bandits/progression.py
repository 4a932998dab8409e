"""
Level progression for CogTrain bandits.

Maps recent rewards to a one-step level change. Levels never skip.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from .action_space import MAX_LEVEL, MIN_LEVEL, clamp_level

logger = logging.getLogger(__name__)


class DifficultyTrend(str, Enum):
    """Direction of the next level, for display."""
    EASIER = "easier"
    SAME = "same"
    HARDER = "harder"


@dataclass(frozen=True)
class ProgressionPolicy:
    """
    Threshold policy on the mean of the last few rewards.

    Attributes:
        promote_threshold: Mean reward above which the level goes up
        demote_threshold: Mean reward below which the level goes down
        skill_threshold: Profile skill also required to go up (None = not used)
        window: Number of recent rewards averaged
    """
    promote_threshold: float = 55.0
    demote_threshold: float = 30.0
    skill_threshold: Optional[float] = None
    window: int = 5

    def __post_init__(self):
        if self.demote_threshold > self.promote_threshold:
            raise ValueError(
                f"demote_threshold ({self.demote_threshold}) must not exceed "
                f"promote_threshold ({self.promote_threshold})"
            )
        if self.window < 1:
            raise ValueError(f"window must be >= 1, got {self.window}")

    def next_level(
        self,
        current_level: int,
        rewards: Sequence[float],
        skill_level: float = 1.0,
    ) -> int:
        """
        Next level in {L-1, L, L+1}, clamped to [1, 25].

        Args:
            current_level: Level just played
            rewards: Reward history, oldest first
            skill_level: Profile skill (0-1)
        """
        level = clamp_level(current_level)
        recent = [r for r in list(rewards)[-self.window:] if math.isfinite(r)]
        if not recent:
            return level

        mean_reward = sum(recent) / len(recent)
        skilled = self.skill_threshold is None or skill_level > self.skill_threshold

        if mean_reward > self.promote_threshold and skilled:
            return min(MAX_LEVEL, level + 1)
        if mean_reward < self.demote_threshold:
            return max(MIN_LEVEL, level - 1)
        return level

    def trend(
        self,
        current_level: int,
        rewards: Sequence[float],
        skill_level: float = 1.0,
    ) -> DifficultyTrend:
        level = clamp_level(current_level)
        next_level = self.next_level(level, rewards, skill_level)
        if next_level > level:
            return DifficultyTrend.HARDER
        if next_level < level:
            return DifficultyTrend.EASIER
        return DifficultyTrend.SAME
