"""
Synthetic players for exercising a bandit offline.

A SyntheticPlayer turns (level, difficulty multiplier) into plausible
level metrics for a fixed underlying skill. simulate_session() runs the
select -> play -> observe -> next_level loop the game client would run.
"""

import logging
import math
import random
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .bandits.action_space import MAX_LEVEL, Action
from .bandits.contextual_bandit import ContextualBandit
from .bandits.contextual_features import GameContext

logger = logging.getLogger(__name__)


@dataclass
class SyntheticPlayer:
    """
    Player whose success depends on skill versus effective difficulty.

    Attributes:
        skill: Underlying ability in [0, 1]; 1 comfortably clears level 25
        reference_time_ms: Response time of an average player
        noise: Standard deviation of accuracy noise
        rng: Random source
    """
    skill: float = 0.5
    reference_time_ms: float = 2000.0
    noise: float = 0.05
    rng: random.Random = field(default_factory=random.Random)

    def __post_init__(self):
        if not 0.0 <= self.skill <= 1.0:
            raise ValueError(f"skill must be in [0, 1], got {self.skill}")

    @property
    def capability(self) -> float:
        """Effective difficulty the player clears about half the time."""
        return 1.0 + self.skill * MAX_LEVEL

    def play(self, action: Action) -> Dict[str, Any]:
        """Metrics for one level."""
        margin = self.capability - action.level * action.difficulty_multiplier
        p_complete = 1.0 / (1.0 + math.exp(-margin))
        completed = self.rng.random() < p_complete

        accuracy = 0.5 + margin * 0.08 + self.rng.gauss(0.0, self.noise)
        accuracy = max(0.0, min(1.0, accuracy))
        response = self.reference_time_ms * (1.1 - 0.6 * self.skill) * action.difficulty_multiplier

        return {
            "completed": completed,
            "accuracy": accuracy,
            "avg_response_time_ms": response,
            "engagement": 0.8 if abs(margin) < 4 else 0.5,
            "frustration": max(0.0, min(1.0, -margin * 0.1)),
        }


def simulate_session(
    bandit: ContextualBandit,
    player: SyntheticPlayer,
    levels: int,
    start_level: int = 1,
    context_overrides: Optional[Dict[str, Any]] = None,
) -> List[Dict[str, Any]]:
    """
    Play a number of levels against a bandit.

    Returns:
        One dict per played level: level, action key, multiplier,
        completed, accuracy, reward and the next level.
    """
    results: List[Dict[str, Any]] = []
    trajectory: List[Dict[str, Any]] = []
    level = start_level
    previous_difficulty = 1.0

    for _ in range(levels):
        context = GameContext.from_recent(
            results,
            current_level=level,
            previous_difficulty=previous_difficulty,
            **(context_overrides or {}),
        )
        action = bandit.select(context)
        metrics = player.play(action)
        record = bandit.observe(context, action, metrics)
        reward = record.reward if record is not None else bandit.compute_reward(metrics)

        next_level = bandit.next_level(context)
        results.append({
            **metrics,
            "speed": max(0.0, 1.0 - metrics["avg_response_time_ms"] / bandit.game.reward_weights.reference_time_ms),
        })
        trajectory.append({
            "level": level,
            "action": action.key,
            "difficulty_multiplier": action.difficulty_multiplier,
            "completed": metrics["completed"],
            "accuracy": metrics["accuracy"],
            "reward": reward,
            "next_level": next_level,
        })
        logger.debug(
            f"[SIMULATION:{bandit.name}] level={level} action={action.key} "
            f"reward={reward:.1f} -> {next_level}"
        )
        previous_difficulty = action.difficulty_multiplier
        level = next_level

    return trajectory
