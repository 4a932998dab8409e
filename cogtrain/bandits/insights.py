"""
Display-only performance insights.

The message depends only on the reward history and the context, so the
same history always produces the same text.
"""

from dataclasses import dataclass
from typing import Sequence

from .contextual_features import GameContext


@dataclass(frozen=True)
class InsightMessages:
    """Message table; games override the lines that need game vocabulary."""
    intro: str = "Play a few levels so the trainer can learn your pace."
    excellent: str = "Outstanding! You're ready for a tougher challenge."
    good: str = "Great work! You're in a comfortable groove."
    low_accuracy: str = "Take your time: accuracy matters more than speed here."
    slow: str = "Good accuracy! Try responding a little faster."
    progress: str = "Steady progress. Keep practicing to build consistency."
    struggling: str = "This level is tough. The next one will ease off a little."


DEFAULT_INSIGHTS = InsightMessages()

EXCELLENT_REWARD = 75.0
GOOD_REWARD = 55.0
PROGRESS_REWARD = 35.0
LOW_ACCURACY = 0.6
LOW_SPEED = 0.4


def performance_insight(
    rewards: Sequence[float],
    context: GameContext,
    messages: InsightMessages = DEFAULT_INSIGHTS,
) -> str:
    """Pick a message from the mean of the last three rewards."""
    recent = list(rewards)[-3:]
    if not recent:
        return messages.intro

    mean_reward = sum(recent) / len(recent)
    if mean_reward > EXCELLENT_REWARD:
        return messages.excellent
    if mean_reward > GOOD_REWARD:
        return messages.good
    if mean_reward > PROGRESS_REWARD:
        if context.recent_accuracy < LOW_ACCURACY:
            return messages.low_accuracy
        if context.recent_speed < LOW_SPEED:
            return messages.slow
        return messages.progress
    return messages.struggling
