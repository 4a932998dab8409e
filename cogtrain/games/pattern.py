"""
Pattern recognition: find the element that continues the sequence.
"""

from typing import Any, Dict, Tuple

from ..bandits.action_space import ActionSpaceSpec, Variation
from ..bandits.contextual_features import FeatureEncoder
from ..bandits.game_profile import GameProfile
from ..bandits.insights import InsightMessages
from ..bandits.priors import HeuristicPrior, PriorBonus, below, flag, frustrated
from ..rewards.reward_weights import RewardWeights

GAME = "pattern"


def pattern_types(level: int) -> Tuple[str, ...]:
    if level <= 5:
        return ("number",)
    if level <= 10:
        return ("number", "shape")
    return ("number", "shape", "letter")


def level_params(level: int) -> Dict[str, Any]:
    return {
        "pattern_count": min(5 + level // 3, 15),
        "sequence_length": min(3 + level // 5, 8),
        "time_limit": max(30, 90 - level * 2),
        "pattern_types": pattern_types(level),
        "option_count": 4,
        "hint_enabled": False,
        "adaptive_timer": False,
    }


VARIATIONS = (
    Variation(
        "generous",
        scale={"time_limit": 1.3, "pattern_count": 0.8, "sequence_length": 0.9},
        values={"option_count": 3, "hint_enabled": True, "adaptive_timer": True},
    ),
    Variation(
        "guided",
        scale={"time_limit": 1.1, "pattern_count": 0.9},
        values={"hint_enabled": True, "adaptive_timer": True},
    ),
    Variation("standard", values={"adaptive_timer": True}),
    Variation(
        "challenge",
        scale={"time_limit": 0.9, "pattern_count": 1.1, "sequence_length": 1.1},
        values={"option_count": 5},
    ),
    Variation(
        "hard",
        scale={"time_limit": 0.8, "pattern_count": 1.2, "sequence_length": 1.2},
        values={"option_count": 6},
    ),
)


PROFILE = GameProfile(
    name=GAME,
    title="Pattern Recognition",
    storage_key="cogtrain_bandit_pattern",
    action_space=ActionSpaceSpec(
        game=GAME,
        level_params=level_params,
        variations=VARIATIONS,
        key_fields=("pattern_count", "sequence_length", "time_limit"),
    ),
    features=FeatureEncoder(
        action_fields=(
            ("pattern_count", 18),
            ("sequence_length", 9),
            ("time_limit", 114),
            ("pattern_types", 3),
            ("option_count", 6),
            ("hint_enabled", 1),
        ),
        size_field="sequence_length",
        tempo_field="time_limit",
        reference_response_ms=10000,
    ),
    reward_weights=RewardWeights(
        completion_bonus=35,
        accuracy=25,
        speed=15,
        engagement=10,
        frustration=20,
        reference_time_ms=10000,
    ),
    prior=HeuristicPrior(
        size_field="sequence_length",
        size_penalty=4,
        bonuses=(
            PriorBonus(lambda c: c.recent_accuracy > 0.8, below("time_limit", 60), 10),
            PriorBonus(frustrated(), flag("hint_enabled"), 10),
        ),
    ),
    default_preferences={"sequence_length": 3, "pattern_count": 5},
    preference_scales={"sequence_length": 1, "pattern_count": 2},
    insights=InsightMessages(
        intro="Let's find out how you spot patterns!",
        excellent="Pattern master! Expect longer sequences.",
        good="Great pattern spotting! Keeping the puzzles balanced.",
        low_accuracy="Look for what changes between each step of the sequence.",
        slow="Sharp reasoning! Try trusting your first read a bit sooner.",
        progress="Good progress! Your pattern recognition is improving.",
        struggling="Shorter sequences next to help you find the rule.",
    ),
)
