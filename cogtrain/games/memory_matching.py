"""
Memory matching: flip cards and find the pairs.
"""

from typing import Any, Dict

from ..bandits.action_space import ActionSpaceSpec, Variation
from ..bandits.contextual_features import FeatureEncoder
from ..bandits.game_profile import GameProfile
from ..bandits.insights import InsightMessages
from ..bandits.priors import (
    HeuristicPrior,
    PriorBonus,
    above,
    below,
    flag,
    frustrated,
    user_type_is,
)
from ..rewards.reward_weights import RewardWeights

GAME = "memory_matching"


def level_params(level: int) -> Dict[str, Any]:
    grid_size = min(3 + level // 4, 8)
    return {
        "grid_size": grid_size,
        "symbol_count": min(grid_size * grid_size // 2, 12),
        "time_limit": max(30, 180 - level * 5),
        "flip_duration": 1000,
        "preview_time": max(500, 3000 - level * 80),
        "hint_enabled": False,
        "adaptive_timer": False,
    }


VARIATIONS = (
    Variation(
        "generous",
        scale={"time_limit": 1.2, "flip_duration": 1.2},
        values={"hint_enabled": True, "adaptive_timer": True},
    ),
    Variation("hinted", values={"hint_enabled": True}),
    Variation("adaptive", values={"adaptive_timer": True}),
    Variation("challenge", scale={"time_limit": 0.9, "flip_duration": 0.8}),
    Variation("hard", scale={"time_limit": 0.8, "flip_duration": 0.7}),
)


PROFILE = GameProfile(
    name=GAME,
    title="Memory Matching",
    storage_key="cogtrain_bandit_memory_matching",
    action_space=ActionSpaceSpec(
        game=GAME,
        level_params=level_params,
        variations=VARIATIONS,
        key_fields=("grid_size", "time_limit", "symbol_count", "flip_duration", "hint_enabled"),
    ),
    features=FeatureEncoder(
        user_types=("speed_focused", "accuracy_focused", "balanced"),
        action_fields=(
            ("grid_size", 8),
            ("symbol_count", 12),
            ("time_limit", 216),
            ("flip_duration", 1200),
            ("hint_enabled", 1),
            ("adaptive_timer", 1),
        ),
        size_field="grid_size",
        tempo_field="flip_duration",
    ),
    reward_weights=RewardWeights(
        completion_bonus=40,
        accuracy=25,
        speed=15,
        engagement=10,
        frustration=30,
        extras={"move_efficiency": 10},
    ),
    prior=HeuristicPrior(
        size_field="grid_size",
        size_penalty=5,
        bonuses=(
            PriorBonus(user_type_is("accuracy_focused"), flag("hint_enabled"), 10),
            PriorBonus(user_type_is("accuracy_focused"), above("time_limit", 90), 5),
            PriorBonus(user_type_is("speed_focused"), below("flip_duration", 800), 10),
            PriorBonus(user_type_is("speed_focused"), flag("hint_enabled", False), 5),
            PriorBonus(frustrated(), flag("adaptive_timer"), 15),
        ),
    ),
    default_preferences={"grid_size": 4, "time_limit": 120},
    preference_scales={"grid_size": 1, "time_limit": 60},
    insights=InsightMessages(
        intro="Flip a few boards so the trainer can learn your memory span.",
        excellent="Outstanding recall! Expect a bigger board next.",
        good="Great matching! Keeping the board comfortable.",
        low_accuracy="Study the preview carefully before you start flipping.",
        slow="Good memory! Try to flip pairs a little faster.",
        progress="Steady progress. Your visual memory is improving.",
        struggling="Shrinking the board a little to rebuild confidence.",
    ),
)
