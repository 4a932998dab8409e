"""
Visual processing: spot the target shape among distractors.
"""

import math
from typing import Any, Dict

from ..bandits.action_space import ActionSpaceSpec, Variation
from ..bandits.contextual_features import FeatureEncoder
from ..bandits.game_profile import GameProfile
from ..bandits.insights import InsightMessages
from ..bandits.priors import HeuristicPrior, PriorBonus, below
from ..rewards.reward_weights import RewardWeights

GAME = "visual_processing"


def level_params(level: int) -> Dict[str, Any]:
    return {
        "trials": min(8 + math.floor(level * 0.8), 25),
        "grid_size": min(3 + level // 5, 7),
        "distractors": min(5 + level * 2, 35),
        "time_limit": max(30, 60 - level),
        "target_display_time": max(1000, 3000 - level * 80),
        "shape_complexity": round(min(1 + level * 0.1, 3), 4),
        "color_variety": min(3 + level // 4, 6),
    }


VARIATIONS = (
    Variation("generous", scale={"trials": 0.8, "time_limit": 1.3, "distractors": 0.7}),
    Variation("relaxed", scale={"trials": 0.9, "time_limit": 1.15, "distractors": 0.85}),
    Variation("standard"),
    Variation("challenge", scale={"trials": 1.1, "time_limit": 0.9, "distractors": 1.15}),
    Variation("hard", scale={"trials": 1.2, "time_limit": 0.8, "distractors": 1.3}),
)


PROFILE = GameProfile(
    name=GAME,
    title="Visual Processing",
    storage_key="cogtrain_bandit_visual_processing",
    action_space=ActionSpaceSpec(
        game=GAME,
        level_params=level_params,
        variations=VARIATIONS,
        variation_step=0.04,
        key_fields=("grid_size", "trials", "distractors", "time_limit"),
    ),
    features=FeatureEncoder(
        action_fields=(
            ("trials", 30),
            ("grid_size", 7),
            ("distractors", 45),
            ("time_limit", 78),
            ("shape_complexity", 3),
            ("color_variety", 6),
        ),
        size_field="grid_size",
        tempo_field="time_limit",
        reference_response_ms=3000,
    ),
    reward_weights=RewardWeights(
        completion_bonus=30,
        accuracy=25,
        speed=15,
        engagement=10,
        frustration=25,
        reference_time_ms=3000,
        extras={"time_efficiency": 10},
    ),
    prior=HeuristicPrior(
        size_field="grid_size",
        size_penalty=10,
        bonuses=(
            PriorBonus(lambda c: c.recent_speed > 0.7, below("time_limit", 40), 10),
        ),
    ),
    default_preferences={"grid_size": 3},
    preference_scales={"grid_size": 1},
    insights=InsightMessages(
        intro="Let's sharpen your visual search!",
        excellent="Eagle eyes! Expect busier scenes.",
        good="Great visual search! Keeping the scenes balanced.",
        low_accuracy="Check each shape's outline and colour before choosing.",
        slow="Accurate spotting! Try scanning the grid a bit faster.",
        progress="Good progress! Your visual processing is improving.",
        struggling="Fewer distractors next to help you focus.",
    ),
)
