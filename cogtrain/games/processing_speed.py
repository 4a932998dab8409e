"""
Processing speed: symbol-digit coding under time pressure.
"""

import math
from typing import Any, Dict

from ..bandits.action_space import ActionSpaceSpec, Variation
from ..bandits.contextual_features import FeatureEncoder
from ..bandits.game_profile import GameProfile
from ..bandits.insights import InsightMessages
from ..bandits.priors import (
    HeuristicPrior,
    PriorBonus,
    above,
    flag,
    frustrated,
    user_type_is,
)
from ..rewards.reward_weights import RewardWeights

GAME = "processing_speed"

USER_TYPES = ("fast_processor", "accurate_processor", "balanced")


def level_params(level: int) -> Dict[str, Any]:
    return {
        "symbol_count": min(3 + level // 3, 10),
        "trial_count": min(6 + level // 2, 18),
        "time_limit": max(60, 150 - level * 3),
        "grid_size": min(8 + math.floor(level * 0.8), 32),
        "symbol_complexity": round(min(1 + level * 0.1, 3), 4),
        "show_symbol_guide": False,
        "timed_pressure": False,
    }


VARIATIONS = (
    Variation(
        "guided",
        scale={"time_limit": 1.3, "grid_size": 0.8},
        values={"show_symbol_guide": True},
    ),
    Variation(
        "assisted",
        scale={"time_limit": 1.1, "grid_size": 0.9},
        values={"show_symbol_guide": True},
    ),
    Variation("standard"),
    Variation(
        "pressured",
        scale={"time_limit": 0.9, "grid_size": 1.1},
        values={"timed_pressure": True},
    ),
    Variation(
        "hard",
        scale={"time_limit": 0.8, "grid_size": 1.2},
        values={"timed_pressure": True},
    ),
)


PROFILE = GameProfile(
    name=GAME,
    title="Processing Speed",
    storage_key="cogtrain_bandit_processing_speed",
    action_space=ActionSpaceSpec(
        game=GAME,
        level_params=level_params,
        variations=VARIATIONS,
        key_fields=("symbol_count", "trial_count", "grid_size", "time_limit", "show_symbol_guide"),
    ),
    features=FeatureEncoder(
        user_types=USER_TYPES,
        action_fields=(
            ("symbol_count", 10),
            ("trial_count", 18),
            ("time_limit", 190),
            ("grid_size", 38),
            ("symbol_complexity", 3),
            ("show_symbol_guide", 1),
            ("timed_pressure", 1),
        ),
        size_field="symbol_count",
        tempo_field="grid_size",
    ),
    reward_weights=RewardWeights(
        completion_bonus=30,
        accuracy=25,
        speed=10,
        engagement=10,
        frustration=25,
        extras={"coding_accuracy": 10, "processing_speed": 5},
    ),
    prior=HeuristicPrior(
        size_field="symbol_count",
        size_penalty=4,
        bonuses=(
            PriorBonus(user_type_is("fast_processor"), flag("timed_pressure"), 10),
            PriorBonus(user_type_is("fast_processor"), above("grid_size", 16), 5),
            PriorBonus(user_type_is("accurate_processor"), flag("show_symbol_guide"), 10),
            PriorBonus(user_type_is("accurate_processor"), above("time_limit", 100), 5),
            PriorBonus(frustrated(), flag("show_symbol_guide"), 15),
        ),
    ),
    default_preferences={"symbol_count": 4, "grid_size": 9},
    preference_scales={"symbol_count": 1, "grid_size": 4},
    insights=InsightMessages(
        intro="Let's measure your processing speed!",
        excellent="Blazing fast coding! Expect a bigger grid.",
        good="Great speed and accuracy! Keeping the pace steady.",
        low_accuracy="Check the symbol key before each answer.",
        slow="Accurate coding! Try to keep a quicker rhythm.",
        progress="Good progress! Your processing speed is improving.",
        struggling="Turning the symbol guide back on to help you along.",
    ),
)
