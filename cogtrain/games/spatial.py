"""
Spatial navigation: memorize a path through a grid, then walk it.
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

GAME = "spatial"

USER_TYPES = ("efficient_navigator", "explorer", "balanced")


def level_params(level: int) -> Dict[str, Any]:
    return {
        "grid_size": min(5 + level // 3, 12),
        "path_length": min(3 + level // 2, 10),
        "trial_count": min(6 + level // 2, 16),
        "time_limit": max(120, 300 - level * 6),
        "study_time": max(3000, 8000 - level * 150),
        "show_path_hints": False,
        "allow_backtracking": False,
    }


VARIATIONS = (
    Variation(
        "generous",
        scale={"time_limit": 1.3, "study_time": 1.3},
        values={"show_path_hints": True, "allow_backtracking": True},
    ),
    Variation(
        "hinted",
        scale={"time_limit": 1.1, "study_time": 1.1},
        values={"show_path_hints": True},
    ),
    Variation("standard", values={"allow_backtracking": True}),
    Variation("challenge", scale={"time_limit": 0.9, "study_time": 0.85}),
    Variation("hard", scale={"time_limit": 0.8, "study_time": 0.7}),
)


PROFILE = GameProfile(
    name=GAME,
    title="Spatial Navigation",
    storage_key="cogtrain_bandit_spatial",
    action_space=ActionSpaceSpec(
        game=GAME,
        level_params=level_params,
        variations=VARIATIONS,
        key_fields=("grid_size", "path_length", "trial_count", "time_limit", "show_path_hints"),
    ),
    features=FeatureEncoder(
        user_types=USER_TYPES,
        action_fields=(
            ("grid_size", 12),
            ("path_length", 10),
            ("trial_count", 16),
            ("time_limit", 380),
            ("study_time", 10200),
            ("show_path_hints", 1),
            ("allow_backtracking", 1),
        ),
        size_field="grid_size",
        tempo_field="study_time",
    ),
    reward_weights=RewardWeights(
        completion_bonus=30,
        accuracy=25,
        speed=10,
        engagement=10,
        frustration=25,
        extras={"path_completion_rate": 8, "move_efficiency": 7},
    ),
    prior=HeuristicPrior(
        size_field="grid_size",
        size_penalty=3,
        bonuses=(
            PriorBonus(user_type_is("efficient_navigator"), flag("allow_backtracking", False), 8),
            PriorBonus(user_type_is("efficient_navigator"), below("study_time", 5000), 5),
            PriorBonus(user_type_is("explorer"), flag("allow_backtracking"), 10),
            PriorBonus(user_type_is("explorer"), above("study_time", 5000), 5),
            PriorBonus(frustrated(), flag("show_path_hints"), 15),
        ),
    ),
    default_preferences={"grid_size": 5, "path_length": 3},
    preference_scales={"grid_size": 1, "path_length": 1},
    insights=InsightMessages(
        intro="Let's test your spatial memory!",
        excellent="Outstanding navigation! Expect a tougher maze.",
        good="Great spatial awareness! Keeping the challenge balanced.",
        low_accuracy="Focus on memorizing the path carefully.",
        slow="Accurate routes! Try moving through the grid a bit faster.",
        progress="Good progress! Your spatial memory is improving.",
        struggling="Simplifying the maze to help you build confidence.",
    ),
)
