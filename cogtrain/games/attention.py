"""
Attention focus: hit the targets, ignore the distractors.
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

GAME = "attention"

USER_TYPES = ("precision_focused", "speed_focused", "balanced")


def level_params(level: int) -> Dict[str, Any]:
    return {
        "target_count": min(3 + level // 3, 15),
        "distractor_count": min(2 + level // 2, 20),
        "time_limit": max(20, 60 - level),
        "spawn_rate": max(800, 2500 - level * 60),
        "target_size": 40,
        "target_duration": max(1500, 3500 - level * 60),
        "show_hints": False,
        "slow_motion_enabled": False,
    }


VARIATIONS = (
    Variation(
        "generous",
        scale={"time_limit": 1.3, "spawn_rate": 1.2},
        values={"target_size": 50, "show_hints": True, "slow_motion_enabled": True},
    ),
    Variation(
        "hinted",
        scale={"time_limit": 1.1},
        values={"target_size": 45, "show_hints": True},
    ),
    Variation("standard"),
    Variation(
        "challenge",
        scale={"time_limit": 0.9, "spawn_rate": 0.85},
        values={"target_size": 35},
    ),
    Variation(
        "hard",
        scale={"time_limit": 0.8, "spawn_rate": 0.7},
        values={"target_size": 30},
    ),
)


PROFILE = GameProfile(
    name=GAME,
    title="Attention Focus",
    storage_key="cogtrain_bandit_attention",
    action_space=ActionSpaceSpec(
        game=GAME,
        level_params=level_params,
        variations=VARIATIONS,
        key_fields=("target_count", "distractor_count", "time_limit", "spawn_rate", "show_hints"),
    ),
    features=FeatureEncoder(
        user_types=USER_TYPES,
        action_fields=(
            ("target_count", 15),
            ("distractor_count", 20),
            ("time_limit", 78),
            ("spawn_rate", 2800),
            ("target_size", 50),
            ("show_hints", 1),
            ("slow_motion_enabled", 1),
        ),
        size_field="target_size",
        tempo_field="spawn_rate",
        reference_response_ms=1500,
    ),
    reward_weights=RewardWeights(
        completion_bonus=35,
        accuracy=25,
        speed=10,
        engagement=10,
        frustration=25,
        reference_time_ms=1500,
        extras={"hit_rate": 7, "miss_avoidance": 4, "combo": 4},
    ),
    prior=HeuristicPrior(
        size_field="target_count",
        size_penalty=3,
        bonuses=(
            PriorBonus(user_type_is("precision_focused"), flag("show_hints"), 10),
            PriorBonus(user_type_is("precision_focused"), above("target_size", 40), 5),
            PriorBonus(user_type_is("speed_focused"), below("spawn_rate", 1500), 10),
            PriorBonus(user_type_is("speed_focused"), below("target_size", 40), 5),
            PriorBonus(frustrated(), flag("slow_motion_enabled"), 15),
        ),
    ),
    default_preferences={"target_count": 5},
    preference_scales={"target_count": 1},
    insights=InsightMessages(
        intro="Let's see how well you stay on target!",
        excellent="Laser focus! Expect more distractors next.",
        good="Great concentration! Keeping the field balanced.",
        low_accuracy="Only hit the targets: distractors break your combo.",
        slow="Precise hits! Try reacting to new targets sooner.",
        progress="Good progress! Your selective attention is sharpening.",
        struggling="Clearing some distractors so you can settle in.",
    ),
)
