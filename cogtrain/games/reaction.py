"""
Reaction speed: click as soon as the target appears.
"""

from typing import Any, Dict

from ..bandits.action_space import ActionSpaceSpec, Variation
from ..bandits.contextual_features import FeatureEncoder
from ..bandits.game_profile import GameProfile
from ..bandits.insights import InsightMessages
from ..bandits.priors import HeuristicPrior, PriorBonus, below, flag, frustrated, user_type_is
from ..rewards.reward_weights import RewardWeights

GAME = "reaction"

USER_TYPES = ("fast_reactor", "consistent", "improving")


def level_params(level: int) -> Dict[str, Any]:
    return {
        "trial_count": min(5 + level // 2, 20),
        "min_delay": max(300, 1200 - level * 30),
        "max_delay": max(800, 3500 - level * 80),
        "target_time": max(200, 600 - level * 15),
        "feedback_duration": max(800, 1500 - level * 20),
        "show_countdown": False,
        "adaptive_delay": False,
        "allow_early_penalty": False,
    }


VARIATIONS = (
    Variation(
        "generous",
        scale={"trial_count": 0.8, "min_delay": 1.2, "max_delay": 1.2},
        values={"show_countdown": True, "adaptive_delay": True},
    ),
    Variation("counted", values={"show_countdown": True}),
    Variation("adaptive", values={"adaptive_delay": True, "allow_early_penalty": True}),
    Variation(
        "challenge",
        scale={"trial_count": 1.2, "min_delay": 0.9, "max_delay": 0.9},
        values={"allow_early_penalty": True},
    ),
    Variation(
        "hard",
        scale={"trial_count": 1.3, "min_delay": 0.8, "max_delay": 0.8},
        values={"allow_early_penalty": True},
    ),
)


PROFILE = GameProfile(
    name=GAME,
    title="Reaction Speed",
    storage_key="cogtrain_bandit_reaction",
    action_space=ActionSpaceSpec(
        game=GAME,
        level_params=level_params,
        variations=VARIATIONS,
        key_fields=("trial_count", "min_delay", "max_delay", "target_time", "show_countdown"),
    ),
    features=FeatureEncoder(
        user_types=USER_TYPES,
        action_fields=(
            ("trial_count", 26),
            ("min_delay", 1440),
            ("max_delay", 4100),
            ("target_time", 600),
            ("show_countdown", 1),
            ("adaptive_delay", 1),
            ("allow_early_penalty", 1),
        ),
        size_field="trial_count",
        tempo_field="target_time",
        reference_response_ms=800,
    ),
    reward_weights=RewardWeights(
        completion_bonus=30,
        accuracy=25,
        speed=20,
        engagement=10,
        frustration=25,
        reference_time_ms=800,
        extras={"early_click_consistency": 15},
    ),
    prior=HeuristicPrior(
        size_field="target_time",
        size_penalty=0.05,
        bonuses=(
            PriorBonus(user_type_is("fast_reactor"), below("target_time", 350), 10),
            PriorBonus(user_type_is("fast_reactor"), flag("show_countdown", False), 5),
            PriorBonus(user_type_is("consistent"), flag("adaptive_delay"), 10),
            PriorBonus(user_type_is("consistent"), flag("show_countdown"), 5),
            PriorBonus(frustrated(), flag("adaptive_delay"), 10),
            PriorBonus(frustrated(), flag("allow_early_penalty", False), 10),
        ),
    ),
    default_preferences={"target_time": 400},
    preference_scales={"target_time": 100},
    insights=InsightMessages(
        intro="Let's measure your reaction speed!",
        excellent="Lightning reflexes! Expect faster targets.",
        good="Great reactions! Keeping the pace balanced.",
        low_accuracy="Wait for the signal: early clicks cost points.",
        slow="Accurate clicks! Try reacting a little sooner.",
        progress="Good progress! Your reaction time is improving.",
        struggling="Slowing things down so you can find your rhythm.",
    ),
)
