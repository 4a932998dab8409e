"""
Tower of Hanoi: move the disk stack in as few moves as possible.
"""

from typing import Any, Dict

from ..bandits.action_space import ActionSpaceSpec, Variation
from ..bandits.contextual_features import FeatureEncoder
from ..bandits.game_profile import GameProfile
from ..bandits.insights import InsightMessages
from ..bandits.priors import HeuristicPrior, PriorBonus, flag, frustrated
from ..bandits.progression import ProgressionPolicy
from ..rewards.reward_weights import RewardWeights

GAME = "tower_of_hanoi"


def level_params(level: int) -> Dict[str, Any]:
    return {
        "disk_count": min(3 + (level - 1) // 5, 9),
        "time_limit": 60 + level * 30,
        "show_move_counter": False,
        "show_optimal_moves": False,
        "hint_enabled": False,
    }


VARIATIONS = (
    Variation(
        "guided",
        scale={"time_limit": 1.3},
        values={"show_move_counter": True, "show_optimal_moves": True, "hint_enabled": True},
    ),
    Variation(
        "counted",
        scale={"time_limit": 1.15},
        values={"show_move_counter": True, "show_optimal_moves": True},
    ),
    Variation("standard", values={"show_move_counter": True}),
    Variation("challenge", scale={"time_limit": 0.9}),
    Variation("hard", scale={"time_limit": 0.8}),
)


PROFILE = GameProfile(
    name=GAME,
    title="Tower of Hanoi",
    storage_key="cogtrain_bandit_tower_of_hanoi",
    action_space=ActionSpaceSpec(
        game=GAME,
        level_params=level_params,
        variations=VARIATIONS,
        key_fields=("disk_count", "time_limit", "hint_enabled"),
    ),
    features=FeatureEncoder(
        action_fields=(
            ("disk_count", 9),
            ("time_limit", 1053),
            ("show_move_counter", 1),
            ("show_optimal_moves", 1),
            ("hint_enabled", 1),
        ),
        size_field="disk_count",
        tempo_field="time_limit",
    ),
    reward_weights=RewardWeights(
        completion_bonus=35,
        accuracy=25,
        speed=10,
        engagement=10,
        frustration=25,
        extras={"move_efficiency": 15},
    ),
    prior=HeuristicPrior(
        size_field="disk_count",
        size_penalty=5,
        bonuses=(
            PriorBonus(
                lambda c: c.recent_accuracy > 0.8,
                lambda a: a.difficulty_multiplier > 1.2,
                10,
            ),
            PriorBonus(frustrated(0.7), flag("hint_enabled"), 10),
        ),
    ),
    progression=ProgressionPolicy(skill_threshold=0.6),
    default_preferences={"disk_count": 3},
    preference_scales={"disk_count": 1},
    insights=InsightMessages(
        intro="Let's plan some moves!",
        excellent="Masterful planning! Expect another disk soon.",
        good="Great strategy! Keeping the tower comfortable.",
        low_accuracy="Plan a few moves ahead before lifting a disk.",
        slow="Solid solutions! Try committing to your plan a bit faster.",
        progress="Good progress! Your planning is getting more efficient.",
        struggling="Fewer disks next to help you find the pattern.",
    ),
)
