"""
Executive function: Stroop, task switching, inhibition and updating trials.

Per-task-type accuracy is reported in
``metrics.counters["task_type_accuracy"]`` and tracked as sub-skills.
"""

import math
from typing import Any, Dict

from ..bandits.action_space import Action, ActionSpaceSpec, Variation
from ..bandits.contextual_features import FeatureEncoder, GameContext
from ..bandits.game_profile import GameProfile
from ..bandits.insights import InsightMessages
from ..bandits.priors import HeuristicPrior, PRIOR_MAX, PRIOR_MIN
from ..bandits.progression import ProgressionPolicy
from ..bandits.user_profile import UserProfile
from ..rewards.reward_weights import RewardWeights

GAME = "executive_function"

TASK_TYPES = ("stroop", "switching", "inhibition", "updating")


def level_params(level: int) -> Dict[str, Any]:
    return {
        "task_count": min(12 + math.floor(level * 1.2), 40),
        "task_types": TASK_TYPES[:min(1 + level // 5, 4)],
        "time_limit": max(60, 120 - level * 2),
        "switch_frequency": 0.5,
        "stroop_difficulty": round(min(1 + level * 0.1, 3), 4),
        "inhibition_difficulty": round(min(1 + level * 0.08, 2.5), 4),
    }


VARIATIONS = (
    Variation("generous", scale={"task_count": 0.8, "time_limit": 1.3}, values={"switch_frequency": 0.2}),
    Variation("relaxed", scale={"task_count": 0.9, "time_limit": 1.15}, values={"switch_frequency": 0.35}),
    Variation("standard"),
    Variation("challenge", scale={"task_count": 1.1, "time_limit": 0.9}, values={"switch_frequency": 0.65}),
    Variation("hard", scale={"task_count": 1.2, "time_limit": 0.8}, values={"switch_frequency": 0.8}),
)


class TaskStrengthPrior(HeuristicPrior):
    """
    Profile-matching prior that also favours levels built from the
    player's stronger task types and, for players with a high switch
    cost, fewer task switches.
    """

    def score(self, context: GameContext, action: Action, profile: UserProfile) -> float:
        score = super().score(context, action, profile)

        task_types = action.get("task_types") or ()
        if task_types:
            strengths = [profile.sub_skill_strengths.get(t, 0.5) for t in task_types]
            score += (sum(strengths) / len(strengths) - 0.5) * 30

        switch_cost = 1.0 - context.sub_skills.get("switching", 0.5)
        score -= switch_cost * action.get("switch_frequency", 0.0) * 20

        return max(PRIOR_MIN, min(PRIOR_MAX, score))


PROFILE = GameProfile(
    name=GAME,
    title="Executive Function",
    storage_key="cogtrain_bandit_executive_function",
    action_space=ActionSpaceSpec(
        game=GAME,
        level_params=level_params,
        variations=VARIATIONS,
        variation_step=0.04,
        key_fields=("task_count", "task_types", "time_limit", "switch_frequency"),
    ),
    features=FeatureEncoder(
        sub_skills=TASK_TYPES,
        action_fields=(
            ("task_count", 48),
            ("task_types", 4),
            ("time_limit", 156),
            ("switch_frequency", 1),
            ("stroop_difficulty", 3),
            ("inhibition_difficulty", 2.5),
        ),
        size_field="task_count",
        tempo_field="switch_frequency",
    ),
    reward_weights=RewardWeights(
        completion_bonus=30,
        accuracy=25,
        speed=15,
        engagement=10,
        frustration=25,
        extras={"time_efficiency": 10},
    ),
    prior=TaskStrengthPrior(size_field="task_count", size_penalty=1),
    progression=ProgressionPolicy(skill_threshold=0.6),
    default_preferences={"task_count": 14},
    preference_scales={"task_count": 4},
    insights=InsightMessages(
        intro="Let's warm up your executive control!",
        excellent="Exceptional executive control! Task switches won't slow you down.",
        good="Excellent performance! You're handling task switches smoothly.",
        low_accuracy="Read the rule carefully each time the task type switches.",
        slow="Good control! Keep practicing to reduce your switch costs.",
        progress="Steady progress. Your cognitive flexibility is improving.",
        struggling="Fewer task switches next round so you can focus.",
    ),
)
