"""
Math challenge: solve arithmetic problems against the clock.
"""

from typing import Any, Dict, List, Tuple

from ..bandits.action_space import ActionSpaceSpec, Variation
from ..bandits.contextual_features import FeatureEncoder
from ..bandits.game_profile import GameProfile
from ..bandits.insights import InsightMessages
from ..bandits.priors import HeuristicPrior, PriorBonus, above, frustrated, user_type_is
from ..rewards.reward_weights import RewardWeights

GAME = "math_challenge"

ADD, SUB, MUL, DIV = "add", "subtract", "multiply", "divide"

ALL_OPS = (ADD, SUB, MUL, DIV)

# Operation mix per variation, by level band (upper bound inclusive)
OPERATION_SETS: Tuple[Tuple[int, Tuple[Tuple[str, ...], ...]], ...] = (
    (5, ((ADD,), (SUB,), (ADD, SUB), (ADD,), (SUB,))),
    (10, ((ADD, SUB), (MUL,), (ADD, MUL), (SUB, MUL), (ADD, SUB))),
    (15, ((ADD, SUB, MUL), (MUL, DIV), (ADD, MUL), (SUB, DIV), (ADD, SUB, MUL))),
    (20, (ALL_OPS, (MUL, DIV), ALL_OPS, (MUL, DIV), (ADD, MUL, DIV))),
    (25, (ALL_OPS, (MUL, DIV), ALL_OPS, (MUL, DIV), ALL_OPS)),
)

VARIATION_NAMES = ("light", "relaxed", "stretch", "timed", "mixed")


def operation_sets(level: int) -> Tuple[Tuple[str, ...], ...]:
    for upper, sets in OPERATION_SETS:
        if level <= upper:
            return sets
    return OPERATION_SETS[-1][1]


def level_params(level: int) -> Dict[str, Any]:
    return {
        "problem_count": min(5 + level // 2, 25),
        "time_limit": max(30, 90 - level * 2),
        "max_number": min(10 + level * 2, 100),
        "option_count": 6 if level > 15 else 4,
        "operations": (ADD,),
    }


def variations(level: int) -> List[Variation]:
    return [
        Variation(
            name,
            offset={"problem_count": idx % 3 - 1, "max_number": (idx % 3) * 5, "time_limit": (idx % 2) * 10},
            values={"operations": ops},
        )
        for idx, (name, ops) in enumerate(zip(VARIATION_NAMES, operation_sets(level)))
    ]


PROFILE = GameProfile(
    name=GAME,
    title="Math Challenge",
    storage_key="cogtrain_bandit_math_challenge",
    action_space=ActionSpaceSpec(
        game=GAME,
        level_params=level_params,
        variations=variations,
        key_fields=("problem_count", "max_number", "time_limit", "operations"),
    ),
    features=FeatureEncoder(
        action_fields=(
            ("problem_count", 26),
            ("max_number", 110),
            ("time_limit", 100),
            ("option_count", 6),
            ("operations", 4),
        ),
        size_field="max_number",
        tempo_field="problem_count",
        reference_response_ms=10000,
    ),
    reward_weights=RewardWeights(
        completion_bonus=30,
        accuracy=25,
        speed=15,
        engagement=10,
        frustration=25,
        reference_time_ms=10000,
        extras={"streak": 10, "time_efficiency": 5},
    ),
    prior=HeuristicPrior(
        size_field="problem_count",
        size_penalty=3,
        bonuses=(
            PriorBonus(user_type_is("accuracy_focused"), above("time_limit", 60), 5),
            PriorBonus(frustrated(), lambda a: len(a.get("operations", ())) == 1, 10),
        ),
    ),
    default_preferences={"problem_count": 6, "max_number": 12},
    preference_scales={"problem_count": 1, "max_number": 10},
    insights=InsightMessages(
        intro="Let's see how you perform to personalize your experience!",
        excellent="Lightning-fast math! Your mental calculations are exceptional.",
        good="Excellent math skills! You're solving problems quickly and accurately.",
        low_accuracy="Take a moment to double-check your calculations.",
        slow="Good accuracy! Focus on speed while staying careful.",
        progress="Good progress! Keep practicing your number facts.",
        struggling="Switching to simpler problems to build your confidence.",
    ),
)
