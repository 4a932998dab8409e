"""
Word memory: study a word list, then recall it in order.
"""

from typing import Any, Dict, List, Tuple

from ..bandits.action_space import ActionSpaceSpec, Variation
from ..bandits.contextual_features import FeatureEncoder
from ..bandits.game_profile import GameProfile
from ..bandits.insights import InsightMessages
from ..bandits.priors import HeuristicPrior, PriorBonus, flag, frustrated
from ..rewards.reward_weights import RewardWeights

GAME = "word_memory"

COMPLEXITY_SCALE = {"simple": 1, "medium": 2, "complex": 3, "advanced": 4}

# Word complexity per variation, by level band (upper bound inclusive)
COMPLEXITIES: Tuple[Tuple[int, Tuple[str, ...]], ...] = (
    (6, ("simple", "simple", "medium", "medium", "simple")),
    (12, ("simple", "medium", "medium", "complex", "medium")),
    (18, ("medium", "medium", "complex", "complex", "advanced")),
    (25, ("medium", "complex", "complex", "advanced", "advanced")),
)

VARIATION_NAMES = ("short", "roomy", "stretch", "hinted", "dense")


def complexities(level: int) -> Tuple[str, ...]:
    for upper, values in COMPLEXITIES:
        if level <= upper:
            return values
    return COMPLEXITIES[-1][1]


def level_params(level: int) -> Dict[str, Any]:
    return {
        "word_count": min(3 + level // 2, 15),
        "study_time": max(5, 15 - level // 5),
        "recall_time": max(15, 45 - level),
        "word_complexity": "simple",
        "complexity_rank": 1,
        "show_hints": False,
    }


def variations(level: int) -> List[Variation]:
    return [
        Variation(
            name,
            offset={"word_count": idx % 3 - 1, "study_time": (idx % 2) * 2, "recall_time": (idx % 3) * 5},
            values={
                "word_complexity": complexity,
                "complexity_rank": COMPLEXITY_SCALE[complexity],
                "show_hints": level <= 3 and idx >= 3,
            },
        )
        for idx, (name, complexity) in enumerate(zip(VARIATION_NAMES, complexities(level)))
    ]


PROFILE = GameProfile(
    name=GAME,
    title="Word Memory",
    storage_key="cogtrain_bandit_word_memory",
    action_space=ActionSpaceSpec(
        game=GAME,
        level_params=level_params,
        variations=variations,
        key_fields=("word_count", "study_time", "recall_time", "word_complexity"),
    ),
    features=FeatureEncoder(
        action_fields=(
            ("word_count", 16),
            ("study_time", 17),
            ("recall_time", 54),
            ("complexity_rank", 4),
            ("show_hints", 1),
        ),
        size_field="word_count",
        tempo_field="study_time",
    ),
    reward_weights=RewardWeights(
        completion_bonus=30,
        accuracy=25,
        speed=10,
        engagement=10,
        frustration=25,
        extras={"order_bonus": 10, "recall_speed": 5},
    ),
    prior=HeuristicPrior(
        size_field="word_count",
        size_penalty=4,
        bonuses=(
            PriorBonus(frustrated(), flag("show_hints"), 10),
            PriorBonus(frustrated(), lambda a: a.get("complexity_rank", 1) <= 1, 5),
        ),
    ),
    default_preferences={"word_count": 4},
    preference_scales={"word_count": 1},
    insights=InsightMessages(
        intro="Let's see how many words you can hold!",
        excellent="Superb recall! Expect longer word lists.",
        good="Great memory! Keeping the lists comfortable.",
        low_accuracy="Try linking the words into a little story while studying.",
        slow="Accurate recall! Try answering a little sooner.",
        progress="Good progress! Your verbal memory is improving.",
        struggling="Shorter, simpler lists next to rebuild confidence.",
    ),
)
