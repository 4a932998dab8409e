"""
Audio memory: listen to a tone sequence and play it back.
"""

from typing import Any, Dict

from ..bandits.action_space import ActionSpaceSpec, Variation
from ..bandits.contextual_features import FeatureEncoder
from ..bandits.game_profile import GameProfile
from ..bandits.insights import InsightMessages
from ..bandits.priors import HeuristicPrior, PriorBonus, above, flag, frustrated
from ..rewards.reward_weights import RewardWeights

GAME = "audio_memory"

SUB_SKILLS = ("auditory_memory",)


def base_tone_count(level: int) -> int:
    return min(4 + (level - 1) // 6, 8)


def level_params(level: int) -> Dict[str, Any]:
    return {
        "sequence_length": min(3 + (level - 1) // 4, 12),
        "trial_count": 4 + level // 3,
        "tone_count": base_tone_count(level),
        "playback_speed": 1.0,
        "repeat_allowed": False,
        "time_limit": 60 + level * 10,
    }


VARIATIONS = (
    Variation(
        "generous",
        scale={"time_limit": 1.3},
        values={"playback_speed": 0.8, "repeat_allowed": True, "tone_count": 4},
    ),
    Variation(
        "repeatable",
        scale={"time_limit": 1.15},
        values={"playback_speed": 0.9, "repeat_allowed": True},
    ),
    Variation("standard"),
    Variation("brisk", scale={"time_limit": 0.9}, values={"playback_speed": 1.1}),
    Variation(
        "hard",
        scale={"time_limit": 0.8},
        values={
            "playback_speed": 1.2,
            "tone_count": lambda level: min(base_tone_count(level) + 1, 8),
        },
    ),
)


def _strong_listener(context) -> bool:
    return context.sub_skills.get("auditory_memory", 0.5) > 0.7


PROFILE = GameProfile(
    name=GAME,
    title="Audio Memory",
    storage_key="cogtrain_bandit_audio_memory",
    action_space=ActionSpaceSpec(
        game=GAME,
        level_params=level_params,
        variations=VARIATIONS,
        key_fields=("sequence_length", "tone_count", "playback_speed"),
    ),
    features=FeatureEncoder(
        sub_skills=SUB_SKILLS,
        action_fields=(
            ("sequence_length", 12),
            ("trial_count", 12),
            ("tone_count", 8),
            ("playback_speed", 1.2),
            ("time_limit", 400),
            ("repeat_allowed", 1),
        ),
        size_field="sequence_length",
        tempo_field="playback_speed",
        reference_response_ms=5000,
    ),
    reward_weights=RewardWeights(
        completion_bonus=35,
        accuracy=25,
        speed=15,
        engagement=10,
        frustration=25,
        reference_time_ms=5000,
    ),
    prior=HeuristicPrior(
        size_field="sequence_length",
        size_penalty=4,
        bonuses=(
            PriorBonus(
                lambda c: c.recent_accuracy > 0.8,
                lambda a: a.difficulty_multiplier > 1.2,
                10,
            ),
            PriorBonus(frustrated(0.7), flag("repeat_allowed"), 15),
            PriorBonus(_strong_listener, flag("repeat_allowed", False), 5),
            PriorBonus(lambda c: c.recent_speed > 0.7, above("playback_speed", 1.0), 5),
        ),
    ),
    default_preferences={"sequence_length": 4},
    preference_scales={"sequence_length": 1},
    insights=InsightMessages(
        intro="Let's tune in to your auditory memory!",
        excellent="Perfect pitch memory! Expect longer sequences.",
        good="Great listening! Keeping the sequences comfortable.",
        low_accuracy="Hum the sequence back in your head before answering.",
        slow="Accurate recall! Try answering a little sooner.",
        progress="Good progress! Your auditory memory is growing.",
        struggling="Slowing the playback down to help you follow along.",
    ),
)
