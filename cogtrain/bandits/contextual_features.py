"""
Contextual Features for Bandits.

Provides the player context and its numeric encoding for the
per-arm linear models:
- GameContext: snapshot of recent performance before a level
- FeatureEncoder: fixed-shape [context || action || interactions] vector
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from .action_space import Action, MAX_LEVEL, clamp_level

logger = logging.getLogger(__name__)


class TimeOfDay(str, Enum):
    """Coarse time-of-day buckets."""
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    NIGHT = "night"

    @classmethod
    def coerce(cls, value: Any, default: Optional["TimeOfDay"] = None) -> "TimeOfDay":
        """Map a string or enum onto a bucket, falling back to default."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            return default or cls.AFTERNOON

    @classmethod
    def from_hour(cls, hour: int) -> "TimeOfDay":
        if 5 <= hour < 12:
            return cls.MORNING
        if 12 <= hour < 17:
            return cls.AFTERNOON
        if 17 <= hour < 22:
            return cls.EVENING
        return cls.NIGHT

    @classmethod
    def now(cls) -> "TimeOfDay":
        return cls.from_hour(datetime.now().hour)


def _finite(value: Any, default: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default


def _unit(value: Any, default: float) -> float:
    return min(1.0, max(0.0, _finite(value, default)))


@dataclass
class GameContext:
    """
    Context for one difficulty decision.

    Recomputed before every level from rolling-window statistics; never
    persisted on its own (only inside history records).

    Attributes:
        current_level: Level the player is about to play (1-25)
        previous_difficulty: Multiplier of the last played action

        # Recent performance
        recent_accuracy: Accuracy over the last few levels (0-1)
        recent_speed: Normalised speed over the last few levels (0-1)
        success_rate: Fraction of recently completed levels (0-1)
        streak_count: Consecutive completed levels

        # Situation
        session_length: Seconds played this session
        time_of_day: Time-of-day bucket

        # Affect proxies
        frustration_level: Estimated frustration (0-1)
        engagement_level: Estimated engagement (0-1)

        # Game specific
        user_type: Playstyle label from the game's user types
        avg_response_time_ms: Recent mean response time, if measured
        sub_skills: Sub-skill name -> recent accuracy (0-1)
    """

    current_level: int = 1
    previous_difficulty: float = 1.0

    recent_accuracy: float = 0.5
    recent_speed: float = 0.5
    success_rate: float = 0.5
    streak_count: int = 0

    session_length: float = 0.0
    time_of_day: TimeOfDay = TimeOfDay.AFTERNOON

    frustration_level: float = 0.0
    engagement_level: float = 0.5

    user_type: str = "balanced"
    avg_response_time_ms: Optional[float] = None
    sub_skills: Dict[str, float] = field(default_factory=dict)

    def __post_init__(self):
        """Coerce every field into its valid domain."""
        self.current_level = clamp_level(self.current_level)
        self.previous_difficulty = max(0.0, _finite(self.previous_difficulty, 1.0))
        self.recent_accuracy = _unit(self.recent_accuracy, 0.5)
        self.recent_speed = _unit(self.recent_speed, 0.5)
        self.success_rate = _unit(self.success_rate, 0.5)
        self.streak_count = max(0, int(_finite(self.streak_count, 0.0)))
        self.session_length = max(0.0, _finite(self.session_length, 0.0))
        self.time_of_day = TimeOfDay.coerce(self.time_of_day)
        self.frustration_level = _unit(self.frustration_level, 0.0)
        self.engagement_level = _unit(self.engagement_level, 0.5)
        self.user_type = str(self.user_type or "balanced")
        if self.avg_response_time_ms is not None:
            rt = _finite(self.avg_response_time_ms, 0.0)
            self.avg_response_time_ms = rt if rt > 0 else None
        if not isinstance(self.sub_skills, Mapping):
            self.sub_skills = {}
        self.sub_skills = {str(k): _unit(v, 0.5) for k, v in self.sub_skills.items()}

    @classmethod
    def coerce(cls, value: Any) -> "GameContext":
        """Accept a GameContext, a dict, or anything else (-> defaults)."""
        if isinstance(value, cls):
            return value
        if isinstance(value, Mapping):
            return cls.from_dict(value)
        return cls()

    @classmethod
    def from_recent(
        cls,
        results: Sequence[Mapping[str, Any]],
        current_level: int,
        previous_difficulty: float = 1.0,
        window: int = 5,
        **overrides: Any,
    ) -> "GameContext":
        """
        Build a context from the last few level results.

        Each result may carry: accuracy, speed, completed, frustration,
        engagement, avg_response_time_ms. Missing keys are skipped.
        """
        recent = list(results)[-window:] if window > 0 else []

        def mean_of(key: str, default: float) -> float:
            values = [_finite(r.get(key), float("nan")) for r in recent]
            values = [v for v in values if math.isfinite(v)]
            return sum(values) / len(values) if values else default

        streak = 0
        for r in reversed(list(results)):
            if r.get("completed"):
                streak += 1
            else:
                break

        completed = [1.0 if r.get("completed") else 0.0 for r in recent]
        response = mean_of("avg_response_time_ms", 0.0)

        params: Dict[str, Any] = {
            "current_level": current_level,
            "previous_difficulty": previous_difficulty,
            "recent_accuracy": mean_of("accuracy", 0.5),
            "recent_speed": mean_of("speed", 0.5),
            "success_rate": sum(completed) / len(completed) if completed else 0.5,
            "streak_count": streak,
            "frustration_level": mean_of("frustration", 0.0),
            "engagement_level": mean_of("engagement", 0.5),
            "avg_response_time_ms": response or None,
            "time_of_day": TimeOfDay.now(),
        }
        params.update(overrides)
        return cls(**params)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "current_level": self.current_level,
            "previous_difficulty": self.previous_difficulty,
            "recent_accuracy": self.recent_accuracy,
            "recent_speed": self.recent_speed,
            "success_rate": self.success_rate,
            "streak_count": self.streak_count,
            "session_length": self.session_length,
            "time_of_day": self.time_of_day.value,
            "frustration_level": self.frustration_level,
            "engagement_level": self.engagement_level,
            "user_type": self.user_type,
            "avg_response_time_ms": self.avg_response_time_ms,
            "sub_skills": dict(self.sub_skills),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "GameContext":
        """Create from dictionary."""
        return cls(
            current_level=data.get("current_level", 1),
            previous_difficulty=data.get("previous_difficulty", 1.0),
            recent_accuracy=data.get("recent_accuracy", 0.5),
            recent_speed=data.get("recent_speed", 0.5),
            success_rate=data.get("success_rate", 0.5),
            streak_count=data.get("streak_count", 0),
            session_length=data.get("session_length", 0.0),
            time_of_day=data.get("time_of_day", "afternoon"),
            frustration_level=data.get("frustration_level", 0.0),
            engagement_level=data.get("engagement_level", 0.5),
            user_type=data.get("user_type", "balanced"),
            avg_response_time_ms=data.get("avg_response_time_ms"),
            sub_skills=data.get("sub_skills") or {},
        )


CONTEXT_BASE_FEATURES = [
    "level",
    "previous_difficulty",
    "recent_accuracy",
    "recent_speed",
    "success_rate",
    "streak",
    "engagement",
    "calm",
    "session_length",
    "response_speed",
]

INTERACTION_FEATURES = [
    "accuracy_x_size",
    "speed_x_tempo",
    "frustration_x_difficulty",
    "streak_x_challenge",
]


@dataclass(frozen=True)
class FeatureEncoder:
    """
    Encodes (context, action) pairs into a fixed-length vector.

    Every entry is clipped to [0, 1] so one arm's SGD step size stays
    comparable across games.

    Attributes:
        user_types: One-hot vocabulary for GameContext.user_type
        sub_skills: Sub-skill names read from GameContext.sub_skills
        action_fields: (param, scale) pairs; booleans use scale 1
        size_field: Param paired with accuracy in the interaction terms
        tempo_field: Param paired with speed in the interaction terms
        reference_response_ms: Response time mapped to a speed of 1.0
        streak_scale: Streak length mapped to 1.0
    """
    user_types: Tuple[str, ...] = ("speed_focused", "accuracy_focused", "balanced")
    sub_skills: Tuple[str, ...] = ()
    action_fields: Tuple[Tuple[str, float], ...] = ()
    size_field: Optional[str] = None
    tempo_field: Optional[str] = None
    reference_response_ms: float = 2000.0
    streak_scale: float = 10.0

    @property
    def dimension(self) -> int:
        return len(self.feature_names())

    def feature_names(self) -> List[str]:
        """Ordered feature names, matching encode()."""
        names = list(CONTEXT_BASE_FEATURES)
        names.extend(f"time_of_day_{t.value}" for t in TimeOfDay)
        names.extend(f"user_type_{u}" for u in self.user_types)
        names.extend(f"sub_skill_{s}" for s in self.sub_skills)
        names.append("difficulty_multiplier")
        names.extend(f"action_{name}" for name, _ in self.action_fields)
        names.extend(INTERACTION_FEATURES)
        return names

    def _scaled(self, action: Action, name: Optional[str]) -> float:
        if name is None:
            return 0.0
        scale = dict(self.action_fields).get(name) or 1.0
        return _finite(action.get(name), 0.0) / scale

    def context_features(self, context: GameContext) -> List[float]:
        if context.avg_response_time_ms:
            response_speed = min(1.0, self.reference_response_ms / context.avg_response_time_ms)
        else:
            response_speed = 0.5

        features = [
            context.current_level / MAX_LEVEL,
            context.previous_difficulty / 3.0,
            context.recent_accuracy,
            context.recent_speed,
            context.success_rate,
            context.streak_count / self.streak_scale,
            context.engagement_level,
            1.0 - context.frustration_level,
            min(1.0, context.session_length / 3600.0),
            response_speed,
        ]
        features.extend(1.0 if context.time_of_day == t else 0.0 for t in TimeOfDay)
        features.extend(1.0 if context.user_type == u else 0.0 for u in self.user_types)
        features.extend(context.sub_skills.get(s, 0.5) for s in self.sub_skills)
        return features

    def action_features(self, action: Action) -> List[float]:
        features = [action.difficulty_multiplier / 3.0]
        for name, scale in self.action_fields:
            value = action.get(name)
            if isinstance(value, bool):
                features.append(1.0 if value else 0.0)
            elif isinstance(value, (tuple, list)):
                features.append(len(value) / (scale or 1.0))
            else:
                features.append(_finite(value, 0.0) / (scale or 1.0))
        return features

    def interaction_features(self, context: GameContext, action: Action) -> List[float]:
        return [
            context.recent_accuracy * self._scaled(action, self.size_field),
            context.recent_speed * self._scaled(action, self.tempo_field),
            context.frustration_level * action.difficulty_multiplier / 3.0,
            (context.streak_count / self.streak_scale) * (1 - action.difficulty_multiplier / 3.0),
        ]

    def encode(self, context: GameContext, action: Action) -> np.ndarray:
        """Concatenated [context || action || interactions] vector."""
        vector = np.array(
            self.context_features(context)
            + self.action_features(action)
            + self.interaction_features(context, action),
            dtype=float,
        )
        return np.clip(np.nan_to_num(vector, nan=0.0, posinf=1.0, neginf=0.0), 0.0, 1.0)


def analyze_playstyle(
    recent_games: Sequence[Mapping[str, float]],
    speed_label: str = "speed_focused",
    accuracy_label: str = "accuracy_focused",
    balanced_label: str = "balanced",
) -> str:
    """
    Classify a player from recent {accuracy, speed} pairs.

    Needs at least 3 games; fast-but-sloppy players are speed-focused,
    slow-but-careful players are accuracy-focused.
    """
    if len(recent_games) < 3:
        return balanced_label

    avg_accuracy = sum(_unit(g.get("accuracy"), 0.5) for g in recent_games) / len(recent_games)
    avg_speed = sum(_unit(g.get("speed"), 0.5) for g in recent_games) / len(recent_games)

    accuracy_tendency = avg_accuracy - 0.5
    speed_tendency = avg_speed - 0.5

    if speed_tendency > 0.15 and accuracy_tendency < -0.1:
        return speed_label
    if accuracy_tendency > 0.15 and speed_tendency < -0.1:
        return accuracy_label
    return balanced_label
