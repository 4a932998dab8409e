"""
Reward Signal for CogTrain.

Deterministic reward computation from a level's performance metrics:
- PerformanceMetrics: tolerant container for what the game UI reports
- RewardSignal: weighted, clamped reward with its component breakdown
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Mapping, Optional

from .config import RewardConfig, get_reward_config
from .reward_weights import RewardWeights, DEFAULT_REWARD_WEIGHTS

logger = logging.getLogger(__name__)


def _optional_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return float(value)
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _optional_unit(value: Any) -> Optional[float]:
    number = _optional_float(value)
    if number is None:
        return None
    return min(1.0, max(0.0, number))


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    try:
        return bool(value)
    except Exception:
        return False


# camelCase keys sent by the browser games
_ALIASES = {
    "avgReactionTime": "avg_response_time_ms",
    "avgResponseTime": "avg_response_time_ms",
    "avg_reaction_time": "avg_response_time_ms",
    "avg_response_time": "avg_response_time_ms",
    "timeRemaining": "time_remaining",
    "timeLimit": "time_limit",
    "timeEfficiency": "time_efficiency",
}

_CORE_KEYS = {
    "completed", "accuracy", "avg_response_time_ms", "time_remaining",
    "time_limit", "time_efficiency", "engagement", "frustration", "counters",
}


@dataclass
class PerformanceMetrics:
    """
    What happened in one level, as reported by the game UI.

    Every numeric field is optional; neutral defaults are applied at
    reward time, so partial reports never fail an update.

    Attributes:
        completed: Whether the level was finished
        accuracy: Fraction of correct responses (0-1)
        avg_response_time_ms: Mean reaction/response time
        time_remaining: Seconds left on the level clock
        time_limit: Seconds allowed for the level
        time_efficiency: Explicit time-efficiency score (0-1)
        engagement: Engagement estimate (0-1)
        frustration: Frustration estimate (0-1)
        counters: Game-specific counters (early_clicks, actual_moves, ...)
    """

    completed: bool = False
    accuracy: Optional[float] = None
    avg_response_time_ms: Optional[float] = None
    time_remaining: Optional[float] = None
    time_limit: Optional[float] = None
    time_efficiency: Optional[float] = None
    engagement: Optional[float] = None
    frustration: Optional[float] = None
    counters: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        self.completed = _as_bool(self.completed)
        self.accuracy = _optional_unit(self.accuracy)
        rt = _optional_float(self.avg_response_time_ms)
        self.avg_response_time_ms = rt if rt is not None and rt > 0 else None
        self.time_remaining = _optional_float(self.time_remaining)
        self.time_limit = _optional_float(self.time_limit)
        self.time_efficiency = _optional_unit(self.time_efficiency)
        self.engagement = _optional_unit(self.engagement)
        self.frustration = _optional_unit(self.frustration)
        if not isinstance(self.counters, Mapping):
            self.counters = {}
        self.counters = dict(self.counters)

    @classmethod
    def coerce(cls, value: Any) -> "PerformanceMetrics":
        """Accept PerformanceMetrics, a dict, or anything else (-> empty)."""
        if isinstance(value, cls):
            return value
        if isinstance(value, Mapping):
            return cls.from_dict(value)
        return cls()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PerformanceMetrics":
        """
        Create from a loosely-shaped dictionary.

        Unknown keys are kept as counters; camelCase keys from the
        browser are accepted.
        """
        normalized: Dict[str, Any] = {}
        counters: Dict[str, Any] = {}
        for key, value in data.items():
            key = _ALIASES.get(key, key)
            if key == "counters" and isinstance(value, Mapping):
                counters.update(value)
            elif key in _CORE_KEYS:
                normalized[key] = value
            else:
                counters[key] = value

        return cls(
            completed=normalized.get("completed", False),
            accuracy=normalized.get("accuracy"),
            avg_response_time_ms=normalized.get("avg_response_time_ms"),
            time_remaining=normalized.get("time_remaining"),
            time_limit=normalized.get("time_limit"),
            time_efficiency=normalized.get("time_efficiency"),
            engagement=normalized.get("engagement"),
            frustration=normalized.get("frustration"),
            counters=counters,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "completed": self.completed,
            "accuracy": self.accuracy,
            "avg_response_time_ms": self.avg_response_time_ms,
            "time_remaining": self.time_remaining,
            "time_limit": self.time_limit,
            "time_efficiency": self.time_efficiency,
            "engagement": self.engagement,
            "frustration": self.frustration,
            "counters": _jsonable(self.counters),
        }

    @property
    def effective_time_efficiency(self) -> Optional[float]:
        if self.time_efficiency is not None:
            return self.time_efficiency
        if self.time_remaining is not None and self.time_limit:
            return _optional_unit(self.time_remaining / self.time_limit)
        return None

    def counter(self, name: str) -> Optional[float]:
        return _optional_float(self.counters.get(name))

    def ratio(self, name: str) -> Optional[float]:
        """Game-specific ratio in [0, 1], derived from counters when needed."""
        derive = _DERIVED_RATIOS.get(name)
        if derive is not None:
            value = derive(self)
            if value is not None:
                return _optional_unit(value)
        return _optional_unit(self.counters.get(name))


def _jsonable(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


def _move_efficiency(m: PerformanceMetrics) -> Optional[float]:
    optimal = m.counter("optimal_moves")
    actual = m.counter("actual_moves")
    if optimal and actual and optimal > 0 and actual > 0:
        return min(1.0, optimal / actual)
    return None


def _early_click_consistency(m: PerformanceMetrics) -> Optional[float]:
    early = m.counter("early_clicks")
    if early is None:
        return None
    total = m.counter("total_trials") or 0.0
    return 1.0 - early / max(1.0, total)


def _miss_avoidance(m: PerformanceMetrics) -> Optional[float]:
    miss_rate = m.counter("miss_rate")
    return None if miss_rate is None else 1.0 - miss_rate


def _combo(m: PerformanceMetrics) -> Optional[float]:
    combo = m.counter("combo_max")
    return None if combo is None else min(1.0, combo / 10.0)


def _streak(m: PerformanceMetrics) -> Optional[float]:
    streak = m.counter("streak_max")
    return None if streak is None else min(1.0, streak / 10.0)


_DERIVED_RATIOS: Dict[str, Callable[[PerformanceMetrics], Optional[float]]] = {
    "time_efficiency": lambda m: m.effective_time_efficiency,
    "move_efficiency": _move_efficiency,
    "early_click_consistency": _early_click_consistency,
    "miss_avoidance": _miss_avoidance,
    "combo": _combo,
    "streak": _streak,
}


@dataclass
class RewardSignal:
    """
    Reward for one level with its audit trail.

    Key properties:
    - Deterministic: same metrics and weights always give the same reward
    - Tolerant: missing metrics fall back to neutral values
    - Clamped: the reward always lies in [config.min_reward, config.max_reward]

    Usage:
        signal = RewardSignal.from_metrics(metrics, weights, game="reaction")
        reward = signal.reward

    Attributes:
        reward_version: Schema version string
        game: Game the reward belongs to
        components: Weighted contribution of each term (pre-clamp)
        raw_reward: Sum of the components
        reward: Final clamped reward
        timestamp: When the reward was computed
    """

    reward_version: str = "1.0.0"
    game: str = ""
    components: Dict[str, float] = field(default_factory=dict)
    raw_reward: float = 0.0
    reward: float = 0.0
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_metrics(
        cls,
        metrics: Any,
        weights: Optional[RewardWeights] = None,
        game: str = "",
        config: Optional[RewardConfig] = None,
    ) -> "RewardSignal":
        """
        Create a RewardSignal from a level's metrics.

        Args:
            metrics: PerformanceMetrics or a loosely-shaped dict
            weights: RewardWeights (uses defaults if None)
            game: Game name recorded on the signal
            config: RewardConfig (uses global if None)

        Returns:
            RewardSignal with components and clamped reward
        """
        config = config or get_reward_config()
        signal = cls(reward_version=config.version, game=game)
        signal.compute_reward(PerformanceMetrics.coerce(metrics), weights, config)
        return signal

    def compute_reward(
        self,
        metrics: PerformanceMetrics,
        weights: Optional[RewardWeights] = None,
        config: Optional[RewardConfig] = None,
    ) -> float:
        """
        Compute the clamped reward.

        1. Resolve neutral defaults for missing metrics
        2. Weighted sum (frustration subtracts)
        3. Clamp to the configured scale
        """
        weights = weights or DEFAULT_REWARD_WEIGHTS
        config = config or get_reward_config()

        accuracy = metrics.accuracy if metrics.accuracy is not None else config.neutral_accuracy
        engagement = metrics.engagement if metrics.engagement is not None else config.neutral_engagement
        frustration = (
            metrics.frustration if metrics.frustration is not None
            else config.neutral_frustration
        )

        if metrics.avg_response_time_ms is not None:
            speed = max(0.0, 1.0 - metrics.avg_response_time_ms / weights.reference_time_ms)
        elif metrics.effective_time_efficiency is not None:
            speed = metrics.effective_time_efficiency
        else:
            speed = config.neutral_speed

        components = {
            "completion": weights.completion_bonus if metrics.completed else 0.0,
            "accuracy": accuracy * weights.accuracy,
            "speed": speed * weights.speed,
            "engagement": engagement * weights.engagement,
            "frustration": -frustration * weights.frustration,
        }
        for name, weight in weights.extras.items():
            ratio = metrics.ratio(name)
            components[name] = (ratio if ratio is not None else config.neutral_ratio) * weight

        self.components = components
        self.raw_reward = sum(components.values())
        self.reward = max(config.min_reward, min(config.max_reward, self.raw_reward))
        return self.reward

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "reward_version": self.reward_version,
            "game": self.game,
            "components": dict(self.components),
            "raw_reward": self.raw_reward,
            "reward": self.reward,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RewardSignal":
        """Create from dictionary."""
        timestamp = data.get("timestamp")
        if isinstance(timestamp, str):
            timestamp = datetime.fromisoformat(timestamp)
        elif timestamp is None:
            timestamp = datetime.now(timezone.utc)

        return cls(
            reward_version=data.get("reward_version", "1.0.0"),
            game=data.get("game", ""),
            components=dict(data.get("components") or {}),
            raw_reward=data.get("raw_reward", 0.0),
            reward=data.get("reward", 0.0),
            timestamp=timestamp,
        )

    def __str__(self) -> str:
        return (
            f"RewardSignal(game={self.game}, reward={self.reward:.1f}, "
            f"completion={self.components.get('completion', 0.0):.1f}, "
            f"accuracy={self.components.get('accuracy', 0.0):.1f})"
        )
