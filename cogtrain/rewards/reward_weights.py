"""
Reward Weights for CogTrain.

Configurable component weights for reward computation.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict

logger = logging.getLogger(__name__)


@dataclass
class RewardWeights:
    """
    Weights for combining performance metrics into a reward.

    The reward is computed as:
        reward = (
            completion_bonus * completed +
            accuracy * accuracy_weight +
            speed * speed_weight +
            engagement * engagement_weight -
            frustration * frustration_weight +
            sum(extra_ratio * extra_weight)
        )

    Weights must be non-negative; the frustration sign is applied in
    RewardSignal.compute_reward(), so frustration is always a penalty.

    Attributes:
        completion_bonus: Flat bonus for a completed level
        accuracy: Weight for accuracy (0-1)
        speed: Weight for the response-time score (0-1)
        engagement: Weight for engagement (0-1)
        frustration: Weight for the frustration penalty (0-1)
        reference_time_ms: Response time at which the speed score reaches 0
        extras: Game-specific ratio name -> weight
    """

    completion_bonus: float = 40.0
    accuracy: float = 25.0
    speed: float = 15.0
    engagement: float = 10.0
    frustration: float = 30.0
    reference_time_ms: float = 2000.0
    extras: Dict[str, float] = field(default_factory=dict)

    def __post_init__(self):
        """Validate weights are non-negative."""
        for attr in ["completion_bonus", "accuracy", "speed", "engagement", "frustration"]:
            value = getattr(self, attr)
            if value < 0:
                raise ValueError(f"Weight {attr} must be non-negative, got {value}")
        if self.reference_time_ms <= 0:
            raise ValueError(
                f"reference_time_ms must be positive, got {self.reference_time_ms}"
            )
        for name, value in self.extras.items():
            if value < 0:
                raise ValueError(f"Extra weight {name} must be non-negative, got {value}")

    @property
    def max_positive(self) -> float:
        """Largest reward reachable with perfect metrics and no frustration."""
        return (
            self.completion_bonus + self.accuracy + self.speed +
            self.engagement + sum(self.extras.values())
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "completion_bonus": self.completion_bonus,
            "accuracy": self.accuracy,
            "speed": self.speed,
            "engagement": self.engagement,
            "frustration": self.frustration,
            "reference_time_ms": self.reference_time_ms,
            "extras": dict(self.extras),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RewardWeights":
        """Create from dictionary."""
        return cls(
            completion_bonus=float(data.get("completion_bonus", 40.0)),
            accuracy=float(data.get("accuracy", 25.0)),
            speed=float(data.get("speed", 15.0)),
            engagement=float(data.get("engagement", 10.0)),
            frustration=float(data.get("frustration", 30.0)),
            reference_time_ms=float(data.get("reference_time_ms", 2000.0)),
            extras={k: float(v) for k, v in (data.get("extras") or {}).items()},
        )


# Default weights instance
DEFAULT_REWARD_WEIGHTS = RewardWeights()
