"""
Action Space for CogTrain bandits.

Generates the fixed catalogue of difficulty configurations ("actions")
for a game: 25 levels, each rendered in a handful of stylistic
variations ranging from generous to demanding.
"""

import logging
import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

logger = logging.getLogger(__name__)


MIN_LEVEL = 1
MAX_LEVEL = 25

# Multiplier of variation 0 at level L is 1 + (L - 1) * LEVEL_STEP
LEVEL_STEP = 0.08
# Upper edge of the selection band at level L is 1 + L * BAND_CEILING_STEP
BAND_CEILING_STEP = 0.15
BAND_TOLERANCE = 1e-9


def clamp_level(level: Any) -> int:
    """Coerce anything level-like into [MIN_LEVEL, MAX_LEVEL]."""
    try:
        value = float(level)
    except (TypeError, ValueError):
        return MIN_LEVEL
    if not math.isfinite(value):
        return MIN_LEVEL
    return max(MIN_LEVEL, min(MAX_LEVEL, int(value)))


def difficulty_band(level: int) -> Tuple[float, float]:
    """Multiplier band [low, high] for a level."""
    level = clamp_level(level)
    return 1 + (level - 1) * LEVEL_STEP, 1 + level * BAND_CEILING_STEP


def _freeze(value: Any) -> Any:
    if isinstance(value, list):
        return tuple(value)
    return value


def _encode_key_value(value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, float):
        return f"{value:g}"
    if isinstance(value, (tuple, list)):
        return "+".join(str(v) for v in value)
    return str(value)


@dataclass(frozen=True)
class Action:
    """
    One concrete difficulty configuration.

    Attributes:
        game: Game the action belongs to
        level: Nominal level (1-25)
        variation: Variation index within the level (0 = most generous)
        difficulty_multiplier: Monotonic difficulty scale
        params: Game parameters (counts, time limits, assistance flags)
        key_fields: Params that identify the arm, in key order
    """
    game: str
    level: int
    variation: int
    difficulty_multiplier: float
    params: Mapping[str, Any] = field(default_factory=dict, hash=False)
    key_fields: Tuple[str, ...] = field(default=(), compare=False, repr=False)

    def __post_init__(self):
        frozen = MappingProxyType({k: _freeze(v) for k, v in dict(self.params).items()})
        object.__setattr__(self, "params", frozen)
        object.__setattr__(self, "key_fields", tuple(self.key_fields))

    @property
    def key(self) -> str:
        """Canonical arm identity."""
        fields = self.key_fields or tuple(sorted(self.params))
        parts = [str(self.level), str(self.variation)]
        parts.extend(_encode_key_value(self.params.get(name)) for name in fields)
        return "_".join(parts)

    def get(self, name: str, default: Any = None) -> Any:
        return self.params.get(name, default)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "game": self.game,
            "level": self.level,
            "variation": self.variation,
            "difficulty_multiplier": self.difficulty_multiplier,
            "params": {
                k: list(v) if isinstance(v, tuple) else v
                for k, v in self.params.items()
            },
            "key_fields": list(self.key_fields),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Action":
        """Create from dictionary."""
        return cls(
            game=data.get("game", ""),
            level=clamp_level(data.get("level", MIN_LEVEL)),
            variation=int(data.get("variation", 0)),
            difficulty_multiplier=float(data.get("difficulty_multiplier", 1.0)),
            params=dict(data.get("params") or {}),
            key_fields=tuple(data.get("key_fields") or ()),
        )


@dataclass(frozen=True)
class Variation:
    """
    A stylistic rendering of a level's base parameters.

    Attributes:
        name: Human label ("generous", "challenge", ...)
        scale: Base param -> multiplier (result floored for integer params)
        offset: Base param -> additive offset
        values: Param -> literal value, or callable of the level
    """
    name: str
    scale: Mapping[str, float] = field(default_factory=dict)
    offset: Mapping[str, float] = field(default_factory=dict)
    values: Mapping[str, Any] = field(default_factory=dict)

    def apply(self, level: int, base: Mapping[str, Any]) -> Dict[str, Any]:
        params = dict(base)
        for name, factor in self.scale.items():
            value = base[name]
            scaled = value * factor
            params[name] = math.floor(scaled) if isinstance(value, int) else round(scaled, 4)
        for name, delta in self.offset.items():
            params[name] = params[name] + delta
        for name, value in self.values.items():
            params[name] = value(level) if callable(value) else value
        return params


VariationSource = Union[Sequence[Variation], Callable[[int], Sequence[Variation]]]


@dataclass(frozen=True)
class ActionSpaceSpec:
    """
    Per-game recipe for the action catalogue.

    Attributes:
        game: Game name stamped on every action
        level_params: Level -> base parameters
        variations: Variation list, or level -> variation list
        variation_step: Multiplier increment between variations
        key_fields: Params that identify an arm
    """
    game: str
    level_params: Callable[[int], Dict[str, Any]]
    variations: VariationSource
    variation_step: float = 0.05
    key_fields: Tuple[str, ...] = ()

    def variations_for(self, level: int) -> Sequence[Variation]:
        if callable(self.variations):
            return self.variations(level)
        return self.variations

    def generate(self) -> List[Action]:
        """
        Build the full catalogue, ordered by level then variation.

        Pure and deterministic: the same spec always yields the same list.
        """
        actions: List[Action] = []
        for level in range(MIN_LEVEL, MAX_LEVEL + 1):
            base = self.level_params(level)
            for idx, variation in enumerate(self.variations_for(level)):
                multiplier = round(1 + (level - 1) * LEVEL_STEP + idx * self.variation_step, 4)
                actions.append(Action(
                    game=self.game,
                    level=level,
                    variation=idx,
                    difficulty_multiplier=multiplier,
                    params=variation.apply(level, base),
                    key_fields=self.key_fields,
                ))

        logger.debug(f"[ACTIONS:{self.game}] Generated {len(actions)} actions")
        return actions


def actions_for_level(actions: Sequence[Action], level: int) -> List[Action]:
    """Actions whose multiplier falls inside the level's band, in catalogue order."""
    low, high = difficulty_band(level)
    return [
        a for a in actions
        if low - BAND_TOLERANCE <= a.difficulty_multiplier <= high + BAND_TOLERANCE
    ]


def find_similar_action(
    actions: Sequence[Action],
    preferences: Mapping[str, float],
    scales: Optional[Mapping[str, float]] = None,
) -> Optional[Action]:
    """
    Action closest to a set of preferred parameter values.

    Distance is the sum of |param - preferred| / scale over the preferred
    params; first-seen wins ties.
    """
    scales = scales or {}
    best: Optional[Action] = None
    best_distance = float("inf")

    for action in actions:
        distance = 0.0
        for name, preferred in preferences.items():
            value = action.get(name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                continue
            distance += abs(value - preferred) / (scales.get(name) or 1.0)
        if distance < best_distance:
            best_distance = distance
            best = action

    return best
