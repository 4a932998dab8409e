"""
Contextual Bandit for CogTrain.

Epsilon-greedy contextual bandit with:
- Per-arm online linear value model over [context || action] features
- UCB bonus for under-sampled arms
- Pluggable cold-start prior
- Schema versioning for persisted state
- Freeze mode for read-only operation

One generic engine; each game supplies a GameProfile.
"""

import hashlib
import json
import logging
import math
import random
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

import numpy as np

from ..rewards.config import RewardConfig, get_reward_config
from ..rewards.reward_signal import PerformanceMetrics, RewardSignal
from .action_space import Action, actions_for_level, clamp_level
from .config import BanditConfig, get_bandit_config
from .contextual_features import GameContext
from .game_profile import GameProfile
from .insights import performance_insight
from .priors import ColdStartPrior
from .progression import DifficultyTrend
from .state_store import JsonFileStore, StateStore
from .user_profile import UserProfile

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _parse_time(value: Any) -> Optional[datetime]:
    if isinstance(value, str):
        return datetime.fromisoformat(value)
    return None


@dataclass
class BanditSchema:
    """
    Versioned schema for bandit state validation.

    Persisted state is only reused when every field matches, so a changed
    catalogue or feature layout starts fresh instead of loading weights
    of the wrong shape.

    Attributes:
        schema_version: Version string (e.g., "1.0.0")
        arms_signature_hash: Hash of the sorted action keys
        game: Game name
        feature_dim: Length of the encoded feature vector
        created_at: When schema was created
    """
    schema_version: str = "1.0.0"
    arms_signature_hash: str = ""
    game: str = ""
    feature_dim: int = 0
    created_at: datetime = field(default_factory=_utcnow)

    def matches(self, other: "BanditSchema") -> bool:
        return (
            self.schema_version == other.schema_version
            and self.arms_signature_hash == other.arms_signature_hash
            and self.game == other.game
            and self.feature_dim == other.feature_dim
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "schema_version": self.schema_version,
            "arms_signature_hash": self.arms_signature_hash,
            "game": self.game,
            "feature_dim": self.feature_dim,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BanditSchema":
        return cls(
            schema_version=str(data.get("schema_version", "")),
            arms_signature_hash=str(data.get("arms_signature_hash", "")),
            game=str(data.get("game", "")),
            feature_dim=int(data.get("feature_dim", 0)),
            created_at=_parse_time(data.get("created_at")) or _utcnow(),
        )


@dataclass
class ArmStatistics:
    """
    Learned statistics for one action.

    Attributes:
        action_key: Action.key of the arm
        pulls: Number of times the arm was played
        total_reward: Sum of rewards received
        last_pulled: Timestamp of last pull
        context_weights: Linear model weights, one per feature
    """
    action_key: str
    pulls: int = 0
    total_reward: float = 0.0
    last_pulled: Optional[datetime] = None
    context_weights: np.ndarray = field(default_factory=lambda: np.zeros(0))

    @property
    def average_reward(self) -> float:
        """Average reward for this arm."""
        if self.pulls == 0:
            return 0.0
        return self.total_reward / self.pulls

    def to_dict(self) -> Dict[str, Any]:
        return {
            "action_key": self.action_key,
            "pulls": self.pulls,
            "total_reward": self.total_reward,
            "average_reward": self.average_reward,
            "last_pulled": self.last_pulled.isoformat() if self.last_pulled else None,
            "context_weights": [float(w) for w in self.context_weights],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], dimension: int) -> "ArmStatistics":
        weights = np.asarray(data.get("context_weights") or [], dtype=float)
        if weights.shape != (dimension,) or not np.all(np.isfinite(weights)):
            raise ValueError(
                f"Arm {data.get('action_key')} has weights of shape {weights.shape}, "
                f"expected ({dimension},)"
            )
        pulls = int(data.get("pulls", 0))
        total_reward = float(data.get("total_reward", 0.0))
        if pulls < 0 or not math.isfinite(total_reward):
            raise ValueError(f"Arm {data.get('action_key')} has invalid statistics")

        return cls(
            action_key=str(data["action_key"]),
            pulls=pulls,
            total_reward=total_reward,
            last_pulled=_parse_time(data.get("last_pulled")),
            context_weights=weights,
        )


@dataclass
class RewardRecord:
    """One played level in the bounded history."""
    action_key: str
    level: int
    difficulty_multiplier: float
    reward: float
    context: Dict[str, Any] = field(default_factory=dict)
    metrics: Dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=_utcnow)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "action_key": self.action_key,
            "level": self.level,
            "difficulty_multiplier": self.difficulty_multiplier,
            "reward": self.reward,
            "context": self.context,
            "metrics": self.metrics,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RewardRecord":
        reward = float(data.get("reward", 0.0))
        if not math.isfinite(reward):
            raise ValueError("History record has a non-finite reward")
        return cls(
            action_key=str(data.get("action_key", "")),
            level=clamp_level(data.get("level", 1)),
            difficulty_multiplier=float(data.get("difficulty_multiplier", 1.0)),
            reward=reward,
            context=dict(data.get("context") or {}),
            metrics=dict(data.get("metrics") or {}),
            timestamp=_parse_time(data.get("timestamp")) or _utcnow(),
        )


@dataclass
class BanditState:
    """
    Complete state for one game's bandit.

    Attributes:
        schema: Schema information for validation
        arms: Action key -> ArmStatistics (created lazily)
        epsilon: Current exploration rate
        total_pulls: Total updates across all arms
        history: Most recent reward records, oldest first
        profile: Slow-moving user profile
        updated_at: Last update time
    """
    schema: BanditSchema = field(default_factory=BanditSchema)
    arms: Dict[str, ArmStatistics] = field(default_factory=dict)
    epsilon: float = 0.3
    total_pulls: int = 0
    history: List[RewardRecord] = field(default_factory=list)
    profile: UserProfile = field(default_factory=UserProfile)
    updated_at: datetime = field(default_factory=_utcnow)

    @property
    def rewards(self) -> List[float]:
        return [record.reward for record in self.history]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "schema": self.schema.to_dict(),
            "arms": [[key, arm.to_dict()] for key, arm in self.arms.items()],
            "epsilon": self.epsilon,
            "total_pulls": self.total_pulls,
            "history": [record.to_dict() for record in self.history],
            "profile": self.profile.to_dict(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(
        cls,
        data: Mapping[str, Any],
        dimension: int,
        default_profile: Optional[UserProfile] = None,
    ) -> "BanditState":
        epsilon = float(data.get("epsilon", 0.3))
        if not 0.0 <= epsilon <= 1.0:
            raise ValueError(f"Persisted epsilon out of range: {epsilon}")
        total_pulls = int(data.get("total_pulls", 0))
        if total_pulls < 0:
            raise ValueError(f"Persisted total_pulls is negative: {total_pulls}")

        arms: Dict[str, ArmStatistics] = {}
        for key, arm_data in data.get("arms") or []:
            arms[str(key)] = ArmStatistics.from_dict(arm_data, dimension)

        return cls(
            schema=BanditSchema.from_dict(data.get("schema") or {}),
            arms=arms,
            epsilon=epsilon,
            total_pulls=total_pulls,
            history=[RewardRecord.from_dict(r) for r in data.get("history") or []],
            profile=UserProfile.from_dict(data.get("profile") or {}, default_profile),
            updated_at=_parse_time(data.get("updated_at")) or _utcnow(),
        )


HistoryLike = Sequence[Union[RewardRecord, float, int]]


class ContextualBandit:
    """
    Adaptive-difficulty bandit for one game.

    Lifecycle: construct (loads persisted state) -> (select / update)* ,
    with state saved after every update.

    Usage:
        bandit = ContextualBandit(get_game_profile("reaction"), store=InMemoryStore())

        context = GameContext(current_level=3)
        action = bandit.select(context)

        # After the level:
        bandit.observe(context, action, {"completed": True, "accuracy": 0.9})
        next_level = bandit.next_level(context)
    """

    def __init__(
        self,
        game: GameProfile,
        config: Optional[BanditConfig] = None,
        store: Optional[StateStore] = None,
        rng: Optional[random.Random] = None,
        prior: Optional[ColdStartPrior] = None,
        reward_config: Optional[RewardConfig] = None,
    ):
        """
        Initialize the bandit.

        Args:
            game: GameProfile with the game's parameterization
            config: Optional BanditConfig. Uses global if None.
            store: State store. Uses a JsonFileStore under config.store_dir if None.
            rng: Random source for exploration (seed it for reproducibility)
            prior: Cold-start prior. Uses the game's prior if None.
            reward_config: Reward scale. Uses global if None.
        """
        self.game = game
        self.config = config or get_bandit_config()
        self.reward_config = reward_config or get_reward_config()
        self.store = store if store is not None else JsonFileStore(self.config.store_dir)
        self.rng = rng or random.Random()
        self.prior = prior or game.prior

        self.actions: List[Action] = game.generate_actions()
        self.encoder = game.features
        self.dimension = self.encoder.dimension

        self.schema = BanditSchema(
            schema_version=self.config.schema_version,
            arms_signature_hash=self._compute_arms_hash(self.actions),
            game=game.name,
            feature_dim=self.dimension,
        )

        self._state = self._fresh_state()
        self.reload()

    @staticmethod
    def _compute_arms_hash(actions: Sequence[Action]) -> str:
        """Compute stable hash of the catalogue's action keys."""
        keys_str = ",".join(sorted(a.key for a in actions))
        return hashlib.sha256(keys_str.encode()).hexdigest()[:16]

    def _fresh_state(self) -> BanditState:
        return BanditState(
            schema=self.schema,
            epsilon=self.config.epsilon,
            profile=self.game.new_profile(),
        )

    @property
    def name(self) -> str:
        return self.game.name

    @property
    def epsilon(self) -> float:
        return self._state.epsilon

    @property
    def total_pulls(self) -> int:
        return self._state.total_pulls

    @property
    def profile(self) -> UserProfile:
        return self._state.profile

    @property
    def arms(self) -> Dict[str, ArmStatistics]:
        return self._state.arms

    @property
    def history(self) -> List[RewardRecord]:
        return list(self._state.history)

    @property
    def is_frozen(self) -> bool:
        """Check if bandit is in freeze mode."""
        return self.config.freeze_mode

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def candidates_for_level(self, level: Any) -> List[Action]:
        """Actions in the level's multiplier band, or the fallback prefix."""
        level = clamp_level(level)
        candidates = actions_for_level(self.actions, level)
        if not candidates:
            logger.debug(
                f"[BANDIT:{self.name}] No actions in band for level {level}, "
                f"using first {self.config.fallback_pool_size}"
            )
            candidates = self.actions[:self.config.fallback_pool_size]
        return candidates

    def predict_reward(self, context: GameContext, action: Action) -> float:
        """Prior for unpulled arms, else linear model blended with the average."""
        arm = self._state.arms.get(action.key)
        if arm is None or arm.pulls == 0:
            return self.prior.score(context, action, self._state.profile)

        features = self.encoder.encode(context, action)
        linear = float(np.dot(arm.context_weights, features))
        blend = min(1.0, arm.pulls / self.config.blend_pulls)
        return linear * blend + arm.average_reward * (1 - blend)

    def ucb_bonus(self, action: Action) -> float:
        arm = self._state.arms.get(action.key)
        if arm is None or arm.pulls == 0:
            return self.config.unexplored_bonus
        return math.sqrt(2 * math.log(self._state.total_pulls + 1) / arm.pulls)

    def select(self, context: Any = None) -> Action:
        """
        Select an action for the context's level.

        Args:
            context: GameContext (dicts and None are coerced)

        Returns:
            Selected Action
        """
        context = GameContext.coerce(context)
        candidates = self.candidates_for_level(context.current_level)

        if self.rng.random() < self._state.epsilon:
            action = self.rng.choice(candidates)
            logger.debug(
                f"[BANDIT:{self.name}] Explore: {action.key} "
                f"(epsilon={self._state.epsilon:.3f})"
            )
            return action

        best_action = candidates[0]
        best_score = float("-inf")
        for action in candidates:
            score = (
                self.predict_reward(context, action)
                + self.ucb_bonus(action) * self.config.ucb_weight
            )
            if score > best_score:
                best_score = score
                best_action = action

        logger.debug(
            f"[BANDIT:{self.name}] Exploit: {best_action.key} (score={best_score:.2f})"
        )
        return best_action

    def similar_action(self, preferences: Optional[Dict[str, float]] = None) -> Optional[Action]:
        """Catalogue action closest to the given (or the profile's) preferred params."""
        preferences = preferences if preferences is not None else self._state.profile.preferred_params
        return self.game.similar_action(self.actions, preferences)

    # ------------------------------------------------------------------
    # Learning
    # ------------------------------------------------------------------

    def compute_reward(self, metrics: Any) -> float:
        """Reward for a level's metrics using this game's weights."""
        return RewardSignal.from_metrics(
            metrics,
            self.game.reward_weights,
            game=self.name,
            config=self.reward_config,
        ).reward

    def observe(self, context: Any, action: Action, metrics: Any) -> Optional[RewardRecord]:
        """Compute the reward from metrics and apply it."""
        return self.update(context, action, self.compute_reward(metrics), metrics)

    def update(
        self,
        context: Any,
        action: Action,
        reward: float,
        metrics: Any = None,
    ) -> Optional[RewardRecord]:
        """
        Learn from one played level.

        Args:
            context: Context the action was selected in
            action: Action that was played
            reward: Observed reward (non-finite values count as 0)
            metrics: PerformanceMetrics or dict; missing fields use neutral values

        Returns:
            The appended RewardRecord, or None in freeze mode
        """
        if self.config.freeze_mode:
            logger.debug(f"[BANDIT:{self.name}] Freeze mode: update rejected")
            return None

        context = GameContext.coerce(context)
        metrics = PerformanceMetrics.coerce(metrics)
        if isinstance(action, Mapping):
            action = Action.from_dict(action)
        try:
            reward = float(reward)
        except (TypeError, ValueError):
            reward = 0.0
        if not math.isfinite(reward):
            reward = 0.0
        reward = max(self.reward_config.min_reward, min(self.reward_config.max_reward, reward))

        state = self._state
        now = _utcnow()

        arm = state.arms.get(action.key)
        if arm is None:
            arm = ArmStatistics(action_key=action.key, context_weights=np.zeros(self.dimension))
            state.arms[action.key] = arm
        arm.pulls += 1
        arm.total_reward += reward
        arm.last_pulled = now

        features = self.encoder.encode(context, action)
        error = reward - float(np.dot(arm.context_weights, features))
        weights = arm.context_weights + self.config.learning_rate * error * features
        weights *= self.config.weight_decay
        if not np.all(np.isfinite(weights)):
            logger.warning(
                f"[BANDIT:{self.name}] Non-finite weights for {action.key}, resetting arm model"
            )
            weights = np.zeros(self.dimension)
        arm.context_weights = weights

        state.total_pulls += 1
        state.epsilon = max(
            min(self.config.min_epsilon, state.epsilon),
            state.epsilon * self.config.epsilon_decay,
        )

        accuracy = (
            metrics.accuracy if metrics.accuracy is not None
            else self.reward_config.neutral_accuracy
        )
        state.profile.update(
            context,
            action,
            reward,
            completed=metrics.completed,
            accuracy=accuracy,
            recent_rewards=state.rewards + [reward],
            sub_skill_accuracy=metrics.counters.get("task_type_accuracy"),
            alpha=self.config.profile_alpha,
        )

        record = RewardRecord(
            action_key=action.key,
            level=action.level,
            difficulty_multiplier=action.difficulty_multiplier,
            reward=reward,
            context=context.to_dict(),
            metrics=metrics.to_dict(),
            timestamp=now,
        )
        state.history.append(record)
        if len(state.history) > self.config.history_limit:
            del state.history[:-self.config.history_limit]
        state.updated_at = now

        logger.debug(
            f"[BANDIT:{self.name}] Updated {action.key}: reward={reward:.1f}, "
            f"pulls={arm.pulls}, mean={arm.average_reward:.1f}, "
            f"epsilon={state.epsilon:.3f}"
        )

        self.save()
        return record

    # ------------------------------------------------------------------
    # Progression and display
    # ------------------------------------------------------------------

    def _rewards(self, history: Optional[HistoryLike]) -> List[float]:
        if history is None:
            return self._state.rewards
        rewards = []
        for item in history:
            value = item.reward if isinstance(item, RewardRecord) else item
            try:
                value = float(value)
            except (TypeError, ValueError):
                continue
            if math.isfinite(value):
                rewards.append(value)
        return rewards

    def next_level(self, context: Any = None, history: Optional[HistoryLike] = None) -> int:
        """
        Level to play next: one step up, one step down, or the same.

        Args:
            context: Context of the level just played
            history: Rewards or RewardRecords (defaults to this bandit's history)
        """
        context = GameContext.coerce(context)
        return self.game.progression.next_level(
            context.current_level,
            self._rewards(history),
            self._state.profile.skill_level,
        )

    def predict_trend(
        self,
        context: Any = None,
        history: Optional[HistoryLike] = None,
    ) -> DifficultyTrend:
        """Direction of next_level(), without touching state."""
        context = GameContext.coerce(context)
        return self.game.progression.trend(
            context.current_level,
            self._rewards(history),
            self._state.profile.skill_level,
        )

    def performance_insight(self, context: Any = None) -> str:
        return performance_insight(
            self._state.rewards,
            GameContext.coerce(context),
            self.game.insights,
        )

    def get_stats(self) -> Dict[str, Any]:
        """Get bandit statistics."""
        state = self._state
        pulled = [arm for arm in state.arms.values() if arm.pulls > 0]
        best = max(pulled, key=lambda a: a.average_reward) if pulled else None

        return {
            "game": self.name,
            "epsilon": state.epsilon,
            "total_pulls": state.total_pulls,
            "skill_level": state.profile.skill_level,
            "profile": state.profile.to_dict(),
            "arms_pulled": len(pulled),
            "best_arm": best.action_key if best else None,
            "schema_version": state.schema.schema_version,
            "freeze_mode": self.config.freeze_mode,
        }

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self) -> Dict[str, Any]:
        """
        Serialize state and write it to the store.

        Returns:
            JSON-serializable state blob
        """
        blob = self._state.to_dict()
        if self.config.freeze_mode:
            return blob
        try:
            saved = self.store.set(self.game.storage_key, blob)
        except Exception as e:
            logger.warning(f"[BANDIT:{self.name}] Failed to save state: {e}")
            return blob
        if not saved:
            logger.warning(f"[BANDIT:{self.name}] Failed to save state")
        return blob

    def validate_schema(self, loaded_state: BanditState) -> bool:
        """
        Validate loaded state matches current schema.

        Args:
            loaded_state: State loaded from a blob

        Returns:
            True if schemas match
        """
        if not loaded_state.schema.matches(self.schema):
            logger.warning(
                f"[BANDIT:{self.name}] Schema mismatch: "
                f"{loaded_state.schema.schema_version}/{loaded_state.schema.arms_signature_hash} "
                f"!= {self.schema.schema_version}/{self.schema.arms_signature_hash}"
            )
            return False
        return True

    def load(self, blob: Any) -> bool:
        """
        Replace state with a saved blob.

        Missing, corrupt or mismatched blobs leave the bandit freshly
        initialized.

        Args:
            blob: Output of save(), its JSON text, or anything else

        Returns:
            True if the blob was loaded
        """
        self._state = self._fresh_state()
        if blob is None:
            return False

        try:
            if isinstance(blob, (str, bytes)):
                blob = json.loads(blob)
            if not isinstance(blob, Mapping):
                raise ValueError(f"expected a mapping, got {type(blob).__name__}")

            loaded_state = BanditState.from_dict(
                blob, self.dimension, default_profile=self.game.new_profile()
            )
            if not self.validate_schema(loaded_state):
                return False

            self._state = loaded_state
            logger.info(
                f"[BANDIT:{self.name}] Loaded state: {loaded_state.total_pulls} total pulls"
            )
            return True

        except Exception as e:
            logger.warning(f"[BANDIT:{self.name}] Failed to load state: {e}")
            self._state = self._fresh_state()
            return False

    def reload(self) -> bool:
        """Load the blob currently in the store."""
        try:
            blob = self.store.get(self.game.storage_key)
        except Exception as e:
            logger.warning(f"[BANDIT:{self.name}] Failed to read state: {e}")
            blob = None
        return self.load(blob)

    def reset(self) -> None:
        """Forget everything and remove the persisted blob."""
        self._state = self._fresh_state()
        if not self.config.freeze_mode:
            try:
                self.store.delete(self.game.storage_key)
            except Exception as e:
                logger.warning(f"[BANDIT:{self.name}] Failed to delete state: {e}")
        logger.info(f"[BANDIT:{self.name}] Reset bandit state")
