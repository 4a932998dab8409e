"""
Bandit Registry for CogTrain.

Session-owned registry of per-game bandits. There is no process-wide
instance: the calling session constructs one and passes it around.
"""

import logging
import random
from typing import Any, Dict, List, Mapping, Optional

from .config import BanditConfig, get_bandit_config
from .contextual_bandit import ContextualBandit
from .game_profile import GameProfile
from .state_store import JsonFileStore, StateStore

logger = logging.getLogger(__name__)


class BanditRegistry:
    """
    Lazily constructed bandits, one per game.

    Provides:
    - Lazy initialization of bandits
    - One shared state store, namespaced by each game's storage key
    - Statistics aggregation

    Usage:
        registry = BanditRegistry(store=JsonFileStore("kb/bandits"))

        bandit = registry.get("reaction")
        action = bandit.select(context)
        bandit.observe(context, action, metrics)

        stats = registry.get_all_stats()
    """

    def __init__(
        self,
        config: Optional[BanditConfig] = None,
        store: Optional[StateStore] = None,
        rng: Optional[random.Random] = None,
        profiles: Optional[Mapping[str, GameProfile]] = None,
    ):
        """
        Initialize the registry.

        Args:
            config: Optional BanditConfig. Uses global if None.
            store: State store shared by all bandits. JsonFileStore if None.
            rng: Random source shared by all bandits
            profiles: Game name -> GameProfile. All presets if None.
        """
        self.config = config or get_bandit_config()
        self.store = store if store is not None else JsonFileStore(self.config.store_dir)
        self.rng = rng
        if profiles is None:
            # games import the bandits package, so resolve presets lazily
            from ..games import GAME_PROFILES
            profiles = GAME_PROFILES
        self.profiles: Dict[str, GameProfile] = dict(profiles)
        self._bandits: Dict[str, ContextualBandit] = {}

    def get(self, game: str) -> ContextualBandit:
        """
        Get the bandit for a game.

        Lazy-initializes (and loads persisted state) on first use.

        Raises:
            ValueError: If the game is not registered
        """
        if game not in self.profiles:
            raise ValueError(
                f"Unknown game: {game}. Available: {list(self.profiles.keys())}"
            )

        if game not in self._bandits:
            self._bandits[game] = ContextualBandit(
                self.profiles[game],
                config=self.config,
                store=self.store,
                rng=self.rng,
            )
            logger.info(f"[REGISTRY] Initialized: {game}")

        return self._bandits[game]

    def list_games(self) -> List[str]:
        """List all registered games."""
        return list(self.profiles.keys())

    def list_initialized(self) -> List[str]:
        """List all initialized bandits."""
        return list(self._bandits.keys())

    def get_stats(self, game: str) -> Dict[str, Any]:
        """Statistics for one game, without initializing it."""
        if game not in self._bandits:
            return {"initialized": False, "game": game}
        return self._bandits[game].get_stats()

    def get_all_stats(self) -> Dict[str, Any]:
        """Statistics for all initialized bandits."""
        return {game: bandit.get_stats() for game, bandit in self._bandits.items()}

    def reset(self, game: str) -> bool:
        """
        Reset one game's bandit and remove its persisted state.

        Returns:
            True if the game is registered
        """
        if game not in self.profiles:
            return False
        self.get(game).reset()
        return True

    def reset_all(self) -> None:
        """Reset all initialized bandits."""
        for bandit in self._bandits.values():
            bandit.reset()
        logger.info("[REGISTRY] Reset all bandits")

    def close(self) -> None:
        """Drop all bandits."""
        self._bandits.clear()
