"""
Game presets for CogTrain.

Each module defines one GameProfile: level formulas, variation table,
feature layout, reward weights, prior and display text.
"""

from typing import Dict, List

from ..bandits.game_profile import GameProfile
from . import (
    attention,
    audio_memory,
    executive_function,
    math_challenge,
    memory_matching,
    pattern,
    processing_speed,
    reaction,
    spatial,
    tower_of_hanoi,
    visual_processing,
    word_memory,
)

GAME_PROFILES: Dict[str, GameProfile] = {
    module.PROFILE.name: module.PROFILE
    for module in (
        memory_matching,
        reaction,
        attention,
        audio_memory,
        executive_function,
        math_challenge,
        pattern,
        processing_speed,
        spatial,
        tower_of_hanoi,
        visual_processing,
        word_memory,
    )
}


def list_games() -> List[str]:
    """List all registered game names."""
    return list(GAME_PROFILES.keys())


def get_game_profile(name: str) -> GameProfile:
    """
    Get the profile of a game.

    Raises:
        ValueError: If the game is not registered
    """
    if name not in GAME_PROFILES:
        raise ValueError(f"Unknown game: {name}. Available: {list_games()}")
    return GAME_PROFILES[name]


__all__ = [
    "GAME_PROFILES",
    "get_game_profile",
    "list_games",
]
