"""
Tests for the game presets.

Every preset must produce a usable catalogue, valid features and
reward weights under which clear success promotes and clear failure
demotes.
"""

import pytest

from cogtrain.games import GAME_PROFILES

GAMES = list(GAME_PROFILES)


class TestCatalogue:
    """Test the registered presets as a whole."""

    def test_all_games_registered(self):
        """Test the twelve games."""
        assert GAMES == [
            "memory_matching",
            "reaction",
            "attention",
            "audio_memory",
            "executive_function",
            "math_challenge",
            "pattern",
            "processing_speed",
            "spatial",
            "tower_of_hanoi",
            "visual_processing",
            "word_memory",
        ]

    def test_storage_keys_unique(self):
        """Test games never share a state blob."""
        keys = [profile.storage_key for profile in GAME_PROFILES.values()]

        assert len(keys) == len(set(keys))

    def test_get_game_profile_unknown(self):
        """Test unknown names raise."""
        from cogtrain.games import get_game_profile

        with pytest.raises(ValueError, match="Unknown game"):
            get_game_profile("chess")


@pytest.mark.parametrize("game", GAMES)
class TestGamePreset:
    """Test each preset."""

    def test_action_count(self, game):
        """Test 25 levels of 5 variations."""
        actions = GAME_PROFILES[game].generate_actions()

        assert len(actions) == 125
        assert len({a.key for a in actions}) == 125
        assert all(a.game == game for a in actions)

    def test_every_level_has_candidates(self, game):
        """Test no level needs the fallback pool."""
        from cogtrain.bandits import actions_for_level

        actions = GAME_PROFILES[game].generate_actions()

        for level in range(1, 26):
            assert actions_for_level(actions, level)

    def test_multipliers_monotone_within_level(self, game):
        """Test later variations are harder."""
        actions = GAME_PROFILES[game].generate_actions()

        for level in range(1, 26):
            multipliers = [a.difficulty_multiplier for a in actions if a.level == level]
            assert multipliers == sorted(multipliers)

    def test_feature_names_unique(self, game):
        """Test feature names do not collide."""
        names = GAME_PROFILES[game].features.feature_names()

        assert len(names) == len(set(names))

    def test_new_profile(self, game):
        """Test fresh profiles carry the game's defaults."""
        profile = GAME_PROFILES[game]
        user = profile.new_profile()

        assert user.preferred_params == {k: float(v) for k, v in profile.default_preferences.items()}
        assert set(user.sub_skill_strengths) == set(profile.sub_skills)

    def test_similar_action(self, game):
        """Test the nearest-preference lookup finds an action."""
        profile = GAME_PROFILES[game]
        actions = profile.generate_actions()

        assert profile.similar_action(actions, dict(profile.default_preferences)) in actions

    def test_insights_filled(self, game):
        """Test every insight message is set."""
        from dataclasses import astuple

        assert all(astuple(GAME_PROFILES[game].insights))

    def test_success_promotes(self, game, make_bandit, success_metrics):
        """Test five clear successes go up one level."""
        from cogtrain.bandits import GameContext

        bandit = make_bandit(game)
        context = GameContext(current_level=8)
        for _ in range(5):
            bandit.observe(context, bandit.select(context), success_metrics)

        assert min(r.reward for r in bandit.history) > 55
        assert bandit.next_level(context) == 9

    def test_failure_demotes(self, game, make_bandit, failure_metrics):
        """Test five clear failures go down one level."""
        from cogtrain.bandits import GameContext

        bandit = make_bandit(game)
        context = GameContext(current_level=8)
        for _ in range(5):
            bandit.observe(context, bandit.select(context), failure_metrics)

        assert max(r.reward for r in bandit.history) < 30
        assert bandit.next_level(context) == 7

    def test_cold_start_select(self, game, make_bandit, greedy_config):
        """Test a fresh bandit selects in band at every level."""
        from cogtrain.bandits import GameContext

        bandit = make_bandit(game, config=greedy_config)

        for level in (1, 12, 25):
            action = bandit.select(GameContext(current_level=level, frustration_level=0.8))
            assert action in bandit.candidates_for_level(level)


class TestGameSpecifics:
    """Test behaviour particular to single games."""

    def test_executive_function_task_strength(self):
        """Test the prior favours levels built from strong task types."""
        from cogtrain.bandits import GameContext

        profile = GAME_PROFILES["executive_function"]
        actions = profile.generate_actions()
        user = profile.new_profile()
        context = GameContext(current_level=1)

        baseline = [profile.prior.score(context, a, user) for a in actions[:5]]
        for name in user.sub_skill_strengths:
            user.sub_skill_strengths[name] = 0.95
        strong = [profile.prior.score(context, a, user) for a in actions[:5]]

        assert sum(strong) >= sum(baseline)

    def test_skill_gated_promotion(self, make_bandit):
        """Test games with a skill gate hold back unskilled players."""
        from cogtrain.bandits import GameContext

        bandit = make_bandit("tower_of_hanoi")
        bandit.profile.skill_level = 0.2

        assert bandit.next_level(GameContext(current_level=5), [90] * 5) == 5

    def test_math_operations_widen(self):
        """Test harder levels introduce more operations."""
        actions = GAME_PROFILES["math_challenge"].generate_actions()

        first = {op for a in actions if a.level == 1 for op in a.get("operations")}
        last = {op for a in actions if a.level == 25 for op in a.get("operations")}

        assert first < last
