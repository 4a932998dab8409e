"""
Tests for contextual features and cold-start priors.
"""

import numpy as np
import pytest


class TestGameContext:
    """Test GameContext sanitization and construction."""

    def test_sanitizes(self):
        """Test out-of-range values are coerced."""
        from cogtrain.bandits import GameContext, TimeOfDay

        context = GameContext(
            current_level=0,
            recent_accuracy=3.0,
            frustration_level=float("nan"),
            streak_count=-4,
            time_of_day="MIDNIGHT",
        )

        assert context.current_level == 1
        assert context.recent_accuracy == 1.0
        assert context.frustration_level == 0.0
        assert context.streak_count == 0
        assert context.time_of_day == TimeOfDay.AFTERNOON

    def test_coerce(self):
        """Test dicts and garbage are accepted."""
        from cogtrain.bandits import GameContext

        assert GameContext.coerce({"current_level": 7}).current_level == 7
        assert GameContext.coerce(None) == GameContext()
        assert GameContext.coerce(42) == GameContext()

    def test_to_dict_from_dict(self):
        """Test context serialization round-trip."""
        from cogtrain.bandits import GameContext

        context = GameContext(
            current_level=9,
            recent_accuracy=0.8,
            time_of_day="night",
            user_type="speed_focused",
            avg_response_time_ms=420.0,
            sub_skills={"stroop": 0.7},
        )

        assert GameContext.from_dict(context.to_dict()) == context

    def test_from_recent(self):
        """Test rolling statistics from recent results."""
        from cogtrain.bandits import GameContext

        results = [
            {"completed": False, "accuracy": 0.1},
            {"completed": True, "accuracy": 0.6, "speed": 0.4},
            {"completed": True, "accuracy": 0.8, "speed": 0.6, "avg_response_time_ms": 500},
        ]
        context = GameContext.from_recent(results, current_level=4, time_of_day="morning")

        assert context.current_level == 4
        assert context.recent_accuracy == pytest.approx(0.5)
        assert context.recent_speed == pytest.approx(0.5)
        assert context.success_rate == pytest.approx(2 / 3)
        assert context.streak_count == 2
        assert context.avg_response_time_ms == 500
        assert context.time_of_day.value == "morning"

    def test_from_recent_empty(self):
        """Test no results gives neutral statistics."""
        from cogtrain.bandits import GameContext

        context = GameContext.from_recent([], current_level=2)

        assert context.recent_accuracy == 0.5
        assert context.success_rate == 0.5
        assert context.streak_count == 0
        assert context.avg_response_time_ms is None


class TestFeatureEncoder:
    """Test FeatureEncoder.encode()."""

    @pytest.fixture
    def encoder(self):
        from cogtrain.bandits import FeatureEncoder

        return FeatureEncoder(
            sub_skills=("stroop",),
            action_fields=(("grid_size", 8), ("hint_enabled", 1)),
            size_field="grid_size",
        )

    @pytest.fixture
    def action(self):
        from cogtrain.bandits import Action

        return Action(game="toy", level=3, variation=0, difficulty_multiplier=1.5,
                      params={"grid_size": 4, "hint_enabled": True})

    def test_dimension_matches_names(self, encoder, action):
        """Test vector length matches the feature names."""
        from cogtrain.bandits import GameContext

        vector = encoder.encode(GameContext(), action)

        assert vector.shape == (encoder.dimension,)
        assert len(encoder.feature_names()) == encoder.dimension

    def test_values(self, encoder, action):
        """Test selected feature values."""
        from cogtrain.bandits import GameContext

        context = GameContext(current_level=5, recent_accuracy=0.5, user_type="balanced",
                              sub_skills={"stroop": 0.9})
        features = dict(zip(encoder.feature_names(), encoder.encode(context, action)))

        assert features["level"] == pytest.approx(0.2)
        assert features["user_type_balanced"] == 1.0
        assert features["user_type_speed_focused"] == 0.0
        assert features["sub_skill_stroop"] == pytest.approx(0.9)
        assert features["difficulty_multiplier"] == pytest.approx(0.5)
        assert features["action_grid_size"] == pytest.approx(0.5)
        assert features["action_hint_enabled"] == 1.0
        assert features["accuracy_x_size"] == pytest.approx(0.25)

    def test_bounded(self, encoder):
        """Test every feature is clipped to [0, 1]."""
        from cogtrain.bandits import Action, GameContext

        action = Action(game="toy", level=25, variation=4, difficulty_multiplier=9.0,
                        params={"grid_size": 1e12, "hint_enabled": False})
        context = GameContext(current_level=25, previous_difficulty=50, streak_count=500,
                              session_length=1e9, avg_response_time_ms=1)
        vector = encoder.encode(context, action)

        assert np.all(vector >= 0.0)
        assert np.all(vector <= 1.0)
        assert np.all(np.isfinite(vector))

    def test_every_game_encodes(self):
        """Test all presets encode their own actions."""
        from cogtrain.bandits import GameContext
        from cogtrain.games import GAME_PROFILES

        for profile in GAME_PROFILES.values():
            actions = profile.generate_actions()
            for action in (actions[0], actions[-1]):
                vector = profile.features.encode(GameContext(), action)
                assert vector.shape == (profile.features.dimension,)
                assert np.all(np.isfinite(vector))


class TestAnalyzePlaystyle:
    """Test analyze_playstyle()."""

    def test_needs_three_games(self):
        """Test short histories are balanced."""
        from cogtrain.bandits import analyze_playstyle

        assert analyze_playstyle([{"accuracy": 0.1, "speed": 0.9}] * 2) == "balanced"

    def test_speed_focused(self):
        """Test fast but sloppy players."""
        from cogtrain.bandits import analyze_playstyle

        assert analyze_playstyle([{"accuracy": 0.3, "speed": 0.8}] * 3) == "speed_focused"

    def test_accuracy_focused(self):
        """Test slow but careful players."""
        from cogtrain.bandits import analyze_playstyle

        assert analyze_playstyle([{"accuracy": 0.9, "speed": 0.2}] * 4) == "accuracy_focused"

    def test_custom_labels(self):
        """Test game-specific labels."""
        from cogtrain.bandits import analyze_playstyle

        style = analyze_playstyle(
            [{"accuracy": 0.3, "speed": 0.9}] * 3,
            speed_label="fast_reactor",
            accuracy_label="consistent",
            balanced_label="improving",
        )

        assert style == "fast_reactor"


class TestPriors:
    """Test cold-start priors."""

    @pytest.fixture
    def actions(self):
        from cogtrain.bandits import Action

        return [
            Action(game="toy", level=1, variation=0, difficulty_multiplier=1.0,
                   params={"grid_size": 4, "hint_enabled": True}),
            Action(game="toy", level=5, variation=0, difficulty_multiplier=2.0,
                   params={"grid_size": 7, "hint_enabled": False}),
        ]

    def test_neutral(self, actions):
        """Test neutral prior scores every action alike."""
        from cogtrain.bandits import GameContext, NeutralPrior, UserProfile

        prior = NeutralPrior(42)

        assert {prior.score(GameContext(), a, UserProfile()) for a in actions} == {42}

    def test_heuristic_penalties(self, actions):
        """Test distance from preferences lowers the score."""
        from cogtrain.bandits import GameContext, HeuristicPrior, UserProfile

        prior = HeuristicPrior(size_field="grid_size", size_penalty=5, difficulty_penalty=10)
        profile = UserProfile(preferred_params={"grid_size": 4.0})

        assert prior.score(GameContext(), actions[0], profile) == pytest.approx(50)
        assert prior.score(GameContext(), actions[1], profile) == pytest.approx(50 - 15 - 10)

    def test_heuristic_bonus(self, actions):
        """Test bonuses apply only when context and action match."""
        from cogtrain.bandits import GameContext, HeuristicPrior, PriorBonus, UserProfile
        from cogtrain.bandits.priors import flag, frustrated

        prior = HeuristicPrior(bonuses=(PriorBonus(frustrated(), flag("hint_enabled"), 15),))
        calm = GameContext(frustration_level=0.1)
        upset = GameContext(frustration_level=0.9)

        assert prior.score(upset, actions[0], UserProfile()) == pytest.approx(65)
        assert prior.score(calm, actions[0], UserProfile()) == pytest.approx(50)
        assert prior.score(upset, actions[1], UserProfile()) == pytest.approx(40)

    def test_heuristic_clamped(self, actions):
        """Test scores stay in [0, 100]."""
        from cogtrain.bandits import GameContext, HeuristicPrior, UserProfile

        prior = HeuristicPrior(size_field="grid_size", size_penalty=100)
        profile = UserProfile(preferred_params={"grid_size": 0.0})

        assert prior.score(GameContext(), actions[1], profile) == 0.0

    def test_negative_penalty_rejected(self):
        """Test negative penalties raise."""
        from cogtrain.bandits import HeuristicPrior

        with pytest.raises(ValueError):
            HeuristicPrior(size_penalty=-1)

    def test_game_priors_bounded(self):
        """Test every preset prior scores its catalogue within [0, 100]."""
        from cogtrain.bandits import GameContext
        from cogtrain.games import GAME_PROFILES

        context = GameContext(frustration_level=0.9, recent_accuracy=0.9, user_type="balanced")
        for profile in GAME_PROFILES.values():
            user = profile.new_profile()
            for action in profile.generate_actions():
                assert 0.0 <= profile.prior.score(context, action, user) <= 100.0
