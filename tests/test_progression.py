"""
Tests for level progression, performance insights and the user profile.
"""

import pytest


class TestProgressionPolicy:
    """Test ProgressionPolicy.next_level()."""

    def test_promote(self):
        """Test high mean reward goes up one level."""
        from cogtrain.bandits import ProgressionPolicy

        assert ProgressionPolicy().next_level(5, [60, 70, 80, 65, 75]) == 6

    def test_demote(self):
        """Test low mean reward goes down one level."""
        from cogtrain.bandits import ProgressionPolicy

        assert ProgressionPolicy().next_level(5, [10, 20, 5, 25, 15]) == 4

    def test_stay(self):
        """Test middling rewards keep the level."""
        from cogtrain.bandits import ProgressionPolicy

        assert ProgressionPolicy().next_level(5, [40, 45, 50, 35, 42]) == 5

    def test_thresholds_are_strict(self):
        """Test rewards exactly on a threshold keep the level."""
        from cogtrain.bandits import ProgressionPolicy

        policy = ProgressionPolicy()

        assert policy.next_level(5, [55] * 5) == 5
        assert policy.next_level(5, [30] * 5) == 5

    def test_only_last_window_counts(self):
        """Test older rewards are ignored."""
        from cogtrain.bandits import ProgressionPolicy

        rewards = [0, 0, 0, 0, 0, 90, 90, 90, 90, 90]

        assert ProgressionPolicy().next_level(5, rewards) == 6

    def test_short_history(self):
        """Test fewer rewards than the window still count."""
        from cogtrain.bandits import ProgressionPolicy

        assert ProgressionPolicy().next_level(5, [90]) == 6

    def test_empty_history(self):
        """Test no rewards keeps the level."""
        from cogtrain.bandits import ProgressionPolicy

        assert ProgressionPolicy().next_level(7, []) == 7

    def test_clamped_at_edges(self):
        """Test levels never leave [1, 25]."""
        from cogtrain.bandits import ProgressionPolicy

        policy = ProgressionPolicy()

        assert policy.next_level(25, [90] * 5) == 25
        assert policy.next_level(1, [0] * 5) == 1
        assert policy.next_level(40, [40] * 5) == 25
        assert policy.next_level(-3, [40] * 5) == 1

    @pytest.mark.parametrize("level", [1, 2, 13, 24, 25])
    @pytest.mark.parametrize("rewards", [[], [100] * 5, [-100] * 5, [40] * 5, [0, 100, 50]])
    def test_single_step(self, level, rewards):
        """Test next level is always within one step."""
        from cogtrain.bandits import ProgressionPolicy

        next_level = ProgressionPolicy().next_level(level, rewards)

        assert next_level in (level - 1, level, level + 1)
        assert 1 <= next_level <= 25

    def test_skill_threshold(self):
        """Test promotion can require a minimum skill."""
        from cogtrain.bandits import ProgressionPolicy

        policy = ProgressionPolicy(skill_threshold=0.6)

        assert policy.next_level(5, [90] * 5, skill_level=0.5) == 5
        assert policy.next_level(5, [90] * 5, skill_level=0.7) == 6
        assert policy.next_level(5, [0] * 5, skill_level=0.1) == 4

    def test_invalid_thresholds(self):
        """Test demote threshold above promote threshold raises."""
        from cogtrain.bandits import ProgressionPolicy

        with pytest.raises(ValueError):
            ProgressionPolicy(promote_threshold=20, demote_threshold=40)

    def test_trend(self):
        """Test trend mirrors next_level()."""
        from cogtrain.bandits import DifficultyTrend, ProgressionPolicy

        policy = ProgressionPolicy()

        assert policy.trend(5, [90] * 5) == DifficultyTrend.HARDER
        assert policy.trend(5, [0] * 5) == DifficultyTrend.EASIER
        assert policy.trend(5, [40] * 5) == DifficultyTrend.SAME
        assert policy.trend(25, [90] * 5) == DifficultyTrend.SAME


class TestPerformanceInsight:
    """Test performance_insight()."""

    @pytest.mark.parametrize("rewards,context,expected", [
        ([], {}, "intro"),
        ([80, 90, 85], {}, "excellent"),
        ([60, 60, 60], {}, "good"),
        ([40, 40, 40], {"recent_accuracy": 0.5}, "low_accuracy"),
        ([40, 40, 40], {"recent_accuracy": 0.9, "recent_speed": 0.2}, "slow"),
        ([40, 40, 40], {"recent_accuracy": 0.9, "recent_speed": 0.9}, "progress"),
        ([10, 20, 0], {}, "struggling"),
        ([0, 0, 90, 90, 90], {}, "excellent"),
    ])
    def test_messages(self, rewards, context, expected):
        """Test message choice from the last three rewards."""
        from cogtrain.bandits import GameContext, InsightMessages, performance_insight
        from cogtrain.bandits.insights import DEFAULT_INSIGHTS

        message = performance_insight(rewards, GameContext(**context), DEFAULT_INSIGHTS)

        assert message == getattr(DEFAULT_INSIGHTS, expected)
        assert isinstance(DEFAULT_INSIGHTS, InsightMessages)


class TestUserProfile:
    """Test UserProfile.update()."""

    @pytest.fixture
    def action(self):
        from cogtrain.bandits import Action

        return Action(game="toy", level=4, variation=1, difficulty_multiplier=1.5,
                      params={"grid_size": 6, "hint_enabled": False})

    def test_skill_rises_on_success(self, action):
        """Test accurate completed levels raise skill."""
        from cogtrain.bandits import GameContext, UserProfile

        profile = UserProfile()
        profile.update(GameContext(), action, 50, completed=True, accuracy=0.9)

        assert profile.skill_level == pytest.approx(0.6)

    def test_skill_falls_on_failure(self, action):
        """Test failed levels lower skill by half a step."""
        from cogtrain.bandits import GameContext, UserProfile

        profile = UserProfile()
        profile.update(GameContext(), action, 10, completed=False, accuracy=0.9)

        assert profile.skill_level == pytest.approx(0.45)

    def test_skill_bounded(self, action):
        """Test skill stays in [0, 1]."""
        from cogtrain.bandits import GameContext, UserProfile

        profile = UserProfile(skill_level=0.95)
        for _ in range(5):
            profile.update(GameContext(), action, 90, completed=True, accuracy=1.0)
        assert profile.skill_level == 1.0

        profile = UserProfile(skill_level=0.02)
        profile.update(GameContext(), action, 0, completed=False, accuracy=0.0)
        assert profile.skill_level == 0.0

    def test_preferences_follow_good_rewards(self, action):
        """Test well-rewarded actions pull the preferences."""
        from cogtrain.bandits import GameContext, UserProfile

        profile = UserProfile(preferred_params={"grid_size": 4.0})
        profile.update(GameContext(), action, 65, completed=True, accuracy=0.7)

        assert profile.preferred_difficulty == pytest.approx(1.05)
        assert profile.preferred_params["grid_size"] == pytest.approx(4.2)
        assert "hint_enabled" not in profile.preferred_params

    def test_preferences_ignore_mediocre_rewards(self, action):
        """Test rewards at or below 60 leave preferences alone."""
        from cogtrain.bandits import GameContext, UserProfile

        profile = UserProfile(preferred_params={"grid_size": 4.0})
        profile.update(GameContext(), action, 60, completed=True, accuracy=0.7)

        assert profile.preferred_difficulty == 1.0
        assert profile.preferred_params["grid_size"] == 4.0

    def test_best_time_of_day(self, action):
        """Test excellent levels record the time of day."""
        from cogtrain.bandits import GameContext, TimeOfDay, UserProfile

        profile = UserProfile()
        profile.update(GameContext(time_of_day="evening"), action, 65, True, 0.7)
        assert profile.best_time_of_day == TimeOfDay.AFTERNOON

        profile.update(GameContext(time_of_day="evening"), action, 75, True, 0.7)
        assert profile.best_time_of_day == TimeOfDay.EVENING

    def test_sub_skills(self, action):
        """Test sub-skill strengths move with per-task accuracy."""
        from cogtrain.bandits import GameContext, UserProfile

        profile = UserProfile(sub_skill_strengths={"stroop": 0.5})
        profile.update(
            GameContext(), action, 40, True, 0.7,
            sub_skill_accuracy={"stroop": 1.0, "switching": 0.0, "bad": "x"},
        )

        assert profile.sub_skill_strengths["stroop"] == pytest.approx(0.575)
        assert profile.sub_skill_strengths["switching"] == pytest.approx(0.425)
        assert "bad" not in profile.sub_skill_strengths

    @pytest.mark.parametrize("rewards,expected", [
        ([50, 52, 48, 51, 49], "fast"),
        ([30, 50, 60, 40, 55], "medium"),
        ([0, 90, 10, 80, 5], "slow"),
    ])
    def test_adaptation_speed(self, action, rewards, expected):
        """Test adaptation speed from reward variance."""
        from cogtrain.bandits import AdaptationSpeed, GameContext, UserProfile

        profile = UserProfile()
        profile.update(GameContext(), action, rewards[-1], True, 0.7, recent_rewards=rewards)

        assert profile.adaptation_speed == AdaptationSpeed(expected)

    def test_adaptation_speed_needs_five(self, action):
        """Test short histories keep the adaptation speed."""
        from cogtrain.bandits import AdaptationSpeed, GameContext, UserProfile

        profile = UserProfile()
        profile.update(GameContext(), action, 90, True, 0.7, recent_rewards=[0, 90, 0, 90])

        assert profile.adaptation_speed == AdaptationSpeed.MEDIUM

    def test_to_dict_from_dict(self):
        """Test profile serialization round-trip."""
        from cogtrain.bandits import AdaptationSpeed, TimeOfDay, UserProfile

        profile = UserProfile(
            preferred_difficulty=1.4,
            preferred_params={"grid_size": 5.5},
            skill_level=0.8,
            sub_skill_strengths={"stroop": 0.7},
            best_time_of_day=TimeOfDay.MORNING,
            adaptation_speed=AdaptationSpeed.FAST,
        )

        assert UserProfile.from_dict(profile.to_dict()) == profile

    def test_from_dict_fills_defaults(self):
        """Test missing and invalid fields fall back to defaults."""
        from cogtrain.bandits import UserProfile

        defaults = UserProfile(preferred_params={"grid_size": 4.0})
        profile = UserProfile.from_dict({"adaptation_speed": "warp"}, defaults)

        assert profile == defaults
