"""
Tests for the action space.

Tests catalogue generation, level bands, arm keys and
nearest-preference lookup.
"""

import pytest


class TestDifficultyBand:
    """Test level bands and level clamping."""

    def test_band_level_one(self):
        """Test the band of level 1."""
        from cogtrain.bandits.action_space import difficulty_band

        low, high = difficulty_band(1)

        assert low == pytest.approx(1.0)
        assert high == pytest.approx(1.15)

    def test_band_level_ten(self):
        """Test the band of a middle level."""
        from cogtrain.bandits.action_space import difficulty_band

        low, high = difficulty_band(10)

        assert low == pytest.approx(1.72)
        assert high == pytest.approx(2.5)

    @pytest.mark.parametrize("raw,expected", [
        (0, 1),
        (-5, 1),
        (1, 1),
        (12, 12),
        (25, 25),
        (99, 25),
        (3.7, 3),
        ("7", 7),
        (None, 1),
        ("abc", 1),
        (float("nan"), 1),
        (float("inf"), 1),
    ])
    def test_clamp_level(self, raw, expected):
        """Test levels are coerced into [1, 25]."""
        from cogtrain.bandits.action_space import clamp_level

        assert clamp_level(raw) == expected


class TestVariation:
    """Test Variation.apply()."""

    def test_scale_floors_integers(self):
        """Test integer params stay integers after scaling."""
        from cogtrain.bandits.action_space import Variation

        params = Variation("hard", scale={"time_limit": 0.8}).apply(1, {"time_limit": 101})

        assert params["time_limit"] == 80
        assert isinstance(params["time_limit"], int)

    def test_scale_rounds_floats(self):
        """Test float params are rounded."""
        from cogtrain.bandits.action_space import Variation

        params = Variation("x", scale={"speed": 1.1}).apply(1, {"speed": 0.33333})

        assert params["speed"] == pytest.approx(0.3667)

    def test_values_and_callables(self):
        """Test literal and level-dependent values."""
        from cogtrain.bandits.action_space import Variation

        variation = Variation(
            "hinted",
            offset={"count": 2},
            values={"hint_enabled": True, "extra": lambda level: level * 2},
        )
        params = variation.apply(4, {"count": 3, "hint_enabled": False})

        assert params == {"count": 5, "hint_enabled": True, "extra": 8}

    def test_apply_does_not_mutate_base(self):
        """Test the base params are left untouched."""
        from cogtrain.bandits.action_space import Variation

        base = {"count": 3}
        Variation("x", offset={"count": 1}).apply(1, base)

        assert base == {"count": 3}


class TestActionSpaceSpec:
    """Test catalogue generation."""

    @pytest.fixture
    def spec(self):
        from cogtrain.bandits.action_space import ActionSpaceSpec, Variation

        return ActionSpaceSpec(
            game="toy",
            level_params=lambda level: {"size": 2 + level, "hint": False},
            variations=(
                Variation("easy", values={"hint": True}),
                Variation("normal"),
            ),
            key_fields=("size", "hint"),
        )

    def test_catalogue_size_and_order(self, spec):
        """Test one action per level and variation, ordered."""
        actions = spec.generate()

        assert len(actions) == 50
        assert [(a.level, a.variation) for a in actions[:3]] == [(1, 0), (1, 1), (2, 0)]

    def test_multipliers(self, spec):
        """Test the multiplier formula."""
        actions = spec.generate()

        assert actions[0].difficulty_multiplier == pytest.approx(1.0)
        assert actions[1].difficulty_multiplier == pytest.approx(1.05)
        assert actions[-1].difficulty_multiplier == pytest.approx(1 + 24 * 0.08 + 0.05)

    def test_deterministic(self, spec):
        """Test generation is pure."""
        first = [a.key for a in spec.generate()]
        second = [a.key for a in spec.generate()]

        assert first == second

    def test_keys_unique(self, spec):
        """Test every arm has its own key."""
        keys = [a.key for a in spec.generate()]

        assert len(keys) == len(set(keys))

    def test_key_format(self, spec):
        """Test key is level, variation, then the key fields."""
        action = spec.generate()[0]

        assert action.key == "1_0_3_1"

    def test_level_dependent_variations(self):
        """Test variations given as a function of the level."""
        from cogtrain.bandits.action_space import ActionSpaceSpec, Variation

        spec = ActionSpaceSpec(
            game="toy",
            level_params=lambda level: {"size": level},
            variations=lambda level: [Variation(f"v{i}") for i in range(1 + level % 2)],
        )
        actions = spec.generate()

        assert len(actions) == 13 * 2 + 12


class TestAction:
    """Test the Action value type."""

    def test_params_are_read_only(self):
        """Test params cannot be mutated."""
        from cogtrain.bandits.action_space import Action

        action = Action(game="toy", level=1, variation=0, difficulty_multiplier=1.0,
                        params={"size": 3})

        with pytest.raises(TypeError):
            action.params["size"] = 4

    def test_list_params_frozen(self):
        """Test list params become tuples."""
        from cogtrain.bandits.action_space import Action

        action = Action(game="toy", level=1, variation=0, difficulty_multiplier=1.0,
                        params={"ops": ["+", "-"]})

        assert action.get("ops") == ("+", "-")
        assert hash(action) == hash(Action(game="toy", level=1, variation=0,
                                           difficulty_multiplier=1.0, params={"ops": ["+"]}))

    def test_to_dict_from_dict(self):
        """Test action serialization round-trip."""
        from cogtrain.bandits.action_space import Action

        action = Action(game="toy", level=3, variation=2, difficulty_multiplier=1.26,
                        params={"size": 5, "hint": True, "ops": ("+",)},
                        key_fields=("size", "hint"))

        restored = Action.from_dict(action.to_dict())

        assert restored == action
        assert restored.key == action.key


class TestCandidates:
    """Test band filtering and nearest-preference lookup."""

    def test_actions_for_level_in_band(self):
        """Test only in-band actions are returned."""
        from cogtrain.bandits.action_space import actions_for_level, difficulty_band
        from cogtrain.games import get_game_profile

        actions = get_game_profile("memory_matching").generate_actions()
        for level in range(1, 26):
            low, high = difficulty_band(level)
            candidates = actions_for_level(actions, level)
            assert candidates
            assert all(low - 1e-9 <= a.difficulty_multiplier <= high + 1e-9 for a in candidates)

    def test_band_spans_neighbouring_levels(self):
        """Test a band may include actions of the next level."""
        from cogtrain.bandits.action_space import actions_for_level
        from cogtrain.games import get_game_profile

        actions = get_game_profile("memory_matching").generate_actions()
        levels = {a.level for a in actions_for_level(actions, 1)}

        assert levels == {1, 2}

    def test_find_similar_action(self):
        """Test nearest action to preferred params."""
        from cogtrain.bandits.action_space import find_similar_action
        from cogtrain.games import get_game_profile

        actions = get_game_profile("memory_matching").generate_actions()
        action = find_similar_action(actions, {"grid_size": 6})

        assert action.get("grid_size") == 6

    def test_find_similar_action_first_wins_ties(self):
        """Test the first of equally close actions is returned."""
        from cogtrain.bandits.action_space import find_similar_action
        from cogtrain.games import get_game_profile

        actions = get_game_profile("memory_matching").generate_actions()
        action = find_similar_action(actions, {"grid_size": 3})

        assert action is actions[0]

    def test_find_similar_action_empty(self):
        """Test no actions gives None."""
        from cogtrain.bandits.action_space import find_similar_action

        assert find_similar_action([], {"size": 1}) is None
