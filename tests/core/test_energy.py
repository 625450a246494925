"""Unit tests for energy estimation - pure functions, no mocks needed."""

import pytest

from caltrack.core.errors import InvalidActivityLevel, InvalidProfile
from caltrack.core.models import ActivityLevel, BiometricProfile, Goal, Sex
from caltrack.core.energy import (
    GOAL_ADJUSTMENT_KCAL,
    activity_multiplier,
    calculate_bmr,
    calculate_goal_targets,
    calculate_macro_targets,
    calculate_target_calories,
    calculate_tdee,
    calories_from_macros,
    estimate,
    load_profile,
)


def make_profile(**overrides) -> BiometricProfile:
    data = {
        "age": 25,
        "sex": "male",
        "height_cm": 170,
        "weight_kg": 70,
        "activity_level": "moderate",
        "goal": "maintain",
    }
    data.update(overrides)
    return BiometricProfile(**data)


class TestCalculateBmr:
    """Tests for calculate_bmr."""

    def test_male_formula(self):
        """Male branch: 88.362 + 13.397w + 4.799h - 5.677a."""
        assert calculate_bmr(make_profile()) == pytest.approx(1700.057)

    def test_female_formula(self):
        """Female branch: 447.593 + 9.247w + 3.098h - 4.330a."""
        profile = make_profile(sex="female", age=30, height_cm=165, weight_kg=60)
        assert calculate_bmr(profile) == pytest.approx(1383.683)

    def test_not_rounded(self):
        """BMR keeps full precision for later steps."""
        assert calculate_bmr(make_profile()) != 1700


class TestActivityMultiplier:
    """Tests for activity_multiplier."""

    @pytest.mark.parametrize(
        "level, expected",
        [
            ("sedentary", 1.2),
            ("light", 1.375),
            ("moderate", 1.55),
            ("active", 1.725),
            ("very_active", 1.9),
        ],
    )
    def test_table(self, level, expected):
        """Each level maps to its fixed multiplier."""
        assert activity_multiplier(level) == expected

    def test_accepts_enum(self):
        """Enum members work as well as their string values."""
        assert activity_multiplier(ActivityLevel.ACTIVE) == 1.725

    @pytest.mark.parametrize("level", ["extreme", "", None, "Moderate"])
    def test_unknown_level_fails_closed(self, level):
        """Unknown levels raise instead of defaulting to sedentary."""
        with pytest.raises(InvalidActivityLevel):
            activity_multiplier(level)

    def test_tdee_rejects_unknown_level(self):
        """TDEE propagates the rejection."""
        with pytest.raises(InvalidActivityLevel):
            calculate_tdee(1700.0, "extreme")


class TestCalculateTargetCalories:
    """Tests for calculate_target_calories."""

    def test_lose_subtracts_step(self):
        assert calculate_target_calories(2635.0, Goal.LOSE) == 2135.0

    def test_maintain_is_tdee(self):
        assert calculate_target_calories(2635.0, Goal.MAINTAIN) == 2635.0

    def test_gain_adds_step(self):
        assert calculate_target_calories(2635.0, Goal.GAIN) == 3135.0

    def test_custom_step(self):
        """Slower cuts use a smaller step."""
        assert calculate_target_calories(2635.0, Goal.LOSE, step=250) == 2385.0

    def test_never_negative(self):
        """A deficit larger than TDEE clamps at zero."""
        assert calculate_target_calories(400.0, Goal.LOSE) == 0.0

    def test_default_step_is_500(self):
        assert GOAL_ADJUSTMENT_KCAL == 500

    def test_goal_targets(self):
        """All three goals are available side by side."""
        targets = calculate_goal_targets(2635.088)
        assert targets == {Goal.LOSE: 2135, Goal.MAINTAIN: 2635, Goal.GAIN: 3135}


class TestCalculateMacroTargets:
    """Tests for calculate_macro_targets."""

    def test_split(self):
        """25/45/30 split at 4/4/9 kcal per gram."""
        macros = calculate_macro_targets(2635.088)
        assert (macros.protein, macros.carbs, macros.fat) == (165, 296, 88)

    def test_zero_target(self):
        macros = calculate_macro_targets(0)
        assert (macros.protein, macros.carbs, macros.fat) == (0, 0, 0)

    def test_drift_is_small(self):
        """Independent rounding drifts by at most a few kcal."""
        for target in (1200, 1580.4, 2000, 2635.088, 3333.3):
            macros = calculate_macro_targets(target)
            resummed = calories_from_macros(macros.protein, macros.carbs, macros.fat)
            assert abs(resummed - target) <= 7


class TestCaloriesFromMacros:
    """Tests for calories_from_macros."""

    def test_mixed_macros(self):
        # 10g protein (40) + 20g carbs (80) + 5g fat (45) = 165
        assert calories_from_macros(protein=10, carbs=20, fat=5) == 165

    def test_rounds_half_up(self):
        # 0.125g protein = 0.5 kcal
        assert calories_from_macros(protein=0.125, carbs=0, fat=0) == 1


class TestEstimate:
    """Tests for estimate."""

    def test_male_moderate_maintain(self):
        """Male, 25y, 170cm, 70kg, moderate."""
        result = estimate(make_profile())

        assert result.bmr == 1700
        assert result.tdee == 2635
        assert result.target_calories == 2635
        assert result.recommended_intake.protein == 165
        assert result.recommended_intake.carbs == 296
        assert result.recommended_intake.fat == 88

    def test_female_sedentary(self):
        """Female, 30y, 165cm, 60kg, sedentary."""
        profile = make_profile(
            sex="female", age=30, height_cm=165, weight_kg=60, activity_level="sedentary"
        )
        result = estimate(profile)

        assert result.bmr == 1384
        assert result.tdee == 1660

    def test_lose_goal(self):
        """Losing subtracts 500 from the unrounded TDEE."""
        result = estimate(make_profile(goal="lose"))

        assert result.target_calories == 2135
        assert result.recommended_intake.protein == 133
        assert result.recommended_intake.carbs == 240
        assert result.recommended_intake.fat == 71

    def test_gain_goal(self):
        assert estimate(make_profile(goal="gain")).target_calories == 3135

    def test_uses_unrounded_bmr_for_tdee(self):
        """TDEE is rounded from BMR x multiplier at full precision."""
        profile = make_profile(weight_kg=71.3, height_cm=181.7, age=41)
        bmr = calculate_bmr(profile)
        expected = int(bmr * 1.55 + 0.5)
        assert estimate(profile).tdee == expected

    def test_deterministic(self):
        """Equal profiles give identical estimates."""
        assert estimate(make_profile()) == estimate(make_profile())

    @pytest.mark.parametrize("sex", list(Sex))
    @pytest.mark.parametrize("level", list(ActivityLevel))
    @pytest.mark.parametrize("age, height, weight", [(18, 150, 45), (40, 175, 80), (70, 190, 120)])
    def test_tdee_exceeds_bmr(self, sex, level, age, height, weight):
        """BMR is positive and every multiplier raises it."""
        result = estimate(
            make_profile(sex=sex, activity_level=level, age=age, height_cm=height, weight_kg=weight)
        )
        assert result.bmr > 0
        assert result.tdee > result.bmr
        assert result.recommended_intake.protein >= 0
        assert result.recommended_intake.carbs >= 0
        assert result.recommended_intake.fat >= 0

    def test_non_positive_bmr_rejected(self):
        """Extreme but in-range values that drive BMR below zero are rejected."""
        profile = make_profile(age=150, height_cm=50, weight_kg=20)
        with pytest.raises(InvalidProfile):
            estimate(profile)


class TestLoadProfile:
    """Tests for load_profile."""

    def test_valid(self):
        profile = load_profile(
            {
                "age": 25,
                "sex": "male",
                "height_cm": 170,
                "weight_kg": 70,
                "activity_level": "moderate",
                "goal": "lose",
            }
        )
        assert profile.activity_level == ActivityLevel.MODERATE
        assert profile.goal == Goal.LOSE

    def test_goal_defaults_to_maintain(self):
        profile = load_profile(
            {"age": 25, "sex": "female", "height_cm": 160, "weight_kg": 55, "activity_level": "light"}
        )
        assert profile.goal == Goal.MAINTAIN

    def test_unknown_activity_level(self):
        with pytest.raises(InvalidActivityLevel):
            load_profile(
                {"age": 25, "sex": "male", "height_cm": 170, "weight_kg": 70, "activity_level": "extreme"}
            )

    def test_missing_activity_level(self):
        """Absent activity level fails closed too."""
        with pytest.raises(InvalidActivityLevel):
            load_profile({"age": 25, "sex": "male", "height_cm": 170, "weight_kg": 70})

    @pytest.mark.parametrize(
        "field, value",
        [("age", 0), ("age", 200), ("height_cm", 20), ("weight_kg", 600), ("sex", "other")],
    )
    def test_out_of_range(self, field, value):
        data = {"age": 25, "sex": "male", "height_cm": 170, "weight_kg": 70, "activity_level": "moderate"}
        data[field] = value
        with pytest.raises(InvalidProfile) as exc_info:
            load_profile(data)
        assert not isinstance(exc_info.value, InvalidActivityLevel)
        assert field in str(exc_info.value)
