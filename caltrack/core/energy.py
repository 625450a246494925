"""Energy Estimation - Pure functions from biometrics to calorie targets.

All functions are pure: same input always produces same output, no side effects.
Intermediate values are carried at full precision; rounding happens only when
an EnergyEstimate is assembled.
"""

from typing import Any, Mapping, NamedTuple

from pydantic import ValidationError

from .errors import InvalidActivityLevel, InvalidProfile
from .models import ActivityLevel, BiometricProfile, EnergyEstimate, Goal, MacroTargets, Sex
from .units import (
    KCAL_PER_GRAM_CARBS,
    KCAL_PER_GRAM_FAT,
    KCAL_PER_GRAM_PROTEIN,
    round_half_up,
)


class BmrCoefficients(NamedTuple):
    """Terms of a + b*weight_kg + c*height_cm - d*age_years."""

    a: float
    b: float
    c: float
    d: float


# Harris-Benedict, revised (Roza & Shizgal)
BMR_COEFFICIENTS: dict[Sex, BmrCoefficients] = {
    Sex.MALE: BmrCoefficients(88.362, 13.397, 4.799, 5.677),
    Sex.FEMALE: BmrCoefficients(447.593, 9.247, 3.098, 4.330),
}

ACTIVITY_MULTIPLIERS: dict[ActivityLevel, float] = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHT: 1.375,
    ActivityLevel.MODERATE: 1.55,
    ActivityLevel.ACTIVE: 1.725,
    ActivityLevel.VERY_ACTIVE: 1.9,
}

# Roughly 1 lb (0.45 kg) of body weight per week
GOAL_ADJUSTMENT_KCAL = 500

GOAL_DIRECTION: dict[Goal, int] = {
    Goal.LOSE: -1,
    Goal.MAINTAIN: 0,
    Goal.GAIN: 1,
}

# Share of target calories per macronutrient
MACRO_SPLIT = {
    "protein": 0.25,
    "carbs": 0.45,
    "fat": 0.30,
}


def calculate_bmr(profile: BiometricProfile) -> float:
    """Calculate Basal Metabolic Rate in kcal/day.

    Args:
        profile: Biometric profile

    Returns:
        Unrounded BMR
    """
    k = BMR_COEFFICIENTS[profile.sex]
    return k.a + k.b * profile.weight_kg + k.c * profile.height_cm - k.d * profile.age


def activity_multiplier(level: Any) -> float:
    """Look up the activity multiplier for a level.

    Args:
        level: ActivityLevel member or its string value

    Returns:
        Multiplier applied to BMR

    Raises:
        InvalidActivityLevel: If the level is not in the table
    """
    try:
        return ACTIVITY_MULTIPLIERS[ActivityLevel(level)]
    except (ValueError, KeyError):
        raise InvalidActivityLevel(f"Unknown activity level: {level!r}") from None


def calculate_tdee(bmr: float, level: Any) -> float:
    """Calculate Total Daily Energy Expenditure from an unrounded BMR."""
    return bmr * activity_multiplier(level)


def calculate_target_calories(tdee: float, goal: Goal, step: float = GOAL_ADJUSTMENT_KCAL) -> float:
    """Adjust TDEE for a goal. Never goes below zero.

    Args:
        tdee: Unrounded TDEE
        goal: lose, maintain or gain
        step: Daily surplus/deficit in kcal

    Returns:
        Unrounded target calories
    """
    return max(0.0, tdee + GOAL_DIRECTION[Goal(goal)] * step)


def calculate_goal_targets(tdee: float, step: float = GOAL_ADJUSTMENT_KCAL) -> dict[Goal, int]:
    """Rounded targets for every goal, for side-by-side display."""
    return {goal: round_half_up(calculate_target_calories(tdee, goal, step)) for goal in Goal}


def calculate_macro_targets(target_calories: float) -> MacroTargets:
    """Convert a calorie target into gram targets.

    Each macro is rounded independently, so the grams may re-sum to a few
    kcal off the target.
    """
    target = max(0.0, target_calories)
    return MacroTargets(
        protein=round_half_up(target * MACRO_SPLIT["protein"] / KCAL_PER_GRAM_PROTEIN),
        carbs=round_half_up(target * MACRO_SPLIT["carbs"] / KCAL_PER_GRAM_CARBS),
        fat=round_half_up(target * MACRO_SPLIT["fat"] / KCAL_PER_GRAM_FAT),
    )


def calories_from_macros(protein: float, carbs: float, fat: float) -> int:
    """Calculate calories from macronutrients.

    Uses standard conversion: 4 cal/g protein, 4 cal/g carbs, 9 cal/g fat.

    Args:
        protein: Grams of protein
        carbs: Grams of carbohydrates
        fat: Grams of fat

    Returns:
        Estimated calories (rounded to nearest integer)
    """
    return round_half_up(
        protein * KCAL_PER_GRAM_PROTEIN
        + carbs * KCAL_PER_GRAM_CARBS
        + fat * KCAL_PER_GRAM_FAT
    )


def estimate(profile: BiometricProfile, step: float = GOAL_ADJUSTMENT_KCAL) -> EnergyEstimate:
    """Estimate energy needs for a profile.

    Args:
        profile: Validated biometric profile
        step: Daily surplus/deficit for lose/gain goals

    Returns:
        EnergyEstimate with rounded BMR, TDEE, target and macro grams

    Raises:
        InvalidActivityLevel: If the activity level is not in the table
        InvalidProfile: If the biometrics give a non-positive BMR
    """
    bmr = calculate_bmr(profile)
    if bmr <= 0:
        raise InvalidProfile(f"Biometrics give a non-positive BMR ({bmr:.1f} kcal/day)")
    tdee = calculate_tdee(bmr, profile.activity_level)
    target = calculate_target_calories(tdee, profile.goal, step)

    return EnergyEstimate(
        bmr=round_half_up(bmr),
        tdee=round_half_up(tdee),
        target_calories=round_half_up(target),
        recommended_intake=calculate_macro_targets(target),
    )


def load_profile(data: Mapping[str, Any]) -> BiometricProfile:
    """Validate raw profile data at the boundary.

    Args:
        data: Field values keyed by BiometricProfile field name

    Returns:
        BiometricProfile

    Raises:
        InvalidActivityLevel: If activity_level is missing or unknown
        InvalidProfile: If any other field is missing or out of range
    """
    try:
        return BiometricProfile.model_validate(dict(data))
    except ValidationError as e:
        errors = e.errors()
        if any(err["loc"][:1] == ("activity_level",) for err in errors):
            raise InvalidActivityLevel(
                f"Unknown activity level: {data.get('activity_level')!r}"
            ) from e
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in errors)
        raise InvalidProfile(f"Invalid profile fields: {fields}") from e
