"""Core Data Models - Pydantic models for type safety.

Inputs and derived values are immutable. Totals are computed fields, so they
are re-summed from the owned children on every read and cannot drift.
"""

from datetime import date as DateType
from datetime import timedelta
from enum import Enum
from typing import Iterator, Optional
import uuid

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
    model_validator,
)


class Sex(str, Enum):
    MALE = "male"
    FEMALE = "female"


class ActivityLevel(str, Enum):
    SEDENTARY = "sedentary"
    LIGHT = "light"
    MODERATE = "moderate"
    ACTIVE = "active"
    VERY_ACTIVE = "very_active"


class Goal(str, Enum):
    LOSE = "lose"
    MAINTAIN = "maintain"
    GAIN = "gain"


class MealType(str, Enum):
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


MEAL_ORDER = {meal_type: index for index, meal_type in enumerate(MealType)}


class BiometricProfile(BaseModel):
    """A person's biometrics, as entered on the profile form."""

    model_config = ConfigDict(frozen=True)

    age: int = Field(ge=1, le=150, description="Age in whole years")
    sex: Sex = Field(description="Selects the BMR coefficient set")
    height_cm: float = Field(ge=50, le=300, description="Height in centimeters")
    weight_kg: float = Field(ge=20, le=500, description="Weight in kilograms")
    activity_level: ActivityLevel
    goal: Goal = Goal.MAINTAIN


class MacroTargets(BaseModel):
    """Daily gram targets per macronutrient."""

    model_config = ConfigDict(frozen=True)

    protein: int = Field(ge=0)
    carbs: int = Field(ge=0)
    fat: int = Field(ge=0)


class EnergyEstimate(BaseModel):
    """Energy figures derived from a BiometricProfile (kcal/day)."""

    model_config = ConfigDict(frozen=True)

    bmr: int = Field(ge=0)
    tdee: int = Field(ge=0)
    target_calories: int = Field(ge=0, serialization_alias="targetCalories")
    recommended_intake: MacroTargets = Field(serialization_alias="recommendedIntake")


class FoodItem(BaseModel):
    """Reference food data, looked up from an external catalog."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1, description="Name of the food")
    calories_per_serving: float = Field(description="Calories in one serving")
    serving_size: str = Field(default="1 serving", description="Descriptive serving unit")
    protein: Optional[float] = Field(default=None, ge=0, description="Protein grams per serving")
    carbs: Optional[float] = Field(default=None, ge=0, description="Carbohydrate grams per serving")
    fat: Optional[float] = Field(default=None, ge=0, description="Fat grams per serving")
    brand: Optional[str] = None
    barcode: Optional[str] = None
    is_verified: bool = False


class FoodEntry(BaseModel):
    """A logged quantity of a food item."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    food_item: FoodItem
    quantity: float = Field(description="Number of servings")

    @computed_field
    @property
    def calories(self) -> float:
        return self.food_item.calories_per_serving * self.quantity


class Meal(BaseModel):
    """Entries logged under one meal type on one day."""

    model_config = ConfigDict(frozen=True)

    meal_type: MealType
    entries: tuple[FoodEntry, ...] = ()

    @computed_field
    @property
    def total_calories(self) -> float:
        return sum((e.calories for e in self.entries), 0.0)


class DailyEntry(BaseModel):
    """A calendar day's meals plus the calorie target in effect that day."""

    model_config = ConfigDict(frozen=True)

    log_date: DateType = Field(description="User-local calendar day")
    meals: tuple[Meal, ...] = ()
    target_calories: int = Field(ge=0, description="Target snapshot taken when the day was opened")

    @field_validator("meals")
    @classmethod
    def check_meals(cls, meals: tuple[Meal, ...]) -> tuple[Meal, ...]:
        seen = [m.meal_type for m in meals]
        if len(seen) != len(set(seen)):
            raise ValueError("at most one meal per meal type")
        return tuple(sorted(meals, key=lambda m: MEAL_ORDER[m.meal_type]))

    @computed_field
    @property
    def total_calories(self) -> float:
        return sum((m.total_calories for m in self.meals), 0.0)

    def meal(self, meal_type: MealType) -> Optional[Meal]:
        for m in self.meals:
            if m.meal_type == meal_type:
                return m
        return None


class NutrientTotals(BaseModel):
    """Calories and macro grams consumed on one day."""

    calories: int = Field(ge=0)
    protein: float = Field(ge=0)
    carbs: float = Field(ge=0)
    fat: float = Field(ge=0)


class DayBalance(BaseModel):
    """One day's consumption against its target, ready for charting.

    remaining is clamped at zero; compare consumed with target to detect
    an overage.
    """

    date: str = Field(description="ISO 8601 calendar date")
    consumed: int = Field(ge=0)
    target: int = Field(ge=0)
    remaining: int = Field(ge=0)


class DateWindow(BaseModel):
    """Inclusive range of calendar days."""

    model_config = ConfigDict(frozen=True)

    start: DateType
    end: DateType

    @model_validator(mode="after")
    def check_order(self) -> "DateWindow":
        if self.start > self.end:
            raise ValueError(f"window start {self.start} is after end {self.end}")
        return self

    @classmethod
    def ending(cls, end: DateType, days: int) -> "DateWindow":
        """Window of `days` calendar days finishing on `end`."""
        if days < 1:
            raise ValueError("window must cover at least one day")
        return cls(start=end - timedelta(days=days - 1), end=end)

    @property
    def day_count(self) -> int:
        return (self.end - self.start).days + 1

    def days(self) -> Iterator[DateType]:
        for offset in range(self.day_count):
            yield self.start + timedelta(days=offset)

    def contains(self, day: DateType) -> bool:
        return self.start <= day <= self.end


class RangeReport(BaseModel):
    """Aggregate figures for a window of days."""

    start: DateType
    end: DateType
    balances: list[DayBalance]
    total_consumed: int
    total_target: int
    days_logged: int = Field(description="Days with at least one entry")
    avg_daily_consumed: float = Field(description="Average over logged days only")
    net_balance: int = Field(description="total_consumed - total_target. Negative = deficit.")
