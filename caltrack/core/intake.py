"""Intake Aggregation - Pure functions for building up a day's log.

Days are immutable: every mutation returns a new DailyEntry, so a rejected
call leaves the caller's day untouched and totals are always re-summed.
"""

from datetime import date

from .errors import EntryNotFound, InvalidQuantity
from .models import DailyEntry, FoodEntry, Meal, MealType, NutrientTotals
from .units import round_half_up


def open_day(log_date: date, target_calories: int) -> DailyEntry:
    """Start an empty day with the target in effect now."""
    return DailyEntry(log_date=log_date, target_calories=target_calories)


def check_entry(entry: FoodEntry) -> None:
    """Reject entries with a non-positive quantity or calories per serving.

    Raises:
        InvalidQuantity: If either value is not positive
    """
    if entry.quantity <= 0:
        raise InvalidQuantity(f"Quantity must be positive, got {entry.quantity}")
    if entry.food_item.calories_per_serving <= 0:
        raise InvalidQuantity(
            f"Calories per serving must be positive, got {entry.food_item.calories_per_serving}"
        )


def _with_meal(day: DailyEntry, meal: Meal) -> DailyEntry:
    others = tuple(m for m in day.meals if m.meal_type != meal.meal_type)
    return DailyEntry(
        log_date=day.log_date,
        meals=others + (meal,),
        target_calories=day.target_calories,
    )


def add_entry(day: DailyEntry, meal_type: MealType, entry: FoodEntry) -> DailyEntry:
    """Append an entry to a meal, creating the meal if needed.

    Args:
        day: Day to add to
        meal_type: Meal the entry belongs to
        entry: Logged food

    Returns:
        Updated DailyEntry

    Raises:
        InvalidQuantity: If quantity or calories per serving is not positive
    """
    check_entry(entry)
    meal_type = MealType(meal_type)
    meal = day.meal(meal_type) or Meal(meal_type=meal_type)
    return _with_meal(day, meal.model_copy(update={"entries": meal.entries + (entry,)}))


def remove_entry(day: DailyEntry, meal_type: MealType, entry_id: str) -> DailyEntry:
    """Remove an entry from a meal. The meal is kept even when emptied.

    Raises:
        EntryNotFound: If the meal has no entry with that id
    """
    meal_type = MealType(meal_type)
    meal = day.meal(meal_type)
    if meal is None or not any(e.id == entry_id for e in meal.entries):
        raise EntryNotFound(f"No entry {entry_id} in {meal_type.value} on {day.log_date}")

    entries = tuple(e for e in meal.entries if e.id != entry_id)
    return _with_meal(day, meal.model_copy(update={"entries": entries}))


def replace_entry(
    day: DailyEntry, meal_type: MealType, entry_id: str, entry: FoodEntry
) -> DailyEntry:
    """Swap an existing entry for an edited one, keeping its position.

    Raises:
        InvalidQuantity: If the new entry is invalid
        EntryNotFound: If the meal has no entry with that id
    """
    check_entry(entry)
    meal_type = MealType(meal_type)
    meal = day.meal(meal_type)
    if meal is None or not any(e.id == entry_id for e in meal.entries):
        raise EntryNotFound(f"No entry {entry_id} in {meal_type.value} on {day.log_date}")

    entries = tuple(entry if e.id == entry_id else e for e in meal.entries)
    return _with_meal(day, meal.model_copy(update={"entries": entries}))


def find_entry(day: DailyEntry, entry_id: str) -> tuple[MealType, FoodEntry]:
    """Locate an entry anywhere in the day.

    Raises:
        EntryNotFound: If no meal holds that id
    """
    for meal in day.meals:
        for entry in meal.entries:
            if entry.id == entry_id:
                return meal.meal_type, entry
    raise EntryNotFound(f"No entry {entry_id} on {day.log_date}")


def calculate_daily_totals(day: DailyEntry) -> NutrientTotals:
    """Calculate calories and macro grams consumed on a day.

    Foods without macro data count as zero grams for that macro.
    """
    entries = [e for meal in day.meals for e in meal.entries]
    total_protein = sum((e.food_item.protein or 0) * e.quantity for e in entries)
    total_carbs = sum((e.food_item.carbs or 0) * e.quantity for e in entries)
    total_fat = sum((e.food_item.fat or 0) * e.quantity for e in entries)

    return NutrientTotals(
        calories=round_half_up(day.total_calories),
        protein=round(total_protein, 1),
        carbs=round(total_carbs, 1),
        fat=round(total_fat, 1),
    )
